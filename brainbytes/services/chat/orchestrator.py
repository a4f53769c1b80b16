import logging
from typing import Optional, Tuple

from brainbytes.models.chat import Message
from brainbytes.services.chat.gateway import inference_gateway
from brainbytes.services.chat.guard import guarded_reply
from brainbytes.services.chat.memory import message_store
from brainbytes.services.chat.subjects import resolve_subject

class ChatOrchestrator:
    async def process_message(self, text: str, subject: Optional[str] = None) -> Tuple[Message, Message, Optional[str]]:
        """
        Handle one tutoring turn.

        1. Resolve the subject (the caller's subject wins, otherwise the classifier).
        2. Save the user message.
        3. Ask the gateway under the deadline; failures become the fallback reply.
        4. Save the reply under the same subject.
        """
        target_subject = resolve_subject(text, explicit_subject=subject)
        logging.info(f"Message filed under '{target_subject}' (requested: {subject!r})")

        user_message = await message_store.add_message(text, is_user=True, subject=target_subject)

        ai_result = await guarded_reply(inference_gateway.generate(text, target_subject))

        ai_message = await message_store.add_message(ai_result["response"], is_user=False, subject=target_subject)
        return user_message, ai_message, ai_result.get("category")

chat_orchestrator = ChatOrchestrator()
