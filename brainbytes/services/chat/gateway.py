import logging
from typing import Dict

from langchain_core.prompts import PromptTemplate
from langchain_google_genai import ChatGoogleGenerativeAI

from brainbytes.core.config import settings
from brainbytes.services.cache import cache_result
from brainbytes.services.chat.subjects import GENERAL

GUIDELINES = """
Guidelines:
- Use a warm, casual tone like you're talking to a student face-to-face
- Avoid using asterisks, bullet points, or other formatting symbols
- Write in simple, flowing paragraphs rather than structured lists
- Explain concepts in plain language a student would understand
- Keep your answer concise but helpful"""

SUBJECT_TEMPLATE = """You are a friendly tutor who specializes in {subject}.
Please answer this question in a conversational way: {question}
""" + GUIDELINES

GENERAL_TEMPLATE = """You are a friendly tutor. Please answer this question in a conversational way: {question}
""" + GUIDELINES

UNCLEAR_REPLY = "I'm sorry, I couldn't understand your question. Please try again."


class InferenceGateway:
    """Turns a (question, subject) pair into a tutoring reply."""

    def __init__(self):
        self.llm = None
        self.subject_prompt = PromptTemplate.from_template(SUBJECT_TEMPLATE)
        self.general_prompt = PromptTemplate.from_template(GENERAL_TEMPLATE)

    def _get_llm(self):
        # Built on first use so the app starts without credentials
        if self.llm is None:
            self.llm = ChatGoogleGenerativeAI(
                model=settings.MODEL_NAME,
                google_api_key=settings.GOOGLE_API_KEY,
                temperature=settings.MODEL_TEMPERATURE,
            )
        return self.llm

    @cache_result(ttl=settings.REPLY_CACHE_TTL)
    async def _ask_model(self, question: str, subject: str) -> str:
        if subject and subject != GENERAL:
            chain = self.subject_prompt | self._get_llm()
            result = await chain.ainvoke({"subject": subject, "question": question})
        else:
            chain = self.general_prompt | self._get_llm()
            result = await chain.ainvoke({"question": question})
        content = result.content
        if isinstance(content, list):
            # Newer Gemini models answer with content blocks
            content = "".join(part.get("text", "") if isinstance(part, dict) else str(part) for part in content)
        return (content or "").strip()

    async def generate(self, question: str, subject: str = GENERAL) -> Dict[str, str]:
        """
        Ask the model for a reply.

        Returns {"category": ..., "response": ...}. Provider errors propagate
        to the caller.
        """
        answer = await self._ask_model(question, subject)
        if not answer:
            logging.warning(f"Empty model reply for subject '{subject}'")
            return {"category": "error", "response": UNCLEAR_REPLY}
        return {"category": "open-ended", "response": answer}


inference_gateway = InferenceGateway()
