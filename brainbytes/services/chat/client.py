import uuid
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from brainbytes.core.config import settings
from brainbytes.services.chat import conversation
from brainbytes.services.chat.subjects import GENERAL, canonical_subject, resolve_subject

LOCAL_ERROR_REPLY = "Sorry, I couldn't process your request. Please try again later."


class TutorClient:
    """
    Python counterpart of the BrainBytes chat page.

    Keeps a per-subject conversation view in sync with the API. Subjects are
    resolved with the same partitioner the server uses, and the resolved
    subject is always sent along so both sides agree.
    """

    def __init__(self, base_url: str = "http://localhost:3000", transport: Optional[httpx.AsyncBaseTransport] = None, timeout: Optional[float] = None):
        if timeout is None:
            # Leave room for the server-side deadline
            timeout = settings.AI_TIMEOUT_SECONDS + 15
        self.http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self.view = conversation.empty_view()
        self.active_filter: Optional[str] = None

    async def aclose(self):
        await self.http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def refresh(self):
        response = await self.http.get("/api/messages")
        response.raise_for_status()
        self.view = conversation.group_messages(response.json())
        counts = {s: len(m) for s, m in self.view.items()}
        logging.info(f"Loaded messages by subject: {counts}")

    def set_filter(self, subject: Optional[str]):
        self.active_filter = canonical_subject(subject) if subject else None

    def visible_messages(self) -> List[Dict[str, Any]]:
        return conversation.visible_messages(self.view, self.active_filter)

    def user_counts(self) -> Dict[str, int]:
        return conversation.user_counts(self.view)

    async def send(self, text: str) -> Dict[str, Any]:
        """
        Send one question.

        Returns the server's exchange payload, or a locally built error
        reply when the request fails.
        """
        target_subject = resolve_subject(text, active_filter=self.active_filter)
        temp_message = {
            "id": f"temp-{uuid.uuid4()}",
            "text": text,
            "isUser": True,
            "subject": target_subject,
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        self.view = conversation.add_message(self.view, temp_message)

        try:
            response = await self.http.post("/api/messages", json={"text": text, "subject": target_subject})
            response.raise_for_status()
        except httpx.HTTPError as e:
            logging.error(f"Error posting message: {e}")
            error_subject = self.active_filter or GENERAL
            error_message = {
                "id": f"local-{uuid.uuid4()}",
                "text": LOCAL_ERROR_REPLY,
                "isUser": False,
                "subject": error_subject,
                "createdAt": datetime.now(timezone.utc).isoformat(),
            }
            self.view = conversation.add_message(self.view, error_message)
            return {"error": str(e), "aiMessage": error_message}

        data = response.json()
        self.view = conversation.confirm_message(self.view, temp_message["id"], [data["userMessage"], data["aiMessage"]])

        # Stay on the conversation the message went to
        if not self.active_filter:
            self.active_filter = target_subject
        return data

    async def clear_subject(self, subject: str) -> int:
        response = await self.http.delete(f"/api/messages/subject/{subject}")
        response.raise_for_status()
        self.view = conversation.clear_subject(self.view, subject)
        return response.json()["deletedCount"]
