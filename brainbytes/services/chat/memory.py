import logging
from typing import Dict, List
from sqlalchemy import select, delete, func, or_
from brainbytes.core.database import AsyncSessionLocal
from brainbytes.models.chat import Message
from brainbytes.services.chat.subjects import GENERAL, SUBJECTS, normalize_subject

class MessageStore:
    async def add_message(self, text: str, is_user: bool, subject: str) -> Message:
        """Persist one message and return it with its generated fields loaded."""
        async with AsyncSessionLocal() as db:
            msg = Message(text=text, is_user=is_user, subject=subject)
            db.add(msg)
            await db.commit()
            await db.refresh(msg)
            return msg

    async def list_messages(self) -> List[Message]:
        """All messages, oldest first."""
        async with AsyncSessionLocal() as db:
            stmt = select(Message).order_by(Message.created_at.asc(), Message.id.asc())
            result = await db.execute(stmt)
            return list(result.scalars().all())

    async def delete_by_subject(self, subject: str) -> int:
        """
        Delete every message filed under a subject.

        General also sweeps rows whose subject is missing, empty or not one
        of the known subjects. Other subjects match case-insensitively.
        """
        if subject.lower() == GENERAL.lower():
            condition = or_(
                Message.subject == GENERAL,
                Message.subject.is_(None),
                Message.subject == "",
                Message.subject.not_in(SUBJECTS),
            )
        else:
            condition = func.lower(Message.subject) == subject.lower()

        async with AsyncSessionLocal() as db:
            result = await db.execute(delete(Message).where(condition).execution_options(synchronize_session=False))
            await db.commit()

        logging.info(f"Deleted {result.rowcount} messages with subject: {subject}")
        return result.rowcount

    async def count_questions_by_subject(self) -> Dict[str, int]:
        """Count user messages per subject, drifted subjects counted as General."""
        counts = {s: 0 for s in SUBJECTS}
        async with AsyncSessionLocal() as db:
            stmt = select(Message.subject, func.count(Message.id)).where(Message.is_user.is_(True)).group_by(Message.subject)
            result = await db.execute(stmt)
            for subject, count in result.all():
                counts[normalize_subject(subject)] += count
        return counts

    async def last_question_at(self):
        async with AsyncSessionLocal() as db:
            stmt = select(Message.created_at).where(Message.is_user.is_(True)).order_by(Message.created_at.desc(), Message.id.desc()).limit(1)
            return await db.scalar(stmt)

message_store = MessageStore()
