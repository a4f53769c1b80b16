import logging
from typing import List

from fastapi import APIRouter, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from brainbytes.schemas.chat import MessageInput, MessageDTO, MessageExchange, DeleteResult
from brainbytes.services.chat.memory import message_store
from brainbytes.services.chat.orchestrator import chat_orchestrator

router = APIRouter()

@router.get("/messages", response_model=List[MessageDTO])
async def get_messages():
    """All messages, oldest first."""
    try:
        msgs = await message_store.list_messages()
    except SQLAlchemyError as e:
        logging.error(f"Error fetching messages: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return [MessageDTO.from_model(m) for m in msgs]

@router.post("/messages", response_model=MessageExchange, status_code=201)
async def post_message(input_data: MessageInput):
    """Save a question, ask the tutor and save the reply under the same subject."""
    if not input_data.text or not input_data.text.strip():
        raise HTTPException(status_code=400, detail="Message text must not be empty.")

    try:
        user_msg, ai_msg, category = await chat_orchestrator.process_message(input_data.text, input_data.subject)
    except SQLAlchemyError as e:
        logging.error(f"Error in /api/messages route: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return MessageExchange(
        userMessage=MessageDTO.from_model(user_msg),
        aiMessage=MessageDTO.from_model(ai_msg),
        category=category,
    )

@router.delete("/messages/subject/{subject}", response_model=DeleteResult)
async def delete_subject_messages(subject: str):
    """Clear one subject's conversation."""
    try:
        deleted = await message_store.delete_by_subject(subject)
    except SQLAlchemyError as e:
        logging.error(f"Error deleting messages: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return DeleteResult(message=f"Deleted {deleted} messages from subject: {subject}", deletedCount=deleted)
