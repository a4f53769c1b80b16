from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean
from sqlalchemy.sql import func
from brainbytes.core.database import Base

class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    text = Column(Text, nullable=False)
    is_user = Column(Boolean, nullable=False, default=True)
    # Older rows may carry no subject at all
    subject = Column(String, nullable=True, default="General", index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
