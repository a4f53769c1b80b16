from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.sql import func
from brainbytes.core.database import Base

class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    # JSON encoded list of subject names
    preferred_subjects = Column(Text, nullable=True)
    avatar = Column(String, nullable=True)
    join_date = Column(DateTime(timezone=True), server_default=func.now())

class LearningMaterial(Base):
    __tablename__ = "learning_materials"

    id = Column(Integer, primary_key=True, index=True)
    subject = Column(String, nullable=False, index=True)
    topic = Column(String, nullable=False)
    content = Column(Text, nullable=False)
