from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from brainbytes.services.profile import decode_subjects

class ProfileInput(BaseModel):
    name: str
    email: str
    preferredSubjects: List[str] = []
    avatar: Optional[str] = None

class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    preferredSubjects: Optional[List[str]] = None
    avatar: Optional[str] = None

class CurrentProfileUpdate(BaseModel):
    """Body of PUT /api/users/me; currentEmail identifies the profile."""
    currentEmail: str
    name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None

class ProfileDTO(BaseModel):
    id: int
    name: str
    email: str
    preferredSubjects: List[str] = []
    avatar: Optional[str] = None
    joinDate: Optional[datetime] = None

    @classmethod
    def from_model(cls, p) -> "ProfileDTO":
        return cls(
            id=p.id,
            name=p.name,
            email=p.email,
            preferredSubjects=decode_subjects(p.preferred_subjects),
            avatar=p.avatar,
            joinDate=p.join_date,
        )

class SubjectCount(BaseModel):
    subject: str
    count: int

class StatsDTO(BaseModel):
    subjectData: List[SubjectCount]
    totalQuestions: int
    lastActive: Optional[datetime] = None
    streak: int

class MaterialInput(BaseModel):
    subject: str
    topic: str
    content: str

class MaterialDTO(BaseModel):
    id: int
    subject: str
    topic: str
    content: str
