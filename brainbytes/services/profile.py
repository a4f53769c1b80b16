import json
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from brainbytes.core.config import settings
from brainbytes.core.database import AsyncSessionLocal
from brainbytes.models.profile import UserProfile, LearningMaterial


class DuplicateEmailError(Exception):
    pass


def decode_subjects(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    try:
        return json.loads(raw)
    except ValueError:
        logging.warning(f"Unreadable preferred_subjects value: {raw!r}")
        return []


class ProfileStore:
    async def _commit(self, db, profile: UserProfile) -> UserProfile:
        email = profile.email
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise DuplicateEmailError(f"Email already in use: {email}")
        await db.refresh(profile)
        return profile

    async def create_profile(self, name: str, email: str, preferred_subjects: Optional[List[str]] = None, avatar: Optional[str] = None) -> UserProfile:
        async with AsyncSessionLocal() as db:
            profile = UserProfile(
                name=name,
                email=email,
                preferred_subjects=json.dumps(preferred_subjects or []),
                avatar=avatar,
            )
            db.add(profile)
            return await self._commit(db, profile)

    async def list_profiles(self) -> List[UserProfile]:
        async with AsyncSessionLocal() as db:
            result = await db.execute(select(UserProfile).order_by(UserProfile.id.asc()))
            return list(result.scalars().all())

    async def get_current_profile(self) -> UserProfile:
        """There is no auth: the first profile is "me", created on demand."""
        async with AsyncSessionLocal() as db:
            profile = await db.scalar(select(UserProfile).order_by(UserProfile.id.asc()).limit(1))
            if profile:
                return profile

        logging.info("No profile found, creating the default one")
        try:
            return await self.create_profile(
                name=settings.DEFAULT_USER_NAME,
                email=settings.DEFAULT_USER_EMAIL,
                preferred_subjects=settings.DEFAULT_USER_SUBJECTS,
            )
        except DuplicateEmailError:
            # A concurrent request created it first
            async with AsyncSessionLocal() as db:
                return await db.scalar(select(UserProfile).order_by(UserProfile.id.asc()).limit(1))

    async def update_profile(self, profile_id: int, **fields) -> Optional[UserProfile]:
        """Apply the non-None fields. Returns None for an unknown id."""
        async with AsyncSessionLocal() as db:
            profile = await db.get(UserProfile, profile_id)
            if not profile:
                return None
            self._apply(profile, fields)
            return await self._commit(db, profile)

    async def update_profile_by_email(self, current_email: str, **fields) -> Optional[UserProfile]:
        async with AsyncSessionLocal() as db:
            profile = await db.scalar(select(UserProfile).where(UserProfile.email == current_email))
            if not profile:
                return None
            self._apply(profile, fields)
            return await self._commit(db, profile)

    def _apply(self, profile: UserProfile, fields: dict):
        for key, value in fields.items():
            # Empty values keep the stored field
            if not value:
                continue
            if key == "preferred_subjects":
                value = json.dumps(value)
            setattr(profile, key, value)

    async def delete_profile(self, profile_id: int) -> bool:
        async with AsyncSessionLocal() as db:
            profile = await db.get(UserProfile, profile_id)
            if not profile:
                return False
            await db.delete(profile)
            await db.commit()
            return True


class MaterialStore:
    async def add_material(self, subject: str, topic: str, content: str) -> LearningMaterial:
        async with AsyncSessionLocal() as db:
            material = LearningMaterial(subject=subject, topic=topic, content=content)
            db.add(material)
            await db.commit()
            await db.refresh(material)
            return material

    async def list_materials(self) -> List[LearningMaterial]:
        async with AsyncSessionLocal() as db:
            result = await db.execute(select(LearningMaterial).order_by(LearningMaterial.id.asc()))
            return list(result.scalars().all())


profile_store = ProfileStore()
material_store = MaterialStore()
