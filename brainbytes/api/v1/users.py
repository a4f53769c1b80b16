import logging
from typing import List

from fastapi import APIRouter, HTTPException, Response
from sqlalchemy.exc import SQLAlchemyError

from brainbytes.core.config import settings
from brainbytes.schemas.profile import ProfileInput, ProfileUpdate, CurrentProfileUpdate, ProfileDTO, StatsDTO, SubjectCount
from brainbytes.services.chat.memory import message_store
from brainbytes.services.profile import profile_store, DuplicateEmailError

router = APIRouter()

# /users/me and /users/stats are declared before /users/{profile_id}

@router.get("/users/me", response_model=ProfileDTO)
async def get_current_user():
    try:
        profile = await profile_store.get_current_profile()
    except SQLAlchemyError as e:
        logging.error(f"Error fetching user: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return ProfileDTO.from_model(profile)

@router.put("/users/me", response_model=ProfileDTO)
async def update_current_user(body: CurrentProfileUpdate):
    try:
        profile = await profile_store.update_profile_by_email(
            body.currentEmail, name=body.name, email=body.email, avatar=body.avatar
        )
    except DuplicateEmailError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        logging.error(f"Error updating user profile: {e}")
        raise HTTPException(status_code=500, detail="Failed to update profile")

    if not profile:
        raise HTTPException(status_code=404, detail="User not found")
    return ProfileDTO.from_model(profile)

@router.get("/users/stats", response_model=StatsDTO)
async def get_learning_stats():
    """Question counts per subject, computed from the message history."""
    try:
        counts = await message_store.count_questions_by_subject()
        last_active = await message_store.last_question_at()
    except SQLAlchemyError as e:
        logging.error(f"Error calculating stats: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return StatsDTO(
        subjectData=[SubjectCount(subject=s, count=c) for s, c in counts.items()],
        totalQuestions=sum(counts.values()),
        lastActive=last_active,
        streak=settings.STATS_STREAK_PLACEHOLDER,
    )

@router.post("/users", response_model=ProfileDTO, status_code=201)
async def create_user(body: ProfileInput):
    try:
        profile = await profile_store.create_profile(
            name=body.name, email=body.email, preferred_subjects=body.preferredSubjects, avatar=body.avatar
        )
    except DuplicateEmailError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return ProfileDTO.from_model(profile)

@router.get("/users", response_model=List[ProfileDTO])
async def list_users():
    try:
        profiles = await profile_store.list_profiles()
    except SQLAlchemyError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return [ProfileDTO.from_model(p) for p in profiles]

@router.put("/users/{profile_id}", response_model=ProfileDTO)
async def update_user(profile_id: int, body: ProfileUpdate):
    try:
        profile = await profile_store.update_profile(
            profile_id,
            name=body.name,
            email=body.email,
            preferred_subjects=body.preferredSubjects,
            avatar=body.avatar,
        )
    except DuplicateEmailError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if not profile:
        raise HTTPException(status_code=404, detail="User not found")
    return ProfileDTO.from_model(profile)

@router.delete("/users/{profile_id}", status_code=204)
async def delete_user(profile_id: int):
    try:
        deleted = await profile_store.delete_profile(profile_id)
    except SQLAlchemyError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if not deleted:
        raise HTTPException(status_code=404, detail="User not found")
    return Response(status_code=204)
