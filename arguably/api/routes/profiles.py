"""Profile Routes — sign-up, listing by belief, public profile with rank, owner edits."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.api.deps import get_actor_id
from arguably.infrastructure.database import get_db
from arguably.schemas.profile import (
    ProfileCreate, ProfileDetailResponse, ProfileResponse,
    ProfileUpdate, RankProgressResponse,
)
from arguably.services import profiles

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/profiles", tags=["profiles"])


@router.post(
    "", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED,
)
async def create_profile(
    body: ProfileCreate,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    """Sign-up: create the profile for the authenticated user."""
    return await profiles.create_profile(db, actor_id, body)


@router.get("", response_model=list[ProfileResponse])
async def list_profiles(
    belief: str | None = Query(None, max_length=60),
    db: AsyncSession = Depends(get_db),
):
    return await profiles.list_profiles(db, belief)


@router.get("/{profile_id}", response_model=ProfileDetailResponse)
async def get_profile(profile_id: UUID, db: AsyncSession = Depends(get_db)):
    profile, points, progress = await profiles.profile_with_rank(db, profile_id)
    return ProfileDetailResponse(
        **ProfileResponse.model_validate(profile).model_dump(),
        total_points=points,
        rank=RankProgressResponse.model_validate(progress),
    )


@router.patch("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: UUID,
    body: ProfileUpdate,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    return await profiles.update_profile(db, profile_id, actor_id, body)
