"""Debate Challenge Routes — invitations to new debates."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.api.deps import get_actor_id
from arguably.infrastructure.database import get_db
from arguably.schemas.debate import (
    InvitationCreate, InvitationListResponse, InvitationResponse,
)
from arguably.services import invitations

router = APIRouter(prefix="/api/v1/debate-challenges", tags=["debate-challenges"])


@router.post(
    "", response_model=InvitationResponse, status_code=status.HTTP_201_CREATED,
)
async def create_invitation(
    body: InvitationCreate,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    return await invitations.create_invitation(db, actor_id, body)


@router.get("", response_model=InvitationListResponse)
async def list_invitations(
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    lists = await invitations.list_invitations(db, actor_id)
    return InvitationListResponse(
        incoming=[InvitationResponse.model_validate(i) for i in lists.incoming],
        outgoing=[InvitationResponse.model_validate(i) for i in lists.outgoing],
    )


@router.post("/{invitation_id}/accept", response_model=InvitationResponse)
async def accept_invitation(
    invitation_id: UUID,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    """Accept: spawns the debate (challenger is participant1)."""
    return await invitations.accept_invitation(db, invitation_id, actor_id)


@router.post("/{invitation_id}/decline", response_model=InvitationResponse)
async def decline_invitation(
    invitation_id: UUID,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    return await invitations.decline_invitation(db, invitation_id, actor_id)
