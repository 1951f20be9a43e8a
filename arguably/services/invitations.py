"""Debate Invitations — challenge another user to a debate, accept or decline.

Invariants:
    - Only the challenged user may respond, exactly once (CAS on `pending`)
    - Accepting spawns the debate in the same transaction that flips the status;
      a lost CAS rolls the debate back too
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.core.domain_types import InvitationStatus, NotificationKind
from arguably.core.enforce_debate import validate_invitation, validate_invitation_response
from arguably.core.errors import (
    ConcurrencyError, ErrorContext, ResourceNotFoundError, raise_for_rule,
)
from arguably.models.debate_challenge import DebateChallenge
from arguably.models.discussion_post import DiscussionPost
from arguably.schemas.debate import InvitationCreate
from arguably.services.debate_lifecycle import new_debate
from arguably.services.notifications import make_notification
from arguably.services.records import load_profile

logger = logging.getLogger(__name__)


@dataclass
class InvitationLists:
    incoming: list[DebateChallenge]
    outgoing: list[DebateChallenge]


async def load_invitation(db: AsyncSession, invitation_id: UUID) -> DebateChallenge:
    invitation = await db.get(DebateChallenge, invitation_id)
    if invitation is None:
        raise ResourceNotFoundError("DebateChallenge", str(invitation_id))
    return invitation


async def create_invitation(
    db: AsyncSession, actor_id: UUID, data: InvitationCreate,
) -> DebateChallenge:
    raise_for_rule(
        validate_invitation(actor_id, data.challenged_id),
        ErrorContext(actor_id=str(actor_id)),
    )
    await load_profile(db, actor_id)
    await load_profile(db, data.challenged_id)
    if data.post_id is not None and await db.get(DiscussionPost, data.post_id) is None:
        raise ResourceNotFoundError("DiscussionPost", str(data.post_id))

    invitation = DebateChallenge(
        challenger_id=actor_id,
        challenged_id=data.challenged_id,
        topic=data.topic,
        post_id=data.post_id,
        status=InvitationStatus.PENDING.value,
    )
    db.add(invitation)
    db.add(make_notification(
        NotificationKind.CHALLENGE_INVITE, data.challenged_id, actor_id,
        topic=data.topic,
    ))
    await db.commit()
    logger.info("Debate invitation sent", extra={"actor_id": str(actor_id)})
    return invitation


async def list_invitations(db: AsyncSession, actor_id: UUID) -> InvitationLists:
    async def _query(column) -> list[DebateChallenge]:
        result = await db.execute(
            select(DebateChallenge)
            .where(column == actor_id)
            .order_by(DebateChallenge.created_at.desc()),
        )
        return list(result.scalars().all())

    return InvitationLists(
        incoming=await _query(DebateChallenge.challenged_id),
        outgoing=await _query(DebateChallenge.challenger_id),
    )


async def accept_invitation(
    db: AsyncSession, invitation_id: UUID, actor_id: UUID,
) -> DebateChallenge:
    """pending -> accepted; the challenger becomes participant1 of the new debate."""
    invitation = await load_invitation(db, invitation_id)
    raise_for_rule(
        validate_invitation_response(
            invitation.challenged_id, InvitationStatus(invitation.status), actor_id,
        ),
        ErrorContext(actor_id=str(actor_id)),
    )
    debate = new_debate(invitation.challenger_id, invitation.challenged_id, invitation.topic)
    db.add(debate)
    await db.flush()
    await _respond(db, invitation, InvitationStatus.ACCEPTED, debate_id=debate.id)
    logger.info(
        "Debate invitation accepted",
        extra={"debate_id": str(debate.id), "actor_id": str(actor_id)},
    )
    return await _reload(db, invitation.id)


async def decline_invitation(
    db: AsyncSession, invitation_id: UUID, actor_id: UUID,
) -> DebateChallenge:
    invitation = await load_invitation(db, invitation_id)
    raise_for_rule(
        validate_invitation_response(
            invitation.challenged_id, InvitationStatus(invitation.status), actor_id,
        ),
        ErrorContext(actor_id=str(actor_id)),
    )
    await _respond(db, invitation, InvitationStatus.DECLINED)
    return await _reload(db, invitation.id)


async def _respond(
    db: AsyncSession,
    invitation: DebateChallenge,
    status: InvitationStatus,
    debate_id: UUID | None = None,
) -> None:
    result = await db.execute(
        update(DebateChallenge)
        .where(
            DebateChallenge.id == invitation.id,
            DebateChallenge.status == InvitationStatus.PENDING.value,
        )
        .values(
            status=status.value,
            debate_id=debate_id,
            responded_at=datetime.now(timezone.utc),
        ),
    )
    if result.rowcount != 1:
        raise ConcurrencyError("This invitation was already answered.")
    await db.commit()


async def _reload(db: AsyncSession, invitation_id: UUID) -> DebateChallenge:
    result = await db.execute(
        select(DebateChallenge)
        .where(DebateChallenge.id == invitation_id)
        .execution_options(populate_existing=True),
    )
    return result.scalar_one()
