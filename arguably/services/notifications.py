"""Notification Inbox — builds inbox rows for workflow events and serves the actor's inbox.

Invariants:
    - make_notification only builds the row; the caller adds it inside the same
      transaction as the action it reports
    - Only the recipient may read or mark a notification
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.core.domain_types import NotificationKind
from arguably.core.errors import PermissionDeniedError, ResourceNotFoundError
from arguably.models.notification import Notification

logger = logging.getLogger(__name__)

INBOX_LIMIT = 100

_MESSAGES: dict[NotificationKind, str] = {
    NotificationKind.DEBATE_INVITE: "You have been invited to a debate: {topic}",
    NotificationKind.CHALLENGE_INVITE: "You have been challenged to a debate: {topic}",
    NotificationKind.EVIDENCE_AGREED: "Your opponent agreed with your evidence.",
    NotificationKind.EVIDENCE_CHALLENGED: "Your opponent challenged your evidence.",
    NotificationKind.SOURCE_REQUESTED: "Your opponent requested a source for your evidence.",
    NotificationKind.EVIDENCE_VALIDATED: "Your opponent defended their challenged evidence.",
    NotificationKind.COUNTER_CHALLENGE: "Your opponent added counter-evidence to a challenge.",
    NotificationKind.SOURCE_SUPPLIED: "Your opponent supplied a source. The evidence is back for review.",
    NotificationKind.DEFEAT_ADMITTED: "Your opponent admitted defeat. You won the debate!",
}


def make_notification(
    kind: NotificationKind,
    recipient_id: UUID,
    actor_id: UUID | None,
    *,
    debate_id: UUID | None = None,
    evidence_id: UUID | None = None,
    topic: str = "",
) -> Notification:
    return Notification(
        recipient_id=recipient_id,
        actor_id=actor_id,
        kind=kind.value,
        debate_id=debate_id,
        evidence_id=evidence_id,
        message=_MESSAGES[kind].format(topic=topic),
        read=False,
    )


async def list_notifications(
    db: AsyncSession, actor_id: UUID, unread_only: bool = False,
) -> list[Notification]:
    """Actor's inbox, newest first."""
    stmt = select(Notification).where(Notification.recipient_id == actor_id)
    if unread_only:
        stmt = stmt.where(Notification.read.is_(False))
    stmt = stmt.order_by(Notification.created_at.desc()).limit(INBOX_LIMIT)
    return list((await db.execute(stmt)).scalars().all())


async def mark_read(
    db: AsyncSession, notification_id: UUID, actor_id: UUID,
) -> Notification:
    notification = await db.get(Notification, notification_id)
    if notification is None:
        raise ResourceNotFoundError("Notification", str(notification_id))
    if notification.recipient_id != actor_id:
        raise PermissionDeniedError("You can only read your own notifications.")
    if not notification.read:
        notification.read = True
        await db.commit()
    return notification
