"""Notification Routes — the actor's inbox."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.api.deps import get_actor_id
from arguably.infrastructure.database import get_db
from arguably.schemas.community import NotificationResponse
from arguably.services import notifications

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    unread_only: bool = Query(False),
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    return await notifications.list_notifications(db, actor_id, unread_only)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: UUID,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    return await notifications.mark_read(db, notification_id, actor_id)
