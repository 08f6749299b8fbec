from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from taskchain.api.deps import get_current_actor, get_db_session
from taskchain.api.errors import not_found, rejection_to_http
from taskchain.api.schemas.notifications import (
    MarkAllReadResponse,
    NotificationFeedResponse,
    NotificationItem,
)
from taskchain.domain.errors import TransitionRejected
from taskchain.domain.models import Actor
from taskchain.domain.services.notification_service import (
    NotificationNotFoundError,
    NotificationRecord,
    NotificationService,
)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def _to_item(record: NotificationRecord) -> NotificationItem:
    return NotificationItem(
        id=record.notification_id,
        task_id=record.task_id,
        title=record.title,
        message=record.message,
        category=record.category.value,
        read=record.read,
        created_at=record.created_at,
    )


@router.get("", response_model=NotificationFeedResponse, summary="Caller's notification feed")
async def list_notifications(
    limit: int | None = Query(None, ge=1, le=100),
    session: AsyncSession = Depends(get_db_session),
    actor: Actor = Depends(get_current_actor),
) -> NotificationFeedResponse:
    feed = await NotificationService(session).list_for_recipient(actor, limit=limit)
    return NotificationFeedResponse(
        items=[_to_item(r) for r in feed.items], unread_count=feed.unread_count
    )


@router.post("/{notification_id}/read", response_model=NotificationItem)
async def mark_notification_read(
    notification_id: str,
    session: AsyncSession = Depends(get_db_session),
    actor: Actor = Depends(get_current_actor),
) -> NotificationItem:
    try:
        record = await NotificationService(session).mark_read(actor, notification_id)
    except NotificationNotFoundError as exc:
        raise not_found(exc) from exc
    except TransitionRejected as exc:
        raise rejection_to_http(exc) from exc
    return _to_item(record)


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_notifications_read(
    session: AsyncSession = Depends(get_db_session),
    actor: Actor = Depends(get_current_actor),
) -> MarkAllReadResponse:
    updated = await NotificationService(session).mark_all_read(actor)
    return MarkAllReadResponse(updated=updated)
