"""Notification feed and read acknowledgement."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from taskchain.core.config import Settings, get_settings
from taskchain.domain.errors import ForbiddenError
from taskchain.domain.models import Actor, NotificationCategory, as_utc
from taskchain.infrastructure.db.models import NotificationModel
from taskchain.infrastructure.repositories import NotificationRepository

logger = structlog.get_logger()


class NotificationNotFoundError(Exception):
    """Raised when a notification does not exist."""


@dataclass(slots=True)
class NotificationRecord:
    notification_id: str
    recipient_id: str
    task_id: str | None
    title: str
    message: str
    category: NotificationCategory
    read: bool
    created_at: datetime


@dataclass(slots=True)
class NotificationFeed:
    items: list[NotificationRecord]
    unread_count: int


def _to_record(row: NotificationModel) -> NotificationRecord:
    return NotificationRecord(
        notification_id=row.id,
        recipient_id=row.recipient_id,
        task_id=row.task_id,
        title=row.title,
        message=row.message,
        category=NotificationCategory(row.category),
        read=row.is_read,
        created_at=as_utc(row.created_at),
    )


class NotificationService:
    def __init__(self, session: AsyncSession, *, settings: Settings | None = None) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self.notifications = NotificationRepository(session)

    async def list_for_recipient(self, actor: Actor, *, limit: int | None = None) -> NotificationFeed:
        """Newest notifications addressed to ``actor``, plus the unread total."""
        limit = limit or self.settings.notification_feed_limit
        rows = await self.notifications.list_for_recipient(actor.actor_id, limit=limit)
        unread = await self.notifications.count_unread(actor.actor_id)
        return NotificationFeed(items=[_to_record(row) for row in rows], unread_count=unread)

    async def unread_count(self, actor: Actor) -> int:
        return await self.notifications.count_unread(actor.actor_id)

    async def mark_read(self, actor: Actor, notification_id: str) -> NotificationRecord:
        """Only the recipient may acknowledge a notification. Repeat calls are no-ops."""
        row = await self.notifications.get(notification_id)
        if row is None:
            raise NotificationNotFoundError(f"Notification {notification_id} not found")
        if row.recipient_id != actor.actor_id:
            raise ForbiddenError("Only the recipient can acknowledge this notification")

        if not row.is_read:
            await self.notifications.mark_read(notification_id)
            await self.session.commit()
            await self.session.refresh(row)
            await logger.ainfo(
                "notification_marked_read",
                notification_id=notification_id,
                recipient_id=actor.actor_id,
            )
        return _to_record(row)

    async def mark_all_read(self, actor: Actor) -> int:
        updated = await self.notifications.mark_all_read(actor.actor_id)
        await self.session.commit()
        await logger.ainfo("notifications_marked_read", recipient_id=actor.actor_id, count=updated)
        return updated
