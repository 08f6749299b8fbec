from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskchain.domain.models import Notification
from taskchain.infrastructure.db.models import NotificationModel


class NotificationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def add_all(self, notifications: Iterable[Notification]) -> list[NotificationModel]:
        rows = [
            NotificationModel(
                recipient_id=n.recipient_id,
                task_id=n.task_id,
                title=n.title,
                message=n.message,
                category=n.category,
                is_read=n.read,
                created_at=n.created_at,
            )
            for n in notifications
        ]
        self.session.add_all(rows)
        return rows

    async def get(self, notification_id: str) -> NotificationModel | None:
        return await self.session.get(NotificationModel, notification_id)

    async def list_for_recipient(self, recipient_id: str, *, limit: int) -> list[NotificationModel]:
        stmt = (
            select(NotificationModel)
            .where(NotificationModel.recipient_id == recipient_id)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def count_unread(self, recipient_id: str) -> int:
        stmt = select(func.count(NotificationModel.id)).where(
            NotificationModel.recipient_id == recipient_id,
            NotificationModel.is_read.is_(False),
        )
        return int(await self.session.scalar(stmt) or 0)

    async def mark_read(self, notification_id: str) -> None:
        await self.session.execute(
            update(NotificationModel)
            .where(NotificationModel.id == notification_id)
            .values(is_read=True)
        )

    async def mark_all_read(self, recipient_id: str) -> int:
        result = await self.session.execute(
            update(NotificationModel)
            .where(
                NotificationModel.recipient_id == recipient_id,
                NotificationModel.is_read.is_(False),
            )
            .values(is_read=True)
        )
        return result.rowcount or 0
