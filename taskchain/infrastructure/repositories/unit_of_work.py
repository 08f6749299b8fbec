from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from .actors import ActorRepository
from .notifications import NotificationRepository
from .tasks import TaskRepository

logger = structlog.get_logger()


class UnitOfWork:
    """Groups a task write and its notifications into one transaction.

    A status change must never be observable without its notifications, or
    the other way round: leaving the block normally commits both, any
    exception rolls both back.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.actors = ActorRepository(session)
        self.tasks = TaskRepository(session)
        self.notifications = NotificationRepository(session)

    async def __aenter__(self) -> UnitOfWork:
        logger.debug("uow_enter")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc:
            await self.rollback()
        else:
            await self.commit()
        logger.debug("uow_exit", exc_type=str(exc_type) if exc_type else None)

    async def flush(self) -> None:
        """Write pending rows so later inserts can reference them."""
        await self.session.flush()

    async def commit(self) -> None:
        await self.session.commit()
        logger.debug("uow_commit")

    async def rollback(self) -> None:
        await self.session.rollback()
        logger.debug("uow_rollback")
