from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import ColumnElement, Select, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskchain.domain.errors import ConflictingUpdateError
from taskchain.domain.models import Actor, Task, TaskStatus, VisibilityMode, as_utc
from taskchain.domain.services.roles import is_top_administrator
from taskchain.infrastructure.db.models import TaskModel


def to_task(row: TaskModel) -> Task:
    return Task(
        task_id=row.id,
        title=row.title,
        description=row.description or "",
        deadline=as_utc(row.deadline),
        assignee_id=row.assignee_id,
        creator_id=row.creator_id,
        status=TaskStatus(row.status),
        created_at=as_utc(row.created_at),
    )


def visibility_clauses(actor: Actor, mode: VisibilityMode) -> list[ColumnElement[bool]]:
    """SQL rendition of ``visibility.is_visible``; both must select the same rows."""
    if mode is VisibilityMode.HISTORY:
        clauses = [TaskModel.status == TaskStatus.COMPLETED]
    else:
        clauses = [TaskModel.status != TaskStatus.COMPLETED]

    if not is_top_administrator(actor):
        clauses.append(
            or_(TaskModel.assignee_id == actor.actor_id, TaskModel.creator_id == actor.actor_id)
        )
    return clauses


class TaskRepository:
    """Task table access, including the optimistic status check."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, task_id: str) -> Task | None:
        stmt = select(TaskModel).where(TaskModel.id == task_id)
        result = await self.session.execute(stmt)
        row = result.scalar_one_or_none()
        return to_task(row) if row is not None else None

    def visible_query(self, actor: Actor, mode: VisibilityMode) -> Select[tuple[TaskModel]]:
        return (
            select(TaskModel)
            .where(*visibility_clauses(actor, mode))
            .order_by(TaskModel.created_at.desc(), TaskModel.id)
        )

    async def list_visible(
        self, actor: Actor, mode: VisibilityMode, *, limit: int | None = None
    ) -> list[Task]:
        stmt = self.visible_query(actor, mode)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return [to_task(row) for row in result.scalars()]

    def add(self, task: Task) -> None:
        self.session.add(
            TaskModel(
                id=task.task_id,
                title=task.title,
                description=task.description,
                deadline=task.deadline,
                assignee_id=task.assignee_id,
                creator_id=task.creator_id,
                status=task.status,
                created_at=task.created_at,
                updated_at=task.created_at,
            )
        )

    async def compare_and_set_status(
        self,
        task_id: str,
        *,
        expected: TaskStatus,
        new: TaskStatus,
        at: datetime | None = None,
    ) -> None:
        """Write ``new`` only if the stored status is still ``expected``.

        Only the status is compared. Two same-status writes (reminders) can
        both succeed; that yields duplicate reminders and nothing worse.
        ``updated_at`` is bumped on every write.
        """
        stmt = (
            update(TaskModel)
            .where(TaskModel.id == task_id, TaskModel.status == expected)
            .values(status=new, updated_at=at or datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            raise ConflictingUpdateError(task_id, expected)
