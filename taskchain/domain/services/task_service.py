"""
Task service: the store-facing collaborator of the lifecycle engine.

- Re-reads the task immediately before every transition
- Commits the new status and its notifications in one transaction
- Detects concurrent writers with a compare-and-swap on ``status``
- Pushes the visibility predicate down to the database for listings
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from taskchain.core.config import Settings, get_settings
from taskchain.domain.errors import ConflictingUpdateError, ForbiddenError
from taskchain.domain.models import (
    Actor,
    DeadlineClass,
    Task,
    TaskAction,
    TaskDraft,
    TaskStatus,
    TransitionOutcome,
    VisibilityMode,
    as_utc,
)
from taskchain.domain.services.lifecycle import TaskLifecycleEngine
from taskchain.domain.services.notifications import NotificationPolicy
from taskchain.domain.services.roles import eligible_assignees
from taskchain.domain.services.state_machine import (
    allowed_actions,
    classify_deadline,
    is_terminal,
)
from taskchain.domain.services.visibility import can_view
from taskchain.infrastructure.repositories import UnitOfWork

logger = structlog.get_logger()


class TaskNotFoundError(Exception):
    """Raised when a task does not exist."""


class AssigneeNotFoundError(Exception):
    """Raised when the requested assignee is not in the roster."""


@dataclass(slots=True)
class TaskView:
    """A task as presented to one actor at one instant."""

    task: Task
    deadline_class: DeadlineClass | None
    allowed_actions: list[TaskAction]


def build_engine(settings: Settings) -> TaskLifecycleEngine:
    policy = NotificationPolicy(notify_creator_on_submit=settings.notify_creator_on_submit)
    return TaskLifecycleEngine(policy=policy)


class TaskService:
    """Runs lifecycle transitions against the database."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        engine: TaskLifecycleEngine | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self.engine = engine or build_engine(self.settings)
        self.uow = UnitOfWork(session)

    async def create_task(self, actor: Actor, draft: TaskDraft) -> TransitionOutcome:
        """Create a task and its assignment notification atomically."""
        draft = dataclasses.replace(draft, deadline=as_utc(draft.deadline))

        async with self.uow as uow:
            if await uow.actors.get(actor.actor_id) is None:
                raise ForbiddenError(f"Actor {actor.actor_id} is not registered in the roster")
            assignee = await uow.actors.get(draft.assignee_id)
            if assignee is None:
                raise AssigneeNotFoundError(f"Actor {draft.assignee_id} not found")

            outcome = self.engine.create_task(actor, assignee, draft)
            uow.tasks.add(outcome.task)
            await uow.flush()
            uow.notifications.add_all(outcome.notifications)

        await logger.ainfo(
            "task_created",
            task_id=outcome.task.task_id,
            creator_id=actor.actor_id,
            assignee_id=outcome.task.assignee_id,
            notifications=len(outcome.notifications),
        )
        return outcome

    async def transition(
        self,
        actor: Actor,
        *,
        task_id: str,
        action: TaskAction,
        expected_status: TaskStatus | None = None,
    ) -> TransitionOutcome:
        """Apply ``action`` to the latest committed copy of the task.

        ``expected_status`` is the status the caller last saw. When it no
        longer matches, the caller's view is stale and the attempt is refused
        as a retryable conflict.
        """
        try:
            async with self.uow as uow:
                task = await uow.tasks.get(task_id)
                if task is None:
                    raise TaskNotFoundError(f"Task {task_id} not found")
                if expected_status is not None and task.status != expected_status:
                    raise ConflictingUpdateError(task_id, expected_status)

                outcome = self.engine.attempt_transition(actor, task, action)
                await uow.tasks.compare_and_set_status(
                    task_id,
                    expected=task.status,
                    new=outcome.task.status,
                    at=outcome.event.occurred_at,
                )
                uow.notifications.add_all(outcome.notifications)
        except ConflictingUpdateError:
            await logger.awarning(
                "task_transition_conflict",
                task_id=task_id,
                action=action.value,
                actor_id=actor.actor_id,
                expected_status=expected_status.value if expected_status else None,
            )
            raise

        await logger.ainfo(
            "task_transition_committed",
            task_id=task_id,
            action=action.value,
            actor_id=actor.actor_id,
            from_status=task.status.value,
            to_status=outcome.task.status.value,
            notifications=len(outcome.notifications),
        )
        return outcome

    async def get_task(self, actor: Actor, task_id: str) -> TaskView:
        task = await self.uow.tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(f"Task {task_id} not found")
        if not can_view(actor, task):
            raise ForbiddenError("You are not involved in this task")
        return self.present(actor, task)

    async def list_tasks(
        self, actor: Actor, mode: VisibilityMode = VisibilityMode.ACTIVE
    ) -> list[TaskView]:
        tasks = await self.uow.tasks.list_visible(actor, mode)
        now = datetime.now(UTC)
        return [self.present(actor, task, now=now) for task in tasks]

    async def eligible_assignees(self, actor: Actor) -> list[Actor]:
        roster = await self.uow.actors.list_all()
        return eligible_assignees(actor, roster)

    def present(self, actor: Actor, task: Task, *, now: datetime | None = None) -> TaskView:
        """Derive the time-relative display fields; these are never stored."""
        now = now or datetime.now(UTC)
        deadline_class = (
            None
            if is_terminal(task.status)
            else classify_deadline(task.deadline, now, self.settings.urgent_window)
        )
        return TaskView(
            task=task,
            deadline_class=deadline_class,
            allowed_actions=allowed_actions(actor, task),
        )
