"""
Task lifecycle engine.

Single entry point for every task transition: looks up the guard for
``(status, action)``, checks the actor, validates creation input, computes
the next snapshot and the notifications that go with it. The engine holds
no mutable state and never touches storage, so it is safe to call from any
number of concurrent requests.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import uuid4

import structlog

from taskchain.domain.errors import (
    ForbiddenError,
    HierarchyViolationError,
    InvalidDeadlineError,
    TransitionRejected,
)
from taskchain.domain.models import (
    Actor,
    Task,
    TaskAction,
    TaskDraft,
    TransitionEvent,
    TransitionOutcome,
)
from taskchain.domain.services.notifications import NotificationDispatcher, NotificationPolicy
from taskchain.domain.services.roles import can_create_task_for
from taskchain.domain.services.state_machine import lookup_transition

logger = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _new_task_id() -> str:
    return str(uuid4())


class TaskLifecycleEngine:
    """Pure transition function over task snapshots."""

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_task_id,
        policy: NotificationPolicy | None = None,
    ) -> None:
        self.clock = clock
        self.id_factory = id_factory
        self.dispatcher = NotificationDispatcher(policy)

    def attempt_transition(
        self,
        actor: Actor,
        task: Task | None,
        action: TaskAction,
        *,
        draft: TaskDraft | None = None,
        assignee: Actor | None = None,
    ) -> TransitionOutcome:
        """Apply ``action`` to ``task`` on behalf of ``actor``.

        ``task`` is ``None`` for ``create``, which also requires the ``draft``
        and the resolved ``assignee``. Raises a ``TransitionRejected``
        subclass when the attempt is refused.
        """
        from_status = task.status if task is not None else None
        try:
            rule = lookup_transition(from_status, action)
            if not rule.guard(actor, task):
                raise ForbiddenError(f"Only {rule.requirement} may {action.value} this task")

            now = self.clock()
            # Only create is defined from "no task", so the lookup above already
            # refused any other action on None.
            if task is None:
                next_task = self._build_task(actor, draft, assignee, now)
            else:
                next_task = dataclasses.replace(task, status=rule.to_status)
        except TransitionRejected as exc:
            logger.info(
                "task_transition_rejected",
                task_id=task.task_id if task is not None else None,
                action=action.value,
                actor_id=actor.actor_id,
                from_status=from_status.value if from_status is not None else None,
                reason=exc.code,
            )
            raise

        event = TransitionEvent(
            task=next_task,
            from_status=from_status,
            to_status=rule.to_status,
            action=action,
            actor=actor,
            occurred_at=now,
        )
        notifications = self.dispatcher.notifications_for(event)
        return TransitionOutcome(task=next_task, notifications=tuple(notifications), event=event)

    def create_task(self, actor: Actor, assignee: Actor, draft: TaskDraft) -> TransitionOutcome:
        return self.attempt_transition(
            actor, None, TaskAction.CREATE, draft=draft, assignee=assignee
        )

    def _build_task(
        self,
        actor: Actor,
        draft: TaskDraft | None,
        assignee: Actor | None,
        now: datetime,
    ) -> Task:
        if draft is None or assignee is None:
            raise ValueError("create requires both a draft and the resolved assignee")
        if assignee.actor_id != draft.assignee_id:
            raise ValueError("assignee does not match draft.assignee_id")

        if not can_create_task_for(actor, assignee):
            raise HierarchyViolationError(actor.role_level, assignee.role_level)
        if draft.deadline <= now:
            raise InvalidDeadlineError(draft.deadline, now)

        return Task(
            task_id=self.id_factory(),
            title=draft.title,
            description=draft.description,
            deadline=draft.deadline,
            assignee_id=assignee.actor_id,
            creator_id=actor.actor_id,
            status=lookup_transition(None, TaskAction.CREATE).to_status,
            created_at=now,
        )
