"""
Notification fan-out for task lifecycle events.

The dispatcher only computes payloads. Persisting and pushing them to the
recipient is the caller's job, and must happen in the same commit as the
status change that produced them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from taskchain.domain.models import (
    Notification,
    NotificationCategory,
    TaskAction,
    TransitionEvent,
)


@dataclass(slots=True, frozen=True)
class NotificationPolicy:
    """Optional fan-out beyond the default rules.

    ``notify_creator_on_submit`` tells the task creator when work is handed
    in. It is off by default: approvers poll the pending queue.
    """

    notify_creator_on_submit: bool = False


def _quoted(title: str) -> str:
    return f'"{title}"'


def _task_assigned(event: TransitionEvent) -> Notification:
    return _build(
        event,
        recipient_id=event.task.assignee_id,
        category=NotificationCategory.TASK_ASSIGNED,
        title="New task assigned",
        message=f"{event.actor.display_name} assigned you: {_quoted(event.task.title)}",
    )


def _task_submitted(event: TransitionEvent) -> Notification:
    return _build(
        event,
        recipient_id=event.task.creator_id,
        category=NotificationCategory.TASK_SUBMITTED,
        title="Task awaiting approval",
        message=(
            f"{event.actor.display_name} submitted {_quoted(event.task.title)} for approval"
        ),
    )


def _task_approved(event: TransitionEvent) -> Notification:
    return _build(
        event,
        recipient_id=event.task.assignee_id,
        category=NotificationCategory.TASK_APPROVED,
        title="Task approved",
        message=f"The administrator approved completion of: {_quoted(event.task.title)}",
    )


def _task_rejected(event: TransitionEvent) -> Notification:
    return _build(
        event,
        recipient_id=event.task.assignee_id,
        category=NotificationCategory.TASK_REJECTED,
        title="Task returned for rework",
        message=f"The administrator returned {_quoted(event.task.title)} for rework",
    )


def _reminder(event: TransitionEvent) -> Notification:
    return _build(
        event,
        recipient_id=event.task.assignee_id,
        category=NotificationCategory.REMINDER,
        title="Task reminder",
        message=(
            f"{event.actor.display_name} is reminding you to complete: "
            f"{_quoted(event.task.title)}"
        ),
    )


def _build(
    event: TransitionEvent,
    *,
    recipient_id: str,
    category: NotificationCategory,
    title: str,
    message: str,
) -> Notification:
    return Notification(
        recipient_id=recipient_id,
        title=title,
        message=message,
        category=category,
        created_at=event.occurred_at,
        task_id=event.task.task_id,
    )


Rule = Callable[[TransitionEvent], Notification]

DEFAULT_RULES: dict[TaskAction, tuple[Rule, ...]] = {
    TaskAction.CREATE: (_task_assigned,),
    TaskAction.SUBMIT: (),
    TaskAction.APPROVE: (_task_approved,),
    TaskAction.REJECT: (_task_rejected,),
    TaskAction.REMIND: (_reminder,),
}


class NotificationDispatcher:
    """Computes the ``(recipient, message)`` pairs owed for a transition."""

    def __init__(self, policy: NotificationPolicy | None = None) -> None:
        self.policy = policy or NotificationPolicy()
        self._rules = dict(DEFAULT_RULES)
        if self.policy.notify_creator_on_submit:
            self._rules[TaskAction.SUBMIT] = (_task_submitted,)

    def notifications_for(self, event: TransitionEvent) -> list[Notification]:
        notifications = [rule(event) for rule in self._rules.get(event.action, ())]
        # Nobody is notified about their own action.
        return [n for n in notifications if n.recipient_id != event.actor.actor_id]


def notifications_for(
    event: TransitionEvent, policy: NotificationPolicy | None = None
) -> list[Notification]:
    return NotificationDispatcher(policy).notifications_for(event)
