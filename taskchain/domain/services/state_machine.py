"""
Task status state machine.

    (none) --create--> new --submit--> pending --approve--> completed
                        ^                  |
                        +------reject------+

``remind`` is a side-effect-only action on ``new`` tasks. ``completed`` is
absorbing: no rule starts from it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from taskchain.domain.errors import IllegalTransitionError
from taskchain.domain.models import Actor, DeadlineClass, Task, TaskAction, TaskStatus
from taskchain.domain.services.roles import is_top_administrator

Guard = Callable[[Actor, Task | None], bool]

DEFAULT_URGENT_WINDOW = timedelta(hours=48)
TERMINAL_STATES: frozenset[TaskStatus] = frozenset({TaskStatus.COMPLETED})


@dataclass(slots=True, frozen=True)
class TransitionRule:
    action: TaskAction
    from_status: TaskStatus | None
    to_status: TaskStatus
    guard: Guard
    requirement: str


def _any_actor(actor: Actor, task: Task | None) -> bool:
    # Creation is gated by the role hierarchy check, which needs the assignee.
    return True


def _is_assignee(actor: Actor, task: Task | None) -> bool:
    return task is not None and actor.actor_id == task.assignee_id


def _is_creator(actor: Actor, task: Task | None) -> bool:
    return task is not None and actor.actor_id == task.creator_id


def _is_top_administrator(actor: Actor, task: Task | None) -> bool:
    return is_top_administrator(actor)


TRANSITIONS: dict[tuple[TaskStatus | None, TaskAction], TransitionRule] = {
    (rule.from_status, rule.action): rule
    for rule in (
        TransitionRule(
            TaskAction.CREATE, None, TaskStatus.NEW, _any_actor, "a strictly senior creator"
        ),
        TransitionRule(
            TaskAction.SUBMIT,
            TaskStatus.NEW,
            TaskStatus.PENDING,
            _is_assignee,
            "the task assignee",
        ),
        TransitionRule(
            TaskAction.APPROVE,
            TaskStatus.PENDING,
            TaskStatus.COMPLETED,
            _is_top_administrator,
            "the top administrator",
        ),
        TransitionRule(
            TaskAction.REJECT,
            TaskStatus.PENDING,
            TaskStatus.NEW,
            _is_top_administrator,
            "the top administrator",
        ),
        TransitionRule(
            TaskAction.REMIND,
            TaskStatus.NEW,
            TaskStatus.NEW,
            _is_creator,
            "the task creator",
        ),
    )
}


def lookup_transition(status: TaskStatus | None, action: TaskAction) -> TransitionRule:
    """Return the rule for ``(status, action)`` or raise ``IllegalTransitionError``."""
    rule = TRANSITIONS.get((status, action))
    if rule is None:
        raise IllegalTransitionError(status, action)
    return rule


def is_terminal(status: TaskStatus) -> bool:
    return status in TERMINAL_STATES


def allowed_actions(actor: Actor, task: Task) -> list[TaskAction]:
    """Actions ``actor`` could legally take on ``task`` right now."""
    return [
        rule.action
        for (from_status, _), rule in TRANSITIONS.items()
        if from_status == task.status and rule.guard(actor, task)
    ]


def classify_deadline(
    deadline: datetime,
    now: datetime,
    urgent_window: timedelta = DEFAULT_URGENT_WINDOW,
) -> DeadlineClass:
    """Derive the display category of a deadline. Never stored, never fed back into status."""
    remaining = deadline - now
    if remaining < timedelta(0):
        return DeadlineClass.OVERDUE
    if remaining < urgent_window:
        return DeadlineClass.URGENT
    return DeadlineClass.ON_TRACK
