"""Which tasks an actor may observe.

This in-memory predicate is the reference semantics; the store adapter
renders the same predicate as a SQL filter.
"""

from __future__ import annotations

from collections.abc import Iterable

from taskchain.domain.models import Actor, Task, TaskStatus, VisibilityMode
from taskchain.domain.services.roles import is_top_administrator


def matches_mode(task: Task, mode: VisibilityMode) -> bool:
    if mode is VisibilityMode.HISTORY:
        return task.status == TaskStatus.COMPLETED
    return task.status != TaskStatus.COMPLETED


def can_view(actor: Actor, task: Task) -> bool:
    """Least privilege: non-administrators only see tasks they created or own."""
    return is_top_administrator(actor) or task.involves(actor.actor_id)


def is_visible(actor: Actor, task: Task, mode: VisibilityMode) -> bool:
    return matches_mode(task, mode) and can_view(actor, task)


def visible_tasks(
    actor: Actor,
    all_tasks: Iterable[Task],
    mode: VisibilityMode = VisibilityMode.ACTIVE,
) -> list[Task]:
    """Filter ``all_tasks`` down to the ones ``actor`` may see in ``mode``.

    Input order is preserved and duplicate task ids are dropped.
    """
    seen: set[str] = set()
    result: list[Task] = []
    for task in all_tasks:
        if task.task_id in seen:
            continue
        seen.add(task.task_id)
        if is_visible(actor, task, mode):
            result.append(task)
    return result
