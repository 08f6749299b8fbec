"""Visibility filter: least privilege for everyone but the top administrator."""

from __future__ import annotations

import pytest
from taskchain.domain.models import TaskStatus, VisibilityMode
from taskchain.domain.services.visibility import can_view, visible_tasks

from tests.utils import ADMIN, LEAD, MANAGER, OTHER_STAFF, ROSTER, STAFF, make_task

TASKS = [
    make_task(task_id="t-new", creator=MANAGER, assignee=STAFF, status=TaskStatus.NEW),
    make_task(task_id="t-pending", creator=LEAD, assignee=STAFF, status=TaskStatus.PENDING),
    make_task(task_id="t-done", creator=MANAGER, assignee=LEAD, status=TaskStatus.COMPLETED),
    make_task(task_id="t-other", creator=ADMIN, assignee=OTHER_STAFF, status=TaskStatus.NEW),
]


def _ids(tasks) -> list[str]:
    return [t.task_id for t in tasks]


def test_administrator_sees_all_active_tasks() -> None:
    assert _ids(visible_tasks(ADMIN, TASKS, VisibilityMode.ACTIVE)) == [
        "t-new",
        "t-pending",
        "t-other",
    ]


def test_administrator_history_is_completed_only() -> None:
    assert _ids(visible_tasks(ADMIN, TASKS, VisibilityMode.HISTORY)) == ["t-done"]


def test_assignee_sees_own_tasks() -> None:
    assert _ids(visible_tasks(STAFF, TASKS, VisibilityMode.ACTIVE)) == ["t-new", "t-pending"]


def test_creator_sees_tasks_they_assigned() -> None:
    assert _ids(visible_tasks(MANAGER, TASKS, VisibilityMode.ACTIVE)) == ["t-new"]
    assert _ids(visible_tasks(MANAGER, TASKS, VisibilityMode.HISTORY)) == ["t-done"]


def test_seniority_alone_grants_nothing() -> None:
    # Level 1 outranks the assignee of t-other but is not involved in it.
    assert "t-other" not in _ids(visible_tasks(MANAGER, TASKS, VisibilityMode.ACTIVE))
    assert not can_view(MANAGER, TASKS[3])


def test_default_mode_is_active() -> None:
    assert _ids(visible_tasks(LEAD, TASKS)) == ["t-pending"]


def test_duplicate_snapshots_are_dropped() -> None:
    assert _ids(visible_tasks(STAFF, [TASKS[0], TASKS[0]])) == ["t-new"]


@pytest.mark.parametrize("actor", [a for a in ROSTER if a is not ADMIN])
@pytest.mark.parametrize("mode", list(VisibilityMode))
def test_non_administrator_only_sees_involved_tasks(actor, mode) -> None:
    for task in visible_tasks(actor, TASKS, mode):
        assert actor.actor_id in (task.assignee_id, task.creator_id)
