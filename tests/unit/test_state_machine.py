"""State machine table, allowed actions and deadline classification."""

from __future__ import annotations

from datetime import timedelta

import pytest
from taskchain.domain.errors import IllegalTransitionError
from taskchain.domain.models import DeadlineClass, TaskAction, TaskStatus
from taskchain.domain.services.state_machine import (
    TERMINAL_STATES,
    TRANSITIONS,
    allowed_actions,
    classify_deadline,
    is_terminal,
    lookup_transition,
)

from tests.utils import ADMIN, MANAGER, NOW, OTHER_STAFF, STAFF, make_task

DEFINED = {
    (None, TaskAction.CREATE): TaskStatus.NEW,
    (TaskStatus.NEW, TaskAction.SUBMIT): TaskStatus.PENDING,
    (TaskStatus.PENDING, TaskAction.APPROVE): TaskStatus.COMPLETED,
    (TaskStatus.PENDING, TaskAction.REJECT): TaskStatus.NEW,
    (TaskStatus.NEW, TaskAction.REMIND): TaskStatus.NEW,
}

ALL_PAIRS = [(s, a) for s in [None, *TaskStatus] for a in TaskAction]


class TestTransitionTable:
    def test_table_matches_lifecycle(self) -> None:
        assert {key: rule.to_status for key, rule in TRANSITIONS.items()} == DEFINED

    @pytest.mark.parametrize("status,action", [p for p in ALL_PAIRS if p not in DEFINED])
    def test_undefined_pairs_are_illegal(
        self, status: TaskStatus | None, action: TaskAction
    ) -> None:
        with pytest.raises(IllegalTransitionError) as exc_info:
            lookup_transition(status, action)

        assert exc_info.value.status == status
        assert exc_info.value.action == action

    def test_completed_is_absorbing(self) -> None:
        assert TERMINAL_STATES == {TaskStatus.COMPLETED}
        assert all(from_status != TaskStatus.COMPLETED for from_status, _ in TRANSITIONS)
        assert is_terminal(TaskStatus.COMPLETED)
        assert not is_terminal(TaskStatus.PENDING)


class TestAllowedActions:
    def test_assignee_may_submit_new_task(self) -> None:
        assert allowed_actions(STAFF, make_task()) == [TaskAction.SUBMIT]

    def test_creator_may_remind_on_new_task(self) -> None:
        assert allowed_actions(MANAGER, make_task()) == [TaskAction.REMIND]

    def test_administrator_decides_pending_task(self) -> None:
        task = make_task(status=TaskStatus.PENDING)

        assert set(allowed_actions(ADMIN, task)) == {TaskAction.APPROVE, TaskAction.REJECT}

    def test_administrator_as_creator_may_remind(self) -> None:
        task = make_task(creator=ADMIN)

        assert allowed_actions(ADMIN, task) == [TaskAction.REMIND]

    def test_unrelated_actor_has_no_actions(self) -> None:
        assert allowed_actions(OTHER_STAFF, make_task()) == []

    def test_completed_task_has_no_actions(self) -> None:
        task = make_task(status=TaskStatus.COMPLETED)

        assert allowed_actions(ADMIN, task) == []


class TestClassifyDeadline:
    @pytest.mark.parametrize(
        "offset,expected",
        [
            (timedelta(minutes=-1), DeadlineClass.OVERDUE),
            (timedelta(0), DeadlineClass.URGENT),
            (timedelta(hours=47, minutes=59), DeadlineClass.URGENT),
            (timedelta(hours=48), DeadlineClass.ON_TRACK),
            (timedelta(days=10), DeadlineClass.ON_TRACK),
        ],
    )
    def test_default_window(self, offset: timedelta, expected: DeadlineClass) -> None:
        assert classify_deadline(NOW + offset, NOW) is expected

    def test_custom_window(self) -> None:
        deadline = NOW + timedelta(hours=5)

        assert classify_deadline(deadline, NOW, timedelta(hours=4)) is DeadlineClass.ON_TRACK
        assert classify_deadline(deadline, NOW, timedelta(hours=6)) is DeadlineClass.URGENT
