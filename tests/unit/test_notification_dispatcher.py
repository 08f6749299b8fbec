"""Notification fan-out per lifecycle action."""

from __future__ import annotations

import pytest
from taskchain.domain.models import (
    NotificationCategory,
    TaskAction,
    TaskStatus,
    TransitionEvent,
)
from taskchain.domain.services.notifications import (
    NotificationDispatcher,
    NotificationPolicy,
    notifications_for,
)

from tests.utils import ADMIN, MANAGER, NOW, STAFF, make_task


def _event(action: TaskAction, actor, *, from_status, to_status, creator=MANAGER):
    return TransitionEvent(
        task=make_task(creator=creator, status=to_status, title="Fix the roof"),
        from_status=from_status,
        to_status=to_status,
        action=action,
        actor=actor,
        occurred_at=NOW,
    )


def test_create_notifies_assignee() -> None:
    [notification] = notifications_for(
        _event(TaskAction.CREATE, MANAGER, from_status=None, to_status=TaskStatus.NEW)
    )

    assert notification.recipient_id == STAFF.actor_id
    assert notification.category is NotificationCategory.TASK_ASSIGNED
    assert notification.message == 'Max Manager assigned you: "Fix the roof"'
    assert notification.created_at == NOW
    assert notification.read is False
    assert notification.task_id == "task-1"


def test_submit_notifies_nobody_by_default() -> None:
    event = _event(
        TaskAction.SUBMIT, STAFF, from_status=TaskStatus.NEW, to_status=TaskStatus.PENDING
    )

    assert notifications_for(event) == []


def test_submit_policy_extension_notifies_creator() -> None:
    event = _event(
        TaskAction.SUBMIT, STAFF, from_status=TaskStatus.NEW, to_status=TaskStatus.PENDING
    )
    dispatcher = NotificationDispatcher(NotificationPolicy(notify_creator_on_submit=True))

    [notification] = dispatcher.notifications_for(event)

    assert notification.recipient_id == MANAGER.actor_id
    assert notification.category is NotificationCategory.TASK_SUBMITTED
    assert "Sam Staff submitted" in notification.message


@pytest.mark.parametrize(
    "action,from_status,to_status,category",
    [
        (
            TaskAction.APPROVE,
            TaskStatus.PENDING,
            TaskStatus.COMPLETED,
            NotificationCategory.TASK_APPROVED,
        ),
        (TaskAction.REJECT, TaskStatus.PENDING, TaskStatus.NEW, NotificationCategory.TASK_REJECTED),
    ],
)
def test_administrator_decision_notifies_assignee(action, from_status, to_status, category) -> None:
    [notification] = notifications_for(
        _event(action, ADMIN, from_status=from_status, to_status=to_status)
    )

    assert notification.recipient_id == STAFF.actor_id
    assert notification.category is category


def test_reminder_uses_creator_name_and_title() -> None:
    [notification] = notifications_for(
        _event(TaskAction.REMIND, MANAGER, from_status=TaskStatus.NEW, to_status=TaskStatus.NEW)
    )

    assert notification.recipient_id == STAFF.actor_id
    assert notification.category is NotificationCategory.REMINDER
    assert notification.message == 'Max Manager is reminding you to complete: "Fix the roof"'


def test_messages_are_deterministic() -> None:
    event = _event(
        TaskAction.REMIND, MANAGER, from_status=TaskStatus.NEW, to_status=TaskStatus.NEW
    )

    assert notifications_for(event) == notifications_for(event)


def test_actor_never_notifies_themselves() -> None:
    # The creator submitting would otherwise be told about their own action.
    event = _event(
        TaskAction.SUBMIT,
        MANAGER,
        from_status=TaskStatus.NEW,
        to_status=TaskStatus.PENDING,
        creator=MANAGER,
    )
    dispatcher = NotificationDispatcher(NotificationPolicy(notify_creator_on_submit=True))

    assert dispatcher.notifications_for(event) == []
