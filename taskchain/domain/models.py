from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import UTC, datetime


class TaskStatus(str, enum.Enum):
    """Task lifecycle status."""

    NEW = "new"  # Awaiting assignee action
    PENDING = "pending"  # Submitted, awaiting approval
    COMPLETED = "completed"  # Approved; terminal


class TaskAction(str, enum.Enum):
    CREATE = "create"
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    REMIND = "remind"


class NotificationCategory(str, enum.Enum):
    TASK_ASSIGNED = "task_assigned"
    TASK_SUBMITTED = "task_submitted"
    TASK_APPROVED = "task_approved"
    TASK_REJECTED = "task_rejected"
    REMINDER = "reminder"


class VisibilityMode(str, enum.Enum):
    ACTIVE = "active"
    HISTORY = "history"


class DeadlineClass(str, enum.Enum):
    """Display-only classification derived from a deadline and the current time."""

    OVERDUE = "overdue"
    URGENT = "urgent"
    ON_TRACK = "on_track"


@dataclass(slots=True, frozen=True)
class Actor:
    """An authenticated principal as supplied by the identity provider."""

    actor_id: str
    display_name: str
    role_level: int


@dataclass(slots=True, frozen=True)
class TaskDraft:
    """Caller-supplied parameters for creating a task."""

    title: str
    deadline: datetime
    assignee_id: str
    description: str = ""


@dataclass(slots=True, frozen=True)
class Task:
    """Value snapshot of a task record.

    The authoritative copy lives in the durable store; the lifecycle engine
    only ever returns a new snapshot.
    """

    task_id: str
    title: str
    deadline: datetime
    assignee_id: str
    creator_id: str
    status: TaskStatus
    created_at: datetime
    description: str = ""

    def involves(self, actor_id: str) -> bool:
        return actor_id in (self.assignee_id, self.creator_id)


@dataclass(slots=True, frozen=True)
class Notification:
    """Outbound fact produced by a successful transition."""

    recipient_id: str
    title: str
    message: str
    category: NotificationCategory
    created_at: datetime
    task_id: str | None = None
    read: bool = False


@dataclass(slots=True, frozen=True)
class TransitionEvent:
    task: Task
    from_status: TaskStatus | None
    to_status: TaskStatus
    action: TaskAction
    actor: Actor
    occurred_at: datetime


@dataclass(slots=True, frozen=True)
class TransitionOutcome:
    """New task snapshot plus the notifications that must be committed with it."""

    task: Task
    notifications: tuple[Notification, ...]
    event: TransitionEvent

    @property
    def status_changed(self) -> bool:
        return self.event.from_status != self.event.to_status


def as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes (as some drivers return them) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
