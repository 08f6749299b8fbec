"""Task lifecycle domain: value types, rejections and services."""

from taskchain.domain.errors import (
    ConflictingUpdateError,
    ForbiddenError,
    HierarchyViolationError,
    IllegalTransitionError,
    InvalidDeadlineError,
    TransitionRejected,
)
from taskchain.domain.models import (
    Actor,
    DeadlineClass,
    Notification,
    NotificationCategory,
    Task,
    TaskAction,
    TaskDraft,
    TaskStatus,
    TransitionEvent,
    TransitionOutcome,
    VisibilityMode,
)

__all__ = [
    "Actor",
    "ConflictingUpdateError",
    "DeadlineClass",
    "ForbiddenError",
    "HierarchyViolationError",
    "IllegalTransitionError",
    "InvalidDeadlineError",
    "Notification",
    "NotificationCategory",
    "Task",
    "TaskAction",
    "TaskDraft",
    "TaskStatus",
    "TransitionEvent",
    "TransitionOutcome",
    "TransitionRejected",
    "VisibilityMode",
]
