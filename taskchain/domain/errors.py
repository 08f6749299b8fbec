"""Rejections raised by the task lifecycle engine and its store adapter."""

from __future__ import annotations

from datetime import datetime

from taskchain.domain.models import TaskAction, TaskStatus


class TransitionRejected(Exception):
    """Base class for every refused transition attempt.

    A rejection never carries partial state: nothing was changed.
    """

    code = "rejected"
    retryable = False


class IllegalTransitionError(TransitionRejected):
    """Raised when an action is not defined for the task's current status."""

    code = "illegal_transition"

    def __init__(self, status: TaskStatus | None, action: TaskAction) -> None:
        state = status.value if status is not None else "none"
        super().__init__(f"Action '{action.value}' is not allowed from status '{state}'")
        self.status = status
        self.action = action


class ForbiddenError(TransitionRejected):
    """Raised when the actor lacks the role or ownership the action requires."""

    code = "forbidden"


class InvalidDeadlineError(TransitionRejected):
    """Raised when a task is created with a deadline that is not in the future."""

    code = "invalid_deadline"

    def __init__(self, deadline: datetime, now: datetime) -> None:
        super().__init__(
            f"Deadline {deadline.isoformat()} must be later than {now.isoformat()}"
        )
        self.deadline = deadline
        self.now = now


class HierarchyViolationError(TransitionRejected):
    """Raised when the assignee is not strictly junior to the creator."""

    code = "hierarchy_violation"

    def __init__(self, creator_level: int, assignee_level: int) -> None:
        super().__init__(
            f"Role level {creator_level} cannot assign work to role level {assignee_level}"
        )
        self.creator_level = creator_level
        self.assignee_level = assignee_level


class ConflictingUpdateError(TransitionRejected):
    """Raised by the store when the task changed underneath the caller."""

    code = "conflicting_update"
    retryable = True

    def __init__(self, task_id: str, expected_status: TaskStatus | None = None) -> None:
        if expected_status is None:
            message = f"Task {task_id} was modified concurrently"
        else:
            message = f"Task {task_id} is no longer in status '{expected_status.value}'"
        super().__init__(message)
        self.task_id = task_id
        self.expected_status = expected_status
