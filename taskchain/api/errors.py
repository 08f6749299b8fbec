from __future__ import annotations

from fastapi import HTTPException, status
from taskchain.domain.errors import (
    ConflictingUpdateError,
    ForbiddenError,
    HierarchyViolationError,
    IllegalTransitionError,
    InvalidDeadlineError,
    TransitionRejected,
)

# Policy violations are explained to the user; the rest signal a stale client.
_STATUS_BY_REJECTION: dict[type[TransitionRejected], int] = {
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    HierarchyViolationError: status.HTTP_403_FORBIDDEN,
    IllegalTransitionError: status.HTTP_409_CONFLICT,
    ConflictingUpdateError: status.HTTP_409_CONFLICT,
    InvalidDeadlineError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def rejection_to_http(exc: TransitionRejected) -> HTTPException:
    status_code = _STATUS_BY_REJECTION.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return HTTPException(
        status_code=status_code,
        detail={"code": exc.code, "message": str(exc), "retryable": exc.retryable},
    )


def not_found(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
