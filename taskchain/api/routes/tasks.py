from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from taskchain.api.deps import get_current_actor, get_db_session
from taskchain.api.errors import not_found, rejection_to_http
from taskchain.api.schemas.tasks import (
    NotificationPayload,
    TaskCreateRequest,
    TaskItem,
    TaskListResponse,
    TaskTransitionRequest,
    TaskTransitionResponse,
)
from taskchain.domain.errors import TransitionRejected
from taskchain.domain.models import Actor, TaskDraft, TransitionOutcome, VisibilityMode
from taskchain.domain.services.task_service import (
    AssigneeNotFoundError,
    TaskNotFoundError,
    TaskService,
    TaskView,
)

router = APIRouter(prefix="/tasks", tags=["Tasks"])


def _to_item(view: TaskView) -> TaskItem:
    task = view.task
    return TaskItem(
        id=task.task_id,
        title=task.title,
        description=task.description,
        deadline=task.deadline,
        assignee_id=task.assignee_id,
        creator_id=task.creator_id,
        status=task.status,
        created_at=task.created_at,
        deadline_class=view.deadline_class,
        allowed_actions=view.allowed_actions,
    )


def _to_response(
    service: TaskService, actor: Actor, outcome: TransitionOutcome
) -> TaskTransitionResponse:
    return TaskTransitionResponse(
        task=_to_item(service.present(actor, outcome.task)),
        notifications=[
            NotificationPayload(
                recipient_id=n.recipient_id,
                title=n.title,
                message=n.message,
                category=n.category.value,
                created_at=n.created_at,
            )
            for n in outcome.notifications
        ],
    )


@router.get("", response_model=TaskListResponse, summary="List visible tasks")
async def list_tasks(
    mode: VisibilityMode = Query(VisibilityMode.ACTIVE),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),
    actor: Actor = Depends(get_current_actor),
) -> TaskListResponse:
    """Active (not completed) or history (completed) tasks the caller may see, newest first."""
    views = await TaskService(session).list_tasks(actor, mode)
    return TaskListResponse(mode=mode.value, items=[_to_item(v) for v in views])


@router.post(
    "",
    response_model=TaskTransitionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Assign a new task",
)
async def create_task(
    payload: TaskCreateRequest,
    session: AsyncSession = Depends(get_db_session),
    actor: Actor = Depends(get_current_actor),
) -> TaskTransitionResponse:
    service = TaskService(session)
    draft = TaskDraft(
        title=payload.title,
        description=payload.description,
        deadline=payload.deadline,
        assignee_id=payload.assignee_id,
    )
    try:
        outcome = await service.create_task(actor, draft)
    except AssigneeNotFoundError as exc:
        raise not_found(exc) from exc
    except TransitionRejected as exc:
        raise rejection_to_http(exc) from exc

    return _to_response(service, actor, outcome)


@router.get("/{task_id}", response_model=TaskItem, summary="Get a single task")
async def get_task(
    task_id: str,
    session: AsyncSession = Depends(get_db_session),
    actor: Actor = Depends(get_current_actor),
) -> TaskItem:
    try:
        view = await TaskService(session).get_task(actor, task_id)
    except TaskNotFoundError as exc:
        raise not_found(exc) from exc
    except TransitionRejected as exc:
        raise rejection_to_http(exc) from exc
    return _to_item(view)


@router.post(
    "/{task_id}/transitions",
    response_model=TaskTransitionResponse,
    summary="Submit, approve, reject or remind",
)
async def transition_task(
    task_id: str,
    payload: TaskTransitionRequest,
    session: AsyncSession = Depends(get_db_session),
    actor: Actor = Depends(get_current_actor),
) -> TaskTransitionResponse:
    """
    Apply a lifecycle action to a task.

    - 403: the caller lacks the role or ownership the action requires
    - 409: the action is not valid for the current status, or the task changed
      since ``expected_status`` was read (``retryable`` is true in that case)
    """
    service = TaskService(session)
    try:
        outcome = await service.transition(
            actor,
            task_id=task_id,
            action=payload.action,
            expected_status=payload.expected_status,
        )
    except TaskNotFoundError as exc:
        raise not_found(exc) from exc
    except TransitionRejected as exc:
        raise rejection_to_http(exc) from exc

    return _to_response(service, actor, outcome)
