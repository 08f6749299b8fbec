from __future__ import annotations

from datetime import datetime

from pydantic import AwareDatetime, BaseModel, Field
from taskchain.domain.models import DeadlineClass, TaskAction, TaskStatus


class TaskCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=10_000)
    deadline: AwareDatetime = Field(..., description="Must be strictly in the future")
    assignee_id: str = Field(..., min_length=1)


class TaskTransitionRequest(BaseModel):
    action: TaskAction = Field(..., description="submit, approve, reject or remind")
    expected_status: TaskStatus | None = Field(
        None,
        description="Status the client last saw; a mismatch is reported as a conflict",
    )


class TaskItem(BaseModel):
    id: str
    title: str
    description: str
    deadline: datetime
    assignee_id: str
    creator_id: str
    status: TaskStatus
    created_at: datetime
    deadline_class: DeadlineClass | None = Field(
        None, description="Derived at request time; absent for completed tasks"
    )
    allowed_actions: list[TaskAction] = Field(default_factory=list)


class TaskListResponse(BaseModel):
    mode: str
    items: list[TaskItem]


class NotificationPayload(BaseModel):
    recipient_id: str
    title: str
    message: str
    category: str
    created_at: datetime


class TaskTransitionResponse(BaseModel):
    task: TaskItem
    notifications: list[NotificationPayload] = Field(default_factory=list)
