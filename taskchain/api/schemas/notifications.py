from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class NotificationItem(BaseModel):
    id: str
    task_id: str | None = None
    title: str
    message: str
    category: str
    read: bool
    created_at: datetime


class NotificationFeedResponse(BaseModel):
    items: list[NotificationItem]
    unread_count: int


class MarkAllReadResponse(BaseModel):
    updated: int
