from __future__ import annotations

from datetime import UTC, datetime, timedelta

from taskchain.api.deps import issue_smoke_token
from taskchain.domain.models import Actor, Task, TaskStatus

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)

ADMIN = Actor(actor_id="admin-1", display_name="Ada Admin", role_level=0)
MANAGER = Actor(actor_id="manager-1", display_name="Max Manager", role_level=1)
LEAD = Actor(actor_id="lead-1", display_name="Lee Lead", role_level=2)
STAFF = Actor(actor_id="staff-1", display_name="Sam Staff", role_level=3)
OTHER_STAFF = Actor(actor_id="staff-2", display_name="Ola Other", role_level=3)

ROSTER = (ADMIN, MANAGER, LEAD, STAFF, OTHER_STAFF)


def auth_headers(actor: Actor) -> dict[str, str]:
    token = issue_smoke_token(actor)
    return {"Authorization": f"Bearer {token}"}


def make_task(
    *,
    task_id: str = "task-1",
    creator: Actor = MANAGER,
    assignee: Actor = STAFF,
    status: TaskStatus = TaskStatus.NEW,
    title: str = "Quarterly stock count",
    deadline: datetime | None = None,
    created_at: datetime | None = None,
) -> Task:
    return Task(
        task_id=task_id,
        title=title,
        description="",
        deadline=deadline or NOW + timedelta(days=5),
        assignee_id=assignee.actor_id,
        creator_id=creator.actor_id,
        status=status,
        created_at=created_at or NOW - timedelta(days=1),
    )


def future(hours: float = 1) -> str:
    """ISO timestamp ``hours`` from the real current time."""
    return (datetime.now(UTC) + timedelta(hours=hours)).isoformat()
