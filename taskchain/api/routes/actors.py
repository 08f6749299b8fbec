from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from taskchain.api.deps import get_current_actor, get_db_session
from taskchain.api.errors import not_found, rejection_to_http
from taskchain.api.schemas.actors import ActorItem, ActorRegisterRequest, ActorUpdateRequest
from taskchain.domain.errors import TransitionRejected
from taskchain.domain.models import Actor
from taskchain.domain.services.actor_service import (
    ActorExistsError,
    ActorNotFoundError,
    ActorService,
)
from taskchain.domain.services.roles import InvalidRoleLevelError, role_title
from taskchain.domain.services.task_service import TaskService

router = APIRouter(prefix="/actors", tags=["Actors"])


def _to_item(actor: Actor) -> ActorItem:
    return ActorItem(
        id=actor.actor_id,
        display_name=actor.display_name,
        role_level=actor.role_level,
        role_title=role_title(actor.role_level),
    )


@router.get("", response_model=list[ActorItem], summary="List the actor roster")
async def list_actors(
    session: AsyncSession = Depends(get_db_session),
    actor: Actor = Depends(get_current_actor),
) -> list[ActorItem]:
    roster = await ActorService(session).list_roster()
    return [_to_item(a) for a in roster]


@router.get(
    "/assignable",
    response_model=list[ActorItem],
    summary="Actors the caller may assign work to",
)
async def list_assignable_actors(
    session: AsyncSession = Depends(get_db_session),
    actor: Actor = Depends(get_current_actor),
) -> list[ActorItem]:
    """Strictly junior actors, ordered by name. Empty for the most junior level."""
    assignees = await TaskService(session).eligible_assignees(actor)
    return [_to_item(a) for a in assignees]


@router.post(
    "",
    response_model=ActorItem,
    status_code=status.HTTP_201_CREATED,
    summary="Register a staff member",
)
async def register_actor(
    payload: ActorRegisterRequest,
    session: AsyncSession = Depends(get_db_session),
    actor: Actor = Depends(get_current_actor),
) -> ActorItem:
    service = ActorService(session)
    try:
        created = await service.register_actor(
            actor,
            actor_id=payload.id,
            display_name=payload.display_name,
            role_level=payload.role_level,
        )
    except TransitionRejected as exc:
        raise rejection_to_http(exc) from exc
    except InvalidRoleLevelError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except ActorExistsError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    return _to_item(created)


@router.patch("/{actor_id}", response_model=ActorItem, summary="Update a staff member")
async def update_actor(
    actor_id: str,
    payload: ActorUpdateRequest,
    session: AsyncSession = Depends(get_db_session),
    actor: Actor = Depends(get_current_actor),
) -> ActorItem:
    """Change a roster entry's display name and/or staff level. Top administrator only."""
    try:
        updated = await ActorService(session).update_actor(
            actor,
            actor_id,
            display_name=payload.display_name,
            role_level=payload.role_level,
        )
    except ActorNotFoundError as exc:
        raise not_found(exc) from exc
    except TransitionRejected as exc:
        raise rejection_to_http(exc) from exc
    except InvalidRoleLevelError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc

    return _to_item(updated)
