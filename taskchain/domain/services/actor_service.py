"""Actor roster: who exists, and at which role level."""

from __future__ import annotations

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskchain.core.config import Settings, get_settings
from taskchain.domain.errors import ForbiddenError
from taskchain.domain.models import Actor
from taskchain.domain.services.roles import (
    can_manage_roster,
    is_top_administrator,
    validate_role_level,
)
from taskchain.infrastructure.repositories import ActorRepository

logger = structlog.get_logger()


class ActorNotFoundError(Exception):
    """Raised when an actor is not in the roster."""


class ActorExistsError(Exception):
    """Raised when registering an actor id that is already taken."""


class ActorService:
    def __init__(self, session: AsyncSession, *, settings: Settings | None = None) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self.actors = ActorRepository(session)

    async def list_roster(self) -> list[Actor]:
        return await self.actors.list_all()

    async def get_actor(self, actor_id: str) -> Actor:
        actor = await self.actors.get(actor_id)
        if actor is None:
            raise ActorNotFoundError(f"Actor {actor_id} not found")
        return actor

    async def register_actor(
        self,
        registrar: Actor,
        *,
        actor_id: str,
        display_name: str,
        role_level: int,
    ) -> Actor:
        """Add a staff member to the roster. Top administrator only.

        Raises ``InvalidRoleLevelError`` for levels outside the staff range.
        """
        if not can_manage_roster(registrar):
            raise ForbiddenError("Only the top administrator can register actors")
        validate_role_level(
            role_level, max_level=self.settings.max_role_level, allow_administrator=False
        )

        actor = Actor(actor_id=actor_id, display_name=display_name.strip(), role_level=role_level)
        self.actors.add(actor)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            await logger.awarning("actor_register_duplicate", actor_id=actor_id)
            raise ActorExistsError(f"Actor {actor_id} already exists") from exc

        await logger.ainfo(
            "actor_registered",
            actor_id=actor_id,
            role_level=role_level,
            registrar_id=registrar.actor_id,
        )
        return actor

    async def update_actor(
        self,
        registrar: Actor,
        actor_id: str,
        *,
        display_name: str | None = None,
        role_level: int | None = None,
    ) -> Actor:
        """Rename a roster entry or move it to another staff level.

        Existing tasks keep their assignment; the hierarchy is checked when a
        task is created, not retroactively.
        """
        if not can_manage_roster(registrar):
            raise ForbiddenError("Only the top administrator can update actors")
        if role_level is not None:
            validate_role_level(
                role_level, max_level=self.settings.max_role_level, allow_administrator=False
            )

        current = await self.get_actor(actor_id)
        if role_level is not None and is_top_administrator(current):
            raise ForbiddenError("The top administrator's role level cannot be changed")

        updated = await self.actors.update(
            actor_id,
            display_name=display_name.strip() if display_name is not None else None,
            role_level=role_level,
        )
        await self.session.commit()

        await logger.ainfo(
            "actor_updated",
            actor_id=actor_id,
            role_level=updated.role_level,
            previous_role_level=current.role_level,
            registrar_id=registrar.actor_id,
        )
        return updated
