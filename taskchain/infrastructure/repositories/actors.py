from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskchain.domain.models import Actor
from taskchain.infrastructure.db.models import ActorModel


def to_actor(row: ActorModel) -> Actor:
    return Actor(actor_id=row.id, display_name=row.display_name, role_level=row.role_level)


class ActorRepository:
    """Read/write access to the actor roster."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, actor_id: str) -> Actor | None:
        row = await self.session.get(ActorModel, actor_id)
        return to_actor(row) if row is not None else None

    async def list_all(self) -> list[Actor]:
        stmt = select(ActorModel).order_by(ActorModel.role_level, ActorModel.display_name)
        result = await self.session.execute(stmt)
        return [to_actor(row) for row in result.scalars()]

    def add(self, actor: Actor) -> None:
        self.session.add(
            ActorModel(
                id=actor.actor_id,
                display_name=actor.display_name,
                role_level=actor.role_level,
            )
        )


    async def update(
        self,
        actor_id: str,
        *,
        display_name: str | None = None,
        role_level: int | None = None,
    ) -> Actor | None:
        row = await self.session.get(ActorModel, actor_id)
        if row is None:
            return None
        if display_name is not None:
            row.display_name = display_name
        if role_level is not None:
            row.role_level = role_level
        return to_actor(row)
