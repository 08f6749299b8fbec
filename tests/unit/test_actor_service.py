from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from taskchain.domain.errors import ForbiddenError
from taskchain.domain.services.actor_service import (
    ActorExistsError,
    ActorNotFoundError,
    ActorService,
)
from taskchain.domain.services.roles import InvalidRoleLevelError

from tests.utils import ADMIN, LEAD, MANAGER, ROSTER, STAFF


@pytest.mark.asyncio
async def test_roster_ordered_by_level_then_name(db: AsyncSession) -> None:
    roster = await ActorService(db).list_roster()

    assert [a.actor_id for a in roster] == ["admin-1", "manager-1", "lead-1", "staff-2", "staff-1"]
    assert set(roster) == set(ROSTER)


@pytest.mark.asyncio
async def test_get_actor(db: AsyncSession) -> None:
    service = ActorService(db)

    assert await service.get_actor("manager-1") == MANAGER
    with pytest.raises(ActorNotFoundError):
        await service.get_actor("nobody")


@pytest.mark.asyncio
async def test_admin_registers_staff(db: AsyncSession) -> None:
    service = ActorService(db)

    actor = await service.register_actor(
        ADMIN, actor_id="staff-9", display_name="  Nia New ", role_level=2
    )

    assert actor.display_name == "Nia New"
    assert await service.get_actor("staff-9") == actor


@pytest.mark.asyncio
async def test_only_admin_registers(db: AsyncSession) -> None:
    with pytest.raises(ForbiddenError):
        await ActorService(db).register_actor(
            MANAGER, actor_id="staff-9", display_name="Nia New", role_level=2
        )


@pytest.mark.asyncio
@pytest.mark.parametrize("level", [0, 4, -1])
async def test_register_rejects_levels_outside_staff_range(db: AsyncSession, level: int) -> None:
    with pytest.raises(InvalidRoleLevelError):
        await ActorService(db).register_actor(
            ADMIN, actor_id="staff-9", display_name="Nia New", role_level=level
        )


@pytest.mark.asyncio
async def test_register_duplicate_id(db: AsyncSession) -> None:
    service = ActorService(db)

    with pytest.raises(ActorExistsError):
        await service.register_actor(
            ADMIN, actor_id="manager-1", display_name="Copy", role_level=1
        )

    assert await service.get_actor("manager-1") == MANAGER


@pytest.mark.asyncio
async def test_admin_updates_name_and_level(db: AsyncSession) -> None:
    service = ActorService(db)

    updated = await service.update_actor(
        ADMIN, STAFF.actor_id, display_name=" Sam Senior ", role_level=2
    )

    assert updated.display_name == "Sam Senior"
    assert updated.role_level == 2
    assert await service.get_actor(STAFF.actor_id) == updated


@pytest.mark.asyncio
async def test_partial_update_keeps_other_fields(db: AsyncSession) -> None:
    service = ActorService(db)

    updated = await service.update_actor(ADMIN, LEAD.actor_id, role_level=1)

    assert updated.display_name == LEAD.display_name
    assert updated.role_level == 1


@pytest.mark.asyncio
async def test_only_admin_updates(db: AsyncSession) -> None:
    with pytest.raises(ForbiddenError):
        await ActorService(db).update_actor(MANAGER, STAFF.actor_id, display_name="Renamed")

    assert await ActorService(db).get_actor(STAFF.actor_id) == STAFF


@pytest.mark.asyncio
async def test_update_unknown_actor(db: AsyncSession) -> None:
    with pytest.raises(ActorNotFoundError):
        await ActorService(db).update_actor(ADMIN, "nobody", display_name="Ghost")


@pytest.mark.asyncio
@pytest.mark.parametrize("level", [0, 4])
async def test_update_rejects_levels_outside_staff_range(db: AsyncSession, level: int) -> None:
    with pytest.raises(InvalidRoleLevelError):
        await ActorService(db).update_actor(ADMIN, STAFF.actor_id, role_level=level)


@pytest.mark.asyncio
async def test_administrator_level_is_fixed(db: AsyncSession) -> None:
    service = ActorService(db)

    with pytest.raises(ForbiddenError):
        await service.update_actor(ADMIN, ADMIN.actor_id, role_level=1)

    renamed = await service.update_actor(ADMIN, ADMIN.actor_id, display_name="Ada Owner")
    assert renamed.role_level == ADMIN.role_level
