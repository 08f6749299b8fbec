#!/usr/bin/env python3
"""
Seed a development roster: one top administrator and a few staff members.

Run with:
    poetry run python scripts/seed_roster.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import asyncio  # noqa: E402

from sqlalchemy import select  # noqa: E402

from taskchain.infrastructure.db.models import ActorModel  # noqa: E402
from taskchain.infrastructure.db.session import dispose_engine, session_scope  # noqa: E402

ROSTER = [
    {"id": "admin", "display_name": "Administrator", "role_level": 0},
    {"id": "staff-1", "display_name": "Staff One", "role_level": 1},
    {"id": "staff-2", "display_name": "Staff Two", "role_level": 2},
    {"id": "staff-3", "display_name": "Staff Three", "role_level": 3},
]


async def seed() -> None:
    async with session_scope() as session:
        existing = set((await session.execute(select(ActorModel.id))).scalars())
        added = 0
        for entry in ROSTER:
            if entry["id"] in existing:
                print(f"  skip  {entry['id']} (already present)")
                continue
            session.add(ActorModel(**entry))
            added += 1
            print(f"  add   {entry['id']} level={entry['role_level']}")
    await dispose_engine()
    print(f"Done: {added} actor(s) added")


if __name__ == "__main__":
    asyncio.run(seed())
