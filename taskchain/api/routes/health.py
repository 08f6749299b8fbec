from __future__ import annotations

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from taskchain.api.deps import get_db_session
from taskchain.core.config import get_settings
from taskchain.domain.services.roles import TOP_ADMINISTRATOR_LEVEL
from taskchain.infrastructure.db.models import ActorModel

router = APIRouter(tags=["Health"])
logger = structlog.get_logger()


async def check_database(session: AsyncSession) -> dict:
    try:
        await session.execute(text("SELECT 1"))
        return {"status": "ok"}
    except SQLAlchemyError as e:
        return {"status": "error", "message": str(e)[:100]}


async def check_roster(session: AsyncSession) -> dict:
    """Pending tasks can only be closed if a top administrator exists."""
    try:
        actors = await session.scalar(select(func.count(ActorModel.id)))
        admins = await session.scalar(
            select(func.count(ActorModel.id)).where(
                ActorModel.role_level == TOP_ADMINISTRATOR_LEVEL
            )
        )
    except SQLAlchemyError as e:
        return {"status": "error", "message": str(e)[:100]}
    return {
        "status": "ok" if admins else "missing_administrator",
        "actors": int(actors or 0),
    }


@router.get("/health", summary="Service health probe")
async def health_check(session: AsyncSession = Depends(get_db_session)) -> dict:  # noqa: B008
    settings = get_settings()

    database_status = await check_database(session)
    roster_status = (
        await check_roster(session) if database_status["status"] == "ok" else {"status": "skipped"}
    )
    healthy = database_status["status"] == "ok" and roster_status["status"] == "ok"

    payload = {
        "service": settings.app_name,
        "version": settings.version,
        "status": "ok" if healthy else "degraded",
        "timestamp": datetime.now(UTC).isoformat(),
        "datastores": {"database": database_status},
        "roster": roster_status,
    }
    await logger.ainfo("health_probe", status=payload["status"], roster=roster_status["status"])
    return payload
