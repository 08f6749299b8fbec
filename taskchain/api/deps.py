from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from taskchain.core.auth import TokenError, create_access_token, decode_access_token
from taskchain.core.config import get_settings
from taskchain.domain.models import Actor
from taskchain.domain.services.roles import InvalidRoleLevelError, validate_role_level
from taskchain.infrastructure.db.session import get_session

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_actor(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> Actor:
    """Resolve the acting principal from the identity provider's bearer token."""
    if credentials is None:
        raise _unauthorized("Missing bearer token")

    try:
        payload = decode_access_token(credentials.credentials)
    except TokenError as exc:
        raise _unauthorized(str(exc)) from exc

    actor_id = payload.get("sub")
    if not actor_id:
        raise _unauthorized("Token missing subject")

    try:
        role_level = validate_role_level(
            payload["role_level"], max_level=get_settings().max_role_level
        )
    except InvalidRoleLevelError as exc:
        raise _forbidden(str(exc)) from exc

    return Actor(
        actor_id=actor_id,
        display_name=payload.get("name") or actor_id,
        role_level=role_level,
    )


def issue_smoke_token(actor: Actor) -> str:
    """Generate a signed token for manual smoke testing."""
    return create_access_token(
        actor.actor_id, role_level=actor.role_level, display_name=actor.display_name
    )


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
