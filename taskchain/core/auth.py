from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from taskchain.core.config import get_settings
from taskchain.domain.services.roles import InvalidRoleLevelError, validate_role_level


class TokenError(Exception):
    """Raised when a token cannot be decoded or validated."""


def create_access_token(
    subject: str,
    *,
    role_level: int,
    display_name: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Generate a signed JWT shaped like the identity provider's tokens.

    Production tokens are minted by the identity provider; this helper exists
    for smoke testing and the test-suite.
    """
    settings = get_settings()

    try:
        validate_role_level(role_level, max_level=settings.max_role_level)
    except InvalidRoleLevelError as exc:
        raise TokenError(str(exc)) from exc

    now = datetime.now(UTC)
    ttl = expires_delta or timedelta(seconds=settings.access_token_ttl_seconds)
    payload: dict[str, Any] = {
        "sub": subject,
        "role_level": role_level,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
        "iss": settings.jwt_issuer or settings.app_name,
    }

    if display_name:
        payload["name"] = display_name

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT access token."""
    settings = get_settings()

    options: dict[str, Any] = {"require": ["sub", "role_level", "exp"]}
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
            options=options,
        )
    except jwt.PyJWTError as exc:  # pragma: no cover - third-party raises numerous subclasses
        raise TokenError("Invalid token") from exc

    return payload
