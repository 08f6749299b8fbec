from datetime import timedelta

import pytest
from taskchain.core.auth import TokenError, create_access_token, decode_access_token


def test_create_and_decode_token_roundtrip() -> None:
    token = create_access_token("user-123", role_level=2, display_name="Jo Doe")

    payload = decode_access_token(token)

    assert payload["sub"] == "user-123"
    assert payload["role_level"] == 2
    assert payload["name"] == "Jo Doe"


def test_expired_token_rejected() -> None:
    token = create_access_token("user-123", role_level=1, expires_delta=timedelta(seconds=-5))

    with pytest.raises(TokenError):
        decode_access_token(token)


def test_token_with_foreign_signature_rejected() -> None:
    header, payload, _ = create_access_token("user-123", role_level=1).split(".")
    foreign_signature = create_access_token("someone-else", role_level=0).split(".")[2]

    with pytest.raises(TokenError):
        decode_access_token(f"{header}.{payload}.{foreign_signature}")


@pytest.mark.parametrize("level", [-1, True, 99, "0"])
def test_invalid_role_level_refused_at_issue(level: int) -> None:
    with pytest.raises(TokenError):
        create_access_token("user-123", role_level=level)
