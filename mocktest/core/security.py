"""Security utilities: JWT access tokens issued by the auth provider."""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

import jwt

from mocktest.core.config import settings


def create_access_token(user_id: str, role: str, name: str | None = None) -> str:
    """Create a JWT access token (used by the auth provider and test tooling)."""
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": expire,
        "jti": str(uuid4()),
        "type": "access",
    }
    if name:
        payload["name"] = name

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def verify_access_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT access token."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
        if payload.get("type") != "access":
            raise jwt.InvalidTokenError("Token is not an access token")
        return payload
    except jwt.ExpiredSignatureError:
        raise jwt.InvalidTokenError("Token has expired") from None
    except jwt.InvalidTokenError as e:
        raise jwt.InvalidTokenError(f"Invalid token: {e}") from e


def create_attempt_token(
    user_id: str,
    test_id: str,
    seed: int,
    start_time: datetime,
    ttl_minutes: int,
) -> str:
    """Sign the facts of an issued attempt: who, which test, shuffle seed, start time."""
    payload = {
        "sub": str(user_id),
        "test_id": str(test_id),
        "seed": seed,
        "start_time": start_time.isoformat(),
        "iat": start_time,
        "exp": start_time + timedelta(minutes=ttl_minutes),
        "type": "attempt",
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def verify_attempt_token(token: str) -> dict[str, Any]:
    """Verify and decode an attempt token."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except jwt.ExpiredSignatureError:
        raise jwt.InvalidTokenError("Attempt token has expired") from None
    if payload.get("type") != "attempt":
        raise jwt.InvalidTokenError("Token is not an attempt token")
    return payload
