"""FastAPI dependencies for authentication and authorization."""

from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from mocktest.core.app_exceptions import AuthorizationError
from mocktest.core.security import verify_access_token


class UserRole(str, PyEnum):
    """Roles carried in access tokens."""

    STUDENT = "student"
    ADMIN = "admin"


@dataclass(frozen=True)
class CurrentUser:
    """Trusted identity of the caller, as asserted by the auth provider."""

    id: UUID
    role: UserRole
    name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
) -> CurrentUser:
    """Dependency to get the current authenticated user from JWT token."""
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing",
        )

    # Extract token from "Bearer <token>"
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("Invalid authorization scheme")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format. Expected: Bearer <token>",
        ) from None

    try:
        payload = verify_access_token(token)
        user_id = UUID(payload["sub"])
        role = UserRole(payload["role"])
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid or expired token: {str(e)}",
        ) from e

    return CurrentUser(id=user_id, role=role, name=payload.get("name"))


def require_roles(*allowed_roles: UserRole):
    """Dependency factory to require specific roles."""

    def role_checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in allowed_roles:
            raise AuthorizationError(
                f"Access denied. Required roles: {[r.value for r in allowed_roles]}"
            )
        return current_user

    return role_checker


require_admin = require_roles(UserRole.ADMIN)
