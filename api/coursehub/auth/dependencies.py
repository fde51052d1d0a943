"""FastAPI dependencies for authentication.

Provides dependency injection for:
- Current user extraction from the bearer token
- Optional authentication for public endpoints
- Role-based access control
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError
from pydantic import ValidationError

from coursehub.auth.permissions import UserRole
from coursehub.auth.schemas import Identity
from coursehub.auth.security import decode_access_token
from coursehub.core.context import set_identity


def get_token_from_header(request: Request) -> str | None:
    """Extract Bearer token from Authorization header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    expected_parts = 2
    parts = auth_header.split()
    if len(parts) != expected_parts or parts[0].lower() != "bearer":
        return None

    return parts[1]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def identity_from_token(token: str) -> Identity:
    """Decode a token into an ``Identity`` and bind it to the log context.

    Raises:
        JWTError: If the token or its claims are invalid.
    """
    payload = decode_access_token(token)
    try:
        identity = Identity(
            id=payload["sub"],
            email=payload.get("email", ""),
            role=payload["role"],
        )
    except ValidationError as e:
        raise JWTError("Invalid identity claims") from e

    set_identity(identity.id, identity.role.value)
    return identity


async def get_current_user(
    token: Annotated[str | None, Depends(get_token_from_header)],
) -> Identity:
    """Get the authenticated caller.

    Raises:
        HTTPException(401): If the token is missing, invalid or expired.
    """
    if not token:
        raise _unauthorized("Access token not provided")

    try:
        return identity_from_token(token)
    except JWTError as e:
        raise _unauthorized("Invalid or expired token") from e


async def get_current_user_optional(
    token: Annotated[str | None, Depends(get_token_from_header)],
) -> Identity | None:
    """Get the caller if authenticated, None otherwise.

    Invalid tokens are treated as anonymous so public pages keep working.
    """
    if not token:
        return None

    try:
        return identity_from_token(token)
    except JWTError:
        return None


def require_role(*allowed_roles: UserRole):
    """Create dependency requiring one of the given roles (exact match).

    Example:
        @router.get("/admin-only")
        async def admin_endpoint(
            user: Annotated[Identity, Depends(require_role(UserRole.ADMIN))]
        ):
            ...
    """

    async def role_checker(
        user: Annotated[Identity, Depends(get_current_user)],
    ) -> Identity:
        if user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return role_checker


# ==============================================================================
# Type Aliases
# ==============================================================================

OptionalUser = Annotated[Identity | None, Depends(get_current_user_optional)]

AdminUser = Annotated[Identity, Depends(require_role(UserRole.ADMIN))]

# Teacher routes are scoped to owned courses; admins use the admin routes
TeacherUser = Annotated[Identity, Depends(require_role(UserRole.TEACHER))]
