"""FastAPI dependencies for users."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from coursehub.users.service import UserService


def get_user_service(request: Request) -> UserService:
    """Get UserService instance from app state."""
    service = getattr(request.app.state, "user_service", None)
    if service is None:
        msg = "UserService not configured"
        raise RuntimeError(msg)
    return service


UserServiceDep = Annotated[UserService, Depends(get_user_service)]


def get_user_service_optional(request: Request) -> UserService | None:
    """Get UserService if the store came up, otherwise None."""
    return getattr(request.app.state, "user_service", None)


OptionalUserServiceDep = Annotated[UserService | None, Depends(get_user_service_optional)]


def handle_user_error(error: Exception) -> HTTPException:
    """Convert user errors to HTTPException."""
    status_map = {
        "user_not_found": status.HTTP_404_NOT_FOUND,
    }

    code = getattr(error, "code", "user_error")
    message = getattr(error, "message", str(error))

    return HTTPException(
        status_code=status_map.get(code, status.HTTP_400_BAD_REQUEST),
        detail=message,
    )
