"""Pydantic schemas for user listing."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from coursehub.users.models import User


class UserResponse(BaseModel):
    """User as shown to administrators."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    phone: str | None = None
    image_url: str | None = None
    role: str
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        """Create response from User model."""
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            image_url=user.image_url,
            role=user.role,
            created_at=user.created_at,
        )


class UserListResponse(BaseModel):
    """Paginated list of users."""

    users: list[UserResponse]
    total: int = Field(..., ge=0)
    has_more: bool
