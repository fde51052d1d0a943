"""Authentication: token validation and role checks."""

from coursehub.auth.dependencies import (
    AdminUser,
    OptionalUser,
    TeacherUser,
    require_role,
)
from coursehub.auth.permissions import UserRole
from coursehub.auth.schemas import Identity


__all__ = [
    "AdminUser",
    "Identity",
    "OptionalUser",
    "TeacherUser",
    "UserRole",
    "require_role",
]
