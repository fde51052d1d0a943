"""Role-based access control for CourseHub.

Roles form a closed set:
- ADMIN: manages every course, user and grant
- TEACHER: manages chapter grants on the courses they own
- USER: learner; consumes content through purchases and chapter grants
"""

from enum import Enum


class UserRole(str, Enum):
    """User roles."""

    USER = "user"
    TEACHER = "teacher"
    ADMIN = "admin"


def parse_role(role: UserRole | str) -> UserRole | None:
    """Parse a role claim, returning None for values outside the enum.

    Claims are matched case-insensitively: tokens issued with ``"ADMIN"``
    and ``"admin"`` carry the same role.
    """
    if isinstance(role, UserRole):
        return role
    try:
        return UserRole(role.lower())
    except (AttributeError, ValueError):
        return None


def is_learner(role: UserRole | str) -> bool:
    """Check if role is USER, the only role that receives content grants."""
    return parse_role(role) is UserRole.USER
