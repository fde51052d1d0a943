"""Database models for users.

Users are created by the identity provider; this service reads them to scope
grants and to build catalogue owner summaries.
"""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from coursehub.auth.permissions import UserRole


USER_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.users (
    id UUID PRIMARY KEY,
    name TEXT,
    email TEXT,
    phone TEXT,
    image_url TEXT,
    role TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

USER_EMAIL_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS users_email_idx ON {keyspace}.users (email)
"""

USERS_TABLES_CQL = [
    USER_TABLE_CQL,
    USER_EMAIL_INDEX_CQL,
]


def ensure_utc_aware(dt: datetime | None) -> datetime | None:
    """Ensure datetime is UTC-aware (Cassandra returns naive datetimes)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


class User:
    """User entity.

    Attributes:
        id: Unique identifier
        name: Display name
        email: Email address (lower-cased)
        phone: Phone number
        image_url: Avatar URL
        role: ``UserRole`` value
        created_at: Account creation timestamp
    """

    def __init__(
        self,
        id: UUID | None = None,
        name: str = "",
        email: str = "",
        phone: str | None = None,
        image_url: str | None = None,
        role: str = UserRole.USER.value,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self.id = id or uuid4()
        self.name = name or ""
        self.email = (email or "").lower().strip()
        self.phone = phone
        self.image_url = image_url
        self.role = role
        self.created_at = ensure_utc_aware(created_at) or datetime.now(UTC)
        self.updated_at = ensure_utc_aware(updated_at)

    @classmethod
    def from_row(cls, row: Any) -> "User":
        """Create User instance from Cassandra row."""
        return cls(
            id=row.id,
            name=row.name,
            email=row.email,
            phone=getattr(row, "phone", None),
            image_url=getattr(row, "image_url", None),
            role=row.role,
            created_at=row.created_at,
            updated_at=getattr(row, "updated_at", None),
        )

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
