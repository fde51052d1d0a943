"""Chapter access models and Cassandra schema.

A ChapterAccess row is an explicit grant of one chapter to one user. Its
existence is the only thing the access policy reads; ``granted_by`` and
``created_at`` are kept for auditing.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID


if TYPE_CHECKING:
    from cassandra.cluster import Row


# A chapter belongs to exactly one course, so the key is unique per
# (user, chapter) and a user's grants for one course share a slice.
CHAPTER_ACCESS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.chapter_access (
    user_id UUID,
    course_id UUID,
    chapter_id UUID,
    granted_by UUID,
    created_at TIMESTAMP,
    PRIMARY KEY ((user_id), course_id, chapter_id)
) WITH CLUSTERING ORDER BY (course_id ASC, chapter_id ASC)
"""

CHAPTER_ACCESS_TABLES_CQL = [
    CHAPTER_ACCESS_TABLE_CQL,
]


def ensure_utc_aware(dt: datetime | None) -> datetime | None:
    """Ensure datetime is UTC-aware."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


@dataclass
class ChapterAccess:
    """Explicit per-user, per-chapter grant."""

    user_id: UUID
    course_id: UUID
    chapter_id: UUID
    granted_by: UUID | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_row(cls, row: "Row") -> "ChapterAccess":
        """Create instance from Cassandra row."""
        return cls(
            user_id=row.user_id,
            course_id=row.course_id,
            chapter_id=row.chapter_id,
            granted_by=row.granted_by,
            created_at=ensure_utc_aware(row.created_at) or datetime.now(UTC),
        )
