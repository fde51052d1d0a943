"""Database models for courses.

Cassandra table definitions for:
- Courses: main table, indexed by publication flag
- Courses by owner: lookup for teacher ownership scoping
- Chapters: main table plus a per-course table clustered by position
- Quizzes: per-course table clustered by position

Chapters and quizzes share one position space within a course.
"""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID, uuid4


class ContentType(str, Enum):
    """Kind of item in a course curriculum."""

    CHAPTER = "chapter"
    QUIZ = "quiz"


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

COURSE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.courses (
    id UUID PRIMARY KEY,
    owner_id UUID,
    title TEXT,
    description TEXT,
    image_url TEXT,
    price DECIMAL,
    is_published BOOLEAN,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

COURSE_PUBLISHED_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS courses_is_published_idx
ON {keyspace}.courses (is_published)
"""

COURSES_BY_OWNER_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.courses_by_owner (
    owner_id UUID,
    course_id UUID,
    title TEXT,
    PRIMARY KEY (owner_id, course_id)
)
"""

CHAPTER_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.chapters (
    id UUID PRIMARY KEY,
    course_id UUID,
    title TEXT,
    description TEXT,
    video_url TEXT,
    position INT,
    is_published BOOLEAN,
    is_free BOOLEAN,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

# Denormalised copy of the fields needed to render and gate a curriculum
CHAPTERS_BY_COURSE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.chapters_by_course (
    course_id UUID,
    position INT,
    chapter_id UUID,
    title TEXT,
    is_published BOOLEAN,
    is_free BOOLEAN,
    PRIMARY KEY (course_id, position, chapter_id)
) WITH CLUSTERING ORDER BY (position ASC, chapter_id ASC)
"""

QUIZZES_BY_COURSE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.quizzes_by_course (
    course_id UUID,
    position INT,
    quiz_id UUID,
    title TEXT,
    description TEXT,
    is_published BOOLEAN,
    created_at TIMESTAMP,
    updated_at TIMESTAMP,
    PRIMARY KEY (course_id, position, quiz_id)
) WITH CLUSTERING ORDER BY (position ASC, quiz_id ASC)
"""

COURSES_TABLES_CQL = [
    COURSE_TABLE_CQL,
    COURSE_PUBLISHED_INDEX_CQL,
    COURSES_BY_OWNER_TABLE_CQL,
    CHAPTER_TABLE_CQL,
    CHAPTERS_BY_COURSE_TABLE_CQL,
    QUIZZES_BY_COURSE_TABLE_CQL,
]


def ensure_utc_aware(dt: datetime | None) -> datetime | None:
    """Ensure datetime is UTC-aware (Cassandra returns naive datetimes)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


# ==============================================================================
# Entity Classes
# ==============================================================================


class Course:
    """Course entity.

    Attributes:
        id: Unique identifier
        owner_id: Teacher or admin who owns the course
        title: Course title
        description: Course description
        image_url: Cover image
        price: Price (None for unpriced courses)
        is_published: Visible to learners
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    def __init__(
        self,
        id: UUID | None = None,
        owner_id: UUID | None = None,
        title: str = "",
        description: str | None = None,
        image_url: str | None = None,
        price: Decimal | None = None,
        is_published: bool = False,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self.id = id or uuid4()
        self.owner_id = owner_id
        self.title = title.strip()
        self.description = description
        self.image_url = image_url
        self.price = price
        self.is_published = bool(is_published)
        self.created_at = ensure_utc_aware(created_at) or datetime.now(UTC)
        self.updated_at = ensure_utc_aware(updated_at)

    @classmethod
    def from_row(cls, row: Any) -> "Course":
        """Create Course instance from Cassandra row."""
        return cls(
            id=row.id,
            owner_id=row.owner_id,
            title=row.title,
            description=row.description,
            image_url=row.image_url,
            price=row.price,
            is_published=row.is_published,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def __repr__(self) -> str:
        state = "published" if self.is_published else "draft"
        return f"<Course {self.title} ({state})>"


class Chapter:
    """Chapter entity, an ordered unit of a course.

    Attributes:
        id: Unique identifier
        course_id: Owning course
        title: Chapter title
        description: Chapter description
        video_url: Video location
        position: Ordering key, ascending = curriculum order
        is_published: Visible to learners
        is_free: Accessible without any purchase or grant
    """

    def __init__(
        self,
        id: UUID | None = None,
        course_id: UUID | None = None,
        title: str = "",
        description: str | None = None,
        video_url: str | None = None,
        position: int = 0,
        is_published: bool = False,
        is_free: bool = False,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self.id = id or uuid4()
        self.course_id = course_id
        self.title = title.strip()
        self.description = description
        self.video_url = video_url
        self.position = position
        self.is_published = bool(is_published)
        self.is_free = bool(is_free)
        self.created_at = ensure_utc_aware(created_at) or datetime.now(UTC)
        self.updated_at = ensure_utc_aware(updated_at)

    @classmethod
    def from_row(cls, row: Any) -> "Chapter":
        """Create Chapter instance from a ``chapters`` row."""
        return cls(
            id=row.id,
            course_id=row.course_id,
            title=row.title,
            description=row.description,
            video_url=row.video_url,
            position=row.position,
            is_published=row.is_published,
            is_free=row.is_free,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    @classmethod
    def from_course_row(cls, row: Any) -> "Chapter":
        """Create Chapter instance from a ``chapters_by_course`` row."""
        return cls(
            id=row.chapter_id,
            course_id=row.course_id,
            title=row.title,
            position=row.position,
            is_published=row.is_published,
            is_free=row.is_free,
        )

    def __repr__(self) -> str:
        return f"<Chapter {self.title} @{self.position}>"


class Quiz:
    """Quiz entity. Shares the position space of the course chapters."""

    def __init__(
        self,
        id: UUID | None = None,
        course_id: UUID | None = None,
        title: str = "",
        description: str | None = None,
        position: int = 0,
        is_published: bool = False,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self.id = id or uuid4()
        self.course_id = course_id
        self.title = title.strip()
        self.description = description
        self.position = position
        self.is_published = bool(is_published)
        self.created_at = ensure_utc_aware(created_at) or datetime.now(UTC)
        self.updated_at = ensure_utc_aware(updated_at)

    @classmethod
    def from_row(cls, row: Any) -> "Quiz":
        """Create Quiz instance from a ``quizzes_by_course`` row."""
        return cls(
            id=row.quiz_id,
            course_id=row.course_id,
            title=row.title,
            description=row.description,
            position=row.position,
            is_published=row.is_published,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def __repr__(self) -> str:
        return f"<Quiz {self.title} @{self.position}>"
