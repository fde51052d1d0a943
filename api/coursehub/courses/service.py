# ruff: noqa: S608 - All CQL queries use keyspace from config, not user input
"""Course service layer.

Business logic for:
- Course, chapter and quiz lookups with publication checks
- Ownership lookups for teacher scoping
- Public catalogue assembly
- Minimal authoring writes (course, chapter, quiz creation)
"""

import asyncio
from typing import TYPE_CHECKING
from uuid import UUID

from coursehub.core.logging import get_logger
from coursehub.courses.models import Chapter, Course, Quiz
from coursehub.courses.schemas import (
    CatalogueCourseResponse,
    CreateChapterRequest,
    CreateCourseRequest,
    CreateQuizRequest,
    OwnerSummary,
)


if TYPE_CHECKING:
    from cassandra.cluster import Session

    from coursehub.users.service import UserService


logger = get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class CourseError(Exception):
    """Base course error."""

    def __init__(self, message: str, code: str = "course_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class CourseNotFoundError(CourseError):
    """Course missing or not published."""

    def __init__(self, message: str = "Course not found"):
        super().__init__(message, "course_not_found")


class ChapterNotFoundError(CourseError):
    """Chapter missing, unpublished or not part of the course."""

    def __init__(self, message: str = "Chapter not found"):
        super().__init__(message, "chapter_not_found")


# ==============================================================================
# Course Service
# ==============================================================================


class CourseService:
    """Service for courses and their curriculum."""

    def __init__(self, session: "Session", keyspace: str):
        """Initialize with Cassandra session."""
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements."""
        # Courses
        self._get_course_by_id = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.courses WHERE id = ?"
        )
        self._get_published_courses = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.courses WHERE is_published = ?"
        )
        self._insert_course = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.courses
            (id, owner_id, title, description, image_url, price, is_published,
             created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)
        self._get_courses_by_owner = self.session.prepare(
            f"SELECT course_id, title FROM {self.keyspace}.courses_by_owner "
            "WHERE owner_id = ?"
        )
        self._insert_course_by_owner = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.courses_by_owner (owner_id, course_id, title)
            VALUES (?, ?, ?)
        """)

        # Chapters
        self._get_chapter_by_id = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.chapters WHERE id = ?"
        )
        self._get_chapters_by_course = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.chapters_by_course WHERE course_id = ?"
        )
        self._insert_chapter = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.chapters
            (id, course_id, title, description, video_url, position,
             is_published, is_free, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)
        self._insert_chapter_by_course = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.chapters_by_course
            (course_id, position, chapter_id, title, is_published, is_free)
            VALUES (?, ?, ?, ?, ?, ?)
        """)

        # Quizzes
        self._get_quizzes_by_course = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.quizzes_by_course WHERE course_id = ?"
        )
        self._insert_quiz = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.quizzes_by_course
            (course_id, position, quiz_id, title, description, is_published,
             created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """)

    # ==========================================================================
    # Courses
    # ==========================================================================

    async def get_course(self, course_id: UUID) -> Course | None:
        """Get course by ID."""
        result = await self.session.aexecute(self._get_course_by_id, [course_id])
        row = result.one()
        return Course.from_row(row) if row else None

    async def get_published_course(self, course_id: UUID) -> Course:
        """Get a course that learners may see.

        Raises:
            CourseNotFoundError: If the course is missing or unpublished.
        """
        course = await self.get_course(course_id)
        if course is None or not course.is_published:
            raise CourseNotFoundError
        return course

    async def list_published_courses(self) -> list[Course]:
        """Published courses, newest first."""
        rows = await self.session.aexecute(self._get_published_courses, [True])
        courses = [Course.from_row(row) for row in rows]
        courses.sort(key=lambda c: c.created_at, reverse=True)
        return courses

    async def list_owned_course_ids(self, owner_id: UUID) -> set[UUID]:
        """IDs of the courses owned by a teacher or admin."""
        rows = await self.session.aexecute(self._get_courses_by_owner, [owner_id])
        return {row.course_id for row in rows}

    async def list_owned_course_titles(self, owner_id: UUID) -> dict[UUID, str]:
        """Titles of the courses owned by a teacher or admin, keyed by course ID."""
        rows = await self.session.aexecute(self._get_courses_by_owner, [owner_id])
        return {row.course_id: row.title for row in rows}

    # ==========================================================================
    # Chapters and Quizzes
    # ==========================================================================

    async def get_chapter(self, chapter_id: UUID) -> Chapter | None:
        """Get chapter by ID, published or not."""
        result = await self.session.aexecute(self._get_chapter_by_id, [chapter_id])
        row = result.one()
        return Chapter.from_row(row) if row else None

    async def get_published_chapter(
        self,
        chapter_id: UUID,
        course_id: UUID | None = None,
    ) -> tuple[Chapter, Course]:
        """Get a visible chapter together with its course.

        Args:
            chapter_id: Chapter to load
            course_id: When given, the chapter must belong to this course

        Raises:
            ChapterNotFoundError: If the chapter is missing, unpublished, not
                under ``course_id``, or its course is missing or unpublished.
        """
        chapter = await self.get_chapter(chapter_id)
        if chapter is None or not chapter.is_published:
            raise ChapterNotFoundError
        if course_id is not None and chapter.course_id != course_id:
            raise ChapterNotFoundError

        course = await self.get_course(chapter.course_id)
        if course is None or not course.is_published:
            raise ChapterNotFoundError

        return chapter, course

    async def list_published_chapters(self, course_id: UUID) -> list[Chapter]:
        """Published chapters of a course in position order."""
        rows = await self.session.aexecute(self._get_chapters_by_course, [course_id])
        return [
            chapter
            for chapter in (Chapter.from_course_row(row) for row in rows)
            if chapter.is_published
        ]

    async def list_published_quizzes(self, course_id: UUID) -> list[Quiz]:
        """Published quizzes of a course in position order."""
        rows = await self.session.aexecute(self._get_quizzes_by_course, [course_id])
        return [quiz for quiz in (Quiz.from_row(row) for row in rows) if quiz.is_published]

    # ==========================================================================
    # Authoring
    # ==========================================================================

    async def create_course(self, data: CreateCourseRequest, owner_id: UUID) -> Course:
        """Create a course and its ownership lookup row."""
        course = Course(
            owner_id=owner_id,
            title=data.title,
            description=data.description,
            image_url=data.image_url,
            price=data.price,
            is_published=data.is_published,
        )

        await self.session.aexecute(
            self._insert_course,
            [
                course.id,
                course.owner_id,
                course.title,
                course.description,
                course.image_url,
                course.price,
                course.is_published,
                course.created_at,
                course.updated_at,
            ],
        )
        await self.session.aexecute(
            self._insert_course_by_owner,
            [course.owner_id, course.id, course.title],
        )

        logger.info("course_created", course_id=str(course.id), owner_id=str(owner_id))
        return course

    async def create_chapter(
        self,
        course_id: UUID,
        data: CreateChapterRequest,
    ) -> Chapter:
        """Create a chapter (dual-write to the per-course table).

        Raises:
            CourseNotFoundError: If the course does not exist.
        """
        if await self.get_course(course_id) is None:
            raise CourseNotFoundError

        chapter = Chapter(
            course_id=course_id,
            title=data.title,
            description=data.description,
            video_url=data.video_url,
            position=data.position,
            is_published=data.is_published,
            is_free=data.is_free,
        )

        await self.session.aexecute(
            self._insert_chapter,
            [
                chapter.id,
                chapter.course_id,
                chapter.title,
                chapter.description,
                chapter.video_url,
                chapter.position,
                chapter.is_published,
                chapter.is_free,
                chapter.created_at,
                chapter.updated_at,
            ],
        )
        await self.session.aexecute(
            self._insert_chapter_by_course,
            [
                chapter.course_id,
                chapter.position,
                chapter.id,
                chapter.title,
                chapter.is_published,
                chapter.is_free,
            ],
        )

        logger.info(
            "chapter_created",
            course_id=str(course_id),
            chapter_id=str(chapter.id),
            position=chapter.position,
        )
        return chapter

    async def create_quiz(self, course_id: UUID, data: CreateQuizRequest) -> Quiz:
        """Create a quiz.

        Raises:
            CourseNotFoundError: If the course does not exist.
        """
        if await self.get_course(course_id) is None:
            raise CourseNotFoundError

        quiz = Quiz(
            course_id=course_id,
            title=data.title,
            description=data.description,
            position=data.position,
            is_published=data.is_published,
        )

        await self.session.aexecute(
            self._insert_quiz,
            [
                quiz.course_id,
                quiz.position,
                quiz.id,
                quiz.title,
                quiz.description,
                quiz.is_published,
                quiz.created_at,
                quiz.updated_at,
            ],
        )

        logger.info("quiz_created", course_id=str(course_id), quiz_id=str(quiz.id))
        return quiz


# ==============================================================================
# Public Catalogue
# ==============================================================================


async def build_public_catalogue(
    course_service: CourseService,
    user_service: "UserService",
) -> list[CatalogueCourseResponse]:
    """Published courses with owner summary and curriculum counts.

    Courses whose owner no longer exists are left out. Progress is always 0;
    per-learner progress is not tracked by this service.
    """
    courses = await course_service.list_published_courses()
    if not courses:
        return []

    owners = await user_service.get_users_by_ids(
        [c.owner_id for c in courses if c.owner_id is not None]
    )
    visible = [c for c in courses if c.owner_id in owners]

    chapters, quizzes = await asyncio.gather(
        asyncio.gather(*(course_service.list_published_chapters(c.id) for c in visible)),
        asyncio.gather(*(course_service.list_published_quizzes(c.id) for c in visible)),
    )

    catalogue = []
    for course, course_chapters, course_quizzes in zip(
        visible, chapters, quizzes, strict=True
    ):
        owner = owners[course.owner_id]
        catalogue.append(
            CatalogueCourseResponse(
                id=course.id,
                title=course.title,
                description=course.description,
                image_url=course.image_url,
                price=course.price,
                created_at=course.created_at,
                owner=OwnerSummary(id=owner.id, name=owner.name, image_url=owner.image_url),
                chapter_count=len(course_chapters),
                quiz_count=len(course_quizzes),
            )
        )
    return catalogue
