"""Seed a demo course for local development.

Creates a teacher, a student and a published course with three chapters
and a quiz, then gives the student a purchase plus one chapter grant, so
the course runs in fine-grained mode for them. The student also gets one
quiz result, visible to the teacher under /v1/teacher/quiz-results:

- Chapter 1 (free)      -> open to everyone
- Chapter 2 (granted)   -> open to the student
- Quiz (position 2)     -> listed after chapter 2
- Chapter 3 (paid)      -> locked, chapter_not_granted

Usage:
    cd api && python -m scripts.seed_demo_course
"""

import asyncio

import structlog

from coursehub.auth.permissions import UserRole
from coursehub.auth.schemas import Identity
from coursehub.auth.security import create_access_token
from coursehub.chapter_access.service import ChapterAccessService
from coursehub.config.settings import get_settings
from coursehub.core.database import init_async_cassandra, shutdown_async_cassandra
from coursehub.courses.schemas import (
    CreateChapterRequest,
    CreateCourseRequest,
    CreateQuizRequest,
)
from coursehub.courses.service import CourseService
from coursehub.purchases.service import PurchaseService
from coursehub.quiz_results.service import QuizResultService
from coursehub.users.models import User
from coursehub.users.service import UserService


logger = structlog.get_logger(__name__)


CHAPTERS = [
    CreateChapterRequest(title="Welcome", position=1, is_published=True, is_free=True),
    CreateChapterRequest(title="Fundamentals", position=2, is_published=True),
    CreateChapterRequest(title="Going further", position=3, is_published=True),
]

QUIZZES = [
    CreateQuizRequest(title="Fundamentals check", position=2, is_published=True),
]


def _token_for(user: User) -> str:
    return create_access_token({"sub": str(user.id), "email": user.email, "role": user.role})


async def seed(session, keyspace: str) -> dict[str, str]:
    """Create the demo data and return bearer tokens for its users."""
    users = UserService(session=session, keyspace=keyspace)
    courses = CourseService(session=session, keyspace=keyspace)
    purchases = PurchaseService(session=session, keyspace=keyspace)
    grants = ChapterAccessService(
        session=session,
        keyspace=keyspace,
        course_service=courses,
        user_service=users,
    )
    results = QuizResultService(
        session=session,
        keyspace=keyspace,
        course_service=courses,
        user_service=users,
    )

    teacher = await users.create_user(
        User(name="Demo Teacher", email="teacher@example.com", role=UserRole.TEACHER.value)
    )
    student = await users.create_user(
        User(name="Demo Student", email="student@example.com", role=UserRole.USER.value)
    )

    course = await courses.create_course(
        CreateCourseRequest(
            title="Demo course",
            description="Seeded for local development",
            is_published=True,
        ),
        owner_id=teacher.id,
    )
    chapters = [await courses.create_chapter(course.id, data) for data in CHAPTERS]
    quizzes = [await courses.create_quiz(course.id, data) for data in QUIZZES]

    await purchases.grant_course(student.id, course.id, granted_by=teacher.id)
    await grants.grant_chapter_access(
        Identity(id=teacher.id, email=teacher.email, role=UserRole.TEACHER),
        student.id,
        chapters[1].id,
    )
    await results.record_result(student.id, quizzes[0], score=8, total_points=10)

    logger.info(
        "demo_course_seeded",
        course_id=str(course.id),
        teacher_id=str(teacher.id),
        student_id=str(student.id),
    )
    return {
        "course_id": str(course.id),
        "teacher_token": _token_for(teacher),
        "student_token": _token_for(student),
    }


async def run_seed() -> None:
    """Connect, seed and disconnect."""
    settings = get_settings()
    connection = await init_async_cassandra(settings)
    try:
        result = await seed(connection.session, settings.cassandra_keyspace)
        for key, value in result.items():
            print(f"{key}: {value}")  # noqa: T201
    finally:
        await shutdown_async_cassandra(connection)


if __name__ == "__main__":
    asyncio.run(run_seed())
