# ruff: noqa: S608 - All CQL queries use keyspace from config, not user input
"""Quiz result service layer.

Business logic for:
- Recording a learner's quiz submission
- Listing submissions to a teacher, limited to the courses they own
"""

import asyncio
from typing import TYPE_CHECKING
from uuid import UUID

from coursehub.core.logging import get_logger
from coursehub.quiz_results.models import QuizResult
from coursehub.quiz_results.schemas import (
    QuizResultResponse,
    ResultCourse,
    ResultLearner,
)


if TYPE_CHECKING:
    from cassandra.cluster import Session

    from coursehub.courses.models import Quiz
    from coursehub.courses.service import CourseService
    from coursehub.users.service import UserService


logger = get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class QuizResultError(Exception):
    """Base quiz result error."""

    def __init__(self, message: str, code: str = "quiz_result_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidScoreError(QuizResultError):
    """Score outside 0..total_points."""

    def __init__(self, message: str = "Score must be between 0 and the quiz total"):
        super().__init__(message, "invalid_score")


# ==============================================================================
# Quiz Result Service
# ==============================================================================


class QuizResultService:
    """Service for quiz submissions."""

    def __init__(
        self,
        session: "Session",
        keyspace: str,
        course_service: "CourseService",
        user_service: "UserService",
    ):
        """Initialize with Cassandra session and the services used for joins."""
        self.session = session
        self.keyspace = keyspace
        self.course_service = course_service
        self.user_service = user_service
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements."""
        self._insert_result = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.quiz_results_by_course
            (course_id, submitted_at, result_id, quiz_id, quiz_title, user_id,
             score, total_points, percentage)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)

        self._get_results_by_course = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.quiz_results_by_course
            WHERE course_id = ?
        """)

    async def record_result(
        self,
        user_id: UUID,
        quiz: "Quiz",
        score: int,
        total_points: int,
    ) -> QuizResult:
        """Store one submission.

        Raises:
            InvalidScoreError: If the score is negative or above the total.
        """
        if total_points < 0 or not 0 <= score <= total_points:
            raise InvalidScoreError

        result = QuizResult(
            course_id=quiz.course_id,
            quiz_id=quiz.id,
            quiz_title=quiz.title,
            user_id=user_id,
            score=score,
            total_points=total_points,
        )
        await self.session.aexecute(
            self._insert_result,
            [
                result.course_id,
                result.submitted_at,
                result.id,
                result.quiz_id,
                result.quiz_title,
                result.user_id,
                result.score,
                result.total_points,
                result.percentage,
            ],
        )

        logger.info(
            "quiz_result_recorded",
            target_user_id=str(user_id),
            course_id=str(quiz.course_id),
            quiz_id=str(quiz.id),
            percentage=result.percentage,
        )
        return result

    async def list_teacher_results(
        self,
        teacher_id: UUID,
        quiz_id: UUID | None = None,
        skip: int = 0,
        take: int = 25,
    ) -> tuple[list[QuizResultResponse], int]:
        """Submissions to quizzes in courses the teacher owns, newest first.

        Merging and paging happen in memory over one partition per owned
        course. A ``quiz_id`` outside the teacher's courses yields nothing.

        Args:
            teacher_id: Owner whose courses are searched
            quiz_id: Restrict to one quiz
            skip: Number of results to skip
            take: Page size

        Returns:
            Tuple of (page, total matching results)
        """
        course_titles = await self.course_service.list_owned_course_titles(teacher_id)
        if not course_titles:
            return [], 0

        partitions = await asyncio.gather(
            *(
                self.session.aexecute(self._get_results_by_course, [course_id])
                for course_id in course_titles
            )
        )
        results = [QuizResult.from_row(row) for rows in partitions for row in rows]
        if quiz_id is not None:
            results = [r for r in results if r.quiz_id == quiz_id]

        results.sort(key=lambda r: r.submitted_at, reverse=True)
        page = results[skip : skip + take]

        learners = await self.user_service.get_users_by_ids([r.user_id for r in page])
        items = []
        for result in page:
            learner = learners.get(result.user_id)
            items.append(
                QuizResultResponse(
                    id=result.id,
                    quiz_id=result.quiz_id,
                    quiz_title=result.quiz_title,
                    course=ResultCourse(
                        id=result.course_id,
                        title=course_titles[result.course_id],
                    ),
                    user=ResultLearner(
                        id=result.user_id,
                        name=learner.name if learner else "",
                        phone=learner.phone if learner else None,
                    ),
                    score=result.score,
                    total_points=result.total_points,
                    percentage=result.percentage,
                    submitted_at=result.submitted_at,
                )
            )
        return items, len(results)
