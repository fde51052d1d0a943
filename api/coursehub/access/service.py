"""Access resolver.

Loads what the policy needs from courses, purchases and chapter grants and
applies ``coursehub.access.policy`` to single chapters or whole curricula.
"""

import asyncio
from typing import TYPE_CHECKING
from uuid import UUID

from coursehub.access.policy import AccessDecision, CourseAccessSnapshot
from coursehub.access.schemas import ContentItem
from coursehub.core.logging import get_logger


if TYPE_CHECKING:
    from coursehub.chapter_access.service import ChapterAccessService
    from coursehub.courses.service import CourseService
    from coursehub.purchases.service import PurchaseService


logger = get_logger(__name__)


class AccessResolver:
    """Answers "can this user open this chapter" and "what does this course contain"."""

    def __init__(
        self,
        course_service: "CourseService",
        purchase_service: "PurchaseService",
        chapter_access_service: "ChapterAccessService",
    ):
        self.course_service = course_service
        self.purchase_service = purchase_service
        self.chapter_access_service = chapter_access_service

    async def snapshot(self, user_id: UUID | None, course_id: UUID) -> CourseAccessSnapshot:
        """Purchase flag and granted chapters of a user in a course.

        Two queries for an authenticated user, none for an anonymous one.
        """
        if user_id is None:
            return CourseAccessSnapshot()

        has_course_access, granted = await asyncio.gather(
            self.purchase_service.has_active_purchase(user_id, course_id),
            self.chapter_access_service.list_course_grants(user_id, course_id),
        )
        return CourseAccessSnapshot(
            user_id=user_id,
            has_course_access=has_course_access,
            granted_chapter_ids=frozenset(granted),
        )

    async def check_chapter_access(
        self,
        user_id: UUID | None,
        course_id: UUID,
        chapter_id: UUID,
    ) -> AccessDecision:
        """Decide access to one chapter.

        Raises:
            ChapterNotFoundError: Chapter missing, unpublished, not under the
                course, or the course is missing or unpublished.
        """
        chapter, _course = await self.course_service.get_published_chapter(
            chapter_id, course_id
        )

        if chapter.is_free or user_id is None:
            snapshot = CourseAccessSnapshot(user_id=user_id)
        else:
            snapshot = await self.snapshot(user_id, course_id)

        decision = snapshot.decide(chapter)
        logger.debug(
            "chapter_access_checked",
            course_id=str(course_id),
            chapter_id=str(chapter_id),
            granted=decision.granted,
            reason=decision.reason.value if decision.reason else None,
            mode=decision.mode.value if decision.mode else None,
        )
        return decision

    async def list_course_content(
        self,
        user_id: UUID | None,
        course_id: UUID,
    ) -> list[ContentItem]:
        """Published chapters and quizzes in curriculum order.

        Chapters and quizzes share one position space. The sort is stable
        over chapters-then-quizzes, so a chapter precedes a quiz on an equal
        position.

        Raises:
            CourseNotFoundError: Course missing or unpublished.
        """
        await self.course_service.get_published_course(course_id)

        snapshot, chapters, quizzes = await asyncio.gather(
            self.snapshot(user_id, course_id),
            self.course_service.list_published_chapters(course_id),
            self.course_service.list_published_quizzes(course_id),
        )

        items = [
            ContentItem.for_chapter(chapter, snapshot.decide(chapter).granted)
            for chapter in chapters
        ]
        items.extend(ContentItem.for_quiz(quiz) for quiz in quizzes)
        items.sort(key=lambda item: item.position)
        return items
