"""Pydantic schemas for access checks and course content."""

from uuid import UUID

from pydantic import BaseModel

from coursehub.access.policy import AccessDecision, DenialReason, PolicyMode
from coursehub.courses.models import Chapter, ContentType, Quiz


class ChapterAccessCheckResponse(BaseModel):
    """Result of a single chapter check."""

    has_access: bool
    reason: DenialReason | None = None
    mode: PolicyMode | None = None

    @classmethod
    def from_decision(cls, decision: AccessDecision) -> "ChapterAccessCheckResponse":
        return cls(
            has_access=decision.granted,
            reason=decision.reason,
            mode=decision.mode,
        )


class ContentItem(BaseModel):
    """One entry of a course curriculum.

    Chapters carry ``is_free`` and ``has_access``; quizzes are not gated.
    """

    type: ContentType
    id: UUID
    title: str
    position: int
    is_free: bool | None = None
    has_access: bool | None = None

    @classmethod
    def for_chapter(cls, chapter: Chapter, has_access: bool) -> "ContentItem":
        return cls(
            type=ContentType.CHAPTER,
            id=chapter.id,
            title=chapter.title,
            position=chapter.position,
            is_free=chapter.is_free,
            has_access=has_access,
        )

    @classmethod
    def for_quiz(cls, quiz: Quiz) -> "ContentItem":
        return cls(
            type=ContentType.QUIZ,
            id=quiz.id,
            title=quiz.title,
            position=quiz.position,
        )
