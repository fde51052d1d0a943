"""Chapter access policy.

Pure decision logic, free of I/O and framework types. Given what is known
about a user and a course, decide whether one chapter is unlocked.

Evaluation order is precedence:

1. A free chapter is unlocked for everyone, anonymous callers included.
2. Anyone else must be authenticated.
3. The policy mode is chosen from two facts: does the user hold an ACTIVE
   purchase of the course, and does the user hold any explicit chapter
   grant in the course.
4. ``COURSE_WIDE`` unlocks every chapter. ``FINE_GRAINED`` and
   ``CHAPTER_ONLY`` unlock only explicitly granted chapters.

``COURSE_WIDE`` keeps accounts that predate chapter grants working: a bare
purchase still opens the whole course until a teacher issues the first
chapter grant for that student, which switches the course to
``FINE_GRAINED`` for them.
"""

from collections.abc import Collection
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol
from uuid import UUID


class PolicyMode(str, Enum):
    """Which rule governs a (user, course) pair."""

    COURSE_WIDE = "course_wide"
    FINE_GRAINED = "fine_grained"
    CHAPTER_ONLY = "chapter_only"


class DenialReason(str, Enum):
    """Why a chapter stays locked."""

    UNAUTHENTICATED = "unauthenticated"
    CHAPTER_NOT_GRANTED = "chapter_not_granted"
    COURSE_NOT_PURCHASED = "course_not_purchased"


DENIAL_REASONS: dict[PolicyMode, DenialReason | None] = {
    PolicyMode.COURSE_WIDE: None,
    PolicyMode.FINE_GRAINED: DenialReason.CHAPTER_NOT_GRANTED,
    PolicyMode.CHAPTER_ONLY: DenialReason.COURSE_NOT_PURCHASED,
}


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of a chapter check.

    ``mode`` is None when the decision did not need one (free chapter or
    anonymous caller).
    """

    granted: bool
    reason: DenialReason | None = None
    mode: PolicyMode | None = None


FREE_CHAPTER = AccessDecision(granted=True)
UNAUTHENTICATED = AccessDecision(granted=False, reason=DenialReason.UNAUTHENTICATED)


def resolve_policy_mode(has_course_access: bool, has_any_chapter_grants: bool) -> PolicyMode:
    """Name the rule that applies to a user in a course."""
    if not has_course_access:
        return PolicyMode.CHAPTER_ONLY
    if has_any_chapter_grants:
        return PolicyMode.FINE_GRAINED
    return PolicyMode.COURSE_WIDE


def decide_chapter_access(
    *,
    is_free: bool,
    user_id: UUID | None,
    has_course_access: bool,
    granted_chapter_ids: Collection[UUID],
    chapter_id: UUID,
) -> AccessDecision:
    """Decide whether ``chapter_id`` is unlocked.

    Args:
        is_free: The chapter's free flag
        user_id: Caller, None when anonymous
        has_course_access: The user holds an ACTIVE purchase of the course
        granted_chapter_ids: Chapters of *this course* the user holds
            explicit grants for
        chapter_id: Chapter being checked
    """
    if is_free:
        return FREE_CHAPTER
    if user_id is None:
        return UNAUTHENTICATED

    mode = resolve_policy_mode(has_course_access, bool(granted_chapter_ids))
    if mode is PolicyMode.COURSE_WIDE or chapter_id in granted_chapter_ids:
        return AccessDecision(granted=True, mode=mode)
    return AccessDecision(granted=False, reason=DENIAL_REASONS[mode], mode=mode)


class GatedChapter(Protocol):
    id: UUID
    is_free: bool


@dataclass(frozen=True)
class CourseAccessSnapshot:
    """Everything the policy needs about one user in one course.

    Built from two batch lookups so a whole curriculum can be gated without
    a query per chapter.
    """

    user_id: UUID | None = None
    has_course_access: bool = False
    granted_chapter_ids: frozenset[UUID] = field(default_factory=frozenset)

    @property
    def mode(self) -> PolicyMode | None:
        if self.user_id is None:
            return None
        return resolve_policy_mode(self.has_course_access, bool(self.granted_chapter_ids))

    def decide(self, chapter: GatedChapter) -> AccessDecision:
        return decide_chapter_access(
            is_free=chapter.is_free,
            user_id=self.user_id,
            has_course_access=self.has_course_access,
            granted_chapter_ids=self.granted_chapter_ids,
            chapter_id=chapter.id,
        )
