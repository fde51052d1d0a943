# ruff: noqa: S608 - All CQL queries use keyspace from config, not user input
"""Chapter access service layer.

Business logic for:
- Granting and revoking explicit chapter access (admin or owning teacher)
- Listing a user's grants, scoped by what the caller may manage
- The grant lookups the access resolver needs

Grants are check-then-act: the existence read only produces a friendly
error, the lightweight transaction on insert/delete is what keeps the
(user, chapter) pair unique under concurrent requests.
"""

from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from coursehub.auth.permissions import UserRole
from coursehub.chapter_access.models import ChapterAccess
from coursehub.core.logging import get_logger
from coursehub.courses.service import ChapterNotFoundError
from coursehub.users.service import UserError


if TYPE_CHECKING:
    from cassandra.cluster import Session

    from coursehub.auth.schemas import Identity
    from coursehub.courses.models import Chapter
    from coursehub.courses.service import CourseService
    from coursehub.users.service import UserService


logger = get_logger(__name__)


class GrantScope(str, Enum):
    """Which courses a role may manage chapter grants for."""

    ANY_COURSE = "any_course"
    OWN_COURSES = "own_courses"
    NONE = "none"


# Every role must appear here; a new role without an entry fails the tests
GRANT_SCOPES: dict[UserRole, GrantScope] = {
    UserRole.ADMIN: GrantScope.ANY_COURSE,
    UserRole.TEACHER: GrantScope.OWN_COURSES,
    UserRole.USER: GrantScope.NONE,
}


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class ChapterAccessError(Exception):
    """Base chapter access error."""

    def __init__(self, message: str, code: str = "chapter_access_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class ChapterAccessExistsError(ChapterAccessError):
    """The student already holds a grant for the chapter."""

    def __init__(self, message: str = "Student already has access to this chapter"):
        super().__init__(message, "chapter_access_exists")


class ChapterAccessNotFoundError(ChapterAccessError):
    """No grant to revoke."""

    def __init__(self, message: str = "Chapter access not found for this student"):
        super().__init__(message, "chapter_access_not_found")


class StudentNotFoundError(ChapterAccessError):
    """Target user missing or not a student."""

    def __init__(self, message: str = "Student not found"):
        super().__init__(message, "student_not_found")


class PermissionDeniedError(ChapterAccessError):
    """Caller may not manage grants for this course."""

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, "permission_denied")


# ==============================================================================
# Chapter Access Service
# ==============================================================================


class ChapterAccessService:
    """Service for explicit per-chapter grants."""

    def __init__(
        self,
        session: "Session",
        keyspace: str,
        course_service: "CourseService",
        user_service: "UserService",
    ):
        """Initialize with Cassandra session and the services used for checks."""
        self.session = session
        self.keyspace = keyspace
        self.course_service = course_service
        self.user_service = user_service
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements."""
        self._insert_access = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.chapter_access
            (user_id, course_id, chapter_id, granted_by, created_at)
            VALUES (?, ?, ?, ?, ?)
            IF NOT EXISTS
        """)

        self._delete_access = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.chapter_access
            WHERE user_id = ? AND course_id = ? AND chapter_id = ?
            IF EXISTS
        """)

        self._get_access = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.chapter_access
            WHERE user_id = ? AND course_id = ? AND chapter_id = ?
        """)

        self._get_user_course_accesses = self.session.prepare(f"""
            SELECT chapter_id FROM {self.keyspace}.chapter_access
            WHERE user_id = ? AND course_id = ?
        """)

        self._get_user_accesses = self.session.prepare(f"""
            SELECT course_id, chapter_id FROM {self.keyspace}.chapter_access
            WHERE user_id = ?
        """)

    # ==========================================================================
    # Lookups
    # ==========================================================================

    async def get_access(
        self,
        user_id: UUID,
        course_id: UUID,
        chapter_id: UUID,
    ) -> ChapterAccess | None:
        """Get a single grant."""
        result = await self.session.aexecute(
            self._get_access,
            [user_id, course_id, chapter_id],
        )
        row = result.one()
        return ChapterAccess.from_row(row) if row else None

    async def list_course_grants(self, user_id: UUID, course_id: UUID) -> set[UUID]:
        """Chapter IDs of one course the user holds explicit grants for.

        One query answers both "is this chapter granted" and "is any chapter
        of the course granted".
        """
        rows = await self.session.aexecute(
            self._get_user_course_accesses,
            [user_id, course_id],
        )
        return {row.chapter_id for row in rows}

    # ==========================================================================
    # Administration
    # ==========================================================================

    async def grant_chapter_access(
        self,
        actor: "Identity",
        target_user_id: UUID,
        chapter_id: UUID,
    ) -> ChapterAccess:
        """Grant a chapter to a student.

        Raises:
            PermissionDeniedError: Actor's role cannot grant, or a teacher
                does not own the chapter's course.
            StudentNotFoundError: Target is missing or not a student.
            ChapterNotFoundError: Chapter missing or not visible.
            ChapterAccessExistsError: Grant already exists.
        """
        scope = self._grant_scope(actor)
        await self._ensure_student(target_user_id)
        chapter, _course = await self.course_service.get_published_chapter(chapter_id)
        await self._ensure_manages_course(actor, scope, chapter.course_id)

        if await self.get_access(target_user_id, chapter.course_id, chapter.id):
            raise ChapterAccessExistsError

        access = ChapterAccess(
            user_id=target_user_id,
            course_id=chapter.course_id,
            chapter_id=chapter.id,
            granted_by=actor.id,
        )
        result = await self.session.aexecute(
            self._insert_access,
            [
                access.user_id,
                access.course_id,
                access.chapter_id,
                access.granted_by,
                access.created_at,
            ],
        )
        if not result.was_applied:
            # Lost the race to a concurrent grant of the same pair
            raise ChapterAccessExistsError

        logger.info(
            "chapter_access_granted",
            target_user_id=str(target_user_id),
            course_id=str(chapter.course_id),
            chapter_id=str(chapter.id),
            granted_by=str(actor.id),
            scope=scope.value,
        )
        return access

    async def revoke_chapter_access(
        self,
        actor: "Identity",
        target_user_id: UUID,
        chapter_id: UUID,
    ) -> None:
        """Revoke a chapter grant.

        The chapter may since have been unpublished; its grants can still be
        removed.

        Raises:
            PermissionDeniedError: Actor's role cannot revoke, or a teacher
                does not own the chapter's course.
            StudentNotFoundError: Target is missing or not a student.
            ChapterNotFoundError: Chapter does not exist.
            ChapterAccessNotFoundError: No such grant.
        """
        scope = self._grant_scope(actor)
        await self._ensure_student(target_user_id)
        chapter = await self._get_chapter(chapter_id)
        await self._ensure_manages_course(actor, scope, chapter.course_id)

        if not await self.get_access(target_user_id, chapter.course_id, chapter.id):
            raise ChapterAccessNotFoundError

        result = await self.session.aexecute(
            self._delete_access,
            [target_user_id, chapter.course_id, chapter.id],
        )
        if not result.was_applied:
            raise ChapterAccessNotFoundError

        logger.info(
            "chapter_access_revoked",
            target_user_id=str(target_user_id),
            course_id=str(chapter.course_id),
            chapter_id=str(chapter.id),
            revoked_by=str(actor.id),
        )

    async def list_granted_chapter_ids(
        self,
        actor: "Identity",
        target_user_id: UUID,
        course_id: UUID | None = None,
    ) -> list[UUID]:
        """Chapter IDs the user holds grants for, limited to what the actor manages.

        Raises:
            PermissionDeniedError: Actor's role cannot manage grants.
        """
        scope = self._grant_scope(actor)

        if course_id is not None:
            rows = await self.session.aexecute(
                self._get_user_course_accesses,
                [target_user_id, course_id],
            )
            grants = [(course_id, row.chapter_id) for row in rows]
        else:
            rows = await self.session.aexecute(self._get_user_accesses, [target_user_id])
            grants = [(row.course_id, row.chapter_id) for row in rows]

        if scope is GrantScope.OWN_COURSES:
            owned = await self.course_service.list_owned_course_ids(actor.id)
            grants = [(cid, chid) for cid, chid in grants if cid in owned]

        return [chapter_id for _, chapter_id in grants]

    # ==========================================================================
    # Private Helpers
    # ==========================================================================

    def _grant_scope(self, actor: "Identity") -> GrantScope:
        scope = GRANT_SCOPES[actor.role]
        if scope is GrantScope.NONE:
            raise PermissionDeniedError
        return scope

    async def _ensure_student(self, user_id: UUID) -> None:
        try:
            await self.user_service.get_student(user_id)
        except UserError as e:
            raise StudentNotFoundError from e

    async def _get_chapter(self, chapter_id: UUID) -> "Chapter":
        chapter = await self.course_service.get_chapter(chapter_id)
        if chapter is None:
            raise ChapterNotFoundError
        return chapter

    async def _ensure_manages_course(
        self,
        actor: "Identity",
        scope: GrantScope,
        course_id: UUID,
    ) -> None:
        if scope is GrantScope.ANY_COURSE:
            return
        owned = await self.course_service.list_owned_course_ids(actor.id)
        if course_id not in owned:
            raise PermissionDeniedError(
                "You can only manage chapter access for your own courses"
            )
