"""HTTP endpoints for chapter access administration.

Two routers share the same handlers:
- /v1/admin/users/{user_id}/chapter-access (ADMIN, any course)
- /v1/teacher/users/{user_id}/chapter-access (TEACHER, owned courses only)
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from coursehub.auth.dependencies import AdminUser, TeacherUser
from coursehub.auth.schemas import Identity
from coursehub.chapter_access.dependencies import (
    ChapterAccessServiceDep,
    handle_chapter_access_error,
)
from coursehub.chapter_access.schemas import (
    ChapterAccessResponse,
    GrantChapterAccessRequest,
    GrantedChaptersResponse,
)
from coursehub.chapter_access.service import ChapterAccessError, ChapterAccessService
from coursehub.courses.service import CourseError


admin_router = APIRouter(
    prefix="/v1/admin/users", tags=["Admin - Chapter Access"]
)
teacher_router = APIRouter(
    prefix="/v1/teacher/users", tags=["Teacher - Chapter Access"]
)


# ==============================================================================
# Shared Handlers
# ==============================================================================


async def _grant(
    service: ChapterAccessService,
    actor: Identity,
    user_id: UUID,
    body: GrantChapterAccessRequest,
) -> ChapterAccessResponse:
    try:
        access = await service.grant_chapter_access(actor, user_id, body.chapter_id)
    except (ChapterAccessError, CourseError) as e:
        raise handle_chapter_access_error(e) from e
    return ChapterAccessResponse.from_access(access)


async def _revoke(
    service: ChapterAccessService,
    actor: Identity,
    user_id: UUID,
    chapter_id: UUID,
) -> None:
    try:
        await service.revoke_chapter_access(actor, user_id, chapter_id)
    except (ChapterAccessError, CourseError) as e:
        raise handle_chapter_access_error(e) from e


async def _list(
    service: ChapterAccessService,
    actor: Identity,
    user_id: UUID,
    course_id: UUID | None,
) -> GrantedChaptersResponse:
    try:
        chapter_ids = await service.list_granted_chapter_ids(actor, user_id, course_id)
    except ChapterAccessError as e:
        raise handle_chapter_access_error(e) from e
    return GrantedChaptersResponse(
        user_id=user_id,
        course_id=course_id,
        chapter_ids=chapter_ids,
    )


# ==============================================================================
# Admin Endpoints
# ==============================================================================


@admin_router.post(
    "/{user_id}/chapter-access",
    response_model=ChapterAccessResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Grant a chapter to a student",
)
async def admin_grant_chapter_access(
    user_id: UUID,
    body: GrantChapterAccessRequest,
    admin: AdminUser,
    service: ChapterAccessServiceDep,
) -> ChapterAccessResponse:
    return await _grant(service, admin, user_id, body)


@admin_router.delete(
    "/{user_id}/chapter-access/{chapter_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke a chapter from a student",
)
async def admin_revoke_chapter_access(
    user_id: UUID,
    chapter_id: UUID,
    admin: AdminUser,
    service: ChapterAccessServiceDep,
) -> None:
    await _revoke(service, admin, user_id, chapter_id)


@admin_router.get(
    "/{user_id}/chapter-access",
    response_model=GrantedChaptersResponse,
    summary="List a student's chapter grants",
)
async def admin_list_chapter_access(
    user_id: UUID,
    admin: AdminUser,
    service: ChapterAccessServiceDep,
    course_id: Annotated[UUID | None, Query()] = None,
) -> GrantedChaptersResponse:
    return await _list(service, admin, user_id, course_id)


# ==============================================================================
# Teacher Endpoints
# ==============================================================================


@teacher_router.post(
    "/{user_id}/chapter-access",
    response_model=ChapterAccessResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Grant a chapter of an owned course",
)
async def teacher_grant_chapter_access(
    user_id: UUID,
    body: GrantChapterAccessRequest,
    teacher: TeacherUser,
    service: ChapterAccessServiceDep,
) -> ChapterAccessResponse:
    return await _grant(service, teacher, user_id, body)


@teacher_router.delete(
    "/{user_id}/chapter-access/{chapter_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke a chapter of an owned course",
)
async def teacher_revoke_chapter_access(
    user_id: UUID,
    chapter_id: UUID,
    teacher: TeacherUser,
    service: ChapterAccessServiceDep,
) -> None:
    await _revoke(service, teacher, user_id, chapter_id)


@teacher_router.get(
    "/{user_id}/chapter-access",
    response_model=GrantedChaptersResponse,
    summary="List a student's grants on owned courses",
)
async def teacher_list_chapter_access(
    user_id: UUID,
    teacher: TeacherUser,
    service: ChapterAccessServiceDep,
    course_id: Annotated[UUID | None, Query()] = None,
) -> GrantedChaptersResponse:
    return await _list(service, teacher, user_id, course_id)
