"""Content-serving endpoints.

Provides:
- GET /v1/courses/{course_id}/chapters/{chapter_id}/access - Check one chapter
- GET /v1/courses/{course_id}/content - Curriculum with per-chapter access
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from coursehub.access.dependencies import AccessResolverDep
from coursehub.access.policy import DenialReason
from coursehub.access.schemas import ChapterAccessCheckResponse, ContentItem
from coursehub.auth.dependencies import OptionalUser
from coursehub.courses.dependencies import handle_course_error
from coursehub.courses.service import CourseError


router = APIRouter(prefix="/v1/courses", tags=["Access"])


@router.get(
    "/{course_id}/chapters/{chapter_id}/access",
    response_model=ChapterAccessCheckResponse,
    summary="Check access to a chapter",
    description=(
        "Free chapters are open to everyone. Other chapters need an "
        "authenticated caller and a purchase or explicit grant."
    ),
)
async def check_chapter_access(
    course_id: UUID,
    chapter_id: UUID,
    user: OptionalUser,
    resolver: AccessResolverDep,
) -> ChapterAccessCheckResponse:
    try:
        decision = await resolver.check_chapter_access(
            user.id if user else None,
            course_id,
            chapter_id,
        )
    except CourseError as e:
        raise handle_course_error(e) from e

    if decision.reason is DenialReason.UNAUTHENTICATED:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required for this chapter",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return ChapterAccessCheckResponse.from_decision(decision)


@router.get(
    "/{course_id}/content",
    response_model=list[ContentItem],
    response_model_exclude_none=True,
    summary="List course content",
)
async def list_course_content(
    course_id: UUID,
    user: OptionalUser,
    resolver: AccessResolverDep,
) -> list[ContentItem]:
    try:
        return await resolver.list_course_content(user.id if user else None, course_id)
    except CourseError as e:
        raise handle_course_error(e) from e
