"""Public course endpoints: catalogue and chapter listing."""

from uuid import UUID

from fastapi import APIRouter

from coursehub.core.logging import get_logger
from coursehub.courses.dependencies import (
    CourseServiceDep,
    OptionalCourseServiceDep,
    handle_course_error,
)
from coursehub.courses.schemas import CatalogueCourseResponse, ChapterResponse
from coursehub.courses.service import CourseError, build_public_catalogue
from coursehub.users.dependencies import OptionalUserServiceDep


logger = get_logger(__name__)

router = APIRouter(prefix="/v1/courses", tags=["Courses"])


@router.get(
    "",
    response_model=list[CatalogueCourseResponse],
    summary="Public course catalogue",
    description="Published courses, newest first. Never fails: errors yield [].",
)
async def list_public_courses(
    course_service: OptionalCourseServiceDep,
    user_service: OptionalUserServiceDep,
) -> list[CatalogueCourseResponse]:
    if course_service is None or user_service is None:
        logger.warning("public_courses_store_unavailable")
        return []

    try:
        return await build_public_catalogue(course_service, user_service)
    except Exception:
        # The public listing must not break the landing page
        logger.exception("public_courses_failed")
        return []


@router.get(
    "/{course_id}/chapters",
    response_model=list[ChapterResponse],
    summary="List published chapters",
)
async def list_course_chapters(
    course_id: UUID,
    course_service: CourseServiceDep,
) -> list[ChapterResponse]:
    try:
        await course_service.get_published_course(course_id)
    except CourseError as e:
        raise handle_course_error(e) from e

    chapters = await course_service.list_published_chapters(course_id)
    return [ChapterResponse.model_validate(c) for c in chapters]
