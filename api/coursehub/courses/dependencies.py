"""FastAPI dependencies for courses."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from coursehub.courses.service import CourseService


def get_course_service(request: Request) -> CourseService:
    """Get CourseService instance from app state."""
    service = getattr(request.app.state, "course_service", None)
    if service is None:
        msg = "CourseService not configured"
        raise RuntimeError(msg)
    return service


CourseServiceDep = Annotated[CourseService, Depends(get_course_service)]


def get_course_service_optional(request: Request) -> CourseService | None:
    """Get CourseService if the store came up, otherwise None."""
    return getattr(request.app.state, "course_service", None)


OptionalCourseServiceDep = Annotated[
    CourseService | None, Depends(get_course_service_optional)
]


def handle_course_error(error: Exception) -> HTTPException:
    """Convert course errors to HTTPException."""
    status_map = {
        "course_not_found": status.HTTP_404_NOT_FOUND,
        "chapter_not_found": status.HTTP_404_NOT_FOUND,
    }

    code = getattr(error, "code", "course_error")
    message = getattr(error, "message", str(error))

    return HTTPException(
        status_code=status_map.get(code, status.HTTP_400_BAD_REQUEST),
        detail=message,
    )
