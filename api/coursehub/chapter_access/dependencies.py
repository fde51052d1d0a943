"""FastAPI dependencies for chapter access administration."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from coursehub.chapter_access.service import ChapterAccessService


def get_chapter_access_service(request: Request) -> ChapterAccessService:
    """Get ChapterAccessService instance from app state."""
    service = getattr(request.app.state, "chapter_access_service", None)
    if service is None:
        msg = "ChapterAccessService not configured"
        raise RuntimeError(msg)
    return service


ChapterAccessServiceDep = Annotated[
    ChapterAccessService, Depends(get_chapter_access_service)
]


def handle_chapter_access_error(error: Exception) -> HTTPException:
    """Convert chapter access and course errors to HTTPException."""
    status_map = {
        "chapter_access_exists": status.HTTP_409_CONFLICT,
        "chapter_access_not_found": status.HTTP_404_NOT_FOUND,
        "student_not_found": status.HTTP_404_NOT_FOUND,
        "chapter_not_found": status.HTTP_404_NOT_FOUND,
        "course_not_found": status.HTTP_404_NOT_FOUND,
        "permission_denied": status.HTTP_403_FORBIDDEN,
    }

    code = getattr(error, "code", "chapter_access_error")
    message = getattr(error, "message", str(error))

    return HTTPException(
        status_code=status_map.get(code, status.HTTP_400_BAD_REQUEST),
        detail=message,
    )
