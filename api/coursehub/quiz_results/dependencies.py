"""FastAPI dependencies for quiz results."""

from typing import Annotated

from fastapi import Depends, Request

from coursehub.quiz_results.service import QuizResultService


def get_quiz_result_service(request: Request) -> QuizResultService:
    """Get QuizResultService instance from app state."""
    service = getattr(request.app.state, "quiz_result_service", None)
    if service is None:
        msg = "QuizResultService not configured"
        raise RuntimeError(msg)
    return service


QuizResultServiceDep = Annotated[QuizResultService, Depends(get_quiz_result_service)]
