"""Teacher quiz result listing endpoint."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from coursehub.auth.dependencies import TeacherUser
from coursehub.quiz_results.dependencies import QuizResultServiceDep
from coursehub.quiz_results.schemas import QuizResultListResponse


router = APIRouter(prefix="/v1/teacher/quiz-results", tags=["Teacher - Quiz Results"])


@router.get(
    "",
    response_model=QuizResultListResponse,
    summary="List quiz results for owned courses",
    description="Submissions newest first, optionally for a single quiz.",
)
async def list_quiz_results(
    teacher: TeacherUser,
    service: QuizResultServiceDep,
    quiz_id: Annotated[UUID | None, Query()] = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    take: Annotated[int, Query(ge=1, le=100)] = 25,
) -> QuizResultListResponse:
    results, total = await service.list_teacher_results(
        teacher.id, quiz_id=quiz_id, skip=skip, take=take
    )
    return QuizResultListResponse(
        quiz_results=results,
        total=total,
        has_more=skip + take < total,
    )
