"""Pydantic schemas for quiz results."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class ResultCourse(BaseModel):
    id: UUID
    title: str


class ResultLearner(BaseModel):
    """Learner who submitted the result. Name is empty if the user is gone."""

    id: UUID
    name: str = ""
    phone: str | None = None


class QuizResultResponse(BaseModel):
    """A submission as shown to the course's teacher."""

    id: UUID
    quiz_id: UUID
    quiz_title: str
    course: ResultCourse
    user: ResultLearner
    score: int
    total_points: int
    percentage: float
    submitted_at: datetime


class QuizResultListResponse(BaseModel):
    """Paginated quiz results, newest first."""

    quiz_results: list[QuizResultResponse]
    total: int = Field(..., ge=0)
    has_more: bool
