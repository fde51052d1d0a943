"""Pydantic schemas for courses.

Request and response models for:
- Authoring (course, chapter and quiz creation)
- Public catalogue
- Chapter listing
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ==============================================================================
# Authoring Schemas
# ==============================================================================


class CreateCourseRequest(BaseModel):
    """Course creation request."""

    title: str = Field(..., min_length=3, max_length=200, description="Course title")
    description: str | None = Field(
        None, max_length=5000, description="Course description"
    )
    image_url: str | None = Field(None, max_length=500, description="Cover image URL")
    price: Decimal | None = Field(None, ge=0, description="Course price")
    is_published: bool = Field(False, description="Visible to learners")


class CreateChapterRequest(BaseModel):
    """Chapter creation request."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    video_url: str | None = Field(None, max_length=500)
    position: int = Field(..., ge=0, description="Curriculum position")
    is_published: bool = False
    is_free: bool = False


class CreateQuizRequest(BaseModel):
    """Quiz creation request."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    position: int = Field(..., ge=0, description="Curriculum position")
    is_published: bool = False


# ==============================================================================
# Catalogue Schemas
# ==============================================================================


class OwnerSummary(BaseModel):
    """Public view of a course owner."""

    id: UUID
    name: str
    image_url: str | None = None


class CatalogueCourseResponse(BaseModel):
    """Published course as listed on the public catalogue."""

    id: UUID
    title: str
    description: str | None = None
    image_url: str | None = None
    price: Decimal | None = None
    created_at: datetime
    owner: OwnerSummary
    chapter_count: int = 0
    quiz_count: int = 0
    progress: int = 0


class ChapterResponse(BaseModel):
    """Published chapter summary."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    course_id: UUID
    title: str
    position: int
    is_free: bool
