"""Pydantic schemas for chapter access administration."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from coursehub.chapter_access.models import ChapterAccess


class GrantChapterAccessRequest(BaseModel):
    """Grant one chapter to a student."""

    chapter_id: UUID = Field(..., description="Chapter to unlock")


class ChapterAccessResponse(BaseModel):
    """A created grant."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    course_id: UUID
    chapter_id: UUID
    granted_by: UUID | None = None
    created_at: datetime

    @classmethod
    def from_access(cls, access: ChapterAccess) -> "ChapterAccessResponse":
        """Create response from ChapterAccess entity."""
        return cls(
            user_id=access.user_id,
            course_id=access.course_id,
            chapter_id=access.chapter_id,
            granted_by=access.granted_by,
            created_at=access.created_at,
        )


class GrantedChaptersResponse(BaseModel):
    """Chapter IDs a user holds explicit grants for."""

    user_id: UUID
    course_id: UUID | None = None
    chapter_ids: list[UUID]
