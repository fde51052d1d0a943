"""Identity schemas."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from coursehub.auth.permissions import UserRole, parse_role


class Identity(BaseModel):
    """Authenticated caller as asserted by the access token."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    email: str = ""
    role: UserRole

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Any) -> Any:
        """Accept role claims in any case; unknown values still fail validation."""
        return parse_role(value) or value
