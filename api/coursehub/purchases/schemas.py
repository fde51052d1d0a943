"""Pydantic schemas for course purchases."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from coursehub.purchases.models import Purchase, PurchaseStatus


class GrantCourseRequest(BaseModel):
    """Admin request to give a user a whole course."""

    course_id: UUID = Field(..., description="Course to grant")
    price_paid: Decimal | None = Field(None, ge=0, description="Amount paid, if any")


class PurchaseResponse(BaseModel):
    """A single purchase."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Purchase ID")
    user_id: UUID
    course_id: UUID
    status: PurchaseStatus
    price_paid: Decimal | None = None
    granted_by: UUID | None = None
    created_at: datetime
    is_active: bool

    @classmethod
    def from_purchase(cls, purchase: Purchase) -> "PurchaseResponse":
        """Create response from Purchase entity."""
        return cls(
            id=purchase.purchase_id,
            user_id=purchase.user_id,
            course_id=purchase.course_id,
            status=purchase.status,
            price_paid=purchase.price_paid,
            granted_by=purchase.granted_by,
            created_at=purchase.created_at,
            is_active=purchase.is_active(),
        )


class PurchaseListResponse(BaseModel):
    """Purchases of a user."""

    items: list[PurchaseResponse]
    total: int
