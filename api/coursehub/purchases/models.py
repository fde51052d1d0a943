"""Course purchase models and Cassandra schema.

A purchase is a whole-course entitlement. Only ACTIVE purchases unlock
content; the other statuses are kept for history.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4


if TYPE_CHECKING:
    from cassandra.cluster import Row


class PurchaseStatus(str, Enum):
    """Current status of the purchase."""

    PENDING = "pending"  # Awaiting payment confirmation
    ACTIVE = "active"
    REFUNDED = "refunded"
    REVOKED = "revoked"  # Revoked by admin


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

PURCHASES_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.purchases (
    user_id UUID,
    course_id UUID,
    purchase_id UUID,
    status TEXT,
    price_paid DECIMAL,
    granted_by UUID,
    created_at TIMESTAMP,
    updated_at TIMESTAMP,
    PRIMARY KEY ((user_id), course_id, purchase_id)
) WITH CLUSTERING ORDER BY (course_id ASC, purchase_id DESC)
"""

PURCHASES_BY_COURSE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.purchases_by_course (
    course_id UUID,
    user_id UUID,
    purchase_id UUID,
    status TEXT,
    created_at TIMESTAMP,
    PRIMARY KEY ((course_id), user_id, purchase_id)
)
"""

PURCHASES_TABLES_CQL = [
    PURCHASES_TABLE_CQL,
    PURCHASES_BY_COURSE_TABLE_CQL,
]


def ensure_utc_aware(dt: datetime | None) -> datetime | None:
    """Ensure datetime is UTC-aware."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


# ==============================================================================
# Entity
# ==============================================================================


@dataclass
class Purchase:
    """A user's entitlement to a whole course."""

    user_id: UUID
    course_id: UUID
    status: PurchaseStatus = PurchaseStatus.ACTIVE
    purchase_id: UUID = field(default_factory=uuid4)
    price_paid: Decimal | None = None
    granted_by: UUID | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_row(cls, row: "Row") -> "Purchase":
        """Create instance from Cassandra row."""
        return cls(
            user_id=row.user_id,
            course_id=row.course_id,
            purchase_id=row.purchase_id,
            status=PurchaseStatus(row.status),
            price_paid=row.price_paid,
            granted_by=row.granted_by,
            created_at=ensure_utc_aware(row.created_at) or datetime.now(UTC),
            updated_at=ensure_utc_aware(row.updated_at) or datetime.now(UTC),
        )

    def is_active(self) -> bool:
        """Check if purchase unlocks the course."""
        return self.status == PurchaseStatus.ACTIVE


def create_admin_grant(
    user_id: UUID,
    course_id: UUID,
    granted_by: UUID,
    price_paid: Decimal | None = None,
) -> Purchase:
    """Create an ACTIVE purchase granted by an admin."""
    return Purchase(
        user_id=user_id,
        course_id=course_id,
        status=PurchaseStatus.ACTIVE,
        granted_by=granted_by,
        price_paid=price_paid,
    )
