# ruff: noqa: S608 - All CQL queries use keyspace from config, not user input
"""Course purchase service layer.

Business logic for:
- Checking whole-course access (Redis-cached)
- Granting and revoking courses (admin)
- Listing a user's purchases
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

from coursehub.core.logging import get_logger
from coursehub.core.redis import course_access_cache_key
from coursehub.purchases.models import Purchase, PurchaseStatus, create_admin_grant


if TYPE_CHECKING:
    from cassandra.cluster import Session
    from redis.asyncio import Redis


logger = get_logger(__name__)

DEFAULT_ACCESS_CACHE_TTL = 300


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class PurchaseError(Exception):
    """Base purchase error."""

    def __init__(self, message: str, code: str = "purchase_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class PurchaseExistsError(PurchaseError):
    """User already has an active purchase of the course."""

    def __init__(self, message: str = "User already has access to this course"):
        super().__init__(message, "purchase_exists")


class PurchaseNotFoundError(PurchaseError):
    """No active purchase to revoke."""

    def __init__(self, message: str = "No active purchase for this course"):
        super().__init__(message, "purchase_not_found")


# ==============================================================================
# Purchase Service
# ==============================================================================


class PurchaseService:
    """Service for whole-course entitlements."""

    def __init__(
        self,
        session: "Session",
        keyspace: str,
        redis: "Redis | None" = None,
        cache_ttl: int = DEFAULT_ACCESS_CACHE_TTL,
    ):
        """Initialize with Cassandra session and optional Redis."""
        self.session = session
        self.keyspace = keyspace
        self.redis = redis
        self.cache_ttl = cache_ttl
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient queries."""
        self._insert_purchase = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.purchases
            (user_id, course_id, purchase_id, status, price_paid, granted_by,
             created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """)

        self._insert_purchase_by_course = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.purchases_by_course
            (course_id, user_id, purchase_id, status, created_at)
            VALUES (?, ?, ?, ?, ?)
        """)

        self._get_user_course_purchases = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.purchases
            WHERE user_id = ? AND course_id = ?
        """)

        self._get_user_purchases = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.purchases
            WHERE user_id = ?
        """)

        self._update_status = self.session.prepare(f"""
            UPDATE {self.keyspace}.purchases
            SET status = ?, updated_at = ?
            WHERE user_id = ? AND course_id = ? AND purchase_id = ?
        """)

        self._update_status_by_course = self.session.prepare(f"""
            UPDATE {self.keyspace}.purchases_by_course
            SET status = ?
            WHERE course_id = ? AND user_id = ? AND purchase_id = ?
        """)

    # ==========================================================================
    # Access Checks
    # ==========================================================================

    async def has_active_purchase(self, user_id: UUID, course_id: UUID) -> bool:
        """Check if user holds at least one ACTIVE purchase of the course."""
        cache_key = course_access_cache_key(user_id, course_id)

        if self.redis:
            cached = await self.redis.get(cache_key)
            if cached is not None:
                return cached == "1"

        has_access = any(
            p.is_active() for p in await self._course_purchases(user_id, course_id)
        )

        if self.redis:
            await self.redis.setex(cache_key, self.cache_ttl, "1" if has_access else "0")

        return has_access

    # ==========================================================================
    # Admin Grant / Revoke
    # ==========================================================================

    async def grant_course(
        self,
        user_id: UUID,
        course_id: UUID,
        granted_by: UUID,
        price_paid: Decimal | None = None,
    ) -> Purchase:
        """Grant a whole course to a user.

        Raises:
            PurchaseExistsError: If an ACTIVE purchase already exists.
        """
        existing = await self._course_purchases(user_id, course_id)
        if any(p.is_active() for p in existing):
            raise PurchaseExistsError

        purchase = create_admin_grant(
            user_id=user_id,
            course_id=course_id,
            granted_by=granted_by,
            price_paid=price_paid,
        )
        await self._save_purchase(purchase)

        logger.info(
            "course_granted",
            target_user_id=str(user_id),
            course_id=str(course_id),
            granted_by=str(granted_by),
        )
        return purchase

    async def revoke_course(self, user_id: UUID, course_id: UUID) -> bool:
        """Mark every ACTIVE purchase of the course as REVOKED.

        Returns:
            True if something was revoked, False if no active purchase found
        """
        active = [
            p for p in await self._course_purchases(user_id, course_id) if p.is_active()
        ]
        if not active:
            return False

        now = datetime.now(UTC)
        for purchase in active:
            await self.session.aexecute(
                self._update_status,
                [
                    PurchaseStatus.REVOKED.value,
                    now,
                    user_id,
                    course_id,
                    purchase.purchase_id,
                ],
            )
            await self.session.aexecute(
                self._update_status_by_course,
                [PurchaseStatus.REVOKED.value, course_id, user_id, purchase.purchase_id],
            )

        await self._invalidate_cache(user_id, course_id)

        logger.info(
            "course_revoked",
            target_user_id=str(user_id),
            course_id=str(course_id),
            revoked=len(active),
        )
        return True

    async def get_user_purchases(
        self,
        user_id: UUID,
        active_only: bool = False,
    ) -> list[Purchase]:
        """All purchases of a user, optionally only ACTIVE ones."""
        rows = await self.session.aexecute(self._get_user_purchases, [user_id])
        purchases = [Purchase.from_row(row) for row in rows]
        if active_only:
            purchases = [p for p in purchases if p.is_active()]
        return purchases

    # ==========================================================================
    # Private Helpers
    # ==========================================================================

    async def _course_purchases(self, user_id: UUID, course_id: UUID) -> list[Purchase]:
        rows = await self.session.aexecute(
            self._get_user_course_purchases,
            [user_id, course_id],
        )
        return [Purchase.from_row(row) for row in rows]

    async def _save_purchase(self, purchase: Purchase) -> None:
        """Save purchase to both tables (dual-write pattern)."""
        await self.session.aexecute(
            self._insert_purchase,
            [
                purchase.user_id,
                purchase.course_id,
                purchase.purchase_id,
                purchase.status.value,
                purchase.price_paid,
                purchase.granted_by,
                purchase.created_at,
                purchase.updated_at,
            ],
        )
        await self.session.aexecute(
            self._insert_purchase_by_course,
            [
                purchase.course_id,
                purchase.user_id,
                purchase.purchase_id,
                purchase.status.value,
                purchase.created_at,
            ],
        )
        await self._invalidate_cache(purchase.user_id, purchase.course_id)

    async def _invalidate_cache(self, user_id: UUID, course_id: UUID) -> None:
        """Invalidate access cache for user/course pair."""
        if self.redis:
            await self.redis.delete(course_access_cache_key(user_id, course_id))
