"""Tests for PurchaseService."""

from datetime import UTC, datetime
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest
from cassandra.cluster import Session

from coursehub.purchases.models import PurchaseStatus
from coursehub.purchases.service import PurchaseExistsError, PurchaseService


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Mock Redis client (decode_responses=True, so values are str)."""
    redis_mock = AsyncMock()
    redis_mock.get = AsyncMock(return_value=None)
    return redis_mock


@pytest.fixture
def service(mock_session: Session, mock_redis: AsyncMock) -> PurchaseService:
    return PurchaseService(
        session=mock_session,
        keyspace="test_keyspace",
        redis=mock_redis,
        cache_ttl=120,
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def course_id() -> UUID:
    return uuid4()


def _purchase_row(
    user_id: UUID,
    course_id: UUID,
    status: PurchaseStatus = PurchaseStatus.ACTIVE,
) -> SimpleNamespace:
    return SimpleNamespace(
        user_id=user_id,
        course_id=course_id,
        purchase_id=uuid4(),
        status=status.value,
        price_paid=Decimal("0"),
        granted_by=None,
        created_at=datetime.now(UTC),
        updated_at=None,
    )


class TestHasActivePurchase:
    """Tests for has_active_purchase."""

    @pytest.mark.asyncio
    async def test_cache_hit_skips_database(
        self, service, mock_session, mock_redis, user_id, course_id
    ) -> None:
        mock_redis.get.return_value = "1"

        assert await service.has_active_purchase(user_id, course_id) is True
        mock_session.aexecute.assert_not_awaited()
        mock_redis.get.assert_awaited_once_with(f"access:{user_id}:{course_id}")

    @pytest.mark.asyncio
    async def test_cached_negative(
        self, service, mock_session, mock_redis, user_id, course_id
    ) -> None:
        mock_redis.get.return_value = "0"

        assert await service.has_active_purchase(user_id, course_id) is False
        mock_session.aexecute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cache_miss_queries_and_stores(
        self, service, mock_session, mock_redis, make_result, user_id, course_id
    ) -> None:
        mock_session.aexecute.return_value = make_result(
            [
                _purchase_row(user_id, course_id, PurchaseStatus.REFUNDED),
                _purchase_row(user_id, course_id, PurchaseStatus.ACTIVE),
            ]
        )

        assert await service.has_active_purchase(user_id, course_id) is True
        mock_redis.setex.assert_awaited_once_with(
            f"access:{user_id}:{course_id}", 120, "1"
        )

    @pytest.mark.parametrize(
        "status",
        [PurchaseStatus.PENDING, PurchaseStatus.REFUNDED, PurchaseStatus.REVOKED],
    )
    @pytest.mark.asyncio
    async def test_only_active_counts(
        self, service, mock_session, make_result, user_id, course_id, status
    ) -> None:
        mock_session.aexecute.return_value = make_result(
            [_purchase_row(user_id, course_id, status)]
        )

        assert await service.has_active_purchase(user_id, course_id) is False

    @pytest.mark.asyncio
    async def test_without_redis(
        self, mock_session, make_result, user_id, course_id
    ) -> None:
        service = PurchaseService(session=mock_session, keyspace="test_keyspace")
        mock_session.aexecute.return_value = make_result()

        assert await service.has_active_purchase(user_id, course_id) is False


class TestGrantCourse:
    """Tests for grant_course."""

    @pytest.mark.asyncio
    async def test_grant_writes_both_tables(
        self, service, mock_session, mock_redis, make_result, user_id, course_id
    ) -> None:
        admin_id = uuid4()
        mock_session.aexecute.return_value = make_result()

        purchase = await service.grant_course(
            user_id, course_id, granted_by=admin_id, price_paid=Decimal("49.90")
        )

        assert purchase.status is PurchaseStatus.ACTIVE
        assert purchase.granted_by == admin_id
        assert purchase.price_paid == Decimal("49.90")
        # lookup + two inserts
        assert mock_session.aexecute.await_count == 3
        mock_redis.delete.assert_awaited_once_with(f"access:{user_id}:{course_id}")

    @pytest.mark.asyncio
    async def test_grant_conflicts_with_active(
        self, service, mock_session, make_result, user_id, course_id
    ) -> None:
        mock_session.aexecute.return_value = make_result(
            [_purchase_row(user_id, course_id)]
        )

        with pytest.raises(PurchaseExistsError):
            await service.grant_course(user_id, course_id, granted_by=uuid4())

        assert mock_session.aexecute.await_count == 1

    @pytest.mark.asyncio
    async def test_regrant_after_revoke(
        self, service, mock_session, make_result, user_id, course_id
    ) -> None:
        mock_session.aexecute.return_value = make_result(
            [_purchase_row(user_id, course_id, PurchaseStatus.REVOKED)]
        )

        purchase = await service.grant_course(user_id, course_id, granted_by=uuid4())

        assert purchase.is_active()


class TestRevokeCourse:
    """Tests for revoke_course."""

    @pytest.mark.asyncio
    async def test_revoke_active(
        self, service, mock_session, mock_redis, make_result, user_id, course_id
    ) -> None:
        mock_session.aexecute.return_value = make_result(
            [_purchase_row(user_id, course_id)]
        )

        assert await service.revoke_course(user_id, course_id) is True
        # lookup + update in both tables
        assert mock_session.aexecute.await_count == 3
        update_args = mock_session.aexecute.await_args_list[1].args[1]
        assert update_args[0] == PurchaseStatus.REVOKED.value
        mock_redis.delete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_revoke_nothing(
        self, service, mock_session, mock_redis, make_result, user_id, course_id
    ) -> None:
        mock_session.aexecute.return_value = make_result(
            [_purchase_row(user_id, course_id, PurchaseStatus.REFUNDED)]
        )

        assert await service.revoke_course(user_id, course_id) is False
        mock_redis.delete.assert_not_awaited()


class TestGetUserPurchases:
    """Tests for get_user_purchases."""

    @pytest.mark.asyncio
    async def test_active_only(
        self, service, mock_session, make_result, user_id
    ) -> None:
        active_course = uuid4()
        mock_session.aexecute.return_value = make_result(
            [
                _purchase_row(user_id, active_course),
                _purchase_row(user_id, uuid4(), PurchaseStatus.REVOKED),
            ]
        )

        everything = await service.get_user_purchases(user_id)
        active = await service.get_user_purchases(user_id, active_only=True)

        assert len(everything) == 2
        assert [p.course_id for p in active] == [active_course]
