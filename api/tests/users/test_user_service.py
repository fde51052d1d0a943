"""Tests for UserService."""

from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from uuid import uuid4

import pytest
from cassandra.cluster import Session

from coursehub.users.service import UserNotFoundError, UserService


@pytest.fixture
def service(mock_session: Session) -> UserService:
    return UserService(session=mock_session, keyspace="test_keyspace")


def _user_row(name: str, email: str, role: str = "user", age_days: int = 0):
    return SimpleNamespace(
        id=uuid4(),
        name=name,
        email=email,
        phone=None,
        image_url=None,
        role=role,
        created_at=datetime.now(UTC) - timedelta(days=age_days),
        updated_at=None,
    )


class TestGetStudent:
    """Tests for get_student."""

    @pytest.mark.asyncio
    async def test_returns_learner(self, service, mock_session, make_result) -> None:
        row = _user_row("Ana", "ana@test.com")
        mock_session.aexecute.return_value = make_result([row])

        user = await service.get_student(row.id)

        assert user.id == row.id
        assert user.email == "ana@test.com"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ["teacher", "admin", "student"])
    async def test_rejects_other_roles(
        self, service, mock_session, make_result, role: str
    ) -> None:
        row = _user_row("Bo", "bo@test.com", role=role)
        mock_session.aexecute.return_value = make_result([row])

        with pytest.raises(UserNotFoundError, match="Student not found"):
            await service.get_student(row.id)

    @pytest.mark.asyncio
    async def test_missing_user(self, service, mock_session, make_result) -> None:
        mock_session.aexecute.return_value = make_result()

        with pytest.raises(UserNotFoundError):
            await service.get_student(uuid4())


class TestGetUsersByIds:
    """Tests for get_users_by_ids."""

    @pytest.mark.asyncio
    async def test_empty_input_skips_query(self, service, mock_session) -> None:
        assert await service.get_users_by_ids([]) == {}
        mock_session.aexecute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_keyed_by_id(self, service, mock_session, make_result) -> None:
        rows = [_user_row("A", "a@test.com"), _user_row("B", "b@test.com")]
        mock_session.aexecute.return_value = make_result(rows)

        users = await service.get_users_by_ids([rows[0].id, rows[1].id, rows[0].id])

        assert set(users) == {rows[0].id, rows[1].id}
        queried_ids = mock_session.aexecute.await_args.args[1][0]
        assert len(queried_ids) == 2


class TestListUsers:
    """Tests for list_users."""

    @pytest.fixture
    def rows(self) -> list[SimpleNamespace]:
        return [
            _user_row("Old Admin", "admin@test.com", role="admin", age_days=30),
            _user_row("Maria Silva", "maria@test.com", age_days=2),
            _user_row("Joao", "joao@test.com", role="teacher", age_days=1),
        ]

    @pytest.mark.asyncio
    async def test_newest_first(self, service, mock_session, make_result, rows) -> None:
        mock_session.aexecute.return_value = make_result(rows)

        users, total = await service.list_users()

        assert total == 3
        assert [u.name for u in users] == ["Joao", "Maria Silva", "Old Admin"]

    @pytest.mark.asyncio
    async def test_search_name_or_email(
        self, service, mock_session, make_result, rows
    ) -> None:
        mock_session.aexecute.return_value = make_result(rows)

        by_name, _ = await service.list_users(search="SILVA")
        by_email, _ = await service.list_users(search="admin@")

        assert [u.name for u in by_name] == ["Maria Silva"]
        assert [u.name for u in by_email] == ["Old Admin"]

    @pytest.mark.asyncio
    async def test_pagination(self, service, mock_session, make_result, rows) -> None:
        mock_session.aexecute.return_value = make_result(rows)

        page, total = await service.list_users(skip=1, take=1)

        assert total == 3
        assert [u.name for u in page] == ["Maria Silva"]
