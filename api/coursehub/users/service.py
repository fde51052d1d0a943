# ruff: noqa: S608 - All CQL queries use keyspace from config, not user input
"""User lookups and admin listing."""

from typing import TYPE_CHECKING
from uuid import UUID

from coursehub.auth.permissions import is_learner
from coursehub.core.logging import get_logger
from coursehub.users.models import User


if TYPE_CHECKING:
    from cassandra.cluster import Session


logger = get_logger(__name__)


class UserError(Exception):
    """Base user error."""

    def __init__(self, message: str, code: str = "user_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class UserNotFoundError(UserError):
    """User does not exist."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message, "user_not_found")


class UserService:
    """Read access to users."""

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        self._get_by_id = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.users WHERE id = ?
        """)

        self._get_by_ids = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.users WHERE id IN ?
        """)

        self._get_all = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.users
        """)

        self._insert = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.users
            (id, name, email, phone, image_url, role, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """)

    async def get_user(self, user_id: UUID) -> User | None:
        """Get user by ID."""
        result = await self.session.aexecute(self._get_by_id, [user_id])
        row = result.one()
        return User.from_row(row) if row else None

    async def get_student(self, user_id: UUID) -> User:
        """Get a user that can receive content grants.

        Raises:
            UserNotFoundError: If the user is missing or is not role USER.
        """
        user = await self.get_user(user_id)
        if user is None or not is_learner(user.role):
            raise UserNotFoundError("Student not found")
        return user

    async def get_users_by_ids(self, user_ids: list[UUID]) -> dict[UUID, User]:
        """Batch lookup, keyed by user ID. Missing users are absent."""
        if not user_ids:
            return {}
        rows = await self.session.aexecute(self._get_by_ids, [list(set(user_ids))])
        return {row.id: User.from_row(row) for row in rows}

    async def list_users(
        self,
        skip: int = 0,
        take: int = 25,
        search: str | None = None,
    ) -> tuple[list[User], int]:
        """List users newest first.

        Filtering and ordering happen in memory; Cassandra has no LIKE or
        global ORDER BY.

        Args:
            skip: Number of users to skip
            take: Page size
            search: Case-insensitive match on name or email

        Returns:
            Tuple of (page, total matching users)
        """
        rows = await self.session.aexecute(self._get_all)
        users = [User.from_row(row) for row in rows]

        if search:
            needle = search.lower().strip()
            users = [
                u for u in users if needle in u.email or needle in u.name.lower()
            ]

        users.sort(key=lambda u: u.created_at, reverse=True)
        return users[skip : skip + take], len(users)

    async def create_user(self, user: User) -> User:
        """Insert a user row. Used by seeding; sign-up lives elsewhere."""
        await self.session.aexecute(
            self._insert,
            [
                user.id,
                user.name,
                user.email,
                user.phone,
                user.image_url,
                user.role,
                user.created_at,
                user.updated_at,
            ],
        )
        logger.info("user_created", target_user_id=str(user.id), role=user.role)
        return user
