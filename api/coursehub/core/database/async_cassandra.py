"""Async Cassandra connection using cassandra-asyncio-driver.

Provides:
- ``CassandraConnection``: owns one cluster/session pair for the process
- Keyspace and table initialization

The application lifespan creates the connection at startup, passes the
session into every service constructor and closes it on shutdown. Nothing
else in the code base reaches for a module-level session.
"""

import structlog
from cassandra.auth import PlainTextAuthProvider
from cassandra.policies import DCAwareRoundRobinPolicy, TokenAwarePolicy
from cassandra_asyncio.cluster import Cluster

from coursehub.chapter_access.models import CHAPTER_ACCESS_TABLES_CQL
from coursehub.config.settings import Settings
from coursehub.courses.models import COURSES_TABLES_CQL
from coursehub.purchases.models import PURCHASES_TABLES_CQL
from coursehub.quiz_results.models import QUIZ_RESULTS_TABLES_CQL
from coursehub.users.models import USERS_TABLES_CQL


logger = structlog.get_logger(__name__)


# Order matters only for readability; every statement is IF NOT EXISTS
SCHEMA_GROUPS: dict[str, list[str]] = {
    "users": USERS_TABLES_CQL,
    "courses": COURSES_TABLES_CQL,
    "purchases": PURCHASES_TABLES_CQL,
    "chapter_access": CHAPTER_ACCESS_TABLES_CQL,
    "quiz_results": QUIZ_RESULTS_TABLES_CQL,
}


class CassandraConnection:
    """Cassandra cluster/session pair with an explicit lifecycle."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._cluster: Cluster | None = None
        self._session = None  # Session type from cassandra_asyncio

    @property
    def session(self):
        """Active session with ``aexecute()`` support."""
        if self._session is None:
            msg = "Cassandra connection not established"
            raise RuntimeError(msg)
        return self._session

    def connect(self):
        """Establish connection to the Cassandra cluster.

        The connection handshake is synchronous; queries run through
        ``session.aexecute()``.

        Raises:
            ConnectionError: If the cluster cannot be reached.
        """
        if self._session is not None:
            return self._session

        auth_provider = None
        if self.settings.cassandra_username and self.settings.cassandra_password:
            auth_provider = PlainTextAuthProvider(
                username=self.settings.cassandra_username,
                password=self.settings.cassandra_password,
            )

        self._cluster = Cluster(
            contact_points=self.settings.cassandra_hosts,
            port=self.settings.cassandra_port,
            auth_provider=auth_provider,
            protocol_version=self.settings.cassandra_protocol_version,
            load_balancing_policy=TokenAwarePolicy(DCAwareRoundRobinPolicy()),
            connect_timeout=self.settings.cassandra_connect_timeout,
        )

        try:
            self._session = self._cluster.connect()
        except Exception as e:
            logger.error("cassandra_connection_failed", error=str(e))
            self._cluster.shutdown()
            self._cluster = None
            raise ConnectionError(f"Failed to connect to Cassandra: {e}") from e

        self._session.default_timeout = self.settings.cassandra_request_timeout
        logger.info(
            "cassandra_connected",
            hosts=self.settings.cassandra_hosts,
            port=self.settings.cassandra_port,
            protocol_version=self.settings.cassandra_protocol_version,
        )
        return self._session

    def close(self) -> None:
        """Close session and cluster."""
        if self._session is not None:
            self._session.shutdown()
            self._session = None
            logger.info("cassandra_session_closed")

        if self._cluster is not None:
            self._cluster.shutdown()
            self._cluster = None
            logger.info("cassandra_cluster_closed")

    @property
    def is_connected(self) -> bool:
        """Check if connection is active."""
        return self._session is not None and not self._session.is_shutdown


async def init_keyspace(session, keyspace: str, production: bool) -> None:
    """Create keyspace if not exists."""
    if production:
        replication = "'class': 'NetworkTopologyStrategy', 'datacenter1': 3"
    else:
        replication = "'class': 'SimpleStrategy', 'replication_factor': 1"

    await session.aexecute(f"""
        CREATE KEYSPACE IF NOT EXISTS {keyspace}
        WITH replication = {{{replication}}}
        AND durable_writes = true
    """)
    logger.info("keyspace_created", keyspace=keyspace)


async def init_tables(session, keyspace: str) -> None:
    """Create every table and index the services rely on."""
    for group, statements in SCHEMA_GROUPS.items():
        for cql_template in statements:
            await session.aexecute(cql_template.format(keyspace=keyspace))
        logger.info("tables_created", group=group, keyspace=keyspace)


async def init_async_cassandra(settings: Settings) -> CassandraConnection:
    """Connect and make sure the schema exists.

    Returns:
        Connected ``CassandraConnection``; close it with
        ``shutdown_async_cassandra``.
    """
    connection = CassandraConnection(settings)
    session = connection.connect()

    try:
        await init_keyspace(session, settings.cassandra_keyspace, settings.is_production)
        session.set_keyspace(settings.cassandra_keyspace)
        await init_tables(session, settings.cassandra_keyspace)
    except Exception as e:
        logger.error("cassandra_schema_init_failed", error=str(e))
        connection.close()
        raise

    logger.info("cassandra_initialized", keyspace=settings.cassandra_keyspace)
    return connection


async def shutdown_async_cassandra(connection: CassandraConnection | None) -> None:
    """Shutdown the Cassandra connection if one was created."""
    if connection is not None:
        connection.close()
