"""Database connection module for CourseHub."""

from coursehub.core.database.async_cassandra import (
    CassandraConnection,
    init_async_cassandra,
    shutdown_async_cassandra,
)


__all__ = [
    "CassandraConnection",
    "init_async_cassandra",
    "shutdown_async_cassandra",
]
