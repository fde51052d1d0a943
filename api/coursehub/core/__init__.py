# Core infrastructure
from coursehub.core.context import (
    clear_context,
    get_context,
    get_request_id,
    set_identity,
    set_request_id,
    set_trace_id,
)
from coursehub.core.logging import configure_structlog, get_logger
from coursehub.core.middleware import RequestContextMiddleware


__all__ = [
    "RequestContextMiddleware",
    "clear_context",
    "configure_structlog",
    "get_context",
    "get_logger",
    "get_request_id",
    "set_identity",
    "set_request_id",
    "set_trace_id",
]
