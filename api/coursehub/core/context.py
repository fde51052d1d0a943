"""Request context tracked with contextvars.

Every request gets a request id; authenticated requests also carry the
caller's user id and role. Log processors read these values so handlers and
services never have to pass them around explicitly.
"""

from contextvars import ContextVar
from typing import Any
from uuid import UUID, uuid4


request_id_var: ContextVar[str] = ContextVar("request_id", default="")
trace_id_var: ContextVar[str | None] = ContextVar("trace_id", default=None)
user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)
user_role_var: ContextVar[str | None] = ContextVar("user_role", default=None)


def generate_request_id() -> str:
    """Generate a new unique request ID."""
    return str(uuid4())


def get_request_id() -> str:
    """Get the current request ID."""
    return request_id_var.get()


def set_request_id(request_id: str | None = None) -> str:
    """Set the request ID for the current context.

    Args:
        request_id: Incoming request ID. A new one is generated when missing.

    Returns:
        The request ID that was set.
    """
    rid = request_id or generate_request_id()
    request_id_var.set(rid)
    return rid


def set_trace_id(trace_id: str | None) -> None:
    """Set the distributed trace ID for the current context."""
    trace_id_var.set(trace_id)


def set_identity(user_id: str | UUID | None, role: str | None = None) -> None:
    """Bind the caller identity to the current context.

    Args:
        user_id: Authenticated user ID (string or UUID), None for anonymous.
        role: Role claim from the access token.
    """
    user_id_var.set(str(user_id) if user_id is not None else None)
    user_role_var.set(role)


def get_context() -> dict[str, Any]:
    """Get the non-empty context values as a dictionary."""
    values = {
        "request_id": request_id_var.get(),
        "trace_id": trace_id_var.get(),
        "user_id": user_id_var.get(),
        "user_role": user_role_var.get(),
    }
    return {key: value for key, value in values.items() if value}


def clear_context() -> None:
    """Reset all context variables at the end of a request."""
    request_id_var.set("")
    trace_id_var.set(None)
    user_id_var.set(None)
    user_role_var.set(None)
