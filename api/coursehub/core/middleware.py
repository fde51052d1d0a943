"""Request middleware: request ids, trace ids and access logging."""

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from coursehub.core.context import clear_context, set_request_id, set_trace_id


logger = structlog.get_logger(__name__)

_HTTP_ERROR_STATUS = 400


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Set up the logging context for each request.

    - Reuses ``X-Request-ID`` from the client or generates one
    - Picks a trace id from ``X-Trace-ID``, B3 or W3C ``traceparent`` headers
    - Logs request start/finish with timing (health probes excluded)
    - Echoes the request id back and clears the context afterwards
    """

    REQUEST_ID_HEADER = "X-Request-ID"
    TRACE_ID_HEADER = "X-Trace-ID"
    B3_TRACE_HEADER = "X-B3-TraceId"
    TRACEPARENT_HEADER = "traceparent"

    def __init__(
        self,
        app: ASGIApp,
        log_requests: bool = True,
        exclude_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.log_requests = log_requests
        self.exclude_paths = exclude_paths or ["/health"]

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process the request inside a fresh logging context."""
        start_time = time.perf_counter()

        request_id = set_request_id(request.headers.get(self.REQUEST_ID_HEADER))
        trace_id = (
            request.headers.get(self.TRACE_ID_HEADER)
            or request.headers.get(self.B3_TRACE_HEADER)
            or extract_traceparent(request.headers.get(self.TRACEPARENT_HEADER))
        )
        if trace_id:
            set_trace_id(trace_id)

        request.state.request_id = request_id
        should_log = self.log_requests and not self._is_excluded(request.url.path)

        if should_log:
            logger.info(
                "request_started",
                method=request.method,
                path=request.url.path,
                client_ip=get_client_ip(request),
            )

        try:
            response = await call_next(request)

            if should_log:
                log_method = (
                    logger.warning
                    if response.status_code >= _HTTP_ERROR_STATUS
                    else logger.info
                )
                log_method(
                    "request_completed",
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=_elapsed_ms(start_time),
                )

            response.headers[self.REQUEST_ID_HEADER] = request_id
            return response

        except Exception as e:
            logger.exception(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error_type=type(e).__name__,
                duration_ms=_elapsed_ms(start_time),
            )
            raise

        finally:
            clear_context()

    def _is_excluded(self, path: str) -> bool:
        return any(path.startswith(excluded) for excluded in self.exclude_paths)


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)


def get_client_ip(request: Request) -> str | None:
    """Client IP, honouring X-Forwarded-For and X-Real-IP from the proxy."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    return request.client.host if request.client else None


def extract_traceparent(traceparent: str | None) -> str | None:
    """Extract the trace id from a W3C traceparent header.

    Format: ``{version}-{trace-id}-{parent-id}-{trace-flags}``
    """
    if not traceparent:
        return None

    parts = traceparent.split("-")
    if len(parts) >= 2:
        return parts[1]

    return None
