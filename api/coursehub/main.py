"""CourseHub API - Main Application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from coursehub.access.router import router as access_router
from coursehub.access.service import AccessResolver
from coursehub.chapter_access.router import admin_router as chapter_access_admin_router
from coursehub.chapter_access.router import (
    teacher_router as chapter_access_teacher_router,
)
from coursehub.chapter_access.service import ChapterAccessService
from coursehub.config import Settings, get_settings
from coursehub.core.context import get_request_id
from coursehub.core.database import init_async_cassandra, shutdown_async_cassandra
from coursehub.core.logging import configure_structlog, get_logger
from coursehub.core.middleware import RequestContextMiddleware
from coursehub.core.redis import init_redis, shutdown_redis
from coursehub.courses.router import router as courses_router
from coursehub.courses.service import CourseService
from coursehub.health import router as health_router
from coursehub.purchases.router import router as purchases_router
from coursehub.purchases.service import PurchaseService
from coursehub.quiz_results.router import router as quiz_results_router
from coursehub.quiz_results.service import QuizResultService
from coursehub.users.router import router as users_router
from coursehub.users.service import UserService


# Configure logging early (before creating logger)
settings = get_settings()
configure_structlog(settings, log_dir=Path(settings.log_dir))

logger = get_logger(__name__)


def init_services(
    app: FastAPI,
    session: Any,
    settings: Settings,
    redis_client: Any = None,
) -> None:
    """Construct every service around one session and publish it on ``app.state``."""
    keyspace = settings.cassandra_keyspace

    user_service = UserService(session=session, keyspace=keyspace)
    course_service = CourseService(session=session, keyspace=keyspace)
    purchase_service = PurchaseService(
        session=session,
        keyspace=keyspace,
        redis=redis_client,
        cache_ttl=settings.access_cache_ttl_seconds,
    )
    chapter_access_service = ChapterAccessService(
        session=session,
        keyspace=keyspace,
        course_service=course_service,
        user_service=user_service,
    )

    app.state.user_service = user_service
    app.state.course_service = course_service
    app.state.purchase_service = purchase_service
    app.state.chapter_access_service = chapter_access_service
    app.state.quiz_result_service = QuizResultService(
        session=session,
        keyspace=keyspace,
        course_service=course_service,
        user_service=user_service,
    )
    app.state.access_resolver = AccessResolver(
        course_service=course_service,
        purchase_service=purchase_service,
        chapter_access_service=chapter_access_service,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Own the store and cache connections for the lifetime of the process."""
    settings = get_settings()

    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    # Redis is optional: purchase checks fall back to the database
    app.state.redis = None
    try:
        app.state.redis = await init_redis(settings)
        logger.info("redis_initialized")
    except Exception as e:
        logger.warning(
            "redis_init_skipped",
            error=str(e),
            message="Running without Redis - access checks are not cached",
        )

    app.state.cassandra = None
    try:
        app.state.cassandra = await init_async_cassandra(settings)
        init_services(app, app.state.cassandra.session, settings, app.state.redis)
        logger.info("services_initialized")
    except Exception as e:
        logger.warning(
            "database_init_skipped",
            error=str(e),
            message="Running without database connection",
        )

    yield

    # Shutdown
    logger.info("shutting_down_application")
    await shutdown_redis(app.state.redis)
    await shutdown_async_cassandra(app.state.cassandra)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    # debug=False keeps Starlette from rendering tracebacks; handlers below log them
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Course catalogue and chapter access control",
        debug=False,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )

    app.add_middleware(
        RequestContextMiddleware,
        log_requests=settings.log_requests,
        exclude_paths=settings.log_exclude_paths,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        max_age=settings.cors_max_age,
    )

    def _get_request_id_safe(request: Request) -> str | None:
        if hasattr(request.state, "request_id"):
            return request.state.request_id
        return get_request_id() or None

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        """Render HTTP errors in the common envelope."""
        request_id = _get_request_id_safe(request)

        logger.warning(
            "http_exception",
            status_code=exc.status_code,
            detail=str(exc.detail),
            path=request.url.path,
            method=request.method,
        )

        return ORJSONResponse(
            status_code=exc.status_code,
            content={
                "error": True,
                "message": str(exc.detail)
                if exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR
                else "Internal server error",
                "status_code": exc.status_code,
                "request_id": request_id,
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        """Render validation errors with per-field details."""
        request_id = _get_request_id_safe(request)

        logger.warning(
            "validation_error",
            errors=exc.errors(),
            path=request.url.path,
            method=request.method,
        )

        return ORJSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": True,
                "message": "Validation error",
                "status_code": status.HTTP_422_UNPROCESSABLE_ENTITY,
                "request_id": request_id,
                "details": [
                    {
                        "field": ".".join(str(loc) for loc in err.get("loc", [])),
                        "message": err.get("msg", "Invalid value"),
                    }
                    for err in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> ORJSONResponse:
        """Catch-all: log with stack trace, answer with a generic 500."""
        request_id = _get_request_id_safe(request)

        logger.exception(
            "unhandled_exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
        )

        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": True,
                "message": "An unexpected error occurred. Please try again later.",
                "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
                "request_id": request_id,
            },
        )

    app.include_router(health_router)
    app.include_router(courses_router)
    app.include_router(access_router)
    app.include_router(users_router)
    app.include_router(purchases_router)
    app.include_router(chapter_access_admin_router)
    app.include_router(chapter_access_teacher_router)
    app.include_router(quiz_results_router)

    @app.get("/", tags=["root"])
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": "CourseHub API",
            "version": settings.app_version,
            "docs": "/docs" if settings.is_development else "disabled",
        }

    return app


app = create_app()
