"""Health check endpoints."""

from fastapi import APIRouter, Request, status
from fastapi.responses import ORJSONResponse

from coursehub.config import get_settings


router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
async def liveness() -> dict[str, str]:
    """Liveness probe - the process is up."""
    return {"status": "alive"}


@router.get("/ready")
async def readiness(request: Request) -> ORJSONResponse:
    """Readiness probe - the store connection is usable."""
    settings = get_settings()
    connection = getattr(request.app.state, "cassandra", None)
    database_ready = connection is not None and connection.is_connected
    cache_ready = getattr(request.app.state, "redis", None) is not None

    return ORJSONResponse(
        status_code=status.HTTP_200_OK
        if database_ready
        else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if database_ready else "unavailable",
            "database": database_ready,
            "cache": cache_ready,
            "environment": settings.environment,
            "debug": settings.debug,
        },
    )


@router.get("")
async def health() -> dict[str, str]:
    """General health check endpoint."""
    settings = get_settings()
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }
