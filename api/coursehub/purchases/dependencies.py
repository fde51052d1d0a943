"""FastAPI dependencies for purchases."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from coursehub.purchases.service import PurchaseService


def get_purchase_service(request: Request) -> PurchaseService:
    """Get PurchaseService instance from app state."""
    service = getattr(request.app.state, "purchase_service", None)
    if service is None:
        msg = "PurchaseService not configured"
        raise RuntimeError(msg)
    return service


PurchaseServiceDep = Annotated[PurchaseService, Depends(get_purchase_service)]


def handle_purchase_error(error: Exception) -> HTTPException:
    """Convert purchase errors to HTTPException."""
    status_map = {
        "purchase_exists": status.HTTP_409_CONFLICT,
        "purchase_not_found": status.HTTP_404_NOT_FOUND,
    }

    code = getattr(error, "code", "purchase_error")
    message = getattr(error, "message", str(error))

    return HTTPException(
        status_code=status_map.get(code, status.HTTP_400_BAD_REQUEST),
        detail=message,
    )
