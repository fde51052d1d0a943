"""FastAPI dependencies for the access resolver."""

from typing import Annotated

from fastapi import Depends, Request

from coursehub.access.service import AccessResolver


def get_access_resolver(request: Request) -> AccessResolver:
    """Get AccessResolver instance from app state."""
    resolver = getattr(request.app.state, "access_resolver", None)
    if resolver is None:
        msg = "AccessResolver not configured"
        raise RuntimeError(msg)
    return resolver


AccessResolverDep = Annotated[AccessResolver, Depends(get_access_resolver)]
