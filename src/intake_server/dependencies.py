"""FastAPI dependency injection: provides DB sessions, registry, catalog and user identity.

Flow state lives in the in-memory registry; only the profile read endpoint
touches the database directly.  Profile writes happen inside the
persister's own transaction during completion.
"""

import hmac
from typing import AsyncGenerator

from fastapi import Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from intake_db.engine import get_session_factory
from intake_flow.catalog import ScreenCatalog

from intake_server.registry import FlowRegistry


# ------------------------------------------------------------------
# Database session (read-only endpoints)
# ------------------------------------------------------------------

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session for the duration of the request."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


# ------------------------------------------------------------------
# Registry & catalog: stashed on app.state during lifespan
# ------------------------------------------------------------------

def get_registry(request: Request) -> FlowRegistry:
    return request.app.state.registry


def get_catalog(request: Request) -> ScreenCatalog:
    return request.app.state.catalog


# ------------------------------------------------------------------
# User identity: extracted from the X-User-ID header
# ------------------------------------------------------------------

async def get_user_id(
    request: Request,
    x_user_id: str | None = Header(None, alias="X-User-ID"),
    x_proxy_secret: str | None = Header(None, alias="X-Proxy-Secret"),
) -> str:
    """Extract user identity from the ``X-User-ID`` header.

    Returns 401 if the header is missing.  When ``TRUSTED_PROXY_SECRET`` is
    configured the request must also carry a matching ``X-Proxy-Secret``.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="X-User-ID header is required")

    expected_secret: str | None = request.app.state.settings.trusted_proxy_secret
    if expected_secret:
        if not x_proxy_secret:
            raise HTTPException(status_code=403, detail="X-Proxy-Secret header is required")
        # Constant-time comparison
        if not hmac.compare_digest(x_proxy_secret, expected_secret):
            raise HTTPException(status_code=403, detail="Invalid proxy secret")

    return x_user_id
