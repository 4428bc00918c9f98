"""Global exception handlers: map SDK exceptions to HTTP status codes.

The SDK raises ``ValueError`` subclasses for bad input and misuse, and
``PersistenceError`` when the storage collaborator fails.  Installing
handlers once keeps the route functions focused on the happy path.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from intake_flow.errors import FlowStateError, PersistenceError

logger = logging.getLogger(__name__)

# --- Keyword patterns in ValueError messages and their HTTP status codes ---
# Checked in order; first match wins.
_VALUE_ERROR_PATTERNS: list[tuple[str, int]] = [
    ("already exists", 409),
    ("not found", 404),
]

# Internal details (user_id, flow_id) stay in the server log; the client
# receives only a generic description.
_SAFE_MESSAGES: dict[int, str] = {
    400: "Invalid request",
    404: "Resource not found",
    409: "Conflict with current flow state",
    503: "Profile storage unavailable, please retry",
}


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Map SDK ``ValueError`` to 404 / 409 / 400 by message, 409 for flow state."""
    msg = str(exc)
    status = 400
    if isinstance(exc, FlowStateError):
        status = 409
    else:
        for pattern, code in _VALUE_ERROR_PATTERNS:
            if pattern in msg.lower():
                status = code
                break

    logger.warning("ValueError [%d] at %s: %s", status, request.url, msg)
    return JSONResponse(status_code=status, content={"detail": _SAFE_MESSAGES[status]})


async def persistence_error_handler(
    request: Request, exc: PersistenceError
) -> JSONResponse:
    """Storage failed during completion; the client may retry the advance."""
    logger.error("PersistenceError at %s: %s (cause: %r)", request.url, exc, exc.__cause__)
    return JSONResponse(status_code=503, content={"detail": _SAFE_MESSAGES[503]})


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions: log full traceback, return 500."""
    logger.exception("Unhandled exception at %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
