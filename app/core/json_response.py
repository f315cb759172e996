"""
Error rendering: turns a forwarded error into an HTTP status and JSON body.

Kept separate from the handlers so pipelines and controllers can be tested
without a transport stack.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.errors import HttpError
from app.core.logging import get_logger

logger = get_logger(__name__)


def error_payload(error: Exception) -> tuple[int, dict[str, Any]]:
    """Map an error to ``(status_code, body)``."""
    if isinstance(error, HttpError):
        return error.status_code, {"message": error.message, "kind": error.kind}

    # Unknown failures never leak their details to the caller
    return 500, {"message": "Server error", "kind": "internal_error"}


def render_error(error: Exception) -> JSONResponse:
    """Render an error as a JSON response."""
    status_code, body = error_payload(error)
    if status_code >= 500:
        logger.error(
            "request_failed",
            status_code=status_code,
            error=str(error),
            error_type=type(error).__name__,
        )
    return JSONResponse(content=body, status_code=status_code)


async def http_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """FastAPI exception handler for errors raised outside of controllers."""
    return render_error(exc)
