"""
Common API utilities: translating service-layer errors into HTTP responses.
"""
import logging
from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..exceptions import TrackerError

logger = logging.getLogger(__name__)


def to_http_exception(error: TrackerError, action: str = "process request") -> HTTPException:
    """
    Standardized mapping from service exceptions to HTTPException.

    Args:
        error: The exception raised by the service layer
        action: Short description of the attempted action, logged for server-side failures

    Returns:
        HTTPException with appropriate status code and message
    """
    if error.status_code >= 500:
        logger.error("Failed to %s: %s", action, error.message)
    return HTTPException(status_code=error.status_code, detail=error.message)


async def tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
    http_exc = to_http_exception(exc, f"{request.method} {request.url.path}")
    headers = {"WWW-Authenticate": "Bearer"} if http_exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail}, headers=headers)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 with a readable message."""
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else err.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "; ".join(messages) or "Invalid request"},
    )
