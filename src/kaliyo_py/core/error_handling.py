"""Exception handlers for the HTTP side of kaliyo-py.

Every error leaves the server as the same JSON shape, carrying the request's
correlation id so a client report can be matched to the server log.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog
from litestar import Response
from litestar.status_codes import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND, HTTP_500_INTERNAL_SERVER_ERROR

if TYPE_CHECKING:
    from litestar import Request
    from litestar.exceptions import HTTPException

    from kaliyo_py.exceptions import KaliyoError, RoomNotFoundError

logger = structlog.get_logger(__name__)


@dataclass
class ErrorResponse:
    """Structured error response format."""

    status: str = "error"
    message: str = ""
    code: str = "internal_error"
    correlation_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result: dict[str, Any] = {"status": self.status, "message": self.message, "code": self.code}
        if self.correlation_id:
            result["correlation_id"] = self.correlation_id
        return result


def get_correlation_id(request: Request) -> str | None:
    """Extract the correlation id set by the middleware, or sent by the client."""
    correlation_id = request.scope.get("state", {}).get("correlation_id")
    if correlation_id:
        return correlation_id
    return request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID")


def _json_error(request: Request, status_code: int, message: str, code: str) -> Response[dict[str, Any]]:
    error_response = ErrorResponse(message=message, code=code, correlation_id=get_correlation_id(request))
    return Response(content=error_response.to_dict(), status_code=status_code, media_type="application/json")


def room_not_found_handler(request: Request, exc: RoomNotFoundError) -> Response[dict[str, Any]]:
    """Handle lookups of rooms that do not exist."""
    logger.info("Room not found", room_code=exc.room_code, path=request.url.path)
    return _json_error(request, HTTP_404_NOT_FOUND, str(exc), exc.code)


def kaliyo_error_handler(request: Request, exc: KaliyoError) -> Response[dict[str, Any]]:
    """Handle domain errors raised by a request."""
    logger.warning("Request rejected", error=str(exc), error_code=exc.code, path=request.url.path)
    return _json_error(request, HTTP_400_BAD_REQUEST, str(exc), exc.code)


def http_exception_handler(request: Request, exc: HTTPException) -> Response[dict[str, Any]]:
    """Handle Litestar HTTP exceptions such as unknown routes."""
    code_map = {
        400: "bad_request",
        404: "not_found",
        405: "method_not_allowed",
        500: "internal_error",
    }
    error_code = code_map.get(exc.status_code, "error")
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

    log = logger.warning if exc.status_code < 500 else logger.error
    log("HTTP exception", path=request.url.path, status_code=exc.status_code, error_code=error_code)
    return _json_error(request, exc.status_code, message, error_code)


def generic_exception_handler(request: Request, exc: Exception) -> Response[dict[str, Any]]:
    """Handle unexpected exceptions.

    Logs the full exception but returns a safe message to the client.
    """
    logger.exception("Unhandled exception", path=request.url.path, method=request.method, exc_info=exc)
    return _json_error(
        request,
        HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please try again later.",
        "internal_error",
    )


def get_exception_handlers() -> dict:
    """Get all exception handlers for the application.

    Returns:
        Dictionary mapping exception types to handler functions.
    """
    from litestar.exceptions import HTTPException

    from kaliyo_py.exceptions import KaliyoError, RoomNotFoundError

    return {
        RoomNotFoundError: room_not_found_handler,
        KaliyoError: kaliyo_error_handler,
        HTTPException: http_exception_handler,
        Exception: generic_exception_handler,
    }
