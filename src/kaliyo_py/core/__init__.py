"""Cross-cutting concerns for kaliyo-py: logging and error handling."""

from kaliyo_py.core.error_handling import ErrorResponse, get_exception_handlers
from kaliyo_py.core.logging import CorrelationIdMiddleware, RequestLoggingMiddleware, configure_logging

__all__ = [
    "CorrelationIdMiddleware",
    "ErrorResponse",
    "RequestLoggingMiddleware",
    "configure_logging",
    "get_exception_handlers",
]
