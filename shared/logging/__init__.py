"""Structured logging module"""

from shared.logging.json_logger import (
    JSONFormatter,
    RequestContextFilter,
    get_logger,
    log_error_with_context,
    log_with_context,
    setup_json_logger,
)

__all__ = [
    "JSONFormatter",
    "setup_json_logger",
    "get_logger",
    "RequestContextFilter",
    "log_with_context",
    "log_error_with_context",
]
