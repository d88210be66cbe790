"""
Framework-agnostic Exception Mapping

Turns engine exceptions into the status code and payload the calling HTTP
layer returns. Unclassified exceptions map to 500 with INTERNAL_ERROR.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from shared.config import settings
from shared.errors.exceptions import ErrorCode, TradingException
from shared.logging import get_logger

logger = get_logger(__name__)


def _iso_timestamp() -> str:
    """Return current UTC timestamp in ISO-8601 with trailing Z."""

    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"


def error_status_code(exc: Exception) -> int:
    """HTTP status for an exception raised by the engine."""
    if isinstance(exc, TradingException):
        return exc.status_code
    return 500


def error_payload(exc: Exception, request_id: str | None = None) -> dict[str, Any]:
    """
    Build the error body for an exception.

    Args:
        exc: Raised exception
        request_id: Optional correlation id from the caller

    Returns:
        dict: ``{"success": False, "message": ..., "meta": {...}}``
    """
    if isinstance(exc, TradingException):
        logger.warning(
            f"Engine error {exc.code.value}: {exc.message}",
            extra={"request_id": request_id},
        )
        code = exc.code.value
        message = exc.message
        details = exc.details
    else:
        logger.error(
            f"Unhandled error: {exc}",
            exc_info=exc,
            extra={"request_id": request_id},
        )
        code = ErrorCode.INTERNAL_ERROR.value
        message = "Internal server error"
        details = {"error": str(exc), "type": type(exc).__name__} if settings.DEBUG else {}

    meta: dict[str, Any] = {
        "error_code": code,
        "timestamp": _iso_timestamp(),
    }
    if request_id:
        meta["request_id"] = request_id
    if details:
        meta["details"] = details

    return {"success": False, "message": message, "meta": meta, "data": None}
