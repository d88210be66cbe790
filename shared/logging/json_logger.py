"""
Structured JSON Logging

Provides structured logging with JSON formatting for:
- Machine-readable logs
- Log aggregation systems (ELK, Splunk, etc.)
- Backtest/analysis context tracking (symbol, indicator, strategy)
- Sensitive data redaction
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from shared.config import settings

# Context fields copied from ``extra=`` into JSON output
CONTEXT_FIELDS = (
    "request_id",
    "symbol",
    "timeframe",
    "indicator",
    "strategy",
    "trade_number",
)


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Outputs logs in JSON format with:
    - Timestamp in ISO format
    - Log level
    - Logger name
    - Message
    - Module, function, line number
    - Extra context fields (symbol, indicator, strategy, ...)
    - Exception info (if present)
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Log record

        Returns:
            str: JSON-formatted log entry
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "environment": settings.ENVIRONMENT,
        }

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        # Lazy import to avoid circular dependency
        from shared.validation import sanitize_log_data
        log_data = sanitize_log_data(log_data)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class RequestContextFilter(logging.Filter):
    """
    Add request context to log records.

    Usage:
        logger.addFilter(RequestContextFilter())
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Add request context fields to record.

        Args:
            record: Log record

        Returns:
            bool: Always True (don't filter out)
        """
        if not hasattr(record, "request_id"):
            record.request_id = None

        return True


def setup_json_logger(
    name: str = "signalboost",
    level: str | None = None,
) -> logging.Logger:
    """
    Set up logger with JSON formatting.

    Args:
        name: Logger name
        level: Log level (defaults to settings.LOG_LEVEL)

    Returns:
        logging.Logger: Configured logger

    Examples:
        >>> logger = setup_json_logger("backtest")
        >>> logger.info("Backtest finished", extra={"symbol": "BTC-USDT"})
        {"timestamp": "2025-10-05T10:00:00Z", "level": "INFO", ...}
    """
    logger = logging.getLogger(name)

    log_level = level or settings.LOG_LEVEL
    logger.setLevel(getattr(logging, log_level.upper()))

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler()

    formatter: logging.Formatter
    if settings.LOG_JSON:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            fmt=settings.LOG_FORMAT,
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.addFilter(RequestContextFilter())

    # Prevent propagation to root logger
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get or create logger with JSON formatting.

    Args:
        name: Logger name

    Returns:
        logging.Logger: Logger instance

    Examples:
        >>> logger = get_logger(__name__)
        >>> logger.info("Scoring bar", extra={"symbol": "ETH-USDT"})
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        return setup_json_logger(name)

    return logger


# ============================================================================
# Convenience Functions
# ============================================================================


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: Any,
) -> None:
    """
    Log message with additional context.

    Args:
        logger: Logger instance
        level: Log level (debug, info, warning, error, critical)
        message: Log message
        **context: Additional context fields

    Examples:
        >>> logger = get_logger(__name__)
        >>> log_with_context(
        ...     logger, "info", "Comparison complete",
        ...     symbol="BTC-USDT", strategy="multi"
        ... )
    """
    log_func = getattr(logger, level.lower())
    log_func(message, extra=context)


def log_error_with_context(
    logger: logging.Logger,
    error: Exception,
    message: str | None = None,
    **context: Any,
) -> None:
    """
    Log error with exception info and context.

    Args:
        logger: Logger instance
        error: Exception object
        message: Optional custom message (defaults to exception message)
        **context: Additional context fields
    """
    log_message = message or str(error)
    logger.error(log_message, exc_info=error, extra=context)
