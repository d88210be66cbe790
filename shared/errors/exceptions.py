"""
Structured Exception Handling for SignalBoost

Provides error categorization for the scoring and backtesting engine with:
- Typed error codes for programmatic error handling
- Structured error details for debugging
- HTTP status code mapping for the calling API layer
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Error codes for the SignalBoost engine.

    Categories:
    - VALIDATION_*: Input validation errors
    - DATA_*: Market data availability errors
    - INDICATOR_*: Indicator lookup errors
    - SYSTEM_*: Configuration/infrastructure errors
    """

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_SYMBOL = "INVALID_SYMBOL"
    INVALID_WEIGHT = "INVALID_WEIGHT"
    SERIES_MISALIGNED = "SERIES_MISALIGNED"

    # Data Errors
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"

    # Indicator Errors
    UNKNOWN_INDICATOR = "UNKNOWN_INDICATOR"

    # Notification Errors
    NOTIFICATION_FAILED = "NOTIFICATION_FAILED"

    # System Errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class TradingException(Exception):
    """
    Base exception for all SignalBoost errors.

    Provides structured error information with:
    - Error code for programmatic handling
    - Human-readable message
    - Additional context details
    - HTTP status code for API responses
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int = 400,
    ):
        """
        Initialize trading exception.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            details: Additional context information
            status_code: HTTP status code for API responses
        """
        self.code = code
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API responses.

        Returns:
            dict: Structured error information
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


# ============================================================================
# Validation Exceptions
# ============================================================================


class ValidationException(TradingException):
    """Input validation error"""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ):
        super().__init__(
            code=code,
            message=message,
            details=details,
            status_code=400,
        )


class InvalidSymbolException(ValidationException):
    """Invalid trading symbol"""

    def __init__(self, symbol: str, reason: str | None = None):
        message = f"Invalid trading symbol: {symbol}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            message=message,
            details={"symbol": symbol},
            code=ErrorCode.INVALID_SYMBOL,
        )


class SeriesMisalignedException(ValidationException):
    """Candle and indicator series do not line up bar for bar"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            details=details,
            code=ErrorCode.SERIES_MISALIGNED,
        )


# ============================================================================
# Data Exceptions
# ============================================================================


class InsufficientDataException(TradingException):
    """Not enough bars to run the requested analysis"""

    def __init__(self, required: int, available: int, symbol: str | None = None):
        details: dict[str, Any] = {"required": required, "available": available}
        if symbol:
            details["symbol"] = symbol
        super().__init__(
            code=ErrorCode.INSUFFICIENT_DATA,
            message=f"Insufficient data: at least {required} candles required, got {available}",
            details=details,
            status_code=400,
        )


# ============================================================================
# Indicator Exceptions
# ============================================================================


class UnknownIndicatorException(TradingException):
    """Indicator name is not in the supported set"""

    def __init__(self, name: str, supported: list[str] | None = None):
        details: dict[str, Any] = {"indicator": name}
        if supported:
            details["supported"] = supported
        super().__init__(
            code=ErrorCode.UNKNOWN_INDICATOR,
            message=f"Unknown indicator: {name}",
            details=details,
            status_code=404,
        )


# ============================================================================
# Notification Exceptions
# ============================================================================


class NotificationFailedException(TradingException):
    """Signal delivery through the injected sender failed"""

    def __init__(self, symbol: str, reason: str):
        super().__init__(
            code=ErrorCode.NOTIFICATION_FAILED,
            message=f"Signal notification failed for {symbol}: {reason}",
            details={"symbol": symbol, "reason": reason},
            status_code=502,
        )


# ============================================================================
# System Exceptions
# ============================================================================


class ConfigurationException(TradingException):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(
            code=ErrorCode.CONFIGURATION_ERROR,
            message=f"Configuration error: {message}",
            status_code=500,
        )
