"""
Error handling module for SignalBoost

Exports:
    - Exception classes
    - Error codes
    - Status/payload mapping helpers
"""

from shared.errors.exceptions import (
    ConfigurationException,
    ErrorCode,
    InsufficientDataException,
    InvalidSymbolException,
    NotificationFailedException,
    SeriesMisalignedException,
    TradingException,
    UnknownIndicatorException,
    ValidationException,
)
from shared.errors.handlers import error_payload, error_status_code

__all__ = [
    "TradingException",
    "ErrorCode",
    "ValidationException",
    "InvalidSymbolException",
    "SeriesMisalignedException",
    "InsufficientDataException",
    "UnknownIndicatorException",
    "NotificationFailedException",
    "ConfigurationException",
    # Handlers
    "error_payload",
    "error_status_code",
]
