"""Input validation and sanitization module"""

from shared.validation.sanitizers import (
    sanitize_log_data,
    sanitize_symbol,
    sanitize_timeframe,
    validate_initial_capital,
    validate_numeric_range,
)

__all__ = [
    "sanitize_symbol",
    "sanitize_timeframe",
    "sanitize_log_data",
    "validate_numeric_range",
    "validate_initial_capital",
]
