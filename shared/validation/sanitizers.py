"""
Input Sanitization and Validation

Provides input validation and sanitization for:
- Trading symbols and timeframes
- Numeric engine parameters (capital, weights, thresholds)
- Log data (sensitive information removal)
"""

import math
import re
from typing import Any

from shared.errors import InvalidSymbolException, ValidationException

# ============================================================================
# Symbol Validation
# ============================================================================

# Valid symbol pattern: alphanumeric, forward slash, hyphen, underscore
SYMBOL_PATTERN = re.compile(r"^[A-Z0-9/_-]+$")


def sanitize_symbol(symbol: str) -> str:
    """
    Sanitize and validate trading symbol.

    Args:
        symbol: Raw trading symbol input

    Returns:
        str: Sanitized uppercase symbol

    Raises:
        InvalidSymbolException: If symbol is invalid

    Examples:
        >>> sanitize_symbol("btc-usdt-swap")
        'BTC-USDT-SWAP'
        >>> sanitize_symbol("invalid symbol!")
        InvalidSymbolException
    """
    if not symbol or not isinstance(symbol, str):
        raise InvalidSymbolException(str(symbol), "symbol cannot be empty")

    symbol = symbol.upper().strip()

    if len(symbol) < 3 or len(symbol) > 30:
        raise InvalidSymbolException(symbol, "length must be between 3 and 30 characters")

    if not SYMBOL_PATTERN.match(symbol):
        raise InvalidSymbolException(symbol, "allowed characters are A-Z, 0-9, /, -, _")

    return symbol


# ============================================================================
# Timeframe Validation
# ============================================================================

TIMEFRAME_PATTERN = re.compile(r"^(\d+)([mhdwM])$")


def sanitize_timeframe(timeframe: str) -> str:
    """
    Validate a candle timeframe such as ``1m``, ``15m``, ``1h`` or ``1d``.

    Raises:
        ValidationException: If the timeframe does not parse
    """
    if not isinstance(timeframe, str):
        raise ValidationException(
            f"Timeframe must be string, got {type(timeframe).__name__}"
        )

    value = timeframe.strip()
    match = TIMEFRAME_PATTERN.match(value)
    if not match or int(match.group(1)) <= 0:
        raise ValidationException(
            f"Invalid timeframe: {timeframe}",
            details={"value": timeframe},
        )
    return value


# ============================================================================
# Numeric Validation
# ============================================================================


def validate_numeric_range(
    value: float | int | str,
    min_value: float | None = None,
    max_value: float | None = None,
    name: str = "value",
    exclusive_min: bool = False,
) -> float:
    """
    Validate numeric value within range.

    Args:
        value: Numeric value to validate
        min_value: Minimum allowed value (inclusive unless exclusive_min)
        max_value: Maximum allowed value (inclusive)
        name: Field name for error messages
        exclusive_min: Reject values equal to min_value

    Returns:
        float: Validated value

    Raises:
        ValidationException: If validation fails

    Examples:
        >>> validate_numeric_range(100, min_value=0, max_value=1000)
        100.0
        >>> validate_numeric_range(-5, min_value=0)
        ValidationException
    """
    if isinstance(value, bool):
        raise ValidationException(
            f"Invalid {name}: must be a valid number",
            details={"value": str(value), "field": name},
        )
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationException(
            f"Invalid {name}: must be a valid number",
            details={"value": str(value), "field": name},
        )

    if not math.isfinite(number):
        raise ValidationException(
            f"Invalid {name}: must be a finite number",
            details={"value": str(value), "field": name},
        )

    if min_value is not None:
        too_small = number <= min_value if exclusive_min else number < min_value
        if too_small:
            op = ">" if exclusive_min else ">="
            raise ValidationException(
                f"{name} must be {op} {min_value}",
                details={"value": number, "min": min_value, "field": name},
            )

    if max_value is not None and number > max_value:
        raise ValidationException(
            f"{name} must be <= {max_value}",
            details={"value": number, "max": max_value, "field": name},
        )

    return number


def validate_initial_capital(capital: float | int | str) -> float:
    """Starting capital must be a finite positive amount."""
    return validate_numeric_range(
        capital,
        min_value=0,
        max_value=1_000_000_000_000,
        name="initial_capital",
        exclusive_min=True,
    )


# ============================================================================
# Log Data Sanitization
# ============================================================================

# Sensitive keywords to redact from logs
SENSITIVE_KEYWORDS = {
    "password",
    "passwd",
    "api_key",
    "apikey",
    "api_secret",
    "secret",
    "passphrase",
    "private_key",
    "token",
    "chat_id",
    "webhook",
    "authorization",
    "credentials",
}


def sanitize_log_data(data: dict[str, Any], redact_value: str = "***REDACTED***") -> dict[str, Any]:
    """
    Remove sensitive data from logs.

    Recursively scans dictionary and redacts values for keys containing
    sensitive keywords.

    Args:
        data: Dictionary to sanitize
        redact_value: Replacement value for sensitive data

    Returns:
        dict: Sanitized dictionary with sensitive values redacted

    Examples:
        >>> sanitize_log_data({"symbol": "BTC-USDT", "bot_token": "123:abc"})
        {'symbol': 'BTC-USDT', 'bot_token': '***REDACTED***'}
    """
    sanitized: dict[str, Any] = {}

    for key, value in data.items():
        key_lower = str(key).lower()

        if any(keyword in key_lower for keyword in SENSITIVE_KEYWORDS):
            sanitized[key] = redact_value
        elif isinstance(value, dict):
            sanitized[key] = sanitize_log_data(value, redact_value)
        elif isinstance(value, list):
            sanitized[key] = [
                sanitize_log_data(item, redact_value) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            sanitized[key] = value

    return sanitized
