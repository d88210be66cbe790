"""
Error Handling Tests

Tests for:
- shared/errors/exceptions.py (Exception hierarchy)
- shared/errors/handlers.py (Status and payload mapping)
"""

import pytest
from shared.errors import (
    ConfigurationException,
    ErrorCode,
    InsufficientDataException,
    InvalidSymbolException,
    NotificationFailedException,
    SeriesMisalignedException,
    TradingException,
    UnknownIndicatorException,
    ValidationException,
    error_payload,
    error_status_code,
)


class TestExceptionHierarchy:
    """Test exception codes and status codes"""

    def test_trading_exception_to_dict(self):
        """Test structured error dict"""
        exc = TradingException(
            code=ErrorCode.INTERNAL_ERROR,
            message="boom",
            details={"step": "score"},
        )
        assert exc.to_dict() == {
            "code": "INTERNAL_ERROR",
            "message": "boom",
            "details": {"step": "score"},
        }
        assert exc.status_code == 400

    def test_validation_subclasses(self):
        """Test symbol and alignment errors are validation errors"""
        symbol_exc = InvalidSymbolException("BAD!", "allowed characters are A-Z")
        series_exc = SeriesMisalignedException("length mismatch", {"candles": 2})

        assert isinstance(symbol_exc, ValidationException)
        assert isinstance(series_exc, ValidationException)
        assert symbol_exc.code == ErrorCode.INVALID_SYMBOL
        assert series_exc.code == ErrorCode.SERIES_MISALIGNED
        assert "BAD!" in symbol_exc.message

    def test_insufficient_data_message(self):
        """Test required/available counts in message"""
        exc = InsufficientDataException(50, 12, "BTC-USDT")
        assert exc.message == "Insufficient data: at least 50 candles required, got 12"
        assert exc.details == {"required": 50, "available": 12, "symbol": "BTC-USDT"}

    @pytest.mark.parametrize(
        "exc,status",
        [
            (ValidationException("bad"), 400),
            (InsufficientDataException(50, 1), 400),
            (UnknownIndicatorException("vwap"), 404),
            (NotificationFailedException("BTC-USDT", "timeout"), 502),
            (ConfigurationException("bad periods"), 500),
            (RuntimeError("unexpected"), 500),
        ],
    )
    def test_status_codes(self, exc, status):
        """Test HTTP status mapping"""
        assert error_status_code(exc) == status


class TestErrorPayload:
    """Test error payload construction"""

    def test_trading_exception_payload(self):
        """Test payload for engine errors"""
        exc = UnknownIndicatorException("vwap", ["RSI", "MACD"])
        payload = error_payload(exc, request_id="req-1")

        assert payload["success"] is False
        assert payload["data"] is None
        assert payload["message"] == "Unknown indicator: vwap"
        assert payload["meta"]["error_code"] == "UNKNOWN_INDICATOR"
        assert payload["meta"]["request_id"] == "req-1"
        assert payload["meta"]["details"]["supported"] == ["RSI", "MACD"]
        assert payload["meta"]["timestamp"].endswith("Z")

    def test_generic_exception_payload(self):
        """Test unclassified errors hide their message"""
        payload = error_payload(ValueError("secret internals"))

        assert payload["message"] == "Internal server error"
        assert payload["meta"]["error_code"] == "INTERNAL_ERROR"
        assert "request_id" not in payload["meta"]

    def test_generic_details_follow_debug(self, monkeypatch):
        """Test exception details only appear in debug mode"""
        from shared.errors import handlers

        monkeypatch.setattr(handlers.settings, "DEBUG", True)
        payload = error_payload(ValueError("secret internals"))
        assert payload["meta"]["details"] == {"error": "secret internals", "type": "ValueError"}

        monkeypatch.setattr(handlers.settings, "DEBUG", False)
        payload = error_payload(ValueError("secret internals"))
        assert "details" not in payload["meta"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
