"""
Candle and indicator snapshot models.
"""

import math
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, model_validator


class CandleBar(BaseModel):
    """OHLCV candle data."""

    time: int = Field(..., description="Candle open time (unix seconds)", ge=0)

    # OHLCV data; a price of 0 marks a missing quote
    open: float = Field(..., description="Open price", ge=0)
    high: float = Field(..., description="High price", ge=0)
    low: float = Field(..., description="Low price", ge=0)
    close: float = Field(..., description="Close price", ge=0)
    volume: float = Field(default=0.0, description="Trading volume", ge=0)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "time": 1704067200,
                "open": 42500.0,
                "high": 42600.0,
                "low": 42450.0,
                "close": 42550.0,
                "volume": 123.45
            }
        }

    @model_validator(mode="before")
    @classmethod
    def coerce_timestamp(cls, data: Any) -> Any:
        # Millisecond timestamps are accepted and scaled down
        if isinstance(data, dict):
            raw = data.get("time", data.get("timestamp"))
            if raw is not None and not isinstance(raw, bool):
                data = dict(data)
                data.pop("timestamp", None)
                value = int(raw)
                data["time"] = value // 1000 if value > 10_000_000_000 else value
        return data

    @property
    def has_price(self) -> bool:
        return self.close > 0

    def validate_ohlc(self) -> bool:
        """Validate OHLC relationships."""
        if self.high < max(self.open, self.close, self.low):
            return False
        if self.low > min(self.open, self.close, self.high):
            return False
        return True


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class IndicatorSnapshot(BaseModel):
    """
    Indicator values for one bar.

    Every indicator is optional: warm-up bars carry nulls. Non-finite floats
    (NaN from pandas, inf) become None. ``close`` is attached from the
    matching candle so price-relative rules work from the snapshot alone.
    """

    time: int = Field(..., description="Bar time (unix seconds)", ge=0)
    close: Optional[float] = Field(None, description="Close price of the bar", gt=0)

    # Moving averages
    sma20: Optional[float] = Field(None, description="SMA(20)")
    sma50: Optional[float] = Field(None, description="SMA(50)")
    ema20: Optional[float] = Field(None, description="EMA(20)")
    ema50: Optional[float] = Field(None, description="EMA(50)")

    # Oscillators
    rsi: Optional[float] = Field(None, description="RSI(14)", ge=0, le=100)

    # MACD
    macd: Optional[float] = Field(None, description="MACD line")
    macd_signal_line: Optional[float] = Field(
        None,
        description="MACD signal line",
        validation_alias=_alias("macd_signal_line", "macdSignal", "macd_signal"),
    )
    macd_hist: Optional[float] = Field(
        None,
        description="MACD histogram",
        validation_alias=_alias("macd_hist", "macdHist", "macd_histogram", "macdHistogram"),
    )

    # Bollinger Bands
    bb_upper: Optional[float] = Field(
        None, description="Upper band", validation_alias=_alias("bb_upper", "bbUpper", "bollinger_upper")
    )
    bb_middle: Optional[float] = Field(
        None, description="Middle band", validation_alias=_alias("bb_middle", "bbMiddle", "bollinger_middle")
    )
    bb_lower: Optional[float] = Field(
        None, description="Lower band", validation_alias=_alias("bb_lower", "bbLower", "bollinger_lower")
    )

    # Stochastic
    stoch_k: Optional[float] = Field(None, description="Stochastic %K", validation_alias=_alias("stoch_k", "stochK"))
    stoch_d: Optional[float] = Field(None, description="Stochastic %D", validation_alias=_alias("stoch_d", "stochD"))
    stoch_rsi_k: Optional[float] = Field(
        None, description="Stochastic RSI %K", validation_alias=_alias("stoch_rsi_k", "stochRsiK")
    )
    stoch_rsi_d: Optional[float] = Field(
        None, description="Stochastic RSI %D", validation_alias=_alias("stoch_rsi_d", "stochRsiD")
    )

    # Parabolic SAR
    psar: Optional[float] = Field(None, description="Parabolic SAR")

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "time": 1704067200,
                "close": 42550.0,
                "sma20": 42100.0,
                "sma50": 41800.0,
                "rsi": 28.4,
                "macd": 12.5,
                "macd_signal_line": 10.1,
                "macd_hist": 2.4,
                "psar": 41950.0
            }
        }

    @model_validator(mode="before")
    @classmethod
    def drop_non_finite(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if isinstance(value, float) and not math.isfinite(value):
                value = None
            cleaned[key] = value
        if "time" not in cleaned and "timestamp" in cleaned:
            cleaned["time"] = cleaned.pop("timestamp")
        if isinstance(cleaned.get("time"), (int, float)) and cleaned["time"] > 10_000_000_000:
            cleaned["time"] = int(cleaned["time"]) // 1000
        if cleaned.get("close") is not None and cleaned["close"] <= 0:
            cleaned["close"] = None
        return cleaned

    def has(self, *fields: str) -> bool:
        """True when every named field is present."""
        return all(getattr(self, name) is not None for name in fields)

    def with_close(self, close: Optional[float]) -> "IndicatorSnapshot":
        """Copy with the candle close attached (missing/zero close stays None)."""
        value = close if close is not None and close > 0 else None
        return self.model_copy(update={"close": value})
