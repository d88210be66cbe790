"""
Shared fixtures for SIGNALBOOST tests.
"""

from typing import Any, Dict, List, Optional, Sequence

import pytest

from SIGNALBOOST.data.series import MarketSeries

BASE_TIME = 1704067200  # 2024-01-01 00:00:00 UTC
HOUR = 3600


def build_series(
    closes: Sequence[Optional[float]],
    indicators: Optional[Sequence[Dict[str, Any]]] = None,
    symbol: str = "BTC-USDT",
    timeframe: str = "1h",
) -> MarketSeries:
    """Hourly series with flat OHLC per bar; a None close becomes a missing quote."""
    rows = indicators if indicators is not None else [{} for _ in closes]
    candles: List[Dict[str, Any]] = []
    snapshots: List[Dict[str, Any]] = []
    for index, (close, values) in enumerate(zip(closes, rows)):
        time = BASE_TIME + index * HOUR
        price = close or 0.0
        candles.append({
            "time": time,
            "open": price,
            "high": price,
            "low": price,
            "close": price,
            "volume": 1.0,
        })
        snapshots.append({"time": time, **values})
    return MarketSeries(candles, snapshots, symbol=symbol, timeframe=timeframe)


@pytest.fixture
def series_factory():
    """Factory building hourly MarketSeries from closes and indicator rows."""
    return build_series


@pytest.fixture
def rsi_round_trip_series() -> MarketSeries:
    """
    60 hourly bars where only RSI is populated.

    RSI dips to 25 at bar 10 (price 100) and spikes to 75 at bar 30
    (price 120): one long round trip worth +20%.
    """
    closes = [100.0] * 11 + [120.0] * 49
    rsi = [50.0] * 60
    rsi[10] = 25.0
    rsi[30] = 75.0
    return build_series(closes, [{"rsi": value} for value in rsi])


@pytest.fixture
def flat_series() -> MarketSeries:
    """60 hourly bars at a constant price with no indicator data."""
    return build_series([100.0] * 60)
