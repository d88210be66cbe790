"""
Market data ingestion.
"""

from SIGNALBOOST.data.series import MarketSeries, equity_frame

__all__ = [
    "MarketSeries",
    "equity_frame",
]
