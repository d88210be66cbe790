"""
Engine data models.
"""

from SIGNALBOOST.models.candle import CandleBar, IndicatorSnapshot
from SIGNALBOOST.models.result import (
    BacktestResult,
    ComboResult,
    ComparisonDeltas,
    ComparisonResult,
    EquityPoint,
    IndicatorBacktestReport,
    OptimizationResult,
    Priority,
    Recommendation,
    RecommendationType,
)
from SIGNALBOOST.models.signal import (
    Indicator,
    IndicatorCategory,
    ScoreResult,
    Signal,
    SignalEvent,
    SignalMode,
)
from SIGNALBOOST.models.trade import ExitReason, Position, Trade
from SIGNALBOOST.models.weights import (
    DEFAULT_COMPARISON_WEIGHTS,
    PerformanceMetadata,
    WeightConfig,
)

__all__ = [
    "CandleBar",
    "IndicatorSnapshot",
    "Signal",
    "SignalMode",
    "Indicator",
    "IndicatorCategory",
    "ScoreResult",
    "SignalEvent",
    "Position",
    "Trade",
    "ExitReason",
    "EquityPoint",
    "BacktestResult",
    "ComparisonDeltas",
    "ComparisonResult",
    "IndicatorBacktestReport",
    "ComboResult",
    "OptimizationResult",
    "Recommendation",
    "RecommendationType",
    "Priority",
    "WeightConfig",
    "PerformanceMetadata",
    "DEFAULT_COMPARISON_WEIGHTS",
]
