"""
Indicator weight optimizer.

Backtests fixed indicator combinations with base weights and keeps the one
with the highest ROI. The first combination wins a tie.
"""

from typing import Dict, List, Optional, Tuple

from SIGNALBOOST.config import engine_config
from SIGNALBOOST.data.series import MarketSeries
from SIGNALBOOST.engine.indicator_backtest import IndicatorBacktester
from SIGNALBOOST.models.result import ComboResult, OptimizationResult
from SIGNALBOOST.models.signal import Indicator, IndicatorCategory
from SIGNALBOOST.models.weights import WeightConfig
from shared.logging import get_logger

logger = get_logger(__name__)

BASE_WEIGHTS: Dict[Indicator, float] = {
    Indicator.SMA: 1.5,
    Indicator.EMA: 1.5,
    Indicator.PSAR: 1.0,
    Indicator.RSI: 1.0,
    Indicator.MACD: 1.0,
    Indicator.STOCHASTIC: 0.8,
    Indicator.STOCHASTIC_RSI: 0.8,
    Indicator.BOLLINGER_BANDS: 1.2,
}


def _group(category: IndicatorCategory) -> List[Indicator]:
    return [ind for ind in BASE_WEIGHTS if ind.category == category]


TREND = _group(IndicatorCategory.TREND)
MOMENTUM = _group(IndicatorCategory.MOMENTUM)
VOLATILITY = _group(IndicatorCategory.VOLATILITY)

COMBOS: List[Tuple[str, List[Indicator]]] = [
    ("Trend Only", TREND),
    ("Momentum Only", MOMENTUM),
    ("Volatility Only", VOLATILITY),
    ("Trend + Momentum", TREND + MOMENTUM),
    ("All Combined", TREND + MOMENTUM + VOLATILITY),
]


class WeightOptimizer:
    """Picks the best indicator combination for a series."""

    def __init__(self, backtester: Optional[IndicatorBacktester] = None, graded: bool = True):
        """
        Initialize optimizer.

        Args:
            backtester: Backtester used for each combination
            graded: Score with 5-level indicator signals
        """
        self.backtester = backtester or IndicatorBacktester()
        self.graded = graded

    def optimize(
        self,
        series: MarketSeries,
        initial_capital: Optional[float] = None,
    ) -> OptimizationResult:
        """
        Backtest every combination and return the best by ROI.

        Raises:
            InsufficientDataException: If the series is shorter than the backtester's min_bars
        """
        results: List[ComboResult] = []
        for name, indicators in COMBOS:
            weights = WeightConfig(weights={ind: BASE_WEIGHTS[ind] for ind in indicators})
            performance = self.backtester.backtest_weighted(
                series, weights, initial_capital, graded=self.graded
            )
            results.append(ComboResult(
                combo=name,
                indicators=[ind.value for ind in indicators],
                weights=weights.to_dict(),
                performance=performance,
            ))

        best = results[0]
        for candidate in results[1:]:
            if candidate.performance.roi > best.performance.roi:
                best = candidate

        best_weights = WeightConfig(weights=best.weights).normalized(
            target=engine_config.OPTIMIZED_WEIGHT_TOTAL
        )

        logger.info(
            f"Best combination: {best.combo} (roi={best.performance.roi}%)",
            extra={"symbol": series.symbol, "strategy": "optimizer"},
        )

        return OptimizationResult(
            best_combo=best.combo,
            best_weights=best_weights,
            performance=best.performance,
            all_results=results,
        )
