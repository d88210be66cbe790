"""
Indicator backtests.

Level-signal backtests for each supported indicator and the weighted
multi-indicator backtest driven by the WeightedScorer.
"""

from collections import Counter
from typing import List, Optional

from SIGNALBOOST.data.series import MarketSeries
from SIGNALBOOST.engine.backtest_simulator import BacktestSimulator
from SIGNALBOOST.engine.performance_analyzer import PerformanceAnalyzer
from SIGNALBOOST.config import engine_config
from SIGNALBOOST.models.result import BacktestResult, IndicatorBacktestReport
from SIGNALBOOST.models.signal import Indicator, Signal, SignalMode
from SIGNALBOOST.strategies.signal_generator import SignalGenerator
from SIGNALBOOST.strategies.weighted_scorer import WeightedScorer, WeightsInput
from shared.errors import InsufficientDataException
from shared.logging import get_logger, log_error_with_context

logger = get_logger(__name__)


class IndicatorBacktester:
    """Backtests single indicators and weighted indicator sets."""

    def __init__(
        self,
        generator: Optional[SignalGenerator] = None,
        simulator: Optional[BacktestSimulator] = None,
        analyzer: Optional[PerformanceAnalyzer] = None,
        min_bars: Optional[int] = None,
    ):
        self.generator = generator or SignalGenerator()
        self.simulator = simulator or BacktestSimulator()
        self.analyzer = analyzer or PerformanceAnalyzer()
        self.min_bars = engine_config.MIN_COMPARISON_BARS if min_bars is None else min_bars

    def _require_bars(self, series: MarketSeries) -> None:
        if len(series) < max(self.min_bars, 1):
            raise InsufficientDataException(max(self.min_bars, 1), len(series), series.symbol)

    def backtest_indicator(
        self,
        series: MarketSeries,
        indicator: "Indicator | str",
        initial_capital: Optional[float] = None,
        graded: bool = False,
    ) -> IndicatorBacktestReport:
        """
        Trade the level signal of one indicator.

        Raises:
            InsufficientDataException: If the series is shorter than min_bars
            UnknownIndicatorException: If the indicator is not supported
        """
        ind = Indicator.parse(indicator)
        self._require_bars(series)

        mode = SignalMode.GRADED if graded else SignalMode.LEVEL
        signals = [
            self.generator.signal_for_mode(ind, current, previous, mode)
            for current, previous in series.pairs()
        ]
        counts = Counter(signal.value for signal in signals)

        run = self.simulator.run_series(series, signals, initial_capital)
        performance = self.analyzer.analyze_run(run)

        logger.info(
            f"{ind.value} backtest: roi={performance.roi}% trades={performance.trades}",
            extra={"symbol": series.symbol, "indicator": ind.value},
        )

        return IndicatorBacktestReport(
            indicator=ind.value,
            performance=performance,
            signal_counts={signal.value: counts.get(signal.value, 0) for signal in Signal},
        )

    def backtest_all_indicators(
        self,
        series: MarketSeries,
        initial_capital: Optional[float] = None,
    ) -> List[IndicatorBacktestReport]:
        """
        Backtest every supported indicator, one after another.

        A failing indicator produces a report with zeroed metrics and its error
        message; the remaining indicators still run.

        Raises:
            InsufficientDataException: If the series is shorter than min_bars
        """
        self._require_bars(series)
        capital = engine_config.DEFAULT_INITIAL_CAPITAL if initial_capital is None else initial_capital
        reports: List[IndicatorBacktestReport] = []

        for indicator in Indicator:
            try:
                reports.append(self.backtest_indicator(series, indicator, capital))
            except Exception as e:
                log_error_with_context(
                    logger, e, f"{indicator.value} backtest failed",
                    symbol=series.symbol, indicator=indicator.value,
                )
                reports.append(IndicatorBacktestReport(
                    indicator=indicator.value,
                    success=False,
                    performance=self.analyzer.analyze([], [], capital),
                    error=str(e),
                ))

        logger.info(
            f"Backtested {len(reports)} indicators, "
            f"{sum(1 for r in reports if not r.success)} failed",
            extra={"symbol": series.symbol},
        )
        return reports

    def backtest_weighted(
        self,
        series: MarketSeries,
        weights: WeightsInput,
        initial_capital: Optional[float] = None,
        graded: bool = False,
    ) -> BacktestResult:
        """
        Trade the WeightedScorer action stream.

        Raises:
            InsufficientDataException: If the series is shorter than min_bars
        """
        self._require_bars(series)

        scorer = WeightedScorer(self.generator, graded=graded)
        actions = scorer.actions(series, weights)
        run = self.simulator.run_series(series, actions, initial_capital)
        return self.analyzer.analyze_run(run)
