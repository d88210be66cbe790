"""
Single-indicator versus weighted multi-indicator comparison.

The single strategy trades crossover events of one indicator. The multi
strategy tallies weighted BUY/SELL/HOLD votes per bar: zone oscillators
(RSI, Stochastic, StochasticRSI, Bollinger Bands) vote from their level
rule, trend crossings (MACD, SMA, EMA, PSAR) vote from their crossover
rule. A bar trades only when the winning bucket's weight exceeds the
absolute vote threshold.

Equal ROI resolves to "single" because the winner test is a strict
``multi > single``. The tie-break is kept as observed.
"""

from dataclasses import dataclass
from typing import List, Optional

from SIGNALBOOST.config import ScoringThresholds, engine_config
from SIGNALBOOST.data.series import MarketSeries
from SIGNALBOOST.engine.backtest_simulator import BacktestSimulator
from SIGNALBOOST.engine.performance_analyzer import PerformanceAnalyzer
from SIGNALBOOST.models.candle import IndicatorSnapshot
from SIGNALBOOST.models.result import (
    BacktestResult,
    ComparisonDeltas,
    ComparisonResult,
    Priority,
    Recommendation,
    RecommendationType,
)
from SIGNALBOOST.models.signal import Indicator, Signal
from SIGNALBOOST.models.weights import WeightConfig
from SIGNALBOOST.strategies.signal_generator import (
    EVENT_FIELDS,
    REQUIRED_FIELDS,
    SignalGenerator,
)
from SIGNALBOOST.strategies.weighted_scorer import WeightsInput, as_weight_config
from shared.errors import InsufficientDataException
from shared.logging import get_logger, log_with_context

logger = get_logger(__name__)

ZONE_INDICATORS = frozenset({
    Indicator.RSI,
    Indicator.STOCHASTIC,
    Indicator.STOCHASTIC_RSI,
    Indicator.BOLLINGER_BANDS,
})

OVERTRADING_RATIO = 1.5
WIN_RATE_DIVERGENCE = 10.0


@dataclass
class VoteTally:
    """Weighted votes for one bar."""

    buy: float = 0.0
    sell: float = 0.0
    hold: float = 0.0
    action: Signal = Signal.NEUTRAL
    confidence: float = 0.0


class ComparisonEngine:
    """Runs both strategies over the same series and compares the results."""

    def __init__(
        self,
        thresholds: Optional[ScoringThresholds] = None,
        generator: Optional[SignalGenerator] = None,
        simulator: Optional[BacktestSimulator] = None,
        analyzer: Optional[PerformanceAnalyzer] = None,
        min_bars: Optional[int] = None,
    ):
        self.thresholds = thresholds or (
            generator.thresholds if generator else ScoringThresholds.from_settings()
        )
        self.generator = generator or SignalGenerator(self.thresholds)
        self.simulator = simulator or BacktestSimulator()
        self.analyzer = analyzer or PerformanceAnalyzer()
        self.min_bars = engine_config.MIN_COMPARISON_BARS if min_bars is None else min_bars

    def compare(
        self,
        series: MarketSeries,
        single_indicator: "Indicator | str",
        multi_weights: Optional[WeightsInput] = None,
        initial_capital: Optional[float] = None,
    ) -> ComparisonResult:
        """
        Compare a single-indicator strategy with a weighted multi-indicator one.

        Args:
            series: Validated candle + indicator series
            single_indicator: Indicator driving the single strategy
            multi_weights: Multi strategy weights (defaults to the comparison set)
            initial_capital: Starting capital for both runs

        Returns:
            ComparisonResult with both metric sets, deltas, winner and advice

        Raises:
            InsufficientDataException: If the series is shorter than min_bars
            UnknownIndicatorException: If the single indicator is not supported
        """
        indicator = Indicator.parse(single_indicator)
        weights = (
            as_weight_config(multi_weights) if multi_weights is not None
            else WeightConfig.default_comparison()
        )

        if len(series) < self.min_bars:
            raise InsufficientDataException(self.min_bars, len(series), series.symbol)

        single_signals = self.single_signals(series, indicator)
        multi_signals = [tally.action for tally in self.multi_votes(series, weights)]

        single = self._backtest(series, single_signals, initial_capital)
        multi = self._backtest(series, multi_signals, initial_capital)

        deltas = ComparisonDeltas(
            roi=round(multi.roi - single.roi, 2),
            win_rate=round(multi.win_rate - single.win_rate, 2),
            trades=multi.trades - single.trades,
            max_drawdown=round(single.max_drawdown - multi.max_drawdown, 2),
        )
        winner = "multi" if multi.roi > single.roi else "single"

        log_with_context(
            logger, "info",
            f"Comparison {indicator.value} vs multi: single roi={single.roi}% "
            f"multi roi={multi.roi}% winner={winner}",
            symbol=series.symbol,
            indicator=indicator.value,
            strategy="comparison",
        )

        return ComparisonResult(
            symbol=series.symbol,
            timeframe=series.timeframe,
            single_indicator=indicator.value,
            weights=weights.to_dict(),
            single=single,
            multi=multi,
            deltas=deltas,
            recommendations=self.recommendations(single, multi, indicator.value),
            winner=winner,
            candles=len(series),
            start_time=series.start_time,
            end_time=series.end_time,
        )

    # ------------------------------------------------------------------
    # Signal streams
    # ------------------------------------------------------------------

    def single_signals(self, series: MarketSeries, indicator: Indicator) -> List[Signal]:
        """Crossover events of one indicator, one per bar."""
        return [
            self.generator.crossover_signal(indicator, current, previous)
            for current, previous in series.pairs()
        ]

    def multi_votes(self, series: MarketSeries, weights: WeightsInput) -> List[VoteTally]:
        """Weighted vote tally per bar."""
        config = as_weight_config(weights)
        return [self.vote(current, previous, config) for current, previous in series.pairs()]

    def vote(
        self,
        current: IndicatorSnapshot,
        previous: Optional[IndicatorSnapshot],
        weights: WeightsInput,
    ) -> VoteTally:
        """
        Tally one bar.

        An indicator votes only when its inputs are present on both bars.
        BUY wins a tie with SELL; HOLD wins when the leading bucket does not
        exceed the vote threshold.
        """
        tally = VoteTally()
        if previous is None:
            return tally

        for indicator, weight in as_weight_config(weights).active().items():
            if indicator in ZONE_INDICATORS:
                fields = REQUIRED_FIELDS[indicator]
                if not (current.has(*fields) and previous.has(*fields)):
                    continue
                signal = self.generator.signal(indicator, current)
            else:
                fields = EVENT_FIELDS[indicator]
                if not (current.has(*fields) and previous.has(*fields)):
                    continue
                signal = self.generator.crossover_signal(indicator, current, previous)

            if signal.is_buy:
                tally.buy += weight
            elif signal.is_sell:
                tally.sell += weight
            else:
                tally.hold += weight

        leading = max(tally.buy, tally.sell, tally.hold)
        threshold = self.thresholds.vote_threshold
        if leading == tally.buy and tally.buy > threshold:
            tally.action = Signal.BUY
            tally.confidence = min(self.thresholds.strength_cap, tally.buy)
        elif leading == tally.sell and tally.sell > threshold:
            tally.action = Signal.SELL
            tally.confidence = min(self.thresholds.strength_cap, tally.sell)
        return tally

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def _backtest(
        self,
        series: MarketSeries,
        signals: List[Signal],
        initial_capital: Optional[float],
    ) -> BacktestResult:
        run = self.simulator.run_series(series, signals, initial_capital)
        return self.analyzer.analyze_run(run)

    @staticmethod
    def recommendations(
        single: BacktestResult,
        multi: BacktestResult,
        single_name: str,
    ) -> List[Recommendation]:
        """Rule-based advice: ROI (always), risk, overtrading, win-rate divergence."""
        advice: List[Recommendation] = []

        if multi.roi > single.roi:
            advice.append(Recommendation(
                type=RecommendationType.STRATEGY,
                priority=Priority.HIGH,
                title="Multi-indicator strategy leads",
                message=(
                    f"Multi-indicator strategy outperformed {single_name} by "
                    f"{multi.roi - single.roi:.2f}% ROI"
                ),
            ))
        else:
            advice.append(Recommendation(
                type=RecommendationType.STRATEGY,
                priority=Priority.HIGH,
                title=f"{single_name} strategy leads",
                message=(
                    f"Single {single_name} strategy outperformed multi-indicator by "
                    f"{single.roi - multi.roi:.2f}% ROI"
                ),
            ))

        if multi.max_drawdown < single.max_drawdown:
            advice.append(Recommendation(
                type=RecommendationType.RISK,
                priority=Priority.MEDIUM,
                title="Lower risk with multi-indicator",
                message=(
                    f"Multi-indicator strategy showed lower risk with {multi.max_drawdown:.2f}% "
                    f"max drawdown vs {single.max_drawdown:.2f}%"
                ),
            ))

        busier, quieter = (
            ("Single indicator", "multi-indicator") if single.trades >= multi.trades
            else ("Multi-indicator", "single indicator")
        )
        most, least = max(single.trades, multi.trades), min(single.trades, multi.trades)
        if most > least and most >= least * OVERTRADING_RATIO:
            advice.append(Recommendation(
                type=RecommendationType.FREQUENCY,
                priority=Priority.MEDIUM,
                title="Possible overtrading",
                message=(
                    f"{busier} generated {most} trades vs {least} for {quieter}. "
                    f"Consider if overtrading is an issue."
                ),
            ))

        win_rate_diff = multi.win_rate - single.win_rate
        if abs(win_rate_diff) > WIN_RATE_DIVERGENCE:
            leader = "Multi-indicator" if win_rate_diff > 0 else "Single indicator"
            advice.append(Recommendation(
                type=RecommendationType.ACCURACY,
                priority=Priority.MEDIUM,
                title="Win rate divergence",
                message=(
                    f"{leader} showed significantly better win rate "
                    f"({abs(win_rate_diff):.1f}% difference)"
                ),
            ))

        return advice
