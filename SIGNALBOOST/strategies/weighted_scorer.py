"""
Weighted multi-indicator scorer.
"""

from typing import Any, Dict, List, Mapping, Optional, Union

from SIGNALBOOST.config import ScoringThresholds
from SIGNALBOOST.data.series import MarketSeries
from SIGNALBOOST.models.candle import IndicatorSnapshot
from SIGNALBOOST.models.signal import (
    Indicator,
    IndicatorCategory,
    ScoreResult,
    Signal,
    SignalMode,
)
from SIGNALBOOST.models.weights import WeightConfig
from SIGNALBOOST.strategies.signal_generator import SignalGenerator
from shared.logging import get_logger

logger = get_logger(__name__)

WeightsInput = Union[WeightConfig, Mapping[Any, float]]


def as_weight_config(weights: WeightsInput) -> WeightConfig:
    """Accept a WeightConfig or a plain ``{name: weight}`` mapping."""
    if isinstance(weights, WeightConfig):
        return weights
    return WeightConfig.from_mapping(weights)


class WeightedScorer:
    """
    Combines per-indicator signals into one weighted decision.

    For every indicator with weight > 0 the signal's vote (+1/-1, or +2..-2
    in graded mode) is multiplied by its weight. The normalized score is
    combined / total weight, where the total counts every indicator with
    weight > 0, including those whose inputs are still missing.
    """

    def __init__(
        self,
        generator: Optional[SignalGenerator] = None,
        thresholds: Optional[ScoringThresholds] = None,
        graded: bool = False,
    ):
        self.thresholds = thresholds or (
            generator.thresholds if generator else ScoringThresholds.from_settings()
        )
        self.generator = generator or SignalGenerator(self.thresholds)
        self.mode = SignalMode.GRADED if graded else SignalMode.LEVEL

    def score(
        self,
        current: Optional[IndicatorSnapshot],
        previous: Optional[IndicatorSnapshot],
        weights: WeightsInput,
    ) -> ScoreResult:
        """
        Score one bar.

        Args:
            current: Indicator values for the bar
            previous: Indicator values for the prior bar (graded mode only)
            weights: Weight per indicator

        Returns:
            ScoreResult with action, strength and per-category sub-scores
        """
        config = as_weight_config(weights)
        active = config.active()

        signals: Dict[Indicator, Signal] = {}
        combined = 0.0
        total = 0.0
        category_combined = {category: 0.0 for category in IndicatorCategory}
        category_total = {category: 0.0 for category in IndicatorCategory}

        for indicator, weight in active.items():
            signal = self.generator.signal_for_mode(indicator, current, previous, self.mode)
            signals[indicator] = signal
            vote = signal.score * weight
            combined += vote
            total += weight
            category_combined[indicator.category] += vote
            category_total[indicator.category] += weight

        # Clamp float drift so an all-strong bar stays within [-2, 2]
        normalized = max(-2.0, min(2.0, combined / total)) if total > 0 else 0.0
        category_scores = {
            category: (category_combined[category] / category_total[category])
            if category_total[category] > 0 else 0.0
            for category in IndicatorCategory
        }

        return self._decide(
            normalized,
            signals=signals,
            category_scores=category_scores,
            total_weight=total,
            time=current.time if current is not None else None,
        )

    def score_series(self, series: MarketSeries, weights: WeightsInput) -> List[ScoreResult]:
        """Score every bar of a series; the first bar has no previous bar."""
        config = as_weight_config(weights)
        if not config.active():
            logger.warning(
                "No indicator has a positive weight, every bar scores neutral",
                extra={"symbol": series.symbol},
            )
        results = [self.score(current, previous, config) for current, previous in series.pairs()]

        actionable = sum(1 for r in results if r.action != Signal.NEUTRAL)
        logger.debug(
            f"Scored {len(results)} bars, {actionable} actionable",
            extra={"symbol": series.symbol, "strategy": "weighted"},
        )
        return results

    def actions(self, series: MarketSeries, weights: WeightsInput) -> List[Signal]:
        """Per-bar 3-level actions, ready for the simulator."""
        return [result.action for result in self.score_series(series, weights)]

    def _decide(
        self,
        normalized: float,
        signals: Dict[Indicator, Signal],
        category_scores: Dict[IndicatorCategory, float],
        total_weight: float,
        time: Optional[int],
    ) -> ScoreResult:
        hold = self.thresholds.hold_threshold
        if normalized > hold:
            action = Signal.BUY
        elif normalized < -hold:
            action = Signal.SELL
        else:
            action = Signal.NEUTRAL

        if action == Signal.NEUTRAL:
            strength = 0.0
        else:
            strength = min(abs(normalized), self.thresholds.strength_cap)
        is_strong = action != Signal.NEUTRAL and strength >= self.thresholds.strong_threshold

        if is_strong:
            label = Signal.STRONG_BUY if action == Signal.BUY else Signal.STRONG_SELL
        else:
            label = action

        return ScoreResult(
            normalized_score=normalized,
            action=action,
            strength=strength,
            is_strong=is_strong,
            label=label,
            signals=signals,
            category_scores=category_scores,
            total_weight=total_weight,
            time=time,
        )
