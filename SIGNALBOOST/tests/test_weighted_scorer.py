"""
Unit tests for the weighted multi-indicator scorer.
"""

import pytest

from SIGNALBOOST.models.candle import IndicatorSnapshot
from SIGNALBOOST.models.signal import Indicator, IndicatorCategory, Signal
from SIGNALBOOST.models.weights import WeightConfig
from SIGNALBOOST.strategies.weighted_scorer import WeightedScorer
from shared.errors import ErrorCode, UnknownIndicatorException, ValidationException

ALL_OFF = {indicator.value: 0.0 for indicator in Indicator}


@pytest.fixture
def scorer() -> WeightedScorer:
    return WeightedScorer()


class TestWeightedScore:
    """Tests for WeightedScorer.score"""

    def test_single_rsi_weight_buy(self, scorer):
        """RSI weight 1 and everything else 0 with RSI oversold"""
        weights = {**ALL_OFF, "RSI": 1.0}
        result = scorer.score(IndicatorSnapshot(time=0, rsi=25.0), None, weights)

        assert result.normalized_score == 1.0
        assert result.action == Signal.BUY
        assert result.strength == pytest.approx(0.95)
        assert result.is_strong is True
        assert result.label == Signal.STRONG_BUY
        assert result.total_weight == 1.0
        assert result.signals == {Indicator.RSI: Signal.BUY}

    def test_missing_inputs_still_count_in_total_weight(self, scorer):
        result = scorer.score(IndicatorSnapshot(time=0, rsi=25.0), None, {"rsi": 1.0, "macd": 1.0})

        assert result.total_weight == 2.0
        assert result.normalized_score == pytest.approx(0.5)
        assert result.action == Signal.BUY
        assert result.strength == pytest.approx(0.5)
        assert result.is_strong is False
        assert result.label == Signal.BUY

    def test_opposing_signals_cancel(self, scorer):
        current = IndicatorSnapshot(time=0, rsi=25.0, stoch_k=90.0, stoch_d=85.0)
        result = scorer.score(current, None, {"rsi": 1.0, "stochastic": 1.0})

        assert result.normalized_score == 0.0
        assert result.action == Signal.NEUTRAL
        assert result.strength == 0.0
        assert result.label == Signal.NEUTRAL

    def test_hold_band_is_inclusive(self, scorer):
        result = scorer.score(IndicatorSnapshot(time=0, rsi=25.0), None, {"rsi": 3.0, "sma": 17.0})

        assert result.normalized_score == 0.15
        assert result.action == Signal.NEUTRAL

    def test_category_scores(self, scorer):
        current = IndicatorSnapshot(time=0, close=90.0, rsi=25.0, sma20=95.0, sma50=100.0)
        result = scorer.score(current, None, {"rsi": 1.0, "sma": 1.0})

        assert result.category_scores[IndicatorCategory.MOMENTUM] == 1.0
        assert result.category_scores[IndicatorCategory.TREND] == -1.0
        assert result.category_scores[IndicatorCategory.VOLATILITY] == 0.0

    def test_all_zero_weights(self, scorer):
        result = scorer.score(IndicatorSnapshot(time=0, rsi=25.0), None, ALL_OFF)

        assert result.total_weight == 0.0
        assert result.normalized_score == 0.0
        assert result.action == Signal.NEUTRAL
        assert result.signals == {}

    def test_graded_mode_caps_strength(self):
        scorer = WeightedScorer(graded=True)
        result = scorer.score(IndicatorSnapshot(time=0, rsi=20.0), None, {"rsi": 1.0})

        assert result.normalized_score == 2.0
        assert result.strength == pytest.approx(0.95)
        assert result.label == Signal.STRONG_BUY

    def test_accepts_weight_config(self, scorer):
        config = WeightConfig.from_mapping({"rsi": 2.0})
        result = scorer.score(IndicatorSnapshot(time=0, rsi=80.0), None, config)

        assert result.action == Signal.SELL
        assert result.normalized_score == -1.0


class TestWeightValidation:
    """Tests for rejected weight inputs"""

    def test_unknown_indicator(self, scorer):
        with pytest.raises(UnknownIndicatorException):
            scorer.score(IndicatorSnapshot(time=0), None, {"vwap": 1.0})

    def test_negative_weight(self, scorer):
        with pytest.raises(ValidationException) as exc_info:
            scorer.score(IndicatorSnapshot(time=0), None, {"rsi": -0.5})
        assert exc_info.value.code == ErrorCode.INVALID_WEIGHT


class TestScoreSeries:
    """Tests for scoring a whole series"""

    def test_one_result_per_bar(self, scorer, rsi_round_trip_series):
        results = scorer.score_series(rsi_round_trip_series, {"rsi": 1.0})

        assert len(results) == len(rsi_round_trip_series)
        assert results[0].time == rsi_round_trip_series.start_time
        assert results[10].action == Signal.BUY
        assert results[30].action == Signal.SELL

    def test_actions(self, scorer, rsi_round_trip_series):
        actions = scorer.actions(rsi_round_trip_series, {"rsi": 1.0})

        assert actions.count(Signal.BUY) == 1
        assert actions.count(Signal.SELL) == 1
        assert actions.count(Signal.NEUTRAL) == 58
