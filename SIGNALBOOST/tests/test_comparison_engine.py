"""
Tests for single versus multi-indicator comparisons.
"""

import pytest

from SIGNALBOOST.engine.comparison_engine import ComparisonEngine
from SIGNALBOOST.models.candle import IndicatorSnapshot
from SIGNALBOOST.models.result import BacktestResult, RecommendationType
from SIGNALBOOST.models.signal import Signal
from shared.errors import InsufficientDataException, UnknownIndicatorException


@pytest.fixture
def engine() -> ComparisonEngine:
    return ComparisonEngine(min_bars=50)


class TestCompare:
    """Tests for ComparisonEngine.compare"""

    def test_equal_roi_goes_to_single(self, engine, flat_series):
        result = engine.compare(flat_series, "RSI")

        assert result.single.roi == result.multi.roi == 0.0
        assert result.winner == "single"
        assert result.candles == 60
        assert result.symbol == "BTC-USDT"
        assert result.recommendations[0].type == RecommendationType.STRATEGY
        assert result.recommendations[0].title == "RSI strategy leads"

    def test_multi_wins_on_higher_roi(self, engine, rsi_round_trip_series):
        result = engine.compare(rsi_round_trip_series, "MACD", {"rsi": 1.0})

        assert result.single.trades == 0
        assert result.multi.trades == 1
        assert result.multi.roi == 20.0
        assert result.winner == "multi"
        assert result.deltas.roi == 20.0
        assert result.deltas.trades == 1
        assert result.weights == {"RSI": 1.0}

        types = [rec.type for rec in result.recommendations]
        assert types[0] == RecommendationType.STRATEGY
        assert RecommendationType.FREQUENCY in types
        assert RecommendationType.ACCURACY in types
        assert RecommendationType.RISK not in types

    def test_default_weights(self, engine, flat_series):
        result = engine.compare(flat_series, "sma20")

        assert result.single_indicator == "SMA"
        assert result.weights == {"SMA": 0.15, "EMA": 0.2, "RSI": 0.25, "MACD": 0.25, "PSAR": 0.15}

    def test_insufficient_data(self, engine, series_factory):
        with pytest.raises(InsufficientDataException) as exc_info:
            engine.compare(series_factory([100.0] * 10), "RSI")
        assert exc_info.value.details == {"required": 50, "available": 10, "symbol": "BTC-USDT"}

    def test_explicit_zero_minimum(self, series_factory):
        engine = ComparisonEngine(min_bars=0)
        result = engine.compare(series_factory([100.0] * 10), "RSI")

        assert engine.min_bars == 0
        assert result.candles == 10
        assert result.winner == "single"

    def test_unknown_indicator_checked_first(self, engine, series_factory):
        with pytest.raises(UnknownIndicatorException):
            engine.compare(series_factory([100.0] * 10), "ichimoku")


class TestVote:
    """Tests for the weighted vote of one bar"""

    def test_buy_wins_tie(self, engine):
        values = {"rsi": 25.0, "stoch_k": 85.0, "stoch_d": 85.0}
        previous = IndicatorSnapshot(time=0, **values)
        current = IndicatorSnapshot(time=3600, **values)

        tally = engine.vote(current, previous, {"rsi": 0.5, "stochastic": 0.5})

        assert tally.buy == tally.sell == 0.5
        assert tally.action == Signal.BUY
        assert tally.confidence == 0.5

    def test_threshold_not_reached(self, engine):
        previous = IndicatorSnapshot(time=0, rsi=25.0, close=100.0, sma20=100.0)
        current = IndicatorSnapshot(time=3600, rsi=25.0, close=100.0, sma20=100.0)

        tally = engine.vote(current, previous, {"rsi": 0.3, "sma": 0.7})

        assert tally.buy == 0.3
        assert tally.hold == 0.7
        assert tally.action == Signal.NEUTRAL

    def test_trend_indicators_vote_on_crossover(self, engine):
        previous = IndicatorSnapshot(time=0, close=99.0, psar=100.0)
        current = IndicatorSnapshot(time=3600, close=101.0, psar=100.0)

        tally = engine.vote(current, previous, {"psar": 1.0})

        assert tally.action == Signal.BUY

    def test_missing_previous_inputs_do_not_vote(self, engine):
        previous = IndicatorSnapshot(time=0)
        current = IndicatorSnapshot(time=3600, rsi=20.0)

        tally = engine.vote(current, previous, {"rsi": 1.0})

        assert tally.buy == tally.sell == tally.hold == 0.0
        assert tally.action == Signal.NEUTRAL

    def test_first_bar_is_neutral(self, engine):
        tally = engine.vote(IndicatorSnapshot(time=0, rsi=20.0), None, {"rsi": 1.0})
        assert tally.action == Signal.NEUTRAL


class TestRecommendations:
    """Tests for rule-based advice"""

    def test_risk_advice_when_multi_draws_down_less(self):
        single = BacktestResult(roi=5.0, max_drawdown=12.0, trades=4, win_rate=50.0)
        multi = BacktestResult(roi=4.0, max_drawdown=6.0, trades=4, win_rate=50.0)

        advice = ComparisonEngine.recommendations(single, multi, "RSI")

        assert [rec.type for rec in advice] == [RecommendationType.STRATEGY, RecommendationType.RISK]
        assert advice[0].title == "RSI strategy leads"

    @pytest.mark.parametrize(
        "single_trades,multi_trades,flagged",
        [(3, 2, True), (4, 3, False), (2, 3, True), (5, 5, False)],
    )
    def test_overtrading_ratio(self, single_trades, multi_trades, flagged):
        single = BacktestResult(roi=0.0, trades=single_trades, win_rate=50.0)
        multi = BacktestResult(roi=0.0, trades=multi_trades, win_rate=50.0)

        advice = ComparisonEngine.recommendations(single, multi, "MACD")

        assert (RecommendationType.FREQUENCY in [rec.type for rec in advice]) is flagged

    def test_win_rate_divergence(self):
        single = BacktestResult(roi=0.0, win_rate=40.0, trades=5)
        multi = BacktestResult(roi=0.0, win_rate=55.0, trades=5)

        advice = ComparisonEngine.recommendations(single, multi, "EMA")

        accuracy = [rec for rec in advice if rec.type == RecommendationType.ACCURACY]
        assert len(accuracy) == 1
        assert accuracy[0].message.startswith("Multi-indicator")
