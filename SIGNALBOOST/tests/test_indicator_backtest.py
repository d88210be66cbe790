"""
Tests for indicator backtests and the weight optimizer.
"""

import pytest

from SIGNALBOOST.data.series import MarketSeries
from SIGNALBOOST.engine.indicator_backtest import IndicatorBacktester
from SIGNALBOOST.engine.weight_optimizer import BASE_WEIGHTS, COMBOS, WeightOptimizer
from SIGNALBOOST.models.signal import Indicator
from shared.errors import InsufficientDataException


@pytest.fixture
def backtester() -> IndicatorBacktester:
    return IndicatorBacktester(min_bars=50)


class TestIndicatorBacktest:
    """Tests for single indicator backtests"""

    def test_rsi_round_trip(self, backtester, rsi_round_trip_series):
        report = backtester.backtest_indicator(rsi_round_trip_series, "rsi", 10000.0)

        assert report.success is True
        assert report.indicator == "RSI"
        assert report.performance.trades == 1
        assert report.performance.roi == 20.0
        assert report.performance.win_rate == 100.0
        assert report.signal_counts == {
            "strong_buy": 0,
            "buy": 1,
            "neutral": 58,
            "sell": 1,
            "strong_sell": 0,
        }

    def test_graded_counts(self, backtester, rsi_round_trip_series):
        report = backtester.backtest_indicator(rsi_round_trip_series, "RSI", graded=True)

        assert report.signal_counts["strong_buy"] == 1
        assert report.signal_counts["sell"] == 1
        assert report.performance.trades == 1

    def test_empty_series(self, backtester):
        with pytest.raises(InsufficientDataException):
            backtester.backtest_indicator(MarketSeries([], []), "RSI")

    def test_warm_up_minimum(self, backtester, series_factory):
        short = series_factory([100.0] * 49, [{"rsi": 50.0}] * 49)

        with pytest.raises(InsufficientDataException) as exc_info:
            backtester.backtest_indicator(short, "RSI")
        assert exc_info.value.details["required"] == 50
        assert exc_info.value.details["available"] == 49

        with pytest.raises(InsufficientDataException):
            backtester.backtest_weighted(short, {"rsi": 1.0})
        with pytest.raises(InsufficientDataException):
            backtester.backtest_all_indicators(short)

    def test_custom_minimum(self, series_factory):
        series = series_factory([100.0, 90.0, 110.0], [{"rsi": 50.0}, {"rsi": 25.0}, {"rsi": 75.0}])
        report = IndicatorBacktester(min_bars=3).backtest_indicator(series, "RSI", 1000.0)

        assert report.performance.trades == 1
        assert report.performance.roi == 22.22

    def test_all_indicators(self, backtester, rsi_round_trip_series):
        reports = backtester.backtest_all_indicators(rsi_round_trip_series, 10000.0)

        assert [r.indicator for r in reports] == [i.value for i in Indicator]
        assert all(r.success for r in reports)
        by_name = {r.indicator: r for r in reports}
        assert by_name["RSI"].performance.roi == 20.0
        assert by_name["MACD"].performance.trades == 0

    def test_failing_indicator_is_isolated(self, backtester, rsi_round_trip_series, monkeypatch):
        original = backtester.backtest_indicator

        def flaky(series, indicator, initial_capital=None, graded=False):
            if indicator == Indicator.MACD:
                raise RuntimeError("macd feed broken")
            return original(series, indicator, initial_capital, graded)

        monkeypatch.setattr(backtester, "backtest_indicator", flaky)
        reports = backtester.backtest_all_indicators(rsi_round_trip_series, 10000.0)

        failed = [r for r in reports if not r.success]
        assert len(reports) == len(Indicator)
        assert [r.indicator for r in failed] == ["MACD"]
        assert failed[0].error == "macd feed broken"
        assert failed[0].performance.roi == 0.0
        assert failed[0].performance.final_capital == 10000.0

    def test_weighted_backtest(self, backtester, rsi_round_trip_series):
        result = backtester.backtest_weighted(rsi_round_trip_series, {"rsi": 1.0, "macd": 0.0}, 10000.0)

        assert result.trades == 1
        assert result.roi == 20.0


class TestWeightOptimizer:
    """Tests for WeightOptimizer"""

    def test_combination_order(self):
        assert [name for name, _ in COMBOS] == [
            "Trend Only",
            "Momentum Only",
            "Volatility Only",
            "Trend + Momentum",
            "All Combined",
        ]
        assert set(COMBOS[-1][1]) == set(BASE_WEIGHTS)

    def test_picks_highest_roi(self, rsi_round_trip_series):
        result = WeightOptimizer().optimize(rsi_round_trip_series, 10000.0)

        assert len(result.all_results) == 5
        assert result.all_results[0].performance.roi == 0.0
        assert result.best_combo == "Momentum Only"
        assert result.performance.roi == 20.0
        assert result.best_weights == {
            "RSI": 2.78,
            "MACD": 2.78,
            "Stochastic": 2.22,
            "StochasticRSI": 2.22,
        }

    def test_first_combination_wins_tie(self, flat_series):
        result = WeightOptimizer().optimize(flat_series)

        assert result.best_combo == "Trend Only"
        assert sum(result.best_weights.values()) == pytest.approx(10.0)
