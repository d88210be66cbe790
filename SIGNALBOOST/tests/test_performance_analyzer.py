"""
Tests for PerformanceAnalyzer metrics.
"""

import math

import numpy as np
import pytest

from SIGNALBOOST.config import SharpeMethod
from SIGNALBOOST.engine.performance_analyzer import PerformanceAnalyzer
from SIGNALBOOST.models.result import EquityPoint
from SIGNALBOOST.models.trade import Trade
from shared.errors import ConfigurationException


def make_trade(number: int, pnl: float, pnl_percent: float = 0.0, entry_time=None, exit_time=None) -> Trade:
    return Trade(
        trade_number=number,
        entry_price=100.0,
        entry_time=entry_time,
        exit_price=100.0 + pnl_percent,
        exit_time=exit_time,
        quantity=1.0,
        pnl=pnl,
        pnl_percent=pnl_percent,
        capital_after=1000.0 + pnl,
    )


@pytest.fixture
def analyzer() -> PerformanceAnalyzer:
    return PerformanceAnalyzer(periods_per_year=252 * 24, sharpe_method=SharpeMethod.EQUITY_ANNUALIZED)


class TestDrawdown:
    """Tests for max drawdown"""

    def test_peak_to_trough(self, analyzer):
        result = analyzer.analyze([], [10000, 11000, 9000, 12000], 10000)

        assert result.max_drawdown == 18.18
        assert result.roi == 20.0
        assert result.final_capital == 12000.0

    def test_rising_curve_has_no_drawdown(self):
        assert PerformanceAnalyzer.max_drawdown([100, 110, 120]) == 0.0
        assert PerformanceAnalyzer.max_drawdown([]) == 0.0


class TestEmptyInput:
    """Tests for empty trade lists and curves"""

    def test_all_zero_result(self, analyzer):
        result = analyzer.analyze([], [], 5000.0)

        assert result.roi == 0.0
        assert result.win_rate == 0.0
        assert result.max_drawdown == 0.0
        assert result.trades == 0
        assert result.final_capital == 5000.0
        assert result.sharpe_ratio is None
        assert result.sortino_ratio is None
        assert result.profit_factor == 0.0

    def test_is_deterministic(self, analyzer):
        trades = [make_trade(1, 50.0), make_trade(2, -20.0)]
        curve = [1000.0, 1050.0, 1030.0]
        assert analyzer.analyze(trades, curve, 1000.0) == analyzer.analyze(trades, curve, 1000.0)


class TestRiskRatios:
    """Tests for Sharpe and Sortino"""

    def test_sharpe_uses_sample_std(self, analyzer):
        curve = [100.0, 110.0, 99.0, 108.9]
        values = np.array(curve)
        returns = np.diff(values) / values[:-1]
        expected = np.mean(returns) / np.std(returns, ddof=1) * math.sqrt(252 * 24)

        result = analyzer.analyze([], curve, 100.0)

        assert result.sharpe_ratio == pytest.approx(round(expected, 2))

    def test_sortino_uses_downside_only(self, analyzer):
        curve = [100.0, 110.0, 99.0, 108.9]
        values = np.array(curve)
        returns = np.diff(values) / values[:-1]
        downside = np.sqrt(np.mean(returns[returns < 0] ** 2))
        expected = np.mean(returns) / downside * math.sqrt(252 * 24)

        result = analyzer.analyze([], curve, 100.0)

        assert result.sortino_ratio == pytest.approx(round(expected, 2))

    def test_flat_curve_has_no_sharpe(self, analyzer):
        result = analyzer.analyze([], [100.0] * 10, 100.0)
        assert result.sharpe_ratio is None
        assert result.sortino_ratio is None

    def test_unannualized_sharpe(self):
        curve = [100.0, 110.0, 99.0, 108.9]
        raw = PerformanceAnalyzer(sharpe_method=SharpeMethod.EQUITY_RAW).analyze([], curve, 100.0)
        annual = PerformanceAnalyzer(
            periods_per_year=252 * 24, sharpe_method=SharpeMethod.EQUITY_ANNUALIZED
        ).analyze([], curve, 100.0)

        assert raw.sharpe_ratio == pytest.approx(annual.sharpe_ratio / math.sqrt(252 * 24), abs=0.01)

    def test_trade_return_sharpe(self):
        analyzer = PerformanceAnalyzer(sharpe_method=SharpeMethod.TRADE_RETURNS)
        trades = [make_trade(1, 10.0, 10.0), make_trade(2, -5.0, -5.0), make_trade(3, 10.0, 10.0)]
        pnl = np.array([10.0, -5.0, 10.0])

        result = analyzer.analyze(trades, [1000.0, 1010.0, 1005.0, 1015.0], 1000.0)

        assert result.sharpe_ratio == pytest.approx(round(np.mean(pnl) / np.std(pnl), 2))

    def test_non_positive_periods_rejected(self):
        with pytest.raises(ConfigurationException):
            PerformanceAnalyzer(periods_per_year=0)


class TestTradeStatistics:
    """Tests for trade-level statistics"""

    def test_win_rate_and_profit_factor(self, analyzer):
        trades = [make_trade(1, 100.0), make_trade(2, -50.0), make_trade(3, 0.0)]
        result = analyzer.analyze(trades, [1000.0, 1100.0, 1050.0, 1050.0], 1000.0)

        assert result.wins == 1
        assert result.losses == 2
        assert result.win_rate == 33.33
        assert result.profit_factor == 2.0

    def test_profit_factor_without_losses(self):
        assert PerformanceAnalyzer.profit_factor([make_trade(1, 10.0)]) is None
        assert PerformanceAnalyzer.profit_factor([]) == 0.0

    def test_max_consecutive_losses(self):
        pnls = [-1.0, -2.0, 3.0, -1.0, 0.0, -5.0]
        trades = [make_trade(i + 1, pnl) for i, pnl in enumerate(pnls)]
        assert PerformanceAnalyzer.max_consecutive_losses(trades) == 3

    def test_average_duration(self):
        trades = [
            make_trade(1, 1.0, entry_time=0, exit_time=7200),
            make_trade(2, 1.0, entry_time=0, exit_time=3600),
        ]
        assert PerformanceAnalyzer.avg_duration_hours(trades) == 1.5
        assert PerformanceAnalyzer.avg_duration_hours([make_trade(1, 1.0)]) is None

    def test_equity_points_are_kept(self, analyzer):
        curve = [EquityPoint(time=1, capital=1000.0), EquityPoint(time=2, capital=1100.0)]
        result = analyzer.analyze([], curve, 1000.0)

        assert result.equity_curve == [{"time": 1, "capital": 1000.0}, {"time": 2, "capital": 1100.0}]
