"""
Performance analyzer.

Pure, total function from (trades, equity curve, initial capital) to a
BacktestResult. Percentages and ratios are rounded to 2 decimals on the
way out only.

Sharpe ratio variants (see SharpeMethod):
- equity_annualized (default): per-bar equity returns, sample std (ddof=1),
  scaled by sqrt(periods per year)
- equity_raw: same without annualization
- trade_returns: per-trade pnl% with population std, unannualized
"""

import math
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np

from SIGNALBOOST.config import SharpeMethod, engine_config
from SIGNALBOOST.engine.backtest_simulator import SimulationRun
from SIGNALBOOST.models.result import BacktestResult, EquityPoint
from SIGNALBOOST.models.trade import Trade
from shared.errors import ConfigurationException
from shared.logging import get_logger
from shared.validation import validate_initial_capital

logger = get_logger(__name__)

EquityInput = Union[EquityPoint, float, int]


def _round(value: Optional[float], decimals: int = engine_config.METRIC_DECIMALS) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return round(float(value), decimals)


class PerformanceAnalyzer:
    """Computes ROI, win rate, drawdown and risk-adjusted ratios."""

    def __init__(
        self,
        periods_per_year: Optional[int] = None,
        sharpe_method: Optional[SharpeMethod] = None,
    ):
        """
        Initialize analyzer.

        Args:
            periods_per_year: Return periods per year for annualization
            sharpe_method: Sharpe formula (defaults to configured method)

        Raises:
            ConfigurationException: If periods_per_year is not positive
        """
        self.periods_per_year = (
            engine_config.PERIODS_PER_YEAR if periods_per_year is None else periods_per_year
        )
        if self.periods_per_year <= 0:
            raise ConfigurationException(
                f"periods_per_year must be positive, got {self.periods_per_year}"
            )
        self.sharpe_method = SharpeMethod(sharpe_method or engine_config.SHARPE_METHOD)

    def analyze(
        self,
        trades: Sequence[Trade],
        equity_curve: Sequence[EquityInput],
        initial_capital: float,
    ) -> BacktestResult:
        """
        Build the metrics struct.

        Args:
            trades: Completed trades in order
            equity_curve: Capital per bar (EquityPoint or plain numbers)
            initial_capital: Starting capital

        Returns:
            BacktestResult; all-zero metrics with final == initial for empty input
        """
        capital = validate_initial_capital(initial_capital)
        points = [self._as_point(p) for p in equity_curve]
        capitals = [p.capital for p in points]

        final_capital = capitals[-1] if capitals else capital
        if trades and not capitals:
            final_capital = trades[-1].capital_after

        wins = sum(1 for t in trades if t.is_win)
        total = len(trades)

        roi = (final_capital - capital) / capital * 100
        win_rate = wins / total * 100 if total else 0.0

        returns = self.step_returns(capitals)
        if self.sharpe_method == SharpeMethod.TRADE_RETURNS:
            sharpe = self.trade_sharpe(trades)
        else:
            sharpe = self.sharpe_ratio(
                returns, annualize=self.sharpe_method == SharpeMethod.EQUITY_ANNUALIZED
            )

        result = BacktestResult(
            roi=_round(roi),
            win_rate=_round(win_rate),
            max_drawdown=self.max_drawdown(capitals),
            trades=total,
            wins=wins,
            losses=total - wins,
            initial_capital=capital,
            final_capital=_round(final_capital),
            sharpe_ratio=_round(sharpe),
            sortino_ratio=_round(self.sortino_ratio(returns)),
            profit_factor=self.profit_factor(trades),
            max_consecutive_losses=self.max_consecutive_losses(trades),
            avg_trade_duration_hours=self.avg_duration_hours(trades),
            trade_list=list(trades),
            equity_curve=[p.model_dump() for p in points],
        )

        logger.debug(
            f"Analyzed {total} trades: roi={result.roi}%, win_rate={result.win_rate}%, "
            f"max_dd={result.max_drawdown}%"
        )
        return result

    def analyze_run(self, run: SimulationRun) -> BacktestResult:
        """Analyze a SimulationRun."""
        return self.analyze(run.trades, run.equity_curve, run.initial_capital)

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    @staticmethod
    def max_drawdown(capitals: Iterable[float]) -> float:
        """
        Largest peak-to-trough decline in percent, single pass.

        Returns 0 for empty or monotonically rising curves.
        """
        peak: Optional[float] = None
        worst = 0.0
        for value in capitals:
            if peak is None or value > peak:
                peak = value
            if peak > 0:
                drawdown = (peak - value) / peak * 100
                if drawdown > worst:
                    worst = drawdown
        return round(min(max(worst, 0.0), 100.0), engine_config.METRIC_DECIMALS)

    @staticmethod
    def step_returns(capitals: Sequence[float]) -> np.ndarray:
        """Simple returns between consecutive equity points."""
        if len(capitals) < 2:
            return np.array([], dtype=float)
        values = np.asarray(capitals, dtype=float)
        previous = values[:-1]
        diffs = values[1:] - previous
        return np.divide(diffs, previous, out=np.zeros_like(diffs), where=previous > 0)

    def sharpe_ratio(self, returns: np.ndarray, annualize: bool = True) -> Optional[float]:
        """mean / sample std of per-step returns; None when fewer than 2 returns or std is 0."""
        if len(returns) < 2:
            return None
        std = float(np.std(returns, ddof=1))
        if std <= 0 or not math.isfinite(std):
            return None
        ratio = float(np.mean(returns)) / std
        if annualize:
            ratio *= math.sqrt(self.periods_per_year)
        return ratio

    def sortino_ratio(self, returns: np.ndarray) -> Optional[float]:
        """mean / RMS of negative returns, annualized; None without negative returns."""
        if len(returns) == 0:
            return None
        negative = returns[returns < 0]
        if len(negative) == 0:
            return None
        downside = float(np.sqrt(np.mean(negative ** 2)))
        if downside <= 0:
            return None
        return float(np.mean(returns)) / downside * math.sqrt(self.periods_per_year)

    @staticmethod
    def trade_sharpe(trades: Sequence[Trade]) -> Optional[float]:
        """Sharpe over per-trade pnl% with population std."""
        returns = np.array([t.pnl_percent for t in trades], dtype=float)
        if len(returns) < 2:
            return None
        std = float(np.std(returns))
        if std <= 0:
            return None
        return float(np.mean(returns)) / std

    @staticmethod
    def profit_factor(trades: Sequence[Trade]) -> Optional[float]:
        """
        Gross profit / gross loss.

        0 without trades or profit; None (unbounded) when there are profits
        but no losses.
        """
        gross_profit = sum(t.pnl for t in trades if t.pnl > 0)
        gross_loss = abs(sum(t.pnl for t in trades if t.pnl < 0))
        if gross_loss > 0:
            return round(gross_profit / gross_loss, engine_config.METRIC_DECIMALS)
        if gross_profit > 0:
            return None
        return 0.0

    @staticmethod
    def max_consecutive_losses(trades: Sequence[Trade]) -> int:
        streak = 0
        longest = 0
        for trade in trades:
            if trade.is_win:
                streak = 0
            else:
                streak += 1
                longest = max(longest, streak)
        return longest

    @staticmethod
    def avg_duration_hours(trades: Sequence[Trade]) -> Optional[float]:
        durations: List[float] = [
            t.duration_seconds for t in trades if t.duration_seconds is not None
        ]
        if not durations:
            return None
        return round(sum(durations) / len(durations) / 3600, engine_config.METRIC_DECIMALS)

    @staticmethod
    def _as_point(value: EquityInput) -> EquityPoint:
        if isinstance(value, EquityPoint):
            return value
        return EquityPoint(time=None, capital=float(value))
