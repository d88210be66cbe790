"""
Balance tracker for the simulator's equity curve.
"""

from dataclasses import dataclass
from typing import List, Optional

from SIGNALBOOST.models.result import EquityPoint
from shared.logging import get_logger

logger = get_logger(__name__)


@dataclass
class BalanceSnapshot:
    """Single balance snapshot for equity curve."""

    time: Optional[int]
    capital: float
    in_position: bool = False


class BalanceTracker:
    """Tracks realized capital and the per-bar equity curve during a simulation."""

    def __init__(self, initial_capital: float):
        """
        Initialize balance tracker.

        Args:
            initial_capital: Starting capital
        """
        self.initial_capital = initial_capital
        self.current_capital = initial_capital
        self.snapshots: List[BalanceSnapshot] = []

        logger.debug(f"BalanceTracker initialized with {initial_capital}")

    def add_snapshot(self, time: Optional[int], in_position: bool = False) -> None:
        """
        Record the current realized capital for a bar.

        Args:
            time: Bar time (unix seconds)
            in_position: Whether a position is open after the bar
        """
        self.snapshots.append(
            BalanceSnapshot(time=time, capital=self.current_capital, in_position=in_position)
        )

    def replace_last_snapshot(self, time: Optional[int] = None) -> None:
        """
        Overwrite the newest snapshot with the current capital.

        Used after the end-of-series liquidation so the curve keeps one point
        per bar and ends on the post-liquidation capital.
        """
        if not self.snapshots:
            self.add_snapshot(time)
            return

        last = self.snapshots[-1]
        self.snapshots[-1] = BalanceSnapshot(
            time=time if time is not None else last.time,
            capital=self.current_capital,
            in_position=False,
        )

    def update_balance(self, pnl: float) -> None:
        """
        Update capital after a trade closes.

        Args:
            pnl: Realized profit/loss
        """
        self.current_capital += pnl

        logger.debug(
            f"Balance updated: PNL={pnl:.2f}, "
            f"New capital={self.current_capital:.2f}"
        )

    def get_equity_curve(self) -> List[EquityPoint]:
        """Equity curve, one point per recorded bar."""
        return [EquityPoint(time=snap.time, capital=snap.capital) for snap in self.snapshots]
