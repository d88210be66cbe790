"""
Single-position, long-only backtest simulator.

FLAT --buy--> LONG --sell--> FLAT, with the whole capital committed on
every entry. Bars without a usable price carry capital forward and their
signal is ignored. A position still open after the last bar is liquidated
at the last available price.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from SIGNALBOOST.config import engine_config
from SIGNALBOOST.data.series import MarketSeries
from SIGNALBOOST.engine.balance_tracker import BalanceTracker
from SIGNALBOOST.models.result import EquityPoint
from SIGNALBOOST.models.signal import Signal
from SIGNALBOOST.models.trade import ExitReason, Position, Trade
from shared.errors import SeriesMisalignedException, ValidationException
from shared.logging import get_logger
from shared.validation import validate_initial_capital

logger = get_logger(__name__)

SignalInput = Union[Signal, str, None]

_SIGNAL_ALIASES = {
    "hold": Signal.NEUTRAL,
    "none": Signal.NEUTRAL,
    "": Signal.NEUTRAL,
}


def coerce_signal(value: SignalInput) -> Signal:
    """Accept Signal members or their string forms (``BUY``, ``hold`` ...)."""
    if value is None:
        return Signal.NEUTRAL
    if isinstance(value, Signal):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        if key in _SIGNAL_ALIASES:
            return _SIGNAL_ALIASES[key]
        try:
            return Signal(key)
        except ValueError:
            pass
    raise ValidationException(
        f"Unrecognized signal: {value!r}",
        details={"value": str(value), "valid_values": [s.value for s in Signal] + ["hold"]},
    )


def usable_price(price: Optional[float]) -> bool:
    """A price is usable when present, finite and strictly positive."""
    return price is not None and math.isfinite(price) and price > 0


@dataclass
class SimulationRun:
    """Raw simulator output, before metrics."""

    initial_capital: float
    final_capital: float
    trades: List[Trade] = field(default_factory=list)
    equity_curve: List[EquityPoint] = field(default_factory=list)
    liquidated_at_end: bool = False


class BacktestSimulator:
    """Simulates one long-only account against a signal stream."""

    def run(
        self,
        prices: Sequence[Optional[float]],
        signals: Sequence[SignalInput],
        initial_capital: Optional[float] = None,
        times: Optional[Sequence[Optional[int]]] = None,
    ) -> SimulationRun:
        """
        Run the simulation.

        Args:
            prices: Close per bar; None/NaN/non-positive marks a missing quote
            signals: Signal per bar (strong levels act like their direction)
            initial_capital: Starting capital (defaults to configured value)
            times: Optional bar times carried into trades and equity points

        Returns:
            SimulationRun with trades and one equity point per bar

        Raises:
            SeriesMisalignedException: If prices, signals and times differ in length
            ValidationException: If capital is not positive or a signal is unknown
        """
        capital = validate_initial_capital(
            engine_config.DEFAULT_INITIAL_CAPITAL if initial_capital is None else initial_capital
        )

        if len(prices) != len(signals):
            raise SeriesMisalignedException(
                f"Prices and signals differ in length: {len(prices)} != {len(signals)}",
                details={"prices": len(prices), "signals": len(signals)},
            )
        if times is not None and len(times) != len(prices):
            raise SeriesMisalignedException(
                f"Times and prices differ in length: {len(times)} != {len(prices)}",
                details={"times": len(times), "prices": len(prices)},
            )

        tracker = BalanceTracker(capital)
        trades: List[Trade] = []
        position: Optional[Position] = None
        last_price: Optional[float] = None
        last_time: Optional[int] = None

        for index, (price, raw_signal) in enumerate(zip(prices, signals)):
            time = times[index] if times is not None else None
            signal = coerce_signal(raw_signal)

            if not usable_price(price):
                if signal != Signal.NEUTRAL:
                    logger.warning(f"Bar {index} has no usable price, {signal.value} signal ignored")
                tracker.add_snapshot(time, in_position=position is not None)
                continue

            last_price = float(price)
            last_time = time

            if signal.is_buy and position is None:
                position = Position(
                    entry_price=last_price,
                    entry_time=time,
                    quantity=tracker.current_capital / last_price,
                    capital=tracker.current_capital,
                )
                logger.debug(f"Entry at {last_price} (bar {index})")

            elif signal.is_sell and position is not None:
                trades.append(
                    self._close(tracker, position, last_price, time, len(trades) + 1, ExitReason.SIGNAL)
                )
                position = None

            tracker.add_snapshot(time, in_position=position is not None)

        liquidated = False
        if position is not None and last_price is not None:
            # Exit at the last usable quote, stamped with the bar that supplied it
            trades.append(
                self._close(tracker, position, last_price, last_time, len(trades) + 1, ExitReason.BACKTEST_END)
            )
            tracker.replace_last_snapshot()
            liquidated = True

        logger.debug(
            f"Simulation finished: {len(prices)} bars, {len(trades)} trades, "
            f"final capital {tracker.current_capital:.2f}"
        )

        return SimulationRun(
            initial_capital=capital,
            final_capital=tracker.current_capital,
            trades=trades,
            equity_curve=tracker.get_equity_curve(),
            liquidated_at_end=liquidated,
        )

    def run_series(
        self,
        series: MarketSeries,
        signals: Sequence[SignalInput],
        initial_capital: Optional[float] = None,
    ) -> SimulationRun:
        """Run against the closes and bar times of a MarketSeries."""
        return self.run(series.closes, signals, initial_capital, times=series.times)

    @staticmethod
    def _close(
        tracker: BalanceTracker,
        position: Position,
        price: float,
        time: Optional[int],
        trade_number: int,
        reason: ExitReason,
    ) -> Trade:
        pnl = (price - position.entry_price) * position.quantity
        tracker.update_balance(pnl)

        trade = Trade(
            trade_number=trade_number,
            entry_price=position.entry_price,
            entry_time=position.entry_time,
            exit_price=price,
            exit_time=time,
            exit_reason=reason,
            quantity=position.quantity,
            pnl=pnl,
            pnl_percent=(price - position.entry_price) / position.entry_price * 100,
            capital_after=tracker.current_capital,
        )
        logger.debug(
            f"Exit #{trade_number} at {price} ({reason.value}): pnl={pnl:.2f}",
            extra={"trade_number": trade_number},
        )
        return trade
