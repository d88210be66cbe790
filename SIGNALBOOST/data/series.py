"""
Market series ingestion.

Pairs a candle series with its indicator series, validates them once and
exposes closes/times in the shape the simulator consumes.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd

from SIGNALBOOST.models.candle import CandleBar, IndicatorSnapshot
from SIGNALBOOST.models.result import BacktestResult
from shared.errors import SeriesMisalignedException
from shared.logging import get_logger
from shared.validation import sanitize_symbol, sanitize_timeframe

logger = get_logger(__name__)

CandleInput = Union[CandleBar, Mapping[str, Any]]
SnapshotInput = Union[IndicatorSnapshot, Mapping[str, Any]]

OHLCV_COLUMNS = ["open", "high", "low", "close", "volume"]
INDICATOR_COLUMNS = [
    "sma20", "sma50", "ema20", "ema50", "rsi",
    "macd", "macd_signal_line", "macd_hist",
    "bb_upper", "bb_middle", "bb_lower",
    "stoch_k", "stoch_d", "stoch_rsi_k", "stoch_rsi_d",
    "psar",
]


class MarketSeries:
    """
    Validated candle + indicator series for one symbol and timeframe.

    Both series must have the same length and identical, strictly ascending
    bar times. Each snapshot gets the close of its candle attached.
    """

    def __init__(
        self,
        candles: Sequence[CandleInput],
        snapshots: Sequence[SnapshotInput],
        symbol: Optional[str] = None,
        timeframe: Optional[str] = None,
    ):
        """
        Initialize market series.

        Args:
            candles: OHLCV bars in ascending time order
            snapshots: Indicator values, one per candle
            symbol: Trading symbol (sanitized when given)
            timeframe: Candle timeframe such as "1h" (validated when given)

        Raises:
            SeriesMisalignedException: If lengths, times or ordering differ
        """
        self.symbol = sanitize_symbol(symbol) if symbol else None
        self.timeframe = sanitize_timeframe(timeframe) if timeframe else None

        bars = [c if isinstance(c, CandleBar) else CandleBar(**c) for c in candles]
        snaps = [
            s if isinstance(s, IndicatorSnapshot) else IndicatorSnapshot.model_validate(dict(s))
            for s in snapshots
        ]

        if len(bars) != len(snaps):
            raise SeriesMisalignedException(
                f"Candle and indicator series differ in length: {len(bars)} != {len(snaps)}",
                details={"candles": len(bars), "indicators": len(snaps), "symbol": self.symbol},
            )

        for index, (bar, snap) in enumerate(zip(bars, snaps)):
            if bar.time != snap.time:
                raise SeriesMisalignedException(
                    f"Bar {index} time mismatch: candle {bar.time} != indicator {snap.time}",
                    details={"index": index, "candle_time": bar.time, "indicator_time": snap.time},
                )
            if index and bar.time <= bars[index - 1].time:
                raise SeriesMisalignedException(
                    f"Bar times must be strictly ascending at index {index}",
                    details={"index": index, "time": bar.time, "previous": bars[index - 1].time},
                )

        self.candles: List[CandleBar] = bars
        self.snapshots: List[IndicatorSnapshot] = [
            snap.with_close(bar.close) for bar, snap in zip(bars, snaps)
        ]

        logger.debug(
            f"MarketSeries loaded: {len(self.candles)} bars",
            extra={"symbol": self.symbol, "timeframe": self.timeframe},
        )

    def __len__(self) -> int:
        return len(self.candles)

    @property
    def closes(self) -> List[Optional[float]]:
        """Close per bar; None where the candle has no price."""
        return [bar.close if bar.has_price else None for bar in self.candles]

    @property
    def times(self) -> List[int]:
        return [bar.time for bar in self.candles]

    @property
    def start_time(self) -> Optional[int]:
        return self.candles[0].time if self.candles else None

    @property
    def end_time(self) -> Optional[int]:
        return self.candles[-1].time if self.candles else None

    def pairs(self) -> Iterable[tuple]:
        """Yield ``(current, previous)`` snapshots; previous is None on the first bar."""
        previous = None
        for snap in self.snapshots:
            yield snap, previous
            previous = snap

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_records(
        cls,
        candles: Sequence[Mapping[str, Any]],
        indicators: Sequence[Mapping[str, Any]],
        symbol: Optional[str] = None,
        timeframe: Optional[str] = None,
    ) -> "MarketSeries":
        """Build from the collaborator payloads (plain dicts, camelCase accepted)."""
        return cls(candles, indicators, symbol=symbol, timeframe=timeframe)

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        symbol: Optional[str] = None,
        timeframe: Optional[str] = None,
    ) -> "MarketSeries":
        """
        Build from a DataFrame holding OHLCV and indicator columns.

        The bar time comes from a ``time`` column (unix seconds), a
        ``timestamp`` column or a DatetimeIndex. Missing OHLCV values are
        treated as a missing quote (0).
        """
        frame = df.copy()
        if "time" not in frame.columns:
            if "timestamp" in frame.columns:
                stamps = pd.to_datetime(frame["timestamp"], utc=True)
            elif isinstance(frame.index, pd.DatetimeIndex):
                stamps = pd.Series(frame.index, index=frame.index)
                if stamps.dt.tz is None:
                    stamps = stamps.dt.tz_localize("UTC")
            else:
                raise SeriesMisalignedException(
                    "DataFrame needs a 'time' column, a 'timestamp' column or a DatetimeIndex",
                    details={"columns": list(frame.columns)},
                )
            epoch = pd.Timestamp("1970-01-01", tz="UTC")
            frame["time"] = ((stamps - epoch) // pd.Timedelta(seconds=1)).astype("int64").to_numpy()

        frame = frame.sort_values("time").reset_index(drop=True)

        candles: List[Dict[str, Any]] = []
        snapshots: List[Dict[str, Any]] = []
        for row in frame.to_dict(orient="records"):
            time = int(row["time"])
            bar = {"time": time}
            for column in OHLCV_COLUMNS:
                value = row.get(column)
                bar[column] = 0.0 if value is None or pd.isna(value) else float(value)
            candles.append(bar)

            snap: Dict[str, Any] = {"time": time}
            for column in INDICATOR_COLUMNS:
                if column in row:
                    value = row[column]
                    snap[column] = None if value is None or pd.isna(value) else float(value)
            snapshots.append(snap)

        return cls(candles, snapshots, symbol=symbol, timeframe=timeframe)

    def to_frame(self) -> pd.DataFrame:
        """DataFrame indexed by UTC datetime with OHLCV and indicator columns."""
        rows = []
        for bar, snap in zip(self.candles, self.snapshots):
            row = bar.model_dump()
            row.update(snap.model_dump(include=set(INDICATOR_COLUMNS)))
            rows.append(row)

        frame = pd.DataFrame(rows, columns=["time"] + OHLCV_COLUMNS + INDICATOR_COLUMNS)
        frame.index = pd.to_datetime(frame["time"], unit="s", utc=True)
        frame.index.name = "timestamp"
        return frame


def equity_frame(result: BacktestResult) -> pd.DataFrame:
    """
    Equity curve as a DataFrame with capital, running peak and drawdown (%).

    Points without a time keep a positional RangeIndex.
    """
    frame = pd.DataFrame(result.equity_curve, columns=["time", "capital"])
    if frame.empty:
        return frame.assign(peak=pd.Series(dtype=float), drawdown=pd.Series(dtype=float))

    frame["peak"] = frame["capital"].cummax()
    frame["drawdown"] = (frame["peak"] - frame["capital"]) / frame["peak"] * 100
    if frame["time"].notna().all():
        frame.index = pd.to_datetime(frame["time"].astype("int64"), unit="s", utc=True)
        frame.index.name = "timestamp"
    return frame
