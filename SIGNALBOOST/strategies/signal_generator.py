"""
Per-indicator signal generator.

Maps one bar of indicator values (plus the previous bar where a rule needs
it) to a Signal. Three calling conventions:

- level: decision from the current bar alone, used for scoring
- crossover: fires only on the bar where the indicator's event condition
  turns true, used so comparisons do not re-enter every bar
- graded: level decision upgraded to strong_* on extra confirmation

Missing inputs always give NEUTRAL; only unknown indicator names raise.
"""

from typing import Callable, Dict, Iterable, Optional, Tuple

from SIGNALBOOST.config import ScoringThresholds
from SIGNALBOOST.models.candle import IndicatorSnapshot
from SIGNALBOOST.models.signal import Indicator, Signal, SignalMode
from shared.logging import get_logger

logger = get_logger(__name__)

# Inputs each indicator needs on a bar before it can say anything
REQUIRED_FIELDS: Dict[Indicator, Tuple[str, ...]] = {
    Indicator.RSI: ("rsi",),
    Indicator.MACD: ("macd", "macd_signal_line", "macd_hist"),
    Indicator.SMA: ("close", "sma20", "sma50"),
    Indicator.EMA: ("close", "ema20", "ema50"),
    Indicator.BOLLINGER_BANDS: ("close", "bb_upper", "bb_lower"),
    Indicator.STOCHASTIC: ("stoch_k", "stoch_d"),
    Indicator.STOCHASTIC_RSI: ("stoch_rsi_k", "stoch_rsi_d"),
    Indicator.PSAR: ("close", "psar"),
}

# Inputs the crossover event conditions read
EVENT_FIELDS: Dict[Indicator, Tuple[str, ...]] = {
    Indicator.RSI: ("rsi",),
    Indicator.MACD: ("macd", "macd_signal_line"),
    Indicator.SMA: ("close", "sma20"),
    Indicator.EMA: ("close", "ema20"),
    Indicator.BOLLINGER_BANDS: ("close", "bb_upper", "bb_lower"),
    Indicator.STOCHASTIC: ("stoch_k", "stoch_d"),
    Indicator.STOCHASTIC_RSI: ("stoch_rsi_k", "stoch_rsi_d"),
    Indicator.PSAR: ("close", "psar"),
}

Rule = Callable[[IndicatorSnapshot], Signal]


class SignalGenerator:
    """
    Generates per-indicator trading signals from indicator snapshots.

    Thresholds default to the configured ScoringThresholds; any of them can
    be overridden per instance.
    """

    def __init__(
        self,
        thresholds: Optional[ScoringThresholds] = None,
        rsi_low: Optional[float] = None,
        rsi_high: Optional[float] = None,
        stoch_low: Optional[float] = None,
        stoch_high: Optional[float] = None,
        band_proximity: Optional[float] = None,
    ):
        """
        Initialize signal generator.

        Args:
            thresholds: Base thresholds (defaults to configured values)
            rsi_low: RSI oversold level
            rsi_high: RSI overbought level
            stoch_low: Stochastic oversold level
            stoch_high: Stochastic overbought level
            band_proximity: Fraction of Bollinger width counted as a band touch
        """
        base = thresholds or ScoringThresholds.from_settings()
        overrides = {
            key: value
            for key, value in {
                "rsi_low": rsi_low,
                "rsi_high": rsi_high,
                "stoch_low": stoch_low,
                "stoch_high": stoch_high,
                "band_proximity": band_proximity,
            }.items()
            if value is not None
        }
        self.thresholds = (
            ScoringThresholds(**{**base.model_dump(), **overrides}) if overrides else base
        )

        self._level_rules: Dict[Indicator, Rule] = {
            Indicator.RSI: self._rsi_level,
            Indicator.MACD: self._macd_level,
            Indicator.SMA: lambda s: self._ma_level(s.close, s.sma20, s.sma50),
            Indicator.EMA: lambda s: self._ma_level(s.close, s.ema20, s.ema50),
            Indicator.BOLLINGER_BANDS: self._bollinger_level,
            Indicator.STOCHASTIC: lambda s: self._stoch_level(s.stoch_k, s.stoch_d),
            Indicator.STOCHASTIC_RSI: lambda s: self._stoch_level(s.stoch_rsi_k, s.stoch_rsi_d),
            Indicator.PSAR: self._psar_level,
        }
        self._event_rules: Dict[Indicator, Rule] = {
            Indicator.RSI: self._rsi_level,
            Indicator.MACD: self._macd_event,
            Indicator.SMA: lambda s: self._price_vs_line(s.close, s.sma20),
            Indicator.EMA: lambda s: self._price_vs_line(s.close, s.ema20),
            Indicator.BOLLINGER_BANDS: self._bollinger_level,
            Indicator.STOCHASTIC: lambda s: self._stoch_level(s.stoch_k, s.stoch_d),
            Indicator.STOCHASTIC_RSI: lambda s: self._stoch_level(s.stoch_rsi_k, s.stoch_rsi_d),
            Indicator.PSAR: self._psar_level,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def signal(
        self,
        indicator: "Indicator | str",
        current: Optional[IndicatorSnapshot],
        previous: Optional[IndicatorSnapshot] = None,
    ) -> Signal:
        """
        Level signal for one indicator on the current bar.

        ``previous`` is accepted for a uniform call signature and ignored.

        Raises:
            UnknownIndicatorException: If the indicator name is not supported
        """
        ind = Indicator.parse(indicator)
        if current is None or not self.is_ready(ind, current):
            return Signal.NEUTRAL
        return self._level_rules[ind](current)

    def crossover_signal(
        self,
        indicator: "Indicator | str",
        current: Optional[IndicatorSnapshot],
        previous: Optional[IndicatorSnapshot],
    ) -> Signal:
        """
        Event signal: BUY/SELL only on the bar where the event condition
        becomes true.

        Event conditions: RSI and the stochastics leaving/entering their zones,
        MACD line crossing its signal line, price crossing MA20/EMA20, price
        crossing PSAR, price reaching a Bollinger band. Both bars need the
        inputs; a missing previous bar gives NEUTRAL.
        """
        ind = Indicator.parse(indicator)
        if current is None or previous is None:
            return Signal.NEUTRAL
        fields = EVENT_FIELDS[ind]
        if not current.has(*fields) or not previous.has(*fields):
            return Signal.NEUTRAL

        rule = self._event_rules[ind]
        now = rule(current)
        if now == Signal.NEUTRAL:
            return Signal.NEUTRAL
        return now if rule(previous) != now else Signal.NEUTRAL

    def graded_signal(
        self,
        indicator: "Indicator | str",
        current: Optional[IndicatorSnapshot],
        previous: Optional[IndicatorSnapshot] = None,
    ) -> Signal:
        """
        5-level signal.

        Starts from the level signal and upgrades it to strong_* when:
        RSI is beyond 0.9 x oversold / 1.1 x overbought, the MACD histogram
        expands against the previous bar, MA20 freshly crossed MA50, both
        stochastic lines turn in the signal direction, or price flipped
        sides of PSAR. Bollinger Bands have no strong form.
        """
        ind = Indicator.parse(indicator)
        base = self.signal(ind, current)
        if base == Signal.NEUTRAL:
            return base

        if self._is_confirmed(ind, base, current, previous):
            return Signal.STRONG_BUY if base.is_buy else Signal.STRONG_SELL
        return base

    def signal_for_mode(
        self,
        indicator: "Indicator | str",
        current: Optional[IndicatorSnapshot],
        previous: Optional[IndicatorSnapshot],
        mode: SignalMode = SignalMode.LEVEL,
    ) -> Signal:
        if mode == SignalMode.CROSSOVER:
            return self.crossover_signal(indicator, current, previous)
        if mode == SignalMode.GRADED:
            return self.graded_signal(indicator, current, previous)
        return self.signal(indicator, current, previous)

    def signals_for(
        self,
        current: Optional[IndicatorSnapshot],
        previous: Optional[IndicatorSnapshot],
        indicators: Iterable["Indicator | str"],
        mode: SignalMode = SignalMode.LEVEL,
    ) -> Dict[Indicator, Signal]:
        """Signals for several indicators on one bar."""
        return {
            Indicator.parse(ind): self.signal_for_mode(ind, current, previous, mode)
            for ind in indicators
        }

    @staticmethod
    def is_ready(indicator: Indicator, snapshot: Optional[IndicatorSnapshot]) -> bool:
        """True when the snapshot carries every input the level rule needs."""
        if snapshot is None:
            return False
        return snapshot.has(*REQUIRED_FIELDS[indicator])

    # ------------------------------------------------------------------
    # Level rules
    # ------------------------------------------------------------------

    def _rsi_level(self, snap: IndicatorSnapshot) -> Signal:
        if snap.rsi > self.thresholds.rsi_high:
            return Signal.SELL
        if snap.rsi < self.thresholds.rsi_low:
            return Signal.BUY
        return Signal.NEUTRAL

    @staticmethod
    def _macd_level(snap: IndicatorSnapshot) -> Signal:
        if snap.macd > snap.macd_signal_line and snap.macd_hist > 0:
            return Signal.BUY
        if snap.macd < snap.macd_signal_line and snap.macd_hist < 0:
            return Signal.SELL
        return Signal.NEUTRAL

    @staticmethod
    def _ma_level(price: float, fast: float, slow: float) -> Signal:
        if price > fast and price > slow and fast > slow:
            return Signal.BUY
        if price < fast and price < slow and fast < slow:
            return Signal.SELL
        return Signal.NEUTRAL

    def _bollinger_level(self, snap: IndicatorSnapshot) -> Signal:
        width = snap.bb_upper - snap.bb_lower
        if width <= 0:
            return Signal.NEUTRAL
        margin = width * self.thresholds.band_proximity
        if snap.close > snap.bb_upper - margin:
            return Signal.SELL
        if snap.close < snap.bb_lower + margin:
            return Signal.BUY
        return Signal.NEUTRAL

    def _stoch_level(self, k: Optional[float], d: Optional[float]) -> Signal:
        if k is None or d is None:
            return Signal.NEUTRAL
        if k > self.thresholds.stoch_high and d > self.thresholds.stoch_high:
            return Signal.SELL
        if k < self.thresholds.stoch_low and d < self.thresholds.stoch_low:
            return Signal.BUY
        return Signal.NEUTRAL

    @staticmethod
    def _psar_level(snap: IndicatorSnapshot) -> Signal:
        return SignalGenerator._price_vs_line(snap.close, snap.psar)

    # ------------------------------------------------------------------
    # Event conditions
    # ------------------------------------------------------------------

    @staticmethod
    def _price_vs_line(price: Optional[float], line: Optional[float]) -> Signal:
        if price is None or line is None:
            return Signal.NEUTRAL
        if price > line:
            return Signal.BUY
        if price < line:
            return Signal.SELL
        return Signal.NEUTRAL

    @staticmethod
    def _macd_event(snap: IndicatorSnapshot) -> Signal:
        return SignalGenerator._price_vs_line(snap.macd, snap.macd_signal_line)

    # ------------------------------------------------------------------
    # Strong confirmations
    # ------------------------------------------------------------------

    def _is_confirmed(
        self,
        indicator: Indicator,
        base: Signal,
        current: IndicatorSnapshot,
        previous: Optional[IndicatorSnapshot],
    ) -> bool:
        buy = base.is_buy

        if indicator == Indicator.RSI:
            if buy:
                return current.rsi < self.thresholds.rsi_low * 0.9
            return current.rsi > self.thresholds.rsi_high * 1.1

        if previous is None:
            return False

        if indicator == Indicator.MACD:
            if previous.macd_hist is None:
                return False
            if buy:
                return current.macd_hist > previous.macd_hist
            return current.macd_hist < previous.macd_hist

        if indicator in (Indicator.SMA, Indicator.EMA):
            fast_name, slow_name = ("sma20", "sma50") if indicator == Indicator.SMA else ("ema20", "ema50")
            if not previous.has(fast_name, slow_name):
                return False
            prev_fast = getattr(previous, fast_name)
            prev_slow = getattr(previous, slow_name)
            if buy:
                return prev_fast <= prev_slow
            return prev_fast >= prev_slow

        if indicator in (Indicator.STOCHASTIC, Indicator.STOCHASTIC_RSI):
            k_name, d_name = (
                ("stoch_k", "stoch_d") if indicator == Indicator.STOCHASTIC
                else ("stoch_rsi_k", "stoch_rsi_d")
            )
            if not previous.has(k_name, d_name):
                return False
            k, d = getattr(current, k_name), getattr(current, d_name)
            prev_k, prev_d = getattr(previous, k_name), getattr(previous, d_name)
            if buy:
                return k > prev_k and d > prev_d
            return k < prev_k and d < prev_d

        if indicator == Indicator.PSAR:
            if not previous.has("close", "psar"):
                return False
            flipped_from = Signal.SELL if buy else Signal.BUY
            return self._price_vs_line(previous.close, previous.psar) == flipped_from

        return False
