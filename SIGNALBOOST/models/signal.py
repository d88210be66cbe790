"""
Signal, indicator and score models.
"""

from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, Field

from shared.errors import UnknownIndicatorException


class Signal(str, Enum):
    """
    Trading signal.

    The 3-level form uses BUY/NEUTRAL/SELL only. Graded indicators add the
    STRONG_* levels.
    """
    STRONG_BUY = "strong_buy"
    BUY = "buy"
    NEUTRAL = "neutral"
    SELL = "sell"
    STRONG_SELL = "strong_sell"

    @property
    def score(self) -> int:
        """Numeric vote: strong_buy +2, buy +1, neutral 0, sell -1, strong_sell -2."""
        return SIGNAL_SCORES[self]

    @property
    def direction(self) -> "Signal":
        """Collapse strong levels onto BUY/SELL."""
        if self.score > 0:
            return Signal.BUY
        if self.score < 0:
            return Signal.SELL
        return Signal.NEUTRAL

    @property
    def is_buy(self) -> bool:
        return self.score > 0

    @property
    def is_sell(self) -> bool:
        return self.score < 0

    @property
    def is_strong(self) -> bool:
        return abs(self.score) == 2


SIGNAL_SCORES: Dict[Signal, int] = {
    Signal.STRONG_BUY: 2,
    Signal.BUY: 1,
    Signal.NEUTRAL: 0,
    Signal.SELL: -1,
    Signal.STRONG_SELL: -2,
}


class IndicatorCategory(str, Enum):
    """Indicator family used for sub-scores."""
    TREND = "trend"
    MOMENTUM = "momentum"
    VOLATILITY = "volatility"


class Indicator(str, Enum):
    """Supported indicators."""
    RSI = "RSI"
    MACD = "MACD"
    SMA = "SMA"
    EMA = "EMA"
    BOLLINGER_BANDS = "BollingerBands"
    STOCHASTIC = "Stochastic"
    STOCHASTIC_RSI = "StochasticRSI"
    PSAR = "PSAR"

    @property
    def category(self) -> IndicatorCategory:
        return INDICATOR_CATEGORIES[self]

    @classmethod
    def parse(cls, name: Union[str, "Indicator"]) -> "Indicator":
        """
        Resolve an indicator name or alias.

        Accepts the canonical names plus the lowercase/snake_case keys used by
        weight payloads (``sma20``, ``ema20``, ``stoch_rsi``, ``bb`` ...).

        Raises:
            UnknownIndicatorException: If the name is not supported
        """
        if isinstance(name, Indicator):
            return name
        if not isinstance(name, str):
            raise UnknownIndicatorException(str(name), [i.value for i in cls])

        key = name.strip().lower().replace("_", "").replace("-", "").replace(" ", "")
        indicator = INDICATOR_ALIASES.get(key)
        if indicator is None:
            raise UnknownIndicatorException(name, [i.value for i in cls])
        return indicator


INDICATOR_CATEGORIES: Dict[Indicator, IndicatorCategory] = {
    Indicator.SMA: IndicatorCategory.TREND,
    Indicator.EMA: IndicatorCategory.TREND,
    Indicator.PSAR: IndicatorCategory.TREND,
    Indicator.RSI: IndicatorCategory.MOMENTUM,
    Indicator.MACD: IndicatorCategory.MOMENTUM,
    Indicator.STOCHASTIC: IndicatorCategory.MOMENTUM,
    Indicator.STOCHASTIC_RSI: IndicatorCategory.MOMENTUM,
    Indicator.BOLLINGER_BANDS: IndicatorCategory.VOLATILITY,
}

INDICATOR_ALIASES: Dict[str, Indicator] = {
    "rsi": Indicator.RSI,
    "macd": Indicator.MACD,
    "sma": Indicator.SMA,
    "sma20": Indicator.SMA,
    "ema": Indicator.EMA,
    "ema20": Indicator.EMA,
    "bollingerbands": Indicator.BOLLINGER_BANDS,
    "bollinger": Indicator.BOLLINGER_BANDS,
    "bb": Indicator.BOLLINGER_BANDS,
    "bands": Indicator.BOLLINGER_BANDS,
    "stochastic": Indicator.STOCHASTIC,
    "stoch": Indicator.STOCHASTIC,
    "stochasticrsi": Indicator.STOCHASTIC_RSI,
    "stochrsi": Indicator.STOCHASTIC_RSI,
    "psar": Indicator.PSAR,
    "parabolicsar": Indicator.PSAR,
    "sar": Indicator.PSAR,
}


class SignalMode(str, Enum):
    """How a per-indicator signal is derived."""
    LEVEL = "level"
    CROSSOVER = "crossover"
    GRADED = "graded"


class ScoreResult(BaseModel):
    """Weighted multi-indicator score for one bar."""

    normalized_score: float = Field(..., description="combined / total weight", ge=-2, le=2)
    action: Signal = Field(..., description="3-level decision")
    strength: float = Field(..., description="min(|score|, cap); 0 when neutral", ge=0, le=1)
    is_strong: bool = Field(default=False, description="strength >= strong threshold")
    label: Signal = Field(..., description="5-level label (action plus strong qualifier)")
    signals: Dict[Indicator, Signal] = Field(default_factory=dict, description="Per-indicator signals")
    category_scores: Dict[IndicatorCategory, float] = Field(
        default_factory=dict, description="Normalized score per indicator family"
    )
    total_weight: float = Field(default=0.0, description="Sum of evaluated weights", ge=0)
    time: Optional[int] = Field(None, description="Bar time (unix seconds)")

    class Config:
        json_schema_extra = {
            "example": {
                "normalized_score": 0.64,
                "action": "buy",
                "strength": 0.64,
                "is_strong": True,
                "label": "strong_buy",
                "signals": {"RSI": "buy", "MACD": "buy", "SMA": "neutral"},
                "category_scores": {"trend": 0.0, "momentum": 1.0, "volatility": 0.0},
                "total_weight": 2.5,
                "time": 1704067200
            }
        }


class SignalEvent(BaseModel):
    """Signal payload handed to the notification layer."""

    symbol: str = Field(..., description="Trading symbol")
    channel: str = Field(default="multi", description="'multi' or the single indicator name")
    timeframe: Optional[str] = Field(None, description="Candle timeframe")
    time: Optional[int] = Field(None, description="Bar time (unix seconds)")
    price: Optional[float] = Field(None, description="Close at the signal bar", gt=0)
    action: Signal = Field(..., description="3-level decision")
    label: Signal = Field(..., description="5-level label")
    normalized_score: float = Field(default=0.0, description="Weighted score")
    strength: float = Field(default=0.0, description="Signal strength", ge=0, le=1)
    category_scores: Dict[IndicatorCategory, float] = Field(default_factory=dict)
    weights: Dict[str, float] = Field(default_factory=dict, description="Weights used")
    performance: Optional[Dict[str, Optional[float]]] = Field(
        None, description="Display-only backtest metadata"
    )

    @property
    def is_actionable(self) -> bool:
        return self.action != Signal.NEUTRAL
