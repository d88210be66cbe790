"""
Indicator weight configuration.
"""

import math
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from SIGNALBOOST.models.signal import Indicator
from shared.errors import ErrorCode, ValidationException


class PerformanceMetadata(BaseModel):
    """Backtest figures attached to a weight set. Display only, never scored."""

    roi: Optional[float] = Field(None, description="ROI percentage")
    win_rate: Optional[float] = Field(None, description="Win rate percentage", ge=0, le=100)
    sharpe_ratio: Optional[float] = Field(None, description="Sharpe ratio")
    trades: Optional[int] = Field(None, description="Number of trades", ge=0)


class WeightConfig(BaseModel):
    """
    Weights per indicator.

    Keys go through ``Indicator.parse`` so aliases such as ``sma20`` or
    ``stoch_rsi`` are accepted. Weights must be finite and non-negative; they
    do not have to sum to 1. A weight of 0 disables the indicator.
    """

    weights: Dict[Indicator, float] = Field(..., description="Weight per indicator")
    performance: Optional[PerformanceMetadata] = Field(None, description="Display-only metadata")

    class Config:
        json_schema_extra = {
            "example": {
                "weights": {"sma20": 0.15, "ema20": 0.2, "rsi": 0.25, "macd": 0.25, "psar": 0.15},
                "performance": {"roi": 12.4, "win_rate": 58.3, "sharpe_ratio": 1.2, "trades": 24}
            }
        }

    @field_validator("weights", mode="before")
    @classmethod
    def parse_weights(cls, value: Any) -> Dict[Indicator, float]:
        if not isinstance(value, Mapping):
            raise ValidationException(
                "Weights must be a mapping of indicator name to weight",
                details={"type": type(value).__name__},
                code=ErrorCode.INVALID_WEIGHT,
            )

        parsed: Dict[Indicator, float] = {}
        for name, raw in value.items():
            indicator = Indicator.parse(name)
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                raise ValidationException(
                    f"Weight for {indicator.value} must be a number",
                    details={"indicator": indicator.value, "value": str(raw)},
                    code=ErrorCode.INVALID_WEIGHT,
                )
            weight = float(raw)
            if not math.isfinite(weight) or weight < 0:
                raise ValidationException(
                    f"Weight for {indicator.value} must be a finite non-negative number",
                    details={"indicator": indicator.value, "value": weight},
                    code=ErrorCode.INVALID_WEIGHT,
                )
            parsed[indicator] = parsed.get(indicator, 0.0) + weight
        return parsed

    @classmethod
    def from_mapping(
        cls,
        weights: Mapping[Any, float],
        performance: Optional[Mapping[str, Any]] = None,
    ) -> "WeightConfig":
        """Build from a plain ``{name: weight}`` mapping."""
        return cls(
            weights=dict(weights),
            performance=PerformanceMetadata(**performance) if performance else None,
        )

    @classmethod
    def default_comparison(cls) -> "WeightConfig":
        """Default multi-indicator weights used by strategy comparisons."""
        return cls(weights=dict(DEFAULT_COMPARISON_WEIGHTS))

    @classmethod
    def equal(cls, indicators=None) -> "WeightConfig":
        """Weight 1.0 for each indicator (all supported ones by default)."""
        chosen = indicators or list(Indicator)
        return cls(weights={Indicator.parse(i): 1.0 for i in chosen})

    def active(self) -> Dict[Indicator, float]:
        """Indicators that take part in scoring (weight > 0), in declaration order."""
        return {ind: w for ind, w in self.weights.items() if w > 0}

    @property
    def total(self) -> float:
        return sum(self.weights.values())

    def normalized(self, target: float = 1.0, decimals: int = 2) -> Dict[str, float]:
        """
        Scale weights so they sum to ``target``.

        Returns:
            ``{indicator name: weight}`` rounded to ``decimals``; empty
            when every weight is 0.
        """
        total = self.total
        if total <= 0:
            return {}
        return {
            ind.value: round(w / total * target, decimals)
            for ind, w in self.weights.items()
        }

    def to_dict(self) -> Dict[str, float]:
        return {ind.value: w for ind, w in self.weights.items()}


DEFAULT_COMPARISON_WEIGHTS: Dict[Indicator, float] = {
    Indicator.SMA: 0.15,
    Indicator.EMA: 0.2,
    Indicator.RSI: 0.25,
    Indicator.MACD: 0.25,
    Indicator.PSAR: 0.15,
}
