"""
SIGNALBOOST Configuration

Engine view of the shared settings: scoring thresholds, indicator rule
levels and simulation defaults.

Several thresholds have two values observed in practice. One default is
used and the alternative is recorded next to it:

- strong signal cutoff: 0.6 (alternative 0.5 in the overall analyzer)
- buy/sell decision: 0.15 on the normalized score for the weighted scorer,
  0.4 absolute vote weight for the comparison multi strategy
- Sharpe ratio: per-bar equity returns annualized with sqrt(252 * 24)
  (alternatives: unannualized, or per-trade pnl% with population std)
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from shared.config import get_settings as get_shared_settings

# Shared settings
settings = get_shared_settings()


class SharpeMethod(str, Enum):
    """Sharpe ratio formula variants."""
    EQUITY_ANNUALIZED = "equity_annualized"
    EQUITY_RAW = "equity_raw"
    TRADE_RETURNS = "trade_returns"


class ScoringThresholds(BaseModel):
    """Named thresholds consumed by the signal generator, scorer and comparison."""

    # Indicator rule levels
    rsi_low: float = Field(default=30.0, ge=0, le=100, description="RSI oversold level")
    rsi_high: float = Field(default=70.0, ge=0, le=100, description="RSI overbought level")
    stoch_low: float = Field(default=20.0, ge=0, le=100, description="Stochastic oversold level")
    stoch_high: float = Field(default=80.0, ge=0, le=100, description="Stochastic overbought level")
    band_proximity: float = Field(
        default=0.1, ge=0, le=0.5,
        description="Fraction of Bollinger width counted as touching a band"
    )

    # Score decisions
    hold_threshold: float = Field(
        default=0.15, ge=0, lt=1,
        description="|normalized score| at or below this is neutral"
    )
    strong_threshold: float = Field(
        default=0.6, gt=0, le=1,
        description="Strength at which a signal is labelled strong (0.5 also seen)"
    )
    strength_cap: float = Field(default=0.95, gt=0, le=1, description="Reported strength upper bound")
    vote_threshold: float = Field(
        default=0.4, ge=0,
        description="Winning vote weight required by the comparison multi strategy"
    )

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "rsi_low": 30,
                "rsi_high": 70,
                "stoch_low": 20,
                "stoch_high": 80,
                "band_proximity": 0.1,
                "hold_threshold": 0.15,
                "strong_threshold": 0.6,
                "strength_cap": 0.95,
                "vote_threshold": 0.4
            }
        }

    @model_validator(mode="after")
    def check_order(self) -> "ScoringThresholds":
        if self.rsi_low >= self.rsi_high:
            raise ValueError("rsi_low must be below rsi_high")
        if self.stoch_low >= self.stoch_high:
            raise ValueError("stoch_low must be below stoch_high")
        return self

    @classmethod
    def from_settings(cls) -> "ScoringThresholds":
        """Build thresholds from the current shared settings."""
        current = get_shared_settings()
        return cls(
            rsi_low=current.ENGINE_RSI_LOW,
            rsi_high=current.ENGINE_RSI_HIGH,
            stoch_low=current.ENGINE_STOCH_LOW,
            stoch_high=current.ENGINE_STOCH_HIGH,
            band_proximity=current.ENGINE_BAND_PROXIMITY,
            hold_threshold=current.ENGINE_HOLD_THRESHOLD,
            strong_threshold=current.ENGINE_STRONG_THRESHOLD,
            strength_cap=current.ENGINE_STRENGTH_CAP,
            vote_threshold=current.ENGINE_VOTE_THRESHOLD,
        )


class EngineConfig:
    """Engine defaults"""

    # Simulation
    DEFAULT_INITIAL_CAPITAL: float = settings.ENGINE_INITIAL_CAPITAL
    MIN_COMPARISON_BARS: int = settings.ENGINE_MIN_BARS

    # Risk metrics
    PERIODS_PER_YEAR: int = settings.ENGINE_PERIODS_PER_YEAR
    SHARPE_METHOD: SharpeMethod = SharpeMethod(settings.ENGINE_SHARPE_METHOD)

    # Output rounding
    METRIC_DECIMALS: int = 2

    # Weight optimizer
    OPTIMIZED_WEIGHT_TOTAL: float = 10.0

    # Notifications
    SYMBOL_DELAY_SECONDS: float = settings.NOTIFY_SYMBOL_DELAY_SECONDS


# Create singleton instance
engine_config = EngineConfig()
