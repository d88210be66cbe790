"""
Unified Configuration Management for SignalBoost

Single source of truth for the engine's tunable thresholds and the ambient
logging/runtime options. Uses Pydantic Settings for type-safe configuration
from environment variables.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Find project root (where .env file is located)
_current_file = Path(__file__).resolve()
_project_root = _current_file.parent.parent.parent  # shared/config/settings.py -> project root
_env_file = _project_root / ".env"


class Settings(BaseSettings):
    """
    Unified settings for the SignalBoost engine.

    All configuration is loaded from environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_file=str(_env_file),
        env_file_encoding="utf-8",
        case_sensitive=True,
        validate_assignment=True,
        extra="forbid",  # Catch typos in environment variables
        frozen=False,  # Allow runtime updates for testing
    )

    # ============================================================================
    # Application Settings
    # ============================================================================

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Runtime environment"
    )
    DEBUG: bool = Field(
        default=True,
        description="Enable debug mode (auto-disabled in production)"
    )

    # ============================================================================
    # Logging Configuration
    # ============================================================================

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_JSON: bool = False  # Enable JSON structured logging

    # ============================================================================
    # Backtest Engine
    # ============================================================================

    ENGINE_INITIAL_CAPITAL: float = Field(
        default=10000.0,
        gt=0,
        description="Starting capital for simulations"
    )
    ENGINE_MIN_BARS: int = Field(
        default=50,
        ge=2,
        description="Minimum candles required for a strategy comparison"
    )
    ENGINE_PERIODS_PER_YEAR: int = Field(
        default=252 * 24,
        ge=1,
        description="Return periods per year used to annualize Sharpe/Sortino"
    )
    ENGINE_SHARPE_METHOD: Literal["equity_annualized", "equity_raw", "trade_returns"] = Field(
        default="equity_annualized",
        description="Sharpe ratio formula"
    )

    # ============================================================================
    # Signal Scoring Thresholds
    # ============================================================================

    ENGINE_HOLD_THRESHOLD: float = Field(
        default=0.15,
        ge=0,
        lt=1,
        description="Normalized score band treated as neutral"
    )
    ENGINE_STRONG_THRESHOLD: float = Field(
        default=0.6,
        gt=0,
        le=1,
        description="Strength at which a signal is labelled strong"
    )
    ENGINE_VOTE_THRESHOLD: float = Field(
        default=0.4,
        ge=0,
        description="Winning vote weight required by the comparison multi strategy"
    )
    ENGINE_STRENGTH_CAP: float = Field(
        default=0.95,
        gt=0,
        le=1,
        description="Upper bound for reported signal strength"
    )

    # ============================================================================
    # Indicator Rule Thresholds
    # ============================================================================

    ENGINE_RSI_LOW: float = Field(default=30.0, ge=0, le=100, description="RSI oversold level")
    ENGINE_RSI_HIGH: float = Field(default=70.0, ge=0, le=100, description="RSI overbought level")
    ENGINE_STOCH_LOW: float = Field(default=20.0, ge=0, le=100, description="Stochastic oversold level")
    ENGINE_STOCH_HIGH: float = Field(default=80.0, ge=0, le=100, description="Stochastic overbought level")
    ENGINE_BAND_PROXIMITY: float = Field(
        default=0.1,
        ge=0,
        le=0.5,
        description="Fraction of Bollinger width counted as touching a band"
    )

    # ============================================================================
    # Notifications
    # ============================================================================

    NOTIFY_SYMBOL_DELAY_SECONDS: float = Field(
        default=0.4,
        ge=0,
        description="Pause between symbols when dispatching signal batches"
    )

    # ============================================================================
    # Validation
    # ============================================================================

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept level names the logging module knows."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid LOG_LEVEL: {v}")
        return level

    @model_validator(mode='after')
    def validate_threshold_order(self) -> 'Settings':
        """
        Ensure paired thresholds are ordered.

        Validates:
        - RSI oversold below overbought
        - Stochastic oversold below overbought
        - Hold band below the strong cutoff

        Raises:
            ValueError: If a pair is inverted
        """
        errors = []

        if self.ENGINE_RSI_LOW >= self.ENGINE_RSI_HIGH:
            errors.append("ENGINE_RSI_LOW must be below ENGINE_RSI_HIGH")
        if self.ENGINE_STOCH_LOW >= self.ENGINE_STOCH_HIGH:
            errors.append("ENGINE_STOCH_LOW must be below ENGINE_STOCH_HIGH")
        if self.ENGINE_HOLD_THRESHOLD >= self.ENGINE_STRONG_THRESHOLD:
            errors.append("ENGINE_HOLD_THRESHOLD must be below ENGINE_STRONG_THRESHOLD")

        if errors:
            raise ValueError(f"Invalid engine thresholds: {'; '.join(errors)}")

        # Auto-disable DEBUG in production
        if self.ENVIRONMENT == "production":
            object.__setattr__(self, 'DEBUG', False)

        return self


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Singleton settings instance
    """
    return Settings()


# Global settings instance
settings = get_settings()
