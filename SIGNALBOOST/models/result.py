"""
Backtest and comparison result models.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from SIGNALBOOST.models.trade import Trade


class EquityPoint(BaseModel):
    """Account capital after a bar."""

    time: Optional[int] = Field(None, description="Bar time (unix seconds)")
    capital: float = Field(..., description="Capital at bar close")


class BacktestResult(BaseModel):
    """Performance metrics of one simulated strategy."""

    # Headline metrics (rounded to 2 decimals)
    roi: float = Field(default=0.0, description="Return on initial capital in percent")
    win_rate: float = Field(default=0.0, description="Win rate percentage", ge=0, le=100)
    max_drawdown: float = Field(default=0.0, description="Max peak-to-trough decline in percent", ge=0, le=100)
    trades: int = Field(default=0, description="Completed trades", ge=0)
    wins: int = Field(default=0, description="Trades with pnl > 0", ge=0)
    losses: int = Field(default=0, description="Trades with pnl <= 0", ge=0)
    initial_capital: float = Field(default=0.0, description="Starting capital", ge=0)
    final_capital: float = Field(default=0.0, description="Ending capital")

    # Risk-adjusted metrics; None when undefined
    sharpe_ratio: Optional[float] = Field(None, description="Sharpe ratio")
    sortino_ratio: Optional[float] = Field(None, description="Sortino ratio")

    # Supplementary trade statistics
    profit_factor: Optional[float] = Field(default=0.0, description="Gross profit / gross loss", ge=0)
    max_consecutive_losses: int = Field(default=0, description="Longest losing streak", ge=0)
    avg_trade_duration_hours: Optional[float] = Field(None, description="Average holding time")

    # History
    trade_list: List[Trade] = Field(default_factory=list, description="All completed trades")
    equity_curve: List[Dict[str, Any]] = Field(default_factory=list, description="Capital over time")

    class Config:
        json_schema_extra = {
            "example": {
                "roi": 12.5,
                "win_rate": 62.5,
                "max_drawdown": 4.31,
                "trades": 8,
                "wins": 5,
                "losses": 3,
                "initial_capital": 10000.0,
                "final_capital": 11250.0,
                "sharpe_ratio": 1.45,
                "sortino_ratio": 2.1,
                "profit_factor": 1.85,
                "max_consecutive_losses": 2,
                "avg_trade_duration_hours": 14.5
            }
        }


class IndicatorBacktestReport(BaseModel):
    """Outcome of backtesting one indicator; failed runs carry zeroed metrics."""

    indicator: str = Field(..., description="Indicator name")
    success: bool = Field(default=True, description="False when the run raised")
    performance: BacktestResult = Field(..., description="Metrics (zeroed on failure)")
    signal_counts: Dict[str, int] = Field(default_factory=dict, description="Bars per signal level")
    error: Optional[str] = Field(None, description="Error message of a failed run")


class ComboResult(BaseModel):
    """Backtest of one indicator combination."""

    combo: str = Field(..., description="Combination name")
    indicators: List[str] = Field(..., description="Indicators in the combination")
    weights: Dict[str, float] = Field(..., description="Weights used")
    performance: BacktestResult


class OptimizationResult(BaseModel):
    """Best indicator combination by ROI."""

    best_combo: str = Field(..., description="Name of the winning combination")
    best_weights: Dict[str, float] = Field(..., description="Winning weights scaled to sum to 10")
    performance: BacktestResult = Field(..., description="Metrics of the winning combination")
    all_results: List[ComboResult] = Field(default_factory=list)


class ComparisonDeltas(BaseModel):
    """Multi minus single for roi/win rate/trades; single minus multi for drawdown."""

    roi: float = Field(default=0.0, description="multi.roi - single.roi")
    win_rate: float = Field(default=0.0, description="multi.win_rate - single.win_rate")
    trades: int = Field(default=0, description="multi.trades - single.trades")
    max_drawdown: float = Field(
        default=0.0, description="single.max_drawdown - multi.max_drawdown (positive: multi less risky)"
    )


class RecommendationType(str, Enum):
    STRATEGY = "strategy"
    RISK = "risk"
    FREQUENCY = "frequency"
    ACCURACY = "accuracy"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Recommendation(BaseModel):
    """Human-readable advice derived from a comparison."""

    type: RecommendationType
    priority: Priority
    title: str
    message: str


class ComparisonResult(BaseModel):
    """Single-indicator versus weighted multi-indicator strategy."""

    symbol: Optional[str] = Field(None, description="Trading symbol")
    timeframe: Optional[str] = Field(None, description="Timeframe")
    single_indicator: str = Field(..., description="Indicator driving the single strategy")
    weights: Dict[str, float] = Field(default_factory=dict, description="Multi strategy weights")

    single: BacktestResult
    multi: BacktestResult
    deltas: ComparisonDeltas
    recommendations: List[Recommendation] = Field(default_factory=list)
    winner: Literal["single", "multi"] = Field(..., description="Higher ROI; ties go to single")

    candles: int = Field(..., description="Bars analyzed", ge=0)
    start_time: Optional[int] = Field(None, description="First bar time")
    end_time: Optional[int] = Field(None, description="Last bar time")
