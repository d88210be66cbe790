"""
Position and trade models for the long-only simulator.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ExitReason(str, Enum):
    """Exit reason enumeration."""
    SIGNAL = "signal"
    BACKTEST_END = "backtest_end"  # Position held until the end of the series


class Position(BaseModel):
    """Open long position. Full capital is committed at entry."""

    entry_price: float = Field(..., description="Entry price", gt=0)
    entry_time: Optional[int] = Field(None, description="Entry bar time (unix seconds)")
    quantity: float = Field(..., description="Units held (capital / entry price)", gt=0)
    capital: float = Field(..., description="Capital committed at entry", ge=0)


class Trade(BaseModel):
    """Completed round trip."""

    trade_number: int = Field(..., description="Trade sequence number", ge=1)

    # Entry
    entry_price: float = Field(..., description="Entry price", gt=0)
    entry_time: Optional[int] = Field(None, description="Entry time (unix seconds)")

    # Exit
    exit_price: float = Field(..., description="Exit price", gt=0)
    exit_time: Optional[int] = Field(None, description="Exit time (unix seconds)")
    exit_reason: ExitReason = Field(default=ExitReason.SIGNAL, description="Exit reason")

    # Size and P&L
    quantity: float = Field(..., description="Units traded", gt=0)
    pnl: float = Field(..., description="Realized P&L")
    pnl_percent: float = Field(..., description="Price change from entry in percent")
    capital_after: float = Field(..., description="Capital after the exit")

    class Config:
        json_schema_extra = {
            "example": {
                "trade_number": 1,
                "entry_price": 100.0,
                "entry_time": 1704067200,
                "exit_price": 110.0,
                "exit_time": 1704070800,
                "exit_reason": "signal",
                "quantity": 100.0,
                "pnl": 1000.0,
                "pnl_percent": 10.0,
                "capital_after": 11000.0
            }
        }

    @property
    def is_win(self) -> bool:
        """A trade wins iff its P&L is strictly positive."""
        return self.pnl > 0

    @property
    def duration_seconds(self) -> Optional[float]:
        """Calculate trade duration in seconds."""
        if self.entry_time is None or self.exit_time is None:
            return None
        return float(self.exit_time - self.entry_time)
