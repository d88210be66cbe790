"""
Signal event construction and dispatch.

The dispatcher hands actionable, non-duplicate events to an injected async
sender. Batches run one symbol at a time with a fixed pause between symbols
to stay under the downstream API's rate limit.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Optional

from SIGNALBOOST.config import engine_config
from SIGNALBOOST.models.result import BacktestResult
from SIGNALBOOST.models.signal import ScoreResult, Signal, SignalEvent
from SIGNALBOOST.models.weights import WeightConfig
from SIGNALBOOST.notifications.deduplicator import MULTI_CHANNEL, SignalDeduplicator
from shared.errors import NotificationFailedException
from shared.logging import get_logger, log_error_with_context
from shared.validation import sanitize_symbol

logger = get_logger(__name__)

Sender = Callable[[SignalEvent], Awaitable[Any]]


def build_signal_event(
    symbol: str,
    score: ScoreResult,
    price: Optional[float] = None,
    timeframe: Optional[str] = None,
    weights: Optional[WeightConfig] = None,
    performance: Optional[BacktestResult] = None,
    channel: str = MULTI_CHANNEL,
) -> SignalEvent:
    """
    Wrap a ScoreResult into a SignalEvent.

    Backtest performance is attached for display only. A neutral score
    always carries strength 0.
    """
    perf = None
    if performance is not None:
        perf = {
            "roi": performance.roi,
            "win_rate": performance.win_rate,
            "sharpe_ratio": performance.sharpe_ratio,
            "trades": performance.trades,
        }
    elif weights is not None and weights.performance is not None:
        perf = weights.performance.model_dump()

    return SignalEvent(
        symbol=sanitize_symbol(symbol),
        channel=channel,
        timeframe=timeframe,
        time=score.time,
        price=price if price is not None and price > 0 else None,
        action=score.action,
        label=score.label,
        normalized_score=score.normalized_score,
        strength=0.0 if score.action == Signal.NEUTRAL else score.strength,
        category_scores=score.category_scores,
        weights=weights.to_dict() if weights is not None else {},
        performance=perf,
    )


@dataclass
class DispatchSummary:
    """Outcome counts of a dispatch batch."""

    sent: int = 0
    duplicate: int = 0
    neutral: int = 0
    failed: int = 0


class SignalDispatcher:
    """Sends signal events through an injected sender."""

    def __init__(
        self,
        sender: Sender,
        deduplicator: Optional[SignalDeduplicator] = None,
        delay_seconds: Optional[float] = None,
        raise_on_failure: bool = False,
    ):
        """
        Initialize dispatcher.

        Args:
            sender: Async callable delivering one event
            deduplicator: Last-signal cache (a fresh one when omitted)
            delay_seconds: Pause between symbols in dispatch_all
            raise_on_failure: Raise NotificationFailedException instead of
                reporting "failed"
        """
        self.sender = sender
        self.deduplicator = deduplicator if deduplicator is not None else SignalDeduplicator()
        self.delay_seconds = (
            engine_config.SYMBOL_DELAY_SECONDS if delay_seconds is None else delay_seconds
        )
        self.raise_on_failure = raise_on_failure

    async def dispatch(self, event: SignalEvent) -> str:
        """
        Send one event.

        Returns:
            str: "neutral", "duplicate", "sent" or "failed"

        Raises:
            NotificationFailedException: If delivery fails and raise_on_failure is set
        """
        if not event.is_actionable:
            return "neutral"

        if not self.deduplicator.should_emit(event.symbol, event.action, event.channel):
            return "duplicate"

        try:
            await self.sender(event)
        except Exception as e:
            log_error_with_context(
                logger, e, f"Signal delivery failed for {event.symbol}",
                symbol=event.symbol, strategy=event.channel,
            )
            # Allow the same signal to be retried on the next run
            self.deduplicator.forget(event.symbol, event.channel)
            if self.raise_on_failure:
                raise NotificationFailedException(event.symbol, str(e)) from e
            return "failed"

        logger.info(
            f"Sent {event.label.value} signal for {event.symbol} "
            f"(score={event.normalized_score:.2f}, strength={event.strength:.2f})",
            extra={"symbol": event.symbol, "strategy": event.channel},
        )
        return "sent"

    async def dispatch_all(self, events: Iterable[SignalEvent]) -> DispatchSummary:
        """Dispatch events sequentially, pausing between them."""
        summary = DispatchSummary()
        for index, event in enumerate(events):
            if index and self.delay_seconds > 0:
                await asyncio.sleep(self.delay_seconds)
            outcome = await self.dispatch(event)
            setattr(summary, outcome, getattr(summary, outcome) + 1)

        logger.info(
            f"Dispatch finished: sent={summary.sent} duplicate={summary.duplicate} "
            f"neutral={summary.neutral} failed={summary.failed}"
        )
        return summary
