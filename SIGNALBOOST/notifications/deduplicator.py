"""
Duplicate signal suppression.

Remembers the last signal emitted per (symbol, channel) so an unchanged
signal is not sent twice. Each instance owns its state and is passed to the
dispatcher explicitly.
"""

import threading
from typing import Dict, Optional, Tuple

from SIGNALBOOST.models.signal import Signal
from shared.logging import get_logger

logger = get_logger(__name__)

MULTI_CHANNEL = "multi"


class SignalDeduplicator:
    """Thread-safe last-signal cache keyed by (symbol, channel)."""

    def __init__(self) -> None:
        self._last: Dict[Tuple[str, str], Signal] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(symbol: str, channel: Optional[str]) -> Tuple[str, str]:
        return symbol.upper(), channel or MULTI_CHANNEL

    def should_emit(self, symbol: str, signal: Signal, channel: Optional[str] = None) -> bool:
        """
        Check and record a signal.

        Args:
            symbol: Trading symbol
            signal: Signal about to be sent
            channel: Single indicator name, or None for the multi-indicator channel

        Returns:
            bool: False if the same signal was the last one recorded for the key
        """
        key = self._key(symbol, channel)
        with self._lock:
            if self._last.get(key) == signal:
                logger.debug(
                    f"Duplicate {signal.value} suppressed for {key[0]}/{key[1]}",
                    extra={"symbol": key[0]},
                )
                return False
            self._last[key] = signal
            return True

    def last_signal(self, symbol: str, channel: Optional[str] = None) -> Optional[Signal]:
        with self._lock:
            return self._last.get(self._key(symbol, channel))

    def forget(self, symbol: str, channel: Optional[str] = None) -> None:
        """Drop the recorded signal of one channel."""
        with self._lock:
            self._last.pop(self._key(symbol, channel), None)

    def clear(self, symbol: Optional[str] = None) -> int:
        """
        Forget recorded signals.

        Args:
            symbol: Only clear this symbol's channels; everything when None

        Returns:
            int: Number of entries removed
        """
        with self._lock:
            if symbol is None:
                removed = len(self._last)
                self._last.clear()
            else:
                target = symbol.upper()
                keys = [key for key in self._last if key[0] == target]
                for key in keys:
                    del self._last[key]
                removed = len(keys)

        logger.debug(f"Cleared {removed} cached signals", extra={"symbol": symbol})
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._last)
