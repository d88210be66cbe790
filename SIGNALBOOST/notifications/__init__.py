"""Signal notification layer"""

from SIGNALBOOST.notifications.deduplicator import MULTI_CHANNEL, SignalDeduplicator
from SIGNALBOOST.notifications.dispatcher import (
    DispatchSummary,
    SignalDispatcher,
    build_signal_event,
)

__all__ = [
    "SignalDeduplicator",
    "SignalDispatcher",
    "DispatchSummary",
    "build_signal_event",
    "MULTI_CHANNEL",
]
