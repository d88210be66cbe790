"""
Signal strategies.
"""

from SIGNALBOOST.strategies.signal_generator import SignalGenerator
from SIGNALBOOST.strategies.weighted_scorer import WeightedScorer, as_weight_config

__all__ = [
    "SignalGenerator",
    "WeightedScorer",
    "as_weight_config",
]
