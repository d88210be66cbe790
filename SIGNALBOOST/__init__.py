"""
SignalBoost multi-indicator scoring and backtesting engine.

Turns precomputed indicator series into buy/sell decisions, simulates a
single long-only position against them and compares single-indicator
against weighted multi-indicator strategies.
"""

__version__ = "1.0.0"
