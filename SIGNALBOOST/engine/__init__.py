"""
Backtest engine components.
"""

from SIGNALBOOST.engine.balance_tracker import BalanceSnapshot, BalanceTracker
from SIGNALBOOST.engine.backtest_simulator import BacktestSimulator, SimulationRun
from SIGNALBOOST.engine.performance_analyzer import PerformanceAnalyzer
from SIGNALBOOST.engine.comparison_engine import ComparisonEngine, VoteTally
from SIGNALBOOST.engine.indicator_backtest import IndicatorBacktester
from SIGNALBOOST.engine.weight_optimizer import WeightOptimizer

__all__ = [
    "BalanceTracker",
    "BalanceSnapshot",
    "BacktestSimulator",
    "SimulationRun",
    "PerformanceAnalyzer",
    "ComparisonEngine",
    "VoteTally",
    "IndicatorBacktester",
    "WeightOptimizer",
]
