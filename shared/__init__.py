"""
Shared infrastructure for SignalBoost

Configuration, structured logging, error types and input validation used by
the SIGNALBOOST engine package.
"""

# Version
__version__ = "1.0.0"

__all__ = [
    "__version__",
]
