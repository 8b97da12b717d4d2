"""
riskplan - Position Sizing and Risk Planning

Public API for turning a trade idea (entry, stop, balance, risk) into an
executable position plan.
"""

from importlib.metadata import version

try:
    __version__ = version("riskplan")
except Exception:
    __version__ = "0.0.0.dev"  # Fallback for development


__all__ = [
    "__version__",
]
