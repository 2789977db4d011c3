"""Runtime helpers used by the pipeline driver."""

from .history import SignalHistory

__all__ = ["SignalHistory"]
