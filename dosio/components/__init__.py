"""Reference components implementing the :class:`~dosio.dos.Dos` protocol."""
from .recorder import SignalRecorder
from .replay import SignalReplay
from .state_space import DiscreteStateSpace, DiscreteStateSpaceBuilder

__all__ = ["SignalRecorder", "SignalReplay", "DiscreteStateSpace", "DiscreteStateSpaceBuilder"]
