"""Three-phase protocol implemented by every simulation component.

A component is driven once per discrete time step::

    outputs = component.inputs(signals).step().outputs()

or equivalently ``component.in_step_out(signals)``.  The state advance is
the iterator protocol: :meth:`Dos.step` calls ``next(component)`` and turns
``StopIteration`` into :class:`~dosio.errors.StepError`, which is terminal.

Input routing is declarative.  Methods decorated with :func:`handles`
receive the signals of the listed kinds::

    class Mirror(Dos):
        @handles("OSSM1Lcl")
        def _rigid_body_motions(self, io):
            ...

A signal of a kind without handler is rejected with
:class:`~dosio.errors.InputsError`; a signal of a handled kind without
payload is skipped.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Dict, Iterator, List, Optional, Sequence

from .catalog import kind_of
from .errors import DosError, InputsError, StepError
from .signals import IO

logger = logging.getLogger(__name__)

_HANDLES_ATTR = "_dos_handles"


def handles(*kinds: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Register the decorated method as input handler for ``kinds``."""

    names = tuple(kind_of(kind).name for kind in kinds)
    if not names:
        raise ValueError("handles() needs at least one signal kind")

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        setattr(func, _HANDLES_ATTR, getattr(func, _HANDLES_ATTR, ()) + names)
        return func

    return decorator


class Dos(ABC):
    """Base class of simulation components."""

    _input_handlers: ClassVar[Dict[str, str]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        table: Dict[str, str] = {}
        for klass in reversed(cls.__mro__):
            for attr, value in vars(klass).items():
                for name in getattr(value, _HANDLES_ATTR, ()):
                    table[name] = attr
        cls._input_handlers = table

    # ------------------------------------------------------------------
    # Signal tags
    # ------------------------------------------------------------------
    def inputs_tags(self) -> List[IO[None]]:
        """Kinds accepted by :meth:`inputs`."""
        return [IO(name) for name in sorted(self._input_handlers)]

    def outputs_tags(self) -> List[IO[None]]:
        """Kinds produced by :meth:`outputs`."""
        return []

    def input_handler(self, io: IO[Any]) -> Optional[Callable[[IO[Any]], Any]]:
        attr = self._input_handlers.get(io.name)
        if attr is None:
            return None
        return getattr(self, attr)

    # ------------------------------------------------------------------
    # Protocol
    # ------------------------------------------------------------------
    def inputs(self, data: Optional[Sequence[IO[Any]]]) -> "Dos":
        """Route each signal of ``data`` to its handler.

        ``None`` means no signals this step.  Every kind is checked before
        any handler runs.
        """

        if data is None:
            return self
        routed = []
        for io in data:
            handler = self.input_handler(io)
            if handler is None:
                raise InputsError(f"{type(self).__name__} invalid input: {io.name}")
            routed.append((handler, io))
        for handler, io in routed:
            if not io.has_data:
                continue
            try:
                handler(io)
            except DosError:
                raise
            except Exception as exc:
                raise InputsError(exc) from exc
        return self

    def __iter__(self) -> Iterator[Any]:
        return self

    @abstractmethod
    def __next__(self) -> Any:
        """Advance the internal state by one step; raise ``StopIteration`` when done."""

    def step(self) -> "Dos":
        try:
            next(self)
        except StopIteration as exc:
            raise StepError(f"{type(self).__name__} next step has issued None") from exc
        return self

    @abstractmethod
    def outputs(self) -> Optional[List[IO[Any]]]:
        """Output signals for the current state, or ``None`` if there are none."""

    def in_step_out(self, data: Optional[Sequence[IO[Any]]]) -> Optional[List[IO[Any]]]:
        """``inputs`` then ``step`` then ``outputs``, stopping at the first error."""

        return self.inputs(data).step().outputs()


__all__ = ["Dos", "handles"]
