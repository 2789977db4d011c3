r"""Discrete-time linear state space component.

The component advances

.. math::

    x_{k+1} = A x_k + B u_k, \qquad y_k = C x_k + D u_k

once per step.  Input signals are written into slices of ``u`` and output
signals are slices of ``y``; the slice offsets are catalog signals holding
an index (see :meth:`dosio.signals.IO.assign`).  Inputs are held between
steps until a new value arrives.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np

from ..catalog import kind_of
from ..collection import SignalVec, lookup
from ..dos import Dos
from ..errors import ConfigurationError, OutputsError
from ..signals import IO

logger = logging.getLogger(__name__)


def _layout(ports: Sequence[Tuple[str, int]]) -> Tuple[SignalVec, List[int], int]:
    offsets = SignalVec()
    widths: List[int] = []
    total = 0
    for name, width in ports:
        io: IO[int] = IO(name)
        io.assign(total)
        offsets.append(io)
        widths.append(width)
        total += width
    return offsets, widths, total


class DiscreteStateSpace(Dos):
    """Linear discrete system driven through tagged signals.

    Use :class:`DiscreteStateSpaceBuilder` to assemble one.
    """

    def __init__(
        self,
        a: np.ndarray,
        b: np.ndarray,
        c: Optional[np.ndarray],
        d: Optional[np.ndarray],
        inputs: Sequence[Tuple[str, int]],
        outputs: Sequence[Tuple[str, int]],
        *,
        x0: Optional[np.ndarray] = None,
        n_steps: Optional[int] = None,
    ) -> None:
        self.a = a
        self.b = b
        self.c = c
        self.d = d
        self._u_offsets, self._u_widths, n_u = _layout(inputs)
        self._y_offsets, self._y_widths, _ = _layout(outputs)
        self.u = np.zeros(n_u)
        self.x = np.zeros(a.shape[0]) if x0 is None else np.array(x0, dtype=float)
        self.n_steps = n_steps
        self.step_count = 0

    def inputs_tags(self) -> List[IO[None]]:
        return [IO(io.kind) for io in self._u_offsets]

    def outputs_tags(self) -> List[IO[None]]:
        return [IO(io.kind) for io in self._y_offsets]

    def input_handler(self, io: IO[Any]) -> Optional[Callable[[IO[Any]], Any]]:
        if any(entry.same_kind(io) for entry in self._u_offsets):
            return self._set_input
        return None

    def _set_input(self, io: IO[Any]) -> None:
        entry = lookup(self._u_offsets, io)
        width = self._u_widths[self._u_offsets.index(entry)]
        values = np.asarray(io.data, dtype=float).ravel()
        if values.size != width:
            raise ValueError(f"{io.name} expects {width} values, got {values.size}")
        self.u[entry.data : entry.data + width] = values

    def __next__(self) -> None:
        if self.n_steps is not None and self.step_count >= self.n_steps:
            raise StopIteration
        self.x = self.a @ self.x + self.b @ self.u
        self.step_count += 1

    def output_vector(self) -> np.ndarray:
        if self.c is None:
            raise OutputsError(f"{type(self).__name__}: output matrix was never configured")
        y = self.c @ self.x
        if self.d is not None:
            y = y + self.d @ self.u
        return y

    def outputs(self) -> Optional[List[IO[Any]]]:
        if not self._y_offsets:
            return None
        y = self.output_vector()
        return [
            IO(entry.kind, y[entry.data : entry.data + width].copy())
            for entry, width in zip(self._y_offsets, self._y_widths)
        ]


class DiscreteStateSpaceBuilder:
    """Builder of :class:`DiscreteStateSpace` components."""

    def __init__(self) -> None:
        self._a: Optional[np.ndarray] = None
        self._b: Optional[np.ndarray] = None
        self._c: Optional[np.ndarray] = None
        self._d: Optional[np.ndarray] = None
        self._inputs: List[Tuple[str, int]] = []
        self._outputs: List[Tuple[str, int]] = []
        self._x0: Optional[np.ndarray] = None
        self._n_steps: Optional[int] = None

    def matrices(self, a: Any, b: Any, c: Any = None, d: Any = None) -> "DiscreteStateSpaceBuilder":
        self._a = np.atleast_2d(np.asarray(a, dtype=float))
        self._b = np.atleast_2d(np.asarray(b, dtype=float))
        self._c = None if c is None else np.atleast_2d(np.asarray(c, dtype=float))
        self._d = None if d is None else np.atleast_2d(np.asarray(d, dtype=float))
        return self

    def input(self, kind: Any, width: int) -> "DiscreteStateSpaceBuilder":
        self._inputs.append((kind_of(kind).name, int(width)))
        return self

    def output(self, kind: Any, width: int) -> "DiscreteStateSpaceBuilder":
        self._outputs.append((kind_of(kind).name, int(width)))
        return self

    def initial_state(self, x0: Any) -> "DiscreteStateSpaceBuilder":
        self._x0 = np.asarray(x0, dtype=float).ravel()
        return self

    def steps(self, n_steps: int) -> "DiscreteStateSpaceBuilder":
        """Stop the component after ``n_steps`` state advances."""
        if n_steps <= 0:
            raise ConfigurationError("steps must be positive")
        self._n_steps = int(n_steps)
        return self

    def build(self) -> DiscreteStateSpace:
        a, b, c, d = self._a, self._b, self._c, self._d
        if a is None or b is None:
            raise ConfigurationError("state space matrices A and B must be set")
        n_x = a.shape[0]
        n_u = sum(width for _, width in self._inputs)
        n_y = sum(width for _, width in self._outputs)
        if a.shape != (n_x, n_x):
            raise ConfigurationError(f"A must be square, got {a.shape}")
        if b.shape != (n_x, n_u):
            raise ConfigurationError(f"B has shape {b.shape}, expected {(n_x, n_u)}")
        if c is not None and c.shape != (n_y, n_x):
            raise ConfigurationError(f"C has shape {c.shape}, expected {(n_y, n_x)}")
        if d is not None and d.shape != (n_y, n_u):
            raise ConfigurationError(f"D has shape {d.shape}, expected {(n_y, n_u)}")
        if self._x0 is not None and self._x0.size != n_x:
            raise ConfigurationError(f"initial state has {self._x0.size} values, expected {n_x}")
        names = [name for name, _ in self._inputs]
        if len(set(names)) != len(names):
            raise ConfigurationError("state space input kinds must be unique")
        names = [name for name, _ in self._outputs]
        if len(set(names)) != len(names):
            raise ConfigurationError("state space output kinds must be unique")
        logger.debug("Building state space with %d states, %d inputs, %d outputs", n_x, n_u, n_y)
        return DiscreteStateSpace(
            a, b, c, d, self._inputs, self._outputs, x0=self._x0, n_steps=self._n_steps
        )


__all__ = ["DiscreteStateSpace", "DiscreteStateSpaceBuilder"]
