"""Tagged signals exchanged between simulation components.

A tagged signal :class:`IO` pairs one catalog :class:`~dosio.catalog.SignalKind`
with an optional payload.  The kind is fixed at construction; only the
payload (and its type) changes as a signal moves through a pipeline:

* ``None`` payload for a bare tag,
* ``int`` for an index assignment (see :func:`indexed_catalog`),
* a float vector for physical values,
* a :class:`SignalStream` for values pulled one at a time (:func:`pull_next`).

Signals are compared with :func:`kind_equal`, which ignores the payload and
its type; ``==`` is plain object identity.

The numeric helpers (statistics and in-place arithmetic) treat the payload
as a vector of floats.  Statistics of a signal without payload are ``NaN``.
Arithmetic that cannot be carried out leaves the signal unchanged and emits
a :class:`~dosio.warnings.SignalArithmeticWarning`.
"""
from __future__ import annotations

import copy
import logging
import math
import operator
import warnings
from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, TypeVar, Union

import numpy as np

from .catalog import CATALOG, SignalKind, kind_of
from .errors import MissingSignalError
from .warnings import SignalArithmeticWarning

logger = logging.getLogger(__name__)

T = TypeVar("T")

_EXHAUSTED = object()


class SignalStream(Iterator[T]):
    """Finite, stateful and non-restartable sequence of payload values.

    Values are drawn one at a time; once the underlying iterable is
    exhausted the stream stays exhausted.
    """

    def __init__(self, values: Iterable[T]) -> None:
        self._values = iter(values)
        self._exhausted = False
        self.pulled = 0

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def __iter__(self) -> "SignalStream[T]":
        return self

    def __next__(self) -> T:
        if self._exhausted:
            raise StopIteration
        try:
            value = next(self._values)
        except StopIteration:
            self._exhausted = True
            raise
        self.pulled += 1
        return value

    def __repr__(self) -> str:
        state = "exhausted" if self._exhausted else "active"
        return f"SignalStream({state}, pulled={self.pulled})"


class IO(Generic[T]):
    """A signal kind with an optional payload."""

    __slots__ = ("_kind", "data")

    def __init__(self, kind: Union[str, SignalKind, "IO[Any]"], data: Optional[T] = None) -> None:
        self._kind = kind_of(kind)
        self.data: Optional[T] = data

    @classmethod
    def empty(cls, kind: Union[str, SignalKind, "IO[Any]"]) -> "IO[T]":
        return cls(kind)

    @classmethod
    def filled(cls, kind: Union[str, SignalKind, "IO[Any]"], value: T) -> "IO[T]":
        return cls(kind, value)

    @property
    def kind(self) -> SignalKind:
        return self._kind

    @property
    def name(self) -> str:
        """Catalog name of the signal kind."""
        return self._kind.name

    @property
    def has_data(self) -> bool:
        return self.data is not None

    def same_kind(self, other: Any) -> bool:
        return kind_equal(self, other)

    def assign(self, n: int) -> None:
        """Set the payload to the index ``n`` whatever it held before."""
        self.data = operator.index(n)

    def payload(self) -> Optional[T]:
        return self.data

    def payload_copy(self) -> Optional[T]:
        return copy.deepcopy(self.data)

    def take(self) -> Optional[T]:
        """Return the payload and leave the signal empty."""
        data, self.data = self.data, None
        return data

    def require(self) -> T:
        """Return the payload or raise :class:`MissingSignalError`."""
        if self.data is None:
            raise MissingSignalError(self._kind)
        return self.data

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------
    def _values(self) -> Optional[np.ndarray]:
        if self.data is None:
            return None
        return np.asarray(self.data, dtype=float)

    def sum_of_squares(self) -> float:
        values = self._values()
        if values is None:
            return math.nan
        return float(np.sum(values * values))

    def mean_sum_of_squares(self) -> float:
        values = self._values()
        if values is None or values.size == 0:
            return math.nan
        return float(np.sum(values * values) / values.size)

    def mean(self) -> float:
        values = self._values()
        if values is None or values.size == 0:
            return math.nan
        return float(np.sum(values) / values.size)

    def variance(self) -> float:
        """Population variance (``1/n`` normalisation)."""
        values = self._values()
        if values is None or values.size == 0:
            return math.nan
        deviation = values - np.sum(values) / values.size
        return float(np.sum(deviation * deviation) / values.size)

    def std_dev(self) -> float:
        return math.sqrt(self.variance())

    # ------------------------------------------------------------------
    # In-place arithmetic
    # ------------------------------------------------------------------
    # Failure paths are _report <- helper <- method or operator <- caller.
    def _report(self, message: str) -> bool:
        logger.warning(message)
        warnings.warn(message, SignalArithmeticWarning, stacklevel=4)
        return False

    def _combine(self, other: "IO[Any]", op: Callable[[np.ndarray, np.ndarray], np.ndarray], verb: str) -> bool:
        if not isinstance(other, IO) or not kind_equal(self, other):
            return self._report(f"Failed {verb} {_describe(other)} and {self.name}: kinds differ")
        if self.data is None or other.data is None:
            return self._report(f"Failed {verb} {self.name}: missing payload")
        left = np.asarray(self.data, dtype=float)
        right = np.asarray(other.data, dtype=float)
        if left.shape != right.shape:
            return self._report(
                f"Failed {verb} {self.name}: payload shapes {left.shape} and {right.shape} differ"
            )
        self.data = _like(self.data, op(left, right))
        return True

    def add_assign(self, other: "IO[Any]") -> bool:
        """Add ``other`` elementwise; return ``False`` if nothing was done."""
        return self._combine(other, np.add, "adding")

    def sub_assign(self, other: "IO[Any]") -> bool:
        """Subtract ``other`` elementwise; return ``False`` if nothing was done."""
        return self._combine(other, np.subtract, "subtracting")

    def scale(self, rhs: float) -> bool:
        """Multiply every element by ``rhs``; return ``False`` if nothing was done."""
        return self._multiply(rhs)

    def _multiply(self, rhs: float) -> bool:
        if self.data is None:
            return self._report(f"Failed scaling {self.name}: missing payload")
        self.data = _like(self.data, np.asarray(self.data, dtype=float) * float(rhs))
        return True

    def __iadd__(self, other: "IO[Any]") -> "IO[T]":
        self._combine(other, np.add, "adding")
        return self

    def __isub__(self, other: "IO[Any]") -> "IO[T]":
        self._combine(other, np.subtract, "subtracting")
        return self

    def __imul__(self, rhs: float) -> "IO[T]":
        self._multiply(rhs)
        return self

    def __str__(self) -> str:
        return self._kind.name

    def __repr__(self) -> str:
        return f"{self._kind.name}(data={self.data!r})"


def _describe(value: Any) -> str:
    return value.name if isinstance(value, IO) else type(value).__name__


def _like(original: Any, values: np.ndarray) -> Any:
    if isinstance(original, np.ndarray):
        return values
    return values.tolist()


def kind_equal(a: Any, b: Any) -> bool:
    """True iff ``a`` and ``b`` have the same kind; payloads are ignored."""

    return kind_of(a) == kind_of(b)


def retag(source: Any, data: Optional[T] = None) -> IO[T]:
    """Return a new signal of the kind of ``source`` holding ``data``."""

    return IO(kind_of(source), data)


def pull_next(io: IO[Iterator[T]]) -> Optional[IO[T]]:
    """Draw the next value of a streamed payload, wrapped with the same kind.

    Returns ``None`` when the payload is absent or exhausted.
    """

    if io.data is None:
        return None
    if not isinstance(io.data, Iterator):
        raise TypeError(f"{io.name} payload is not a lazy sequence: {type(io.data).__name__}")
    value = next(io.data, _EXHAUSTED)
    if value is _EXHAUSTED:
        return None
    return IO(io.kind, value)


def extract_payload(io: IO[T]) -> Optional[T]:
    return io.data


def into_result(io: IO[T]) -> T:
    return io.require()


def indexed_catalog() -> List[IO[int]]:
    """Return one signal per catalog kind holding its catalog index."""

    signals: List[IO[int]] = []
    for kind in CATALOG:
        io: IO[int] = IO(kind)
        io.assign(kind.index)
        signals.append(io)
    return signals


class _JarEntry:
    """Signal factories for one kind."""

    __slots__ = ("kind",)

    def __init__(self, kind: SignalKind) -> None:
        self.kind = kind

    def io(self) -> IO[Any]:
        return IO(self.kind)

    def io_with(self, data: T) -> IO[T]:
        return IO(self.kind, data)

    def __repr__(self) -> str:
        return f"jar.{self.kind.name}"


class _Jar:
    """Namespace of per-kind factories, one attribute per catalog kind."""

    def __init__(self, kinds: Iterable[SignalKind]) -> None:
        for kind in kinds:
            setattr(self, kind.name, _JarEntry(kind))

    def __dir__(self) -> List[str]:
        return [kind.name for kind in CATALOG]


jar = _Jar(CATALOG)


def ios(*kinds: Union[str, SignalKind]) -> Union[IO[Any], List[IO[Any]]]:
    """Empty signals for ``kinds``: a single signal for one kind, else a list."""

    signals = [IO(kind) for kind in kinds]
    return signals[0] if len(signals) == 1 else signals


def ios_with(**values: Any) -> Union[IO[Any], List[IO[Any]]]:
    """Filled signals keyed by kind name, in keyword order."""

    signals = [IO(name, value) for name, value in values.items()]
    return signals[0] if len(signals) == 1 else signals


__all__ = [
    "IO",
    "SignalStream",
    "kind_equal",
    "retag",
    "pull_next",
    "extract_payload",
    "into_result",
    "indexed_catalog",
    "jar",
    "ios",
    "ios_with",
]
