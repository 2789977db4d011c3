"""Kind-based operations on ordered collections of tagged signals.

All operations match entries with :func:`~dosio.signals.kind_equal`, never by
payload.  The removal and replacement policies differ on purpose:

* :func:`pop_these` is all-or-nothing.  If any requested kind is absent,
  nothing is removed and ``None`` is returned.
* :func:`swap_these` is lenient.  Values whose kind is absent from the
  collection are skipped silently.

:func:`lookup` treats a missing kind as a programming error and raises
:class:`~dosio.errors.SignalLookupError`.
"""
from __future__ import annotations

from typing import Any, Iterable, List, MutableSequence, Optional, Sequence, Tuple

from .catalog import SignalKind, kind_of
from .errors import SignalLookupError
from .signals import IO


def _position(signals: Sequence[IO[Any]], kind: SignalKind, skip: Iterable[int] = ()) -> Optional[int]:
    taken = set(skip)
    for idx, io in enumerate(signals):
        if idx not in taken and io.kind == kind:
            return idx
    return None


def lookup(signals: Sequence[IO[Any]], kind: Any) -> IO[Any]:
    """Return the first entry of ``signals`` with the kind of ``kind``.

    The entry itself is returned, so mutating it mutates the collection.
    """

    target = kind_of(kind)
    idx = _position(signals, target)
    if idx is None:
        raise SignalLookupError(target)
    return signals[idx]


def pop_these(signals: MutableSequence[IO[Any]], kinds: Iterable[Any]) -> Optional[List[IO[Any]]]:
    """Remove and return one entry per kind, in the order of ``kinds``.

    Returns ``None`` and leaves ``signals`` untouched when any kind is absent.
    A kind requested twice removes two distinct entries.
    """

    positions: List[int] = []
    for kind in kinds:
        idx = _position(signals, kind_of(kind), skip=positions)
        if idx is None:
            return None
        positions.append(idx)
    popped = [signals[idx] for idx in positions]
    for idx in sorted(positions, reverse=True):
        del signals[idx]
    return popped


def pop_this(signals: MutableSequence[IO[Any]], kind: Any) -> Optional[IO[Any]]:
    popped = pop_these(signals, [kind])
    return popped[0] if popped else None


def swap_these(signals: MutableSequence[IO[Any]], values: Iterable[IO[Any]]) -> None:
    """Replace the first entry of each value's kind by the value.

    Values with no matching entry are ignored; order and length of
    ``signals`` never change.
    """

    for value in values:
        idx = _position(signals, kind_of(value))
        if idx is not None:
            signals[idx] = value


def swap_this(signals: MutableSequence[IO[Any]], value: IO[Any]) -> None:
    swap_these(signals, [value])


class SignalVec(List[IO[Any]]):
    """List of tagged signals indexable by kind.

    Integer and slice indices behave as for :class:`list`.  Any other index
    (a kind name, a :class:`~dosio.catalog.SignalKind` or a signal) performs
    a :func:`lookup`; assignment with such an index replaces the matching
    entry and raises :class:`~dosio.errors.SignalLookupError` if there is
    none.
    """

    def __getitem__(self, key: Any) -> Any:  # type: ignore[override]
        if isinstance(key, (int, slice)):
            return super().__getitem__(key)
        return lookup(self, key)

    def __setitem__(self, key: Any, value: Any) -> None:  # type: ignore[override]
        if isinstance(key, (int, slice)):
            super().__setitem__(key, value)
            return
        target = kind_of(key)
        idx = _position(self, target)
        if idx is None:
            raise SignalLookupError(target)
        if not isinstance(value, IO):
            value = IO(target, value)
        super().__setitem__(idx, value)

    def kinds(self) -> Tuple[SignalKind, ...]:
        return tuple(io.kind for io in self)

    def pop_these(self, kinds: Iterable[Any]) -> Optional[List[IO[Any]]]:
        return pop_these(self, kinds)

    def pop_this(self, kind: Any) -> Optional[IO[Any]]:
        return pop_this(self, kind)

    def swap_these(self, values: Iterable[IO[Any]]) -> None:
        swap_these(self, values)

    def swap_this(self, value: IO[Any]) -> None:
        swap_this(self, value)


__all__ = [
    "lookup",
    "pop_these",
    "pop_this",
    "swap_these",
    "swap_this",
    "SignalVec",
]
