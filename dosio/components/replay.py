"""Source component replaying recorded signal time series."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from ..dos import Dos
from ..io import writer
from ..runtime.history import STEP_COLUMN
from ..signals import IO, SignalStream, pull_next

logger = logging.getLogger(__name__)


def _payload(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, float) and np.isnan(value):
        return None
    return np.asarray(value, dtype=float)


class SignalReplay(Dos):
    """Replay one value per step for each recorded signal kind.

    Every kind is held as a signal whose payload is a :class:`SignalStream`.
    A step pulls one value from each stream; the replay terminates (the step
    raises ``StopIteration``) as soon as one stream is exhausted.
    """

    def __init__(self, series: Mapping[str, Iterable[Any]]) -> None:
        self._streams: List[IO[SignalStream[Any]]] = [
            IO(name, SignalStream(values)) for name, values in series.items()
        ]
        self._current: List[IO[Any]] = []
        self.step_count = 0

    @classmethod
    def from_frame(cls, frame: pd.DataFrame, kinds: Optional[Sequence[str]] = None) -> "SignalReplay":
        """Replay the rows of ``frame``, one column per signal kind."""

        names = list(kinds) if kinds is not None else [c for c in frame.columns if c != STEP_COLUMN]
        if STEP_COLUMN in frame.columns:
            frame = frame.sort_values(STEP_COLUMN)
        series = {name: [_payload(v) for v in frame[name].tolist()] for name in names}
        return cls(series)

    @classmethod
    def from_parquet(cls, path: Path, kinds: Optional[Sequence[str]] = None) -> "SignalReplay":
        """Replay a table written by :meth:`SignalRecorder.write`."""

        frame = writer.read_parquet(path)
        logger.debug("Replaying %d steps from %s", len(frame), path)
        return cls.from_frame(frame, kinds)

    def outputs_tags(self) -> List[IO[None]]:
        return [IO(io.kind) for io in self._streams]

    def __next__(self) -> None:
        pulled: List[IO[Any]] = []
        for io in self._streams:
            value = pull_next(io)
            if value is None:
                logger.debug("Replay of %s exhausted after %d steps", io.name, self.step_count)
                raise StopIteration
            pulled.append(value)
        self._current = pulled
        self.step_count += 1

    def outputs(self) -> Optional[List[IO[Any]]]:
        if not self._current:
            return None
        return list(self._current)


__all__ = ["SignalReplay"]
