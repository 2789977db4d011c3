"""Sink component recording the signals it receives."""
from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

import pandas as pd

from ..catalog import kind_of
from ..dos import Dos
from ..errors import OutputsError
from ..io import writer
from ..runtime.history import SignalHistory
from ..signals import IO

logger = logging.getLogger(__name__)


class _RmsAccumulator:
    """Time average of the mean sum of squares of one signal."""

    def __init__(self) -> None:
        self.total = 0.0
        self.count = 0

    def add(self, io: IO[Any]) -> None:
        value = io.mean_sum_of_squares()
        if math.isfinite(value):
            self.total += value
            self.count += 1

    def rms(self) -> float:
        if self.count == 0:
            return math.nan
        return math.sqrt(self.total / self.count)


class SignalRecorder(Dos):
    """Record input signals step by step.

    Parameters
    ----------
    kinds:
        Accepted signal kinds; ``None`` accepts every catalog kind.
    statistics:
        Keep a running RMS accumulator for every recorded kind.
    outputs:
        Kinds whose running RMS is returned by :meth:`outputs`, as a
        one-element payload.  Requires ``statistics=True``.
    """

    def __init__(
        self,
        kinds: Optional[Iterable[Any]] = None,
        *,
        statistics: bool = False,
        outputs: Iterable[Any] = (),
    ) -> None:
        self._kinds = tuple(kind_of(k).name for k in kinds) if kinds is not None else None
        self._outputs = tuple(kind_of(k).name for k in outputs)
        self._statistics: Optional[Dict[str, _RmsAccumulator]] = {} if statistics else None
        self.history = SignalHistory(self._kinds)
        self._pending: List[IO[Any]] = []
        self.step_count = 0

    def inputs_tags(self) -> List[IO[None]]:
        return [IO(name) for name in self._kinds or ()]

    def outputs_tags(self) -> List[IO[None]]:
        return [IO(name) for name in self._outputs]

    def input_handler(self, io: IO[Any]) -> Optional[Callable[[IO[Any]], Any]]:
        if self._kinds is None or io.name in self._kinds:
            return self._record
        return None

    def _record(self, io: IO[Any]) -> None:
        self._pending.append(io)
        if self._statistics is not None:
            self._statistics.setdefault(io.name, _RmsAccumulator()).add(io)

    def __next__(self) -> None:
        self.history.append_signals(self.step_count, self._pending)
        self._pending = []
        self.step_count += 1

    def outputs(self) -> Optional[List[IO[Any]]]:
        if not self._outputs:
            return None
        if self._statistics is None:
            raise OutputsError(f"{type(self).__name__}: statistics accumulator was never configured")
        signals: List[IO[Any]] = []
        for name in self._outputs:
            accumulator = self._statistics.get(name)
            rms = accumulator.rms() if accumulator is not None else math.nan
            signals.append(IO(name, [rms]))
        return signals

    def to_frame(self) -> pd.DataFrame:
        return self.history.to_frame()

    def write(self, path: Path, *, compression: str = "snappy") -> Path:
        """Write the recorded history to a Parquet file."""

        path = Path(path)
        writer.write_parquet_table(self.history.to_table(), path, compression=compression)
        logger.info("Recorded %d steps of %d signals to %s", len(self.history), len(self.history.kinds()), path)
        return path


__all__ = ["SignalRecorder"]
