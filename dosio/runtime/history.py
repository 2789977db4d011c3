"""Column-oriented history of tagged signals."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd
import pyarrow as pa

from ..signals import IO

STEP_COLUMN = "step"


def _cell(data: Any) -> Any:
    if data is None:
        return None
    if np.isscalar(data):
        return [float(data)]
    return np.asarray(data, dtype=float).ravel().tolist()


class SignalHistory:
    """Per-step record of signal payloads, one column per signal kind.

    Each row holds the step index and the flattened float payload of every
    recorded kind; kinds absent on a step are stored as nulls.
    """

    def __init__(self, kinds: Iterable[str] | None = None) -> None:
        self._steps: List[int] = []
        self._columns: Dict[str, List[Any]] = {}
        self._column_order: List[str] = []
        if kinds:
            for name in kinds:
                self._add_column(name)

    def _add_column(self, name: str) -> None:
        if name in self._columns:
            return
        self._columns[name] = [None] * len(self._steps)
        self._column_order.append(name)

    @property
    def row_count(self) -> int:
        return len(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __bool__(self) -> bool:
        return bool(self._steps)

    def kinds(self) -> List[str]:
        return list(self._column_order)

    def append_signals(self, step: int, signals: Optional[Iterable[IO[Any]]]) -> None:
        row: Dict[str, Any] = {}
        for io in signals or ():
            row[io.name] = _cell(io.data)
        for name in row:
            self._add_column(name)
        self._steps.append(int(step))
        for name in self._column_order:
            self._columns[name].append(row.get(name))

    def column(self, name: str) -> List[Any]:
        return list(self._columns[name])

    def clear(self) -> None:
        for values in self._columns.values():
            values.clear()
        self._steps.clear()

    def to_table(self) -> pa.Table:
        arrays: Dict[str, pa.Array] = {STEP_COLUMN: pa.array(self._steps, type=pa.int64())}
        for name in self._column_order:
            arrays[name] = pa.array(self._columns[name], type=pa.list_(pa.float64()))
        return pa.Table.from_pydict(arrays)

    def to_frame(self) -> pd.DataFrame:
        data: Dict[str, List[Any]] = {STEP_COLUMN: list(self._steps)}
        for name in self._column_order:
            data[name] = list(self._columns[name])
        return pd.DataFrame(data)


__all__ = ["SignalHistory", "STEP_COLUMN"]
