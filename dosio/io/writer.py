"""Output helper utilities.

Recorded signal histories are serialised to Parquet with ``pyarrow``; run
summaries go to JSON.  The Parquet schema metadata carries the catalog index
of every recorded kind so that files stay interpretable when the catalog is
regenerated.  All functions create destination directories when necessary.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from ..catalog import is_kind, kind_of


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def write_parquet_table(table: pa.Table, path: Path, *, compression: str = "snappy") -> None:
    """Write a signal table to ``path``.

    Parameters
    ----------
    table:
        Table with one column per signal kind (plus bookkeeping columns).
    path:
        Destination file path.
    compression:
        Parquet codec or ``"none"``.
    """
    path = Path(path)
    _ensure_parent(path)
    kinds = {name: kind_of(name).index for name in table.column_names if is_kind(name)}
    metadata = dict(table.schema.metadata or {})
    metadata[b"signal_kinds"] = json.dumps(kinds, sort_keys=True).encode("utf-8")
    table = table.replace_schema_metadata(metadata)
    compression_arg = None if compression == "none" else compression
    pq.write_table(table, path, compression=compression_arg)


def read_signal_kinds(path: Path) -> dict:
    """Return the ``{kind: catalog index}`` mapping stored in a signal table."""

    metadata = pq.read_schema(path).metadata or {}
    raw = metadata.get(b"signal_kinds")
    if raw is None:
        return {}
    return json.loads(raw.decode("utf-8"))


def read_parquet(path: Path) -> pd.DataFrame:
    return pd.read_parquet(path)


def write_summary(summary: Mapping[str, Any], path: Path) -> None:
    """Write a run summary dictionary as indented JSON."""
    path = Path(path)
    _ensure_parent(path)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(summary, fh, indent=2, sort_keys=True)


__all__ = ["write_parquet_table", "read_signal_kinds", "read_parquet", "write_summary"]
