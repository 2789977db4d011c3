"""Offline generator of the FEM signal catalog.

The finite element model ships its input and output names either in a
MATLAB v7.3 (HDF5) file, as the ``MATLAB_fields`` attribute of the groups
``fem_inputs``/``fem_outputs``, or as Parquet tables bundled in a zip archive
with a ``group`` column.  The names are normalised with
:func:`dosio.catalog.normalize_field_name` and written to the JSON file read
by :mod:`dosio.catalog` at import time.

Example::

    python -m dosio.catalog_gen --fem-repo /data/fem/20210225_1447 --format parquet
"""
from __future__ import annotations

import argparse
import itertools
import json
import logging
import os
import sys
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pyarrow as pa
import pyarrow.parquet as pq
from pydantic import ValidationError

from .catalog import IO_LIST, build_catalog, normalize_field_name
from .config_utils import configure_logging, load_config
from .errors import CatalogError, ConfigurationError, DOSIOError
from .schema import CatalogConfig

logger = logging.getLogger(__name__)

FEM_GROUPS = ("fem_inputs", "fem_outputs")
PARQUET_SUFFIX = {"fem_inputs": "in", "fem_outputs": "out"}
FIELDS_ATTR = "MATLAB_fields"
GROUP_COLUMN = "group"


def _decode_field(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("ascii")
    if isinstance(value, str):
        return value
    if isinstance(value, (int, np.integer)):
        return chr(int(value))
    arr = np.asarray(value)
    if arr.ndim == 0:
        return _decode_field(arr.item())
    return "".join(_decode_field(v) for v in arr.ravel())


def read_hdf5_fields(path: Path) -> Dict[str, List[str]]:
    """Read the normalised FEM input/output names from an HDF5 file."""

    try:
        import h5py
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise CatalogError("h5py is required to read HDF5 FEM archives") from exc

    fields: Dict[str, List[str]] = {}
    try:
        with h5py.File(path, "r") as handle:
            for group in FEM_GROUPS:
                if group not in handle:
                    raise CatalogError(f"{path} has no group '{group}'")
                attrs = handle[group].attrs
                if FIELDS_ATTR not in attrs:
                    raise CatalogError(f"{path}:{group} has no '{FIELDS_ATTR}' attribute")
                raw = np.atleast_1d(attrs[FIELDS_ATTR])
                fields[group] = [normalize_field_name(_decode_field(v)) for v in raw]
    except OSError as exc:
        raise CatalogError(f"Failed to read HDF5 FEM archive {path}: {exc}") from exc
    return fields


def _read_group_column(content: bytes, member: str) -> List[str]:
    table = pq.read_table(pa.BufferReader(content))
    if GROUP_COLUMN not in table.column_names:
        raise CatalogError(f"No suitable record in {member}: missing '{GROUP_COLUMN}' column")
    values = table.column(GROUP_COLUMN).to_pylist()
    if not values or any(v is None for v in values):
        raise CatalogError(f"No suitable data in {member}")
    return [key for key, _ in itertools.groupby(values)]


def read_parquet_fields(path: Path) -> Dict[str, List[str]]:
    """Read the normalised FEM input/output names from a zip of Parquet tables.

    Consecutive repeats of a ``group`` value are collapsed; the FEM tables
    list one row per degree of freedom.
    """

    stem = Path(path).stem
    fields: Dict[str, List[str]] = {}
    try:
        with zipfile.ZipFile(path) as archive:
            for group in FEM_GROUPS:
                member = f"{stem}_{PARQUET_SUFFIX[group]}.parquet"
                try:
                    content = archive.read(member)
                except KeyError as exc:
                    raise CatalogError(f"Cannot find {member} in {path}") from exc
                fields[group] = [normalize_field_name(name) for name in _read_group_column(content, member)]
    except (OSError, zipfile.BadZipFile) as exc:
        raise CatalogError(f"Failed to read zip FEM archive {path}: {exc}") from exc
    return fields


def resolve_source(cfg: CatalogConfig) -> tuple[str, Path]:
    """Return ``(format, path)`` of the FEM archive selected by ``cfg``."""

    repo = cfg.fem_repo
    if repo is None:
        env_repo = os.environ.get("FEM_REPO")
        if not env_repo:
            raise ConfigurationError("No FEM repository: set fem_repo or the FEM_REPO environment variable")
        repo = Path(env_repo)
    zip_path = Path(repo) / cfg.zip_file
    hdf5_path = Path(repo) / cfg.hdf5_file
    if cfg.format == "parquet":
        return "parquet", zip_path
    if cfg.format == "hdf5":
        return "hdf5", hdf5_path
    if zip_path.exists():
        return "parquet", zip_path
    if hdf5_path.exists():
        return "hdf5", hdf5_path
    raise CatalogError(f"Cannot find {cfg.zip_file} or {cfg.hdf5_file} in {repo}")


def generate_catalog(cfg: CatalogConfig) -> Dict[str, Any]:
    """Build the catalog payload written by :func:`write_catalog`."""

    fmt, path = resolve_source(cfg)
    logger.info("Building signal catalog to match inputs/outputs of FEM in %s", path)
    if not path.exists():
        raise CatalogError(f"Cannot find {path.name} in {path.parent}")
    fields = read_parquet_fields(path) if fmt == "parquet" else read_hdf5_fields(path)
    payload: Dict[str, Any] = {"source": path.name}
    payload.update(fields)
    # validates identifiers before anything is written
    kinds = build_catalog(list(itertools.chain(*fields.values())) + list(IO_LIST))
    logger.info(
        "FEM inputs: %d, FEM outputs: %d, catalog size: %d",
        len(fields["fem_inputs"]),
        len(fields["fem_outputs"]),
        len(kinds),
    )
    return payload


def write_catalog(payload: Dict[str, Any], path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2)
        fh.write("\n")
    return path


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Generate the dosio signal catalog from a FEM archive",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
    python -m dosio.catalog_gen --fem-repo /data/fem
    python -m dosio.catalog_gen --config configs/catalog.yml --override format=hdf5
        """,
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument("--fem-repo", type=Path, default=None, help="FEM repository (default: $FEM_REPO)")
    parser.add_argument("--format", choices=["auto", "hdf5", "parquet"], default=None)
    parser.add_argument("--output", type=Path, default=None, help="Destination JSON file")
    parser.add_argument(
        "--override",
        action="append",
        default=[],
        metavar="PATH=VALUE",
        help="Override a configuration entry (repeatable)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    overrides = list(args.override)
    if args.fem_repo is not None:
        overrides.append(f"fem_repo={args.fem_repo}")
    if args.format is not None:
        overrides.append(f"format={args.format}")
    if args.output is not None:
        overrides.append(f"output={args.output}")

    try:
        cfg = load_config(CatalogConfig, args.config, overrides)
        payload = generate_catalog(cfg)
        out = write_catalog(payload, cfg.output)
    except (DOSIOError, ValidationError) as exc:
        logger.error("%s", exc)
        return 1
    logger.info("Wrote %s", out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
