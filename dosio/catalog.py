"""Closed catalog of signal kinds.

The catalog is the sorted, deduplicated union of a curated list of
controller and optical-model signals (:data:`IO_LIST`) and of the finite
element model inputs/outputs recorded in ``data/fem_io.json``.  The FEM file
is produced offline by :mod:`dosio.catalog_gen`; when it is not shipped the
placeholder names of :data:`DUMMY_KINDS` are used instead.

The catalog is frozen at import time.  Adding a signal kind means
regenerating the data file, never mutating :data:`CATALOG` at run time.
"""
from __future__ import annotations

import json
import logging
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .errors import CatalogError
from .warnings import CatalogWarning

logger = logging.getLogger(__name__)

PACKAGE_DATA_DIR = Path(__file__).resolve().parent / "data"
FEM_CATALOG_PATH = PACKAGE_DATA_DIR / "fem_io.json"

IO_LIST: Tuple[str, ...] = (
    # wind loads
    "OSSTopEnd6F",
    "OSSTruss6F",
    "OSSGIR6F",
    "OSSCRING6F",
    "OSSCellLcl6F",
    "OSSM1Lcl6F",
    "MCM2Lcl6F",
    "MCM2TE6F",
    "MCM2RB6F",
    "OSSMirrorCovers6F",
    # mount controller
    "OSSAzDriveTorque",
    "OSSElDriveTorque",
    "OSSRotDriveTorque",
    "MountCmd",
    "OSSAzEncoderAngle",
    "OSSElEncoderAngle",
    "OSSRotEncoderAngle",
    # m1 controller: hardpoints load cells
    "M1HPLC",
    "OSSHardpointD",
    "OSSHarpointDeltaF",
    "M1HPCmd",
    # m1 controller: hardpoints dynamics
    "HPFcmd",
    "M1RBMcmd",
    # m1 controller: CG
    "M1CGFM",
    # m1 controller: segment actuators
    "M1S1HPLC",
    "M1S1BMcmd",
    "M1S1ACTF",
    "M1ActuatorsSegment1",
    "M1S2HPLC",
    "M1S2BMcmd",
    "M1S2ACTF",
    "M1ActuatorsSegment2",
    "M1S3HPLC",
    "M1S3BMcmd",
    "M1S3ACTF",
    "M1ActuatorsSegment3",
    "M1S4HPLC",
    "M1S4BMcmd",
    "M1S4ACTF",
    "M1ActuatorsSegment4",
    "M1S5HPLC",
    "M1S5BMcmd",
    "M1S5ACTF",
    "M1ActuatorsSegment5",
    "M1S6HPLC",
    "M1S6BMcmd",
    "M1S6ACTF",
    "M1ActuatorsSegment6",
    "M1S7HPLC",
    "M1S7BMcmd",
    "M1S7ACTF",
    "M1ActuatorsSegment7",
    # fsm controller: positioner
    "M2poscmd",
    "M2posFB",
    "M2posactF",
    # fsm controller: piezostack
    "TTcmd",
    "PZTFB",
    "PZTF",
    # fsm controller: tip-tilt
    "TTSP",
    "TTFB",
    # optical model
    "SrcWfeRms",
    "SrcSegmentWfeRms",
    "SrcSegmentPiston",
    "SrcSegmentGradients",
    "Pssn",
    "SensorData",
    "M1modes",
)

DUMMY_KINDS: Tuple[str, ...] = (
    "Rodolphe",
    "Rodrigo",
    "Christoph",
    "Henry",
    "Conan",
    "Romano",
    "Dribusch",
    "Fitzpatrick",
)


@dataclass(frozen=True)
class SignalKind:
    """One entry of the catalog.

    Identity is the name alone; ``index`` is the position of the name in the
    sorted catalog and is stable for a given catalog file.
    """

    name: str
    index: int

    def __str__(self) -> str:
        return self.name


def normalize_field_name(raw: str) -> str:
    """Turn a FEM field name into a catalog identifier.

    The name is split on ``_`` and the first character of every segment is
    upper-cased, e.g. ``oss_m1_lcl -> OssM1Lcl`` and
    ``OSS_M1_lcl -> OSSM1Lcl``.  Empty segments contribute nothing.
    """

    return "".join(segment[:1].upper() + segment[1:] for segment in str(raw).split("_"))


def build_catalog(names: Iterable[str]) -> Tuple[str, ...]:
    """Return the sorted, deduplicated tuple of ``names``."""

    cleaned: List[str] = []
    for name in names:
        text = str(name).strip()
        if not text:
            raise CatalogError("Signal kind names must be non-empty")
        if not text.isidentifier():
            raise CatalogError(f"Signal kind {text!r} is not a valid identifier")
        cleaned.append(text)
    return tuple(sorted(set(cleaned)))


def read_fem_catalog(path: Path) -> Dict[str, Any]:
    """Read a catalog file written by :mod:`dosio.catalog_gen`."""

    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise CatalogError(f"Failed to read FEM catalog {path}: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise CatalogError(f"FEM catalog {path} must be a JSON object")
    for key in ("fem_inputs", "fem_outputs"):
        values = payload.get(key, [])
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise CatalogError(f"FEM catalog {path}: '{key}' must be a list of names")
    return dict(payload)


def _load_names(path: Optional[Path] = None) -> List[str]:
    candidate = Path(path) if path is not None else FEM_CATALOG_PATH
    if not candidate.exists():
        warnings.warn(
            f"FEM catalog not found at {candidate}; using placeholder signal kinds",
            CatalogWarning,
        )
        return list(DUMMY_KINDS) + list(IO_LIST)
    payload = read_fem_catalog(candidate)
    logger.debug("Loaded FEM catalog from %s (source=%s)", candidate, payload.get("source"))
    return list(payload.get("fem_inputs", [])) + list(payload.get("fem_outputs", [])) + list(IO_LIST)


CATALOG: Tuple[SignalKind, ...] = tuple(
    SignalKind(name, index) for index, name in enumerate(build_catalog(_load_names()))
)
_BY_NAME: Mapping[str, SignalKind] = {kind.name: kind for kind in CATALOG}


def kind_names() -> Tuple[str, ...]:
    """Return the catalog names in catalog order."""

    return tuple(kind.name for kind in CATALOG)


def is_kind(name: str) -> bool:
    return name in _BY_NAME


def kind_of(value: Any) -> SignalKind:
    """Resolve a name, a :class:`SignalKind` or a tagged signal to its kind."""

    if isinstance(value, SignalKind):
        if _BY_NAME.get(value.name) != value:
            raise CatalogError(f"{value.name} is not a catalog signal kind")
        return value
    kind = getattr(value, "kind", None)
    if isinstance(kind, SignalKind):
        return kind
    if isinstance(value, str):
        try:
            return _BY_NAME[value]
        except KeyError:
            raise CatalogError(f"{value} is not a catalog signal kind") from None
    raise CatalogError(f"Cannot resolve a signal kind from {type(value).__name__}")


__all__ = [
    "IO_LIST",
    "DUMMY_KINDS",
    "CATALOG",
    "FEM_CATALOG_PATH",
    "SignalKind",
    "normalize_field_name",
    "build_catalog",
    "read_fem_catalog",
    "kind_names",
    "is_kind",
    "kind_of",
]
