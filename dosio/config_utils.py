"""Helper utilities for loading configuration files and setting up logging."""
from __future__ import annotations

import logging
import math
import warnings
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_OVERRIDE_LITERALS: Dict[str, Any] = {
    "true": True,
    "false": False,
    "none": None,
    "null": None,
    "nan": math.nan,
    "inf": math.inf,
    "+inf": math.inf,
    "infinity": math.inf,
    "+infinity": math.inf,
    "-inf": -math.inf,
    "-infinity": -math.inf,
}


def parse_override_value(raw: str) -> Any:
    """Convert the value half of a ``path=value`` override.

    Literals of :data:`_OVERRIDE_LITERALS` match case-insensitively, then
    integers and floats are tried; a value wrapped in matching quotes is
    unquoted and anything else is kept as a string.
    """

    text = raw.strip()
    literal = text.lower()
    if literal in _OVERRIDE_LITERALS:
        return _OVERRIDE_LITERALS[literal]
    for convert in (int, float):
        try:
            return convert(text)
        except ValueError:
            continue
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return text


def apply_overrides_dict(payload: Dict[str, Any], overrides: Sequence[str]) -> Dict[str, Any]:
    """Apply dotted-path ``path=value`` overrides to a configuration dictionary."""

    if not overrides:
        return payload
    for item in overrides:
        key, sep, value_str = item.partition("=")
        if not sep:
            raise ConfigurationError(f"Invalid override '{item}'; expected path=value")
        parts = [segment for segment in key.strip().split(".") if segment]
        if not parts:
            raise ConfigurationError(f"Invalid override '{item}'; empty path")
        target: Any = payload
        for segment in parts[:-1]:
            if not isinstance(target, dict):
                raise ConfigurationError(
                    f"Cannot traverse into non-mapping for override '{item}' at '{segment}'"
                )
            if segment not in target or target[segment] is None:
                target[segment] = {}
            target = target[segment]
        if not isinstance(target, dict):
            raise ConfigurationError(f"Cannot set override '{item}'; target is not a mapping")
        target[parts[-1]] = parse_override_value(value_str)
    return payload


def load_config(
    model: Type[ModelT],
    path: Optional[Path] = None,
    overrides: Optional[Sequence[str]] = None,
) -> ModelT:
    """Load a YAML file (optional) plus overrides into ``model``."""

    from ruamel.yaml import YAML

    data: Any = {}
    if path is not None:
        yaml = YAML(typ="safe")
        source_path = Path(path).resolve()
        with source_path.open("r", encoding="utf-8") as fh:
            data = yaml.load(fh)
        if data is None:
            data = {}
        logger.debug("load_config: read %s", source_path)
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration files must have a mapping at the root")
    data = apply_overrides_dict(data, overrides or [])
    return model(**data)


def configure_logging(level: int, suppress_warnings: bool = False) -> None:
    """Configure root logging and route Python warnings through it."""

    logging.basicConfig(level=level)
    root = logging.getLogger()
    root.setLevel(level)
    if suppress_warnings:
        warnings.filterwarnings("ignore")
    logging.captureWarnings(True)


__all__ = [
    "parse_override_value",
    "apply_overrides_dict",
    "load_config",
    "configure_logging",
]
