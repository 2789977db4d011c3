from __future__ import annotations

import math
from pathlib import Path

import pytest
from pydantic import ValidationError

from dosio.config_utils import apply_overrides_dict, load_config, parse_override_value
from dosio.errors import ConfigurationError
from dosio.schema import CatalogConfig, DriverConfig


def test_parse_override_value() -> None:
    assert parse_override_value("true") is True
    assert parse_override_value("None") is None
    assert parse_override_value("12") == 12
    assert parse_override_value("1e-3") == 1e-3
    assert math.isinf(parse_override_value("-inf"))
    assert parse_override_value("'quoted'") == "quoted"
    assert parse_override_value("parquet") == "parquet"
    assert parse_override_value(" NULL ") is None
    assert math.isnan(parse_override_value("NaN"))
    assert parse_override_value("\"3\"") == "3"
    assert parse_override_value("\"snappy\"") == "snappy"
    assert parse_override_value("\"") == "\""


def test_apply_overrides_dict_creates_nested_entries() -> None:
    payload = {"record": None}
    apply_overrides_dict(payload, ["record.enabled=true", "record.path=out/x.parquet", "n_steps=4"])
    assert payload == {"record": {"enabled": True, "path": "out/x.parquet"}, "n_steps": 4}
    with pytest.raises(ConfigurationError):
        apply_overrides_dict({}, ["n_steps"])
    with pytest.raises(ConfigurationError):
        apply_overrides_dict({"n_steps": 3}, ["n_steps.value=1"])


def test_load_config_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "driver.yml"
    path.write_text("n_steps: 10\nrecord:\n  enabled: false\n", encoding="utf-8")
    cfg = load_config(DriverConfig, path, overrides=["log_every=5"])
    assert cfg.n_steps == 10
    assert cfg.log_every == 5
    assert cfg.record.enabled is False


def test_load_config_without_file_uses_defaults() -> None:
    cfg = load_config(CatalogConfig, None, overrides=["format=hdf5"])
    assert cfg.format == "hdf5"
    assert cfg.fem_repo is None


def test_record_requires_path_when_enabled() -> None:
    with pytest.raises(ValidationError):
        load_config(DriverConfig, None, overrides=["record.enabled=true"])
    with pytest.raises(ValidationError):
        load_config(DriverConfig, None, overrides=["n_steps=0"])
