"""Tests for the closed signal catalog."""

from __future__ import annotations

from pathlib import Path

import pytest

from dosio import catalog
from dosio.catalog import SignalKind, build_catalog, kind_of, normalize_field_name
from dosio.errors import CatalogError
from dosio.warnings import CatalogWarning


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("oss_m1_lcl", "OssM1Lcl"),
        ("OSS_M1_lcl", "OSSM1Lcl"),
        ("MC_M2_lcl_6D", "MCM2Lcl6D"),
        ("M1_actuators_segment_1", "M1ActuatorsSegment1"),
        ("OSS__M1", "OSSM1"),
        ("pssn", "Pssn"),
    ],
)
def test_normalize_field_name(raw: str, expected: str) -> None:
    assert normalize_field_name(raw) == expected


def test_build_catalog_sorts_and_deduplicates() -> None:
    assert build_catalog(["TTcmd", "M1HPLC", "TTcmd", "Henry"]) == ("Henry", "M1HPLC", "TTcmd")
    with pytest.raises(CatalogError):
        build_catalog(["OSS-M1"])
    with pytest.raises(CatalogError):
        build_catalog([""])


def test_catalog_is_sorted_unique_and_indexed() -> None:
    names = catalog.kind_names()
    assert list(names) == sorted(set(names))
    assert [kind.index for kind in catalog.CATALOG] == list(range(len(names)))
    assert set(catalog.IO_LIST) <= set(names)
    for name in ("OSSM1Lcl", "MCM2Lcl6D", "OSSM1Lcl6F", "M1HPCmd", "Pssn"):
        assert catalog.is_kind(name)


def test_shipped_fem_catalog_replaces_placeholders() -> None:
    assert catalog.FEM_CATALOG_PATH.exists()
    assert not any(catalog.is_kind(name) for name in catalog.DUMMY_KINDS)


def test_missing_fem_catalog_falls_back_to_placeholders(tmp_path: Path) -> None:
    with pytest.warns(CatalogWarning):
        names = catalog._load_names(tmp_path / "fem_io.json")
    assert "Rodolphe" in names
    assert "Pssn" in names


def test_read_fem_catalog_validates_payload(tmp_path: Path) -> None:
    path = tmp_path / "fem_io.json"
    path.write_text('{"fem_inputs": "OSSM1Lcl6F"}', encoding="utf-8")
    with pytest.raises(CatalogError):
        catalog.read_fem_catalog(path)
    path.write_text("not json", encoding="utf-8")
    with pytest.raises(CatalogError):
        catalog.read_fem_catalog(path)
    path.write_text('{"fem_inputs": ["A"], "fem_outputs": ["B"]}', encoding="utf-8")
    assert catalog._load_names(path)[:2] == ["A", "B"]


def test_kind_of_resolution() -> None:
    kind = kind_of("Pssn")
    assert kind_of(kind) is kind
    assert str(kind) == "Pssn"
    with pytest.raises(CatalogError):
        kind_of("Nope")
    with pytest.raises(CatalogError):
        kind_of(SignalKind("Pssn", 10_000))
    with pytest.raises(CatalogError):
        kind_of(42)
