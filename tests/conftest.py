from __future__ import annotations

import sys
import zipfile
from pathlib import Path
from typing import Dict, List

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

FEM_ARCHIVE = "modal_state_space_model_2ndOrder.zip"


def parquet_bytes(columns: Dict[str, List[object]]) -> bytes:
    sink = pa.BufferOutputStream()
    pq.write_table(pa.table(columns), sink)
    return sink.getvalue().to_pybytes()


def write_fem_archive(repo: Path, inputs: Dict[str, List[object]], outputs: Dict[str, List[object]]) -> Path:
    """Write a zip of FEM input/output Parquet tables under ``repo``."""

    path = repo / FEM_ARCHIVE
    stem = path.stem
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr(f"{stem}_in.parquet", parquet_bytes(inputs))
        archive.writestr(f"{stem}_out.parquet", parquet_bytes(outputs))
    return path


@pytest.fixture
def fem_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A FEM repository holding a small Parquet archive; ``$FEM_REPO`` is unset."""

    monkeypatch.delenv("FEM_REPO", raising=False)
    repo = tmp_path / "fem"
    repo.mkdir()
    write_fem_archive(
        repo,
        {
            "group": ["OSS_M1_lcl_6F"] * 3 + ["MC_M2_lcl_6F"] * 2 + ["OSS_M1_lcl_6F"],
            "dof": [0, 1, 2, 0, 1, 0],
        },
        {"group": ["OSS_M1_lcl", "OSS_M1_lcl", "MC_M2_lcl_6D"], "dof": [0, 1, 0]},
    )
    return repo
