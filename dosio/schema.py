"""Configuration schema for :mod:`dosio` tools.

Pydantic models mirroring the YAML files read by :func:`dosio.config_utils.load_config`.
"""
from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from .catalog import FEM_CATALOG_PATH
from .errors import ConfigurationError


class CatalogConfig(BaseModel):
    """Settings of the offline catalog generator."""

    fem_repo: Optional[Path] = Field(
        None,
        description="Directory holding the FEM state space model archive; defaults to $FEM_REPO",
    )
    format: Literal["auto", "hdf5", "parquet"] = Field(
        "auto",
        description="Archive format; 'auto' prefers the Parquet zip archive when present",
    )
    hdf5_file: str = Field(
        "modal_state_space_model_2ndOrder.rs.mat",
        description="HDF5 (MATLAB v7.3) file name inside fem_repo",
    )
    zip_file: str = Field(
        "modal_state_space_model_2ndOrder.zip",
        description="Zip archive of Parquet tables inside fem_repo",
    )
    output: Path = Field(FEM_CATALOG_PATH, description="Destination JSON catalog file")


class RecordConfig(BaseModel):
    """Recording of the signals routed by the driver."""

    enabled: bool = False
    path: Optional[Path] = Field(None, description="Parquet file receiving the recorded signals")
    compression: Literal["snappy", "gzip", "zstd", "none"] = "snappy"

    @model_validator(mode="after")
    def _check_path(self) -> "RecordConfig":
        if self.enabled and self.path is None:
            raise ConfigurationError("record.path must be set when record.enabled is true")
        return self


class DriverConfig(BaseModel):
    """Settings of :class:`dosio.driver.Pipeline` runs."""

    n_steps: Optional[int] = Field(None, gt=0, description="Maximum number of ticks; None runs until a component stops")
    log_every: int = Field(0, ge=0, description="Log progress every N ticks (0 disables)")
    record: RecordConfig = RecordConfig()
    summary_path: Optional[Path] = Field(None, description="JSON file receiving the run summary")


__all__ = ["CatalogConfig", "RecordConfig", "DriverConfig"]
