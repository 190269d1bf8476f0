"""
Run configuration for generating bctides.in.

Boundaries are numbered from 1 in configuration files, matching the
``!open boundary N`` comments in the generated file; they are converted to the
0-based segment indices used by ``BoundaryForcingConfig`` when the
configuration is built.

Example YAML:

    open_boundaries:
      - [1, 2, 3]
      - [7, 8]
    start_date: 2012-10-29T00:00:00
    run_duration: 10 days
    tidal_potential_cutoff_depth: 40.0
    elevation:
      1:
        kind: tides
        tides:
          constituents: major
          database: TPXO
    temperature:
      1:
        kind: initial_conditions
        nudging_factor: 0.5
"""

import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, List, Union

import yaml
from pydantic import Field, field_validator

from .bctides import Bctides
from .bctypes import ElevationConfig, SalinityConfig, TemperatureConfig, VelocityConfig
from .boundary_core import BoundaryForcingConfig
from .errors import ConfigurationError
from .hgrid import Hgrid
from .tidefac import to_run_duration, to_utc_datetime
from .types import BctidesBaseModel

logger = logging.getLogger(__name__)


class BctidesConfig(BctidesBaseModel):
    """User-facing configuration that builds a ``Bctides``."""

    open_boundaries: List[List[int]] = Field(
        ..., description="Node ids of each open boundary, in mesh order"
    )
    start_date: datetime = Field(..., description="Simulation start (UTC)")
    run_duration: timedelta = Field(
        ..., description="Simulation length; plain numbers are days"
    )
    tidal_potential_cutoff_depth: float = Field(
        50.0, ge=0.0, description="Cut-off depth for applying tidal potential [m]"
    )
    elevation: Dict[int, ElevationConfig] = Field(default_factory=dict)
    velocity: Dict[int, VelocityConfig] = Field(default_factory=dict)
    temperature: Dict[int, TemperatureConfig] = Field(default_factory=dict)
    salinity: Dict[int, SalinityConfig] = Field(default_factory=dict)

    @field_validator("start_date", mode="before")
    @classmethod
    def parse_start_date(cls, v):
        return to_utc_datetime(v)

    @field_validator("run_duration", mode="before")
    @classmethod
    def parse_run_duration(cls, v):
        # rnday convention
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            v = timedelta(days=v)
        return to_run_duration(v)

    @field_validator("elevation", "velocity", "temperature", "salinity")
    @classmethod
    def check_boundary_ids(cls, v):
        for boundary_id in v:
            if boundary_id < 1:
                raise ValueError(
                    f"Open boundary ids start at 1, got {boundary_id}"
                )
        return v

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "BctidesConfig":
        """Load a configuration from a YAML file."""
        path = Path(path)
        logger.info(f"Loading configuration from {path}")
        with open(path) as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} does not contain a mapping")
        return cls.model_validate(data)

    def load_hgrid(self) -> Hgrid:
        return Hgrid(open_boundaries=self.open_boundaries)

    def build(self) -> Bctides:
        """Build the ``Bctides`` described by this configuration."""
        boundary_forcing_config = BoundaryForcingConfig(
            hgrid=self.load_hgrid(),
            elevation=_zero_based(self.elevation),
            velocity=_zero_based(self.velocity),
            temperature=_zero_based(self.temperature),
            salinity=_zero_based(self.salinity),
        )
        bctides = Bctides(
            start_date=self.start_date,
            run_duration=self.run_duration,
            tidal_potential_cutoff_depth=self.tidal_potential_cutoff_depth,
            boundary_forcing_config=boundary_forcing_config,
        )
        logger.info(f"Built {bctides}")
        return bctides


def _zero_based(configs: dict) -> dict:
    return {boundary_id - 1: config for boundary_id, config in configs.items()}
