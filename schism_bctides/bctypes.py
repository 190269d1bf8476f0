"""
Boundary condition types for SCHISM open boundaries.

Each boundary variable (elevation, velocity, temperature, salinity) is
configured with one variant model. The variant determines the integer
boundary type code written on the segment line of bctides.in and which
values, if any, follow it.
"""

import logging
from datetime import datetime
from enum import IntEnum
from typing import Annotated, Dict, Literal, Optional, Union

from pydantic import Field

from .tides import SpaceVaryingTimeSeriesConfig, TidesConfig
from .types import BctidesBaseModel

logger = logging.getLogger(__name__)


class ElevationType(IntEnum):
    """Elevation boundary condition types."""

    NONE = 0  # Not specified
    TIMEHIST = 1  # Time history from elev.th
    CONSTANT = 2  # Constant elevation
    HARMONIC = 3  # Harmonic tidal constituents
    EXTERNAL = 4  # External model data from elev2D.th.nc
    HARMONICEXTERNAL = 5  # Combination of harmonic and external data
    EQUALTOZERO = -1  # Elevation held at zero


class VelocityType(IntEnum):
    """Velocity boundary condition types."""

    NONE = 0  # Not specified
    TIMEHIST = 1  # Time history from flux.th
    CONSTANT = 2  # Constant discharge
    HARMONIC = 3  # Harmonic tidal constituents
    EXTERNAL = 4  # External model data from uv3D.th.nc
    HARMONICEXTERNAL = 5  # Combination of harmonic and external data
    FLATHER = -1  # Flather type radiation boundary


class TracerType(IntEnum):
    """Temperature/salinity boundary condition types."""

    NONE = 0  # Not specified
    TIMEHIST = 1  # Time history from temp/salt.th
    CONSTANT = 2  # Constant temperature/salinity
    INITIAL = 3  # Initial profile for inflow
    EXTERNAL = 4  # External model 3D input


NudgingFactor = Annotated[
    float,
    Field(ge=0.0, le=1.0, description="Relaxation factor for inflow (0-1)"),
]


# Elevation and velocity variants; both variables share codes 1 to 5


class UniformTimeSeries(BctidesBaseModel):
    """Spatially uniform time history read by SCHISM from a .th file."""

    kind: Literal["uniform_time_series"] = "uniform_time_series"
    data: Dict[datetime, float] = Field(
        default_factory=dict, description="Boundary value at each time"
    )

    def ibtype(self) -> IntEnum:
        return ElevationType.TIMEHIST


class ConstantValue(BctidesBaseModel):
    """A single value applied along the whole segment."""

    kind: Literal["constant"] = "constant"
    value: float = Field(..., description="Constant boundary value")

    def ibtype(self) -> IntEnum:
        return ElevationType.CONSTANT


class Tides(BctidesBaseModel):
    """Harmonic tidal forcing from a tidal database."""

    kind: Literal["tides"] = "tides"
    tides: TidesConfig = Field(default_factory=TidesConfig)

    def ibtype(self) -> IntEnum:
        return ElevationType.HARMONIC


class SpaceVaryingTimeSeries(BctidesBaseModel):
    """Space- and time-varying values read from a *.th.nc file."""

    kind: Literal["space_varying_time_series"] = "space_varying_time_series"
    time_series: SpaceVaryingTimeSeriesConfig = Field(
        default_factory=SpaceVaryingTimeSeriesConfig
    )

    def ibtype(self) -> IntEnum:
        return ElevationType.EXTERNAL


class TidesAndSpaceVaryingTimeSeries(BctidesBaseModel):
    """Harmonic tides superposed on a space-varying time series."""

    kind: Literal["tides_and_space_varying_time_series"] = (
        "tides_and_space_varying_time_series"
    )
    tides: TidesConfig = Field(default_factory=TidesConfig)
    time_series: SpaceVaryingTimeSeriesConfig = Field(
        default_factory=SpaceVaryingTimeSeriesConfig
    )

    def ibtype(self) -> IntEnum:
        return ElevationType.HARMONICEXTERNAL


class EqualToZero(BctidesBaseModel):
    kind: Literal["equal_to_zero"] = "equal_to_zero"

    def ibtype(self) -> IntEnum:
        return ElevationType.EQUALTOZERO


class Flather(BctidesBaseModel):
    """Flather radiation condition on velocity.

    Parameters
    ----------
    eta_mean : float
        Mean elevation at the boundary nodes
    vn_mean : float
        Mean normal velocity at the boundary nodes
    """

    kind: Literal["flather"] = "flather"
    eta_mean: float = Field(0.0, description="Mean elevation [m]")
    vn_mean: float = Field(0.0, description="Mean normal velocity [m/s]")

    def ibtype(self) -> IntEnum:
        return VelocityType.FLATHER


# Tracer variants


class RelaxToUniformTimeSeries(BctidesBaseModel):
    kind: Literal["uniform_time_series"] = "uniform_time_series"
    data: Dict[datetime, float] = Field(default_factory=dict)
    nudging_factor: NudgingFactor = 1.0

    def ibtype(self) -> IntEnum:
        return TracerType.TIMEHIST


class RelaxToConstantValue(BctidesBaseModel):
    kind: Literal["constant"] = "constant"
    value: float = Field(..., description="Constant tracer value")
    nudging_factor: NudgingFactor = 1.0

    def ibtype(self) -> IntEnum:
        return TracerType.CONSTANT


class RelaxToInitialConditions(BctidesBaseModel):
    """Relax inflow towards the initial profile."""

    kind: Literal["initial_conditions"] = "initial_conditions"
    nudging_factor: NudgingFactor = 1.0

    def ibtype(self) -> IntEnum:
        return TracerType.INITIAL


class RelaxToSpaceVaryingTimeSeries(BctidesBaseModel):
    kind: Literal["space_varying_time_series"] = "space_varying_time_series"
    time_series: SpaceVaryingTimeSeriesConfig = Field(
        default_factory=SpaceVaryingTimeSeriesConfig
    )
    nudging_factor: NudgingFactor = 1.0

    def ibtype(self) -> IntEnum:
        return TracerType.EXTERNAL


ElevationConfig = Annotated[
    Union[
        UniformTimeSeries,
        ConstantValue,
        Tides,
        SpaceVaryingTimeSeries,
        TidesAndSpaceVaryingTimeSeries,
        EqualToZero,
    ],
    Field(discriminator="kind"),
]

VelocityConfig = Annotated[
    Union[
        UniformTimeSeries,
        ConstantValue,
        Tides,
        SpaceVaryingTimeSeries,
        TidesAndSpaceVaryingTimeSeries,
        Flather,
    ],
    Field(discriminator="kind"),
]

TracerConfig = Annotated[
    Union[
        RelaxToUniformTimeSeries,
        RelaxToConstantValue,
        RelaxToInitialConditions,
        RelaxToSpaceVaryingTimeSeries,
    ],
    Field(discriminator="kind"),
]

TemperatureConfig = TracerConfig
SalinityConfig = TracerConfig


def tides_config(config) -> Optional[TidesConfig]:
    """Return the tidal configuration carried by a boundary variant, if any."""
    if isinstance(config, (Tides, TidesAndSpaceVaryingTimeSeries)):
        return config.tides
    return None
