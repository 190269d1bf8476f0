"""
Core SCHISM boundary forcing module.

Collects the per-segment boundary variants for elevation, velocity,
temperature and salinity and derives what bctides.in needs from them: the
boundary type flags of every segment and the ordered sets of tidal
constituents used by the earth tidal potential and by the boundary forcing.

Example Usage:
    ```python
    from schism_bctides.boundary_core import BoundaryForcingConfig
    from schism_bctides.bctypes import Tides
    from schism_bctides.hgrid import Hgrid

    hgrid = Hgrid(open_boundaries=[[1, 2, 3], [7, 8]])
    config = BoundaryForcingConfig(
        hgrid=hgrid,
        elevation={0: Tides()},
        velocity={0: Tides()},
    )
    config.get_flags_list()  # [[3, 3, 0, 0], [0, 0, 0, 0]]
    ```
"""

import logging
from typing import Dict, Iterable, List, Optional, Union

from pydantic import Field, model_validator

from .bctypes import (
    ElevationConfig,
    SalinityConfig,
    TemperatureConfig,
    Tides,
    VelocityConfig,
    tides_config,
)
from .constituents import OrderedConstituentSet
from .hgrid import Hgrid
from .tides import ConstituentsConfig, TidalDatabase, TidesConfig
from .types import BctidesBaseModel

logger = logging.getLogger(__name__)


class BoundaryForcingConfig(BctidesBaseModel):
    """Boundary variants of every open boundary segment.

    Each mapping is keyed by 0-based segment index in mesh order; segments
    without an entry are not forced for that variable.
    """

    hgrid: Hgrid = Field(..., description="Grid providing the open boundary segments")
    elevation: Dict[int, ElevationConfig] = Field(
        default_factory=dict, description="Elevation forcing by segment index"
    )
    velocity: Dict[int, VelocityConfig] = Field(
        default_factory=dict, description="Velocity forcing by segment index"
    )
    temperature: Dict[int, TemperatureConfig] = Field(
        default_factory=dict, description="Temperature forcing by segment index"
    )
    salinity: Dict[int, SalinityConfig] = Field(
        default_factory=dict, description="Salinity forcing by segment index"
    )

    @model_validator(mode="after")
    def check_segment_indices(self):
        nope = self.hgrid.nob
        for name in ("elevation", "velocity", "temperature", "salinity"):
            for index in getattr(self, name):
                if not 0 <= index < nope:
                    raise ValueError(
                        f"{name} is configured for open boundary {index + 1} "
                        f"but the grid has {nope} open boundaries"
                    )
        return self

    @property
    def nope(self) -> int:
        return self.hgrid.nob

    def ibtypes(self, segment: int) -> List[int]:
        """Boundary type flags [elevation, velocity, temperature, salinity]."""
        flags = []
        for name in ("elevation", "velocity", "temperature", "salinity"):
            config = getattr(self, name).get(segment)
            flags.append(int(config.ibtype()) if config is not None else 0)
        return flags

    def get_flags_list(self) -> List[List[int]]:
        """Boundary type flags of all segments in mesh order."""
        return [self.ibtypes(i) for i in range(self.nope)]

    def tidal_configs(self) -> Iterable[TidesConfig]:
        """Tidal configurations in segment order, elevation before velocity."""
        for i in range(self.nope):
            for config in (self.elevation.get(i), self.velocity.get(i)):
                tides = tides_config(config)
                if tides is not None:
                    yield tides

    def active_potential_constituents(self) -> OrderedConstituentSet:
        """Constituents driving the earth tidal potential."""
        constituents = OrderedConstituentSet()
        for tides in self.tidal_configs():
            constituents.update(tides.constituents.active_potential_constituents())
        logger.info(f"Tidal potential constituents: {constituents.names()}")
        return constituents

    def active_forcing_constituents(self) -> OrderedConstituentSet:
        """Constituents imposed on the open boundaries."""
        constituents = OrderedConstituentSet()
        for tides in self.tidal_configs():
            constituents.update(tides.constituents.active_forcing_constituents())
        logger.info(f"Boundary forcing constituents: {constituents.names()}")
        return constituents

    def tidal_databases(self) -> List[TidalDatabase]:
        """Distinct tidal databases referenced by the boundaries."""
        databases = []
        for tides in self.tidal_configs():
            if tides.database not in databases:
                databases.append(tides.database)
        return databases


def create_tidal_boundary_config(
    hgrid: Hgrid,
    constituents: Union[str, List[str], ConstituentsConfig] = "major",
    database: Union[str, TidalDatabase] = TidalDatabase.TPXO,
    segments: Optional[Iterable[int]] = None,
) -> BoundaryForcingConfig:
    """Create a configuration with harmonic elevation and velocity forcing.

    Parameters
    ----------
    hgrid : Hgrid
        Grid providing the open boundary segments
    constituents : str, list or ConstituentsConfig, optional
        Constituents to force, "major" by default
    database : str or TidalDatabase, optional
        Harmonic database for amplitudes and phases
    segments : iterable of int, optional
        0-based segments to force; all segments when omitted

    Returns
    -------
    BoundaryForcingConfig
        Tidal forcing on the selected segments
    """
    if segments is None:
        segments = range(hgrid.nob)
    segments = list(segments)
    tides = TidesConfig(constituents=constituents, database=database)
    return BoundaryForcingConfig(
        hgrid=hgrid,
        elevation={i: Tides(tides=tides) for i in segments},
        velocity={i: Tides(tides=tides) for i in segments},
    )
