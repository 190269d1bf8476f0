"""
Tidal boundary conditions file (bctides.in) for SCHISM.

``Bctides`` holds everything needed to write the file: the run window, the
cut-off depth for the earth tidal potential and the boundary forcing of every
open boundary segment. The file is rendered to a string in full before it is
written, so a failure part way through never leaves a truncated file behind.
"""

import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

import numpy as np
from pydantic import Field, field_validator

from .bctypes import (
    ConstantValue,
    Flather,
    RelaxToConstantValue,
    RelaxToInitialConditions,
    RelaxToSpaceVaryingTimeSeries,
    RelaxToUniformTimeSeries,
    tides_config,
)
from .boundary_core import BoundaryForcingConfig
from .constituents import Constituent, OrderedConstituentSet
from .errors import ConfigurationError, MissingInterpolatorError
from .tidefac import TidalFactors, to_run_duration, to_utc_datetime
from .tides import TidalBoundaryInterpolator, TidalDatabase
from .types import BctidesBaseModel

logger = logging.getLogger(__name__)

Interpolators = Mapping[TidalDatabase, TidalBoundaryInterpolator]


def wrap_phases(phases: np.ndarray) -> np.ndarray:
    """Reduce phases in degrees into [0, 360)."""
    phases = np.mod(np.asarray(phases, dtype=float), 360.0)
    return np.where(phases >= 360.0, 0.0, phases)


def format_degrees(value: float, decimals: int) -> str:
    """Format an angle in [0, 360) at a fixed precision, never as 360."""
    value = round(float(value), decimals)
    if value >= 360.0:
        value = 0.0
    return f"{value:.{decimals}f}"


class Bctides(BctidesBaseModel):
    """Everything needed to write a SCHISM bctides.in file.

    Parameters
    ----------
    start_date : datetime
        Start of the simulation, UTC
    run_duration : timedelta
        Length of the simulation, a whole number of seconds
    tidal_potential_cutoff_depth : float
        Depth [m] shallower than which the earth tidal potential is not applied
    boundary_forcing_config : BoundaryForcingConfig
        Boundary forcing of every open boundary segment
    """

    start_date: datetime = Field(..., description="Simulation start (UTC)")
    run_duration: timedelta = Field(..., description="Simulation length")
    tidal_potential_cutoff_depth: float = Field(
        50.0,
        ge=0.0,
        description="Cut-off depth for applying tidal potential [m]",
    )
    boundary_forcing_config: BoundaryForcingConfig

    @field_validator("start_date", mode="before")
    @classmethod
    def parse_start_date(cls, v):
        return to_utc_datetime(v)

    @field_validator("run_duration", mode="before")
    @classmethod
    def parse_run_duration(cls, v):
        return to_run_duration(v)

    def __str__(self) -> str:
        return (
            f"Bctides(start_date={self.start_date.isoformat()}, "
            f"run_duration={self.run_duration}, "
            f"nope={self.boundary_forcing_config.nope})"
        )

    def tidal_factors(self, constituent) -> TidalFactors:
        return TidalFactors(self.start_date, self.run_duration, constituent)

    def active_potential_constituents(self) -> OrderedConstituentSet:
        return self.boundary_forcing_config.active_potential_constituents()

    def active_forcing_constituents(self) -> OrderedConstituentSet:
        return self.boundary_forcing_config.active_forcing_constituents()

    def check_interpolators(self, interpolators: Optional[Interpolators]) -> None:
        """Fail unless every tidal database in use has an interpolator.

        Raises
        ------
        MissingInterpolatorError
            If a tidal boundary references a database with no interpolator
        """
        interpolators = interpolators or {}
        for database in self.boundary_forcing_config.tidal_databases():
            if database not in interpolators:
                raise MissingInterpolatorError(
                    f"No interpolator available for tidal database {database.value}"
                )

    def render(self, interpolators: Optional[Interpolators] = None) -> str:
        """Render the complete bctides.in text.

        Parameters
        ----------
        interpolators : mapping of TidalDatabase to TidalBoundaryInterpolator
            Interpolators supplying harmonic amplitudes and phases on boundary
            nodes, needed by every segment with tidal forcing

        Returns
        -------
        str
            File contents, newline terminated
        """
        self.check_interpolators(interpolators)
        interpolators = interpolators or {}

        potential = self.active_potential_constituents()
        forcing = self.active_forcing_constituents()
        factors = {
            constituent: self.tidal_factors(constituent)
            for constituent in list(potential) + list(forcing)
        }

        lines: List[str] = []
        lines.append(self._date_header())
        lines.extend(self._potential_section(potential, factors))
        lines.extend(self._forcing_section(forcing, factors))

        config = self.boundary_forcing_config
        lines.append(f"{config.nope} !nope")
        for segment, node_ids in enumerate(config.hgrid.iobn):
            flags = config.ibtypes(segment)
            logger.debug(f"Open boundary {segment + 1} flags: {flags}")
            lines.append(
                f"{len(node_ids)} {' '.join(str(flag) for flag in flags)} "
                f"!open boundary {segment + 1}"
            )
            lines.extend(
                self._elevation_body(segment, node_ids, forcing, interpolators)
            )
            lines.extend(
                self._velocity_body(segment, node_ids, forcing, interpolators)
            )
            lines.extend(_tracer_body(config.temperature.get(segment)))
            lines.extend(_tracer_body(config.salinity.get(segment)))

        return "\n".join(lines) + "\n"

    def write(
        self,
        output_file: Union[str, Path],
        interpolators: Optional[Interpolators] = None,
    ) -> Path:
        """Write bctides.in.

        Parameters
        ----------
        output_file : str or Path
            Path to output file
        interpolators : mapping of TidalDatabase to TidalBoundaryInterpolator
            See ``render``

        Returns
        -------
        Path
            Path to the created bctides.in file
        """
        text = self.render(interpolators)
        output_file = Path(output_file)
        logger.info(f"Writing bctides.in to {output_file}")
        with open(output_file, "w") as f:
            f.write(text)
        return output_file

    def _date_header(self) -> str:
        d = self.start_date
        return f"!{d.month:02d}/{d.day:02d}/{d.year:4d} {d.hour:02d}:00:00 UTC"

    def _potential_section(
        self,
        potential: OrderedConstituentSet,
        factors: Dict[Constituent, TidalFactors],
    ) -> List[str]:
        lines = [
            f" {len(potential)} {self.tidal_potential_cutoff_depth:.3f} "
            "!number of earth tidal potential, cut-off depth for applying tidal potential"
        ]
        for constituent in potential:
            tf = factors[constituent]
            lines.append(constituent.value)
            lines.append(
                f"{int(tf.species_type())} {tf.potential_amplitude():<.6f} "
                f"{tf.orbital_frequency():<.6e} {tf.nodal_factor():.6f} "
                f"{format_degrees(tf.greenwich_factor(), 6)}"
            )
        return lines

    def _forcing_section(
        self,
        forcing: OrderedConstituentSet,
        factors: Dict[Constituent, TidalFactors],
    ) -> List[str]:
        lines = [f"{len(forcing)} !nbfr"]
        for constituent in forcing:
            tf = factors[constituent]
            lines.append(constituent.value)
            lines.append(
                f"  {tf.orbital_frequency():<.9e} {tf.nodal_factor():7.5f} "
                f"{format_degrees(tf.greenwich_factor(), 5)}"
            )
        return lines

    def _elevation_body(
        self,
        segment: int,
        node_ids: np.ndarray,
        forcing: OrderedConstituentSet,
        interpolators: Interpolators,
    ) -> List[str]:
        config = self.boundary_forcing_config.elevation.get(segment)
        if isinstance(config, ConstantValue):
            return [f"{config.value:.6f}"]
        tides = tides_config(config)
        if tides is None:
            return []

        lines = []
        interpolator = interpolators[tides.database]
        enabled = tides.constituents.active_forcing_constituents()
        for constituent in forcing:
            lines.append(constituent.value)
            if constituent in enabled:
                data = _harmonics(
                    interpolator.interpolate_elevation(constituent, node_ids.tolist()),
                    len(node_ids),
                    2,
                    f"elevation of {constituent} on open boundary {segment + 1}",
                )
            else:
                data = np.zeros((len(node_ids), 2))
            for amp, phase in data:
                lines.append(f"{amp:8.6f} {format_degrees(phase, 6)}")
        return lines

    def _velocity_body(
        self,
        segment: int,
        node_ids: np.ndarray,
        forcing: OrderedConstituentSet,
        interpolators: Interpolators,
    ) -> List[str]:
        config = self.boundary_forcing_config.velocity.get(segment)
        if isinstance(config, ConstantValue):
            return [f"{config.value:.6f}"]
        if isinstance(config, Flather):
            lines = ["eta_mean"]
            lines.extend(f"{config.eta_mean:.6f}" for _ in node_ids)
            lines.append("vn_mean")
            lines.extend(f"{config.vn_mean:.6f}" for _ in node_ids)
            return lines
        tides = tides_config(config)
        if tides is None:
            return []

        lines = []
        interpolator = interpolators[tides.database]
        enabled = tides.constituents.active_forcing_constituents()
        for constituent in forcing:
            lines.append(constituent.value)
            if constituent in enabled:
                data = _harmonics(
                    interpolator.interpolate_velocity(constituent, node_ids.tolist()),
                    len(node_ids),
                    4,
                    f"velocity of {constituent} on open boundary {segment + 1}",
                )
            else:
                data = np.zeros((len(node_ids), 4))
            for uamp, uphase, vamp, vphase in data:
                lines.append(
                    f"{uamp:8.6f} {format_degrees(uphase, 6)} "
                    f"{vamp:8.6f} {format_degrees(vphase, 6)}"
                )
        return lines


def _harmonics(data, nnodes: int, ncols: int, what: str) -> np.ndarray:
    """Check interpolated harmonics and wrap their phase columns."""
    data = np.array(data, dtype=float)
    if data.shape != (nnodes, ncols):
        raise ConfigurationError(
            f"Interpolated {what} has shape {data.shape}, expected {(nnodes, ncols)}"
        )
    if not np.all(np.isfinite(data)):
        raise ConfigurationError(f"Interpolated {what} contains non-finite values")
    data[:, 1::2] = wrap_phases(data[:, 1::2])
    return data


def _tracer_body(config) -> List[str]:
    if isinstance(config, RelaxToConstantValue):
        return [f"{config.value:.6f}", f"{config.nudging_factor:.6f}"]
    if isinstance(
        config,
        (
            RelaxToUniformTimeSeries,
            RelaxToInitialConditions,
            RelaxToSpaceVaryingTimeSeries,
        ),
    ):
        return [f"{config.nudging_factor:.6f}"]
    return []
