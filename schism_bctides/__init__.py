"""
SCHISM open boundary tidal forcing

Computes nodal factors and equilibrium arguments of tidal constituents and
writes the bctides.in file read by SCHISM at startup.
"""

import logging

logger = logging.getLogger(__name__)

from .bctides import Bctides
from .bctypes import (
    ConstantValue,
    ElevationType,
    EqualToZero,
    Flather,
    RelaxToConstantValue,
    RelaxToInitialConditions,
    RelaxToSpaceVaryingTimeSeries,
    RelaxToUniformTimeSeries,
    SpaceVaryingTimeSeries,
    Tides,
    TidesAndSpaceVaryingTimeSeries,
    TracerType,
    UniformTimeSeries,
    VelocityType,
)
from .boundary_core import BoundaryForcingConfig, create_tidal_boundary_config
from .config import BctidesConfig
from .constituents import Constituent, OrderedConstituentSet, TidalSpecies
from .errors import (
    BctidesError,
    ConfigurationError,
    HgridError,
    MissingConstituentError,
    MissingInterpolatorError,
    RunDurationError,
    UnhandledConstituentError,
    UnknownConstituentFieldError,
)
from .hgrid import Hgrid
from .tidefac import TidalFactors, tidefac
from .tides import (
    ConstituentsConfig,
    SpaceVaryingTimeSeriesConfig,
    TidalBoundaryInterpolator,
    TidalDatabase,
    TidesConfig,
    TimeSeriesDatabase,
)

__version__ = "0.1.0"

logger.debug("schism_bctides initialized")
