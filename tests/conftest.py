"""
Shared fixtures for schism_bctides tests.

Harmonic databases are replaced by a deterministic mock interpolator so the
tests run without any tidal model data.
"""

import logging
from datetime import datetime, timedelta

import numpy as np
import pytest

from schism_bctides.hgrid import Hgrid
from schism_bctides.tides import TidalBoundaryInterpolator, TidalDatabase

logger = logging.getLogger(__name__)


class MockTidalInterpolator(TidalBoundaryInterpolator):
    """Interpolator returning amplitudes and phases derived from node ids.

    Phases are deliberately outside [0, 360) for some nodes so that phase
    wrapping is exercised.
    """

    def __init__(self):
        self.calls = []

    def interpolate_elevation(self, constituent, node_ids):
        self.calls.append(("elevation", str(constituent), list(node_ids)))
        ids = np.asarray(node_ids, dtype=float)
        return np.column_stack([0.01 * ids, 100.0 * ids - 250.0])

    def interpolate_velocity(self, constituent, node_ids):
        self.calls.append(("velocity", str(constituent), list(node_ids)))
        ids = np.asarray(node_ids, dtype=float)
        return np.column_stack(
            [0.001 * ids, 30.0 * ids, 0.002 * ids, 400.0 + ids]
        )


@pytest.fixture
def start_date():
    """Reference start date used for golden values."""
    return datetime(2012, 10, 29, 0, 0, 0)


@pytest.fixture
def run_duration():
    return timedelta(days=10)


@pytest.fixture
def hgrid():
    """Small grid with two open boundaries."""
    return Hgrid(open_boundaries=[[1, 2, 3], [7, 8]])


@pytest.fixture
def mock_interpolator():
    return MockTidalInterpolator()


@pytest.fixture
def interpolators(mock_interpolator):
    """Mock interpolators for every tidal database."""
    return {database: mock_interpolator for database in TidalDatabase}

