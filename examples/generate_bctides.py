#!/usr/bin/env python3
"""
Generate bctides.in from a YAML configuration.

Harmonic databases are not bundled, so this example forces every tidal
boundary with uniform amplitudes and phases. Replace ``UniformHarmonics`` with
an interpolator backed by a real tidal model for production use.

Usage: python generate_bctides.py [CONFIG] [--output PATH] [--amplitude M]
"""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from schism_bctides import BctidesConfig, BctidesError, TidalBoundaryInterpolator
from schism_bctides.tides import TidalDatabase

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


class UniformHarmonics(TidalBoundaryInterpolator):
    """Same amplitude and zero phase on every node."""

    def __init__(self, amplitude: float):
        self.amplitude = amplitude

    def interpolate_elevation(self, constituent, node_ids):
        return np.tile([self.amplitude, 0.0], (len(node_ids), 1))

    def interpolate_velocity(self, constituent, node_ids):
        return np.tile([self.amplitude, 0.0, self.amplitude, 0.0], (len(node_ids), 1))


def main():
    parser = argparse.ArgumentParser(description="Generate a SCHISM bctides.in file")
    parser.add_argument(
        "config",
        nargs="?",
        default=Path(__file__).parent / "bctides.yaml",
        type=Path,
        help="YAML configuration (default: bctides.yaml next to this script)",
    )
    parser.add_argument("--output", "-o", default="bctides.in", type=Path)
    parser.add_argument("--amplitude", default=0.5, type=float)
    args = parser.parse_args()

    interpolator = UniformHarmonics(args.amplitude)
    interpolators = {database: interpolator for database in TidalDatabase}
    try:
        bctides = BctidesConfig.from_yaml(args.config).build()
        output = bctides.write(args.output, interpolators)
    except BctidesError as e:
        logger.error(f"Failed to generate bctides.in: {e}")
        return 1
    logger.info(f"Wrote {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
