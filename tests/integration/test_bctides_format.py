"""
End-to-end tests rendering and writing bctides.in.
"""

from datetime import datetime, timedelta

import numpy as np
import pytest
from pydantic import ValidationError

from schism_bctides.bctides import Bctides, format_degrees, wrap_phases
from schism_bctides.bctypes import (
    ConstantValue,
    EqualToZero,
    Flather,
    RelaxToConstantValue,
    RelaxToInitialConditions,
    RelaxToSpaceVaryingTimeSeries,
    SpaceVaryingTimeSeries,
    Tides,
    TidesAndSpaceVaryingTimeSeries,
    UniformTimeSeries,
)
from schism_bctides.boundary_core import (
    BoundaryForcingConfig,
    create_tidal_boundary_config,
)
from schism_bctides.errors import ConfigurationError, MissingInterpolatorError
from schism_bctides.hgrid import Hgrid
from schism_bctides.tides import TidalBoundaryInterpolator, TidalDatabase, TidesConfig

pytestmark = pytest.mark.integration


def validate_bctides_format(file_path):
    """Validate the structure of a bctides.in file.

    Parameters
    ----------
    file_path : str or Path
        Path to the bctides.in file

    Returns
    -------
    bool
        True if the file format is valid, False otherwise
    str
        Message with details about validation result
    """
    with open(file_path, "r") as f:
        lines = f.readlines()

    # Remove comments and empty lines
    lines = [line.split("!")[0].strip() for line in lines]
    lines = [line for line in lines if line]

    line_index = 0

    def values(expected):
        nonlocal line_index
        parts = lines[line_index].split()
        if len(parts) != expected:
            raise ValueError(f"expected {expected} values at line {line_index + 1}")
        line_index += 1
        return [float(p) for p in parts]

    try:
        ntip, tip_dp = values(2)
        for _ in range(int(ntip)):
            line_index += 1  # constituent name
            if not 0.0 <= values(5)[4] < 360.0:
                return False, f"Greenwich argument out of range at line {line_index}"

        (nbfr,) = values(1)
        for _ in range(int(nbfr)):
            line_index += 1
            if not 0.0 <= values(3)[2] < 360.0:
                return False, f"Greenwich argument out of range at line {line_index}"

        (nope,) = values(1)
        for j in range(int(nope)):
            parts = lines[line_index].split()
            if len(parts) != 5:
                return False, f"Invalid boundary flags at line {line_index + 1}"
            neta, iettype, ifltype, itetype, isatype = (int(p) for p in parts)
            line_index += 1

            if iettype == 2:
                values(1)
            elif iettype in (3, 5):
                for _ in range(int(nbfr)):
                    line_index += 1
                    for _ in range(neta):
                        amp, phase = values(2)
                        if not 0.0 <= phase < 360.0:
                            return False, f"Phase out of range at line {line_index}"
            elif iettype not in (0, 1, 4, -1):
                return False, f"Invalid elevation type {iettype} at boundary {j + 1}"

            if ifltype == 2:
                values(1)
            elif ifltype in (3, 5):
                for _ in range(int(nbfr)):
                    line_index += 1
                    for _ in range(neta):
                        values(4)
            elif ifltype == -1:
                for marker in ("eta_mean", "vn_mean"):
                    if lines[line_index] != marker:
                        return False, f"Expected {marker} at line {line_index + 1}"
                    line_index += 1
                    for _ in range(neta):
                        values(1)
            elif ifltype not in (0, 1, 4):
                return False, f"Invalid velocity type {ifltype} at boundary {j + 1}"

            for tracer_type in (itetype, isatype):
                if tracer_type == 2:
                    values(1)
                    values(1)
                elif tracer_type in (1, 3, 4):
                    values(1)
                elif tracer_type != 0:
                    return False, f"Invalid tracer type {tracer_type} at boundary {j + 1}"
    except (IndexError, ValueError) as e:
        return False, f"Malformed file: {e}"

    if line_index != len(lines):
        return False, f"Unexpected trailing content at line {line_index + 1}"
    return True, "Valid bctides.in"


def make_bctides(config, **kwargs):
    kwargs.setdefault("start_date", datetime(2012, 10, 29))
    kwargs.setdefault("run_duration", timedelta(days=10))
    return Bctides(boundary_forcing_config=config, **kwargs)


class TestRender:
    """Tests for the rendered text."""

    def test_single_tidal_boundary(self, interpolators):
        hgrid = Hgrid(open_boundaries=[[1, 2, 3]])
        config = BoundaryForcingConfig(
            hgrid=hgrid,
            elevation={0: Tides(tides=TidesConfig(constituents=["M2"]))},
        )
        text = make_bctides(config).render(interpolators)
        assert text == (
            "!10/29/2012 00:00:00 UTC\n"
            " 1 50.000 !number of earth tidal potential, cut-off depth for applying tidal potential\n"
            "M2\n"
            "2 0.242334 1.405189e-04 1.020708 147.005525\n"
            "1 !nbfr\n"
            "M2\n"
            "  1.405189025e-04 1.02071 147.00553\n"
            "1 !nope\n"
            "3 3 0 0 0 !open boundary 1\n"
            "M2\n"
            "0.010000 210.000000\n"
            "0.020000 310.000000\n"
            "0.030000 50.000000\n"
        )

    def test_no_tides(self, hgrid):
        config = BoundaryForcingConfig(
            hgrid=hgrid,
            elevation={0: ConstantValue(value=0.25)},
            velocity={0: ConstantValue(value=-100.0), 1: Flather(eta_mean=0.1)},
            temperature={0: RelaxToConstantValue(value=20.0, nudging_factor=0.5)},
            salinity={1: RelaxToInitialConditions(nudging_factor=0.8)},
        )
        lines = make_bctides(config, tidal_potential_cutoff_depth=40).render().splitlines()
        assert lines[1].startswith(" 0 40.000 ")
        assert lines[2] == "0 !nbfr"
        assert lines[3] == "2 !nope"
        assert lines[4:10] == [
            "3 2 2 2 0 !open boundary 1",
            "0.250000",
            "-100.000000",
            "20.000000",
            "0.500000",
            "2 0 -1 0 3 !open boundary 2",
        ]
        assert lines[10:] == [
            "eta_mean",
            "0.100000",
            "0.100000",
            "vn_mean",
            "0.000000",
            "0.000000",
            "0.800000",
        ]

    def test_disabled_constituents_written_as_zero(self, hgrid, interpolators, mock_interpolator):
        config = BoundaryForcingConfig(
            hgrid=hgrid,
            elevation={
                0: Tides(tides=TidesConfig(constituents=["M2"])),
                1: Tides(tides=TidesConfig(constituents=["K1"])),
            },
        )
        lines = make_bctides(config).render(interpolators).splitlines()
        start = lines.index("2 3 0 0 0 !open boundary 2")
        assert lines[start + 1 : start + 7] == [
            "M2",
            "0.000000 0.000000",
            "0.000000 0.000000",
            "K1",
            "0.070000 90.000000",
            "0.080000 190.000000",
        ]
        assert ("elevation", "M2", [7, 8]) not in mock_interpolator.calls
        assert ("elevation", "K1", [7, 8]) in mock_interpolator.calls

    def test_velocity_harmonics(self, interpolators):
        hgrid = Hgrid(open_boundaries=[[1]])
        config = BoundaryForcingConfig(
            hgrid=hgrid,
            velocity={0: TidesAndSpaceVaryingTimeSeries(tides=TidesConfig(constituents=["S2"]))},
        )
        lines = make_bctides(config).render(interpolators).splitlines()
        assert lines[-3:] == [
            "1 0 5 0 0 !open boundary 1",
            "S2",
            "0.001000 30.000000 0.002000 41.000000",
        ]

    def test_missing_interpolator(self, hgrid, mock_interpolator):
        config = create_tidal_boundary_config(hgrid, database="FES")
        bctides = make_bctides(config)
        with pytest.raises(MissingInterpolatorError, match="FES"):
            bctides.render({TidalDatabase.TPXO: mock_interpolator})
        with pytest.raises(MissingInterpolatorError):
            bctides.render()

    def test_bad_interpolator_shape(self, hgrid):
        class Broken:
            def interpolate_elevation(self, constituent, node_ids):
                return np.zeros((1, 2))

            def interpolate_velocity(self, constituent, node_ids):
                return np.zeros((1, 4))

        config = create_tidal_boundary_config(hgrid)
        with pytest.raises(ConfigurationError, match="shape"):
            make_bctides(config).render({TidalDatabase.TPXO: Broken()})

    def test_deterministic(self, hgrid, interpolators):
        config = create_tidal_boundary_config(hgrid, constituents="all")
        bctides = make_bctides(config)
        assert bctides.render(interpolators) == bctides.render(interpolators)


class TestBctidesModel:
    def test_negative_cutoff_depth(self, hgrid):
        with pytest.raises(ValidationError):
            make_bctides(BoundaryForcingConfig(hgrid=hgrid), tidal_potential_cutoff_depth=-1.0)

    def test_bad_run_duration(self, hgrid):
        with pytest.raises(ValidationError):
            make_bctides(BoundaryForcingConfig(hgrid=hgrid), run_duration=timedelta(days=-2))

    def test_string_dates(self, hgrid):
        bctides = make_bctides(
            BoundaryForcingConfig(hgrid=hgrid),
            start_date="2012-10-29T06:00:00Z",
            run_duration="36h",
        )
        assert bctides.start_date == datetime(2012, 10, 29, 6)
        assert bctides.run_duration == timedelta(hours=36)
        assert bctides.render().startswith("!10/29/2012 06:00:00 UTC\n")


class TestWrite:
    """Tests for writing complete files."""

    def test_write_valid_file(self, tmp_path, hgrid, interpolators):
        config = BoundaryForcingConfig(
            hgrid=hgrid,
            elevation={0: Tides(tides=TidesConfig(constituents="all")), 1: EqualToZero()},
            velocity={0: Tides(), 1: Flather()},
            temperature={0: RelaxToSpaceVaryingTimeSeries(nudging_factor=0.2)},
            salinity={0: RelaxToConstantValue(value=35.0)},
        )
        output = make_bctides(config).write(tmp_path / "bctides.in", interpolators)
        assert output.exists()
        valid, message = validate_bctides_format(output)
        assert valid, message

    def test_all_boundary_types(self, tmp_path, interpolators):
        hgrid = Hgrid(open_boundaries=[[1, 2], [3], [4, 5, 6], [9]])
        config = BoundaryForcingConfig(
            hgrid=hgrid,
            elevation={
                0: UniformTimeSeries(),
                1: SpaceVaryingTimeSeries(),
                2: TidesAndSpaceVaryingTimeSeries(),
                3: ConstantValue(value=1.0),
            },
            velocity={0: UniformTimeSeries(), 1: SpaceVaryingTimeSeries(), 2: Tides()},
        )
        output = make_bctides(config).write(tmp_path / "bctides.in", interpolators)
        valid, message = validate_bctides_format(output)
        assert valid, message

    def test_failure_leaves_no_file(self, tmp_path, hgrid):
        output = tmp_path / "bctides.in"
        with pytest.raises(MissingInterpolatorError):
            make_bctides(create_tidal_boundary_config(hgrid)).write(output)
        assert not output.exists()

    def test_idempotent(self, tmp_path, hgrid, interpolators):
        bctides = make_bctides(create_tidal_boundary_config(hgrid))
        first = bctides.write(tmp_path / "a.in", interpolators).read_text()
        second = bctides.write(tmp_path / "b.in", interpolators).read_text()
        assert first == second


def test_wrap_phases():
    np.testing.assert_allclose(wrap_phases([-90.0, 360.0, 720.5]), [270.0, 0.0, 0.5])
    assert np.all(wrap_phases([-1e-14]) < 360.0)


@pytest.mark.parametrize(
    "value, decimals, expected",
    [
        (359.9999999, 6, "0.000000"),
        (359.999996, 5, "0.00000"),
        (359.9999994, 6, "359.999999"),
        (0.0, 6, "0.000000"),
        (123.4567891, 5, "123.45679"),
    ],
)
def test_format_degrees(value, decimals, expected):
    assert format_degrees(value, decimals) == expected


def test_phases_near_360_written_as_zero(tmp_path):
    class NearFullCircle(TidalBoundaryInterpolator):
        def interpolate_elevation(self, constituent, node_ids):
            return np.tile([0.5, 359.99999996], (len(node_ids), 1))

        def interpolate_velocity(self, constituent, node_ids):
            return np.tile([0.1, 359.9999999, 0.2, 720.0 - 1e-8], (len(node_ids), 1))

    hgrid = Hgrid(open_boundaries=[[1, 2]])
    config = create_tidal_boundary_config(hgrid, ["M2"])
    interpolator = NearFullCircle()
    path = make_bctides(config).write(
        tmp_path / "bctides.in", {database: interpolator for database in TidalDatabase}
    )
    lines = path.read_text().splitlines()
    assert "0.500000 0.000000" in lines
    assert "0.100000 0.000000 0.200000 0.000000" in lines
    assert not any(" 360.0" in line for line in lines)
    valid, message = validate_bctides_format(path)
    assert valid, message
