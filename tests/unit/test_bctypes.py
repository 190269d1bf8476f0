from datetime import datetime

import numpy as np
import pytest
from pydantic import TypeAdapter, ValidationError

from schism_bctides.bctypes import (
    ConstantValue,
    ElevationConfig,
    ElevationType,
    EqualToZero,
    Flather,
    RelaxToConstantValue,
    RelaxToInitialConditions,
    RelaxToSpaceVaryingTimeSeries,
    RelaxToUniformTimeSeries,
    SpaceVaryingTimeSeries,
    TemperatureConfig,
    Tides,
    TidesAndSpaceVaryingTimeSeries,
    TracerType,
    UniformTimeSeries,
    VelocityConfig,
    VelocityType,
    tides_config,
)
from schism_bctides.tides import TidalDatabase


class TestBoundaryTypes:
    """Tests for the boundary type codes of each variant."""

    @pytest.mark.parametrize(
        "config, code",
        [
            (UniformTimeSeries(), ElevationType.TIMEHIST),
            (ConstantValue(value=0.5), ElevationType.CONSTANT),
            (Tides(), ElevationType.HARMONIC),
            (SpaceVaryingTimeSeries(), ElevationType.EXTERNAL),
            (TidesAndSpaceVaryingTimeSeries(), ElevationType.HARMONICEXTERNAL),
            (EqualToZero(), ElevationType.EQUALTOZERO),
            (Flather(), VelocityType.FLATHER),
        ],
    )
    def test_elevation_velocity_codes(self, config, code):
        assert config.ibtype() is code

    @pytest.mark.parametrize(
        "config, code",
        [
            (RelaxToUniformTimeSeries(), TracerType.TIMEHIST),
            (RelaxToConstantValue(value=20.0), TracerType.CONSTANT),
            (RelaxToInitialConditions(), TracerType.INITIAL),
            (RelaxToSpaceVaryingTimeSeries(), TracerType.EXTERNAL),
        ],
    )
    def test_tracer_codes(self, config, code):
        assert config.ibtype() is code

    def test_codes_are_stable(self):
        assert ElevationType.EQUALTOZERO == -1
        assert VelocityType.FLATHER == -1
        assert ElevationType.HARMONICEXTERNAL == 5

    def test_codes_are_enum_members(self):
        assert isinstance(Tides().ibtype(), ElevationType)
        assert isinstance(Flather().ibtype(), VelocityType)
        assert isinstance(RelaxToInitialConditions().ibtype(), TracerType)
        assert int(Flather().ibtype()) == -1
        assert str(int(ConstantValue(value=1.0).ibtype())) == "2"

    def test_variants_are_frozen(self):
        config = ConstantValue(value=0.5)
        with pytest.raises(ValidationError):
            config.value = 1.0


class TestValidation:
    def test_nudging_factor_range(self):
        RelaxToInitialConditions(nudging_factor=0.0)
        RelaxToInitialConditions(nudging_factor=1.0)
        with pytest.raises(ValidationError):
            RelaxToInitialConditions(nudging_factor=1.5)
        with pytest.raises(ValidationError):
            RelaxToConstantValue(value=35.0, nudging_factor=-0.1)

    def test_constant_requires_value(self):
        with pytest.raises(ValidationError):
            ConstantValue()

    def test_numpy_values(self):
        config = ConstantValue(value=np.float32(0.25))
        assert isinstance(config.value, float)

    def test_uniform_time_series_data(self):
        config = UniformTimeSeries(data={datetime(2020, 1, 1): 1.0})
        assert config.data[datetime(2020, 1, 1)] == 1.0


class TestUnions:
    """Discriminated unions only admit the variants valid for a variable."""

    def test_elevation_from_dict(self):
        config = TypeAdapter(ElevationConfig).validate_python(
            {"kind": "tides", "tides": {"constituents": ["M2"], "database": "FES"}}
        )
        assert isinstance(config, Tides)
        assert config.tides.database == TidalDatabase.FES

    def test_elevation_rejects_flather(self):
        with pytest.raises(ValidationError):
            TypeAdapter(ElevationConfig).validate_python({"kind": "flather"})

    def test_velocity_rejects_equal_to_zero(self):
        with pytest.raises(ValidationError):
            TypeAdapter(VelocityConfig).validate_python({"kind": "equal_to_zero"})

    def test_temperature_variants(self):
        adapter = TypeAdapter(TemperatureConfig)
        config = adapter.validate_python({"kind": "constant", "value": 12.0})
        assert isinstance(config, RelaxToConstantValue)
        with pytest.raises(ValidationError):
            adapter.validate_python({"kind": "tides"})


def test_tides_config():
    assert tides_config(Tides()) is not None
    assert tides_config(TidesAndSpaceVaryingTimeSeries()) is not None
    assert tides_config(ConstantValue(value=1.0)) is None
    assert tides_config(None) is None
