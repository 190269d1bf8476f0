"""
Tidal constituent selection and harmonic database configuration.

A ``ConstituentsConfig`` records which constituents a boundary forces. Two
subsets are derived from it: the constituents that drive the tidal
potential (major constituents only) and the constituents imposed at the
open boundary (every enabled constituent).
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Sequence, Tuple

import numpy as np
from pydantic import ConfigDict, Field, PrivateAttr, field_validator, model_validator

from .constituents import (
    MAJOR_CONSTITUENTS,
    MINOR_CONSTITUENTS,
    Constituent,
    OrderedConstituentSet,
    canonical_name,
)
from .errors import (
    ConfigurationError,
    UnhandledConstituentError,
    UnknownConstituentFieldError,
)
from .types import BctidesBaseModel

logger = logging.getLogger(__name__)

# Field order of ConstituentsConfig; this is the order constituents are
# inserted into the aggregated sets.
CONSTITUENT_FIELDS: Tuple[Tuple[str, Constituent], ...] = tuple(
    (constituent.name.lower(), constituent)
    for constituent in MAJOR_CONSTITUENTS + MINOR_CONSTITUENTS
)

_FIELD_BY_CONSTITUENT: Dict[Constituent, str] = {
    constituent: field for field, constituent in CONSTITUENT_FIELDS
}


class TidalDatabase(str, Enum):
    """Harmonic databases that can supply boundary amplitudes and phases."""

    TPXO = "TPXO"
    HAMTIDE = "HAMTIDE"
    FES = "FES"


class TimeSeriesDatabase(str, Enum):
    """Ocean model databases that can supply space-varying time series."""

    HYCOM = "HYCOM"


class ConstituentsConfig(BctidesBaseModel):
    """Which tidal constituents are enabled for a boundary variable.

    Fields are keyed internally by identifier-safe names (``two_n2``) and
    aliased to the canonical constituent names (``2N2``), so either can be
    used when building the model.

    A selection is editable until it is placed in a ``TidesConfig``. The
    copy held there is read-only; ``model_copy()`` returns an editable one.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=False)

    _read_only: bool = PrivateAttr(False)

    q1: bool = Field(False, alias="Q1")
    o1: bool = Field(False, alias="O1")
    p1: bool = Field(False, alias="P1")
    k1: bool = Field(False, alias="K1")
    n2: bool = Field(False, alias="N2")
    m2: bool = Field(False, alias="M2")
    s2: bool = Field(False, alias="S2")
    k2: bool = Field(False, alias="K2")
    mm: bool = Field(False, alias="Mm")
    mf: bool = Field(False, alias="Mf")
    m4: bool = Field(False, alias="M4")
    mn4: bool = Field(False, alias="MN4")
    ms4: bool = Field(False, alias="MS4")
    two_n2: bool = Field(False, alias="2N2")
    s1: bool = Field(False, alias="S1")

    @model_validator(mode="before")
    @classmethod
    def expand_shorthand(cls, data):
        """Accept "major", "minor", "all" or a list of names."""
        if isinstance(data, str):
            groups = {
                "major": MAJOR_CONSTITUENTS,
                "minor": MINOR_CONSTITUENTS,
                "all": MAJOR_CONSTITUENTS + MINOR_CONSTITUENTS,
            }
            if data.lower() not in groups:
                raise ValueError(
                    f"Unknown constituent group {data!r}, expected one of {list(groups)}"
                )
            return {_field_key(c): True for c in groups[data.lower()]}
        if isinstance(data, (list, tuple)):
            return {_field_key(name): True for name in data}
        if isinstance(data, dict):
            return {_field_key(name): value for name, value in data.items()}
        return data

    def __setattr__(self, name, value):
        if not name.startswith("_") and getattr(self, "_read_only", False):
            raise ConfigurationError(
                f"Cannot set {name!r}: this constituent selection belongs to a "
                "TidesConfig and is read-only, edit a model_copy() instead"
            )
        super().__setattr__(name, value)

    def __eq__(self, other):
        if not isinstance(other, ConstituentsConfig):
            return NotImplemented
        return self.values() == other.values()

    def model_copy(self, *, update=None, deep=False) -> "ConstituentsConfig":
        copied = super().model_copy(update=update, deep=deep)
        copied._read_only = False
        return copied

    @classmethod
    def field_names(cls) -> List[str]:
        """Canonical constituent names in field order."""
        return [constituent.value for _, constituent in CONSTITUENT_FIELDS]

    def values(self) -> List[bool]:
        return [getattr(self, field) for field, _ in CONSTITUENT_FIELDS]

    def set_by_name(self, field_name: str, value: bool) -> None:
        """Enable or disable a constituent by canonical or internal name."""
        setattr(self, _field_key(field_name), bool(value))

    @classmethod
    def all(cls) -> "ConstituentsConfig":
        return cls._with(MAJOR_CONSTITUENTS + MINOR_CONSTITUENTS)

    @classmethod
    def major(cls) -> "ConstituentsConfig":
        return cls._with(MAJOR_CONSTITUENTS)

    @classmethod
    def minor(cls) -> "ConstituentsConfig":
        return cls._with(MINOR_CONSTITUENTS)

    @classmethod
    def _with(cls, constituents) -> "ConstituentsConfig":
        this = cls()
        for constituent in constituents:
            this.set_by_name(constituent.value, True)
        return this

    def enabled(self) -> List[Constituent]:
        return [
            constituent
            for (field, constituent) in CONSTITUENT_FIELDS
            if getattr(self, field)
        ]

    def active_potential_constituents(self) -> OrderedConstituentSet:
        """Enabled constituents that also drive the tidal potential."""
        return OrderedConstituentSet(
            c for c in self.enabled() if c in MAJOR_CONSTITUENTS
        )

    def active_forcing_constituents(self) -> OrderedConstituentSet:
        """All enabled constituents."""
        return OrderedConstituentSet(self.enabled())


def _field_key(name) -> str:
    """Map a canonical, escaped or internal constituent name to its field key."""
    name = str(name)
    if name in ConstituentsConfig.model_fields:
        return name
    try:
        constituent = Constituent.parse(canonical_name(name))
    except UnhandledConstituentError:
        raise UnknownConstituentFieldError(name) from None
    try:
        return _FIELD_BY_CONSTITUENT[constituent]
    except KeyError:
        raise UnknownConstituentFieldError(name) from None


class TidesConfig(BctidesBaseModel):
    """Tidal forcing for a boundary variable."""

    constituents: ConstituentsConfig = Field(
        default_factory=ConstituentsConfig.major,
        description="Constituents imposed at the boundary",
        validate_default=True,
    )
    database: TidalDatabase = Field(
        TidalDatabase.TPXO,
        description="Harmonic database supplying amplitudes and phases",
    )

    @field_validator("constituents")
    @classmethod
    def seal_constituents(cls, value: ConstituentsConfig) -> ConstituentsConfig:
        # value is already a private copy, instances are revalidated
        value._read_only = True
        return value


class SpaceVaryingTimeSeriesConfig(BctidesBaseModel):
    """Space- and time-varying boundary values from an ocean model."""

    database: TimeSeriesDatabase = Field(
        TimeSeriesDatabase.HYCOM, description="Source of the time series"
    )


class TidalBoundaryInterpolator(ABC):
    """Interface to a harmonic database interpolating onto boundary nodes.

    Implementations look up node coordinates themselves; only node ids cross
    this interface.
    """

    @abstractmethod
    def interpolate_elevation(
        self, constituent: Constituent, node_ids: Sequence[int]
    ) -> np.ndarray:
        """Return an (n, 2) array of amplitude [m] and phase [deg] per node."""

    @abstractmethod
    def interpolate_velocity(
        self, constituent: Constituent, node_ids: Sequence[int]
    ) -> np.ndarray:
        """Return an (n, 4) array of u amp, u phase, v amp, v phase per node."""
