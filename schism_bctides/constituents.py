"""
Tidal constituent catalog.

Static reference tables for the harmonic constituents understood by the
SCHISM bctides generator: tidal species, equilibrium (potential) amplitude
and orbital frequency, plus the fixed major/minor groupings.
"""

from enum import Enum, IntEnum
from typing import Dict, Iterable, Iterator, List, Union

from .errors import MissingConstituentError, UnhandledConstituentError


class Constituent(str, Enum):
    """Harmonic constituents with a known orbital frequency.

    Values are the canonical names written to bctides.in.
    """

    M4 = "M4"
    M6 = "M6"
    MK3 = "MK3"
    S4 = "S4"
    MN4 = "MN4"
    S6 = "S6"
    M3 = "M3"
    TWO_MK3 = "2MK3"
    M8 = "M8"
    MS4 = "MS4"
    M2 = "M2"
    S2 = "S2"
    N2 = "N2"
    NU2 = "Nu2"
    MU2 = "MU2"
    TWO_N2 = "2N2"
    LAMBDA2 = "lambda2"
    T2 = "T2"
    R2 = "R2"
    TWO_SM2 = "2SM2"
    L2 = "L2"
    K2 = "K2"
    K1 = "K1"
    O1 = "O1"
    OO1 = "OO1"
    S1 = "S1"
    M1 = "M1"
    J1 = "J1"
    RHO = "RHO"
    Q1 = "Q1"
    TWO_Q1 = "2Q1"
    P1 = "P1"
    MM = "Mm"
    SSA = "Ssa"
    SA = "Sa"
    MSF = "Msf"
    MF = "Mf"
    Z0 = "Z0"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: Union[str, "Constituent"]) -> "Constituent":
        """Return the constituent for a canonical or underscore-escaped name.

        Names whose canonical form begins with a digit may be given with a
        leading underscore (``_2N2``), the form used for identifiers.
        """
        if isinstance(name, cls):
            return name
        canonical = canonical_name(name)
        try:
            return cls(canonical)
        except ValueError:
            raise UnhandledConstituentError(canonical) from None


class TidalSpecies(IntEnum):
    """Tidal species types."""

    LONG_PERIOD = 0  # Long period (declinational)
    DIURNAL = 1  # Diurnal
    SEMI_DIURNAL = 2  # Semi-diurnal


def canonical_name(name: str) -> str:
    """Strip the leading underscore used to make digit-leading names identifiers."""
    name = str(name)
    if name.startswith("_"):
        return name[1:]
    return name


TIDAL_SPECIES_TYPE: Dict[Constituent, TidalSpecies] = {
    Constituent.M2: TidalSpecies.SEMI_DIURNAL,
    Constituent.S2: TidalSpecies.SEMI_DIURNAL,
    Constituent.N2: TidalSpecies.SEMI_DIURNAL,
    Constituent.K2: TidalSpecies.SEMI_DIURNAL,
    Constituent.K1: TidalSpecies.DIURNAL,
    Constituent.O1: TidalSpecies.DIURNAL,
    Constituent.P1: TidalSpecies.DIURNAL,
    Constituent.Q1: TidalSpecies.DIURNAL,
    Constituent.Z0: TidalSpecies.LONG_PERIOD,
}

# Equilibrium amplitudes in metres
TIDAL_POTENTIAL_AMPLITUDES: Dict[Constituent, float] = {
    Constituent.M2: 0.242334,
    Constituent.S2: 0.112841,
    Constituent.N2: 0.046398,
    Constituent.K2: 0.030704,
    Constituent.K1: 0.141565,
    Constituent.O1: 0.100514,
    Constituent.P1: 0.046843,
    Constituent.Q1: 0.019256,
    Constituent.Z0: 0.0,
}

# Angular frequencies in rad/s
ORBITAL_FREQUENCIES: Dict[Constituent, float] = {
    Constituent.M4: 0.0002810378050173,
    Constituent.M6: 0.0004215567080107,
    Constituent.MK3: 0.0002134400613513,
    Constituent.S4: 0.0002908882086657,
    Constituent.MN4: 0.0002783986019952,
    Constituent.S6: 0.0004363323129986,
    Constituent.M3: 0.0002107783537630,
    Constituent.TWO_MK3: 0.0002081166466594,
    Constituent.M8: 0.0005620756090649,
    Constituent.MS4: 0.0002859630068415,
    Constituent.M2: 0.0001405189025086,
    Constituent.S2: 0.0001454441043329,
    Constituent.N2: 0.0001378796994865,
    Constituent.NU2: 0.0001382329037065,
    Constituent.MU2: 0.0001355937006844,
    Constituent.TWO_N2: 0.0001352404964644,
    Constituent.LAMBDA2: 0.0001428049013108,
    Constituent.T2: 0.0001452450073529,
    Constituent.R2: 0.0001456432013128,
    Constituent.TWO_SM2: 0.0001503693061571,
    Constituent.L2: 0.0001431581055307,
    Constituent.K2: 0.0001458423172006,
    Constituent.K1: 0.0000729211583579,
    Constituent.O1: 0.0000675977441508,
    Constituent.OO1: 0.0000782445730498,
    Constituent.S1: 0.0000727220521664,
    Constituent.M1: 0.0000702594512543,
    Constituent.J1: 0.0000755603613800,
    Constituent.RHO: 0.0000653117453487,
    Constituent.Q1: 0.0000649585411287,
    Constituent.TWO_Q1: 0.0000623193381066,
    Constituent.P1: 0.0000725229459750,
    Constituent.MM: 0.0000026392030221,
    Constituent.SSA: 0.0000003982128677,
    Constituent.SA: 0.0000001991061914,
    Constituent.MSF: 0.0000049252018242,
    Constituent.MF: 0.0000053234146919,
    Constituent.Z0: 0.0,
}

MAJOR_CONSTITUENTS = (
    Constituent.Q1,
    Constituent.O1,
    Constituent.P1,
    Constituent.K1,
    Constituent.N2,
    Constituent.M2,
    Constituent.S2,
    Constituent.K2,
)

MINOR_CONSTITUENTS = (
    Constituent.MM,
    Constituent.MF,
    Constituent.M4,
    Constituent.MN4,
    Constituent.MS4,
    Constituent.TWO_N2,
    Constituent.S1,
)


def _lookup(table: dict, table_name: str, name):
    try:
        constituent = Constituent.parse(name)
    except UnhandledConstituentError:
        raise MissingConstituentError(canonical_name(name), table_name) from None
    try:
        return table[constituent]
    except KeyError:
        raise MissingConstituentError(constituent.value, table_name) from None


def species_type(name) -> TidalSpecies:
    """Tidal species (0 long period, 1 diurnal, 2 semi-diurnal) of a constituent."""
    return _lookup(TIDAL_SPECIES_TYPE, "tidal species type", name)


def potential_amplitude(name) -> float:
    """Equilibrium tidal potential amplitude of a constituent in metres."""
    return _lookup(TIDAL_POTENTIAL_AMPLITUDES, "tidal potential amplitude", name)


def orbital_frequency(name) -> float:
    """Angular frequency of a constituent in rad/s."""
    return _lookup(ORBITAL_FREQUENCIES, "orbital frequency", name)


class OrderedConstituentSet:
    """Insertion-ordered, deduplicated collection of constituents.

    The order constituents are first added in is the order they are written
    to bctides.in, so it is kept explicitly as a sequence alongside a
    membership index.
    """

    def __init__(self, constituents: Iterable = ()):
        self._items: List[Constituent] = []
        self._index = set()
        self.update(constituents)

    def add(self, constituent) -> None:
        constituent = Constituent.parse(constituent)
        if constituent not in self._index:
            self._index.add(constituent)
            self._items.append(constituent)

    def update(self, constituents: Iterable) -> None:
        for constituent in constituents:
            self.add(constituent)

    def names(self) -> List[str]:
        """Canonical names in insertion order."""
        return [c.value for c in self._items]

    def __contains__(self, constituent) -> bool:
        try:
            return Constituent.parse(constituent) in self._index
        except UnhandledConstituentError:
            return False

    def __iter__(self) -> Iterator[Constituent]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Constituent:
        return self._items[index]

    def __eq__(self, other) -> bool:
        if isinstance(other, OrderedConstituentSet):
            return self._items == other._items
        if isinstance(other, (list, tuple)):
            try:
                return self._items == [Constituent.parse(c) for c in other]
            except UnhandledConstituentError:
                return False
        return NotImplemented

    def __repr__(self) -> str:
        return f"OrderedConstituentSet({self.names()})"
