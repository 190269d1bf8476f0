"""
Nodal factors and equilibrium arguments of tidal constituents.

Implements the classical tidefac astronomy (Schureman's equations) used to
fill the earth tidal potential and boundary forcing frequency sections of
bctides.in. Angles named ``D*`` are in degrees; the undecorated names are the
same quantities in radians and are only used inside trigonometric terms.
Nodal quantities (lunar node and perigee) are sampled at the middle of the
run, mean longitudes at the start hour.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Callable, Dict, Union

import pandas as pd

from . import constituents as catalog
from .constituents import Constituent, TidalSpecies, canonical_name
from .errors import RunDurationError

logger = logging.getLogger(__name__)


def to_utc_datetime(value) -> datetime:
    """Convert anything pandas understands as a timestamp to a naive UTC datetime."""
    timestamp = pd.Timestamp(value)
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert("UTC").tz_localize(None)
    return timestamp.to_pydatetime()


def to_run_duration(value) -> timedelta:
    """Convert a run duration to a timedelta of whole seconds.

    Raises
    ------
    RunDurationError
        If the duration is negative or has a fractional second.
    """
    try:
        duration = pd.Timedelta(value)
    except (TypeError, ValueError) as e:
        raise RunDurationError(f"Invalid run duration {value!r}: {e}") from e
    if pd.isna(duration):
        raise RunDurationError(f"Invalid run duration {value!r}")
    if duration < pd.Timedelta(0):
        raise RunDurationError(f"Run duration must not be negative, got {duration}")
    if duration.value % 1_000_000_000 != 0:
        raise RunDurationError(
            f"Run duration must be a whole number of seconds, got {duration}"
        )
    return duration.to_pytimedelta()


def wrap_degrees(value: float) -> float:
    """Reduce an angle in degrees into [0, 360)."""
    value = math.fmod(value, 360.0)
    if value < 0.0:
        value += 360.0
    if value >= 360.0:
        value = 0.0
    return value


class TidalFactors:
    """Tidal factors of one constituent for a given run window.

    Parameters
    ----------
    start_date : datetime-like
        Start of the simulation (UTC)
    run_duration : timedelta-like
        Length of the simulation
    constituent : str
        Constituent name; a leading underscore is ignored
    """

    def __init__(
        self,
        start_date: Union[datetime, str, pd.Timestamp],
        run_duration: Union[timedelta, str, pd.Timedelta],
        constituent: Union[str, Constituent],
    ):
        self.start_date = to_utc_datetime(start_date)
        self.run_duration = to_run_duration(run_duration)
        self.constituent = canonical_name(constituent)

    def __repr__(self) -> str:
        return (
            f"TidalFactors(start_date={self.start_date.isoformat()}, "
            f"run_duration={self.run_duration}, constituent={self.constituent!r})"
        )

    def species_type(self) -> TidalSpecies:
        return catalog.species_type(self.constituent)

    def potential_amplitude(self) -> float:
        return catalog.potential_amplitude(self.constituent)

    def orbital_frequency(self) -> float:
        return catalog.orbital_frequency(self.constituent)

    def nodal_factor(self) -> float:
        """Amplitude correction for the 18.6 year lunar nodal cycle."""
        constituent = Constituent.parse(self.constituent)
        value = NODAL_FACTORS[constituent](self)
        logger.debug(f"Nodal factor for {constituent}: {value}")
        return value

    def greenwich_factor(self) -> float:
        """Equilibrium argument at Greenwich in degrees, within [0, 360)."""
        constituent = Constituent.parse(self.constituent)
        value = wrap_degrees(GREENWICH_ARGUMENTS[constituent](self))
        logger.debug(f"Equilibrium argument for {constituent}: {value}")
        return value

    # Time arguments

    @property
    def hour(self) -> float:
        return float(self.start_date.hour)

    def hour_middle(self) -> float:
        duration_in_hours = int(self.run_duration.total_seconds()) / 3600.0
        return self.hour + duration_in_hours / 2.0

    def DYR(self) -> float:
        return self.start_date.year - 1900.0

    def DDAY(self) -> int:
        day_of_year = self.start_date.timetuple().tm_yday
        years_since_1901 = self.start_date.year - 1901
        # truncates toward zero
        leap_years_since_1901 = int((years_since_1901 - 1) / 4)
        return day_of_year + leap_years_since_1901 - 1

    # Orbital elements

    def lunar_node(self) -> float:
        return (
            259.1560564
            - 19.328185764 * self.DYR()
            - 0.0529539336 * self.DDAY()
            - 0.0022064139 * self.hour_middle()
        )

    def lunar_perigee(self) -> float:
        return (
            334.3837214
            + 40.66246584 * self.DYR()
            + 0.111404016 * self.DDAY()
            + 0.004641834 * self.hour_middle()
        )

    def lunar_mean_longitude(self) -> float:
        return (
            277.0256206
            + 129.38482032 * self.DYR()
            + 13.176396768 * self.DDAY()
            + 0.549016532 * self.hour
        )

    def solar_perigee(self) -> float:
        return (
            281.2208569
            + 0.01717836 * self.DYR()
            + 0.000047064 * self.DDAY()
            + 0.000001961 * self.hour
        )

    def solar_mean_longitude(self) -> float:
        return (
            280.1895014
            - 0.238724988 * self.DYR()
            + 0.9856473288 * self.DDAY()
            + 0.0410686387 * self.hour
        )

    def DN(self) -> float:
        return self.lunar_node()

    def N(self) -> float:
        return math.radians(self.DN())

    def I(self) -> float:
        """Inclination of the lunar orbit to the equator."""
        return math.acos(0.9136949 - 0.0356926 * math.cos(self.N()))

    def NU(self) -> float:
        # asin(sin(I)) reproduces the reference tool, see DESIGN.md
        return 0.0897056 * math.sin(self.N()) / math.asin(math.sin(self.I()))

    def DNU(self) -> float:
        return math.degrees(self.NU())

    def XI(self) -> float:
        N = self.N()
        return N - 2.0 * math.atan(math.tan(0.64412 * N / 2.0)) - self.NU()

    def DXI(self) -> float:
        return math.degrees(self.XI())

    def DT(self) -> float:
        return 180.0 + self.hour * (360.0 / 24.0)

    def DS(self) -> float:
        return self.lunar_mean_longitude()

    def DP(self) -> float:
        return self.lunar_perigee()

    def P(self) -> float:
        return math.radians(self.DP())

    def DH(self) -> float:
        return self.solar_mean_longitude()

    def DP1(self) -> float:
        return self.solar_perigee()

    def NUP(self) -> float:
        NU = self.NU()
        return math.atan(
            math.sin(NU) / (math.cos(NU) + 0.334766 / math.sin(2.0 * self.I()))
        )

    def DNUP(self) -> float:
        return math.degrees(self.NUP())

    def NUP2(self) -> float:
        NU = self.NU()
        return (
            math.atan(
                math.sin(2.0 * NU)
                / (math.cos(2.0 * NU) + 0.0726184 / math.sin(self.I()) ** 2)
            )
            / 2.0
        )

    def DNUP2(self) -> float:
        return math.degrees(self.NUP2())

    def DPC(self) -> float:
        return self.DP() - self.DXI()

    def PC(self) -> float:
        return math.radians(self.DPC())

    def R(self) -> float:
        PC = self.PC()
        return math.atan(math.sin(2.0 * PC)) / (
            (1.0 / 6.0) * (1.0 / math.tan(0.5 * self.I())) ** 2 - math.cos(2.0 * PC)
        )

    def DR(self) -> float:
        return math.degrees(self.R())

    def Q(self) -> float:
        I = self.I()
        PC = self.PC()
        return math.atan2(
            5.0 * math.cos(I) - 1.0, (7.0 * math.cos(I) + 1.0) * math.cos(PC)
        ) * math.sin(PC)

    def DQ(self) -> float:
        return math.degrees(self.Q())

    # Nodal factor equations

    def EQ73(self) -> float:
        return (2.0 / 3.0 - math.sin(self.I()) ** 2) / 0.5021

    def EQ74(self) -> float:
        return math.sin(self.I()) ** 2 / 0.1578

    def EQ75(self) -> float:
        I = self.I()
        return math.sin(I) * math.cos(I / 2.0) ** 2 / 0.37988

    def EQ76(self) -> float:
        return math.sin(2.0 * self.I()) / 0.7214

    def EQ77(self) -> float:
        I = self.I()
        return math.sin(I) * math.sin(I / 2.0) ** 2 / 0.0164

    def EQ78(self) -> float:
        return math.cos(self.I() / 2.0) ** 4 / 0.91544

    def EQ149(self) -> float:
        return math.cos(self.I() / 2.0) ** 6 / 0.8758

    def EQ197(self) -> float:
        return math.sqrt(2.310 + 1.435 * math.cos(2.0 * (self.P() - self.XI())))

    def EQ207(self) -> float:
        return self.EQ75() * self.EQ197()

    def EQ213(self) -> float:
        tan_half_i = math.tan(self.I() / 2.0)
        return math.sqrt(
            1.0
            - 12.0 * tan_half_i**2 * math.cos(2.0 * self.P())
            + 36.0 * tan_half_i**4
        )

    def EQ215(self) -> float:
        return self.EQ78() * self.EQ213()

    def EQ227(self) -> float:
        sin_2i = math.sin(2.0 * self.I())
        return math.sqrt(
            0.8965 * sin_2i**2 + 0.6001 * sin_2i * math.cos(self.NU()) + 0.1006
        )

    def EQ235(self) -> float:
        sin_i = math.sin(self.I())
        return 0.001 + math.sqrt(
            19.0444 * sin_i**4
            + 2.7702 * sin_i**2 * math.cos(2.0 * self.NU())
            + 0.0981
        )


def tidefac(start_date, run_duration, constituent) -> TidalFactors:
    """Create the tidal factors of a constituent for a run window."""
    return TidalFactors(start_date, run_duration, constituent)


C = Constituent
_Factor = Callable[[TidalFactors], float]

NODAL_FACTORS: Dict[Constituent, _Factor] = {
    C.M2: lambda t: t.EQ78(),
    C.S2: lambda t: 1.0,
    C.N2: lambda t: t.EQ78(),
    C.K1: lambda t: t.EQ227(),
    C.M4: lambda t: t.EQ78() ** 2,
    C.O1: lambda t: t.EQ75(),
    C.M6: lambda t: t.EQ78() ** 3,
    C.MK3: lambda t: t.EQ78() * t.EQ227(),
    C.S4: lambda t: 1.0,
    C.MN4: lambda t: t.EQ78() ** 2,
    C.NU2: lambda t: t.EQ78(),
    C.S6: lambda t: 1.0,
    C.MU2: lambda t: t.EQ78(),
    C.TWO_N2: lambda t: t.EQ78(),
    C.OO1: lambda t: t.EQ77(),
    C.LAMBDA2: lambda t: t.EQ78(),
    C.S1: lambda t: 1.0,
    C.M1: lambda t: t.EQ207(),
    C.J1: lambda t: t.EQ76(),
    C.MM: lambda t: t.EQ73(),
    C.SSA: lambda t: 1.0,
    C.SA: lambda t: 1.0,
    C.MSF: lambda t: t.EQ78(),
    C.MF: lambda t: t.EQ74(),
    C.RHO: lambda t: t.EQ75(),
    C.Q1: lambda t: t.EQ75(),
    C.T2: lambda t: 1.0,
    C.R2: lambda t: 1.0,
    C.TWO_Q1: lambda t: t.EQ75(),
    C.P1: lambda t: 1.0,
    C.TWO_SM2: lambda t: t.EQ78(),
    C.M3: lambda t: t.EQ149(),
    C.L2: lambda t: t.EQ215(),
    C.TWO_MK3: lambda t: t.EQ227() * t.EQ78() ** 2,
    C.K2: lambda t: t.EQ235(),
    C.M8: lambda t: t.EQ78() ** 4,
    C.MS4: lambda t: t.EQ78(),
    C.Z0: lambda t: 1.0,
}

# Equilibrium arguments before reduction into [0, 360)
GREENWICH_ARGUMENTS: Dict[Constituent, _Factor] = {
    C.M2: lambda t: 2.0 * (t.DT() - t.DS() + t.DH()) + 2.0 * (t.DXI() - t.DNU()),
    C.S2: lambda t: 2.0 * t.DT(),
    C.N2: lambda t: (
        2.0 * (t.DT() + t.DH())
        - 3.0 * t.DS()
        + t.DP()
        + 2.0 * (t.DXI() - t.DNU())
    ),
    C.K1: lambda t: t.DT() + t.DH() - 90.0 - t.DNUP(),
    C.M4: lambda t: 4.0 * (t.DT() - t.DS() + t.DH()) + 4.0 * (t.DXI() - t.DNU()),
    C.O1: lambda t: (
        t.DT() - 2.0 * t.DS() + t.DH() + 90.0 + 2.0 * t.DXI() - t.DNU()
    ),
    C.M6: lambda t: 6.0 * (t.DT() - t.DS() + t.DH()) + 6.0 * (t.DXI() - t.DNU()),
    C.MK3: lambda t: (
        3.0 * (t.DT() + t.DH())
        - 2.0 * t.DS()
        - 90.0
        + 2.0 * (t.DXI() - t.DNU())
        - t.DNUP()
    ),
    C.S4: lambda t: 4.0 * t.DT(),
    C.MN4: lambda t: (
        4.0 * (t.DT() + t.DH())
        - 5.0 * t.DS()
        + t.DP()
        + 4.0 * (t.DXI() - t.DNU())
    ),
    C.NU2: lambda t: (
        2.0 * t.DT()
        - 3.0 * t.DS()
        + 4.0 * t.DH()
        - t.DP()
        + 2.0 * (t.DXI() - t.DNU())
    ),
    C.S6: lambda t: 6.0 * t.DT(),
    C.MU2: lambda t: (
        2.0 * (t.DT() + 2.0 * (t.DH() - t.DS())) + 2.0 * (t.DXI() - t.DNU())
    ),
    C.TWO_N2: lambda t: (
        2.0 * (t.DT() - 2.0 * t.DS() + t.DH() + t.DP())
        + 2.0 * (t.DXI() - t.DNU())
    ),
    C.OO1: lambda t: (
        t.DT() + 2.0 * t.DS() + t.DH() - 90.0 - 2.0 * t.DXI() - t.DNU()
    ),
    C.LAMBDA2: lambda t: (
        2.0 * t.DT() - t.DS() + t.DP() + 180.0 + 2.0 * (t.DXI() - t.DNU())
    ),
    C.S1: lambda t: t.DT(),
    C.M1: lambda t: (
        t.DT() - t.DS() + t.DH() - 90.0 + t.DXI() - t.DNU() + t.DQ()
    ),
    C.J1: lambda t: t.DT() + t.DS() + t.DH() - t.DP() - 90.0 - t.DNU(),
    C.MM: lambda t: t.DS() - t.DP(),
    C.SSA: lambda t: 2.0 * t.DH(),
    C.SA: lambda t: t.DH(),
    C.MSF: lambda t: 2.0 * (t.DS() - t.DH()),
    C.MF: lambda t: 2.0 * t.DS() - 2.0 * t.DXI(),
    C.RHO: lambda t: (
        t.DT() + 3.0 * (t.DH() - t.DS()) - t.DP() + 90.0 + 2.0 * t.DXI() - t.DNU()
    ),
    C.Q1: lambda t: (
        t.DT() - 3.0 * t.DS() + t.DH() + t.DP() + 90.0 + 2.0 * t.DXI() - t.DNU()
    ),
    C.T2: lambda t: 2.0 * t.DT() - t.DH() + t.DP1(),
    C.R2: lambda t: 2.0 * t.DT() + t.DH() - t.DP1() + 180.0,
    C.TWO_Q1: lambda t: (
        t.DT()
        - 4.0 * t.DS()
        + t.DH()
        + 2.0 * t.DP()
        + 90.0
        + 2.0 * t.DXI()
        - t.DNU()
    ),
    C.P1: lambda t: t.DT() - t.DH() + 90.0,
    C.TWO_SM2: lambda t: (
        2.0 * (t.DT() + t.DS() - t.DH()) + 2.0 * (t.DNU() - t.DXI())
    ),
    C.M3: lambda t: 3.0 * (t.DT() - t.DS() + t.DH()) + 3.0 * (t.DXI() - t.DNU()),
    C.L2: lambda t: (
        2.0 * (t.DT() + t.DH())
        - t.DS()
        - t.DP()
        + 180.0
        + 2.0 * (t.DXI() - t.DNU())
        - t.DR()
    ),
    C.TWO_MK3: lambda t: (
        3.0 * (t.DT() + t.DH())
        - 4.0 * t.DS()
        + 90.0
        + 4.0 * (t.DXI() - t.DNU())
        + t.DNUP()
    ),
    C.K2: lambda t: 2.0 * (t.DT() + t.DH()) - 2.0 * t.DNUP2(),
    C.M8: lambda t: 8.0 * (t.DT() - t.DS() + t.DH()) + 8.0 * (t.DXI() - t.DNU()),
    C.MS4: lambda t: (
        2.0 * (2.0 * t.DT() - t.DS() + t.DH()) + 2.0 * (t.DXI() - t.DNU())
    ),
    C.Z0: lambda t: 0.0,
}
