"""
Error types raised while preparing SCHISM boundary forcing.

Configuration errors are fatal and are always raised before any output is
written. Out-of-range physical parameters are reported by pydantic as
``ValidationError`` when the configuration models are built.
"""


class BctidesError(Exception):
    """Base class for all errors raised by schism_bctides."""


class ConfigurationError(BctidesError, ValueError):
    """The run configuration cannot produce a valid bctides file."""


class MissingConstituentError(ConfigurationError):
    """A constituent was looked up in a table that does not define it."""

    def __init__(self, constituent: str, table: str):
        self.constituent = constituent
        self.table = table
        super().__init__(
            f"Missing constituent {constituent!r} in the {table} table"
        )


class UnhandledConstituentError(ConfigurationError):
    """A constituent name has no nodal factor or equilibrium argument formula."""

    def __init__(self, constituent: str):
        self.constituent = constituent
        super().__init__(f"Unhandled constituent: {constituent!r}")


class UnknownConstituentFieldError(ConfigurationError):
    """A constituent selection was addressed by a field name it does not have."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(
            f"Field name {field_name!r} does not exist in ConstituentsConfig"
        )


class RunDurationError(ConfigurationError):
    """The run duration is negative or not a whole number of seconds."""


class MissingInterpolatorError(ConfigurationError):
    """A tidal boundary uses a database with no interpolator available."""


class HgridError(BctidesError):
    """The horizontal grid file could not be parsed."""
