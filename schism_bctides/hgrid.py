"""
Open boundary topology of a SCHISM horizontal grid.

Only the open boundary segments are needed to write bctides.in. Reading the
mesh itself is left to the caller; accessor names follow the pylib
``schism_grid`` conventions (``nob``, ``nobn``, ``iobn``) so a loaded pylib
grid can be converted with ``Hgrid.from_grid``.
"""

import logging
from typing import List

import numpy as np
from pydantic import Field, field_validator

from .errors import HgridError
from .types import BctidesBaseModel

logger = logging.getLogger(__name__)


class Hgrid(BctidesBaseModel):
    """Open boundary segments of a SCHISM horizontal grid."""

    open_boundaries: List[List[int]] = Field(
        default_factory=list,
        description="Node ids of each open boundary segment, in mesh order",
    )

    @field_validator("open_boundaries")
    @classmethod
    def check_segments(cls, v):
        for i, segment in enumerate(v):
            if len(segment) == 0:
                raise ValueError(f"Open boundary {i + 1} has no nodes")
        return v

    @property
    def nob(self) -> int:
        """Number of open boundary segments."""
        return len(self.open_boundaries)

    @property
    def nobn(self) -> np.ndarray:
        """Number of nodes on each open boundary segment."""
        return np.array([len(segment) for segment in self.open_boundaries], dtype=int)

    @property
    def iobn(self) -> List[np.ndarray]:
        """Node ids of each open boundary segment."""
        return [np.asarray(segment, dtype=int) for segment in self.open_boundaries]

    @classmethod
    def from_grid(cls, gd) -> "Hgrid":
        """Take the open boundaries of an already loaded grid object.

        Parameters
        ----------
        gd : object
            Grid exposing ``iobn``, a sequence of node id arrays per open
            boundary, such as a pylib ``schism_grid``. Node ids are kept as
            given and passed on to the tidal interpolators unchanged.

        Returns
        -------
        Hgrid
            Grid holding the open boundary segments

        Raises
        ------
        HgridError
            If the object has no open boundary information
        """
        iobn = getattr(gd, "iobn", None)
        if iobn is None:
            raise HgridError(
                f"{type(gd).__name__} has no open boundary node lists (iobn)"
            )
        open_boundaries = [
            [int(node) for node in np.asarray(segment).ravel()]
            for segment in iobn
        ]
        logger.info(f"Found {len(open_boundaries)} open boundaries")
        return cls(open_boundaries=open_boundaries)
