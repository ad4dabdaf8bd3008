"""Type aliases for the torusgrid package."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import polars as pl
from numpy import ndarray

###----- Scalars -----###
CellSize = tuple[float, float]

###----- Arrays -----###
ArrayLike = ndarray | Sequence
# [N] or [N, 1] per-agent coordinates
PositionArray = ndarray | Sequence[float]
# [N, D] per-agent state vectors
StateArray = ndarray
# [height, width, capacity, D]
GridBuffer = ndarray
# [height, width, capacity, 1], values in {0, 1}
OccupancyMask = ndarray
# [N] flat indices into [0, height * width * capacity)
SlotIndex = ndarray

###----- Frames -----###
DataFrame = pl.DataFrame
Labels = Sequence[str]

INDEX_DTYPE = np.int64

__all__ = [
    "CellSize",
    "ArrayLike",
    "PositionArray",
    "StateArray",
    "GridBuffer",
    "OccupancyMask",
    "SlotIndex",
    "DataFrame",
    "Labels",
    "INDEX_DTYPE",
]
