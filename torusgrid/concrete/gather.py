"""GridGather: map grid-resident results back to agent order."""

from __future__ import annotations

import numpy as np

from torusgrid.types_ import GridBuffer, SlotIndex, StateArray


def grid_to_particles(grid: GridBuffer, index: SlotIndex) -> StateArray:
    """Return ``grid.reshape(-1, D)[index]`` as an [N, D] array.

    Agents that collided during the scatter share one slot and receive
    identical rows; the per-agent distinction is not recoverable.
    """
    if grid.ndim != 4:
        raise ValueError(f"grid must have shape [H, W, C, D], got {grid.shape}")
    index = np.asarray(index)
    if index.ndim != 1:
        raise ValueError(f"index must have shape [N], got {index.shape}")
    state_dims = grid.shape[3]
    flat = grid.reshape(-1, state_dims)
    # No negative indexing: every index must name a slot.
    if index.size and (index.min() < 0 or index.max() >= flat.shape[0]):
        raise IndexError(
            f"Slot indices must lie in [0, {flat.shape[0]}), "
            f"got [{index.min()}, {index.max()}]"
        )
    return flat[index]
