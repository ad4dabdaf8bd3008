"""
GridScatter: map agents into a dense fixed-capacity grid buffer.

Each agent is assigned a cell from its position and a slot from its ordinal
index (``index % capacity``). The slot hash does not look at the data, so the
scatter needs no sorting, no per-cell counting pass and no host
synchronisation: it is a single fixed-shape scatter-add.

The price is that slot choice is not density-aware. Agents that land in the
same cell with the same ``index % capacity`` collide and are averaged into one
slot (centre of mass for the position channels). Collisions are a bounded,
documented approximation, never an error. Replacing the fixed slots with
variable-length per-cell lists would break the fixed-shape layout every later
stage relies on.
"""

from typing import NamedTuple

import numpy as np

from torusgrid.config import GridConfig
from torusgrid.types_ import (
    INDEX_DTYPE,
    GridBuffer,
    OccupancyMask,
    PositionArray,
    SlotIndex,
    StateArray,
)


class GridScatterResult(NamedTuple):
    """Output of `particles_to_grid`.

    Attributes
    ----------
    grid : np.ndarray
        [height, width, capacity, D] averaged slot states; empty slots are zero.
    mask : np.ndarray
        [height, width, capacity, 1] occupancy in {0, 1}.
    index : np.ndarray
        [N] flat slot index of every agent, consumed by `grid_to_particles`.
    """

    grid: GridBuffer
    mask: OccupancyMask
    index: SlotIndex


def _as_positions(values: PositionArray, name: str) -> np.ndarray:
    values = np.asarray(values)
    if values.ndim == 2 and values.shape[1] == 1:
        values = values[:, 0]
    if values.ndim != 1:
        raise ValueError(f"{name} must have shape [N] or [N, 1], got {values.shape}")
    if not np.all(np.isfinite(values)):
        raise ValueError(f"{name} contains non-finite values")
    return values


def cell_coordinates(
    pos_x: PositionArray, pos_y: PositionArray, config: GridConfig
) -> tuple[np.ndarray, np.ndarray]:
    """Return the (gx, gy) cell of every agent, folded onto the torus.

    Folding uses floor modulo, so a position half a cell left of the origin on
    a 4-wide grid maps to ``gx = 3``. Positions one full period apart map to
    the same cell.
    """
    pos_x = _as_positions(pos_x, "pos_x")
    pos_y = _as_positions(pos_y, "pos_y")
    if pos_x.shape != pos_y.shape:
        raise ValueError(
            f"pos_x and pos_y disagree on the number of agents: "
            f"{pos_x.shape[0]} != {pos_y.shape[0]}"
        )
    cell_w, cell_h = config.cell_size
    cells_x = np.floor(pos_x / cell_w)
    cells_y = np.floor(pos_y / cell_h)
    if not (np.all(np.isfinite(cells_x)) and np.all(np.isfinite(cells_y))):
        raise ValueError("Positions overflow when divided by the cell size")
    # Fold in floating point so huge coordinates never overflow the cast.
    gx = np.mod(cells_x, config.width).astype(INDEX_DTYPE)
    gy = np.mod(cells_y, config.height).astype(INDEX_DTYPE)
    return gx, gy


def slot_index(
    pos_x: PositionArray, pos_y: PositionArray, config: GridConfig
) -> SlotIndex:
    """Flat index ``(gy * width + gx) * capacity + (i % capacity)`` per agent."""
    gx, gy = cell_coordinates(pos_x, pos_y, config)
    cell = gy * config.width + gx
    slot = np.arange(cell.shape[0], dtype=INDEX_DTYPE) % config.capacity
    return cell * config.capacity + slot


def particles_to_grid(
    pos_x: PositionArray,
    pos_y: PositionArray,
    state: StateArray,
    config: GridConfig,
) -> GridScatterResult:
    """Scatter agent states into a [height, width, capacity, D] grid.

    Parameters
    ----------
    pos_x, pos_y : array-like
        [N] or [N, 1] agent positions in world units.
    state : np.ndarray
        [N, D] agent state vectors. The grid keeps its dtype.
    config : GridConfig
        Grid geometry.

    Returns
    -------
    GridScatterResult
        Averaged grid, {0, 1} occupancy mask and the per-agent flat index.

    Raises
    ------
    ValueError
        If pos_x, pos_y and the state disagree on N, the state is not 2-D,
        or a position is not finite.
    """
    state = np.asarray(state)
    if state.ndim != 2:
        raise ValueError(f"state must have shape [N, D], got {state.shape}")
    if not np.issubdtype(state.dtype, np.floating):
        state = state.astype(np.float64)
    n_agents, state_dims = state.shape

    index = slot_index(pos_x, pos_y, config)
    if index.shape[0] != n_agents:
        raise ValueError(
            f"Got {index.shape[0]} positions for a state of {n_agents} agents"
        )

    grid_flat = np.zeros((config.n_slots, state_dims), dtype=state.dtype)
    np.add.at(grid_flat, index, state)
    counts = np.bincount(index, minlength=config.n_slots).astype(state.dtype)

    # Average colliding agents; empty slots divide by one.
    grid_flat /= np.maximum(counts, 1)[:, None]
    mask_flat = np.minimum(counts, 1)[:, None]

    grid = grid_flat.reshape(config.shape + (state_dims,))
    mask = mask_flat.reshape(config.shape + (1,))
    return GridScatterResult(grid, mask, index)
