"""
NeighborStencil: softened inverse-square forces over a Chebyshev neighborhood.

For every offset (dx, dy) with ``-r <= dx, dy <= r`` the stencil takes a
zero-copy window of the padded grid, forms the [H, W, C, C] outer product of
displacements between every neighbor slot and every centre slot, and sums
``mass * delta / (|delta|^2 + softening)`` over the neighbor slots. The result
has the grid's shape with the force in the two output channels and zeros
elsewhere.

Empty neighbor slots carry zero mass and contribute nothing. Empty centre slots
receive a force too; it is never gathered.

The cost is ``O(H * W * C^2 * (2r + 1)^2)``, so capacity has to stay small
(single digits to low tens) for the grid to beat the all-pairs sum.

On grids no wider than ``2r + 1`` cells one physical neighbor is reached
through more than one offset and is counted once per offset.

There is no self-pair exclusion by default. A slot's own displacement is zero,
so its term vanishes and the softening keeps it finite.
`StencilConfig.exclude_self` masks it out explicitly.

Multi-term sums are accumulated in a fixed offset order here; backends that
reorder the reduction may differ at bit level.
"""

from __future__ import annotations

import numpy as np

from torusgrid.config import GridConfig, StencilConfig
from torusgrid.concrete.padding import neighbor_window, torus_pad
from torusgrid.types_ import GridBuffer


def stencil_offsets(radius: int) -> list[tuple[int, int]]:
    """All (dx, dy) with ``-radius <= dx, dy <= radius``, row-major in dy."""
    if radius < 0:
        raise ValueError(f"radius must be non-negative, got {radius}")
    return [
        (dx, dy)
        for dy in range(-radius, radius + 1)
        for dx in range(-radius, radius + 1)
    ]


def gravity_stencil(
    grid: GridBuffer,
    radius: int,
    padded: GridBuffer | None = None,
    stencil: StencilConfig | None = None,
    config: GridConfig | None = None,
) -> GridBuffer:
    """Accumulate pairwise forces from all cells within `radius`.

    Parameters
    ----------
    grid : np.ndarray
        [H, W, C, D] grid buffer holding the centre slots.
    radius : int
        Chebyshev radius of the neighborhood, in cells.
    padded : np.ndarray | None, optional
        ``torus_pad(grid, radius)``. Built here when omitted.
    stencil : StencilConfig | None, optional
        Channels and constants of the force law, by default StencilConfig().
    config : GridConfig | None, optional
        Grid geometry. Only required with ``stencil.periodic_deltas``.

    Returns
    -------
    np.ndarray
        [H, W, C, D] with forces in ``stencil.force_x``/``stencil.force_y``
        and zeros in every other channel.
    """
    if radius < 0:
        raise ValueError(f"radius must be non-negative, got {radius}")
    if grid.ndim != 4:
        raise ValueError(f"grid must have shape [H, W, C, D], got {grid.shape}")
    if stencil is None:
        stencil = StencilConfig()
    height, width, capacity, state_dims = grid.shape
    stencil.check_state_dims(state_dims)
    if config is not None and config.shape != (height, width, capacity):
        raise ValueError(
            f"Grid of shape {grid.shape} does not match the configured "
            f"geometry {config.shape}"
        )
    if stencil.periodic_deltas and config is None:
        raise ValueError("periodic_deltas requires the grid configuration")
    if not np.issubdtype(grid.dtype, np.floating):
        grid = grid.astype(np.float64)

    if padded is None:
        padded = torus_pad(grid, radius)
    expected = (height + 2 * radius, width + 2 * radius, capacity, state_dims)
    if padded.shape != expected:
        raise ValueError(
            f"Padded grid has shape {padded.shape}, expected {expected} for radius {radius}"
        )

    dtype = grid.dtype
    # Centre (receiver) slots broadcast along the last axis: [H, W, C, 1]
    center_x = grid[..., stencil.pos_x][..., :, None]
    center_y = grid[..., stencil.pos_y][..., :, None]

    acc_x = np.zeros((height, width, capacity), dtype=dtype)
    acc_y = np.zeros((height, width, capacity), dtype=dtype)

    not_self = ~np.eye(capacity, dtype=bool) if stencil.exclude_self else None
    if stencil.periodic_deltas:
        period_x, period_y = (dtype.type(p) for p in config.extent)

    for dx, dy in stencil_offsets(radius):
        window = neighbor_window(padded, radius, dx, dy, grid.shape)

        # Neighbor (source) slots broadcast along the centre axis: [H, W, 1, C]
        neighbor_x = window[..., stencil.pos_x][..., None, :]
        neighbor_y = window[..., stencil.pos_y][..., None, :]
        neighbor_mass = window[..., stencil.mass][..., None, :]

        delta_x = neighbor_x - center_x
        delta_y = neighbor_y - center_y
        if stencil.periodic_deltas:
            # Nearest image, whatever range the stored positions live in
            delta_x = delta_x - period_x * np.round(delta_x / period_x)
            delta_y = delta_y - period_y * np.round(delta_y / period_y)

        # Softening goes in before the reciprocal.
        dist_sq = delta_x * delta_x + delta_y * delta_y + dtype.type(stencil.softening)
        weight = neighbor_mass / dist_sq
        if not_self is not None and dx == 0 and dy == 0:
            weight = np.where(not_self, weight, dtype.type(0))

        acc_x += (weight * delta_x).sum(axis=-1)
        acc_y += (weight * delta_y).sum(axis=-1)

    result = np.zeros_like(grid)
    result[..., stencil.force_x] = acc_x
    result[..., stencil.force_y] = acc_y
    return result
