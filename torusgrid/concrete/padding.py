"""
TorusPadding: periodic halo around a grid buffer.

The padded buffer is built once per step. Every neighbor offset of the stencil
is then a plain slice of it (a view, no copy), so the wraparound arithmetic is
paid once instead of once per offset.
"""

from __future__ import annotations

import numpy as np

from torusgrid.types_ import GridBuffer


def torus_pad(grid: GridBuffer, pad: int) -> GridBuffer:
    """Surround `grid` with a `pad`-wide periodic halo.

    Parameters
    ----------
    grid : np.ndarray
        [height, width, capacity, D] grid buffer.
    pad : int
        Halo width in cells along both spatial axes.

    Returns
    -------
    np.ndarray
        [height + 2*pad, width + 2*pad, capacity, D]. ``padded[pad + h, pad + w]``
        is ``grid[h, w]``; halo cells are verbatim copies of the opposite edge.
        With ``pad == 0`` the input object itself is returned.
    """
    if pad < 0:
        raise ValueError(f"pad must be non-negative, got {pad}")
    if grid.ndim != 4:
        raise ValueError(f"grid must have shape [H, W, C, D], got {grid.shape}")
    if pad == 0:
        return grid
    return np.pad(grid, ((pad, pad), (pad, pad), (0, 0), (0, 0)), mode="wrap")


def neighbor_window(
    padded: GridBuffer, pad: int, dx: int, dy: int, shape: tuple[int, ...]
) -> GridBuffer:
    """View of `padded` aligned with the centre grid shifted by (dx, dy).

    ``window[h, w]`` is the cell at ``((h + dy) mod height, (w + dx) mod width)``
    of the unpadded grid, for ``|dx|, |dy| <= pad``.
    """
    if abs(dx) > pad or abs(dy) > pad:
        raise ValueError(f"Offset ({dx}, {dy}) exceeds the halo width {pad}")
    height, width = shape[0], shape[1]
    return padded[pad + dy : pad + dy + height, pad + dx : pad + dx + width]


def shift_grid(grid: GridBuffer, dx: int, dy: int) -> GridBuffer:
    """Periodic roll so that ``shifted[h, w] == grid[(h + dy) % H, (w + dx) % W]``.

    Copies the buffer; the stencil uses `neighbor_window` instead.
    """
    if dx == 0 and dy == 0:
        return grid
    return np.roll(grid, shift=(-dy, -dx), axis=(0, 1))
