"""All-pairs reference for the neighbor stencil.

This module is internal (not part of the public API). It serves as the oracle
the stencil is tested against and as the baseline of the benchmark CLI.

It uses the same force law as the stencil: raw displacement of stored
positions, softening added before the reciprocal, no self-pair exclusion.
"""

from __future__ import annotations

import numba
import numpy as np

from torusgrid.utils import env_flag


def _numba_cache_enabled() -> bool:
    """Return True if Numba on-disk caching should be enabled.

    Controlled via the `TORUSGRID_NUMBA_CACHE` environment variable; enabled
    when unset.

    Notes
    -----
    When enabled, Numba will attempt to write cache files into the module's
    `__pycache__` directory. On read-only installs this may warn and/or fall
    back to no cache.
    """
    return env_flag("TORUSGRID_NUMBA_CACHE", default=True)


@numba.njit(cache=_numba_cache_enabled())
def _pairwise_kernel(pos_x, pos_y, masses, softening):
    n_agents = pos_x.shape[0]
    forces = np.zeros((n_agents, 2), dtype=np.float64)
    for i in range(n_agents):
        fx = 0.0
        fy = 0.0
        for j in range(n_agents):
            delta_x = pos_x[j] - pos_x[i]
            delta_y = pos_y[j] - pos_y[i]
            weight = masses[j] / (delta_x * delta_x + delta_y * delta_y + softening)
            fx += weight * delta_x
            fy += weight * delta_y
        forces[i, 0] = fx
        forces[i, 1] = fy
    return forces


def pairwise_forces_bruteforce(
    positions: np.ndarray, masses: np.ndarray, softening: float = 0.01
) -> np.ndarray:
    """Sum softened inverse-square forces over all agent pairs.

    Parameters
    ----------
    positions : np.ndarray
        [N, 2] agent positions.
    masses : np.ndarray
        [N] agent masses.
    softening : float, optional
        Added to the squared distance, by default 0.01

    Returns
    -------
    np.ndarray
        [N, 2] float64 forces.
    """
    positions = np.asarray(positions, dtype=np.float64)
    masses = np.asarray(masses, dtype=np.float64).ravel()
    if positions.ndim != 2 or positions.shape[1] != 2:
        raise ValueError(f"positions must have shape [N, 2], got {positions.shape}")
    if masses.shape[0] != positions.shape[0]:
        raise ValueError("positions and masses must describe the same agents")
    if not softening > 0:
        raise ValueError("softening must be strictly positive")
    return _pairwise_kernel(
        np.ascontiguousarray(positions[:, 0]),
        np.ascontiguousarray(positions[:, 1]),
        masses,
        float(softening),
    )
