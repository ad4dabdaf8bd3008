"""
torusgrid: fixed-capacity spatial grid interaction engine for agent simulations.

torusgrid makes pairwise, distance-based interactions between large agent
populations on a periodic (torus) plane tractable by binning agents into a
fixed-capacity grid and accumulating forces only from nearby cells. Every step
is a fixed-shape NumPy array transformation, so the whole pipeline vectorizes
without data-dependent branching.

Key Features:
- Scatter agents into a dense [height, width, capacity, D] grid buffer
- Resolve over-capacity collisions by averaging (bounded, documented loss)
- Build a periodically wrapped halo once per step for zero-copy neighbor windows
- Accumulate softened inverse-square forces over a Chebyshev neighborhood
- Gather grid results back to the original agent order
- Polars helpers for labelled agent state and torus boundaries

Main Components:
- GridConfig: Immutable grid geometry
- StencilConfig: Channels and constants of the force law
- GridEngine: NumPy implementation of the scatter/pad/stencil/gather pipeline

Usage:

    import numpy as np
    from torusgrid import GridConfig, GridEngine

    engine = GridEngine(GridConfig(width=80, height=64, capacity=8, cell_size=(128.0, 125.0)))
    forces = engine.interact(state, radius=1)  # state: [N, 5] pos_x, pos_y, vel_x, vel_y, size

Note: the engine holds no state between calls; every grid buffer is created
fresh from the agent batch it is given.
"""

from __future__ import annotations

import os

# Enable runtime type checking if requested via environment variable
if os.getenv("TORUSGRID_RUNTIME_TYPECHECKING", "").lower() in ("1", "true", "yes"):
    from beartype import BeartypeConf
    from beartype.claw import beartype_this_package

    beartype_this_package(conf=BeartypeConf(is_pep484_tower=True))

from torusgrid.config import GridConfig, StencilConfig, TorusBoundary
from torusgrid.concrete.engine import GridEngine
from torusgrid.concrete.gather import grid_to_particles
from torusgrid.concrete.padding import neighbor_window, shift_grid, torus_pad
from torusgrid.concrete.scatter import (
    GridScatterResult,
    cell_coordinates,
    particles_to_grid,
)
from torusgrid.concrete.stencil import gravity_stencil, stencil_offsets

__all__ = [
    "GridConfig",
    "StencilConfig",
    "TorusBoundary",
    "GridEngine",
    "GridScatterResult",
    "cell_coordinates",
    "particles_to_grid",
    "torus_pad",
    "neighbor_window",
    "shift_grid",
    "gravity_stencil",
    "stencil_offsets",
    "grid_to_particles",
]

__version__ = "0.1.0.dev0"
