"""
Concrete implementations of torusgrid components.

This package provides the NumPy implementation of the interface defined in
torusgrid.abstract. Each pipeline stage lives in its own module and is usable
on its own; GridEngine composes them.

Modules:
    scatter: Maps agents to fixed-capacity grid slots (GridScatter).
    padding: Builds the periodic halo and neighbor windows (TorusPadding).
    stencil: Accumulates softened inverse-square forces over neighbor cells
        (NeighborStencil).
    gather: Maps grid results back to agent order (GridGather).
    engine: GridEngine, the stateless scatter → pad → stencil → gather façade.
    frames: Polars helpers for labelled agent state and torus boundaries.

Usage:

    from torusgrid.concrete.engine import GridEngine
    from torusgrid.concrete.scatter import particles_to_grid

    scattered = particles_to_grid(pos_x, pos_y, state, config)
    forces = GridEngine(config).interact(state, radius=1)

Note:
    Every function here is a pure array transformation. Results are
    reproducible on one backend; multi-term float sums in the stencil may
    differ at bit level between backends that reorder the reduction.
"""
