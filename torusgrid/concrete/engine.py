"""
NumPy implementation of the grid interaction engine.

This module provides GridEngine, which binds one GridConfig and one
StencilConfig to the pipeline stages in this package:

    particles_to_grid → torus_pad → gravity_stencil → grid_to_particles

Usage:

    from torusgrid import GridConfig, GridEngine, StencilConfig

    config = GridConfig(width=80, height=64, capacity=8, cell_size=(128.0, 125.0))
    engine = GridEngine(config, n_agents=1000, state_dims=5)

    forces = engine.interact(state, radius=1)
    state[:, 2:4] += forces[:, 2:4] * dt

The engine keeps no state between calls, so one instance can be shared freely
across threads.
"""

from __future__ import annotations

from collections.abc import Sequence
from warnings import warn

import numpy as np

from torusgrid.abstract.engine import AbstractGridEngine
from torusgrid.config import GridConfig, StencilConfig
from torusgrid.concrete.frames import frame_from_state, state_from_frame
from torusgrid.concrete.gather import grid_to_particles
from torusgrid.concrete.padding import torus_pad
from torusgrid.concrete.scatter import GridScatterResult, particles_to_grid
from torusgrid.concrete.stencil import gravity_stencil
from torusgrid.types_ import (
    DataFrame,
    GridBuffer,
    PositionArray,
    SlotIndex,
    StateArray,
)
from torusgrid.utils import copydoc

# Above this capacity the C^2 pairwise term usually outweighs the savings of
# the grid over the all-pairs sum.
CAPACITY_SIZING_LIMIT = 32


@copydoc(AbstractGridEngine)
class GridEngine(AbstractGridEngine):
    """NumPy-based implementation of AbstractGridEngine."""

    def __init__(
        self,
        config: GridConfig,
        stencil: StencilConfig | None = None,
        n_agents: int | None = None,
        state_dims: int | None = None,
    ) -> None:
        super().__init__(
            config, stencil=stencil, n_agents=n_agents, state_dims=state_dims
        )
        if config.capacity > CAPACITY_SIZING_LIMIT:
            warn(
                f"Grid capacity {config.capacity} exceeds {CAPACITY_SIZING_LIMIT}; "
                "the stencil cost grows with capacity squared",
                RuntimeWarning,
                stacklevel=2,
            )

    def check_batch(self, state: StateArray) -> StateArray:
        state = np.asarray(state)
        if state.ndim != 2:
            raise ValueError(f"state must have shape [N, D], got {state.shape}")
        n_agents, state_dims = state.shape
        if self._n_agents is not None and n_agents != self._n_agents:
            raise ValueError(
                f"Expected {self._n_agents} agents, got a batch of {n_agents}"
            )
        if self._state_dims is not None and state_dims != self._state_dims:
            raise ValueError(
                f"Expected {self._state_dims} state dimensions, got {state_dims}"
            )
        self._stencil.check_state_dims(state_dims)
        return state

    def scatter(
        self, pos_x: PositionArray, pos_y: PositionArray, state: StateArray
    ) -> GridScatterResult:
        state = self.check_batch(state)
        return particles_to_grid(pos_x, pos_y, state, self._config)

    def pad(self, grid: GridBuffer, pad: int) -> GridBuffer:
        return torus_pad(grid, pad)

    def stencil(
        self, grid: GridBuffer, radius: int, padded: GridBuffer | None = None
    ) -> GridBuffer:
        return gravity_stencil(
            grid, radius, padded=padded, stencil=self._stencil, config=self._config
        )

    def gather(self, grid: GridBuffer, index: SlotIndex) -> StateArray:
        return grid_to_particles(grid, index)

    def interact_frame(
        self, frame: DataFrame, labels: Sequence[str], radius: int = 1
    ) -> DataFrame:
        """Run `interact` on a frame with one column per state channel.

        Parameters
        ----------
        frame : pl.DataFrame
            One row per agent.
        labels : Sequence[str]
            Column names in state-channel order; the stencil's channel indices
            refer to this order.
        radius : int, optional
            Stencil radius in cells, by default 1

        Returns
        -------
        pl.DataFrame
            Same labels, forces in the output channels, zeros elsewhere.
        """
        state = state_from_frame(frame, labels)
        return frame_from_state(self.interact(state, radius), labels)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(config={self._config!r}, "
            f"stencil={self._stencil!r})"
        )
