"""
Abstract grid interaction engine.

This module defines the interface of the scatter → pad → stencil → gather
pipeline and the template method that chains the stages. Concrete array
behavior lives in concrete implementations (e.g. the NumPy-backed
:class:`torusgrid.concrete.engine.GridEngine`).

The engine is stateless between calls: configuration is supplied explicitly at
construction and every buffer is created from the batch passed in. Backend or
device selection is the caller's concern and reaches the engine only through
the array types it is given.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from torusgrid.config import GridConfig, StencilConfig
from torusgrid.types_ import (
    GridBuffer,
    PositionArray,
    SlotIndex,
    StateArray,
)


class AbstractGridEngine(ABC):
    """Interface for fixed-capacity torus grid engines.

    Parameters
    ----------
    config : GridConfig
        Grid geometry, fixed for the lifetime of the engine.
    stencil : StencilConfig | None, optional
        Channels and constants of the force law, by default StencilConfig().
    n_agents : int | None, optional
        Declared agent count. When given, every batch must match it.
    state_dims : int | None, optional
        Declared state dimensionality. When given, every batch must match it.
    """

    _config: GridConfig
    _stencil: StencilConfig
    _n_agents: int | None
    _state_dims: int | None

    def __init__(
        self,
        config: GridConfig,
        stencil: StencilConfig | None = None,
        n_agents: int | None = None,
        state_dims: int | None = None,
    ) -> None:
        if n_agents is not None and n_agents < 0:
            raise ValueError(f"n_agents must be non-negative, got {n_agents}")
        if state_dims is not None and state_dims <= 0:
            raise ValueError(f"state_dims must be positive, got {state_dims}")
        self._config = config
        self._stencil = stencil if stencil is not None else StencilConfig()
        self._n_agents = n_agents
        self._state_dims = state_dims
        if state_dims is not None:
            self._stencil.check_state_dims(state_dims)

    @abstractmethod
    def check_batch(self, state: StateArray) -> StateArray:
        """Validate a batch against the declared shapes and return it as an array.

        Raises
        ------
        ValueError
            If the state is not [N, D] or N/D differ from the declared values.
        """

    @abstractmethod
    def scatter(
        self, pos_x: PositionArray, pos_y: PositionArray, state: StateArray
    ) -> tuple[GridBuffer, GridBuffer, SlotIndex]:
        """Map agents to grid slots; returns (grid, mask, index)."""

    @abstractmethod
    def pad(self, grid: GridBuffer, pad: int) -> GridBuffer:
        """Surround the grid with a periodic halo of width `pad`."""

    @abstractmethod
    def stencil(
        self, grid: GridBuffer, radius: int, padded: GridBuffer | None = None
    ) -> GridBuffer:
        """Accumulate neighbor forces within `radius` cells."""

    @abstractmethod
    def gather(self, grid: GridBuffer, index: SlotIndex) -> StateArray:
        """Map grid results back to agent order."""

    def interact(self, state: StateArray, radius: int = 1) -> StateArray:
        """Run the full pipeline on one batch.

        Positions are read from the stencil's position channels. Returns an
        [N, D] array with the force in the stencil's output channels and
        zeros elsewhere.
        """
        state = self.check_batch(state)
        grid, _, index = self.scatter(
            state[:, self._stencil.pos_x], state[:, self._stencil.pos_y], state
        )
        padded = self.pad(grid, radius)
        forces = self.stencil(grid, radius, padded=padded)
        return self.gather(forces, index)

    @property
    def config(self) -> GridConfig:
        return self._config

    @property
    def stencil_config(self) -> StencilConfig:
        return self._stencil

    @property
    def n_agents(self) -> int | None:
        return self._n_agents

    @property
    def state_dims(self) -> int | None:
        return self._state_dims
