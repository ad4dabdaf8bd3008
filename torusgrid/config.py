"""
Immutable configuration objects for the grid interaction engine.

Classes:
    GridConfig:
        Grid geometry (cells, per-cell capacity, cell size). Fixed for the
        lifetime of one engine; `width * height * capacity` bounds every grid
        buffer the engine allocates.
    StencilConfig:
        Which state channels the neighbor stencil reads (positions, mass) and
        writes (force components), plus the softening constant and the opt-in
        variations of the force law.
    TorusBoundary:
        Periodic wrap of one labelled position channel into [low, high).

All three are frozen dataclasses validated once in `__post_init__`; invalid
values raise ValueError before any computation runs.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar

import polars as pl

from torusgrid.concrete.frames import torus_wrap_expr
from torusgrid.types_ import CellSize, DataFrame

# Default layout of the reference state vector.
DEFAULT_STATE_LABELS = ("pos_x", "pos_y", "vel_x", "vel_y", "size")


@dataclass(frozen=True, slots=True)
class GridConfig:
    """Geometry of a fixed-capacity torus grid.

    Parameters
    ----------
    width : int
        Number of cells along x.
    height : int
        Number of cells along y.
    capacity : int
        Number of slots per cell.
    cell_size : tuple[float, float]
        Cell extent along x and y in world units.
    """

    width: int
    height: int
    capacity: int
    cell_size: CellSize

    def __post_init__(self) -> None:
        for name in ("width", "height", "capacity"):
            value = getattr(self, name)
            if isinstance(value, bool) or int(value) != value or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
            object.__setattr__(self, name, int(value))
        if len(self.cell_size) != 2:
            raise ValueError("cell_size must contain exactly two values")
        cell_w, cell_h = (float(v) for v in self.cell_size)
        if not (cell_w > 0 and cell_h > 0):
            raise ValueError(f"cell_size values must be positive, got {self.cell_size!r}")
        object.__setattr__(self, "cell_size", (cell_w, cell_h))

    @property
    def shape(self) -> tuple[int, int, int]:
        """Leading dimensions of every grid buffer: (height, width, capacity)."""
        return (self.height, self.width, self.capacity)

    @property
    def n_cells(self) -> int:
        return self.width * self.height

    @property
    def n_slots(self) -> int:
        return self.width * self.height * self.capacity

    @property
    def extent(self) -> tuple[float, float]:
        """World size of one period along x and y."""
        return (self.width * self.cell_size[0], self.height * self.cell_size[1])


@dataclass(frozen=True, slots=True)
class StencilConfig:
    """Channels and constants of the softened inverse-square force law.

    Parameters
    ----------
    pos_x, pos_y : int
        State channels holding the agent position.
    mass : int
        State channel holding the source mass of a neighbor.
    force_x, force_y : int
        Output channels that receive the accumulated force. Every other
        output channel is zero.
    softening : float
        Added to the squared distance before the reciprocal. Must be > 0.
    exclude_self : bool
        Mask the capacity diagonal at offset (0, 0) so a slot does not
        interact with itself. Off by default.
    periodic_deltas : bool
        Fold every displacement onto its nearest periodic image, for any
        range the positions are stored in. Off by default, in which case the
        raw difference of stored positions is used.
    """

    pos_x: int = 0
    pos_y: int = 1
    mass: int = 4
    force_x: int = 2
    force_y: int = 3
    softening: float = 0.01
    exclude_self: bool = False
    periodic_deltas: bool = False

    channel_names: ClassVar[tuple[str, ...]] = (
        "pos_x",
        "pos_y",
        "mass",
        "force_x",
        "force_y",
    )

    def __post_init__(self) -> None:
        for name in self.channel_names:
            value = getattr(self, name)
            if isinstance(value, bool) or int(value) != value or value < 0:
                raise ValueError(
                    f"{name} channel must be a non-negative integer, got {value!r}"
                )
            object.__setattr__(self, name, int(value))
        if not self.softening > 0:
            raise ValueError("softening must be strictly positive")
        if self.force_x == self.force_y:
            raise ValueError("force_x and force_y must be distinct channels")

    @property
    def channels(self) -> tuple[int, ...]:
        return tuple(getattr(self, name) for name in self.channel_names)

    def check_state_dims(self, state_dims: int) -> None:
        """Raise ValueError if any channel falls outside a D-wide state."""
        out_of_range = [
            name for name in self.channel_names if getattr(self, name) >= state_dims
        ]
        if out_of_range:
            raise ValueError(
                f"Channels {', '.join(out_of_range)} are out of range for a "
                f"state with {state_dims} dimensions"
            )

    @classmethod
    def from_labels(
        cls,
        labels: Sequence[str],
        *,
        pos_x: str = "pos_x",
        pos_y: str = "pos_y",
        mass: str = "size",
        force_x: str = "vel_x",
        force_y: str = "vel_y",
        softening: float = 0.01,
        exclude_self: bool = False,
        periodic_deltas: bool = False,
    ) -> StencilConfig:
        """Resolve channel indices by name from a labelled state layout."""
        labels = list(labels)
        missing = [
            label
            for label in (pos_x, pos_y, mass, force_x, force_y)
            if label not in labels
        ]
        if missing:
            raise ValueError(f"Unknown state labels: {', '.join(missing)}")
        return cls(
            pos_x=labels.index(pos_x),
            pos_y=labels.index(pos_y),
            mass=labels.index(mass),
            force_x=labels.index(force_x),
            force_y=labels.index(force_y),
            softening=softening,
            exclude_self=exclude_self,
            periodic_deltas=periodic_deltas,
        )


@dataclass(frozen=True, slots=True)
class TorusBoundary:
    """Periodic boundary on one position column: values wrap into [low, high)."""

    target: str
    low: float
    high: float

    def __post_init__(self) -> None:
        if not self.low < self.high:
            raise ValueError(
                f"Boundary range for {self.target!r} must satisfy low < high, "
                f"got [{self.low}, {self.high})"
            )

    @property
    def period(self) -> float:
        return self.high - self.low

    def expr(self) -> pl.Expr:
        return torus_wrap_expr(self.target, self.low, self.high)

    def apply(self, frame: DataFrame) -> DataFrame:
        if self.target not in frame.columns:
            raise ValueError(f"Column {self.target!r} is not present in the frame")
        return frame.with_columns(self.expr())
