"""
Polars helpers for labelled agent state.

Agent state travels through the engine as a dense [N, D] NumPy array. Callers
that keep agents in a Polars DataFrame (one column per state channel) use these
helpers to move between the two representations and to apply periodic
boundaries to position columns.
"""

from __future__ import annotations

import numpy as np
import polars as pl

from torusgrid.types_ import ArrayLike, DataFrame, Labels, StateArray


def state_from_frame(
    frame: DataFrame, labels: Labels, dtype: type = np.float32
) -> StateArray:
    """Stack the labelled columns of `frame` into an [N, D] array.

    Parameters
    ----------
    frame : pl.DataFrame
        One row per agent.
    labels : Sequence[str]
        Column names in state-channel order.
    dtype : type, optional
        dtype of the returned array, by default np.float32

    Returns
    -------
    np.ndarray
        C-contiguous array of shape [len(frame), len(labels)].
    """
    labels = list(labels)
    missing = [label for label in labels if label not in frame.columns]
    if missing:
        raise ValueError(f"Columns {', '.join(missing)} are not present in the frame")
    if not labels:
        return np.zeros((len(frame), 0), dtype=dtype)
    return np.ascontiguousarray(frame.select(labels).to_numpy(), dtype=dtype)


def frame_from_state(state: StateArray, labels: Labels) -> DataFrame:
    """Build a DataFrame with one column per state channel."""
    labels = list(labels)
    state = np.asarray(state)
    if state.ndim != 2 or state.shape[1] != len(labels):
        raise ValueError(
            f"State of shape {state.shape} does not match {len(labels)} labels"
        )
    return pl.DataFrame({label: state[:, k] for k, label in enumerate(labels)})


def torus_wrap(values: ArrayLike, low: float, high: float) -> np.ndarray:
    """Wrap values periodically into [low, high) with floor semantics."""
    values = np.asarray(values)
    period = high - low
    return values - np.floor((values - low) / period) * period


def torus_wrap_expr(column: str, low: float, high: float) -> pl.Expr:
    """Polars expression wrapping `column` periodically into [low, high)."""
    period = high - low
    col = pl.col(column)
    return (col - ((col - low) / period).floor() * period).alias(column)
