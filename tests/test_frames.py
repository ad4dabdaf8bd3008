import numpy as np
import polars as pl
import pytest
from polars.testing import assert_frame_equal

from torusgrid.concrete.frames import (
    frame_from_state,
    state_from_frame,
    torus_wrap,
    torus_wrap_expr,
)

LABELS = ["pos_x", "pos_y", "size"]


def test_state_from_frame_orders_by_labels():
    frame = pl.DataFrame({"size": [5.0, 6.0], "pos_y": [3, 4], "pos_x": [1.0, 2.0]})
    state = state_from_frame(frame, LABELS)
    assert state.dtype == np.float32
    np.testing.assert_array_equal(state, [[1.0, 3.0, 5.0], [2.0, 4.0, 6.0]])
    assert state_from_frame(frame, LABELS, dtype=np.float64).dtype == np.float64


def test_state_from_frame_missing_column():
    with pytest.raises(ValueError):
        state_from_frame(pl.DataFrame({"pos_x": [1.0]}), LABELS)


def test_frame_from_state():
    state = np.array([[1.0, 3.0, 5.0], [2.0, 4.0, 6.0]])
    assert_frame_equal(
        frame_from_state(state, LABELS),
        pl.DataFrame({"pos_x": [1.0, 2.0], "pos_y": [3.0, 4.0], "size": [5.0, 6.0]}),
    )
    with pytest.raises(ValueError):
        frame_from_state(state, LABELS[:2])


def test_empty_frame():
    frame = pl.DataFrame(schema={label: pl.Float64 for label in LABELS})
    state = state_from_frame(frame, LABELS)
    assert state.shape == (0, 3)
    assert frame_from_state(state, LABELS).shape == (0, 3)


def test_torus_wrap_numpy_and_polars_agree():
    values = np.array([-1.5, 0.0, 9.5, 10.0, 23.0, -20.0])
    wrapped = torus_wrap(values, 0.0, 10.0)
    np.testing.assert_allclose(wrapped, [8.5, 0.0, 9.5, 0.0, 3.0, 0.0])
    assert ((wrapped >= 0.0) & (wrapped < 10.0)).all()

    frame = pl.DataFrame({"x": values}).with_columns(torus_wrap_expr("x", 0.0, 10.0))
    np.testing.assert_allclose(frame["x"].to_numpy(), wrapped)


def test_torus_wrap_shifted_range():
    np.testing.assert_allclose(
        torus_wrap([-5200.0, 5120.0, 0.0], -5120.0, 5120.0), [5040.0, -5120.0, 0.0]
    )
