import polars as pl
import pytest
from polars.testing import assert_frame_equal

from torusgrid import GridConfig, StencilConfig, TorusBoundary
from torusgrid.config import DEFAULT_STATE_LABELS


class Test_GridConfig:
    def test___init__(self):
        config = GridConfig(width=80, height=64, capacity=8, cell_size=(128, 125))
        assert config.shape == (64, 80, 8)
        assert config.n_cells == 80 * 64
        assert config.n_slots == 80 * 64 * 8
        assert config.cell_size == (128.0, 125.0)
        assert isinstance(config.cell_size[0], float)
        assert config.extent == (10240.0, 8000.0)

    def test_is_frozen(self):
        config = GridConfig(width=2, height=2, capacity=1, cell_size=(1.0, 1.0))
        with pytest.raises(AttributeError):
            config.width = 3

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"width": 0},
            {"height": -1},
            {"capacity": 0},
            {"cell_size": (0.0, 1.0)},
            {"cell_size": (1.0, -2.0)},
        ],
    )
    def test_invalid(self, kwargs: dict):
        params = {"width": 4, "height": 4, "capacity": 2, "cell_size": (1.0, 1.0)}
        params.update(kwargs)
        with pytest.raises(ValueError):
            GridConfig(**params)


class Test_StencilConfig:
    def test_defaults_follow_reference_layout(self):
        stencil = StencilConfig()
        assert stencil.channels == (0, 1, 4, 2, 3)
        assert stencil.softening == 0.01
        assert stencil.exclude_self is False
        assert stencil.periodic_deltas is False
        assert StencilConfig.from_labels(DEFAULT_STATE_LABELS) == stencil

    def test_from_labels(self):
        labels = ["mass", "x", "y", "fx", "fy"]
        stencil = StencilConfig.from_labels(
            labels, pos_x="x", pos_y="y", mass="mass", force_x="fx", force_y="fy"
        )
        assert stencil.channels == (1, 2, 0, 3, 4)
        with pytest.raises(ValueError):
            StencilConfig.from_labels(labels)

    def test_check_state_dims(self):
        stencil = StencilConfig()
        stencil.check_state_dims(5)
        with pytest.raises(ValueError):
            stencil.check_state_dims(4)

    def test_invalid(self):
        with pytest.raises(ValueError):
            StencilConfig(softening=0.0)
        with pytest.raises(ValueError):
            StencilConfig(pos_x=-1)
        with pytest.raises(ValueError):
            StencilConfig(mass=True)
        with pytest.raises(ValueError):
            StencilConfig(force_x=2, force_y=2)


class Test_TorusBoundary:
    def test_apply(self):
        frame = pl.DataFrame({"pos_x": [-1.5, 0.0, 4.0, 10.0, 23.0], "pos_y": [1.0] * 5})
        boundary = TorusBoundary("pos_x", 0.0, 10.0)
        assert boundary.period == 10.0
        assert_frame_equal(
            boundary.apply(frame),
            pl.DataFrame({"pos_x": [8.5, 0.0, 4.0, 0.0, 3.0], "pos_y": [1.0] * 5}),
        )

    def test_invalid(self):
        with pytest.raises(ValueError):
            TorusBoundary("pos_x", 1.0, 1.0)
        with pytest.raises(ValueError):
            TorusBoundary("pos_z", 0.0, 1.0).apply(pl.DataFrame({"pos_x": [0.5]}))
