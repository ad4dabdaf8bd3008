import numpy as np
import polars as pl
import pytest
from polars.testing import assert_frame_equal

from torusgrid import (
    GridConfig,
    GridEngine,
    StencilConfig,
    gravity_stencil,
    grid_to_particles,
    particles_to_grid,
)
from torusgrid.abstract import AbstractGridEngine
from tests.grid.utils import LABELS, make_state


@pytest.fixture
def config() -> GridConfig:
    return GridConfig(width=6, height=5, capacity=3, cell_size=(2.0, 2.0))


@pytest.fixture
def state() -> np.ndarray:
    rng = np.random.default_rng(3)
    state = make_state(rng.uniform(-6.0, 18.0, size=(40, 2)))
    state[:, 2:4] = rng.normal(size=(40, 2))
    state[:, 4] = rng.uniform(1.0, 10.0, 40)
    return state


class Test_GridEngine:
    def test___init__(self, config: GridConfig):
        engine = GridEngine(config)
        assert isinstance(engine, AbstractGridEngine)
        assert engine.config is config
        assert engine.stencil_config == StencilConfig()
        assert engine.n_agents is None
        assert engine.state_dims is None
        assert "GridEngine" in repr(engine)
        assert engine.__doc__.startswith(AbstractGridEngine.__doc__)

    def test_interact_matches_pipeline(self, config: GridConfig, state: np.ndarray):
        engine = GridEngine(config, n_agents=40, state_dims=5)
        forces = engine.interact(state, radius=1)

        grid, _, index = particles_to_grid(state[:, 0], state[:, 1], state, config)
        expected = grid_to_particles(gravity_stencil(grid, 1), index)
        np.testing.assert_array_equal(forces, expected)
        assert forces.shape == state.shape
        assert not forces[:, [0, 1, 4]].any()
        assert np.isfinite(forces).all()

    def test_stages(self, config: GridConfig, state: np.ndarray):
        engine = GridEngine(config)
        grid, mask, index = engine.scatter(state[:, 0], state[:, 1], state)
        assert grid.shape == (5, 6, 3, 5)
        assert mask.shape == (5, 6, 3, 1)
        padded = engine.pad(grid, 2)
        assert padded.shape == (9, 10, 3, 5)
        assert engine.pad(grid, 0) is grid
        result = engine.stencil(grid, 2, padded=padded)
        np.testing.assert_array_equal(result, engine.stencil(grid, 2))
        assert engine.gather(result, index).shape == state.shape

    def test_declared_shapes_are_enforced(self, config: GridConfig, state: np.ndarray):
        engine = GridEngine(config, n_agents=41, state_dims=5)
        with pytest.raises(ValueError):
            engine.interact(state)
        engine = GridEngine(config, n_agents=40, state_dims=6)
        with pytest.raises(ValueError):
            engine.interact(state)
        with pytest.raises(ValueError):
            engine.check_batch(state[:, 0])

    def test_channels_must_fit_state(self, config: GridConfig, state: np.ndarray):
        with pytest.raises(ValueError):
            GridEngine(config, state_dims=4)
        with pytest.raises(ValueError):
            GridEngine(config).interact(state[:, :4])

    def test_invalid_declarations(self, config: GridConfig):
        with pytest.raises(ValueError):
            GridEngine(config, n_agents=-1)
        with pytest.raises(ValueError):
            GridEngine(config, state_dims=0)

    def test_large_capacity_warns(self):
        config = GridConfig(width=2, height=2, capacity=64, cell_size=(1.0, 1.0))
        with pytest.warns(RuntimeWarning):
            GridEngine(config)

    def test_interact_without_agents(self, config: GridConfig):
        engine = GridEngine(config, n_agents=0)
        forces = engine.interact(np.zeros((0, 5)))
        assert forces.shape == (0, 5)

    def test_stateless_between_calls(self, config: GridConfig, state: np.ndarray):
        engine = GridEngine(config)
        first = engine.interact(state)
        engine.interact(state[::-1].copy())
        np.testing.assert_array_equal(engine.interact(state), first)

    def test_interact_frame(self, config: GridConfig, state: np.ndarray):
        engine = GridEngine(config)
        frame = pl.DataFrame({label: state[:, k] for k, label in enumerate(LABELS)})
        result = engine.interact_frame(frame, LABELS, radius=1)
        assert result.columns == LABELS
        assert result.height == 40

        forces = engine.interact(state.astype(np.float32), radius=1)
        expected = pl.DataFrame({label: forces[:, k] for k, label in enumerate(LABELS)})
        assert_frame_equal(result, expected)

    def test_interact_frame_with_custom_layout(self, config: GridConfig):
        labels = ["x", "y", "m", "fx", "fy"]
        stencil = StencilConfig.from_labels(
            labels, pos_x="x", pos_y="y", mass="m", force_x="fx", force_y="fy"
        )
        engine = GridEngine(config, stencil=stencil)
        frame = pl.DataFrame(
            {"x": [1.0, 1.0], "y": [1.0, 3.0], "m": [1.0, 1.0], "fx": [0.0, 0.0], "fy": [0.0, 0.0]}
        )
        result = engine.interact_frame(frame, labels)
        expected = 2.0 / (4.0 + 0.01)
        np.testing.assert_allclose(result["fy"].to_numpy(), [expected, -expected], rtol=1e-6)
        np.testing.assert_allclose(result["fx"].to_numpy(), [0.0, 0.0])
