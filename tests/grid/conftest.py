from __future__ import annotations

import numpy as np
import pytest

from torusgrid import GridConfig
from tests.grid.utils import make_state


@pytest.fixture
def config_4x4() -> GridConfig:
    return GridConfig(width=4, height=4, capacity=2, cell_size=(1.0, 1.0))


@pytest.fixture
def config_2x2() -> GridConfig:
    return GridConfig(width=2, height=2, capacity=2, cell_size=(1.0, 1.0))


@pytest.fixture
def corner_state() -> np.ndarray:
    # One unit-mass agent at the origin of each cell of a 2x2 grid.
    return make_state([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])


@pytest.fixture
def random_grid() -> np.ndarray:
    rng = np.random.default_rng(7)
    return rng.normal(size=(3, 4, 2, 5))
