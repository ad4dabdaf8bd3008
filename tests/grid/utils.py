import numpy as np

LABELS = ["pos_x", "pos_y", "vel_x", "vel_y", "size"]


def make_state(positions, mass=1.0, dtype=np.float64) -> np.ndarray:
    """[N, 5] state with the given positions, zero velocity and constant mass."""
    positions = np.asarray(positions, dtype=dtype).reshape(-1, 2)
    state = np.zeros((positions.shape[0], len(LABELS)), dtype=dtype)
    state[:, 0:2] = positions
    state[:, 4] = mass
    return state
