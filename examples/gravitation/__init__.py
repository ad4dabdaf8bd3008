"""
Universal gravitation on a torus with the fixed-capacity grid engine.

Agents carry the state [pos_x, pos_y, vel_x, vel_y, size]. Each step scatters
them into the grid, accumulates softened inverse-square forces over the 3x3
neighborhood, integrates velocity and position, and wraps positions back into
the world.
"""
