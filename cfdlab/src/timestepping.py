"""
Explicit time-step limits and dimensionless numbers.

These are queries only: nothing here enforces a limit. The caller picks dt
before a run.
"""

import math
import numpy as np

from .grid import Grid2D

# Guards against a zero velocity in the convective limit
VELOCITY_FLOOR = 1e-30

# Safety factor applied to the explicit diffusion limit dx^2 / (2 Gamma)
DIFFUSION_SAFETY = 0.4


def max_stable_dt(dx: float, u: float, courant: float, gamma: float = 0.0) -> float:
    """
    Largest stable explicit time step.

        dt_conv = C * dx / |u|
        dt_diff = 0.4 * dx^2 / (2 * Gamma)     (only when Gamma > 0)
    """
    dt = courant * dx / max(abs(u), VELOCITY_FLOOR)
    if gamma > 0:
        dt_diff = DIFFUSION_SAFETY * dx * dx / (2 * gamma)
        dt = min(dt, dt_diff)
    return dt


def max_stable_dt_2d(grid: Grid2D, u: np.ndarray, v: np.ndarray,
                     courant: float = 0.4, gamma: float = 0.0) -> float:
    """
    Stable explicit step for 2D transport, based on the largest |u| + |v|
    and the smaller cell width.
    """
    speed = float(np.max(np.abs(u) + np.abs(v))) if np.size(u) else 0.0
    h = min(grid.dx, grid.dy)
    dt = courant * h / max(speed, 1e-10)
    if gamma > 0:
        dt = min(dt, 0.25 * h * h / gamma)
    return dt


def courant_number(u: float, dt: float, dx: float) -> float:
    """C = |u| dt / dx"""
    return abs(u) * dt / dx


def diffusion_number(gamma: float, dt: float, dx: float) -> float:
    """d = Gamma dt / dx^2, stable for explicit Euler when d <= 0.5"""
    return gamma * dt / (dx * dx)


def peclet_number(u: float, dx: float, gamma: float) -> float:
    """
    Cell Peclet number |u| dx / Gamma; infinite for pure convection.
    """
    if gamma == 0:
        return math.inf
    return abs(u) * dx / gamma
