"""
Finite-difference stencils and an explicit 1D heat-equation solver.

FDM approximates derivatives by difference quotients at grid nodes:

    dT/dt = alpha d2T/dx2
    T_i^{n+1} = T_i^n + alpha dt/dx^2 (T_{i+1} - 2 T_i + T_{i-1})

Stable for alpha dt / dx^2 <= 0.5.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .diagnostics import field_is_valid
from .solver import RunStatus, Snapshot, SimulationHistory


@dataclass(frozen=True)
class FDStencil:
    """
    Difference weights: d^k f/dx^k at i ~ sum(w_j f_{i+o_j}) / dx^k
    """
    offsets: Tuple[int, ...]
    weights: Tuple[float, ...]
    order: int          # truncation error order
    deriv_order: int    # which derivative
    formula: str


FD_STENCILS: Dict[str, FDStencil] = {
    'forward-1': FDStencil((0, 1), (-1.0, 1.0), 1, 1,
                           "df/dx ~ (f[i+1] - f[i]) / dx"),
    'backward-1': FDStencil((-1, 0), (-1.0, 1.0), 1, 1,
                            "df/dx ~ (f[i] - f[i-1]) / dx"),
    'central-1': FDStencil((-1, 0, 1), (-0.5, 0.0, 0.5), 2, 1,
                           "df/dx ~ (f[i+1] - f[i-1]) / (2 dx)"),
    'central-2': FDStencil((-1, 0, 1), (1.0, -2.0, 1.0), 2, 2,
                           "d2f/dx2 ~ (f[i+1] - 2 f[i] + f[i-1]) / dx^2"),
}


def apply_stencil(f: np.ndarray, dx: float, stencil: FDStencil) -> np.ndarray:
    """
    Evaluate a stencil at every node where all its offsets are in range.

    Returns:
        Derivative estimates at nodes max(-min_offset, 0) .. n-1-max(max_offset, 0)
    """
    f = np.asarray(f, dtype=float)
    lo = max(-min(stencil.offsets), 0)
    hi = max(max(stencil.offsets), 0)
    n_out = len(f) - lo - hi
    if n_out <= 0:
        raise ValueError(f"Need more than {lo + hi} nodes for this stencil, got {len(f)}")

    result = np.zeros(n_out)
    for offset, weight in zip(stencil.offsets, stencil.weights):
        result += weight * f[lo + offset:lo + offset + n_out]
    return result / dx**stencil.deriv_order


@dataclass(frozen=True)
class HeatConfig:
    """
    Explicit 1D heat-equation run. Boundary nodes are held at bc_left and
    bc_right.
    """
    n: int
    length: float
    alpha: float
    dt: float
    n_steps: int
    snapshot_interval: int = 10
    bc_left: float = 0.0
    bc_right: float = 0.0

    def __post_init__(self):
        if self.n < 3:
            raise ValueError(f"Heat solver needs at least 3 nodes, got {self.n}")
        if self.length <= 0 or self.alpha <= 0 or self.dt <= 0:
            raise ValueError("length, alpha and dt must be positive")
        if self.n_steps < 1 or self.snapshot_interval < 1:
            raise ValueError("n_steps and snapshot_interval must be positive")

    @property
    def dx(self) -> float:
        return self.length / self.n

    @property
    def fourier_number(self) -> float:
        return self.alpha * self.dt / self.dx**2


def _node_positions(n: int, length: float) -> np.ndarray:
    return (np.arange(n) + 0.5) * length / n


def init_heat_gaussian(n: int, length: float, center: Optional[float] = None,
                       sigma: float = 0.05) -> np.ndarray:
    """Gaussian temperature bump; ``center`` defaults to mid-domain."""
    c = 0.5 * length if center is None else center
    x = _node_positions(n, length)
    return np.exp(-(x - c)**2 / (2 * sigma * sigma))


def init_heat_step(n: int, length: float, x_left: Optional[float] = None,
                   x_right: Optional[float] = None) -> np.ndarray:
    """Top-hat: 1 on [x_left, x_right] (default [0.3 L, 0.7 L]), 0 elsewhere."""
    xl = 0.3 * length if x_left is None else x_left
    xr = 0.7 * length if x_right is None else x_right
    x = _node_positions(n, length)
    return np.where((x >= xl) & (x <= xr), 1.0, 0.0)


def heat_max_dt(dx: float, alpha: float, safety: float = 0.4) -> float:
    """Stable explicit step safety * dx^2 / (2 alpha)."""
    return safety * dx * dx / (2 * alpha)


def solve_heat_1d(T0: np.ndarray, config: HeatConfig) -> SimulationHistory:
    """
    Solve the 1D heat equation with explicit Euler and central differences.

    Returns:
        History of temperature snapshots; DIVERGED when the Fourier number
        is too large and the solution overflows
    """
    T = np.array(T0, dtype=float)
    if T.shape != (config.n,):
        raise ValueError(f"T0 must have shape ({config.n},), got {T.shape}")
    r = config.fourier_number

    snapshots = [Snapshot(phi=T.copy(), time=0.0, step=0)]

    for step in range(1, config.n_steps + 1):
        T_new = np.empty_like(T)
        with np.errstate(over='ignore', invalid='ignore'):
            T_new[1:-1] = T[1:-1] + r * (T[2:] - 2 * T[1:-1] + T[:-2])
        T_new[0] = config.bc_left
        T_new[-1] = config.bc_right
        time = step * config.dt

        if not field_is_valid(T_new):
            snapshots.append(Snapshot(phi=T_new, time=time, step=step))
            return SimulationHistory(snapshots, step, RunStatus.DIVERGED)

        T = T_new
        if step % config.snapshot_interval == 0 or step == config.n_steps:
            snapshots.append(Snapshot(phi=T.copy(), time=time, step=step))

    return SimulationHistory(snapshots, config.n_steps, RunStatus.COMPLETED)
