"""
Explicit solvers for 1D and 2D scalar transport.

    1D pure convection:        dphi/dt + u dphi/dx = 0
    1D convection-diffusion:   dphi/dt + u dphi/dx = Gamma d2phi/dx2
    2D scalar transport:       dphi/dt + u.grad(phi) = Gamma lap(phi)

Every step reads the previous field and returns a freshly allocated one, so
independent runs never share mutable buffers.

A run goes READY -> RUNNING -> COMPLETED, or -> DIVERGED as soon as a step
produces a non-finite value. Divergence is a run outcome, not an exception.
"""

import dataclasses
import logging
import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union

from .grid import Grid1D, Grid2D
from .schemes import Scheme
from .flux import StepKernels, DEFAULT_KERNELS
from .boundary import (BoundarySpec1D, BoundarySpec2D, DEFAULT_BC_1D,
                       apply_boundary_1d, apply_scalar_boundary_2d)
from .timestepping import max_stable_dt
from .diagnostics import field_is_valid

logger = logging.getLogger(__name__)

# Ghost cells per side for periodic wrapping (TVD reaches two cells upwind)
N_GHOST = 2


class RunStatus(Enum):
    READY = 'ready'
    RUNNING = 'running'
    COMPLETED = 'completed'
    DIVERGED = 'diverged'


@dataclass
class Snapshot:
    """Field recorded at a given simulated time."""
    phi: np.ndarray
    time: float
    step: int


@dataclass
class SimulationHistory:
    """
    Ordered snapshots of a run. The first entry is always the initial field
    at t = 0; a diverged run ends with the first non-finite field.
    """
    snapshots: List[Snapshot]
    final_step: int
    status: RunStatus

    @property
    def diverged(self) -> bool:
        return self.status is RunStatus.DIVERGED

    @property
    def final(self) -> Snapshot:
        return self.snapshots[-1]

    @property
    def times(self) -> np.ndarray:
        return np.array([s.time for s in self.snapshots])


def _check_count(name, value):
    if not (np.isfinite(value) and int(value) == value and value >= 1):
        raise ValueError(f"{name} must be a positive integer, got {value}")


def _check_run_parameters(dt, gamma, n_steps, snapshot_interval):
    if not (np.isfinite(dt) and dt > 0):
        raise ValueError(f"dt must be positive and finite, got {dt}")
    if not (np.isfinite(gamma) and gamma >= 0):
        raise ValueError(f"Diffusion coefficient must be finite and non-negative, got {gamma}")
    _check_count('n_steps', n_steps)
    _check_count('snapshot_interval', snapshot_interval)


@dataclass(frozen=True)
class SimulationConfig:
    """Configuration of a 1D transport run. Read-only during the run."""
    grid: Grid1D
    u: float
    dt: float
    gamma: float = 0.0
    scheme: Union[Scheme, str] = Scheme.UPWIND
    bc: BoundarySpec1D = DEFAULT_BC_1D
    n_steps: int = 100
    snapshot_interval: int = 10

    def __post_init__(self):
        object.__setattr__(self, 'scheme', Scheme.from_name(self.scheme))
        if not np.isfinite(self.u):
            raise ValueError(f"Velocity must be finite, got {self.u}")
        _check_run_parameters(self.dt, self.gamma, self.n_steps, self.snapshot_interval)
        object.__setattr__(self, 'n_steps', int(self.n_steps))
        object.__setattr__(self, 'snapshot_interval', int(self.snapshot_interval))

    @classmethod
    def from_courant(cls, grid: Grid1D, u: float, courant: float,
                     gamma: float = 0.0, **kwargs) -> 'SimulationConfig':
        """Build a configuration whose dt comes from a target Courant number."""
        dt = max_stable_dt(grid.dx, u, courant, gamma)
        return cls(grid=grid, u=u, dt=dt, gamma=gamma, **kwargs)


@dataclass(frozen=True)
class SimulationConfig2D:
    """
    Configuration of a 2D transport run.

    u_field, v_field: Cell-centred velocity components (flat, row-major)
    bc: Scalar edge treatment; None keeps the edges at their initial values
    """
    grid: Grid2D
    u_field: np.ndarray
    v_field: np.ndarray
    dt: float
    gamma: float = 0.0
    scheme: Union[Scheme, str] = Scheme.UPWIND
    n_steps: int = 100
    snapshot_interval: int = 10
    bc: Optional[BoundarySpec2D] = None

    def __post_init__(self):
        scheme = Scheme.from_name(self.scheme)
        if scheme.is_tvd:
            raise ValueError(f"2D transport supports UDS and CDS only, got {scheme.value}")
        object.__setattr__(self, 'scheme', scheme)
        for name in ('u_field', 'v_field'):
            values = np.array(getattr(self, name), dtype=float)
            if values.shape != (self.grid.n_cells,):
                raise ValueError(f"{name} must have shape ({self.grid.n_cells},), "
                                 f"got {values.shape}")
            if not np.all(np.isfinite(values)):
                raise ValueError(f"{name} must contain only finite values")
            values.flags.writeable = False
            object.__setattr__(self, name, values)
        _check_run_parameters(self.dt, self.gamma, self.n_steps, self.snapshot_interval)
        object.__setattr__(self, 'n_steps', int(self.n_steps))
        object.__setattr__(self, 'snapshot_interval', int(self.snapshot_interval))


# --- 1D steps ---

def _face_stencil(phi: np.ndarray, bc: BoundarySpec1D):
    """
    Field to interpolate on, left-cell index of each of the n+1 faces, and
    lookup size. Periodic fields get wrapped ghost cells; otherwise the
    clamped lookups act as ghosts.
    """
    n = len(phi)
    if bc.is_periodic:
        ext = np.take(phi, np.arange(-N_GHOST, n + N_GHOST), mode='wrap')
        return ext, np.arange(N_GHOST - 1, N_GHOST + n), n + 2 * N_GHOST
    return phi, np.arange(-1, n), n


def _as_field(phi, n: int) -> np.ndarray:
    phi = np.asarray(phi, dtype=float)
    if phi.shape != (n,):
        raise ValueError(f"Field must have shape ({n},), got {phi.shape}")
    return phi


def _step_1d(phi, grid: Grid1D, u: float, dt: float, gamma: float,
             scheme: Scheme, bc: BoundarySpec1D,
             kernels: Optional[StepKernels]) -> np.ndarray:
    kernels = kernels if kernels is not None else DEFAULT_KERNELS
    phi = _as_field(phi, grid.n_cells)
    src, faces, n_lookup = _face_stencil(phi, bc)

    with np.errstate(over='ignore', invalid='ignore'):
        phi_f = kernels.face_value(src, faces, u, scheme, n_lookup)
        flux = kernels.convective_flux(u, phi_f)
        if gamma > 0:
            flux = flux - kernels.diffusive_flux(src, faces, gamma, grid.dx, n_lookup)
        flux = np.broadcast_to(np.asarray(flux, dtype=float), faces.shape)

        # face k sits between cells k-1 and k: F_right = flux[1:], F_left = flux[:-1]
        phi_new = kernels.update(phi, flux[1:], flux[:-1], dt, grid.dx)

    phi_new = _as_field(phi_new, grid.n_cells)
    return apply_boundary_1d(phi_new, bc)


def step_1d_convection(phi: np.ndarray, grid: Grid1D, u: float, dt: float,
                       scheme: Union[Scheme, str] = Scheme.UPWIND,
                       bc: BoundarySpec1D = DEFAULT_BC_1D,
                       kernels: Optional[StepKernels] = None) -> np.ndarray:
    """
    One explicit Euler step of 1D convection:
        phi_i^{n+1} = phi_i^n - (dt/dx) * [F_{i+1/2} - F_{i-1/2}],
        F_{i+1/2} = u * phi_f(i+1/2)

    ``phi`` is not modified; ``kernels`` optionally substitutes the step functions.
    """
    return _step_1d(phi, grid, u, dt, 0.0, Scheme.from_name(scheme), bc, kernels)


def step_1d_convection_diffusion(phi: np.ndarray, grid: Grid1D, u: float,
                                 dt: float, gamma: float,
                                 scheme: Union[Scheme, str] = Scheme.UPWIND,
                                 bc: BoundarySpec1D = DEFAULT_BC_1D,
                                 kernels: Optional[StepKernels] = None) -> np.ndarray:
    """
    One explicit Euler step of 1D convection-diffusion:
        phi_i^{n+1} = phi_i^n - (dt/dx)(Fconv_R - Fconv_L) + (dt/dx)(Fdiff_R - Fdiff_L)
    """
    return _step_1d(phi, grid, u, dt, gamma, Scheme.from_name(scheme), bc, kernels)


# --- 2D step ---

def step_2d_transport(phi: np.ndarray, config: SimulationConfig2D) -> np.ndarray:
    """
    One explicit Euler step of 2D convection-diffusion on the interior cells.

    Convection uses directional one-sided differences (UDS) or symmetric
    differences (CDS) per axis; diffusion uses the five-point Laplacian. The
    one-cell frame is set by ``apply_scalar_boundary_2d``.
    """
    grid = config.grid
    dx, dy = grid.dx, grid.dy
    P = _as_field(phi, grid.n_cells).reshape(grid.shape)
    U = config.u_field.reshape(grid.shape)[1:-1, 1:-1]
    V = config.v_field.reshape(grid.shape)[1:-1, 1:-1]

    phi_p = P[1:-1, 1:-1]
    phi_e = P[1:-1, 2:]
    phi_w = P[1:-1, :-2]
    phi_n = P[2:, 1:-1]
    phi_s = P[:-2, 1:-1]

    with np.errstate(over='ignore', invalid='ignore'):
        if config.scheme is Scheme.UPWIND:
            conv_x = np.where(U >= 0, U * (phi_p - phi_w) / dx, U * (phi_e - phi_p) / dx)
            conv_y = np.where(V >= 0, V * (phi_p - phi_s) / dy, V * (phi_n - phi_p) / dy)
        else:
            conv_x = U * (phi_e - phi_w) / (2 * dx)
            conv_y = V * (phi_n - phi_s) / (2 * dy)

        diff_x = config.gamma * (phi_e - 2 * phi_p + phi_w) / (dx * dx)
        diff_y = config.gamma * (phi_n - 2 * phi_p + phi_s) / (dy * dy)

        phi_new = P.copy()
        phi_new[1:-1, 1:-1] = phi_p + config.dt * (-conv_x - conv_y + diff_x + diff_y)

    return apply_scalar_boundary_2d(phi_new, P, grid, config.bc)


# --- Run drivers ---

class TransportSolver(ABC):
    """
    Explicit time loop with snapshot recording and divergence detection.

    Subclasses provide a single pure step.
    """

    def __init__(self, config):
        self.config = config
        self.phi = None
        self.time = 0.0
        self.iteration = 0
        self.status = RunStatus.READY
        self.snapshots: List[Snapshot] = []

    @property
    @abstractmethod
    def n_cells(self) -> int:
        pass

    @abstractmethod
    def _advance(self, phi: np.ndarray) -> np.ndarray:
        """Return the field one step after ``phi``."""
        pass

    def _describe(self) -> str:
        return f"{self.n_cells} cells"

    def set_initial_condition(self, phi0: np.ndarray):
        """Set the initial field and reset the run."""
        phi0 = _as_field(phi0, self.n_cells)
        self.phi = phi0.copy()
        self.time = 0.0
        self.iteration = 0
        self.status = RunStatus.READY
        self.snapshots = [Snapshot(phi=phi0.copy(), time=0.0, step=0)]

    def step(self) -> np.ndarray:
        """Advance one step and return the new field."""
        if self.phi is None:
            raise ValueError("Initial condition must be set before stepping")
        if self.status in (RunStatus.COMPLETED, RunStatus.DIVERGED):
            raise ValueError(f"Run already {self.status.value}; "
                             "set the initial condition again to restart")
        self.phi = self._advance(self.phi)
        self.time += self.config.dt
        self.iteration += 1
        return self.phi

    def solve(self) -> SimulationHistory:
        """
        Run the configured number of steps.

        Returns:
            History with the recorded snapshots and the terminal status
        """
        if self.phi is None:
            raise ValueError("Initial condition must be set before solving")
        if self.status is not RunStatus.READY:
            raise ValueError(f"Run already {self.status.value}; "
                             "set the initial condition again to restart")

        config = self.config
        logger.info("Starting %s run: %s, scheme %s, dt = %.4e, %d steps",
                    type(self).__name__, self._describe(), config.scheme.value,
                    config.dt, config.n_steps)
        self.status = RunStatus.RUNNING

        for step in range(1, config.n_steps + 1):
            phi = self.step()

            if not field_is_valid(phi):
                self.status = RunStatus.DIVERGED
                self.snapshots.append(Snapshot(phi=phi.copy(), time=self.time, step=step))
                logger.warning("Run diverged at step %d (t = %.4e)", step, self.time)
                break

            if step % config.snapshot_interval == 0 or step == config.n_steps:
                self.snapshots.append(Snapshot(phi=phi.copy(), time=self.time, step=step))
                logger.debug("Snapshot at step %d, t = %.4e", step, self.time)
        else:
            self.status = RunStatus.COMPLETED
            logger.info("Run completed after %d steps (t = %.4e)", self.iteration, self.time)

        return SimulationHistory(snapshots=list(self.snapshots),
                                 final_step=self.iteration, status=self.status)


class Solver1D(TransportSolver):
    """1D convection or convection-diffusion, chosen by the diffusion coefficient."""

    def __init__(self, config: SimulationConfig, kernels: Optional[StepKernels] = None):
        super().__init__(config)
        self.grid = config.grid
        self.kernels = kernels if kernels is not None else DEFAULT_KERNELS

    @property
    def n_cells(self) -> int:
        return self.grid.n_cells

    def _advance(self, phi: np.ndarray) -> np.ndarray:
        c = self.config
        if c.gamma > 0:
            return step_1d_convection_diffusion(phi, c.grid, c.u, c.dt, c.gamma,
                                                c.scheme, c.bc, self.kernels)
        return step_1d_convection(phi, c.grid, c.u, c.dt, c.scheme, c.bc, self.kernels)


class Solver2D(TransportSolver):
    """2D scalar transport on a prescribed velocity field."""

    def __init__(self, config: SimulationConfig2D):
        super().__init__(config)
        self.grid = config.grid

    @property
    def n_cells(self) -> int:
        return self.grid.n_cells

    def _describe(self) -> str:
        return f"{self.grid.nx}x{self.grid.ny} cells"

    def _advance(self, phi: np.ndarray) -> np.ndarray:
        return step_2d_transport(phi, self.config)


def run_simulation_1d(phi0: np.ndarray, config: SimulationConfig,
                      kernels: Optional[StepKernels] = None) -> SimulationHistory:
    """Run a 1D simulation from ``phi0`` and return its history."""
    solver = Solver1D(config, kernels)
    solver.set_initial_condition(phi0)
    return solver.solve()


def run_simulation_2d(phi0: np.ndarray, config: SimulationConfig2D) -> SimulationHistory:
    """Run a 2D simulation from ``phi0`` and return its history."""
    solver = Solver2D(config)
    solver.set_initial_condition(phi0)
    return solver.solve()


def compare_schemes(phi0: np.ndarray, config: SimulationConfig,
                    schemes: Iterable[Union[Scheme, str]]) -> Dict[Scheme, SimulationHistory]:
    """
    Run the same configuration once per scheme. Each run owns its own copy
    of the initial field.
    """
    results = {}
    for scheme in schemes:
        scheme = Scheme.from_name(scheme)
        run_config = dataclasses.replace(config, scheme=scheme)
        results[scheme] = run_simulation_1d(np.array(phi0, dtype=float), run_config)
    return results
