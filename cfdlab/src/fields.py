"""
Scalar field allocation and analytic initial conditions.

A field is a plain float64 numpy array with one value per cell. 2D fields are
stored flat in row-major order (index j * nx + i, x varying fastest); use
``phi.reshape(grid.shape)`` for an (ny, nx) view.
"""

import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from .grid import Grid2D


class InitialCondition1D(Enum):
    STEP = 'step'
    GAUSSIAN = 'gaussian'
    SINE = 'sine'
    TRIANGLE = 'triangle'


class InitialCondition2D(Enum):
    GAUSSIAN_BLOB = 'gaussian-blob'
    STEP_X = 'step-x'
    DIAGONAL = 'diagonal'


class VelocityField2D(Enum):
    UNIFORM = 'uniform'
    ROTATING = 'rotating'
    SHEAR = 'shear'


def _parse(enum_cls, kind):
    if isinstance(kind, enum_cls):
        return kind
    try:
        return enum_cls(kind)
    except ValueError:
        options = ', '.join(repr(m.value) for m in enum_cls)
        raise ValueError(f"Unknown {enum_cls.__name__}: {kind!r}. "
                         f"Options: {options}") from None


@dataclass(frozen=True)
class IC1DParams:
    """
    Parameters of a 1D initial condition.

    step_pos, gauss_center and gauss_sigma are fractions of the domain length.
    """
    kind: Union[InitialCondition1D, str] = InitialCondition1D.STEP
    step_pos: float = 0.3
    gauss_center: float = 0.5
    gauss_sigma: float = 0.05

    def __post_init__(self):
        object.__setattr__(self, 'kind', _parse(InitialCondition1D, self.kind))
        if self.gauss_sigma <= 0:
            raise ValueError(f"gauss_sigma must be positive, got {self.gauss_sigma}")


def create_field_1d(n: int) -> np.ndarray:
    """Zero-initialised 1D scalar field."""
    return np.zeros(n)


def create_field_2d(nx: int, ny: int) -> np.ndarray:
    """Zero-initialised flat 2D scalar field of length nx * ny."""
    return np.zeros(nx * ny)


def idx_2d(i: int, j: int, nx: int) -> int:
    """Flat index of cell (i, j)."""
    return j * nx + i


def _profile_1d(x: np.ndarray, length: float, params: IC1DParams) -> np.ndarray:
    kind = params.kind
    if kind is InitialCondition1D.STEP:
        return np.where(x < params.step_pos * length, 1.0, 0.0)
    if kind is InitialCondition1D.GAUSSIAN:
        mu = params.gauss_center * length
        sigma = params.gauss_sigma * length
        return np.exp(-0.5 * ((x - mu) / sigma)**2)
    if kind is InitialCondition1D.SINE:
        return np.sin(2 * np.pi * x / length)
    # triangle: peak at mid-domain, half-width 0.2 L
    mid = 0.5 * length
    w = 0.2 * length
    dist = np.abs(x - mid)
    return np.where(dist < w, 1.0 - dist / w, 0.0)


def init_field_1d(x_cells: np.ndarray, length: float,
                  params: IC1DParams) -> np.ndarray:
    """Evaluate an initial condition at the cell-centre positions ``x_cells``."""
    x = np.asarray(x_cells, dtype=float)
    return _profile_1d(x, length, params).astype(float)


def exact_convection_1d(x_cells: np.ndarray, length: float, params: IC1DParams,
                        u: float, t: float) -> np.ndarray:
    """
    Exact solution of pure periodic convection: the initial profile
    translated by u * t and wrapped back into [0, length).
    """
    x = np.mod(np.asarray(x_cells, dtype=float) - u * t, length)
    return _profile_1d(x, length, params).astype(float)


def init_field_2d(grid: Grid2D,
                  kind: Union[InitialCondition2D, str]) -> np.ndarray:
    """Evaluate a 2D initial condition on the cell centres of ``grid``."""
    kind = _parse(InitialCondition2D, kind)
    x, y = grid.meshgrid()
    lx, ly = grid.lx, grid.ly

    if kind is InitialCondition2D.GAUSSIAN_BLOB:
        cx, cy, s = 0.3 * lx, 0.5 * ly, 0.08 * lx
        return np.exp(-0.5 * (((x - cx) / s)**2 + ((y - cy) / s)**2))
    if kind is InitialCondition2D.STEP_X:
        return np.where(x < 0.3 * lx, 1.0, 0.0)
    return np.where(x / lx + y / ly < 0.6, 1.0, 0.0)


def make_velocity_field_2d(grid: Grid2D,
                           kind: Union[VelocityField2D, str]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build a cell-centred velocity field for 2D scalar transport.

    Returns:
        u, v: Flat row-major velocity components
    """
    kind = _parse(VelocityField2D, kind)
    x, y = grid.meshgrid()

    if kind is VelocityField2D.UNIFORM:
        return np.full(grid.n_cells, 1.0), np.full(grid.n_cells, 0.5)
    if kind is VelocityField2D.ROTATING:
        return -(y - 0.5 * grid.ly), x - 0.5 * grid.lx
    return np.sin(np.pi * y / grid.ly), np.zeros(grid.n_cells)
