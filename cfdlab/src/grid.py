"""
Uniform cell-centred grids for 1D and 2D finite-volume domains.

Convention (1D, N cells):
    face:  |---f0---|---f1---|--- ... ---|---fN---|
    cell:     P0       P1        ...        P(N-1)

x_faces has length N+1, x_cells has length N.
"""

import numpy as np
from dataclasses import dataclass
from typing import Tuple


def _readonly(a: np.ndarray) -> np.ndarray:
    a.flags.writeable = False
    return a


def _check_positive(name: str, value, integer: bool = False):
    if integer and (isinstance(value, bool) or int(value) != value):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if not value > 0:
        raise ValueError(f"{name} must be positive, got {value!r}")


@dataclass(frozen=True)
class Grid1D:
    """
    Immutable uniform 1D grid.

    - n_cells: Number of cells
    - length: Domain length
    - dx: Cell width (length / n_cells)
    - x_faces: Face locations (n_cells + 1)
    - x_cells: Cell centres (n_cells)
    """
    n_cells: int
    length: float
    dx: float
    x_faces: np.ndarray
    x_cells: np.ndarray

    @classmethod
    def uniform(cls, n_cells: int, length: float) -> 'Grid1D':
        """
        Create a uniform grid on [0, length].

        Args:
            n_cells: Number of cells (> 0)
            length: Domain length (> 0)
        """
        _check_positive('n_cells', n_cells, integer=True)
        _check_positive('length', length)
        n_cells = int(n_cells)
        length = float(length)
        dx = length / n_cells
        x_faces = np.arange(n_cells + 1) * dx
        x_cells = (np.arange(n_cells) + 0.5) * dx
        return cls(n_cells=n_cells, length=length, dx=dx,
                   x_faces=_readonly(x_faces), x_cells=_readonly(x_cells))


@dataclass(frozen=True)
class Grid2D:
    """
    Immutable uniform 2D grid, two independent 1D axes combined row-major.

    Cell (i, j) has flat index j * nx + i, so i (the x-direction) varies
    fastest.
    """
    nx: int
    ny: int
    lx: float
    ly: float
    dx: float
    dy: float
    x_faces: np.ndarray
    y_faces: np.ndarray
    x_cells: np.ndarray
    y_cells: np.ndarray

    @classmethod
    def uniform(cls, nx: int, ny: int, lx: float, ly: float) -> 'Grid2D':
        x_axis = Grid1D.uniform(nx, lx)
        y_axis = Grid1D.uniform(ny, ly)
        return cls(nx=x_axis.n_cells, ny=y_axis.n_cells,
                   lx=x_axis.length, ly=y_axis.length,
                   dx=x_axis.dx, dy=y_axis.dx,
                   x_faces=x_axis.x_faces, y_faces=y_axis.x_faces,
                   x_cells=x_axis.x_cells, y_cells=y_axis.x_cells)

    @property
    def n_cells(self) -> int:
        return self.nx * self.ny

    @property
    def shape(self) -> Tuple[int, int]:
        """Shape of a field reshaped to (ny, nx)."""
        return self.ny, self.nx

    @property
    def x_axis(self) -> Grid1D:
        return Grid1D(self.nx, self.lx, self.dx, self.x_faces, self.x_cells)

    @property
    def y_axis(self) -> Grid1D:
        return Grid1D(self.ny, self.ly, self.dy, self.y_faces, self.y_cells)

    def meshgrid(self) -> Tuple[np.ndarray, np.ndarray]:
        """Flat row-major cell-centre coordinates (x, y), each of length nx*ny."""
        X, Y = np.meshgrid(self.x_cells, self.y_cells)
        return X.ravel(), Y.ravel()


def create_grid_1d(n_cells: int, length: float) -> Grid1D:
    """Create a uniform 1D cell-centred grid."""
    return Grid1D.uniform(n_cells, length)


def create_grid_2d(nx: int, ny: int, lx: float, ly: float) -> Grid2D:
    """Create a uniform 2D cell-centred grid."""
    return Grid2D.uniform(nx, ny, lx, ly)
