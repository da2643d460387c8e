"""
Boundary conditions for 1D and 2D scalar transport.

Boundary application is pure: every ``apply_*`` function returns a new array
and leaves its input untouched. Edge classes only patch buffers the caller
owns.
"""

import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

from .grid import Grid2D


class BoundaryCondition(ABC):
    """Abstract base class for one edge of the domain."""

    @abstractmethod
    def patch(self, phi: np.ndarray, side: str) -> None:
        """Set the boundary cell of a 1D field in place (side is 'left' or 'right')."""
        pass

    def patch_edge(self, phi: np.ndarray, phi_old: np.ndarray, side: str) -> None:
        """
        Set one edge of a 2D (ny, nx) field in place. The default freezes the
        edge at its previous values in phi_old.
        """
        edge = _edge_index(side, 0)
        phi[edge] = phi_old[edge]


def _edge_index(side: str, offset: int):
    """Index of the edge row/column (offset 0) or the one inside it (offset 1)."""
    if side == 'left':
        return np.s_[:, offset]
    if side == 'right':
        return np.s_[:, -1 - offset]
    if side == 'bottom':
        return np.s_[offset, :]
    if side == 'top':
        return np.s_[-1 - offset, :]
    raise ValueError(f"Unknown side: {side!r}")


class PeriodicBC(BoundaryCondition):
    """
    Periodic edge. Nothing to patch: the solver wraps face lookups during
    flux assembly instead.
    """

    def patch(self, phi: np.ndarray, side: str) -> None:
        pass

    def __repr__(self):
        return 'PeriodicBC()'


class FixedValueBC(BoundaryCondition):
    """Dirichlet edge: the boundary cell is overwritten with a value."""

    def __init__(self, value: float):
        self.value = float(value)

    def patch(self, phi: np.ndarray, side: str) -> None:
        if side == 'left':
            phi[0] = self.value
        elif side == 'right':
            phi[-1] = self.value
        else:
            raise ValueError(f"Unknown side: {side!r}")

    def patch_edge(self, phi: np.ndarray, phi_old: np.ndarray, side: str) -> None:
        phi[_edge_index(side, 0)] = self.value

    def __repr__(self):
        return f'FixedValueBC({self.value})'


class ZeroGradientBC(BoundaryCondition):
    """
    Neumann edge: the adjacent interior value is copied outward. A field
    one cell wide has no interior neighbour and is left as it is.
    """

    def patch(self, phi: np.ndarray, side: str) -> None:
        if side not in ('left', 'right'):
            raise ValueError(f"Unknown side: {side!r}")
        if len(phi) < 2:
            return
        if side == 'left':
            phi[0] = phi[1]
        else:
            phi[-1] = phi[-2]

    def patch_edge(self, phi: np.ndarray, phi_old: np.ndarray, side: str) -> None:
        axis = 1 if side in ('left', 'right') else 0
        if phi.shape[axis] < 2:
            return
        phi[_edge_index(side, 0)] = phi[_edge_index(side, 1)]

    def __repr__(self):
        return 'ZeroGradientBC()'


class NoSlipBC(BoundaryCondition):
    """
    Solid wall for the 2D velocity field. The transported scalar is left
    frozen on this edge.
    """

    def __init__(self, velocity: Tuple[float, float] = (0.0, 0.0)):
        self.velocity = (float(velocity[0]), float(velocity[1]))

    def patch(self, phi: np.ndarray, side: str) -> None:
        raise ValueError(f"{type(self).__name__} is only defined for 2D domains")

    def __repr__(self):
        return f'{type(self).__name__}({self.velocity})'


class LidBC(NoSlipBC):
    """Moving wall (driven lid) for the 2D velocity field."""

    def __init__(self, velocity: Tuple[float, float] = (1.0, 0.0)):
        super().__init__(velocity)


# --- 1D ---

@dataclass(frozen=True)
class BoundarySpec1D:
    """Left and right edge treatment of a 1D run."""
    left: BoundaryCondition
    right: BoundaryCondition

    def __post_init__(self):
        for side in (self.left, self.right):
            if isinstance(side, NoSlipBC):
                raise ValueError(f"{side!r} is only defined for 2D domains")
        if isinstance(self.left, PeriodicBC) != isinstance(self.right, PeriodicBC):
            raise ValueError("Periodic boundaries must be set on both sides")

    @property
    def is_periodic(self) -> bool:
        return isinstance(self.left, PeriodicBC)


DEFAULT_BC_1D = BoundarySpec1D(PeriodicBC(), PeriodicBC())


def apply_boundary_1d(phi: np.ndarray, bc: BoundarySpec1D) -> np.ndarray:
    """Return a copy of phi with its two boundary cells patched."""
    out = np.array(phi, dtype=float)
    bc.left.patch(out, 'left')
    bc.right.patch(out, 'right')
    return out


# --- 2D ---

@dataclass(frozen=True)
class BoundarySpec2D:
    left: BoundaryCondition
    right: BoundaryCondition
    bottom: BoundaryCondition
    top: BoundaryCondition

    def __post_init__(self):
        for side in (self.left, self.right, self.bottom, self.top):
            if isinstance(side, PeriodicBC):
                raise ValueError("Periodic boundaries are not supported in 2D")

    def sides(self):
        # x edges first, so the y edges own the corners
        return (('left', self.left), ('right', self.right),
                ('bottom', self.bottom), ('top', self.top))


def lid_driven_cavity_bc() -> BoundarySpec2D:
    """No-slip walls with a lid moving at unit speed along the top edge."""
    return BoundarySpec2D(left=NoSlipBC(), right=NoSlipBC(),
                          bottom=NoSlipBC(), top=LidBC())


def apply_velocity_boundary_2d(u: np.ndarray, v: np.ndarray, grid: Grid2D,
                               bc: BoundarySpec2D) -> Tuple[np.ndarray, np.ndarray]:
    """
    Impose wall velocities of NoSlip/Lid edges on a cell-centred velocity field.

    Returns:
        New flat (u, v) arrays
    """
    u_new = np.array(u, dtype=float).reshape(grid.shape)
    v_new = np.array(v, dtype=float).reshape(grid.shape)
    for side, cond in bc.sides():
        if isinstance(cond, NoSlipBC):
            edge = _edge_index(side, 0)
            u_new[edge] = cond.velocity[0]
            v_new[edge] = cond.velocity[1]
    return u_new.ravel(), v_new.ravel()


def apply_scalar_boundary_2d(phi_new: np.ndarray, phi_old: np.ndarray,
                             grid: Grid2D,
                             bc: Optional[BoundarySpec2D] = None) -> np.ndarray:
    """
    Patch the one-cell frame of a 2D scalar field.

    When bc is None every edge keeps the previous field's values. Fixed and
    ZeroGradient edges act on the scalar; NoSlip/Lid edges only concern the
    velocity, so the scalar stays frozen there.

    Returns:
        New flat field
    """
    out = np.array(phi_new, dtype=float).reshape(grid.shape)
    old = np.asarray(phi_old, dtype=float).reshape(grid.shape)
    if bc is None:
        for side in ('left', 'right', 'bottom', 'top'):
            edge = _edge_index(side, 0)
            out[edge] = old[edge]
    else:
        for side, cond in bc.sides():
            cond.patch_edge(out, old, side)
    return out.ravel()
