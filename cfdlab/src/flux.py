"""
Face fluxes and the pluggable per-step kernels.

Notation:
    F_conv = u_f * phi_f                       convective flux at a face
    F_diff = Gamma / dx * (phi_E - phi_P)      diffusive flux at a face

The solver assembles a step from four pure functions bundled in
``StepKernels``. Any of them can be substituted (e.g. by an interactive
"edit this formula" layer) as long as the signature is kept and the function
broadcasts over numpy index/value arrays.
"""

import numpy as np
from dataclasses import dataclass
from typing import Callable

from .schemes import Scheme, face_value


def convective_flux(u, phi_face):
    """F = u * phi_f"""
    return u * phi_face


def diffusive_flux(phi: np.ndarray, i, gamma: float, dx: float, n: int):
    """
    Diffusive flux Gamma/dx * (phi[i+1] - phi[i]) at the face between cell i
    and i+1, with lookups clamped to [0, n-1].
    """
    phi = np.asarray(phi, dtype=float)
    i = np.asarray(i)
    phi_p = phi[np.clip(i, 0, n - 1)]
    phi_e = phi[np.clip(i + 1, 0, n - 1)]
    return gamma / dx * (phi_e - phi_p)


def explicit_update(phi_old, flux_right, flux_left, dt: float, dx: float):
    """
    Conservative explicit Euler update:
        phi_P^{n+1} = phi_P^n - (dt/dx) * (F_{i+1/2} - F_{i-1/2})
    """
    return phi_old - (dt / dx) * (flux_right - flux_left)


@dataclass(frozen=True)
class StepKernels:
    """
    Functions a 1D step is assembled from.

    face_value(phi, i, u_f, scheme, n) -> phi_f
    convective_flux(u, phi_face) -> F
    diffusive_flux(phi, i, gamma, dx, n) -> F_diff
    update(phi_old, flux_right, flux_left, dt, dx) -> phi_new

    Diffusion enters ``update`` through the fluxes: the solver passes
    F_conv - F_diff on each face.

    On periodic runs ``face_value`` and ``diffusive_flux`` receive a copy of
    the field padded with two wrapped ghost cells per side, so ``phi`` has
    n_cells + 4 entries, ``n`` is n_cells + 4 and ``i`` indexes the padded
    array. Otherwise they get the field itself with ``n`` = n_cells.
    """
    face_value: Callable = face_value
    convective_flux: Callable = convective_flux
    diffusive_flux: Callable = diffusive_flux
    update: Callable = explicit_update

    def validate(self) -> 'StepKernels':
        """
        Smoke-test the face interpolation on a small ramp.

        Raises:
            ValueError: if it does not return a finite number
        """
        test_phi = np.array([0.0, 1.0, 2.0, 3.0, 4.0])
        try:
            result = self.face_value(test_phi, 2, 1.0, Scheme.UPWIND, 5)
            value = float(np.asarray(result))
        except (TypeError, ValueError, IndexError) as e:
            raise ValueError(f"face interpolation failed on test field: {e}") from e
        if not np.isfinite(value):
            raise ValueError(f"face interpolation returned a non-finite value: {value}")
        return self


DEFAULT_KERNELS = StepKernels()
