"""
Convective face interpolation schemes.

Each scheme computes the face value phi_f from the cell values around a face.

Nomenclature (1D, face between cells i and i+1):
    phi_W = phi[i-1],  phi_P = phi[i],  phi_E = phi[i+1],  phi_EE = phi[i+2]
    u_f   = velocity at the face

TVD schemes work in upwind-relative terms: U is the upwind cell, D the
downwind cell and UU the cell upwind of U, all chosen by the sign of u_f.
"""

import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Union

# |phi_D - phi_U| below this is treated as a flat region (r = 1)
FLAT_TOLERANCE = 1e-30


class Scheme(Enum):
    """Closed set of face interpolation schemes."""
    UPWIND = 'UDS'
    CENTRAL = 'CDS'
    TVD_MINMOD = 'TVD-minmod'
    TVD_VAN_LEER = 'TVD-vanLeer'
    TVD_SUPERBEE = 'TVD-superbee'

    @property
    def is_tvd(self) -> bool:
        return self in LIMITERS

    @classmethod
    def from_name(cls, name: Union['Scheme', str]) -> 'Scheme':
        """
        Parse a scheme from its value or a common alias.

        Raises:
            ValueError: for unknown names
        """
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower()
        scheme = _ALIASES.get(key)
        if scheme is None:
            options = ', '.join(repr(s.value) for s in cls)
            raise ValueError(f"Unknown scheme: {name!r}. Options: {options}")
        return scheme


_ALIASES = {s.value.lower(): s for s in Scheme}
_ALIASES.update({
    'upwind': Scheme.UPWIND,
    'central': Scheme.CENTRAL,
    'minmod': Scheme.TVD_MINMOD,
    'vanleer': Scheme.TVD_VAN_LEER,
    'van-leer': Scheme.TVD_VAN_LEER,
    'superbee': Scheme.TVD_SUPERBEE,
})


# --- Flux limiters ---

def minmod_limiter(r):
    """psi(r) = max(0, min(1, r))"""
    return np.maximum(0.0, np.minimum(1.0, r))


def van_leer_limiter(r):
    """psi(r) = 2r / (1 + r) for r > 0, else 0"""
    r = np.asarray(r, dtype=float)
    # |r| keeps the denominator away from zero on the discarded branch
    return np.where(r > 0, 2.0 * r / (1.0 + np.abs(r)), 0.0)


def superbee_limiter(r):
    """psi(r) = max(0, min(2r, 1), min(r, 2))"""
    r = np.asarray(r, dtype=float)
    psi = np.maximum(np.minimum(2.0 * r, 1.0), np.minimum(r, 2.0))
    return np.where(r > 0, psi, 0.0)


LIMITERS: Dict[Scheme, Callable] = {
    Scheme.TVD_MINMOD: minmod_limiter,
    Scheme.TVD_VAN_LEER: van_leer_limiter,
    Scheme.TVD_SUPERBEE: superbee_limiter,
}


def gradient_ratio(phi_uu, phi_u, phi_d):
    """
    r = (phi_U - phi_UU) / (phi_D - phi_U), with r = 1 in flat regions.
    """
    denom = np.asarray(phi_d - phi_u, dtype=float)
    flat = np.abs(denom) < FLAT_TOLERANCE
    safe = np.where(flat, 1.0, denom)
    return np.where(flat, 1.0, (phi_u - phi_uu) / safe)


# --- Face value computation ---

def face_value(phi: np.ndarray, i, u_f, scheme: Union[Scheme, str], n: int):
    """
    Interpolated face value for the face between cell i and i+1.

    Lookups are clamped to [0, n-1], so a scheme may reference one cell
    beyond either boundary; periodic wrapping is the caller's job.

    Returns:
        Face value(s), a float for scalar i
    """
    scheme = Scheme.from_name(scheme)
    phi = np.asarray(phi, dtype=float)
    i = np.asarray(i)

    def get(k):
        return phi[np.clip(k, 0, n - 1)]

    if scheme is Scheme.UPWIND:
        value = np.where(u_f >= 0, get(i), get(i + 1))
    elif scheme is Scheme.CENTRAL:
        value = 0.5 * (get(i) + get(i + 1))
    else:
        forward = np.asarray(u_f) >= 0
        phi_u = np.where(forward, get(i), get(i + 1))
        phi_d = np.where(forward, get(i + 1), get(i))
        phi_uu = np.where(forward, get(i - 1), get(i + 2))

        psi = LIMITERS[scheme](gradient_ratio(phi_uu, phi_u, phi_d))
        value = phi_u + 0.5 * psi * (phi_d - phi_u)

    if np.ndim(value) == 0:
        return float(value)
    return value


# --- Stencil coefficients ---

@dataclass(frozen=True)
class StencilCoefficients:
    """
    Explicit update phi_P^{n+1} = a_w phi_W + a_p phi_P + a_e phi_E.

    Coefficients are None when the scheme is nonlinear in the local solution.
    """
    a_w: Optional[float]
    a_p: Optional[float]
    a_e: Optional[float]
    description: str
    state_dependent: bool = False


def convection_stencil(scheme: Union[Scheme, str], u: float, dx: float,
                       dt: float) -> StencilCoefficients:
    """
    Stencil coefficients of one explicit pure-convection step on a uniform
    grid. Only Upwind and Central have fixed coefficients.
    """
    scheme = Scheme.from_name(scheme)
    c = u * dt / dx

    if scheme is Scheme.UPWIND:
        if u >= 0:
            return StencilCoefficients(
                a_w=c, a_p=1 - c, a_e=0.0,
                description=f"UDS (u>0): phi_P' = {1 - c:.3f} phi_P + {c:.3f} phi_W")
        return StencilCoefficients(
            a_w=0.0, a_p=1 + c, a_e=-c,
            description=f"UDS (u<0): phi_P' = {1 + c:.3f} phi_P + {-c:.3f} phi_E")

    if scheme is Scheme.CENTRAL:
        return StencilCoefficients(
            a_w=c / 2, a_p=1.0, a_e=-c / 2,
            description=f"CDS: phi_P' = phi_P - (c/2)(phi_E - phi_W)  [c={c:.3f}]")

    return StencilCoefficients(
        a_w=None, a_p=None, a_e=None,
        description=f"{scheme.value}: coefficients depend on local gradient ratio r",
        state_dependent=True)
