"""
Error norms, conservation checks and field sanity checks.
"""

import numpy as np


def _pair(phi, ref):
    phi = np.asarray(phi, dtype=float)
    ref = np.asarray(ref, dtype=float)
    if phi.shape != ref.shape:
        raise ValueError(f"Field shapes differ: {phi.shape} vs {ref.shape}")
    return phi, ref


def l2_norm(phi: np.ndarray, ref: np.ndarray) -> float:
    """Root-mean-square difference between two fields."""
    phi, ref = _pair(phi, ref)
    return float(np.sqrt(np.mean((phi - ref)**2)))


def linf_norm(phi: np.ndarray, ref: np.ndarray) -> float:
    """Maximum absolute difference between two fields."""
    phi, ref = _pair(phi, ref)
    return float(np.max(np.abs(phi - ref)))


def total_mass(phi: np.ndarray, dx: float) -> float:
    """Integral of phi over a uniform grid: sum(phi_i) * dx."""
    return float(np.sum(phi) * dx)


def field_is_valid(phi: np.ndarray) -> bool:
    """True when no value is NaN or infinite."""
    return bool(np.all(np.isfinite(phi)))


def field_max(phi: np.ndarray) -> float:
    """Maximum absolute value in the field."""
    return float(np.max(np.abs(phi)))


def total_variation(phi: np.ndarray, periodic: bool = False) -> float:
    """
    Total variation sum |phi_{i+1} - phi_i|, including the wrap-around
    jump for periodic fields.
    """
    phi = np.asarray(phi, dtype=float)
    tv = np.sum(np.abs(np.diff(phi)))
    if periodic:
        tv += abs(phi[0] - phi[-1])
    return float(tv)
