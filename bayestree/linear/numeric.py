"""
bayestree/linear/numeric.py

Dense numeric primitives used by the conditional densities.

Thin wrappers over numpy / scipy so the conditional code reads in terms of
back-substitution rather than LAPACK flags.
"""

from __future__ import annotations

import numpy as np
from scipy.linalg import solve_triangular


def as_vector(v, name: str = "vector") -> np.ndarray:
    """Coerce to a 1-D float64 array."""
    arr = np.asarray(v, dtype=np.float64)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    if arr.ndim != 1:
        raise ValueError(f"{name} must be 1-D, got shape {arr.shape}")
    return arr


def as_matrix(m, name: str = "matrix") -> np.ndarray:
    """Coerce to a 2-D float64 array."""
    arr = np.asarray(m, dtype=np.float64)
    if arr.ndim != 2:
        raise ValueError(f"{name} must be 2-D, got shape {arr.shape}")
    return arr


def back_substitute_upper(R: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Solve R x = b for upper-triangular R."""
    return solve_triangular(R, b, lower=False)


def back_substitute_upper_transpose(R: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Solve R^T x = b for upper-triangular R."""
    return solve_triangular(R, b, trans="T", lower=False)


def linear_dependent(v1: np.ndarray, v2: np.ndarray, tol: float = 1e-9) -> bool:
    """
    True if v1 is a scalar multiple of v2 within tol.

    Entries must be zero (|x| < tol) in the same positions. Two all-zero
    vectors are considered dependent.
    """
    v1 = np.asarray(v1, dtype=np.float64)
    v2 = np.asarray(v2, dtype=np.float64)
    if v1.shape != v2.shape:
        return False
    scale = None
    for a, b in zip(v1, v2):
        small_a = abs(a) < tol
        small_b = abs(b) < tol
        if small_a != small_b:
            return False
        if small_a:
            continue
        if scale is None:
            scale = a / b
        elif abs(a - b * scale) > tol:
            return False
    return True


def equal_with_abs_tol(a: np.ndarray, b: np.ndarray, tol: float = 1e-9) -> bool:
    """Shape-checked elementwise comparison with absolute tolerance."""
    a = np.asarray(a)
    b = np.asarray(b)
    if a.shape != b.shape:
        return False
    return bool(np.all(np.abs(a - b) <= tol))


def format_matrix(name: str, m: np.ndarray) -> str:
    """Render a labelled matrix or vector for diagnostics."""
    body = np.array2string(np.asarray(m), precision=6, suppress_small=True)
    return f"{name} = {body}"
