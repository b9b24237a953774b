"""
Small vector helpers with tolerance-based comparison.

All operations accept array-like input and return ``numpy`` values. Vector
pairs of different lengths raise ``DimensionMismatch``; ``cross`` requires
exactly three components and raises ``InvalidDimension`` otherwise.
"""

import numpy as np

from .constants import EPSILON
from .errors import DimensionMismatch, InvalidDimension


def as_vector(v) -> np.ndarray:
    """Convert array-like input to a 1D float array."""
    vec = np.asarray(v, dtype=float)
    if vec.ndim != 1:
        raise InvalidDimension(f"Expected a 1D vector, got shape {vec.shape}")
    return vec


def _as_pair(a, b, operation: str):
    va = as_vector(a)
    vb = as_vector(b)
    if va.shape != vb.shape:
        raise DimensionMismatch(
            f"Cannot {operation} vectors of length {va.shape[0]} and {vb.shape[0]}"
        )
    return va, vb


def dot(a, b) -> float:
    """Scalar product of two vectors of equal length."""
    va, vb = _as_pair(a, b, "dot")
    return float(np.dot(va, vb))


def cross(a, b) -> np.ndarray:
    """Cross product of two 3D vectors."""
    va = as_vector(a)
    vb = as_vector(b)
    if va.shape != (3,) or vb.shape != (3,):
        raise InvalidDimension(
            f"Cross product vectors must be 3 dimensional, got {va.shape[0]} and {vb.shape[0]}"
        )
    return np.cross(va, vb)


def scale(v, s: float) -> np.ndarray:
    """Multiply a vector by a scalar."""
    return as_vector(v) * s


def add(a, b) -> np.ndarray:
    """Component-wise sum of two vectors of equal length."""
    va, vb = _as_pair(a, b, "add")
    return va + vb


def distance(a, b) -> float:
    """Euclidean distance between two points."""
    va, vb = _as_pair(a, b, "subtract")
    return float(np.linalg.norm(va - vb))


def approx_equal(x: float, y: float, eps: float = EPSILON) -> bool:
    """Check |x - y| < eps."""
    return abs(x - y) < eps


def vectors_approx_equal(a, b, eps: float = EPSILON) -> bool:
    """Check that every component of two vectors agrees within eps."""
    va, vb = _as_pair(a, b, "compare")
    return bool(np.all(np.abs(va - vb) < eps))


__all__ = [
    'as_vector',
    'dot',
    'cross',
    'scale',
    'add',
    'distance',
    'approx_equal',
    'vectors_approx_equal',
]
