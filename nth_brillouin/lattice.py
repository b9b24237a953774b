"""
Lattice Module for Brillouin Zone Construction

This module turns real-space primitive vectors into the reciprocal basis used
by the zone builder, and provides the companion Fermi sphere radius.

Mathematical Background:
------------------------
Reciprocal lattice vectors are computed from real-space lattice vectors (a₀, a₁, a₂):

    b₀ = (a₁ × a₂) / V
    b₁ = (a₂ × a₀) / V
    b₂ = (a₀ × a₁) / V

where V = a₀ · (a₁ × a₂) is the triple product. The usual 2π factor is left
out, so aᵢ · bⱼ = δᵢⱼ. Results are in units of 1/length, not radians/length.

Usage:
------
    from nth_brillouin.lattice import reciprocal_lattice, lattice_vectors_from_parameters

    # Face-centred cubic primitive cell
    fcc = [[0, 0.5, 0.5], [0.5, 0, 0.5], [0.5, 0.5, 0]]
    b = reciprocal_lattice(fcc)

    # From lattice constants
    hexagonal = lattice_vectors_from_parameters(2.46, 2.46, 6.71, gamma=120)
"""

import numpy as np

from .errors import DegenerateLattice, InvalidDimension
from .vector_ops import approx_equal, cross, dot, scale


def as_basis(vectors) -> np.ndarray:
    """
    Validate and convert three 3D vectors to a 3x3 float array.

    Parameters
    ----------
    vectors : array-like
        Three vectors as rows.

    Returns
    -------
    np.ndarray
        3x3 array with the vectors as rows.

    Raises
    ------
    InvalidDimension
        If the input is not 3 vectors of 3 components.
    """
    basis = np.asarray(vectors, dtype=float)
    if basis.shape != (3, 3):
        raise InvalidDimension(f"Expected 3 vectors of 3 components, got shape {basis.shape}")
    return basis


def triple_product(vectors) -> float:
    """Signed volume a₀ · (a₁ × a₂) of the cell spanned by three vectors."""
    basis = as_basis(vectors)
    return dot(basis[0], cross(basis[1], basis[2]))


def reciprocal_lattice(lattice_vectors) -> np.ndarray:
    """
    Compute reciprocal lattice vectors from real-space primitive vectors.

    Parameters
    ----------
    lattice_vectors : array-like
        3x3 array with real-space primitive vectors as rows (a₀, a₁, a₂)

    Returns
    -------
    np.ndarray
        3x3 array with reciprocal vectors as rows (b₀, b₁, b₂)

    Raises
    ------
    DegenerateLattice
        If the vectors are coplanar (triple product ≈ 0)

    Notes
    -----
    The 2π factor is omitted: aᵢ · bⱼ = δᵢⱼ.
    """
    a = as_basis(lattice_vectors)

    volume = triple_product(a)
    if approx_equal(volume, 0.0):
        raise DegenerateLattice(f"Lattice vectors are coplanar (volume = {volume:g})")

    # Cyclic rotation of indices: b_i = (a_j x a_k) / V
    return np.array([scale(cross(a[(i + 1) % 3], a[(i + 2) % 3]), 1.0 / volume)
                     for i in range(3)])


def lattice_vectors_from_parameters(a: float, b: float, c: float,
                                    alpha: float = 90.0, beta: float = 90.0,
                                    gamma: float = 90.0) -> np.ndarray:
    """
    Compute primitive vectors from lattice constants.

    Uses the standard crystallographic convention where:
    - a₀ is along the x-axis
    - a₁ is in the xy-plane
    - a₂ has components in all directions

    Parameters
    ----------
    a, b, c : float
        Lattice constants
    alpha, beta, gamma : float, optional
        Lattice angles in degrees (α: angle between b and c, etc.). Default: 90°

    Returns
    -------
    np.ndarray
        3x3 array with lattice vectors as rows

    Raises
    ------
    DegenerateLattice
        If the angles do not describe a cell with positive volume
    """
    alpha_rad = np.radians(alpha)
    beta_rad = np.radians(beta)
    gamma_rad = np.radians(gamma)

    if approx_equal(np.sin(gamma_rad), 0.0):
        raise DegenerateLattice(f"gamma = {gamma}° puts a₀ and a₁ on one line")

    a0 = np.array([a, 0.0, 0.0])
    a1 = np.array([b * np.cos(gamma_rad), b * np.sin(gamma_rad), 0.0])

    c1 = c * np.cos(beta_rad)
    c2 = c * (np.cos(alpha_rad) - np.cos(beta_rad) * np.cos(gamma_rad)) / np.sin(gamma_rad)
    c3_squared = c**2 - c1**2 - c2**2
    if c3_squared <= 0 or approx_equal(c3_squared, 0.0):
        raise DegenerateLattice(
            f"Angles alpha={alpha}°, beta={beta}°, gamma={gamma}° give a flat cell"
        )
    a2 = np.array([c1, c2, np.sqrt(c3_squared)])

    return np.array([a0, a1, a2])


def fermi_sphere_radius(reciprocal_vectors, valence: float) -> float:
    """
    Radius of the free-electron Fermi sphere.

    Each occupied state holds two electrons, so ``valence`` electrons per
    primitive cell fill a sphere of volume ``V * valence / 2`` where ``V`` is
    the reciprocal cell volume.

    Parameters
    ----------
    reciprocal_vectors : array-like
        3x3 array with reciprocal vectors as rows
    valence : float
        Number of valence electrons per primitive cell

    Returns
    -------
    float
        Sphere radius, in the same units as the reciprocal vectors

    Examples
    --------
    >>> round(fermi_sphere_radius(np.eye(3), 2), 4)  # one full zone
    0.6204
    """
    if valence < 0:
        raise ValueError(f"valence must be non-negative, got {valence}")

    zone_volume = abs(triple_product(reciprocal_vectors))
    sphere_volume = zone_volume * 0.5 * valence
    return float(np.cbrt(sphere_volume / ((4.0 / 3.0) * np.pi)))


# Public API
__all__ = [
    'as_basis',
    'triple_product',
    'reciprocal_lattice',
    'lattice_vectors_from_parameters',
    'fermi_sphere_radius',
]
