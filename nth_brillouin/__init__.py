"""
n-th Brillouin Zone Construction

This package builds the boundary of the n-th Brillouin zone of a crystal
lattice by clipping reciprocal space with Bragg planes, and splits every
face of that boundary into simple polygons ready for rendering.

Features:
---------
- Reciprocal lattice from primitive vectors or lattice constants
- Zones 1, 2 and 3 by incremental half-space intersection
- Per-face loop extraction, including faces with holes or several pieces
- Free-electron Fermi sphere radius
- matplotlib rendering of the face loops

Quick Start:
------------
    from nth_brillouin import build_zone, extract_loops

    # Body-centred cubic primitive cell
    bcc = [[-0.5, 0.5, 0.5], [0.5, -0.5, 0.5], [0.5, 0.5, -0.5]]

    poly = build_zone(bcc, zone_number=2)
    for face in poly.iter_faces():
        loops = extract_loops(face, poly)

All geometric comparisons use the absolute tolerance
``nth_brillouin.constants.EPSILON``.
"""

# Core classes and functions
from .errors import (
    BrillouinZoneError,
    DimensionMismatch,
    InvalidDimension,
    DegenerateLattice,
    DegeneratePoint,
    UnsupportedZoneNumber,
)

from .vector_ops import (
    dot,
    cross,
    scale,
    add,
    distance,
    approx_equal,
    vectors_approx_equal,
)

from .lattice import (
    reciprocal_lattice,
    lattice_vectors_from_parameters,
    fermi_sphere_radius,
)

from .bz_geometry import (
    Plane,
    Edge,
    Vertex,
    Polyhedron,
    bragg_plane,
    plane_intersection,
    edge_intersection,
    bragg_planes,
    sort_planes,
    build_from_planes,
    build,
    build_zone,
)

from .bz_loops import (
    extract_loops,
    boundary_counts,
    BoundaryCounts,
)


__all__ = [
    # Errors
    'BrillouinZoneError',
    'DimensionMismatch',
    'InvalidDimension',
    'DegenerateLattice',
    'DegeneratePoint',
    'UnsupportedZoneNumber',
    # Vectors
    'dot',
    'cross',
    'scale',
    'add',
    'distance',
    'approx_equal',
    'vectors_approx_equal',
    # Lattice
    'reciprocal_lattice',
    'lattice_vectors_from_parameters',
    'fermi_sphere_radius',
    # Zone geometry
    'Plane',
    'Edge',
    'Vertex',
    'Polyhedron',
    'bragg_plane',
    'plane_intersection',
    'edge_intersection',
    'bragg_planes',
    'sort_planes',
    'build_from_planes',
    'build',
    'build_zone',
    # Loops
    'extract_loops',
    'boundary_counts',
    'BoundaryCounts',
]

__version__ = '0.1.0'
