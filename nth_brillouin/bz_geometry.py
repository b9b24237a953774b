"""
Brillouin Zone Geometry Module

This module builds the boundary of the n-th Brillouin zone by incremental
half-space intersection of Bragg planes.

Mathematical Background:
------------------------
Every non-zero reciprocal lattice point G defines a Bragg plane, the
perpendicular bisector of the segment from the origin Γ to G:

    {k : k·Ĝ = |G|/2}

A point k lies in the n-th Brillouin zone when exactly n-1 Bragg planes
separate it from Γ. The builder keeps every point that lies beyond fewer
than n planes, so the boundary it produces is the outer surface of zones
1..n together with the planes that cut through them.

Construction Algorithm:
1. Generate G = i·b₀ + j·b₁ + k·b₂ for i, j, k in [-L, L], L = min(n + 1, 3)
2. Sort the Bragg planes by |G|² (nearest first)
3. Fold the planes in one at a time: intersect the new plane with every live
   face (plane ∩ plane → edge), intersect each new edge with the face's
   edges (edge ∩ edge → vertex), then drop vertices that lie beyond n or more
   live planes and prune faces and edges left without live children
4. Drop faces with fewer than 3 edges and edges with fewer than 2 vertices

Data Layout:
------------
Faces, edges and vertices live in stores owned by the ``Polyhedron`` and are
referenced everywhere else by integer handle (index into the store). The
ordered ``faces``/``edges``/``vertices`` lists hold the handles of the live
entities. Pruning only shrinks those lists while the zone is being built, so
a face keeps its handles to dead edges (their lines still split new edges);
``compact`` renumbers the stores once construction is finished.

Usage:
------
    from nth_brillouin import build_zone

    poly = build_zone([[1, 0, 0], [0, 1, 0], [0, 0, 1]], zone_number=2)
    for face in poly.iter_faces():
        print(face.n, face.a, len(face.edges))
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np
from scipy import linalg
from scipy.spatial import ConvexHull

from .constants import EPSILON, MAX_NEIGHBOURHOOD, MAX_ZONE_NUMBER
from .errors import DegeneratePoint, InvalidDimension, UnsupportedZoneNumber
from .lattice import as_basis, reciprocal_lattice
from .vector_ops import approx_equal, as_vector, vectors_approx_equal

logger = logging.getLogger(__name__)


@dataclass
class Vertex:
    """A corner point of the zone boundary."""
    v: np.ndarray
    active: bool = True


@dataclass
class Edge:
    """
    Line where two planes meet.

    Attributes
    ----------
    t : np.ndarray
        Unit tangent of the line
    a : np.ndarray
        One point on the line
    vertices : List[int]
        Handles of the vertices found on this line, in discovery order
    active : bool
        Liveness flag
    """
    t: np.ndarray
    a: np.ndarray
    vertices: List[int] = field(default_factory=list)
    active: bool = True


@dataclass
class Plane:
    """
    Half-space {x : x·n <= a}, used as a face of the zone boundary.

    Attributes
    ----------
    n : np.ndarray
        Unit normal pointing away from the origin
    a : float
        Distance of the plane from the origin
    edges : List[int]
        Handles of the edges lying on this plane
    active : bool
        Liveness flag
    """
    n: np.ndarray
    a: float
    edges: List[int] = field(default_factory=list)
    active: bool = True


def _check_active(store: Sequence, handles: Sequence[int]) -> bool:
    """A component with no children stays live; otherwise it needs one live child."""
    if not handles:
        return True
    return any(store[h].active for h in handles)


def _live(store: Sequence, handles: Sequence[int]) -> List[int]:
    return [h for h in handles if store[h].active]


# ============================================================================
# Bragg Planes and Intersections
# ============================================================================

def bragg_plane(point) -> Plane:
    """
    Perpendicular bisector between the origin and a reciprocal lattice point.

    Parameters
    ----------
    point : array-like
        Non-zero 3D reciprocal lattice point G

    Returns
    -------
    Plane
        Plane with n = G/|G| and a = |G|/2

    Raises
    ------
    DegeneratePoint
        If G is (approximately) the zero vector
    """
    p = as_vector(point)
    if p.shape != (3,):
        raise InvalidDimension(f"Lattice point must have 3 components, got {p.shape[0]}")

    d = float(np.linalg.norm(p))
    if approx_equal(d, 0.0):
        raise DegeneratePoint(f"Cannot build a Bragg plane for the origin: {p.tolist()}")

    return Plane(n=p / d, a=d / 2)


def plane_intersection(plane_a: Plane, plane_b: Plane) -> Optional[Edge]:
    """
    Line where two planes meet.

    A point on the line is found by solving

        n_A·x = a_A,  n_B·x = a_B,  e_i·x = 0

    for the first axis i whose system is not singular (the fixed-axis system
    is singular whenever the line is parallel to that axis).

    Returns
    -------
    Edge or None
        None when the planes are parallel or coincident.
    """
    tangent = np.cross(plane_a.n, plane_b.n)
    tangent_length = float(np.linalg.norm(tangent))
    if approx_equal(tangent_length, 0.0):
        return None

    rhs = np.array([plane_a.a, plane_b.a, 0.0])
    for axis in range(3):
        m = np.array([plane_a.n, plane_b.n, np.eye(3)[axis]])
        if not approx_equal(linalg.det(m), 0.0):
            point = linalg.solve(m, rhs)
            return Edge(t=tangent / tangent_length, a=point)

    # Tangent above tolerance but every component below it
    return None


def edge_intersection(edge_a: Edge, edge_b: Edge) -> Optional[Vertex]:
    """
    Point where two lines cross.

    Solves t_A·s - t_B·u = a_B - a_A. Rows with zero coefficients must have a
    zero right-hand side; of the rest, the first two independent rows give
    (s, u). Both lines are then evaluated and must land on the same point.

    Returns
    -------
    Vertex or None
        None when the lines are parallel, skew or coincident.
    """
    ta, pa = edge_a.t.tolist(), edge_a.a.tolist()
    tb, pb = edge_b.t.tolist(), edge_b.a.tolist()

    rows: List[Tuple[float, float]] = []
    rhs: List[float] = []
    for i in range(3):
        row = (ta[i], -tb[i])
        value = pb[i] - pa[i]
        if approx_equal(row[0] * row[0] + row[1] * row[1], 0.0):
            if not approx_equal(value, 0.0):
                return None
            continue
        if not rows:
            rows.append(row)
            rhs.append(value)
        elif not approx_equal(rows[0][0] * row[1] - rows[0][1] * row[0], 0.0):
            rows.append(row)
            rhs.append(value)
            break

    if len(rows) < 2:
        return None

    # 2x2 system, Cramer's rule
    (m00, m01), (m10, m11) = rows
    det = m00 * m11 - m01 * m10
    s = (rhs[0] * m11 - m01 * rhs[1]) / det
    u = (m00 * rhs[1] - rhs[0] * m10) / det

    point_a = [pa[i] + s * ta[i] for i in range(3)]
    point_b = [pb[i] + u * tb[i] for i in range(3)]
    if not vectors_approx_equal(point_a, point_b):
        return None

    return Vertex(v=np.array(point_a))


# ============================================================================
# Polyhedron
# ============================================================================

@dataclass
class Polyhedron:
    """
    Boundary representation of the zone under construction.

    Attributes
    ----------
    zone_number : int
        Points beyond ``zone_number`` or more live planes are outside
    plane_store, edge_store, vertex_store : list
        Every entity created so far, addressed by handle
    faces, edges, vertices : List[int]
        Handles of the live entities, in creation order
    """
    zone_number: int
    plane_store: List[Plane] = field(default_factory=list)
    edge_store: List[Edge] = field(default_factory=list)
    vertex_store: List[Vertex] = field(default_factory=list)
    faces: List[int] = field(default_factory=list)
    edges: List[int] = field(default_factory=list)
    vertices: List[int] = field(default_factory=list)

    # ---- access -----------------------------------------------------------

    def iter_faces(self) -> Iterator[Plane]:
        """Live faces in insertion order."""
        return (self.plane_store[h] for h in self.faces)

    def iter_edges(self) -> Iterator[Edge]:
        """Live edges in creation order."""
        return (self.edge_store[h] for h in self.edges)

    def iter_vertices(self) -> Iterator[Vertex]:
        """Live vertices in creation order."""
        return (self.vertex_store[h] for h in self.vertices)

    def face_edges(self, face: Plane) -> List[Edge]:
        return [self.edge_store[h] for h in face.edges]

    def edge_vertices(self, edge: Edge) -> List[Vertex]:
        return [self.vertex_store[h] for h in edge.vertices]

    @property
    def num_faces(self) -> int:
        return len(self.faces)

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    @property
    def num_vertices(self) -> int:
        return len(self.vertices)

    # ---- zone membership --------------------------------------------------

    def _face_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        if not self.faces:
            return np.zeros((0, 3)), np.zeros(0)
        normals = np.array([self.plane_store[h].n for h in self.faces])
        offsets = np.array([self.plane_store[h].a for h in self.faces])
        return normals, offsets

    def violation_counts(self, points) -> np.ndarray:
        """
        Number of live planes each point lies strictly beyond.

        Parameters
        ----------
        points : array-like
            Points of shape (N, 3)

        Returns
        -------
        np.ndarray
            Integer counts of shape (N,)
        """
        pts = np.asarray(points, dtype=float).reshape(-1, 3)
        normals, offsets = self._face_arrays()
        d = pts @ normals.T
        beyond = (d > offsets) & ~(np.abs(d - offsets) < EPSILON)
        return beyond.sum(axis=1)

    def in_zone(self, point) -> bool:
        """True when the point lies beyond fewer than ``zone_number`` live planes."""
        return bool(self.violation_counts(point)[0] < self.zone_number)

    def deactivate_external_vertices(self) -> None:
        """Deactivate every live vertex lying beyond ``zone_number`` or more live planes."""
        if not self.vertices:
            return
        points = np.array([self.vertex_store[h].v for h in self.vertices])
        counts = self.violation_counts(points)
        for h, count in zip(self.vertices, counts):
            if count >= self.zone_number:
                self.vertex_store[h].active = False

    # ---- construction -----------------------------------------------------

    def _add_vertex(self, vertex: Vertex) -> int:
        handle = len(self.vertex_store)
        self.vertex_store.append(vertex)
        self.vertices.append(handle)
        return handle

    def _add_edge(self, edge: Edge) -> int:
        handle = len(self.edge_store)
        self.edge_store.append(edge)
        self.edges.append(handle)
        return handle

    def insert_plane(self, plane: Plane) -> None:
        """
        Fold one Bragg plane into the boundary.

        Planes must arrive sorted by distance from the origin; vertex liveness
        is decided against the planes present at insertion time.
        """
        plane_handle = len(self.plane_store)
        self.plane_store.append(plane)

        for face_handle in self.faces:
            face = self.plane_store[face_handle]
            edge = plane_intersection(face, plane)
            if edge is None:
                continue

            for face_edge_handle in face.edges:
                face_edge = self.edge_store[face_edge_handle]
                vertex = edge_intersection(edge, face_edge)
                if vertex is not None:
                    vertex_handle = self._add_vertex(vertex)
                    edge.vertices.append(vertex_handle)
                    face_edge.vertices.append(vertex_handle)

            edge_handle = self._add_edge(edge)
            face.edges.append(edge_handle)
            plane.edges.append(edge_handle)

        self.faces.append(plane_handle)

        self.deactivate_external_vertices()
        self.prune()

    # ---- pruning ----------------------------------------------------------

    def prune(self) -> None:
        """
        Deactivate edges and faces left without live children, then drop
        inactive entries from the live lists (order preserved).
        """
        for h in self.edges:
            edge = self.edge_store[h]
            if not _check_active(self.vertex_store, edge.vertices):
                edge.active = False
        for h in self.faces:
            face = self.plane_store[h]
            if not _check_active(self.edge_store, face.edges):
                face.active = False

        self.faces = _live(self.plane_store, self.faces)
        self.edges = _live(self.edge_store, self.edges)
        self.vertices = _live(self.vertex_store, self.vertices)

    def prune_face(self, face: Plane) -> None:
        """Prune a single face: deactivate its dead edges and drop them from its list."""
        for h in face.edges:
            edge = self.edge_store[h]
            if not _check_active(self.vertex_store, edge.vertices):
                edge.active = False
        face.edges = _live(self.edge_store, face.edges)

    def prune_edge(self, edge: Edge) -> None:
        """Prune a single edge: drop its inactive vertices."""
        edge.vertices = _live(self.vertex_store, edge.vertices)

    def deactivate_singular_components(self) -> None:
        """
        Faces need 3 live edges and edges need 2 vertices to bound anything.

        Edges are checked first; faces then count only their live edges.
        """
        for edge in self.iter_edges():
            if len(edge.vertices) < 2:
                edge.active = False
        for face in self.iter_faces():
            if len(_live(self.edge_store, face.edges)) < 3:
                face.active = False

    def finalize(self) -> None:
        """Finish construction: scoped prunes, minimum topology, compaction."""
        self.prune()
        for face in self.iter_faces():
            self.prune_face(face)
        for edge in self.iter_edges():
            self.prune_edge(edge)
        self.deactivate_singular_components()
        self.prune()
        self.compact()

    def compact(self) -> None:
        """
        Drop dead entities from the stores and renumber every handle.

        After this the stores hold exactly the live entities and every
        reference list points only at live entities.
        """
        edge_map: Dict[int, int] = {old: new for new, old in enumerate(self.edges)}
        vertex_map: Dict[int, int] = {old: new for new, old in enumerate(self.vertices)}

        self.plane_store = [self.plane_store[h] for h in self.faces]
        self.edge_store = [self.edge_store[h] for h in self.edges]
        self.vertex_store = [self.vertex_store[h] for h in self.vertices]

        for face in self.plane_store:
            face.edges = [edge_map[h] for h in face.edges if h in edge_map]
        for edge in self.edge_store:
            edge.vertices = [vertex_map[h] for h in edge.vertices if h in vertex_map]

        self.faces = list(range(len(self.plane_store)))
        self.edges = list(range(len(self.edge_store)))
        self.vertices = list(range(len(self.vertex_store)))

    # ---- geometry helpers -------------------------------------------------

    def distinct_vertices(self, eps: float = EPSILON) -> np.ndarray:
        """Live vertex positions with coincident points merged, shape (N, 3)."""
        unique: List[np.ndarray] = []
        for vertex in self.iter_vertices():
            if not any(vectors_approx_equal(vertex.v, u, eps) for u in unique):
                unique.append(vertex.v)
        return np.array(unique).reshape(-1, 3)

    def get_bounding_box(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Get the bounding box of the live vertices.

        A polyhedron without vertices gives a degenerate box at the origin.
        """
        points = self.distinct_vertices()
        if len(points) == 0:
            return np.zeros(3), np.zeros(3)
        return points.min(axis=0), points.max(axis=0)

    def convex_volume(self) -> float:
        """
        Volume of the convex hull of the live vertices.

        Equals the zone volume only for ``zone_number == 1``, where the zone
        is convex.
        """
        hull = ConvexHull(self.distinct_vertices())
        return float(hull.volume)

    def summary(self) -> Dict[str, int]:
        return {
            'zone_number': self.zone_number,
            'faces': self.num_faces,
            'edges': self.num_edges,
            'vertices': self.num_vertices,
        }

    def __repr__(self) -> str:
        return (f"Polyhedron(zone_number={self.zone_number}, faces={self.num_faces}, "
                f"edges={self.num_edges}, vertices={self.num_vertices})")


# ============================================================================
# Zone Construction
# ============================================================================

def check_zone_number(zone_number) -> int:
    """
    Validate a zone number.

    Raises
    ------
    UnsupportedZoneNumber
        Unless zone_number is an integer in 1..MAX_ZONE_NUMBER
    """
    if isinstance(zone_number, bool) or not isinstance(zone_number, (int, np.integer)):
        raise UnsupportedZoneNumber(f"Zone number must be an integer, got {zone_number!r}")
    if zone_number < 1:
        raise UnsupportedZoneNumber(f"Zone number must be at least 1, got {zone_number}")
    if zone_number > MAX_ZONE_NUMBER:
        raise UnsupportedZoneNumber(
            f"Zone numbers above {MAX_ZONE_NUMBER} are not supported, got {zone_number}: "
            f"the lattice-point neighbourhood would be too large to search"
        )
    return int(zone_number)


def neighbourhood_limit(zone_number: int) -> int:
    """
    Index range L searched for Bragg planes.

    This is a heuristic cutoff, not a completeness bound; it is only known to
    work for zone numbers up to ``MAX_ZONE_NUMBER``.
    """
    return min(zone_number + 1, MAX_NEIGHBOURHOOD)


def bragg_planes(reciprocal_vectors, zone_number: int) -> List[Tuple[float, Plane]]:
    """
    Bragg planes of the lattice points around the origin.

    Parameters
    ----------
    reciprocal_vectors : array-like
        3x3 array with reciprocal vectors as rows
    zone_number : int
        Zone number, sets the neighbourhood limit L

    Returns
    -------
    List[Tuple[float, Plane]]
        (|G|², plane) for every G = i·b₀ + j·b₁ + k·b₂ ≠ 0 with i, j, k in
        [-L, L], in enumeration order (unsorted)
    """
    basis = as_basis(reciprocal_vectors)
    limit = neighbourhood_limit(check_zone_number(zone_number))

    planes = []
    index_range = range(-limit, limit + 1)
    for i in index_range:
        for j in index_range:
            for k in index_range:
                if i == 0 and j == 0 and k == 0:
                    continue
                point = i * basis[0] + j * basis[1] + k * basis[2]
                planes.append((float(np.dot(point, point)), bragg_plane(point)))
    return planes


def sort_planes(tagged_planes: Sequence[Tuple[float, Plane]]) -> List[Plane]:
    """
    Order tagged planes nearest first.

    The builder depends on this order: nearer planes must be folded in before
    farther ones for the zone counting to be right. The sort is stable, so
    planes at equal distance keep their relative order.
    """
    return [plane for _, plane in sorted(tagged_planes, key=lambda item: item[0])]


def build_from_planes(planes: Sequence[Plane], zone_number: int) -> Polyhedron:
    """
    Fold a sequence of planes into a zone polyhedron.

    Parameters
    ----------
    planes : sequence of Plane
        Fresh planes sorted nearest first (see ``sort_planes``). Any other
        order gives undefined results.
    zone_number : int
        Zone number in 1..MAX_ZONE_NUMBER

    Returns
    -------
    Polyhedron
        Compacted polyhedron holding only live entities
    """
    poly = Polyhedron(zone_number=check_zone_number(zone_number))
    for plane in planes:
        poly.insert_plane(plane)
    poly.finalize()

    logger.debug(f"Built {poly}")
    return poly


def build(reciprocal_vectors, zone_number: int) -> Polyhedron:
    """
    Build the n-th Brillouin zone boundary from reciprocal vectors.

    Parameters
    ----------
    reciprocal_vectors : array-like
        3x3 array with reciprocal vectors as rows
    zone_number : int
        Zone number in 1..MAX_ZONE_NUMBER

    Returns
    -------
    Polyhedron

    Raises
    ------
    UnsupportedZoneNumber
        If zone_number is not in 1..MAX_ZONE_NUMBER
    """
    zone_number = check_zone_number(zone_number)
    tagged = bragg_planes(reciprocal_vectors, zone_number)
    logger.debug(f"Folding {len(tagged)} Bragg planes for zone {zone_number}")
    return build_from_planes(sort_planes(tagged), zone_number)


def build_zone(lattice_vectors, zone_number: int) -> Polyhedron:
    """
    Build the n-th Brillouin zone boundary from real-space primitive vectors.

    This is the main entry point. It computes the reciprocal basis and folds
    in the Bragg planes of the surrounding lattice points.

    Parameters
    ----------
    lattice_vectors : array-like
        3x3 array with linearly independent primitive vectors as rows
    zone_number : int
        Zone number: 1, 2 or 3

    Returns
    -------
    Polyhedron
        Boundary with faces, edges and vertices; pass each face to
        ``extract_loops`` to get drawable polygons

    Raises
    ------
    DegenerateLattice
        If the vectors are coplanar
    UnsupportedZoneNumber
        If zone_number is not 1, 2 or 3

    Notes
    -----
    The raw counts are larger than the drawn topology. Coincident Bragg
    planes and repeated vertices (the same point reached through different
    plane triples) are kept, so the simple cubic zone 1 holds 26 faces,
    132 edges and 464 vertices. ``boundary_counts`` merges them and reports
    the cube as 6 faces, 12 edges and 8 vertices; ``distinct_vertices``
    gives the merged corner positions.

    Examples
    --------
    >>> poly = build_zone([[1, 0, 0], [0, 1, 0], [0, 0, 1]], 1)
    >>> len(poly.distinct_vertices())
    8
    >>> from nth_brillouin.bz_loops import boundary_counts
    >>> tuple(boundary_counts(poly))
    (6, 12, 8)
    """
    zone_number = check_zone_number(zone_number)
    return build(reciprocal_lattice(lattice_vectors), zone_number)


# Public API
__all__ = [
    'Plane',
    'Edge',
    'Vertex',
    'Polyhedron',
    'bragg_plane',
    'plane_intersection',
    'edge_intersection',
    'check_zone_number',
    'neighbourhood_limit',
    'bragg_planes',
    'sort_planes',
    'build_from_planes',
    'build',
    'build_zone',
]
