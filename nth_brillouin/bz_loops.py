"""
Face Loop Extraction Module

Turns the edges of one zone face into the closed polygons that cover the
visible part of that face.

A face of a higher zone can have holes or several disjoint pieces, so its
edges do not form a single polygon. The extraction works on the face plane
as a planar graph:

1. Every edge is cut at its vertices into sub-segments; a sub-segment is kept
   when its midpoint is inside the zone (tested against every face of the
   polyhedron, not just this one).
2. Sub-segments from all edges are merged into one graph of segments and
   shared endpoints.
3. Starting from each segment in each direction, the walk always takes the
   sharpest left turn (anti-clockwise about the face normal) until it gets
   back to its start. Every directed segment is used by at most one cycle.
4. A closed cycle is kept when the face just to its left is inside the zone:
   outer boundaries come out anti-clockwise, hole boundaries clockwise.

Usage:
------
    from nth_brillouin import build_zone, extract_loops

    poly = build_zone(lattice_vectors, zone_number=2)
    for face in poly.iter_faces():
        for loop in extract_loops(face, poly):
            print(loop.shape)   # (k + 1, 3), last point repeats the first
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from .bz_geometry import Edge, Plane, Polyhedron
from .constants import EPSILON, PROBE_FRACTION
from .vector_ops import approx_equal, vectors_approx_equal

logger = logging.getLogger(__name__)

# (segment, reversed) - a segment walked from b to a when reversed is True
Arc = Tuple['Segment', bool]


@dataclass(eq=False)
class Endpoint:
    """A segment end, shared by every segment that meets there."""
    v: np.ndarray
    start_of_segments: List['Segment'] = field(default_factory=list)
    end_of_segments: List['Segment'] = field(default_factory=list)


@dataclass(eq=False)
class Segment:
    """
    Undirected piece of face boundary between two endpoints.

    ``direction`` is ``b.v - a.v``. ``consumed`` records, for the forward and
    reversed direction, whether a closed cycle already used it.
    """
    a: Endpoint
    b: Endpoint
    direction: np.ndarray
    consumed: List[bool] = field(default_factory=lambda: [False, False])


# ============================================================================
# Segment Graph
# ============================================================================

def _add_endpoint(point: np.ndarray, endpoints: List[Endpoint]) -> Endpoint:
    for endpoint in endpoints:
        if vectors_approx_equal(point, endpoint.v):
            return endpoint
    endpoint = Endpoint(v=point)
    endpoints.append(endpoint)
    return endpoint


def _add_segment(start: np.ndarray, end: np.ndarray,
                 segments: List[Segment], endpoints: List[Endpoint]) -> None:
    """Add a segment unless the same pair of endpoints is already joined."""
    a = _add_endpoint(start, endpoints)
    b = _add_endpoint(end, endpoints)
    if a is b:
        return

    if any(segment.b is b for segment in a.start_of_segments):
        return
    if any(segment.a is b for segment in a.end_of_segments):
        return

    segment = Segment(a=a, b=b, direction=b.v - a.v)
    a.start_of_segments.append(segment)
    b.end_of_segments.append(segment)
    segments.append(segment)


def _add_edge_segments(edge: Edge, polyhedron: Polyhedron,
                       segments: List[Segment], endpoints: List[Endpoint]) -> None:
    # Order the vertices along the line
    points = [vertex.v for vertex in polyhedron.edge_vertices(edge)]
    points.sort(key=lambda p: float(np.dot(edge.t, p - edge.a)))

    for start, end in zip(points[:-1], points[1:]):
        if vectors_approx_equal(start, end):
            continue
        if polyhedron.in_zone(0.5 * (start + end)):
            _add_segment(start, end, segments, endpoints)


def face_segments(face: Plane, polyhedron: Polyhedron) -> List[Segment]:
    """
    Deduplicated in-zone sub-segments of a face's edges.

    Parameters
    ----------
    face : Plane
        A face of ``polyhedron``
    polyhedron : Polyhedron
        The zone the face belongs to

    Returns
    -------
    List[Segment]
        Segments sharing ``Endpoint`` objects where they meet
    """
    segments: List[Segment] = []
    endpoints: List[Endpoint] = []
    for edge in polyhedron.face_edges(face):
        _add_edge_segments(edge, polyhedron, segments, endpoints)
    return segments


# ============================================================================
# Loop Traversal
# ============================================================================

def turning_angle(incoming: np.ndarray, outgoing: np.ndarray, normal: np.ndarray) -> float:
    """
    Angle swept clockwise from the reversed incoming direction to the outgoing one.

    Left turns score below π, going straight scores π, right turns above π and
    an immediate reversal 2π, so the smallest angle is the sharpest left turn
    about ``normal``.
    """
    d_in = incoming / np.linalg.norm(incoming)
    d_out = outgoing / np.linalg.norm(outgoing)
    c = np.cross(d_in, d_out)
    angle = math.atan2(float(np.linalg.norm(c)), -float(np.dot(d_in, d_out)))

    handedness = float(np.dot(normal, c))
    if not (handedness > 0 and not approx_equal(handedness, 0.0)):
        angle = 2 * math.pi - angle
    return angle


def _head(arc: Arc) -> Endpoint:
    segment, reverse = arc
    return segment.a if reverse else segment.b


def _tail(arc: Arc) -> Endpoint:
    segment, reverse = arc
    return segment.b if reverse else segment.a


def _arc_direction(arc: Arc) -> np.ndarray:
    segment, reverse = arc
    return -segment.direction if reverse else segment.direction


def _walk(start: Segment, reverse: bool, normal: np.ndarray) -> Optional[List[Arc]]:
    """
    Follow sharpest left turns from a directed segment back to its tail.

    Returns the arcs of the closed cycle, or None when the walk dead-ends,
    runs back over one of its own segments or into an arc already used.
    """
    arcs: List[Arc] = [(start, reverse)]
    used = {start}
    origin = _tail(arcs[0])

    while True:
        current = arcs[-1]
        vertex = _head(current)
        if vertex is origin:
            return arcs

        incoming = _arc_direction(current)
        best: Optional[Arc] = None
        best_angle = 2.0 * math.pi + 1
        for candidate in vertex.start_of_segments:
            angle = turning_angle(incoming, candidate.direction, normal)
            if angle < best_angle:
                best, best_angle = (candidate, False), angle
        for candidate in vertex.end_of_segments:
            angle = turning_angle(incoming, -candidate.direction, normal)
            if angle < best_angle:
                best, best_angle = (candidate, True), angle

        if best is None:
            return None
        segment, next_reverse = best
        if segment in used or segment.consumed[int(next_reverse)]:
            return None

        used.add(segment)
        arcs.append(best)


def _left_side_in_zone(arcs: List[Arc], normal: np.ndarray, polyhedron: Polyhedron) -> bool:
    # Probe beside the middle of the longest arc
    arc = max(arcs, key=lambda a: float(np.linalg.norm(a[0].direction)))
    direction = _arc_direction(arc)
    length = float(np.linalg.norm(direction))
    offset = max(PROBE_FRACTION * length, 100 * EPSILON)

    midpoint = 0.5 * (_tail(arc).v + _head(arc).v)
    left = np.cross(normal, direction) / length
    return polyhedron.in_zone(midpoint + offset * left)


def find_loops(segments: List[Segment], normal: np.ndarray,
               polyhedron: Polyhedron) -> List[np.ndarray]:
    """
    All closed loops bounding the in-zone part of a face.

    Parameters
    ----------
    segments : List[Segment]
        Segment graph from ``face_segments``
    normal : np.ndarray
        Unit normal of the face
    polyhedron : Polyhedron
        Zone used to decide which side of a cycle is visible

    Returns
    -------
    List[np.ndarray]
        Loops of shape (k + 1, 3) with the first point repeated at the end
    """
    loops = []
    for segment in segments:
        for reverse in (False, True):
            if segment.consumed[int(reverse)]:
                continue

            arcs = _walk(segment, reverse, normal)
            if arcs is None:
                logger.debug("Discarded an open traversal")
                continue

            for arc_segment, arc_reverse in arcs:
                arc_segment.consumed[int(arc_reverse)] = True

            if not _left_side_in_zone(arcs, normal, polyhedron):
                continue

            points = [_tail(arcs[0]).v] + [_head(arc).v for arc in arcs]
            loops.append(np.array(points))
    return loops


def extract_loops(face: Plane, polyhedron: Polyhedron) -> List[np.ndarray]:
    """
    Simple polygons covering the visible part of a face.

    Parameters
    ----------
    face : Plane
        A face of ``polyhedron``
    polyhedron : Polyhedron
        The built zone

    Returns
    -------
    List[np.ndarray]
        Zero or more loops, each of shape (k + 1, 3) with k >= 3 distinct
        corners and the first point repeated at the end. Empty when the face
        has no visible interior.
    """
    segments = face_segments(face, polyhedron)
    if len(segments) < 3:
        return []
    return find_loops(segments, face.n, polyhedron)


# ============================================================================
# Boundary Statistics
# ============================================================================

class BoundaryCounts(NamedTuple):
    """Counts of the drawn boundary: faces with loops, distinct loop sides and corners."""
    faces: int
    edges: int
    vertices: int


def boundary_counts(polyhedron: Polyhedron) -> BoundaryCounts:
    """
    Topology of the visible boundary.

    The raw entity counts of a ``Polyhedron`` include coincident planes and
    repeated vertices; these counts merge them. A simple cubic zone 1 gives
    ``BoundaryCounts(faces=6, edges=12, vertices=8)``.
    """
    faces = 0
    sides: List[Tuple[np.ndarray, np.ndarray]] = []
    corners: List[np.ndarray] = []

    for face in polyhedron.iter_faces():
        loops = extract_loops(face, polyhedron)
        if loops:
            faces += 1
        for loop in loops:
            for p, q in zip(loop[:-1], loop[1:]):
                if not any((vectors_approx_equal(p, s) and vectors_approx_equal(q, e)) or
                           (vectors_approx_equal(p, e) and vectors_approx_equal(q, s))
                           for s, e in sides):
                    sides.append((p, q))
                if not any(vectors_approx_equal(p, c) for c in corners):
                    corners.append(p)

    return BoundaryCounts(faces=faces, edges=len(sides), vertices=len(corners))


# Public API
__all__ = [
    'Endpoint',
    'Segment',
    'BoundaryCounts',
    'face_segments',
    'turning_angle',
    'find_loops',
    'extract_loops',
    'boundary_counts',
]
