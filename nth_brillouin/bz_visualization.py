"""
Brillouin Zone Visualization Module

Hands the face loops of a built zone to a renderer. Loops are either kept in
3D (matplotlib) or flattened into 2D face coordinates for a triangulator.

Usage:
------
    from nth_brillouin import build_zone
    from nth_brillouin.bz_visualization import plot_zone_matplotlib

    poly = build_zone([[0, 0.5, 0.5], [0.5, 0, 0.5], [0.5, 0.5, 0]], 1)
    fig, ax = plot_zone_matplotlib(poly)
"""

from typing import List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from .bz_geometry import Plane, Polyhedron
from .bz_loops import extract_loops
from .constants import EPSILON
from .vector_ops import approx_equal


def face_basis(face: Plane) -> np.ndarray:
    """
    Two orthonormal vectors spanning the face plane.

    The first is e_i × n for the first coordinate axis e_i not parallel to
    the normal; the second is n × u, so (u, v, n) is right-handed.

    Returns
    -------
    np.ndarray
        2x3 array with u and v as rows
    """
    u = None
    for axis in np.eye(3):
        test = np.cross(axis, face.n)
        if not approx_equal(float(np.dot(test, test)), 0.0):
            u = test
            break
    v = np.cross(face.n, u)
    return np.array([u / np.linalg.norm(u), v / np.linalg.norm(v)])


def face_origin(face: Plane) -> np.ndarray:
    """Point of the face plane closest to the origin."""
    return face.n * face.a


def project_to_face_coords(basis: np.ndarray, points) -> np.ndarray:
    """
    Coordinates of 3D points along the face basis.

    Parameters
    ----------
    basis : np.ndarray
        2x3 array from ``face_basis``
    points : array-like
        Points of shape (N, 3)

    Returns
    -------
    np.ndarray
        2D coordinates of shape (N, 2)
    """
    return np.asarray(points, dtype=float).reshape(-1, 3) @ basis.T


def zone_loops(polyhedron: Polyhedron) -> List[Tuple[Plane, List[np.ndarray]]]:
    """(face, loops) for every face that has at least one loop."""
    result = []
    for face in polyhedron.iter_faces():
        loops = extract_loops(face, polyhedron)
        if loops:
            result.append((face, loops))
    return result


def plot_zone_matplotlib(polyhedron: Polyhedron,
                         ax: Optional[plt.Axes] = None,
                         figsize: Tuple[int, int] = (8, 8),
                         facecolor: str = 'cyan',
                         edgecolor: str = 'black',
                         alpha: float = 0.3,
                         show_axes_labels: bool = True,
                         title: Optional[str] = None) -> Tuple[plt.Figure, plt.Axes]:
    """
    Plot the zone boundary using matplotlib 3D.

    Every face loop becomes one polygon of a ``Poly3DCollection``.

    Parameters
    ----------
    polyhedron : Polyhedron
        Built zone to plot
    ax : matplotlib.axes.Axes, optional
        Existing 3D axes. If None, creates new figure.
    figsize : tuple, optional
        Figure size in inches
    facecolor : str
        Face color for the polygons
    edgecolor : str
        Edge color for the polygons
    alpha : float
        Transparency (0-1)
    show_axes_labels : bool
        Whether to show kx, ky, kz axis labels
    title : str, optional
        Plot title. Defaults to the zone number.

    Returns
    -------
    fig : matplotlib.figure.Figure
    ax : matplotlib.axes.Axes
    """
    if ax is None:
        fig = plt.figure(figsize=figsize)
        ax = fig.add_subplot(111, projection='3d')
    else:
        fig = ax.get_figure()

    polygons = [loop[:-1] for _, loops in zone_loops(polyhedron) for loop in loops]

    poly = Poly3DCollection(polygons, facecolor=facecolor, edgecolor=edgecolor,
                            linewidth=0.5, alpha=alpha)
    ax.add_collection3d(poly)

    # Set equal aspect ratio
    if polygons:
        points = np.vstack(polygons)
        bbox_min, bbox_max = points.min(axis=0), points.max(axis=0)
        max_range = max(float(np.max(bbox_max - bbox_min)), EPSILON)
        center = (bbox_min + bbox_max) / 2

        ax.set_xlim(center[0] - max_range/2, center[0] + max_range/2)
        ax.set_ylim(center[1] - max_range/2, center[1] + max_range/2)
        ax.set_zlim(center[2] - max_range/2, center[2] + max_range/2)

    if show_axes_labels:
        ax.set_xlabel('kx')
        ax.set_ylabel('ky')
        ax.set_zlabel('kz')

    ax.set_title(title if title is not None else f"Brillouin zone {polyhedron.zone_number}")

    return fig, ax


# Public API
__all__ = [
    'face_basis',
    'face_origin',
    'project_to_face_coords',
    'zone_loops',
    'plot_zone_matplotlib',
]
