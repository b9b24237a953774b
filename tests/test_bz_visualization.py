"""Tests for face coordinates and matplotlib rendering."""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pytest  # noqa: E402

from nth_brillouin.bz_geometry import Plane  # noqa: E402
from nth_brillouin.bz_visualization import (  # noqa: E402
    face_basis,
    face_origin,
    plot_zone_matplotlib,
    project_to_face_coords,
    zone_loops,
)


def _plane(n, a: float = 0.5) -> Plane:
    n = np.asarray(n, dtype=float)
    return Plane(n=n / np.linalg.norm(n), a=a)


# ---------------------------------------------------------------------------
# Face coordinates
# ---------------------------------------------------------------------------


class TestFaceBasis:
    @pytest.mark.parametrize("normal", [[0, 0, 1], [1, 0, 0], [0, -1, 0], [1, 2, 3], [1, 1e-3, 0]])
    def test_right_handed_orthonormal(self, normal) -> None:
        face = _plane(normal)
        u, v = face_basis(face)
        assert np.linalg.norm(u) == pytest.approx(1.0)
        assert np.linalg.norm(v) == pytest.approx(1.0)
        assert np.dot(u, v) == pytest.approx(0.0, abs=1e-12)
        np.testing.assert_allclose(np.cross(u, v), face.n, atol=1e-12)

    def test_z_face(self) -> None:
        np.testing.assert_allclose(face_basis(_plane([0, 0, 1])), [[0, -1, 0], [1, 0, 0]], atol=1e-12)

    def test_origin(self) -> None:
        np.testing.assert_allclose(face_origin(_plane([0, 3, 4], a=2.0)), [0, 1.2, 1.6])

    def test_projection(self) -> None:
        basis = face_basis(_plane([0, 0, 1]))
        coords = project_to_face_coords(basis, [[1.0, 2.0, 0.5], [0.0, 0.0, 0.5]])
        assert coords.shape == (2, 2)
        np.testing.assert_allclose(coords, [[-2.0, 1.0], [0.0, 0.0]], atol=1e-12)

    def test_projection_keeps_lengths(self, cubic_zone1) -> None:
        for face, loops in zone_loops(cubic_zone1):
            coords = project_to_face_coords(face_basis(face), loops[0])
            sides3 = np.linalg.norm(np.diff(loops[0], axis=0), axis=1)
            sides2 = np.linalg.norm(np.diff(coords, axis=0), axis=1)
            np.testing.assert_allclose(sides2, sides3, atol=1e-9)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestPlot:
    def test_zone_loops(self, cubic_zone1) -> None:
        pairs = zone_loops(cubic_zone1)
        assert len(pairs) == 6
        assert all(len(loops) == 1 for _, loops in pairs)

    def test_new_figure(self, cubic_zone1) -> None:
        fig, ax = plot_zone_matplotlib(cubic_zone1)
        try:
            assert ax.get_title() == "Brillouin zone 1"
            assert ax.get_xlabel() == "kx"
            assert len(ax.collections) == 1
            low, high = ax.get_xlim()
            assert low == pytest.approx(-0.5, abs=0.05)
            assert high == pytest.approx(0.5, abs=0.05)
        finally:
            plt.close(fig)

    def test_existing_axes(self, fcc_zone1) -> None:
        fig = plt.figure()
        ax = fig.add_subplot(111, projection="3d")
        try:
            out_fig, out_ax = plot_zone_matplotlib(fcc_zone1, ax=ax, title="fcc",
                                                   show_axes_labels=False)
            assert out_fig is fig
            assert out_ax is ax
            assert ax.get_title() == "fcc"
            assert ax.get_xlabel() == ""
        finally:
            plt.close(fig)
