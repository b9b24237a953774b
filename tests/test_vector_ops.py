"""Tests for the tolerance-aware vector helpers."""

from __future__ import annotations

import numpy as np
import pytest

from nth_brillouin.constants import EPSILON
from nth_brillouin.errors import BrillouinZoneError, DimensionMismatch, InvalidDimension
from nth_brillouin.vector_ops import (
    add,
    approx_equal,
    cross,
    distance,
    dot,
    scale,
    vectors_approx_equal,
)

# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------


class TestArithmetic:
    def test_dot(self) -> None:
        assert dot([1, 2, 3], [4, 5, 6]) == pytest.approx(32.0)

    def test_cross_of_axes(self) -> None:
        np.testing.assert_allclose(cross([1, 0, 0], [0, 1, 0]), [0, 0, 1])
        np.testing.assert_allclose(cross([0, 1, 0], [1, 0, 0]), [0, 0, -1])

    def test_scale_and_add(self) -> None:
        np.testing.assert_allclose(scale([1, -2, 3], 2.0), [2, -4, 6])
        np.testing.assert_allclose(add([1, 2, 3], [1, 1, 1]), [2, 3, 4])

    def test_distance(self) -> None:
        assert distance([0, 0, 0], [3, 4, 0]) == pytest.approx(5.0)

    def test_works_in_other_dimensions(self) -> None:
        assert dot([1, 2], [3, 4]) == pytest.approx(11.0)
        np.testing.assert_allclose(add([1, 2, 3, 4], [4, 3, 2, 1]), [5, 5, 5, 5])


# ---------------------------------------------------------------------------
# Shape errors
# ---------------------------------------------------------------------------


class TestShapeErrors:
    @pytest.mark.parametrize("func", [dot, add, distance, vectors_approx_equal])
    def test_length_mismatch(self, func) -> None:
        with pytest.raises(DimensionMismatch):
            func([1, 2], [1, 2, 3])

    def test_cross_needs_three_components(self) -> None:
        with pytest.raises(InvalidDimension):
            cross([1, 0], [0, 1])
        with pytest.raises(InvalidDimension):
            cross([1, 0, 0, 0], [0, 1, 0, 0])

    def test_matrix_is_not_a_vector(self) -> None:
        with pytest.raises(InvalidDimension):
            dot([[1, 0, 0]], [[0, 1, 0]])

    def test_errors_are_value_errors(self) -> None:
        assert issubclass(DimensionMismatch, BrillouinZoneError)
        assert issubclass(InvalidDimension, ValueError)


# ---------------------------------------------------------------------------
# Tolerance
# ---------------------------------------------------------------------------


class TestApproxEqual:
    def test_within_tolerance(self) -> None:
        assert approx_equal(1.0, 1.0 + EPSILON / 2)

    def test_outside_tolerance(self) -> None:
        assert not approx_equal(1.0, 1.0 + 2 * EPSILON)

    def test_custom_tolerance(self) -> None:
        assert approx_equal(1.0, 1.05, eps=0.1)
        assert not approx_equal(1.0, 1.05, eps=0.01)

    def test_vectors_componentwise(self) -> None:
        assert vectors_approx_equal([0, 0, 0], [EPSILON / 2, -EPSILON / 2, 0])
        assert not vectors_approx_equal([0, 0, 0], [0, 0, 2 * EPSILON])
