"""Tests for the tridiagonal solver."""

from __future__ import annotations

import math

import numpy as np
import numpy.testing as nptest
import pytest
from scipy.linalg import solve_banded

from bezierc2.errors import DimensionMismatchError
from bezierc2.tridiagonal import solve_tridiagonal
from bezierc2.vector import FixedVector


def _reference_solve(
    a: np.ndarray, b: np.ndarray, c: np.ndarray, d: np.ndarray
) -> np.ndarray:
    """Solve the same system with SciPy's banded solver."""
    n = b.shape[0]
    ab = np.zeros((3, n))
    ab[0, 1:] = c[:-1]
    ab[1, :] = b
    ab[2, :-1] = a[1:]
    return solve_banded((1, 1), ab, d)


class TestSolveTridiagonal:
    """Test suite for solve_tridiagonal."""

    def test_small_scalar_system(self) -> None:
        """Test a hand-checked 3x3 system."""
        x = solve_tridiagonal([0, 1, 1], [2, 2, 2], [1, 1, 0], [3, 4, 3])
        assert x.shape == (3,)
        nptest.assert_allclose(x, [1.0, 1.0, 1.0])

    def test_single_row(self) -> None:
        """Test a 1x1 system."""
        nptest.assert_allclose(solve_tridiagonal([0], [4], [0], [2]), [0.5])

    @pytest.mark.parametrize("n", [2, 5, 17, 100])
    def test_agrees_with_banded_solver(self, n: int) -> None:
        """Test against scipy.linalg.solve_banded on diagonally dominant systems."""
        rng = np.random.default_rng(n)
        a = rng.uniform(-1.0, 1.0, n)
        c = rng.uniform(-1.0, 1.0, n)
        b = 3.0 + rng.uniform(0.0, 1.0, n)
        d = rng.uniform(-5.0, 5.0, n)

        x = solve_tridiagonal(a, b, c, d)
        nptest.assert_allclose(x, _reference_solve(a, b, c, d), rtol=1e-10, atol=1e-12)

    def test_vector_right_hand_side(self, rng: np.random.Generator) -> None:
        """Test that vector entries solve one system per component."""
        n, dim = 6, 3
        a = rng.uniform(-1.0, 1.0, n)
        c = rng.uniform(-1.0, 1.0, n)
        b = 4.0 + rng.uniform(0.0, 1.0, n)
        d = rng.uniform(-5.0, 5.0, (n, dim))

        x = solve_tridiagonal(a, b, c, [FixedVector(dim, row) for row in d])
        assert x.shape == (n, dim)
        for k in range(dim):
            nptest.assert_allclose(
                x[:, k], _reference_solve(a, b, c, d[:, k]), rtol=1e-10, atol=1e-12
            )

    def test_vector_coefficients(self) -> None:
        """Test vector entries on the diagonals."""
        b = [[2.0, 4.0], [2.0, 4.0]]
        x = solve_tridiagonal([0.0, 1.0], b, [1.0, 0.0], [[3.0, 5.0], [3.0, 5.0]])
        nptest.assert_allclose(x[:, 0], [1.0, 1.0])
        nptest.assert_allclose(x[:, 1], [1.0, 1.0])

    def test_scalar_entries_broadcast_to_dimension(self) -> None:
        """Test that a scalar right-hand side entry broadcasts across components."""
        x = solve_tridiagonal([0, 1], [2, 2], [1, 0], [[3.0, 6.0], 3.0])
        nptest.assert_allclose(x, [[1.0, 3.0], [1.0, 0.0]])

    def test_zero_pivot_gives_non_finite(self) -> None:
        """Test that a singular pivot does not raise."""
        x = solve_tridiagonal([0, 1], [0, 1], [1, 0], [1, 1])
        assert not np.all(np.isfinite(x))

    def test_first_sub_and_last_super_diagonal_are_ignored(self) -> None:
        """Test that a[0] and c[-1] do not enter the system."""
        x1 = solve_tridiagonal([0, 1, 1], [2, 2, 2], [1, 1, 0], [3, 4, 3])
        x2 = solve_tridiagonal([math.pi, 1, 1], [2, 2, 2], [1, 1, -7.0], [3, 4, 3])
        nptest.assert_array_equal(x1, x2)

    def test_empty_system_raises(self) -> None:
        """Test that at least one row is required."""
        with pytest.raises(ValueError, match="at least one row"):
            solve_tridiagonal([], [], [], [])

    def test_length_mismatch_raises(self) -> None:
        """Test that all sequences must have the same length."""
        with pytest.raises(ValueError, match="same length"):
            solve_tridiagonal([0, 1], [2, 2, 2], [1, 1, 0], [3, 4, 3])

    def test_dimension_mismatch_raises(self) -> None:
        """Test that vector entries must match the dimension of d[0]."""
        with pytest.raises(DimensionMismatchError):
            solve_tridiagonal([0, 1], [2, 2], [1, 0], [[1.0, 2.0], [1.0, 2.0, 3.0]])

    def test_non_numeric_entries_raise(self) -> None:
        """Test that non-numeric entries raise TypeError."""
        with pytest.raises(TypeError):
            solve_tridiagonal([0, 1], [2, "x"], [1, 0], [1, 1])
