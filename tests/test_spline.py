"""Tests for C2 Bézier splines."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
import numpy.testing as nptest
import pytest

from bezierc2.errors import DimensionMismatchError
from bezierc2.spline import BezierSpline, distance_ratio, uniform_weights
from bezierc2.vector import FixedVector

ZIGZAG = [[0.0, 0.0], [1.0, 1.0], [2.0, 0.0], [3.0, 1.0]]
WAVE = [[0.0, 0.0], [1.5, 2.0], [2.0, -1.0], [4.0, 0.5], [5.0, 3.0], [7.5, 1.0]]
HELIX = [[1.0, 0.0, 0.0], [0.0, 1.0, 0.5], [-1.0, 0.0, 1.0], [0.0, -1.0, 1.5], [1.0, 0.0, 2.0]]


class TestWeightFunctions:
    """Test the built-in weight sources."""

    def test_distance_ratio(self) -> None:
        """Test the ratio of the chords before and after a knot."""
        knots = [FixedVector(2, 0, 0), FixedVector(2, 3, 4), FixedVector(2, 4, 4)]
        assert distance_ratio(1, knots) == 5.0  # noqa: PLR2004

    def test_distance_ratio_zero_chord(self) -> None:
        """Test that a zero chord after the knot gives inf."""
        knots = [FixedVector(2, 0, 0), FixedVector(2, 1, 0), FixedVector(2, 1, 0)]
        assert distance_ratio(1, knots) == float("inf")

    def test_uniform_weights(self) -> None:
        """Test that every knot gets weight 1."""
        knots = [FixedVector(1, x) for x in (0.0, 5.0, 6.0)]
        assert uniform_weights(1, knots) == 1.0


class TestBezierSplineInit:
    """Test BezierSpline construction and knot management."""

    def test_empty_spline(self) -> None:
        """Test a spline without knots."""
        spline = BezierSpline()
        assert spline.knots == []
        assert spline.curves == []
        assert spline.dim == 0
        assert len(spline) == 0

    @pytest.mark.parametrize("knots", [[[0.0, 0.0]], [[0.0, 0.0], [1.0, 1.0]]])
    def test_too_few_knots_give_no_curves(self, knots: list[list[float]]) -> None:
        """Test that fewer than three knots give an empty spline."""
        spline = BezierSpline(knots)
        assert spline.num_curves == 0
        assert len(spline.knots) == len(knots)
        assert spline.get_points(0, 0.0).shape == (0, 2)

    def test_number_of_curves(self) -> None:
        """Test that n knots give n - 1 curves."""
        assert BezierSpline(ZIGZAG).num_curves == 3  # noqa: PLR2004
        assert len(BezierSpline(WAVE)) == 5  # noqa: PLR2004

    def test_knots_are_vectors(self) -> None:
        """Test that knots are stored as FixedVectors of a common dimension."""
        knots = BezierSpline(HELIX).knots
        assert all(isinstance(k, FixedVector) and k.dim == 3 for k in knots)  # noqa: PLR2004
        nptest.assert_array_equal(np.array([k.to_list() for k in knots]), np.array(HELIX))

    def test_scalar_knots(self) -> None:
        """Test that numbers are taken as 1-dimensional knots."""
        spline = BezierSpline([0.0, 1.0, 3.0])
        assert spline.dim == 1
        assert spline.num_curves == 2  # noqa: PLR2004

    def test_column_array_knots(self) -> None:
        """Test that an (n, 1) array gives 1-dimensional knots."""
        spline = BezierSpline(np.array([[0.0], [1.0], [3.0]]))
        assert spline.dim == 1
        assert [k.to_list() for k in spline.knots] == [[0.0], [1.0], [3.0]]
        nptest.assert_allclose(spline.curves[-1].at(1.0), [3.0])

    def test_mixed_dimensions_raise(self) -> None:
        """Test that knots must share a dimension."""
        with pytest.raises(DimensionMismatchError):
            BezierSpline([[0.0, 0.0], [1.0, 1.0, 1.0], [2.0, 0.0]])

    def test_invalid_weights_raise(self) -> None:
        """Test that weights must be callable or a sequence."""
        with pytest.raises(TypeError):
            BezierSpline(ZIGZAG, weights=3)  # type: ignore[arg-type]

    @pytest.mark.parametrize("weights", ["abcdef", b"abcdef"])
    def test_string_weights_raise(self, weights: object) -> None:
        """Test that strings are not accepted as weight sequences."""
        with pytest.raises(TypeError, match="weights"):
            BezierSpline(WAVE, weights=weights)  # type: ignore[arg-type]

    def test_too_few_precomputed_weights_raise(self) -> None:
        """Test that n knots need at least n - 1 precomputed weights."""
        with pytest.raises(ValueError, match="weights"):
            BezierSpline(ZIGZAG, weights=[0.0, 1.0])

    def test_knots_getter_returns_copies(self) -> None:
        """Test that modifying returned knots does not affect the spline."""
        spline = BezierSpline(ZIGZAG)
        knots = spline.knots
        knots[0][0] = 100.0
        assert spline.knots[0][0] == 0.0

    def test_curves_getter_returns_copies(self) -> None:
        """Test that modifying returned curves does not affect the spline."""
        spline = BezierSpline(ZIGZAG)
        curves = spline.curves
        curves[0][0] = [100.0, 100.0]
        nptest.assert_array_equal(spline.curves[0][0], [0.0, 0.0])

    def test_set_knots_recalculates(self) -> None:
        """Test that replacing the knots rebuilds the curves."""
        spline = BezierSpline(ZIGZAG)
        spline.set_knots(WAVE)
        assert spline.num_curves == len(WAVE) - 1
        spline.knots = HELIX
        assert spline.dim == 3  # noqa: PLR2004
        assert spline.num_curves == len(HELIX) - 1

    def test_weights_setter_recalculates(self) -> None:
        """Test that replacing the weights rebuilds the curves."""
        spline = BezierSpline(WAVE)
        spline.weights = uniform_weights
        expected = BezierSpline(WAVE, weights=uniform_weights)
        assert spline.weights is uniform_weights
        for curve, expected_curve in zip(spline.curves, expected.curves, strict=True):
            nptest.assert_array_equal(curve.control_points, expected_curve.control_points)

    def test_precomputed_weights_ignore_first_element(self) -> None:
        """Test that a weight sequence matches the equivalent weight function."""
        from_sequence = BezierSpline(WAVE, weights=[99.0, 1.0, 1.0, 1.0, 1.0])
        from_function = BezierSpline(WAVE, weights=uniform_weights)
        for curve, expected_curve in zip(from_sequence.curves, from_function.curves, strict=True):
            nptest.assert_array_equal(curve.control_points, expected_curve.control_points)

    def test_weight_function_arguments(self) -> None:
        """Test that weight functions are called for every interior knot."""
        calls: list[int] = []

        def weights(i: int, knots: Sequence[FixedVector]) -> float:
            assert len(knots) == len(WAVE)
            calls.append(i)
            return 1.0

        BezierSpline(WAVE, weights=weights)
        assert calls == [1, 2, 3, 4]

    def test_repr(self) -> None:
        """Test the string representation."""
        assert repr(BezierSpline(HELIX)) == "BezierSpline(num_knots=5, dim=3)"


class TestInterpolation:
    """Test the geometric properties of the computed curves."""

    @pytest.mark.parametrize("knots", [ZIGZAG, WAVE, HELIX])
    def test_curves_interpolate_knots(self, knots: list[list[float]]) -> None:
        """Test that curve i runs from knot i to knot i + 1."""
        curves = BezierSpline(knots).curves
        for i, curve in enumerate(curves):
            nptest.assert_array_equal(curve.at(0.0), knots[i])
            nptest.assert_array_equal(curve.at(1.0), knots[i + 1])

    @pytest.mark.parametrize("knots", [ZIGZAG, WAVE, HELIX])
    def test_weighted_tangent_continuity(self, knots: list[list[float]]) -> None:
        """Test that tangents at a knot differ by the knot weight."""
        spline = BezierSpline(knots)
        curves = spline.curves
        vectors = spline.knots
        for i in range(1, len(knots) - 1):
            k = distance_ratio(i, vectors)
            left = curves[i - 1].derivative_at(1.0)
            right = curves[i].derivative_at(0.0)
            nptest.assert_allclose(left, k * right, rtol=1e-10, atol=1e-12)

    @pytest.mark.parametrize("knots", [ZIGZAG, WAVE, HELIX])
    def test_uniform_weights_give_c2_spline(self, knots: list[list[float]]) -> None:
        """Test first and second derivative continuity at interior knots."""
        curves = BezierSpline(knots, weights=uniform_weights).curves
        for i in range(1, len(knots) - 1):
            left, right = curves[i - 1], curves[i]
            nptest.assert_allclose(
                left.derivative_at(1.0), right.derivative_at(0.0), rtol=1e-10, atol=1e-10
            )
            nptest.assert_allclose(
                left.derivative_at(1.0, order=2),
                right.derivative_at(0.0, order=2),
                rtol=1e-10,
                atol=1e-10,
            )

    @pytest.mark.parametrize("knots", [ZIGZAG, WAVE, HELIX])
    def test_uniform_weights_give_natural_ends(self, knots: list[list[float]]) -> None:
        """Test that the second derivative vanishes at both ends."""
        curves = BezierSpline(knots, weights=uniform_weights).curves
        nptest.assert_allclose(curves[0].derivative_at(0.0, order=2), 0.0, atol=1e-10)
        nptest.assert_allclose(curves[-1].derivative_at(1.0, order=2), 0.0, atol=1e-10)

    def test_symmetric_knots_give_linear_abscissa(self) -> None:
        """Test that equally spaced abscissae stay linear in the parameter."""
        for i, curve in enumerate(BezierSpline(ZIGZAG).curves):
            nptest.assert_allclose(
                curve.control_points[:, 0], [i, i + 1 / 3, i + 2 / 3, i + 1], rtol=1e-12
            )

    def test_three_knots(self) -> None:
        """Test the smallest non-empty spline against hand-computed control points."""
        curves = BezierSpline([[0, 0], [1, 1], [2, 0]]).curves
        nptest.assert_allclose(
            curves[0].control_points, [[0, 0], [1 / 3, 0.5], [2 / 3, 1], [1, 1]], rtol=1e-14
        )
        nptest.assert_allclose(
            curves[1].control_points, [[1, 1], [4 / 3, 1], [5 / 3, 0.5], [2, 0]], rtol=1e-14
        )


class TestGetPoints:
    """Test solving the spline for a coordinate value."""

    def test_point_inside_a_curve(self) -> None:
        """Test a value crossed once, in the middle of a segment."""
        points = BezierSpline(ZIGZAG).get_points(0, 1.5)
        assert points.shape == (1, 2)
        assert points[0, 0] == pytest.approx(1.5)

    def test_shared_knot_is_reported_once(self) -> None:
        """Test that a knot found on two adjacent curves is merged."""
        points = BezierSpline(ZIGZAG).get_points(0, 1.0)
        assert points.shape == (1, 2)
        nptest.assert_allclose(points[0], [1.0, 1.0], atol=1e-12)

    def test_touching_peak(self) -> None:
        """Test the peak of a symmetric three-knot spline."""
        points = BezierSpline([[0, 0], [1, 1], [2, 0]]).get_points(1, 1.0)
        nptest.assert_allclose(points, [[1.0, 1.0]], atol=1e-12)

    def test_all_points_have_the_requested_coordinate(self) -> None:
        """Test every reported point of a wavy spline."""
        spline = BezierSpline(WAVE)
        points = spline.get_points(1, 0.25)
        assert points.shape[0] >= 3  # noqa: PLR2004
        nptest.assert_allclose(points[:, 1], 0.25, atol=1e-9)

    def test_no_points(self) -> None:
        """Test a value outside the range of the spline."""
        assert BezierSpline(ZIGZAG).get_points(0, 10.0).shape == (0, 2)

    def test_invalid_axis_raises(self) -> None:
        """Test that the axis must be a valid coordinate index."""
        spline = BezierSpline(ZIGZAG)
        with pytest.raises(IndexError):
            spline.get_points(2, 0.0)
        with pytest.raises(TypeError):
            spline.get_points("x", 0.0)  # type: ignore[arg-type]

    def test_invalid_axis_raises_without_curves(self) -> None:
        """Test that the axis is checked even when there is nothing to solve."""
        spline = BezierSpline([[0, 0], [1, 1]])
        with pytest.raises(IndexError):
            spline.get_points(5, 0.0)
        with pytest.raises(IndexError):
            spline.get_points(-1, 0.0)
        assert spline.get_points(1, 0.0).shape == (0, 2)


class TestSampling:
    """Test the control polygon and tabulation."""

    def test_control_polygon(self) -> None:
        """Test that the polygon lists shared knots once."""
        spline = BezierSpline(WAVE)
        polygon = spline.control_polygon()
        assert polygon.shape == (3 * (len(WAVE) - 1) + 1, 2)
        nptest.assert_array_equal(polygon[::3], np.array(WAVE))
        nptest.assert_array_equal(polygon[1:3], spline.curves[0].control_points[1:3])

    def test_control_polygon_empty(self) -> None:
        """Test the polygon of a spline without curves."""
        assert BezierSpline([[0.0, 0.0, 0.0]]).control_polygon().shape == (0, 3)

    @pytest.mark.parametrize("n_pts", [2, 5, 20])
    def test_tabulate(self, n_pts: int) -> None:
        """Test the number of samples and that knots are sampled exactly."""
        spline = BezierSpline(HELIX)
        samples = spline.tabulate(n_pts)
        assert samples.shape == ((n_pts - 1) * (len(HELIX) - 1) + 1, 3)
        nptest.assert_array_equal(samples[:: n_pts - 1], np.array(HELIX))

    def test_tabulate_agrees_with_curves(self) -> None:
        """Test that samples are points of the curves."""
        spline = BezierSpline(ZIGZAG)
        samples = spline.tabulate(5)
        nptest.assert_allclose(samples[1], spline.curves[0].at(0.25), rtol=1e-15)
        nptest.assert_allclose(samples[6], spline.curves[1].at(0.5), rtol=1e-15)

    def test_tabulate_empty(self) -> None:
        """Test sampling a spline without curves."""
        assert BezierSpline().tabulate(4).shape == (0, 0)

    @pytest.mark.parametrize("n_pts", [1, 0, 2.5])
    def test_tabulate_invalid_count_raises(self, n_pts: int) -> None:
        """Test that at least two samples per curve are required."""
        with pytest.raises(ValueError, match="at least 2"):
            BezierSpline(ZIGZAG).tabulate(n_pts)


class TestLogging:
    """Test the diagnostics emitted while building splines."""

    def test_recalculation_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test the debug message of a recomputation."""
        with caplog.at_level(logging.DEBUG, logger="bezierc2.spline"):
            BezierSpline(ZIGZAG)
        assert "4 knots into 3 curves" in caplog.text

    def test_empty_spline_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test the debug message for too few knots."""
        with caplog.at_level(logging.DEBUG, logger="bezierc2.spline"):
            BezierSpline([[0.0, 0.0], [1.0, 1.0]])
        assert "has no curves" in caplog.text

    def test_coincident_knots_warn(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that degenerate knots produce non-finite points and a warning."""
        with caplog.at_level(logging.WARNING, logger="bezierc2.spline"):
            spline = BezierSpline([[0.0, 0.0], [1.0, 1.0], [1.0, 1.0], [2.0, 0.0]])
        assert spline.num_curves == 3  # noqa: PLR2004
        assert not np.all(np.isfinite(spline.control_polygon()))
        assert any(record.levelno == logging.WARNING for record in caplog.records)
