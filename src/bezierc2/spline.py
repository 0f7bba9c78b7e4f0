"""C2 cubic Bézier splines through a list of knots.

The spline is a chain of cubic `BezierCurve` segments, one per pair of
consecutive knots. The inner control points of all segments are computed at
once from a tridiagonal system, so that the spline is continuous in its
first and second derivatives, up to the per-knot weights that scale the
tangents on either side of a knot.
"""

from __future__ import annotations

import logging
import numbers
from collections.abc import Callable, Sequence
from typing import Any, TypeAlias

import numpy as np
from numpy import typing as npt

from ._array_utils import _as_point_array
from .bezier import BezierCurve
from .tolerance import get_default_tolerance
from .tridiagonal import solve_tridiagonal
from .vector import FixedVector, get_vector_factory

logger = logging.getLogger(__name__)

WeightFunction: TypeAlias = Callable[[int, Sequence[FixedVector]], float]
"""Computes the weight of the knot at an index from the list of knots."""

# Relative tolerance used to merge points found on adjacent segments.
_MERGE_RTOL = 1e-3


def distance_ratio(i: int, knots: Sequence[FixedVector]) -> float:
    """Weight a knot by the ratio of the lengths of its adjacent chords.

    `|K[i] - K[i-1]| / |K[i+1] - K[i]|`. Higher values pull the next segment
    more strongly in the direction of the tangent at the knot.

    Args:
        i (int): Index of an interior knot.
        knots (Sequence[FixedVector]): The knots of the spline.

    Returns:
        float: The weight. Coincident knots give inf or NaN.
    """
    w1 = knots[i].minus(knots[i - 1]).magnitude
    w2 = knots[i + 1].minus(knots[i]).magnitude
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(w1) / np.float64(w2))


def uniform_weights(i: int, knots: Sequence[FixedVector]) -> float:
    """Weight every knot with 1, which gives a spline with matching derivatives."""
    return 1.0


def _is_close(
    p: npt.NDArray[np.float64], q: npt.NDArray[np.float64], atol: float, rtol: float
) -> bool:
    """Check whether two points agree coordinatewise up to `atol + rtol * max(|p|, |q|)`."""
    bound = atol + rtol * np.maximum(np.abs(p), np.abs(q))
    return bool(np.all(np.abs(p - q) <= bound))


class BezierSpline:
    """A piecewise cubic Bézier curve interpolating a list of knots.

    With `n` knots the spline has `n - 1` segments; fewer than three knots
    give an empty spline. The segments are recomputed whenever the knots or
    the weights are replaced.

    Attributes:
        _knots (list[FixedVector]): The knots, all of the same dimension.
        _weights (WeightFunction | Sequence[float]): The weight source.
        _curves (list[BezierCurve]): The segments derived from the knots.
    """

    _knots: list[FixedVector]
    _weights: WeightFunction | Sequence[float]
    _curves: list[BezierCurve]

    def __init__(
        self,
        knots: Sequence[Any] | npt.ArrayLike = (),
        weights: WeightFunction | Sequence[float] = distance_ratio,
    ) -> None:
        """Create a spline.

        Args:
            knots (Sequence[Any] | npt.ArrayLike): Points of equal dimension
                the spline passes through, in order. Defaults to no knots.
            weights (WeightFunction | Sequence[float]): Either a function
                `(index, knots) -> weight`, or precomputed weights indexed by
                knot (the first element is ignored). Defaults to
                `distance_ratio`.

        Raises:
            TypeError: If `weights` is neither callable nor a sequence, or a
                knot is not numeric.
            DimensionMismatchError: If the knots have different dimensions.
        """
        self._weights = self._validate_weights(weights)
        self._knots = []
        self._curves = []
        knots = list(knots)  # type: ignore[arg-type]
        if len(knots) > 0:
            self.set_knots(knots)

    @staticmethod
    def _validate_weights(
        weights: WeightFunction | Sequence[float],
    ) -> WeightFunction | Sequence[float]:
        if callable(weights):
            return weights
        if isinstance(weights, Sequence | np.ndarray) and not isinstance(weights, str | bytes):
            return weights
        raise TypeError("weights must be a function or a sequence of numbers.")

    @property
    def dim(self) -> int:
        """The dimension of the knots, 0 for a spline without knots."""
        return self._knots[0].dim if self._knots else 0

    @property
    def knots(self) -> list[FixedVector]:
        """Copies of the knots. Assigning replaces all knots and recalculates."""
        return [knot.copy() for knot in self._knots]

    @knots.setter
    def knots(self, new_knots: Sequence[Any] | npt.ArrayLike) -> None:
        self.set_knots(new_knots)

    @property
    def weights(self) -> WeightFunction | Sequence[float]:
        """The weight source. Assigning a new one recalculates the spline."""
        return self._weights

    @weights.setter
    def weights(self, weights: WeightFunction | Sequence[float]) -> None:
        self._weights = self._validate_weights(weights)
        self.recalculate()

    @property
    def curves(self) -> list[BezierCurve]:
        """Copies of the segments, in knot order."""
        return [BezierCurve(curve.control_points) for curve in self._curves]

    @property
    def num_curves(self) -> int:
        """The number of segments."""
        return len(self._curves)

    def __len__(self) -> int:
        return len(self._curves)

    def __repr__(self) -> str:
        return f"BezierSpline(num_knots={len(self._knots)}, dim={self.dim})"

    def set_knots(self, new_knots: Sequence[Any] | npt.ArrayLike) -> None:
        """Replace all knots and recalculate the segments.

        Args:
            new_knots (Sequence[Any] | npt.ArrayLike): Points of equal
                dimension. Numbers are taken as 1-dimensional points.

        Raises:
            TypeError: If a knot is not numeric.
            DimensionMismatchError: If the knots have different dimensions.
        """
        points = _as_point_array(list(new_knots), "knots")  # type: ignore[arg-type]
        if points.shape[0] == 0:
            self._knots = []
        else:
            factory = get_vector_factory(points.shape[1])
            self._knots = [factory(row) for row in points]
        self.recalculate()

    def _knot_weights(self) -> list[float]:
        """Weights of all knots. Entries 0 and `n - 1` are unused and set to 0."""
        n = len(self._knots)
        k = [0.0] * n
        if callable(self._weights):
            knots = tuple(self._knots)
            for i in range(1, n - 1):
                k[i] = float(self._weights(i, knots))
            return k

        if len(self._weights) < n - 1:
            raise ValueError(
                f"{n} knots need at least {n - 1} weights (the first one is ignored), "
                f"got {len(self._weights)}."
            )
        for i in range(1, n - 1):
            k[i] = float(self._weights[i])
        return k

    def recalculate(self) -> None:
        """Recompute the segments from the knots and the weights.

        The first inner control points `p1` of all segments solve a
        tridiagonal system of size `n - 1` (O(n) operations). The second
        inner control points follow from the continuity conditions at the
        knots:

        - `p2[i] = K[i+1] - k[i+1] (p1[i+1] - K[i+1])`
        - `p2[n-2] = (K[n-1] + p1[n-2]) / 2` for the last segment.

        Raises:
            ValueError: If precomputed weights are fewer than `n - 1`.
        """
        n = len(self._knots)
        self._curves = []
        if n < 3:
            logger.debug("Spline with %d knots has no curves (at least 3 are needed)", n)
            return

        K = self._knots
        k = self._knot_weights()

        with np.errstate(invalid="ignore", over="ignore"):
            a: list[float] = [0.0]
            b: list[float] = [2.0]
            c: list[float] = [k[1]]
            d: list[FixedVector] = [K[0] + K[1] * (1 + k[1])]
            for i in range(1, n - 2):
                ki = k[i]
                a.append(1.0)
                b.append(2 * (ki + (ki * ki)))
                c.append(k[i + 1] * ki * ki)
                d.append(K[i] * (1 + (2 * ki) + (ki * ki)) + K[i + 1] * (1 + k[i + 1]) * (ki * ki))
            kl = k[n - 2]
            a.append(1.0)
            b.append((2 * kl) + (1.5 * kl * kl))
            c.append(0.0)
            d.append(K[n - 2] * (1 + (2 * kl) + (kl * kl)) + K[n - 1] * (0.5 * kl * kl))

            p1_array = solve_tridiagonal(a, b, c, d)
            factory = get_vector_factory(self.dim)
            p1 = [factory(row) for row in p1_array]

            p2 = [K[i + 1] - (p1[i + 1] - K[i + 1]) * k[i + 1] for i in range(n - 2)]
            p2.append((K[n - 1] + p1[n - 2]) * 0.5)

        if not np.all(np.isfinite(p1_array)):
            logger.warning(
                "Spline control points are not finite; check for coincident knots or bad weights"
            )

        self._curves = [BezierCurve([K[i], p1[i], p2[i], K[i + 1]]) for i in range(n - 1)]
        logger.debug("Recomputed spline with %d knots into %d curves", n, len(self._curves))

    def get_points(self, axis: int, value: float) -> npt.NDArray[np.float64]:
        """Find all points of the spline with a given coordinate.

        Every segment is solved for `point[axis] == value`. Points found on
        two adjacent segments (at a shared knot) are reported once: two
        points are merged when every coordinate agrees up to
        `atol + 1e-3 * max(|p|, |q|)`, with `atol` the default float64
        tolerance. The first occurrence is kept.

        Args:
            axis (int): The coordinate index (0 for x, 1 for y, ...).
            value (float): The target value of that coordinate.

        Returns:
            npt.NDArray[np.float64]: Array of shape (m, dim), in segment order.

        Raises:
            TypeError: If `axis` is not an integer.
            IndexError: If `axis` is not a valid coordinate index.

        Example:
            >>> spline = BezierSpline([[0, 0], [1, 1], [2, 0]])
            >>> spline.get_points(1, 1.0)
            array([[1., 1.]])
        """
        if isinstance(axis, bool) or not isinstance(axis, numbers.Integral):
            raise TypeError("axis must be an integer.")
        if self._knots and not 0 <= axis < self.dim:
            raise IndexError(f"axis {axis} is out of range for dimension {self.dim}.")

        atol = get_default_tolerance(np.float64)
        points: list[npt.NDArray[np.float64]] = []
        for curve in self._curves:
            for t in curve.solve(axis, value):
                point = curve.at(t)
                if not any(_is_close(point, q, atol, _MERGE_RTOL) for q in points):
                    points.append(point)

        if len(points) == 0:
            return np.empty((0, self.dim), dtype=np.float64)
        return np.stack(points)

    def control_polygon(self) -> npt.NDArray[np.float64]:
        """All control points of the spline as one chain.

        Knots shared by adjacent segments are listed once, so knot `i` is
        found at row `3 i`.

        Returns:
            npt.NDArray[np.float64]: Array of shape (3 (n - 1) + 1, dim), or
            (0, dim) for a spline without curves.
        """
        if len(self._curves) == 0:
            return np.empty((0, self.dim), dtype=np.float64)
        chunks = [curve.control_points[:3] for curve in self._curves]
        chunks.append(self._curves[-1].control_points[3:])
        return np.vstack(chunks)

    def tabulate(self, n_pts_per_curve: int = 20) -> npt.NDArray[np.float64]:
        """Sample the spline at equispaced parameters of every segment.

        End points shared by adjacent segments are sampled once.

        Args:
            n_pts_per_curve (int): Number of samples per segment, both ends
                included. Must be at least 2. Defaults to 20.

        Returns:
            npt.NDArray[np.float64]: Array of shape
            ((n_pts_per_curve - 1) * num_curves + 1, dim), or (0, dim) for a
            spline without curves.

        Raises:
            ValueError: If `n_pts_per_curve` is not an integer of at least 2.
        """
        if (
            isinstance(n_pts_per_curve, bool)
            or not isinstance(n_pts_per_curve, numbers.Integral)
            or n_pts_per_curve < 2  # noqa: PLR2004
        ):
            raise ValueError("n_pts_per_curve must be an integer of at least 2.")

        if len(self._curves) == 0:
            return np.empty((0, self.dim), dtype=np.float64)

        t = np.linspace(0.0, 1.0, int(n_pts_per_curve))
        chunks = [curve.tabulate(t[:-1]) for curve in self._curves]
        chunks.append(self._curves[-1].at(1.0)[np.newaxis, :])
        return np.vstack(chunks)
