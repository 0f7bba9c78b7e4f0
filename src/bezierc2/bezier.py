"""Cubic Bézier curves in any dimension."""

from __future__ import annotations

import logging
import math
import numbers
from collections.abc import Iterator, Sequence
from typing import Any

import numpy as np
from numpy import typing as npt

from ._array_utils import (
    _as_point,
    _as_point_array,
    _compute_final_output_shape,
    _is_real_scalar,
    _normalize_params_1D,
)
from ._bezier_core import _evaluate_Bezier_core
from .errors import DimensionMismatchError
from .polynomial import solve_cubic
from .tolerance import get_strict_tolerance

logger = logging.getLogger(__name__)

_NUM_CONTROL_POINTS = 4


def _evaluate(
    control_points: npt.NDArray[np.float64], t: npt.ArrayLike
) -> npt.NDArray[np.float64]:
    """Evaluate the Bernstein form defined by `control_points` at clamped `t`.

    Args:
        control_points (npt.NDArray[np.float64]): Array of shape (degree+1, dim).
        t (npt.ArrayLike): Parameter value(s).

    Returns:
        npt.NDArray[np.float64]: Shape (dim,) for scalar `t`, (*t.shape, dim) otherwise.
    """
    dim = control_points.shape[1]
    t_arr, input_shape = _normalize_params_1D(t)
    out = np.empty((t_arr.shape[0], dim), dtype=np.float64)
    _evaluate_Bezier_core(np.ascontiguousarray(control_points), t_arr, out)
    return out.reshape(_compute_final_output_shape(input_shape, dim))


def _snap_small_coefficients(coefficients: list[float], tol: float) -> list[float]:
    """Set coefficients that are negligible relative to the largest one to zero."""
    scale = max(abs(x) for x in coefficients)
    if scale == 0.0 or not math.isfinite(scale):
        return coefficients
    snapped = [0.0 if abs(x) <= tol * scale else x for x in coefficients]
    if snapped != coefficients:
        logger.debug("Snapped near-zero cubic coefficients %s to %s", coefficients, snapped)
    return snapped


class BezierCurve:
    """A cubic Bézier curve defined by four control points.

    The curve is `B(t) = (1-t)^3 P0 + 3(1-t)^2 t P1 + 3(1-t) t^2 P2 + t^3 P3`
    for `t` in [0, 1]. The end points P0 and P3 lie on the curve, P1 and P2
    steer its tangents.

    Attributes:
        _control_points (npt.NDArray[np.float64]): Array of shape (4, dim).
    """

    _control_points: npt.NDArray[np.float64]

    def __init__(self, control_points: Sequence[Any] | npt.ArrayLike) -> None:
        """Create a curve from its control points.

        Args:
            control_points (Sequence[Any] | npt.ArrayLike): Four points of
                equal dimension (vectors or sequences of numbers), or four
                numbers, which define a 1-dimensional curve.

        Raises:
            ValueError: If there are not exactly four control points.
            TypeError: If a control point is not numeric.
            DimensionMismatchError: If the control points have different dimensions.
        """
        points = list(control_points)  # type: ignore[arg-type]
        if len(points) != _NUM_CONTROL_POINTS:
            raise ValueError(
                f"A cubic Bézier curve needs exactly {_NUM_CONTROL_POINTS} control points, "
                f"got {len(points)}."
            )
        self._control_points = _as_point_array(points, "control points")

    @property
    def dim(self) -> int:
        """The dimension of the space the curve lives in."""
        return int(self._control_points.shape[1])

    @property
    def degree(self) -> int:
        """The polynomial degree of the curve (always 3)."""
        return _NUM_CONTROL_POINTS - 1

    @property
    def control_points(self) -> npt.NDArray[np.float64]:
        """Read-only view of the control points, shape (4, dim)."""
        view = self._control_points.view()
        view.flags.writeable = False
        return view

    def __len__(self) -> int:
        return _NUM_CONTROL_POINTS

    def __iter__(self) -> Iterator[npt.NDArray[np.float64]]:
        return (point.copy() for point in self._control_points)

    def __getitem__(self, index: int) -> npt.NDArray[np.float64]:
        return self._control_points[index].copy()

    def __setitem__(self, index: int, point: Any) -> None:
        """Replace a control point, e.g. to move an end point of the curve.

        Raises:
            DimensionMismatchError: If the point dimension differs from the curve's.
        """
        new_point = _as_point(point)
        if new_point.shape[0] != self.dim:
            raise DimensionMismatchError(self.dim, new_point.shape[0])
        self._control_points[index] = new_point

    def __repr__(self) -> str:
        return f"BezierCurve({self._control_points.tolist()})"

    def at(self, t: float) -> npt.NDArray[np.float64]:
        """Evaluate the curve at the given parameter.

        Args:
            t (float): The parameter, clamped to [0, 1].

        Returns:
            npt.NDArray[np.float64]: The point on the curve, shape (dim,).

        Raises:
            TypeError: If `t` is not a number.
        """
        if not _is_real_scalar(t):
            raise TypeError("The curve parameter must be a number.")
        return _evaluate(self._control_points, float(t))

    def tabulate(self, t: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Evaluate the curve at many parameters at once.

        Args:
            t (npt.ArrayLike): Parameter values, clamped to [0, 1].

        Returns:
            npt.NDArray[np.float64]: Points of shape (*t.shape, dim).
        """
        return _evaluate(self._control_points, t)

    def derivative_control_points(self, order: int = 1) -> npt.NDArray[np.float64]:
        """Control points of a derivative of the curve (its hodograph).

        The derivative of a degree-n Bézier curve is a degree-(n-1) Bézier
        curve with control points `n (P[i+1] - P[i])`.

        Args:
            order (int): The derivative order, between 0 and 3. Defaults to 1.

        Returns:
            npt.NDArray[np.float64]: Array of shape (4 - order, dim).

        Raises:
            ValueError: If `order` is not an integer between 0 and 3.
        """
        if (
            isinstance(order, bool)
            or not isinstance(order, numbers.Integral)
            or not 0 <= order <= self.degree
        ):
            raise ValueError(f"Derivative order must be an integer between 0 and {self.degree}.")

        points = self._control_points.copy()
        for m in range(int(order)):
            points = (self.degree - m) * np.diff(points, axis=0)
        return points

    def derivative_at(self, t: npt.ArrayLike, order: int = 1) -> npt.NDArray[np.float64]:
        """Evaluate a derivative of the curve.

        Order 1 gives the tangent (velocity) and order 2 the acceleration.

        Args:
            t (npt.ArrayLike): Parameter value(s), clamped to [0, 1].
            order (int): The derivative order, between 0 and 3. Defaults to 1.

        Returns:
            npt.NDArray[np.float64]: Shape (dim,) for scalar `t`, (*t.shape, dim) otherwise.
        """
        return _evaluate(self.derivative_control_points(order), t)

    def solve(self, axis: int = 0, value: float = 0.0) -> list[float]:
        """Find the parameters at which one coordinate equals a value.

        The coordinate along `axis` is written as the cubic
        `a t^3 + b t^2 + c t + d = 0` with `d = P0[axis] - value`, and its
        real roots are computed in closed form. Coefficients negligible with
        respect to the largest one are treated as zero, and roots within
        round-off of the interval are snapped onto it.

        Args:
            axis (int): The coordinate index (0 for x, 1 for y, ...). Defaults to 0.
            value (float): The target value of that coordinate. Defaults to 0.

        Returns:
            list[float]: The roots in [0, 1], ascending. Near-duplicate roots
            are kept.

        Raises:
            TypeError: If `axis` is not an integer.
            IndexError: If `axis` is not a valid coordinate index.

        Example:
            >>> BezierCurve([0, 1, 2, 3]).solve(0, 1.5)
            [0.5]
        """
        if isinstance(axis, bool) or not isinstance(axis, numbers.Integral):
            raise TypeError("axis must be an integer.")
        if not 0 <= axis < self.dim:
            raise IndexError(f"axis {axis} is out of range for a curve of dimension {self.dim}.")

        p0, p1, p2, p3 = (float(x) for x in self._control_points[:, axis])

        a = -p0 + (3 * p1) - (3 * p2) + p3
        b = (3 * p0) - (6 * p1) + (3 * p2)
        c = -(3 * p0) + (3 * p1)
        d = p0 - float(value)

        tol = get_strict_tolerance(np.float64)
        coefficients = _snap_small_coefficients([a, b, c, d], tol)

        roots: list[float] = []
        for root in solve_cubic(*coefficients):
            if root == 0 or -tol < root < 0:
                root = 0.0
            elif 1 < root < 1 + tol:
                root = 1.0
            if 0 <= root <= 1:
                roots.append(root)
        return sorted(roots)
