"""Input normalization helpers shared by curves, solvers and splines."""

from __future__ import annotations

import numbers
from collections.abc import Sequence
from typing import Any

import numpy as np
from numpy import typing as npt

from .errors import DimensionMismatchError


def _is_real_scalar(value: Any) -> bool:
    """Check whether a value is a real number.

    Booleans are rejected even though Python treats them as integers. NumPy
    scalars register with the `numbers` hierarchy and are accepted.
    """
    if isinstance(value, bool | np.bool_):
        return False
    return isinstance(value, numbers.Real)


def _is_sequence(value: Any) -> bool:
    """Check whether a value can provide vector components.

    NumPy scalars and 0-d arrays implement `__array__` but hold a single
    number, so they are not sequences.
    """
    if isinstance(value, str | bytes | np.generic):
        return False
    if isinstance(value, np.ndarray):
        return value.ndim > 0
    return isinstance(value, Sequence) or hasattr(value, "__array__")


def _normalize_params_1D(
    t: npt.ArrayLike,
) -> tuple[npt.NDArray[np.float64], tuple[int, ...]]:
    """Normalize curve parameters to a clamped 1D float64 array.

    Scalars become one-element arrays and multi-dimensional arrays are
    flattened; the input shape is returned so that callers can restore it.

    Args:
        t (npt.ArrayLike): Parameter value(s).

    Returns:
        tuple[npt.NDArray[np.float64], tuple[int, ...]]: The contiguous, clamped
        parameters and the shape of the input.
    """
    arr = np.asarray(t, dtype=np.float64)
    input_shape = arr.shape
    arr = np.ascontiguousarray(np.clip(arr.ravel(), 0.0, 1.0))
    return arr, input_shape


def _compute_final_output_shape(input_shape: tuple[int, ...], n_last: int) -> tuple[int, ...]:
    """Compute the output shape of a per-parameter evaluation.

    Args:
        input_shape (tuple[int, ...]): The shape of the input parameters.
        n_last (int): The size of the trailing axis (basis count or dimension).

    Returns:
        tuple[int, ...]: `(n_last,)` for scalar input, `(*input_shape, n_last)` otherwise.
    """
    if len(input_shape) == 0:
        return (n_last,)
    return (*input_shape, n_last)


def _as_point(value: Any) -> npt.NDArray[np.float64]:
    """Convert a scalar or a sequence of reals into a 1D float64 array.

    Raises:
        TypeError: If the value (or any of its components) is not a real number.
    """
    if _is_real_scalar(value):
        return np.array([float(value)], dtype=np.float64)
    if not _is_sequence(value):
        raise TypeError(f"Expected a number or a sequence of numbers, got {type(value).__name__}.")
    arr = np.asarray(value)
    if arr.ndim != 1 or not (
        np.issubdtype(arr.dtype, np.integer) or np.issubdtype(arr.dtype, np.floating)
    ):
        raise TypeError("Points must be flat sequences of real numbers.")
    return arr.astype(np.float64)


def _as_point_array(values: Sequence[Any], name: str = "points") -> npt.NDArray[np.float64]:
    """Stack a sequence of points of equal dimension into a 2D float64 array.

    Scalars are treated as 1-dimensional points.

    Args:
        values (Sequence[Any]): The points.
        name (str): Name used in error messages.

    Returns:
        npt.NDArray[np.float64]: Array of shape (len(values), dim).

    Raises:
        TypeError: If any point is not numeric.
        DimensionMismatchError: If the points have different dimensions.
    """
    points = [_as_point(v) for v in values]
    if len(points) == 0:
        return np.empty((0, 0), dtype=np.float64)
    dim = points[0].shape[0]
    for point in points[1:]:
        if point.shape[0] != dim:
            raise DimensionMismatchError(
                dim,
                point.shape[0],
                f"All {name} must have the same dimension: expected {dim}, got {point.shape[0]}.",
            )
    return np.stack(points)
