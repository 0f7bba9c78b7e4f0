"""Numeric tolerances of bezierc2, per floating-point type.

Three levels are available for every supported NumPy floating type:

- `"default"`: approximate equality of vectors, and the absolute part of
  the test that merges spline points found on adjacent segments.
- `"strict"`: quantities that are exact up to round-off, such as
  negligible cubic coefficients and roots just outside [0, 1] in
  `BezierCurve.solve`.
- `"conservative"`: loose comparisons, e.g. of results that went through
  several solves.
"""

from functools import cache
from typing import Any, Final, Literal, TypeAlias, TypedDict

import numpy as np
from numpy import typing as npt

ToleranceLevel: TypeAlias = Literal["default", "strict", "conservative"]

_FLOAT_TYPES: Final = (np.float16, np.float32, np.float64, np.longdouble)

# One entry per type of _FLOAT_TYPES, in the same order.
_TOLERANCES: Final[dict[str, tuple[float, float, float, float]]] = {
    "default": (1e-3, 1e-6, 1e-8, 1e-10),
    "strict": (1e-3, 1e-7, 1e-12, 1e-15),
    "conservative": (1e-2, 1e-5, 1e-6, 1e-8),
}


@cache
def _float_type_position(name: str) -> int:
    """Position in `_FLOAT_TYPES` of the floating type with the given dtype name.

    Raises:
        ValueError: If the dtype is not a supported floating-point type.
    """
    scalar_type = np.dtype(name).type
    for position, float_type in enumerate(_FLOAT_TYPES):
        if scalar_type is float_type:
            return position
    raise ValueError(f"Unsupported dtype: {name}")


def _float_dtype(dtype: npt.DTypeLike) -> np.dtype[Any]:
    """Normalize a dtype-like and check that it is a supported floating type."""
    dtype_obj = np.dtype(dtype)
    _float_type_position(dtype_obj.name)
    return dtype_obj


def get_tolerance(dtype: npt.DTypeLike = np.float64, level: ToleranceLevel = "default") -> float:
    """Get a tolerance for a floating-point type.

    Args:
        dtype (npt.DTypeLike): NumPy floating-point data type. Defaults to float64.
        level (ToleranceLevel): `"default"`, `"strict"` or `"conservative"`.

    Returns:
        float: The tolerance.

    Raises:
        ValueError: If dtype is not a supported floating-point type or the
            level is unknown.

    Example:
        >>> get_tolerance("float32", "strict")
        1e-07
    """
    if level not in _TOLERANCES:
        raise ValueError(f"Unknown tolerance level: {level!r}")
    return _TOLERANCES[level][_float_type_position(np.dtype(dtype).name)]


def get_default_tolerance(dtype: npt.DTypeLike) -> float:
    """Get the default tolerance of a floating-point type.

    Example:
        >>> get_default_tolerance(np.float64)
        1e-08
    """
    return get_tolerance(dtype, "default")


def get_strict_tolerance(dtype: npt.DTypeLike) -> float:
    """Get the strict tolerance of a floating-point type."""
    return get_tolerance(dtype, "strict")


def get_conservative_tolerance(dtype: npt.DTypeLike) -> float:
    """Get the conservative tolerance of a floating-point type."""
    return get_tolerance(dtype, "conservative")


def get_machine_epsilon(dtype: npt.DTypeLike) -> float:
    """Get the machine epsilon of a floating-point type.

    Raises:
        ValueError: If dtype is not a supported floating-point type.
    """
    return float(np.finfo(_float_dtype(dtype)).eps)


class ToleranceInfo(TypedDict):
    """Tolerances and precision limits of a floating-point type."""

    dtype: npt.DTypeLike
    machine_epsilon: float
    default_tolerance: float
    strict_tolerance: float
    conservative_tolerance: float
    precision_decimals: int
    resolution: float
    max_value: float
    min_value: float


def get_tolerance_info(dtype: npt.DTypeLike) -> ToleranceInfo:
    """Collect the tolerances and precision limits of a floating-point type.

    Args:
        dtype (npt.DTypeLike): NumPy floating-point data type. It is reported
            back unchanged under the `"dtype"` key.

    Returns:
        ToleranceInfo: The machine epsilon, the tolerance of every level, the
        number of reliable decimals, and the largest and smallest positive
        normal values.

    Raises:
        ValueError: If dtype is not a supported floating-point type.
    """
    finfo = np.finfo(_float_dtype(dtype))
    return {
        "dtype": dtype,
        "machine_epsilon": float(finfo.eps),
        "default_tolerance": get_tolerance(dtype, "default"),
        "strict_tolerance": get_tolerance(dtype, "strict"),
        "conservative_tolerance": get_tolerance(dtype, "conservative"),
        "precision_decimals": int(finfo.precision),
        "resolution": float(finfo.resolution),
        "max_value": float(finfo.max),
        "min_value": float(finfo.tiny),
    }
