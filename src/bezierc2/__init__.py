"""Public API surface for bezierc2.

Defines package metadata and exported interfaces.
"""

import logging
from typing import Final

from .bezier import BezierCurve
from .errors import DimensionMismatchError, InvalidSwizzleError
from .polynomial import solve_cubic, solve_linear, solve_quadratic
from .spline import BezierSpline, WeightFunction, distance_ratio, uniform_weights
from .tolerance import (
    ToleranceInfo,
    ToleranceLevel,
    get_conservative_tolerance,
    get_default_tolerance,
    get_machine_epsilon,
    get_strict_tolerance,
    get_tolerance,
    get_tolerance_info,
)
from .tridiagonal import solve_tridiagonal
from .vector import (
    FixedVector,
    VectorFactory,
    add,
    get_vector_factory,
    is_vector,
    lerp,
    multiply,
    slerp,
    vector,
)

# The library never configures logging output itself.
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Package metadata
__version__: Final[str] = "0.1.0"
__license__: Final[str] = "MIT"
__author__: Final[str] = "The bezierc2 developers"

# Public interface: only functions/classes that don't start with _
__all__ = [
    "BezierCurve",
    "BezierSpline",
    "DimensionMismatchError",
    "FixedVector",
    "InvalidSwizzleError",
    "ToleranceInfo",
    "ToleranceLevel",
    "VectorFactory",
    "WeightFunction",
    "__author__",
    "__license__",
    "__version__",
    "add",
    "distance_ratio",
    "get_conservative_tolerance",
    "get_default_tolerance",
    "get_machine_epsilon",
    "get_strict_tolerance",
    "get_tolerance",
    "get_tolerance_info",
    "get_vector_factory",
    "is_vector",
    "lerp",
    "multiply",
    "slerp",
    "solve_cubic",
    "solve_linear",
    "solve_quadratic",
    "solve_tridiagonal",
    "uniform_weights",
    "vector",
]
