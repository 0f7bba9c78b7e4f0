"""Numba-compiled kernels for Bézier curve evaluation.

The kernels expect pre-normalized, contiguous float64 inputs and perform no
validation. Use `BezierCurve` for general evaluation.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

import numba as nb
import numpy as np
import numpy.typing as npt

F = TypeVar("F", bound=Callable[..., Any])

if TYPE_CHECKING:
    # During type-checking, make the decorator a no-op that preserves types.
    def nb_jit(*args: object, **kwargs: object) -> Callable[[F], F]:
        def decorator(func: F) -> F:
            return func

        return decorator
else:
    # At runtime, use the real Numba decorator.
    nb_jit = nb.jit  # type: ignore[attr-defined]


@nb_jit(
    nopython=True,
    cache=True,
    parallel=False,
)
def _tabulate_Bernstein_basis_1D_core(
    n: int,
    t: npt.NDArray[np.float64],
    out: npt.NDArray[np.float64],
) -> None:
    """Evaluate the Bernstein basis polynomials of degree n at points t.

    Writes `B_i,n(t_j) = C(n, i) t_j^i (1 - t_j)^(n - i)` to `out[j, i]`.
    The binomial factor is accumulated incrementally. At `t = 0` and `t = 1`
    the basis is exactly the unit vector of the first and last function.

    Args:
        n (int): Degree of the Bernstein polynomials. Must be non-negative.
        t (npt.NDArray[np.float64]): 1D array of evaluation points.
        out (npt.NDArray[np.float64]): Output array of shape (len(t), n+1).
    """
    for j in range(t.shape[0]):
        u = t[j]
        one_minus_u = 1.0 - u
        binom = 1.0
        for i in range(n + 1):
            out[j, i] = binom * u**i * one_minus_u ** (n - i)
            binom = binom * (n - i) / (i + 1.0)


@nb_jit(
    nopython=True,
    cache=True,
    parallel=False,
)
def _evaluate_Bezier_core(
    control_points: npt.NDArray[np.float64],
    t: npt.NDArray[np.float64],
    out: npt.NDArray[np.float64],
) -> None:
    """Evaluate a Bézier curve in Bernstein form at points t.

    The degree is `control_points.shape[0] - 1`. For each point, the
    weighted control points are summed in order, so `t = 0` reproduces the
    first control point exactly and `t = 1` the last one.

    Args:
        control_points (npt.NDArray[np.float64]): Array of shape (degree+1, dim).
        t (npt.NDArray[np.float64]): 1D array of evaluation points in [0, 1].
        out (npt.NDArray[np.float64]): Output array of shape (len(t), dim).
    """
    n_ctrl = control_points.shape[0]
    dim = control_points.shape[1]
    basis = np.empty((t.shape[0], n_ctrl), dtype=np.float64)
    _tabulate_Bernstein_basis_1D_core(n_ctrl - 1, t, basis)

    for j in range(t.shape[0]):
        for k in range(dim):
            acc = 0.0
            for i in range(n_ctrl):
                acc += basis[j, i] * control_points[i, k]
            out[j, k] = acc


def _warmup_numba_functions() -> None:
    """Precompile the kernels with float64 signatures for a faster first call."""
    pts_dummy = np.array([0.0, 0.5, 1.0], dtype=np.float64)
    ctrl_dummy = np.zeros((4, 2), dtype=np.float64)
    basis_dummy = np.empty((3, 4), dtype=np.float64)
    out_dummy = np.empty((3, 2), dtype=np.float64)

    _tabulate_Bernstein_basis_1D_core(3, pts_dummy, basis_dummy)
    _evaluate_Bezier_core(ctrl_dummy, pts_dummy, out_dummy)


# Precompile numba functions on module import (skip during type checking)
if not TYPE_CHECKING:
    _warmup_numba_functions()
