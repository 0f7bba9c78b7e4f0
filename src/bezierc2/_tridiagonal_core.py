"""Numba-compiled Thomas algorithm for tridiagonal systems.

The kernel solves one scalar system per column of the right-hand side, all
sharing the same row structure. It uses NumPy's floating-point error model:
a zero pivot produces inf/NaN instead of raising.
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
    error_model="numpy",
)
def _solve_tridiagonal_core(
    a: npt.NDArray[np.float64],
    b: npt.NDArray[np.float64],
    c: npt.NDArray[np.float64],
    d: npt.NDArray[np.float64],
    out: npt.NDArray[np.float64],
) -> None:
    """Solve `A x = d` for a tridiagonal `A`, column by column.

    Row i of `A` reads `a[i] x[i-1] + b[i] x[i] + c[i] x[i+1]`; `a[0]` and
    `c[n-1]` are never read.

    Forward sweep:
    - `cp[0] = c[0] / b[0]`, `dp[0] = d[0] / b[0]`
    - `cp[i] = c[i] / (b[i] - a[i] cp[i-1])`
    - `dp[i] = (d[i] - a[i] dp[i-1]) / (b[i] - a[i] cp[i-1])`

    Back substitution: `x[n-1] = dp[n-1]`, `x[i] = dp[i] - cp[i] x[i+1]`.

    Args:
        a (npt.NDArray[np.float64]): Sub-diagonal, shape (n, dim).
        b (npt.NDArray[np.float64]): Diagonal, shape (n, dim).
        c (npt.NDArray[np.float64]): Super-diagonal, shape (n, dim).
        d (npt.NDArray[np.float64]): Right-hand side, shape (n, dim).
        out (npt.NDArray[np.float64]): Solution, shape (n, dim).

    Note:
        No pivoting is performed.
    """
    n = d.shape[0]
    dim = d.shape[1]
    cp = np.empty((n, dim), dtype=np.float64)
    dp = np.empty((n, dim), dtype=np.float64)

    for k in range(dim):
        cp[0, k] = c[0, k] / b[0, k]
        dp[0, k] = d[0, k] / b[0, k]

    for i in range(1, n):
        for k in range(dim):
            cp[i, k] = c[i, k] / (b[i, k] - a[i, k] * cp[i - 1, k])
            dp[i, k] = (d[i, k] - a[i, k] * dp[i - 1, k]) / (b[i, k] - a[i, k] * cp[i - 1, k])

    for k in range(dim):
        out[n - 1, k] = dp[n - 1, k]
    for i in range(n - 2, -1, -1):
        for k in range(dim):
            out[i, k] = dp[i, k] - cp[i, k] * out[i + 1, k]


def _warmup_numba_functions() -> None:
    """Precompile the kernel with a float64 signature for a faster first call."""
    ones = np.ones((2, 1), dtype=np.float64)
    out_dummy = np.empty((2, 1), dtype=np.float64)
    _solve_tridiagonal_core(ones, ones * 2.0, ones, ones, out_dummy)


# Precompile numba functions on module import (skip during type checking)
if not TYPE_CHECKING:
    _warmup_numba_functions()
