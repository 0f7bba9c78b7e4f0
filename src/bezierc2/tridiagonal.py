"""Tridiagonal linear systems with scalar or vector entries."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np
from numpy import typing as npt

from ._array_utils import _as_point, _is_real_scalar
from ._tridiagonal_core import _solve_tridiagonal_core
from .errors import DimensionMismatchError


def _broadcast_entries(
    entries: Sequence[Any], dim: int, name: str
) -> npt.NDArray[np.float64]:
    """Stack scalar or vector entries into a contiguous (n, dim) array.

    Args:
        entries (Sequence[Any]): The entries of one diagonal or of the right-hand side.
        dim (int): The number of independent systems.
        name (str): Name of the sequence, used in error messages.

    Returns:
        npt.NDArray[np.float64]: Scalars are repeated along the last axis.

    Raises:
        TypeError: If an entry is not numeric.
        DimensionMismatchError: If a vector entry does not have length `dim`.
    """
    out = np.empty((len(entries), dim), dtype=np.float64)
    for i, entry in enumerate(entries):
        if _is_real_scalar(entry):
            out[i, :] = float(entry)
            continue
        point = _as_point(entry)
        if point.shape[0] != dim:
            raise DimensionMismatchError(
                dim, point.shape[0], f"{name}[{i}] has dimension {point.shape[0]}, expected {dim}."
            )
        out[i, :] = point
    return out


def solve_tridiagonal(
    a: Sequence[Any] | npt.ArrayLike,
    b: Sequence[Any] | npt.ArrayLike,
    c: Sequence[Any] | npt.ArrayLike,
    d: Sequence[Any] | npt.ArrayLike,
) -> npt.NDArray[np.float64]:
    """Solve `A x = d` where `A` is tridiagonal, with the Thomas algorithm.

    Entries may be scalars or vectors. With vector entries, one independent
    system is solved per component, which is how a set of points (e.g. the
    control points of a spline) is computed in a single pass.

    Args:
        a (Sequence[Any] | npt.ArrayLike): The sub-diagonal entry of each
            row. `a[0]` is not part of the matrix but must be given (0 is adequate).
        b (Sequence[Any] | npt.ArrayLike): The diagonal entry of each row.
        c (Sequence[Any] | npt.ArrayLike): The super-diagonal entry of each
            row. `c[-1]` is not part of the matrix but must be given (0 is adequate).
        d (Sequence[Any] | npt.ArrayLike): The right-hand side. Its first
            entry sets the dimension of the solution.

    Returns:
        npt.NDArray[np.float64]: The solution, of shape (n,) if every entry
        of `d` is a scalar and of shape (n, dim) otherwise.

    Raises:
        ValueError: If the sequences are empty or have different lengths.
        DimensionMismatchError: If vector entries do not match the dimension of `d[0]`.

    Note:
        No pivoting is performed and singular pivots are not detected: they
        show up as inf or NaN in the solution.

    Example:
        >>> solve_tridiagonal([0, 1, 1], [2, 2, 2], [1, 1, 0], [3, 4, 3])
        array([1., 1., 1.])
    """
    a, b, c, d = list(a), list(b), list(c), list(d)  # type: ignore[arg-type]
    n = len(d)
    if n == 0:
        raise ValueError("The system must have at least one row.")
    if not len(a) == len(b) == len(c) == n:
        raise ValueError(
            f"a, b, c and d must have the same length. Got {len(a)}, {len(b)}, {len(c)}, {n}."
        )

    scalar_rhs = all(_is_real_scalar(x) for x in d)
    dim = 1 if _is_real_scalar(d[0]) else _as_point(d[0]).shape[0]

    arrays = [
        _broadcast_entries(entries, dim, name)
        for entries, name in ((a, "a"), (b, "b"), (c, "c"), (d, "d"))
    ]
    out = np.empty((n, dim), dtype=np.float64)
    _solve_tridiagonal_core(*arrays, out)

    return out[:, 0].copy() if scalar_rhs else out
