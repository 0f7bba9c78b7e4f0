"""Closed-form real roots of linear, quadratic and cubic polynomials.

The solvers never raise on degenerate input. Complex roots are not
supported: a negative quadratic discriminant yields NaN roots, and
divisions by zero propagate as inf/NaN.
"""

from __future__ import annotations

import numpy as np

_SQRT3 = np.sqrt(np.float64(3.0))


def solve_linear(a: float, b: float) -> list[float]:
    """Solve `a*x + b = 0`.

    Args:
        a (float): The coefficient of the first-degree term.
        b (float): The constant term.

    Returns:
        list[float]: The root, or an empty list if `a == 0` (no solution or
        infinitely many solutions; the two cases are not distinguished).
    """
    if a == 0:
        return []
    with np.errstate(all="ignore"):
        return [float(-np.float64(b) / np.float64(a))]


def solve_quadratic(a: float, b: float, c: float) -> list[float]:
    """Solve `a*x^2 + b*x + c = 0` with the quadratic formula.

    Args:
        a (float): The coefficient of the second-degree term.
        b (float): The coefficient of the first-degree term.
        c (float): The constant term.

    Returns:
        list[float]: Both roots, smaller-sign first (`(-b - s) / 2a`, then
        `(-b + s) / 2a`). Both are NaN if the discriminant is negative.
        Falls back to `solve_linear` if `a == 0`.

    Example:
        >>> solve_quadratic(1, -3, 2)
        [1.0, 2.0]
    """
    if a == 0:
        return solve_linear(b, c)

    a, b, c = np.float64(a), np.float64(b), np.float64(c)
    with np.errstate(all="ignore"):
        s = np.sqrt((b * b) - (4 * a * c))
        root1 = (-b - s) / (2 * a)
        root2 = (-b + s) / (2 * a)
    return [float(root1), float(root2)]


def solve_cubic(a: float, b: float, c: float, d: float) -> list[float]:
    """Solve `a*x^3 + b*x^2 + c*x + d = 0` in closed form.

    The case split follows the sign of the discriminant
    `D = 18abcd - 4b^3 d + b^2 c^2 - 4ac^3 - 27a^2 d^2`:

    - `D == 0`: a triple root (if also `b^2 - 3ac == 0`) or a double root
      and a simple root.
    - otherwise, with the depressed-cubic quantities `f`, `g` and
      `h = g^2/4 + f^3/27`: one real root by Cardano's formula if `h > 0`,
      three real roots by the trigonometric method if `h <= 0`.

    The formulas are evaluated in a fixed order since round-off near the
    case boundaries decides which branch is taken.

    Args:
        a (float): The coefficient of the third-degree term.
        b (float): The coefficient of the second-degree term.
        c (float): The coefficient of the first-degree term.
        d (float): The constant term.

    Returns:
        list[float]: The real roots found by the selected branch (1, 2 or 3
        values, unsorted). Falls back to `solve_quadratic` if `a == 0`.

    Example:
        >>> sorted(solve_cubic(1, -6, 11, -6))
        [1.0, 2.0, 3.0]
    """
    if a == 0:
        return solve_quadratic(b, c, d)

    a, b, c, d = np.float64(a), np.float64(b), np.float64(c), np.float64(d)

    with np.errstate(all="ignore"):
        D = a * b * c * d * 18
        D -= b**3 * d * 4
        D += b**2 * c**2
        D -= a * c**3 * 4
        D -= a**2 * d**2 * 27

        D0 = b**2 - (a * c * 3)

        if D == 0:
            if D0 == 0:
                return [float(-b / (a * 3))]

            root1 = a * b * c * 4
            root1 -= a * a * d * 9
            root1 -= b * b * b
            root1 /= a * D0

            root2 = ((a * d * 9) - b * c) / (D0 * 2)
            return [float(root1), float(root2)]

        f = ((3 * (c / a)) - (b**2 / a**2)) / 3
        g = 2 * b**3 / a**3
        g -= 9 * b * c / a**2
        g += 27 * d / a
        g /= 27
        h = (g**2 / 4) + (f**3 / 27)

        if h > 0:
            R = -(g / 2) + np.sqrt(h)
            S = np.cbrt(R)
            T = -(g / 2) - np.sqrt(h)
            U = np.cbrt(T)
            return [float((S + U) - (b / (3 * a)))]

        i = np.sqrt((g**2 / 4) - h)
        j = np.cbrt(i)
        k = np.arccos(-g / (2 * i))
        L = -j
        M = np.cos(k / 3)
        N = _SQRT3 * np.sin(k / 3)
        P = -b / (3 * a)

        root1 = 2 * j * np.cos(k / 3) - (b / (3 * a))
        root2 = (L * (M + N)) + P
        root3 = (L * (M - N)) + P
        return [float(root1), float(root2), float(root3)]
