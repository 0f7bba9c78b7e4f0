"""Fixed-size vectors of real numbers.

A `FixedVector` holds exactly `dim` float64 components. Arithmetic always
returns new vectors; only index and swizzle assignment mutate in place.
Vectors of dimension 4 or less additionally support swizzling, i.e. access
by the names `xyzw`, `rgba` or `stpq` (e.g. `v["y"]` or `v.swizzle("zyx")`).

Vectors are created either directly, `FixedVector(3, 1.0, 2.0, 3.0)`, or
through the per-dimension factories of the module registry,
`vector(3, 1.0, 2.0, 3.0)`.
"""

from __future__ import annotations

import functools
import math
import numbers
from collections.abc import Iterator
from typing import Any, Final

import numpy as np
from numpy import typing as npt

from ._array_utils import _is_real_scalar, _is_sequence
from .errors import DimensionMismatchError, InvalidSwizzleError
from .tolerance import get_default_tolerance

_NAMED_INDICES: Final[tuple[dict[str, int], ...]] = (
    {"x": 0, "y": 1, "z": 2, "w": 3},
    {"r": 0, "g": 1, "b": 2, "a": 3},
    {"s": 0, "t": 1, "p": 2, "q": 3},
)
_MAX_SWIZZLE_DIM: Final[int] = 4


def _validate_dimension(dim: Any) -> int:
    """Validate a vector dimension and return it as an int.

    Raises:
        TypeError: If `dim` is not a number.
        ValueError: If `dim` is not a positive integer.
    """
    if not _is_real_scalar(dim):
        raise TypeError("Dimension must be a number.")
    if not float(dim).is_integer() or dim <= 0:
        raise ValueError(f"Dimension must be a positive integer, got {dim}.")
    return int(dim)


def _get_swizzle_map(name: str) -> dict[str, int] | None:
    """Get the name group that contains every character of `name`."""
    if not name:
        return None
    for symbols in _NAMED_INDICES:
        if all(c in symbols for c in name):
            return symbols
    return None


def _flatten_outer(values: tuple[Any, ...]) -> tuple[Any, ...]:
    """Unwrap single-element outer sequences: `([[1, 2]],)` becomes `(1, 2)`."""
    while len(values) == 1 and _is_sequence(values[0]):
        values = tuple(values[0])
    return values


class FixedVector:
    """A vector with a fixed number of real components.

    Attributes:
        _data (npt.NDArray[np.float64]): Component storage of shape (dim,).
    """

    __slots__ = ("_data",)
    __hash__ = None  # type: ignore[assignment]
    # Let numpy defer to the reflected operators below.
    __array_ufunc__ = None

    _data: npt.NDArray[np.float64]

    def __init__(self, dim: int, *values: Any) -> None:
        """Create a vector of the given dimension.

        Args:
            dim (int): The dimension of the vector. Must be a positive integer.
            *values (Any): Either nothing (zero vector), a single number
                (broadcast to every component), exactly `dim` numbers, a
                single sequence holding those values, or a single
                `FixedVector` of dimension at most `dim` (promoted by zero
                padding).

        Raises:
            TypeError: If `dim` or any value is not a real number.
            ValueError: If `dim` is not a positive integer.
            DimensionMismatchError: If the number of values is neither 0, 1
                nor `dim`, or if a vector of larger dimension is given.
        """
        dim = _validate_dimension(dim)

        if len(values) == 1 and isinstance(values[0], FixedVector):
            source = values[0]
            if source.dim > dim:
                raise DimensionMismatchError(
                    dim, source.dim, f"Cannot demote a vector of dimension {source.dim} to {dim}."
                )
            data = np.zeros(dim, dtype=np.float64)
            data[: source.dim] = source._data
            self._data = data
            return

        flat = _flatten_outer(values)
        if not all(_is_real_scalar(x) for x in flat):
            raise TypeError("All arguments must be numbers.")

        if len(flat) == 0:
            self._data = np.zeros(dim, dtype=np.float64)
        elif len(flat) == 1:
            self._data = np.full(dim, float(flat[0]), dtype=np.float64)
        elif len(flat) == dim:
            self._data = np.array(flat, dtype=np.float64)
        else:
            raise DimensionMismatchError(
                dim,
                len(flat),
                f"Argument list must be empty, have a single number, or have a length equal "
                f"to the dimension {dim}. Got {len(flat)} values.",
            )

    @classmethod
    def _from_array(cls, data: npt.NDArray[Any]) -> FixedVector:
        """Wrap an already validated 1D array without copying it."""
        obj = cls.__new__(cls)
        obj._data = np.asarray(data, dtype=np.float64)
        return obj

    # ------------------------------------------------------------------
    #   Properties

    @property
    def dim(self) -> int:
        """The dimension of the vector."""
        return int(self._data.shape[0])

    @property
    def magnitude(self) -> float:
        """The Euclidean (L2) norm of the vector."""
        return self.pnorm(2)

    # ------------------------------------------------------------------
    #   Arithmetic

    def _coerce_operand(
        self, other: Any, scalar_ok: bool = True
    ) -> float | npt.NDArray[np.float64]:
        """Convert an arithmetic operand into a float or a component array.

        Args:
            other (Any): A number, a `FixedVector` or a sequence of numbers.
            scalar_ok (bool): Whether numbers are accepted. Defaults to True.

        Returns:
            float | npt.NDArray[np.float64]: The operand, ready to combine
            componentwise with this vector.

        Raises:
            TypeError: If the operand is neither a number nor a numeric sequence.
            DimensionMismatchError: If the operand length differs from `dim`,
                or a number is given where a vector is required.
        """
        if _is_real_scalar(other):
            if not scalar_ok:
                raise DimensionMismatchError(
                    self.dim, 1, f"Operand must be a vector of dimension {self.dim}."
                )
            return float(other)

        if isinstance(other, FixedVector):
            arr = other._data
        elif _is_sequence(other):
            arr = np.asarray(other)
            if arr.ndim != 1 or not (
                np.issubdtype(arr.dtype, np.integer) or np.issubdtype(arr.dtype, np.floating)
            ):
                raise TypeError("Vector operands may only contain numbers.")
        else:
            raise TypeError(f"Invalid operand of type {type(other).__name__}.")

        if arr.shape[0] != self.dim:
            raise DimensionMismatchError(self.dim, arr.shape[0])
        return arr.astype(np.float64, copy=False)

    def plus(self, other: Any) -> FixedVector:
        """Add a number or a vector componentwise.

        Args:
            other (Any): A number (added to every component) or a vector of
                the same dimension.

        Returns:
            FixedVector: A new vector with the summed components.

        Raises:
            DimensionMismatchError: If `other` is a vector of another dimension.
        """
        return FixedVector._from_array(self._data + self._coerce_operand(other))

    def minus(self, other: Any) -> FixedVector:
        """Subtract a number or a vector componentwise."""
        return FixedVector._from_array(self._data - self._coerce_operand(other))

    def times(self, other: Any) -> FixedVector:
        """Multiply by a number (scaling) or by a vector componentwise."""
        operand = self._coerce_operand(other)
        with np.errstate(invalid="ignore", over="ignore"):
            return FixedVector._from_array(self._data * operand)

    def div(self, other: Any) -> FixedVector:
        """Divide by a number or by a vector componentwise.

        Division by zero is not guarded: the affected components become
        inf or NaN.
        """
        operand = self._coerce_operand(other)
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            return FixedVector._from_array(self._data / operand)

    def neg(self) -> FixedVector:
        """Negate every component."""
        return self.times(-1)

    def pow(self, p: float) -> FixedVector:
        """Raise every component to the power `p`."""
        if not _is_real_scalar(p):
            raise TypeError("The exponent must be a number.")
        with np.errstate(all="ignore"):
            return FixedVector._from_array(np.power(self._data, float(p)))

    __add__ = plus
    __radd__ = plus
    __sub__ = minus
    __mul__ = times
    __rmul__ = times
    __truediv__ = div
    __neg__ = neg

    def __rsub__(self, other: Any) -> FixedVector:
        return self.neg().plus(other)

    def __rtruediv__(self, other: Any) -> FixedVector:
        operand = self._coerce_operand(other)
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            return FixedVector._from_array(operand / self._data)

    # ------------------------------------------------------------------
    #   Vector operations

    def dot(self, other: Any) -> float:
        """Dot product with a vector of the same dimension.

        Raises:
            DimensionMismatchError: If `other` is a number or a vector of
                another dimension.
        """
        operand = self._coerce_operand(other, scalar_ok=False)
        return float(np.sum(self._data * operand))

    def pnorm(self, p: float) -> float:
        """Evaluate the p-norm `(sum(|x_i|^p))^(1/p)` of the vector.

        Degenerate exponents such as `p = 0` give inf or NaN.
        """
        with np.errstate(all="ignore"):
            return float(np.sum(np.abs(self._data) ** p) ** (np.float64(1.0) / p))

    def normalize(self) -> FixedVector:
        """Scale the vector to unit magnitude.

        The zero vector yields NaN components.
        """
        return self.div(self.magnitude)

    def reflect(self, normal: Any) -> FixedVector:
        """Reflect this vector across the hyperplane with the given normal.

        Args:
            normal (Any): The hyperplane normal, not necessarily unit length.

        Returns:
            FixedVector: `self - 2 * dot(self, n) * n` with `n` the normalized normal.
        """
        n = FixedVector._from_array(self._coerce_operand(normal, scalar_ok=False)).normalize()
        return self.minus(n.times(2 * self.dot(n)))

    # ------------------------------------------------------------------
    #   Extras

    def argmax(self) -> list[int]:
        """Indices of all components equal to the maximum value."""
        max_value = self.max()
        return [i for i, x in enumerate(self._data) if x == max_value]

    def argmin(self) -> list[int]:
        """Indices of all components equal to the minimum value."""
        min_value = self.min()
        return [i for i, x in enumerate(self._data) if x == min_value]

    def max(self) -> float:
        return float(np.max(self._data))

    def min(self) -> float:
        return float(np.min(self._data))

    def sum(self) -> float:
        return float(np.sum(self._data))

    def choose(self, indices: Any) -> FixedVector:
        """Create a vector from the components at the given indices.

        Indices may repeat, so the result can be longer than this vector.

        Args:
            indices (Any): A sequence of non-negative indices.

        Returns:
            FixedVector: A vector of dimension `len(indices)`.

        Raises:
            TypeError: If `indices` is not a sequence.
            IndexError: If any index is not a valid index of this vector.
            ValueError: If `indices` is empty.
        """
        if not _is_sequence(indices):
            raise TypeError("Argument must be a sequence of indices.")
        indices = list(indices)
        for i in indices:
            if isinstance(i, bool) or not isinstance(i, numbers.Integral) or not 0 <= i < self.dim:
                raise IndexError("All elements of argument must be valid indices.")
        return get_vector_factory(len(indices))(self._data[indices])

    def concat(self, *others: Any) -> FixedVector:
        """Append numbers and/or vectors, creating a vector of larger dimension."""
        parts: list[npt.NDArray[np.float64]] = [self._data]
        for other in others:
            if _is_real_scalar(other):
                parts.append(np.array([float(other)], dtype=np.float64))
            else:
                parts.append(np.asarray(vector(len(other), other)._data))
        return FixedVector._from_array(np.concatenate(parts))

    def copy(self) -> FixedVector:
        return FixedVector._from_array(self._data.copy())

    def to_array(self) -> npt.NDArray[np.float64]:
        """Return the components as a new NumPy array."""
        return self._data.copy()

    def to_list(self) -> list[float]:
        return [float(x) for x in self._data]

    # ------------------------------------------------------------------
    #   Equality

    def equals(self, other: Any) -> bool:
        """Check exact, componentwise equality with a vector or sequence."""
        if not (isinstance(other, FixedVector) or _is_sequence(other)):
            return False
        arr = np.asarray(other)
        if arr.shape != self._data.shape:
            return False
        return bool(np.all(arr == self._data))

    def approximately_equals(self, other: Any, epsilon: float | None = None) -> bool:
        """Check whether every component differs by less than `epsilon`.

        Args:
            other (Any): A vector or sequence of numbers.
            epsilon (float | None): The largest meaningful difference between
                two components. Defaults to the default float64 tolerance (1e-8).

        Returns:
            bool: True if both have the same dimension and all differences
            are smaller than `epsilon`.
        """
        if epsilon is None:
            epsilon = get_default_tolerance(np.float64)
        if not (isinstance(other, FixedVector) or _is_sequence(other)):
            return False
        arr = np.asarray(other, dtype=np.float64)
        if arr.shape != self._data.shape:
            return False
        return bool(np.all(np.abs(self._data - arr) < epsilon))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FixedVector) or _is_sequence(other):
            return self.equals(other)
        return NotImplemented

    # ------------------------------------------------------------------
    #   Indexing and swizzling

    def _normalize_index(self, key: Any) -> int:
        if isinstance(key, bool) or not isinstance(key, numbers.Integral):
            raise TypeError(f"Vector indices must be integers, got {type(key).__name__}.")
        index = int(key)
        if not -self.dim <= index < self.dim:
            raise IndexError(
                f"Index {index} is out of range for a vector of dimension {self.dim}."
            )
        return index + self.dim if index < 0 else index

    def __getitem__(self, key: Any) -> Any:
        if isinstance(key, str):
            return self.swizzle(key)
        if isinstance(key, slice):
            return self._data[key].copy()
        return float(self._data[self._normalize_index(key)])

    def __setitem__(self, key: Any, value: Any) -> None:
        if isinstance(key, str):
            self.assign_swizzle(key, value)
            return
        index = self._normalize_index(key)
        if not _is_real_scalar(value):
            raise TypeError("Vectors may only contain numbers.")
        self._data[index] = float(value)

    def swizzle(self, name: str) -> float | FixedVector | None:
        """Read components by their names.

        Args:
            name (str): One or more characters from a single name group
                (`xyzw`, `rgba` or `stpq`). Characters may repeat.

        Returns:
            float | FixedVector | None: A number for a single name, a new
            vector of dimension `len(name)` otherwise, or None if a named
            component does not exist or the dimension is greater than 4.

        Raises:
            InvalidSwizzleError: If `name` mixes name groups or contains
                other characters.

        Example:
            >>> FixedVector(3, 1.0, 2.0, 3.0).swizzle("zx")
            FixedVector(2, 3.0, 1.0)
        """
        symbols = _get_swizzle_map(name)
        if symbols is None:
            raise InvalidSwizzleError(f"'{name}' is not a valid swizzle name.")
        if self.dim > _MAX_SWIZZLE_DIM:
            return None

        indices = [symbols[c] for c in name]
        if any(i >= self.dim for i in indices):
            return None
        if len(indices) == 1:
            return float(self._data[indices[0]])
        return FixedVector._from_array(self._data[indices])

    def assign_swizzle(self, name: str, value: Any) -> None:
        """Assign components by their names.

        A single name takes a number. Several names take a sequence of the
        same length; names must then be pairwise distinct. If any name refers
        to a component beyond the dimension, the vector is left unchanged.

        Args:
            name (str): One or more characters from a single name group.
            value (Any): A number or a sequence of numbers.

        Raises:
            InvalidSwizzleError: If `name` is not a valid swizzle name, repeats
                a character, or the dimension is greater than 4.
            TypeError: If `value` does not match the shape of `name` or is
                not numeric.
            IndexError: If a single name refers to a missing component.
        """
        symbols = _get_swizzle_map(name)
        if symbols is None:
            raise InvalidSwizzleError(f"'{name}' is not a valid swizzle name.")
        if self.dim > _MAX_SWIZZLE_DIM:
            raise InvalidSwizzleError(
                f"Swizzling requires a dimension of at most {_MAX_SWIZZLE_DIM}, got {self.dim}."
            )

        if len(name) == 1:
            if not _is_real_scalar(value):
                raise TypeError("Must set to a number.")
            index = symbols[name]
            if index >= self.dim:
                raise IndexError(
                    f"'{name}' is out of range for a vector of dimension {self.dim}."
                )
            self._data[index] = float(value)
            return

        if not _is_sequence(value):
            raise TypeError("Right-hand side must be a sequence.")
        values = list(value)
        if len(values) != len(name):
            raise TypeError("Right-hand side must have matching length.")
        if not all(_is_real_scalar(x) for x in values):
            raise TypeError("All new values must be numbers.")

        indices = [symbols[c] for c in name]
        if any(i >= self.dim for i in indices):
            return
        if len(set(name)) != len(name):
            raise InvalidSwizzleError("Swizzle assignment does not allow symbols to be repeated.")

        self._data[indices] = np.asarray(values, dtype=np.float64)

    # ------------------------------------------------------------------
    #   Container protocol

    def __len__(self) -> int:
        return self.dim

    def __iter__(self) -> Iterator[float]:
        return (float(x) for x in self._data)

    def __array__(self, dtype: npt.DTypeLike | None = None, copy: bool | None = None) -> Any:
        return np.array(self._data, dtype=dtype, copy=True)

    def __repr__(self) -> str:
        components = ", ".join(repr(float(x)) for x in self._data)
        return f"FixedVector({self.dim}, {components})"

    def __str__(self) -> str:
        return "[ " + ", ".join(str(float(x)) for x in self._data) + " ]"


class VectorFactory:
    """Callable creating vectors of one fixed dimension."""

    __slots__ = ("_dim",)

    def __init__(self, dim: int) -> None:
        self._dim = _validate_dimension(dim)

    @property
    def dim(self) -> int:
        """The dimension of the vectors created by this factory."""
        return self._dim

    def __call__(self, *values: Any) -> FixedVector:
        return FixedVector(self._dim, *values)

    def __repr__(self) -> str:
        return f"VectorFactory(dim={self._dim})"


@functools.cache
def get_vector_factory(dim: int) -> VectorFactory:
    """Get the vector factory for a dimension.

    Factories live in a process-wide registry: each one is created on first
    use and kept for the lifetime of the process.

    Args:
        dim (int): The dimension. Must be a positive integer.

    Returns:
        VectorFactory: The memoized factory for `dim`.

    Raises:
        TypeError: If `dim` is not a number.
        ValueError: If `dim` is not a positive integer.
    """
    return VectorFactory(dim)


def vector(dim: int, *values: Any) -> FixedVector:
    """Create a vector of the given dimension (see `FixedVector`).

    Example:
        >>> vector(3, 1)
        FixedVector(3, 1.0, 1.0, 1.0)
    """
    return get_vector_factory(dim)(*values)


def is_vector(obj: Any) -> bool:
    """Check whether an object is a `FixedVector`."""
    return isinstance(obj, FixedVector)


def _check_same_dimension(vectors: tuple[FixedVector, ...]) -> int:
    """Return the shared dimension of the vectors.

    Raises:
        ValueError: If no vector is given.
        TypeError: If any argument is not a `FixedVector`.
        DimensionMismatchError: If the dimensions differ.
    """
    if len(vectors) == 0:
        raise ValueError("At least one vector is required.")
    if not all(isinstance(v, FixedVector) for v in vectors):
        raise TypeError("All arguments must be vectors.")
    dim = vectors[0].dim
    for v in vectors[1:]:
        if v.dim != dim:
            raise DimensionMismatchError(
                dim, v.dim, "All vectors must have the same dimension."
            )
    return dim


def add(*vectors: FixedVector) -> FixedVector:
    """Add any number of vectors of the same dimension."""
    dim = _check_same_dimension(vectors)
    result = vector(dim)
    for v in vectors:
        result = result.plus(v)
    return result


def multiply(*vectors: FixedVector) -> FixedVector:
    """Multiply any number of vectors of the same dimension componentwise."""
    dim = _check_same_dimension(vectors)
    result = vector(dim, 1)
    for v in vectors:
        result = result.times(v)
    return result


def _clamp_unit(t: float) -> float:
    return 0.0 if t < 0 else (1.0 if t > 1 else float(t))


def lerp(v1: FixedVector, v2: FixedVector, t: float) -> FixedVector:
    """Linearly interpolate between two vectors.

    Args:
        v1 (FixedVector): The starting vector.
        v2 (FixedVector): The ending vector.
        t (float): The interpolant, clamped to [0, 1].

    Returns:
        FixedVector: `v1` at `t = 0`, `v2` at `t = 1`.

    Raises:
        DimensionMismatchError: If the vectors have different dimensions.
    """
    _check_same_dimension((v1, v2))
    t = _clamp_unit(t)
    return v1.times(1.0 - t).plus(v2.times(t))


def slerp(v1: FixedVector, v2: FixedVector, t: float) -> FixedVector:
    """Spherically interpolate between two vectors.

    The angle between the vectors and their magnitudes are interpolated
    independently. Parallel inputs keep the direction of `v1`; anti-parallel
    inputs do not define a plane of rotation and yield NaN.

    Args:
        v1 (FixedVector): The starting vector.
        v2 (FixedVector): The ending vector.
        t (float): The interpolant, clamped to [0, 1].

    Returns:
        FixedVector: The interpolated vector.

    Raises:
        DimensionMismatchError: If the vectors have different dimensions.
    """
    _check_same_dimension((v1, v2))
    t = _clamp_unit(t)

    n1 = v1.normalize()
    n2 = v2.normalize()
    cos_omega = n1.dot(n2)
    cos_omega = -1.0 if cos_omega < -1 else (1.0 if cos_omega > 1 else cos_omega)
    omega = math.acos(cos_omega)
    magnitude = v1.magnitude + ((v2.magnitude - v1.magnitude) * t)

    if omega == 0.0:
        return n1.times(magnitude)

    theta = omega * t
    relative = n2.minus(n1.times(cos_omega)).normalize()
    direction = n1.times(math.cos(theta)).plus(relative.times(math.sin(theta)))
    return direction.normalize().times(magnitude)
