"""Scalar/vector value algebra.

A Value is either a Number (one float32) or a Vector (a fixed-length run of
float32 components). Every binary operation checks the operand variants first
and raises TypeMismatchError instead of coercing.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Union

import numpy as np

from vecalc.errors import TypeMismatchError

EMPTY_VECTOR_TEXT = "<Empty Vector>"


def format_float(value: np.float32) -> str:
    """Shortest decimal text that reads back as the same float32."""
    return np.format_float_positional(np.float32(value), trim="-")


class Value:
    """Base class of the two value variants."""

    def is_number(self) -> bool:
        return isinstance(self, Number)

    def is_vector(self) -> bool:
        return isinstance(self, Vector)

    def same_variant(self, other: Value) -> bool:
        return (self.is_number() and other.is_number()) or (self.is_vector() and other.is_vector())

    def as_number(self) -> np.float32:
        if isinstance(self, Number):
            return self.value
        raise TypeMismatchError("Expected a number, got a vector")

    def as_vector(self) -> np.ndarray:
        if isinstance(self, Vector):
            return self.components
        raise TypeMismatchError("Expected a vector, got a number")

    def is_finite(self) -> bool:
        if isinstance(self, Number):
            return bool(np.isfinite(self.value))
        return bool(np.all(np.isfinite(self.as_vector())))


class Number(Value):
    __slots__ = ("value",)

    def __init__(self, value: Union[float, np.floating]):
        self.value = np.float32(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Number):
            return NotImplemented
        return bool(self.value == other.value)

    def __hash__(self) -> int:
        return hash(("Number", float(self.value)))

    def __float__(self) -> float:
        return float(self.value)

    def __str__(self) -> str:
        return format_float(self.value)

    def __repr__(self) -> str:
        return f"Number({self})"


class Vector(Value):
    """Fixed-length float32 vector. The component array is read-only."""

    __slots__ = ("components",)

    def __init__(self, components: Iterable[float]):
        if not isinstance(components, np.ndarray):
            components = list(components)
        arr = np.array(components, dtype=np.float32)
        if arr.ndim != 1:
            raise TypeMismatchError("Vectors must be one-dimensional")
        arr.flags.writeable = False
        self.components = arr

    def dims(self) -> int:
        return int(self.components.shape[0])

    def __len__(self) -> int:
        return self.dims()

    def __iter__(self):
        return iter(self.components)

    def __getitem__(self, index: int) -> np.float32:
        return self.components[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return bool(np.array_equal(self.components, other.components))

    def __hash__(self) -> int:
        return hash(("Vector", self.components.tobytes()))

    def __str__(self) -> str:
        if self.dims() == 0:
            return EMPTY_VECTOR_TEXT
        return "<" + ", ".join(format_float(c) for c in self.components) + ">"

    def __repr__(self) -> str:
        return f"Vector({self})"

    def magnitude(self) -> np.float32:
        with np.errstate(all="ignore"):
            return np.float32(np.sqrt(np.sum(self.components * self.components, dtype=np.float32)))

    def dot(self, other: Vector) -> np.float32:
        # mismatched lengths only combine the overlapping prefix
        n = min(self.dims(), other.dims())
        with np.errstate(all="ignore"):
            return np.float32(np.sum(self.components[:n] * other.components[:n], dtype=np.float32))

    def cross(self, other: Vector) -> Vector:
        if self.dims() != 3 or other.dims() != 3:
            raise TypeMismatchError("Cross product requires two 3-dimensional vectors")
        a, b = self.components, other.components
        with np.errstate(all="ignore"):
            return Vector([
                a[1] * b[2] - a[2] * b[1],
                a[2] * b[0] - a[0] * b[2],
                a[0] * b[1] - a[1] * b[0],
            ])

    def angle_between(self, other: Vector) -> np.float32:
        """Angle in radians. NaN when either vector has zero magnitude."""
        with np.errstate(all="ignore"):
            cosine = self.dot(other) / (self.magnitude() * other.magnitude())
            return np.float32(np.arccos(np.clip(cosine, -1.0, 1.0)))


def _prefix(a: Vector, b: Vector):
    n = min(a.dims(), b.dims())
    return a.components[:n], b.components[:n]


# --------------------------
# Binary operations
# --------------------------

def add(lhs: Value, rhs: Value) -> Value:
    if not lhs.same_variant(rhs):
        raise TypeMismatchError("Can't add a scalar and a vector together")
    with np.errstate(all="ignore"):
        if isinstance(lhs, Number):
            return Number(lhs.value + rhs.as_number())
        left, right = _prefix(lhs, rhs)
        return Vector(left + right)


def subtract(lhs: Value, rhs: Value) -> Value:
    if not lhs.same_variant(rhs):
        raise TypeMismatchError("Can't subtract a scalar and a vector")
    with np.errstate(all="ignore"):
        if isinstance(lhs, Number):
            return Number(lhs.value - rhs.as_number())
        left, right = _prefix(lhs, rhs)
        return Vector(left - right)


def multiply(lhs: Value, rhs: Value) -> Value:
    with np.errstate(all="ignore"):
        if isinstance(lhs, Number) and isinstance(rhs, Number):
            return Number(lhs.value * rhs.value)
        if isinstance(lhs, Vector) and isinstance(rhs, Number):
            return Vector(lhs.components * rhs.value)
        if isinstance(lhs, Number) and isinstance(rhs, Vector):
            return Vector(lhs.value * rhs.components)
    raise TypeMismatchError("Can't multiply two vectors")


def divide(lhs: Value, rhs: Value) -> Value:
    if isinstance(rhs, Vector):
        if isinstance(lhs, Number):
            raise TypeMismatchError("Can't divide a scalar by a vector")
        raise TypeMismatchError("Can't divide a vector by a vector")
    divisor = rhs.as_number()
    # float32 semantics: x / 0 is inf or nan, not an error
    with np.errstate(all="ignore"):
        if isinstance(lhs, Number):
            return Number(lhs.value / divisor)
        return Vector(lhs.as_vector() / divisor)


def power(lhs: Value, rhs: Value) -> Value:
    if not (isinstance(lhs, Number) and isinstance(rhs, Number)):
        raise TypeMismatchError("Can only raise a scalar to a scalar power")
    with np.errstate(all="ignore"):
        return Number(np.power(lhs.value, rhs.value))


def dot(lhs: Value, rhs: Value) -> Value:
    if not (isinstance(lhs, Vector) and isinstance(rhs, Vector)):
        raise TypeMismatchError("Can only do a dot product on two vectors")
    return Number(lhs.dot(rhs))


def cross(lhs: Value, rhs: Value) -> Value:
    if not (isinstance(lhs, Vector) and isinstance(rhs, Vector)):
        raise TypeMismatchError("Can only do a cross product on two vectors")
    return lhs.cross(rhs)


def magnitude(value: Value) -> Value:
    if not isinstance(value, Vector):
        raise TypeMismatchError("Magnitude is only defined for vectors")
    return Number(value.magnitude())


def angle_between(lhs: Value, rhs: Value) -> Value:
    if not (isinstance(lhs, Vector) and isinstance(rhs, Vector)):
        raise TypeMismatchError("Can only measure the angle between two vectors")
    return Number(lhs.angle_between(rhs))


# Canonical operator name -> algebra function
OPERATIONS: Dict[str, Callable[[Value, Value], Value]] = {
    '+': add,
    '-': subtract,
    '*': multiply,
    '/': divide,
    '^': power,
    'dot': dot,
    'cross': cross,
}
