"""Runtime value model for the k/simple interpreter: atoms, int64 vectors and the error sentinel."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Final, Iterable, Union

import jax
import jax.numpy as jnp

from .errors import KLengthError, KRankError

jax.config.update("jax_enable_x64", True)

INT64_MIN: Final[int] = -(2**63)
INT64_MAX: Final[int] = 2**63 - 1
INT64: Final = jnp.dtype("int64")


@dataclass(frozen=True)
class Atom:
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Atom requires a Python int, got {type(self.value).__name__}")
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"Atom value {self.value} is outside the int64 range")


@dataclass(frozen=True, eq=False)
class Vector:
    """Immutable int64 vector; bindings share the same instance instead of copying."""

    items: jax.Array

    def __post_init__(self) -> None:
        if self.items.ndim != 1 or self.items.dtype != INT64:
            raise TypeError(f"Vector requires a rank-1 int64 array, got {self.items.dtype}{tuple(self.items.shape)}")

    @classmethod
    def of(cls, integers: Iterable[int]) -> "Vector":
        return cls(jnp.asarray(list(integers), dtype=INT64))

    def __len__(self) -> int:
        return int(self.items.shape[0])

    def tolist(self) -> list[int]:
        return [int(x) for x in self.items.tolist()]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return len(self) == len(other) and bool(jnp.array_equal(self.items, other.items))


@dataclass(frozen=True)
class Error:
    """Failed computation; infects every operation that consumes it."""


ERROR: Final[Error] = Error()

Value = Union[Atom, Vector, Error]
BinaryKernel = Callable[[jax.Array, jax.Array], jax.Array]


def is_error(value: Value) -> bool:
    return isinstance(value, Error)


def as_array(value: Atom | Vector) -> jax.Array:
    if isinstance(value, Vector):
        return value.items
    return jnp.asarray(value.value, dtype=INT64)


def from_array(arr: jax.Array) -> Atom | Vector:
    arr = jnp.asarray(arr, dtype=INT64)
    if arr.ndim == 0:
        return Atom(int(arr))
    return Vector(arr)


def enlist(value: Value) -> Value:
    if isinstance(value, Atom):
        return Vector(jnp.reshape(as_array(value), (1,)))
    if isinstance(value, Vector):
        raise KRankError("enlist is undefined on vectors")
    return ERROR


def reverse(value: Value) -> Value:
    if isinstance(value, Vector):
        return Vector(value.items[::-1])
    if isinstance(value, Atom):
        raise KRankError("reverse is undefined on atoms")
    return ERROR


def negate(value: Value) -> Value:
    if isinstance(value, Error):
        return ERROR
    return from_array(jnp.negative(as_array(value)))


def apply_dyadic_verb(left: Value, right: Value, kernel: BinaryKernel) -> Value:
    """Elementwise combinator for order-insensitive kernels.

    An atom on the left against a vector is evaluated as vector-against-atom,
    so ``kernel`` must satisfy ``kernel(a, b) == kernel(b, a)``.
    """
    if isinstance(left, Atom) and isinstance(right, Atom):
        return from_array(kernel(as_array(left), as_array(right)))
    if isinstance(left, Vector) and isinstance(right, Atom):
        return Vector(kernel(left.items, as_array(right)))
    if isinstance(left, Atom) and isinstance(right, Vector):
        return apply_dyadic_verb(right, left, kernel)
    if isinstance(left, Vector) and isinstance(right, Vector):
        if len(left) != len(right):
            raise KLengthError(f"vector lengths differ: {len(left)} vs {len(right)}")
        return Vector(kernel(left.items, right.items))
    return ERROR


def format_value(value: Value) -> str:
    if isinstance(value, Atom):
        return str(value.value)
    if isinstance(value, Vector):
        return "".join(f"{x} " for x in value.tolist())
    return "Error"
