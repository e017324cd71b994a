"""Verb and adverb implementations plus the fixed dispatch tables keyed by symbol index."""

from __future__ import annotations

import os
from enum import IntEnum
from typing import Callable, Final

import jax
from jax import lax
import jax.numpy as jnp

from .environment import Environment
from .errors import KOperandError
from .lexer import ADVERB_TOKENS, VERB_TOKENS
from .values import (
    ERROR,
    INT64,
    Atom,
    BinaryKernel,
    Error,
    Value,
    Vector,
    apply_dyadic_verb as combine,
    as_array,
    enlist,
    from_array,
    negate,
    reverse,
)

MonadicVerb = Callable[[Environment, Value], Value]
DyadicVerb = Callable[[Environment, Value, Value], Value]
Adverb = Callable[[Environment, int, Value], Value]

_USE_JITTED_KERNELS: Final[bool] = os.environ.get("KSIMPLE_DISABLE_JIT", "0") != "1"


class Verb(IntEnum):
    """Verb symbols in table order; the value is the symbol's index in ``VERB_TOKENS``."""

    UNKNOWN = 0
    PLUS = 1
    MINUS = 2
    BANG = 3
    HASH = 4
    COMMA = 5
    AT = 6
    EQUAL = 7
    TILDE = 8
    AMPERSAND = 9
    PIPE = 10
    STAR = 11

    @property
    def symbol(self) -> str:
        return VERB_TOKENS[self.value]


class AdverbKind(IntEnum):
    IDENTITY = 0
    OVER = 1
    SCAN = 2

    @property
    def symbol(self) -> str:
        return ADVERB_TOKENS[self.value]


def _as_flag(mask: jax.Array) -> jax.Array:
    return lax.convert_element_type(mask, INT64)


_BASE_BINARY_OPS: Final[dict[str, BinaryKernel]] = {
    "add": jnp.add,
    "multiply": jnp.multiply,
    "equal": lambda a, b: _as_flag(jnp.equal(a, b)),
    "not_equal": lambda a, b: _as_flag(jnp.not_equal(a, b)),
    "and": jnp.bitwise_and,
    "or": jnp.bitwise_or,
    # Truncated remainder: the result takes the sign of the dividend.
    "remainder": jnp.fmod,
}

_JITTED_BINARY_OPS: dict[str, BinaryKernel] = {}


def _binary_kernel(name: str) -> BinaryKernel:
    if not _USE_JITTED_KERNELS:
        return _BASE_BINARY_OPS[name]
    fn = _JITTED_BINARY_OPS.get(name)
    if fn is None:
        fn = jax.jit(_BASE_BINARY_OPS[name])
        _JITTED_BINARY_OPS[name] = fn
    return fn


def _elementwise(env: Environment, where: str, kernel: str, left: Value, right: Value) -> Value:
    try:
        return combine(left, right, _binary_kernel(kernel))
    except KOperandError:
        return env.domain_error(where)


def monadic_not_a_verb(env: Environment, _value: Value) -> Value:
    return env.domain_error("monadic_not_a_verb")


def dyadic_not_a_verb(env: Environment, _left: Value, _right: Value) -> Value:
    return env.domain_error("dyadic_not_a_verb")


def monadic_not_implemented(env: Environment, _value: Value) -> Value:
    return env.not_implemented_error("monadic_not_implemented")


def monadic_negate(_env: Environment, value: Value) -> Value:
    return negate(value)


def monadic_enumerate(env: Environment, value: Value) -> Value:
    if isinstance(value, Atom):
        if value.value < 0:
            return env.domain_error("monadic_enumerate")
        return Vector(jnp.arange(value.value, dtype=INT64))
    if isinstance(value, Vector):
        return env.rank_error("monadic_enumerate")
    return ERROR


def monadic_count(env: Environment, value: Value) -> Value:
    if isinstance(value, Vector):
        return Atom(len(value))
    if isinstance(value, Atom):
        return env.rank_error("monadic_count")
    return ERROR


def monadic_enlist(env: Environment, value: Value) -> Value:
    try:
        return enlist(value)
    except KOperandError:
        return env.rank_error("monadic_enlist")


def monadic_reverse(env: Environment, value: Value) -> Value:
    try:
        return reverse(value)
    except KOperandError:
        return env.rank_error("monadic_reverse")


def monadic_first(env: Environment, value: Value) -> Value:
    return dyadic_index_at(env, value, Atom(0))


def dyadic_add(env: Environment, left: Value, right: Value) -> Value:
    return _elementwise(env, "dyadic_add", "add", left, right)


def dyadic_subtract(env: Environment, left: Value, right: Value) -> Value:
    return dyadic_add(env, left, negate(right))


def dyadic_modulo(env: Environment, left: Value, right: Value) -> Value:
    if isinstance(left, Error) or isinstance(right, Error):
        return ERROR
    if not isinstance(left, Atom) or left.value == 0:
        return env.domain_error("dyadic_modulo")
    return from_array(_binary_kernel("remainder")(as_array(right), as_array(left)))


def dyadic_take(env: Environment, left: Value, right: Value) -> Value:
    if isinstance(left, Error) or isinstance(right, Error):
        return ERROR
    if not isinstance(left, Atom):
        return env.rank_error("dyadic_take")
    if left.value < 0:
        return env.domain_error("dyadic_take")

    count = left.value
    if isinstance(right, Atom):
        return Vector(jnp.full((count,), right.value, dtype=INT64))

    length = len(right)
    if length == 0:
        if count == 0:
            return right
        return env.length_error("dyadic_take")
    positions = jnp.arange(count, dtype=INT64) % length
    return Vector(jnp.take(right.items, positions))


def dyadic_concatenate(env: Environment, left: Value, right: Value) -> Value:
    if isinstance(left, Error) or isinstance(right, Error):
        return ERROR
    if isinstance(left, Atom):
        return dyadic_concatenate(env, enlist(left), right)
    if isinstance(right, Atom):
        return dyadic_concatenate(env, left, enlist(right))
    return Vector(jnp.concatenate((left.items, right.items)))


def dyadic_index_at(env: Environment, left: Value, right: Value) -> Value:
    if isinstance(left, Error) or isinstance(right, Error):
        return ERROR
    if not isinstance(left, Vector):
        return env.rank_error("dyadic_index_at")

    length = len(left)
    if isinstance(right, Atom):
        index = right.value
        # index == length is a permitted default read, not a failure.
        if index < 0 or index > length:
            return env.length_error("dyadic_index_at")
        if index == length:
            return Atom(0)
        return Atom(int(left.items[index]))

    indices = jnp.maximum(right.items, 0)
    if length == 0:
        return Vector(jnp.zeros_like(indices))
    in_range = indices < length
    picked = jnp.take(left.items, jnp.minimum(indices, length - 1))
    return Vector(jnp.where(in_range, picked, jnp.zeros_like(picked)))


def dyadic_equal(env: Environment, left: Value, right: Value) -> Value:
    return _elementwise(env, "dyadic_equal", "equal", left, right)


def dyadic_not_equal(env: Environment, left: Value, right: Value) -> Value:
    return _elementwise(env, "dyadic_not_equal", "not_equal", left, right)


def dyadic_and(env: Environment, left: Value, right: Value) -> Value:
    return _elementwise(env, "dyadic_and", "and", left, right)


def dyadic_or(env: Environment, left: Value, right: Value) -> Value:
    return _elementwise(env, "dyadic_or", "or", left, right)


def dyadic_product(env: Environment, left: Value, right: Value) -> Value:
    return _elementwise(env, "dyadic_product", "multiply", left, right)


def adverb_identity(_env: Environment, _verb_index: int, value: Value) -> Value:
    return value


def adverb_over(env: Environment, verb_index: int, value: Value) -> Value:
    """Fold ``verb`` left-to-right over a vector, seeded with atom 0."""
    if not isinstance(value, Vector):
        return value
    result: Value = Atom(0)
    for integer in value.tolist():
        result = apply_dyadic_verb(env, verb_index, result, Atom(integer))
    return result


def adverb_scan(env: Environment, verb_index: int, value: Value) -> Value:
    """Running fold that keeps every intermediate accumulator.

    The first output is the first element itself. A step that does not produce
    an atom poisons the accumulator and records 0 in its place; the scan keeps
    going instead of aborting.
    """
    if not isinstance(value, Vector):
        return value
    integers = value.tolist()
    if not integers:
        return value

    result: Value = Atom(integers[0])
    output = [integers[0]]
    for integer in integers[1:]:
        step = apply_dyadic_verb(env, verb_index, result, Atom(integer))
        if isinstance(step, Atom):
            result = step
            output.append(step.value)
        else:
            result = ERROR
            output.append(0)
    return Vector.of(output)


MONADIC_VERBS: Final[tuple[MonadicVerb, ...]] = (
    monadic_not_a_verb,
    monadic_not_implemented,
    monadic_negate,
    monadic_enumerate,
    monadic_count,
    monadic_enlist,
    monadic_first,
    monadic_not_implemented,
    monadic_not_implemented,
    monadic_not_implemented,
    monadic_reverse,
    monadic_not_implemented,
)

DYADIC_VERBS: Final[tuple[DyadicVerb, ...]] = (
    dyadic_not_a_verb,
    dyadic_add,
    dyadic_subtract,
    dyadic_modulo,
    dyadic_take,
    dyadic_concatenate,
    dyadic_index_at,
    dyadic_equal,
    dyadic_not_equal,
    dyadic_and,
    dyadic_or,
    dyadic_product,
)

ADVERBS: Final[tuple[Adverb, ...]] = (adverb_identity, adverb_over, adverb_scan)


def apply_monadic_verb(env: Environment, verb_index: int, value: Value) -> Value:
    verb = MONADIC_VERBS[verb_index] if 0 <= verb_index < len(MONADIC_VERBS) else monadic_not_a_verb
    return verb(env, value)


def apply_dyadic_verb(env: Environment, verb_index: int, left: Value, right: Value) -> Value:
    verb = DYADIC_VERBS[verb_index] if 0 <= verb_index < len(DYADIC_VERBS) else dyadic_not_a_verb
    return verb(env, left, right)


def apply_adverb(env: Environment, adverb_index: int, verb_index: int, value: Value) -> Value:
    adverb = ADVERBS[adverb_index] if 0 <= adverb_index < len(ADVERBS) else adverb_identity
    return adverb(env, verb_index, value)
