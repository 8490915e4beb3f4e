"""jax interop: word vectors and vectorised Fixed64 kernels.

A batch of ``n`` Fixed64 values is an ``(n, 2)`` ``uint32`` array of
``[low, high]`` word patterns. The kernels use the same 16-bit half-word carry
scheme as the scalar type, so they run without 64-bit jax types enabled and
agree bit for bit with :class:`~wideint.fixed64.Fixed64`.
"""

from __future__ import annotations

from collections.abc import Iterable

import jax
import jax.numpy as jnp

from .bigint import BigInt
from .fixed64 import Fixed64
from .words import sign_of_top_word

_HALF_MASK = jnp.uint32(0xFFFF)
_HALF_BITS = jnp.uint32(16)


def word_array(value: BigInt | Fixed64) -> jax.Array:
    """Two's-complement words of ``value``, least significant first.

    For a BigInt the sign word is appended when the top stored word would not
    imply it, so :func:`bigint_from_word_array` restores the same value.
    """
    if isinstance(value, Fixed64):
        return jnp.asarray([value.unsigned_low(), value.unsigned_high()], dtype=jnp.uint32)
    if not isinstance(value, BigInt):
        raise TypeError(f"expected BigInt or Fixed64, got {type(value).__name__}")
    words = list(value.words)
    if sign_of_top_word(words) != value.sign:
        words.append(value.sign)
    return jnp.asarray([word & 0xFFFFFFFF for word in words], dtype=jnp.uint32)


def bigint_from_word_array(array) -> BigInt:
    arr = jnp.asarray(array)
    if not jnp.issubdtype(arr.dtype, jnp.integer):
        raise TypeError(f"word array must have an integer dtype, got {arr.dtype}")
    if arr.ndim != 1:
        raise ValueError(f"word array must be rank 1, got shape {arr.shape}")
    return BigInt.from_words([int(word) for word in arr.tolist()])


def fixed64_to_array(values: Iterable[Fixed64]) -> jax.Array:
    rows = [[value.unsigned_low(), value.unsigned_high()] for value in values]
    return jnp.asarray(rows, dtype=jnp.uint32).reshape((len(rows), 2))


def fixed64_from_array(array) -> list[Fixed64]:
    arr = jnp.asarray(array)
    if arr.ndim != 2 or arr.shape[-1] != 2:
        raise ValueError(f"Fixed64 batch must have shape (n, 2), got {arr.shape}")
    if not jnp.issubdtype(arr.dtype, jnp.integer):
        raise TypeError(f"Fixed64 batch must have an integer dtype, got {arr.dtype}")
    return [Fixed64.from_bits(int(low), int(high)) for low, high in arr.tolist()]


def _halves(word: jax.Array) -> tuple[jax.Array, jax.Array]:
    return word >> _HALF_BITS, word & _HALF_MASK


def _join(high: jax.Array, low: jax.Array) -> jax.Array:
    return ((high & _HALF_MASK) << _HALF_BITS) | (low & _HALF_MASK)


def _as_pairs(pairs) -> jax.Array:
    return jnp.asarray(pairs, dtype=jnp.uint32)


@jax.jit
def _add_kernel(a: jax.Array, b: jax.Array) -> jax.Array:
    a16, a00 = _halves(a[..., 0])
    a48, a32 = _halves(a[..., 1])
    b16, b00 = _halves(b[..., 0])
    b48, b32 = _halves(b[..., 1])

    c00 = a00 + b00
    c16 = (c00 >> _HALF_BITS) + a16 + b16
    c32 = (c16 >> _HALF_BITS) + a32 + b32
    c48 = (c32 >> _HALF_BITS) + a48 + b48
    return jnp.stack([_join(c16, c00), _join(c48, c32)], axis=-1)


@jax.jit
def _not_kernel(a: jax.Array) -> jax.Array:
    return ~a


@jax.jit
def _negate_kernel(a: jax.Array) -> jax.Array:
    one = jnp.zeros_like(a).at[..., 0].set(1)
    return _add_kernel(~a, one)


def add_pairs(a, b) -> jax.Array:
    """Element-wise wrapping 64-bit addition of two ``(n, 2)`` batches."""
    return _add_kernel(_as_pairs(a), _as_pairs(b))


def negate_pairs(a) -> jax.Array:
    return _negate_kernel(_as_pairs(a))


def subtract_pairs(a, b) -> jax.Array:
    return _add_kernel(_as_pairs(a), _negate_kernel(_as_pairs(b)))


def and_pairs(a, b) -> jax.Array:
    return jnp.bitwise_and(_as_pairs(a), _as_pairs(b))


def or_pairs(a, b) -> jax.Array:
    return jnp.bitwise_or(_as_pairs(a), _as_pairs(b))


def xor_pairs(a, b) -> jax.Array:
    return jnp.bitwise_xor(_as_pairs(a), _as_pairs(b))


def not_pairs(a) -> jax.Array:
    return _not_kernel(_as_pairs(a))
