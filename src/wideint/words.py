"""Signed 32-bit word helpers shared by every integer representation.

A multi-word integer is a sequence of signed 32-bit words, least significant
first, followed by an implicit sign word (``0`` or ``-1``) repeated forever.
Every higher-level routine reads words through :func:`word_at` so that sign
extension past the stored length never needs a separate bounds check.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Final

WORD_BITS: Final[int] = 32
WORD_MASK: Final[int] = 0xFFFFFFFF
HALF_BITS: Final[int] = 16
HALF_MASK: Final[int] = 0xFFFF
SIGN_BIT: Final[int] = 0x80000000
TWO_PWR_16_DBL: Final[float] = float(1 << 16)
TWO_PWR_32_DBL: Final[float] = TWO_PWR_16_DBL * TWO_PWR_16_DBL


def to_int32(value: int) -> int:
    """Reinterpret the low 32 bits of ``value`` as a signed word."""
    value &= WORD_MASK
    if value & SIGN_BIT:
        return value - (1 << WORD_BITS)
    return value


def to_uint32(value: int) -> int:
    return value & WORD_MASK


def word_at(words: Sequence[int], sign: int, index: int) -> int:
    if index < 0:
        return 0
    if index < len(words):
        return words[index]
    return sign


def unsigned_word_at(words: Sequence[int], sign: int, index: int) -> int:
    return word_at(words, sign, index) & WORD_MASK


def canonical_words(words: Iterable[int], sign: int) -> tuple[int, ...]:
    """Normalise raw words against ``sign`` and drop redundant top words."""
    normalized = [to_int32(word) for word in words]
    end = len(normalized)
    while end > 0 and normalized[end - 1] == sign:
        end -= 1
    return tuple(normalized[:end])


def sign_of_top_word(words: Sequence[int]) -> int:
    if not words:
        return 0
    return -1 if words[-1] & SIGN_BIT else 0


def split_halves(word: int) -> tuple[int, int]:
    """Return ``(high16, low16)`` of a word's unsigned pattern."""
    word &= WORD_MASK
    return word >> HALF_BITS, word & HALF_MASK


def join_halves(high: int, low: int) -> int:
    return to_int32(((high & HALF_MASK) << HALF_BITS) | (low & HALF_MASK))
