"""Arbitrary-precision signed integers on sign-extended 32-bit word arrays."""

from __future__ import annotations

import math
import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Final

from . import division
from .cache import BIGINT_CACHE, SmallValueCache
from .words import (
    HALF_BITS,
    HALF_MASK,
    TWO_PWR_32_DBL,
    WORD_BITS,
    WORD_MASK,
    canonical_words,
    join_halves,
    sign_of_top_word,
    split_halves,
    to_int32,
    unsigned_word_at,
    word_at,
)

if TYPE_CHECKING:
    from .fixed64 import Fixed64

_USE_MUL_FAST_PATH: Final[bool] = os.environ.get("WIDEINT_DISABLE_MUL_FAST_PATH", "0") != "1"


def _carry16(cells: list[int], index: int) -> None:
    while cells[index] > HALF_MASK:
        cells[index + 1] += cells[index] >> HALF_BITS
        cells[index] &= HALF_MASK


@dataclass(frozen=True, eq=False)
class BigInt:
    """Immutable two's-complement integer of unbounded width.

    ``words`` holds signed 32-bit words, least significant first; ``sign`` is
    the word (``0`` or ``-1``) repeated past the stored words. Instances are
    always canonical: the top stored word never equals ``sign``.
    """

    words: tuple[int, ...] = ()
    sign: int = 0

    ZERO: ClassVar[BigInt]
    ONE: ClassVar[BigInt]
    NEG_ONE: ClassVar[BigInt]
    TWO_PWR_24: ClassVar[BigInt]

    def __post_init__(self) -> None:
        if not isinstance(self.words, tuple):
            object.__setattr__(self, "words", tuple(self.words))
        if self.sign not in (0, -1):
            raise ValueError(f"sign word must be 0 or -1, got {self.sign}")
        if self.words and self.words[-1] == self.sign:
            raise ValueError("word array is not canonical; use BigInt.from_raw")

    # -- construction -----------------------------------------------------

    @classmethod
    def from_raw(cls, words: Iterable[int], sign: int) -> BigInt:
        """Build from raw words against an explicit sign word."""
        return cls(canonical_words(words, sign), sign)

    @classmethod
    def from_words(cls, words: Sequence[int]) -> BigInt:
        """Build from a two's-complement word array; the top bit picks the sign."""
        return cls.from_raw(words, sign_of_top_word(words))

    @classmethod
    def from_int(cls, value: int, *, cache: SmallValueCache | None = None) -> BigInt:
        table = BIGINT_CACHE if cache is None else cache
        return table.get(int(value), cls._from_python_int)

    @classmethod
    def _from_python_int(cls, value: int) -> BigInt:
        sign = -1 if value < 0 else 0
        words = []
        while value != sign:
            words.append(to_int32(value))
            value >>= WORD_BITS
        return cls.from_raw(words, sign)

    @classmethod
    def from_float(cls, value: float) -> BigInt:
        """Truncate a double toward zero; NaN and infinities map to zero."""
        if math.isnan(value) or math.isinf(value):
            return cls.ZERO
        if value < 0:
            return cls.from_float(-value).negate()
        words = []
        power = 1.0
        while value >= power:
            words.append(to_int32(int(value / power)))
            power *= TWO_PWR_32_DBL
        return cls.from_raw(words, 0)

    @classmethod
    def from_string(cls, text: str, radix: int = 10) -> BigInt:
        from .conversions import parse_integer

        return parse_integer(text, radix)

    @classmethod
    def from_fixed64(cls, value: Fixed64) -> BigInt:
        return cls.from_words([value.low, value.high])

    # -- word access ------------------------------------------------------

    def word_at(self, index: int) -> int:
        return word_at(self.words, self.sign, index)

    def unsigned_word_at(self, index: int) -> int:
        return unsigned_word_at(self.words, self.sign, index)

    # -- predicates -------------------------------------------------------

    def is_zero(self) -> bool:
        return self.sign == 0 and not self.words

    def is_negative(self) -> bool:
        return self.sign == -1

    def is_odd(self) -> bool:
        if not self.words:
            return self.sign == -1
        return (self.words[0] & 1) != 0

    def bit_length(self) -> int:
        """Number of bits in the magnitude, as ``int.bit_length`` counts them."""
        if self.is_negative():
            return self.negate().bit_length()
        if not self.words:
            return 0
        top = len(self.words) - 1
        return top * WORD_BITS + (self.words[top] & WORD_MASK).bit_length()

    # -- comparison -------------------------------------------------------

    def compare(self, other: BigInt) -> int:
        diff = self.subtract(other)
        if diff.is_negative():
            return -1
        if diff.is_zero():
            return 0
        return 1

    def compare_int(self, other: int) -> int:
        return self.compare(BigInt.from_int(other))

    def equals(self, other: BigInt) -> bool:
        if self.sign != other.sign:
            return False
        length = max(len(self.words), len(other.words))
        return all(self.word_at(i) == other.word_at(i) for i in range(length))

    def not_equals(self, other: BigInt) -> bool:
        return not self.equals(other)

    def less_than(self, other: BigInt) -> bool:
        return self.compare(other) < 0

    def less_or_equal(self, other: BigInt) -> bool:
        return self.compare(other) <= 0

    def greater_than(self, other: BigInt) -> bool:
        return self.compare(other) > 0

    def greater_or_equal(self, other: BigInt) -> bool:
        return self.compare(other) >= 0

    # -- arithmetic -------------------------------------------------------

    def add(self, other: BigInt) -> BigInt:
        length = max(len(self.words), len(other.words))
        out = []
        carry = 0
        for i in range(length + 1):
            a1, a0 = split_halves(self.word_at(i))
            b1, b0 = split_halves(other.word_at(i))
            c0 = carry + a0 + b0
            c1 = (c0 >> HALF_BITS) + a1 + b1
            carry = c1 >> HALF_BITS
            out.append(join_halves(c1, c0))
        return BigInt.from_words(out)

    def negate(self) -> BigInt:
        return self.bitwise_not().add(BigInt.ONE)

    def subtract(self, other: BigInt) -> BigInt:
        return self.add(other.negate())

    def multiply(self, other: BigInt) -> BigInt:
        if self.is_zero() or other.is_zero():
            return BigInt.ZERO

        if self.is_negative():
            if other.is_negative():
                return self.negate().multiply(other.negate())
            return self.negate().multiply(other).negate()
        if other.is_negative():
            return self.multiply(other.negate()).negate()

        if _USE_MUL_FAST_PATH and self.less_than(BigInt.TWO_PWR_24) and other.less_than(BigInt.TWO_PWR_24):
            return BigInt.from_float(self.to_float() * other.to_float())

        length = len(self.words) + len(other.words)
        cells = [0] * (2 * length)
        for i, left in enumerate(self.words):
            a1, a0 = split_halves(left)
            for j, right in enumerate(other.words):
                b1, b0 = split_halves(right)
                base = 2 * i + 2 * j
                cells[base] += a0 * b0
                _carry16(cells, base)
                cells[base + 1] += a1 * b0
                _carry16(cells, base + 1)
                cells[base + 1] += a0 * b1
                _carry16(cells, base + 1)
                cells[base + 2] += a1 * b1
                _carry16(cells, base + 2)

        out = [join_halves(cells[2 * i + 1], cells[2 * i]) for i in range(length)]
        return BigInt.from_raw(out, 0)

    def quotient(self, other: BigInt) -> BigInt:
        return division.truncated_quotient(self, other)

    def remainder(self, other: BigInt) -> BigInt:
        return self.subtract(self.quotient(other).multiply(other))

    def quot_rem(self, other: BigInt) -> tuple[BigInt, BigInt]:
        quotient = self.quotient(other)
        return quotient, self.subtract(quotient.multiply(other))

    def divide_floor(self, other: BigInt) -> BigInt:
        return division.floored_quotient(self, other)

    def modulo_floor(self, other: BigInt) -> BigInt:
        return division.floored_modulo(self, other)

    def div_mod(self, other: BigInt) -> tuple[BigInt, BigInt]:
        return self.divide_floor(other), self.modulo_floor(other)

    def absolute(self) -> BigInt:
        if self.compare(BigInt.ZERO) < 0:
            return BigInt.ZERO.subtract(self)
        return self

    def signum(self) -> BigInt:
        cmp = self.compare(BigInt.ZERO)
        if cmp > 0:
            return BigInt.ONE
        if cmp < 0:
            return BigInt.ZERO.subtract(BigInt.ONE)
        return BigInt.ZERO

    # -- bitwise ----------------------------------------------------------

    def bitwise_not(self) -> BigInt:
        return BigInt.from_raw((~word for word in self.words), ~self.sign)

    def bitwise_and(self, other: BigInt) -> BigInt:
        length = max(len(self.words), len(other.words))
        out = [self.word_at(i) & other.word_at(i) for i in range(length)]
        return BigInt.from_raw(out, self.sign & other.sign)

    def bitwise_or(self, other: BigInt) -> BigInt:
        length = max(len(self.words), len(other.words))
        out = [self.word_at(i) | other.word_at(i) for i in range(length)]
        return BigInt.from_raw(out, self.sign | other.sign)

    def bitwise_xor(self, other: BigInt) -> BigInt:
        length = max(len(self.words), len(other.words))
        out = [self.word_at(i) ^ other.word_at(i) for i in range(length)]
        return BigInt.from_raw(out, self.sign ^ other.sign)

    def shift_left(self, num_bits: int) -> BigInt:
        if num_bits < 0:
            return self.shift_right(-num_bits)
        word_delta = num_bits >> 5
        bit_delta = num_bits % WORD_BITS
        length = len(self.words) + word_delta + (1 if bit_delta > 0 else 0)
        out = []
        for i in range(length):
            if bit_delta > 0:
                out.append(
                    (self.unsigned_word_at(i - word_delta) << bit_delta)
                    | (self.unsigned_word_at(i - word_delta - 1) >> (WORD_BITS - bit_delta))
                )
            else:
                out.append(self.word_at(i - word_delta))
        return BigInt.from_raw(out, self.sign)

    def shift_right(self, num_bits: int) -> BigInt:
        """Arithmetic right shift: rounds toward negative infinity."""
        if num_bits < 0:
            return self.shift_left(-num_bits)
        word_delta = num_bits >> 5
        bit_delta = num_bits % WORD_BITS
        length = len(self.words) - word_delta
        out = []
        for i in range(length):
            if bit_delta > 0:
                out.append(
                    (self.unsigned_word_at(i + word_delta) >> bit_delta)
                    | (self.unsigned_word_at(i + word_delta + 1) << (WORD_BITS - bit_delta))
                )
            else:
                out.append(self.word_at(i + word_delta))
        return BigInt.from_raw(out, self.sign)

    def shorten(self, num_bits: int) -> BigInt:
        """Keep the low ``num_bits`` bits, sign-extending from the highest kept bit."""
        if num_bits < 1:
            raise ValueError(f"num_bits must be positive, got {num_bits}")
        word_index = (num_bits - 1) >> 5
        bit_index = (num_bits - 1) % WORD_BITS
        out = [self.word_at(i) for i in range(word_index)]
        significant = WORD_MASK if bit_index == 31 else (1 << (bit_index + 1)) - 1
        top = self.unsigned_word_at(word_index) & significant
        if top & (1 << bit_index):
            out.append(top | (WORD_MASK - significant))
            return BigInt.from_raw(out, -1)
        out.append(top)
        return BigInt.from_raw(out, 0)

    # -- conversion -------------------------------------------------------

    def to_int32(self) -> int:
        """Low word as a signed 32-bit int (truncating conversion)."""
        return self.words[0] if self.words else self.sign

    def to_uint32(self) -> int:
        return self.to_int32() & WORD_MASK

    def to_float(self) -> float:
        """Nearest-ish double; precision is lost past 53 significant bits."""
        if self.is_negative():
            return -self.negate().to_float()
        value = 0.0
        power = 1.0
        for i in range(len(self.words)):
            word = self.unsigned_word_at(i)
            if word:
                value += word * power
            power *= TWO_PWR_32_DBL
        return value

    def to_string(self) -> str:
        from .conversions import format_integer

        return format_integer(self)

    def to_fixed64(self) -> Fixed64:
        from .fixed64 import Fixed64

        return Fixed64.from_bits(self.word_at(0), self.word_at(1))

    def to_word64(self) -> BigInt:
        """Value modulo 2^64 as a non-negative BigInt."""
        return self.bitwise_and(_WORD64_MASK)

    # -- Python protocol --------------------------------------------------

    @classmethod
    def _coerce(cls, other: object) -> BigInt | None:
        if isinstance(other, BigInt):
            return other
        if isinstance(other, int):
            return cls.from_int(other)
        return None

    def __int__(self) -> int:
        value = 0
        for i, word in enumerate(self.words):
            value |= (word & WORD_MASK) << (WORD_BITS * i)
        if self.sign:
            value -= 1 << (WORD_BITS * len(self.words))
        return value

    __index__ = __int__

    def __float__(self) -> float:
        return self.to_float()

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"BigInt({self.to_string()})"

    def __hash__(self) -> int:
        return hash(int(self))

    def __eq__(self, other: object) -> bool:
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return self.equals(rhs)

    def __lt__(self, other: object) -> bool:
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return self.less_than(rhs)

    def __le__(self, other: object) -> bool:
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return self.less_or_equal(rhs)

    def __gt__(self, other: object) -> bool:
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return self.greater_than(rhs)

    def __ge__(self, other: object) -> bool:
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return self.greater_or_equal(rhs)

    def __neg__(self) -> BigInt:
        return self.negate()

    def __pos__(self) -> BigInt:
        return self

    def __abs__(self) -> BigInt:
        return self.absolute()

    def __invert__(self) -> BigInt:
        return self.bitwise_not()

    def __lshift__(self, other: int) -> BigInt:
        return self.shift_left(int(other))

    def __rshift__(self, other: int) -> BigInt:
        return self.shift_right(int(other))

    def __divmod__(self, other: object) -> tuple[BigInt, BigInt]:
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return self.div_mod(rhs)


def _binary_operator(method_name: str, *, reflected: bool = False):
    def op(self: BigInt, other: object) -> BigInt:
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        if reflected:
            return getattr(rhs, method_name)(self)
        return getattr(self, method_name)(rhs)

    op.__name__ = method_name
    return op


for _dunder, _method in [
    ("add", "add"),
    ("sub", "subtract"),
    ("mul", "multiply"),
    ("floordiv", "divide_floor"),
    ("mod", "modulo_floor"),
    ("and", "bitwise_and"),
    ("or", "bitwise_or"),
    ("xor", "bitwise_xor"),
]:
    setattr(BigInt, f"__{_dunder}__", _binary_operator(_method))
    setattr(BigInt, f"__r{_dunder}__", _binary_operator(_method, reflected=True))


BigInt.ZERO = BigInt.from_int(0)
BigInt.ONE = BigInt.from_int(1)
BigInt.NEG_ONE = BigInt.from_int(-1)
BigInt.TWO_PWR_24 = BigInt.from_int(1 << 24)
_WORD64_MASK: Final[BigInt] = BigInt.from_raw([-1, -1], 0)
