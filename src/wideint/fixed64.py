"""Fixed-width 64-bit two's-complement integers held as two signed 32-bit words."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import ClassVar, Final

from . import division
from .bigint import BigInt
from .cache import FIXED64_CACHE, SmallValueCache
from .errors import DivisionByZeroError
from .words import HALF_MASK, TWO_PWR_32_DBL, WORD_BITS, WORD_MASK, join_halves, split_halves, to_int32

_USE_MUL_FAST_PATH: Final[bool] = os.environ.get("WIDEINT_DISABLE_MUL_FAST_PATH", "0") != "1"

TWO_PWR_64_DBL: Final[float] = TWO_PWR_32_DBL * TWO_PWR_32_DBL
TWO_PWR_63_DBL: Final[float] = TWO_PWR_64_DBL / 2


@dataclass(frozen=True, eq=False)
class Fixed64:
    """Immutable 64-bit signed integer with wraparound on overflow.

    ``low`` and ``high`` are signed 32-bit words. Every operation returns a new
    value; arithmetic wraps modulo 2^64 the way a machine ``int64`` does.
    """

    low: int = 0
    high: int = 0

    ZERO: ClassVar[Fixed64]
    ONE: ClassVar[Fixed64]
    NEG_ONE: ClassVar[Fixed64]
    MIN_VALUE: ClassVar[Fixed64]
    MAX_VALUE: ClassVar[Fixed64]
    TWO_PWR_24: ClassVar[Fixed64]

    def __post_init__(self) -> None:
        for name in ("low", "high"):
            word = getattr(self, name)
            if not -(1 << 31) <= word < (1 << 31):
                raise ValueError(f"{name} must be a signed 32-bit word, got {word}; use Fixed64.from_bits")

    # -- construction -----------------------------------------------------

    @classmethod
    def from_bits(cls, low: int, high: int) -> Fixed64:
        return cls(to_int32(low), to_int32(high))

    @classmethod
    def from_int(cls, value: int, *, cache: SmallValueCache | None = None) -> Fixed64:
        """Wrap ``value`` modulo 2^64."""
        table = FIXED64_CACHE if cache is None else cache
        return table.get(int(value), cls._from_python_int)

    @classmethod
    def _from_python_int(cls, value: int) -> Fixed64:
        return cls.from_bits(value, value >> WORD_BITS)

    @classmethod
    def from_float(cls, value: float) -> Fixed64:
        """Truncate toward zero, saturating at MIN_VALUE/MAX_VALUE; NaN/inf give zero."""
        if math.isnan(value) or math.isinf(value):
            return cls.ZERO
        if value <= -TWO_PWR_63_DBL:
            return cls.MIN_VALUE
        if value + 1 >= TWO_PWR_63_DBL:
            return cls.MAX_VALUE
        if value < 0:
            return cls.from_float(-value).negate()
        return cls.from_bits(int(value % TWO_PWR_32_DBL), int(value / TWO_PWR_32_DBL))

    @classmethod
    def from_string(cls, text: str, radix: int = 10) -> Fixed64:
        return BigInt.from_string(text, radix).to_fixed64()

    # -- predicates -------------------------------------------------------

    def is_zero(self) -> bool:
        return self.high == 0 and self.low == 0

    def is_negative(self) -> bool:
        return self.high < 0

    def is_odd(self) -> bool:
        return (self.low & 1) == 1

    def unsigned_low(self) -> int:
        return self.low & WORD_MASK

    def unsigned_high(self) -> int:
        return self.high & WORD_MASK

    def _unsigned64(self) -> int:
        return (self.unsigned_high() << WORD_BITS) | self.unsigned_low()

    def bit_length(self) -> int:
        if self.is_negative():
            if self.equals(Fixed64.MIN_VALUE):
                return 64
            return self.negate().bit_length()
        if self.high:
            return WORD_BITS + self.unsigned_high().bit_length()
        return self.unsigned_low().bit_length()

    def pop_count(self) -> int:
        return self.unsigned_low().bit_count() + self.unsigned_high().bit_count()

    def leading_zeros(self) -> int:
        return 64 - self._unsigned64().bit_length()

    def trailing_zeros(self) -> int:
        bits = self._unsigned64()
        if bits == 0:
            return 64
        return (bits & -bits).bit_length() - 1

    # -- comparison -------------------------------------------------------

    def equals(self, other: Fixed64) -> bool:
        return self.high == other.high and self.low == other.low

    def not_equals(self, other: Fixed64) -> bool:
        return not self.equals(other)

    def compare(self, other: Fixed64) -> int:
        if self.equals(other):
            return 0
        this_neg = self.is_negative()
        other_neg = other.is_negative()
        if this_neg and not other_neg:
            return -1
        if not this_neg and other_neg:
            return 1
        if self.subtract(other).is_negative():
            return -1
        return 1

    def less_than(self, other: Fixed64) -> bool:
        return self.compare(other) < 0

    def less_or_equal(self, other: Fixed64) -> bool:
        return self.compare(other) <= 0

    def greater_than(self, other: Fixed64) -> bool:
        return self.compare(other) > 0

    def greater_or_equal(self, other: Fixed64) -> bool:
        return self.compare(other) >= 0

    # -- arithmetic -------------------------------------------------------

    def negate(self) -> Fixed64:
        if self.equals(Fixed64.MIN_VALUE):
            return Fixed64.MIN_VALUE
        return self.bitwise_not().add(Fixed64.ONE)

    def add(self, other: Fixed64) -> Fixed64:
        a48, a32 = split_halves(self.high)
        a16, a00 = split_halves(self.low)
        b48, b32 = split_halves(other.high)
        b16, b00 = split_halves(other.low)

        c00 = a00 + b00
        c16 = c00 >> 16
        c00 &= HALF_MASK
        c16 += a16 + b16
        c32 = c16 >> 16
        c16 &= HALF_MASK
        c32 += a32 + b32
        c48 = c32 >> 16
        c32 &= HALF_MASK
        c48 += a48 + b48
        c48 &= HALF_MASK
        return Fixed64.from_bits(join_halves(c16, c00), join_halves(c48, c32))

    def subtract(self, other: Fixed64) -> Fixed64:
        return self.add(other.negate())

    def multiply(self, other: Fixed64) -> Fixed64:
        if self.is_zero() or other.is_zero():
            return Fixed64.ZERO

        # -2^63 cannot be negated; only the parity of the other factor survives.
        if self.equals(Fixed64.MIN_VALUE):
            return Fixed64.MIN_VALUE if other.is_odd() else Fixed64.ZERO
        if other.equals(Fixed64.MIN_VALUE):
            return Fixed64.MIN_VALUE if self.is_odd() else Fixed64.ZERO

        if self.is_negative():
            if other.is_negative():
                return self.negate().multiply(other.negate())
            return self.negate().multiply(other).negate()
        if other.is_negative():
            return self.multiply(other.negate()).negate()

        if _USE_MUL_FAST_PATH and self.less_than(Fixed64.TWO_PWR_24) and other.less_than(Fixed64.TWO_PWR_24):
            return Fixed64.from_float(self.to_float() * other.to_float())

        a48, a32 = split_halves(self.high)
        a16, a00 = split_halves(self.low)
        b48, b32 = split_halves(other.high)
        b16, b00 = split_halves(other.low)

        c00 = a00 * b00
        c16 = c00 >> 16
        c00 &= HALF_MASK
        c16 += a16 * b00
        c32 = c16 >> 16
        c16 &= HALF_MASK
        c16 += a00 * b16
        c32 += c16 >> 16
        c16 &= HALF_MASK
        c32 += a32 * b00
        c48 = c32 >> 16
        c32 &= HALF_MASK
        c32 += a16 * b16
        c48 += c32 >> 16
        c32 &= HALF_MASK
        c32 += a00 * b32
        c48 += c32 >> 16
        c32 &= HALF_MASK
        c48 += a48 * b00 + a32 * b16 + a16 * b32 + a00 * b48
        c48 &= HALF_MASK
        return Fixed64.from_bits(join_halves(c16, c00), join_halves(c48, c32))

    def quotient(self, other: Fixed64) -> Fixed64:
        """Truncating division; ``MIN_VALUE / -1`` wraps to ``MIN_VALUE``."""
        if other.is_zero():
            raise DivisionByZeroError("division by zero")
        if self.is_zero():
            return Fixed64.ZERO

        if self.equals(Fixed64.MIN_VALUE):
            if other.equals(Fixed64.ONE) or other.equals(Fixed64.NEG_ONE):
                return Fixed64.MIN_VALUE
            if other.equals(Fixed64.MIN_VALUE):
                return Fixed64.ONE
            # Halve first so the magnitude fits, then fold in one more step.
            approx = self.shift_right(1).quotient(other).shift_left(1)
            if approx.is_zero():
                return Fixed64.ONE if other.is_negative() else Fixed64.NEG_ONE
            rem = self.subtract(other.multiply(approx))
            return approx.add(rem.quotient(other))
        if other.equals(Fixed64.MIN_VALUE):
            return Fixed64.ZERO

        return division.truncated_quotient(self, other)

    def remainder(self, other: Fixed64) -> Fixed64:
        return self.subtract(self.quotient(other).multiply(other))

    def quot_rem(self, other: Fixed64) -> tuple[Fixed64, Fixed64]:
        quotient = self.quotient(other)
        return quotient, self.subtract(quotient.multiply(other))

    def divide_floor(self, other: Fixed64) -> Fixed64:
        return division.floored_quotient(self, other)

    def modulo_floor(self, other: Fixed64) -> Fixed64:
        # rem(b + rem(a, b), b) would wrap when b + rem overflows.
        rem = self.remainder(other)
        if not rem.is_zero() and rem.is_negative() != other.is_negative():
            return rem.add(other)
        return rem

    def div_mod(self, other: Fixed64) -> tuple[Fixed64, Fixed64]:
        return self.divide_floor(other), self.modulo_floor(other)

    def absolute(self) -> Fixed64:
        if self.is_negative():
            return self.negate()
        return self

    def signum(self) -> Fixed64:
        if self.is_negative():
            return Fixed64.NEG_ONE
        if self.is_zero():
            return Fixed64.ZERO
        return Fixed64.ONE

    # -- bitwise ----------------------------------------------------------

    def bitwise_not(self) -> Fixed64:
        return Fixed64.from_bits(~self.low, ~self.high)

    def bitwise_and(self, other: Fixed64) -> Fixed64:
        return Fixed64.from_bits(self.low & other.low, self.high & other.high)

    def bitwise_or(self, other: Fixed64) -> Fixed64:
        return Fixed64.from_bits(self.low | other.low, self.high | other.high)

    def bitwise_xor(self, other: Fixed64) -> Fixed64:
        return Fixed64.from_bits(self.low ^ other.low, self.high ^ other.high)

    def shift_left(self, num_bits: int) -> Fixed64:
        num_bits &= 63
        if num_bits == 0:
            return self
        if num_bits < 32:
            return Fixed64.from_bits(
                self.low << num_bits,
                (self.high << num_bits) | (self.unsigned_low() >> (32 - num_bits)),
            )
        return Fixed64.from_bits(0, self.low << (num_bits - 32))

    def shift_right(self, num_bits: int) -> Fixed64:
        num_bits &= 63
        if num_bits == 0:
            return self
        if num_bits < 32:
            return Fixed64.from_bits(
                (self.unsigned_low() >> num_bits) | (self.high << (32 - num_bits)),
                self.high >> num_bits,
            )
        return Fixed64.from_bits(self.high >> (num_bits - 32), 0 if self.high >= 0 else -1)

    def shift_right_unsigned(self, num_bits: int) -> Fixed64:
        num_bits &= 63
        if num_bits == 0:
            return self
        if num_bits < 32:
            return Fixed64.from_bits(
                (self.unsigned_low() >> num_bits) | (self.high << (32 - num_bits)),
                self.unsigned_high() >> num_bits,
            )
        if num_bits == 32:
            return Fixed64.from_bits(self.high, 0)
        return Fixed64.from_bits(self.unsigned_high() >> (num_bits - 32), 0)

    # -- conversion -------------------------------------------------------

    def to_int32(self) -> int:
        return self.low

    def to_float(self) -> float:
        return self.high * TWO_PWR_32_DBL + self.unsigned_low()

    def to_bigint(self) -> BigInt:
        return BigInt.from_fixed64(self)

    def to_word64(self) -> BigInt:
        """Bit pattern reinterpreted as an unsigned 64-bit value."""
        return self.to_bigint().to_word64()

    def to_string(self) -> str:
        return self.to_bigint().to_string()

    # -- Python protocol --------------------------------------------------

    @classmethod
    def _coerce(cls, other: object) -> Fixed64 | None:
        if isinstance(other, Fixed64):
            return other
        if isinstance(other, int):
            return cls.from_int(other)
        return None

    def __int__(self) -> int:
        value = self._unsigned64()
        if self.high < 0:
            value -= 1 << 64
        return value

    __index__ = __int__

    def __float__(self) -> float:
        return self.to_float()

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Fixed64({self.to_string()})"

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

    def __neg__(self) -> Fixed64:
        return self.negate()

    def __pos__(self) -> Fixed64:
        return self

    def __abs__(self) -> Fixed64:
        return self.absolute()

    def __invert__(self) -> Fixed64:
        return self.bitwise_not()

    def __lshift__(self, other: int) -> Fixed64:
        return self.shift_left(int(other))

    def __rshift__(self, other: int) -> Fixed64:
        return self.shift_right(int(other))

    def __divmod__(self, other: object) -> tuple[Fixed64, Fixed64]:
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return self.div_mod(rhs)


def _binary_operator(method_name: str, *, reflected: bool = False):
    def op(self: Fixed64, other: object) -> Fixed64:
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
    setattr(Fixed64, f"__{_dunder}__", _binary_operator(_method))
    setattr(Fixed64, f"__r{_dunder}__", _binary_operator(_method, reflected=True))


Fixed64.ZERO = Fixed64.from_int(0)
Fixed64.ONE = Fixed64.from_int(1)
Fixed64.NEG_ONE = Fixed64.from_int(-1)
Fixed64.MIN_VALUE = Fixed64.from_bits(0, 0x80000000)
Fixed64.MAX_VALUE = Fixed64.from_bits(0xFFFFFFFF, 0x7FFFFFFF)
Fixed64.TWO_PWR_24 = Fixed64.from_int(1 << 24)
