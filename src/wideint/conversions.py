"""Conversions between integers, radix strings and IEEE-754 doubles."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from functools import lru_cache
from typing import Final

from .bigint import BigInt
from .errors import DivisionByZeroError, MalformedLiteralError
from .fixed64 import Fixed64
from .words import WORD_BITS, WORD_MASK

_DIGITS: Final[str] = "0123456789abcdefghijklmnopqrstuvwxyz"
_PARSE_CHUNK: Final[int] = 8
_FORMAT_GROUP: Final[int] = 6


@lru_cache(maxsize=256)
def _radix_power(radix: int, length: int) -> BigInt:
    return BigInt.from_int(radix**length)


def _check_digits(text: str, radix: int, offset: int) -> None:
    allowed = _DIGITS[:radix]
    for idx, ch in enumerate(text):
        if ch.lower() not in allowed or len(ch.lower()) != 1:
            raise MalformedLiteralError(
                f"number format error: invalid digit for radix {radix}",
                offset + idx,
                offset + idx + 1,
                found=ch,
            )


def parse_integer(text: str, radix: int = 10, *, offset: int = 0) -> BigInt:
    """Parse ``[-]digits`` in ``radix`` (2..36) into a BigInt.

    Digits are consumed eight at a time from the front; each chunk is folded in
    as ``acc * radix**len(chunk) + chunk``. ``offset`` shifts the spans reported
    in :class:`MalformedLiteralError` so callers can point into a larger source.
    """
    if not text:
        raise MalformedLiteralError("number format error: empty string", offset, offset)
    if radix < 2 or radix > 36:
        raise MalformedLiteralError(f"radix out of range: {radix}", offset, offset + len(text))

    negative = text[0] == "-"
    body = text[1:] if negative else text
    body_offset = offset + 1 if negative else offset
    interior = body.find("-")
    if interior >= 0:
        pos = body_offset + interior
        raise MalformedLiteralError('number format error: interior "-" character', pos, pos + 1, found="-")
    if not body:
        raise MalformedLiteralError("number format error: empty string", body_offset, body_offset)
    _check_digits(body, radix, body_offset)

    radix_to_power = _radix_power(radix, _PARSE_CHUNK)
    result = BigInt.ZERO
    for start in range(0, len(body), _PARSE_CHUNK):
        chunk = body[start : start + _PARSE_CHUNK]
        value = BigInt.from_int(int(chunk, radix))
        if len(chunk) < _PARSE_CHUNK:
            result = result.multiply(_radix_power(radix, len(chunk))).add(value)
        else:
            result = result.multiply(radix_to_power).add(value)
    return result.negate() if negative else result


def format_integer(value: BigInt) -> str:
    """Render ``value`` in decimal, six digits per division step."""
    if value.is_zero():
        return "0"
    if value.is_negative():
        return "-" + format_integer(value.negate())

    radix_to_power = _radix_power(10, _FORMAT_GROUP)
    rem = value
    groups: list[str] = []
    while True:
        rem_div = rem.quotient(radix_to_power)
        digits = str(rem.subtract(rem_div.multiply(radix_to_power)).to_int32())
        rem = rem_div
        if rem.is_zero():
            groups.append(digits)
            return "".join(reversed(groups))
        groups.append(digits.zfill(_FORMAT_GROUP))


def from_double(value: float) -> BigInt:
    return BigInt.from_float(value)


def to_double(value: BigInt | Fixed64) -> float:
    """Lossy above 53 significant bits; no precision signal is raised."""
    return value.to_float()


def ratio_to_float(numerator: BigInt, denominator: BigInt) -> float:
    if denominator.is_zero():
        raise DivisionByZeroError("division by zero")
    return numerator.to_float() / denominator.to_float()


@dataclass(frozen=True)
class DecodedDouble:
    """IEEE-754 double split into sign, 21+32 mantissa bits and exponent.

    ``value == sign * (mantissa_high * 2**32 + mantissa_low) * 2**exponent``.
    """

    sign: int
    mantissa_high: int
    mantissa_low: int
    exponent: int

    @property
    def mantissa(self) -> int:
        return self.sign * ((self.mantissa_high << WORD_BITS) | self.mantissa_low)


_DECODED_ZERO: Final[DecodedDouble] = DecodedDouble(sign=1, mantissa_high=0, mantissa_low=0, exponent=0)


def decode_double(value: float) -> DecodedDouble:
    if value == 0:
        return _DECODED_ZERO
    low, high = struct.unpack("<II", struct.pack("<d", value))
    sign = -1 if value < 0 else 1
    mantissa_high = high & 0xFFFFF
    biased = (high >> 20) & 0x7FF
    if biased == 0:
        exponent = 1 - 1075
    else:
        exponent = biased - 1075
        mantissa_high |= 1 << 20
    return DecodedDouble(sign=sign, mantissa_high=mantissa_high, mantissa_low=low & WORD_MASK, exponent=exponent)


def decode_double_integer(value: float) -> tuple[BigInt, int]:
    """Return ``(mantissa, exponent)`` with ``value == mantissa * 2**exponent``."""
    dec = decode_double(value)
    mantissa = BigInt.from_words([dec.mantissa_low, dec.mantissa_high])
    if dec.sign < 0:
        mantissa = mantissa.negate()
    return mantissa, dec.exponent


def decode_float(value: float) -> tuple[int, int]:
    """Decompose a single-precision float; ``value`` must fit in float32 range."""
    if value == 0:
        return 0, 0
    (bits,) = struct.unpack("<I", struct.pack("<f", value))
    sign = -1 if value < 0 else 1
    mantissa = bits & 0x7FFFFF
    biased = (bits >> 23) & 0xFF
    if biased == 0:
        exponent = 1 - 150
    else:
        exponent = biased - 150
        mantissa |= 1 << 23
    return sign * mantissa, exponent


def encode_double(mantissa: BigInt | Fixed64 | int, exponent: int) -> float:
    """Recompose ``mantissa * 2**exponent``; overflow yields a signed infinity."""
    value = int(mantissa)
    if value == 0:
        return 0.0
    try:
        if exponent >= 0:
            return math.ldexp(float(value), exponent)
        if -exponent > value.bit_length() + 1075:
            return -0.0 if value < 0 else 0.0
        # Correctly rounded for mantissas of any width.
        return value / (1 << -exponent)
    except OverflowError:
        return -math.inf if value < 0 else math.inf
