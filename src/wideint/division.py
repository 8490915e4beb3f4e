"""Approximate-quotient-with-correction division shared by BigInt and Fixed64.

The engine is written against a small duck-typed surface (``to_float``,
``from_float``, ``multiply``, ``add``, ``subtract``, comparisons and the
``ZERO``/``ONE`` class constants) so both value types run the identical loop.

Each outer pass estimates the next quotient digit from the float ratio of the
remaining dividend and the divisor, walks the estimate down by ``delta`` until
``estimate * divisor`` no longer overshoots, then folds it into the result. The
float ratio is good to roughly 52 bits, so ``delta`` grows with the estimate
once it passes 2^48 and every pass removes all but a tiny fraction of what is
left.
"""

from __future__ import annotations

import logging
import math
from typing import Final, TypeVar

from .errors import DivisionByZeroError

_LOG = logging.getLogger(__name__)

V = TypeVar("V")

_LN2: Final[float] = math.log(2)
_EXACT_STEP_BITS: Final[int] = 48
# Width kept from each operand when the float ratio would overflow.
_SCALED_TOP_BITS: Final[int] = 64
_SCALED_DIRECT_LIMIT: Final[int] = 900


def correction_step(approx: float) -> float:
    """Return the decrement used while correcting an overshooting estimate."""
    if approx <= 1.0:
        return 1.0
    log2 = math.ceil(math.log(approx) / _LN2)
    if log2 <= _EXACT_STEP_BITS:
        return 1.0
    return 2.0 ** (log2 - _EXACT_STEP_BITS)


def _approximate_digit(remaining, divisor) -> tuple[float, int]:
    """Estimate ``remaining / divisor`` as ``mantissa * 2**exponent``."""
    numerator = remaining.to_float()
    if math.isfinite(numerator):
        return max(1.0, float(math.floor(numerator / divisor.to_float()))), 0

    # Beyond double range: ratio of the top bits, rescaled by a power of two.
    top_shift = max(0, remaining.bit_length() - _SCALED_TOP_BITS)
    bottom_shift = max(0, divisor.bit_length() - _SCALED_TOP_BITS)
    ratio = remaining.shift_right(top_shift).to_float() / divisor.shift_right(bottom_shift).to_float()
    exponent = top_shift - bottom_shift
    _LOG.debug("scaled quotient estimate: ratio=%r exponent=%d", ratio, exponent)
    if exponent <= _SCALED_DIRECT_LIMIT:
        return max(1.0, float(math.floor(math.ldexp(ratio, exponent)))), 0
    return float(math.floor(math.ldexp(ratio, _SCALED_TOP_BITS))), exponent - _SCALED_TOP_BITS


def _scaled(kind, mantissa: float, exponent: int):
    value = kind.from_float(mantissa)
    if exponent:
        return value.shift_left(exponent)
    return value


def approximate_quotient(remaining: V, divisor: V) -> V:
    """Truncated quotient of two positive values of the same type."""
    kind = type(remaining)
    result = kind.ZERO
    passes = 0
    while remaining.greater_or_equal(divisor):
        approx, exponent = _approximate_digit(remaining, divisor)
        delta = correction_step(approx)

        approx_res = _scaled(kind, approx, exponent)
        approx_rem = approx_res.multiply(divisor)
        while approx_rem.is_negative() or approx_rem.greater_than(remaining):
            approx = max(0.0, approx - delta)
            approx_res = _scaled(kind, approx, exponent)
            approx_rem = approx_res.multiply(divisor)

        if approx_res.is_zero():
            approx_res = kind.ONE
            approx_rem = divisor

        result = result.add(approx_res)
        remaining = remaining.subtract(approx_rem)
        passes += 1
    _LOG.debug("%s quotient converged in %d passes", kind.__name__, passes)
    return result


def truncated_quotient(dividend: V, divisor: V) -> V:
    """Quotient rounded toward zero, normalising signs before the core loop."""
    if divisor.is_zero():
        raise DivisionByZeroError("division by zero")
    if dividend.is_zero():
        return type(dividend).ZERO

    if dividend.is_negative():
        if divisor.is_negative():
            return truncated_quotient(dividend.negate(), divisor.negate())
        return truncated_quotient(dividend.negate(), divisor).negate()
    if divisor.is_negative():
        return truncated_quotient(dividend, divisor.negate()).negate()

    return approximate_quotient(dividend, divisor)


def floored_quotient(dividend: V, divisor: V) -> V:
    """Quotient rounded toward negative infinity."""
    quotient = dividend.quotient(divisor)
    zero = type(dividend).ZERO
    if dividend.greater_than(zero) != divisor.greater_than(zero):
        if not dividend.remainder(divisor).is_zero():
            return quotient.subtract(type(dividend).ONE)
    return quotient


def floored_modulo(dividend: V, divisor: V) -> V:
    """Remainder carrying the divisor's sign: ``rem(b + rem(a, b), b)``."""
    return divisor.add(dividend.remainder(divisor)).remainder(divisor)
