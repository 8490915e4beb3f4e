"""Numeric-literal scanning and materialisation for lexers built on wideint."""

from __future__ import annotations

import math
import re

from .bigint import BigInt
from .conversions import parse_integer
from .errors import MalformedLiteralError
from .fixed64 import Fixed64

_SIGNS = {"¯", "-"}

_REAL_RE = re.compile(
    r"""
    ^
    (?P<sign>[¯-]?)                           # leading sign
    (?:
        (?P<infinity>∞)                       # infinity
      |
        (?P<mantissa>[0-9]+(?:\.[0-9]*)?|\.[0-9]+)
        (?:
            [eE]
            (?P<exp_sign>[¯+\-]?)
            (?P<exponent>[0-9]+)
        )?
    )
    $
    """,
    re.VERBOSE,
)


def _is_ascii_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _scan_digits_and_underscores(source: str, start: int) -> int:
    i = start
    while i < len(source) and (_is_ascii_digit(source[i]) or source[i] == "_"):
        i += 1
    return i


def scan_integer_literal(source: str, start: int) -> tuple[str, int]:
    """Return ``(text, end)`` for the integer literal starting at ``start``.

    A literal is an optional ``¯``/``-`` followed by a digit and then digits or
    ``_`` separators.
    """
    i = start
    if i < len(source) and source[i] in _SIGNS:
        i += 1
    if i >= len(source) or not _is_ascii_digit(source[i]):
        found = source[i] if i < len(source) else None
        raise MalformedLiteralError("invalid integer literal", start, i, found=found)
    i = _scan_digits_and_underscores(source, i + 1)
    return source[start:i], i


def parse_integer_literal(text: str, pos: int = 0, *, fixed: bool = False) -> BigInt | Fixed64:
    """Materialise a scanned integer literal; ``pos`` is its offset in the source."""
    negative = bool(text) and text[0] in _SIGNS
    digits = text[1:] if negative else text
    offset = pos + 1 if negative else pos
    if not digits.replace("_", ""):
        raise MalformedLiteralError("invalid integer literal", pos, pos + len(text), found=text)
    if digits.startswith("_"):
        raise MalformedLiteralError("invalid integer literal", offset, offset + 1, found="_")

    kept = [i for i, ch in enumerate(digits) if ch != "_"]
    try:
        value = parse_integer(digits.replace("_", ""), 10)
    except MalformedLiteralError as exc:
        # Map cleaned-digit indices back onto the source text.
        start = offset + kept[min(exc.start, len(kept) - 1)]
        end = offset + kept[min(exc.end, len(kept)) - 1] + 1 if exc.end > exc.start else start
        raise MalformedLiteralError(exc.message, start, end, found=exc.found) from exc
    if negative:
        value = value.negate()
    if fixed:
        return value.to_fixed64()
    return value


def parse_real_literal(text: str, pos: int = 0) -> float:
    cleaned = text.replace("_", "")
    m = _REAL_RE.match(cleaned)
    if not m:
        raise MalformedLiteralError("invalid numeric literal", pos, pos + len(text), found=text)

    sign = -1.0 if m.group("sign") in _SIGNS else 1.0
    if m.group("infinity"):
        return sign * math.inf

    mantissa_text = m.group("mantissa")
    exponent_text = m.group("exponent")
    if exponent_text is not None:
        exp_sign = "-" if m.group("exp_sign") in _SIGNS else ""
        mantissa_text = f"{mantissa_text}e{exp_sign}{exponent_text}"
    return sign * float(mantissa_text)
