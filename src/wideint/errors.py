"""Structured error types for integer construction and arithmetic."""

from __future__ import annotations

from dataclasses import dataclass


class WideIntError(Exception):
    """Base class for structured wideint errors."""


class DivisionByZeroError(WideIntError, ZeroDivisionError):
    """Quotient, remainder, floored division or modulo with a zero divisor."""


@dataclass(frozen=True)
class MalformedLiteralError(WideIntError, ValueError):
    """Integer text that cannot be materialised, with the offending span."""

    message: str
    start: int = 0
    end: int = 0
    found: str | None = None

    def __str__(self) -> str:
        found = ""
        if self.found is not None:
            found = f"; found {self.found!r}"
        return f"{self.message} at span [{self.start}, {self.end}){found}"
