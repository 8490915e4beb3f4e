"""wideint public API."""

import logging

from .bigint import BigInt
from .cache import SmallValueCache, small_value_cache_stats
from .conversions import (
    DecodedDouble,
    decode_double,
    decode_double_integer,
    decode_float,
    encode_double,
    format_integer,
    from_double,
    parse_integer,
    ratio_to_float,
    to_double,
)
from .errors import DivisionByZeroError, MalformedLiteralError, WideIntError
from .fixed64 import Fixed64
from .literals import parse_integer_literal, parse_real_literal, scan_integer_literal

logging.getLogger(__name__).addHandler(logging.NullHandler())

try:
    from .arrays import (
        add_pairs,
        and_pairs,
        bigint_from_word_array,
        fixed64_from_array,
        fixed64_to_array,
        negate_pairs,
        not_pairs,
        or_pairs,
        subtract_pairs,
        word_array,
        xor_pairs,
    )
except ModuleNotFoundError as exc:
    if exc.name and exc.name.startswith("jax"):
        _jax_import_error = exc

        def _requires_jax(name: str):
            def stub(*_args, **_kwargs):
                raise ModuleNotFoundError(
                    f"jax is required for {name}(). Install runtime deps first."
                ) from _jax_import_error

            stub.__name__ = name
            return stub

        word_array = _requires_jax("word_array")
        bigint_from_word_array = _requires_jax("bigint_from_word_array")
        fixed64_to_array = _requires_jax("fixed64_to_array")
        fixed64_from_array = _requires_jax("fixed64_from_array")
        add_pairs = _requires_jax("add_pairs")
        negate_pairs = _requires_jax("negate_pairs")
        subtract_pairs = _requires_jax("subtract_pairs")
        and_pairs = _requires_jax("and_pairs")
        or_pairs = _requires_jax("or_pairs")
        xor_pairs = _requires_jax("xor_pairs")
        not_pairs = _requires_jax("not_pairs")

    else:
        raise

__all__ = [
    "BigInt",
    "Fixed64",
    "WideIntError",
    "DivisionByZeroError",
    "MalformedLiteralError",
    "SmallValueCache",
    "small_value_cache_stats",
    "parse_integer",
    "format_integer",
    "from_double",
    "to_double",
    "ratio_to_float",
    "DecodedDouble",
    "decode_double",
    "decode_double_integer",
    "decode_float",
    "encode_double",
    "scan_integer_literal",
    "parse_integer_literal",
    "parse_real_literal",
    "word_array",
    "bigint_from_word_array",
    "fixed64_to_array",
    "fixed64_from_array",
    "add_pairs",
    "negate_pairs",
    "subtract_pairs",
    "and_pairs",
    "or_pairs",
    "xor_pairs",
    "not_pairs",
]
