"""
TOON (Token-Oriented Object Notation) codec for Python.

A compact, line-oriented rendering of the JSON data model. Uniform arrays of
objects collapse into tables with a single header, which makes payloads
noticeably smaller when they are handed to language models.

Usage:
    import tooncodec

    # Encode Python data to TOON
    data = {"users": [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]}
    encoded = tooncodec.encode(data)
    # users[2]{id,name}:
    #   1,Alice
    #   2,Bob

    # Decode TOON back to Python data
    decoded = tooncodec.decode(encoded)

    # With options
    from tooncodec import DecodeOptions, EncodeOptions

    encoded = tooncodec.encode(data, EncodeOptions(indent=4, delimiter="|"))
    decoded = tooncodec.decode(encoded, DecodeOptions(indent=4, strict=False))
"""

__version__ = "0.1.0"

from .decode import decode, decode_lines
from .encode import encode, encode_lines
from .errors import (
    CountMismatchError,
    StrictModeError,
    ToonDecodeError,
    ToonIndentationError,
    ToonSyntaxError,
)
from .helpers import (
    compare_with_json,
    decode_lenient,
    encode_compact,
    encode_readable,
    encode_tabular,
    estimate_tokens,
    toon_size,
)
from .normalize import normalize_value
from .types import DecodeOptions, Delimiter, EncodeOptions, JsonValue

__all__ = [
    # Version
    "__version__",
    # Main API
    "encode",
    "encode_lines",
    "decode",
    "decode_lines",
    "normalize_value",
    # Options
    "EncodeOptions",
    "DecodeOptions",
    # Errors
    "ToonDecodeError",
    "ToonSyntaxError",
    "ToonIndentationError",
    "StrictModeError",
    "CountMismatchError",
    # Helpers
    "encode_compact",
    "encode_readable",
    "encode_tabular",
    "decode_lenient",
    "toon_size",
    "estimate_tokens",
    "compare_with_json",
    # Types
    "JsonValue",
    "Delimiter",
]
