"""Primitive value encoding and parsing for TOON."""

import math
import re
from decimal import Decimal
from typing import TYPE_CHECKING

from .errors import ToonSyntaxError
from .string_utils import (
    escape_string,
    find_closing_quote,
    is_safe_unquoted,
    is_valid_key_identifier,
    unescape_string,
)

if TYPE_CHECKING:
    from .types import Delimiter, JsonPrimitive

NUMBER_PATTERN = re.compile(r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?")

# Floats at or beyond this magnitude are written with %.0f
LARGE_FLOAT_THRESHOLD = 1e21


def encode_primitive(value: "JsonPrimitive", delimiter: "Delimiter" = ",") -> str:
    """
    Encode a primitive value to TOON format.

    Args:
        value: The primitive value (str, int, float, bool, or None).
        delimiter: The active delimiter for quoting checks.

    Returns:
        The encoded string representation.

    Raises:
        TypeError: If the value is not a primitive.
    """
    if value is None:
        return "null"

    if isinstance(value, bool):
        return "true" if value else "false"

    if isinstance(value, (int, float)):
        return _encode_number(value)

    if isinstance(value, str):
        return encode_string_literal(value, delimiter)

    raise TypeError(f"Cannot encode value of type {type(value).__name__}")


def _encode_number(value: int | float) -> str:
    """Encode a number without scientific notation."""
    if isinstance(value, int):
        return str(value)

    if math.isnan(value) or math.isinf(value):
        # normalize_value maps these to None before they get here
        return "null"

    # Also covers -0.0
    if value == 0.0:
        return "0"

    if abs(value) >= LARGE_FLOAT_THRESHOLD:
        return f"{value:.0f}"

    # Expand the shortest round-trip digits into fixed-point form
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def encode_string_literal(value: str, delimiter: "Delimiter" = ",") -> str:
    """
    Encode a string value, with or without quotes.

    Args:
        value: The string to encode.
        delimiter: The active delimiter for quoting checks.

    Returns:
        The encoded string (quoted if necessary).
    """
    if is_safe_unquoted(value, delimiter):
        return value
    return f'"{escape_string(value)}"'


def encode_key(key: str) -> str:
    """
    Encode an object key for TOON format.

    Keys follow a narrower rule than values: anything other than an
    identifier-like key (letters, digits, underscores, dots) is quoted.

    Args:
        key: The key string.

    Returns:
        The encoded key (quoted if necessary).
    """
    if is_valid_key_identifier(key):
        return key
    return f'"{escape_string(key)}"'


def parse_primitive(token: str) -> "JsonPrimitive":
    """
    Parse a primitive token to a Python value.

    Handles: null, true, false, numbers, quoted strings, unquoted strings.

    Args:
        token: The token string (trimmed).

    Returns:
        The parsed Python value.

    Raises:
        ToonSyntaxError: For malformed quoted strings.
    """
    if not token:
        return ""

    if token.startswith('"'):
        return parse_string_literal(token)

    if token == "null":
        return None
    if token == "true":
        return True
    if token == "false":
        return False

    number = _try_parse_number(token)
    if number is not None:
        return number

    return token


def parse_string_literal(token: str) -> str:
    """
    Parse a quoted string literal.

    Args:
        token: The token starting with '"'.

    Returns:
        The unescaped string content.

    Raises:
        ToonSyntaxError: If the string is malformed.
    """
    if not token.startswith('"'):
        raise ToonSyntaxError(f"String literal must start with quote: {token}")

    end = find_closing_quote(token, 0)
    if end == -1:
        raise ToonSyntaxError("Unterminated quoted string")

    if end != len(token) - 1:
        raise ToonSyntaxError(f"Unexpected characters after closing quote: {token[end + 1 :]}")

    return unescape_string(token[1:end])


def _try_parse_number(token: str) -> int | float | None:
    """
    Try to parse a token as a number.

    Returns None if it's not a valid number.
    """
    if not NUMBER_PATTERN.fullmatch(token):
        return None

    # Leading zeros make it a string ("007"), but "0", "0.5" and "0e1" are numbers
    digits = token.lstrip("-")
    if len(digits) > 1 and digits[0] == "0" and digits[1].isdigit():
        return None

    if "." not in token and "e" not in token.lower():
        return int(token)

    value = float(token)

    # Normalize -0 to 0
    if value == 0.0:
        return 0

    return value
