"""String utilities for TOON encoding/decoding."""

import re
from typing import TYPE_CHECKING

from .errors import ToonSyntaxError

if TYPE_CHECKING:
    from .types import Delimiter

# TOON only allows these 5 escape sequences
ESCAPE_MAP = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

UNESCAPE_MAP = {
    "\\": "\\",
    '"': '"',
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

# Reserved literals that can't be unquoted strings
RESERVED_LITERALS = frozenset({"true", "false", "null"})

# Structural characters that require quoting
STRUCTURAL_CHARS = frozenset(':[]{}"\\')

LIST_ITEM_MARKER = "-"

# Keys matching this pattern are written without quotes
KEY_IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")

CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x1f]")

# Anything a reader could mistake for a number literal
NUMERIC_LIKE_PATTERNS = (
    re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"),
    re.compile(r"0[0-7]+"),
    re.compile(r"0[xX][0-9a-fA-F]+"),
    re.compile(r"0[bB][01]+"),
)


def escape_string(value: str) -> str:
    """
    Escape a string for use in TOON quoted strings.

    Only the 5 valid TOON escape sequences are produced:
    - \\\\ (backslash)
    - \\" (double quote)
    - \\n (newline)
    - \\r (carriage return)
    - \\t (tab)

    Args:
        value: The string to escape.

    Returns:
        The escaped string (without surrounding quotes).
    """
    return "".join(ESCAPE_MAP.get(char, char) for char in value)


def unescape_string(value: str) -> str:
    """
    Unescape a TOON string that was inside quotes.

    Args:
        value: The string content (without surrounding quotes).

    Returns:
        The unescaped string.

    Raises:
        ToonSyntaxError: If an invalid escape sequence is found or backslash at end.
    """
    result = []
    i = 0
    while i < len(value):
        char = value[i]
        if char == "\\":
            if i + 1 >= len(value):
                raise ToonSyntaxError("Backslash at end of string")
            next_char = value[i + 1]
            if next_char not in UNESCAPE_MAP:
                raise ToonSyntaxError(f"Invalid escape sequence: \\{next_char}")
            result.append(UNESCAPE_MAP[next_char])
            i += 2
        else:
            result.append(char)
            i += 1
    return "".join(result)


def is_safe_unquoted(value: str, delimiter: "Delimiter" = ",") -> bool:
    """
    Check if a string can be safely represented without quotes.

    A string can be unquoted if:
    - Non-empty
    - No leading/trailing whitespace
    - Not exactly true, false or null
    - Not number-like (decimal, exponent, octal, hex, binary)
    - No structural chars (: [ ] { } " \\) and no active delimiter
    - No control chars (0x00-0x1F)
    - Doesn't start with '-' (list marker)

    Args:
        value: The string to check.
        delimiter: The active delimiter character.

    Returns:
        True if the string can be unquoted.
    """
    if not value:
        return False

    if value != value.strip():
        return False

    if value in RESERVED_LITERALS:
        return False

    if looks_like_number(value):
        return False

    if any(c in STRUCTURAL_CHARS for c in value) or delimiter in value:
        return False

    if CONTROL_CHAR_PATTERN.search(value):
        return False

    return not value.startswith(LIST_ITEM_MARKER)


def looks_like_number(value: str) -> bool:
    """Check if a string looks like a number literal."""
    return any(pattern.fullmatch(value) for pattern in NUMERIC_LIKE_PATTERNS)


def is_valid_key_identifier(key: str) -> bool:
    """
    Check if a key can be written without quotes.

    Args:
        key: The key to check.

    Returns:
        True if the key matches ``[A-Za-z_][A-Za-z0-9_.]*``.
    """
    return bool(KEY_IDENTIFIER_PATTERN.fullmatch(key))


def find_closing_quote(s: str, start: int) -> int:
    """
    Find the closing quote in a string.

    Args:
        s: The string to search.
        start: The position of the opening quote.

    Returns:
        Index of the closing quote, or -1 if not found.
    """
    i = start + 1
    while i < len(s):
        char = s[i]
        if char == "\\":
            # Skip escape sequence
            i += 2
            continue
        if char == '"':
            return i
        i += 1
    return -1


def find_unquoted_colon(line: str) -> int:
    """
    Find the position of the first unquoted colon in a line.

    Args:
        line: The line to search.

    Returns:
        Index of the colon, or -1 if not found.
    """
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == "\\" and in_quotes and i + 1 < len(line):
            i += 2
            continue
        if char == '"':
            in_quotes = not in_quotes
        elif char == ":" and not in_quotes:
            return i
        i += 1
    return -1


def split_by_delimiter(value: str, delimiter: "Delimiter" = ",") -> list[str]:
    """
    Split a string by delimiter, respecting quoted sections.

    Leading, trailing and consecutive delimiters produce empty fields.
    Whitespace around each field is trimmed; whitespace inside quotes is kept.
    With the tab delimiter only spaces are trimmed, so tabs always separate fields.

    Args:
        value: The string to split.
        delimiter: The delimiter character.

    Returns:
        List of raw tokens (still containing quotes if originally quoted).
        Empty or space-only input yields an empty list.

    Raises:
        ToonSyntaxError: If a quoted section is never closed.
    """
    # Tabs are field separators, not padding, when they are the delimiter
    trim = " " if delimiter == "\t" else None
    if not value.strip(trim):
        return []

    result = []
    current: list[str] = []
    in_quotes = False
    i = 0

    while i < len(value):
        char = value[i]
        if char == "\\" and in_quotes and i + 1 < len(value):
            # Keep escape sequence intact
            current.append(char)
            current.append(value[i + 1])
            i += 2
            continue
        if char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif char == delimiter and not in_quotes:
            result.append("".join(current).strip(trim))
            current = []
        else:
            current.append(char)
        i += 1

    if in_quotes:
        raise ToonSyntaxError("Unterminated quoted string")

    result.append("".join(current).strip(trim))
    return result
