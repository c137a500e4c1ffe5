"""Convenience wrappers around encode/decode for common presets."""

import json
import math
from typing import Any

from .decode import decode
from .encode import encode
from .normalize import normalize_value
from .types import DecodeOptions, EncodeOptions, JsonValue

# Rough characters-per-token ratio for English-heavy payloads
CHARS_PER_TOKEN = 4


def encode_compact(value: Any) -> str:
    """Encode with no indentation (flat structures only decode back cleanly)."""
    return encode(value, EncodeOptions(indent=0))


def encode_readable(value: Any) -> str:
    """Encode with 4-space indentation."""
    return encode(value, EncodeOptions(indent=4))


def encode_tabular(value: Any) -> str:
    """Encode with the tab delimiter."""
    return encode(value, EncodeOptions(delimiter="\t"))


def decode_lenient(text: str, indent: int = 2) -> JsonValue:
    """Decode without count, blank-line or indentation checks."""
    return decode(text, DecodeOptions(indent=indent, strict=False))


def toon_size(value: Any, options: EncodeOptions | None = None) -> int:
    """Return the length of the TOON encoding in characters."""
    return len(encode(value, options))


def estimate_tokens(value: Any, options: EncodeOptions | None = None) -> int:
    """
    Estimate the token count of the TOON encoding.

    This is a character-based estimate, not actual tokenization.

    Args:
        value: The value to encode.
        options: Encoding options.

    Returns:
        ceil(characters / 4).
    """
    return math.ceil(toon_size(value, options) / CHARS_PER_TOKEN)


def compare_with_json(value: Any, options: EncodeOptions | None = None) -> dict[str, Any]:
    """
    Compare the TOON encoding size against compact JSON.

    Args:
        value: The value to encode.
        options: Encoding options for the TOON side.

    Returns:
        Dict with "toon" and "json" character counts, "savings" (json - toon)
        and "savings_percent" formatted like "42.5%".

    Example:
        >>> stats = compare_with_json({"users": [{"id": 1}, {"id": 2}]})
        >>> stats["toon"] < stats["json"]
        True
    """
    normalized = normalize_value(value)
    toon_len = len(encode(normalized, options))
    json_len = len(json.dumps(normalized, ensure_ascii=False, separators=(",", ":")))

    savings = json_len - toon_len
    percent = (savings / json_len) * 100 if json_len > 0 else 0.0
    return {
        "toon": toon_len,
        "json": json_len,
        "savings": savings,
        "savings_percent": f"{percent:.1f}%",
    }
