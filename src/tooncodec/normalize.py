"""Conversion of arbitrary Python objects into the TOON value model."""

import dataclasses
import datetime
import enum
import math
from collections.abc import Mapping
from typing import Any

from .types import JsonValue


def normalize_value(value: Any) -> JsonValue:
    """
    Normalize a value for JSON compatibility.

    Converts:
    - NaN and infinities to None, -0.0 to 0
    - Mappings to dicts with string keys
    - Tuples, sets and other iterables to lists (sets sorted by str)
    - Date/time objects to ISO strings
    - Enums to their value
    - Dataclass instances, objects with to_dict() or public attributes to dicts
    - Anything else to None

    Args:
        value: The value to normalize.

    Returns:
        A JSON-compatible value.
    """
    if isinstance(value, enum.Enum):
        return normalize_value(value.value)

    if value is None or isinstance(value, (bool, str)):
        return value

    if isinstance(value, int):
        return int(value)

    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        if value == 0.0:
            return 0
        return value

    if isinstance(value, Mapping):
        return {str(k): normalize_value(v) for k, v in value.items()}

    if isinstance(value, (list, tuple)):
        return [normalize_value(v) for v in value]

    if isinstance(value, (set, frozenset)):
        return [normalize_value(v) for v in sorted(value, key=str)]

    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: normalize_value(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }

    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return normalize_value(to_dict())

    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")

    if hasattr(value, "__iter__"):
        return [normalize_value(v) for v in value]

    if hasattr(value, "__dict__") and not isinstance(value, type):
        return {
            k: normalize_value(v)
            for k, v in vars(value).items()
            if not k.startswith("_")
        }

    # Unsupported types
    return None
