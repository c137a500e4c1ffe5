"""TOON encoder implementation."""

import logging
from collections.abc import Iterator
from typing import Any

from .headers import format_array_header
from .normalize import normalize_value
from .primitives import encode_key, encode_primitive
from .types import EncodeOptions, JsonValue
from .writer import LineWriter

logger = logging.getLogger(__name__)

LIST_ITEM_PREFIX = "- "


def encode(value: Any, options: EncodeOptions | None = None) -> str:
    """
    Encode a Python value to TOON format.

    Args:
        value: The value to encode (dict, list, or primitive).
        options: Encoding options.

    Returns:
        The TOON-formatted string, without a trailing newline.
    """
    opts = options or EncodeOptions()
    writer = _encode_to_writer(value, opts)
    logger.debug("Encoded %s into %d lines", type(value).__name__, len(writer))
    return writer.to_string()


def encode_lines(value: Any, options: EncodeOptions | None = None) -> Iterator[str]:
    """
    Encode a Python value to TOON format, yielding lines.

    Args:
        value: The value to encode.
        options: Encoding options.

    Yields:
        Lines of TOON output, already indented.
    """
    opts = options or EncodeOptions()
    yield from _encode_to_writer(value, opts).lines()


def _encode_to_writer(value: Any, opts: EncodeOptions) -> LineWriter:
    writer = LineWriter(opts.indent)
    normalized = normalize_value(value)

    if isinstance(normalized, dict):
        # An empty root object produces no lines at all
        _encode_object(normalized, writer, opts, 0)
    elif isinstance(normalized, list):
        _encode_array(None, normalized, writer, opts, 0)
    else:
        writer.push(0, encode_primitive(normalized, opts.delimiter))

    return writer


def _encode_object(obj: dict, writer: LineWriter, opts: EncodeOptions, depth: int) -> None:
    """Encode an object's key-value pairs."""
    for key, value in obj.items():
        _encode_field(key, value, writer, opts, depth)


def _encode_field(
    key: str,
    value: JsonValue,
    writer: LineWriter,
    opts: EncodeOptions,
    depth: int,
    prefix: str = "",
    child_depth: int | None = None,
) -> None:
    """
    Encode one key-value pair.

    `prefix` is the list marker when the pair opens a list item; nested
    content then goes to `child_depth` instead of the next level.
    """
    if child_depth is None:
        child_depth = depth + 1
    encoded_key = encode_key(key)

    if isinstance(value, dict):
        writer.push(depth, f"{prefix}{encoded_key}:")
        _encode_object(value, writer, opts, child_depth)
    elif isinstance(value, list):
        _encode_array(key, value, writer, opts, depth, prefix, child_depth)
    else:
        encoded_value = encode_primitive(value, opts.delimiter)
        writer.push(depth, f"{prefix}{encoded_key}: {encoded_value}")


def _encode_array(
    key: str | None,
    arr: list,
    writer: LineWriter,
    opts: EncodeOptions,
    depth: int,
    prefix: str = "",
    child_depth: int | None = None,
) -> None:
    """Encode an array with the best format."""
    if child_depth is None:
        child_depth = depth + 1

    if not arr or _is_primitive_array(arr):
        writer.push(depth, prefix + _format_inline_array(key, arr, opts))
        return

    if _is_array_of_primitive_arrays(arr):
        writer.push(depth, prefix + format_array_header(len(arr), key))
        for inner in arr:
            writer.push(child_depth, LIST_ITEM_PREFIX + _format_inline_array(None, inner, opts))
        return

    fields = _tabular_fields(arr)
    if fields is not None:
        header = format_array_header(len(arr), key, fields, opts.delimiter)
        writer.push(depth, prefix + header)
        for row in arr:
            values = [encode_primitive(row[f], opts.delimiter) for f in fields]
            writer.push(child_depth, opts.delimiter.join(values))
        return

    # List format
    writer.push(depth, prefix + format_array_header(len(arr), key))
    for item in arr:
        _encode_list_item(item, writer, opts, child_depth)


def _format_inline_array(key: str | None, arr: list, opts: EncodeOptions) -> str:
    """Format a primitive array on a single line."""
    header = format_array_header(len(arr), key, delimiter=opts.delimiter)
    if not arr:
        return header
    values = [encode_primitive(v, opts.delimiter) for v in arr]
    return f"{header} " + opts.delimiter.join(values)


def _encode_list_item(
    item: JsonValue, writer: LineWriter, opts: EncodeOptions, depth: int
) -> None:
    """Encode a list item (after the - marker)."""
    if isinstance(item, dict):
        if not item:
            writer.push(depth, LIST_ITEM_PREFIX.rstrip())
        else:
            _encode_object_list_item(item, writer, opts, depth)
    elif isinstance(item, list):
        # Header on the hyphen line, body one level below the item
        _encode_array(None, item, writer, opts, depth, LIST_ITEM_PREFIX)
    else:
        writer.push(depth, LIST_ITEM_PREFIX + encode_primitive(item, opts.delimiter))


def _encode_object_list_item(
    obj: dict, writer: LineWriter, opts: EncodeOptions, depth: int
) -> None:
    """Encode an object as a list item with first field on hyphen line."""
    items = iter(obj.items())
    first_key, first_value = next(items)

    # Nested content of the first field sits two levels below the hyphen
    _encode_field(
        first_key, first_value, writer, opts, depth, LIST_ITEM_PREFIX, child_depth=depth + 2
    )

    for key, value in items:
        _encode_field(key, value, writer, opts, depth + 1)


def _is_primitive_array(arr: list) -> bool:
    """Check if array can use inline primitive format."""
    return all(_is_primitive(v) for v in arr)


def _is_array_of_primitive_arrays(arr: list) -> bool:
    """Check if every element is a list holding only primitives."""
    return all(isinstance(v, list) and _is_primitive_array(v) for v in arr)


def _tabular_fields(arr: list) -> list[str] | None:
    """
    Return the tabular header fields, or None if the array isn't tabular.

    Every element must be an object with the same (non-empty) key set as the
    first one, in any order, and every value must be a primitive.
    """
    if not all(isinstance(v, dict) for v in arr):
        return None

    fields = list(arr[0].keys())
    if not fields:
        return None

    expected = set(fields)
    for item in arr:
        if set(item.keys()) != expected:
            return None
        if not all(_is_primitive(v) for v in item.values()):
            return None

    return fields


def _is_primitive(value: JsonValue) -> bool:
    """Check if value is a primitive (not dict or list)."""
    return not isinstance(value, (dict, list))
