"""TOON decoder implementation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import (
    CountMismatchError,
    StrictModeError,
    ToonDecodeError,
    ToonIndentationError,
    ToonSyntaxError,
)
from .headers import parse_array_header, parse_key
from .primitives import parse_primitive
from .string_utils import LIST_ITEM_MARKER, find_unquoted_colon, split_by_delimiter
from .types import ArrayHeaderInfo, DecodeOptions, JsonValue, ParsedLine

if TYPE_CHECKING:
    from collections.abc import Generator

logger = logging.getLogger(__name__)

LIST_ITEM_PREFIX = "- "

# Frame kinds whose bodies may not contain blank lines in strict mode
ARRAY_BODY_KINDS = frozenset({"list", "tabular"})


def decode(text: str, options: DecodeOptions | None = None) -> JsonValue:
    """
    Decode TOON text to a Python value.

    Args:
        text: The TOON-formatted string.
        options: Decoding options (strict by default).

    Returns:
        The decoded Python value.

    Raises:
        ToonSyntaxError: For malformed input.
        ToonIndentationError: For bad indentation in strict mode.
        CountMismatchError: When declared and actual counts differ.
        StrictModeError: For empty input or blank lines inside arrays in strict mode.
    """
    opts = options or DecodeOptions()
    return decode_lines(text.split("\n"), opts)


def decode_lines(lines: Iterable[str], options: DecodeOptions | None = None) -> JsonValue:
    """
    Decode TOON from pre-split lines.

    Args:
        lines: Iterable of line strings (trailing newlines are ignored).
        options: Decoding options.

    Returns:
        The decoded Python value.
    """
    opts = options or DecodeOptions()
    parsed_lines = list(_parse_lines(lines, opts))
    cursor = _Cursor(parsed_lines, opts)

    if cursor.peek() is None:
        if opts.strict:
            raise StrictModeError("Empty input", line_number=1, snippet="")
        return None

    result = _decode_root(cursor)

    leftover = cursor.peek()
    if leftover is not None:
        message = "Unexpected indentation" if leftover.depth > 0 else "Unexpected content after root value"
        raise ToonSyntaxError(message, leftover.line_number, leftover.raw)

    logger.debug(
        "Decoded %d lines into %s (strict=%s)",
        len(parsed_lines),
        type(result).__name__,
        opts.strict,
    )
    return result


@dataclass
class _Frame:
    """A container under construction and the depth of the line that opened it."""

    depth: int
    container: list | dict
    kind: str


class _Cursor:
    """Cursor for iterating through parsed lines."""

    def __init__(self, lines: list[ParsedLine], options: DecodeOptions):
        self.lines = lines
        self.options = options
        self.pos = 0
        self.frames: list[_Frame] = []
        self._last_consumed = -1

    def peek(self) -> ParsedLine | None:
        """Look at the next non-blank line without advancing."""
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            if not line.is_blank:
                return line
            self.pos += 1
        return None

    def advance(self) -> ParsedLine | None:
        """Get the next non-blank line and advance past it."""
        line = self.peek()
        if line is not None:
            self._check_blank_lines(line)
            self._last_consumed = self.pos
            self.pos += 1
        return line

    def peek_at_depth(self, depth: int) -> ParsedLine | None:
        """Peek at next line if it sits at exactly this depth."""
        line = self.peek()
        if line is not None and line.depth == depth:
            return line
        return None

    @contextmanager
    def frame(self, depth: int, container: list | dict, kind: str) -> Iterator[None]:
        """Track a container being built from lines below `depth`."""
        self.frames.append(_Frame(depth, container, kind))
        try:
            yield
        finally:
            self.frames.pop()

    @contextmanager
    def located(self, line: ParsedLine) -> Iterator[None]:
        """Attach `line` to errors raised without a location."""
        try:
            yield
        except ToonDecodeError as exc:
            if exc.line_number is None:
                exc.locate(line.line_number, line.raw)
            raise

    def _check_blank_lines(self, line: ParsedLine) -> None:
        if not self.options.strict or self.pos - self._last_consumed <= 1:
            return
        inside_array = any(
            frame.kind in ARRAY_BODY_KINDS and line.depth > frame.depth for frame in self.frames
        )
        if inside_array:
            blank = self.lines[self._last_consumed + 1]
            raise StrictModeError(
                "Blank lines not allowed inside arrays", blank.line_number, blank.raw
            )


def _parse_lines(
    lines: Iterable[str], options: DecodeOptions
) -> Generator[ParsedLine, None, None]:
    """Parse raw lines into ParsedLine objects."""
    indent_size = options.indent

    for i, raw in enumerate(lines, start=1):
        line = raw.rstrip()
        content = line.lstrip(" \t")
        leading = line[: len(line) - len(content)]

        if not content:
            yield ParsedLine(raw=raw, content="", indent=0, depth=0, line_number=i)
            continue

        # Lenient mode ignores tabs when measuring depth
        if "\t" in leading and options.strict:
            raise ToonIndentationError("Tabs not allowed in indentation", i, raw)

        indent = leading.count(" ")
        if indent_size == 0:
            depth = 0
        else:
            if options.strict and indent % indent_size != 0:
                raise ToonIndentationError(
                    f"Indentation must be multiple of {indent_size} spaces (found {indent})",
                    i,
                    raw,
                )
            depth = indent // indent_size

        yield ParsedLine(raw=raw, content=content, indent=indent, depth=depth, line_number=i)


def _decode_root(cursor: _Cursor) -> JsonValue:
    """Decode the root value."""
    line = cursor.peek()
    if line.depth != 0:
        raise ToonSyntaxError("Unexpected indentation", line.line_number, line.raw)

    with cursor.located(line):
        header = _parse_header(cursor, line.content)
        if header is not None and header.key is None:
            cursor.advance()
            return _decode_keyless_array(cursor, header, line, 1)

        if header is None and line.content.startswith("["):
            raise ToonSyntaxError(f"Invalid array header: {line.content}")

        if header is None and find_unquoted_colon(line.content) == -1:
            cursor.advance()
            if cursor.peek() is None:
                # Single primitive
                return parse_primitive(line.content)
            raise ToonSyntaxError("Missing colon after key")

    return _decode_object(cursor, 0)


def _decode_object(cursor: _Cursor, depth: int, result: dict | None = None) -> dict:
    """Decode key-value lines at the given depth into `result`."""
    if result is None:
        result = {}

    with cursor.frame(depth, result, "object"):
        while True:
            line = cursor.peek_at_depth(depth)
            if line is None:
                break

            cursor.advance()
            with cursor.located(line):
                key, value = _decode_key_value(line.content, line, cursor, depth)
            result[key] = value

    return result


def _decode_key_value(
    content: str,
    line: ParsedLine,
    cursor: _Cursor,
    depth: int,
    child_depth: int | None = None,
) -> tuple[str, JsonValue]:
    """
    Decode a key-value pair from `content`.

    `child_depth` is where nested content of the value starts; it differs
    from `depth + 1` only for the first field of a list item.
    """
    if child_depth is None:
        child_depth = depth + 1

    header = _parse_header(cursor, content)
    if header is not None:
        if header.key is None:
            raise ToonSyntaxError("Array header without a key inside an object")
        return header.key, _decode_array(cursor, header, line, child_depth)

    colon_pos = find_unquoted_colon(content)
    if colon_pos == -1:
        raise ToonSyntaxError("Missing colon after key")

    key_part = content[:colon_pos].strip()
    value_part = content[colon_pos + 1 :].strip()
    if not key_part:
        raise ToonSyntaxError("Missing key before colon")
    key = parse_key(key_part)

    if value_part:
        if value_part.startswith("["):
            inline = _parse_header(cursor, value_part)
            if inline is not None and inline.key is None:
                return key, _decode_keyless_array(cursor, inline, line, child_depth)
        return key, parse_primitive(value_part)

    return key, _decode_nested_block(cursor, child_depth)


def _decode_nested_block(cursor: _Cursor, depth: int) -> JsonValue:
    """Decode the block opened by `key:`; an empty block is an empty object."""
    next_line = cursor.peek()
    if next_line is None or next_line.depth < depth:
        return {}

    if next_line.depth == depth:
        with cursor.located(next_line):
            header = _parse_header(cursor, next_line.content)
            if header is not None and header.key is None:
                cursor.advance()
                return _decode_array(cursor, header, next_line, depth + 1)

    return _decode_object(cursor, depth)


def _decode_list_items(
    cursor: _Cursor, header: ArrayHeaderInfo, header_line: ParsedLine, depth: int
) -> list:
    """Decode list items (lines starting with -)."""
    result: list = []

    with cursor.frame(header_line.depth, result, "list"):
        while True:
            line = cursor.peek()
            if line is None or line.depth < depth:
                break
            if line.depth > depth:
                raise ToonSyntaxError("Unexpected indentation", line.line_number, line.raw)
            if line.content != LIST_ITEM_MARKER and not line.content.startswith(LIST_ITEM_PREFIX):
                raise ToonSyntaxError(
                    f"Expected list item starting with '{LIST_ITEM_PREFIX}'",
                    line.line_number,
                    line.raw,
                )

            cursor.advance()
            with cursor.located(line):
                result.append(_decode_list_item(line, cursor, depth))

    _check_count(cursor, "Array length mismatch", header.length, len(result), header_line)
    return result


def _decode_list_item(line: ParsedLine, cursor: _Cursor, depth: int) -> JsonValue:
    """Decode a single list item."""
    item_content = line.content[len(LIST_ITEM_MARKER) :].strip()

    if not item_content:
        # Bare hyphen - check for nested content
        next_line = cursor.peek()
        if next_line is not None and next_line.depth > depth:
            return _decode_object(cursor, depth + 1)
        return {}

    header = _parse_header(cursor, item_content)
    if header is not None and header.key is None:
        # Bare array as list item
        return _decode_keyless_array(cursor, header, line, depth + 1)

    if header is None and find_unquoted_colon(item_content) == -1:
        return parse_primitive(item_content)

    # Object with first field on hyphen line; its nested content sits at depth + 2
    key, value = _decode_key_value(item_content, line, cursor, depth, child_depth=depth + 2)
    return _decode_object(cursor, depth + 1, {key: value})


def _decode_tabular_rows(
    cursor: _Cursor, header: ArrayHeaderInfo, header_line: ParsedLine, depth: int
) -> list[dict]:
    """Decode tabular array rows."""
    result: list[dict] = []
    fields = header.fields

    with cursor.frame(header_line.depth, result, "tabular"):
        while True:
            line = cursor.peek()
            if line is None or line.depth < depth:
                break
            if line.depth > depth:
                raise ToonSyntaxError("Unexpected indentation", line.line_number, line.raw)

            cursor.advance()
            with cursor.located(line):
                values = split_by_delimiter(line.content, header.delimiter)
                # Width mismatches are fatal in both modes
                if len(values) != len(fields):
                    raise CountMismatchError(
                        f"Tabular row width mismatch: expected {len(fields)} values, got {len(values)}",
                        expected=len(fields),
                        actual=len(values),
                        line_number=line.line_number,
                        snippet=line.raw,
                    )
                result.append({field: parse_primitive(v) for field, v in zip(fields, values)})

    _check_count(
        cursor, "Tabular array length mismatch", header.length, len(result), header_line, " rows"
    )
    return result


def _decode_inline_values(
    cursor: _Cursor, header: ArrayHeaderInfo, header_line: ParsedLine
) -> list:
    """Decode inline primitive array values."""
    values = split_by_delimiter(header.rest, header.delimiter)
    result = [parse_primitive(v) for v in values]
    _check_count(cursor, "Array length mismatch", header.length, len(result), header_line)
    return result


def _decode_array(
    cursor: _Cursor, header: ArrayHeaderInfo, header_line: ParsedLine, child_depth: int
) -> list:
    """Dispatch on the array format announced by the header."""
    array_format = header.format
    if array_format == "inline":
        return _decode_inline_values(cursor, header, header_line)
    if array_format == "tabular":
        return _decode_tabular_rows(cursor, header, header_line, child_depth)
    return _decode_list_items(cursor, header, header_line, child_depth)


def _decode_keyless_array(
    cursor: _Cursor, header: ArrayHeaderInfo, header_line: ParsedLine, child_depth: int
) -> list:
    """Decode an array whose header has no key (root, list item, or `key: [N]: ...`)."""
    if header.length is None:
        raise ToonSyntaxError("Field-only tabular header must directly follow a key")
    return _decode_array(cursor, header, header_line, child_depth)


def _parse_header(cursor: _Cursor, content: str) -> ArrayHeaderInfo | None:
    options = cursor.options
    return parse_array_header(content, options.delimiter, options.strict)


def _check_count(
    cursor: _Cursor,
    label: str,
    expected: int | None,
    actual: int,
    header_line: ParsedLine,
    unit: str = "",
) -> None:
    """Validate a declared count (strict only; field-only headers declare none)."""
    if expected is None or expected == actual:
        return
    if cursor.options.strict:
        raise CountMismatchError(
            f"{label}: expected {expected}{unit}, got {actual}",
            expected=expected,
            actual=actual,
            line_number=header_line.line_number,
            snippet=header_line.raw,
        )
    logger.debug(
        "Line %d: %s ignored in lenient mode (expected %d, got %d)",
        header_line.line_number,
        label.lower(),
        expected,
        actual,
    )
