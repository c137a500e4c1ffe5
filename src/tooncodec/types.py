"""Type definitions for TOON encoder/decoder."""

from dataclasses import dataclass, replace
from typing import Literal

# JSON type aliases
JsonPrimitive = str | int | float | bool | None
JsonArray = list["JsonValue"]
JsonObject = dict[str, "JsonValue"]
JsonValue = JsonPrimitive | JsonArray | JsonObject

# Delimiter options
Delimiter = Literal[",", "\t", "|"]
DELIMITERS: tuple[str, ...] = (",", "\t", "|")

ArrayFormat = Literal["inline", "list", "tabular"]


def _validate(indent: int, delimiter: str) -> None:
    if isinstance(indent, bool) or not isinstance(indent, int):
        raise ValueError(f"Indent must be an integer, got {type(indent).__name__}")
    if indent < 0:
        raise ValueError("Indent must be non-negative")
    if delimiter not in DELIMITERS:
        raise ValueError(f"Invalid delimiter: {delimiter!r} (expected ',', '\\t' or '|')")


@dataclass(frozen=True)
class EncodeOptions:
    """Options for TOON encoding."""

    indent: int = 2
    """Number of spaces per indentation level."""

    delimiter: Delimiter = ","
    """Delimiter for inline arrays and tabular rows."""

    def __post_init__(self) -> None:
        _validate(self.indent, self.delimiter)

    @classmethod
    def default(cls) -> "EncodeOptions":
        return cls()

    def with_indent(self, indent: int) -> "EncodeOptions":
        return replace(self, indent=indent)

    def with_delimiter(self, delimiter: Delimiter) -> "EncodeOptions":
        return replace(self, delimiter=delimiter)


@dataclass(frozen=True)
class DecodeOptions:
    """Options for TOON decoding."""

    indent: int = 2
    """Expected indentation size."""

    delimiter: Delimiter = ","
    """Field separator assumed for array headers without a delimiter tag."""

    strict: bool = True
    """Enforce counts, indentation multiples, and no blank lines inside arrays."""

    def __post_init__(self) -> None:
        _validate(self.indent, self.delimiter)

    @classmethod
    def default(cls) -> "DecodeOptions":
        return cls()

    @classmethod
    def lenient(cls) -> "DecodeOptions":
        return cls(strict=False)

    def with_indent(self, indent: int) -> "DecodeOptions":
        return replace(self, indent=indent)

    def with_strict(self, strict: bool) -> "DecodeOptions":
        return replace(self, strict=strict)


@dataclass(frozen=True)
class ParsedLine:
    """A parsed line with indentation info."""

    raw: str
    """Original line content."""

    content: str
    """Content after stripping indentation and trailing whitespace."""

    indent: int
    """Number of leading spaces."""

    depth: int
    """Indentation level (indent / indent_size)."""

    line_number: int
    """1-based line number."""

    @property
    def is_blank(self) -> bool:
        return not self.content


@dataclass
class ArrayHeaderInfo:
    """Parsed array header information."""

    length: int | None
    """Declared array length (None for a field-only `{f1,f2}:` header)."""

    delimiter: Delimiter = ","
    """Delimiter for this array's values."""

    delimiter_tag: str | None = None
    """Delimiter marker found inside the brackets, if any."""

    fields: list[str] | None = None
    """Field names for tabular format (None for non-tabular)."""

    key: str | None = None
    """Decoded key preceding the header (None for keyless headers)."""

    rest: str = ""
    """Text after the header colon, stripped."""

    @property
    def format(self) -> ArrayFormat:
        if self.fields is not None:
            return "tabular"
        if self.rest:
            return "inline"
        return "list"
