"""Array header grammar: `key[N<delim>]{f1,f2}: rest`."""

import re
from typing import TYPE_CHECKING

from .errors import ToonSyntaxError
from .primitives import encode_key, parse_string_literal
from .string_utils import is_valid_key_identifier, split_by_delimiter
from .types import ArrayHeaderInfo

if TYPE_CHECKING:
    from .types import ArrayFormat, Delimiter

# Pattern for array header: key[N<delim?>]{fields}:rest
ARRAY_HEADER_PATTERN = re.compile(
    r'^(?P<key>"(?:[^"\\]|\\.)*"|[^:\[\]{}"]*?)'  # Optional key (possibly quoted)
    r"(?:\[(?P<bracket>[^\[\]]*)\])?"  # [N<delim?>]
    r'(?:\{(?P<fields>(?:[^}"]|"(?:[^"\\]|\\.)*")*)\})?'  # Optional {fields}
    r":(?P<rest>.*)$"  # Colon and rest
)

DELIMITER_TAGS = {",": "", "\t": "\t", "|": "|"}


def parse_array_header(
    content: str, default_delimiter: "Delimiter" = ",", strict: bool = False
) -> ArrayHeaderInfo | None:
    """
    Parse a line as an array header.

    Args:
        content: The line content, without indentation.
        default_delimiter: Delimiter to use when the brackets carry no tag.
        strict: Require unquoted tabular field names to be identifiers.

    Returns:
        The parsed header, or None if the line is not an array header.

    Raises:
        ToonSyntaxError: If the line has header shape but is malformed.
    """
    match = ARRAY_HEADER_PATTERN.match(content.strip())
    if not match:
        return None

    bracket = match.group("bracket")
    fields_str = match.group("fields")
    if bracket is None and fields_str is None:
        return None

    delimiter: Delimiter = default_delimiter
    tag = None
    length = None
    if bracket is not None:
        body = bracket.strip(" ")
        if body and body[-1] in DELIMITER_TAGS:
            tag = body[-1]
            delimiter = tag  # type: ignore[assignment]
            body = body[:-1]
        length = _parse_length(body, allow_zero=True)

    rest = match.group("rest").strip()

    fields = None
    if fields_str is not None:
        fields = extract_fields("{" + fields_str + "}", delimiter, strict)
        # Tabular rows always sit on the following lines
        if rest:
            raise ToonSyntaxError(f"Unexpected content after tabular header: {rest}")

    return ArrayHeaderInfo(
        length=length,
        delimiter=delimiter,
        delimiter_tag=tag,
        fields=fields,
        key=parse_key(match.group("key")) if match.group("key").strip() else None,
        rest=rest,
    )


def is_array_header(line: str) -> bool:
    """Check if a line (indentation allowed) is an array header."""
    try:
        return parse_array_header(line) is not None
    except ToonSyntaxError:
        # Header-shaped but malformed still counts as a header
        return True


def detect_array_format(line: str) -> "ArrayFormat | None":
    """
    Detect which array body follows a header line.

    Args:
        line: The header line.

    Returns:
        "inline", "list" or "tabular", or None if the line is not a header.
    """
    header = parse_array_header(line)
    if header is None:
        return None
    return header.format


def extract_length(fragment: str) -> int:
    """
    Parse the length out of a `[N]` fragment.

    Args:
        fragment: The bracketed fragment, e.g. "[5]" or "[3|]".

    Returns:
        The declared length (always positive).

    Raises:
        ToonSyntaxError: For missing brackets or an invalid length.
    """
    fragment = fragment.strip()
    if not fragment.startswith("[") or not fragment.endswith("]"):
        raise ToonSyntaxError(f"Invalid array header: {fragment}")

    body = fragment[1:-1].strip(" ")
    if body and body[-1] in ("\t", "|"):
        body = body[:-1]
    return _parse_length(body, allow_zero=False)


def _parse_length(body: str, allow_zero: bool) -> int:
    body = body.strip()
    if not body:
        raise ToonSyntaxError("Empty array header")
    if "#" in body:
        raise ToonSyntaxError("[#N] syntax is not supported, use [N]")
    if not body.isdigit():
        raise ToonSyntaxError(f"Invalid array length: {body}")
    length = int(body)
    if length == 0 and not allow_zero:
        raise ToonSyntaxError("Invalid array length: 0")
    return length


def extract_fields(
    fragment: str, delimiter: "Delimiter" = ",", strict: bool = False
) -> list[str]:
    """
    Parse the field names out of a `{f1,f2}` fragment.

    Args:
        fragment: The braced fragment.
        delimiter: Delimiter separating the field names.
        strict: Require unquoted names to be valid key identifiers.

    Returns:
        The decoded field names, in header order.

    Raises:
        ToonSyntaxError: For missing braces, an empty header or empty names.
    """
    fragment = fragment.strip()
    if not fragment.startswith("{") or not fragment.endswith("}"):
        raise ToonSyntaxError(f"Invalid tabular array header: {fragment}")

    body = fragment[1:-1]
    if not body.strip():
        raise ToonSyntaxError("Empty tabular array header")

    fields = []
    for token in split_by_delimiter(body, delimiter):
        if not token:
            raise ToonSyntaxError(f"Empty field name in tabular header: {fragment}")
        if strict and not token.startswith('"') and not is_valid_key_identifier(token):
            raise ToonSyntaxError(f"Invalid field name: {token} (quote it)")
        fields.append(parse_key(token))
    return fields


def parse_key(key: str) -> str:
    """Parse a key, handling quoted keys."""
    key = key.strip()
    if key.startswith('"'):
        return parse_string_literal(key)
    return key


def format_bracket(length: int, delimiter: "Delimiter" = ",") -> str:
    """Format the bracket portion of an array header."""
    return f"[{length}{DELIMITER_TAGS[delimiter]}]"


def format_array_header(
    length: int,
    key: str | None = None,
    fields: list[str] | None = None,
    delimiter: "Delimiter" = ",",
) -> str:
    """
    Format an array header.

    Args:
        length: The array length.
        key: Optional key name (None for root arrays or list items).
        fields: Optional field names for tabular format.
        delimiter: The delimiter (included in bracket if not comma).

    Returns:
        The formatted header string, ending with a colon.
    """
    fields_part = ""
    if fields:
        fields_part = "{" + delimiter.join(encode_key(f) for f in fields) + "}"

    prefix = encode_key(key) if key is not None else ""
    return f"{prefix}{format_bracket(length, delimiter)}{fields_part}:"
