"""Exceptions raised while decoding TOON text."""


class ToonDecodeError(ValueError):
    """
    Base class for TOON decoding failures.

    Attributes:
        message: Description of the problem, without location.
        line_number: 1-based line where the problem was detected, if known.
        snippet: The offending line as it appeared in the input, if known.
    """

    def __init__(
        self,
        message: str,
        line_number: int | None = None,
        snippet: str | None = None,
    ):
        self.message = message
        self.line_number = line_number
        self.snippet = snippet
        super().__init__(self._format())

    def _format(self) -> str:
        if self.line_number is None:
            return self.message
        return f"Line {self.line_number}: {self.message}"

    def locate(self, line_number: int, snippet: str) -> "ToonDecodeError":
        """Attach a location to an error raised by a line-agnostic helper."""
        self.line_number = line_number
        self.snippet = snippet
        self.args = (self._format(),)
        return self


class ToonSyntaxError(ToonDecodeError):
    """Malformed header, missing colon, bad quoting or escapes."""


class ToonIndentationError(ToonDecodeError):
    """Indentation that is not a multiple of the indent size, or uses tabs."""


class StrictModeError(ToonDecodeError):
    """Structural violations only rejected in strict mode (empty input, blank lines)."""


class CountMismatchError(ToonDecodeError):
    """Declared and actual element, row or value counts differ."""

    def __init__(
        self,
        message: str,
        expected: int,
        actual: int,
        line_number: int | None = None,
        snippet: str | None = None,
    ):
        self.expected = expected
        self.actual = actual
        super().__init__(message, line_number, snippet)
