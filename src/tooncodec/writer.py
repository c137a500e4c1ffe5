"""Line buffer used by the encoder."""

from collections.abc import Iterator


class LineWriter:
    """
    Ordered (depth, text) records rendered with a fixed indentation unit.

    Depth is a logical nesting level; it becomes ``depth * indent`` spaces
    only when the buffer is rendered.
    """

    def __init__(self, indent: int = 2):
        self._indent_unit = " " * indent
        self._records: list[tuple[int, str]] = []

    def push(self, depth: int, text: str) -> None:
        if depth < 0:
            raise ValueError(f"Depth must be non-negative, got {depth}")
        self._records.append((depth, text))

    def lines(self) -> Iterator[str]:
        for depth, text in self._records:
            yield self._indent_unit * depth + text

    def to_string(self) -> str:
        return "\n".join(self.lines())

    def __len__(self) -> int:
        return len(self._records)
