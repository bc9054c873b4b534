from bisect import bisect_right
from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True, order=True)
class TextSize:
    """Offset into source text, in characters."""

    value: int

    def __post_init__(self):
        if self.value < 0:
            raise ValueError("TextSize cannot be negative")

    @staticmethod
    def from_int(value: int) -> "TextSize":
        return TextSize(value)

    def __repr__(self) -> str:
        return f"TextSize({self.value})"


ZERO: Final[TextSize] = TextSize(0)


@dataclass(frozen=True, slots=True, order=True)
class TextRange:
    """Half-open `[start, end)` span of a source file."""

    _start: int
    _end: int

    def __post_init__(self):
        if self._start < 0 or self._start > self._end:
            raise ValueError(f"Invalid text range {self._start}..{self._end}")

    @staticmethod
    def new(start: TextSize, end: TextSize) -> "TextRange":
        return TextRange(start.value, end.value)

    @staticmethod
    def empty(offset: TextSize = ZERO) -> "TextRange":
        return TextRange(offset.value, offset.value)

    @property
    def start(self) -> TextSize:
        return TextSize(self._start)

    @property
    def end(self) -> TextSize:
        return TextSize(self._end)

    def cover(self, other: "TextRange") -> "TextRange":
        """Smallest range spanning both ranges (used to widen a node over its children)."""
        return TextRange(min(self._start, other._start), max(self._end, other._end))

    def __repr__(self) -> str:
        return f"TextRange({self._start}, {self._end})"


@dataclass(frozen=True, slots=True)
class LineColumn:
    """1-based line/column pair."""

    line: int
    column: int


class LineIndex:
    """Maps offsets to 1-based line/column positions and line text."""

    def __init__(self, text: str) -> None:
        self._text = text
        starts = [0]
        for index, ch in enumerate(text):
            if ch == "\n":
                starts.append(index + 1)
        self._line_starts = starts

    def line_col(self, offset: TextSize | int) -> LineColumn:
        value = offset.value if isinstance(offset, TextSize) else offset
        value = max(0, min(value, len(self._text)))
        line = bisect_right(self._line_starts, value) - 1
        return LineColumn(line=line + 1, column=value - self._line_starts[line] + 1)

    def line_text(self, line: int) -> str:
        """Return the text of a 1-based line without its line terminator."""
        if line < 1 or line > len(self._line_starts):
            return ""
        start = self._line_starts[line - 1]
        end = self._line_starts[line] - 1 if line < len(self._line_starts) else len(self._text)
        return self._text[start:end].rstrip("\r")
