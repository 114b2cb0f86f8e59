"""Source text, opaque spans, and the line/column resolver."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Span:
    """A half-open character range ``[lo, hi)`` within a source text."""

    lo: int
    hi: int


@dataclass(frozen=True)
class Region:
    """A resolved span. Lines and columns are 0-based, ``end_col`` exclusive."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    @property
    def start(self) -> tuple[int, int]:
        return (self.start_line, self.start_col)

    @property
    def end(self) -> tuple[int, int]:
        return (self.end_line, self.end_col)


class SourceFile:
    """A loaded source text with a line table for span resolution."""

    def __init__(self, text: str, filename: str = "<stdin>") -> None:
        self.text = text
        self.filename = filename
        self.lines = text.splitlines()
        self._line_starts = [0]
        for i, ch in enumerate(text):
            if ch == '\n':
                self._line_starts.append(i + 1)

    @classmethod
    def from_path(cls, path: Path) -> SourceFile:
        return cls(path.read_text(), str(path))

    def line_at(self, n: int) -> str:
        """Return the 1-indexed line, or empty string if out of range."""
        if 1 <= n <= len(self.lines):
            return self.lines[n - 1]
        return ""

    def position(self, offset: int) -> tuple[int, int]:
        """Map a character offset to a 0-based ``(line, col)``."""
        line = bisect_right(self._line_starts, offset) - 1
        return line, offset - self._line_starts[line]

    def resolve(self, span: Span) -> Region:
        """Resolve *span* to its start and end positions.

        The end position is that of the last character covered, plus one
        column, so a token ending a line never resolves onto the next line.
        """
        start_line, start_col = self.position(span.lo)
        if span.hi <= span.lo:
            return Region(start_line, start_col, start_line, start_col)
        end_line, last_col = self.position(span.hi - 1)
        return Region(start_line, start_col, end_line, last_col + 1)

    def span_text(self, span: Span) -> str:
        """Extract the text covered by a span."""
        return self.text[span.lo:span.hi]
