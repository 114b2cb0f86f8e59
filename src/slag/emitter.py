"""Position-preserving output writer."""

from __future__ import annotations

from typing import TextIO

from slag.source import Region


class Emitter:
    """Append-only sink that re-places tokens at their source columns.

    ``cursor`` is the ``(line, col)`` just past the last token written,
    or ``None`` before the first write.
    """

    def __init__(self, out: TextIO, *, preserve_blank_lines: bool = False) -> None:
        self.out = out
        self.preserve_blank_lines = preserve_blank_lines
        self.cursor: tuple[int, int] | None = None
        self._dirty = False

    def write(self, text: str, region: Region) -> None:
        """Write a source token at its original position."""
        if self.cursor is None:
            self.out.write(" " * region.start_col)
        elif region.start_line > self.cursor[0]:
            newlines = region.start_line - self.cursor[0] if self.preserve_blank_lines else 1
            self.out.write("\n" * newlines)
            self.out.write(" " * region.start_col)
        else:
            self.out.write(" " * max(0, region.start_col - self.cursor[1]))
        self.out.write(text)
        self.cursor = region.end
        self._dirty = True

    def punct(self, text: str) -> None:
        """Write synthetic punctuation right after the preceding output."""
        self.out.write(text)
        self._dirty = True

    def finish(self) -> None:
        if self._dirty:
            self.out.write("\n")
