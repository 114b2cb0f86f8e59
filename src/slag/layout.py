"""Off-side rule layout engine.

Walks a token-tree stream once and re-emits it with the punctuation a
brace-and-semicolon grammar needs: statement terminators, list
separators, and block braces. Blocks open at a ``=>`` marker and close
when a later line starts left of the block's column. The engine never
looks at grammar; only columns, lines, the marker token, and a handful
of keywords that turn the next block into a comma-separated list.

Each explicitly delimited group is laid out by an independent pass with
its own indentation stack, so line wrapping inside brackets never
interacts with the enclosing block structure.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto

from slag.config import LayoutConfig, MarkerPolicy
from slag.emitter import Emitter
from slag.errors import LayoutError, error_at
from slag.log import get_logger
from slag.source import Region, SourceFile
from slag.tokens import Group, Token, TokenKind, TokenTree, tree_span

logger = get_logger(__name__)

BLOCK_OPEN = " {"
BLOCK_CLOSE = " }"


class BlockKind(Enum):
    TOP_LEVEL = auto()
    PLAIN = auto()
    LIST_LIKE = auto()

    @property
    def separator(self) -> str:
        """Punctuation between two entries of a block of this kind."""
        if self is BlockKind.PLAIN:
            return ";"
        if self is BlockKind.LIST_LIKE:
            return ","
        return ""


@dataclass(frozen=True)
class IndentLevel:
    column: int
    kind: BlockKind
    keyword: str | None = None  # the keyword that made this a list block


_TOP_LEVEL = IndentLevel(0, BlockKind.TOP_LEVEL)


@dataclass
class _Scope:
    """Mutable state of one layout pass."""

    stack: list[IndentLevel] = field(default_factory=lambda: [_TOP_LEVEL])
    pending: str | None = None
    last_line: int | None = None


class LayoutEngine:
    """Synthesizes block and separator punctuation from indentation."""

    def __init__(
        self, source: SourceFile, emitter: Emitter, config: LayoutConfig | None = None,
    ) -> None:
        self.source = source
        self.emitter = emitter
        self.config = config or LayoutConfig()

    def synthesize(self, trees: Sequence[TokenTree]) -> None:
        """Lay out *trees*, writing everything to the emitter."""
        scope = _Scope()

        for i, tree in enumerate(trees):
            region = self.source.resolve(tree_span(tree))
            if scope.last_line is None:
                scope.last_line = region.end_line
            elif region.end_line > scope.last_line:
                scope.last_line = region.end_line
                self._separate(scope, region)

            if isinstance(tree, Token):
                if tree.kind == TokenKind.FAT_ARROW:
                    following = trees[i + 1] if i + 1 < len(trees) else None
                    self._open_block(scope, tree, region, following)
                    continue
                if tree.kind == TokenKind.IDENTIFIER and self._is_block_keyword(tree.text):
                    scope.pending = tree.text
                self.emitter.write(tree.text, region)
            elif isinstance(tree, Group):
                self.emitter.write(
                    tree.delimiter.open, self.source.resolve(tree.open_span),
                )
                self.synthesize(tree.inner)
                self.emitter.write(
                    tree.delimiter.close, self.source.resolve(tree.close_span),
                )
            else:
                raise LayoutError(error_at(
                    self.source, region, "E201",
                    "unexpected macro repetition",
                    "layout cannot be resolved inside `$( ... )`",
                ))

        for _ in scope.stack[1:]:
            self.emitter.punct(BLOCK_CLOSE)

    # ── Helpers ───────────────────────────────────────────────────

    def _is_block_keyword(self, text: str) -> bool:
        return (
            text in self.config.selector_keywords
            or text in self.config.aggregate_keywords
        )

    def _separate(self, scope: _Scope, region: Region) -> None:
        """Handle a token that starts a new logical line."""
        column = region.start_col
        top = scope.stack[-1]
        if column > top.column:
            return  # continuation line
        # A keyword only affects a marker within its own statement.
        scope.pending = None
        if column < top.column:
            if not any(level.column == column for level in scope.stack):
                raise self._underflow(scope, region)
            while scope.stack[-1].column != column:
                closed = scope.stack.pop()
                logger.debug(
                    "closing block at column %d (line %d)",
                    closed.column, region.start_line + 1,
                )
                self.emitter.punct(BLOCK_CLOSE)
        self.emitter.punct(scope.stack[-1].kind.separator)

    def _open_block(
        self, scope: _Scope, marker: Token, region: Region, following: TokenTree | None,
    ) -> None:
        if self._keeps_marker(scope):
            self.emitter.write(marker.text, region)
        self.emitter.punct(BLOCK_OPEN)
        if following is None:
            self.emitter.punct(BLOCK_CLOSE)
            return

        next_region = self.source.resolve(tree_span(following))
        if scope.pending is None:
            level = IndentLevel(next_region.start_col, BlockKind.PLAIN)
        else:
            level = IndentLevel(next_region.start_col, BlockKind.LIST_LIKE, scope.pending)
        scope.stack.append(level)
        scope.pending = None
        scope.last_line = next_region.end_line
        logger.debug(
            "opening %s block at column %d (line %d)",
            level.kind.name.lower(), level.column, region.start_line + 1,
        )

    def _keeps_marker(self, scope: _Scope) -> bool:
        if self.config.marker is MarkerPolicy.ALWAYS:
            return True
        return scope.stack[-1].keyword in self.config.selector_keywords

    def _underflow(self, scope: _Scope, region: Region) -> LayoutError:
        columns = ", ".join(str(level.column + 1) for level in scope.stack)
        return LayoutError(error_at(
            self.source, region, "E200",
            "unindent does not match any outer indentation level",
            "dedent to an unknown column",
            notes=[f"open blocks start at columns {columns}"],
        ))
