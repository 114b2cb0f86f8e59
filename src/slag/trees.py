"""Token-tree builder.

Matches explicit delimiters in a flat token list into nested ``Group``
trees, and folds macro repetitions ``$( ... ) sep? op`` into
``Repetition`` nodes.
"""

from __future__ import annotations

from slag.errors import CompileError, Diagnostic, error_at
from slag.source import SourceFile
from slag.tokens import Delimiter, Group, Repetition, Token, TokenKind, TokenTree

_REPETITION_OPS = frozenset({"*", "+", "?"})


class TreeBuilder:
    """Builds token trees out of a flat token list."""

    def __init__(self, tokens: list[Token], source: SourceFile) -> None:
        self.tokens = tokens
        self.source = source
        self.pos = 0
        self.diagnostics: list[Diagnostic] = []

    def build(self) -> list[TokenTree]:
        trees = self._build_until(None)
        if self.diagnostics:
            raise CompileError(self.diagnostics)
        return trees

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _build_until(self, opener: Token | None) -> list[TokenTree]:
        trees: list[TokenTree] = []
        while True:
            tok = self._current()
            if tok.kind == TokenKind.EOF:
                if opener is not None:
                    self._error(
                        opener, "E110",
                        f"unclosed delimiter `{opener.text}`",
                        "unclosed delimiter",
                    )
                return _fold_repetitions(trees)
            if tok.kind == TokenKind.CLOSE_DELIM:
                if opener is None:
                    self._error(
                        tok, "E111", f"unexpected closing delimiter `{tok.text}`",
                    )
                    self.pos += 1
                    continue
                return _fold_repetitions(trees)
            self.pos += 1
            if tok.kind == TokenKind.OPEN_DELIM:
                trees.append(self._build_group(tok))
            else:
                trees.append(tok)

    def _build_group(self, opener: Token) -> Group:
        delimiter = Delimiter.for_char(opener.text)
        inner = self._build_until(opener)
        closer = self._current()
        if closer.kind == TokenKind.CLOSE_DELIM:
            self.pos += 1
            if closer.text != delimiter.close:
                self._error(
                    closer, "E112",
                    f"mismatched closing delimiter: expected `{delimiter.close}`,"
                    f" found `{closer.text}`",
                )
        return Group(delimiter, opener.span, closer.span, tuple(inner))

    def _error(self, tok: Token, code: str, message: str, label: str = "") -> None:
        region = self.source.resolve(tok.span)
        self.diagnostics.append(error_at(self.source, region, code, message, label))


def _is_op(tree: TokenTree | None, texts: frozenset[str] | str) -> bool:
    return (
        isinstance(tree, Token)
        and tree.kind == TokenKind.OPERATOR
        and tree.text in texts
    )


def _fold_repetitions(trees: list[TokenTree]) -> list[TokenTree]:
    folded: list[TokenTree] = []
    i = 0
    while i < len(trees):
        tree = trees[i]
        group = trees[i + 1] if i + 1 < len(trees) else None
        if (
            _is_op(tree, "$")
            and isinstance(group, Group)
            and group.delimiter == Delimiter.PAREN
        ):
            following = trees[i + 2:i + 4]
            if following and _is_op(following[0], _REPETITION_OPS):
                folded.append(Repetition(
                    tree.span, group.close_span, group.inner, None, following[0],
                ))
                i += 3
                continue
            if (
                len(following) == 2
                and isinstance(following[0], Token)
                and _is_op(following[1], _REPETITION_OPS)
            ):
                folded.append(Repetition(
                    tree.span, group.close_span, group.inner,
                    following[0], following[1],
                ))
                i += 4
                continue
        folded.append(tree)
        i += 1
    return folded


def build_token_trees(tokens: list[Token], source: SourceFile) -> list[TokenTree]:
    """Match delimiters in *tokens*. Raises CompileError on imbalance."""
    return TreeBuilder(tokens, source).build()
