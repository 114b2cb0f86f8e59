"""Token kinds, leaf tokens, and delimited token trees."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Union

from slag.source import Span


class TokenKind(Enum):
    # Names
    IDENTIFIER = auto()
    LIFETIME = auto()

    # Literals
    INTEGER_LIT = auto()
    FLOAT_LIT = auto()
    STRING_LIT = auto()
    RAW_STRING_LIT = auto()
    CHAR_LIT = auto()

    # Block-open marker
    FAT_ARROW = auto()

    # Operators and punctuation
    OPERATOR = auto()

    # Delimiters (consumed by the tree builder)
    OPEN_DELIM = auto()
    CLOSE_DELIM = auto()

    # Special
    EOF = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    span: Span


class Delimiter(Enum):
    PAREN = ("(", ")")
    BRACKET = ("[", "]")
    BRACE = ("{", "}")

    @property
    def open(self) -> str:
        return self.value[0]

    @property
    def close(self) -> str:
        return self.value[1]

    @classmethod
    def for_char(cls, ch: str) -> Delimiter:
        for delim in cls:
            if ch in delim.value:
                return delim
        raise KeyError(ch)


@dataclass(frozen=True)
class Group:
    """An explicitly delimited run of token trees."""

    delimiter: Delimiter
    open_span: Span
    close_span: Span
    inner: tuple[TokenTree, ...]


@dataclass(frozen=True)
class Repetition:
    """A macro repetition ``$( ... ) sep? op``."""

    open_span: Span
    close_span: Span
    inner: tuple[TokenTree, ...]
    separator: Token | None
    operator: Token


TokenTree = Union[Token, Group, Repetition]


def tree_span(tree: TokenTree) -> Span:
    """The span covered by a whole token tree."""
    if isinstance(tree, Token):
        return tree.span
    if isinstance(tree, Group):
        return Span(tree.open_span.lo, tree.close_span.hi)
    return Span(tree.open_span.lo, tree.operator.span.hi)


# Longest first; the lexer takes the first match.
OPERATORS: tuple[str, ...] = (
    "<<=", ">>=", "...", "..=",
    "=>", "->", "::", "==", "!=", "<=", ">=", "&&", "||",
    "+=", "-=", "*=", "/=", "%=", "^=", "&=", "|=", "<<", ">>", "..",
    "+", "-", "*", "/", "%", "^", "!", "&", "|", "=", "<", ">",
    "@", ".", ",", ";", ":", "#", "$", "?", "~",
)

DELIMITER_CHARS = frozenset("()[]{}")
