"""Tests for the token-tree builder."""

from __future__ import annotations

import pytest

from slag.errors import CompileError
from slag.lexer import Lexer
from slag.source import SourceFile, Span
from slag.tokens import Delimiter, Group, Repetition, Token, tree_span
from slag.trees import build_token_trees


def trees(text: str):
    source = SourceFile(text, "<test>")
    return build_token_trees(Lexer(source).lex(), source)


def error_codes(text: str) -> list[str]:
    with pytest.raises(CompileError) as exc:
        trees(text)
    return [d.code for d in exc.value.diagnostics]


class TestGroups:
    def test_flat_tokens(self):
        result = trees("a b")
        assert [t.text for t in result] == ["a", "b"]

    def test_nested_groups(self):
        result = trees("f(a, [b])")
        assert isinstance(result[0], Token)
        group = result[1]
        assert isinstance(group, Group)
        assert group.delimiter == Delimiter.PAREN
        assert [getattr(t, "text", None) for t in group.inner[:2]] == ["a", ","]
        inner = group.inner[2]
        assert isinstance(inner, Group)
        assert inner.delimiter == Delimiter.BRACKET
        assert inner.inner[0].text == "b"

    def test_group_spans(self):
        group = trees("x {y}")[1]
        assert group.open_span == Span(2, 3)
        assert group.close_span == Span(4, 5)
        assert tree_span(group) == Span(2, 5)

    def test_empty_group(self):
        group = trees("()")[0]
        assert group.inner == ()


class TestDelimiterErrors:
    def test_unclosed(self):
        assert error_codes("f(a") == ["E110"]

    def test_unexpected_close(self):
        assert error_codes("a)") == ["E111"]

    def test_mismatched(self):
        assert error_codes("(a]") == ["E112"]


class TestRepetitions:
    def test_with_separator(self):
        result = trees("$($x:expr),*")
        assert len(result) == 1
        rep = result[0]
        assert isinstance(rep, Repetition)
        assert rep.separator is not None and rep.separator.text == ","
        assert rep.operator.text == "*"
        assert [t.text for t in rep.inner] == ["$", "x", ":", "expr"]

    def test_without_separator(self):
        rep = trees("$(a)+")[0]
        assert isinstance(rep, Repetition)
        assert rep.separator is None
        assert rep.operator.text == "+"
        assert tree_span(rep) == Span(0, 5)

    def test_metavariable_is_not_a_repetition(self):
        assert [t.text for t in trees("$x")] == ["$", "x"]

    def test_group_without_operator_is_not_a_repetition(self):
        result = trees("$(a) b")
        assert isinstance(result[1], Group)
