"""Tests for the span resolver and the position-preserving emitter."""

from __future__ import annotations

import io

from slag.emitter import Emitter
from slag.source import Region, SourceFile, Span


def emitter(**kwargs) -> tuple[Emitter, io.StringIO]:
    out = io.StringIO()
    return Emitter(out, **kwargs), out


class TestSourceFile:
    def test_resolve_first_line(self):
        source = SourceFile("fn main")
        assert source.resolve(Span(3, 7)) == Region(0, 3, 0, 7)

    def test_resolve_later_line(self):
        source = SourceFile("a\n  bc\n")
        assert source.resolve(Span(4, 6)) == Region(1, 2, 1, 4)

    def test_resolve_multiline_span(self):
        source = SourceFile('x = "a\nbc"')
        assert source.resolve(Span(4, 10)) == Region(0, 4, 1, 3)

    def test_token_ending_a_line_stays_on_it(self):
        source = SourceFile("ab\ncd")
        assert source.resolve(Span(0, 2)).end == (0, 2)

    def test_empty_span(self):
        source = SourceFile("ab\ncd")
        assert source.resolve(Span(3, 3)) == Region(1, 0, 1, 0)

    def test_line_at(self):
        source = SourceFile("one\ntwo\n")
        assert source.line_at(2) == "two"
        assert source.line_at(5) == ""

    def test_span_text(self):
        source = SourceFile("let x")
        assert source.span_text(Span(4, 5)) == "x"

    def test_from_path(self, tmp_path):
        path = tmp_path / "a.slag"
        path.write_text("x\n")
        source = SourceFile.from_path(path)
        assert source.filename == str(path)
        assert source.lines == ["x"]


class TestEmitter:
    def test_first_token_is_indented_without_newline(self):
        em, out = emitter()
        em.write("x", Region(3, 4, 3, 5))
        assert out.getvalue() == "    x"

    def test_same_line_padding(self):
        em, out = emitter()
        em.write("a", Region(0, 0, 0, 1))
        em.write("b", Region(0, 3, 0, 4))
        assert out.getvalue() == "a  b"

    def test_new_line(self):
        em, out = emitter()
        em.write("a", Region(0, 0, 0, 1))
        em.write("b", Region(4, 2, 4, 3))
        assert out.getvalue() == "a\n  b"

    def test_padding_never_negative(self):
        em, out = emitter()
        em.write("hello", Region(0, 0, 0, 5))
        em.write("x", Region(0, 2, 0, 3))
        assert out.getvalue() == "hellox"

    def test_punct_does_not_move_cursor(self):
        em, out = emitter()
        em.write("a", Region(0, 0, 0, 1))
        em.punct(";")
        em.write("b", Region(0, 2, 0, 3))
        assert out.getvalue() == "a; b"
        assert em.cursor == (0, 3)

    def test_cursor_follows_multiline_token(self):
        em, out = emitter()
        em.write('"a\nbc"', Region(0, 0, 1, 3))
        em.write("x", Region(1, 4, 1, 5))
        assert out.getvalue() == '"a\nbc" x'

    def test_preserve_blank_lines(self):
        em, out = emitter(preserve_blank_lines=True)
        em.write("a", Region(0, 0, 0, 1))
        em.write("b", Region(3, 0, 3, 1))
        assert out.getvalue() == "a\n\n\nb"

    def test_finish(self):
        em, out = emitter()
        em.finish()
        assert out.getvalue() == ""
        em.write("a", Region(0, 0, 0, 1))
        em.finish()
        assert out.getvalue() == "a\n"
