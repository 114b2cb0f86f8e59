"""Lexer for brace-free Rust source.

Produces a flat stream of tokens carrying character-offset spans.
Comments and whitespace are dropped; layout is recovered later from the
spans alone, so every token keeps its exact source text.
"""

from __future__ import annotations

from slag.errors import CompileError, Diagnostic, error_at
from slag.source import SourceFile, Span
from slag.tokens import DELIMITER_CHARS, OPERATORS, Token, TokenKind


class Lexer:
    """Tokenizes brace-free Rust source code."""

    def __init__(self, source: SourceFile) -> None:
        self.source = source
        self.text = source.text
        self.pos = 0
        self.tokens: list[Token] = []
        self.diagnostics: list[Diagnostic] = []

    def lex(self) -> list[Token]:
        """Tokenize the entire source and return the token list."""
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch in (' ', '\n', '\r'):
                self.pos += 1
            elif ch == '\t':
                self._error("tabs are not allowed; use spaces", self.pos, "E101")
                self.pos += 1
            elif ch == '/' and self._peek(1) == '/':
                self._skip_line_comment()
            elif ch == '/' and self._peek(1) == '*':
                self._skip_block_comment()
            elif ch in ('b', 'r') and self._starts_prefixed_literal():
                self._lex_prefixed_literal()
            elif ch == '"':
                self._lex_string(self.pos)
            elif ch == "'":
                self._lex_quote()
            elif ch.isdigit():
                self._lex_number()
            elif ch.isalpha() or ch == '_':
                self._lex_identifier()
            elif ch in DELIMITER_CHARS:
                kind = TokenKind.OPEN_DELIM if ch in "([{" else TokenKind.CLOSE_DELIM
                self.pos += 1
                self._emit(kind, self.pos - 1)
            else:
                self._lex_operator()

        self.tokens.append(Token(TokenKind.EOF, "", Span(self.pos, self.pos)))

        if self.diagnostics:
            raise CompileError(self.diagnostics)
        return self.tokens

    # ── Helpers ───────────────────────────────────────────────────

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx < len(self.text):
            return self.text[idx]
        return '\0'

    def _is_ident_char(self) -> bool:
        ch = self._peek()
        return ch.isalnum() or ch == '_'

    def _emit(self, kind: TokenKind, start: int) -> Token:
        tok = Token(kind, self.text[start:self.pos], Span(start, self.pos))
        self.tokens.append(tok)
        return tok

    def _error(self, message: str, offset: int, code: str = "E100") -> None:
        region = self.source.resolve(Span(offset, offset + 1))
        self.diagnostics.append(error_at(self.source, region, code, message))

    # ── Comments ─────────────────────────────────────────────────

    def _skip_line_comment(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] != '\n':
            self.pos += 1

    def _skip_block_comment(self) -> None:
        start = self.pos
        self.pos += 2
        depth = 1
        while self.pos < len(self.text):
            if self.text.startswith('/*', self.pos):
                depth += 1
                self.pos += 2
            elif self.text.startswith('*/', self.pos):
                depth -= 1
                self.pos += 2
                if depth == 0:
                    return
            else:
                self.pos += 1
        self._error("unterminated block comment", start, "E104")

    # ── Strings and characters ───────────────────────────────────

    def _starts_prefixed_literal(self) -> bool:
        """``b"…"``, ``b'…'``, ``r"…"``, ``r#"…"#``, ``br"…"``."""
        i = self.pos
        if self.text.startswith('br', i):
            i += 2
        elif self.text[i] == 'b':
            return self._peek(1) in ('"', "'")
        else:
            i += 1
        while i < len(self.text) and self.text[i] == '#':
            i += 1
        return i < len(self.text) and self.text[i] == '"'

    def _lex_prefixed_literal(self) -> None:
        start = self.pos
        if self.text[self.pos] == 'b':
            self.pos += 1
            if self._peek() == '"':
                self._lex_string(start)
                return
            if self._peek() == "'":
                self._lex_char(start)
                return
        # raw string: r#*"…"#*
        self.pos += 1
        hashes = 0
        while self._peek() == '#':
            hashes += 1
            self.pos += 1
        self.pos += 1  # opening "
        terminator = '"' + '#' * hashes
        end = self.text.find(terminator, self.pos)
        if end < 0:
            self.pos = len(self.text)
            self._error("unterminated raw string literal", start, "E105")
            return
        self.pos = end + len(terminator)
        self._emit(TokenKind.RAW_STRING_LIT, start)

    def _lex_string(self, start: int) -> None:
        self.pos += 1  # opening "
        while self.pos < len(self.text) and self.text[self.pos] != '"':
            if self.text[self.pos] == '\\':
                self.pos += 1
            self.pos += 1
        if self.pos >= len(self.text):
            self._error("unterminated string literal", start, "E102")
            return
        self.pos += 1  # closing "
        self._emit(TokenKind.STRING_LIT, start)

    def _lex_quote(self) -> None:
        """Disambiguate a character literal from a lifetime."""
        if self._peek(1) == '\\' or self._peek(2) == "'":
            self._lex_char(self.pos)
            return
        ch = self._peek(1)
        if ch.isalpha() or ch == '_':
            start = self.pos
            self.pos += 1
            while self.pos < len(self.text) and self._is_ident_char():
                self.pos += 1
            self._emit(TokenKind.LIFETIME, start)
            return
        self._lex_char(self.pos)

    def _lex_char(self, start: int) -> None:
        self.pos += 1  # opening '
        if self._peek() == '\\':
            self.pos += 2
            # \u{…} and \x.. escapes run up to the closing quote
            while self.pos < len(self.text) and self.text[self.pos] not in ("'", '\n'):
                self.pos += 1
        elif self.pos < len(self.text):
            self.pos += 1
        if self._peek() != "'":
            self._error("unterminated character literal", start, "E103")
            return
        self.pos += 1
        self._emit(TokenKind.CHAR_LIT, start)

    # ── Numbers ──────────────────────────────────────────────────

    def _lex_number(self) -> None:
        start = self.pos
        kind = TokenKind.INTEGER_LIT

        if self._peek() == '0' and self._peek(1) in ('x', 'o', 'b'):
            self.pos += 2
            while self.pos < len(self.text) and (self._peek() in '0123456789abcdefABCDEF_'):
                self.pos += 1
            self._lex_suffix()
            self._emit(kind, start)
            return

        self._lex_digits()
        # `1..2` is a range and `1.foo()` a method call, not floats
        if self._peek() == '.' and self._peek(1).isdigit():
            kind = TokenKind.FLOAT_LIT
            self.pos += 1
            self._lex_digits()
        if self._peek() in ('e', 'E') and (
            self._peek(1).isdigit()
            or (self._peek(1) in ('+', '-') and self._peek(2).isdigit())
        ):
            kind = TokenKind.FLOAT_LIT
            self.pos += 2
            self._lex_digits()
        if self._peek() == 'f':
            kind = TokenKind.FLOAT_LIT
        self._lex_suffix()
        self._emit(kind, start)

    def _lex_digits(self) -> None:
        while self.pos < len(self.text) and (self._peek().isdigit() or self._peek() == '_'):
            self.pos += 1

    def _lex_suffix(self) -> None:
        # u8, i64, f32, usize ...
        while self.pos < len(self.text) and self._is_ident_char():
            self.pos += 1

    # ── Identifiers ──────────────────────────────────────────────

    def _lex_identifier(self) -> None:
        start = self.pos
        if self.text.startswith('r#', self.pos):
            self.pos += 2
        while self.pos < len(self.text) and self._is_ident_char():
            self.pos += 1
        self._emit(TokenKind.IDENTIFIER, start)

    # ── Operators and punctuation ────────────────────────────────

    def _lex_operator(self) -> None:
        start = self.pos
        for op in OPERATORS:
            if self.text.startswith(op, self.pos):
                self.pos += len(op)
                kind = TokenKind.FAT_ARROW if op == "=>" else TokenKind.OPERATOR
                self._emit(kind, start)
                return
        self._error(f"unexpected character: {self.text[start]!r}", start)
        self.pos += 1
