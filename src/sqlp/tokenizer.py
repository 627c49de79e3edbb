"""SQL tokenizer — an incremental cursor that yields primitive tokens.

The tokenizer never builds structure: delimiters come out as individual
opening and closing tokens, so it can be used on its own for scans that do
not need a tree (counting placeholders, for example). Every character of the
source belongs to exactly one token, and concatenating the ``raw`` text of all
tokens reproduces the source.
"""

from __future__ import annotations

from collections.abc import Iterator

from sqlp.errors import OrdinalOutOfRange, UnterminatedComment, UnterminatedQuote
from sqlp.tokens import (
    DELIMITERS,
    QUOTES,
    WHITESPACE_CHARS,
    Position,
    Span,
    Token,
    TokenType,
    is_digit,
    is_ident_char,
    is_ident_start,
)

_MAX_ORDINAL = 2**63 - 1


class Tokenizer:
    """Split SQL source text into a stream of Token objects, one per ``next()`` call."""

    def __init__(self, source: str, filename: str = "input.sql") -> None:
        self._source = source
        self._filename = filename
        self._pos = 0
        self._line = 1
        self._col = 1
        # A structured token found right after a text run. At most one exists.
        self._pending: Token | None = None

    @property
    def source(self) -> str:
        return self._source

    @property
    def filename(self) -> str:
        return self._filename

    def __iter__(self) -> Iterator[Token]:
        return iter(self.next, None)

    def next(self) -> Token | None:
        """Return the next token, or None at end of input."""
        pending = self._pending
        if pending is not None:
            self._pending = None
            return pending

        text_start = self._current_pos()

        while self._pos < len(self._source):
            mid = self._current_pos()
            tok = self._lex_token(mid)
            if tok is None:
                # Unrecognized: extend the text run by one character
                self._advance_to(self._pos + 1)
                continue
            if mid.offset > text_start.offset:
                self._pending = tok
                return self._text(text_start, mid)
            return tok

        if self._pos > text_start.offset:
            return self._text(text_start, self._current_pos())
        return None

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _at(self, prefix: str) -> bool:
        return self._source.startswith(prefix, self._pos)

    def _advance_to(self, end: int) -> None:
        chunk = self._source[self._pos : end]
        newlines = chunk.count("\n")
        if newlines:
            self._line += newlines
            self._col = len(chunk) - chunk.rfind("\n")
        else:
            self._col += len(chunk)
        self._pos = end

    def _emit(self, tt: TokenType, value: str, start: Position) -> Token:
        raw = self._source[start.offset : self._pos]
        return Token(tt, value, raw, Span(start, self._current_pos()))

    def _text(self, start: Position, end: Position) -> Token:
        raw = self._source[start.offset : end.offset]
        return Token(TokenType.TEXT, raw, raw, Span(start, end))

    # ------------------------------------------------------------------
    # Dispatch: each rule either consumes a token or leaves the cursor alone
    # ------------------------------------------------------------------

    def _lex_token(self, start: Position) -> Token | None:
        ch = self._peek()

        if ch in WHITESPACE_CHARS:
            return self._lex_whitespace(start)

        if ch in QUOTES:
            return self._lex_quote(ch, start)

        if self._at("--"):
            return self._lex_comment_line(start)

        if self._at("/*"):
            return self._lex_comment_block(start)

        # Checked before named params so '::' never reads as ':' + junk
        if self._at("::"):
            self._advance_to(self._pos + 2)
            return self._emit(TokenType.DOUBLE_COLON, "::", start)

        if ch == "$":
            return self._lex_ordinal_param(start)

        if ch == ":":
            return self._lex_named_param(start)

        if ch in DELIMITERS:
            self._advance_to(self._pos + 1)
            return self._emit(DELIMITERS[ch], ch, start)

        return None

    def _lex_whitespace(self, start: Position) -> Token:
        end = self._pos
        while end < len(self._source) and self._source[end] in WHITESPACE_CHARS:
            end += 1
        self._advance_to(end)
        text = self._source[start.offset : end]
        return self._emit(TokenType.WHITESPACE, text, start)

    def _lex_quote(self, quote: str, start: Position) -> Token:
        close = self._source.find(quote, self._pos + 1)
        if close < 0:
            raise UnterminatedQuote(quote, start, self._source, self._filename)
        value = self._source[self._pos + 1 : close]
        self._advance_to(close + 1)
        return self._emit(QUOTES[quote], value, start)

    def _lex_comment_line(self, start: Position) -> Token:
        body_start = self._pos + 2
        end = body_start
        while end < len(self._source) and self._source[end] not in "\r\n":
            end += 1
        value = self._source[body_start:end]
        self._advance_to(end)
        return self._emit(TokenType.COMMENT_LINE, value, start)

    def _lex_comment_block(self, start: Position) -> Token:
        body_start = self._pos + 2
        close = self._source.find("*/", body_start)
        if close < 0:
            raise UnterminatedComment(start, self._source, self._filename)
        value = self._source[body_start:close]
        self._advance_to(close + 2)
        return self._emit(TokenType.COMMENT_BLOCK, value, start)

    def _lex_ordinal_param(self, start: Position) -> Token | None:
        digits_start = self._pos + 1
        end = digits_start
        while end < len(self._source) and is_digit(self._source[end]):
            end += 1
        if end == digits_start:
            return None

        digits = self._source[digits_start:end]
        significant = digits.lstrip("0")
        if len(significant) > 19 or int(digits) > _MAX_ORDINAL:
            raise OrdinalOutOfRange(digits, start, self._source, self._filename)
        self._advance_to(end)
        return self._emit(TokenType.ORDINAL_PARAM, digits, start)

    def _lex_named_param(self, start: Position) -> Token | None:
        ident_start = self._pos + 1
        if not is_ident_start(self._peek(1)):
            return None
        end = ident_start + 1
        while end < len(self._source) and is_ident_char(self._source[end]):
            end += 1
        ident = self._source[ident_start:end]
        self._advance_to(end)
        return self._emit(TokenType.NAMED_PARAM, ident, start)


def tokenize(source: str, filename: str = "input.sql") -> list[Token]:
    """Convenience function: tokenize source text and return the token list."""
    return list(Tokenizer(source, filename))
