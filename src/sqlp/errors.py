"""Error types with formatted source context."""

from __future__ import annotations

from sqlp.tokens import Position, Span


class SqlpError(Exception):
    """Base class for lexing and parsing failures, with span and source context.

    ``offset`` counts code points into the source string; ``byte_offset`` is
    the same position in the UTF-8 encoding of the source.
    """

    def __init__(self, message: str, span: Span, source: str, filename: str = "input.sql") -> None:
        self.message = message
        self.span = span
        self.source = source
        self.filename = filename
        super().__init__(self.format())

    @property
    def position(self) -> Position:
        return self.span.start

    @property
    def offset(self) -> int:
        return self.span.start.offset

    @property
    def byte_offset(self) -> int:
        return len(self.source[: self.offset].encode("utf-8"))

    def format(self, filename: str | None = None) -> str:
        if filename is None:
            filename = self.filename
        lines = self.source.splitlines(keepends=True)
        line_idx = self.span.start.line - 1
        col = self.span.start.column

        # Build the source line (strip trailing newline for display)
        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        # Underline the full span when on one line, otherwise to end of line
        if self.span.end.line == self.span.start.line:
            underline_len = max(1, self.span.end.column - col)
        else:
            underline_len = max(1, len(source_line) - col + 1)

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(self.span.start.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.span.start.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )


class LexError(SqlpError):
    """Raised by the tokenizer on the first lexical error."""

    def __init__(
        self, message: str, position: Position, source: str, filename: str = "input.sql"
    ) -> None:
        super().__init__(message, Span(position, position), source, filename)


class UnterminatedQuote(LexError):
    """Input ended inside a quoted span. Points at the opening quote."""

    def __init__(
        self, quote: str, position: Position, source: str, filename: str = "input.sql"
    ) -> None:
        self.quote = quote
        super().__init__(
            f"unterminated quote: expected closing {quote}", position, source, filename
        )


class UnterminatedComment(LexError):
    """Input ended inside a block comment. Points at the opening '/*'."""

    def __init__(self, position: Position, source: str, filename: str = "input.sql") -> None:
        super().__init__(
            "unterminated block comment: expected closing '*/'", position, source, filename
        )


class OrdinalOutOfRange(LexError):
    """Ordinal parameter digits do not fit a signed 64-bit integer."""

    def __init__(
        self, digits: str, position: Position, source: str, filename: str = "input.sql"
    ) -> None:
        self.digits = digits
        super().__init__(
            f"ordinal parameter ${digits} is out of range", position, source, filename
        )


class ParseError(SqlpError):
    """Raised by the parser on the first structural error."""


class UnexpectedClosingDelimiter(ParseError):
    """A closing delimiter that is not the one currently awaited."""

    def __init__(
        self,
        found: str,
        expected: str | None,
        span: Span,
        source: str,
        filename: str = "input.sql",
    ) -> None:
        self.found = found
        self.expected = expected
        if expected is None:
            message = f"unexpected closing '{found}'"
        else:
            message = f"unexpected closing '{found}', expected '{expected}'"
        super().__init__(message, span, source, filename)


class MissingClosingDelimiter(ParseError):
    """Input ended while a delimiter was still open. Spans the opening delimiter."""

    def __init__(
        self, expected: str, span: Span, source: str, filename: str = "input.sql"
    ) -> None:
        self.expected = expected
        super().__init__(f"missing closing delimiter '{expected}'", span, source, filename)
