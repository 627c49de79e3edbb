"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # Opaque content
    TEXT = auto()  # anything not recognized below
    WHITESPACE = auto()  # space, \t, \v, \r, \n runs

    # Quoted spans (value excludes the quotes)
    QUOTE_SINGLE = auto()  # '...'
    QUOTE_DOUBLE = auto()  # "..."
    QUOTE_GRAVE = auto()  # `...`

    # Comments (value excludes the delimiters)
    COMMENT_LINE = auto()  # -- up to the line terminator
    COMMENT_BLOCK = auto()  # /* ... */

    # Operators and placeholders
    DOUBLE_COLON = auto()  # ::
    ORDINAL_PARAM = auto()  # $1, value is the digit run
    NAMED_PARAM = auto()  # :ident, value is the identifier

    # Delimiters (single-character)
    PAREN_OPEN = auto()  # (
    PAREN_CLOSE = auto()  # )
    BRACKET_OPEN = auto()  # [
    BRACKET_CLOSE = auto()  # ]
    BRACE_OPEN = auto()  # {
    BRACE_CLOSE = auto()  # }


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position (end exclusive)."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single token: its payload and the exact source text it covers."""

    type: TokenType
    value: str
    raw: str
    span: Span


# Delimiter character -> token type
DELIMITERS: dict[str, TokenType] = {
    "(": TokenType.PAREN_OPEN,
    ")": TokenType.PAREN_CLOSE,
    "[": TokenType.BRACKET_OPEN,
    "]": TokenType.BRACKET_CLOSE,
    "{": TokenType.BRACE_OPEN,
    "}": TokenType.BRACE_CLOSE,
}

# Opening delimiter type -> matching closing type
CLOSING: dict[TokenType, TokenType] = {
    TokenType.PAREN_OPEN: TokenType.PAREN_CLOSE,
    TokenType.BRACKET_OPEN: TokenType.BRACKET_CLOSE,
    TokenType.BRACE_OPEN: TokenType.BRACE_CLOSE,
}

OPENING: frozenset[TokenType] = frozenset(CLOSING)
CLOSING_TYPES: frozenset[TokenType] = frozenset(CLOSING.values())

QUOTES: dict[str, TokenType] = {
    "'": TokenType.QUOTE_SINGLE,
    '"': TokenType.QUOTE_DOUBLE,
    "`": TokenType.QUOTE_GRAVE,
}

WHITESPACE_CHARS = frozenset(" \t\v\r\n")
_DIGITS = frozenset("0123456789")
_IDENT_START = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz_")
_IDENT = _IDENT_START | _DIGITS


def is_whitespace(ch: str) -> bool:
    """Return True if ch is a whitespace character."""
    return ch in WHITESPACE_CHARS


def is_digit(ch: str) -> bool:
    """Return True if ch is an ASCII decimal digit."""
    return ch in _DIGITS


def is_ident_start(ch: str) -> bool:
    """Return True if ch may start a named parameter identifier."""
    return ch in _IDENT_START


def is_ident_char(ch: str) -> bool:
    """Return True if ch may continue a named parameter identifier."""
    return ch in _IDENT
