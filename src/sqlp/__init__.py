"""Lossless SQL tokenizer and parser for rewriting placeholders and delimited code."""

from __future__ import annotations

__version__ = "0.1.0"

from sqlp.ast import (  # noqa: E402
    Braces,
    Brackets,
    CommentBlock,
    CommentLine,
    Copier,
    DoubleColon,
    Enclosed,
    Leaf,
    NamedParam,
    Node,
    NodeKind,
    OrdinalParam,
    Parens,
    QuoteDouble,
    QuoteGrave,
    QuoteSingle,
    Sequence,
    Slot,
    Text,
    Walker,
    Whitespace,
)
from sqlp.errors import (  # noqa: E402
    LexError,
    MissingClosingDelimiter,
    OrdinalOutOfRange,
    ParseError,
    SqlpError,
    UnexpectedClosingDelimiter,
    UnterminatedComment,
    UnterminatedQuote,
)
from sqlp.parser import Parser, parse, try_parse  # noqa: E402
from sqlp.tokenizer import Tokenizer, tokenize  # noqa: E402
from sqlp.tokens import Position, Span, Token, TokenType  # noqa: E402
from sqlp.walk import (  # noqa: E402
    copy_deep,
    first_leaf,
    iter_leaves,
    last_leaf,
    walk_deep,
    walk_shallow,
)

__all__ = [
    "Braces",
    "Brackets",
    "CommentBlock",
    "CommentLine",
    "Copier",
    "DoubleColon",
    "Enclosed",
    "Leaf",
    "LexError",
    "MissingClosingDelimiter",
    "NamedParam",
    "Node",
    "NodeKind",
    "OrdinalOutOfRange",
    "OrdinalParam",
    "Parens",
    "ParseError",
    "Parser",
    "Position",
    "QuoteDouble",
    "QuoteGrave",
    "QuoteSingle",
    "Sequence",
    "Slot",
    "Span",
    "SqlpError",
    "Text",
    "Token",
    "TokenType",
    "Tokenizer",
    "UnexpectedClosingDelimiter",
    "UnterminatedComment",
    "UnterminatedQuote",
    "Walker",
    "Whitespace",
    "copy_deep",
    "first_leaf",
    "iter_leaves",
    "last_leaf",
    "parse",
    "tokenize",
    "try_parse",
    "walk_deep",
    "walk_shallow",
]
