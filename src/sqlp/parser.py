"""SQL parser — assembles the token stream into a tree of nested sequences."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from sqlp.ast import (
    Braces,
    Brackets,
    CommentBlock,
    CommentLine,
    DoubleColon,
    Enclosed,
    NamedParam,
    Node,
    OrdinalParam,
    Parens,
    QuoteDouble,
    QuoteGrave,
    QuoteSingle,
    Sequence,
    Text,
    Whitespace,
)
from sqlp.errors import MissingClosingDelimiter, SqlpError, UnexpectedClosingDelimiter
from sqlp.tokenizer import Tokenizer
from sqlp.tokens import CLOSING, CLOSING_TYPES, DELIMITERS, OPENING, Token, TokenType


@dataclass(slots=True)
class _Frame:
    """One open composite: the token that opened it and the close it awaits."""

    opener: Token | None
    close: TokenType | None
    nodes: list[Node | None] = field(default_factory=list)


class Parser:
    """Delimiter-matching parser over a :class:`Tokenizer`.

    Each opening delimiter pushes a frame that accepts only its own closing
    delimiter; the frame stack is explicit, so deeply nested input does not
    hit the interpreter's recursion limit.
    """

    def __init__(self, source: str, filename: str = "input.sql") -> None:
        self._source = source
        self._filename = filename
        self._tokenizer = Tokenizer(source, filename)

    def parse(self) -> Sequence:
        root = _Frame(None, None)
        stack = [root]

        for tok in self._tokenizer:
            frame = stack[-1]

            if tok.type in OPENING:
                stack.append(_Frame(tok, CLOSING[tok.type]))
            elif tok.type in CLOSING_TYPES:
                if tok.type != frame.close:
                    raise self._unexpected_close(tok, frame)
                stack.pop()
                assert frame.opener is not None
                wrapper = _ENCLOSED[frame.opener.type]
                stack[-1].nodes.append(wrapper(Sequence(frame.nodes)))
            else:
                frame.nodes.append(leaf_node(tok))

        if len(stack) > 1:
            frame = stack[-1]
            assert frame.opener is not None and frame.close is not None
            raise MissingClosingDelimiter(
                _DELIMITER_CHARS[frame.close], frame.opener.span, self._source, self._filename
            )

        return Sequence(root.nodes)

    def _unexpected_close(self, tok: Token, frame: _Frame) -> UnexpectedClosingDelimiter:
        expected = _DELIMITER_CHARS[frame.close] if frame.close is not None else None
        return UnexpectedClosingDelimiter(
            tok.raw, expected, tok.span, self._source, self._filename
        )


_DELIMITER_CHARS: dict[TokenType, str] = {tt: ch for ch, tt in DELIMITERS.items()}

_ENCLOSED: dict[TokenType, type[Enclosed]] = {
    TokenType.PAREN_OPEN: Parens,
    TokenType.BRACKET_OPEN: Brackets,
    TokenType.BRACE_OPEN: Braces,
}

_LEAVES: dict[TokenType, Callable[[Token], Node]] = {
    TokenType.TEXT: lambda tok: Text(tok.value, tok.span),
    TokenType.WHITESPACE: lambda tok: Whitespace(tok.value, tok.span),
    TokenType.QUOTE_SINGLE: lambda tok: QuoteSingle(tok.value, tok.span),
    TokenType.QUOTE_DOUBLE: lambda tok: QuoteDouble(tok.value, tok.span),
    TokenType.QUOTE_GRAVE: lambda tok: QuoteGrave(tok.value, tok.span),
    TokenType.COMMENT_LINE: lambda tok: CommentLine(tok.value, tok.span),
    TokenType.COMMENT_BLOCK: lambda tok: CommentBlock(tok.value, tok.span),
    TokenType.DOUBLE_COLON: lambda tok: DoubleColon(tok.span),
    TokenType.ORDINAL_PARAM: lambda tok: OrdinalParam(int(tok.value), tok.span),
    TokenType.NAMED_PARAM: lambda tok: NamedParam(tok.value, tok.span),
}


def leaf_node(token: Token) -> Node:
    """Convert a non-delimiter token into its leaf node."""
    build = _LEAVES.get(token.type)
    if build is None:
        raise ValueError(f"{token.type.name} token has no leaf node")
    return build(token)


def parse(source: str, filename: str = "input.sql") -> Sequence:
    """Convenience function: parse source text and return the root Sequence."""
    return Parser(source, filename).parse()


def try_parse(source: str, filename: str = "input.sql") -> tuple[Sequence | None, SqlpError | None]:
    """Parse source text, returning ``(tree, None)`` or ``(None, error)``.

    No partial tree is returned on failure.
    """
    try:
        return parse(source, filename), None
    except SqlpError as exc:
        return None, exc
