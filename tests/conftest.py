"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from sqlp.ast import Sequence
from sqlp.parser import parse
from sqlp.tokenizer import tokenize
from sqlp.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns the token list."""

    def _lex(source: str) -> list[Token]:
        return tokenize(source)

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns the root Sequence."""

    def _parse(source: str, filename: str = "test.sql") -> Sequence:
        return parse(source, filename)

    return _parse


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_round_trip(source: str) -> Sequence:
    """Parse source, check it serializes back unchanged, and return the tree."""
    tree = parse(source)
    assert tree.serialize() == source, f"Expected {source!r}, got {tree.serialize()!r}"
    return tree
