"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from lox.ast import Expr
from lox.errors import ErrorReporter
from lox.parser import parse_expression
from lox.scanner import scan_tokens
from lox.tokens import Token, TokenType


@pytest.fixture
def reporter() -> ErrorReporter:
    """A silent reporter for inspecting recorded errors."""
    return ErrorReporter(quiet=True)


@pytest.fixture
def lex(reporter):
    """Return a helper that scans source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = scan_tokens(source, reporter)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def parse_source(reporter):
    """Return a helper that scans and parses source into an expression."""

    def _parse(source: str) -> Expr:
        return parse_expression(scan_tokens(source, reporter), reporter)

    return _parse


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_lexemes(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token lexemes match the expected list."""
    actual = [t.lexeme for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"
