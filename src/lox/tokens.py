"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

# Literal payload carried by NUMBER, STRING, TRUE, FALSE and NIL tokens
LiteralValue = bool | float | str | None


class TokenType(Enum):
    # Single-character punctuation
    LEFT_PAREN = auto()  # (
    RIGHT_PAREN = auto()  # )
    LEFT_BRACE = auto()  # {
    RIGHT_BRACE = auto()  # }
    COMMA = auto()  # ,
    DOT = auto()  # .
    MINUS = auto()  # -
    PLUS = auto()  # +
    SEMICOLON = auto()  # ;
    SLASH = auto()  # /
    STAR = auto()  # *

    # One or two character operators
    BANG = auto()  # !
    BANG_EQUAL = auto()  # !=
    EQUAL = auto()  # =
    EQUAL_EQUAL = auto()  # ==
    GREATER = auto()  # >
    GREATER_EQUAL = auto()  # >=
    LESS = auto()  # <
    LESS_EQUAL = auto()  # <=

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


KEYWORDS: dict[str, TokenType] = {
    "and": TokenType.AND,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "fun": TokenType.FUN,
    "if": TokenType.IF,
    "nil": TokenType.NIL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "var": TokenType.VAR,
    "while": TokenType.WHILE,
}


@dataclass(frozen=True, slots=True)
class Token:
    """A single scanned token: type, exact source text, literal payload, line.

    ``offset`` is the 0-based index of the lexeme's first character in the
    source, so ``source[offset : offset + len(lexeme)] == lexeme``.
    """

    type: TokenType
    lexeme: str
    literal: LiteralValue
    line: int
    offset: int = 0

    def __str__(self) -> str:
        return f"{self.type.name} {self.lexeme} {format_literal(self.literal)}"


def format_literal(value: LiteralValue) -> str:
    """Render a literal value the way diagnostics and the AST printer show it.

    Integral numbers keep an explicit fractional zero, so ``3`` and ``3.0``
    both render as ``3.0``, and never switch to exponent notation.
    """
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return f"{value:.1f}"
        return repr(value)
    return value


def is_digit(ch: str) -> bool:
    """Return True if ch is an ASCII decimal digit."""
    return "0" <= ch <= "9"


def is_alpha(ch: str) -> bool:
    """Return True if ch can start an identifier (ASCII letter or underscore)."""
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def is_alphanumeric(ch: str) -> bool:
    """Return True if ch can continue an identifier."""
    return is_alpha(ch) or is_digit(ch)
