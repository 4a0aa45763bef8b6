"""Expression AST node types for parsed Lox expressions."""

from __future__ import annotations

from dataclasses import dataclass

from lox.tokens import LiteralValue, Token


@dataclass(frozen=True, slots=True)
class Literal:
    """Number, string, boolean, or nil constant."""

    value: LiteralValue


@dataclass(frozen=True, slots=True)
class Grouping:
    """Parenthesized sub-expression."""

    expression: Expr


@dataclass(frozen=True, slots=True)
class Unary:
    operator: Token
    right: Expr


@dataclass(frozen=True, slots=True)
class Binary:
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, slots=True)
class Logical:
    """Short-circuiting 'and' / 'or'."""

    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, slots=True)
class Variable:
    name: Token


@dataclass(frozen=True, slots=True)
class Assign:
    name: Token
    value: Expr


@dataclass(frozen=True, slots=True)
class Get:
    """Property access: object.name."""

    object: Expr
    name: Token


@dataclass(frozen=True, slots=True)
class Set:
    """Property assignment: object.name = value."""

    object: Expr
    name: Token
    value: Expr


@dataclass(frozen=True, slots=True)
class Call:
    """Call expression; paren is the closing ')' used to locate errors."""

    callee: Expr
    paren: Token
    arguments: tuple[Expr, ...]


@dataclass(frozen=True, slots=True)
class Super:
    keyword: Token
    method: Token


@dataclass(frozen=True, slots=True)
class This:
    keyword: Token


Expr = Assign | Binary | Call | Get | Grouping | Literal | Logical | Set | Super | This | Unary | Variable
