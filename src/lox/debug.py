"""Token listings and AST dumps for --tokens / --ast / --debug."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from lox.ast import (
    Assign,
    Binary,
    Call,
    Expr,
    Get,
    Grouping,
    Literal,
    Logical,
    Set,
    Super,
    This,
    Unary,
    Variable,
)
from lox.tokens import Token, format_literal


def dump_tokens(tokens: Iterable[Token], *, file: TextIO = sys.stdout) -> None:
    """Print one token per line, as ``TYPE lexeme literal``."""
    for token in tokens:
        file.write(f"{token}\n")


def format_ast(expr: Expr) -> str:
    """Render an expression in fully parenthesized prefix form.

    ``1 + 2 * 3`` renders as ``(+ 1.0 (* 2.0 3.0))``. The tree is walked
    with an explicit stack, so arbitrarily deep trees are fine.
    """
    parts: list[str] = []
    # Pending work, popped from the end: text to emit or a node to expand
    stack: list[Expr | str] = list(reversed(_pieces(expr)))
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        else:
            stack.extend(reversed(_pieces(item)))
    return "".join(parts)


def _pieces(expr: Expr) -> list[Expr | str]:
    """One level of *expr*: output text interleaved with child nodes."""
    match expr:
        case Literal(value=str() as text):
            return [f'"{text}"']
        case Literal(value=value):
            return [format_literal(value)]
        case Grouping(expression=inner):
            return _parenthesize("group", inner)
        case Unary(operator=op, right=right):
            return _parenthesize(op.lexeme, right)
        case Binary(left=left, operator=op, right=right) | Logical(
            left=left, operator=op, right=right
        ):
            return _parenthesize(op.lexeme, left, right)
        case Variable(name=name):
            return [name.lexeme]
        case Assign(name=name, value=value):
            return _parenthesize("=", name.lexeme, value)
        case Get(object=obj, name=name):
            return _parenthesize(".", obj, name.lexeme)
        case Set(object=obj, name=name, value=value):
            return ["(= ", *_parenthesize(".", obj, name.lexeme), " ", value, ")"]
        case Call(callee=callee, arguments=args):
            return _parenthesize("call", callee, *args)
        case Super(method=method):
            return [f"(super {method.lexeme})"]
        case This():
            return ["this"]
    raise TypeError(f"not an expression node: {type(expr).__name__}")


def _parenthesize(name: str, *items: Expr | str) -> list[Expr | str]:
    pieces: list[Expr | str] = ["(", name]
    for item in items:
        pieces.extend((" ", item))
    pieces.append(")")
    return pieces


def dump_ast(expr: Expr, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable indented AST tree to *file*."""
    stack: list[tuple[Expr, int]] = [(expr, 0)]
    while stack:
        node, depth = stack.pop()
        label, children = _describe(node)
        file.write(f"{_indent(depth)}{label}\n")
        stack.extend((child, depth + 1) for child in reversed(children))


def _indent(depth: int) -> str:
    return "  " * depth


def _describe(expr: Expr) -> tuple[str, tuple[Expr, ...]]:
    """Label line for *expr* and its children in print order."""
    match expr:
        case Literal():
            return f"Literal {format_ast(expr)}", ()
        case Grouping(expression=inner):
            return "Grouping", (inner,)
        case Unary(operator=op, right=right):
            return f"Unary {op.lexeme} (line {op.line})", (right,)
        case Binary(left=left, operator=op, right=right):
            return f"Binary {op.lexeme} (line {op.line})", (left, right)
        case Logical(left=left, operator=op, right=right):
            return f"Logical {op.lexeme} (line {op.line})", (left, right)
        case Variable(name=name):
            return f"Variable {name.lexeme}", ()
        case Assign(name=name, value=value):
            return f"Assign {name.lexeme}", (value,)
        case Get(object=obj, name=name):
            return f"Get .{name.lexeme}", (obj,)
        case Set(object=obj, name=name, value=value):
            return f"Set .{name.lexeme}", (obj, value)
        case Call(callee=callee, arguments=args):
            return f"Call ({len(args)} args)", (callee, *args)
        case Super(method=method):
            return f"Super .{method.lexeme}", ()
        case This():
            return "This", ()
    raise TypeError(f"not an expression node: {type(expr).__name__}")
