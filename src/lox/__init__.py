"""Lox scanner and expression parser."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lox.ast import Expr
    from lox.errors import ErrorReporter

__version__ = "0.1.0"


def parse(source: str, reporter: ErrorReporter | None = None) -> Expr:
    """Scan and parse Lox source text into an expression AST."""
    from lox.parser import parse as _parse

    return _parse(source, reporter)
