"""Lox parser: converts a token stream into an expression AST."""

from __future__ import annotations

from collections.abc import Sequence

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
from lox.errors import ErrorReporter, ParseError
from lox.scanner import scan_tokens
from lox.tokens import Token, TokenType

DEFAULT_MAX_DEPTH = 64
MAX_ARGUMENTS = 255


class Parser:
    """Recursive descent parser for Lox expressions.

    Each grammar rule is one method; precedence comes from the order the
    rules call each other. A ParseError aborts the whole call, there is no
    resynchronization.
    """

    def __init__(
        self,
        tokens: Sequence[Token],
        reporter: ErrorReporter | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        tokens = list(tokens)
        if not tokens or tokens[-1].type != TokenType.EOF:
            line = tokens[-1].line if tokens else 1
            tokens.append(Token(TokenType.EOF, "", None, line))
        self._tokens = tokens
        self._reporter = reporter if reporter is not None else ErrorReporter()
        self._max_depth = max_depth
        self._current = 0
        self._depth = 0

    @property
    def reporter(self) -> ErrorReporter:
        return self._reporter

    def parse_expression(self) -> Expr:
        """Parse one expression from the current position.

        Tokens after a complete expression are left unconsumed.
        """
        return self._expression()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def peek(self) -> Token:
        return self._tokens[self._current]

    def previous(self) -> Token:
        return self._tokens[self._current - 1]

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def advance(self) -> Token:
        if not self.is_at_end():
            self._current += 1
        return self.previous()

    def check(self, tt: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type == tt

    def match_tokens(self, *types: TokenType) -> bool:
        """Consume the current token if it has one of *types*."""
        for tt in types:
            if self.check(tt):
                self.advance()
                return True
        return False

    def consume(self, tt: TokenType, message: str) -> Token:
        if self.check(tt):
            return self.advance()
        raise self._error(self.peek(), message)

    # ------------------------------------------------------------------
    # Grammar rules, lowest precedence first
    # ------------------------------------------------------------------

    def _expression(self) -> Expr:
        if self._depth > self._max_depth:
            raise self._error(self.peek(), "Expression nesting too deep.")
        self._depth += 1
        try:
            return self._assignment()
        finally:
            self._depth -= 1

    def _assignment(self) -> Expr:
        expr = self._or()

        if self.match_tokens(TokenType.EQUAL):
            equals = self.previous()
            value = self._expression()

            match expr:
                case Variable(name=name):
                    return Assign(name, value)
                case Get(object=obj, name=name):
                    return Set(obj, name, value)

            # Reported without aborting the parse
            self._reporter.record(ParseError("Invalid assignment target.", equals))

        return expr

    def _or(self) -> Expr:
        expr = self._and()
        while self.match_tokens(TokenType.OR):
            operator = self.previous()
            right = self._and()
            expr = Logical(expr, operator, right)
        return expr

    def _and(self) -> Expr:
        expr = self._equality()
        while self.match_tokens(TokenType.AND):
            operator = self.previous()
            right = self._equality()
            expr = Logical(expr, operator, right)
        return expr

    def _equality(self) -> Expr:
        expr = self._comparison()
        while self.match_tokens(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
            operator = self.previous()
            right = self._comparison()
            expr = Binary(expr, operator, right)
        return expr

    def _comparison(self) -> Expr:
        expr = self._term()
        while self.match_tokens(
            TokenType.GREATER,
            TokenType.GREATER_EQUAL,
            TokenType.LESS,
            TokenType.LESS_EQUAL,
        ):
            operator = self.previous()
            right = self._term()
            expr = Binary(expr, operator, right)
        return expr

    def _term(self) -> Expr:
        expr = self._factor()
        while self.match_tokens(TokenType.MINUS, TokenType.PLUS):
            operator = self.previous()
            right = self._factor()
            expr = Binary(expr, operator, right)
        return expr

    def _factor(self) -> Expr:
        expr = self._unary()
        while self.match_tokens(TokenType.SLASH, TokenType.STAR):
            operator = self.previous()
            right = self._unary()
            expr = Binary(expr, operator, right)
        return expr

    def _unary(self) -> Expr:
        # Iterative: prefix operators are folded from the innermost out
        operators: list[Token] = []
        while self.match_tokens(TokenType.BANG, TokenType.MINUS):
            operators.append(self.previous())

        expr = self._call()
        for operator in reversed(operators):
            expr = Unary(operator, expr)
        return expr

    def _call(self) -> Expr:
        expr = self._primary()
        while True:
            if self.match_tokens(TokenType.LEFT_PAREN):
                expr = self._finish_call(expr)
            elif self.match_tokens(TokenType.DOT):
                name = self.consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = Get(expr, name)
            else:
                break
        return expr

    def _finish_call(self, callee: Expr) -> Call:
        arguments: list[Expr] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self._reporter.record(
                        ParseError(f"Can't have more than {MAX_ARGUMENTS} arguments.", self.peek())
                    )
                arguments.append(self._expression())
                if not self.match_tokens(TokenType.COMMA):
                    break

        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, paren, tuple(arguments))

    def _primary(self) -> Expr:
        if self.match_tokens(TokenType.FALSE):
            return Literal(False)
        if self.match_tokens(TokenType.TRUE):
            return Literal(True)
        if self.match_tokens(TokenType.NIL):
            return Literal(None)

        if self.match_tokens(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)

        if self.match_tokens(TokenType.SUPER):
            keyword = self.previous()
            self.consume(TokenType.DOT, "Expect '.' after 'super'.")
            method = self.consume(TokenType.IDENTIFIER, "Expect superclass method name.")
            return Super(keyword, method)

        if self.match_tokens(TokenType.THIS):
            return This(self.previous())

        if self.match_tokens(TokenType.IDENTIFIER):
            return Variable(self.previous())

        if self.match_tokens(TokenType.LEFT_PAREN):
            expr = self._expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        raise self._error(self.peek(), "Expect expression.")

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _error(self, token: Token, message: str) -> ParseError:
        err = ParseError(message, token)
        self._reporter.record(err)
        return err


def parse_expression(
    tokens: Sequence[Token],
    reporter: ErrorReporter | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Expr:
    """Convenience function: parse one expression from a token list."""
    return Parser(tokens, reporter, max_depth).parse_expression()


def parse(
    source: str,
    reporter: ErrorReporter | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Expr:
    """Scan and parse source text into an expression AST."""
    if reporter is None:
        reporter = ErrorReporter()
    tokens = scan_tokens(source, reporter)
    return parse_expression(tokens, reporter, max_depth)
