"""Lox scanner: converts source text into a flat token stream."""

from __future__ import annotations

from lox.errors import ErrorReporter, LexError
from lox.tokens import (
    KEYWORDS,
    LiteralValue,
    Token,
    TokenType,
    is_alpha,
    is_alphanumeric,
    is_digit,
)

_SINGLE_CHAR: dict[str, TokenType] = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
}

# char -> (type without '=', type with '=')
_WITH_EQUAL: dict[str, tuple[TokenType, TokenType]] = {
    "!": (TokenType.BANG, TokenType.BANG_EQUAL),
    "=": (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    "<": (TokenType.LESS, TokenType.LESS_EQUAL),
    ">": (TokenType.GREATER, TokenType.GREATER_EQUAL),
}


class Scanner:
    """Tokenize Lox source text into a list of Token objects.

    Errors are recorded on *reporter* and scanning carries on with the next
    character, so later valid tokens are still produced.
    """

    def __init__(self, source: str, reporter: ErrorReporter | None = None) -> None:
        self._source = source
        self._reporter = reporter if reporter is not None else ErrorReporter()
        self._tokens: list[Token] = []
        self._start = 0
        self._current = 0
        self._line = 1

    @property
    def reporter(self) -> ErrorReporter:
        return self._reporter

    def scan_tokens(self) -> list[Token]:
        """Scan the full source and return the token list, EOF last."""
        while not self._is_at_end():
            self._start = self._current
            self._scan_token()

        self._tokens.append(Token(TokenType.EOF, "", None, self._line, len(self._source)))
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _is_at_end(self) -> bool:
        return self._current >= len(self._source)

    def _peek(self, offset: int = 0) -> str:
        idx = self._current + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._current]
        self._current += 1
        return ch

    def _match(self, expected: str) -> bool:
        if self._peek() != expected:
            return False
        self._current += 1
        return True

    def _add_token(self, tt: TokenType, literal: LiteralValue = None, line: int | None = None) -> None:
        text = self._source[self._start : self._current]
        if line is None:
            line = self._line
        self._tokens.append(Token(tt, text, literal, line, self._start))

    def _error(self, message: str) -> None:
        self._reporter.record(LexError(message, self._line, self._start))

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        ch = self._advance()

        if ch in _SINGLE_CHAR:
            self._add_token(_SINGLE_CHAR[ch])
            return

        if ch in _WITH_EQUAL:
            plain, with_equal = _WITH_EQUAL[ch]
            self._add_token(with_equal if self._match("=") else plain)
            return

        if ch == "/":
            if self._match("/"):
                self._skip_line_comment()
            elif self._match("*"):
                self._skip_block_comment()
            else:
                self._add_token(TokenType.SLASH)
            return

        if ch in " \r\t":
            return

        if ch == "\n":
            self._line += 1
            return

        if ch == '"':
            self._string()
            return

        if is_digit(ch):
            self._number()
            return

        if is_alpha(ch):
            self._identifier()
            return

        self._error("Unexpected character.")

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _skip_line_comment(self) -> None:
        # The newline itself is left for the main loop to count
        while self._peek() != "\n" and not self._is_at_end():
            self._advance()

    def _skip_block_comment(self) -> None:
        """Skip to the first '*/'. Block comments do not nest."""
        while not self._is_at_end():
            if self._peek() == "*" and self._peek(1) == "/":
                self._current += 2
                return
            if self._advance() == "\n":
                self._line += 1

    # ------------------------------------------------------------------
    # Literals and identifiers
    # ------------------------------------------------------------------

    def _string(self) -> None:
        start_line = self._line
        while self._peek() != '"' and not self._is_at_end():
            if self._advance() == "\n":
                self._line += 1

        if self._is_at_end():
            self._reporter.record(LexError("Unterminated string.", self._line, self._current))
            return

        self._advance()  # closing quote
        value = self._source[self._start + 1 : self._current - 1]
        self._add_token(TokenType.STRING, value, start_line)

    def _number(self) -> None:
        while is_digit(self._peek()):
            self._advance()

        # A trailing '.' without a digit after it belongs to the next token
        if self._peek() == "." and is_digit(self._peek(1)):
            self._advance()
            while is_digit(self._peek()):
                self._advance()

        text = self._source[self._start : self._current]
        self._add_token(TokenType.NUMBER, float(text))

    def _identifier(self) -> None:
        while is_alphanumeric(self._peek()):
            self._advance()

        text = self._source[self._start : self._current]
        tt = KEYWORDS.get(text, TokenType.IDENTIFIER)
        if tt == TokenType.TRUE:
            self._add_token(tt, True)
        elif tt == TokenType.FALSE:
            self._add_token(tt, False)
        else:
            # NIL and every other keyword or identifier carry no payload
            self._add_token(tt)


def scan_tokens(source: str, reporter: ErrorReporter | None = None) -> list[Token]:
    """Convenience function: scan source text and return token list."""
    return Scanner(source, reporter).scan_tokens()
