"""Error types and the diagnostic collector shared by scanner and parser."""

from __future__ import annotations

import sys
from typing import TextIO

from lox.tokens import Token, TokenType


class LoxError(Exception):
    """A located front-end error: ``[line N] Error {location}: message``."""

    def __init__(
        self,
        message: str,
        line: int,
        location: str = "",
        offset: int | None = None,
        length: int = 1,
    ) -> None:
        self.message = message
        self.line = line
        self.location = location
        self.offset = offset
        self.length = length
        super().__init__(self.summary())

    def summary(self) -> str:
        return f"[line {self.line}] Error {self.location}: {self.message}"

    def column(self, source: str) -> int:
        """1-based column of the error within *source*, or 1 if unknown."""
        if self.offset is None:
            return 1
        return self.offset - source.rfind("\n", 0, self.offset)

    def format(self, source: str | None = None, filename: str = "<script>") -> str:
        """Summary line, followed by a source excerpt when *source* is given."""
        if source is None or self.offset is None:
            return self.summary()

        lines = source.splitlines()
        line_idx = self.line - 1
        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\r")
        else:
            source_line = ""

        col = self.column(source)
        # Underline the lexeme, clipped to the end of the line
        underline_len = max(1, min(self.length, len(source_line) - col + 1))
        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(self.line)
        gutter_width = len(line_num) + 1
        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"{self.summary()}\n"
            f"{' ' * gutter_width}--> {filename}:{self.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )


class LexError(LoxError):
    """Unexpected character or unterminated string. Recorded, never raised."""

    def __init__(self, message: str, line: int, offset: int | None = None) -> None:
        super().__init__(message, line, "", offset, 1)


class ParseError(LoxError):
    """Raised when the token stream does not match the expression grammar."""

    def __init__(self, message: str, token: Token) -> None:
        self.token = token
        if token.type == TokenType.EOF:
            location = "at end"
        else:
            location = f"at '{token.lexeme}'"
        super().__init__(message, token.line, location, token.offset, max(1, len(token.lexeme)))


class ErrorReporter:
    """Collects errors from scan and parse calls and marks failure.

    Each recorded error is written immediately to *stream* (``sys.stderr``
    when None, looked up at write time). When *source* is set the output
    includes a source excerpt under the summary line.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        *,
        source: str | None = None,
        filename: str = "<script>",
        quiet: bool = False,
    ) -> None:
        self.stream = stream
        self.source = source
        self.filename = filename
        self.quiet = quiet
        self.errors: list[LoxError] = []
        self.had_error = False

    def error(self, line: int, message: str) -> LexError:
        """Record an error that has no token location."""
        err = LexError(message, line)
        self.record(err)
        return err

    def report(self, line: int, location: str, message: str) -> LoxError:
        err = LoxError(message, line, location)
        self.record(err)
        return err

    def record(self, err: LoxError) -> None:
        self.errors.append(err)
        self.had_error = True
        if self.quiet:
            return
        out = self.stream if self.stream is not None else sys.stderr
        print(err.format(self.source, self.filename), file=out)

    def reset(self) -> None:
        """Forget previous errors (between REPL lines)."""
        self.errors.clear()
        self.had_error = False
