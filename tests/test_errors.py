"""Test error summaries, source excerpts, and the error reporter."""

from __future__ import annotations

import io

from lox.errors import ErrorReporter, LexError, LoxError, ParseError
from lox.scanner import scan_tokens
from lox.tokens import Token, TokenType


class TestSummary:
    def test_lex_error_has_no_location(self):
        assert LexError("Unexpected character.", 3).summary() == (
            "[line 3] Error : Unexpected character."
        )

    def test_parse_error_at_token(self):
        tok = Token(TokenType.IDENTIFIER, "foo", None, 2, 10)
        err = ParseError("Expect expression.", tok)
        assert str(err) == "[line 2] Error at 'foo': Expect expression."
        assert err.length == 3

    def test_parse_error_at_end(self):
        tok = Token(TokenType.EOF, "", None, 5, 40)
        err = ParseError("Expect expression.", tok)
        assert err.summary() == "[line 5] Error at end: Expect expression."
        assert err.length == 1

    def test_report_location_passthrough(self):
        err = LoxError("msg", 1, "at 'x'")
        assert err.summary() == "[line 1] Error at 'x': msg"


class TestFormatting:
    def test_without_source_is_summary(self):
        err = LexError("Unexpected character.", 1, 0)
        assert err.format() == err.summary()

    def test_format_contains_source_line(self):
        source = "var a = 1;\nprint a @ b;"
        err = LexError("Unexpected character.", 2, source.index("@"))
        formatted = err.format(source, "demo.lox")
        assert formatted.startswith("[line 2] Error : Unexpected character.")
        assert "print a @ b;" in formatted
        assert "--> demo.lox:2:9" in formatted

    def test_carets_under_lexeme(self):
        source = "1 + foo"
        tok = Token(TokenType.IDENTIFIER, "foo", None, 1, 4)
        formatted = ParseError("Expect ')'.", tok).format(source)
        last = formatted.splitlines()[-1]
        assert last.endswith("    ^^^")

    def test_column(self):
        source = "ab\ncd"
        assert LexError("x", 2, 4).column(source) == 2
        assert LexError("x", 1, 0).column(source) == 1
        assert LexError("x", 1).column(source) == 1


class TestReporter:
    def test_error_marks_failure(self):
        reporter = ErrorReporter(quiet=True)
        assert not reporter.had_error
        err = reporter.error(4, "Something odd.")
        assert reporter.had_error
        assert reporter.errors == [err]
        assert err.line == 4

    def test_report_writes_format(self):
        out = io.StringIO()
        reporter = ErrorReporter(out)
        reporter.report(7, "at 'x'", "Bad thing.")
        assert out.getvalue() == "[line 7] Error at 'x': Bad thing.\n"

    def test_error_writes_empty_location(self):
        out = io.StringIO()
        ErrorReporter(out).error(1, "Unexpected character.")
        assert out.getvalue() == "[line 1] Error : Unexpected character.\n"

    def test_default_stream_is_stderr(self, capsys):
        ErrorReporter(None).error(2, "shown")
        assert capsys.readouterr().err == "[line 2] Error : shown\n"

    def test_quiet_writes_nothing(self, capsys):
        reporter = ErrorReporter(quiet=True)
        reporter.error(1, "hidden")
        captured = capsys.readouterr()
        assert captured.err == ""
        assert captured.out == ""

    def test_reset(self):
        reporter = ErrorReporter(quiet=True)
        reporter.error(1, "x")
        reporter.reset()
        assert not reporter.had_error
        assert reporter.errors == []

    def test_writes_excerpt_when_source_known(self):
        out = io.StringIO()
        source = "1 + $"
        reporter = ErrorReporter(out, source=source, filename="t.lox")
        scan_tokens(source, reporter)
        text = out.getvalue()
        assert text.startswith("[line 1] Error : Unexpected character.\n")
        assert "t.lox:1:5" in text

    def test_errors_written_in_order(self):
        out = io.StringIO()
        scan_tokens("@\n#", ErrorReporter(out))
        assert out.getvalue().splitlines() == [
            "[line 1] Error : Unexpected character.",
            "[line 2] Error : Unexpected character.",
        ]
