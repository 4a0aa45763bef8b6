"""Tests for the LSP server: diagnostic generation."""

from __future__ import annotations

import pytest
from lsprotocol.types import (
    DiagnosticSeverity,
    PublishDiagnosticsParams,
    TextDocumentItem,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygls.workspace import Workspace

from lox.lsp import _validate, collect_diagnostics


@pytest.fixture
def lsp_env():
    """Create a LanguageServer with an initialized workspace and captured diagnostics."""
    ls = LanguageServer("test", "v0", text_document_sync_kind=TextDocumentSyncKind.Full)
    ws = Workspace(None)
    ls.protocol._workspace = ws

    published: list[PublishDiagnosticsParams] = []
    ls.text_document_publish_diagnostics = lambda params: published.append(params)

    def put(source: str, uri: str = "file:///test.lox") -> None:
        ws.put_text_document(
            TextDocumentItem(uri=uri, language_id="lox", version=0, text=source)
        )

    return ls, published, put


# ---------------------------------------------------------------------------
# Lex errors
# ---------------------------------------------------------------------------


class TestLexErrors:
    def test_unexpected_character(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("1 + @")
        _validate(ls, "file:///test.lox")

        assert len(published) == 1
        diags = published[0].diagnostics
        # '@' is skipped, then the parser finds no operand after '+'
        assert [d.message for d in diags] == ["Unexpected character.", "Expect expression."]
        d = diags[0]
        assert d.severity == DiagnosticSeverity.Error
        assert d.source == "lox"
        assert d.range.start.line == 0
        assert d.range.start.character == 4
        assert d.range.end.character == 5

    def test_multiple_lex_errors(self) -> None:
        diags = collect_diagnostics("1 $ + # 2")
        assert [d.message for d in diags] == ["Unexpected character.", "Unexpected character."]
        assert [d.range.start.character for d in diags] == [2, 6]


# ---------------------------------------------------------------------------
# Parse errors
# ---------------------------------------------------------------------------


class TestParseErrors:
    def test_unclosed_group(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("(1 + 2")
        _validate(ls, "file:///test.lox")

        diags = published[0].diagnostics
        assert len(diags) == 1
        d = diags[0]
        assert "')'" in d.message
        # Reported at end of input
        assert d.range.start.character == 6

    def test_range_covers_lexeme(self) -> None:
        diags = collect_diagnostics("1 + while")
        assert len(diags) == 1
        d = diags[0]
        assert d.range.start.character == 4
        assert d.range.end.character == 9


# ---------------------------------------------------------------------------
# Clean documents → empty diagnostics
# ---------------------------------------------------------------------------


class TestCleanDocument:
    def test_valid_expression(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("a.b(1, 2) == !c")
        _validate(ls, "file:///test.lox")

        assert len(published) == 1
        assert published[0].diagnostics == []

    def test_comment_only_document(self) -> None:
        assert collect_diagnostics("// nothing here\n/* or here */") == []


# ---------------------------------------------------------------------------
# Position conversion (1-based → 0-based)
# ---------------------------------------------------------------------------


class TestPositionConversion:
    def test_error_on_second_line(self) -> None:
        diags = collect_diagnostics("1 +\n  * 2")
        assert len(diags) == 1
        d = diags[0]
        assert d.range.start.line == 1
        assert d.range.start.character == 2

    def test_characters_counted_in_utf16_units(self) -> None:
        # The emoji is one code point but two UTF-16 code units
        diags = collect_diagnostics('"\U0001f600" @')
        assert [d.message for d in diags] == ["Unexpected character."]
        assert diags[0].range.start.character == 5
        assert diags[0].range.end.character == 6

    def test_non_bmp_lexeme_width(self) -> None:
        diags = collect_diagnostics('(1 "\U0001f600"')
        assert len(diags) == 1
        assert diags[0].range.start.character == 3
        assert diags[0].range.end.character == 7
