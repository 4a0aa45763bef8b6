"""Minimal LSP server for Lox: diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from lox import __version__
from lox.errors import ErrorReporter, LoxError, ParseError
from lox.parser import parse_expression
from lox.scanner import scan_tokens

server = LanguageServer("lox-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)


def _utf16_len(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def _to_diagnostic(err: LoxError, source: str) -> Diagnostic:
    # LSP characters are UTF-16 code units, not code points
    line = err.line - 1
    if err.offset is None:
        start = 0
        width = err.length
    else:
        line_start = source.rfind("\n", 0, err.offset) + 1
        start = _utf16_len(source[line_start : err.offset])
        width = max(1, _utf16_len(source[err.offset : err.offset + err.length]))
    return Diagnostic(
        range=Range(
            start=Position(line=line, character=start),
            end=Position(line=line, character=start + width),
        ),
        message=err.message,
        severity=DiagnosticSeverity.Error,
        source="lox",
    )


def collect_diagnostics(source: str) -> list[Diagnostic]:
    """Scan and parse *source*, returning one diagnostic per reported error."""
    reporter = ErrorReporter(quiet=True)
    tokens = scan_tokens(source, reporter)
    # A document with nothing but comments and whitespace is not an error
    if len(tokens) > 1:
        try:
            parse_expression(tokens, reporter)
        except ParseError:
            pass  # recorded on the reporter
    return [_to_diagnostic(err, source) for err in reporter.errors]


def _validate(ls: LanguageServer, uri: str) -> None:
    """Run the scanner and parser and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    diagnostics = collect_diagnostics(doc.source)
    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
