import logging
import os
from typing import List, Optional
from urllib.parse import unquote, urlparse

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_SAVE,
    TEXT_DOCUMENT_HOVER,
    Diagnostic as LspDiagnostic,
    DiagnosticSeverity,
    Hover,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
)
from pygls.server import LanguageServer
from pygls.workspace import Document

from pytc.config.config import BUILTIN_SIGNATURES, BUILTINS_FILE_PATH
from pytc.exceptions import InternalCheckerError
from pytc.pipeline import check_source
from pytc.type_checker.core.diagnostics import Diagnostic
from pytc.type_checker.core.symbol_table import SymbolTable
from pytc.type_checker.core.types import render_type

logger = logging.getLogger("pytc.server")

server = LanguageServer("pytc-server", "v1")


def _uri_to_path(uri: str) -> str:
    """Converts a file URI to a platform-specific file path."""
    parsed = urlparse(uri)
    return os.path.abspath(unquote(parsed.path))


def to_lsp_diagnostic(diagnostic: Diagnostic) -> LspDiagnostic:
    """LSP positions are 0-based; checker diagnostics are 1-based."""
    line = max(diagnostic.line - 1, 0)
    character = max(diagnostic.column - 1, 0)
    end_line = max((diagnostic.end_line or diagnostic.line) - 1, line)
    end_character = max((diagnostic.end_column or diagnostic.column + 1) - 1, 0)
    if end_line == line and end_character <= character:
        end_character = character + 1
    return LspDiagnostic(
        range=Range(start=Position(line=line, character=character), end=Position(line=end_line, character=end_character)),
        message=diagnostic.message,
        severity=DiagnosticSeverity.Error,
        code=diagnostic.code,
        source="pytc",
    )


def _validate(ls: LanguageServer, uri: str):
    document = ls.workspace.get_text_document(uri)
    diagnostics: List[LspDiagnostic] = []
    try:
        result = check_source(document.source, file_path=_uri_to_path(uri))
        diagnostics = [to_lsp_diagnostic(d) for d in result.diagnostics]
    except InternalCheckerError:
        logger.exception("Checking %s failed", uri)

    ls.publish_diagnostics(uri, diagnostics)


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls, params):
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls, params):
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_SAVE)
def did_save(ls, params):
    _validate(ls, params.text_document.uri)


def _get_word_at_position(document: Document, position: Position) -> str:
    if position.line >= len(document.lines):
        return ""
    line = document.lines[position.line]
    start = end = min(position.character, len(line))
    while start > 0 and (line[start - 1].isalnum() or line[start - 1] == "_"):
        start -= 1
    while end < len(line) and (line[end].isalnum() or line[end] == "_"):
        end += 1
    return line[start:end]


def hover_text(symbol_table: SymbolTable, word: str) -> Optional[str]:
    """Markdown describing a module-level (or built-in) symbol, None if the name is not bound there."""
    symbol = symbol_table.lookup(word, symbol_table.root)
    if symbol is None:
        return None

    label = symbol.kind.value.lower()
    if symbol.location.file_path == BUILTINS_FILE_PATH:
        label = f"built-in {label}"
    contents = [f"```python\n({label}) {word}: {render_type(symbol.type)}\n```"]

    doc = BUILTIN_SIGNATURES.get(word, {}).get("doc") if symbol.location.file_path == BUILTINS_FILE_PATH else None
    if doc:
        contents.extend(["---", doc["summary"]])
    return "\n".join(contents)


@server.feature(TEXT_DOCUMENT_HOVER)
def hover(ls, params):
    document = ls.workspace.get_text_document(params.text_document.uri)
    word = _get_word_at_position(document, params.position)
    if not word:
        return None

    result = check_source(document.source, file_path=_uri_to_path(params.text_document.uri))
    if result.symbol_table is None:
        return None

    text = hover_text(result.symbol_table, word)
    if text is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.Markdown, value=text))


def start_server():
    server.start_io()


if __name__ == "__main__":
    start_server()
