"""
A minimal pygls-based Language Server for Tailspin.

Features:
- Text synchronization and document store
- Diagnostics: reader errors and misplaced `recur`, with source ranges
- Hover: builtin signatures and locally defined symbols
- Completion: global names, document definitions, missing closing parens
- Document Symbols: from indexer

Note: We avoid evaluating the buffer. Diagnostics come from parsing and
verifying it; everything else from a static index.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
    SymbolKind,
    TextDocumentContentChangeEvent,
    TextDocumentSyncKind,
)
from pygls.server import LanguageServer
from pygls.workspace import TextDocument

from tailspin import __version__
from tailspin.errors import TailspinSyntaxError
from tailspin.interpreter import Interpreter
from tailspin.repl import closing_parens
from tailspin_lsp.indexer import BUILTIN_SIGNATURES, DocumentIndex, build_index, position_from_offset

log = logging.getLogger("LanguageServer")

SOURCE = "tailspin-ls"


@dataclass
class DocumentState:
    text: str
    index: DocumentIndex


class TailspinLanguageServer(LanguageServer):
    CMD_NAME = "tailspin-ls"

    def __init__(self):
        super().__init__(
            self.CMD_NAME, __version__, text_document_sync_kind=TextDocumentSyncKind.Incremental
        )
        self.documents: Dict[str, DocumentState] = {}
        # Names bound in a fresh global frame: special forms and primitives
        self.global_names: List[str] = sorted(Interpreter().names())


ls = TailspinLanguageServer()


# --- Diagnostics ---
def _mk_range(text: str, start: int, end: int) -> Range:
    end = max(end, start + 1)
    start_line, start_col = position_from_offset(text, start)
    end_line, end_col = position_from_offset(text, end)
    return Range(
        start=Position(line=start_line, character=start_col),
        end=Position(line=end_line, character=end_col),
    )


def collect_diagnostics(text: str) -> List[Diagnostic]:
    """Parse and verify `text` the way the interpreter would, without evaluating."""
    try:
        Interpreter().parse(text)
    except TailspinSyntaxError as err:
        message = err.message if not err.hint else f"{err.message} ({err.hint})"
        start = err.start if err.start is not None else 0
        end = err.end if err.end is not None else start
        return [
            Diagnostic(
                range=_mk_range(text, start, end),
                message=message,
                severity=DiagnosticSeverity.Error,
                source=SOURCE,
            )
        ]
    return []


def _publish_diagnostics(uri: str):
    ls.publish_diagnostics(uri, collect_diagnostics(ls.documents[uri].text))


# --- Text sync ---
def _store(uri: str, text: str):
    ls.documents[uri] = DocumentState(text=text, index=build_index(text))
    _publish_diagnostics(uri)


@ls.feature("textDocument/didOpen")
def did_open(params: DidOpenTextDocumentParams):
    _store(params.text_document.uri, params.text_document.text or "")


def apply_content_changes(uri: str, text: str, changes: List[TextDocumentContentChangeEvent]) -> str:
    """Apply ranged or whole-document changes, in order, to `text`."""
    document = TextDocument(uri, text, sync_kind=TextDocumentSyncKind.Incremental)
    for change in changes:
        document.apply_change(change)
    return document.source


@ls.feature("textDocument/didChange")
def did_change(params: DidChangeTextDocumentParams):
    uri = params.text_document.uri
    text = ls.documents[uri].text if uri in ls.documents else ""
    _store(uri, apply_content_changes(uri, text, params.content_changes))


@ls.feature("textDocument/didClose")
def did_close(params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    ls.documents.pop(uri, None)
    ls.publish_diagnostics(uri, [])


# --- Hover ---
def hover_text(index: DocumentIndex, word: str) -> Optional[str]:
    if word in BUILTIN_SIGNATURES:
        return BUILTIN_SIGNATURES[word]
    sdef = index.symbols.get(word)
    if sdef is not None:
        return f"{word}: {sdef.kind} (defined at {sdef.line + 1}:{sdef.col + 1})"
    return None


@ls.feature("textDocument/hover")
def on_hover(params: HoverParams) -> Optional[Hover]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None

    word = extract_word_at(state.text, params.position.line, params.position.character)
    contents = hover_text(state.index, word) if word else None
    if contents is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


# --- Completion ---
def completion_items(state: DocumentState, line_prefix: str, global_names: List[str]) -> List[CompletionItem]:
    items: List[CompletionItem] = []
    for name in global_names:
        items.append(
            CompletionItem(label=name, kind=CompletionItemKind.Function, detail=BUILTIN_SIGNATURES.get(name))
        )
    for name in state.index.symbols:
        if name not in BUILTIN_SIGNATURES:
            items.append(CompletionItem(label=name, kind=CompletionItemKind.Variable))
    parens = closing_parens(line_prefix)
    if parens:
        items.append(CompletionItem(label=parens, kind=CompletionItemKind.Text, detail="close open parens"))
    return items


@ls.feature("textDocument/completion", CompletionOptions(trigger_characters=["("]))
def on_completion(params: CompletionParams) -> CompletionList:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return CompletionList(is_incomplete=False, items=[])
    prefix = get_line_prefix(state.text, params.position.line, params.position.character)
    return CompletionList(is_incomplete=False, items=completion_items(state, prefix, ls.global_names))


# --- Document Symbols ---
@ls.feature("textDocument/documentSymbol")
def on_document_symbols(params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    symbols: List[DocumentSymbol] = []
    for name, sdef in state.index.symbols.items():
        rng = Range(
            start=Position(line=sdef.line, character=sdef.col),
            end=Position(line=sdef.line, character=sdef.col + len(name)),
        )
        symbols.append(
            DocumentSymbol(
                name=name,
                kind=SymbolKind.Function if sdef.kind == "function" else SymbolKind.Variable,
                range=rng,
                selection_range=rng,
            )
        )
    return symbols


# --- Helpers ---
def get_line_prefix(text: str, line: int, character: int) -> str:
    # Return the text from start of line up to the cursor
    lines = text.splitlines(True)
    if line >= len(lines):
        return ""
    return lines[line][:character]


def extract_word_at(text: str, line: int, character: int) -> Optional[str]:
    lines = text.splitlines(True)
    if line >= len(lines):
        return None
    line_text = lines[line]
    start = character
    while start > 0 and line_text[start - 1] not in " \t()\n\r'\"":
        start -= 1
    end = character
    while end < len(line_text) and line_text[end] not in " \t()\n\r'\"":
        end += 1
    return line_text[start:end] or None


if __name__ == "__main__":
    # Run the language server over stdio
    ls.start_io()
