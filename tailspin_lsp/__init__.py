"""Tailspin Language Server and REPL integration package.

This package provides:
- A pygls-based Language Server for the Tailspin dialect.
- A lightweight indexer that scans documents for top-level definitions without evaluation.
- A simple TCP REPL server to evaluate code via the existing Interpreter.

Note: The LSP does not evaluate user buffers. Diagnostics come from the reader
and the tail-position verifier; everything else from a static index.
"""

__all__ = [
    "server",
    "indexer",
    "repl_server",
]
