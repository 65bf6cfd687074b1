"""
Lightweight indexer for Tailspin files without evaluating code.

We scan for top-level `define` forms and record, per name, whether it binds
a procedure `(define (f x) ...)` or a value `(define x ...)`, together with its
position. The scanner is tolerant: it works on partial or unbalanced buffers
and only extracts enough structure to power LSP features (document symbols,
completion, hover).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, Tuple

# Comments, character literals, strings (possibly unterminated), parens, quote, atoms
TOKEN_REGEX = re.compile(
    r"\s+|;.*$|#\\(?:\\[nst\\]|.)|\"(?:\\.|[^\"\\])*\"?|\(|\)|'|[^\s()\"';]+",
    re.MULTILINE,
)
CLOSED_STRING = re.compile(r"\"(?:\\.|[^\"\\])*\"")


@dataclass
class SymbolDef:
    name: str
    kind: str  # "var" | "function"
    line: int
    col: int


@dataclass
class DocumentIndex:
    symbols: Dict[str, SymbolDef] = field(default_factory=dict)
    paren_balance: int = 0
    has_unmatched_quote: bool = False


def _iter_tokens(text: str) -> Iterator[Tuple[str, int, int]]:
    for m in TOKEN_REGEX.finditer(text):
        tok = m.group(0)
        if not tok or tok.isspace() or tok.startswith(";"):
            continue
        yield tok, m.start(), m.end()


def position_from_offset(text: str, offset: int) -> Tuple[int, int]:
    """(line, col) of a string offset, both 0-based."""
    line = text.count("\n", 0, offset)
    last_nl = text.rfind("\n", 0, offset)
    col = offset if last_nl == -1 else offset - last_nl - 1
    return line, col


def build_index(text: str) -> DocumentIndex:
    idx = DocumentIndex()
    tokens = list(_iter_tokens(text))

    depth = 0
    for i, (tok, start, _) in enumerate(tokens):
        if tok == ")":
            depth -= 1
            continue
        if tok.startswith('"'):
            if CLOSED_STRING.fullmatch(tok) is None:
                idx.has_unmatched_quote = True
            continue
        if tok != "(":
            continue

        depth += 1
        if depth != 1 or i + 2 >= len(tokens) or tokens[i + 1][0] != "define":
            continue
        # (define name ...) or (define (name params...) ...)
        name_tok, name_start, _ = tokens[i + 2]
        kind = "var"
        if name_tok == "(" and i + 3 < len(tokens):
            name_tok, name_start, _ = tokens[i + 3]
            kind = "function"
        if name_tok in ("(", ")") or name_tok.startswith('"'):
            continue
        line, col = position_from_offset(text, name_start)
        idx.symbols[name_tok] = SymbolDef(name=name_tok, kind=kind, line=line, col=col)

    idx.paren_balance = depth
    return idx


# Builtin signatures for quick hover/completion details without eval
BUILTIN_SIGNATURES: Dict[str, str] = {
    "quote": "(quote datum)",
    "define": "(define name expr) | (define (name params...) body...)",
    "set!": "(set! name expr)",
    "set-car!": "(set-car! name expr)",
    "set-cdr!": "(set-cdr! name expr)",
    "if": "(if test then [else])",
    "lambda": "(lambda [name] (params...) body...)",
    "let": "(let ((name expr)...) body...)",
    "let*": "(let* ((name expr)...) body...)",
    "loop": "(loop ((name init)...) body...)",
    "recur": "(recur args...)",
    "begin": "(begin expr...)",
    "+": "(+ ints...)",
    "-": "(- ints...)",
    "*": "(* ints...)",
    "quotient": "(quotient n d...)",
    "remainder": "(remainder n d...)",
    "=": "(= a b...)",
    "<": "(< a b...)",
    "<=": "(<= a b...)",
    ">": "(> a b...)",
    ">=": "(>= a b...)",
    "eq?": "(eq? a b...)",
    "null?": "(null? x)",
    "boolean?": "(boolean? x)",
    "symbol?": "(symbol? x)",
    "integer?": "(integer? x)",
    "char?": "(char? x)",
    "string?": "(string? x)",
    "procedure?": "(procedure? x)",
    "pair?": "(pair? x)",
    "list?": "(list? x)",
    "char->integer": "(char->integer c)",
    "integer->char": "(integer->char i)",
    "number->string": "(number->string i)",
    "string->number": "(string->number s)",
    "symbol->string": "(symbol->string sym)",
    "string->symbol": "(string->symbol s)",
    "cons": "(cons a b)",
    "car": "(car pair)",
    "cdr": "(cdr pair)",
    "list": "(list xs...)",
    "symbol-space": "(symbol-space)",
}
