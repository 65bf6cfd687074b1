"""Static tail-position check for `recur`.

Runs once over the parsed program before anything is evaluated. Each
sub-expression is classified by two flags: whether it is in tail position,
and whether the nearest enclosing tail-admitting construct (a `loop` body, a
`lambda` body or the body of `(define (f ...) ...)`) allows `recur`.

    top level             tail, recur not allowed
    (if c a b)            c non-tail; a and b inherit
    (begin ... e)         e inherits, the rest non-tail
    (let/let* binds ... e)  binding values non-tail; e inherits
    (loop binds ... e)    binding values non-tail; e tail and allowed
    (lambda ... e)        e tail and allowed
    (define (f ...) ... e)  e tail and allowed
    (define x v), (set! x v)  v non-tail, not allowed
    (quote x)             not inspected
    (recur a ...)         must be tail and allowed; operands non-tail
    (f a ...)             every element non-tail
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from tailspin.errors import NestingTooDeep, RecurInNonTailPosition
from tailspin.types.datum import Datum
from tailspin.types.symbol_table import SymbolTable, symbol_id_for

QUOTE = symbol_id_for("quote")
RECUR = symbol_id_for("recur")
IF = symbol_id_for("if")
BEGIN = symbol_id_for("begin")
LET_FORMS = frozenset([symbol_id_for("let"), symbol_id_for("let*")])
LOOP = symbol_id_for("loop")
LAMBDA = symbol_id_for("lambda")
DEFINE = symbol_id_for("define")
SET_FORMS = frozenset(
    [symbol_id_for("set!"), symbol_id_for("set-car!"), symbol_id_for("set-cdr!")]
)


class TailVerifier:
    def __init__(self, symbols: Optional[SymbolTable] = None):
        self.symbols = symbols

    def verify(self, forms: Iterable[Datum]) -> None:
        for form in forms:
            self.walk(form, tail=True, allowed=False)

    def walk(self, datum: Datum, tail: bool, allowed: bool) -> None:
        items = datum.as_list()
        if not items:
            # atoms, (), dotted forms
            return

        head = items[0].as_symbol()
        args = items[1:]

        if head == QUOTE:
            return
        if head == RECUR:
            if not (tail and allowed):
                raise RecurInNonTailPosition(datum.to_string(self.symbols))
            self.walk_all(args, allowed)
        elif head == IF:
            if args:
                self.walk(args[0], False, allowed)
            for branch in args[1:3]:
                self.walk(branch, tail, allowed)
            self.walk_all(args[3:], allowed)
        elif head == BEGIN:
            self.walk_body(args, tail, allowed)
        elif head in LET_FORMS:
            self.walk_all(args[:1], allowed)
            self.walk_body(args[1:], tail, allowed)
        elif head == LOOP:
            self.walk_all(args[:1], allowed)
            self.walk_body(args[1:], True, True)
        elif head == LAMBDA:
            # optional name before the parameter list
            body = args[2:] if args and args[0].as_symbol() is not None else args[1:]
            self.walk_body(body, True, True)
        elif head == DEFINE:
            if args and args[0].as_pair() is not None:
                self.walk_body(args[1:], True, True)
            else:
                self.walk_all(args[1:], False)
        elif head in SET_FORMS:
            self.walk_all(args[1:], False)
        else:
            self.walk_all(items, allowed)

    def walk_all(self, exprs: Sequence[Datum], allowed: bool) -> None:
        """Walk expressions that are all in non-tail position.

        Binding lists go through here as well: walked like calls, every
        value in them ends up non-tail.
        """
        for expr in exprs:
            self.walk(expr, False, allowed)

    def walk_body(self, body: Sequence[Datum], tail: bool, allowed: bool) -> None:
        self.walk_all(body[:-1], allowed)
        if body:
            self.walk(body[-1], tail, allowed)


def verify(forms: Datum | Iterable[Datum], symbols: Optional[SymbolTable] = None) -> None:
    """Raise RecurInNonTailPosition if any `recur` in `forms` is misplaced.

    Raises NestingTooDeep when the forms nest deeper than the host stack.
    """
    if isinstance(forms, Datum):
        forms = [forms]
    try:
        TailVerifier(symbols).verify(forms)
    except RecursionError:
        raise NestingTooDeep("nesting too deep", hint="split the expression into smaller definitions") from None
