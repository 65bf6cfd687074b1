from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from tailspin.evaluation.contracts import check_arity
from tailspin.types.datum import Datum

if TYPE_CHECKING:
    from tailspin.interpreter import Interpreter


def quote_form(interpreter: Interpreter, args: Sequence[Datum]) -> Datum:
    """(quote x): return x unevaluated."""
    check_arity("quote", args, 1)
    return args[0]
