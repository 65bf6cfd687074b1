from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from tailspin.evaluation.contracts import check_arity_min
from tailspin.evaluation.evaluator import evaluate_body
from tailspin.types.datum import Datum

if TYPE_CHECKING:
    from tailspin.interpreter import Interpreter


def begin_form(interpreter: Interpreter, args: Sequence[Datum]) -> Datum:
    """(begin e1 e2 ...): evaluate in order, return the last value.

    The last expression stays in tail position, so `recur` may end a begin
    inside a loop or lambda body.
    """
    check_arity_min("begin", args, 1)
    return evaluate_body(args, interpreter)
