from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from tailspin.evaluation.contracts import check_arity_min, expect
from tailspin.types.datum import Datum
from tailspin.types.procedure import Procedure

if TYPE_CHECKING:
    from tailspin.interpreter import Interpreter


def parse_params(form: str, params: Datum, interpreter: Interpreter) -> tuple[int, ...]:
    """Symbol ids of a parameter list; every element must be a symbol."""
    items = expect(form, "list", params, "as_list", interpreter)
    return tuple(expect(form, "symbol", p, "as_symbol", interpreter) for p in items)


def make_procedure(
    interpreter: Interpreter,
    name: Optional[str],
    params: tuple[int, ...],
    body: Sequence[Datum],
) -> Procedure:
    """Close over the current scope."""
    return Procedure(name, interpreter.current_scope, params, tuple(body))


def lambda_form(interpreter: Interpreter, args: Sequence[Datum]) -> Datum:
    """
    (lambda (params...) body...)
    (lambda name (params...) body...)

    The optional name is used when printing the procedure and in arity
    messages; it is not bound inside the body.
    """
    check_arity_min("lambda", args, 2)

    name: Optional[str] = None
    name_id = args[0].as_symbol()
    if name_id is not None:
        check_arity_min("lambda", args, 3)
        name = interpreter.symbols.lookup(name_id)
        args = args[1:]

    params = parse_params("lambda", args[0], interpreter)
    return make_procedure(interpreter, name, params, args[1:])
