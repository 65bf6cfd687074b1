from __future__ import annotations

import logging

from tailspin.builtin.env_builtin import register
from tailspin.errors import TailspinRuntimeError
from tailspin.evaluation.evaluator import RECUR_NOT_IN_TAIL, evaluate
from tailspin.evaluation.verifier import verify
from tailspin.reader.parser import parse_program
from tailspin.types.datum import EMPTY_LIST, Datum, condition_message
from tailspin.types.environment import Environment
from tailspin.types.symbol_table import SymbolTable

log = logging.getLogger("Interpreter")


class Interpreter:
    """
    Orchestrates reading, verifying and evaluating Tailspin code.
    Maintains a SymbolTable and the global Environment across calls.

    Evaluation state lives here: `current_scope` is swapped by closures,
    `let` and `loop`, and `recur_pending` is raised by `recur` until the
    enclosing trampoline consumes the signal.
    """

    def __init__(self) -> None:
        self.symbols = SymbolTable()
        self.global_scope = Environment()
        register(self.global_scope, self.symbols)
        self.current_scope: Environment = self.global_scope
        self.recur_pending = False
        log.debug("Interpreter ready with %d global bindings", len(self.global_scope.vars))

    def to_string(self, datum: Datum) -> str:
        return datum.to_string(self.symbols)

    def names(self) -> list[str]:
        """Names visible from the current scope, innermost first."""
        names = (self.symbols.lookup(i) for i in self.current_scope.symbol_ids())
        return [name for name in names if name is not None]

    def parse(self, code: str) -> list[Datum]:
        """Read and verify every top-level form. Raises TailspinSyntaxError."""
        forms = parse_program(code, self.symbols)
        verify(forms, self.symbols)
        return forms

    def evaluate(self, datum: Datum) -> Datum:
        """Evaluate one top-level form. User errors come back as Conditions."""
        self.recur_pending = False
        scope = self.current_scope
        try:
            result = evaluate(datum, self)
        except RecursionError:
            self.current_scope = scope
            log.warning("Host recursion limit reached while evaluating %s", self.to_string(datum))
            return condition_message("maximum recursion depth exceeded")
        finally:
            self.recur_pending = False

        if result.as_recur() is not None:
            return condition_message(RECUR_NOT_IN_TAIL)
        return result

    def eval(self, code: str) -> Datum:
        """Parse, verify and evaluate `code`; the value of the last form, or ().

        Stops at the first form that evaluates to a Condition and returns it.
        """
        result: Datum = EMPTY_LIST
        for form in self.parse(code):
            result = self.evaluate(form)
            if result.as_condition() is not None:
                break
        return result

    def run(self, code: str) -> Datum:
        """Like `eval`, but a Condition result raises TailspinRuntimeError."""
        result = self.eval(code)
        payload = result.as_condition()
        if payload is not None:
            message = payload.as_string()
            if message is None:
                message = self.to_string(payload)
            log.warning("Program halted: %s", message)
            raise TailspinRuntimeError(message, result)
        return result
