"""Built-in procedures for the Tailspin global frame.

This module defines arithmetic, comparison, equality, type predicates,
conversions, list operations and introspection, and the registration helper
that binds them (together with the special forms) as native procedures.

Every primitive here is eager: operands are evaluated left to right before
the primitive runs, and a Condition operand short-circuits the call.
"""

from __future__ import annotations

import logging
import operator
import re
from typing import TYPE_CHECKING, Callable

from tailspin import NativeFn
from tailspin.errors import TailspinValueError
from tailspin.evaluation.contracts import check_arity, check_arity_min, eager, expect
from tailspin.evaluation.special_forms import SPECIAL_FORMS
from tailspin.types.datum import (
    EMPTY_LIST,
    I64_MAX,
    I64_MIN,
    Datum,
    boolean,
    character,
    integer,
    is_list,
    make_list,
    pair,
    string,
    symbol,
)
from tailspin.types.environment import Environment
from tailspin.types.procedure import NativeProcedure
from tailspin.types.symbol_table import SymbolTable

if TYPE_CHECKING:
    from tailspin.interpreter import Interpreter

log = logging.getLogger("Builtins")

INTEGER_RE = re.compile(r"-?[0-9]+")


# -------------------------------
# Arithmetic
# -------------------------------
def _quotient(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def _remainder(a: int, b: int) -> int:
    """Remainder of truncating division; takes the sign of the dividend."""
    return a - b * _quotient(a, b)


def _arithmetic(name: str, op: Callable[[int, int], int], identity: int, divides: bool = False) -> NativeFn:
    """Left fold of `op` over the operands, starting from `identity`.

    With two or more operands the fold starts from the first one, so
    (- 10 3 2) is 5. With fewer it starts from the identity, so (- 5) is -5
    and (quotient 5) is 0.
    """

    @eager
    def primitive(interpreter: Interpreter, args: list[Datum]) -> Datum:
        numbers = [expect(name, "integer", a, "as_integer", interpreter) for a in args]
        if len(numbers) < 2:
            result, rest = identity, numbers
        else:
            result, rest = numbers[0], numbers[1:]
        for n in rest:
            if divides and n == 0:
                raise TailspinValueError(f"{name}: division by zero")
            result = op(result, n)
            if not I64_MIN <= result <= I64_MAX:
                raise TailspinValueError(f"{name}: integer overflow")
        return integer(result)

    return primitive


add = _arithmetic("+", operator.add, 0)
sub = _arithmetic("-", operator.sub, 0)
mul = _arithmetic("*", operator.mul, 1)
quotient = _arithmetic("quotient", _quotient, 1, divides=True)
remainder = _arithmetic("remainder", _remainder, 1, divides=True)


# -------------------------------
# Comparison and equality
# -------------------------------
def _comparison(name: str, op: Callable[[int, int], bool]) -> NativeFn:
    """Compare the first operand against each of the others: (< 1 2 3) is 1<2 and 1<3."""

    @eager
    def primitive(interpreter: Interpreter, args: list[Datum]) -> Datum:
        check_arity_min(name, args, 2)
        first, *others = [expect(name, "integer", a, "as_integer", interpreter) for a in args]
        return boolean(all(op(first, other) for other in others))

    return primitive


num_eq = _comparison("=", operator.eq)
lt = _comparison("<", operator.lt)
lte = _comparison("<=", operator.le)
gt = _comparison(">", operator.gt)
gte = _comparison(">=", operator.ge)


@eager
def is_eq(interpreter: Interpreter, args: list[Datum]) -> Datum:
    """Structural equality of every adjacent pair of operands."""
    check_arity_min("eq?", args, 2)
    return boolean(all(a == b for a, b in zip(args, args[1:])))


# -------------------------------
# Type predicates
# -------------------------------
def _predicate(name: str, test: Callable[[Datum], bool]) -> NativeFn:
    @eager
    def primitive(interpreter: Interpreter, args: list[Datum]) -> Datum:
        check_arity(name, args, 1)
        return boolean(test(args[0]))

    return primitive


is_null = _predicate("null?", lambda d: d.as_empty_list() is not None)
is_boolean = _predicate("boolean?", lambda d: d.as_boolean() is not None)
is_symbol = _predicate("symbol?", lambda d: d.as_symbol() is not None)
is_integer = _predicate("integer?", lambda d: d.as_integer() is not None)
is_char = _predicate("char?", lambda d: d.as_character() is not None)
is_string = _predicate("string?", lambda d: d.as_string() is not None)
is_procedure = _predicate(
    "procedure?", lambda d: d.as_native() is not None or d.as_procedure() is not None
)
is_pair = _predicate("pair?", lambda d: d.as_pair() is not None)
is_list_p = _predicate("list?", is_list)


# -------------------------------
# Conversions
# -------------------------------
@eager
def char_to_integer(interpreter: Interpreter, args: list[Datum]) -> Datum:
    """(char->integer c): code point of a character."""
    check_arity("char->integer", args, 1)
    return integer(ord(expect("char->integer", "char", args[0], "as_character", interpreter)))


@eager
def integer_to_char(interpreter: Interpreter, args: list[Datum]) -> Datum:
    """(integer->char i): character for a positive code point (surrogates excluded)."""
    check_arity("integer->char", args, 1)
    code = expect("integer->char", "integer", args[0], "as_integer", interpreter)
    if not 0 < code <= 0x10FFFF or 0xD800 <= code <= 0xDFFF:
        raise TailspinValueError(f"integer->char: {code} is not a valid character")
    return character(chr(code))


@eager
def number_to_string(interpreter: Interpreter, args: list[Datum]) -> Datum:
    check_arity("number->string", args, 1)
    return string(str(expect("number->string", "integer", args[0], "as_integer", interpreter)))


@eager
def string_to_number(interpreter: Interpreter, args: list[Datum]) -> Datum:
    """(string->number s): parse an optionally signed decimal integer."""
    check_arity("string->number", args, 1)
    text = expect("string->number", "string", args[0], "as_string", interpreter)
    if INTEGER_RE.fullmatch(text) is None:
        raise TailspinValueError(f"string->number: not an integer: {interpreter.to_string(args[0])}")
    value = int(text)
    if not I64_MIN <= value <= I64_MAX:
        raise TailspinValueError(f"string->number: integer overflow: {text}")
    return integer(value)


@eager
def symbol_to_string(interpreter: Interpreter, args: list[Datum]) -> Datum:
    check_arity("symbol->string", args, 1)
    symbol_id = expect("symbol->string", "symbol", args[0], "as_symbol", interpreter)
    name = interpreter.symbols.lookup(symbol_id)
    if name is None:
        raise TailspinValueError(f"symbol->string: unknown symbol id {symbol_id}")
    return string(name)


@eager
def string_to_symbol(interpreter: Interpreter, args: list[Datum]) -> Datum:
    check_arity("string->symbol", args, 1)
    text = expect("string->symbol", "string", args[0], "as_string", interpreter)
    return symbol(interpreter.symbols.intern(text))


# -------------------------------
# Lists
# -------------------------------
@eager
def cons(interpreter: Interpreter, args: list[Datum]) -> Datum:
    """(cons a b): a new pair; a proper list when b is one."""
    check_arity("cons", args, 2)
    return pair(args[0], args[1])


@eager
def car(interpreter: Interpreter, args: list[Datum]) -> Datum:
    check_arity("car", args, 1)
    head, _ = expect("car", "pair", args[0], "as_pair", interpreter)
    return head


@eager
def cdr(interpreter: Interpreter, args: list[Datum]) -> Datum:
    check_arity("cdr", args, 1)
    _, tail = expect("cdr", "pair", args[0], "as_pair", interpreter)
    return tail


@eager
def list_builtin(interpreter: Interpreter, args: list[Datum]) -> Datum:
    return make_list(args) if args else EMPTY_LIST


# -------------------------------
# Introspection
# -------------------------------
@eager
def symbol_space(interpreter: Interpreter, args: list[Datum]) -> Datum:
    """(symbol-space): every symbol visible from the current scope, innermost first."""
    check_arity("symbol-space", args, 0)
    return make_list(symbol(symbol_id) for symbol_id in interpreter.current_scope.symbol_ids())


PRIMITIVES: dict[str, NativeFn] = {
    "+": add,
    "-": sub,
    "*": mul,
    "quotient": quotient,
    "remainder": remainder,
    "=": num_eq,
    "<": lt,
    "<=": lte,
    ">": gt,
    ">=": gte,
    "eq?": is_eq,
    "null?": is_null,
    "boolean?": is_boolean,
    "symbol?": is_symbol,
    "integer?": is_integer,
    "char?": is_char,
    "string?": is_string,
    "procedure?": is_procedure,
    "pair?": is_pair,
    "list?": is_list_p,
    "char->integer": char_to_integer,
    "integer->char": integer_to_char,
    "number->string": number_to_string,
    "string->number": string_to_number,
    "symbol->string": symbol_to_string,
    "string->symbol": string_to_symbol,
    "cons": cons,
    "car": car,
    "cdr": cdr,
    "list": list_builtin,
    "symbol-space": symbol_space,
}


def register(env: Environment, symbols: SymbolTable) -> None:
    """Bind every special form and primitive into the given environment."""
    natives = {**SPECIAL_FORMS, **PRIMITIVES}
    env.update(
        {symbols.intern(name): NativeProcedure(name, fn) for name, fn in natives.items()}
    )
    log.debug("Registered %d native procedures", len(natives))
