"""Datum: the single immutable value type of Tailspin.

A Datum represents both program syntax and runtime data. Every case is a
small frozen class; callers never inspect the Python class directly but use
the optional typed accessors (`as_integer`, `as_pair`, ...), which return
None when the tag does not match.

Printing needs the SymbolTable to turn symbol ids back into names, so every
Datum renders through `to_string(symbols)`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from tailspin.types.procedure import NativeProcedure, Procedure
    from tailspin.types.symbol_table import SymbolTable


I64_MIN = -(2**63)
I64_MAX = 2**63 - 1

# char -> letter written after the backslash
CHAR_ESCAPES: dict[str, str] = {"\n": "n", " ": "s", "\t": "t", "\\": "\\"}
STRING_ESCAPES: dict[str, str] = {"\n": "\\n", "\t": "\\t", '"': '\\"', "\\": "\\\\"}


class Datum:
    """Base of the closed Datum variant. Accessors default to "no match"."""

    __slots__ = ()

    def as_boolean(self) -> Optional[bool]:
        return None

    def as_character(self) -> Optional[str]:
        return None

    def as_integer(self) -> Optional[int]:
        return None

    def as_string(self) -> Optional[str]:
        return None

    def as_symbol(self) -> Optional[int]:
        return None

    def as_empty_list(self) -> Optional[EmptyList]:
        return None

    def as_pair(self) -> Optional[tuple[Datum, Datum]]:
        return None

    def as_list(self) -> Optional[list[Datum]]:
        """Elements of a proper list; [] for the empty list, None otherwise."""
        return None

    def as_native(self) -> Optional[NativeProcedure]:
        return None

    def as_procedure(self) -> Optional[Procedure]:
        return None

    def as_condition(self) -> Optional[Datum]:
        return None

    def as_recur(self) -> Optional[tuple[Datum, ...]]:
        return None

    def to_string(self, symbols: Optional[SymbolTable] = None) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True, slots=True)
class Boolean(Datum):
    value: bool

    def as_boolean(self) -> Optional[bool]:
        return self.value

    def to_string(self, symbols: Optional[SymbolTable] = None) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True, slots=True)
class Character(Datum):
    value: str

    def as_character(self) -> Optional[str]:
        return self.value

    def to_string(self, symbols: Optional[SymbolTable] = None) -> str:
        escaped = CHAR_ESCAPES.get(self.value)
        if escaped is not None:
            return f"#\\\\{escaped}"
        return f"#\\{self.value}"


@dataclass(frozen=True, slots=True)
class Integer(Datum):
    value: int

    def as_integer(self) -> Optional[int]:
        return self.value

    def to_string(self, symbols: Optional[SymbolTable] = None) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class String(Datum):
    value: str

    def as_string(self) -> Optional[str]:
        return self.value

    def to_string(self, symbols: Optional[SymbolTable] = None) -> str:
        body = "".join(STRING_ESCAPES.get(c, c) for c in self.value)
        return f'"{body}"'


@dataclass(frozen=True, slots=True)
class Symbol(Datum):
    id: int

    def as_symbol(self) -> Optional[int]:
        return self.id

    def to_string(self, symbols: Optional[SymbolTable] = None) -> str:
        name = symbols.lookup(self.id) if symbols is not None else None
        if name is None:
            return f"[SYMBOL: {self.id}]"
        return name


@dataclass(frozen=True, slots=True)
class EmptyList(Datum):
    """The list terminator. All instances compare equal."""

    def as_empty_list(self) -> Optional[EmptyList]:
        return self

    def as_list(self) -> Optional[list[Datum]]:
        return []

    def to_string(self, symbols: Optional[SymbolTable] = None) -> str:
        return "()"


@dataclass(frozen=True, slots=True, eq=False)
class Pair(Datum):
    head: Datum
    tail: Datum

    def as_pair(self) -> Optional[tuple[Datum, Datum]]:
        return self.head, self.tail

    def as_list(self) -> Optional[list[Datum]]:
        items: list[Datum] = []
        node: Datum = self
        while isinstance(node, Pair):
            items.append(node.head)
            node = node.tail
        if isinstance(node, EmptyList):
            return items
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pair):
            return NotImplemented
        # Walk tails iteratively so long lists do not exhaust the host stack
        a: Datum = self
        b: Datum = other
        while isinstance(a, Pair) and isinstance(b, Pair):
            if a is b:
                return True
            if a.head != b.head:
                return False
            a, b = a.tail, b.tail
        return a == b

    __hash__ = None  # type: ignore[assignment]

    def to_string(self, symbols: Optional[SymbolTable] = None) -> str:
        parts = [self.head.to_string(symbols)]
        node = self.tail
        while isinstance(node, Pair):
            parts.append(node.head.to_string(symbols))
            node = node.tail
        if isinstance(node, EmptyList):
            return f"({' '.join(parts)})"
        return f"({' '.join(parts)} . {node.to_string(symbols)})"


@dataclass(frozen=True, slots=True)
class Condition(Datum):
    """An error value. Propagates like any other result; not an exception."""

    payload: Datum

    def as_condition(self) -> Optional[Datum]:
        return self.payload

    def to_string(self, symbols: Optional[SymbolTable] = None) -> str:
        return f"[CONDITION: {self.payload.to_string(symbols)}]"


@dataclass(frozen=True, slots=True)
class RecurSignal(Datum):
    """Evaluated arguments of a `recur` form, waiting for the enclosing trampoline."""

    args: tuple[Datum, ...]

    def as_recur(self) -> Optional[tuple[Datum, ...]]:
        return self.args

    def to_string(self, symbols: Optional[SymbolTable] = None) -> str:
        return f"[RECUR: {make_list(self.args).to_string(symbols)}]"


# -------------------------------
# Constructors
# -------------------------------
EMPTY_LIST = EmptyList()
TRUE = Boolean(True)
FALSE = Boolean(False)


def boolean(x: bool) -> Boolean:
    return TRUE if x else FALSE


def character(c: str) -> Character:
    if len(c) != 1:
        raise ValueError(f"a character holds exactly one code point, got {c!r}")
    return Character(c)


def integer(x: int) -> Integer:
    if not I64_MIN <= x <= I64_MAX:
        raise OverflowError(f"{x} does not fit in a signed 64-bit integer")
    return Integer(x)


def string(s: str) -> String:
    return String(s)


def symbol(symbol_id: int) -> Symbol:
    return Symbol(symbol_id)


def empty_list() -> EmptyList:
    return EMPTY_LIST


def pair(head: Datum, tail: Datum) -> Pair:
    return Pair(head, tail)


def make_list(items: Iterable[Datum], tail: Datum = EMPTY_LIST) -> Datum:
    """Build a list from `items`, ending in `tail` (dotted when tail is not ())."""
    result = tail
    for item in reversed(list(items)):
        result = Pair(item, result)
    return result


def condition(payload: Datum) -> Condition:
    return Condition(payload)


def condition_message(text: str) -> Condition:
    return Condition(String(text))


def recur_signal(args: Iterable[Datum]) -> RecurSignal:
    return RecurSignal(tuple(args))


def is_list(datum: Datum) -> bool:
    """Structural list test: follow tails until () (a list) or a non-pair (not one)."""
    node = datum
    while True:
        if node.as_empty_list() is not None:
            return True
        p = node.as_pair()
        if p is None:
            return False
        node = p[1]
