"""Callable Datum cases: native procedures and closures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from tailspin import NativeFn
from tailspin.types.datum import Datum

if TYPE_CHECKING:
    from tailspin.types.environment import Environment
    from tailspin.types.symbol_table import SymbolTable


@dataclass(frozen=True, slots=True)
class NativeProcedure(Datum):
    """A built-in operation. Receives the interpreter and the raw (unevaluated)
    argument expressions, so it decides itself what to evaluate and when."""

    name: str
    fn: NativeFn

    def as_native(self) -> Optional[NativeProcedure]:
        return self

    def to_string(self, symbols: Optional[SymbolTable] = None) -> str:
        return f"[NATIVE_PROC: {self.name}]"


@dataclass(frozen=True, slots=True, eq=False)
class Procedure(Datum):
    """A closure over the scope it was defined in."""

    name: Optional[str]
    scope: Environment
    params: tuple[int, ...]
    body: tuple[Datum, ...]

    def as_procedure(self) -> Optional[Procedure]:
        return self

    @property
    def display_name(self) -> str:
        return self.name or "lambda"

    def to_string(self, symbols: Optional[SymbolTable] = None) -> str:
        params = " ".join(
            (symbols.lookup(p) if symbols is not None else None) or f"[SYMBOL: {p}]"
            for p in self.params
        )
        body = " ".join(x.to_string(symbols) for x in self.body)
        return f"[PROC: ({self.display_name} ({params}) {body})]"
