from __future__ import annotations

import hashlib
from typing import Iterator, Optional

from tailspin.errors import SymbolCollisionError


def symbol_id_for(name: str) -> int:
    """Stable unsigned 64-bit id for `name` (independent of PYTHONHASHSEED)."""
    digest = hashlib.blake2b(name.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big")


class SymbolTable:
    """Append-only, bidirectional map between names and symbol ids."""

    __slots__ = ("_names",)

    def __init__(self) -> None:
        self._names: dict[int, str] = {}

    def intern(self, name: str) -> int:
        symbol_id = symbol_id_for(name)
        existing = self._names.get(symbol_id)
        if existing is None:
            self._names[symbol_id] = name
        elif existing != name:
            raise SymbolCollisionError(f"symbols {existing!r} and {name!r} share id {symbol_id}")
        return symbol_id

    def lookup(self, symbol_id: int) -> Optional[str]:
        return self._names.get(symbol_id)

    def names(self) -> Iterator[str]:
        return iter(self._names.values())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._names.get(symbol_id_for(name)) == name

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"<SymbolTable: {len(self._names)} symbols>"
