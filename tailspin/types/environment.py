"""Runtime environment for Tailspin.

An Environment is one binding frame plus a link to the frame it was created
from. `child()` starts a new, empty innermost frame on top of an existing
chain without copying it, so closures can capture a scope cheaply and many
chains can share the same outer frames. Bindings only ever go into the
innermost frame of the Environment they are made on.
"""

from __future__ import annotations

from io import StringIO
from typing import Iterator, Mapping, Optional

from tailspin.types.datum import Datum


class Environment:
    """Chain of frames mapping symbol ids to Datums."""

    __slots__ = ("vars", "outer")

    def __init__(self, outer: Optional[Environment] = None):
        self.vars: dict[int, Datum] = {}
        self.outer: Environment | None = outer

    def child(self) -> Environment:
        """Return a new empty frame chained to this one."""
        return Environment(self)

    def lookup(self, symbol_id: int) -> Optional[Datum]:
        """Value bound to `symbol_id` in the nearest frame that has it, or None."""
        env: Optional[Environment] = self
        while env is not None:
            value = env.vars.get(symbol_id)
            if value is not None:
                return value
            env = env.outer
        return None

    def bind(self, symbol_id: int, value: Datum) -> None:
        """Insert or overwrite a binding in the innermost frame."""
        self.vars[symbol_id] = value

    def update(self, mapping: Mapping[int, Datum]) -> None:
        """Bulk-bind a mapping of symbol id -> value in the innermost frame."""
        self.vars.update(mapping)

    def frames(self) -> Iterator[Environment]:
        env: Optional[Environment] = self
        while env is not None:
            yield env
            env = env.outer

    def symbol_ids(self) -> list[int]:
        """Every visible symbol id, innermost first, without duplicates."""
        seen: dict[int, None] = {}
        for frame in self.frames():
            for symbol_id in frame.vars:
                seen.setdefault(symbol_id, None)
        return list(seen)

    def depth(self) -> int:
        return sum(1 for _ in self.frames())

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's variables into the buffer in a compact form."""
        buffer.write("{")
        buffer.write(", ".join(f"{k}: {v}" for k, v in self.vars.items()))
        buffer.write("}")

    def __str__(self) -> str:
        """Single-frame view with an indicator for the parent."""
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")
            return buffer.getvalue()

    def __repr__(self) -> str:
        return f"<Environment depth={self.depth()} frame_size={len(self.vars)}>"
