"""Interactive read-eval-print loop.

Each input line is a whole program: it is parsed, verified and evaluated
against one long-lived Interpreter, and its value printed as `=> value`.
Errors are reported and the session continues. `(quit)` or end of input
leaves the loop.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, TextIO

from tailspin.errors import TailspinSyntaxError
from tailspin.interpreter import Interpreter
from tailspin.reader.error_printing import render_error

try:
    import readline
except ImportError:  # not available on every platform
    readline = None

log = logging.getLogger("Repl")

PROMPT = ">> "
QUIT = "(quit)"
BREAK_CHARS = " \t\n()'\""


def closing_parens(line: str) -> str:
    """One ')' for every '(' in `line` that is not closed yet."""
    depth = 0
    for c in line:
        if c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
    return ")" * max(depth, 0)


def complete_identifier(line: str, cursor: int, names: Iterable[str]) -> tuple[int, list[str]]:
    """Start offset of the word ending at `cursor`, and the names it prefixes."""
    start = cursor
    while start > 0 and line[start - 1] not in BREAK_CHARS:
        start -= 1
    word = line[start:cursor]
    return start, sorted({name for name in names if name.startswith(word)})


class Completer:
    """readline adapter: identifiers first, then the missing closing parens."""

    def __init__(self, interpreter: Interpreter):
        self.interpreter = interpreter
        self.matches: list[str] = []

    def candidates(self, line: str, cursor: int) -> list[str]:
        start, matches = complete_identifier(line, cursor, self.interpreter.names())
        if not matches and cursor == len(line):
            parens = closing_parens(line)
            if parens:
                # readline replaces the current word, so keep it in front
                matches = [line[start:cursor] + parens]
        return matches

    def complete(self, text: str, state: int) -> Optional[str]:
        if state == 0:
            line = readline.get_line_buffer() if readline is not None else text
            cursor = readline.get_endidx() if readline is not None else len(text)
            self.matches = self.candidates(line, cursor)
        return self.matches[state] if state < len(self.matches) else None


class Repl:
    def __init__(
        self,
        interpreter: Optional[Interpreter] = None,
        history_file: Optional[Path] = None,
        out: Optional[TextIO] = None,
    ):
        self.interpreter = interpreter or Interpreter()
        self.history_file = history_file
        self.out = out if out is not None else sys.stdout

    def handle_line(self, line: str) -> Optional[str]:
        """Evaluate one line; the text to print, or None for a blank line."""
        if not line.strip():
            return None
        try:
            result = self.interpreter.eval(line)
        except TailspinSyntaxError as err:
            return render_error(line, err)
        return f"=> {self.interpreter.to_string(result)}"

    def _setup_readline(self) -> None:
        if readline is None:
            return
        readline.set_completer(Completer(self.interpreter).complete)
        readline.set_completer_delims(BREAK_CHARS)
        readline.parse_and_bind("tab: complete")
        if self.history_file is not None:
            try:
                readline.read_history_file(self.history_file)
            except OSError:
                log.debug("No history at %s", self.history_file)

    def _save_history(self) -> None:
        if readline is None or self.history_file is None:
            return
        try:
            readline.write_history_file(self.history_file)
        except OSError as err:
            log.warning("Could not write history to %s: %s", self.history_file, err)

    def run(self) -> None:
        self._setup_readline()
        try:
            while True:
                try:
                    line = input(PROMPT)
                except EOFError:
                    break
                except KeyboardInterrupt:
                    print(file=self.out)
                    continue
                if line.strip() == QUIT:
                    break
                output = self.handle_line(line)
                if output is not None:
                    print(output, file=self.out)
        finally:
            self._save_history()
