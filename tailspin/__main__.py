"""Command line entry point: `python -m tailspin [FILE]`.

With FILE, run the program and print the value of its last form. Without,
start the interactive REPL.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from tailspin import __version__, config
from tailspin.errors import TailspinRuntimeError, TailspinSyntaxError
from tailspin.interpreter import Interpreter
from tailspin.reader.error_printing import render_error
from tailspin.repl import Repl

log = logging.getLogger("Main")

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def run_file(path: Path, out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> int:
    """Run a program file; returns the process exit status."""
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as ex:
        print(f"error: cannot read {path}: {ex}", file=err)
        return 1

    log.info("Running %s", path)
    interpreter = Interpreter()
    try:
        result = interpreter.run(source)
    except TailspinSyntaxError as ex:
        print(render_error(source, ex), file=err)
        return 1
    except TailspinRuntimeError as ex:
        print(f"error: {ex}", file=err)
        return 1

    print(interpreter.to_string(result), file=out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tailspin", description="Tailspin interpreter")
    parser.add_argument("file", nargs="?", type=Path, help="program to run; omit for the REPL")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="overrides TAILSPIN_LOG_LEVEL",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level or config.get_log_level(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.setrecursionlimit(config.get_recursion_limit())

    if args.file is not None:
        return run_file(args.file)

    Repl(history_file=config.get_history_file()).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
