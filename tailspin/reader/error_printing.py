"""Human-readable rendering of load-time errors.

    2 | (define s "abc
      |               ^
    error: unexpected EOF
    hint: missing closing ", did you forget to terminate a string literal?
"""

from __future__ import annotations

from tailspin.errors import TailspinSyntaxError


def source_excerpt(source: str, start: int, end: int) -> str:
    """The 1-based numbered line holding `start`, with carets under [start, end)."""
    start = min(max(start, 0), len(source))
    line_start = source.rfind("\n", 0, start) + 1
    line_end = source.find("\n", start)
    if line_end == -1:
        line_end = len(source)
    line_no = source.count("\n", 0, line_start) + 1

    # Keep the span on the excerpt line, and at least one caret wide
    span = max(1, min(end, line_end) - start)
    gutter = " " * len(str(line_no))
    return (
        f"{line_no} | {source[line_start:line_end]}\n"
        f"{gutter} | {' ' * (start - line_start)}{'^' * span}"
    )


def render_error(source: str, error: TailspinSyntaxError) -> str:
    lines = []
    if error.start is not None:
        end = error.end if error.end is not None else error.start
        lines.append(source_excerpt(source, error.start, end))
    lines.append(f"error: {error.message}")
    if error.hint:
        lines.append(f"hint: {error.hint}")
    return "\n".join(lines)
