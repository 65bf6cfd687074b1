from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from tailspin.types.datum import Datum


class TailspinError(Exception):
    """ Base class for all Tailspin errors"""
    pass


class SymbolCollisionError(TailspinError):
    """ Raised when two different names hash to the same symbol id"""


# -------------------------------
# Load-time errors (reader / verifier)
# -------------------------------
class TailspinSyntaxError(TailspinError):
    """ Raised when source text cannot be turned into a runnable program.

    `start` and `end` delimit the offending range of the source text
    (end exclusive) when it is known.
    """

    def __init__(
        self,
        message: str,
        start: Optional[int] = None,
        end: Optional[int] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.start = start
        self.end = end if end is not None else start
        self.hint = hint


class InvalidToken(TailspinSyntaxError):
    """ Raised for text that is not a valid token, or a token in the wrong place"""


class UnexpectedEof(TailspinSyntaxError):
    """ Raised when input ends inside a string, a character or a list"""

    def __init__(self, what: str, start: Optional[int] = None, hint: Optional[str] = None):
        super().__init__("unexpected EOF", start, start, hint)
        self.what = what


class NonAsciiCharacter(TailspinSyntaxError):
    """ Raised when a character literal or string contains non-ASCII text"""


class InvalidEscape(TailspinSyntaxError):
    """ Raised for an unknown backslash escape"""


class NestingTooDeep(TailspinSyntaxError):
    """ Raised when source nests deeper than the host stack can read or verify"""


class RecurInNonTailPosition(TailspinSyntaxError):
    """ Raised by the verifier when recur is not in tail position of a loop or lambda"""

    def __init__(self, form: str):
        super().__init__(f"recur in non-tail position: {form}")
        self.form = form


# -------------------------------
# Runtime errors
# -------------------------------
class TailspinConditionError(TailspinError):
    """ Raised inside native procedures; converted into a Condition value at the call site"""


class TailspinArityError(TailspinConditionError):
    """ Raised when the number of arguments passed to a procedure is incorrect"""


class TailspinTypeError(TailspinConditionError):
    """ Raised when the types of arguments passed to a procedure are incorrect"""


class TailspinValueError(TailspinConditionError):
    """ Raised when an argument has the right type but an unusable value"""


class TailspinRuntimeError(TailspinError):
    """ Raised by drivers when a whole-program evaluation produced a Condition"""

    def __init__(self, message: str, condition: Datum):
        super().__init__(message)
        self.condition = condition
