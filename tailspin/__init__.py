# Core type aliases for Tailspin's data model.
# Program code and runtime data share one immutable value type, Datum
# (see tailspin.types.datum). Native procedures receive the interpreter and
# the raw, unevaluated argument expressions of their call site.
#
# Naming guidance:
# - Datum:    any value, code or data.
# - NativeFn: Python callable implementing a native procedure or special form.

from typing import TYPE_CHECKING, Callable, Sequence

if TYPE_CHECKING:
    from tailspin.types.datum import Datum
    from tailspin.interpreter import Interpreter

# Signature shared by every native procedure, special forms included
NativeFn = Callable[["Interpreter", Sequence["Datum"]], "Datum"]

__version__ = "0.3.0"
