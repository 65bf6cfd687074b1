import sys

import pytest

from tailspin.interpreter import Interpreter

# Most tests evaluate short programs against a fresh Interpreter and compare
# printed results, which is how the REPL shows them.


@pytest.fixture
def interp():
    return Interpreter()


@pytest.fixture
def run(interp):
    """Evaluate code in the shared `interp` and return the printed result."""

    def _run(code: str) -> str:
        return interp.to_string(interp.eval(code))

    return _run


@pytest.fixture
def message(interp):
    """Evaluate code that must produce a Condition and return its message."""

    def _message(code: str) -> str:
        result = interp.eval(code)
        payload = result.as_condition()
        assert payload is not None, f"expected a condition, got {interp.to_string(result)}"
        return payload.as_string()

    return _message


@pytest.fixture
def small_stack():
    """Call with a frame budget to cap the host stack at the caller's depth plus that budget."""
    original = sys.getrecursionlimit()

    def _limit(headroom: int = 150) -> None:
        depth = 0
        frame = sys._getframe(1)
        while frame is not None:
            depth += 1
            frame = frame.f_back
        sys.setrecursionlimit(depth + headroom)

    yield _limit
    sys.setrecursionlimit(original)
