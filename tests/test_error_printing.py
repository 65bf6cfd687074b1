import pytest

from tailspin.errors import InvalidToken, RecurInNonTailPosition, TailspinSyntaxError
from tailspin.interpreter import Interpreter
from tailspin.reader.error_printing import render_error, source_excerpt
from tailspin.reader.parser import parse_program
from tailspin.types.symbol_table import SymbolTable


def _error_for(source: str) -> TailspinSyntaxError:
    with pytest.raises(TailspinSyntaxError) as info:
        parse_program(source, SymbolTable())
    return info.value


def test_unterminated_string():
    source = '(define s "abc'
    assert render_error(source, _error_for(source)) == "\n".join(
        [
            '1 | (define s "abc',
            "  | " + " " * 14 + "^",
            "error: unexpected EOF",
            'hint: missing closing ", did you forget to terminate a string literal?',
        ]
    )


def test_error_on_second_line():
    source = "(+ 1\n   12x)"
    assert render_error(source, _error_for(source)) == "\n".join(
        [
            "2 |    12x)",
            "  |      ^",
            "error: invalid token: unexpected 'x'",
        ]
    )


def test_missing_parens_hint():
    source = "(define (f x)\n  (+ x 1)"
    rendered = render_error(source, _error_for(source))
    assert rendered.splitlines()[-2:] == [
        "error: unexpected EOF",
        "hint: unclosed parens, maybe you're missing ')'?",
    ]


def test_caret_spans_the_token():
    assert source_excerpt("(a . b c)", 7, 8) == "1 | (a . b c)\n  |        ^"
    assert source_excerpt("abc def", 4, 7) == "1 | abc def\n  |     ^^^"


def test_line_numbers_widen_the_gutter():
    source = "\n" * 9 + "(x λ)"
    excerpt = render_error(source, _error_for(source)).splitlines()
    assert excerpt[0] == "10 | (x λ)"
    assert excerpt[1] == "   |    ^"


def test_verifier_errors_render_without_excerpt():
    interp = Interpreter()
    with pytest.raises(RecurInNonTailPosition) as info:
        interp.parse("(let () (recur) 5)")
    assert render_error("(let () (recur) 5)", info.value) == "error: recur in non-tail position: (recur)"


def test_render_error_with_explicit_span():
    err = InvalidToken("bad", 0, 2)
    assert render_error("xy", err) == "1 | xy\n  | ^^\nerror: bad"
