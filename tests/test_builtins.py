import pytest

from tailspin.builtin.env_builtin import PRIMITIVES
from tailspin.evaluation.special_forms import SPECIAL_FORMS
from tailspin.types.datum import I64_MAX, I64_MIN


def test_global_frame_holds_every_native(interp):
    names = set(interp.names())
    assert set(PRIMITIVES) <= names
    assert set(SPECIAL_FORMS) <= names


# --- arithmetic ---
@pytest.mark.parametrize(
    "source, expected",
    [
        ("(+)", "0"),
        ("(+ 7)", "7"),
        ("(+ 1 2 3 4)", "10"),
        ("(- 5)", "-5"),
        ("(- 10 3 2)", "5"),
        ("(*)", "1"),
        ("(* 2 -3)", "-6"),
        ("(quotient 7 2)", "3"),
        ("(quotient -7 2)", "-3"),
        ("(quotient 7 -2)", "-3"),
        ("(quotient 100 5 2)", "10"),
        ("(remainder 7 2)", "1"),
        ("(remainder -7 2)", "-1"),
        ("(remainder 7 -2)", "1"),
        ("(+ (* 2 3) (- 10 4))", "12"),
    ],
)
def test_arithmetic(run, source, expected):
    assert run(source) == expected


@pytest.mark.parametrize("name", ["quotient", "remainder"])
def test_division_by_zero(message, name):
    assert message(f"({name} 1 0)") == f"{name}: division by zero"


def test_integer_overflow(message):
    assert message(f"(+ {I64_MAX} 1)") == "+: integer overflow"
    assert message(f"(- {I64_MIN} 1)") == "-: integer overflow"
    assert message(f"(* {I64_MAX} 2)") == "*: integer overflow"
    assert message(f"(- {I64_MIN})") == "-: integer overflow"


def test_arithmetic_at_the_bounds(run):
    assert run(f"(+ {I64_MAX - 1} 1)") == str(I64_MAX)
    assert run(f"(- {I64_MIN + 1} 1)") == str(I64_MIN)


def test_arithmetic_type_errors(message):
    assert message('(+ 1 "2")') == '+ expected integer, got: "2"'
    assert message("(* 'a 2)") == "* expected integer, got: a"


# --- comparison and equality ---
@pytest.mark.parametrize(
    "source, expected",
    [
        ("(= 1 1)", "true"),
        ("(= 1 1 2)", "false"),
        ("(< 1 2)", "true"),
        ("(< 1 3 2)", "true"),
        ("(< 2 1)", "false"),
        ("(<= 2 2 3)", "true"),
        ("(> 3 1 2)", "true"),
        ("(>= 1 2)", "false"),
        ("(eq? 1 1)", "true"),
        ("(eq? 1 1 2)", "false"),
        ("(eq? 'a 'a)", "true"),
        ("(eq? '(1 (2 3)) (list 1 (list 2 3)))", "true"),
        ('(eq? "ab" "ab")', "true"),
        ("(eq? #\\a #\\b)", "false"),
        ("(eq? true true true)", "true"),
        ("(eq? '() (list))", "true"),
    ],
)
def test_comparisons(run, source, expected):
    assert run(source) == expected


def test_comparisons_need_two_operands(message):
    assert message("(< 1)") == "arity mismatch for <: expected: 2.., got: 1"
    assert message("(eq? 1)") == "arity mismatch for eq?: expected: 2.., got: 1"


def test_eq_on_procedures_is_identity(run):
    run("(define (f) 1)")
    assert run("(eq? f f)") == "true"
    assert run("(eq? (lambda () 1) (lambda () 1))") == "false"


# --- predicates ---
@pytest.mark.parametrize(
    "source, expected",
    [
        ("(null? '())", "true"),
        ("(null? '(1))", "false"),
        ("(boolean? false)", "true"),
        ("(boolean? 0)", "false"),
        ("(symbol? 'a)", "true"),
        ('(symbol? "a")', "false"),
        ("(integer? -4)", "true"),
        ("(char? #\\\\s)", "true"),
        ('(string? "")', "true"),
        ("(procedure? car)", "true"),
        ("(procedure? (lambda (x) x))", "true"),
        ("(procedure? 'car)", "false"),
        ("(pair? (cons 1 2))", "true"),
        ("(pair? '())", "false"),
        ("(list? '(1 2))", "true"),
        ("(list? '())", "true"),
        ("(list? (cons 1 2))", "false"),
    ],
)
def test_predicates(run, source, expected):
    assert run(source) == expected


def test_predicate_arity(message):
    assert message("(null? 1 2)") == "arity mismatch for null?: expected: 1, got: 2"


# --- conversions ---
@pytest.mark.parametrize(
    "source, expected",
    [
        ("(char->integer #\\A)", "65"),
        ("(integer->char 97)", "#\\a"),
        ("(integer->char 10)", "#\\\\n"),
        ("(number->string -42)", '"-42"'),
        ('(string->number "-42")', "-42"),
        ('(string->number "007")', "7"),
        ("(symbol->string 'abc)", '"abc"'),
        ('(string->symbol "abc")', "abc"),
        ('(eq? (string->symbol "abc") \'abc)', "true"),
    ],
)
def test_conversions(run, source, expected):
    assert run(source) == expected


@pytest.mark.parametrize("code", [0, -1, 0xD800, 0x110000])
def test_integer_to_char_rejects_invalid_code_points(message, code):
    assert message(f"(integer->char {code})") == f"integer->char: {code} is not a valid character"


@pytest.mark.parametrize("text", ["12a", "", "+1", "1 2"])
def test_string_to_number_rejects_non_integers(message, text):
    assert message(f'(string->number "{text}")') == f'string->number: not an integer: "{text}"'


def test_string_to_number_range(message):
    assert message('(string->number "9223372036854775808")').startswith(
        "string->number: integer overflow"
    )


def test_conversion_type_errors(message):
    assert message("(char->integer 1)") == "char->integer expected char, got: 1"
    assert message("(symbol->string 1)") == "symbol->string expected symbol, got: 1"


# --- lists ---
@pytest.mark.parametrize(
    "source, expected",
    [
        ("(cons 1 2)", "(1 . 2)"),
        ("(cons 1 '(2 3))", "(1 2 3)"),
        ("(car '(1 2))", "1"),
        ("(cdr '(1 2))", "(2)"),
        ("(cdr '(1))", "()"),
        ("(list)", "()"),
        ("(list 1 (+ 1 1) 'x)", "(1 2 x)"),
        ("(car (cdr (list 1 2 3)))", "2"),
    ],
)
def test_lists(run, source, expected):
    assert run(source) == expected


def test_car_of_empty_list(message):
    assert message("(car '())") == "car expected pair, got: ()"
    assert message("(cdr 5)") == "cdr expected pair, got: 5"


def test_cons_arity(message):
    assert message("(cons 1)") == "arity mismatch for cons: expected: 2, got: 1"


# --- introspection ---
def test_symbol_space_lists_visible_symbols(run):
    run("(define answer 42)")
    assert run("(car (let ((local 1)) (symbol-space)))") == "local"
    listed = run("(symbol-space)")
    assert "answer" in listed.strip("()").split()
    assert "car" in listed.strip("()").split()
