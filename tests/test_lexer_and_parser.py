import pytest
from hypothesis import given, strategies as st

from tailspin.errors import InvalidEscape, InvalidToken, NestingTooDeep, NonAsciiCharacter, UnexpectedEof
from tailspin.reader.parser import lex, parse, parse_program
from tailspin.types.datum import (
    EMPTY_LIST,
    I64_MAX,
    I64_MIN,
    boolean,
    character,
    integer,
    make_list,
    pair,
    string,
    symbol,
)
from tailspin.types.symbol_table import SymbolTable


@pytest.fixture
def symbols():
    return SymbolTable()


@pytest.mark.parametrize(
    "source, expected",
    [
        ("a", [("symbol", "a")]),
        ("'a", [("quote", "'"), ("symbol", "a")]),
        ("(a b)", [("lparen", "("), ("symbol", "a"), ("symbol", "b"), ("rparen", ")")]),
        ("(define x 1)", [("lparen", "("), ("keyword", "define"), ("symbol", "x"), ("integer", "1"), ("rparen", ")")]),
        ("true false", [("boolean", "true"), ("boolean", "false")]),
        ('"hi there"', [("string", '"hi there"')]),
        ("#\\a #\\\\n", [("char", "#\\a"), ("char", "#\\\\n")]),
        ("(a . b)", [("lparen", "("), ("symbol", "a"), ("dot", "."), ("symbol", "b"), ("rparen", ")")]),
        ("-5 - -x", [("integer", "-5"), ("symbol", "-"), ("symbol", "-x")]),
        (" ; comment\n a ; more", [("symbol", "a")]),
        ("set-car! <= string->symbol ...", [("symbol", "set-car!"), ("symbol", "<="), ("symbol", "string->symbol"), ("symbol", "...")]),
    ],
)
def test_lexer_basic(source, expected):
    assert [(t.kind, t.text) for t in lex(source)] == expected


def test_token_spans():
    tokens = list(lex('(foo "b")'))
    assert [(t.start, t.end) for t in tokens] == [(0, 1), (1, 4), (5, 8), (8, 9)]
    assert tokens[2].value == "b"


@pytest.mark.parametrize(
    "source, expected",
    [
        ("123", integer(123)),
        ("-45", integer(-45)),
        ("true", boolean(True)),
        ("#\\z", character("z")),
        ("#\\\\s", character(" ")),
        ("#\\\\\\", character("\\")),
        ("#\\(", character("(")),
        ('"a\\nb\\s\\t\\"\\\\"', string('a\nb \t"\\')),
        ("()", EMPTY_LIST),
        ("(1 2)", make_list([integer(1), integer(2)])),
        ("(1 . 2)", pair(integer(1), integer(2))),
        ("(1 2 . 3)", make_list([integer(1), integer(2)], integer(3))),
        ("((1) ())", make_list([make_list([integer(1)]), EMPTY_LIST])),
    ],
)
def test_parser(source, expected, symbols):
    assert parse(source, symbols) == expected


def test_symbols_are_interned(symbols):
    datum = parse("(car x)", symbols)
    assert datum == make_list([symbol(symbols.intern("car")), symbol(symbols.intern("x"))])


def test_quote_shorthand(symbols):
    assert parse("'x", symbols).to_string(symbols) == "(quote x)"
    assert parse("'(1 'b)", symbols).to_string(symbols) == "(quote (1 (quote b)))"


def test_parse_program(symbols):
    forms = parse_program("; header\n(define x 1)\n(+ x 2) ; tail\n", symbols)
    assert [f.to_string(symbols) for f in forms] == ["(define x 1)", "(+ x 2)"]
    assert parse_program("  ; nothing here\n", symbols) == []


def test_integer_bounds(symbols):
    assert parse(str(I64_MAX), symbols) == integer(I64_MAX)
    assert parse(str(I64_MIN), symbols) == integer(I64_MIN)
    with pytest.raises(InvalidToken):
        parse(str(I64_MAX + 1), symbols)


@pytest.mark.parametrize(
    "source, error, start",
    [
        ("12abc", InvalidToken, 2),
        (")", InvalidToken, 0),
        ("(. a)", InvalidToken, 1),
        ("(a . b c)", InvalidToken, 7),
        ("(a b) c", InvalidToken, 6),
        ("#\\ab", InvalidToken, 3),
        ("(x λ)", NonAsciiCharacter, 3),
        ('"é"', NonAsciiCharacter, 1),
        ('"\\q"', InvalidEscape, 1),
        ("#\\\\q", InvalidEscape, 2),
        ('(a "b', UnexpectedEof, 5),
        ("#\\", UnexpectedEof, 2),
        ("", UnexpectedEof, 0),
    ],
)
def test_errors(source, error, start, symbols):
    with pytest.raises(error) as info:
        parse(source, symbols)
    assert info.value.start == start


def test_unclosed_list_hint(symbols):
    with pytest.raises(UnexpectedEof) as info:
        parse("(define (f x) (+ x 1)", symbols)
    assert info.value.what == "list"
    assert info.value.hint == "unclosed parens, maybe you're missing ')'?"

    with pytest.raises(UnexpectedEof) as info:
        parse("((a", symbols)
    assert info.value.hint == "unclosed parens, maybe you're missing '))'?"


@pytest.mark.parametrize("read", [parse, parse_program])
def test_deep_nesting_is_a_syntax_error(symbols, small_stack, read):
    source = "(list " * 300 + "1" + ")" * 300
    small_stack()
    with pytest.raises(NestingTooDeep) as info:
        read(source, symbols)
    assert info.value.start is not None
    assert source[info.value.start:info.value.end] in ("(", "list")
    assert info.value.hint == "split the expression into smaller definitions"


def test_unclosed_string_hint(symbols):
    with pytest.raises(UnexpectedEof) as info:
        parse('"abc', symbols)
    assert info.value.what == "string"
    assert 'missing closing "' in info.value.hint


# --- Round trip: printing a datum and reading it back gives the same datum ---
SYMBOLS = SymbolTable()

names = st.text(alphabet="abcdefghijklmnopqrstuvwxyz-?!*<>=", min_size=1, max_size=8).filter(
    lambda s: s[0].isalpha() and s not in ("true", "false")
)
printable = st.characters(min_codepoint=0x20, max_codepoint=0x7E) | st.sampled_from("\n\t")

atoms = st.one_of(
    st.integers(min_value=I64_MIN, max_value=I64_MAX).map(integer),
    st.booleans().map(boolean),
    printable.map(character),
    st.text(alphabet=printable, max_size=12).map(string),
    names.map(lambda name: symbol(SYMBOLS.intern(name))),
)

datums = st.recursive(
    atoms,
    lambda children: st.one_of(
        st.lists(children, max_size=4).map(make_list),
        st.tuples(st.lists(children, min_size=1, max_size=3), atoms).map(
            lambda t: make_list(t[0], t[1])
        ),
    ),
    max_leaves=12,
)


@given(datums)
def test_print_then_parse_round_trip(datum):
    text = datum.to_string(SYMBOLS)
    parsed = parse(text, SYMBOLS)
    assert parsed == datum
    assert parsed.to_string(SYMBOLS) == text
