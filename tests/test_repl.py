import io
import sys

import pytest

import tailspin.repl as repl_module
from tailspin import __version__
from tailspin.__main__ import build_parser, main, run_file
from tailspin.interpreter import Interpreter
from tailspin.repl import Completer, Repl, closing_parens, complete_identifier


@pytest.mark.parametrize(
    "line, expected",
    [
        ("", ""),
        ("(+ 1 2)", ""),
        ("(define (f", "))"),
        ("(let ((x 1)", "))"),
        ("(a))", ""),
    ],
)
def test_closing_parens(line, expected):
    assert closing_parens(line) == expected


def test_complete_identifier():
    names = ["define", "defn", "car", "cdr", "define"]
    assert complete_identifier("(def", 4, names) == (1, ["define", "defn"])
    assert complete_identifier("(c", 2, names) == (1, ["car", "cdr"])
    assert complete_identifier("(car (x", 7, names) == (6, [])
    # cursor in the middle of the line completes the word before it
    assert complete_identifier("(ca 1)", 3, names) == (1, ["car"])


def test_completer_offers_names_then_parens():
    completer = Completer(Interpreter())
    assert "define" in completer.candidates("(def", 4)
    assert completer.candidates("(car (list 1", 12) == ["1))"]
    assert completer.candidates("(zz", 3) == ["zz)"]


def test_completer_sees_user_definitions():
    interpreter = Interpreter()
    interpreter.eval("(define fibonacci 1)")
    assert Completer(interpreter).candidates("(fib", 4) == ["fibonacci"]


def test_complete_without_readline(monkeypatch):
    monkeypatch.setattr(repl_module, "readline", None)
    completer = Completer(Interpreter())
    assert completer.complete("(symbol-s", 0) == "symbol-space"
    assert completer.complete("(symbol-s", 1) is None


def test_handle_line():
    session = Repl(Interpreter(), out=io.StringIO())
    assert session.handle_line("   ") is None
    assert session.handle_line("(define x 20)") == "=> x"
    assert session.handle_line("(+ x 1) (* x 2)") == "=> 40"
    assert session.handle_line("(car x)") == '=> [CONDITION: "car expected pair, got: 20"]'


def test_handle_line_renders_syntax_errors():
    output = Repl(Interpreter(), out=io.StringIO()).handle_line("(+ 1")
    assert output.splitlines() == [
        "1 | (+ 1",
        "  |     ^",
        "error: unexpected EOF",
        "hint: unclosed parens, maybe you're missing ')'?",
    ]


def test_handle_line_reports_deep_nesting_and_continues(small_stack):
    session = Repl(Interpreter(), out=io.StringIO())
    small_stack()
    output = session.handle_line("(list " * 300 + "1" + ")" * 300)
    assert "error: nesting too deep" in output
    assert session.handle_line("(+ 1 2)") == "=> 3"


def test_run_loop(monkeypatch):
    monkeypatch.setattr(repl_module, "readline", None)
    lines = iter(["(define n 3)", "", "(* n n)", "(quit)", "never read"])
    monkeypatch.setattr("builtins.input", lambda prompt: next(lines))
    out = io.StringIO()
    Repl(Interpreter(), out=out).run()
    assert out.getvalue() == "=> n\n=> 9\n"
    assert next(lines) == "never read"


def test_run_loop_survives_interrupts_and_ends_on_eof(monkeypatch):
    monkeypatch.setattr(repl_module, "readline", None)
    events = iter([KeyboardInterrupt(), "(+ 1 1)", EOFError()])

    def fake_input(prompt):
        event = next(events)
        if isinstance(event, BaseException):
            raise event
        return event

    monkeypatch.setattr("builtins.input", fake_input)
    out = io.StringIO()
    Repl(Interpreter(), out=out).run()
    assert out.getvalue() == "\n=> 2\n"


# --- command line ---
def test_run_file(tmp_path):
    program = tmp_path / "answer.tsp"
    program.write_text("; the answer\n(define x 21)\n(* x 2)\n")
    out, err = io.StringIO(), io.StringIO()
    assert run_file(program, out, err) == 0
    assert out.getvalue() == "42\n"
    assert err.getvalue() == ""


def test_run_file_runtime_error(tmp_path):
    program = tmp_path / "bad.tsp"
    program.write_text("(define x 1)\n(car x)\n(define never 2)\n")
    out, err = io.StringIO(), io.StringIO()
    assert run_file(program, out, err) == 1
    assert out.getvalue() == ""
    assert err.getvalue() == "error: car expected pair, got: 1\n"


def test_run_file_syntax_error(tmp_path):
    program = tmp_path / "unclosed.tsp"
    program.write_text('(define s "abc')
    err = io.StringIO()
    assert run_file(program, io.StringIO(), err) == 1
    assert "error: unexpected EOF" in err.getvalue()
    assert "hint: missing closing \"" in err.getvalue()


def test_run_file_missing(tmp_path):
    err = io.StringIO()
    assert run_file(tmp_path / "nope.tsp", io.StringIO(), err) == 1
    assert err.getvalue().startswith("error: cannot read")


def test_main_runs_a_file(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("TAILSPIN_RECURSION_LIMIT", str(sys.getrecursionlimit()))
    program = tmp_path / "loop.tsp"
    program.write_text("(loop ((i 0)) (if (= i 10) i (recur (+ i 1))))")
    assert main([str(program)]) == 0
    assert capsys.readouterr().out == "10\n"


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as info:
        build_parser().parse_args(["--version"])
    assert info.value.code == 0
    assert capsys.readouterr().out.strip() == f"tailspin {__version__}"


def test_log_level_flag(capsys):
    assert build_parser().parse_args(["--log-level", "debug"]).log_level == "DEBUG"
    with pytest.raises(SystemExit) as info:
        build_parser().parse_args(["--log-level", "bogus"])
    assert info.value.code == 2
    assert "invalid choice" in capsys.readouterr().err
