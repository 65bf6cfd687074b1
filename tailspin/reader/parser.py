"""
  Tailspin Reader: Lexer and Parser

- Single pass lexer yielding positioned tokens
- Recursive descent parser emitting Datum trees:

    - true / false      -> Boolean
    - -?[0-9]+          -> Integer (signed 64-bit)
    - #\\x, #\\\\n ...     -> Character (printable ASCII or escape \\n \\s \\t \\\\)
    - "..."             -> String (ASCII, escapes \\n \\s \\t \\" \\\\)
    - identifiers       -> Symbol (interned in the caller's SymbolTable)
    - ( ... )           -> proper list, () -> EmptyList
    - (a . b)           -> dotted pair
    - 'x                -> (quote x)
    - ; to end of line  -> comment

Reserved words (true false define if lambda let loop recur begin quote) lex
as keyword tokens, never as plain symbol tokens.
"""

from __future__ import annotations

from typing import Iterable, Iterator, NamedTuple, Optional

from tailspin.errors import (
    InvalidEscape,
    InvalidToken,
    NestingTooDeep,
    NonAsciiCharacter,
    UnexpectedEof,
)
from tailspin.types.datum import (
    EMPTY_LIST,
    I64_MAX,
    I64_MIN,
    Datum,
    boolean,
    character,
    integer,
    make_list,
    pair,
    string,
    symbol,
)
from tailspin.types.symbol_table import SymbolTable

KEYWORDS = frozenset(
    ["true", "false", "define", "if", "lambda", "let", "loop", "recur", "begin", "quote"]
)

WHITESPACE = " \t\n\r"
DELIMITERS = WHITESPACE + "();\""

# ! # $ % & ' * + , - . / : < = > ? @ A-Z [ \ ] ^ _ ` a-z { | } ~   (no ';', it starts comments)
SYMBOL_CHARS = frozenset(
    "!"
    + "".join(chr(c) for c in range(0x23, 0x28))
    + "".join(chr(c) for c in range(0x2A, 0x30))
    + "".join(chr(c) for c in range(0x3A, 0x7F) if chr(c) != ";")
)
DIGITS = "0123456789"

# escape letter -> character, shared by strings and character literals
UNESCAPE: dict[str, str] = {"n": "\n", "s": " ", "t": "\t", "\\": "\\"}


class Token(NamedTuple):
    kind: str  # lparen rparen dot quote integer char string symbol keyword boolean
    text: str
    start: int
    end: int
    value: object = None


def _is_printable(c: str) -> bool:
    return "!" <= c <= "~"


def _check_ascii(source: str, pos: int) -> None:
    if ord(source[pos]) > 0x7F:
        raise NonAsciiCharacter(
            f"invalid character: {source[pos]} is not ASCII", pos, pos + 1
        )


def _expect_delimiter(source: str, pos: int) -> None:
    """Raise unless the token that just ended at `pos` is followed by a delimiter."""
    if pos < len(source) and source[pos] not in DELIMITERS:
        _check_ascii(source, pos)
        raise InvalidToken(f"invalid token: unexpected {source[pos]!r}", pos, pos + 1)


def _lex_string(source: str, start: int) -> Token:
    n = len(source)
    pos = start + 1
    chars: list[str] = []
    while pos < n:
        c = source[pos]
        if c == '"':
            return Token("string", source[start:pos + 1], start, pos + 1, "".join(chars))
        _check_ascii(source, pos)
        if c == "\\":
            if pos + 1 >= n:
                break
            esc = source[pos + 1]
            if esc == '"':
                chars.append('"')
            elif esc in UNESCAPE:
                chars.append(UNESCAPE[esc])
            else:
                _check_ascii(source, pos + 1)
                raise InvalidEscape(f"invalid escape: \\{esc}", pos, pos + 2)
            pos += 2
            continue
        chars.append(c)
        pos += 1
    raise UnexpectedEof(
        "string", n, hint='missing closing ", did you forget to terminate a string literal?'
    )


def _lex_char(source: str, start: int) -> Token:
    # source[start:start + 2] == "#\\"
    n = len(source)
    pos = start + 2
    if pos >= n:
        raise UnexpectedEof("char", n, hint="a character literal needs a character after #\\")
    c = source[pos]
    if c == "\\":
        if pos + 1 >= n or source[pos + 1] in DELIMITERS:
            value, end = "\\", pos + 1
        elif source[pos + 1] in UNESCAPE:
            value, end = UNESCAPE[source[pos + 1]], pos + 2
        else:
            _check_ascii(source, pos + 1)
            raise InvalidEscape(f"invalid escape: \\{source[pos + 1]}", pos, pos + 2)
    else:
        _check_ascii(source, pos)
        if not _is_printable(c):
            raise InvalidToken("invalid character literal", start, pos + 1)
        value, end = c, pos + 1
    _expect_delimiter(source, end)
    return Token("char", source[start:end], start, end, value)


def _lex_integer(source: str, start: int) -> Token:
    pos = start + 1 if source[start] == "-" else start
    while pos < len(source) and source[pos] in DIGITS:
        pos += 1
    _expect_delimiter(source, pos)
    text = source[start:pos]
    value = int(text)
    if not I64_MIN <= value <= I64_MAX:
        raise InvalidToken(f"integer literal out of range: {text}", start, pos)
    return Token("integer", text, start, pos, value)


def _lex_symbol(source: str, start: int) -> Token:
    pos = start
    while pos < len(source) and source[pos] not in DELIMITERS:
        c = source[pos]
        _check_ascii(source, pos)
        if c not in SYMBOL_CHARS and c not in DIGITS:
            raise InvalidToken(f"invalid token: unexpected {c!r}", pos, pos + 1)
        pos += 1
    text = source[start:pos]
    if text in ("true", "false"):
        return Token("boolean", text, start, pos, text == "true")
    if text in KEYWORDS:
        return Token("keyword", text, start, pos)
    return Token("symbol", text, start, pos)


def lex(source: str) -> Iterator[Token]:
    """Token generator: yields Token tuples, raising on the first lexical error."""
    pos = 0
    n = len(source)
    while pos < n:
        c = source[pos]
        if c in WHITESPACE:
            pos += 1
            continue
        if c == ";":
            newline = source.find("\n", pos)
            pos = n if newline == -1 else newline + 1
            continue

        if c == "(":
            token = Token("lparen", c, pos, pos + 1)
        elif c == ")":
            token = Token("rparen", c, pos, pos + 1)
        elif c == "'":
            token = Token("quote", c, pos, pos + 1)
        elif c == "." and (pos + 1 >= n or source[pos + 1] in DELIMITERS):
            token = Token("dot", c, pos, pos + 1)
        elif c == '"':
            token = _lex_string(source, pos)
        elif c == "#" and source.startswith("#\\", pos):
            token = _lex_char(source, pos)
        elif c in DIGITS or (c == "-" and pos + 1 < n and source[pos + 1] in DIGITS):
            token = _lex_integer(source, pos)
        else:
            _check_ascii(source, pos)
            if c not in SYMBOL_CHARS:
                raise InvalidToken(f"invalid token: unexpected {c!r}", pos, pos + 1)
            token = _lex_symbol(source, pos)

        yield token
        pos = token.end


def _missing_parens_hint(depth: int) -> Optional[str]:
    if depth <= 0:
        return None
    return f"unclosed parens, maybe you're missing '{')' * depth}'?"


class TokenStream:
    """Recursive descent parser over a token iterator."""

    def __init__(self, tokens: Iterable[Token], symbols: SymbolTable, source_length: int = 0):
        self.tokens = iter(tokens)
        self.symbols = symbols
        self.source_length = source_length
        self._peeked: Optional[Token] = None
        self._exhausted = False
        self.last: Optional[Token] = None

    def peek(self) -> Optional[Token]:
        if self._peeked is None and not self._exhausted:
            self._peeked = next(self.tokens, None)
            if self._peeked is None:
                self._exhausted = True
        return self._peeked

    def advance(self) -> Optional[Token]:
        token = self.peek()
        self._peeked = None
        if token is not None:
            self.last = token
        return token

    def _eof(self, what: str, depth: int) -> UnexpectedEof:
        return UnexpectedEof(what, self.source_length, hint=_missing_parens_hint(depth))

    def too_deep(self) -> NestingTooDeep:
        """Error for a RecursionError raised while reading, placed at the last token read."""
        token = self.last
        return NestingTooDeep(
            "nesting too deep",
            token.start if token is not None else None,
            token.end if token is not None else None,
            hint="split the expression into smaller definitions",
        )

    def parse_expr(self, depth: int = 0) -> Optional[Datum]:
        """Parse one expression; None at end of input (top level only)."""
        token = self.advance()
        if token is None:
            if depth > 0:
                raise self._eof("list", depth)
            return None

        kind = token.kind
        if kind == "lparen":
            return self._parse_list(token, depth + 1)
        if kind == "quote":
            quoted = self.parse_expr(depth)
            if quoted is None:
                raise self._eof("expression", depth)
            return make_list([symbol(self.symbols.intern("quote")), quoted])
        if kind == "integer":
            return integer(token.value)
        if kind == "boolean":
            return boolean(token.value)
        if kind == "char":
            return character(token.value)
        if kind == "string":
            return string(token.value)
        if kind in ("symbol", "keyword"):
            return symbol(self.symbols.intern(token.text))
        # rparen or dot out of place
        raise InvalidToken(f"unexpected token: '{token.text}'", token.start, token.end)

    def _parse_list(self, open_token: Token, depth: int) -> Datum:
        items: list[Datum] = []
        while True:
            token = self.peek()
            if token is None:
                raise self._eof("list", depth)
            if token.kind == "rparen":
                self.advance()
                return make_list(items) if items else EMPTY_LIST
            if token.kind == "dot":
                if not items:
                    raise InvalidToken("unexpected token: '.'", token.start, token.end)
                self.advance()
                tail = self._parse_required(depth)
                closing = self.advance()
                if closing is None:
                    raise self._eof("list", depth)
                if closing.kind != "rparen":
                    raise InvalidToken(
                        "a dotted pair takes exactly one expression after '.'",
                        closing.start,
                        closing.end,
                    )
                return make_list(items, tail) if len(items) > 1 else pair(items[0], tail)
            items.append(self._parse_required(depth))

    def _parse_required(self, depth: int) -> Datum:
        expr = self.parse_expr(depth)
        if expr is None:
            raise self._eof("list", depth)
        return expr

    def parse_all(self) -> Iterator[Datum]:
        while (expr := self.parse_expr()) is not None:
            yield expr


def parse_program(source: str, symbols: SymbolTable) -> list[Datum]:
    """Parse every top-level form of `source`."""
    stream = TokenStream(lex(source), symbols, len(source))
    try:
        return list(stream.parse_all())
    except RecursionError:
        raise stream.too_deep() from None


def parse(source: str, symbols: SymbolTable) -> Datum:
    """Parse exactly one form from `source`."""
    stream = TokenStream(lex(source), symbols, len(source))
    try:
        expr = stream.parse_expr()
    except RecursionError:
        raise stream.too_deep() from None
    if expr is None:
        raise UnexpectedEof("expression", len(source))
    extra = stream.advance()
    if extra is not None:
        raise InvalidToken("extra token", extra.start, extra.end)
    return expr
