"""Lexer."""

import re

from scsspy.diagnostics import Diagnostic
from scsspy.diagnostics.codes import (
    LEXER_UNTERMINATED_COMMENT,
    LEXER_UNTERMINATED_STRING,
    DiagnosticSpec,
)
from scsspy.lexer.tokens import Token, TokenFlags, TokenKind
from scsspy.text import TextRange, slice_text_range

_UNICODE_RANGE = re.compile(r"[uU]\+[0-9a-fA-F?]{1,6}(?:-[0-9a-fA-F]{1,6})?")
_URL_FUNCTION = re.compile(r"^url(-prefix)?$", re.IGNORECASE)

_WHITESPACE = " \t\n\r\f"
_NEWLINES = "\n\r\f"


def _is_ident_first(ch: str) -> bool:
    return ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ord(ch) >= 0x80


def _is_ident_char(ch: str) -> bool:
    return _is_ident_first(ch) or ch == "-" or ch.isdigit()


class Lexer:
    """Lossless CSS/SCSS lexer that emits trivia and non-trivia tokens."""

    def __init__(self, source: str, *, scss: bool = True) -> None:
        self._source = source
        self._scss = scss
        self._position = 0
        self._after_newline = False
        self._current_start = 0
        self._current_flags = TokenFlags.NONE
        self._url_pending = False
        self._in_url = False
        self._diagnostics: list[Diagnostic] = []

    @property
    def source(self) -> str:
        """Original source text."""
        return self._source

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """List of diagnostics emitted during lexing."""
        return self._diagnostics

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_eof(self) -> bool:
        return self._position >= len(self._source)

    def next_token(self) -> Token:
        self._current_start = self._position
        self._current_flags = TokenFlags.NONE

        if self.is_eof:
            return self._make_token(TokenKind.EOF)

        kind = self._lex_token()
        if self._after_newline and not kind.is_trivia:
            self._current_flags |= TokenFlags.PRECEDING_LINE_BREAK
            self._after_newline = False
        return self._make_token(kind)

    def lex(self) -> list[Token]:
        tokens: list[Token] = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.kind == TokenKind.EOF:
                break
        return tokens

    def _make_token(self, kind: TokenKind) -> Token:
        rng = TextRange(self._current_start, self._position)
        return Token(kind, rng, slice_text_range(self._source, rng), self._current_flags)

    def _lex_token(self) -> TokenKind:
        ch = self._current_char()

        if ch in _WHITESPACE:
            return self._consume_whitespaces()

        if ch == "/" and self._peek_char() == "*":
            return self._lex_block_comment()
        if self._scss and ch == "/" and self._peek_char() == "/":
            return self._lex_line_comment()

        in_url, self._in_url = self._in_url, False
        if in_url and ch not in "\"')":
            if self._lex_unquoted_url():
                return TokenKind.UNQUOTED_STRING

        if ch == '"' or ch == "'":
            return self._lex_string(ch)

        if self._scss:
            kind = self._lex_scss_token(ch)
            if kind is not None:
                return kind

        if ch.isdigit() or (ch == "." and self._peek_char().isdigit()):
            return self._lex_number()

        if ch == "#":
            self._advance(1)
            if not self._consume_name():
                return TokenKind.DELIM
            return TokenKind.HASH

        if ch == "@":
            self._advance(1)
            if not self._consume_ident():
                return TokenKind.DELIM
            return TokenKind.AT_KEYWORD

        if ch == "<" and self._source.startswith("<!--", self._position):
            self._advance(4)
            return TokenKind.CDO
        if ch == "-" and self._source.startswith("-->", self._position):
            self._advance(3)
            return TokenKind.CDC

        if ch in "uU" and (match := _UNICODE_RANGE.match(self._source, self._position)):
            self._advance(match.end() - self._position)
            return TokenKind.UNICODE_RANGE

        if self._consume_ident():
            text = self._source[self._current_start : self._position]
            self._url_pending = self._current_char() == "(" and _URL_FUNCTION.match(text) is not None
            return TokenKind.IDENT

        # Two-character operators
        if self._peek_char() == "=":
            two_char = {
                "~": TokenKind.INCLUDES,
                "|": TokenKind.DASHMATCH,
                "*": TokenKind.SUBSTRING_OPERATOR,
                "^": TokenKind.PREFIX_OPERATOR,
                "$": TokenKind.SUFFIX_OPERATOR,
            }.get(ch)
            if two_char is not None:
                self._advance(2)
                return two_char

        self._advance(1)
        match ch:
            case ":":
                return TokenKind.COLON
            case ";":
                return TokenKind.SEMICOLON
            case ",":
                return TokenKind.COMMA
            case "!":
                return TokenKind.EXCLAMATION
            case "{":
                return TokenKind.LBRACE
            case "}":
                return TokenKind.RBRACE
            case "[":
                return TokenKind.LBRACKET
            case "]":
                return TokenKind.RBRACKET
            case "(":
                self._in_url = self._url_pending
                self._url_pending = False
                return TokenKind.LPAREN
            case ")":
                return TokenKind.RPAREN
            case _:
                return TokenKind.DELIM

    def _lex_scss_token(self, ch: str) -> TokenKind | None:
        nxt = self._peek_char()
        if ch == "$" and _is_ident_char(nxt):
            self._advance(1)
            self._consume_name()
            return TokenKind.VARIABLE_NAME
        if ch == "#" and nxt == "{":
            self._advance(2)
            return TokenKind.INTERPOLATION_START
        if ch == "." and self._source.startswith("...", self._position):
            self._advance(3)
            return TokenKind.ELLIPSIS
        if nxt == "=":
            kind = {
                "=": TokenKind.EQUAL_EQUAL,
                "!": TokenKind.NOT_EQUAL,
                ">": TokenKind.GREATER_THAN_OR_EQUAL,
                "<": TokenKind.LESS_THAN_OR_EQUAL,
            }.get(ch)
            if kind is not None:
                self._advance(2)
                return kind
        return None

    def _lex_block_comment(self) -> TokenKind:
        self._advance(2)
        end = self._source.find("*/", self._position)
        if end < 0:
            self._position = len(self._source)
            self._report(LEXER_UNTERMINATED_COMMENT)
        else:
            self._position = end + 2
        return TokenKind.COMMENT

    def _lex_line_comment(self) -> TokenKind:
        # Consume until end of line, do not consume the newline itself.
        self._advance(2)
        while not self.is_eof and self._current_char() not in _NEWLINES:
            self._advance(1)
        return TokenKind.LINE_COMMENT

    def _lex_string(self, quote: str) -> TokenKind:
        # Consume opening quote
        self._advance(1)
        while not self.is_eof:
            ch = self._current_char()
            if ch == quote:
                self._advance(1)
                return TokenKind.STRING
            if ch == "\\":
                self._current_flags |= TokenFlags.HAS_ESCAPE
                self._advance(1)
                if not self.is_eof:
                    # escaped newline continues the string
                    if self._current_char() == "\r" and self._peek_char() == "\n":
                        self._advance(1)
                    self._advance(1)
                continue
            if ch in _NEWLINES:
                break
            self._advance(1)

        self._report(LEXER_UNTERMINATED_STRING)
        return TokenKind.BAD_STRING

    def _lex_unquoted_url(self) -> bool:
        start = self._position
        while not self.is_eof:
            ch = self._current_char()
            if ch in _WHITESPACE or ch in "\"'()":
                break
            if ch == "\\" and self._peek_char() not in _NEWLINES + "\0":
                self._advance(2)
                continue
            self._advance(1)

        end = self._position
        while not self.is_eof and self._current_char() in _WHITESPACE:
            self._advance(1)

        if end > start and self._current_char() == ")":
            self._position = end
            return True

        self._position = start
        return False

    def _lex_number(self) -> TokenKind:
        saw_dot = False
        while not self.is_eof:
            ch = self._current_char()
            if ch.isdigit():
                self._advance(1)
                continue
            if ch == "." and not saw_dot and self._peek_char().isdigit():
                saw_dot = True
                self._advance(1)
                continue
            break

        if self._current_char() == "%":
            self._advance(1)
            return TokenKind.PERCENTAGE
        if self._consume_ident():
            return TokenKind.DIMENSION
        return TokenKind.NUMBER

    def _consume_ident(self) -> bool:
        start = self._position
        if self._current_char() == "-":
            self._advance(1)
            nxt = self._current_char()
            if not (nxt == "-" or _is_ident_first(nxt) or self._at_escape()):
                self._position = start
                return False
        elif not (_is_ident_first(self._current_char()) or self._at_escape()):
            return False
        self._consume_name()
        return True

    def _consume_name(self) -> bool:
        start = self._position
        while not self.is_eof:
            if self._at_escape():
                self._current_flags |= TokenFlags.HAS_ESCAPE
                self._advance(2)
                continue
            if not _is_ident_char(self._current_char()):
                break
            self._advance(1)
        return self._position > start

    def _at_escape(self) -> bool:
        return self._current_char() == "\\" and self._peek_char() not in _NEWLINES + "\0"

    def _consume_whitespaces(self) -> TokenKind:
        while not self.is_eof:
            ch = self._current_char()
            if ch not in _WHITESPACE:
                break
            if ch in _NEWLINES:
                self._after_newline = True
            self._advance(1)
        return TokenKind.WHITESPACE

    def _report(self, spec: DiagnosticSpec) -> None:
        self._diagnostics.append(
            Diagnostic(
                code=spec.code,
                message=spec.message,
                range=TextRange(self._current_start, self._position),
                severity=spec.severity,
                hint=spec.hint,
                category=spec.category,
            )
        )

    def _current_char(self) -> str:
        if self.is_eof:
            return "\0"
        return self._source[self._position]

    def _peek_char(self, ahead: int = 1) -> str:
        index = self._position + ahead
        if index >= len(self._source):
            return "\0"
        return self._source[index]

    def _advance(self, steps: int) -> None:
        self._position += steps


def token_text(
    source: str,
    token: Token,
    null_char_on_eof: bool = False,
) -> str:
    """Get the text of a token from the source string based on its range."""
    if token.kind == TokenKind.EOF:
        return "\0" if null_char_on_eof else ""
    return slice_text_range(source, token.range)


def dump_tokens(tokens: list[Token], source: str, diagnostics: list[Diagnostic] | None = None) -> None:
    """Print token list with kind, range, flags, and text for debugging."""
    for i, tok in enumerate(tokens):
        text = token_text(source, tok)
        print(f"{i:03d} {tok.kind.name:<22} range={tok.range.as_tuple()} flags={tok.flags} text={text!r}")

    if diagnostics is not None:
        print("\nDiagnostics:")
        for d in diagnostics:
            print(f"- {d.severity.upper()} {d.code} range={d.range.as_tuple()} message={d.message}")
