"""Lexer tokens."""

from dataclasses import dataclass
from enum import IntEnum, IntFlag

from scsspy.text import TextRange


class TokenKind(IntEnum):
    # -------------------------
    # Special / sentinels
    # -------------------------
    EOF = 1

    # -------------------------
    # Trivia tokens (emitted by the lexer)
    # -------------------------
    WHITESPACE = 10
    COMMENT = 11  # /* ... */
    LINE_COMMENT = 12  # // ... (scss)

    # -------------------------
    # Identifiers / literals
    # -------------------------
    IDENT = 20
    AT_KEYWORD = 21
    STRING = 22
    BAD_STRING = 23  # unterminated string
    UNQUOTED_STRING = 24  # unquoted url(...) argument
    HASH = 25
    NUMBER = 26
    PERCENTAGE = 27
    DIMENSION = 28
    UNICODE_RANGE = 29

    # -------------------------
    # Punctuation / separators
    # -------------------------
    COLON = 40  # :
    SEMICOLON = 41  # ;
    COMMA = 42  # ,
    EXCLAMATION = 43  # !
    CDO = 44  # <!--
    CDC = 45  # -->

    # -------------------------
    # Attribute selector operators
    # -------------------------
    INCLUDES = 50  # ~=
    DASHMATCH = 51  # |=
    SUBSTRING_OPERATOR = 52  # *=
    PREFIX_OPERATOR = 53  # ^=
    SUFFIX_OPERATOR = 54  # $=

    LBRACE = 60  # {
    RBRACE = 61  # }
    LBRACKET = 62  # [
    RBRACKET = 63  # ]
    LPAREN = 64  # (
    RPAREN = 65  # )

    # Any other single character; the token text tells which one.
    DELIM = 70

    # -------------------------
    # SCSS
    # -------------------------
    VARIABLE_NAME = 80  # $name
    INTERPOLATION_START = 81  # #{
    ELLIPSIS = 82  # ...
    EQUAL_EQUAL = 83  # ==
    NOT_EQUAL = 84  # !=
    GREATER_THAN_OR_EQUAL = 85  # >=
    LESS_THAN_OR_EQUAL = 86  # <=

    @property
    def is_trivia(self) -> bool:
        return self in (
            TokenKind.WHITESPACE,
            TokenKind.COMMENT,
            TokenKind.LINE_COMMENT,
        )


class TokenFlags(IntFlag):
    """Token metadata flags."""

    NONE = 0
    PRECEDING_LINE_BREAK = 1 << 0  # NEWLINE before
    PRECEDING_TRIVIA = 1 << 1  # whitespace or comment before
    HAS_ESCAPE = 1 << 2


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token (trivia or non-trivia)."""

    kind: TokenKind
    range: TextRange
    text: str
    flags: TokenFlags = TokenFlags.NONE

    @property
    def offset(self) -> int:
        return self.range.start

    @property
    def length(self) -> int:
        return self.range.len()

    @property
    def end(self) -> int:
        return self.range.end

    def has_preceding_line_break(self) -> bool:
        return bool(self.flags & TokenFlags.PRECEDING_LINE_BREAK)

    def preceded_by_trivia(self) -> bool:
        return bool(self.flags & TokenFlags.PRECEDING_TRIVIA)

    def with_flags(self, flags: TokenFlags) -> "Token":
        return Token(self.kind, self.range, self.text, flags)
