"""Token source that hides trivia and records it as a flag on the next token."""

from collections.abc import Iterable
from dataclasses import dataclass

from scsspy.lexer.tokens import Token, TokenFlags, TokenKind
from scsspy.text import TextRange


@dataclass(frozen=True, slots=True)
class TokenSourceCheckpoint:
    position: int
    prev_end: int


class TokenSource:
    """Cursor over a fully materialized list of non-trivia tokens.

    Trivia tokens are dropped while building the list; each surviving token
    carries ``PRECEDING_TRIVIA`` when whitespace, a comment, or any gap in the
    source separates it from the previous significant token. The list always
    ends with exactly one EOF token.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens = _significant_tokens(tokens)
        self._position = 0
        self._prev_end = 0

    @property
    def tokens(self) -> list[Token]:
        return self._tokens

    @property
    def current(self) -> Token:
        return self._tokens[self._position]

    @property
    def current_range(self) -> TextRange:
        return self.current.range

    @property
    def position(self) -> int:
        """Index of the current token."""
        return self._position

    @property
    def prev_end(self) -> int:
        """End offset of the last consumed token (0 before the first bump)."""
        return self._prev_end

    @property
    def is_eof(self) -> bool:
        return self.current.kind == TokenKind.EOF

    @property
    def has_preceding_trivia(self) -> bool:
        return self.current.preceded_by_trivia()

    @property
    def has_preceding_line_break(self) -> bool:
        return self.current.has_preceding_line_break()

    @property
    def checkpoint(self) -> TokenSourceCheckpoint:
        return TokenSourceCheckpoint(self._position, self._prev_end)

    def bump(self) -> Token:
        """Consume the current token. EOF is never consumed."""
        token = self.current
        if token.kind != TokenKind.EOF:
            self._prev_end = token.end
            self._position += 1
        return token

    def skip(self) -> Token:
        """Discard the current token without extending the last consumed end."""
        token = self.current
        if token.kind != TokenKind.EOF:
            self._position += 1
        return token

    def rewind(self, checkpoint: TokenSourceCheckpoint) -> None:
        self._position = checkpoint.position
        self._prev_end = checkpoint.prev_end


def _significant_tokens(tokens: Iterable[Token]) -> list[Token]:
    significant: list[Token] = []
    saw_trivia = False
    prev_end = 0
    text_end = 0

    for token in tokens:
        text_end = max(text_end, token.end)
        if token.kind.is_trivia:
            saw_trivia = True
            continue

        flags = token.flags & ~TokenFlags.PRECEDING_TRIVIA
        if saw_trivia or (significant and token.offset > prev_end):
            flags |= TokenFlags.PRECEDING_TRIVIA
        significant.append(token if flags == token.flags else token.with_flags(flags))
        saw_trivia = False
        prev_end = token.end

        if token.kind == TokenKind.EOF:
            return significant

    flags = TokenFlags.PRECEDING_TRIVIA if saw_trivia else TokenFlags.NONE
    significant.append(Token(TokenKind.EOF, TextRange.empty(text_end), "", flags))
    return significant
