"""Recursive-descent parser core: token cursor plus tree construction."""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeAlias

from scsspy.cst import Node
from scsspy.diagnostics import Diagnostic, DiagnosticSpec
from scsspy.lexer import Token, TokenKind
from scsspy.parser.options import ParserOptions
from scsspy.parser.parse_recovery import ParseRecoveryTokenSet
from scsspy.parser.token_source import TokenSource, TokenSourceCheckpoint
from scsspy.syntax import NodeType
from scsspy.text import TextRange

Production: TypeAlias = Callable[[], Node | None]


@dataclass(frozen=True, slots=True)
class ParserCheckpoint:
    source_checkpoint: TokenSourceCheckpoint
    last_error_position: int

    @property
    def position(self) -> int:
        return self.source_checkpoint.position


@dataclass(slots=True)
class ParserProgress:
    """Detect parser stalls inside list-style loops."""

    _position: int | None = None

    def has_progressed(self, parser: "Parser") -> bool:
        has_progressed = self._position is None or self._position < parser.position
        self._position = parser.position
        return has_progressed


class Parser:
    """Token cursor and node factory shared by every grammar production.

    Lookahead never runs off the stream: the current token is EOF at the end
    of input, and consuming EOF is a no-op.
    """

    def __init__(self, source: TokenSource, options: ParserOptions | None = None) -> None:
        self._source = source
        self._options = options or ParserOptions()
        self._last_error_position = -1

    @property
    def source(self) -> TokenSource:
        return self._source

    @property
    def options(self) -> ParserOptions:
        return self._options

    @property
    def token(self) -> Token:
        return self._source.current

    @property
    def position(self) -> int:
        return self._source.position

    # ------------------------------------------------------------------
    # Lookahead
    # ------------------------------------------------------------------

    def peek(self, kind: TokenKind) -> bool:
        return self.token.kind == kind

    def peek_one(self, *kinds: TokenKind) -> bool:
        return self.token.kind in kinds

    def peek_regexp(self, kind: TokenKind, pattern: re.Pattern[str]) -> bool:
        token = self.token
        return token.kind == kind and pattern.search(token.text) is not None

    def peek_ident(self, text: str) -> bool:
        token = self.token
        return token.kind == TokenKind.IDENT and token.text.lower() == text

    def peek_keyword(self, text: str) -> bool:
        token = self.token
        return token.kind == TokenKind.AT_KEYWORD and token.text.lower() == text

    def peek_delim(self, text: str) -> bool:
        token = self.token
        return token.kind == TokenKind.DELIM and token.text == text

    def has_whitespace(self) -> bool:
        """Whether whitespace or a comment separates the current token from the previous one."""
        return self._source.has_preceding_trivia

    # ------------------------------------------------------------------
    # Consumption
    # ------------------------------------------------------------------

    def consume(self) -> Token:
        return self._source.bump()

    def accept(self, kind: TokenKind) -> bool:
        if self.peek(kind):
            self.consume()
            return True
        return False

    def accept_ident(self, text: str) -> bool:
        if self.peek_ident(text):
            self.consume()
            return True
        return False

    def accept_keyword(self, text: str) -> bool:
        if self.peek_keyword(text):
            self.consume()
            return True
        return False

    def accept_one_keyword(self, keywords: frozenset[str]) -> bool:
        token = self.token
        if token.kind == TokenKind.AT_KEYWORD and token.text.lower() in keywords:
            self.consume()
            return True
        return False

    def accept_delim(self, text: str) -> bool:
        if self.peek_delim(text):
            self.consume()
            return True
        return False

    def accept_regexp(self, pattern: re.Pattern[str]) -> bool:
        if self.token.kind != TokenKind.EOF and pattern.match(self.token.text):
            self.consume()
            return True
        return False

    # ------------------------------------------------------------------
    # Backtracking
    # ------------------------------------------------------------------

    def mark(self) -> ParserCheckpoint:
        return ParserCheckpoint(
            source_checkpoint=self._source.checkpoint,
            last_error_position=self._last_error_position,
        )

    def restore(self, checkpoint: ParserCheckpoint) -> None:
        self._source.rewind(checkpoint.source_checkpoint)
        self._last_error_position = checkpoint.last_error_position

    def try_parse(self, production: Production) -> Node | None:
        """Run ``production`` and rewind the cursor if it does not match."""
        checkpoint = self.mark()
        node = production()
        if node is None:
            self.restore(checkpoint)
        return node

    def first_of(self, *productions: Production) -> Node | None:
        """Ordered choice: the first production that matches wins.

        Later alternatives are never run once one matches, and a production
        that does not match is rewound before the next one is tried.
        """
        for production in productions:
            node = self.try_parse(production)
            if node is not None:
                return node
        return None

    # ------------------------------------------------------------------
    # Tree construction
    # ------------------------------------------------------------------

    def create(self, type: NodeType) -> Node:
        return Node(type, self.token.offset)

    def finish(
        self,
        node: Node,
        error: DiagnosticSpec | None = None,
        resync: tuple[TokenKind, ...] = (),
        stop: tuple[TokenKind, ...] = (),
    ) -> Node:
        """Close ``node`` at the last consumed token, reporting ``error`` first if given."""
        if error is not None:
            self.mark_error(node, error, resync, stop)
        node.finish_at(self._source.prev_end)
        return node

    def mark_error(
        self,
        node: Node,
        error: DiagnosticSpec,
        resync: tuple[TokenKind, ...] = (),
        stop: tuple[TokenKind, ...] = (),
    ) -> None:
        token = self.token
        report = self._source.position != self._last_error_position
        self._last_error_position = self._source.position

        skipped: TextRange | None = None
        recovery = ParseRecoveryTokenSet.of(resync, stop)
        if recovery is not None:
            skipped = recovery.recover(self._source).skipped

        if report:
            node.add_diagnostic(
                Diagnostic(
                    code=error.code,
                    message=error.message,
                    range=token.range,
                    severity=error.severity,
                    hint=error.hint,
                    category=error.category,
                    skipped=skipped,
                )
            )

    def precede(self, node: Node, type: NodeType) -> Node:
        """Open a node of ``type`` that starts where ``node`` starts and owns it.

        If ``node`` already has a parent the new node takes its place there.
        """
        wrapper = Node(type, node.offset)
        if node.parent is not None:
            node.parent.replace_child(node, wrapper)
        wrapper.add_child(node)
        return wrapper

    def wrap(self, node: Node, type: NodeType) -> Node:
        """Like ``precede`` but the new node is finished and spans exactly ``node``."""
        wrapper = self.precede(node, type)
        wrapper.finish_at(node.end)
        return wrapper
