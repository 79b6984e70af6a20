"""Panic-mode recovery primitives."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from scsspy.lexer import TokenKind
from scsspy.text import TextRange

if TYPE_CHECKING:
    from scsspy.parser.token_source import TokenSource


class RecoveryOutcome(StrEnum):
    RESYNCED = "resynced"
    STOPPED = "stopped"
    EOF = "eof"


@dataclass(frozen=True, slots=True)
class RecoveryResult:
    outcome: RecoveryOutcome
    skipped: TextRange | None = None


@dataclass(frozen=True, slots=True)
class ParseRecoveryTokenSet:
    """Discard tokens until a safe token is reached.

    A token in ``recovery_set`` is consumed and ends recovery. A token in
    ``stop_set`` ends recovery without being consumed. End of input always
    ends recovery.
    """

    recovery_set: frozenset[TokenKind]
    stop_set: frozenset[TokenKind] = frozenset()

    @staticmethod
    def of(
        resync: tuple[TokenKind, ...] = (),
        stop: tuple[TokenKind, ...] = (),
    ) -> ParseRecoveryTokenSet | None:
        if not resync and not stop:
            return None
        return ParseRecoveryTokenSet(frozenset(resync), frozenset(stop))

    def recover(self, source: TokenSource) -> RecoveryResult:
        start = source.current.offset
        end = start

        while True:
            token = source.current
            if token.kind in self.recovery_set:
                source.bump()
                return RecoveryResult(RecoveryOutcome.RESYNCED, _skipped(start, end))
            if token.kind in self.stop_set:
                return RecoveryResult(RecoveryOutcome.STOPPED, _skipped(start, end))
            if token.kind == TokenKind.EOF:
                return RecoveryResult(RecoveryOutcome.EOF, _skipped(start, end))
            end = token.end
            source.skip()


def _skipped(start: int, end: int) -> TextRange | None:
    if end <= start:
        return None
    return TextRange(start, end)
