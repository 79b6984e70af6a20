"""Diagnostics core types."""

from dataclasses import dataclass
from typing import Literal

from scsspy.text import TextRange

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic emitted by the lexer and parser.

    ``skipped`` is the range of tokens discarded by panic-mode recovery
    after the diagnostic was reported, if any.
    """

    code: str
    message: str
    range: TextRange
    severity: Severity = "error"
    hint: str | None = None
    category: str | None = None
    skipped: TextRange | None = None
