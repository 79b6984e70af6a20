"""Parser infrastructure (token source + recursive-descent grammars)."""

from scsspy.parser.css import CssGrammar
from scsspy.parser.options import Dialect, ParserOptions
from scsspy.parser.parse import ParsedTree, parse, parse_result, parse_tokens
from scsspy.parser.parse_recovery import ParseRecoveryTokenSet, RecoveryOutcome, RecoveryResult
from scsspy.parser.parser import Parser, ParserCheckpoint, ParserProgress, Production
from scsspy.parser.scss import ScssGrammar
from scsspy.parser.token_source import TokenSource, TokenSourceCheckpoint

__all__ = [
    "CssGrammar",
    "Dialect",
    "ParseRecoveryTokenSet",
    "ParsedTree",
    "Parser",
    "ParserCheckpoint",
    "ParserOptions",
    "ParserProgress",
    "Production",
    "RecoveryOutcome",
    "RecoveryResult",
    "ScssGrammar",
    "TokenSource",
    "TokenSourceCheckpoint",
    "parse",
    "parse_result",
    "parse_tokens",
]
