"""Error-tolerant SCSS parser producing a concrete syntax tree."""

from scsspy.parser import Dialect, ParsedTree, ParserOptions, parse, parse_result, parse_tokens

__all__ = [
    "Dialect",
    "ParsedTree",
    "ParserOptions",
    "parse",
    "parse_result",
    "parse_tokens",
]
