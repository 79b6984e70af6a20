"""Shared parse carriers."""

from scsspy.pipeline.result import ParseResultBase, ScssParseResult

__all__ = [
    "ParseResultBase",
    "ScssParseResult",
]
