"""Syntax kinds."""

from scsspy.syntax.kind import NodeType, ReferenceType

__all__ = [
    "NodeType",
    "ReferenceType",
]
