"""Concrete syntax tree model."""

from scsspy.cst.dump import format_tree
from scsspy.cst.node import Node, Role

__all__ = [
    "Node",
    "Role",
    "format_tree",
]
