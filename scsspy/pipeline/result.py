"""Parse carriers for parse-once/consume-many workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from scsspy.diagnostics import has_errors
from scsspy.parser.options import ParserOptions
from scsspy.parser.parse import ParsedTree

if TYPE_CHECKING:
    from scsspy.cst import Node
    from scsspy.diagnostics import Diagnostic
    from scsspy.syntax import NodeType


@dataclass(slots=True)
class ParseResultBase:
    """Shared parse carrier: the source text and the parsed tree."""

    source_text: str
    parsed: ParsedTree

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self.parsed.diagnostics

    @property
    def has_errors(self) -> bool:
        return has_errors(self.parsed.diagnostics)

    @property
    def root(self) -> Node:
        return self.parsed.root


@dataclass(slots=True)
class ScssParseResult(ParseResultBase):
    """Stylesheet parse result with cached tree queries."""

    options: ParserOptions
    _nodes: list[Node] | None = field(default=None, init=False, repr=False)

    def text_of(self, node: Node) -> str:
        return node.text(self.source_text)

    def nodes(self) -> list[Node]:
        """Every node of the tree in pre-order, computed once."""
        if self._nodes is None:
            self._nodes = list(self.parsed.root.walk())
        return self._nodes

    def nodes_of_type(self, type: NodeType) -> list[Node]:
        return [node for node in self.nodes() if node.type == type]
