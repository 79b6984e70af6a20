"""Mutable parse-tree nodes built by the grammar productions."""

from __future__ import annotations

from collections.abc import Iterator
from enum import StrEnum

from scsspy.diagnostics import Diagnostic
from scsspy.syntax import NodeType, ReferenceType
from scsspy.text import TextRange


class Role(StrEnum):
    """Named single-slot references a node can hold into its own subtree."""

    IDENTIFIER = "identifier"
    VALUE = "value"
    VARIABLE = "variable"
    EXPRESSION = "expression"
    ELSE_CLAUSE = "else-clause"
    DEFAULT_VALUE = "default-value"
    KEY = "key"
    LEFT = "left"
    RIGHT = "right"
    OPERATOR = "operator"
    PROPERTY = "property"
    KEYWORD = "keyword"
    CONTENT = "content"
    NESTED_PROPERTIES = "nested-properties"
    DECLARATIONS = "declarations"
    NAMESPACE_PREFIX = "namespace-prefix"
    MEDIALIST = "medialist"
    NAMES = "names"

    # list-valued roles, backed by a NODE_LIST child
    SELECTORS = "selectors"
    PARAMETERS = "parameters"
    ARGUMENTS = "arguments"
    VARIABLES = "variables"


class Node:
    """A parse-tree element.

    A node exclusively owns its children. Roles are views into the node's own
    subtree, never a second owner. The range is ``[offset, end)`` and only grows
    while the node is being built; the parser fixes it once in ``finish``.
    """

    __slots__ = (
        "type",
        "parent",
        "reference_types",
        "colon_position",
        "semicolon_position",
        "needs_semicolon",
        "_start",
        "_end",
        "_children",
        "_roles",
        "_diagnostics",
        "_finished",
    )

    def __init__(self, type: NodeType, start: int, end: int | None = None) -> None:
        self.type = type
        self.parent: Node | None = None
        self.reference_types: tuple[ReferenceType, ...] = ()
        self.colon_position = -1
        self.semicolon_position = -1
        self.needs_semicolon = True
        self._start = start
        self._end = start if end is None else end
        self._children: list[Node] = []
        self._roles: dict[Role, Node] = {}
        self._diagnostics: list[Diagnostic] = []
        self._finished = False

    def __repr__(self) -> str:
        return f"Node({self.type.name}, {self._start}..{self._end})"

    @property
    def offset(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._end

    @property
    def length(self) -> int:
        return self._end - self._start

    @property
    def range(self) -> TextRange:
        return TextRange(self._start, self._end)

    @property
    def children(self) -> tuple[Node, ...]:
        return tuple(self._children)

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    @property
    def is_finished(self) -> bool:
        return self._finished

    def text(self, source: str) -> str:
        return source[self._start : self._end]

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def add_child(self, node: Node | None) -> bool:
        if node is None:
            return False
        if node is self or node.is_ancestor_of(self):
            raise RuntimeError(f"Adding {node!r} to {self!r} would create a cycle")
        if node.parent is not None:
            node.parent._detach(node)

        if not self._children and self.type == NodeType.NODE_LIST:
            self._start = node._start
        node.parent = self
        self._children.append(node)
        if node._end > self._end:
            self._end = node._end
        return True

    def replace_child(self, old: Node, new: Node) -> None:
        index = self._children.index(old)
        if new.parent is not None:
            new.parent._detach(new)
        old.parent = None
        new.parent = self
        self._children[index] = new

    def add_diagnostic(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)

    def set_role(self, role: Role, node: Node | None) -> bool:
        if node is None:
            return False
        if not self.is_ancestor_of(node):
            self.add_child(node)
        self._roles[role] = node
        return True

    def get(self, role: Role) -> Node | None:
        return self._roles.get(role)

    def role_of(self, child: Node) -> Role | None:
        for role, node in self._roles.items():
            if node is child:
                return role
        return None

    def list_of(self, role: Role) -> Node:
        """Return the NODE_LIST child backing a list-valued role, creating it on first use.

        Only the grammar calls this, while the node is still open.
        """
        existing = self._roles.get(role)
        if existing is not None:
            return existing
        if self._finished:
            raise RuntimeError(f"cannot add a {role} list to finished {self!r}")
        anchor = self._children[-1]._end if self._children else self._start
        nodes = Node(NodeType.NODE_LIST, anchor)
        nodes._finished = True
        self.set_role(role, nodes)
        return nodes

    def _detach(self, node: Node) -> None:
        self._children.remove(node)
        node.parent = None

    def finish_at(self, end: int) -> None:
        """Fix the end of the range. A node is finished exactly once."""
        if self._finished:
            raise RuntimeError(f"{self!r} finished twice")
        self._end = max(end, self._start, self._end)
        self._finished = True

    # Named setters. Each returns whether a node was supplied.

    def set_identifier(self, node: Node | None) -> bool:
        return self.set_role(Role.IDENTIFIER, node)

    def set_value(self, node: Node | None) -> bool:
        return self.set_role(Role.VALUE, node)

    def set_variable(self, node: Node | None) -> bool:
        return self.set_role(Role.VARIABLE, node)

    def set_expression(self, node: Node | None) -> bool:
        return self.set_role(Role.EXPRESSION, node)

    def set_else_clause(self, node: Node | None) -> bool:
        return self.set_role(Role.ELSE_CLAUSE, node)

    def set_default_value(self, node: Node | None) -> bool:
        return self.set_role(Role.DEFAULT_VALUE, node)

    def set_key(self, node: Node | None) -> bool:
        return self.set_role(Role.KEY, node)

    def set_left(self, node: Node | None) -> bool:
        return self.set_role(Role.LEFT, node)

    def set_right(self, node: Node | None) -> bool:
        return self.set_role(Role.RIGHT, node)

    def set_operator(self, node: Node | None) -> bool:
        return self.set_role(Role.OPERATOR, node)

    def set_property(self, node: Node | None) -> bool:
        return self.set_role(Role.PROPERTY, node)

    def set_keyword(self, node: Node | None) -> bool:
        return self.set_role(Role.KEYWORD, node)

    def set_content(self, node: Node | None) -> bool:
        return self.set_role(Role.CONTENT, node)

    def set_nested_properties(self, node: Node | None) -> bool:
        return self.set_role(Role.NESTED_PROPERTIES, node)

    def set_declarations(self, node: Node | None) -> bool:
        return self.set_role(Role.DECLARATIONS, node)

    def set_namespace_prefix(self, node: Node | None) -> bool:
        return self.set_role(Role.NAMESPACE_PREFIX, node)

    def set_medialist(self, node: Node | None) -> bool:
        return self.set_role(Role.MEDIALIST, node)

    def set_names(self, node: Node | None) -> bool:
        return self.set_role(Role.NAMES, node)

    # Role views

    @property
    def identifier(self) -> Node | None:
        return self._roles.get(Role.IDENTIFIER)

    @property
    def value(self) -> Node | None:
        return self._roles.get(Role.VALUE)

    @property
    def variable(self) -> Node | None:
        return self._roles.get(Role.VARIABLE)

    @property
    def expression(self) -> Node | None:
        return self._roles.get(Role.EXPRESSION)

    @property
    def else_clause(self) -> Node | None:
        return self._roles.get(Role.ELSE_CLAUSE)

    @property
    def content(self) -> Node | None:
        return self._roles.get(Role.CONTENT)

    @property
    def nested_properties(self) -> Node | None:
        return self._roles.get(Role.NESTED_PROPERTIES)

    @property
    def declarations(self) -> Node | None:
        return self._roles.get(Role.DECLARATIONS)

    def items_of(self, role: Role) -> tuple[Node, ...]:
        """Entries of a list-valued role; empty when the list was never created."""
        nodes = self._roles.get(role)
        return nodes.children if nodes is not None else ()

    @property
    def selectors(self) -> tuple[Node, ...]:
        return self.items_of(Role.SELECTORS)

    @property
    def parameters(self) -> tuple[Node, ...]:
        return self.items_of(Role.PARAMETERS)

    @property
    def arguments(self) -> tuple[Node, ...]:
        return self.items_of(Role.ARGUMENTS)

    @property
    def variables(self) -> tuple[Node, ...]:
        return self.items_of(Role.VARIABLES)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def is_ancestor_of(self, node: Node) -> bool:
        current = node.parent
        while current is not None:
            if current is self:
                return True
            current = current.parent
        return False

    def walk(self) -> Iterator[Node]:
        """Pre-order traversal including this node."""
        stack: list[Node] = [self]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current._children))

    def find_all(self, type: NodeType) -> list[Node]:
        return [node for node in self.walk() if node.type == type]

    def find_first(self, type: NodeType) -> Node | None:
        for node in self.walk():
            if node.type == type:
                return node
        return None

    def node_at_offset(self, offset: int) -> Node | None:
        """Deepest node whose range contains ``offset``."""
        if not self.range.contains(offset):
            return None
        for child in self._children:
            found = child.node_at_offset(offset)
            if found is not None:
                return found
        return self

    def all_diagnostics(self) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        for node in self.walk():
            diagnostics.extend(node._diagnostics)
        return diagnostics

    def has_errors(self) -> bool:
        return any(node._diagnostics for node in self.walk())
