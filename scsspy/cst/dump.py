"""Plain-text rendering of parse trees for debugging."""

from __future__ import annotations

from scsspy.cst.node import Node

_MAX_LEAF_TEXT = 40


def format_tree(root: Node, source: str) -> str:
    """One line per node: type, range, roles and (for leaves) the covered text."""
    lines: list[str] = []

    def walk(node: Node, depth: int, role: str | None) -> None:
        indent = "  " * depth
        label = f"{node.type.name} {node.range.as_tuple()}"
        if role is not None:
            label = f"{role}={label}"
        if node.reference_types:
            label += " refs=" + ",".join(node.reference_types)
        if not node.children:
            text = node.text(source).replace("\n", "\\n")
            if len(text) > _MAX_LEAF_TEXT:
                text = text[: _MAX_LEAF_TEXT - 3] + "..."
            label += f" text={text!r}"
        lines.append(indent + label)
        for diagnostic in node.diagnostics:
            lines.append(f"{indent}  ! {diagnostic.code} at {diagnostic.range.as_tuple()}")
        for child in node.children:
            walk(child, depth + 1, node.role_of(child))

    walk(root, 0, None)
    return "\n".join(lines)
