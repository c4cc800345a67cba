"""Dotted-path lookup over a Node tree."""

from __future__ import annotations

from .node import Node, NodeValue


def resolve(node: Node, path: str) -> NodeValue | None:
    """Resolve a dotted *path* such as ``root.child.key`` from *node*.

    - A key component selects the first value stored under that key.
    - A numeric component directly after a key selects that value's index
      instead (0-based), e.g. ``root.sub_node.1.key``.
    - Missing keys, out-of-range indexes and stepping into a leaf give None.

    A key that is itself all digits is still found when it exists in the
    current node.
    """
    current: NodeValue = node
    values: list[NodeValue] | None = None

    for part in path.split("."):
        if values is not None and part.isdigit() and not (
            isinstance(current, Node) and part in current
        ):
            idx = int(part)
            if idx >= len(values):
                return None
            current = values[idx]
            values = None
            continue

        if not isinstance(current, Node) or part not in current:
            return None
        values = current.get_values(part)
        current = values[0]

    return current
