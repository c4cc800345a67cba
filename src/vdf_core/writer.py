"""Writer: serializes a Node tree back to VDF text."""

from __future__ import annotations

from .node import Node

INDENT = "    "

_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"', "\n": "\\n"})


def quote(text: str) -> str:
    """Quote *text* so that the parser reads it back unchanged."""
    return '"' + text.translate(_ESCAPES) + '"'


def write(root: Node, new_line_on_node: bool = False) -> str:
    """Serialize *root*.

    Keys come out in sorted order and every value of a key is written, in
    stored order. With *new_line_on_node* each opening brace goes on its own
    line. Comments and original whitespace are not reproduced.
    """
    return _write_body(root, "", new_line_on_node)


def _write_body(node: Node, indent: str, new_line_on_node: bool) -> str:
    parts: list[str] = []
    for key, values in node.items():
        last = len(values) - 1
        for i, value in enumerate(values):
            parts.append(f"{indent}{quote(key)} ")
            if isinstance(value, Node):
                parts.append(_write_sub_node(value, indent, new_line_on_node))
            else:
                parts.append(quote(value))
                if i < last:
                    parts.append("\n")
        parts.append("\n")
    return "".join(parts)


def _write_sub_node(node: Node, indent: str, new_line_on_node: bool) -> str:
    head = f"\n{indent}{{" if new_line_on_node else "{"
    if len(node) == 0:
        return head + "}"
    body = _write_body(node, indent + INDENT, new_line_on_node)
    return f"{head}\n{body}{indent}}}"
