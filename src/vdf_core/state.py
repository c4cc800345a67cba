"""Mutable state of the VDF parser and its per-character transitions."""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import StructuralError
from .node import MultimapPolicy, Node


@dataclass
class ParserState:
    """Holds everything the parser needs between two characters.

    ``stack`` always has the root at the bottom; entering a sub-node pushes
    it and ``}`` pops it again.
    """

    root: Node = field(default_factory=Node)
    stack: list[Node] = field(default_factory=list)
    buffer: list[str] = field(default_factory=list)
    key_name: str = ""
    quote_state: bool = False
    escape_pending: bool = False
    value_pending: bool = False
    null_string: bool = False

    def __post_init__(self) -> None:
        self.stack = [self.root]

    @property
    def policy(self) -> MultimapPolicy:
        return self.root.policy

    @property
    def current(self) -> Node:
        return self.stack[-1]

    # -- Transitions ------------------------------------------------------

    def quote(self) -> None:
        if self.escape_pending:
            self.character('"')
            return

        self.quote_state = not self.quote_state
        if self.quote_state:
            self._reset_string()
        else:
            if not self.buffer:
                self.null_string = True
            # A closing quote ends the token just like a separator
            self.space()

    def space(self, c: str = " ") -> None:
        if self.quote_state:
            self.character(c)
            return
        if not self.buffer and not self.null_string:
            return

        self.value_pending = not self.value_pending
        if self.value_pending:
            self.key_name = "".join(self.buffer)
        else:
            self.current.put(self.key_name, "".join(self.buffer))
        self._reset_string()

    def escape(self) -> None:
        # ``\\`` is itself an escape, so this toggles rather than sets
        self.escape_pending = not self.escape_pending
        if not self.escape_pending:
            self.character("\\")

    def character(self, c: str) -> None:
        if self.escape_pending and c == "n":
            c = "\n"
        self.buffer.append(c)
        self.escape_pending = False

    def begin_sub_node(self) -> None:
        if self.escape_pending or self.quote_state:
            self.character("{")
            return

        # A bare key glued to the brace (``key{``) is still the key
        if self.buffer and not self.value_pending:
            self.key_name = "".join(self.buffer)

        node = self.current.put(self.key_name, Node(policy=self.policy))
        self.stack.append(node)
        self._reset_kv()

    def end_sub_node(self) -> None:
        if self.escape_pending or self.quote_state:
            self.character("}")
            return

        self._reset_kv()
        if self.stack.pop() is self.root:
            raise StructuralError(
                "the root node was popped: unmatched '}' (more closing than opening braces)"
            )

    def end_parse(self) -> Node:
        """Flush a trailing value and check that every ``{`` was closed."""
        self.space()
        if self.current is not self.root:
            raise StructuralError(
                f"{len(self.stack) - 1} sub-node(s) left open at end of input: unmatched '{{'"
            )
        return self.root

    # -- Helpers ----------------------------------------------------------

    def _reset_string(self) -> None:
        self.buffer.clear()
        self.null_string = False

    def _reset_kv(self) -> None:
        self._reset_string()
        self.value_pending = False
