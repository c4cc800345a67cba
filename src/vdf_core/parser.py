"""Parser: drives the character state machine over preprocessed VDF text."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from .node import MultimapPolicy, Node
from .preprocessor import process
from .state import ParserState

logger = logging.getLogger(__name__)


class Parser:
    """Parses VDF documents into ``Node`` trees.

    Usage::

        parser = Parser()
        root = parser.parse('"root" { "key" "value" }')
        root.get_sub_node("root").get_string("key")   # → "value"

    *preprocess* turns the raw lines into the canonical one-line stream the
    state machine consumes; *policy* is given to every node the parser
    creates.
    """

    def __init__(
        self,
        preprocess: Callable[[Iterable[str]], str] = process,
        policy: MultimapPolicy = MultimapPolicy.APPEND,
    ) -> None:
        self.preprocess = preprocess
        self.policy = policy

    def parse(self, source: str | Iterable[str]) -> Node:
        """Parse *source*, a whole document or a sequence of its lines.

        Raises ``StructuralError`` on unbalanced braces; no partial tree is
        returned.
        """
        if isinstance(source, str):
            source = source.split("\n")
        text = self.preprocess(source)

        state = ParserState(root=Node(policy=self.policy))
        for c in text:
            if c == '"':
                state.quote()
            elif c == " " or c == "\t":
                state.space(c)
            elif c == "\\":
                state.escape()
            elif c == "{":
                state.begin_sub_node()
            elif c == "}":
                state.end_sub_node()
            else:
                state.character(c)
        root = state.end_parse()

        if self.policy is MultimapPolicy.AUTO_REDUCE_END:
            root.reduce()
        logger.debug("parsed %d characters into %d top-level keys", len(text), len(root))
        return root


def parse(
    source: str | Iterable[str],
    policy: MultimapPolicy = MultimapPolicy.APPEND,
) -> Node:
    """Parse a VDF document with the default preprocessor."""
    return Parser(policy=policy).parse(source)
