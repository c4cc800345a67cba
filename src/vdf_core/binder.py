"""Binder: maps a Node tree onto caller-defined dataclasses.

The binder only uses the public Node readers, so a hand-written mapping
layer can do the same thing without it.

Usage::

    @dataclass
    class Window:
        title: str = ""
        width: int = 0
        tags: list[str] = field(default_factory=list)
        pos_x: float = vdf_field("x", default=0.0)

    window = bind(parse(text).get_sub_node("window"), Window)
"""

from __future__ import annotations

import dataclasses
import logging
import typing
from typing import Any, TypeVar

from .node import Node

logger = logging.getLogger(__name__)

T = TypeVar("T")

KEY_METADATA = "vdf_key"


def vdf_field(key: str | None = None, **kwargs: Any) -> Any:
    """``dataclasses.field`` that reads its value from *key*."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[KEY_METADATA] = key
    return dataclasses.field(metadata=metadata, **kwargs)


def key_for(f: dataclasses.Field) -> str:
    return f.metadata.get(KEY_METADATA) or f.name


# ---------------------------------------------------------------------------
# Value readers
# ---------------------------------------------------------------------------

def _read_bool(node: Node, key: str, index: int) -> bool:
    raw = node.get_string(key, index)
    return raw is not None and raw.strip() not in ("", "0", "false")


def _read_one(node: Node, key: str, index: int, tp: Any) -> Any:
    if tp is str:
        return node.get_string(key, index)
    if tp is bool:
        return _read_bool(node, key, index)
    if tp is int:
        return node.get_long(key, index)
    if tp is float:
        return node.get_float(key, index)
    if tp is Node:
        return node.get_sub_node(key, index)
    if dataclasses.is_dataclass(tp):
        return bind(node.get_sub_node(key, index), tp)
    raise TypeError(f"cannot bind key {key!r} to {tp!r}")


def _strip_optional(tp: Any) -> Any:
    """``X | None`` → ``X``; everything else unchanged."""
    args = typing.get_args(tp)
    if args and type(None) in args:
        rest = [a for a in args if a is not type(None)]
        if len(rest) == 1:
            return rest[0]
    return tp


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def bind(node: Node, cls: type[T]) -> T:
    """Build a *cls* instance from the keys of *node*.

    Absent keys leave the field default in place; a field without a default
    whose key is absent makes the dataclass constructor fail as usual.
    ``list[X]`` fields receive every value stored under the key.
    """
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls!r} is not a dataclass")

    hints = typing.get_type_hints(cls)
    kwargs: dict[str, Any] = {}

    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        key = key_for(f)
        count = node.count(key)
        if count == 0:
            logger.debug("%s.%s: key %r absent, keeping default", cls.__name__, f.name, key)
            continue

        tp = _strip_optional(hints[f.name])
        if typing.get_origin(tp) is list:
            (item_tp,) = typing.get_args(tp) or (str,)
            kwargs[f.name] = [_read_one(node, key, i, item_tp) for i in range(count)]
        else:
            kwargs[f.name] = _read_one(node, key, 0, tp)

    return cls(**kwargs)
