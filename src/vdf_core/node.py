"""Node tree: a sorted multimap from keys to leaf strings and sub-nodes."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Iterator, TypeVar, Union

from .errors import ConversionError, DuplicateKeyError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_INT_RANGE = (-(2**31), 2**31 - 1)
_LONG_RANGE = (-(2**63), 2**63 - 1)

# ASCII only, no whitespace or digit separators
_INTEGER_RE = {
    10: re.compile(r"[+-]?[0-9]+"),
    16: re.compile(r"[+-]?(?:0[xX])?[0-9a-fA-F]+"),
}
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|NaN|Infinity)"
)


# ---------------------------------------------------------------------------
# MultimapPolicy
# ---------------------------------------------------------------------------

class MultimapPolicy(Enum):
    """What ``Node.put`` does when a key already holds a value."""

    APPEND = auto()           # keep every value, in insertion order
    REJECT = auto()           # silently drop the new value
    EXCEPT = auto()           # raise DuplicateKeyError
    AUTO_REDUCE = auto()      # merge sub-nodes as they are inserted
    AUTO_REDUCE_END = auto()  # append, then reduce once parsing ends


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------

@dataclass
class Node:
    """One ``{ ... }`` block of a VDF document.

    Keys iterate in sorted order. Insertion order is preserved only among
    the values of a single key.
    """

    entries: dict[str, list["NodeValue"]] = field(default_factory=dict)
    policy: MultimapPolicy = field(default=MultimapPolicy.APPEND, compare=False)

    # -- Mapping protocol -------------------------------------------------

    def keys(self) -> list[str]:
        return sorted(self.entries)

    def items(self) -> Iterator[tuple[str, list[NodeValue]]]:
        for key in self.keys():
            yield key, self.entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    # -- Storage ----------------------------------------------------------

    def put(self, key: str, value: NodeValue) -> NodeValue:
        """Store *value* under *key* according to this node's policy.

        Returns the value that now receives content for *key*: normally
        *value* itself, but the already stored sub-node under
        ``AUTO_REDUCE``.
        """
        values = self.entries.get(key)
        if values is None:
            self.entries[key] = [value]
            return value

        if self.policy is MultimapPolicy.REJECT:
            return value
        if self.policy is MultimapPolicy.EXCEPT:
            raise DuplicateKeyError(key)
        if (
            self.policy is MultimapPolicy.AUTO_REDUCE
            and isinstance(value, Node)
            and isinstance(values[0], Node)
        ):
            primary = values[0]
            value.join(primary)
            return primary

        values.append(value)
        return value

    def count(self, key: str) -> int:
        """Number of values stored under *key* (0 when absent)."""
        values = self.entries.get(key)
        return len(values) if values is not None else 0

    def get_values(self, key: str) -> list[NodeValue]:
        return list(self.entries.get(key, ()))

    # -- Typed readers ----------------------------------------------------

    def get_string(self, key: str, index: int = 0, default: str | None = None) -> str | None:
        """Leaf at *index* under *key*, or *default* if the key is absent."""
        values = self.entries.get(key)
        if values is None:
            return default
        value = values[index]
        if isinstance(value, Node):
            raise TypeError(f"value {index} of {key!r} is a sub-node, not a string")
        return value

    def get_value(
        self,
        key: str,
        parse: Callable[[str], T],
        index: int = 0,
        default: T | None = None,
    ) -> T | None:
        """Leaf at *index* under *key* converted with *parse*.

        Failures raised by *parse* propagate unchanged.
        """
        raw = self.get_string(key, index)
        return parse(raw) if raw is not None else default

    def get_int(self, key: str, index: int = 0, default: int = 0) -> int:
        return self._get_integer(key, index, default, 10, _INT_RANGE, "int")

    def get_long(self, key: str, index: int = 0, default: int = 0) -> int:
        return self._get_integer(key, index, default, 10, _LONG_RANGE, "long")

    def get_pointer(self, key: str, index: int = 0, default: int = 0) -> int:
        """Leaf parsed as a hexadecimal address."""
        return self._get_integer(key, index, default, 16, _LONG_RANGE, "pointer")

    def get_float(self, key: str, index: int = 0, default: float = 0.0) -> float:
        raw = self.get_string(key, index)
        if raw is None:
            return default
        if not _FLOAT_RE.fullmatch(raw):
            raise ConversionError(key, raw, "float")
        return float(raw)

    def _get_integer(self, key, index, default, base, bounds, target):
        raw = self.get_string(key, index)
        if raw is None:
            return default
        if not _INTEGER_RE[base].fullmatch(raw):
            raise ConversionError(key, raw, target)
        number = int(raw, base)
        low, high = bounds
        if not low <= number <= high:
            raise ConversionError(key, raw, target)
        return number

    def get_sub_node(self, key: str, index: int = 0) -> Node:
        """Sub-node at *index* under *key*.

        The key must be present (check ``count(key) > 0`` first); a missing
        key raises ``KeyError``.
        """
        value = self.entries[key][index]
        if not isinstance(value, Node):
            raise TypeError(f"value {index} of {key!r} is a string, not a sub-node")
        return value

    # -- Merging ----------------------------------------------------------

    def join(self, other: Node) -> None:
        """Put every key/value pair of this node into *other*.

        Keys are visited in sorted order, values in stored order. This node
        is left unchanged.
        """
        for key, values in self.items():
            for value in values:
                other.put(key, value)

    def reduce(self, recursive: bool = True) -> Node:
        """Merge sibling sub-nodes stored under the same key into the first.

        Only the first sub-node of each group is reduced (when *recursive*)
        before its siblings are joined into it; repeated keys brought in by
        those siblings stay as they are until the next ``reduce``. Leaf
        values sharing a key with sub-nodes are kept after the merged node.
        """
        for key, values in self.items():
            primary = values[0]
            if not isinstance(primary, Node):
                continue
            if recursive:
                primary.reduce(True)
            if len(values) == 1:
                continue

            leaves: list[NodeValue] = []
            for sibling in values[1:]:
                if isinstance(sibling, Node):
                    sibling.join(primary)
                else:
                    leaves.append(sibling)
            logger.debug("reduced %d values of %r", len(values), key)
            self.entries[key] = [primary, *leaves]
        return self


NodeValue = Union[str, Node]
