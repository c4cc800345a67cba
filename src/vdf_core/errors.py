"""Exception types raised by VDF Core."""

from __future__ import annotations


class VDFError(Exception):
    """Base class for every error raised while reading or converting VDF."""


class StructuralError(VDFError):
    """Unbalanced braces: a ``}`` without a ``{`` or an unclosed ``{``."""


class ConversionError(VDFError, ValueError):
    """A stored leaf could not be converted to the requested type."""

    def __init__(self, key: str, value: str, target: str) -> None:
        super().__init__(f"cannot convert {key!r} value {value!r} to {target}")
        self.key = key
        self.value = value
        self.target = target


class DuplicateKeyError(VDFError):
    """A key was repeated in a node whose policy forbids it."""

    def __init__(self, key: str) -> None:
        super().__init__(f"duplicate key {key!r}")
        self.key = key
