"""VDF Core — parser, tree model and writer for VDF key-value documents."""

from .binder import bind, vdf_field
from .errors import ConversionError, DuplicateKeyError, StructuralError, VDFError
from .getter import resolve
from .node import MultimapPolicy, Node, NodeValue
from .parser import Parser, parse
from .preprocessor import process, process_line
from .writer import write

__all__ = [
    "parse",
    "write",
    "Parser",
    "Node",
    "NodeValue",
    "MultimapPolicy",
    "process",
    "process_line",
    "resolve",
    "bind",
    "vdf_field",
    "VDFError",
    "StructuralError",
    "ConversionError",
    "DuplicateKeyError",
]
