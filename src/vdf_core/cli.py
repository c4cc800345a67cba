"""``vdf-fmt`` — parse VDF files and write them back in normalized form.

Also runnable as ``python -m vdf_core.cli``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import IO

from .errors import VDFError
from .getter import resolve
from .node import MultimapPolicy, Node, NodeValue
from .parser import Parser
from .writer import write


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _print_value(value: NodeValue | None, new_line_on_node: bool, dest: IO[str]) -> bool:
    """Print a resolved value. Returns False when nothing was found."""
    if value is None:
        return False
    if isinstance(value, Node):
        dest.write(write(value, new_line_on_node))
    else:
        print(value, file=dest)
    return True


def _process_text(text: str, args: argparse.Namespace, dest: IO[str]) -> bool:
    """Parse one document and print it (or the ``--get`` value) to *dest*."""
    parser = Parser(policy=MultimapPolicy[args.policy])
    root = parser.parse(text)
    if args.reduce:
        root.reduce()

    if args.get is not None:
        if not _print_value(resolve(root, args.get), args.newline_on_node, dest):
            print(f"error: no value at '{args.get}'", file=sys.stderr)
            return False
        return True

    dest.write(write(root, args.newline_on_node))
    return True


def _build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="vdf-fmt", description="Normalize VDF documents")
    ap.add_argument("files", nargs="*", help="VDF files to read (default: stdin)")
    ap.add_argument("--reduce", action="store_true", help="merge repeated sub-node keys")
    ap.add_argument(
        "--newline-on-node",
        action="store_true",
        help="put each opening brace on its own line",
    )
    ap.add_argument(
        "--policy",
        choices=[p.name for p in MultimapPolicy],
        default=MultimapPolicy.APPEND.name,
        help="how repeated keys are stored",
    )
    ap.add_argument("--get", metavar="PATH", help="print the value at a dotted path")
    ap.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    return ap


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Command-line entry point. Returns 0 on success, 1 on any failure."""
    args = _build_arg_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    ok = True
    if not args.files:
        try:
            ok = _process_text(sys.stdin.read(), args, sys.stdout)
        except UnicodeDecodeError as exc:
            print(f"Error reading <stdin>: {exc}", file=sys.stderr)
            return 1
        except VDFError as exc:
            print(f"error: <stdin>: {exc}", file=sys.stderr)
            return 1
        return 0 if ok else 1

    for filepath in args.files:
        try:
            with open(filepath, encoding="utf-8") as fh:
                text = fh.read()
            ok = _process_text(text, args, sys.stdout) and ok
        except (OSError, UnicodeDecodeError) as exc:
            print(f"Error reading '{filepath}': {exc}", file=sys.stderr)
            ok = False
        except VDFError as exc:
            print(f"error: {filepath}: {exc}", file=sys.stderr)
            ok = False
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
