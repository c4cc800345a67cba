"""Preprocessor: normalizes raw VDF lines into one canonical token stream."""

from __future__ import annotations

from typing import Iterable

# Line breaks never reach here as separators; they are simply dropped.
_WHITESPACE = " \t\x0b"
_LINE_BREAKS = "\r\n"


def _is_comment(line: str, i: int) -> bool:
    return line[i] == "/" and i + 1 < len(line) and line[i + 1] in "/*"


def process_line(line: str) -> str:
    """Strip comments, conditionals and insignificant whitespace from *line*.

    - ``//`` and ``/*`` outside quotes end the line (block comments are
      treated as running to the end of the line).
    - A ``"`` or ``[`` is escaped only by an odd run of backslashes before it.
    - An unescaped ``[`` outside quotes starts a conditional and ends the line.
    - Whitespace runs outside quotes collapse to one space; leading and
      trailing whitespace is dropped.

    Quote tracking starts closed on every line, so a quoted token must not
    span lines (use ``\\n`` inside the value instead).
    """
    if line.startswith(("//", "/*")):
        return ""

    out: list[str] = []
    hit_word = False
    open_quotes = False
    # Consecutive backslashes right before the current character
    backslashes = 0
    # Index past the last significant character
    end = len(line.rstrip(_WHITESPACE + _LINE_BREAKS))

    for i, c in enumerate(line):
        if c in _LINE_BREAKS:
            continue

        escaped = backslashes % 2 == 1
        backslashes = backslashes + 1 if c == "\\" else 0
        if c == '"' and not escaped:
            open_quotes = not open_quotes

        if open_quotes or c == '"':
            hit_word = True
            out.append(c)
            continue

        if _is_comment(line, i):
            break
        if c == "[" and not escaped:
            break

        if c in _WHITESPACE:
            if not hit_word:
                continue
            # Keep only the last character of a run
            if i + 1 < len(line) and line[i + 1] in _WHITESPACE:
                continue
            if i >= end:
                break
            out.append(" ")
        else:
            hit_word = True
            out.append(c)

    processed = "".join(out)
    # A comment or conditional may leave a separator dangling
    return processed if open_quotes else processed.rstrip(" ")


def process(lines: Iterable[str] | str) -> str:
    """Normalize every line and join the non-empty results with one space.

    Lines are independent of each other; a single string is split on line
    feeds first.
    """
    if isinstance(lines, str):
        lines = lines.split("\n")
    return " ".join(p for p in map(process_line, lines) if p)
