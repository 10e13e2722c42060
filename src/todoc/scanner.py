"""Quote-aware comment stripping for Lua source lines.

A line is scanned left to right while tracking whether we are inside a
short string ('...' or "..."), a long-bracket string ([[...]], [==[...]==])
or a long-bracket comment (--[[...]]). Comments are removed; everything
else is copied through unchanged.

The scanner state is threaded from one line to the next so that long
strings and long comments spanning several physical lines are resumed
correctly:

    state = NORMAL
    for line in lines:
        code, state = scan_line(line, state)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_LONG_OPENER = re.compile(r"\[(=*)\[")


class ScanMode(Enum):
    NORMAL = "normal"
    SINGLE_QUOTE = "single_quote"
    DOUBLE_QUOTE = "double_quote"
    LONG_STRING = "long_string"
    LONG_COMMENT = "long_comment"


_QUOTES = {"'": ScanMode.SINGLE_QUOTE, '"': ScanMode.DOUBLE_QUOTE}
_CLOSING_QUOTE = {ScanMode.SINGLE_QUOTE: "'", ScanMode.DOUBLE_QUOTE: '"'}


@dataclass(frozen=True)
class ScanState:
    """Scanner mode carried across lines. `level` is the long-bracket level."""

    mode: ScanMode = ScanMode.NORMAL
    level: int = 0

    @property
    def in_long_comment(self) -> bool:
        return self.mode is ScanMode.LONG_COMMENT

    @property
    def in_long_string(self) -> bool:
        return self.mode is ScanMode.LONG_STRING


NORMAL = ScanState()


def _find_closer(line: str, start: int, level: int) -> int | None:
    """Return the index just past the long-bracket closer of `level`, or None."""
    closer = "]" + "=" * level + "]"
    idx = line.find(closer, start)
    if idx < 0:
        return None
    return idx + len(closer)


def long_bracket_end(line: str, state: ScanState) -> int | None:
    """Index just past the closer of the long string/comment `state` is inside.

    Returns 0 when `state` is not inside a long bracket, and None when the
    construct is still open at the end of `line`.
    """
    if not (state.in_long_string or state.in_long_comment):
        return 0
    return _find_closer(line, 0, state.level)


def scan_line(line: str, state: ScanState = NORMAL) -> tuple[str, ScanState]:
    """Strip comments from one line, resuming from `state`.

    Returns the trimmed code and the state to resume the next line with.
    Never raises: malformed bracket nesting simply discards the rest of the
    line.
    """
    out: list[str] = []
    mode, level = state.mode, state.level
    n = len(line)
    i = 0
    continued = False  # Short string ends in a backslash line continuation

    while i < n:
        c = line[i]

        if mode in _CLOSING_QUOTE:
            out.append(c)
            if c == "\\":
                if i + 1 < n:
                    out.append(line[i + 1])
                    i += 2
                    continue
                continued = True
            elif c == _CLOSING_QUOTE[mode]:
                mode = ScanMode.NORMAL
            i += 1
            continue

        if mode is ScanMode.LONG_STRING or mode is ScanMode.LONG_COMMENT:
            end = _find_closer(line, i, level)
            if end is None:
                if mode is ScanMode.LONG_STRING:
                    out.append(line[i:])
                break
            if mode is ScanMode.LONG_STRING:
                out.append(line[i:end])
            mode, level = ScanMode.NORMAL, 0
            i = end
            continue

        if c in _QUOTES:
            mode = _QUOTES[c]
            out.append(c)
            i += 1
            continue

        if c == "[":
            m = _LONG_OPENER.match(line, i)
            if m:
                mode, level = ScanMode.LONG_STRING, len(m.group(1))
                out.append(m.group(0))
                i = m.end()
                continue

        if line.startswith("--", i):
            m = _LONG_OPENER.match(line, i + 2)
            if not m:
                break  # Line comment: drop the rest
            mode, level = ScanMode.LONG_COMMENT, len(m.group(1))
            i = m.end()
            continue

        out.append(c)
        i += 1

    if mode in _CLOSING_QUOTE and not continued:
        # Short strings cannot span lines without a trailing backslash
        mode = ScanMode.NORMAL
    if mode is ScanMode.NORMAL:
        level = 0

    return "".join(out).strip(), ScanState(mode, level)


def strip_comment(line: str) -> str:
    """Strip comments from a single, self-contained line.

    >>> strip_comment("x = 1 --[[ inline ]] y = 2")
    'x = 1  y = 2'
    """
    code, _ = scan_line(line)
    return code
