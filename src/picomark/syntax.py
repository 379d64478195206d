"""Delimiter tables, source positions, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass

# Checked longest-first so "\r\n" is never read as a lone "\r"
LINE_BREAKS: tuple[str, ...] = ("\r\n", "\r", "\n")

# Any two line breaks back to back. "\r" + "\n" spells "\r\n", so a single
# CRLF also separates paragraphs.
PARAGRAPH_BREAKS: tuple[str, ...] = tuple(a + b for a in LINE_BREAKS for b in LINE_BREAKS)

ESCAPE = "\\"

STRIKE = "~~"
CODE = "`"
CODE_DOUBLE = "``"
FENCE = "```"
LABEL_CLOSE = "]("
LINK_OPEN = "["
LINK_CLOSE = ")"

# Characters that may start a construct
_TRIGGERS = frozenset("*_~`![")
_BREAK_CHARS = frozenset("\r\n")


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


def position_at(source: str, offset: int) -> Position:
    """Convert a character offset into a line/column position.

    CRLF and lone CR both end a line, matching the parser's notion of a
    line break.
    """
    offset = max(0, min(offset, len(source)))
    line = 1
    line_start = 0
    i = 0
    while i < offset:
        ch = source[i]
        if ch == "\r":
            if i + 1 < len(source) and source[i + 1] == "\n":
                i += 1
            line += 1
            line_start = i + 1
        elif ch == "\n":
            line += 1
            line_start = i + 1
        i += 1
    return Position(line, max(1, offset - line_start + 1), offset)


def is_trigger(ch: str) -> bool:
    """Return True if ch may open a structural construct."""
    return ch in _TRIGGERS


def is_break_char(ch: str) -> bool:
    """Return True if ch is part of a line-break sequence."""
    return ch in _BREAK_CHARS
