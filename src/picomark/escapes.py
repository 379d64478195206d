"""Backslash escape resolution."""

from __future__ import annotations

from picomark.syntax import ESCAPE


def unescape(text: str) -> str:
    """Remove backslash escapes from text.

    Rules:
    1. A backslash followed by any character is dropped and that character
       is kept literally, so ``\\\\`` yields a single backslash.
    2. A backslash at the very end of the input has nothing to escape and
       is kept as-is.

    Text without a backslash is returned unchanged.
    """
    if ESCAPE not in text:
        return text

    result: list[str] = []
    i = 0
    end = len(text)
    while i < end:
        ch = text[i]
        if ch == ESCAPE and i + 1 < end:
            result.append(text[i + 1])
            i += 2
            continue
        result.append(ch)
        i += 1
    return "".join(result)
