"""Error types with formatted source context."""

from __future__ import annotations

import re
from collections.abc import Iterable

from picomark.syntax import Position

_LINE_SPLIT = re.compile(r"\r\n|\r|\n")


class NestingDepthError(Exception):
    """Raised when constructs nest deeper than the parser's depth limit."""

    def __init__(self, message: str, position: Position, source: str, limit: int) -> None:
        self.message = message
        self.position = position
        self.source = source
        self.limit = limit
        super().__init__(self.format())

    def format(self, filename: str = "input.md") -> str:
        lines = _LINE_SPLIT.split(self.source)
        line_idx = self.position.line - 1
        col = self.position.column

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx]
        else:
            source_line = ""

        pad = " " * (col - 1)

        line_num = str(self.position.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.position.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}^\n"
            f"{blank_gutter} note: the limit is {self.limit} nested constructs"
        )


class MissingCallbackError(TypeError):
    """Raised when a callback set does not cover every node type."""

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = tuple(missing)
        names = ", ".join(self.missing)
        super().__init__(f"missing render callback(s) for: {names}")
