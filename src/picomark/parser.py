"""Markdown parser: converts source text directly into an AST.

The nesting limit counts construct attempts, not the depth of the finished
tree. A run of openers that never close, such as ``"[" * 70``, still parses
to plain text in the end but raises ``NestingDepthError`` on the way.
"""

from __future__ import annotations

import re

from picomark.ast import Bold, Code, Fragment, Image, Italic, Link, Node, Paragraph, Strike, Text
from picomark.errors import NestingDepthError
from picomark.syntax import (
    CODE,
    CODE_DOUBLE,
    ESCAPE,
    FENCE,
    LABEL_CLOSE,
    LINE_BREAKS,
    LINK_CLOSE,
    LINK_OPEN,
    PARAGRAPH_BREAKS,
    STRIKE,
    is_break_char,
    is_trigger,
    position_at,
)

DEFAULT_MAX_DEPTH = 64

_TITLE_SPLIT = re.compile(r'\s+"')


class Parser:
    """Backtracking recursive descent parser over the characters of a string.

    Every construct attempt either returns a node or ``None``. On ``None`` the
    caller rewinds to where the attempt started and keeps the character under
    the cursor as literal text.
    """

    def __init__(self, source: str, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth < 1:
            raise ValueError(f"max_depth must be a positive integer, got {max_depth}")
        self._source = source
        self._pos = 0
        self._depth = 0
        self._max_depth = max_depth
        # (start offset, depth) -> (node, end offset), or None for a failed attempt
        self._constructs: dict[tuple[int, int], tuple[Node, int] | None] = {}

    def parse(self) -> Node:
        return self._parse_block()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _peek(self) -> str:
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _matches(self, *options: str) -> bool:
        return any(self._source.startswith(option, self._pos) for option in options)

    def _expect(self, delimiter: str) -> bool:
        """Consume delimiter if it is at the cursor."""
        if self._source.startswith(delimiter, self._pos):
            self._pos += len(delimiter)
            return True
        return False

    def _slice(self, start: int, end: int) -> str:
        return self._source[start:end]

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def _parse_block(self, terminator: str = "") -> Node:
        """Parse until end of input, or until terminator or a line break.

        Line breaks only stop the block when a terminator is given, so
        paragraphs can only appear at the top level.
        """
        start = self._pos
        paragraphs: list[Paragraph] = []
        siblings: list[Node] = []
        text_parts: list[str] = []
        paragraph_start = start
        text_start = start

        def flush(end: int) -> None:
            if text_parts:
                siblings.append(Text("".join(text_parts), self._slice(text_start, end)))
                text_parts.clear()

        while not self._at_end():
            run = self._scan_text(terminator)
            if run:
                text_parts.append(run)
                continue

            if terminator and self._matches(terminator, *LINE_BREAKS):
                break

            if self._matches(*PARAGRAPH_BREAKS):
                break_start = self._pos
                while is_break_char(self._peek()):
                    self._pos += 1
                if text_parts or siblings:
                    flush(break_start)
                    paragraphs.append(
                        Paragraph(tuple(siblings), self._slice(paragraph_start, break_start))
                    )
                    siblings.clear()
                paragraph_start = self._pos
                text_start = self._pos
                continue

            node_start = self._pos
            node = self._parse_construct()
            if node is None:
                self._pos = node_start
                text_parts.append(self._source[self._pos])
                self._pos += 1
                continue

            flush(node_start)
            siblings.append(node)
            text_start = self._pos

        flush(self._pos)

        children: list[Node]
        if paragraphs:
            if siblings:
                paragraphs.append(
                    Paragraph(tuple(siblings), self._slice(paragraph_start, self._pos))
                )
            children = list(paragraphs)
        else:
            children = siblings

        source = self._slice(start, self._pos)
        # A lone child is returned bare unless leading or trailing breaks
        # would be lost from the source
        if len(children) == 1 and children[0].source == source:
            return children[0]
        return Fragment(tuple(children), source)

    def _parse_nested(self, terminator: str) -> Node:
        """Parse the inside of a construct, enforcing the depth limit."""
        if self._depth >= self._max_depth:
            raise NestingDepthError(
                "constructs are nested too deeply",
                position_at(self._source, self._pos),
                self._source,
                self._max_depth,
            )
        self._depth += 1
        try:
            return self._parse_block(terminator)
        finally:
            self._depth -= 1

    # ------------------------------------------------------------------
    # Text runs
    # ------------------------------------------------------------------

    def _scan_text(self, terminator: str) -> str:
        """Consume plain characters and escapes, returning the resolved text.

        Stops before anything the block loop has to look at: a character that
        may open a construct, a line break, or the start of the terminator.
        """
        chars: list[str] = []
        end = len(self._source)
        stop = terminator[:1]
        while self._pos < end:
            ch = self._source[self._pos]
            if ch == ESCAPE and self._pos + 1 < end:
                chars.append(self._source[self._pos + 1])
                self._pos += 2
                continue
            if is_trigger(ch) or is_break_char(ch) or ch == stop:
                break
            chars.append(ch)
            self._pos += 1
        return "".join(chars)

    def _scan_raw(self, delimiter: str) -> str:
        """Consume unparsed text up to delimiter or a line break."""
        chars: list[str] = []
        end = len(self._source)
        while self._pos < end:
            ch = self._source[self._pos]
            if ch == ESCAPE and self._pos + 1 < end:
                chars.append(self._source[self._pos + 1])
                self._pos += 2
                continue
            if self._matches(delimiter, *LINE_BREAKS):
                break
            chars.append(ch)
            self._pos += 1
        return "".join(chars)

    # ------------------------------------------------------------------
    # Constructs
    # ------------------------------------------------------------------

    def _parse_construct(self) -> Node | None:
        # The outcome at a given offset and depth never depends on the
        # enclosing construct, so it is computed at most once per parse.
        key = (self._pos, self._depth)
        if key in self._constructs:
            cached = self._constructs[key]
            if cached is None:
                return None
            node, self._pos = cached
            return node

        node = self._attempt_construct()
        self._constructs[key] = None if node is None else (node, self._pos)
        return node

    def _attempt_construct(self) -> Node | None:
        match self._peek():
            case "*" | "_":
                return self._parse_emphasis()
            case "~":
                return self._parse_strike()
            case "`":
                return self._parse_code()
            case "!":
                return self._parse_image()
            case "[":
                return self._parse_link()
            case _:
                return None

    def _parse_emphasis(self) -> Bold | Italic | None:
        start = self._pos
        marker = self._peek()
        delimiter = marker * 2 if self._matches(marker * 2) else marker
        self._pos += len(delimiter)

        children = self._parse_nested(delimiter)
        if not self._expect(delimiter):
            return None

        if len(delimiter) == 2:
            return Bold(children, self._slice(start, self._pos))
        return Italic(children, self._slice(start, self._pos))

    def _parse_strike(self) -> Strike | None:
        start = self._pos
        if not self._expect(STRIKE):
            return None

        children = self._parse_nested(STRIKE)
        if not self._expect(STRIKE):
            return None
        return Strike(children, self._slice(start, self._pos))

    def _parse_code(self) -> Code | None:
        start = self._pos
        if self._matches(FENCE):
            return None

        delimiter = CODE_DOUBLE if self._matches(CODE_DOUBLE) else CODE
        self._pos += len(delimiter)

        content = self._scan_raw(delimiter).strip()
        if self._matches(FENCE) or not self._expect(delimiter):
            return None
        return Code(content, self._slice(start, self._pos))

    def _parse_image(self) -> Image | None:
        start = self._pos
        self._pos += 1  # consume "!"
        if not self._expect(LINK_OPEN):
            return None

        alt = self._scan_raw("]")
        if not self._expect(LABEL_CLOSE):
            return None

        src = self._scan_raw(LINK_CLOSE)
        if not self._expect(LINK_CLOSE):
            return None
        return Image(src, alt, self._slice(start, self._pos))

    def _parse_link(self) -> Link | None:
        start = self._pos
        self._pos += 1  # consume "["

        label = self._parse_nested("]")
        if not self._expect(LABEL_CLOSE):
            return None

        target = self._scan_raw(LINK_CLOSE)
        if not self._expect(LINK_CLOSE):
            return None

        # Only the first whitespace-quote run separates href from title
        href, title = _split_target(target)
        return Link(href, title, label, self._slice(start, self._pos))


def _split_target(target: str) -> tuple[str, str | None]:
    """Split a link target into href and optional title.

    The title starts after the first whitespace run followed by a quote; its
    last character is taken to be the closing quote and dropped.
    """
    parts = _TITLE_SPLIT.split(target, maxsplit=1)
    if len(parts) == 1:
        return target, None
    return parts[0], parts[1][:-1]


def parse(source: str, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Node:
    """Convenience function: parse Markdown source and return the root node."""
    return Parser(source, max_depth).parse()
