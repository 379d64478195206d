"""--debug AST dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from picomark.ast import Node
from picomark.visitor import (
    Callbacks,
    VisitedBold,
    VisitedCode,
    VisitedFragment,
    VisitedImage,
    VisitedItalic,
    VisitedLink,
    VisitedParagraph,
    VisitedStrike,
    VisitedText,
    render,
)

Lines = list[str]


def format_ast(node: Node) -> str:
    """Return a human-readable AST tree, one node per line.

    Each line ends with the node's completion index in brackets.
    """
    return "\n".join(render(node, _DUMP_CALLBACKS)) + "\n"


def dump_ast(node: Node, *, file: TextIO | None = None) -> None:
    """Print a human-readable AST tree to *file* (stderr by default)."""
    (file or sys.stderr).write(format_ast(node))


def _indent(lines: Lines) -> Lines:
    return ["  " + line for line in lines]


def _dump_text(node: VisitedText) -> Lines:
    return [f"Text({node.content!r}) [{node.index}]"]


def _dump_bold(node: VisitedBold[Lines]) -> Lines:
    return [f"Bold [{node.index}]", *_indent(node.children)]


def _dump_italic(node: VisitedItalic[Lines]) -> Lines:
    return [f"Italic [{node.index}]", *_indent(node.children)]


def _dump_strike(node: VisitedStrike[Lines]) -> Lines:
    return [f"Strike [{node.index}]", *_indent(node.children)]


def _dump_code(node: VisitedCode) -> Lines:
    return [f"Code({node.content!r}) [{node.index}]"]


def _dump_link(node: VisitedLink[Lines]) -> Lines:
    title = f" title={node.title!r}" if node.title is not None else ""
    return [f"Link href={node.href!r}{title} [{node.index}]", *_indent(node.children)]


def _dump_image(node: VisitedImage) -> Lines:
    return [f"Image src={node.src!r} alt={node.alt!r} [{node.index}]"]


def _dump_paragraph(node: VisitedParagraph[Lines]) -> Lines:
    lines = [f"Paragraph [{node.index}]"]
    for child in node.children:
        lines.extend(_indent(child))
    return lines


def _dump_fragment(node: VisitedFragment[Lines]) -> Lines:
    lines = [f"Fragment [{node.index}]"]
    for child in node.children:
        lines.extend(_indent(child))
    return lines


_DUMP_CALLBACKS: Callbacks[Lines] = Callbacks(
    text=_dump_text,
    bold=_dump_bold,
    italic=_dump_italic,
    strike=_dump_strike,
    code=_dump_code,
    link=_dump_link,
    image=_dump_image,
    paragraph=_dump_paragraph,
    fragment=_dump_fragment,
)
