"""AST node types for parsed Markdown."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, TypeAlias


@dataclass(frozen=True, slots=True)
class Text:
    """Run of literal text with escapes resolved."""

    type: ClassVar[str] = "text"

    content: str
    source: str


@dataclass(frozen=True, slots=True)
class Bold:
    """Strong emphasis: **...** or __...__."""

    type: ClassVar[str] = "bold"

    children: Node
    source: str


@dataclass(frozen=True, slots=True)
class Italic:
    """Emphasis: *...* or _..._."""

    type: ClassVar[str] = "italic"

    children: Node
    source: str


@dataclass(frozen=True, slots=True)
class Strike:
    """Strikethrough: ~~...~~."""

    type: ClassVar[str] = "strike"

    children: Node
    source: str


@dataclass(frozen=True, slots=True)
class Code:
    """Inline code span. Content is raw text, trimmed."""

    type: ClassVar[str] = "code"

    content: str
    source: str


@dataclass(frozen=True, slots=True)
class Link:
    """Inline link [label](href "title")."""

    type: ClassVar[str] = "link"

    href: str
    title: str | None
    children: Node
    source: str


@dataclass(frozen=True, slots=True)
class Image:
    """Inline image ![alt](src). Alt text is not parsed."""

    type: ClassVar[str] = "image"

    src: str
    alt: str
    source: str


@dataclass(frozen=True, slots=True)
class Paragraph:
    """Content between paragraph breaks."""

    type: ClassVar[str] = "paragraph"

    children: tuple[Node, ...]
    source: str


@dataclass(frozen=True, slots=True)
class Fragment:
    """Sequence of sibling nodes with no wrapper semantics."""

    type: ClassVar[str] = "fragment"

    children: tuple[Node, ...]
    source: str


Node: TypeAlias = Text | Bold | Italic | Strike | Code | Link | Image | Paragraph | Fragment

NODE_TYPES: tuple[str, ...] = (
    "text",
    "bold",
    "italic",
    "strike",
    "code",
    "link",
    "image",
    "paragraph",
    "fragment",
)
