"""Generic tree fold with one callback per node type, children folded first."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from picomark.ast import (
    NODE_TYPES,
    Bold,
    Code,
    Fragment,
    Image,
    Italic,
    Link,
    Node,
    Paragraph,
    Strike,
    Text,
)
from picomark.errors import MissingCallbackError
from picomark.parser import DEFAULT_MAX_DEPTH, parse

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Visited payloads
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class VisitedText:
    content: str
    source: str
    index: int


@dataclass(frozen=True, slots=True)
class VisitedBold(Generic[T]):
    children: T
    source: str
    index: int


@dataclass(frozen=True, slots=True)
class VisitedItalic(Generic[T]):
    children: T
    source: str
    index: int


@dataclass(frozen=True, slots=True)
class VisitedStrike(Generic[T]):
    children: T
    source: str
    index: int


@dataclass(frozen=True, slots=True)
class VisitedCode:
    content: str
    source: str
    index: int


@dataclass(frozen=True, slots=True)
class VisitedLink(Generic[T]):
    href: str
    title: str | None
    children: T
    source: str
    index: int


@dataclass(frozen=True, slots=True)
class VisitedImage:
    src: str
    alt: str
    source: str
    index: int


@dataclass(frozen=True, slots=True)
class VisitedParagraph(Generic[T]):
    children: tuple[T, ...]
    source: str
    index: int


@dataclass(frozen=True, slots=True)
class VisitedFragment(Generic[T]):
    children: tuple[T, ...]
    source: str
    index: int


# ---------------------------------------------------------------------------
# Callback sets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Callbacks(Generic[T]):
    """A complete set of fold callbacks producing values of type T.

    Every node type must be covered; leaving one out is a TypeError when the
    set is built, not a failure halfway through a fold.
    """

    text: Callable[[VisitedText], T]
    bold: Callable[[VisitedBold[T]], T]
    italic: Callable[[VisitedItalic[T]], T]
    strike: Callable[[VisitedStrike[T]], T]
    code: Callable[[VisitedCode], T]
    link: Callable[[VisitedLink[T]], T]
    image: Callable[[VisitedImage], T]
    paragraph: Callable[[VisitedParagraph[T]], T]
    fragment: Callable[[VisitedFragment[T]], T]

    def __post_init__(self) -> None:
        for name in NODE_TYPES:
            if not callable(getattr(self, name)):
                raise TypeError(f"render callback for {name!r} is not callable")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Callable[[Any], T]]) -> Callbacks[T]:
        """Build a callback set from a dict keyed by node type."""
        unknown = sorted(set(mapping) - set(NODE_TYPES))
        if unknown:
            raise TypeError(f"unknown node type(s) in callbacks: {', '.join(unknown)}")
        missing = [name for name in NODE_TYPES if name not in mapping]
        if missing:
            raise MissingCallbackError(missing)
        return cls(**{name: mapping[name] for name in NODE_TYPES})

    @classmethod
    def from_object(cls, obj: object) -> Callbacks[T]:
        """Build a callback set from an object with one method per node type."""
        missing = [name for name in NODE_TYPES if not hasattr(obj, name)]
        if missing:
            raise MissingCallbackError(missing)
        return cls(**{name: getattr(obj, name) for name in NODE_TYPES})


# ---------------------------------------------------------------------------
# Fold
# ---------------------------------------------------------------------------


class _Fold(Generic[T]):
    """One traversal. Owns the completion counter for a single render call."""

    def __init__(self, callbacks: Callbacks[T]) -> None:
        self._callbacks = callbacks
        self._index = 0

    def _next_index(self) -> int:
        index = self._index
        self._index += 1
        return index

    def visit(self, node: Node) -> T:
        cb = self._callbacks
        match node:
            case Text(content=content, source=source):
                return cb.text(VisitedText(content, source, self._next_index()))
            case Code(content=content, source=source):
                return cb.code(VisitedCode(content, source, self._next_index()))
            case Image(src=src, alt=alt, source=source):
                return cb.image(VisitedImage(src, alt, source, self._next_index()))
            case Bold(children=child, source=source):
                folded = self.visit(child)
                return cb.bold(VisitedBold(folded, source, self._next_index()))
            case Italic(children=child, source=source):
                folded = self.visit(child)
                return cb.italic(VisitedItalic(folded, source, self._next_index()))
            case Strike(children=child, source=source):
                folded = self.visit(child)
                return cb.strike(VisitedStrike(folded, source, self._next_index()))
            case Link(href=href, title=title, children=child, source=source):
                folded = self.visit(child)
                return cb.link(VisitedLink(href, title, folded, source, self._next_index()))
            case Paragraph(children=children, source=source):
                folded_children = tuple(self.visit(c) for c in children)
                return cb.paragraph(
                    VisitedParagraph(folded_children, source, self._next_index())
                )
            case Fragment(children=children, source=source):
                folded_children = tuple(self.visit(c) for c in children)
                return cb.fragment(VisitedFragment(folded_children, source, self._next_index()))
            case _:
                raise TypeError(f"cannot render {type(node).__name__}, expected a Markdown node")


def render(
    markdown: str | Node,
    callbacks: Callbacks[T],
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> T:
    """Fold a tree (parsing it first if given a string) into a single value."""
    node = parse(markdown, max_depth=max_depth) if isinstance(markdown, str) else markdown
    return _Fold(callbacks).visit(node)
