"""Shared test fixtures and helpers."""

from __future__ import annotations

from typing import Any

import pytest

from picomark.ast import Node
from picomark.visitor import Callbacks


@pytest.fixture
def payload_callbacks() -> Callbacks[Any]:
    """Callbacks that return each visited payload unchanged.

    Folding with these rebuilds the tree out of payload objects, which carry
    the completion index of every node.
    """

    def identity(payload: Any) -> Any:
        return payload

    return Callbacks.from_mapping(
        {
            "text": identity,
            "bold": identity,
            "italic": identity,
            "strike": identity,
            "code": identity,
            "link": identity,
            "image": identity,
            "paragraph": identity,
            "fragment": identity,
        }
    )


@pytest.fixture
def children_of():
    """Return a helper that lists the direct child nodes of any node."""

    def _children(node: Node) -> list[Node]:
        children = getattr(node, "children", None)
        if children is None:
            return []
        if isinstance(children, tuple):
            return list(children)
        return [children]

    return _children
