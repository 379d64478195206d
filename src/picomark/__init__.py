"""Inline Markdown parser with a generic tree fold."""

from __future__ import annotations

# Load the renderer submodule first so that the `render` function bound below
# is not later shadowed by the submodule of the same name.
import picomark.render  # noqa: F401
from picomark.escapes import unescape
from picomark.parser import parse
from picomark.visitor import Callbacks, render

__version__ = "0.1.0"

__all__ = ["Callbacks", "parse", "render", "to_html", "unescape"]


def to_html(source: str) -> str:
    """Parse Markdown source and render it to an HTML fragment."""
    from picomark.render import render_html

    return render_html(source)
