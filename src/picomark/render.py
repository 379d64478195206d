"""HTML and plain-text renderers built on the generic fold."""

from __future__ import annotations

from picomark.ast import Fragment, Node, Paragraph
from picomark.parser import DEFAULT_MAX_DEPTH, parse
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

# ---------------------------------------------------------------------------
# HTML escaping
# ---------------------------------------------------------------------------


def escape_html(text: str) -> str:
    """Escape text for HTML body content. Also encodes non-ASCII as entities."""
    result: list[str] = []
    for ch in text:
        if ch == "&":
            result.append("&amp;")
        elif ch == "<":
            result.append("&lt;")
        elif ch == ">":
            result.append("&gt;")
        elif ord(ch) > 0x7F:
            result.append(f"&#x{ord(ch):X};")
        else:
            result.append(ch)
    return "".join(result)


def escape_attr(text: str) -> str:
    """Escape text for HTML attribute values."""
    result: list[str] = []
    for ch in text:
        if ch == "&":
            result.append("&amp;")
        elif ch == "<":
            result.append("&lt;")
        elif ch == ">":
            result.append("&gt;")
        elif ch == '"':
            result.append("&quot;")
        elif ord(ch) > 0x7F:
            result.append(f"&#x{ord(ch):X};")
        else:
            result.append(ch)
    return "".join(result)


# ---------------------------------------------------------------------------
# HTML callbacks
# ---------------------------------------------------------------------------


def _html_text(node: VisitedText) -> str:
    return escape_html(node.content)


def _html_bold(node: VisitedBold[str]) -> str:
    return f"<strong>{node.children}</strong>"


def _html_italic(node: VisitedItalic[str]) -> str:
    return f"<em>{node.children}</em>"


def _html_strike(node: VisitedStrike[str]) -> str:
    return f"<del>{node.children}</del>"


def _html_code(node: VisitedCode) -> str:
    return f"<code>{escape_html(node.content)}</code>"


def _html_link(node: VisitedLink[str]) -> str:
    title = f' title="{escape_attr(node.title)}"' if node.title is not None else ""
    return f'<a href="{escape_attr(node.href)}"{title}>{node.children}</a>'


def _html_image(node: VisitedImage) -> str:
    return f'<img src="{escape_attr(node.src)}" alt="{escape_attr(node.alt)}">'


def _html_paragraph(node: VisitedParagraph[str]) -> str:
    return f"<p>{''.join(node.children)}</p>\n"


def _html_fragment(node: VisitedFragment[str]) -> str:
    return "".join(node.children)


HTML_CALLBACKS: Callbacks[str] = Callbacks(
    text=_html_text,
    bold=_html_bold,
    italic=_html_italic,
    strike=_html_strike,
    code=_html_code,
    link=_html_link,
    image=_html_image,
    paragraph=_html_paragraph,
    fragment=_html_fragment,
)


# ---------------------------------------------------------------------------
# Plain-text callbacks
# ---------------------------------------------------------------------------


def _plain_content(node: VisitedText | VisitedCode) -> str:
    return node.content


def _plain_children(node: VisitedBold[str] | VisitedItalic[str] | VisitedStrike[str]) -> str:
    return node.children


def _plain_link(node: VisitedLink[str]) -> str:
    return node.children


def _plain_image(node: VisitedImage) -> str:
    return node.alt


def _plain_paragraph(node: VisitedParagraph[str]) -> str:
    return "".join(node.children)


def _plain_fragment(node: VisitedFragment[str]) -> str:
    return "".join(node.children)


TEXT_CALLBACKS: Callbacks[str] = Callbacks(
    text=_plain_content,
    bold=_plain_children,
    italic=_plain_children,
    strike=_plain_children,
    code=_plain_content,
    link=_plain_link,
    image=_plain_image,
    paragraph=_plain_paragraph,
    fragment=_plain_fragment,
)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def render_html(markdown: str | Node, *, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """Render Markdown (or a parsed tree) to an HTML fragment."""
    return render(markdown, HTML_CALLBACKS, max_depth=max_depth)


def render_text(markdown: str | Node, *, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """Render Markdown (or a parsed tree) to plain text without markup.

    Paragraphs are separated by a blank line.
    """
    node = parse(markdown, max_depth=max_depth) if isinstance(markdown, str) else markdown
    if isinstance(node, Fragment) and any(isinstance(c, Paragraph) for c in node.children):
        return "\n\n".join(render(c, TEXT_CALLBACKS) for c in node.children)
    return render(node, TEXT_CALLBACKS)
