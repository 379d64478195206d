"""Tests for paragraph segmentation."""

from __future__ import annotations

from picomark import parse
from picomark.ast import Bold, Fragment, Image, Italic, Link, Paragraph, Text


def _para(content: str) -> Paragraph:
    return Paragraph((Text(content, content),), content)


class TestParagraphBreaks:
    def test_two_paragraphs(self):
        source = "First paragraph.\n\nSecond paragraph."
        assert parse(source) == Fragment(
            (_para("First paragraph."), _para("Second paragraph.")), source
        )

    def test_different_newlines(self):
        source = "First\n\nSecond\r\rThird\r\n\r\nFourth"
        assert parse(source) == Fragment(
            (_para("First"), _para("Second"), _para("Third"), _para("Fourth")), source
        )

    def test_mixed_break_sequences(self):
        source = "First\r\n\nSecond\n\r\nThird"
        assert parse(source) == Fragment((_para("First"), _para("Second"), _para("Third")), source)

    def test_lone_crlf_separates_paragraphs(self):
        # "\r" followed by "\n" is two breaks back to back
        source = "First\r\nSecond"
        assert parse(source) == Fragment((_para("First"), _para("Second")), source)

    def test_leading_and_trailing_newlines(self):
        source = "\n\n\r\nFirst paragraph.\n\n\r\nSecond paragraph.\n\n\r\n"
        assert parse(source) == Fragment(
            (_para("First paragraph."), _para("Second paragraph.")), source
        )

    def test_multiple_newlines(self):
        source = "\n\n\nFirst paragraph.\n\n\nSecond paragraph.\n\n\n\n"
        assert parse(source) == Fragment(
            (_para("First paragraph."), _para("Second paragraph.")), source
        )


class TestEmptyParagraphs:
    def test_only_breaks(self):
        assert parse("\n\r\r\n") == Fragment((), "\n\r\r\n")

    def test_trailing_break_leaves_single_paragraph(self):
        assert parse("Hello\n\n") == Fragment((_para("Hello"),), "Hello\n\n")

    def test_leading_break_before_single_text(self):
        assert parse("\n\nHello") == Fragment((Text("Hello", "Hello"),), "\n\nHello")

    def test_single_paragraph_between_breaks(self):
        source = "\n\n**x**\r\n\r\n"
        node = parse(source)
        assert node.source == source
        assert node.children == (Paragraph((Bold(Text("x", "x"), "**x**"),), "**x**"),)

    def test_no_break_means_no_paragraph(self):
        node = parse("**a** b")
        assert isinstance(node, Fragment)
        assert not any(isinstance(c, Paragraph) for c in node.children)


class TestMixedContent:
    def test_paragraphs_with_constructs(self):
        source = "\n\n".join(
            [
                "**First**\n_paragraph_",
                "[Second paragraph](ex)",
                "![Third paragraph](ex)",
                "Fourth paragraph",
            ]
        )
        assert parse(source) == Fragment(
            (
                Paragraph(
                    (
                        Bold(Text("First", "First"), "**First**"),
                        Text("\n", "\n"),
                        Italic(Text("paragraph", "paragraph"), "_paragraph_"),
                    ),
                    "**First**\n_paragraph_",
                ),
                Paragraph(
                    (
                        Link(
                            "ex",
                            None,
                            Text("Second paragraph", "Second paragraph"),
                            "[Second paragraph](ex)",
                        ),
                    ),
                    "[Second paragraph](ex)",
                ),
                Paragraph(
                    (Image("ex", "Third paragraph", "![Third paragraph](ex)"),),
                    "![Third paragraph](ex)",
                ),
                _para("Fourth paragraph"),
            ),
            source,
        )

    def test_emphasis_cannot_span_paragraphs(self):
        source = "**a\n\nb**"
        node = parse(source)
        assert node == Fragment((_para("**a"), _para("b**")), source)

    def test_paragraph_source_excludes_separator(self):
        node = parse("one *two*\n\nthree")
        assert isinstance(node, Fragment)
        assert [c.source for c in node.children] == ["one *two*", "three"]
