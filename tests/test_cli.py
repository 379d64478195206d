"""Tests for the CLI module: arg parsing, exit codes, output formats, end-to-end."""

from __future__ import annotations

import argparse
import io
from pathlib import Path

import pytest

from picomark.cli import (
    CliOptions,
    build_parser,
    convert,
    convert_file,
    main,
    parse_format,
    parse_max_depth,
)

# ---------------------------------------------------------------------------
# Argument parsing helpers
# ---------------------------------------------------------------------------


class TestParseHelpers:
    def test_parse_max_depth(self) -> None:
        assert parse_max_depth(8) == 8

    @pytest.mark.parametrize("value", [0, -3, "5", 2.5, True])
    def test_parse_max_depth_rejects(self, value) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_max_depth(value)

    def test_parse_format(self) -> None:
        assert parse_format("text") == "text"

    def test_parse_format_rejects(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError, match="html, text, ast"):
            parse_format("pdf")


# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        ns = build_parser().parse_args(["doc.md"])
        assert ns.input == "doc.md"
        assert ns.output is None
        assert ns.format is None
        assert ns.max_depth is None
        assert ns.debug is False

    def test_all_flags(self) -> None:
        ns = build_parser().parse_args(
            ["-", "-o", "out.html", "-f", "text", "--max-depth", "3", "--config", "c.toml", "--debug"]
        )
        assert ns.input == "-"
        assert ns.output == "out.html"
        assert ns.format == "text"
        assert ns.max_depth == 3
        assert ns.config == "c.toml"
        assert ns.debug is True

    def test_unknown_format_exits(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["doc.md", "-f", "pdf"])


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def _options(**overrides) -> CliOptions:
    fields = dict(
        input_file=None,
        output_file=None,
        output_format="html",
        max_depth=64,
        debug=False,
    )
    fields.update(overrides)
    return CliOptions(**fields)


class TestConvert:
    def test_html(self) -> None:
        assert convert("Hello, **world**!", _options()) == "Hello, <strong>world</strong>!\n"

    def test_html_paragraphs_not_doubled_newline(self) -> None:
        assert convert("a\n\nb", _options()) == "<p>a</p>\n<p>b</p>\n"

    def test_text(self) -> None:
        assert convert("*a* [b](c)", _options(output_format="text")) == "a b\n"

    def test_ast(self) -> None:
        assert convert("`x`", _options(output_format="ast")) == "Code('x') [0]\n"

    def test_debug_dumps_to_stderr(self, capsys) -> None:
        out = convert("*x*", _options(debug=True))
        assert out == "<em>x</em>\n"
        assert "Italic [1]" in capsys.readouterr().err

    def test_display_name(self, tmp_path: Path) -> None:
        assert _options().display_name == "<stdin>"
        assert _options(input_file=tmp_path / "a.md").display_name == str(tmp_path / "a.md")

    def test_convert_file_reads_stdin(self, monkeypatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("~~gone~~"))
        assert convert_file(_options()) == "<del>gone</del>\n"

    def test_convert_file_reads_file(self, tmp_path: Path) -> None:
        doc = tmp_path / "doc.md"
        doc.write_text("café", encoding="utf-8")
        assert convert_file(_options(input_file=doc)) == "caf&#xE9;\n"


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success_to_stdout(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "ok.md"
        doc.write_text("Hello, *world*!\n")
        assert main([str(doc)]) == 0
        assert capsys.readouterr().out == "Hello, <em>world</em>!\n"

    def test_success_to_file(self, tmp_path: Path) -> None:
        doc = tmp_path / "ok.md"
        doc.write_text("[x](u)")
        out = tmp_path / "out.html"
        assert main([str(doc), "-o", str(out)]) == 0
        assert out.read_text() == '<a href="u">x</a>\n'

    def test_stdin(self, monkeypatch, capsys) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("**b**"))
        assert main(["-", "-f", "text"]) == 0
        assert capsys.readouterr().out == "b\n"

    def test_nesting_error_returns_1(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "deep.md"
        doc.write_text("[[[x](u)](u)](u)")
        assert main([str(doc), "--max-depth", "2"]) == 1
        err = capsys.readouterr().err
        assert err.startswith("error: constructs are nested too deeply")
        assert f"{doc}:1:" in err

    def test_nesting_error_on_stdin_names_stdin(self, monkeypatch, capsys) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("***x***"))
        assert main(["-", "--max-depth", "1"]) == 1
        assert "<stdin>:1:" in capsys.readouterr().err

    def test_missing_input_returns_2(self, tmp_path: Path, capsys) -> None:
        assert main([str(tmp_path / "nope.md")]) == 2
        assert capsys.readouterr().err.startswith("error:")

    def test_invalid_max_depth_returns_2(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "ok.md"
        doc.write_text("x")
        assert main([str(doc), "--max-depth", "0"]) == 2
        assert "max_depth" in capsys.readouterr().err

    def test_undecodable_input_returns_2(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "latin1.md"
        doc.write_bytes(b"Hello \xff\xfe **world**")
        assert main([str(doc)]) == 2
        err = capsys.readouterr().err
        assert err.startswith(f"error: cannot read {doc}")

    def test_unwritable_output_returns_2(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "ok.md"
        doc.write_text("x")
        out = tmp_path / "missing" / "out.html"
        assert main([str(doc), "-o", str(out)]) == 2
        assert capsys.readouterr().err.startswith(f"error: cannot write {out}")
        assert not out.exists()
