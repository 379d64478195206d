"""Command-line interface for picomark."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from picomark.errors import NestingDepthError
from picomark.parser import DEFAULT_MAX_DEPTH

FORMATS: tuple[str, ...] = ("html", "text", "ast")
CONFIG_NAME = "picomark.toml"
STDIN = "-"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None  # None reads stdin
    output_file: Path | None
    output_format: str
    max_depth: int
    debug: bool

    @property
    def display_name(self) -> str:
        return str(self.input_file) if self.input_file is not None else "<stdin>"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="picomark",
        description="Render inline Markdown to HTML, plain text, or an AST dump",
    )
    p.add_argument("input", help="Input Markdown file, or '-' for stdin")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: html)",
    )
    p.add_argument(
        "--max-depth",
        type=int,
        default=None,
        metavar="N",
        help=f"Maximum construct nesting depth (default: {DEFAULT_MAX_DEPTH})",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument("--debug", action="store_true", help="Dump AST to stderr")
    return p


def parse_max_depth(value: object) -> int:
    """Validate a nesting depth limit from the command line or config file."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise argparse.ArgumentTypeError(
            f"invalid max_depth (expected a positive integer): {value!r}"
        )
    return value


def parse_format(value: object) -> str:
    """Validate an output format name."""
    if value not in FORMATS:
        raise argparse.ArgumentTypeError(
            f"invalid format (expected one of {', '.join(FORMATS)}): {value!r}"
        )
    return str(value)


def load_config(config_path: Path | None, search_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else search_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def config_max_depth(config: dict[str, Any]) -> int:
    """Return the validated [parse] max_depth from a loaded config, or the default."""
    cfg_parse = config.get("parse")
    if isinstance(cfg_parse, dict) and "max_depth" in cfg_parse:
        return parse_max_depth(cfg_parse["max_depth"])
    return DEFAULT_MAX_DEPTH


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    if args.input == STDIN:
        input_file = None
        search_dir = Path(".")
    else:
        input_file = Path(args.input)
        search_dir = input_file.parent
        if not search_dir.parts:
            search_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, search_dir)

    # Depth limit: default < config < CLI
    max_depth = config_max_depth(config)
    if args.max_depth is not None:
        max_depth = parse_max_depth(args.max_depth)

    # Output format: default < config < CLI
    output_format = "html"
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict) and "format" in cfg_output:
        output_format = parse_format(cfg_output["format"])
    if args.format is not None:
        output_format = args.format

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        output_format=output_format,
        max_depth=max_depth,
        debug=args.debug,
    )


def convert(source: str, options: CliOptions) -> str:
    """Parse source and render it in the requested output format."""
    from picomark.debug import dump_ast, format_ast
    from picomark.parser import parse
    from picomark.render import render_html, render_text

    node = parse(source, max_depth=options.max_depth)

    if options.debug:
        dump_ast(node)

    match options.output_format:
        case "text":
            output = render_text(node)
        case "ast":
            output = format_ast(node)
        case _:
            output = render_html(node)

    if not output.endswith("\n"):
        output += "\n"
    return output


def convert_file(options: CliOptions) -> str:
    """Read the input (file or stdin) and convert it."""
    if options.input_file is None:
        source = sys.stdin.read()
    else:
        source = options.input_file.read_text(encoding="utf-8")
    return convert(source, options)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config file: {exc}", file=sys.stderr)
        return 2

    try:
        output = convert_file(options)
    except NestingDepthError as exc:
        print(exc.format(options.display_name), file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {options.display_name}: {exc}", file=sys.stderr)
        return 2

    if options.output_file:
        try:
            options.output_file.write_text(output, encoding="utf-8")
        except OSError as exc:
            print(f"error: cannot write {options.output_file}: {exc}", file=sys.stderr)
            return 2
    else:
        sys.stdout.write(output)

    return 0
