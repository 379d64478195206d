"""Minimal LSP server for picomark, diagnostics only."""

from __future__ import annotations

import argparse
import tomllib
from pathlib import Path

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from picomark import __version__
from picomark.cli import CONFIG_NAME, config_max_depth, load_config
from picomark.errors import NestingDepthError
from picomark.parser import DEFAULT_MAX_DEPTH, parse

server = LanguageServer(
    "picomark-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _validate(ls: LanguageServer, uri: str) -> None:
    """Parse the document and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    diagnostics: list[Diagnostic] = []

    # Same picomark.toml lookup as the CLI: beside the document
    max_depth = DEFAULT_MAX_DEPTH
    try:
        max_depth = config_max_depth(load_config(None, Path(doc.path).parent))
    except (argparse.ArgumentTypeError, tomllib.TOMLDecodeError, OSError) as exc:
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=0, character=0),
                    end=Position(line=0, character=0),
                ),
                message=f"invalid {CONFIG_NAME}: {exc}",
                severity=DiagnosticSeverity.Warning,
                source="picomark",
            )
        )

    try:
        parse(doc.source, max_depth=max_depth)
    except NestingDepthError as exc:
        line = exc.position.line - 1
        col = exc.position.column - 1
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=line, character=col),
                    end=Position(line=line, character=col + 1),
                ),
                message=f"{exc.message} (limit {exc.limit})",
                severity=DiagnosticSeverity.Error,
                source="picomark",
            )
        )

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
