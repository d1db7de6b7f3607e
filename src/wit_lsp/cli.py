#!/usr/bin/env python3
"""Command line entry point: run the language server or inspect WIT files."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, dataclass
from pathlib import Path

import anyio
from lsprotocol import types as lsp

from . import __version__
from .config import Settings
from .linter import Linter
from .server import run_server
from .errors import LexError
from .wit import (
    LEGEND,
    TextBuffer,
    decode_semantic_tokens,
    format_wit,
    hover_at,
    semantic_tokens_for,
)


@dataclass
class ValidatorStatus:
    """Resolved availability of the validator command."""

    command: list[str]
    executable: str | None
    available: bool
    reason: str | None = None


def _configure_logging(settings: Settings) -> None:
    handler: logging.Handler
    if settings.log_file:
        handler = logging.FileHandler(settings.log_file, encoding="utf-8")
    else:
        # stdout carries the protocol stream.
        handler = logging.StreamHandler(sys.stderr)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[handler],
        force=True,
    )


def _read_buffer(path: str) -> TextBuffer | None:
    try:
        return TextBuffer(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Cannot read {path}: {exc}", file=sys.stderr)
        return None


def _validator_status(settings: Settings) -> ValidatorStatus:
    command = list(settings.validator_command)
    executable = settings.resolve_validator()
    reason = None
    if executable is None:
        reason = f"{command[0] if command else '<empty>'} was not found on PATH"
    return ValidatorStatus(
        command=command,
        executable=executable,
        available=executable is not None,
        reason=reason,
    )


def _print_doctor(status: ValidatorStatus, as_json: bool) -> None:
    """Render `doctor` command output."""
    if as_json:
        print(json.dumps({"ready": status.available, "validator": asdict(status)}, indent=2))
        return

    print("wit-lsp doctor")
    state = "OK" if status.available else "MISSING"
    print(f"[{state}] validator: {' '.join(status.command) or '<empty>'}")
    if status.executable:
        print(f"      executable: {status.executable}")
    elif status.reason:
        print(f"      note: {status.reason}")
        print("      fix: cargo install wasm-tools  (or set WIT_LSP_VALIDATOR)")


def _diagnostic_to_dict(uri: str, diagnostic: lsp.Diagnostic) -> dict[str, object]:
    start = diagnostic.range.start
    end = diagnostic.range.end
    severity = diagnostic.severity or lsp.DiagnosticSeverity.Error
    return {
        "uri": uri,
        "line": start.line + 1,
        "column": start.character + 1,
        "end_column": end.character + 1,
        "severity": severity.name.lower(),
        "message": diagnostic.message,
    }


def _cmd_tokens(path: str, as_json: bool) -> int:
    buffer = _read_buffer(path)
    if buffer is None:
        return 1

    encoded = semantic_tokens_for(buffer)
    tokens = decode_semantic_tokens(list(encoded.data), LEGEND, buffer.lines())

    if as_json:
        payload = {
            "result_id": encoded.result_id,
            "data": list(encoded.data),
            "tokens": [
                {
                    "line": t.line,
                    "start": t.start_char,
                    "length": t.length,
                    "type": t.token_type,
                    "text": t.text,
                }
                for t in tokens
            ],
        }
        print(json.dumps(payload, indent=2))
        return 0

    for t in tokens:
        print(f"{t.line + 1}:{t.start_char + 1}\t{t.token_type:<10}\t{t.text}")
    return 0


def _cmd_hover(path: str, line: int, column: int) -> int:
    buffer = _read_buffer(path)
    if buffer is None:
        return 1

    position = lsp.Position(line=max(line - 1, 0), character=max(column - 1, 0))
    result = hover_at(buffer, position)
    if result is None or not isinstance(result.contents, lsp.MarkupContent):
        print("No hover information.")
        return 0
    print(result.contents.value)
    return 0


def _cmd_format(path: str, tab_size: int, use_tabs: bool, check: bool) -> int:
    buffer = _read_buffer(path)
    if buffer is None:
        return 1

    try:
        formatted = format_wit(buffer.text, tab_size=tab_size, insert_spaces=not use_tabs)
    except LexError as exc:
        print(f"Cannot format {path}: {exc}", file=sys.stderr)
        return 1

    if check:
        if formatted == buffer.text:
            return 0
        print(f"{path} would be reformatted.")
        return 1
    sys.stdout.write(formatted)
    return 0


def _cmd_lint(path: str, settings: Settings, as_json: bool) -> int:
    linter = Linter(path, settings)
    results = anyio.run(linter.run)
    items = [
        _diagnostic_to_dict(uri, diagnostic)
        for uri, diagnostics in results.items()
        for diagnostic in diagnostics
    ]

    if as_json:
        print(json.dumps({"diagnostics": items}, indent=2))
    elif not items:
        print(f"No diagnostics for {linter.directory}.")
    else:
        for item in items:
            print(
                f"{item['uri']}:{item['line']}:{item['column']}: "
                f"{item['severity']}: {item['message']}"
            )
    return 1 if items else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wit-lsp",
        description="Language server and inspection tools for WIT documents",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--validator", help="Validator command (default: wasm-tools)")
    parser.add_argument("--log-level", help="Logging level (default: WARNING)")
    parser.add_argument("--log-file", help="Write logs to this file instead of stderr")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    serve_parser = subparsers.add_parser("serve", help="Run the language server (default)")
    serve_parser.add_argument("--tcp", action="store_true", help="Serve over TCP instead of stdio")
    serve_parser.add_argument("--host", default="127.0.0.1", help="TCP host")
    serve_parser.add_argument("--port", type=int, default=2087, help="TCP port")

    tokens_parser = subparsers.add_parser("tokens", help="Print semantic tokens of a file")
    tokens_parser.add_argument("file", help="WIT file")
    tokens_parser.add_argument("--json", action="store_true", help="Output as JSON")

    hover_parser = subparsers.add_parser("hover", help="Print hover text at a position")
    hover_parser.add_argument("file", help="WIT file")
    hover_parser.add_argument("line", type=int, help="1-based line")
    hover_parser.add_argument("column", type=int, help="1-based column")

    format_parser = subparsers.add_parser("format", help="Print a file reformatted")
    format_parser.add_argument("file", help="WIT file")
    format_parser.add_argument("--tab-size", type=int, default=2, help="Spaces per level")
    format_parser.add_argument("--tabs", action="store_true", help="Indent with tabs")
    format_parser.add_argument(
        "--check", action="store_true", help="Exit 1 if the file is not formatted"
    )

    lint_parser = subparsers.add_parser("lint", help="Validate a WIT package directory")
    lint_parser.add_argument("path", help="WIT file or package directory")
    lint_parser.add_argument("--json", action="store_true", help="Output as JSON")

    doctor_parser = subparsers.add_parser("doctor", help="Check validator availability")
    doctor_parser.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env().with_overrides(
        validator=args.validator,
        log_level=args.log_level,
        log_file=args.log_file,
    )
    _configure_logging(settings)

    if args.command in (None, "serve"):
        run_server(
            settings,
            tcp=getattr(args, "tcp", False),
            host=getattr(args, "host", "127.0.0.1"),
            port=getattr(args, "port", 2087),
        )
        return 0

    if args.command == "tokens":
        return _cmd_tokens(args.file, args.json)

    if args.command == "hover":
        return _cmd_hover(args.file, args.line, args.column)

    if args.command == "format":
        return _cmd_format(args.file, args.tab_size, args.tabs, args.check)

    if args.command == "lint":
        return _cmd_lint(args.path, settings, args.json)

    if args.command == "doctor":
        status = _validator_status(settings)
        _print_doctor(status, as_json=args.json)
        return 0 if status.available else 1

    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
