"""Run the external WIT validator and turn its report into LSP diagnostics.

The validator (``wasm-tools component wit <dir>``) checks a whole package
directory and prints human-readable reports on stderr:

    error: undefined type `type4`
      --> world.wit:11:45
       |
    11 |   export foo: func() -> tuple<type1, type2, type3, type4>;
       |                                                     ^----

Each report needs a message, a ``path:line:column`` locator and a marker
line; the marker run length is the width of the diagnostic. Reports that do
not fit are dropped rather than published at a guessed position.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import anyio
from lsprotocol import types as lsp
from pygls import uris

from .config import Settings
from .errors import (
    NonUtf8Output,
    ProcessSpawnError,
    UnparsableDiagnosticBlock,
    ValidatorError,
)

logger = logging.getLogger(__name__)

DIAGNOSTIC_SOURCE = "wasm-tools"
WIT_SUFFIX = ".wit"

_HEADER_RE = re.compile(
    r"^(?P<kind>error|warning|note|help)(?:\[[^\]]*\])?:\s*(?P<message>.*?)\s*$",
    re.IGNORECASE,
)
_CAUSED_BY_RE = re.compile(r"^\s*Caused by:\s*$")
_CAUSE_RE = re.compile(r"^\s+(?:\d+:\s+)?(?P<message>\S.*?)\s*$")
_LOCATOR_RE = re.compile(r"^\s*-->\s*(?P<location>.*?)\s*$")
_LOCATION_RE = re.compile(r"^(?P<path>.+):(?P<line>\d+):(?P<column>\d+)$")
_MARKER_RE = re.compile(r"^\s*\|\s*(?P<marker>[\^-]+)(?:\s.*)?$")
_GUTTER_RE = re.compile(r"^\s*\d*\s*\|")

_SEVERITIES = {
    "error": lsp.DiagnosticSeverity.Error,
    "warning": lsp.DiagnosticSeverity.Warning,
    "note": lsp.DiagnosticSeverity.Information,
    "help": lsp.DiagnosticSeverity.Hint,
}


@dataclass(frozen=True)
class _Location:
    path: str
    line: int  # 0-based
    column: int  # 0-based


def _parse_locator(location: str) -> _Location:
    match = _LOCATION_RE.match(location)
    if match is None:
        raise UnparsableDiagnosticBlock(f"unrecognized locator: {location!r}")
    line = int(match.group("line"))
    column = int(match.group("column"))
    if line < 1 or column < 1:
        raise UnparsableDiagnosticBlock(f"locator outside the file: {location!r}")
    return _Location(path=match.group("path").strip(), line=line - 1, column=column - 1)


def _uri_for(path: str, base_dir: str | Path) -> str | None:
    full_path = os.path.normpath(os.path.join(os.fspath(base_dir), path))
    return uris.from_fs_path(full_path)


class _ReportParser:
    """Line-oriented state machine over one validator report."""

    def __init__(self, base_dir: str | Path) -> None:
        self._base_dir = base_dir
        self._severity = lsp.DiagnosticSeverity.Error
        self._message: str | None = None
        self._in_causes = False
        self._location: _Location | None = None
        self.diagnostics: dict[str, list[lsp.Diagnostic]] = {}

    def feed(self, line: str) -> None:
        header = _HEADER_RE.match(line)
        if header is not None:
            self._drop_pending("new report started before marker line")
            self._severity = _SEVERITIES[header.group("kind").lower()]
            self._message = header.group("message") or None
            self._in_causes = False
            return

        if _CAUSED_BY_RE.match(line):
            self._in_causes = True
            return

        locator = _LOCATOR_RE.match(line)
        if locator is not None:
            self._drop_pending("second locator before marker line")
            try:
                self._location = _parse_locator(locator.group("location"))
            except UnparsableDiagnosticBlock as exc:
                logger.debug("Dropping validator report: %s", exc)
            return

        marker = _MARKER_RE.match(line)
        if marker is not None:
            if self._location is not None:
                self._emit(len(marker.group("marker")))
            return

        if _GUTTER_RE.match(line):
            return

        if self._in_causes and self._location is None:
            cause = _CAUSE_RE.match(line)
            if cause is not None:
                self._message = cause.group("message")

    def finish(self) -> dict[str, list[lsp.Diagnostic]]:
        self._drop_pending("report ended before marker line")
        return self.diagnostics

    def _drop_pending(self, reason: str) -> None:
        if self._location is not None:
            logger.debug("Dropping validator report at %s: %s", self._location, reason)
            self._location = None

    def _emit(self, width: int) -> None:
        location = self._location
        self._location = None
        if location is None:
            return
        if not self._message:
            logger.debug("Dropping validator report at %s: no message", location)
            return

        uri = _uri_for(location.path, self._base_dir)
        if uri is None:
            logger.debug("Dropping validator report: cannot build URI for %s", location.path)
            return

        diagnostic = lsp.Diagnostic(
            range=lsp.Range(
                start=lsp.Position(line=location.line, character=location.column),
                end=lsp.Position(line=location.line, character=location.column + width),
            ),
            message=self._message,
            severity=self._severity,
            source=DIAGNOSTIC_SOURCE,
        )
        self.diagnostics.setdefault(uri, []).append(diagnostic)
        self._message = None
        self._in_causes = False


def parse_validator_output(text: str, base_dir: str | Path) -> dict[str, list[lsp.Diagnostic]]:
    """Parse validator stderr into diagnostics grouped by file URI.

    Relative paths in locator lines are resolved against *base_dir*, the
    directory the validator ran in.
    """
    parser = _ReportParser(base_dir)
    for line in text.splitlines():
        parser.feed(line)
    return parser.finish()


async def run_validator(argv: Sequence[str], cwd: str | Path) -> str:
    """Run the validator and return its stderr as text."""
    try:
        result = await anyio.run_process(list(argv), cwd=cwd, check=False)
    except OSError as exc:
        raise ProcessSpawnError(f"failed to start {argv[0]!r}: {exc}") from exc

    try:
        return result.stderr.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise NonUtf8Output(f"{argv[0]!r} wrote non-UTF-8 output: {exc}") from exc


class Linter:
    """Validator run over the package directory containing one file.

    A path ending in ``.wit`` names a document and lints its parent directory;
    any other path is taken to be the package directory itself. The
    filesystem is not consulted, so construction never blocks.
    """

    def __init__(self, path: str | Path, settings: Settings | None = None) -> None:
        path = Path(path)
        self.directory = path.parent if path.suffix.lower() == WIT_SUFFIX else path
        self._settings = settings if settings is not None else Settings.from_env()

    @property
    def argv(self) -> list[str]:
        return self._settings.validator_argv(str(self.directory))

    async def run(self) -> dict[str, list[lsp.Diagnostic]]:
        """Return diagnostics by file URI; validator failures yield ``{}``."""
        try:
            stderr = await run_validator(self.argv, cwd=self.directory)
        except ProcessSpawnError as exc:
            logger.warning("Validator unavailable: %s", exc)
            return {}
        except ValidatorError as exc:
            logger.debug("Ignoring validator output: %s", exc)
            return {}
        return parse_validator_output(stderr, self.directory)
