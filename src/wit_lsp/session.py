"""Per-document state and the lint cycle.

The session owns one :class:`TextBuffer` per open URI. Buffers are immutable
and replaced by reference, so a request that grabbed a buffer keeps a
consistent snapshot even if a change notification lands while it runs.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Protocol
from urllib.parse import urlparse

from lsprotocol import types as lsp
from pygls import uris

from .config import Settings
from .linter import Linter
from .wit import TextBuffer, formatting_edits, hover_at, semantic_tokens_for

logger = logging.getLogger(__name__)


class DiagnosticPublisher(Protocol):
    """Sink for ``textDocument/publishDiagnostics`` notifications."""

    def publish(self, uri: str, diagnostics: list[lsp.Diagnostic]) -> None: ...


LinterFactory = Callable[[Path, Settings], Linter]


def _path_for(uri: str) -> Path | None:
    if urlparse(uri).scheme != "file":
        return None
    path = uris.to_fs_path(uri)
    return Path(path) if path else None


class DocumentStore:
    """Current text of every open document, keyed by URI."""

    def __init__(self) -> None:
        self._buffers: dict[str, TextBuffer] = {}

    def __contains__(self, uri: str) -> bool:
        return uri in self._buffers

    def __len__(self) -> int:
        return len(self._buffers)

    def open(self, uri: str, text: str) -> TextBuffer:
        buffer = TextBuffer(text)
        self._buffers[uri] = buffer
        return buffer

    def replace(self, uri: str, text: str) -> TextBuffer:
        return self.open(uri, text)

    def close(self, uri: str) -> None:
        self._buffers.pop(uri, None)

    def get(self, uri: str) -> TextBuffer | None:
        return self._buffers.get(uri)


class DocumentSession:
    """Routes editor events to the analysis pipeline and the validator."""

    def __init__(
        self,
        publisher: DiagnosticPublisher,
        settings: Settings | None = None,
        *,
        linter_factory: LinterFactory = Linter,
    ) -> None:
        self._publisher = publisher
        self.settings = settings if settings is not None else Settings.from_env()
        self._linter_factory = linter_factory
        self.documents = DocumentStore()
        self._generations: dict[str, int] = {}

    # -- buffers -----------------------------------------------------------

    def buffer_for(self, uri: str) -> TextBuffer | None:
        """Return the open buffer for *uri*, falling back to the file on disk."""
        buffer = self.documents.get(uri)
        if buffer is not None:
            return buffer

        path = _path_for(uri)
        if path is None:
            return None
        try:
            return TextBuffer(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Cannot read %s: %s", uri, exc)
            return None

    # -- requests ----------------------------------------------------------

    def semantic_tokens(self, uri: str) -> lsp.SemanticTokens:
        buffer = self.buffer_for(uri)
        if buffer is None:
            return lsp.SemanticTokens(data=[])
        return semantic_tokens_for(buffer)

    def hover(self, uri: str, position: lsp.Position) -> lsp.Hover | None:
        buffer = self.buffer_for(uri)
        if buffer is None:
            return None
        return hover_at(buffer, position)

    def formatting(self, uri: str, options: lsp.FormattingOptions) -> list[lsp.TextEdit]:
        buffer = self.buffer_for(uri)
        if buffer is None:
            return []
        return formatting_edits(buffer, options)

    # -- lifecycle ---------------------------------------------------------

    async def did_open(self, uri: str, text: str) -> None:
        self.documents.open(uri, text)
        await self.lint(uri)

    async def did_change(self, uri: str, text: str) -> None:
        self.documents.replace(uri, text)
        await self.lint(uri)

    async def did_save(self, uri: str, text: str | None = None) -> None:
        if text is not None:
            self.documents.replace(uri, text)
        await self.lint(uri)

    async def will_save(self, uri: str) -> None:
        await self.lint(uri)

    async def did_close(self, uri: str) -> None:
        self.documents.close(uri)
        await self.lint(uri)

    # -- diagnostics -------------------------------------------------------

    def generation(self, uri: str) -> int:
        return self._generations.get(uri, 0)

    async def lint(self, uri: str) -> None:
        """Run one lint cycle: clear *uri*, validate, publish fresh results.

        Results are discarded if another cycle for the same URI started while
        the validator was running.
        """
        generation = self.generation(uri) + 1
        self._generations[uri] = generation

        self._publisher.publish(uri, [])

        path = _path_for(uri)
        if path is None:
            logger.debug("Not linting %s: not a file URI", uri)
            return

        linter = self._linter_factory(path, self.settings)
        results = await linter.run()

        if self.generation(uri) != generation:
            logger.debug("Discarding stale diagnostics for %s (generation %d)", uri, generation)
            return

        for target_uri, diagnostics in results.items():
            if target_uri != uri:
                self._publisher.publish(target_uri, [])
            self._publisher.publish(target_uri, diagnostics)
