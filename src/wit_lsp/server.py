"""
Language server for WIT documents.

Provides:
- textDocument/semanticTokens/full: delta-encoded highlighting tokens
- textDocument/hover: keyword, type and package documentation
- textDocument/publishDiagnostics: validator reports, refreshed on
  open/change/save/close/will-save
"""

from __future__ import annotations

import logging

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from . import __version__
from .config import Settings
from .session import DocumentSession
from .wit import LEGEND

logger = logging.getLogger(__name__)

SERVER_NAME = "wit-lsp"


class _ServerPublisher:
    """Publishes diagnostics through the server's client connection."""

    def __init__(self, server: LanguageServer) -> None:
        self._server = server

    def publish(self, uri: str, diagnostics: list[lsp.Diagnostic]) -> None:
        self._server.text_document_publish_diagnostics(
            lsp.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
        )


class WitLanguageServer(LanguageServer):
    """pygls server carrying one :class:`DocumentSession`."""

    def __init__(self, settings: Settings | None = None) -> None:
        super().__init__(
            SERVER_NAME,
            __version__,
            text_document_sync_kind=lsp.TextDocumentSyncKind.Full,
        )
        self.analysis = DocumentSession(_ServerPublisher(self), settings)

    def log_to_client(self, message: str) -> None:
        """Send a ``window/logMessage`` line to the client."""
        logger.debug(message)
        self.window_log_message(lsp.LogMessageParams(type=lsp.MessageType.Log, message=message))


def _latest_text(params: lsp.DidChangeTextDocumentParams) -> str | None:
    """Full-sync clients send the whole document as the last change."""
    if not params.content_changes:
        return None
    return params.content_changes[-1].text


def create_server(settings: Settings | None = None) -> WitLanguageServer:
    """Create and configure the language server."""
    server = WitLanguageServer(settings)

    @server.feature(lsp.INITIALIZED)
    def initialized(ls: WitLanguageServer, params: lsp.InitializedParams) -> None:
        del params
        ls.log_to_client("Wit LSP initialized")

    @server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
    async def did_open(ls: WitLanguageServer, params: lsp.DidOpenTextDocumentParams) -> None:
        uri = params.text_document.uri
        ls.log_to_client(f"Opened {uri}")
        await ls.analysis.did_open(uri, params.text_document.text)

    @server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
    async def did_change(ls: WitLanguageServer, params: lsp.DidChangeTextDocumentParams) -> None:
        uri = params.text_document.uri
        ls.log_to_client(f"Changed {uri}")
        text = _latest_text(params)
        if text is None:
            await ls.analysis.lint(uri)
            return
        await ls.analysis.did_change(uri, text)

    @server.feature(lsp.TEXT_DOCUMENT_DID_SAVE, lsp.SaveOptions(include_text=True))
    async def did_save(ls: WitLanguageServer, params: lsp.DidSaveTextDocumentParams) -> None:
        uri = params.text_document.uri
        ls.log_to_client(f"Saved {uri}")
        await ls.analysis.did_save(uri, params.text)

    @server.feature(lsp.TEXT_DOCUMENT_WILL_SAVE)
    async def will_save(ls: WitLanguageServer, params: lsp.WillSaveTextDocumentParams) -> None:
        uri = params.text_document.uri
        ls.log_to_client(f"Will save {uri}")
        await ls.analysis.will_save(uri)

    @server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
    async def did_close(ls: WitLanguageServer, params: lsp.DidCloseTextDocumentParams) -> None:
        uri = params.text_document.uri
        ls.log_to_client(f"Closed {uri}")
        await ls.analysis.did_close(uri)

    @server.feature(lsp.TEXT_DOCUMENT_HOVER)
    def hover(ls: WitLanguageServer, params: lsp.HoverParams) -> lsp.Hover | None:
        return ls.analysis.hover(params.text_document.uri, params.position)

    @server.feature(lsp.TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL, LEGEND.to_lsp())
    def semantic_tokens_full(
        ls: WitLanguageServer, params: lsp.SemanticTokensParams
    ) -> lsp.SemanticTokens:
        return ls.analysis.semantic_tokens(params.text_document.uri)

    @server.feature(lsp.TEXT_DOCUMENT_FORMATTING)
    def formatting(
        ls: WitLanguageServer, params: lsp.DocumentFormattingParams
    ) -> list[lsp.TextEdit]:
        return ls.analysis.formatting(params.text_document.uri, params.options)

    return server


def run_server(
    settings: Settings | None = None,
    *,
    tcp: bool = False,
    host: str = "127.0.0.1",
    port: int = 2087,
) -> None:
    """Serve over stdio, or over TCP when *tcp* is set."""
    server = create_server(settings)
    if tcp:
        logger.info("Serving %s on %s:%d", SERVER_NAME, host, port)
        server.start_tcp(host, port)
    else:
        server.start_io()
