"""Tests for the pygls server wiring."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from lsprotocol import types as lsp

from wit_lsp import __version__
from wit_lsp.config import Settings
from wit_lsp.server import (
    SERVER_NAME,
    WitLanguageServer,
    _latest_text,
    _ServerPublisher,
    create_server,
    run_server,
)
from wit_lsp.session import DocumentSession


@pytest.fixture
def server():
    return create_server(Settings(validator_command=("wit-lsp-no-such-validator",)))


class TestCreateServer:
    def test_identity(self, server):
        assert isinstance(server, WitLanguageServer)
        assert server.name == SERVER_NAME
        assert server.version == __version__

    def test_session_uses_given_settings(self, server):
        assert isinstance(server.analysis, DocumentSession)
        assert server.analysis.settings.validator_command == ("wit-lsp-no-such-validator",)

    @pytest.mark.parametrize(
        "feature",
        [
            lsp.INITIALIZED,
            lsp.TEXT_DOCUMENT_DID_OPEN,
            lsp.TEXT_DOCUMENT_DID_CHANGE,
            lsp.TEXT_DOCUMENT_DID_SAVE,
            lsp.TEXT_DOCUMENT_WILL_SAVE,
            lsp.TEXT_DOCUMENT_DID_CLOSE,
            lsp.TEXT_DOCUMENT_HOVER,
            lsp.TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
            lsp.TEXT_DOCUMENT_FORMATTING,
        ],
    )
    def test_features_registered(self, server, feature):
        assert feature in server.protocol.fm.features

    def test_semantic_tokens_legend_advertised(self, server):
        options = server.protocol.fm.feature_options[lsp.TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL]
        assert options.token_types[0] == "keyword"

    def test_log_to_client(self, server):
        with patch.object(server, "window_log_message") as log_message:
            server.log_to_client("hello")
        params = log_message.call_args.args[0]
        assert params.type == lsp.MessageType.Log
        assert params.message == "hello"


class TestServerPublisher:
    def test_sends_publish_diagnostics(self):
        ls = MagicMock()
        diagnostic = lsp.Diagnostic(
            range=lsp.Range(
                start=lsp.Position(line=0, character=0),
                end=lsp.Position(line=0, character=1),
            ),
            message="boom",
        )
        _ServerPublisher(ls).publish("file:///a.wit", [diagnostic])

        params = ls.text_document_publish_diagnostics.call_args.args[0]
        assert params == lsp.PublishDiagnosticsParams(uri="file:///a.wit", diagnostics=[diagnostic])


class TestLatestText:
    def test_last_change_wins(self):
        params = lsp.DidChangeTextDocumentParams(
            text_document=lsp.VersionedTextDocumentIdentifier(uri="file:///a.wit", version=2),
            content_changes=[
                lsp.TextDocumentContentChangeWholeDocument(text="world a {}"),
                lsp.TextDocumentContentChangeWholeDocument(text="world b {}"),
            ],
        )
        assert _latest_text(params) == "world b {}"

    def test_no_changes(self):
        params = lsp.DidChangeTextDocumentParams(
            text_document=lsp.VersionedTextDocumentIdentifier(uri="file:///a.wit", version=2),
            content_changes=[],
        )
        assert _latest_text(params) is None


class TestRunServer:
    def test_stdio(self):
        with patch.object(WitLanguageServer, "start_io") as start_io:
            run_server(Settings())
        start_io.assert_called_once_with()

    def test_tcp(self):
        with patch.object(WitLanguageServer, "start_tcp") as start_tcp:
            run_server(Settings(), tcp=True, host="0.0.0.0", port=4000)
        start_tcp.assert_called_once_with("0.0.0.0", 4000)
