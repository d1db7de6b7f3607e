"""Tests for hover resolution."""

from __future__ import annotations

import pytest
from lsprotocol import types as lsp

from wit_lsp.wit import (
    PackageName,
    Span,
    TextBuffer,
    Token,
    TokenKind,
    documentation_for,
    hover_at,
    token_at,
)

SOURCE = """\
package wasi:clocks@0.2.0;

/// Wall clock time.
interface wall-clock {
  now: func() -> u64; // seconds
}
"""


def _hover(line: int, character: int) -> lsp.Hover | None:
    return hover_at(TextBuffer(SOURCE), lsp.Position(line=line, character=character))


def _value(hover: lsp.Hover | None) -> str:
    assert hover is not None
    assert isinstance(hover.contents, lsp.MarkupContent)
    assert hover.contents.kind == lsp.MarkupKind.Markdown
    return hover.contents.value


class TestHoverAt:
    def test_keyword(self):
        hover = _hover(0, 3)
        assert _value(hover).startswith("**package**")
        assert hover.range == lsp.Range(
            start=lsp.Position(line=0, character=0),
            end=lsp.Position(line=0, character=7),
        )

    def test_token_start_is_inside(self):
        assert _value(_hover(3, 0)).startswith("**interface**")

    def test_token_end_is_outside(self):
        # Column 7 is the space after "package".
        assert _hover(0, 7) is None

    def test_builtin_type(self):
        assert _value(_hover(4, 18)) == "An unsigned 64-bit integer."

    def test_package_name(self):
        value = _value(_hover(0, 10))
        assert "Package `wasi:clocks@0.2.0`" in value
        assert "- namespace: `wasi`" in value
        assert "- version: `0.2.0`" in value

    def test_doc_comment(self):
        assert _value(_hover(2, 5)) == "Wall clock time."

    def test_line_comment(self):
        assert _value(_hover(4, 26)) == "seconds"

    def test_identifier(self):
        assert _value(_hover(4, 3)) == "Identifier `now`"

    def test_operator(self):
        assert _value(_hover(4, 14)) == "The right arrow operator."

    def test_position_past_end_of_file(self):
        assert _hover(40, 0) is None

    def test_empty_document(self):
        assert hover_at(TextBuffer(""), lsp.Position(line=0, character=0)) is None

    def test_column_past_line_end(self):
        buffer = TextBuffer("package a:b;\nworld w {}\n")
        assert hover_at(buffer, lsp.Position(line=0, character=40)) is None

    def test_column_past_line_end_without_trailing_newline(self):
        buffer = TextBuffer("world w {}\ninterface i {}")
        assert hover_at(buffer, lsp.Position(line=0, character=11)) is None


class TestTokenAt:
    def test_column_past_line_end(self):
        buffer = TextBuffer("package a:b;\nworld w {}\n")
        assert token_at(buffer, lsp.Position(line=0, character=13)) is None

    def test_line_end_is_the_line_break(self):
        buffer = TextBuffer("package a:b;\nworld w {}\n")
        token = token_at(buffer, lsp.Position(line=0, character=12))
        assert token == Token(span=Span(12, 13), kind=TokenKind.WHITESPACE, text="\n")

    def test_returns_containing_token(self):
        token = token_at(TextBuffer("world w {}"), lsp.Position(line=0, character=6))
        assert token == Token(span=Span(6, 7), kind=TokenKind.ID, text="w")

    def test_whitespace_token_has_no_documentation(self):
        token = token_at(TextBuffer("world  w"), lsp.Position(line=0, character=6))
        assert token is not None
        assert token.kind is TokenKind.WHITESPACE
        assert documentation_for(token) is None


class TestDocumentationFor:
    @pytest.mark.parametrize("kind", [TokenKind.WHITESPACE, TokenKind.UNKNOWN])
    def test_no_documentation(self, kind):
        assert documentation_for(Token(Span(0, 1), kind, " ")) is None

    def test_explicit_identifier_drops_percent(self):
        token = Token(Span(0, 5), TokenKind.EXPLICIT_ID, "%type")
        assert documentation_for(token) == "Identifier `type`"

    def test_block_comment(self):
        token = Token(Span(0, 12), TokenKind.BLOCK_COMMENT, "/* note */")
        assert documentation_for(token) == "note"

    def test_empty_comment(self):
        assert documentation_for(Token(Span(0, 2), TokenKind.COMMENT, "//")) is None


class TestPackageName:
    def test_full_name(self):
        assert PackageName.parse("wasi:io/streams@0.2.0") == PackageName(
            namespace="wasi", name="io", path=("streams",), version="0.2.0"
        )

    def test_bare_name(self):
        assert PackageName.parse("a:b") == PackageName(namespace="a", name="b")

    @pytest.mark.parametrize("text", ["plain", ":b", "a:"])
    def test_invalid(self, text):
        assert PackageName.parse(text) is None
