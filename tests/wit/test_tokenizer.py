"""Tests for the WIT tokenizer."""

from __future__ import annotations

import pytest

from wit_lsp.errors import LexError
from wit_lsp.wit import Span, TokenKind, Tokenizer, tokenize

SAMPLE = """\
/// A logging interface.
package wasi:logging@0.1.0;

interface logging {
  use wasi:io/streams.{output-stream};

  enum level { trace, debug, info }

  /* a block
     comment */
  log: func(level: level, %context: string, message: list<u8>) -> result<_, u32>;
}
"""


def _kinds(text: str) -> list[TokenKind]:
    return [t.kind for t in tokenize(text) if t.kind is not TokenKind.WHITESPACE]


class TestCoverage:
    @pytest.mark.parametrize(
        "text",
        [SAMPLE, "", "world w { $$ }", "/* never closed", "a\r\nb\rc", "été \U0001f600"],
    )
    def test_tokens_cover_text_without_gaps(self, text):
        tokens = tokenize(text)
        assert "".join(t.text for t in tokens) == text

        offset = 0
        for token in tokens:
            assert token.span.start == offset
            assert token.span.end > token.span.start
            assert text[token.span.start : token.span.end] == token.text
            offset = token.span.end
        assert offset == len(text)

    def test_iteration_is_restartable(self):
        tokenizer = Tokenizer(SAMPLE)
        assert list(tokenizer) == list(tokenizer)
        assert list(tokenizer) == list(Tokenizer(SAMPLE))

    def test_bytes_source(self):
        assert tokenize(SAMPLE.encode("utf-8")) == tokenize(SAMPLE)


class TestKinds:
    def test_keywords_types_and_punctuation(self):
        assert _kinds("record r { x: u32, y: option<string> }") == [
            TokenKind.RECORD,
            TokenKind.ID,
            TokenKind.LEFT_BRACE,
            TokenKind.ID,
            TokenKind.COLON,
            TokenKind.U32,
            TokenKind.COMMA,
            TokenKind.ID,
            TokenKind.COLON,
            TokenKind.OPTION,
            TokenKind.LESS_THAN,
            TokenKind.STRING,
            TokenKind.GREATER_THAN,
            TokenKind.RIGHT_BRACE,
        ]

    def test_arrow_is_one_token(self):
        assert _kinds("f: func() -> u8;")[-3:] == [
            TokenKind.R_ARROW,
            TokenKind.U8,
            TokenKind.SEMICOLON,
        ]

    def test_kebab_case_identifier(self):
        tokens = [t for t in tokenize("output-stream") if t.kind is not TokenKind.WHITESPACE]
        assert [(t.kind, t.text) for t in tokens] == [(TokenKind.ID, "output-stream")]

    def test_explicit_identifier(self):
        tokens = tokenize("%context")
        assert [(t.kind, t.text) for t in tokens] == [(TokenKind.EXPLICIT_ID, "%context")]

    def test_integer_and_underscore(self):
        assert _kinds("result<_, 42>") == [
            TokenKind.RESULT,
            TokenKind.LESS_THAN,
            TokenKind.UNDERSCORE,
            TokenKind.COMMA,
            TokenKind.INTEGER,
            TokenKind.GREATER_THAN,
        ]

    def test_comments(self):
        assert _kinds("// line\n/// doc\n/* block */ /** block doc */") == [
            TokenKind.COMMENT,
            TokenKind.DOC_COMMENT,
            TokenKind.BLOCK_COMMENT,
            TokenKind.DOC_COMMENT,
        ]

    def test_empty_block_comment_is_not_doc(self):
        assert _kinds("/**/") == [TokenKind.BLOCK_COMMENT]

    def test_unterminated_block_comment_runs_to_end(self):
        tokens = tokenize("world w {} /* open\nstill open")
        assert tokens[-1].kind is TokenKind.BLOCK_COMMENT
        assert tokens[-1].text == "/* open\nstill open"


class TestPackageNames:
    def test_package_declaration(self):
        tokens = tokenize("package wasi:clocks@0.2.0;")
        assert [(t.kind, t.text) for t in tokens if t.kind is not TokenKind.WHITESPACE] == [
            (TokenKind.PACKAGE, "package"),
            (TokenKind.PACKAGE_NAME, "wasi:clocks@0.2.0"),
            (TokenKind.SEMICOLON, ";"),
        ]

    def test_named_function_export_is_not_a_path(self):
        assert _kinds("export run:func();")[:4] == [
            TokenKind.EXPORT,
            TokenKind.ID,
            TokenKind.COLON,
            TokenKind.FUNC,
        ]

    def test_use_path_stops_before_item_list(self):
        kinds = _kinds("use wasi:io/streams.{output-stream};")
        assert kinds[:3] == [TokenKind.USE, TokenKind.PACKAGE_NAME, TokenKind.PERIOD]

    def test_comment_between_keyword_and_path(self):
        assert _kinds("import /* x */ wasi:http/handler;")[:3] == [
            TokenKind.IMPORT,
            TokenKind.BLOCK_COMMENT,
            TokenKind.PACKAGE_NAME,
        ]

    def test_plain_name_after_export_is_identifier(self):
        assert _kinds("export run: func();")[:3] == [
            TokenKind.EXPORT,
            TokenKind.ID,
            TokenKind.COLON,
        ]

    def test_colon_path_outside_declaration_is_not_package(self):
        assert TokenKind.PACKAGE_NAME not in _kinds("type t = a:b;")


class TestUnknown:
    def test_unrecognized_run_is_single_token(self):
        tokens = tokenize("world w { $$ }")
        unknown = [t for t in tokens if t.kind is TokenKind.UNKNOWN]
        assert len(unknown) == 1
        assert unknown[0].text == "$$"
        assert unknown[0].span == Span(10, 12)

    def test_unknown_at_end_of_text(self):
        tokens = tokenize("world #")
        assert tokens[-1].kind is TokenKind.UNKNOWN
        assert tokens[-1].text == "#"


class TestLexErrors:
    def test_invalid_utf8_bytes(self):
        with pytest.raises(LexError):
            Tokenizer(b"world \xff")

    def test_lone_surrogate(self):
        with pytest.raises(LexError):
            Tokenizer("world \ud800")

    def test_tokenize_returns_empty_list(self):
        assert tokenize(b"\xff\xfe") == []
