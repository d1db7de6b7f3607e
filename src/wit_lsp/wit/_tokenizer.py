"""Regex tokenizer for WIT documents.

Produces a gap-free sequence of tokens: every character of the input belongs
to exactly one token, including whitespace and characters the grammar does
not recognize.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from ..errors import LexError
from ._text import Span


class TokenKind(Enum):
    WHITESPACE = "whitespace"
    COMMENT = "comment"
    BLOCK_COMMENT = "block_comment"
    DOC_COMMENT = "doc_comment"

    # Punctuation / operators
    EQUALS = "="
    COMMA = ","
    COLON = ":"
    PERIOD = "."
    SEMICOLON = ";"
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    LEFT_BRACE = "{"
    RIGHT_BRACE = "}"
    LESS_THAN = "<"
    GREATER_THAN = ">"
    R_ARROW = "->"
    STAR = "*"
    AT = "@"
    SLASH = "/"
    PLUS = "+"
    MINUS = "-"

    # Keywords
    PACKAGE = "package"
    WORLD = "world"
    INTERFACE = "interface"
    IMPORT = "import"
    EXPORT = "export"
    USE = "use"
    TYPE = "type"
    FUNC = "func"
    RESOURCE = "resource"
    RECORD = "record"
    FLAGS = "flags"
    VARIANT = "variant"
    ENUM = "enum"
    UNION = "union"
    SHARED = "shared"
    STATIC = "static"
    AS = "as"
    FROM = "from"
    INCLUDE = "include"
    WITH = "with"
    CONSTRUCTOR = "constructor"

    # Built-in types
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    S8 = "s8"
    S16 = "s16"
    S32 = "s32"
    S64 = "s64"
    F32 = "f32"
    F64 = "f64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    CHAR = "char"
    BOOL = "bool"
    STRING = "string"
    OPTION = "option"
    RESULT = "result"
    FUTURE = "future"
    STREAM = "stream"
    LIST = "list"
    TUPLE = "tuple"
    OWN = "own"
    BORROW = "borrow"

    # Names and literals
    UNDERSCORE = "_"
    ID = "id"
    EXPLICIT_ID = "explicit_id"
    INTEGER = "integer"
    PACKAGE_NAME = "package_name"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Token:
    """One lexed token: its span in the source, its kind and its text."""

    span: Span
    kind: TokenKind
    text: str


_PUNCTUATION: dict[str, TokenKind] = {
    "=": TokenKind.EQUALS,
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
    ".": TokenKind.PERIOD,
    ";": TokenKind.SEMICOLON,
    "(": TokenKind.LEFT_PAREN,
    ")": TokenKind.RIGHT_PAREN,
    "{": TokenKind.LEFT_BRACE,
    "}": TokenKind.RIGHT_BRACE,
    "<": TokenKind.LESS_THAN,
    ">": TokenKind.GREATER_THAN,
    "*": TokenKind.STAR,
    "@": TokenKind.AT,
    "/": TokenKind.SLASH,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
}

KEYWORDS = frozenset(
    {
        TokenKind.PACKAGE,
        TokenKind.WORLD,
        TokenKind.INTERFACE,
        TokenKind.IMPORT,
        TokenKind.EXPORT,
        TokenKind.USE,
        TokenKind.TYPE,
        TokenKind.FUNC,
        TokenKind.RESOURCE,
        TokenKind.RECORD,
        TokenKind.FLAGS,
        TokenKind.VARIANT,
        TokenKind.ENUM,
        TokenKind.UNION,
        TokenKind.SHARED,
        TokenKind.STATIC,
        TokenKind.AS,
        TokenKind.FROM,
        TokenKind.INCLUDE,
        TokenKind.WITH,
        TokenKind.CONSTRUCTOR,
    }
)

BUILTIN_TYPES = frozenset(
    {
        TokenKind.U8,
        TokenKind.U16,
        TokenKind.U32,
        TokenKind.U64,
        TokenKind.S8,
        TokenKind.S16,
        TokenKind.S32,
        TokenKind.S64,
        TokenKind.F32,
        TokenKind.F64,
        TokenKind.FLOAT32,
        TokenKind.FLOAT64,
        TokenKind.CHAR,
        TokenKind.BOOL,
        TokenKind.STRING,
        TokenKind.OPTION,
        TokenKind.RESULT,
        TokenKind.FUTURE,
        TokenKind.STREAM,
        TokenKind.LIST,
        TokenKind.TUPLE,
        TokenKind.OWN,
        TokenKind.BORROW,
    }
)

# Words that lex as something other than a plain identifier.
_RESERVED: dict[str, TokenKind] = {kind.value: kind for kind in KEYWORDS | BUILTIN_TYPES}
_RESERVED["_"] = TokenKind.UNDERSCORE

# Keywords after which a qualified package path may appear.
_PATH_INTRODUCERS = frozenset(
    {
        TokenKind.PACKAGE,
        TokenKind.USE,
        TokenKind.IMPORT,
        TokenKind.EXPORT,
        TokenKind.INCLUDE,
    }
)
_TRIVIA = frozenset(
    {
        TokenKind.WHITESPACE,
        TokenKind.COMMENT,
        TokenKind.BLOCK_COMMENT,
        TokenKind.DOC_COMMENT,
    }
)

_WORD = r"[A-Za-z_][A-Za-z0-9_]*(?:-[A-Za-z0-9_]+)*"
_SEMVER = r"\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?"

# A path must not run into a word, another colon or a parameter list, so that
# `export run:func();` stays a named function export.
_PACKAGE_PATH_RE = re.compile(
    rf"%?{_WORD}(?::%?{_WORD})+(?:/%?{_WORD})*(?:@{_SEMVER})?(?![\w:(-])"
)

_TOKEN_RE = re.compile(
    r"""
    (?P<whitespace>\s+)
    | (?P<doc_comment>///[^\r\n]*|/\*\*(?!/).*?(?:\*/|\Z))
    | (?P<comment>//[^\r\n]*)
    | (?P<block_comment>/\*.*?(?:\*/|\Z))
    | (?P<arrow>->)
    | (?P<integer>\d+)
    | (?P<explicit_id>%"""
    + _WORD
    + r""")
    | (?P<word>"""
    + _WORD
    + r""")
    | (?P<punct>[=,:.;(){}<>*@/+\-])
    """,
    re.VERBOSE | re.DOTALL,
)


class Tokenizer:
    """Lazy, restartable token stream over one document.

    Every ``iter()`` call starts a fresh scan from offset zero, so two passes
    over the same tokenizer (or two tokenizers over the same text) yield
    identical sequences.
    """

    def __init__(self, source: str | bytes) -> None:
        if isinstance(source, bytes):
            try:
                source = source.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise LexError(f"document is not valid UTF-8: {exc}") from exc
        else:
            try:
                source.encode("utf-8")
            except UnicodeEncodeError as exc:
                raise LexError(f"document contains unencodable text: {exc}") from exc
        self._source = source

    @property
    def source(self) -> str:
        return self._source

    def __iter__(self) -> Iterator[Token]:
        return self._scan()

    def _scan(self) -> Iterator[Token]:
        text = self._source
        length = len(text)
        pos = 0
        unknown_start: int | None = None
        previous: TokenKind | None = None

        while pos < length:
            token = None
            if previous in _PATH_INTRODUCERS:
                path = _PACKAGE_PATH_RE.match(text, pos)
                if path is not None:
                    token = self._make(path.start(), path.end(), TokenKind.PACKAGE_NAME)

            if token is None:
                match = _TOKEN_RE.match(text, pos)
                if match is not None:
                    token = self._make(match.start(), match.end(), self._kind_of(match))

            if token is None:
                if unknown_start is None:
                    unknown_start = pos
                pos += 1
                continue

            if unknown_start is not None:
                yield self._make(unknown_start, pos, TokenKind.UNKNOWN)
                unknown_start = None
                previous = TokenKind.UNKNOWN

            yield token
            pos = token.span.end
            if token.kind not in _TRIVIA:
                previous = token.kind

        if unknown_start is not None:
            yield self._make(unknown_start, length, TokenKind.UNKNOWN)

    def _make(self, start: int, end: int, kind: TokenKind) -> Token:
        return Token(span=Span(start, end), kind=kind, text=self._source[start:end])

    @staticmethod
    def _kind_of(match: re.Match[str]) -> TokenKind:
        group = match.lastgroup
        text = match.group()
        if group == "word":
            return _RESERVED.get(text, TokenKind.ID)
        if group == "punct":
            return _PUNCTUATION[text]
        if group == "arrow":
            return TokenKind.R_ARROW
        return {
            "whitespace": TokenKind.WHITESPACE,
            "doc_comment": TokenKind.DOC_COMMENT,
            "comment": TokenKind.COMMENT,
            "block_comment": TokenKind.BLOCK_COMMENT,
            "integer": TokenKind.INTEGER,
            "explicit_id": TokenKind.EXPLICIT_ID,
        }[group or ""]


def tokenize(source: str | bytes) -> list[Token]:
    """Tokenize *source*, returning an empty list if it cannot be lexed."""
    try:
        return list(Tokenizer(source))
    except LexError:
        return []
