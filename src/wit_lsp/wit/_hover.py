"""Hover resolution: position -> token -> documentation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from lsprotocol import types as lsp

from ..errors import LexError, PositionOutOfRange
from ._docs import DOCS
from ._text import TextBuffer
from ._tokenizer import Token, TokenKind, Tokenizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageName:
    """``namespace:name[/path...][@version]`` split into its parts."""

    namespace: str
    name: str
    path: tuple[str, ...] = ()
    version: str | None = None

    @classmethod
    def parse(cls, text: str) -> PackageName | None:
        body, _, version = text.partition("@")
        head, *path = body.split("/")
        namespace, sep, name = head.partition(":")
        if not sep or not namespace or not name:
            return None
        return cls(
            namespace=namespace,
            name=name,
            path=tuple(path),
            version=version or None,
        )


def _describe_package(text: str) -> str:
    package = PackageName.parse(text)
    if package is None:
        return f"Package `{text}`"
    lines = [f"Package `{text}`", "", f"- namespace: `{package.namespace}`"]
    lines.append(f"- package: `{package.name}`")
    if package.path:
        lines.append(f"- item: `{'/'.join(package.path)}`")
    if package.version:
        lines.append(f"- version: `{package.version}`")
    return "\n".join(lines)


def _strip_comment(token: Token) -> str:
    text = token.text
    if token.kind is TokenKind.DOC_COMMENT and text.startswith("///"):
        return text[3:].strip()
    if token.kind is TokenKind.COMMENT:
        return text[2:].strip()
    # Block and block-doc comments.
    text = text.removeprefix("/**") if text.startswith("/**") else text.removeprefix("/*")
    return text.removesuffix("*/").strip()


def documentation_for(token: Token) -> str | None:
    """Return hover text for *token*, or ``None`` if it has none."""
    kind = token.kind
    if kind in (TokenKind.WHITESPACE, TokenKind.UNKNOWN):
        return None
    if kind in (TokenKind.COMMENT, TokenKind.BLOCK_COMMENT, TokenKind.DOC_COMMENT):
        return _strip_comment(token) or None
    if kind in (TokenKind.ID, TokenKind.EXPLICIT_ID):
        return f"Identifier `{token.text.removeprefix('%')}`"
    if kind is TokenKind.PACKAGE_NAME:
        return _describe_package(token.text)
    return DOCS.get(kind)


def token_at(buffer: TextBuffer, position: lsp.Position) -> Token | None:
    """Return the first token whose span contains *position*.

    Columns past the end of the line select nothing, rather than the first
    token of the next line.
    """
    try:
        if position.character > buffer.line_length(position.line):
            return None
        offset = buffer.offset_at(position)
        tokenizer = Tokenizer(buffer.text)
    except (PositionOutOfRange, LexError) as exc:
        logger.debug("No hover token at %s: %s", position, exc)
        return None

    for token in tokenizer:
        if token.span.contains(offset):
            return token
        if token.span.start > offset:
            break
    return None


def hover_at(buffer: TextBuffer, position: lsp.Position) -> lsp.Hover | None:
    token = token_at(buffer, position)
    if token is None:
        return None

    text = documentation_for(token)
    if text is None:
        return None

    try:
        token_range = buffer.range_at(token.span)
    except PositionOutOfRange:
        token_range = None
    return lsp.Hover(
        contents=lsp.MarkupContent(kind=lsp.MarkupKind.Markdown, value=text),
        range=token_range,
    )
