"""Whole-document formatter for WIT.

Works line by line over the token stream: the line structure of the input is
kept (blank lines included), every line is re-indented from the brackets left
open by earlier lines, and the spacing between the tokens of a line is
normalized. Brackets opened on the same line count as one indentation level,
so ``future<tuple<`` indents its continuation lines once.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from lsprotocol import types as lsp

from ..errors import LexError
from ._text import TextBuffer
from ._tokenizer import Token, TokenKind, Tokenizer

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")

_OPENERS = frozenset({TokenKind.LEFT_BRACE, TokenKind.LEFT_PAREN, TokenKind.LESS_THAN})
_CLOSERS = frozenset({TokenKind.RIGHT_BRACE, TokenKind.RIGHT_PAREN, TokenKind.GREATER_THAN})
_COMMENTS = frozenset({TokenKind.COMMENT, TokenKind.BLOCK_COMMENT, TokenKind.DOC_COMMENT})

_NO_SPACE_BEFORE = frozenset(
    {
        TokenKind.COMMA,
        TokenKind.SEMICOLON,
        TokenKind.COLON,
        TokenKind.PERIOD,
        TokenKind.RIGHT_PAREN,
        TokenKind.LESS_THAN,
        TokenKind.GREATER_THAN,
        TokenKind.AT,
        TokenKind.SLASH,
    }
)
_NO_SPACE_AFTER = frozenset(
    {
        TokenKind.LEFT_PAREN,
        TokenKind.LESS_THAN,
        TokenKind.PERIOD,
        TokenKind.AT,
        TokenKind.SLASH,
    }
)
# Tokens a parameter list attaches to without a space: `func(`, `case(`.
_CALLABLE = frozenset(
    {TokenKind.FUNC, TokenKind.CONSTRUCTOR, TokenKind.ID, TokenKind.EXPLICIT_ID}
)


@dataclass(frozen=True)
class _Opener:
    line: int
    # `.{a, b}` use lists keep their braces tight.
    tight: bool


class _Layout:
    """Brackets still open, each tagged with the line that opened it."""

    def __init__(self) -> None:
        self._open: list[_Opener] = []

    def level(self) -> int:
        return len({opener.line for opener in self._open})

    def push(self, line: int, tight: bool) -> None:
        self._open.append(_Opener(line, tight))

    def pop(self) -> _Opener | None:
        # Unbalanced closers are tolerated; the document may be mid-edit.
        return self._open.pop() if self._open else None


def _split_lines(tokens: list[Token]) -> list[list[Token]]:
    lines: list[list[Token]] = [[]]
    for token in tokens:
        if token.kind is TokenKind.WHITESPACE:
            for _ in _LINE_BREAK_RE.findall(token.text):
                lines.append([])
        else:
            lines[-1].append(token)
    return lines


def _spaced(prev: Token, prev_tight: bool, token: Token, tight: bool) -> bool:
    kind = token.kind
    if kind in _COMMENTS or prev.kind in _COMMENTS:
        return True
    if prev.kind is TokenKind.LEFT_BRACE:
        return not prev_tight and kind is not TokenKind.RIGHT_BRACE
    if kind is TokenKind.RIGHT_BRACE:
        return not tight
    if kind is TokenKind.LEFT_BRACE:
        return prev.kind is not TokenKind.PERIOD
    if prev.kind in _NO_SPACE_AFTER or kind in _NO_SPACE_BEFORE:
        return False
    if kind is TokenKind.LEFT_PAREN:
        return prev.kind not in _CALLABLE
    return True


def _format_line(source: str, line: list[Token], index: int, layout: _Layout) -> tuple[int, str]:
    leading = 0
    while leading < len(line) and line[leading].kind in _CLOSERS:
        layout.pop()
        leading += 1
    level = layout.level()

    parts: list[str] = []
    prev: Token | None = None
    prev_tight = False
    for position, token in enumerate(line):
        tight = False
        if position >= leading:
            if token.kind in _CLOSERS:
                opener = layout.pop()
                tight = opener is not None and opener.tight
            elif token.kind in _OPENERS:
                tight = (
                    token.kind is TokenKind.LEFT_BRACE
                    and prev is not None
                    and prev.kind is TokenKind.PERIOD
                )
                layout.push(index, tight)
        if prev is not None and _spaced(prev, prev_tight, token, tight):
            parts.append(" ")
        parts.append(token.text)
        prev, prev_tight = token, tight

    if any(token.kind is TokenKind.UNKNOWN for token in line):
        # Leave text the lexer does not understand as written.
        return level, source[line[0].span.start : line[-1].span.end]
    return level, "".join(parts)


def format_wit(text: str, *, tab_size: int = 2, insert_spaces: bool = True) -> str:
    """Return *text* re-indented with normalized spacing.

    Raises :class:`~wit_lsp.errors.LexError` if *text* cannot be lexed.
    """
    tokens = list(Tokenizer(text))
    newline = "\r\n" if "\r\n" in text else "\n"
    unit = " " * tab_size if insert_spaces else "\t"

    layout = _Layout()
    out: list[str] = []
    for index, line in enumerate(_split_lines(tokens)):
        if not line:
            out.append("")
            continue
        level, body = _format_line(text, line, index, layout)
        out.append(unit * level + body)
    return newline.join(out)


def formatting_edits(buffer: TextBuffer, options: lsp.FormattingOptions) -> list[lsp.TextEdit]:
    """One edit replacing the whole document, or none if it is already formatted."""
    try:
        formatted = format_wit(
            buffer.text, tab_size=options.tab_size, insert_spaces=options.insert_spaces
        )
    except LexError as exc:
        logger.warning("Not formatting document: %s", exc)
        return []
    if formatted == buffer.text:
        return []
    whole = lsp.Range(
        start=lsp.Position(line=0, character=0),
        end=buffer.position_at(len(buffer)),
    )
    return [lsp.TextEdit(range=whole, new_text=formatted)]
