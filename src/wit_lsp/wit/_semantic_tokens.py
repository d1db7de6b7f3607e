"""Semantic token encoding for ``textDocument/semanticTokens/full``.

Tokens go on the wire as groups of five integers:
``(deltaLine, deltaStartChar, length, tokenTypeIndex, modifierBitmask)``.
Deltas are taken against the *start* of the previous token; ``deltaStartChar``
is absolute whenever ``deltaLine`` is non-zero.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass

from lsprotocol import types as lsp

from ..errors import LexError, PositionOutOfRange
from ._classifier import SemanticCategory, classify
from ._text import TextBuffer
from ._tokenizer import Token, Tokenizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SemanticTokenLegend:
    """Server-advertised token type and modifier names."""

    token_types: tuple[str, ...]
    token_modifiers: tuple[str, ...]

    def type_index(self, category: SemanticCategory) -> int:
        return self.token_types.index(category.value)

    def to_lsp(self) -> lsp.SemanticTokensLegend:
        return lsp.SemanticTokensLegend(
            token_types=list(self.token_types),
            token_modifiers=list(self.token_modifiers),
        )


# Index position in token_types is the wire value; do not reorder.
LEGEND = SemanticTokenLegend(
    token_types=(
        lsp.SemanticTokenTypes.Keyword.value,
        lsp.SemanticTokenTypes.Namespace.value,
        lsp.SemanticTokenTypes.Property.value,
        lsp.SemanticTokenTypes.Type.value,
        lsp.SemanticTokenTypes.Variable.value,
        lsp.SemanticTokenTypes.Operator.value,
        lsp.SemanticTokenTypes.Comment.value,
        lsp.SemanticTokenTypes.Enum.value,
        lsp.SemanticTokenTypes.Interface.value,
        lsp.SemanticTokenTypes.Struct.value,
        lsp.SemanticTokenTypes.Class.value,
        lsp.SemanticTokenTypes.TypeParameter.value,
        lsp.SemanticTokenTypes.Parameter.value,
        lsp.SemanticTokenTypes.EnumMember.value,
        lsp.SemanticTokenTypes.Event.value,
        lsp.SemanticTokenTypes.Function.value,
        lsp.SemanticTokenTypes.Method.value,
        lsp.SemanticTokenTypes.Macro.value,
        lsp.SemanticTokenTypes.Modifier.value,
        lsp.SemanticTokenTypes.String.value,
        lsp.SemanticTokenTypes.Number.value,
        lsp.SemanticTokenTypes.Regexp.value,
        lsp.SemanticTokenTypes.Decorator.value,
    ),
    token_modifiers=(
        lsp.SemanticTokenModifiers.Declaration.value,
        lsp.SemanticTokenModifiers.Definition.value,
        lsp.SemanticTokenModifiers.Readonly.value,
        lsp.SemanticTokenModifiers.Static.value,
        lsp.SemanticTokenModifiers.Deprecated.value,
        lsp.SemanticTokenModifiers.Abstract.value,
        lsp.SemanticTokenModifiers.Async.value,
        lsp.SemanticTokenModifiers.Modification.value,
        lsp.SemanticTokenModifiers.Documentation.value,
        lsp.SemanticTokenModifiers.DefaultLibrary.value,
    ),
)

_result_ids = itertools.count(1)
_result_id_lock = threading.Lock()


def next_result_id() -> str:
    """Return the next process-wide semantic token result id."""
    with _result_id_lock:
        return str(next(_result_ids))


class SemanticTokensBuilder:
    """Accumulates delta-encoded token records in source order."""

    def __init__(self, result_id: str | None = None) -> None:
        self._result_id = result_id
        self._prev_line = 0
        self._prev_char = 0
        self._data: list[int] = []

    def __len__(self) -> int:
        return len(self._data) // 5

    def push(self, token_range: lsp.Range, token_type: int, modifiers: int = 0) -> None:
        """Append one single-line token starting at ``token_range.start``."""
        line = token_range.start.line
        char = token_range.start.character
        if (line, char) < (self._prev_line, self._prev_char):
            raise ValueError(
                f"token at {line}:{char} precedes previous token at "
                f"{self._prev_line}:{self._prev_char}"
            )

        delta_line = line - self._prev_line
        delta_start = char - self._prev_char if delta_line == 0 else char
        length = token_range.end.character - char

        self._data.extend((delta_line, delta_start, length, token_type, modifiers))
        self._prev_line = line
        self._prev_char = char

    def build(self) -> lsp.SemanticTokens:
        return lsp.SemanticTokens(data=list(self._data), result_id=self._result_id)


def _single_line_range(buffer: TextBuffer, token_range: lsp.Range) -> lsp.Range:
    """Clip a token that spans lines to the end of its first line."""
    if token_range.end.line == token_range.start.line:
        return token_range
    start = token_range.start
    end = lsp.Position(line=start.line, character=buffer.line_length(start.line))
    return lsp.Range(start=start, end=end)


def encode_semantic_tokens(
    buffer: TextBuffer,
    tokens: Iterable[Token],
    *,
    result_id: str | None = None,
    legend: SemanticTokenLegend = LEGEND,
) -> lsp.SemanticTokens:
    """Delta-encode *tokens* (ascending span order) against *buffer*.

    Tokens whose span no longer fits the buffer are skipped; the rest of the
    stream is still encoded.
    """
    builder = SemanticTokensBuilder(result_id)
    for token in tokens:
        category = classify(token.kind)
        if category is None:
            continue
        try:
            token_range = buffer.range_at(token.span)
        except PositionOutOfRange:
            logger.debug("Skipping stale token %s at %s", token.kind.name, token.span)
            continue

        token_range = _single_line_range(buffer, token_range)
        if token_range.end.character <= token_range.start.character:
            continue
        builder.push(token_range, legend.type_index(category))
    return builder.build()


def semantic_tokens_for(buffer: TextBuffer) -> lsp.SemanticTokens:
    """Tokenize and encode a whole buffer under a fresh result id."""
    result_id = next_result_id()
    try:
        tokens = list(Tokenizer(buffer.text))
    except LexError as exc:
        logger.debug("Tokenizer failed, returning no semantic tokens: %s", exc)
        tokens = []
    return encode_semantic_tokens(buffer, tokens, result_id=result_id)


@dataclass(frozen=True)
class DecodedToken:
    """Single resolved semantic token with source text."""

    line: int  # 0-based
    start_char: int  # 0-based, UTF-16 units
    length: int
    token_type: str  # resolved name, e.g. "keyword"
    modifiers: frozenset[str]
    text: str


def decode_semantic_tokens(
    data: list[int],
    legend: SemanticTokenLegend,
    source_lines: list[str],
) -> tuple[DecodedToken, ...]:
    """Decode the flat ``data`` array back into absolute tokens.

    Running line/char state is maintained across groups; type and modifier
    indices are resolved from *legend*.
    """
    num_values = len(data)
    if num_values % 5 != 0:
        return ()

    tokens: list[DecodedToken] = []
    current_line = 0
    current_char = 0

    for i in range(0, num_values, 5):
        delta_line, delta_start, length, type_index, modifier_bits = data[i : i + 5]

        current_line += delta_line
        if delta_line > 0:
            current_char = delta_start
        else:
            current_char += delta_start

        if 0 <= type_index < len(legend.token_types):
            token_type = legend.token_types[type_index]
        else:
            token_type = f"unknown_{type_index}"

        modifiers = frozenset(
            name
            for bit_pos, name in enumerate(legend.token_modifiers)
            if modifier_bits & (1 << bit_pos)
        )

        if 0 <= current_line < len(source_lines):
            text = _utf16_slice(source_lines[current_line], current_char, length)
        else:
            text = ""

        tokens.append(
            DecodedToken(
                line=current_line,
                start_char=current_char,
                length=length,
                token_type=token_type,
                modifiers=modifiers,
                text=text,
            )
        )

    return tuple(tokens)


def _utf16_slice(line: str, start: int, length: int) -> str:
    if line.isascii():
        return line[start : start + length]
    encoded = line.encode("utf-16-le")
    return encoded[start * 2 : (start + length) * 2].decode("utf-16-le", errors="replace")
