"""Text buffer with offset <-> position conversion.

Offsets are character (code point) indices into the buffer. Positions follow
the LSP convention: zero-based line, and a column counted in UTF-16 code units.
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass

from lsprotocol import types as lsp

from ..errors import PositionOutOfRange

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class Span:
    """Half-open ``[start, end)`` character range."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end


def _utf16_len(text: str) -> int:
    if text.isascii():
        return len(text)
    return len(text) + sum(1 for ch in text if ord(ch) > 0xFFFF)


class TextBuffer:
    """Immutable snapshot of one document's text.

    Line starts are computed once so that ``position_at`` is a binary search
    over line offsets rather than a scan of the whole text.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        starts = [0]
        starts.extend(match.end() for match in _LINE_BREAK_RE.finditer(text))
        self._line_starts = starts

    @property
    def text(self) -> str:
        return self._text

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def __len__(self) -> int:
        return len(self._text)

    def lines(self) -> list[str]:
        """Return line contents without their line terminators."""
        return [self.line_text(line) for line in range(self.line_count)]

    def _line_bounds(self, line: int) -> tuple[int, int]:
        """Return ``(start, end)`` offsets of *line*, terminator included."""
        start = self._line_starts[line]
        if line + 1 < len(self._line_starts):
            return start, self._line_starts[line + 1]
        return start, len(self._text)

    def line_text(self, line: int) -> str:
        if not 0 <= line < self.line_count:
            raise PositionOutOfRange(line, self.line_count)
        start, end = self._line_bounds(line)
        return self._text[start:end].rstrip("\r\n")

    def line_length(self, line: int) -> int:
        """UTF-16 length of *line*, excluding the terminator."""
        return _utf16_len(self.line_text(line))

    def position_at(self, offset: int) -> lsp.Position:
        if not 0 <= offset <= len(self._text):
            raise PositionOutOfRange(offset, len(self._text))

        line = bisect.bisect_right(self._line_starts, offset) - 1
        line_start = self._line_starts[line]
        column = _utf16_len(self._text[line_start:offset])
        return lsp.Position(line=line, character=column)

    def range_at(self, span: Span) -> lsp.Range:
        return lsp.Range(start=self.position_at(span.start), end=self.position_at(span.end))

    def offset_at(self, position: lsp.Position) -> int:
        """Inverse of :meth:`position_at`.

        Columns past the end of a line clamp to the start of the next line
        (or the end of the text on the last line).
        """
        if not 0 <= position.line < self.line_count:
            raise PositionOutOfRange(position.line, self.line_count)

        start, end = self._line_bounds(position.line)
        segment = self._text[start:end]
        if segment.isascii():
            return start + min(position.character, len(segment))

        units = 0
        for index, ch in enumerate(segment):
            if units >= position.character:
                return start + index
            units += 2 if ord(ch) > 0xFFFF else 1
        return end
