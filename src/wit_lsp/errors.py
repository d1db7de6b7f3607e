"""Exception hierarchy for the WIT analysis pipeline.

None of these are fatal to a session: each one has a degraded result that the
caller falls back to (a skipped token, an empty token list, an empty
diagnostic set).
"""

from __future__ import annotations


class WitLspError(Exception):
    """Base class for all wit-lsp errors."""


class PositionOutOfRange(WitLspError):
    """An offset or position does not fall inside the current text buffer."""

    def __init__(self, offset: int, length: int) -> None:
        super().__init__(f"offset {offset} is outside buffer of length {length}")
        self.offset = offset
        self.length = length


class LexError(WitLspError):
    """The tokenizer cannot process the text at all."""


class ValidatorError(WitLspError):
    """The external validator could not produce a usable report."""


class ProcessSpawnError(ValidatorError):
    """The validator process could not be started."""


class NonUtf8Output(ValidatorError):
    """The validator wrote bytes to stderr that are not valid UTF-8."""


class UnparsableDiagnosticBlock(WitLspError):
    """A fragment of the validator report does not match the expected layout."""
