"""WIT document analysis: positions, tokens, semantic tokens, hover and formatting."""

from ._classifier import SemanticCategory, classify
from ._formatter import format_wit, formatting_edits
from ._hover import PackageName, documentation_for, hover_at, token_at
from ._semantic_tokens import (
    LEGEND,
    DecodedToken,
    SemanticTokenLegend,
    SemanticTokensBuilder,
    decode_semantic_tokens,
    encode_semantic_tokens,
    next_result_id,
    semantic_tokens_for,
)
from ._text import Span, TextBuffer
from ._tokenizer import Token, TokenKind, Tokenizer, tokenize

__all__ = [
    "LEGEND",
    "DecodedToken",
    "PackageName",
    "SemanticCategory",
    "SemanticTokenLegend",
    "SemanticTokensBuilder",
    "Span",
    "TextBuffer",
    "Token",
    "TokenKind",
    "Tokenizer",
    "classify",
    "decode_semantic_tokens",
    "documentation_for",
    "encode_semantic_tokens",
    "format_wit",
    "formatting_edits",
    "hover_at",
    "next_result_id",
    "semantic_tokens_for",
    "token_at",
    "tokenize",
]
