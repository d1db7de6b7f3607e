"""Token kind -> semantic category table shared by highlighting and hover."""

from __future__ import annotations

from enum import Enum

from ._tokenizer import BUILTIN_TYPES, KEYWORDS, TokenKind


class SemanticCategory(Enum):
    """Highlighting classes; values are semantic token type names."""

    KEYWORD = "keyword"
    TYPE = "type"
    OPERATOR = "operator"
    COMMENT = "comment"
    IDENTIFIER = "variable"
    NUMBER = "number"
    NAMESPACE = "namespace"


_OPERATORS = frozenset(
    {
        TokenKind.EQUALS,
        TokenKind.COMMA,
        TokenKind.COLON,
        TokenKind.PERIOD,
        TokenKind.SEMICOLON,
        TokenKind.LEFT_PAREN,
        TokenKind.RIGHT_PAREN,
        TokenKind.LEFT_BRACE,
        TokenKind.RIGHT_BRACE,
        TokenKind.LESS_THAN,
        TokenKind.GREATER_THAN,
        TokenKind.R_ARROW,
        TokenKind.STAR,
        TokenKind.AT,
        TokenKind.SLASH,
        TokenKind.PLUS,
        TokenKind.MINUS,
    }
)

# None marks kinds that are never highlighted.
_CATEGORIES: dict[TokenKind, SemanticCategory | None] = {
    TokenKind.WHITESPACE: None,
    TokenKind.UNKNOWN: None,
    TokenKind.COMMENT: SemanticCategory.COMMENT,
    TokenKind.BLOCK_COMMENT: SemanticCategory.COMMENT,
    TokenKind.DOC_COMMENT: SemanticCategory.COMMENT,
    TokenKind.UNDERSCORE: SemanticCategory.IDENTIFIER,
    TokenKind.ID: SemanticCategory.IDENTIFIER,
    TokenKind.EXPLICIT_ID: SemanticCategory.IDENTIFIER,
    TokenKind.INTEGER: SemanticCategory.NUMBER,
    TokenKind.PACKAGE_NAME: SemanticCategory.NAMESPACE,
    **{kind: SemanticCategory.OPERATOR for kind in _OPERATORS},
    **{kind: SemanticCategory.KEYWORD for kind in KEYWORDS},
    **{kind: SemanticCategory.TYPE for kind in BUILTIN_TYPES},
}

_unclassified = [kind.name for kind in TokenKind if kind not in _CATEGORIES]
if _unclassified:
    raise RuntimeError(f"token kinds without a semantic category: {_unclassified}")


def classify(kind: TokenKind) -> SemanticCategory | None:
    """Return the category for *kind*, or ``None`` if it is not highlighted."""
    return _CATEGORIES[kind]
