from __future__ import annotations

import re

STOPWORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "nor", "to", "of", "for", "in", "on",
        "with", "is", "are", "be", "can", "how", "what", "when", "where", "which",
        "who", "why", "do", "does", "did", "i", "we", "you", "it", "this", "that",
        "my", "our", "your", "me",
    }
)

_NON_TOKEN_RE = re.compile(r"[^a-z0-9\s]")
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")
_PLURAL_KEEP = ("ss", "us", "is")


def _fold_plural(token: str) -> str:
    if len(token) > 3 and token.endswith("s") and not token.endswith(_PLURAL_KEEP):
        return token[:-1]
    return token


def tokenize(text: str) -> list[str]:
    """Normalize text into index terms.

    Lowercases, blanks out anything outside ``[a-z0-9]`` and whitespace,
    drops stopwords and folds simple plurals so ``payments`` matches
    ``payment``. Used for both indexing and queries.
    """
    cleaned = _NON_TOKEN_RE.sub(" ", str(text).lower())
    return [_fold_plural(token) for token in cleaned.split() if token not in STOPWORDS]


def split_sentences(text: str) -> list[str]:
    """Split on whitespace following ``.``, ``!`` or ``?`` (no abbreviation handling)."""
    return [piece.strip() for piece in _SENTENCE_BOUNDARY_RE.split(str(text)) if piece.strip()]
