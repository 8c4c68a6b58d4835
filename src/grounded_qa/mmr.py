from __future__ import annotations

import logging

import numpy as np

from .schema import SentenceCandidate
from .scoring import jaccard
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


def similarity_matrix(candidates: list[SentenceCandidate]) -> np.ndarray:
    """Pairwise word-level Jaccard similarity between candidate sentences."""
    token_sets = [set(tokenize(candidate.text)) for candidate in candidates]
    size = len(token_sets)
    matrix = np.eye(size, dtype=np.float64)
    for row in range(size):
        for col in range(row + 1, size):
            value = jaccard(token_sets[row], token_sets[col])
            matrix[row, col] = matrix[col, row] = value
    return matrix


def select_diverse(
    candidates: list[SentenceCandidate], k: int, lambda_: float = 0.7
) -> list[SentenceCandidate]:
    """Select up to `k` sentences trading relevance against redundancy.

    MMR = λ * relevance - (1-λ) * max_similarity_to_selected

    Args:
        candidates: Pool in rank order; earlier entries win ties.
        k: Maximum number of sentences to return.
        lambda_: 1.0 is pure relevance, 0.0 is pure diversity.

    Returns:
        Selected sentences in pick order.
    """
    if not candidates or k <= 0:
        return []

    relevance = np.array([candidate.relevance for candidate in candidates], dtype=np.float64)
    similarity = similarity_matrix(candidates)
    remaining = list(range(len(candidates)))
    selected: list[int] = []

    while remaining and len(selected) < k:
        if selected:
            redundancy = similarity[np.ix_(remaining, selected)].max(axis=1)
        else:
            redundancy = np.zeros(len(remaining))
        scores = lambda_ * relevance[remaining] - (1 - lambda_) * redundancy
        # argmax returns the first maximum, so ties keep pool order
        best = remaining[int(np.argmax(scores))]
        selected.append(best)
        remaining.remove(best)

    logger.debug("mmr selected %d of %d sentences (lambda=%.2f)", len(selected), len(candidates), lambda_)
    return [candidates[idx] for idx in selected]
