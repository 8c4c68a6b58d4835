from __future__ import annotations

import math

from rank_bm25 import BM25Okapi

from .schema import Corpus, Index
from .settings import EngineSettings
from .tokenizer import tokenize


class SmoothedBM25(BM25Okapi):
    """BM25Okapi with the smoothed `ln(1 + (N - df + 0.5) / (df + 0.5))` IDF.

    The smoothed form is never negative, so the epsilon floor Okapi applies
    to very common terms is not needed.
    """

    def _calc_idf(self, nd: dict[str, int]) -> None:
        for word, freq in nd.items():
            self.idf[word] = math.log(1 + (self.corpus_size - freq + 0.5) / (freq + 0.5))


def section_tokens(heading: str, body: str) -> list[str]:
    return tokenize(f"{heading} {body}")


def build_index(corpus: Corpus, settings: EngineSettings | None = None) -> Index:
    """Build the section-level BM25 model and IDF table for a corpus.

    Args:
        corpus: Ordered documents to index.
        settings: Supplies `k1`, `b` and the length normalization mode;
            defaults to `EngineSettings()`.

    Returns:
        Immutable `Index` with per-token IDF, the section count, the mean
        section length in tokens, and the BM25 model whose score rows follow
        corpus section order.
    """
    settings = settings or EngineSettings()
    tokenized = [
        section_tokens(section.heading, section.body)
        for document in corpus
        for section in document.sections
    ]
    if not tokenized:
        return Index(idf={}, section_count=0)

    model = SmoothedBM25(tokenized, k1=settings.bm25_k1, b=settings.bm25_b)
    avg_length = model.avgdl
    if not settings.use_corpus_avg_length or avg_length <= 0:
        model.avgdl = settings.reference_avg_length

    return Index(
        idf=dict(sorted(model.idf.items())),
        section_count=model.corpus_size,
        avg_section_length=avg_length,
        bm25=model,
    )
