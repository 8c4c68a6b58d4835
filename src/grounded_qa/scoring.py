"""Relevance scoring for titles, sections, and FAQs.

Every score lands on one scale so candidates of all three kinds can be merged
into a single ranked list: the BM25 part of a section score is divided by its
saturation bound, which keeps it in ``[0, 1)`` next to the Dice-based heading
scores, and the fixed boosts from `EngineSettings` do the rest.
"""
from __future__ import annotations

from typing import Iterable

import numpy as np

from .schema import Corpus, Faq, Index, ScoredCandidate, Section
from .settings import EngineSettings
from .tokenizer import split_sentences, tokenize


def dice(left: Iterable[str], right: Iterable[str]) -> float:
    """Dice coefficient `2|A∩B| / (|A|+|B|)` over token sets."""
    left_set, right_set = set(left), set(right)
    if not left_set or not right_set:
        return 0.0
    return 2 * len(left_set & right_set) / (len(left_set) + len(right_set))


def jaccard(left: Iterable[str], right: Iterable[str]) -> float:
    """Jaccard similarity `|A∩B| / |A∪B|` over token sets."""
    left_set, right_set = set(left), set(right)
    union = left_set | right_set
    if not union:
        return 0.0
    return len(left_set & right_set) / len(union)


def bm25_lite(query_tokens: list[str], index: Index) -> np.ndarray:
    """Return BM25 scores for every indexed section, normalized by their bound.

    Args:
        query_tokens: Tokenized query.
        index: Index holding the section BM25 model.

    Returns:
        One score per section in corpus order, each in `[0, 1)`: the raw
        BM25 sum divided by `sum(idf(t) * (k1 + 1))` over distinct query
        tokens. 0.0 where no query token occurs.
    """
    distinct = list(dict.fromkeys(query_tokens))
    if not distinct or index.bm25 is None:
        return np.zeros(index.section_count)

    bound = sum(index.weight(token) for token in distinct) * (index.bm25.k1 + 1)
    if bound <= 0:
        return np.zeros(index.section_count)

    # empty sections with b=1 divide 0 by 0
    with np.errstate(invalid="ignore", divide="ignore"):
        raw = index.bm25.get_scores(distinct)
    return np.nan_to_num(raw, nan=0.0) / bound


def score_heading(query_tokens: list[str], heading: str, settings: EngineSettings) -> float:
    """Score a title or heading: exact-ish containment, else Dice plus a bias."""
    heading_tokens = set(tokenize(heading))
    query_set = set(query_tokens)
    if not query_set or not heading_tokens:
        return 0.0
    if query_set <= heading_tokens:
        return settings.exact_heading_score
    overlap = dice(query_set, heading_tokens)
    if overlap == 0:
        return 0.0
    return overlap + settings.heading_bias


def best_sentence(
    query_tokens: list[str], body: str, limit: int
) -> tuple[float, str]:
    """Return `(dice, sentence)` for the best of the first `limit` sentences."""
    best_score, best_text = 0.0, ""
    for sentence in split_sentences(body)[:limit]:
        score = dice(query_tokens, tokenize(sentence))
        if score > best_score:
            best_score, best_text = score, sentence
    return best_score, best_text


def score_section(
    query_tokens: list[str], section: Section, bm25_score: float, settings: EngineSettings
) -> float:
    """Add `heading_boost` per distinct query token in the heading to the BM25 score."""
    heading_tokens = set(tokenize(section.heading))
    hits = sum(1 for token in set(query_tokens) if token in heading_tokens)
    return bm25_score + hits * settings.heading_boost


def score_faq(query_tokens: list[str], faq: Faq, settings: EngineSettings) -> float:
    question_score = score_heading(query_tokens, faq.question, settings)
    answer_score, _ = best_sentence(query_tokens, faq.answer, settings.max_sentences_per_section)
    base = max(question_score, answer_score)
    if base <= 0:
        return 0.0
    return base + settings.faq_boost


def score_corpus(
    query_tokens: list[str], corpus: Corpus, index: Index, settings: EngineSettings
) -> list[ScoredCandidate]:
    """Score every title, section, and FAQ in corpus order.

    Title candidates are only emitted when the title score reaches
    `title_min_score`. Zero scores are kept so callers can apply the floor.

    Raises:
        ValueError: If `index` was built from a corpus with a different
            number of sections.
    """
    bm25_scores = bm25_lite(query_tokens, index)
    if len(bm25_scores) != sum(len(document.sections) for document in corpus):
        raise ValueError("index does not match the corpus being scored")

    candidates: list[ScoredCandidate] = []
    order = 0
    position = 0
    limit = settings.max_sentences_per_section

    for document in corpus:
        title_score = score_heading(query_tokens, document.title, settings)
        if title_score >= settings.title_min_score:
            candidates.append(
                ScoredCandidate(
                    kind="title",
                    document=document,
                    score=title_score + settings.title_boost,
                    snippet=document.title,
                    order=order,
                )
            )
            order += 1

        for section in document.sections:
            heading_score = score_heading(query_tokens, section.heading, settings)
            body_score, sentence = best_sentence(query_tokens, section.body, limit)
            candidates.append(
                ScoredCandidate(
                    kind="section",
                    document=document,
                    score=score_section(query_tokens, section, float(bm25_scores[position]), settings),
                    snippet=section.heading if heading_score >= body_score else sentence,
                    order=order,
                    section=section,
                )
            )
            order += 1
            position += 1

        for faq in document.faqs:
            _, sentence = best_sentence(query_tokens, faq.answer, limit)
            candidates.append(
                ScoredCandidate(
                    kind="faq",
                    document=document,
                    score=score_faq(query_tokens, faq, settings),
                    snippet=sentence or faq.question,
                    order=order,
                    faq=faq,
                )
            )
            order += 1

    return candidates
