from __future__ import annotations

from collections import Counter

from .schema import ScoredCandidate, SentenceCandidate
from .settings import EngineSettings
from .tokenizer import split_sentences, tokenize


def extract_sentences(
    query_tokens: list[str], candidate: ScoredCandidate, settings: EngineSettings
) -> list[SentenceCandidate]:
    """Find the sentences of a section or FAQ answer that overlap the query.

    Relevance is the share of distinct query tokens found in the sentence.
    Only the first `max_sentences_per_section` sentences are scanned and
    sentences with no overlap are dropped. Title candidates have no body and
    yield nothing.

    Args:
        query_tokens: Tokenized query.
        candidate: Surviving candidate from `select_candidates`.
        settings: Supplies the per-section scan cap.

    Returns:
        Sentence candidates by descending relevance, ties in body order.
    """
    query_set = set(query_tokens)
    if not query_set or candidate.kind == "title":
        return []

    extracted: list[SentenceCandidate] = []
    sentences = split_sentences(candidate.body)[: settings.max_sentences_per_section]
    for position, sentence in enumerate(sentences):
        matched = query_set.intersection(tokenize(sentence))
        if not matched:
            continue
        extracted.append(
            SentenceCandidate(
                text=sentence,
                relevance=len(matched) / len(query_set),
                document=candidate.document,
                section_id=candidate.section_id,
                position=position,
            )
        )

    extracted.sort(key=lambda item: (-item.relevance, item.position))
    return extracted


def build_sentence_pool(
    query_tokens: list[str], candidates: list[ScoredCandidate], settings: EngineSettings
) -> list[SentenceCandidate]:
    """Collect the MMR input from ranked candidates.

    At most `sentences_per_section` sentences are kept per
    `(document, section)`. A FAQ linked to a section shares that section's
    quota, so a section and its FAQ cannot both fill the pool ahead of
    other sections.
    """
    pool: list[SentenceCandidate] = []
    taken: Counter[tuple[str, str | None]] = Counter()
    for candidate in candidates:
        key = (candidate.document.doc_id, candidate.section_id)
        room = settings.sentences_per_section - taken[key]
        if room <= 0:
            continue
        sentences = extract_sentences(query_tokens, candidate, settings)[:room]
        taken[key] += len(sentences)
        pool.extend(sentences)
    return pool
