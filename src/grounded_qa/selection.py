from __future__ import annotations

from typing import Iterable

from .schema import ScoredCandidate, SentenceCandidate, SourceRef
from .settings import EngineSettings


def select_candidates(
    scored: list[ScoredCandidate], settings: EngineSettings
) -> list[ScoredCandidate]:
    """Apply the relevance floor and pick the strong or fallback tier.

    Args:
        scored: Candidates in corpus order, as produced by `score_corpus`.
        settings: Supplies `relevance_floor` and `strong_match`.

    Returns:
        Working pool sorted by descending score, ties in corpus order. Empty
        when nothing reaches the floor.
    """
    fallback = [candidate for candidate in scored if candidate.score >= settings.relevance_floor]
    strong = [candidate for candidate in fallback if candidate.score >= settings.strong_match]
    pool = strong or fallback
    return sorted(pool, key=lambda candidate: (-candidate.score, candidate.order))


def aggregate_sources(
    items: Iterable[ScoredCandidate | SentenceCandidate], settings: EngineSettings
) -> list[SourceRef]:
    """Deduplicate sources in rank order under the section and document caps.

    An item whose section is already cited is skipped. Once
    `max_source_documents` documents are cited, items from new documents
    are skipped but further sections of cited documents are still taken.
    Stops after `max_source_sections` sources.
    """
    sources: list[SourceRef] = []
    seen_sections: set[tuple[str, str | None]] = set()
    seen_documents: list[str] = []

    for item in items:
        document = item.document
        key = (document.doc_id, item.section_id)
        if key in seen_sections:
            continue
        if document.doc_id not in seen_documents:
            if len(seen_documents) >= settings.max_source_documents:
                continue
            seen_documents.append(document.doc_id)

        section = document.find_section(item.section_id)
        sources.append(
            SourceRef(
                document_id=document.doc_id,
                section_id=item.section_id,
                title=document.title,
                heading=section.heading if section is not None else None,
            )
        )
        seen_sections.add(key)
        if len(sources) >= settings.max_source_sections:
            break

    return sources
