from __future__ import annotations

from .schema import Answer, SentenceCandidate, SourceRef
from .settings import EngineSettings

NO_MATCH_TEXT = (
    "I couldn't find any relevant information. Try rephrasing your question "
    "or browse the documentation using the sidebar."
)


def no_match_answer() -> Answer:
    """Answer signalling the caller to fall back to browsing."""
    return Answer(lead_text=NO_MATCH_TEXT, sources=(), confidence=0.0)


def compose_answer(
    selected: list[SentenceCandidate],
    sources: list[SourceRef],
    confidence: float,
    settings: EngineSettings,
) -> Answer:
    """Join selected sentences into the lead text and attach the sources.

    Args:
        selected: Sentences in MMR pick order.
        sources: Aggregated citations for the selected sentences.
        confidence: Score of the top surviving candidate.
        settings: Supplies `max_lead_sentences`.

    Returns:
        The composed answer, or the no-match answer when there are no sources.
    """
    if not sources:
        return no_match_answer()
    lead = " ".join(sentence.text for sentence in selected[: settings.max_lead_sentences])
    return Answer(lead_text=lead, sources=tuple(sources), confidence=confidence)


def compose_fallback(snippet: str, sources: list[SourceRef], confidence: float) -> Answer:
    """Answer for candidates without extractable sentences, e.g. title hits."""
    if not sources:
        return no_match_answer()
    return Answer(lead_text=snippet, sources=tuple(sources), confidence=confidence)
