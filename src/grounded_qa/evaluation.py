from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Callable

from .schema import Answer, Corpus
from .tokenizer import tokenize


@dataclass(slots=True)
class EvalQuery:
    """Evaluation question with the section expected to back the answer."""

    query_id: str
    question: str
    target_doc_id: str
    target_section_id: str | None = None


@dataclass(slots=True)
class EvalRow:
    """Single-query evaluation output used for aggregate reporting."""

    query_id: str
    source_hit: float
    reciprocal_rank: float
    latency_ms: float
    groundedness: float


def _is_target(query: EvalQuery, document_id: str, section_id: str | None) -> bool:
    if document_id != query.target_doc_id:
        return False
    return query.target_section_id is None or section_id == query.target_section_id


def source_hit(answer: Answer, query: EvalQuery) -> float:
    """Binary hit: 1.0 when any cited source is the expected target."""
    return 1.0 if any(_is_target(query, s.document_id, s.section_id) for s in answer.sources) else 0.0


def reciprocal_rank(answer: Answer, query: EvalQuery) -> float:
    """Reciprocal rank of the first cited source matching the target."""
    for rank, source in enumerate(answer.sources, start=1):
        if _is_target(query, source.document_id, source.section_id):
            return 1.0 / rank
    return 0.0


def groundedness_score(answer: Answer, corpus: Corpus) -> float:
    """Share of lead-text tokens present in the cited sections or FAQs.

    Extractive answers should score 1.0; anything lower means the lead text
    contains material the citations do not back.
    """
    answer_tokens = set(tokenize(answer.lead_text))
    if not answer_tokens or not answer.sources:
        return 0.0

    documents = {document.doc_id: document for document in corpus}
    context_tokens: set[str] = set()
    for source in answer.sources:
        document = documents.get(source.document_id)
        if document is None:
            continue
        context_tokens.update(tokenize(document.title))
        section = document.find_section(source.section_id)
        if section is not None:
            context_tokens.update(tokenize(f"{section.heading} {section.body}"))
        for faq in document.faqs:
            if faq.section_id == source.section_id:
                context_tokens.update(tokenize(f"{faq.question} {faq.answer}"))

    overlap = len(answer_tokens.intersection(context_tokens))
    return overlap / max(len(answer_tokens), 1)


def evaluate_single(
    query: EvalQuery,
    answer_fn: Callable[[str], Answer],
    corpus: Corpus,
) -> EvalRow:
    """Answer one evaluation question and compute core metrics.

    Args:
        query: Question with its expected target section.
        answer_fn: Callable mapping a question to an `Answer`, e.g.
            `AnswerEngine.answer`.
        corpus: Corpus the engine was built from, for groundedness.

    Returns:
        `EvalRow` with hit, reciprocal rank, latency, and groundedness.
    """
    started = time.perf_counter()
    answer = answer_fn(query.question)
    elapsed_ms = (time.perf_counter() - started) * 1000

    return EvalRow(
        query_id=query.query_id,
        source_hit=source_hit(answer, query),
        reciprocal_rank=reciprocal_rank(answer, query),
        latency_ms=elapsed_ms,
        groundedness=groundedness_score(answer, corpus),
    )


def summarize(rows: list[EvalRow]) -> dict[str, float]:
    """Aggregate per-query metrics into simple mean summary values."""
    if not rows:
        return {"source_hit": 0.0, "mrr": 0.0, "latency_ms": 0.0, "groundedness": 0.0}

    return {
        "source_hit": sum(row.source_hit for row in rows) / len(rows),
        "mrr": sum(row.reciprocal_rank for row in rows) / len(rows),
        "latency_ms": sum(row.latency_ms for row in rows) / len(rows),
        "groundedness": sum(row.groundedness for row in rows) / len(rows),
    }
