from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Mapping

from rank_bm25 import BM25Okapi

CandidateKind = Literal["title", "section", "faq"]


@dataclass(frozen=True, slots=True)
class Section:
    """Headed block of documentation text inside one document."""

    section_id: str
    heading: str
    body: str


@dataclass(frozen=True, slots=True)
class Faq:
    """Question/answer pair, optionally linked to a section for citation."""

    question: str
    answer: str
    section_id: str | None = None


@dataclass(frozen=True, slots=True)
class Document:
    """Top-level documentation page with ordered sections and FAQs."""

    doc_id: str
    title: str
    sections: tuple[Section, ...] = ()
    faqs: tuple[Faq, ...] = ()

    def find_section(self, section_id: str | None) -> Section | None:
        if section_id is None:
            return None
        for section in self.sections:
            if section.section_id == section_id:
                return section
        return None


Corpus = tuple[Document, ...]


@dataclass(frozen=True, slots=True)
class Index:
    """IDF weights and BM25 model built once from a corpus, shared across queries."""

    idf: Mapping[str, float]
    section_count: int
    avg_section_length: float = 0.0
    bm25: BM25Okapi | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.idf, MappingProxyType):
            object.__setattr__(self, "idf", MappingProxyType(dict(self.idf)))

    @property
    def unseen_weight(self) -> float:
        """Weight of a token that appears in no section (the maximum)."""
        return math.log(1 + (self.section_count + 0.5) / 0.5)

    def weight(self, token: str) -> float:
        """Return the clamped IDF weight for one token."""
        value = self.idf.get(token)
        if value is None:
            return self.unseen_weight
        return max(value, 0.0)


@dataclass(slots=True)
class ScoredCandidate:
    """Title, section, or FAQ hit scored against one query."""

    kind: CandidateKind
    document: Document
    score: float
    snippet: str
    order: int
    section: Section | None = None
    faq: Faq | None = None

    @property
    def section_id(self) -> str | None:
        if self.section is not None:
            return self.section.section_id
        if self.faq is not None:
            return self.faq.section_id
        return None

    @property
    def body(self) -> str:
        if self.section is not None:
            return self.section.body
        if self.faq is not None:
            return self.faq.answer
        return ""


@dataclass(slots=True)
class SentenceCandidate:
    """Sentence extracted from a candidate body with its query relevance."""

    text: str
    relevance: float
    document: Document
    section_id: str | None
    position: int


@dataclass(frozen=True, slots=True)
class SourceRef:
    """Citation used by the renderer to build open/jump actions."""

    document_id: str
    section_id: str | None
    title: str
    heading: str | None = None


@dataclass(frozen=True, slots=True)
class Answer:
    """Extractive answer: lead sentences plus the sources backing them."""

    lead_text: str
    sources: tuple[SourceRef, ...] = field(default_factory=tuple)
    confidence: float = 0.0

    @property
    def matched(self) -> bool:
        return bool(self.sources)

    def to_dict(self) -> dict:
        return {
            "lead_text": self.lead_text,
            "matched": self.matched,
            "confidence": self.confidence,
            "sources": [
                {
                    "document_id": source.document_id,
                    "section_id": source.section_id,
                    "title": source.title,
                    "heading": source.heading,
                }
                for source in self.sources
            ],
        }
