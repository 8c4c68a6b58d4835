"""Tests for extraction.py — per-section sentence relevance."""
from __future__ import annotations

import pytest

from grounded_qa.extraction import build_sentence_pool, extract_sentences
from grounded_qa.schema import Document, Faq, ScoredCandidate, Section
from grounded_qa.settings import EngineSettings
from grounded_qa.tokenizer import tokenize

LIMIT_FIRST_SENTENCE = "Enable Limit the number of payments in the dashboard and set it to 1."


def _section_candidate(section: Section, doc_id: str = "D-1") -> ScoredCandidate:
    document = Document(doc_id=doc_id, title="Doc", sections=(section,))
    return ScoredCandidate(kind="section", document=document, score=1.0, snippet="", order=0, section=section)


class TestExtractSentences:
    def test_scenario_first_sentence_ranks_first(self, limit_section, settings):
        query = tokenize("make a payment link single use")
        sentences = extract_sentences(query, _section_candidate(limit_section), settings)
        assert sentences[0].text == LIMIT_FIRST_SENTENCE
        assert sentences[0].section_id == "limit-payments"

    def test_relevance_is_share_of_query_tokens(self, settings):
        section = Section("s", "Refunds", "Refunds take five days. Payouts are daily.")
        sentences = extract_sentences(["refund", "day", "fee"], _section_candidate(section), settings)
        assert len(sentences) == 1
        assert sentences[0].relevance == pytest.approx(2 / 3)

    def test_drops_zero_relevance_sentences(self, settings):
        section = Section("s", "H", "Nothing here. Still nothing.")
        assert extract_sentences(["refund"], _section_candidate(section), settings) == []

    def test_sorted_by_relevance_then_position(self, settings):
        section = Section("s", "H", "Refunds exist. Refunds take days. Days pass.")
        sentences = extract_sentences(["refund", "day"], _section_candidate(section), settings)
        assert [s.position for s in sentences] == [1, 0, 2]

    def test_caps_sentences_scanned(self):
        section = Section("s", "H", "Alpha. Beta. Refund.")
        settings = EngineSettings(max_sentences_per_section=2)
        assert extract_sentences(["refund"], _section_candidate(section), settings) == []

    def test_title_candidates_have_no_sentences(self, settings):
        document = Document(doc_id="D-1", title="Refunds")
        candidate = ScoredCandidate(kind="title", document=document, score=1.0, snippet="Refunds", order=0)
        assert extract_sentences(["refund"], candidate, settings) == []

    def test_faq_answer_is_used(self, settings):
        faq = Faq(question="Q?", answer="Refunds take five days.", section_id="refund-window")
        document = Document(doc_id="D-1", title="Doc", faqs=(faq,))
        candidate = ScoredCandidate(kind="faq", document=document, score=1.0, snippet="", order=0, faq=faq)
        sentences = extract_sentences(["refund"], candidate, settings)
        assert sentences[0].text == "Refunds take five days."
        assert sentences[0].section_id == "refund-window"

    def test_empty_query(self, limit_section, settings):
        assert extract_sentences([], _section_candidate(limit_section), settings) == []


def _refund_candidates() -> list[ScoredCandidate]:
    window = Section("window", "Refund window", "Refunds are allowed within thirty days. Refunds need a receipt.")
    fees = Section("fees", "Refund fees", "Refunds do not return processing fees.")
    faq = Faq(question="How long do refunds take?", answer="Refunds arrive in five days.", section_id="window")
    document = Document(doc_id="refunds", title="Refunds", sections=(window, fees), faqs=(faq,))
    return [
        ScoredCandidate(kind="faq", document=document, score=0.9, snippet="", order=2, faq=faq),
        ScoredCandidate(kind="section", document=document, score=0.8, snippet="", order=0, section=window),
        ScoredCandidate(kind="section", document=document, score=0.7, snippet="", order=1, section=fees),
    ]


class TestBuildSentencePool:
    def test_linked_faq_shares_its_section_quota(self, settings):
        pool = build_sentence_pool(["refund"], _refund_candidates(), settings)
        assert [(s.section_id, s.text) for s in pool] == [
            ("window", "Refunds arrive in five days."),
            ("fees", "Refunds do not return processing fees."),
        ]

    def test_larger_quota_is_shared_across_candidates(self):
        settings = EngineSettings(sentences_per_section=2)
        pool = build_sentence_pool(["refund"], _refund_candidates(), settings)
        assert [s.section_id for s in pool] == ["window", "window", "fees"]
        assert pool[1].text == "Refunds are allowed within thirty days."

    def test_candidates_without_sentences_use_no_quota(self, settings):
        candidates = _refund_candidates()
        document = candidates[0].document
        title = ScoredCandidate(kind="title", document=document, score=1.0, snippet="Refunds", order=0)
        pool = build_sentence_pool(["refund"], [title, *candidates], settings)
        assert [s.section_id for s in pool] == ["window", "fees"]
