"""Shared pytest fixtures for grounded_qa unit tests."""
from __future__ import annotations

from pathlib import Path

import pytest

from grounded_qa.engine import AnswerEngine
from grounded_qa.schema import Document, Faq, Section
from grounded_qa.settings import EngineSettings

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@pytest.fixture()
def bundled_corpus_path() -> Path:
    return DATA_DIR / "corpus.json"


@pytest.fixture()
def settings() -> EngineSettings:
    return EngineSettings()


@pytest.fixture()
def limit_section() -> Section:
    return Section(
        section_id="limit-payments",
        heading="Limit the number of times a payment link can be paid",
        body=(
            "Enable Limit the number of payments in the dashboard and set it to 1. "
            "This restricts the link to one completed session."
        ),
    )


@pytest.fixture()
def payment_corpus(limit_section) -> tuple[Document, ...]:
    return (Document(doc_id="payment-links", title="Payment Links", sections=(limit_section,)),)


@pytest.fixture()
def multi_corpus(limit_section) -> tuple[Document, ...]:
    return (
        Document(
            doc_id="payment-links",
            title="Payment Links",
            sections=(
                limit_section,
                Section(
                    section_id="deactivated-message",
                    heading="Set a custom message for deactivated links",
                    body=(
                        "When a link is deactivated, customers see a default message. "
                        "Choose Change deactivation message to write your own text."
                    ),
                ),
                Section(
                    section_id="collect-details",
                    heading="Collect customer details",
                    body=(
                        "Payment links can collect billing and shipping addresses. "
                        "Turn on Require phone number to collect a phone number."
                    ),
                ),
            ),
            faqs=(
                Faq(
                    question="What do customers see after a link reaches its limit?",
                    answer="Customers see the deactivation message and can no longer pay.",
                    section_id="deactivated-message",
                ),
            ),
        ),
        Document(
            doc_id="security",
            title="Security",
            sections=(
                Section(
                    section_id="security-features",
                    heading="Security features",
                    body=(
                        "All checkout pages are served over TLS. "
                        "Card details are tokenised and never touch your servers."
                    ),
                ),
                Section(
                    section_id="two-factor",
                    heading="Two-step authentication",
                    body="Require two-step authentication for every team member.",
                ),
            ),
        ),
        Document(
            doc_id="payouts",
            title="Payouts",
            sections=(
                Section(
                    section_id="schedule",
                    heading="Payout schedule",
                    body="Payouts are sent daily by default. You can switch to weekly payouts in the dashboard.",
                ),
            ),
        ),
    )


@pytest.fixture()
def refund_corpus() -> tuple[Document, ...]:
    """Three sections that all mention refunds, one with several matching sentences."""
    return (
        Document(
            doc_id="refunds",
            title="Refunds",
            sections=(
                Section(
                    section_id="window",
                    heading="Refund window",
                    body=(
                        "Refunds are allowed within thirty days. "
                        "Refunds after thirty days need approval. "
                        "Refunds are paid to the original card."
                    ),
                ),
                Section(
                    section_id="fees",
                    heading="Refund fees",
                    body="Refunds do not return processing fees.",
                ),
                Section(
                    section_id="disputes",
                    heading="Disputes",
                    body="A dispute is different from a refund.",
                ),
            ),
        ),
    )


@pytest.fixture()
def engine(multi_corpus) -> AnswerEngine:
    instance = AnswerEngine()
    instance.load(multi_corpus)
    return instance


@pytest.fixture()
def corpus_payload() -> dict:
    return {
        "docs": [
            {
                "id": "payment-links",
                "title": "Payment Links",
                "sections": [
                    {"id": "create-link", "heading": "Create a payment link", "body": "Click New."},
                ],
                "faqs": [
                    {"q": "Can I reuse a link?", "a": "Yes, links are reusable.", "section_id": "create-link"},
                ],
            }
        ]
    }
