"""Answer engine session: corpus lifecycle and the per-query pipeline.

A query runs through five stages, each traced as a child span of `answer`:
scoring, selecting, extracting, diversifying and composing. The corpus and
its index are published together as one snapshot, so a query always scores
against the index built from the corpus it reads.
"""
from __future__ import annotations

import enum
import logging
import threading
from pathlib import Path
from typing import Any

from opentelemetry import trace

from .composer import compose_answer, compose_fallback, no_match_answer
from .extraction import build_sentence_pool
from .indexing import build_index
from .io_utils import CorpusValidationError, check_unique_ids, load_corpus, parse_corpus
from .mmr import select_diverse
from .schema import Answer, Corpus, Index
from .scoring import score_corpus
from .selection import aggregate_sources, select_candidates
from .settings import EngineSettings
from .tokenizer import tokenize
from .tracing import (
    ATTR_CANDIDATE_COUNT,
    ATTR_INPUT_VALUE,
    ATTR_MATCHED,
    ATTR_SENTENCE_COUNT,
    ATTR_SOURCE_COUNT,
    get_tracer,
)

logger = logging.getLogger(__name__)


class EngineNotReadyError(RuntimeError):
    """Raised when a query arrives before any corpus has been indexed."""


class IndexBuildInProgressError(RuntimeError):
    """Raised when a second build starts while one is still running."""


class EngineState(enum.Enum):
    UNINDEXED = "unindexed"
    INDEXED = "indexed"


class AnswerEngine:
    """Session owning one corpus, its cached index, and the query pipeline.

    Usage
    -----
    engine = AnswerEngine()
    engine.load_path("data/corpus.json")
    answer = engine.answer("make a payment link single use")

    A failed load leaves the previously indexed corpus active. Queries only
    read the corpus and index, so independent queries may run concurrently.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        tracer: trace.Tracer | None = None,
    ) -> None:
        self.settings = settings or EngineSettings()
        self._tracer = tracer or get_tracer(__name__)
        self._active: tuple[Corpus, Index] | None = None
        self._build_lock = threading.Lock()
        self._building = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def state(self) -> EngineState:
        return EngineState.INDEXED if self._active is not None else EngineState.UNINDEXED

    @property
    def ready(self) -> bool:
        return self.state is EngineState.INDEXED

    @property
    def corpus(self) -> Corpus | None:
        active = self._active
        return active[0] if active is not None else None

    @property
    def index(self) -> Index | None:
        active = self._active
        return active[1] if active is not None else None

    def load(self, corpus: Corpus) -> Index:
        """Index `corpus` and make it the active one.

        Passing the corpus object that is already active returns the cached
        index without rebuilding.

        Raises:
            CorpusValidationError: If document ids, or section ids within a
                document, repeat; the prior corpus stays active.
            IndexBuildInProgressError: If another build is running.
        """
        try:
            check_unique_ids(corpus)
        except CorpusValidationError as exc:
            logger.warning("rejected corpus (ready=%s): %s", self.ready, exc)
            raise

        with self._build_lock:
            if self._building:
                raise IndexBuildInProgressError("an index build is already in progress")
            active = self._active
            if active is not None and corpus is active[0]:
                return active[1]
            self._building = True

        try:
            index = build_index(corpus, self.settings)
            with self._build_lock:
                self._active = (corpus, index)
        finally:
            with self._build_lock:
                self._building = False

        logger.info(
            "indexed %d documents, %d sections, %d terms",
            len(corpus),
            index.section_count,
            len(index.idf),
        )
        return index

    def load_payload(self, payload: Any) -> Index:
        """Validate a decoded corpus payload, then index it.

        Raises:
            CorpusValidationError: If the payload is malformed; the prior
                corpus stays active.
        """
        try:
            corpus = parse_corpus(payload)
        except CorpusValidationError as exc:
            logger.warning("rejected corpus (ready=%s): %s", self.ready, exc)
            raise
        return self.load(corpus)

    def load_path(self, path: str | Path) -> Index:
        try:
            corpus = load_corpus(path)
        except CorpusValidationError as exc:
            logger.warning("rejected corpus from %s (ready=%s): %s", path, self.ready, exc)
            raise
        return self.load(corpus)

    # ------------------------------------------------------------------
    # Querying
    # ------------------------------------------------------------------

    def answer(self, query: str) -> Answer:
        """Answer `query` with extracted sentences and capped sources.

        Returns:
            Composed answer, or the no-match answer when nothing reaches the
            relevance floor or the query is blank.

        Raises:
            EngineNotReadyError: If no corpus has been indexed yet.
        """
        active = self._active
        if active is None:
            raise EngineNotReadyError("no corpus has been indexed")
        corpus, index = active

        settings = self.settings
        query_tokens = tokenize(query) if query and query.strip() else []

        with self._tracer.start_as_current_span("answer") as span:
            span.set_attribute(ATTR_INPUT_VALUE, query or "")
            if not query_tokens:
                span.set_attribute(ATTR_MATCHED, False)
                return no_match_answer()

            with self._tracer.start_as_current_span("scoring"):
                scored = score_corpus(query_tokens, corpus, index, settings)

            with self._tracer.start_as_current_span("selecting") as stage:
                candidates = select_candidates(scored, settings)
                stage.set_attribute(ATTR_CANDIDATE_COUNT, len(candidates))
            logger.debug("query %r: %d scored, %d candidates", query, len(scored), len(candidates))

            if not candidates:
                span.set_attribute(ATTR_MATCHED, False)
                return no_match_answer()

            with self._tracer.start_as_current_span("extracting") as stage:
                pool = build_sentence_pool(query_tokens, candidates, settings)
                stage.set_attribute(ATTR_SENTENCE_COUNT, len(pool))

            with self._tracer.start_as_current_span("diversifying"):
                selected = select_diverse(pool, settings.mmr_k, settings.mmr_lambda)

            with self._tracer.start_as_current_span("composing"):
                confidence = candidates[0].score
                if selected:
                    lead = selected[: settings.max_lead_sentences]
                    sources = aggregate_sources(lead, settings)
                    cited = {(source.document_id, source.section_id) for source in sources}
                    # sentences whose source fell outside the caps are not cited, so drop them
                    lead = [s for s in lead if (s.document.doc_id, s.section_id) in cited]
                    result = compose_answer(lead, sources, confidence, settings)
                else:
                    result = compose_fallback(
                        candidates[0].snippet, aggregate_sources(candidates, settings), confidence
                    )

            span.set_attribute(ATTR_SOURCE_COUNT, len(result.sources))
            span.set_attribute(ATTR_MATCHED, result.matched)
            return result
