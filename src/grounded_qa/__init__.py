"""Extractive question answering over a small static documentation corpus."""

from .engine import AnswerEngine, EngineNotReadyError, IndexBuildInProgressError
from .io_utils import CorpusValidationError
from .schema import Answer, Document, Faq, Index, Section, SourceRef
from .settings import EngineSettings

__all__ = [
    "AnswerEngine",
    "Answer",
    "CorpusValidationError",
    "Document",
    "EngineNotReadyError",
    "EngineSettings",
    "Faq",
    "Index",
    "IndexBuildInProgressError",
    "Section",
    "SourceRef",
]
