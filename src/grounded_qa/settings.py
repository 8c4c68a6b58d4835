from __future__ import annotations

import os
from dataclasses import dataclass, fields

from dotenv import load_dotenv

ENV_PREFIX = "GROUNDED_QA_"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(slots=True)
class EngineSettings:
    """Tunable thresholds, boosts, and caps for the answer pipeline."""

    relevance_floor: float = 0.05
    strong_match: float = 0.20
    heading_boost: float = 0.08
    heading_bias: float = 0.15
    exact_heading_score: float = 0.95
    title_boost: float = 0.05
    title_min_score: float = 0.30
    faq_boost: float = 0.06
    mmr_k: int = 3
    mmr_lambda: float = 0.7
    max_sentences_per_section: int = 12
    sentences_per_section: int = 1
    max_lead_sentences: int = 3
    max_source_sections: int = 3
    max_source_documents: int = 2
    bm25_k1: float = 1.2
    bm25_b: float = 0.75
    reference_avg_length: float = 40.0
    use_corpus_avg_length: bool = False

    def __post_init__(self) -> None:
        if not 0.0 <= self.mmr_lambda <= 1.0:
            raise ValueError(f"mmr_lambda must be within [0, 1], got {self.mmr_lambda}")
        if self.relevance_floor > self.strong_match:
            raise ValueError("relevance_floor must not exceed strong_match")
        if not 0.0 <= self.bm25_b <= 1.0:
            raise ValueError(f"bm25_b must be within [0, 1], got {self.bm25_b}")
        if self.bm25_k1 < 0 or self.reference_avg_length <= 0:
            raise ValueError("bm25_k1 must be >= 0 and reference_avg_length > 0")
        for name in (
            "mmr_k",
            "max_sentences_per_section",
            "sentences_per_section",
            "max_lead_sentences",
            "max_source_sections",
            "max_source_documents",
        ):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be a positive integer")


@dataclass(slots=True)
class Paths:
    """Common project paths used by scripts and the evaluation harness."""

    data_dir: str = "data"
    corpus_path: str = "data/corpus.json"
    queries_path: str = "data/queries.jsonl"


def _cast_env(name: str, raw: str, default):
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"{name} must be a boolean flag, got {raw!r}")
    try:
        return type(default)(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be {type(default).__name__}, got {raw!r}") from exc


def settings_from_env() -> EngineSettings:
    """Build `EngineSettings`, overriding each field from `GROUNDED_QA_<FIELD>`."""
    overrides = {}
    for setting in fields(EngineSettings):
        env_name = f"{ENV_PREFIX}{setting.name.upper()}"
        raw = os.getenv(env_name)
        if raw is not None:
            overrides[setting.name] = _cast_env(env_name, raw, setting.default)
    return EngineSettings(**overrides)


def load_settings() -> tuple[EngineSettings, Paths]:
    """Load environment-backed settings and return typed config objects.

    Returns:
        Tuple containing engine tunables and common path settings.
    """
    load_dotenv()
    data_dir = os.getenv(f"{ENV_PREFIX}DATA_DIR", "data")
    return (
        settings_from_env(),
        Paths(
            data_dir=data_dir,
            corpus_path=os.getenv(f"{ENV_PREFIX}CORPUS_PATH", f"{data_dir}/corpus.json"),
            queries_path=os.getenv(f"{ENV_PREFIX}QUERIES_PATH", f"{data_dir}/queries.jsonl"),
        ),
    )
