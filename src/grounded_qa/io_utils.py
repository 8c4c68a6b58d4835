from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from .evaluation import EvalQuery
from .schema import Corpus, Document, Faq, Section


class CorpusValidationError(ValueError):
    """Raised when a corpus payload is missing required structure."""


def _require_str(record: Mapping[str, Any], key: str, where: str) -> str:
    value = record.get(key)
    if not isinstance(value, str):
        raise CorpusValidationError(f"{where}: missing or non-string field {key!r}")
    return value


def _require_list(record: Mapping[str, Any], key: str, where: str, optional: bool = False) -> list:
    value = record.get(key)
    if value is None and optional:
        return []
    if not isinstance(value, list):
        raise CorpusValidationError(f"{where}: field {key!r} must be a list")
    return value


def _first_str(record: Mapping[str, Any], keys: tuple[str, ...], where: str) -> str:
    for key in keys:
        if isinstance(record.get(key), str):
            return record[key]
    raise CorpusValidationError(f"{where}: missing or non-string field {keys[0]!r}")


def _parse_section(record: Any, where: str) -> Section:
    if not isinstance(record, Mapping):
        raise CorpusValidationError(f"{where}: section must be an object")
    return Section(
        section_id=_require_str(record, "id", where),
        heading=_require_str(record, "heading", where),
        body=_require_str(record, "body", where),
    )


def _parse_faq(record: Any, where: str) -> Faq:
    if not isinstance(record, Mapping):
        raise CorpusValidationError(f"{where}: faq must be an object")
    section_id = record.get("section_id")
    if section_id is not None and not isinstance(section_id, str):
        raise CorpusValidationError(f"{where}: field 'section_id' must be a string")
    return Faq(
        question=_first_str(record, ("q", "question"), where),
        answer=_first_str(record, ("a", "answer"), where),
        section_id=section_id or None,
    )


def _parse_document(record: Any, position: int) -> Document:
    where = f"docs[{position}]"
    if not isinstance(record, Mapping):
        raise CorpusValidationError(f"{where}: document must be an object")
    doc_id = _require_str(record, "id", where)
    where = f"document {doc_id!r}"

    sections = tuple(
        _parse_section(item, f"{where} sections[{idx}]")
        for idx, item in enumerate(_require_list(record, "sections", where))
    )
    faqs = tuple(
        _parse_faq(item, f"{where} faqs[{idx}]")
        for idx, item in enumerate(_require_list(record, "faqs", where, optional=True))
    )
    return Document(
        doc_id=doc_id,
        title=_require_str(record, "title", where),
        sections=sections,
        faqs=faqs,
    )


def check_unique_ids(corpus: Corpus) -> Corpus:
    """Reject corpora whose document ids, or section ids within a document, repeat.

    Raises:
        CorpusValidationError: On the first repeated id.
    """
    seen_documents: set[str] = set()
    for document in corpus:
        if document.doc_id in seen_documents:
            raise CorpusValidationError(f"duplicate document id {document.doc_id!r}")
        seen_documents.add(document.doc_id)

        seen_sections: set[str] = set()
        for section in document.sections:
            if section.section_id in seen_sections:
                raise CorpusValidationError(
                    f"document {document.doc_id!r}: duplicate section id {section.section_id!r}"
                )
            seen_sections.add(section.section_id)
    return corpus


def parse_corpus(payload: Any) -> Corpus:
    """Validate a decoded corpus payload and convert it to typed records.

    Args:
        payload: Mapping with a top-level `docs` (or `documents`) list.

    Returns:
        Corpus tuple in payload order.

    Raises:
        CorpusValidationError: If required structure or fields are missing,
            or document/section ids repeat.
    """
    if not isinstance(payload, Mapping):
        raise CorpusValidationError("corpus payload must be an object")
    key = "docs" if "docs" in payload else "documents"
    documents = tuple(
        _parse_document(record, idx) for idx, record in enumerate(_require_list(payload, key, "corpus"))
    )
    return check_unique_ids(documents)


def load_corpus(path: str | Path = "data/corpus.json") -> Corpus:
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CorpusValidationError(f"{path}: invalid JSON ({exc})") from exc
    return parse_corpus(payload)


def _load_jsonl(path: str | Path) -> list[dict]:
    records: list[dict] = []
    with Path(path).open("r", encoding="utf-8") as file_handle:
        for line in file_handle:
            if line.strip():
                records.append(json.loads(line))
    return records


def load_eval_queries(path: str | Path = "data/queries.jsonl") -> list[EvalQuery]:
    return [EvalQuery(**record) for record in _load_jsonl(path)]
