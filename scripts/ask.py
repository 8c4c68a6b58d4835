from __future__ import annotations

import argparse
import json
import logging

from grounded_qa.engine import AnswerEngine
from grounded_qa.logging_utils import configure_logging
from grounded_qa.settings import load_settings


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Answer a question from the documentation corpus.")
    p.add_argument("question", help="Free-text question.")
    p.add_argument("--corpus", default=None, help="Corpus JSON path (default: from settings).")
    p.add_argument("--json", action="store_true", help="Print the answer as JSON.")
    p.add_argument("--log-level", default="WARNING", help="Logging level (INFO, DEBUG, ...).")
    return p


def main() -> int:
    args = build_arg_parser().parse_args()
    configure_logging(args.log_level)
    log = logging.getLogger("ask")

    settings, paths = load_settings()
    engine = AnswerEngine(settings)
    engine.load_path(args.corpus or paths.corpus_path)

    answer = engine.answer(args.question)
    log.info("matched=%s sources=%d", answer.matched, len(answer.sources))
    if args.json:
        print(json.dumps(answer.to_dict(), indent=2))
        return 0

    print(answer.lead_text)
    for source in answer.sources:
        label = f"{source.title} > {source.heading}" if source.heading else source.title
        print(f"  - {label} [{source.document_id}#{source.section_id or ''}]")
    return 0 if answer.matched else 1


if __name__ == "__main__":
    raise SystemExit(main())
