from __future__ import annotations

import json

from grounded_qa.engine import AnswerEngine
from grounded_qa.evaluation import evaluate_single, summarize
from grounded_qa.io_utils import load_eval_queries
from grounded_qa.logging_utils import configure_logging
from grounded_qa.settings import load_settings


def main() -> None:
    """Run the evaluation questions against the bundled corpus and print means."""
    configure_logging("INFO")
    settings, paths = load_settings()
    engine = AnswerEngine(settings)
    engine.load_path(paths.corpus_path)

    rows = [
        evaluate_single(query, engine.answer, engine.corpus)
        for query in load_eval_queries(paths.queries_path)
    ]
    print(json.dumps(summarize(rows), indent=2))


if __name__ == "__main__":
    main()
