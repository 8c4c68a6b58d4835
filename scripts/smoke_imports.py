from grounded_qa.engine import AnswerEngine
from grounded_qa.io_utils import load_corpus

SAMPLE_QUERIES = [
    "Make a payment link single-use and what will customers see after?",
    "Collect billing and shipping addresses and phone number",
    "What security features are available?",
]


if __name__ == "__main__":
    engine = AnswerEngine()
    corpus = load_corpus("data/corpus.json")
    index = engine.load(corpus)
    answers = [engine.answer(query) for query in SAMPLE_QUERIES]
    print(
        {
            "docs": len(corpus),
            "sections": index.section_count,
            "terms": len(index.idf),
            "matched": sum(answer.matched for answer in answers),
        }
    )
