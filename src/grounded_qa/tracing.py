"""OpenTelemetry tracing helpers for the answer engine.

The engine opens one ``answer`` span per query with a child span per stage
(``scoring``, ``selecting``, ``extracting``, ``diversifying``, ``composing``).
Without :func:`configure_tracing` the global no-op provider is used and spans
cost next to nothing.

Usage with an OTLP backend such as Arize Phoenix:

    from grounded_qa.tracing import configure_tracing, get_tracer

    configure_tracing(
        endpoint="http://localhost:6006/v1/traces",
        service_name="grounded-qa",
    )
    engine = AnswerEngine(tracer=get_tracer("grounded_qa.engine"))

Usage without a backend (development / testing):

    configure_tracing()   # uses ConsoleSpanExporter by default
"""
from __future__ import annotations

from typing import Callable

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanExporter,
)

from .schema import Answer

# OpenInference attribute names plus engine-specific counters
ATTR_INPUT_VALUE = "input.value"
ATTR_OUTPUT_VALUE = "output.value"
ATTR_CANDIDATE_COUNT = "answer.candidate_count"
ATTR_SENTENCE_COUNT = "answer.sentence_count"
ATTR_SOURCE_COUNT = "answer.source_count"
ATTR_MATCHED = "answer.matched"

_provider: TracerProvider | None = None


def configure_tracing(
    endpoint: str | None = None,
    service_name: str = "grounded-qa",
    exporter: SpanExporter | None = None,
) -> TracerProvider:
    """Create and register a global TracerProvider.

    Args:
        endpoint: OTLP HTTP endpoint URL to send traces to. When *None* and
            no *exporter* is given, spans are printed via
            :class:`~opentelemetry.sdk.trace.export.ConsoleSpanExporter`.
        service_name: Label identifying this application in the backend.
        exporter: Already-constructed exporter, e.g. an
            ``InMemorySpanExporter`` in tests. Takes precedence over
            *endpoint*.

    Returns:
        The configured provider, also set as the global OTel provider.
    """
    global _provider

    resource = Resource(attributes={SERVICE_NAME: service_name})
    provider = TracerProvider(resource=resource)

    if exporter is not None:
        chosen_exporter: SpanExporter = exporter
    elif endpoint is not None:
        try:
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
                OTLPSpanExporter,
            )
        except ImportError as exc:  # pragma: no cover
            raise ImportError(
                "opentelemetry-exporter-otlp-proto-http is required to export "
                "traces to an OTLP endpoint.  Install it with:\n"
                "  pip install 'grounded-qa[otlp]'"
            ) from exc
        chosen_exporter = OTLPSpanExporter(endpoint=endpoint)
    else:
        chosen_exporter = ConsoleSpanExporter()

    # Synchronous export so finished spans are readable right after a query.
    provider.add_span_processor(SimpleSpanProcessor(chosen_exporter))
    trace.set_tracer_provider(provider)
    _provider = provider
    return provider


def get_tracer(name: str) -> trace.Tracer:
    """Return a tracer from the provider set by :func:`configure_tracing`.

    Falls back to the global provider (no-op unless configured elsewhere).
    """
    if _provider is not None:
        return _provider.get_tracer(name)
    return trace.get_tracer(name)


def traced_answer(
    answer_fn: Callable[[str], Answer],
    tracer: trace.Tracer,
) -> Callable[[str], Answer]:
    """Wrap a ``query -> Answer`` callable so each call is recorded as a span.

    The ``ask`` span records the query, the lead text (first 500
    characters), the number of sources, and whether the answer matched.
    Exceptions mark the span as ERROR and propagate.
    """

    def _wrapped(query: str) -> Answer:
        with tracer.start_as_current_span("ask") as span:
            span.set_attribute(ATTR_INPUT_VALUE, query)
            try:
                answer = answer_fn(query)
            except Exception as exc:
                span.set_status(trace.StatusCode.ERROR, str(exc))
                span.record_exception(exc)
                raise
            span.set_attribute(ATTR_OUTPUT_VALUE, answer.lead_text[:500])
            span.set_attribute(ATTR_SOURCE_COUNT, len(answer.sources))
            span.set_attribute(ATTR_MATCHED, answer.matched)
            span.set_status(trace.StatusCode.OK)
            return answer

    return _wrapped
