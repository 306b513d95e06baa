import io
from typing import Generator

import httpx
import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
    InMemorySpanExporter,
)
from opentelemetry.trace import SpanKind, StatusCode

from reqflow import Config, DebugPrinter, ReqFlow, TracingTransport


@pytest.fixture
def exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def provider(
    exporter: InMemorySpanExporter,
) -> Generator[TracerProvider, None, None]:
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    yield provider
    provider.shutdown()


@pytest.fixture
def traced(
    config: Config, client: httpx.Client, provider: TracerProvider
) -> ReqFlow:
    return ReqFlow(
        config=config, transport=client, trace=True, tracer=provider.get_tracer("test")
    )


class TestTracing:
    def test_client_span(self, traced: ReqFlow, exporter: InMemorySpanExporter):
        traced.get("http://example.com/a").do()

        (span,) = exporter.get_finished_spans()
        assert span.name == "HTTP GET"
        assert span.kind == SpanKind.CLIENT
        assert span.attributes["http.request.method"] == "GET"
        assert span.attributes["url.full"] == "http://example.com/a"
        assert span.attributes["http.response.status_code"] == 200
        assert span.status.status_code == StatusCode.UNSET

    def test_error_status(
        self, traced: ReqFlow, recorder, exporter: InMemorySpanExporter
    ):
        recorder.handler = lambda request: httpx.Response(503)

        traced.get("http://example.com").do()

        (span,) = exporter.get_finished_spans()
        assert span.attributes["http.response.status_code"] == 503
        assert span.status.status_code == StatusCode.ERROR

    def test_transport_failure_is_recorded(
        self, traced: ReqFlow, recorder, exporter: InMemorySpanExporter
    ):
        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused")

        recorder.handler = fail

        with pytest.raises(httpx.ConnectError):
            traced.get("http://example.com").do()

        (span,) = exporter.get_finished_spans()
        assert span.status.status_code == StatusCode.ERROR
        assert span.events[0].name == "exception"

    def test_per_request_switch(
        self,
        config: Config,
        client: httpx.Client,
        provider: TracerProvider,
        exporter: InMemorySpanExporter,
    ):
        flow = ReqFlow(config=config, transport=client, tracer=provider.get_tracer("test"))

        flow.get("http://example.com").do()
        flow.get("http://example.com").debug(False, trace=True).do()

        assert len(exporter.get_finished_spans()) == 1

    def test_wraps_any_transport(
        self, client: httpx.Client, provider: TracerProvider, exporter: InMemorySpanExporter
    ):
        transport = TracingTransport(client, provider.get_tracer("test"))

        response = transport.send(httpx.Request("PUT", "http://example.com"))

        assert response.status_code == 200
        assert exporter.get_finished_spans()[0].name == "HTTP PUT"


class TestDebugPrinter:
    def test_request_and_response(
        self, flow: ReqFlow, recorder, console_output: io.StringIO
    ):
        recorder.handler = lambda request: httpx.Response(
            201, json={"id": 1, "tags": ["a"]}
        )

        flow.post("http://example.com/items").set_json({"name": "ada"}).debug().do()

        output = console_output.getvalue()
        assert "> POST http://example.com/items" in output
        assert "> content-type: application/json" in output
        assert '"name": "ada"' in output
        assert "< HTTP/1.1 201 Created" in output
        assert '"tags": [\n    "a"\n  ]' in output

    def test_text_body(self, flow: ReqFlow, recorder, console_output: io.StringIO):
        recorder.handler = lambda request: httpx.Response(200, text="plain words")

        flow.get("http://example.com").debug().do()

        assert "plain words" in console_output.getvalue()

    def test_off_by_default(self, flow: ReqFlow, console_output: io.StringIO):
        flow.get("http://example.com").do()

        assert console_output.getvalue() == ""

    def test_config_enables_it(
        self, client: httpx.Client, printer: DebugPrinter, console_output: io.StringIO
    ):
        flow = ReqFlow(config=Config(), transport=client, printer=printer, debug=True)

        flow.get("http://example.com/x").do()

        assert "> GET http://example.com/x" in console_output.getvalue()
