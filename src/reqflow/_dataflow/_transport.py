import os
import time
from logging import getLogger
from typing import Optional, Protocol

import httpx
from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode, Tracer

from ._context import bind_response, get_context

logger = getLogger("reqflow")


class Transport(Protocol):
    """Anything that can send an ``httpx.Request``; ``httpx.Client`` qualifies."""

    def send(self, request: httpx.Request, *, stream: bool = False) -> httpx.Response: ...


_CLIENT: Optional[httpx.Client] = None
_CLIENT_PID: Optional[int] = None


def get_default_client() -> httpx.Client:
    """Return the process-wide client used when no transport is injected.

    The client is created lazily and rebuilt after a fork, so processes never
    share connections.
    """
    global _CLIENT, _CLIENT_PID

    pid = os.getpid()
    if _CLIENT is None or _CLIENT_PID != pid:
        logger.debug(f"Creating default HTTP client (pid={pid})")
        _CLIENT = httpx.Client()
        _CLIENT_PID = pid
    return _CLIENT


def close_default_client() -> None:
    global _CLIENT, _CLIENT_PID

    if _CLIENT is not None:
        _CLIENT.close()
    _CLIENT = None
    _CLIENT_PID = None


class TracingTransport:
    """Wrap a transport in an OpenTelemetry client span per request.

    The span records method, URL and status code; exceptions are recorded on
    the span and re-raised untouched.
    """

    def __init__(self, transport: Transport, tracer: Optional[Tracer] = None) -> None:
        self._transport = transport
        self._tracer = tracer or trace.get_tracer(__name__)

    def send(self, request: httpx.Request, *, stream: bool = False) -> httpx.Response:
        with self._tracer.start_as_current_span(
            f"HTTP {request.method}", kind=SpanKind.CLIENT
        ) as span:
            span.set_attribute("http.request.method", request.method)
            span.set_attribute("url.full", str(request.url))

            started = time.perf_counter()
            response = self._transport.send(request, stream=stream)
            elapsed_ms = (time.perf_counter() - started) * 1000.0

            span.set_attribute("http.response.status_code", response.status_code)
            if response.status_code >= 400:
                span.set_status(Status(StatusCode.ERROR))

            logger.debug(
                f"{request.method} {request.url} -> {response.status_code} "
                f"in {elapsed_ms:.1f}ms"
            )
            return response


def invoke(
    request: httpx.Request,
    transport: Optional[Transport] = None,
    *,
    trace_enabled: bool = False,
    tracer: Optional[Tracer] = None,
) -> httpx.Response:
    """Send ``request`` and return the (still streaming) response.

    Reads of the returned body stay bound to the attached context, so a
    deadline or cancellation also stops a response that is still streaming.

    Raises:
        ContextCanceledError: If the attached context was canceled.
        DeadlineExceededError: If the attached context's deadline has passed.
        httpx.HTTPError: Transport failures, unmodified.
    """
    context = get_context(request)
    if context is not None:
        context.raise_if_done()

    sender: Transport = transport if transport is not None else get_default_client()
    if trace_enabled:
        sender = TracingTransport(sender, tracer)

    response = sender.send(request, stream=True)
    if context is not None:
        bind_response(response, context)
    return response
