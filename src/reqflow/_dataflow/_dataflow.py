from datetime import timedelta
from logging import getLogger
from typing import Any, Callable, Optional, Union

import httpx
from opentelemetry.trace import Tracer

from .._config import Config
from .._utils import normalize_url
from ..decode import Decoder, HeaderDecoder
from ..encode import (
    Encoder,
    FormEncoder,
    HeaderEncoder,
    JSONEncoder,
    QueryEncoder,
    TextEncoder,
    WWWFormEncoder,
    XMLEncoder,
    YAMLEncoder,
)
from ..models import BuilderError, Cell, Cookie
from ._binder import ResponseBinder
from ._callback import DecoderRegistry, ResponseContext
from ._context import RequestContext
from ._debug import DebugPrinter
from ._request import build_request
from ._state import ContextSource, EncodedBody, FormBody, RequestState
from ._transport import Transport, invoke

logger = getLogger("reqflow")

CookieLike = Union[Cookie, tuple[str, str]]


class DataFlow(DecoderRegistry):
    """Fluent builder for one HTTP request and the binding of its response.

    Every setter returns the builder. The first invalid argument is kept as a
    sticky error: later setters do nothing and :meth:`do` raises it without
    touching the network. After :meth:`do` the builder is back to its zero
    state, whatever the outcome.

    Examples:
        >>> user = {}
        >>> code = Cell[int]()
        >>> (
        ...     reqflow.post("api.example.com/users")
        ...     .set_header({"X-Token": "secret"})
        ...     .set_json({"name": "ada"})
        ...     .bind_json(user)
        ...     .code(code)
        ...     .do()
        ... )
    """

    def __init__(
        self,
        method: str = "",
        url: str = "",
        *,
        config: Optional[Config] = None,
        transport: Optional[Transport] = None,
        printer: Optional[DebugPrinter] = None,
        tracer: Optional[Tracer] = None,
    ) -> None:
        self._config = config or Config()
        self._transport = transport
        self._printer = printer
        self._tracer = tracer
        self._state = RequestState()
        self.set_method(method).set_url(url)

    @property
    def err(self) -> Optional[BaseException]:
        return self._state.err

    def reset(self) -> None:
        self._state = RequestState()

    def _fail(self, err: BaseException) -> "DataFlow":
        if self._state.err is None:
            self._state.err = err
        return self

    @property
    def _settable(self) -> bool:
        return self._state.err is None

    def set_error(self, err: BaseException) -> "DataFlow":
        """Record a sticky error; only the first one is kept."""
        return self._fail(err)

    # Target

    def set_method(self, method: str) -> "DataFlow":
        if self._settable:
            self._state.method = method.upper()
        return self

    def set_url(self, url: str) -> "DataFlow":
        if self._settable:
            self._state.url = normalize_url(url) if url else ""
        return self

    def set_host(self, host: str) -> "DataFlow":
        """Override scheme, host and port of the target URL.

        ``"example.com"`` becomes ``http://example.com`` and ``":8080"``
        becomes ``http://127.0.0.1:8080``; path and query are left alone.
        """
        if self._settable:
            self._state.host = host
        return self

    def set_request(self, request: httpx.Request) -> "DataFlow":
        """Reuse ``request`` instead of building a fresh one.

        The request is mutated in place. It keeps its own body.
        """
        if not self._settable:
            return self
        if not isinstance(request, httpx.Request):
            return self._fail(
                BuilderError(f"Expected an httpx.Request, got {type(request).__name__}")
            )
        self._state.preset_request = request
        return self

    # Query, headers and cookies

    def set_query(self, query: Any) -> "DataFlow":
        """Set the query string.

        A ``str`` is used verbatim after dropping one leading ``?``. Mappings,
        pydantic models and ``(key, value)`` sequences are encoded. ``None``
        clears the query.
        """
        if not self._settable:
            return self
        if query is None or isinstance(query, str):
            self._state.query = query
        elif isinstance(query, QueryEncoder):
            self._state.query = query
        else:
            self._state.query = QueryEncoder(query)
        return self

    def set_header(self, header: Any) -> "DataFlow":
        """Replace the request headers with those encoded from ``header``."""
        if not self._settable:
            return self
        if isinstance(header, HeaderEncoder):
            self._state.header_encoder = header
        else:
            self._state.header_encoder = HeaderEncoder(header)
        return self

    def set_cookies(self, *cookies: CookieLike) -> "DataFlow":
        if not self._settable:
            return self
        for cookie in cookies:
            if isinstance(cookie, Cookie):
                self._state.cookies.append(cookie)
            elif isinstance(cookie, tuple) and len(cookie) == 2:
                self._state.cookies.append(Cookie(name=cookie[0], value=cookie[1]))
            else:
                return self._fail(BuilderError(f"Invalid cookie: {cookie!r}"))
        return self

    # Body. Body and form replace each other; the last call wins.

    def _set_body(self, encoder: Encoder) -> "DataFlow":
        if self._settable:
            if isinstance(self._state.body, FormBody):
                logger.debug("Body replaces the previously set form")
            self._state.body = EncodedBody(encoder)
        return self

    def set_body(self, body: Any) -> "DataFlow":
        """Send ``body`` as-is (text, bytes, numbers, a readable) or via an Encoder."""
        if isinstance(body, Encoder) and not isinstance(body, FormEncoder):
            return self._set_body(body)
        return self._set_body(TextEncoder(body))

    def set_json(self, obj: Any) -> "DataFlow":
        return self._set_body(JSONEncoder(obj))

    def set_xml(self, obj: Any, root: str = "root") -> "DataFlow":
        return self._set_body(XMLEncoder(obj, root=root))

    def set_yaml(self, obj: Any) -> "DataFlow":
        return self._set_body(YAMLEncoder(obj))

    def set_www_form(self, obj: Any) -> "DataFlow":
        return self._set_body(WWWFormEncoder(obj))

    def set_form(self, obj: Any) -> "DataFlow":
        """Send ``obj`` as ``multipart/form-data`` (see :class:`FormEncoder`)."""
        if not self._settable:
            return self
        if isinstance(self._state.body, EncodedBody):
            logger.debug("Form replaces the previously set body")
        encoder = obj if isinstance(obj, FormEncoder) else FormEncoder(obj)
        self._state.body = FormBody(encoder)
        return self

    # Timeout and context. The later of the two wins.

    def set_timeout(self, timeout: Union[float, timedelta]) -> "DataFlow":
        if not self._settable:
            return self
        if isinstance(timeout, timedelta):
            timeout = timeout.total_seconds()
        if timeout < 0:
            return self._fail(BuilderError(f"Timeout must not be negative: {timeout}"))
        self._state.timeout = float(timeout)
        self._state.context_source = ContextSource.TIMEOUT
        return self

    def with_context(self, context: RequestContext) -> "DataFlow":
        if not self._settable:
            return self
        if not isinstance(context, RequestContext):
            return self._fail(
                BuilderError(f"Expected a RequestContext, got {type(context).__name__}")
            )
        self._state.context = context
        self._state.context_source = ContextSource.EXPLICIT
        return self

    # Response sinks

    def _install_body_decoder(self, decoder: Decoder) -> None:
        if self._settable:
            self._state.body_decoder = decoder

    def _install_header_decoder(self, decoder: HeaderDecoder) -> None:
        if self._settable:
            self._state.header_decoder = decoder

    def code(self, cell: Cell[int]) -> "DataFlow":
        """Store the response status code into ``cell`` after a successful bind."""
        if not self._settable:
            return self
        if not isinstance(cell, Cell):
            return self._fail(BuilderError(f"Expected a Cell, got {type(cell).__name__}"))
        self._state.status_cell = cell
        return self

    def callback(self, fn: Callable[[ResponseContext], Any]) -> "DataFlow":
        """Inspect the response before its body is decoded.

        ``fn`` receives a :class:`ResponseContext` and may install decoders on
        it; raising aborts the request with that exception.
        """
        if not self._settable:
            return self
        if not callable(fn):
            return self._fail(BuilderError(f"Callback is not callable: {fn!r}"))
        self._state.callback = fn
        return self

    def debug(self, enabled: bool = True, *, trace: Optional[bool] = None) -> "DataFlow":
        """Turn the debug printer (and optionally tracing) on for this request."""
        if self._settable:
            self._state.debug = enabled
            if trace is not None:
                self._state.trace = trace
        return self

    # Lifecycle

    def request(self) -> httpx.Request:
        """Assemble the request without sending it. The state is kept."""
        if self._state.err is not None:
            raise self._state.err
        return build_request(self._state, self._config)

    def _debug_printer(self) -> Optional[DebugPrinter]:
        enabled = self._state.debug
        if enabled is None:
            enabled = self._config.debug
        if not enabled:
            return None
        return self._printer or DebugPrinter()

    def _trace_enabled(self) -> bool:
        if self._state.trace is not None:
            return self._state.trace
        return self._config.trace

    def do(self) -> None:
        """Send the request and bind the response.

        Raises:
            The sticky error, if one was recorded.
            EncodeError, URLParseError: While assembling the request.
            ContextCanceledError: If the context is done before or while the
                response is read.
            httpx.HTTPError: While sending it.
            DecodeError: While binding the response.
        """
        state = self._state
        try:
            if state.err is not None:
                raise state.err

            request = build_request(state, self._config)
            response = invoke(
                request,
                self._transport,
                trace_enabled=self._trace_enabled(),
                tracer=self._tracer,
            )
            try:
                ResponseBinder(state, self._debug_printer()).bind(request, response)
            finally:
                response.close()
        finally:
            self.reset()
