import io
from logging import getLogger
from typing import Optional, Union

import httpx

from .._config import Config
from .._utils import (
    append_query,
    encode_errors,
    overlay_host,
    parse_url,
    strip_query_sentinel,
)
from .._utils.constants import (
    CONTENT_TYPES,
    FRAMING_HEADERS,
    HEADER_CONTENT_TYPE,
    HEADER_COOKIE,
    HEADER_USER_AGENT,
)
from ..encode import QueryEncoder
from ..models import Cookie
from ._context import attach_context
from ._state import BodyContent, EncodedBody, FormBody, RequestState

logger = getLogger("reqflow")


def _encode_body(body: BodyContent) -> tuple[bytes, Optional[str]]:
    """Encode the active body variant, returning the bytes and form content type."""
    buffer = io.BytesIO()
    if isinstance(body, EncodedBody):
        with encode_errors("body"):
            body.encoder.encode(buffer)
        return buffer.getvalue(), None
    if isinstance(body, FormBody):
        with encode_errors("form"):
            body.encoder.encode(buffer)
        return buffer.getvalue(), body.encoder.content_type
    return b"", None


def _encode_query(query: Union[str, QueryEncoder]) -> str:
    if isinstance(query, str):
        return strip_query_sentinel(query)

    pairs: list[tuple[str, str]] = []
    with encode_errors("query"):
        query.encode(pairs)
    return QueryEncoder.end(pairs)


def _sync_host_header(request: httpx.Request) -> None:
    if request.url.host:
        request.headers["Host"] = request.url.netloc.decode("ascii")


def _select_request(
    state: RequestState, config: Config, url: str, body: bytes
) -> httpx.Request:
    preset = state.preset_request

    if url:
        target = parse_url(url)
    elif preset is not None:
        target = preset.url
    else:
        target = parse_url("")

    if state.host:
        target = overlay_host(target, state.host)

    if preset is None:
        extensions = {}
        if config.timeout is not None:
            extensions["timeout"] = httpx.Timeout(config.timeout).as_dict()
        return httpx.Request(
            state.method or "GET",
            target,
            headers={HEADER_USER_AGENT: config.user_agent},
            content=body or None,
            extensions=extensions,
        )

    if body:
        logger.warning(
            "A preset request keeps its own body; the encoded body was not applied."
        )
    if state.method:
        preset.method = state.method.upper()
    preset.url = target
    _sync_host_header(preset)
    return preset


def _clear_headers(request: httpx.Request) -> None:
    request.headers = httpx.Headers(
        [
            (key, value)
            for key, value in request.headers.raw
            if key.decode("latin-1").lower() in FRAMING_HEADERS
        ]
    )


def _add_headers(request: httpx.Request, pairs: list[tuple[str, str]]) -> None:
    # httpx.Headers has no add(); rebuild to keep repeated keys.
    if pairs:
        request.headers = httpx.Headers([*request.headers.raw, *pairs])


def _add_cookies(request: httpx.Request, cookies: list[Cookie]) -> None:
    if not cookies:
        return
    value = "; ".join(cookie.header_value() for cookie in cookies)
    existing = request.headers.get(HEADER_COOKIE)
    request.headers[HEADER_COOKIE] = f"{existing}; {value}" if existing else value


def _default_content_type(body: BodyContent) -> Optional[str]:
    if isinstance(body, EncodedBody):
        return CONTENT_TYPES.get(body.encoder.name)
    return None


def build_request(state: RequestState, config: Config) -> httpx.Request:
    """Materialize ``state`` into an ``httpx.Request``.

    Steps run in a fixed order: body, query, request selection (preset or
    fresh, method, url and host), header clearing, context, cookies, header
    encoder, form content type and finally the default content type.

    Raises:
        EncodeError: If a body, form, query or header encoder fails.
        URLParseError: If the target URL or the host cannot be parsed.
    """
    body, form_content_type = _encode_body(state.body)

    url = state.url
    if not url and state.preset_request is not None and state.query is not None:
        url = str(state.preset_request.url)
    if state.query is not None:
        url = append_query(url, _encode_query(state.query))

    request = _select_request(state, config, url, body)

    if state.header_encoder is not None:
        _clear_headers(request)

    context = state.resolve_context()
    if context is not None:
        attach_context(request, context)
        logger.debug(f"Context ({state.context_source.value}): {context.remaining()}s left")

    _add_cookies(request, state.cookies)

    if state.header_encoder is not None:
        pairs: list[tuple[str, str]] = []
        with encode_errors("header"):
            state.header_encoder.encode(pairs)
        _add_headers(request, pairs)

    if form_content_type is not None:
        request.headers[HEADER_CONTENT_TYPE] = form_content_type

    default_content_type = _default_content_type(state.body)
    if default_content_type is not None:
        _add_headers(request, [(HEADER_CONTENT_TYPE, default_content_type)])

    logger.debug(f"Request: {request.method} {request.url}")
    return request
