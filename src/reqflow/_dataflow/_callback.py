from abc import ABC, abstractmethod
from typing import Any, TypeVar

import httpx

from ..decode import (
    BodyDecoder,
    Decoder,
    HeaderDecoder,
    JSONDecoder,
    XMLDecoder,
    YAMLDecoder,
)
from ._state import RequestState

Self = TypeVar("Self", bound="DecoderRegistry")


class DecoderRegistry(ABC):
    """Decoder registration methods shared by builders and callback contexts."""

    @abstractmethod
    def _install_body_decoder(self, decoder: Decoder) -> None: ...

    @abstractmethod
    def _install_header_decoder(self, decoder: HeaderDecoder) -> None: ...

    def bind(self: Self, decoder: Decoder) -> Self:
        """Decode the response body with a custom decoder."""
        self._install_body_decoder(decoder)
        return self

    def bind_json(self: Self, target: Any = None) -> Self:
        self._install_body_decoder(JSONDecoder(target))
        return self

    def bind_xml(self: Self, target: Any = None) -> Self:
        self._install_body_decoder(XMLDecoder(target))
        return self

    def bind_yaml(self: Self, target: Any = None) -> Self:
        self._install_body_decoder(YAMLDecoder(target))
        return self

    def bind_body(self: Self, target: Any = None) -> Self:
        self._install_body_decoder(BodyDecoder(target))
        return self

    def bind_header(self: Self, target: Any = None) -> Self:
        self._install_header_decoder(HeaderDecoder(target))
        return self


class ResponseContext(DecoderRegistry):
    """What an inspection callback sees of a response.

    The callback can read the status code and headers and choose decoders.
    Decoders it installs land in the same request state the real decode runs
    against; it cannot read the body or change any request facet.

    Examples:
        >>> def choose(ctx: ResponseContext) -> None:
        ...     if ctx.code == 200:
        ...         ctx.bind_json(user)
        ...     else:
        ...         ctx.bind_json(problem)
    """

    def __init__(self, response: httpx.Response, state: RequestState) -> None:
        self._response = response
        self._state = state

    @property
    def code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return httpx.Headers(self._response.headers)

    def _install_body_decoder(self, decoder: Decoder) -> None:
        self._state.body_decoder = decoder

    def _install_header_decoder(self, decoder: HeaderDecoder) -> None:
        self._state.header_decoder = decoder
