from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

import httpx

from ..decode import Decoder, HeaderDecoder
from ..encode import Encoder, FormEncoder, HeaderEncoder, QueryEncoder
from ..models import Cell, Cookie
from ._context import RequestContext

if TYPE_CHECKING:
    from ._callback import ResponseContext


class ContextSource(Enum):
    """Which of the two mutually exclusive context facets was set last."""

    UNSET = "unset"
    EXPLICIT = "explicit"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class EncodedBody:
    encoder: Encoder


@dataclass(frozen=True)
class FormBody:
    encoder: FormEncoder


# At most one body producing facet can be active.
BodyContent = Union[None, EncodedBody, FormBody]


@dataclass
class RequestState:
    """Per-request builder state, one slot per facet.

    A fresh instance is the zero value: every facet unset.
    """

    method: str = ""
    url: str = ""
    host: str = ""

    body: BodyContent = None
    body_decoder: Optional[Decoder] = None

    header_encoder: Optional[HeaderEncoder] = None
    header_decoder: Optional[HeaderDecoder] = None

    # A literal query string or an encoder.
    query: Union[str, QueryEncoder, None] = None

    cookies: list[Cookie] = field(default_factory=list)

    timeout: float = 0.0
    context: Optional[RequestContext] = None
    context_source: ContextSource = ContextSource.UNSET

    status_cell: Optional[Cell[int]] = None
    callback: Optional[Callable[["ResponseContext"], Any]] = None

    err: Optional[BaseException] = None

    preset_request: Optional[httpx.Request] = None

    # Per-request overrides of Config.debug / Config.trace
    debug: Optional[bool] = None
    trace: Optional[bool] = None

    def resolve_context(self) -> Optional[RequestContext]:
        """Pick the context to attach: the later of timeout and explicit context.

        A timeout set last derives a fresh deadline from the background
        context. A zero timeout set last falls back to the explicit context,
        if there is one.
        """
        if self.context_source is ContextSource.TIMEOUT and self.timeout > 0:
            return RequestContext.background().with_timeout(self.timeout)
        return self.context
