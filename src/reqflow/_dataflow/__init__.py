from ._binder import BindState, ResponseBinder
from ._callback import DecoderRegistry, ResponseContext
from ._context import (
    ContextBoundStream,
    RequestContext,
    attach_context,
    bind_response,
    get_context,
)
from ._dataflow import DataFlow
from ._debug import DebugPrinter
from ._request import build_request
from ._state import BodyContent, ContextSource, EncodedBody, FormBody, RequestState
from ._transport import (
    TracingTransport,
    Transport,
    close_default_client,
    get_default_client,
    invoke,
)

__all__ = [
    "BindState",
    "BodyContent",
    "ContextBoundStream",
    "ContextSource",
    "DataFlow",
    "DebugPrinter",
    "DecoderRegistry",
    "EncodedBody",
    "FormBody",
    "RequestContext",
    "RequestState",
    "ResponseBinder",
    "ResponseContext",
    "TracingTransport",
    "Transport",
    "attach_context",
    "bind_response",
    "build_request",
    "close_default_client",
    "get_context",
    "get_default_client",
    "invoke",
]
