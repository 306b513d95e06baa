"""Fluent HTTP request builder and response binder on top of httpx.

Examples:
    >>> import reqflow
    >>> user = {}
    >>> code = reqflow.Cell[int]()
    >>> reqflow.get("api.example.com/users/1").bind_json(user).code(code).do()
"""

from typing import Optional

from ._config import Config
from ._dataflow import (
    DataFlow,
    DebugPrinter,
    RequestContext,
    ResponseContext,
    TracingTransport,
    Transport,
    close_default_client,
    get_default_client,
)
from ._reqflow import ReqFlow
from .encode import FormFile
from .models import (
    BuilderError,
    Cell,
    ContextCanceledError,
    Cookie,
    DeadlineExceededError,
    DecodeError,
    EncodeError,
    ReqFlowError,
    URLParseError,
)

_default: Optional[ReqFlow] = None


def _flow() -> ReqFlow:
    global _default
    if _default is None:
        _default = ReqFlow()
    return _default


def new(method: str = "", url: str = "") -> DataFlow:
    return _flow().new(method, url)


def get(url: str = "") -> DataFlow:
    return _flow().get(url)


def post(url: str = "") -> DataFlow:
    return _flow().post(url)


def put(url: str = "") -> DataFlow:
    return _flow().put(url)


def patch(url: str = "") -> DataFlow:
    return _flow().patch(url)


def delete(url: str = "") -> DataFlow:
    return _flow().delete(url)


def head(url: str = "") -> DataFlow:
    return _flow().head(url)


def options(url: str = "") -> DataFlow:
    return _flow().options(url)


__all__ = [
    "BuilderError",
    "Cell",
    "Config",
    "ContextCanceledError",
    "Cookie",
    "DataFlow",
    "DeadlineExceededError",
    "DebugPrinter",
    "DecodeError",
    "EncodeError",
    "FormFile",
    "ReqFlow",
    "ReqFlowError",
    "RequestContext",
    "ResponseContext",
    "TracingTransport",
    "Transport",
    "URLParseError",
    "close_default_client",
    "delete",
    "get",
    "get_default_client",
    "head",
    "new",
    "options",
    "patch",
    "post",
    "put",
]
