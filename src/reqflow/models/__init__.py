from .cell import Cell
from .cookie import Cookie
from .errors import (
    BuilderError,
    ContextCanceledError,
    DeadlineExceededError,
    DecodeError,
    EncodeError,
    ReqFlowError,
    URLParseError,
)

__all__ = [
    "BuilderError",
    "Cell",
    "ContextCanceledError",
    "Cookie",
    "DeadlineExceededError",
    "DecodeError",
    "EncodeError",
    "ReqFlowError",
    "URLParseError",
]
