from typing import Optional


class ReqFlowError(Exception):
    """Base class for all errors raised by reqflow."""


class BuilderError(ReqFlowError):
    """Raised when a builder facet receives an invalid value.

    Builder errors are sticky: the first one recorded on a DataFlow makes every
    following setter a no-op, and ``do()`` raises it without any network I/O.
    """


class URLParseError(ReqFlowError, ValueError):
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL {url!r}: {reason}")


class EncodeError(ReqFlowError):
    """Raised when a body, form, query or header encoder fails."""

    def __init__(self, facet: str, message: str):
        self.facet = facet
        self.message = message
        super().__init__(f"Failed to encode request {facet}: {message}")


class DecodeError(ReqFlowError):
    """Raised when a header or body decoder fails.

    Attributes:
        facet: Either ``"header"`` or ``"body"``.
        status_code: Status code of the response that failed to decode, so
            callers can still tell a failed 200 from a failed 500.
    """

    def __init__(self, facet: str, message: str, status_code: Optional[int] = None):
        self.facet = facet
        self.message = message
        self.status_code = status_code
        super().__init__(f"Failed to decode response {facet}: {message}")


class ContextCanceledError(ReqFlowError):
    def __init__(self, message="Request context was canceled before dispatch."):
        self.message = message
        super().__init__(self.message)


class DeadlineExceededError(ContextCanceledError):
    def __init__(self, message="Request context deadline exceeded before dispatch."):
        super().__init__(message)
