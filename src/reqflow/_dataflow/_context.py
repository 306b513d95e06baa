import threading
import time
from datetime import timedelta
from typing import Iterator, Optional, Union

import httpx

from .._utils.constants import CONTEXT_EXTENSION
from ..models.errors import ContextCanceledError, DeadlineExceededError


class RequestContext:
    """Cancellation and deadline carrier for a single request.

    Contexts form a tree: a child inherits its parent's deadline (keeping the
    earlier of the two) and is canceled when its parent is. Deadlines are
    measured on ``time.monotonic()``.

    Examples:
        >>> ctx = RequestContext.background().with_timeout(2.5)
        >>> reqflow.get("example.com").with_context(ctx).do()
    """

    def __init__(
        self,
        deadline: Optional[float] = None,
        parent: Optional["RequestContext"] = None,
    ) -> None:
        self._parent = parent
        self._canceled = threading.Event()

        inherited = parent.deadline if parent is not None else None
        if inherited is not None and (deadline is None or inherited < deadline):
            deadline = inherited
        self._deadline = deadline

    @classmethod
    def background(cls) -> "RequestContext":
        """A root context with no deadline that is never canceled by others."""
        return cls()

    def with_timeout(self, timeout: Union[float, timedelta]) -> "RequestContext":
        if isinstance(timeout, timedelta):
            timeout = timeout.total_seconds()
        return RequestContext(deadline=time.monotonic() + timeout, parent=self)

    def with_cancel(self) -> "RequestContext":
        return RequestContext(parent=self)

    def cancel(self) -> None:
        self._canceled.set()

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    @property
    def canceled(self) -> bool:
        if self._canceled.is_set():
            return True
        return self._parent is not None and self._parent.canceled

    def remaining(self) -> Optional[float]:
        """Seconds left until the deadline, or ``None`` without one."""
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    def err(self) -> Optional[ContextCanceledError]:
        if self.canceled:
            return ContextCanceledError()
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return DeadlineExceededError()
        return None

    def raise_if_done(self) -> None:
        err = self.err()
        if err is not None:
            raise err


def attach_context(request: httpx.Request, context: RequestContext) -> None:
    """Bind ``context`` to ``request``.

    The remaining time until the deadline becomes the request's ``timeout``
    extension, which httpx transports enforce on connect, read, write and pool.
    """
    request.extensions[CONTEXT_EXTENSION] = context
    remaining = context.remaining()
    if remaining is not None:
        request.extensions["timeout"] = httpx.Timeout(remaining).as_dict()


def get_context(request: httpx.Request) -> Optional[RequestContext]:
    return request.extensions.get(CONTEXT_EXTENSION)


class ContextBoundStream(httpx.SyncByteStream):
    """Response byte stream that stops once its context is done.

    httpx timeouts only bound each network operation; the context bounds the
    whole exchange, so it is checked around every chunk.
    """

    def __init__(self, stream: httpx.SyncByteStream, context: RequestContext) -> None:
        self._stream = stream
        self._context = context

    def __iter__(self) -> Iterator[bytes]:
        self._context.raise_if_done()
        for chunk in self._stream:
            self._context.raise_if_done()
            yield chunk

    def close(self) -> None:
        self._stream.close()


def bind_response(response: httpx.Response, context: RequestContext) -> None:
    """Tie the remaining reads of ``response`` to ``context``.

    Raises:
        ContextCanceledError: If the context is already done, after closing
            the response.
    """
    if isinstance(response.stream, httpx.SyncByteStream):
        response.stream = ContextBoundStream(response.stream, context)
    err = context.err()
    if err is not None:
        response.close()
        raise err
