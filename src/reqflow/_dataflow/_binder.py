import io
from enum import Enum
from logging import getLogger
from typing import Any, Callable, Iterator, Optional

import httpx

from .._utils import decode_errors
from .._utils.constants import MAX_DRAIN_BYTES
from ._callback import ResponseContext
from ._debug import DebugPrinter
from ._state import RequestState

logger = getLogger("reqflow")

Callback = Callable[[ResponseContext], Any]


class BindState(Enum):
    BUILT = "built"
    HEADER_DECODED = "header_decoded"
    INSPECTED = "inspected"
    DECODER_CHOSEN = "decoder_chosen"
    BODY_DECODED = "body_decoded"
    DRAINED = "drained"
    DONE = "done"


_TRANSITIONS: dict[BindState, frozenset[BindState]] = {
    BindState.BUILT: frozenset({BindState.HEADER_DECODED}),
    BindState.HEADER_DECODED: frozenset({BindState.INSPECTED, BindState.BODY_DECODED}),
    BindState.INSPECTED: frozenset({BindState.DECODER_CHOSEN}),
    # Headers are decoded again once the callback has picked its decoders.
    BindState.DECODER_CHOSEN: frozenset({BindState.HEADER_DECODED}),
    BindState.BODY_DECODED: frozenset({BindState.DRAINED, BindState.DONE}),
    BindState.DRAINED: frozenset({BindState.DONE}),
    BindState.DONE: frozenset(),
}


class _ResponseStream(io.RawIOBase):
    """Readable file object over ``response.iter_bytes()``.

    Once the response has been read, httpx replays the cached content, so a
    debug peek does not starve later readers.
    """

    def __init__(self, response: httpx.Response) -> None:
        self._chunks: Iterator[bytes] = response.iter_bytes()
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:  # type: ignore[no-untyped-def]
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size


class ResponseBinder:
    """Bind a response into the decoders registered on a request state.

    The walk is ``BUILT -> HEADER_DECODED [-> INSPECTED -> DECODER_CHOSEN ->
    HEADER_DECODED] -> BODY_DECODED [-> DRAINED] -> DONE``. The bracketed
    detour only happens when an inspection callback is registered. The body is
    decoded exactly once, after the callback had its chance to pick a decoder.
    """

    def __init__(
        self, state: RequestState, printer: Optional[DebugPrinter] = None
    ) -> None:
        self._state = state
        self._printer = printer
        self._phase = BindState.BUILT

    @property
    def phase(self) -> BindState:
        return self._phase

    def _transition(self, to: BindState) -> None:
        if to not in _TRANSITIONS[self._phase]:
            raise RuntimeError(f"Invalid bind transition {self._phase.value} -> {to.value}")
        logger.debug(f"Bind: {self._phase.value} -> {to.value}")
        self._phase = to

    def _decode_headers(self, response: httpx.Response) -> None:
        decoder = self._state.header_decoder
        if decoder is not None:
            with decode_errors("header", response.status_code):
                decoder.decode(response.headers)
        self._transition(BindState.HEADER_DECODED)

    def _peek(
        self, printer: DebugPrinter, request: httpx.Request, response: httpx.Response
    ) -> None:
        response.read()
        printer.print(request, response)

    def _inspect(self, callback: Callback, response: httpx.Response) -> None:
        self._transition(BindState.INSPECTED)
        callback(ResponseContext(response, self._state))
        self._transition(BindState.DECODER_CHOSEN)

    def _decode_body(self, stream: io.BufferedReader, status_code: int) -> None:
        decoder = self._state.body_decoder
        if decoder is not None:
            with decode_errors("body", status_code):
                decoder.decode(stream)
        self._transition(BindState.BODY_DECODED)

    def _drain(self, stream: _ResponseStream) -> None:
        # Hitting the end early is fine; anything past the cap is left unread.
        remaining = MAX_DRAIN_BYTES
        while remaining > 0:
            chunk = stream.read(remaining)
            if not chunk:
                break
            remaining -= len(chunk)
        self._transition(BindState.DRAINED)

    def bind(self, request: httpx.Request, response: httpx.Response) -> None:
        """Run every bind phase against ``response``.

        Raises:
            DecodeError: If a header or body decoder fails.
            ContextCanceledError: If the request context ends mid-body.
            httpx.HTTPError: If reading the body fails.
        """
        self._decode_headers(response)

        if self._printer is not None:
            self._peek(self._printer, request, response)

        callback = self._state.callback
        if callback is not None:
            self._inspect(callback, response)
            self._decode_headers(response)

        stream = _ResponseStream(response)
        self._decode_body(io.BufferedReader(stream), response.status_code)

        if self._state.status_cell is not None:
            self._state.status_cell.value = response.status_code

        if self._state.body_decoder is None:
            self._drain(stream)

        self._transition(BindState.DONE)
