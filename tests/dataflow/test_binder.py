import io
from typing import Iterator

import httpx
import pytest
from pydantic import BaseModel, Field

from reqflow import Cell, DebugPrinter, DecodeError, ReqFlow, ResponseContext
from reqflow._dataflow import BindState, RequestState, ResponseBinder
from reqflow.decode import HeaderDecoder, JSONDecoder


class CountingDecoder:
    def __init__(self) -> None:
        self.calls = 0
        self.data = b""

    def decode(self, source) -> None:
        self.calls += 1
        self.data = source.read()


class CountingHeaderDecoder(HeaderDecoder):
    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    def decode(self, source: httpx.Headers) -> None:
        self.calls += 1
        super().decode(source)


class ChunkStream(httpx.SyncByteStream):
    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = chunks
        self.pulled = 0

    def __iter__(self) -> Iterator[bytes]:
        for chunk in self._chunks:
            self.pulled += 1
            yield chunk


REQUEST = httpx.Request("GET", "http://example.com")


class TestPhases:
    def test_plain_walk(self):
        state = RequestState(body_decoder=CountingDecoder())
        binder = ResponseBinder(state)

        binder.bind(REQUEST, httpx.Response(200, content=b"body"))

        assert binder.phase is BindState.DONE
        assert state.body_decoder.calls == 1
        assert state.body_decoder.data == b"body"

    def test_status_cell(self):
        cell: Cell[int] = Cell()

        ResponseBinder(RequestState(status_cell=cell)).bind(
            REQUEST, httpx.Response(201)
        )

        assert cell.value == 201

    def test_header_decoded_again_after_callback(self):
        header_decoder = CountingHeaderDecoder()
        state = RequestState(header_decoder=header_decoder, callback=lambda ctx: None)

        ResponseBinder(state).bind(REQUEST, httpx.Response(200, headers={"X-Id": "7"}))

        assert header_decoder.calls == 2
        assert header_decoder.value["x-id"] == "7"

    def test_callback_sees_status_and_headers(self):
        seen: list[tuple[int, str]] = []

        def inspect(ctx: ResponseContext) -> None:
            seen.append((ctx.code, ctx.headers["x-id"]))

        ResponseBinder(RequestState(callback=inspect)).bind(
            REQUEST, httpx.Response(418, headers={"X-Id": "7"})
        )

        assert seen == [(418, "7")]

    def test_callback_installed_decoder_gets_full_body_once(
        self, printer: DebugPrinter
    ):
        decoder = CountingDecoder()
        state = RequestState(callback=lambda ctx: ctx.bind(decoder))

        ResponseBinder(state, printer).bind(
            REQUEST, httpx.Response(200, content=b'{"full": "body"}')
        )

        assert decoder.calls == 1
        assert decoder.data == b'{"full": "body"}'

    def test_callback_errors_propagate(self):
        def reject(ctx: ResponseContext) -> None:
            raise PermissionError("no")

        with pytest.raises(PermissionError):
            ResponseBinder(RequestState(callback=reject)).bind(
                REQUEST, httpx.Response(403)
            )


class TestDecodeFailures:
    def test_body_failure_carries_status(self):
        cell: Cell[int] = Cell()
        state = RequestState(body_decoder=JSONDecoder(), status_cell=cell)

        with pytest.raises(DecodeError) as exc_info:
            ResponseBinder(state).bind(REQUEST, httpx.Response(502, content=b"<html>"))

        assert exc_info.value.facet == "body"
        assert exc_info.value.status_code == 502
        assert cell.value is None

    def test_header_failure(self):
        class Limits(BaseModel):
            remaining: int = Field(alias="x-remaining")

        state = RequestState(header_decoder=HeaderDecoder(Limits))

        with pytest.raises(DecodeError) as exc_info:
            ResponseBinder(state).bind(REQUEST, httpx.Response(200))

        assert exc_info.value.facet == "header"


class TestDrain:
    @pytest.mark.parametrize("size", [0, 1, 100, 4096])
    def test_small_bodies_drain_cleanly(self, size: int):
        stream = ChunkStream([b"x" * size] if size else [])
        binder = ResponseBinder(RequestState())

        binder.bind(REQUEST, httpx.Response(200, stream=stream))

        assert binder.phase is BindState.DONE
        assert stream.pulled == (1 if size else 0)

    def test_drain_stops_at_cap(self):
        stream = ChunkStream([b"x" * 1000] * 10)

        ResponseBinder(RequestState()).bind(REQUEST, httpx.Response(200, stream=stream))

        assert stream.pulled == 5

    def test_no_drain_with_decoder(self):
        decoder = CountingDecoder()
        stream = ChunkStream([b"x" * 1000] * 10)

        ResponseBinder(RequestState(body_decoder=decoder)).bind(
            REQUEST, httpx.Response(200, stream=stream)
        )

        assert len(decoder.data) == 10000


class TestThroughFlow:
    def test_callback_chooses_error_shape(self, flow: ReqFlow, recorder):
        recorder.handler = lambda request: httpx.Response(404, json={"error": "nope"})
        ok: dict = {}
        problem: dict = {}
        code: Cell[int] = Cell()

        def choose(ctx: ResponseContext) -> None:
            if ctx.code == 200:
                ctx.bind_json(ok)
            else:
                ctx.bind_json(problem)

        flow.get("http://example.com").callback(choose).code(code).do()

        assert ok == {}
        assert problem == {"error": "nope"}
        assert code.value == 404

    def test_callback_installs_header_target(self, flow: ReqFlow, recorder):
        recorder.handler = lambda request: httpx.Response(200, headers={"X-Id": "9"})
        headers: dict = {}

        flow.get("http://example.com").callback(lambda ctx: ctx.bind_header(headers)).do()

        assert headers["x-id"] == "9"

    def test_large_body_without_decoder(self, flow: ReqFlow, recorder):
        recorder.handler = lambda request: httpx.Response(200, content=b"x" * 100_000)
        code: Cell[int] = Cell()

        flow.get("http://example.com").code(code).do()

        assert code.value == 200

    def test_debug_peek_keeps_body_for_decoder(
        self, flow: ReqFlow, recorder, console_output: io.StringIO
    ):
        recorder.handler = lambda request: httpx.Response(200, json={"id": 1})
        body: dict = {}

        flow.get("http://example.com").debug().bind_json(body).do()

        assert body == {"id": 1}
        assert '"id": 1' in console_output.getvalue()
