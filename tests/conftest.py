import io
from typing import Callable, Generator

import httpx
import pytest
from rich.console import Console

from reqflow import Config, DebugPrinter, ReqFlow, close_default_client

Handler = Callable[[httpx.Request], httpx.Response]


class Recorder:
    """MockTransport handler that keeps every request it receives."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Handler = lambda request: httpx.Response(200)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    for name in (
        "REQFLOW_DEBUG",
        "REQFLOW_TRACE",
        "REQFLOW_TIMEOUT",
        "REQFLOW_USER_AGENT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def default_client() -> Generator[None, None, None]:
    yield
    close_default_client()


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def client(recorder: Recorder) -> Generator[httpx.Client, None, None]:
    with httpx.Client(transport=httpx.MockTransport(recorder)) as client:
        yield client


@pytest.fixture
def console_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def printer(console_output: io.StringIO) -> DebugPrinter:
    console = Console(file=console_output, width=200, color_system=None)
    return DebugPrinter(console)


@pytest.fixture
def flow(config: Config, client: httpx.Client, printer: DebugPrinter) -> ReqFlow:
    return ReqFlow(config=config, transport=client, printer=printer)
