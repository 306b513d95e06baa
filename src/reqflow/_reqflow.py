from logging import getLogger
from typing import Optional

from opentelemetry.trace import Tracer

from ._config import Config
from ._dataflow import DataFlow, DebugPrinter, Transport
from ._utils._logs import setup_logging


class ReqFlow:
    """Factory for :class:`DataFlow` builders sharing a config and transport.

    The factory holds no per-request state: each call returns a new builder,
    so one instance can be shared freely.

    Examples:
        >>> flow = ReqFlow(transport=httpx.Client(), debug=True)
        >>> body = {}
        >>> flow.get("api.example.com/items").set_query({"page": 2}).bind_json(body).do()
    """

    def __init__(
        self,
        *,
        config: Optional[Config] = None,
        transport: Optional[Transport] = None,
        debug: Optional[bool] = None,
        trace: Optional[bool] = None,
        printer: Optional[DebugPrinter] = None,
        tracer: Optional[Tracer] = None,
    ) -> None:
        config = config or Config.from_env()
        overrides = {
            key: value
            for key, value in (("debug", debug), ("trace", trace))
            if value is not None
        }
        self._config = config.model_copy(update=overrides) if overrides else config
        self._transport = transport
        self._printer = printer
        self._tracer = tracer

        setup_logging(self._config.debug)
        log = getLogger("reqflow")

        log.debug("CONFIG:")
        log.debug(f"{self._config.model_dump()}\n")

    @property
    def config(self) -> Config:
        return self._config

    def new(self, method: str = "", url: str = "") -> DataFlow:
        return DataFlow(
            method,
            url,
            config=self._config,
            transport=self._transport,
            printer=self._printer,
            tracer=self._tracer,
        )

    def get(self, url: str = "") -> DataFlow:
        return self.new("GET", url)

    def post(self, url: str = "") -> DataFlow:
        return self.new("POST", url)

    def put(self, url: str = "") -> DataFlow:
        return self.new("PUT", url)

    def patch(self, url: str = "") -> DataFlow:
        return self.new("PATCH", url)

    def delete(self, url: str = "") -> DataFlow:
        return self.new("DELETE", url)

    def head(self, url: str = "") -> DataFlow:
        return self.new("HEAD", url)

    def options(self, url: str = "") -> DataFlow:
        return self.new("OPTIONS", url)
