import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from ._utils.constants import (
    DEFAULT_TIMEOUT,
    ENV_DEBUG,
    ENV_TIMEOUT,
    ENV_TRACE,
    ENV_USER_AGENT,
    SDK_VERSION,
)

_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Options shared by every request a :class:`ReqFlow` hands out.

    Attributes:
        debug: Print each request and response through the debug printer.
        trace: Wrap the transport in an OpenTelemetry client span.
        timeout: Default transport timeout in seconds for freshly built
            requests. ``None`` disables it. A per-request timeout or context
            takes precedence.
        user_agent: ``User-Agent`` header set on freshly built requests.
    """

    debug: bool = False
    trace: bool = False
    timeout: Optional[float] = DEFAULT_TIMEOUT
    user_agent: str = f"reqflow/{SDK_VERSION}"

    @classmethod
    def from_env(cls) -> "Config":
        """Build a config from ``REQFLOW_*`` variables, reading ``.env`` first."""
        load_dotenv()
        values: dict[str, object] = {}

        debug = os.getenv(ENV_DEBUG)
        if debug is not None:
            values["debug"] = debug.strip().lower() in _TRUTHY

        trace = os.getenv(ENV_TRACE)
        if trace is not None:
            values["trace"] = trace.strip().lower() in _TRUTHY

        timeout = os.getenv(ENV_TIMEOUT)
        if timeout:
            values["timeout"] = float(timeout) if float(timeout) > 0 else None

        user_agent = os.getenv(ENV_USER_AGENT)
        if user_agent:
            values["user_agent"] = user_agent

        return cls.model_validate(values)
