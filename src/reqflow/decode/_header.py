from typing import Any

import httpx

from ._decoder import assign


class HeaderDecoder:
    """Decode response headers into ``target`` (see :func:`assign`).

    Header names are lower-cased and repeated headers are joined with ``", "``.
    Pydantic models should declare the header name as the field alias::

        class RateLimit(BaseModel):
            remaining: int = Field(alias="x-ratelimit-remaining")
    """

    name = "header"

    def __init__(self, target: Any = None) -> None:
        self._target = target
        self.value: Any = None

    def decode(self, source: httpx.Headers) -> None:
        self.value = assign(self._target, dict(source.items()))
