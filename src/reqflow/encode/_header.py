from typing import Any

from ._encoder import to_params


class HeaderEncoder:
    """Encode a mapping, pydantic model or pair sequence as request headers.

    Pairs are appended to the sink, so repeated keys produce repeated headers.
    Pydantic models are dumped by alias, which lets fields carry the wire name::

        class Auth(BaseModel):
            token: str = Field(alias="X-Token")
    """

    name = "header"

    def __init__(self, obj: Any) -> None:
        self._obj = obj

    def encode(self, sink: list[tuple[str, str]]) -> None:
        sink.extend(to_params(self._obj))
