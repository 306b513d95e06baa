from typing import Any

from ._encoder import render_params, to_params


class QueryEncoder:
    """Encode a mapping, pydantic model or pair sequence as a query string.

    Pairs are appended to the sink; the rendered string is kept as ``query``.
    """

    name = "query"

    def __init__(self, obj: Any) -> None:
        self._obj = obj
        self.query = ""

    def encode(self, sink: list[tuple[str, str]]) -> None:
        pairs = to_params(self._obj)
        sink.extend(pairs)
        self.query = self.end(pairs)

    @staticmethod
    def end(pairs: list[tuple[str, str]]) -> str:
        return render_params(pairs)
