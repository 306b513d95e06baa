import dataclasses
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel


@runtime_checkable
class Encoder(Protocol):
    """Capability implemented by every request encoder.

    ``name`` identifies the content format and is only used to pick a default
    ``Content-Type`` for the request. The assembler never looks past it.
    """

    name: str

    def encode(self, sink: Any) -> None: ...


def to_plain(obj: Any) -> Any:
    """Turn pydantic models and dataclasses into plain Python containers."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", by_alias=True, exclude_none=True)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    return obj


def _param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_params(obj: Any) -> list[tuple[str, str]]:
    """Flatten a mapping, model or pair sequence into ordered string pairs.

    Sequence values expand into repeated keys and ``None`` values are skipped.

    Raises:
        TypeError: If ``obj`` cannot be flattened.
    """
    if isinstance(obj, httpx.QueryParams):
        return list(obj.multi_items())

    obj = to_plain(obj)
    if isinstance(obj, Mapping):
        items = list(obj.items())
    elif isinstance(obj, (list, tuple)):
        items = []
        for item in obj:
            if not isinstance(item, (list, tuple)) or len(item) != 2:
                raise TypeError(f"Expected (key, value) pairs, got {item!r}")
            items.append((item[0], item[1]))
    else:
        raise TypeError(f"Cannot encode {type(obj).__name__} as key/value pairs")

    params: list[tuple[str, str]] = []
    for key, value in items:
        if value is None:
            continue
        if isinstance(value, (list, tuple, set)):
            params.extend((str(key), _param_value(v)) for v in value if v is not None)
        else:
            params.append((str(key), _param_value(value)))
    return params


def render_params(pairs: list[tuple[str, str]]) -> str:
    """Render pairs as an urlencoded string, keeping their order."""
    return urlencode(pairs)
