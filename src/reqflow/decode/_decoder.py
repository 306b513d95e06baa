from typing import Any, Protocol, get_origin, runtime_checkable

from pydantic import BaseModel, TypeAdapter

from ..models.cell import Cell


@runtime_checkable
class Decoder(Protocol):
    """Capability implemented by every response decoder."""

    def decode(self, source: Any) -> None: ...


def assign(target: Any, value: Any) -> Any:
    """Store a decoded ``value`` into ``target`` and return what was stored.

    ``target`` may be:
        - ``None``: nothing is stored, the value is returned as-is
        - a :class:`Cell`: its ``value`` is set
        - a ``dict``: updated in place from a mapping
        - a ``list``: its contents are replaced
        - a pydantic model class or any other type: validated with pydantic

    Raises:
        TypeError: If ``value`` does not fit a dict or list target.
        pydantic.ValidationError: If validation against a type fails.
    """
    if target is None:
        return value
    if isinstance(target, Cell):
        target.value = value
        return value
    if isinstance(target, dict):
        if not isinstance(value, dict):
            raise TypeError(f"Cannot decode {type(value).__name__} into a dict")
        target.update(value)
        return target
    if isinstance(target, list):
        if not isinstance(value, list):
            raise TypeError(f"Cannot decode {type(value).__name__} into a list")
        target[:] = value
        return target
    if (
        isinstance(target, type)
        and get_origin(target) is None
        and issubclass(target, BaseModel)
    ):
        return target.model_validate(value)
    return TypeAdapter(target).validate_python(value)
