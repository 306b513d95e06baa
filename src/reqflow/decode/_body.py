import json
import xml.etree.ElementTree as ET
from typing import Any, BinaryIO, Optional

import yaml

from ..models.cell import Cell
from ._decoder import assign


class JSONDecoder:
    """Decode a JSON body into ``target`` (see :func:`assign`)."""

    name = "json"

    def __init__(self, target: Any = None) -> None:
        self._target = target
        self.value: Any = None

    def decode(self, source: BinaryIO) -> None:
        self.value = assign(self._target, json.loads(source.read()))


class YAMLDecoder:
    name = "yaml"

    def __init__(self, target: Any = None) -> None:
        self._target = target
        self.value: Any = None

    def decode(self, source: BinaryIO) -> None:
        self.value = assign(self._target, yaml.safe_load(source.read()))


def element_to_value(element: ET.Element) -> Any:
    children = list(element)
    if not children:
        return element.text
    result: dict[str, Any] = {}
    for child in children:
        value = element_to_value(child)
        if child.tag in result:
            existing = result[child.tag]
            if not isinstance(existing, list):
                result[child.tag] = existing = [existing]
            existing.append(value)
        else:
            result[child.tag] = value
    return result


class XMLDecoder:
    """Decode an XML body.

    Without a target, or with a :class:`Cell`, the parsed root ``Element`` is
    kept. Any other target receives the element converted to plain containers,
    children keyed by tag and repeated tags collected into lists.
    """

    name = "xml"

    def __init__(self, target: Any = None) -> None:
        self._target = target
        self.value: Any = None

    def decode(self, source: BinaryIO) -> None:
        element = ET.fromstring(source.read())
        if self._target is None or isinstance(self._target, Cell):
            self.value = assign(self._target, element)
            return
        self.value = assign(self._target, element_to_value(element))


class BodyDecoder:
    """Keep the raw body.

    ``target`` may be one of the types ``bytes``, ``str``, ``int`` or
    ``float`` (the body is converted), a ``bytearray`` (extended), a writable
    object (written to) or a :class:`Cell` (set to the body text).
    """

    name = "body"

    def __init__(self, target: Any = None, encoding: Optional[str] = None) -> None:
        self._target = target
        self._encoding = encoding or "utf-8"
        self.value: Any = None

    def decode(self, source: BinaryIO) -> None:
        data = source.read()
        target = self._target

        if target is None or target is bytes:
            self.value = data
        elif target is str:
            self.value = data.decode(self._encoding)
        elif target in (int, float):
            self.value = target(data.decode(self._encoding).strip())
        elif isinstance(target, bytearray):
            target.extend(data)
            self.value = target
        elif isinstance(target, Cell):
            target.value = self.value = data.decode(self._encoding)
        elif hasattr(target, "write"):
            target.write(data)
            self.value = target
        else:
            raise TypeError(f"Cannot decode a body into {type(target).__name__}")
