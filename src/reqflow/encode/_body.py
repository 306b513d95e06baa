import json
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from typing import Any, BinaryIO

import yaml

from ._encoder import render_params, to_params, to_plain


def _write_raw(obj: Any, sink: BinaryIO) -> bool:
    # Pre-serialized payloads are written untouched.
    if isinstance(obj, str):
        sink.write(obj.encode("utf-8"))
        return True
    if isinstance(obj, (bytes, bytearray)):
        sink.write(bytes(obj))
        return True
    return False


class JSONEncoder:
    name = "json"

    def __init__(self, obj: Any) -> None:
        self._obj = obj

    def encode(self, sink: BinaryIO) -> None:
        if _write_raw(self._obj, sink):
            return
        sink.write(json.dumps(to_plain(self._obj), ensure_ascii=False).encode("utf-8"))


class YAMLEncoder:
    name = "yaml"

    def __init__(self, obj: Any) -> None:
        self._obj = obj

    def encode(self, sink: BinaryIO) -> None:
        if _write_raw(self._obj, sink):
            return
        text = yaml.safe_dump(to_plain(self._obj), sort_keys=False, allow_unicode=True)
        sink.write(text.encode("utf-8"))


def _build_element(tag: str, value: Any) -> ET.Element:
    element = ET.Element(tag)
    value = to_plain(value)
    if isinstance(value, Mapping):
        for key, child in value.items():
            if isinstance(child, (list, tuple)):
                for item in child:
                    element.append(_build_element(str(key), item))
            else:
                element.append(_build_element(str(key), child))
    elif value is not None:
        element.text = str(value)
    return element


class XMLEncoder:
    """Encode an ``Element``, a mapping or a pydantic model as XML.

    Mappings are written under a ``root`` element; list values become repeated
    child elements with the same tag.
    """

    name = "xml"

    def __init__(self, obj: Any, root: str = "root") -> None:
        self._obj = obj
        self._root = root

    def encode(self, sink: BinaryIO) -> None:
        if _write_raw(self._obj, sink):
            return
        if isinstance(self._obj, ET.Element):
            element = self._obj
        else:
            element = _build_element(self._root, self._obj)
        sink.write(ET.tostring(element, encoding="utf-8"))


class WWWFormEncoder:
    name = "www-form"

    def __init__(self, obj: Any) -> None:
        self._obj = obj

    def encode(self, sink: BinaryIO) -> None:
        if _write_raw(self._obj, sink):
            return
        sink.write(render_params(to_params(self._obj)).encode("utf-8"))


class TextEncoder:
    """Write text, bytes, numbers or the contents of a readable object as-is."""

    name = "text"

    def __init__(self, obj: Any) -> None:
        self._obj = obj

    def encode(self, sink: BinaryIO) -> None:
        obj = self._obj
        if _write_raw(obj, sink):
            return
        if isinstance(obj, (int, float)):
            sink.write(str(obj).encode("utf-8"))
        elif hasattr(obj, "read"):
            data = obj.read()
            sink.write(data.encode("utf-8") if isinstance(data, str) else data)
        else:
            raise TypeError(f"Cannot use {type(obj).__name__} as a raw request body")
