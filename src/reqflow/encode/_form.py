import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Optional, Union

import httpx

from ._encoder import to_plain


@dataclass
class FormFile:
    """A file part of a multipart form.

    Either ``content`` (in-memory data) or ``path`` (read at encode time) must
    be given. ``filename`` defaults to the basename of ``path`` or, for
    in-memory content, to the form field name.
    """

    content: Union[bytes, str, None] = None
    path: Union[str, Path, None] = None
    filename: Optional[str] = None
    content_type: Optional[str] = None

    @classmethod
    def from_path(
        cls, path: Union[str, Path], content_type: Optional[str] = None
    ) -> "FormFile":
        return cls(path=path, content_type=content_type)

    def _part(self, field: str) -> tuple[Any, ...]:
        if self.path is not None:
            with open(self.path, "rb") as f:
                data = f.read()
            filename = self.filename or os.path.basename(str(self.path))
        elif self.content is not None:
            data = self.content
            filename = self.filename or field
        else:
            raise ValueError(f"Form file {field!r} has neither content nor path")

        if self.content_type is not None:
            return (filename, data, self.content_type)
        return (filename, data)


class FormEncoder:
    """Encode a mapping as ``multipart/form-data``.

    Values may be text, numbers, ``bytes`` (sent as an in-memory file named
    after the field), :class:`FormFile`, or lists of those for repeated fields.
    After :meth:`encode`, :attr:`content_type` carries the boundary in use.
    """

    name = "form"

    def __init__(self, obj: Any) -> None:
        self._obj = obj
        self._boundary = os.urandom(16).hex()

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self._boundary}"

    def _parts(self) -> list[tuple[str, Any]]:
        obj = to_plain(self._obj)
        if not isinstance(obj, Mapping):
            raise TypeError(f"Cannot encode {type(obj).__name__} as a multipart form")

        parts: list[tuple[str, Any]] = []
        for key, value in obj.items():
            values = value if isinstance(value, (list, tuple)) else [value]
            for item in values:
                if item is None:
                    continue
                field = str(key)
                if isinstance(item, FormFile):
                    parts.append((field, item._part(field)))
                elif isinstance(item, (bytes, bytearray)):
                    parts.append((field, (field, bytes(item))))
                elif isinstance(item, bool):
                    parts.append((field, (None, "true" if item else "false")))
                else:
                    parts.append((field, (None, str(item))))
        return parts

    def encode(self, sink: BinaryIO) -> None:
        parts = self._parts()
        if not parts:
            sink.write(f"--{self._boundary}--\r\n".encode("ascii"))
            return

        # httpx renders the multipart body; the boundary comes from our header.
        rendered = httpx.Request(
            "POST",
            "http://form.invalid",
            headers={"Content-Type": self.content_type},
            files=parts,
        )
        sink.write(rendered.read())
