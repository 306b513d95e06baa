"""Request encoders.

Every encoder implements the :class:`Encoder` capability: a ``name`` and an
``encode(sink)`` method that raises on failure.
"""

from ._body import JSONEncoder, TextEncoder, WWWFormEncoder, XMLEncoder, YAMLEncoder
from ._encoder import Encoder, render_params, to_params, to_plain
from ._form import FormEncoder, FormFile
from ._header import HeaderEncoder
from ._query import QueryEncoder

__all__ = [
    "Encoder",
    "FormEncoder",
    "FormFile",
    "HeaderEncoder",
    "JSONEncoder",
    "QueryEncoder",
    "TextEncoder",
    "WWWFormEncoder",
    "XMLEncoder",
    "YAMLEncoder",
    "render_params",
    "to_params",
    "to_plain",
]
