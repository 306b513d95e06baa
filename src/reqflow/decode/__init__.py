"""Response decoders.

Every decoder implements the :class:`Decoder` capability: ``decode(source)``
raising on failure, with the result stored into the target given at
construction and exposed as ``value``.
"""

from ._body import BodyDecoder, JSONDecoder, XMLDecoder, YAMLDecoder
from ._decoder import Decoder, assign
from ._header import HeaderDecoder

__all__ = [
    "BodyDecoder",
    "Decoder",
    "HeaderDecoder",
    "JSONDecoder",
    "XMLDecoder",
    "YAMLDecoder",
    "assign",
]
