from ._errors import decode_errors, encode_errors
from ._url import (
    append_query,
    normalize_url,
    overlay_host,
    parse_url,
    strip_query_sentinel,
)

__all__ = [
    "append_query",
    "decode_errors",
    "encode_errors",
    "normalize_url",
    "overlay_host",
    "parse_url",
    "strip_query_sentinel",
]
