from contextlib import contextmanager
from typing import Generator, Optional

import httpx

from ..models.errors import DecodeError, EncodeError, ReqFlowError


@contextmanager
def encode_errors(facet: str) -> Generator[None, None, None]:
    """Context manager converting encoder failures into EncodeError.

    Args:
        facet: The request facet being encoded (body, form, query or header).

    Raises:
        EncodeError: For any non reqflow exception raised by the encoder.
    """
    try:
        yield
    except ReqFlowError:
        raise
    except Exception as e:
        raise EncodeError(facet, str(e)) from e


@contextmanager
def decode_errors(
    facet: str, status_code: Optional[int] = None
) -> Generator[None, None, None]:
    """Context manager converting decoder failures into DecodeError.

    Args:
        facet: The response facet being decoded (body or header).
        status_code: Status code of the response being decoded.

    Raises:
        DecodeError: For any exception raised by the decoder, except reqflow
            errors and httpx transport errors met while reading the body.
    """
    try:
        yield
    except (ReqFlowError, httpx.HTTPError):
        raise
    except Exception as e:
        raise DecodeError(facet, str(e), status_code=status_code) from e
