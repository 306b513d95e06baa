import httpx

from ..models.errors import URLParseError
from .constants import LOCALHOST_URL, QUERY_SENTINEL


def normalize_url(url: str) -> str:
    """Give a raw host or URL string an explicit scheme.

    Examples:
        >>> normalize_url("example.com")
        'http://example.com'
        >>> normalize_url(":8080/ping")
        'http://127.0.0.1:8080/ping'
        >>> normalize_url("https://example.com")
        'https://example.com'
    """
    if url.startswith("https://") or url.startswith("http://"):
        return url

    if url.startswith(":") or url.startswith("/"):
        return f"{LOCALHOST_URL}{url}"

    return f"http://{url}"


def parse_url(url: str) -> httpx.URL:
    try:
        return httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise URLParseError(url, str(e)) from e


def strip_query_sentinel(query: str) -> str:
    if query.startswith(QUERY_SENTINEL):
        return query[len(QUERY_SENTINEL) :]
    return query


def append_query(url: str, query: str) -> str:
    # Append only: an existing query string on the url is left alone.
    if not query:
        return url
    return f"{url}?{query}"


def overlay_host(url: httpx.URL, host: str) -> httpx.URL:
    """Replace scheme, host and port of ``url`` with those of ``host``.

    Path, query and fragment of ``url`` are kept.
    """
    target = parse_url(normalize_url(host))
    return url.copy_with(scheme=target.scheme, host=target.host, port=target.port)
