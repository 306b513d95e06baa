import httpx
import pytest

from reqflow import URLParseError
from reqflow._utils import (
    append_query,
    normalize_url,
    overlay_host,
    parse_url,
    strip_query_sentinel,
)


class TestNormalizeUrl:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("example.com", "http://example.com"),
            ("example.com:8080/path", "http://example.com:8080/path"),
            (":8080", "http://127.0.0.1:8080"),
            (":8080/ping", "http://127.0.0.1:8080/ping"),
            ("/ping", "http://127.0.0.1/ping"),
            ("http://example.com", "http://example.com"),
            ("https://example.com/a?b=1", "https://example.com/a?b=1"),
        ],
    )
    def test_normalize(self, raw: str, expected: str):
        assert normalize_url(raw) == expected

    @pytest.mark.parametrize("raw", ["example.com", ":80", "/x", "https://a.b"])
    def test_normalize_is_idempotent(self, raw: str):
        once = normalize_url(raw)
        assert normalize_url(once) == once

    @pytest.mark.parametrize("raw", ["example.com", ":8080", "/ping"])
    def test_normalized_url_parses(self, raw: str):
        url = httpx.URL(normalize_url(raw))
        assert url.scheme == "http"
        assert url.host


class TestParseUrl:
    def test_invalid_port(self):
        with pytest.raises(URLParseError) as exc_info:
            parse_url("http://example.com:abc")

        assert exc_info.value.url == "http://example.com:abc"
        assert isinstance(exc_info.value, ValueError)


class TestQueryHelpers:
    def test_strip_sentinel_once(self):
        assert strip_query_sentinel("?a=1") == "a=1"
        assert strip_query_sentinel("??a=1") == "?a=1"
        assert strip_query_sentinel("a=1") == "a=1"

    def test_append_query_does_not_merge(self):
        assert append_query("http://x.com", "a=1") == "http://x.com?a=1"
        assert append_query("http://x.com?b=2", "a=1") == "http://x.com?b=2?a=1"
        assert append_query("http://x.com", "") == "http://x.com"


class TestOverlayHost:
    def test_keeps_path_and_query(self):
        url = httpx.URL("http://old.com:81/api/v1?x=1")

        result = overlay_host(url, "https://new.com:8443")

        assert str(result) == "https://new.com:8443/api/v1?x=1"

    def test_bare_port_targets_localhost(self):
        result = overlay_host(httpx.URL("http://old.com/ping"), ":9000")

        assert str(result) == "http://127.0.0.1:9000/ping"

    def test_invalid_host(self):
        with pytest.raises(URLParseError):
            overlay_host(httpx.URL("http://old.com"), "example.com:abc")
