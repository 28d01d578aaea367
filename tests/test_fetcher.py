"""Tests for the remote value fetcher and display formatting.

Verifies that:
- The endpoint is queried once with the configured timeout
- HTTP, connection and timeout failures map to the error taxonomy
- Empty or non-text bodies are rejected
- Addresses are split one dotted group per line
"""

import urllib.error

import pytest

from ipkey.core.constants import FETCH_TIMEOUT_SEC, IP_ECHO_URL
from ipkey.core.fetcher import (
    FetchError,
    FetchTimeoutError,
    InvalidResponseError,
    NetworkError,
    RemoteValueFetcher,
    format_display_value,
)


class FakeResponse:
    """Context-managed stand-in for an HTTP response."""

    def __init__(self, body: bytes, status: int = 200) -> None:
        self._body = body
        self.status = status

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc) -> None:
        return None

    def read(self) -> bytes:
        return self._body


def opener_returning(body: bytes, status: int = 200):
    calls = []

    def opener(request, timeout):
        calls.append((request, timeout))
        return FakeResponse(body, status)

    opener.calls = calls
    return opener


def opener_raising(error: BaseException):
    def opener(request, timeout):
        raise error

    return opener


class TestErrorTaxonomy:
    """All failures are NetworkErrors and FetchErrors."""

    def test_hierarchy(self) -> None:
        assert issubclass(NetworkError, FetchError)
        assert issubclass(FetchTimeoutError, NetworkError)
        assert issubclass(InvalidResponseError, NetworkError)


class TestFetch:
    """Tests for RemoteValueFetcher.fetch()."""

    def test_returns_stripped_body(self) -> None:
        fetcher = RemoteValueFetcher(opener=opener_returning(b"203.0.113.42\n"))
        assert fetcher.fetch() == "203.0.113.42"

    def test_requests_fixed_endpoint_with_timeout(self) -> None:
        opener = opener_returning(b"203.0.113.42")
        RemoteValueFetcher(opener=opener).fetch()

        assert len(opener.calls) == 1
        request, timeout = opener.calls[0]
        assert request.full_url == IP_ECHO_URL
        assert request.get_method() == "GET"
        assert timeout == FETCH_TIMEOUT_SEC == 5.0

    def test_non_success_status(self) -> None:
        fetcher = RemoteValueFetcher(opener=opener_returning(b"x", status=503))
        with pytest.raises(NetworkError):
            fetcher.fetch()

    def test_http_error(self) -> None:
        error = urllib.error.HTTPError(IP_ECHO_URL, 503, "Service Unavailable", None, None)
        fetcher = RemoteValueFetcher(opener=opener_raising(error))
        with pytest.raises(NetworkError, match="503"):
            fetcher.fetch()

    def test_connection_failure(self) -> None:
        fetcher = RemoteValueFetcher(
            opener=opener_raising(urllib.error.URLError("Name or service not known"))
        )
        with pytest.raises(NetworkError) as exc_info:
            fetcher.fetch()
        assert not isinstance(exc_info.value, FetchTimeoutError)

    def test_socket_timeout(self) -> None:
        fetcher = RemoteValueFetcher(opener=opener_raising(TimeoutError("timed out")))
        with pytest.raises(FetchTimeoutError):
            fetcher.fetch()

    def test_wrapped_timeout(self) -> None:
        fetcher = RemoteValueFetcher(
            opener=opener_raising(urllib.error.URLError(TimeoutError("timed out")))
        )
        with pytest.raises(FetchTimeoutError):
            fetcher.fetch()

    def test_empty_body(self) -> None:
        fetcher = RemoteValueFetcher(opener=opener_returning(b"  \n"))
        with pytest.raises(InvalidResponseError):
            fetcher.fetch()

    def test_non_text_body(self) -> None:
        fetcher = RemoteValueFetcher(opener=opener_returning(b"\xff\xfe\x00"))
        with pytest.raises(InvalidResponseError):
            fetcher.fetch()


class TestFormatDisplayValue:
    """Tests for format_display_value()."""

    def test_ipv4_one_group_per_line(self) -> None:
        assert format_display_value("203.0.113.42") == "203.\n0.\n113.\n42"

    def test_surrounding_whitespace_ignored(self) -> None:
        assert format_display_value(" 10.0.0.1\n") == "10.\n0.\n0.\n1"

    def test_ipv6_unchanged(self) -> None:
        assert format_display_value("2001:db8::1") == "2001:db8::1"

    @pytest.mark.parametrize(
        "raw",
        ["", "   ", "not an ip", "<html><body>error</body></html>", "1.2.3", "203.0.113.42 extra"],
    )
    def test_malformed_text_rejected(self, raw: str) -> None:
        with pytest.raises(InvalidResponseError):
            format_display_value(raw)
