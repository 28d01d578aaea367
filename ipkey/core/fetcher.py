"""Remote value fetcher for the public IP address.

Performs exactly one GET against the IP echo endpoint per call. There
are no retries here; the refresh scheduler decides when to ask again.
"""

import urllib.error
import urllib.request
from typing import Any, Callable, Optional

from .constants import FETCH_TIMEOUT_SEC, IP_ECHO_URL, USER_AGENT, VALUE_DELIMITER
from .validation import validate_fetched_value


class FetchError(Exception):
    """Base class for failures of the remote value fetch."""

    pass


class NetworkError(FetchError):
    """Connection failure or non-success HTTP status."""

    pass


class FetchTimeoutError(NetworkError):
    """The request did not complete within the timeout."""

    pass


class InvalidResponseError(NetworkError):
    """Response body was empty, not text, or not an address."""

    pass


def _is_timeout(exc: BaseException) -> bool:
    """Check whether an exception (or its wrapped reason) is a timeout."""
    if isinstance(exc, TimeoutError):
        return True
    reason = getattr(exc, "reason", None)
    return isinstance(reason, TimeoutError)


class RemoteValueFetcher:
    """Fetches the caller's public address as plain text.

    Attributes:
        url: Endpoint returning the address as the whole response body
        timeout_sec: Bound for connecting and reading
    """

    def __init__(
        self,
        url: str = IP_ECHO_URL,
        timeout_sec: float = FETCH_TIMEOUT_SEC,
        opener: Optional[Callable[..., Any]] = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            url: Endpoint to query
            timeout_sec: Request timeout in seconds
            opener: Replacement for urllib.request.urlopen (tests)
        """
        self.url = url
        self.timeout_sec = timeout_sec
        self._opener = opener or urllib.request.urlopen

    def fetch(self) -> str:
        """Perform one request and return the stripped body.

        Returns:
            Response text with surrounding whitespace removed

        Raises:
            FetchTimeoutError: If the request exceeded the timeout
            InvalidResponseError: If the body is empty or not UTF-8 text
            NetworkError: On connection failure or non-2xx status
        """
        request = urllib.request.Request(
            self.url,
            headers={"User-Agent": USER_AGENT, "Accept": "text/plain"},
            method="GET",
        )

        try:
            with self._opener(request, timeout=self.timeout_sec) as response:
                status = getattr(response, "status", 200)
                if not 200 <= status < 300:
                    raise NetworkError(f"{self.url} answered with HTTP {status}")
                body = response.read()
        except FetchError:
            raise
        except urllib.error.HTTPError as e:
            raise NetworkError(f"{self.url} answered with HTTP {e.code}") from e
        except (urllib.error.URLError, OSError) as e:
            if _is_timeout(e):
                raise FetchTimeoutError(
                    f"{self.url} did not answer within {self.timeout_sec}s"
                ) from e
            raise NetworkError(f"request to {self.url} failed: {e}") from e

        try:
            text = body.decode("utf-8")
        except (UnicodeDecodeError, AttributeError) as e:
            raise InvalidResponseError(f"{self.url} returned a non-text body") from e

        text = text.strip()
        if not text:
            raise InvalidResponseError(f"{self.url} returned an empty body")

        return text


def format_display_value(raw: str) -> str:
    """Validate fetched text and lay it out for the key display.

    A line break is inserted after every delimiter so each dotted
    group gets its own line: "203.0.113.42" -> "203.\\n0.\\n113.\\n42".

    Raises:
        InvalidResponseError: If the text is not a well-formed address
    """
    text = raw.strip() if raw else ""
    result = validate_fetched_value(text)
    if not result.valid:
        raise InvalidResponseError("; ".join(result.errors))

    return text.replace(VALUE_DELIMITER, VALUE_DELIMITER + "\n")
