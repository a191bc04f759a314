"""Graylog HTTP transport.

Performs GET requests against the Graylog REST API and hands back the raw
status and body. Interpretation of statuses and payloads happens in
`GraylogSearch`; retrying, when enabled, happens only here.
"""

from __future__ import annotations

import random
import time
from typing import Optional, Protocol

import requests

from GraylogSearch.utils.log import log

DEFAULT_TIMEOUT = 30.0
BASE_PAUSE = 0.8
MAX_SLEEP = 8.0
RETRYABLE_STATUS = {429, 500, 502, 503, 504}

HEADERS = {
    "User-Agent": "graylog-search/0.1",
    "Accept": "application/json",
    "X-Requested-By": "graylog-search",
}


class Transport(Protocol):
    """HTTP collaborator used by the search client.

    Only `get` is required; a `close` method, when present, is called when
    the search client is closed.
    """

    def get(self, url: str) -> tuple[int, bytes]:
        """Issue one GET and return ``(status, body)``."""
        ...


class GraylogHttpClient:
    """`Transport` backed by a reusable `requests.Session`.

    Authenticates with HTTP basic auth: either username + password, or an
    API access token sent as the username with the literal password ``token``.
    """

    def __init__(
        self,
        *,
        username: str | None = None,
        password: str | None = None,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_attempts: int = 1,
    ) -> None:
        """Initialize the client with a reusable HTTP session.

        Args:
            username: Graylog user name.
            password: Graylog password.
            token: Graylog API access token; takes precedence over username.
            timeout: Request timeout in seconds.
            max_attempts: Total attempts per request; 1 disables retries.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._session = requests.Session()
        self._session.headers.update(HEADERS)
        if token:
            self._session.auth = (token, "token")
        elif username:
            self._session.auth = (username, password or "")
        self._timeout = timeout
        self._max_attempts = max_attempts

    def close(self) -> None:
        """Close the underlying HTTP session and release pooled connections.
        """
        self._session.close()

    def __enter__(self) -> GraylogHttpClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get(self, url: str) -> tuple[int, bytes]:
        """Issue GET, retrying transient failures when enabled.

        Args:
            url: Fully encoded request URL.

        Returns:
            Tuple of HTTP status code and raw body bytes. A retryable status
            on the last attempt is returned, not raised.

        Raises:
            requests.RequestException: Last transport error when every attempt
                failed without a response.
        """
        last_err: Optional[requests.RequestException] = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                log.debug("Graylog GET attempt %d/%d: %s", attempt, self._max_attempts, url)
                resp = self._session.get(url, timeout=self._timeout)
            except (requests.Timeout, requests.ConnectionError) as error:
                last_err = error
                if attempt < self._max_attempts:
                    self._sleep_backoff(attempt, error=error)
                    continue
                raise

            if resp.status_code in RETRYABLE_STATUS and attempt < self._max_attempts:
                self._sleep_backoff(attempt, error=f"HTTP {resp.status_code}")
                continue
            log.debug("Graylog response: status=%s bytes=%s", resp.status_code, len(resp.content))
            return resp.status_code, resp.content

        assert last_err is not None
        raise last_err

    @staticmethod
    def _sleep_backoff(attempt: int, *, error: object) -> None:
        delay = min(BASE_PAUSE * (2 ** (attempt - 1)) + random.uniform(0, 0.3), MAX_SLEEP)
        log.debug("Graylog retry attempt=%d delay=%.2fs error=%s", attempt, delay, error)
        time.sleep(delay)
