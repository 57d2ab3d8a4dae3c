"""Fetching listing pages over HTTP.

The navigator only needs something with a ``fetch(url)`` method that returns
the response body (the Fetcher protocol). SyncRequestManager is the default
implementation; it owns an httpx.Client and maps transport failures onto the
FetchError hierarchy.
Tests substitute an in-memory fetcher.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from roundup.common.exceptions import (
    HTMLResponseAssumptionException,
    RequestTimeoutException,
    RequestTransportException,
)

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "roundup/0.1 (+https://comicbookroundup.com)"


class Fetcher(Protocol):
    """Anything that can turn a URL into a response body."""

    def fetch(self, url: str) -> bytes | str:
        """Fetch ``url`` and return the body, raw or decoded.

        Raises:
            FetchError: On any transport failure or non-2xx status.
        """
        ...


class SyncRequestManager:
    """Manages HTTP requests for the catalog navigator.

    This class encapsulates:

    - httpx.Client lifecycle
    - URL fetching
    - Translation of httpx failures into FetchError subclasses

    Example::

        with SyncRequestManager(timeout=30.0) as manager:
            body = manager.fetch("https://comicbookroundup.com/comic-books/reviews")
    """

    def __init__(
        self,
        timeout: float | None = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the request manager.

        Args:
            timeout: Request timeout in seconds. None means no timeout.
            client: Optional preconfigured client. The manager does not close
                clients it did not create.
        """
        self.timeout = timeout
        if client is not None:
            self._client = client
            self._owns_client = False
        else:
            self._client = httpx.Client(
                timeout=timeout,
                follow_redirects=True,
                headers={"User-Agent": DEFAULT_USER_AGENT},
            )
            self._owns_client = True

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> SyncRequestManager:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit - closes the client."""
        self.close()

    def fetch(self, url: str) -> bytes:
        """Fetch a URL and return its undecoded body.

        Args:
            url: Absolute URL to GET.

        Returns:
            The raw response body. Decoding is left to the HTML parser,
            which honors the page's own charset declaration.

        Raises:
            HTMLResponseAssumptionException: If the status code is not 2xx.
            RequestTimeoutException: If the request times out.
            RequestTransportException: For DNS, connection and other
                transport errors.
        """
        logger.debug(f"GET {url}")
        try:
            http_response = self._client.get(url)
        except httpx.TimeoutException as e:
            raise RequestTimeoutException(
                url=url, timeout_seconds=self.timeout
            ) from e
        except httpx.HTTPError as e:
            raise RequestTransportException(url=url, reason=str(e)) from e

        if not http_response.is_success:
            raise HTMLResponseAssumptionException(
                status_code=http_response.status_code,
                expected_codes=[200],
                url=url,
            )

        logger.debug(
            f"Fetched {url}: {http_response.status_code}, "
            f"{len(http_response.content)} bytes"
        )
        return http_response.content
