"""Exception types for catalog scraping errors.

This module defines the exception hierarchy used across the package. There
are two families:

- Assumption exceptions: the markup or a selector does not look the way the
  code expects. These indicate code that needs updating.
- Transient exceptions (FetchError): the network or the server failed. The
  caller may retry with the same or a different query.

A missing sub-node inside an issue row is deliberately not represented here;
it becomes the ``"N/A"`` fallback value instead.
"""

from typing import Any


class RoundupException(Exception):
    """Base class for all errors raised by the roundup package."""


class ScraperAssumptionException(RoundupException):
    """Base class for scraper assumption violations.

    Scrapers make assumptions about website structure and about the selectors
    used to read it. When these assumptions are violated, they should raise
    clear, contextual exceptions that help diagnose the issue.
    """

    def __init__(
        self,
        message: str,
        request_url: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description of the assumption violation.
            request_url: The URL of the request that triggered this error.
            context: Optional dict of additional context (selector, sizes, etc).
        """
        self.message = message
        self.request_url = request_url
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context.

        Returns:
            Formatted error message string.
        """
        parts = [self.message]
        if self.request_url:
            parts.append(f"URL: {self.request_url}")

        if self.context:
            parts.append("Context:")
            for key, value in self.context.items():
                parts.append(f"  {key}: {value}")

        return "\n".join(parts)


class HTMLParseException(ScraperAssumptionException):
    """Raised when a response body cannot be turned into an HTML document.

    lxml recovers from almost any broken markup, so this only happens for
    empty or undecodable input.
    """

    def __init__(self, reason: str, request_url: str, size: int) -> None:
        self.reason = reason
        super().__init__(
            f"Could not parse HTML document: {reason}",
            request_url,
            {"document_size": size},
        )


class SelectorPatternException(ScraperAssumptionException):
    """Raised when a CSS selector cannot be compiled.

    Selectors are compiled once when a SelectorPattern is constructed, so a
    bad selector fails at import time and never while processing rows.

    Attributes:
        selector: The CSS selector that failed to compile.
        description: Human-readable description of what it was meant to select.
    """

    def __init__(self, selector: str, description: str, reason: str) -> None:
        self.selector = selector
        self.description = description
        super().__init__(
            f"Invalid selector for '{description}': {reason}",
            "",
            {"selector": selector, "selector_type": "css"},
        )


# =============================================================================
# Transient exceptions
# =============================================================================


class FetchError(RoundupException):
    """Base class for transport errors that might resolve on retry.

    Fetch errors represent temporary failures like DNS issues, non-2xx
    responses, or timeouts. The core only distinguishes success from
    failure; the subclasses carry detail for display.
    """

    url: str
    message: str


class HTMLResponseAssumptionException(FetchError):
    """Raised when HTTP response has unexpected status code.

    Attributes:
        status_code: The actual HTTP status code received.
        expected_codes: List of status codes that were expected.
        url: The URL that returned the unexpected status.
        message: Human-readable error message.
    """

    def __init__(
        self,
        status_code: int,
        expected_codes: list[int],
        url: str,
    ) -> None:
        self.status_code = status_code
        self.expected_codes = expected_codes
        self.url = url

        expected_str = ", ".join(str(code) for code in expected_codes)
        self.message = (
            f"HTTP {status_code} from {url} (expected one of: {expected_str})"
        )
        super().__init__(self.message)


class RequestTimeoutException(FetchError):
    """Raised when a request times out.

    Attributes:
        url: The URL that timed out.
        timeout_seconds: The timeout duration in seconds.
        message: Human-readable error message.
    """

    def __init__(self, url: str, timeout_seconds: float | None) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.message = f"Request to {url} timed out after {timeout_seconds}s"
        super().__init__(self.message)


class RequestTransportException(FetchError):
    """Raised when a request fails below HTTP (DNS, refused connection, TLS)."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        self.message = f"Request to {url} failed: {reason}"
        super().__init__(self.message)


class ExtractionCancelled(RoundupException):
    """Raised when extraction is abandoned because the stop event was set.

    Attributes:
        completed: Number of rows that finished before the pipeline stopped.
        total: Number of rows that were submitted.
    """

    def __init__(self, completed: int, total: int) -> None:
        self.completed = completed
        self.total = total
        super().__init__(
            f"Extraction cancelled after {completed} of {total} rows"
        )
