"""Runtime configuration for catalog navigation.

Holds the settings the CLI collects from its options and passes to the
navigator and request manager.
"""

from __future__ import annotations

from dataclasses import dataclass

from roundup.common.matching import DEFAULT_THRESHOLD

DEFAULT_BASE_URL = "https://comicbookroundup.com"


@dataclass
class RoundupConfig:
    """Settings for one navigation session.

    Attributes:
        base_url: Site root; every listing URL is built from it.
        timeout: HTTP timeout in seconds. None disables the timeout.
        max_workers: Extraction worker count. None uses the pipeline default.
        threshold: Minimum similarity (exclusive) for a title to match a query.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = 30.0
    max_workers: int | None = None
    threshold: float = DEFAULT_THRESHOLD

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
