"""Shared fixtures for the catalog tests."""

import asyncio
import threading
from collections.abc import Generator

import pytest
from aiohttp import web

from roundup.common.config import DEFAULT_BASE_URL
from tests.mock_server import (
    PUBLISHERS,
    create_app,
    generate_all_series_html,
    generate_publisher_index_html,
    generate_series_html,
)
from tests.utils import StaticFetcher, find_free_port


@pytest.fixture
def publisher_index_html() -> str:
    """HTML of the publisher index, including one link without href."""
    return generate_publisher_index_html()


@pytest.fixture
def site_pages() -> dict[str, str]:
    """Every page of the mock catalog keyed by its absolute URL.

    Returns:
        Mapping of URL to HTML rooted at the real site's base URL.
    """
    pages = {
        f"{DEFAULT_BASE_URL}/comic-books/reviews": generate_publisher_index_html(),
    }
    for publisher in PUBLISHERS:
        pages[f"{DEFAULT_BASE_URL}{publisher.href}/all-series"] = (
            generate_all_series_html(publisher)
        )
        for series in publisher.series:
            pages[f"{DEFAULT_BASE_URL}{publisher.href}/{series.slug}"] = (
                generate_series_html(publisher, series)
            )
    return pages


@pytest.fixture
def static_fetcher(site_pages: dict[str, str]) -> StaticFetcher:
    """An in-memory fetcher serving the mock catalog."""
    return StaticFetcher(site_pages)


# =============================================================================
# aiohttp test server fixtures
# =============================================================================


class AioHttpTestServer:
    """Wrapper to run aiohttp server in a background thread."""

    def __init__(self, app: web.Application, port: int) -> None:
        self.app = app
        self.port = port
        self.host = "127.0.0.1"
        self._loop: asyncio.AbstractEventLoop | None = None
        self._runner: web.AppRunner | None = None
        self._thread: threading.Thread | None = None
        self._started = threading.Event()

    @property
    def url(self) -> str:
        """Get the base URL of the server."""
        return f"http://{self.host}:{self.port}"

    def start(self) -> None:
        """Start the server in a background thread."""
        self._thread = threading.Thread(target=self._run_server, daemon=True)
        self._thread.start()
        self._started.wait(timeout=5.0)

    def _run_server(self) -> None:
        """Run the server in an asyncio event loop."""
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

        async def start() -> None:
            self._runner = web.AppRunner(self.app)
            await self._runner.setup()
            site = web.TCPSite(self._runner, self.host, self.port)
            await site.start()

        self._loop.run_until_complete(start())
        self._started.set()
        self._loop.run_forever()

    def stop(self) -> None:
        """Stop the server and clean up resources."""
        if self._loop and self._runner:
            runner = self._runner

            future = asyncio.run_coroutine_threadsafe(
                runner.cleanup(), self._loop
            )
            future.result(timeout=5.0)

        if self._loop:
            self._loop.call_soon_threadsafe(self._loop.stop)

        if self._thread:
            self._thread.join(timeout=2.0)


@pytest.fixture
def review_site_server() -> Generator[AioHttpTestServer, None, None]:
    """Create and start an aiohttp test server running the mock review site.

    Yields:
        AioHttpTestServer instance with the mock site running.
    """
    app = create_app()
    port = find_free_port()
    server = AioHttpTestServer(app, port)
    server.start()
    yield server
    server.stop()


@pytest.fixture
def server_url(review_site_server: AioHttpTestServer) -> str:
    """Get the base URL of the test server.

    Returns:
        The base URL string (e.g., "http://127.0.0.1:8080").
    """
    return review_site_server.url
