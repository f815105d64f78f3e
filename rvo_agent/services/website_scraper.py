"""Page retrieval and parsing for the crawl.

Separated responsibilities so each can be mocked independently in tests:
- PageFetcher: Protocol and httpx implementation for HTTP access
- PageParser: Extract title and boilerplate-free text from HTML
"""

import re
from typing import Protocol

import httpx
import logfire
from bs4 import BeautifulSoup

from rvo_agent.constants import BOILERPLATE_SELECTORS, DEFAULT_HTTP_TIMEOUT_SECONDS
from rvo_agent.models.scraper_models import ParsedPage


class PageFetcher(Protocol):
    """Protocol for fetching pages and documents."""

    async def fetch(self, url: str) -> str:
        """Fetch HTML content from URL.

        Raises:
            ValueError: If the fetch fails
        """
        ...

    async def fetch_bytes(self, url: str) -> bytes:
        """Fetch the raw body of a binary resource.

        Raises:
            ValueError: If the fetch fails
        """
        ...

    async def exists(self, url: str) -> bool:
        """Check URL without downloading its body. Never raises."""
        ...


class HttpxPageFetcher:
    """Fetch pages and documents using httpx."""

    # Default headers to mimic a real browser
    DEFAULT_HEADERS = {
        "User-Agent": (
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "nl-NL,nl;q=0.9,en;q=0.8",
    }

    def __init__(
        self,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        headers: dict[str, str] | None = None,
    ):
        """Initialize the page fetcher.

        Args:
            timeout: HTTP timeout in seconds
            headers: Optional custom headers (defaults to browser-like headers)
        """
        self._timeout = timeout
        self._headers = headers or self.DEFAULT_HEADERS.copy()

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._timeout,
            follow_redirects=True,
            headers=self._headers,
        )

    async def _get(self, url: str) -> httpx.Response:
        try:
            async with self._client() as client:
                response = await client.get(url)
                response.raise_for_status()
                return response
        except httpx.HTTPError as e:
            raise ValueError(f"Failed to fetch {url}: {e}") from e

    async def fetch(self, url: str) -> str:
        """Fetch a page as text.

        Args:
            url: The URL to fetch

        Returns:
            HTML content as string

        Raises:
            ValueError: On network errors or non-2xx status
        """
        response = await self._get(url)
        logfire.info(
            "Page fetched (httpx)",
            url=url,
            status_code=response.status_code,
            content_length=len(response.text),
        )
        return response.text

    async def fetch_bytes(self, url: str) -> bytes:
        """Fetch a document body as bytes.

        Args:
            url: The URL to fetch

        Returns:
            Raw response body

        Raises:
            ValueError: On network errors or non-2xx status
        """
        response = await self._get(url)
        logfire.info(
            "Document fetched (httpx)",
            url=url,
            status_code=response.status_code,
            content_length=len(response.content),
        )
        return response.content

    async def exists(self, url: str) -> bool:
        """Check whether URL answers a HEAD request with a 2xx status.

        Args:
            url: The URL to check

        Returns:
            True if the resource exists, False on any error
        """
        try:
            async with self._client() as client:
                response = await client.head(url)
        except httpx.HTTPError as e:
            logfire.info("Existence check failed", url=url, error=str(e))
            return False
        return response.is_success


class PageParser:
    """Parse HTML pages to extract title and readable text."""

    def parse(self, html: str, url: str) -> ParsedPage:
        """Parse HTML into a title and normalized text.

        The title is the first ``<h1>``, falling back to ``<title>``.
        Navigation, header, footer, menu and sidebar regions are dropped
        before the text is taken from ``<body>``.

        Args:
            html: Raw HTML content
            url: The URL the HTML was fetched from

        Returns:
            ParsedPage with whitespace-collapsed text
        """
        soup = BeautifulSoup(html, "html.parser")

        title = ""
        h1 = soup.find("h1")
        if h1 is not None:
            title = h1.get_text(" ", strip=True)
        if not title and soup.title and soup.title.string:
            title = soup.title.string.strip()

        # Remove non-content elements
        for tag in soup(["script", "style", "noscript"]):
            tag.decompose()
        # extract() rather than decompose(): selected regions may be nested
        for tag in soup.select(BOILERPLATE_SELECTORS):
            tag.extract()

        container = soup.body or soup
        text = container.get_text(" ")
        text = re.sub(r"\s+", " ", text).strip()

        return ParsedPage(url=url, title=title, raw_markup=html, normalized_text=text)
