"""Split a page's anchors into crawlable page links and document links.

The harvested sets are the ground truth the planner must choose from; the
plan validator later rejects anything the planner proposes outside them.
URLs are compared as raw strings: no trailing-slash, query or case
canonicalisation is applied.
"""

from typing import Iterable

from bs4 import BeautifulSoup

from rvo_agent.constants import (
    DEFAULT_SITE_BASE_URL,
    DEFAULT_SITE_DOMAIN,
    DOCUMENT_EXTENSIONS,
    MAX_LINK_TEXT_CHARS,
)
from rvo_agent.models.scraper_models import DocumentType, HarvestedLinks, LinkRecord


def is_document_url(url: str) -> bool:
    """Return True if *url* contains one of the known document extensions."""
    url_lower = url.lower()
    return any(ext in url_lower for ext in DOCUMENT_EXTENSIONS)


def get_document_type(url: str) -> DocumentType:
    """Classify a document by the extension found in its URL.

    ``.doc``/``.xls``/``.ppt`` share the extractor of their OOXML successor.
    """
    url_lower = url.lower()
    if ".pdf" in url_lower:
        return DocumentType.PDF
    if ".doc" in url_lower:
        return DocumentType.DOCX
    if ".xls" in url_lower:
        return DocumentType.XLSX
    if ".ppt" in url_lower:
        return DocumentType.PPTX
    return DocumentType.UNKNOWN


class LinkHarvester:
    """Extract page and document links from raw HTML."""

    def __init__(
        self,
        base_url: str = DEFAULT_SITE_BASE_URL,
        site_domain: str = DEFAULT_SITE_DOMAIN,
    ):
        """Initialize the harvester.

        Args:
            base_url: Site origin that root-relative links are resolved against
            site_domain: Domain a page link must contain to be kept
        """
        self._base_url = base_url.rstrip("/")
        self._site_domain = site_domain

    def resolve(self, href: str) -> str | None:
        """Resolve an ``href`` to an absolute URL, or None if it is not crawlable.

        Args:
            href: Raw attribute value from an anchor

        Returns:
            Absolute URL, or None for fragments, other schemes and
            document-relative paths
        """
        href = href.strip()
        if not href or href.startswith("#"):
            return None
        if href.startswith("//"):
            return f"https:{href}"
        if href.startswith("/"):
            return self._base_url + href
        if href.startswith(("http://", "https://")):
            return href
        return None

    def harvest(
        self, html: str, already_visited: Iterable[str] = ()
    ) -> HarvestedLinks:
        """Harvest page and document links from *html*.

        Args:
            html: Raw markup of the page
            already_visited: URLs fetched earlier in this analysis; excluded

        Returns:
            HarvestedLinks with disjoint, deduplicated page and document links
            in document order
        """
        visited = set(already_visited)
        soup = BeautifulSoup(html, "html.parser")

        page_links: list[LinkRecord] = []
        document_links: list[LinkRecord] = []
        seen_pages: set[str] = set()
        seen_documents: set[str] = set()

        for anchor in soup.find_all("a", href=True):
            url = self.resolve(anchor["href"] or "")
            if url is None or url in visited:
                continue

            text = anchor.get_text(" ", strip=True)[:MAX_LINK_TEXT_CHARS]

            if is_document_url(url):
                if url not in seen_documents:
                    seen_documents.add(url)
                    document_links.append(
                        LinkRecord(
                            url=url,
                            display_text=text,
                            kind="document",
                            document_type=get_document_type(url),
                        )
                    )
                continue

            # Page links without anchor text give the planner nothing to go on
            if not text or self._site_domain not in url:
                continue
            if url not in seen_pages:
                seen_pages.add(url)
                page_links.append(LinkRecord(url=url, display_text=text, kind="page"))

        return HarvestedLinks(page_links=page_links, document_links=document_links)
