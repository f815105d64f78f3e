"""Models for harvested links and crawled pages/documents."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Literal


class DocumentType(str, Enum):
    """Document format, derived from the URL extension."""

    PDF = "pdf"
    DOCX = "docx"
    XLSX = "xlsx"
    PPTX = "pptx"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class LinkRecord:
    """A link found in a page's markup."""

    url: str
    display_text: str
    kind: Literal["page", "document"]
    document_type: DocumentType | None = None


@dataclass
class HarvestedLinks:
    """Disjoint page and document link sets from a single harvest."""

    page_links: List[LinkRecord] = field(default_factory=list)
    document_links: List[LinkRecord] = field(default_factory=list)

    @property
    def page_urls(self) -> set[str]:
        return {link.url for link in self.page_links}

    @property
    def document_urls(self) -> set[str]:
        return {link.url for link in self.document_links}


@dataclass
class ParsedPage:
    """Title and boilerplate-free text of one HTML page."""

    url: str
    title: str
    raw_markup: str
    normalized_text: str


@dataclass
class PageRecord:
    """A page retrieved while executing a scraping plan."""

    url: str
    title: str
    raw_markup: str
    normalized_text: str
    priority: str
    reason: str


@dataclass
class DocumentRecord:
    """A document retrieved while executing a scraping plan.

    ``extracted_text`` may be empty when extraction failed; such records are
    kept but left out of the classifier input.
    """

    url: str
    title: str
    extracted_text: str
    document_type: DocumentType
    priority: str
    reason: str


@dataclass
class CrawlResult:
    """Everything retrieved for one plan."""

    pages: List[PageRecord] = field(default_factory=list)
    documents: List[DocumentRecord] = field(default_factory=list)
