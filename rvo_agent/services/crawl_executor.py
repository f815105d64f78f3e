"""Execute a validated scraping plan.

Targets are fetched one at a time with a fixed pause between consecutive
successful fetches, so the source site never sees concurrent requests from
one analysis. Every per-target failure is logged and skipped.
"""

import asyncio
from urllib.parse import urlparse

import logfire

from rvo_agent.constants import (
    DEFAULT_MAX_PLAN_DOCUMENTS,
    DEFAULT_MAX_PLAN_PAGES,
    POLITE_REQUEST_DELAY_SECONDS,
)
from rvo_agent.models.plan_models import PlanTarget, ScrapingPlan
from rvo_agent.models.scraper_models import CrawlResult, DocumentRecord, PageRecord
from rvo_agent.services.document_extractors import get_extractor
from rvo_agent.services.link_harvester import get_document_type
from rvo_agent.services.website_scraper import PageFetcher, PageParser


def document_title(url: str) -> str:
    """Final path segment of *url*, or "Document" when there is none."""
    return urlparse(url).path.rsplit("/", 1)[-1] or "Document"


class CrawlExecutor:
    """Fetch the main page, sub-pages and documents of a plan."""

    def __init__(
        self,
        fetcher: PageFetcher,
        parser: PageParser | None = None,
        visited: set[str] | None = None,
        delay_seconds: float = POLITE_REQUEST_DELAY_SECONDS,
        default_max_pages: int = DEFAULT_MAX_PLAN_PAGES,
        default_max_documents: int = DEFAULT_MAX_PLAN_DOCUMENTS,
    ):
        """Initialize the executor.

        Args:
            fetcher: Fetcher for pages and documents
            parser: Page parser (defaults to PageParser)
            visited: URLs already fetched in this analysis; updated in place
            delay_seconds: Pause between consecutive successful target fetches
            default_max_pages: Sub-page budget when the plan gives none
            default_max_documents: Document budget when the plan gives none
        """
        self._fetcher = fetcher
        self._parser = parser or PageParser()
        self.visited = visited if visited is not None else set()
        self._delay_seconds = delay_seconds
        self._default_max_pages = default_max_pages
        self._default_max_documents = default_max_documents
        self._pause_pending = False

    async def _pause(self) -> None:
        """Wait before a target fetch if the previous target fetch succeeded."""
        if self._pause_pending:
            self._pause_pending = False
            await asyncio.sleep(self._delay_seconds)

    async def execute(self, plan: ScrapingPlan) -> CrawlResult:
        """Retrieve every target of *plan* within its page/document budgets.

        Args:
            plan: A validated scraping plan

        Returns:
            CrawlResult with the pages and documents that could be retrieved
        """
        result = CrawlResult()

        main_page = await self._fetch_main_page(plan)
        if main_page is not None:
            result.pages.append(main_page)

        max_pages = plan.max_pages or self._default_max_pages
        for target in plan.sub_pages[:max_pages]:
            page = await self._fetch_sub_page(target)
            if page is not None:
                result.pages.append(page)

        max_documents = plan.max_documents or self._default_max_documents
        for target in plan.documents[:max_documents]:
            document = await self._fetch_document(target)
            if document is not None:
                result.documents.append(document)

        logfire.info(
            "Scraping plan executed",
            url=plan.main_page.url,
            pages=len(result.pages),
            documents=len(result.documents),
            visited=len(self.visited),
        )
        return result

    async def _fetch_main_page(self, plan: ScrapingPlan) -> PageRecord | None:
        url = plan.main_page.url
        try:
            html = await self._fetcher.fetch(url)
            parsed = self._parser.parse(html, url)
        except Exception as e:
            logfire.warning("Skipping main page after fetch error", url=url, error=str(e))
            return None

        self.visited.add(url)
        return PageRecord(
            url=url,
            title=parsed.title,
            raw_markup=parsed.raw_markup,
            normalized_text=parsed.normalized_text,
            priority=plan.main_page.priority,
            reason="Main subsidy page",
        )

    async def _fetch_sub_page(self, target: PlanTarget) -> PageRecord | None:
        if target.url in self.visited:
            logfire.info("Skipping already visited page", url=target.url)
            return None

        try:
            await self._pause()
            if not await self._fetcher.exists(target.url):
                logfire.info("Skipping page that failed the existence check", url=target.url)
                return None
            html = await self._fetcher.fetch(target.url)
            parsed = self._parser.parse(html, target.url)
        except Exception as e:
            logfire.warning("Skipping page after fetch error", url=target.url, error=str(e))
            return None

        self.visited.add(target.url)
        self._pause_pending = True
        return PageRecord(
            url=target.url,
            title=parsed.title,
            raw_markup=parsed.raw_markup,
            normalized_text=parsed.normalized_text,
            priority=target.priority,
            reason=target.reason,
        )

    async def _fetch_document(self, target: PlanTarget) -> DocumentRecord | None:
        if target.url in self.visited:
            logfire.info("Skipping already visited document", url=target.url)
            return None

        document_type = get_document_type(target.url)
        try:
            await self._pause()
            data = await self._fetcher.fetch_bytes(target.url)
        except Exception as e:
            logfire.warning("Skipping document after fetch error", url=target.url, error=str(e))
            return None

        self.visited.add(target.url)
        self._pause_pending = True

        text = get_extractor(document_type)(data)
        if not text:
            logfire.info(
                "Document yielded no text",
                url=target.url,
                document_type=document_type.value,
            )
        return DocumentRecord(
            url=target.url,
            title=document_title(target.url),
            extracted_text=text,
            document_type=document_type,
            priority=target.priority,
            reason=target.reason,
        )
