"""Scraping plan synthesis and validation.

The planner shows the oracle the main page plus every link harvested from
it and asks for a JSON plan. The oracle is untrusted: its reply is parsed
strictly, replaced by a main-page-only plan if unusable, and otherwise
filtered against the harvested links before anything is crawled.
"""

import json
from dataclasses import dataclass
from typing import Iterable

import logfire
from pydantic import ValidationError

from rvo_agent.config import Settings, get_settings
from rvo_agent.models.plan_models import MainPageTarget, PlanTarget, ScrapingPlan
from rvo_agent.models.scraper_models import HarvestedLinks, ParsedPage
from rvo_agent.services.link_harvester import LinkHarvester
from rvo_agent.services.oracle_service import ReasoningOracle
from rvo_agent.services.prompt_templates import load_prompt, render_prompt
from rvo_agent.services.website_scraper import PageFetcher, PageParser


@dataclass
class PlanningOutcome:
    """A validated plan together with the ground truth it was checked against."""

    plan: ScrapingPlan
    harvested: HarvestedLinks
    main_page: ParsedPage


def create_fallback_plan(main_url: str, title: str) -> ScrapingPlan:
    """Plan that only revisits the main page."""
    return ScrapingPlan(
        main_page=MainPageTarget(url=main_url, title=title, priority="high"),
        sub_pages=[],
        documents=[],
        max_pages=1,
        focus_keywords=[],
    )


def validate_scraping_plan(
    plan: ScrapingPlan,
    harvested_page_urls: Iterable[str],
    harvested_document_urls: Iterable[str] | None = None,
) -> ScrapingPlan:
    """Drop planned targets that were never present on the page.

    Sub-pages must exactly match a harvested page link. Documents are passed
    through unless *harvested_document_urls* is given, in which case they are
    filtered the same way.

    Args:
        plan: Plan as proposed by the oracle
        harvested_page_urls: Page links found on the main page
        harvested_document_urls: Document links found on the main page, or
            None to leave documents unchecked

    Returns:
        A new plan; *plan* itself is not modified
    """
    page_urls = set(harvested_page_urls)
    valid_sub_pages = [t for t in plan.sub_pages if t.url in page_urls]
    dropped = [t.url for t in plan.sub_pages if t.url not in page_urls]

    documents = list(plan.documents)
    if harvested_document_urls is not None:
        document_urls = set(harvested_document_urls)
        dropped += [t.url for t in documents if t.url not in document_urls]
        documents = [t for t in documents if t.url in document_urls]

    if dropped:
        logfire.warning(
            "Dropped planned targets not found on the page",
            dropped_count=len(dropped),
            dropped_urls=dropped,
        )

    return plan.model_copy(update={"sub_pages": valid_sub_pages, "documents": documents})


def _format_links(harvested: HarvestedLinks) -> tuple[str, str]:
    page_lines = "\n".join(
        f"- {link.url} ({link.display_text})" for link in harvested.page_links
    )
    document_lines = "\n".join(
        f"- {link.url} ({link.display_text}) [{link.document_type.value.upper()}]"
        for link in harvested.document_links
    )
    return page_lines, document_lines


def _main_page_target(proposed: object, main_page: ParsedPage) -> dict:
    """Main page entry pinned to the analyzed URL.

    The oracle's title and priority are kept when they are strings; its URL
    never is.
    """
    proposed = proposed if isinstance(proposed, dict) else {}
    title = proposed.get("title")
    priority = proposed.get("priority")
    if proposed.get("url") not in (None, main_page.url):
        logfire.warning(
            "Replaced main page URL proposed by the planner",
            proposed_url=str(proposed.get("url")),
            url=main_page.url,
        )
    return {
        "url": main_page.url,
        "title": title if isinstance(title, str) and title else main_page.title,
        "priority": priority if isinstance(priority, str) and priority else "high",
    }


def _valid_targets(entries: list, field: str) -> list[PlanTarget]:
    """Validate plan entries one by one, dropping the malformed ones."""
    targets: list[PlanTarget] = []
    malformed = 0
    for entry in entries:
        try:
            targets.append(PlanTarget.model_validate(entry))
        except ValidationError:
            malformed += 1
    if malformed:
        logfire.warning(
            "Dropped malformed plan entries", field=field, dropped_count=malformed
        )
    return targets


def parse_scraping_plan(response: str, main_page: ParsedPage) -> ScrapingPlan | None:
    """Strictly parse the oracle's plan reply.

    The main page is always the analyzed page. Malformed sub-page or document
    entries are dropped individually and null limits fall back to the
    defaults.

    Returns:
        The plan, or None if the reply is not a JSON object of the right shape
    """
    try:
        data = json.loads(response)
    except (ValueError, TypeError, RecursionError):
        return None
    if not isinstance(data, dict):
        return None

    data["main_page"] = _main_page_target(data.get("main_page"), main_page)
    for key in ("max_pages", "max_documents"):
        if key in data and data[key] is None:
            del data[key]
    for key in ("sub_pages", "documents"):
        if isinstance(data.get(key), list):
            data[key] = _valid_targets(data[key], key)

    try:
        return ScrapingPlan.model_validate(data)
    except ValidationError:
        return None


class PlanSynthesizer:
    """Ask the oracle which sub-pages and documents to crawl."""

    def __init__(
        self,
        fetcher: PageFetcher,
        oracle: ReasoningOracle,
        parser: PageParser | None = None,
        harvester: LinkHarvester | None = None,
        settings: Settings | None = None,
    ):
        """Initialize the synthesizer.

        Args:
            fetcher: Fetcher for the main page
            oracle: Reasoning oracle that proposes the plan
            parser: Page parser (defaults to PageParser)
            harvester: Link harvester (defaults to one built from settings)
            settings: Settings (defaults to get_settings())
        """
        self._settings = settings or get_settings()
        self._fetcher = fetcher
        self._oracle = oracle
        self._parser = parser or PageParser()
        self._harvester = harvester or LinkHarvester(
            self._settings.site_base_url, self._settings.site_domain
        )

    def build_prompt(self, main_page: ParsedPage, harvested: HarvestedLinks) -> str:
        """Render the planning prompt for *main_page*."""
        page_lines, document_lines = _format_links(harvested)
        return render_prompt(
            "scraping_plan",
            main_url=main_page.url,
            title=main_page.title,
            content=main_page.normalized_text[: self._settings.plan_content_chars],
            page_links=page_lines,
            document_links=document_lines,
            max_pages=self._settings.default_max_pages,
            max_documents=self._settings.default_max_documents,
        )

    async def synthesize(
        self, main_url: str, already_visited: Iterable[str] = ()
    ) -> PlanningOutcome:
        """Create and validate a scraping plan for *main_url*.

        Args:
            main_url: The subsidy page to analyze
            already_visited: URLs to leave out of the harvest

        Returns:
            PlanningOutcome with the validated (or fallback) plan

        Raises:
            ValueError: If the main page cannot be fetched
            OracleUnavailableError: If the oracle cannot be reached
        """
        html = await self._fetcher.fetch(main_url)
        main_page = self._parser.parse(html, main_url)
        harvested = self._harvester.harvest(html, already_visited)

        logfire.info(
            "Harvested links from main page",
            url=main_url,
            page_links=len(harvested.page_links),
            document_links=len(harvested.document_links),
        )

        response = await self._oracle.complete(
            load_prompt("planner_system"),
            self.build_prompt(main_page, harvested),
            temperature=self._settings.plan_temperature,
            max_tokens=self._settings.plan_max_tokens,
        )

        plan = parse_scraping_plan(response, main_page)
        if plan is None:
            logfire.warning(
                "Unparseable scraping plan, falling back to main page only",
                url=main_url,
                response_preview=response[:200],
            )
            return PlanningOutcome(
                plan=create_fallback_plan(main_url, main_page.title),
                harvested=harvested,
                main_page=main_page,
            )

        validated = validate_scraping_plan(
            plan,
            harvested.page_urls,
            harvested.document_urls if self._settings.validate_plan_documents else None,
        )
        logfire.info(
            "Scraping plan validated",
            url=main_url,
            proposed_sub_pages=len(plan.sub_pages),
            sub_pages=len(validated.sub_pages),
            documents=len(validated.documents),
        )
        return PlanningOutcome(plan=validated, harvested=harvested, main_page=main_page)
