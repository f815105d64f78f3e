"""End-to-end subsidy analysis.

``SubsidyAnalyzer`` runs the pipeline for one URL:

1. PlanSynthesizer: fetch the main page, harvest links, ask the oracle for a
   scraping plan and validate it against the harvested links
2. CrawlExecutor: retrieve the planned pages and documents
3. RequirementClassifier: classify the requirements in the retrieved text

One analyzer owns one visited set, so concurrent analyses never share
crawl state. Callers always get a result object back; errors are reported
through ``AnalysisFailure`` rather than raised.
"""

import logging
import time

import logfire

from rvo_agent.config import Settings, get_settings
from rvo_agent.models.analysis_models import AnalysisFailure, AnalysisResult
from rvo_agent.services.attestation_schema import get_attestation_vocabulary
from rvo_agent.services.classifier import RequirementClassifier
from rvo_agent.services.crawl_executor import CrawlExecutor
from rvo_agent.services.oracle_service import ReasoningOracle, get_oracle
from rvo_agent.services.plan_synthesizer import PlanSynthesizer
from rvo_agent.services.website_scraper import HttpxPageFetcher, PageFetcher, PageParser

logger = logging.getLogger(__name__)


class SubsidyAnalyzer:
    """Per-request pipeline that turns a subsidy URL into a requirement set."""

    def __init__(
        self,
        oracle: ReasoningOracle | None = None,
        vocabulary: dict[str, str] | None = None,
        fetcher: PageFetcher | None = None,
        parser: PageParser | None = None,
        settings: Settings | None = None,
    ):
        """Initialize the analyzer.

        Args:
            oracle: Reasoning oracle (defaults to PydanticAIOracle)
            vocabulary: Attestation vocabulary, or None for the generic prompt
            fetcher: Page fetcher (defaults to HttpxPageFetcher)
            parser: Page parser (defaults to PageParser)
            settings: Settings (defaults to get_settings())
        """
        self._settings = settings or get_settings()
        self._oracle = oracle or get_oracle()
        self._fetcher = fetcher or HttpxPageFetcher(
            timeout=self._settings.scraper_timeout_seconds
        )
        self._parser = parser or PageParser()
        self._vocabulary = vocabulary
        self.visited: set[str] = set()

    async def analyze(self, url: str) -> AnalysisResult | AnalysisFailure:
        """Analyze the subsidy page at *url*.

        Args:
            url: Main subsidy page

        Returns:
            AnalysisResult on success, AnalysisFailure if the main page or the
            oracle was unreachable
        """
        start_time = time.time()
        with logfire.span("Analyze subsidy {url}", url=url):
            try:
                result = await self._run(url)
            except Exception as e:
                logfire.error(
                    "Subsidy analysis failed",
                    url=url,
                    error=str(e),
                    error_type=type(e).__name__,
                    total_time_ms=(time.time() - start_time) * 1000,
                )
                return AnalysisFailure(url=url, error=str(e))

            logfire.info(
                "Subsidy analysis completed",
                url=url,
                pages_analyzed=result.pages_analyzed,
                attestations=len(result.requirements.attestations),
                non_attestations=len(result.requirements.non_attestations),
                total_time_ms=(time.time() - start_time) * 1000,
            )
            return result

    async def _run(self, url: str) -> AnalysisResult:
        synthesizer = PlanSynthesizer(
            fetcher=self._fetcher,
            oracle=self._oracle,
            parser=self._parser,
            settings=self._settings,
        )
        outcome = await synthesizer.synthesize(url, self.visited)

        executor = CrawlExecutor(
            fetcher=self._fetcher,
            parser=self._parser,
            visited=self.visited,
            delay_seconds=self._settings.request_delay_seconds,
            default_max_pages=self._settings.default_max_pages,
            default_max_documents=self._settings.default_max_documents,
        )
        crawl = await executor.execute(outcome.plan)

        classifier = RequirementClassifier(
            oracle=self._oracle, vocabulary=self._vocabulary, settings=self._settings
        )
        requirements = await classifier.classify(crawl.pages, crawl.documents)

        title = crawl.pages[0].title if crawl.pages else "Unknown"
        return AnalysisResult(
            url=url,
            title=title or "Unknown",
            requirements=requirements,
            pages_analyzed=len(crawl.pages),
            ai_scraping_plan=outcome.plan,
        )


async def analyze_subsidy(
    url: str,
    oracle: ReasoningOracle | None = None,
    vocabulary: dict[str, str] | None = None,
) -> AnalysisResult | AnalysisFailure:
    """Analyze *url* with a fresh pipeline.

    The attestation vocabulary defaults to the one configured in settings.
    """
    if vocabulary is None:
        vocabulary = get_attestation_vocabulary()
    analyzer = SubsidyAnalyzer(oracle=oracle, vocabulary=vocabulary)
    logger.info(f"Starting subsidy analysis for {url}")
    return await analyzer.analyze(url)
