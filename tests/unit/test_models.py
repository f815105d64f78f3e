"""Tests for plan and analysis models."""

import pytest
from pydantic import ValidationError

from rvo_agent.models.analysis_models import AnalysisFailure, AnalysisResult, RequirementSet
from rvo_agent.models.plan_models import MainPageTarget, ScrapingPlan
from rvo_agent.models.scraper_models import HarvestedLinks, LinkRecord


class TestScrapingPlan:
    def test_defaults(self):
        plan = ScrapingPlan(main_page=MainPageTarget(url="https://www.rvo.nl/s"))

        assert plan.sub_pages == []
        assert plan.documents == []
        assert plan.max_pages == 8
        assert plan.max_documents == 5
        assert plan.main_page.priority == "high"

    def test_rejects_negative_budget(self):
        with pytest.raises(ValidationError):
            ScrapingPlan(main_page=MainPageTarget(url="u"), max_documents=-1)


class TestAnalysisModels:
    def test_result_serializes_plan_and_timestamp(self):
        result = AnalysisResult(
            url="https://www.rvo.nl/s",
            title="S",
            requirements=RequirementSet(attestations=["a"]),
            pages_analyzed=1,
            ai_scraping_plan=ScrapingPlan(main_page=MainPageTarget(url="https://www.rvo.nl/s")),
        )

        data = result.model_dump(mode="json")

        assert data["requirements"] == {
            "attestations": ["a"],
            "non_attestations": [],
            "analysis_notes": "",
        }
        assert data["ai_scraping_plan"]["main_page"]["url"] == "https://www.rvo.nl/s"
        assert isinstance(data["analyzed_at"], str)

    def test_failure_shape(self):
        failure = AnalysisFailure(url="u", error="boom")

        assert set(failure.model_dump(mode="json")) == {"url", "error", "analyzed_at"}


class TestHarvestedLinks:
    def test_url_views(self):
        harvested = HarvestedLinks(
            page_links=[LinkRecord(url="p", display_text="P", kind="page")],
            document_links=[LinkRecord(url="d", display_text="", kind="document")],
        )

        assert harvested.page_urls == {"p"}
        assert harvested.document_urls == {"d"}
