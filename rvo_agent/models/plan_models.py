"""Scraping plan models.

The field names double as the JSON keys the planner is asked to return,
so a parsed oracle response can be validated straight into ``ScrapingPlan``.
"""

from pydantic import BaseModel, Field

from rvo_agent.constants import DEFAULT_MAX_PLAN_DOCUMENTS, DEFAULT_MAX_PLAN_PAGES


class MainPageTarget(BaseModel):
    """The page the analysis started from."""

    url: str
    title: str = ""
    priority: str = "high"


class PlanTarget(BaseModel):
    """A sub-page or document selected by the planner."""

    url: str
    reason: str = ""
    priority: str = Field(default="medium", description="high | medium | low")


class ScrapingPlan(BaseModel):
    """Prioritized pages and documents to retrieve before classification."""

    main_page: MainPageTarget
    sub_pages: list[PlanTarget] = Field(default_factory=list)
    documents: list[PlanTarget] = Field(default_factory=list)
    max_pages: int = Field(default=DEFAULT_MAX_PLAN_PAGES, ge=0)
    max_documents: int = Field(default=DEFAULT_MAX_PLAN_DOCUMENTS, ge=0)
    focus_keywords: list[str] = Field(default_factory=list)
