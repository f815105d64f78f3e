"""Requirement set and analysis result models."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from rvo_agent.models.plan_models import ScrapingPlan


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RequirementSet(BaseModel):
    """
    Classified requirements for one subsidy.

    Missing keys in the oracle's JSON fall back to empty values, so the
    shape is always fully populated.
    """

    attestations: list[str] = Field(
        default_factory=list,
        description="Field keys verifiable from an authoritative registry",
    )
    non_attestations: list[str] = Field(
        default_factory=list,
        description="Documents, plans or procedures the applicant must produce",
    )
    analysis_notes: str = Field(default="", description="Free-text summary")


class AnalysisResult(BaseModel):
    """Successful analysis of a subsidy page."""

    url: str
    title: str
    requirements: RequirementSet
    analyzed_at: datetime = Field(default_factory=utc_now)
    pages_analyzed: int = Field(..., ge=0)
    ai_scraping_plan: ScrapingPlan


class AnalysisFailure(BaseModel):
    """Analysis that could not be completed."""

    url: str
    error: str
    analyzed_at: datetime = Field(default_factory=utc_now)
