"""Application configuration using Pydantic BaseSettings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rvo_agent.constants import (
    CLASSIFICATION_CONTENT_CHARS,
    CLASSIFICATION_MAX_TOKENS,
    CLASSIFICATION_TEMPERATURE,
    DEFAULT_ATTESTATION_SCHEMA_PATH,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_MAX_PLAN_DOCUMENTS,
    DEFAULT_MAX_PLAN_PAGES,
    DEFAULT_SITE_BASE_URL,
    DEFAULT_SITE_DOMAIN,
    PLAN_CONTENT_CHARS,
    PLAN_MAX_TOKENS,
    PLAN_TEMPERATURE,
    POLITE_REQUEST_DELAY_SECONDS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        # Load .env first, then .env.local (for local/test overrides)
        # Later files override earlier ones, so .env.local takes precedence
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Reasoning oracle (PydanticAI model string; provider keys such as
    # OPENAI_API_KEY are read by the provider itself)
    default_model: str = Field(
        default="openai:gpt-4o",
        description="Model used for plan synthesis and requirement classification",
    )

    # Environment
    env: Literal["local", "railway", "prod"] = Field(
        default="local", description="Current environment"
    )
    log_level: str = Field(default="INFO", description="Python logging level")

    # Sentry Configuration
    sentry_dsn: str | None = Field(
        default=None, description="Sentry DSN for error tracking (optional)"
    )
    sentry_traces_sample_rate: float = Field(
        default=1.0, description="Sentry traces sample rate (0.0 to 1.0)"
    )

    # Logfire Configuration
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token for observability"
    )

    # ==========================================================================
    # Target Site
    # ==========================================================================

    site_base_url: str = Field(
        default=DEFAULT_SITE_BASE_URL,
        description="Origin used to resolve relative links",
    )
    site_domain: str = Field(
        default=DEFAULT_SITE_DOMAIN,
        description="Domain page links must contain to be crawlable",
    )
    attestation_schema_path: str = Field(
        default=DEFAULT_ATTESTATION_SCHEMA_PATH,
        description="Path to the attestation vocabulary JSON file (optional)",
    )

    # ==========================================================================
    # Crawl Configuration
    # ==========================================================================
    # Defaults are sourced from rvo_agent/constants.py.

    scraper_timeout_seconds: float = Field(
        default=DEFAULT_HTTP_TIMEOUT_SECONDS,
        description="HTTP timeout for scraper requests (seconds)",
    )
    request_delay_seconds: float = Field(
        default=POLITE_REQUEST_DELAY_SECONDS,
        ge=0.0,
        description="Delay between consecutive successful target fetches (seconds)",
    )
    default_max_pages: int = Field(
        default=DEFAULT_MAX_PLAN_PAGES,
        ge=0,
        description="Sub-page budget when the plan omits max_pages",
    )
    default_max_documents: int = Field(
        default=DEFAULT_MAX_PLAN_DOCUMENTS,
        ge=0,
        description="Document budget when the plan omits max_documents",
    )
    validate_plan_documents: bool = Field(
        default=False,
        description="Also drop planned documents that were not harvested from the page",
    )

    # ==========================================================================
    # Oracle Budgets
    # ==========================================================================

    plan_content_chars: int = Field(
        default=PLAN_CONTENT_CHARS,
        gt=0,
        description="Characters of main page text sent to the planner",
    )
    classification_content_chars: int = Field(
        default=CLASSIFICATION_CONTENT_CHARS,
        gt=0,
        description="Characters of aggregated content sent to the classifier",
    )
    plan_temperature: float = Field(default=PLAN_TEMPERATURE, ge=0.0, le=2.0)
    plan_max_tokens: int = Field(default=PLAN_MAX_TOKENS, gt=0)
    classification_temperature: float = Field(
        default=CLASSIFICATION_TEMPERATURE, ge=0.0, le=2.0
    )
    classification_max_tokens: int = Field(default=CLASSIFICATION_MAX_TOKENS, gt=0)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
