"""FastAPI application initialization."""

from contextlib import asynccontextmanager

import logfire
import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration

from rvo_agent.api import analyze, health
from rvo_agent.config import get_settings
from rvo_agent.logging_config import setup_logfire
from rvo_agent.services.attestation_schema import get_attestation_vocabulary

APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    settings = get_settings()

    # Initialize Logfire for observability
    setup_logfire(app)

    # Initialize Sentry if DSN is provided
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            traces_sample_rate=settings.sentry_traces_sample_rate,
            integrations=[FastApiIntegration()],
        )

    # Vocabulary is read once per process; None selects the generic prompt
    app.state.attestation_vocabulary = get_attestation_vocabulary()

    logfire.info(
        "Application startup complete",
        model=settings.default_model,
        environment=settings.env,
        schema_fields=len(app.state.attestation_vocabulary or {}),
    )

    yield

    logfire.info("Application shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="RVO Subsidy Agent",
    description="Classifies the requirements of RVO subsidy pages with an AI scraping plan",
    version=APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health.router, tags=["health"])
app.include_router(analyze.router, tags=["analysis"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=3000)
