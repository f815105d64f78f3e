"""Centralized logging configuration with Pydantic Logfire integration."""

import logging
from typing import Any

import logfire
from fastapi import FastAPI

from rvo_agent.config import get_settings


def configure_logging() -> None:
    """
    Configure Logfire and stdlib logging for any entry point.

    Used directly by the CLI and by :func:`setup_logfire` for the API.
    """
    settings = get_settings()

    logfire_config: dict[str, Any] = {
        "environment": settings.env,
        # Without a token events stay local instead of being shipped
        "send_to_logfire": "if-token-present",
    }
    if settings.logfire_token:
        logfire_config["token"] = settings.logfire_token

    logfire.configure(**logfire_config)

    log_level = settings.log_level.upper()

    if settings.env == "local":
        # Local: Console formatting for development
        logging.basicConfig(
            level=getattr(logging, log_level, logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    else:
        # Production: Structured JSON logging
        logging.basicConfig(
            level=getattr(logging, log_level, logging.INFO),
            format="%(message)s",  # Logfire handles structured formatting
        )


def setup_logfire(app: FastAPI) -> None:
    """
    Initialize and configure Pydantic Logfire for the API process.

    Sets up:
    - Logfire and Python logging (see :func:`configure_logging`)
    - FastAPI instrumentation (request/response tracing)
    - Pydantic instrumentation (model validation logging)
    - PydanticAI instrumentation (oracle calls)
    """
    configure_logging()

    logfire.instrument_fastapi(app)
    logfire.instrument_pydantic()

    try:
        logfire.instrument_pydantic_ai()
    except AttributeError:
        # Older logfire releases do not ship the PydanticAI integration
        pass
