"""Typer CLI that analyzes one subsidy page and prints the result as JSON."""

import os

os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

from pathlib import Path

from dotenv import load_dotenv

_project_root = Path(__file__).resolve().parent.parent.parent
load_dotenv(_project_root / ".env")
load_dotenv(_project_root / ".env.local")

import asyncio

import typer

from rvo_agent.api.analyze import is_http_url
from rvo_agent.logging_config import configure_logging
from rvo_agent.models.analysis_models import AnalysisFailure
from rvo_agent.services.subsidy_analyzer import analyze_subsidy

app = typer.Typer()


@app.command()
def analyze(
    url: str = typer.Argument(..., help="RVO subsidy page to analyze"),
    indent: int = typer.Option(2, help="JSON indentation"),
):
    """Analyze a subsidy page and print its requirements as JSON."""
    url = url.strip()
    if not is_http_url(url):
        typer.echo("Error: URL must start with http:// or https://", err=True)
        raise typer.Exit(1)

    configure_logging()
    typer.echo(f"Analyzing {url} ...", err=True)

    result = asyncio.run(analyze_subsidy(url))

    typer.echo(result.model_dump_json(indent=indent))
    if isinstance(result, AnalysisFailure):
        typer.echo(f"Error: {result.error}", err=True)
        raise typer.Exit(1)

    requirements = result.requirements
    typer.echo(
        typer.style(
            f"{len(requirements.attestations)} attestations, "
            f"{len(requirements.non_attestations)} non-attestations "
            f"from {result.pages_analyzed} pages",
            fg=typer.colors.GREEN,
        ),
        err=True,
    )


if __name__ == "__main__":
    app()
