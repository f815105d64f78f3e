"""Shared pytest fixtures and configuration.

Fixture Categories:
1. Fakes: FakeFetcher, ScriptedOracle (in-memory site and oracle)
2. Sample data: main page markup, plan and classification replies
3. Infrastructure: mock_settings, mock_logfire, respx_mock, test_client
"""

import json
import os
from unittest.mock import MagicMock, Mock

import pytest

try:
    import respx
except ImportError:
    respx = None

try:
    import logfire
except ImportError:
    logfire = None

# Suppress warnings when logfire isn't configured in tests
os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

MAIN_URL = "https://www.rvo.nl/subsidies/x"


# =============================================================================
# Fakes
# =============================================================================


class FakeFetcher:
    """In-memory PageFetcher.

    ``pages`` maps URL to HTML, ``documents`` maps URL to bytes. Unknown URLs
    fail the way HttpxPageFetcher does (ValueError). URLs in ``missing``
    fail the existence check.
    """

    def __init__(self, pages=None, documents=None, missing=()):
        self.pages = dict(pages or {})
        self.documents = dict(documents or {})
        self.missing = set(missing)
        self.calls: list[tuple[str, str]] = []

    async def fetch(self, url: str) -> str:
        self.calls.append(("fetch", url))
        if url not in self.pages:
            raise ValueError(f"Failed to fetch {url}: 404")
        return self.pages[url]

    async def fetch_bytes(self, url: str) -> bytes:
        self.calls.append(("fetch_bytes", url))
        if url not in self.documents:
            raise ValueError(f"Failed to fetch {url}: 404")
        return self.documents[url]

    async def exists(self, url: str) -> bool:
        self.calls.append(("exists", url))
        return url not in self.missing and (url in self.pages or url in self.documents)

    def fetched(self, kind: str = "fetch") -> list[str]:
        return [url for call_kind, url in self.calls if call_kind == kind]


class ScriptedOracle:
    """ReasoningOracle that replays canned replies in order and records prompts."""

    def __init__(self, *responses: str, error: Exception | None = None):
        self.responses = list(responses)
        self.error = error
        self.calls: list[dict] = []

    async def complete(self, system_prompt, user_prompt, temperature, max_tokens):
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


# =============================================================================
# Sample data
# =============================================================================


@pytest.fixture
def main_url():
    return MAIN_URL


@pytest.fixture
def sample_main_page_html():
    """Main subsidy page with one real sub-page, one document and boilerplate."""
    return """
    <html>
    <head><title>Subsidie X | RVO.nl</title></head>
    <body>
        <nav><a href="/home">Home</a></nav>
        <header>Rijksdienst voor Ondernemend Nederland</header>
        <h1>Subsidie X</h1>
        <p>Vraag subsidie aan voor innovatieve projecten.</p>
        <a href="/onderwerpen/a">Voorwaarden</a>
        <a href="/doc/plan.pdf">Projectplan</a>
        <footer>Contact</footer>
    </body>
    </html>
    """


@pytest.fixture
def sample_sub_page_html():
    return """
    <html><body>
        <h1>Voorwaarden</h1>
        <p>U heeft een KvK-nummer nodig en een projectplan.</p>
    </body></html>
    """


@pytest.fixture
def sample_plan_response():
    """Plan reply that includes one hallucinated sub-page."""
    return json.dumps(
        {
            "main_page": {"url": MAIN_URL, "title": "Subsidie X", "priority": "high"},
            "sub_pages": [
                {
                    "url": "https://www.rvo.nl/onderwerpen/a",
                    "reason": "Voorwaarden",
                    "priority": "high",
                },
                {
                    "url": "https://www.rvo.nl/onderwerpen/fake",
                    "reason": "Invented",
                    "priority": "medium",
                },
            ],
            "documents": [
                {
                    "url": "https://www.rvo.nl/doc/plan.pdf",
                    "reason": "Template",
                    "priority": "medium",
                }
            ],
            "max_pages": 5,
            "max_documents": 3,
            "focus_keywords": ["voorwaarden"],
        }
    )


@pytest.fixture
def sample_classification():
    return {
        "attestations": ["chamber_of_commerce_kvk_nummer"],
        "non_attestations": ["projectplan"],
        "analysis_notes": "ok",
    }


@pytest.fixture
def sample_vocabulary():
    return {
        "chamber_of_commerce_kvk_nummer": "KvK-nummer",
        "company_legal_name": "Statutaire naam",
    }


@pytest.fixture
def fake_site(sample_main_page_html, sample_sub_page_html):
    """FakeFetcher serving the sample subsidy site."""
    return FakeFetcher(
        pages={
            MAIN_URL: sample_main_page_html,
            "https://www.rvo.nl/onderwerpen/a": sample_sub_page_html,
        },
        documents={"https://www.rvo.nl/doc/plan.pdf": b"%PDF-not-really"},
    )


# =============================================================================
# Infrastructure
# =============================================================================


@pytest.fixture
def respx_mock():
    """Respx mock fixture for HTTP mocking."""
    if respx is None:
        pytest.skip("respx not available")
    with respx.mock:
        yield respx


@pytest.fixture
def mock_settings(monkeypatch):
    """Settings with no politeness delay, patched where get_settings is used."""
    from rvo_agent.config import Settings

    settings = Settings(
        default_model="test",
        env="local",
        logfire_token=None,
        sentry_dsn=None,
        request_delay_seconds=0.0,
        attestation_schema_path="does-not-exist.json",
    )

    for module in (
        "rvo_agent.config",
        "rvo_agent.main",
        "rvo_agent.logging_config",
        "rvo_agent.services.attestation_schema",
        "rvo_agent.services.classifier",
        "rvo_agent.services.oracle_service",
        "rvo_agent.services.plan_synthesizer",
        "rvo_agent.services.subsidy_analyzer",
    ):
        monkeypatch.setattr(f"{module}.get_settings", lambda: settings)
    return settings


@pytest.fixture
def mock_logfire(monkeypatch):
    """
    Mock Logfire for testing without actual logging.

    Patches the attributes on the real module so every ``logfire.x`` call in
    the package hits the mock.
    """
    from contextlib import contextmanager

    if logfire is None:
        pytest.skip("logfire not available")

    @contextmanager
    def mock_span(*args, **kwargs):
        yield MagicMock()

    mock_logfire_module = MagicMock()
    mock_logfire_module.span = mock_span

    for attr in [
        "info",
        "warning",
        "error",
        "configure",
        "instrument_fastapi",
        "instrument_pydantic",
        "instrument_pydantic_ai",
    ]:
        if hasattr(logfire, attr):
            mock_attr = Mock()
            setattr(mock_logfire_module, attr, mock_attr)
            monkeypatch.setattr(logfire, attr, mock_attr)
    monkeypatch.setattr(logfire, "span", mock_span)

    return mock_logfire_module


@pytest.fixture
def test_client(mock_settings, mock_logfire):
    """FastAPI TestClient for E2E tests."""
    from fastapi.testclient import TestClient

    from rvo_agent.main import app

    app.state.attestation_vocabulary = None
    return TestClient(app)
