"""Requirement classification over the crawled content.

All page and document text is combined into one prompt and the oracle is
asked to split the requirements into attestations and non-attestations.
The reply is treated as untrusted text: it is cleaned up, parsed, and
replaced by an empty requirement set if it cannot be used. No keyword
heuristics are ever substituted for the oracle's answer.
"""

import json
import re
from typing import Any, Sequence

import logfire
from pydantic import ValidationError

from rvo_agent.config import Settings, get_settings
from rvo_agent.constants import FALLBACK_ANALYSIS_NOTE
from rvo_agent.models.analysis_models import RequirementSet
from rvo_agent.models.scraper_models import DocumentRecord, PageRecord
from rvo_agent.services.oracle_service import ReasoningOracle
from rvo_agent.services.prompt_templates import load_prompt, render_prompt

_FENCED_BLOCK = re.compile(r"```[A-Za-z]*\s*([\s\S]*?)\s*```")


def combine_content(
    pages: Sequence[PageRecord],
    documents: Sequence[DocumentRecord],
    max_chars: int,
) -> str:
    """Concatenate page text, then non-empty document text, truncated to *max_chars*."""
    page_content = "\n\n".join(
        f"=== {page.title} ({page.reason}) ===\n{page.normalized_text}"
        for page in pages
    )
    document_content = "\n\n".join(
        f"=== {doc.title} ({doc.reason}) [{doc.document_type.value.upper()}] ===\n"
        f"{doc.extracted_text}"
        for doc in documents
        if doc.extracted_text
    )
    combined = page_content + ("\n\n" + document_content if document_content else "")
    return combined[:max_chars]


def sanitize_oracle_response(response: str) -> dict[str, Any] | None:
    """Extract a JSON object from free-form oracle output.

    Tries, in order: the content of a fenced code block; otherwise the slice
    from the first ``{`` to the last ``}``. The result must parse as a JSON
    object.

    Returns:
        The parsed object, or None
    """
    text = (response or "").strip()

    fenced = _FENCED_BLOCK.search(text)
    if fenced:
        text = fenced.group(1).strip()
    else:
        start, end = text.find("{"), text.rfind("}")
        if start != -1 and end > start:
            text = text[start : end + 1]

    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return parsed if isinstance(parsed, dict) else None


def fallback_requirements() -> RequirementSet:
    """Empty requirement set used when the oracle's answer is unusable."""
    return RequirementSet(
        attestations=[], non_attestations=[], analysis_notes=FALLBACK_ANALYSIS_NOTE
    )


class RequirementClassifier:
    """Classify requirements found in crawled pages and documents."""

    def __init__(
        self,
        oracle: ReasoningOracle,
        vocabulary: dict[str, str] | None = None,
        settings: Settings | None = None,
    ):
        """Initialize the classifier.

        Args:
            oracle: Reasoning oracle
            vocabulary: Attestation field key -> label, or None for the
                generic prompt
            settings: Settings (defaults to get_settings())
        """
        self._oracle = oracle
        self._vocabulary = vocabulary or None
        self._settings = settings or get_settings()

    @property
    def has_schema(self) -> bool:
        return self._vocabulary is not None

    def build_prompt(self, content: str) -> str:
        """Render the schema-aware or generic classification prompt."""
        if self.has_schema:
            field_list = ", ".join(
                f"{key} ({label})" for key, label in self._vocabulary.items()
            )
            return render_prompt(
                "classify_with_schema", content=content, field_list=field_list
            )
        return render_prompt("classify_generic", content=content)

    def parse_response(self, response: str) -> RequirementSet:
        """Turn the oracle's reply into a RequirementSet, never raising."""
        data = sanitize_oracle_response(response)
        if data is None:
            logfire.warning(
                "Unparseable classification, returning empty requirements",
                response_preview=(response or "")[:200],
            )
            return fallback_requirements()

        try:
            requirements = RequirementSet(
                attestations=data.get("attestations") or [],
                non_attestations=data.get("non_attestations") or [],
                analysis_notes=data.get("analysis_notes") or "",
            )
        except ValidationError as e:
            logfire.warning(
                "Classification has unexpected shape, returning empty requirements",
                error=str(e),
            )
            return fallback_requirements()

        if self.has_schema:
            unknown = [a for a in requirements.attestations if a not in self._vocabulary]
            if unknown:
                logfire.warning(
                    "Dropped attestations outside the vocabulary", dropped=unknown
                )
                requirements.attestations = [
                    a for a in requirements.attestations if a in self._vocabulary
                ]
        return requirements

    async def classify(
        self,
        pages: Sequence[PageRecord],
        documents: Sequence[DocumentRecord],
    ) -> RequirementSet:
        """Classify the requirements in *pages* and *documents*.

        Raises:
            OracleUnavailableError: If the oracle cannot be reached
        """
        content = combine_content(
            pages, documents, self._settings.classification_content_chars
        )
        logfire.info(
            "Classifying requirements",
            pages=len(pages),
            documents=len(documents),
            content_length=len(content),
            schema_prompt=self.has_schema,
        )

        response = await self._oracle.complete(
            load_prompt("classifier_system"),
            self.build_prompt(content),
            temperature=self._settings.classification_temperature,
            max_tokens=self._settings.classification_max_tokens,
        )
        requirements = self.parse_response(response)

        logfire.info(
            "Requirements classified",
            attestations=len(requirements.attestations),
            non_attestations=len(requirements.non_attestations),
        )
        return requirements
