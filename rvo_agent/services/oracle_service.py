"""Reasoning oracle backed by a PydanticAI agent.

The oracle is a plain text-completion service: callers get back whatever
text the model produced. Parsing and fallbacks live in the planner and the
classifier.
"""

import logging
import time
from typing import Protocol

import logfire
from pydantic_ai import Agent

from rvo_agent.config import get_settings

logger = logging.getLogger(__name__)


class OracleUnavailableError(RuntimeError):
    """Raised when the reasoning oracle cannot be reached or is misconfigured."""


class ReasoningOracle(Protocol):
    """Protocol for text completion."""

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Return the model's raw text reply.

        Raises:
            OracleUnavailableError: If no reply could be obtained
        """
        ...


class PydanticAIOracle:
    """Text completion through a PydanticAI model string."""

    def __init__(self, model: str | None = None):
        """
        Initialize the oracle.

        Args:
            model: Model string (e.g., 'openai:gpt-4o').
                   Defaults to settings.default_model
        """
        self.model_name = model or get_settings().default_model
        logger.info(f"PydanticAIOracle initialized with model: {self.model_name}")

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """
        Run one completion.

        Args:
            system_prompt: System instructions for the model
            user_prompt: The task prompt
            temperature: Sampling temperature
            max_tokens: Output token budget

        Returns:
            Stripped response text

        Raises:
            OracleUnavailableError: On any provider or configuration error
        """
        start_time = time.time()
        try:
            agent = Agent(self.model_name, output_type=str, system_prompt=system_prompt)
            result = await agent.run(
                user_prompt,
                model_settings={"temperature": temperature, "max_tokens": max_tokens},
            )
        except Exception as e:
            logfire.error(
                "Oracle completion failed",
                model=self.model_name,
                error=str(e),
                error_type=type(e).__name__,
                response_time_ms=(time.time() - start_time) * 1000,
            )
            raise OracleUnavailableError(f"Reasoning oracle unavailable: {e}") from e

        text = (result.output or "").strip()
        logfire.info(
            "Oracle completion finished",
            model=self.model_name,
            prompt_length=len(user_prompt),
            response_length=len(text),
            response_time_ms=(time.time() - start_time) * 1000,
        )
        return text


def get_oracle(model: str | None = None) -> PydanticAIOracle:
    """Get oracle instance."""
    return PydanticAIOracle(model=model)
