"""
Gateway to the hosted LLM (Anthropic Messages API).

The gateway never raises for upstream failures. Every call returns a
GenerationResult carrying either the text or the kind of failure, so callers
can tell "no answer" apart from "empty answer".
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

import anthropic

from infraai.config import Settings

logger = logging.getLogger(__name__)

# Values shipped in example .env files count as "not configured"
PLACEHOLDER_KEYS = {"your_api_key_here", "your_anthropic_api_key_here"}


class LLMErrorKind(str, enum.Enum):
    NOT_CONFIGURED = "api_key_not_configured"
    INVALID_KEY = "api_key_invalid"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class GenerationResult:
    """Either text or an error kind, never both."""
    text: Optional[str] = None
    error: Optional[LLMErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, text: str) -> "GenerationResult":
        return cls(text=text)

    @classmethod
    def failure(cls, kind: LLMErrorKind) -> "GenerationResult":
        return cls(error=kind)


def strip_emphasis(text: str) -> str:
    """Remove markdown ** markers from model output."""
    return text.replace("**", "")


class LLMGateway:
    """
    Async LLM client with fixed sampling parameters.

    The credential is checked on every call; the SDK client is created
    lazily on the first call that has one.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._client: anthropic.AsyncAnthropic | None = None

    def _api_key(self) -> str:
        key = (self._settings.anthropic_api_key or "").strip()
        if key in PLACEHOLDER_KEYS:
            return ""
        return key

    def _get_client(self, api_key: str) -> anthropic.AsyncAnthropic:
        """Get or create the SDK client."""
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=api_key)
        return self._client

    async def close(self):
        """Close the underlying HTTP client."""
        if self._client:
            await self._client.close()
            self._client = None

    def _request_params(self, prompt: str) -> dict:
        settings = self._settings
        params = {
            "model": settings.anthropic_model,
            "max_tokens": settings.llm_max_tokens,
            "temperature": settings.llm_temperature,
            "top_k": settings.llm_top_k,
            "messages": [{"role": "user", "content": prompt}],
        }
        if settings.llm_top_p is not None:
            params["top_p"] = settings.llm_top_p
        return params

    async def generate(self, prompt: str) -> GenerationResult:
        """Send a single-turn prompt and return the reply text."""
        api_key = self._api_key()
        if not api_key:
            logger.error("ANTHROPIC_API_KEY not configured")
            return GenerationResult.failure(LLMErrorKind.NOT_CONFIGURED)

        client = self._get_client(api_key)
        logger.info(f"Calling {self._settings.anthropic_model} with {len(prompt)} char prompt")

        try:
            response = await client.messages.create(**self._request_params(prompt))
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as e:
            logger.error(f"LLM rejected API key: {e}")
            return GenerationResult.failure(LLMErrorKind.INVALID_KEY)
        except anthropic.APIError as e:
            logger.warning(f"LLM call failed: {e}")
            return GenerationResult.failure(LLMErrorKind.UNAVAILABLE)

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        logger.info(f"LLM replied with {len(text)} chars (stop_reason={response.stop_reason})")
        if response.stop_reason == "max_tokens":
            logger.warning("LLM response truncated due to max_tokens")

        return GenerationResult.success(strip_emphasis(text))
