"""
LLM gateway tests.

Tests credential checks, upstream error mapping, sampling parameters and
the markdown clean-up of replies. The Anthropic client is mocked.
"""

import httpx
import anthropic
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from infraai.config import Settings
from infraai.services.llm import (
    GenerationResult,
    LLMErrorKind,
    LLMGateway,
    strip_emphasis,
)


def text_response(*texts, stop_reason="end_turn"):
    """Mock Messages API response with text blocks."""
    response = MagicMock()
    response.content = [MagicMock(type="text", text=t) for t in texts]
    response.stop_reason = stop_reason
    return response


def status_error(cls, status_code):
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    response = httpx.Response(status_code, request=request)
    return cls("upstream error", response=response, body=None)


@pytest.fixture
def gateway():
    """Gateway with a mocked SDK client."""
    gateway = LLMGateway(Settings(anthropic_api_key="test-key", llm_top_p=0.95))
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=text_response("SYSTEM_DESIGN"))
    client.close = AsyncMock()
    gateway._client = client
    return gateway


@pytest.mark.unit
class TestGenerationResult:

    def test_success_is_ok(self):
        result = GenerationResult.success("")
        assert result.ok is True
        assert result.text == ""

    def test_failure_is_not_ok(self):
        result = GenerationResult.failure(LLMErrorKind.UNAVAILABLE)
        assert result.ok is False
        assert result.text is None


@pytest.mark.unit
class TestCredentials:
    """Tests for API key checks."""

    @pytest.mark.asyncio
    async def test_missing_key_fails_fast(self):
        gateway = LLMGateway(Settings(anthropic_api_key=""))

        with patch("anthropic.AsyncAnthropic") as mock_cls:
            result = await gateway.generate("hello")

        assert result.error is LLMErrorKind.NOT_CONFIGURED
        mock_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_placeholder_key_counts_as_missing(self):
        gateway = LLMGateway(Settings(anthropic_api_key="your_api_key_here"))
        result = await gateway.generate("hello")
        assert result.error is LLMErrorKind.NOT_CONFIGURED

    @pytest.mark.asyncio
    async def test_key_checked_on_every_call(self, gateway):
        """Test removing the key after a successful call is noticed."""
        assert (await gateway.generate("one")).ok
        gateway._settings.anthropic_api_key = ""

        result = await gateway.generate("two")

        assert result.error is LLMErrorKind.NOT_CONFIGURED
        assert gateway._client.messages.create.call_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error_cls,status", [
        (anthropic.PermissionDeniedError, 403),
        (anthropic.AuthenticationError, 401),
    ])
    async def test_rejected_key_maps_to_invalid(self, gateway, error_cls, status):
        gateway._client.messages.create = AsyncMock(side_effect=status_error(error_cls, status))

        result = await gateway.generate("hello")

        assert result.error is LLMErrorKind.INVALID_KEY


@pytest.mark.unit
class TestUpstreamFailures:
    """Tests for failures returned as UNAVAILABLE."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error_cls,status", [
        (anthropic.RateLimitError, 429),
        (anthropic.InternalServerError, 500),
    ])
    async def test_status_errors_are_unavailable(self, gateway, error_cls, status):
        gateway._client.messages.create = AsyncMock(side_effect=status_error(error_cls, status))

        result = await gateway.generate("hello")

        assert result.ok is False
        assert result.error is LLMErrorKind.UNAVAILABLE
        assert result.text is None

    @pytest.mark.asyncio
    async def test_connection_error_is_unavailable(self, gateway):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        gateway._client.messages.create = AsyncMock(
            side_effect=anthropic.APIConnectionError(request=request)
        )

        result = await gateway.generate("hello")

        assert result.error is LLMErrorKind.UNAVAILABLE

    @pytest.mark.asyncio
    async def test_no_retries(self, gateway):
        gateway._client.messages.create = AsyncMock(
            side_effect=status_error(anthropic.InternalServerError, 500)
        )

        await gateway.generate("hello")

        assert gateway._client.messages.create.call_count == 1


@pytest.mark.unit
class TestReplies:
    """Tests for successful replies."""

    @pytest.mark.asyncio
    async def test_text_blocks_joined_and_emphasis_stripped(self, gateway):
        gateway._client.messages.create = AsyncMock(
            return_value=text_response("**Title**: ", "a **bold** plan")
        )

        result = await gateway.generate("hello")

        assert result.ok
        assert result.text == "Title: a bold plan"

    @pytest.mark.asyncio
    async def test_sampling_parameters(self, gateway):
        await gateway.generate("design something")

        kwargs = gateway._client.messages.create.call_args.kwargs
        assert kwargs["temperature"] == 1.0
        assert kwargs["top_k"] == 64
        assert kwargs["top_p"] == 0.95
        assert kwargs["max_tokens"] == 8192
        assert kwargs["messages"] == [{"role": "user", "content": "design something"}]

    @pytest.mark.asyncio
    async def test_top_p_omitted_when_unset(self, gateway):
        gateway._settings.llm_top_p = None

        await gateway.generate("hello")

        assert "top_p" not in gateway._client.messages.create.call_args.kwargs


@pytest.mark.unit
class TestClose:

    @pytest.mark.asyncio
    async def test_close_releases_client(self, gateway):
        client = gateway._client
        await gateway.close()

        assert gateway._client is None
        client.close.assert_called_once()


@pytest.mark.unit
def test_strip_emphasis_leaves_single_asterisks():
    assert strip_emphasis("*a* **b** ***c***") == "*a* b *c*"
