"""Tests for OpenAI provider."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from openai import APIConnectionError
from openai import AuthenticationError as OpenAIAuthError
from openai import RateLimitError as OpenAIRateLimitError

from travel_sim.llm.base import LLMConfig
from travel_sim.llm.exceptions import (
    AuthenticationError,
    InvalidResponseError,
    ProviderUnavailableError,
    RateLimitError,
)
from travel_sim.llm.openai_provider import OPENAI_PRICING, OpenAIProvider


@pytest.fixture
def config():
    """Create test configuration."""
    return LLMConfig(model="gpt-4o-mini", temperature=0.7, max_tokens=500)


@pytest.fixture
def provider(config):
    """Create OpenAI provider instance."""
    return OpenAIProvider(config=config, api_key="test-api-key")


def make_response(content="Add the speeds: 10 + 6 = 16 m/s."):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.choices[0].finish_reason = "stop"
    response.usage.prompt_tokens = 12
    response.usage.completion_tokens = 8
    return response


class TestOpenAIProvider:
    """Test OpenAI provider implementation."""

    def test_provider_initialization(self, provider):
        """Test provider initializes correctly."""
        assert provider.name == "openai"
        assert provider.config.model == "gpt-4o-mini"
        assert provider.client is not None

    def test_available_models(self, provider):
        """Test available models list."""
        assert "gpt-4o-mini" in provider.available_models
        assert "gpt-4o" in provider.available_models

    def test_estimate_cost(self, provider):
        """Test cost estimation for the configured model."""
        cost = provider.estimate_cost(input_tokens=1000, output_tokens=1000)
        pricing = OPENAI_PRICING["gpt-4o-mini"]
        assert cost == pytest.approx(pricing.input + pricing.output)

    @pytest.mark.asyncio
    async def test_generate_success(self, provider):
        """Test successful generation."""
        with patch.object(
            provider.client.chat.completions, "create", new_callable=AsyncMock
        ) as mock_create:
            mock_create.return_value = make_response()

            response = await provider.generate(prompt="Test prompt", system_prompt="Be kind")

            assert response.content == "Add the speeds: 10 + 6 = 16 m/s."
            assert response.provider == "openai"
            assert response.input_tokens == 12
            assert response.output_tokens == 8

            messages = mock_create.call_args.kwargs["messages"]
            assert messages[0] == {"role": "system", "content": "Be kind"}
            assert messages[1] == {"role": "user", "content": "Test prompt"}

    @pytest.mark.asyncio
    async def test_generate_empty_content(self, provider):
        """Test empty replies come back as an empty response."""
        with patch.object(
            provider.client.chat.completions, "create", new_callable=AsyncMock
        ) as mock_create:
            mock_create.return_value = make_response(content="")

            result = await provider.generate(prompt="Test")

        assert result.is_empty
        assert result.metadata["finish_reason"] == "stop"

    @pytest.mark.asyncio
    async def test_generate_no_choices(self, provider):
        """Test replies without choices are rejected."""
        with patch.object(
            provider.client.chat.completions, "create", new_callable=AsyncMock
        ) as mock_create:
            response = make_response()
            response.choices = []
            mock_create.return_value = response

            with pytest.raises(InvalidResponseError, match="no choices"):
                await provider.generate(prompt="Test")

    @pytest.mark.asyncio
    async def test_generate_rate_limit_error(self, provider):
        """Test rate limit error handling."""
        with patch.object(
            provider.client.chat.completions, "create", new_callable=AsyncMock
        ) as mock_create:
            mock_create.side_effect = OpenAIRateLimitError(
                "Rate limit exceeded", response=MagicMock(), body={}
            )

            with pytest.raises(RateLimitError, match="rate limit") as excinfo:
                await provider.generate(prompt="Test")

        assert excinfo.value.provider == "openai"
        assert excinfo.value.transient

    @pytest.mark.asyncio
    async def test_generate_auth_error(self, provider):
        """Test authentication error handling."""
        with patch.object(
            provider.client.chat.completions, "create", new_callable=AsyncMock
        ) as mock_create:
            mock_create.side_effect = OpenAIAuthError(
                "Invalid API key", response=MagicMock(), body={}
            )

            with pytest.raises(AuthenticationError) as excinfo:
                await provider.generate(prompt="Test")

        assert not excinfo.value.transient

    @pytest.mark.asyncio
    async def test_generate_connection_error(self, provider):
        """Test connection failures mark the provider unavailable."""
        with patch.object(
            provider.client.chat.completions, "create", new_callable=AsyncMock
        ) as mock_create:
            mock_create.side_effect = APIConnectionError(request=MagicMock())

            with pytest.raises(ProviderUnavailableError):
                await provider.generate(prompt="Test")
