"""Tests for provider selection."""

import pytest

from travel_sim.config import LLMSettings
from travel_sim.llm.anthropic_provider import AnthropicProvider
from travel_sim.llm.exceptions import ProviderUnavailableError
from travel_sim.llm.factory import PROVIDER_CONFIGS, create_provider
from travel_sim.llm.openai_provider import OpenAIProvider


class TestCreateProvider:
    """Test create_provider."""

    def test_anthropic_default_model(self):
        """Test the Anthropic provider gets its default model."""
        provider = create_provider(LLMSettings(provider="anthropic", anthropic_api_key="key"))
        assert isinstance(provider, AnthropicProvider)
        assert provider.config.model == PROVIDER_CONFIGS["anthropic"]["model"]

    def test_openai_with_model_override(self):
        """Test settings override the default model and sampling."""
        settings = LLMSettings(
            provider="openai",
            model="gpt-4o",
            temperature=0.2,
            max_tokens=200,
            openai_api_key="key",
        )
        provider = create_provider(settings)
        assert isinstance(provider, OpenAIProvider)
        assert provider.config.model == "gpt-4o"
        assert provider.config.temperature == 0.2
        assert provider.config.max_tokens == 200

    def test_missing_key_raises(self):
        """Test a provider without an API key is unavailable."""
        with pytest.raises(ProviderUnavailableError, match="OPENAI_API_KEY"):
            create_provider(LLMSettings(provider="openai", anthropic_api_key="key"))

    def test_unknown_provider_raises(self):
        """Test unknown providers are rejected."""
        with pytest.raises(ProviderUnavailableError, match="Unknown provider") as excinfo:
            create_provider(LLMSettings(provider="ollama", anthropic_api_key="key"))
        assert excinfo.value.provider == "ollama"
