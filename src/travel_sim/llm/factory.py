"""Provider selection from application settings."""

import structlog

from travel_sim.config import LLMSettings
from travel_sim.llm.anthropic_provider import DEFAULT_ANTHROPIC_MODEL, AnthropicProvider
from travel_sim.llm.base import BaseLLMProvider, LLMConfig
from travel_sim.llm.exceptions import ProviderUnavailableError
from travel_sim.llm.openai_provider import DEFAULT_OPENAI_MODEL, OpenAIProvider

logger = structlog.get_logger(__name__)

PROVIDER_CONFIGS = {
    "anthropic": {
        "model": DEFAULT_ANTHROPIC_MODEL,
        "env_key": "ANTHROPIC_API_KEY",
        "description": "Anthropic Claude",
    },
    "openai": {
        "model": DEFAULT_OPENAI_MODEL,
        "env_key": "OPENAI_API_KEY",
        "description": "OpenAI GPT",
    },
}


def create_provider(settings: LLMSettings) -> BaseLLMProvider:
    """Create the provider named in the settings.

    Args:
        settings: LLM settings (provider, model, sampling, API keys)

    Returns:
        Initialized provider

    Raises:
        ProviderUnavailableError: If the provider is unknown or has no API key
    """
    info = PROVIDER_CONFIGS.get(settings.provider)
    if info is None:
        available = ", ".join(PROVIDER_CONFIGS)
        raise ProviderUnavailableError(
            f"Unknown provider '{settings.provider}'. Available: {available}",
            provider=settings.provider,
        )

    api_key = settings.api_key
    if not api_key:
        raise ProviderUnavailableError(
            f"{info['env_key']} not set", provider=settings.provider
        )

    config = LLMConfig.from_settings(settings, default_model=info["model"])
    provider_class = OpenAIProvider if settings.provider == "openai" else AnthropicProvider
    provider = provider_class(config, api_key)
    logger.debug("provider_selected", provider=provider.describe())
    return provider
