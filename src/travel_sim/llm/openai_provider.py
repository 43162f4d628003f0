"""GPT models through the OpenAI Chat Completions API."""

from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from travel_sim.llm.base import BaseLLMProvider, ErrorRule, LLMConfig, LLMResponse, ModelPrice
from travel_sim.llm.exceptions import (
    AuthenticationError,
    InvalidResponseError,
    ProviderUnavailableError,
    RateLimitError,
    TimeoutError,
)

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"

OPENAI_PRICING = {
    "gpt-4o": ModelPrice(0.0025, 0.01),
    "gpt-4o-mini": ModelPrice(0.00015, 0.0006),
    "gpt-3.5-turbo": ModelPrice(0.0005, 0.0015),
}

OPENAI_ERROR_RULES = (
    ErrorRule((openai.RateLimitError,), RateLimitError, "rate limit exceeded"),
    ErrorRule((openai.AuthenticationError,), AuthenticationError, "authentication failed"),
    ErrorRule((openai.APITimeoutError,), TimeoutError, "request timed out"),
    ErrorRule(
        (openai.APIConnectionError, openai.InternalServerError),
        ProviderUnavailableError,
        "service unavailable",
    ),
)


class OpenAIProvider(BaseLLMProvider):
    """OpenAI-backed teacher voice."""

    label = "OpenAI"
    default_model = DEFAULT_OPENAI_MODEL
    pricing = OPENAI_PRICING
    error_rules = OPENAI_ERROR_RULES

    def __init__(self, config: LLMConfig, api_key: str):
        super().__init__(config)
        self.client = AsyncOpenAI(api_key=api_key, timeout=config.timeout)
        self.logger.info("openai_provider_initialized", model=config.model)

    @property
    def name(self) -> str:
        return "openai"

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Send the persona as a system message followed by the user turn."""
        messages = [{"role": "user", "content": prompt}]
        if system_prompt:
            messages.insert(0, {"role": "system", "content": system_prompt})

        self.logger.debug("openai_request_started", model=self.config.model)
        try:
            completion = await self.client.chat.completions.create(
                model=self.config.model,
                messages=messages,
                temperature=kwargs.get("temperature", self.config.temperature),
                max_tokens=kwargs.get("max_tokens", self.config.max_tokens),
            )
        except openai.OpenAIError as e:
            raise self.translate_error(e) from e

        if not completion.choices:
            raise InvalidResponseError("OpenAI returned no choices", provider=self.name)
        choice = completion.choices[0]
        usage = completion.usage
        return self.build_response(
            choice.message.content or "",
            usage.prompt_tokens if usage else 0,
            usage.completion_tokens if usage else 0,
            finish_reason=choice.finish_reason,
        )
