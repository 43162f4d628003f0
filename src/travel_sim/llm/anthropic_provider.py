"""Claude through the Anthropic Messages API."""

from typing import Any, Optional

import anthropic
from anthropic import AsyncAnthropic

from travel_sim.llm.base import BaseLLMProvider, ErrorRule, LLMConfig, LLMResponse, ModelPrice
from travel_sim.llm.exceptions import (
    AuthenticationError,
    ProviderUnavailableError,
    RateLimitError,
    TimeoutError,
)

DEFAULT_ANTHROPIC_MODEL = "claude-3-5-haiku-20241022"

ANTHROPIC_PRICING = {
    "claude-3-5-sonnet-20241022": ModelPrice(0.003, 0.015),
    "claude-3-5-haiku-20241022": ModelPrice(0.0008, 0.004),
    "claude-3-haiku-20240307": ModelPrice(0.00025, 0.00125),
}

# APITimeoutError subclasses APIConnectionError, so it is matched first
ANTHROPIC_ERROR_RULES = (
    ErrorRule((anthropic.RateLimitError,), RateLimitError, "rate limit exceeded"),
    ErrorRule((anthropic.AuthenticationError,), AuthenticationError, "authentication failed"),
    ErrorRule((anthropic.APITimeoutError,), TimeoutError, "request timed out"),
    ErrorRule(
        (anthropic.APIConnectionError, anthropic.InternalServerError),
        ProviderUnavailableError,
        "service unavailable",
    ),
)


class AnthropicProvider(BaseLLMProvider):
    """Anthropic-backed teacher voice."""

    label = "Anthropic"
    default_model = DEFAULT_ANTHROPIC_MODEL
    pricing = ANTHROPIC_PRICING
    error_rules = ANTHROPIC_ERROR_RULES

    def __init__(self, config: LLMConfig, api_key: str):
        super().__init__(config)
        self.client = AsyncAnthropic(api_key=api_key, timeout=config.timeout)
        self.logger.info("anthropic_provider_initialized", model=config.model)

    @property
    def name(self) -> str:
        return "anthropic"

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Send one user turn; the persona goes in the top-level ``system`` field."""
        request: dict[str, Any] = dict(
            model=self.config.model,
            max_tokens=kwargs.get("max_tokens", self.config.max_tokens),
            temperature=kwargs.get("temperature", self.config.temperature),
            messages=[{"role": "user", "content": prompt}],
        )
        if system_prompt:
            request["system"] = system_prompt

        self.logger.debug("anthropic_request_started", model=self.config.model)
        try:
            message = await self.client.messages.create(**request)
        except anthropic.AnthropicError as e:
            raise self.translate_error(e) from e

        # an empty reply is returned as-is; the teacher has its own fallback for it
        text = "".join(getattr(block, "text", "") or "" for block in message.content)
        return self.build_response(
            text,
            message.usage.input_tokens,
            message.usage.output_tokens,
            stop_reason=message.stop_reason,
        )
