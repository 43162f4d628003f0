"""Provider interface shared by the math teacher's LLM backends.

A provider answers one prompt (plus an optional system instruction) and
reports token usage; the teacher never talks to an SDK directly. Concrete
providers describe their SDK with two tables: ``pricing`` for cost estimates
and ``error_rules`` for mapping SDK exceptions onto ``LLMError`` subclasses.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, NamedTuple, Optional

import structlog

from travel_sim.config import LLMSettings
from travel_sim.llm.exceptions import InvalidResponseError, LLMError


class ModelPrice(NamedTuple):
    """USD per 1K tokens."""

    input: float
    output: float


class ErrorRule(NamedTuple):
    """SDK exception types translated to ``error_class`` with ``summary``."""

    sdk_errors: tuple[type[Exception], ...]
    error_class: type[LLMError]
    summary: str


@dataclass
class LLMResponse:
    """One completion returned by a provider.

    Attributes:
        content: Reply text
        model: Model that produced the reply
        provider: Provider name
        input_tokens: Prompt tokens billed
        output_tokens: Completion tokens billed
        estimated_cost: Cost estimate in USD
        metadata: Provider-specific extras (stop reason, message id)
    """

    content: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    estimated_cost: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    @property
    def is_empty(self) -> bool:
        """True when the reply carries no visible text."""
        return not (self.content or "").strip()


@dataclass
class LLMConfig:
    """Generation settings handed to a provider."""

    model: str
    temperature: float = 0.7
    max_tokens: int = 500
    timeout: int = 30

    @classmethod
    def from_settings(cls, settings: LLMSettings, default_model: str) -> "LLMConfig":
        """Build from environment settings, using ``default_model`` when unset."""
        return cls(
            model=settings.model or default_model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            timeout=settings.timeout,
        )


class BaseLLMProvider(ABC):
    """Common surface of the Anthropic and OpenAI providers."""

    label = "LLM"
    default_model = ""
    pricing: dict[str, ModelPrice] = {}
    error_rules: tuple[ErrorRule, ...] = ()

    def __init__(self, config: LLMConfig):
        self.config = config
        self.logger = structlog.get_logger(__name__).bind(provider_class=type(self).__name__)

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Answer ``prompt``.

        Args:
            prompt: Student question with simulation context
            system_prompt: Teacher persona instruction
            **kwargs: Per-call ``temperature`` / ``max_tokens`` overrides

        Raises:
            LLMError: Translated SDK failure
        """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    def available_models(self) -> list[str]:
        return list(self.pricing)

    def estimate_cost(self, input_tokens: int, output_tokens: int) -> float:
        """USD cost of a call; unknown models are priced like the default one."""
        price = self.pricing.get(self.config.model) or self.pricing.get(
            self.default_model, ModelPrice(0.0, 0.0)
        )
        return (input_tokens * price.input + output_tokens * price.output) / 1000

    def translate_error(self, error: Exception) -> LLMError:
        """First matching ``error_rules`` entry wins; anything else is an API error."""
        for rule in self.error_rules:
            if isinstance(error, rule.sdk_errors):
                return rule.error_class(f"{self.label} {rule.summary}: {error}", provider=self.name)
        self.logger.error("provider_api_error", error=str(error), error_type=type(error).__name__)
        return InvalidResponseError(f"{self.label} API error: {error}", provider=self.name)

    def build_response(
        self, content: str, input_tokens: int, output_tokens: int, **metadata: Any
    ) -> LLMResponse:
        """Wrap a reply with usage and cost, logging the receipt."""
        cost = self.estimate_cost(input_tokens, output_tokens)
        self.logger.info(
            "provider_response_received",
            provider=self.name,
            tokens=input_tokens + output_tokens,
            cost=cost,
            **metadata,
        )
        return LLMResponse(
            content=content,
            model=self.config.model,
            provider=self.name,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            estimated_cost=cost,
            metadata=metadata,
        )

    def count_tokens(self, text: str) -> int:
        """Approximate tokens at four characters each."""
        return len(text) // 4

    def describe(self) -> str:
        return f"{self.name}/{self.config.model}"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} model={self.config.model}>"
