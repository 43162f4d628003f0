"""LLM integration for the math teacher.

This module provides a unified interface over LLM providers (Anthropic,
OpenAI) with error translation, a chat transcript, Jinja2 prompt templates
and the teacher collaborator itself.
"""

from travel_sim.llm.anthropic_provider import AnthropicProvider
from travel_sim.llm.base import BaseLLMProvider, LLMConfig, LLMResponse
from travel_sim.llm.chat_session import ChatMessage, ChatSession
from travel_sim.llm.exceptions import (
    AuthenticationError,
    InvalidResponseError,
    LLMError,
    ProviderUnavailableError,
    RateLimitError,
    TemplateError,
    TimeoutError,
)
from travel_sim.llm.factory import PROVIDER_CONFIGS, create_provider
from travel_sim.llm.openai_provider import OpenAIProvider
from travel_sim.llm.teacher import MathTeacher, SimulationContext
from travel_sim.llm.templates import PromptTemplateManager

__all__ = [
    # Base classes
    "BaseLLMProvider",
    "LLMConfig",
    "LLMResponse",
    # Providers
    "AnthropicProvider",
    "OpenAIProvider",
    "PROVIDER_CONFIGS",
    "create_provider",
    # Conversation
    "ChatMessage",
    "ChatSession",
    "PromptTemplateManager",
    "MathTeacher",
    "SimulationContext",
    # Exceptions
    "LLMError",
    "RateLimitError",
    "AuthenticationError",
    "TimeoutError",
    "InvalidResponseError",
    "ProviderUnavailableError",
    "TemplateError",
]
