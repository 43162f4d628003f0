"""Errors raised by the teacher's LLM providers.

Providers translate SDK failures into this hierarchy so the math teacher can
fall back to a friendly message without knowing which SDK is in use.
``transient`` marks failures where asking again later may succeed.
"""

from typing import Optional


class LLMError(Exception):
    """Base class for provider failures."""

    transient = False

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class RateLimitError(LLMError):
    """Too many requests (HTTP 429)."""

    transient = True


class AuthenticationError(LLMError):
    """API key rejected (HTTP 401/403)."""


class TimeoutError(LLMError):
    """The provider did not answer in time."""

    transient = True


class InvalidResponseError(LLMError):
    """Reply was empty or could not be used."""


class ProviderUnavailableError(LLMError):
    """Provider is unknown, has no API key, or cannot be reached."""


class TemplateError(LLMError):
    """A prompt template is missing or failed to render."""
