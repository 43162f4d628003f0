"""Environment-based configuration for the simulator application.

Handles logging, LLM and clock settings for the CLI and the web page.
"""

from dataclasses import dataclass, field
import os
from typing import Optional

DEFAULT_TRACK_LENGTH = 400.0
DEFAULT_RED_SPEED = 10.0
DEFAULT_BLUE_SPEED = 6.0
DEFAULT_INITIAL_DISTANCE = 100.0


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "console"
    log_file: Optional[str] = None


@dataclass
class LLMSettings:
    """Teacher LLM configuration."""

    provider: str = "anthropic"
    model: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 500
    timeout: int = 30
    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None

    @property
    def api_key(self) -> Optional[str]:
        """API key for the selected provider."""
        if self.provider == "openai":
            return self.openai_api_key
        return self.anthropic_api_key


@dataclass
class ClockSettings:
    """Simulation clock and detection tuning."""

    max_frame_ms: float = 100.0
    proximity_fraction: float = 0.2
    debounce_seconds: float = 1.0
    time_window: float = 20.0
    history_capacity: int = 1000


@dataclass
class Config:
    """Main configuration class."""

    env: str = "development"
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    llm: LLMSettings = field(default_factory=LLMSettings)
    clock: ClockSettings = field(default_factory=ClockSettings)

    @classmethod
    def from_env(cls) -> "Config":
        """Build configuration from environment variables."""
        env = os.getenv("TRAVEL_SIM_ENV", "development")
        default_format = "json" if env == "production" else "console"

        return cls(
            env=env,
            logging=LoggingSettings(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", default_format),
                log_file=os.getenv("LOG_FILE"),
            ),
            llm=LLMSettings(
                provider=os.getenv("TRAVEL_SIM_LLM_PROVIDER", "anthropic").lower(),
                model=os.getenv("TRAVEL_SIM_LLM_MODEL"),
                temperature=float(os.getenv("TRAVEL_SIM_LLM_TEMPERATURE", "0.7")),
                max_tokens=int(os.getenv("TRAVEL_SIM_LLM_MAX_TOKENS", "500")),
                timeout=int(os.getenv("TRAVEL_SIM_LLM_TIMEOUT", "30")),
                anthropic_api_key=os.getenv("ANTHROPIC_API_KEY"),
                openai_api_key=os.getenv("OPENAI_API_KEY"),
            ),
            clock=ClockSettings(
                max_frame_ms=float(os.getenv("TRAVEL_SIM_MAX_FRAME_MS", "100")),
                proximity_fraction=float(
                    os.getenv("TRAVEL_SIM_PROXIMITY_FRACTION", "0.2")
                ),
                debounce_seconds=float(os.getenv("TRAVEL_SIM_DEBOUNCE_SECONDS", "1.0")),
                time_window=float(os.getenv("TRAVEL_SIM_TIME_WINDOW", "20")),
            ),
        )

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env == "production"


_config: Optional[Config] = None


def get_config() -> Config:
    """Get the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Forget the cached configuration (used by tests)."""
    global _config
    _config = None
