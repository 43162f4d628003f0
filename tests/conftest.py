"""Root-level pytest configuration and shared fixtures."""

import logging
import sys

import pytest
import structlog

from travel_sim.config import reset_config
from travel_sim.simulation.core.config import SimulationConfig
from travel_sim.simulation.core.scenario import ScenarioType
from travel_sim.simulation.engine.driver import SimulationDriver

ENV_VARS = (
    "TRAVEL_SIM_ENV",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FILE",
    "TRAVEL_SIM_LLM_PROVIDER",
    "TRAVEL_SIM_LLM_MODEL",
    "TRAVEL_SIM_LLM_TEMPERATURE",
    "TRAVEL_SIM_LLM_MAX_TOKENS",
    "TRAVEL_SIM_LLM_TIMEOUT",
    "ANTHROPIC_API_KEY",
    "OPENAI_API_KEY",
    "TRAVEL_SIM_MAX_FRAME_MS",
    "TRAVEL_SIM_PROXIMITY_FRACTION",
    "TRAVEL_SIM_DEBOUNCE_SECONDS",
    "TRAVEL_SIM_TIME_WINDOW",
)


def pytest_configure(config):
    """Register custom markers and configure test environment."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "cli: mark test as CLI test")
    config.addinivalue_line("markers", "llm: mark test as LLM integration test")

    configure_test_logging()


def configure_test_logging() -> None:
    """Configure structlog for the test run.

    Output goes to stderr so it never mixes with CLI stdout captured by
    CliRunner.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.BoundLogger,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        context_class=dict,
        cache_logger_on_first_use=False,  # Disable caching in tests
    )


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate every test from the developer's environment variables."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def default_config():
    """The standard 400 m problem: red 10 m/s, blue 6 m/s, 100 m head start."""
    return SimulationConfig()


@pytest.fixture
def make_driver(default_config):
    """Factory for drivers on a given scenario."""

    def _make(scenario=ScenarioType.LINEAR_MEET, config=None, **kwargs):
        return SimulationDriver(config=config or default_config, scenario=scenario, **kwargs)

    return _make


@pytest.fixture
def restore_logging():
    """Undo configure_logging: test structlog setup and previous root handlers."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    structlog.reset_defaults()
    configure_test_logging()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
