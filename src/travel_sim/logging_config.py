"""Structured logging for the travel problem simulator.

Simulation resets, recorded meetings and teacher requests are emitted as
structlog key/value events: coloured console lines while developing, JSON
lines in production. Everything goes to stderr so ``travel-sim run --json``
keeps a clean stdout.
"""

import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

import structlog
from structlog.typing import EventDict, Processor

from travel_sim.config import LoggingSettings

QUIET_LOGGERS = ("httpx", "httpcore", "anthropic", "openai", "asyncio", "watchdog")

FLOAT_PRECISION = 3


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[str] = None,
    enable_colors: bool = True,
) -> None:
    """Set up structlog and the stdlib root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_format: 'json' or 'console'
        log_file: Also copy stdlib records to this file
        enable_colors: Colour console output
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=build_processors(log_format, enable_colors),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
        context_class=dict,
        cache_logger_on_first_use=True,
    )
    _install_root_handlers(level, log_file)


def configure_from_settings(settings: LoggingSettings, level: Optional[str] = None) -> None:
    """Apply ``LoggingSettings``; ``level`` overrides the configured level."""
    configure_logging(
        log_level=level or settings.level,
        log_format=settings.format,
        log_file=settings.log_file,
    )


def build_processors(log_format: str, enable_colors: bool = True) -> List[Processor]:
    """Processor chain ending in a JSON or console renderer."""
    chain: List[Processor] = [
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        round_floats,
    ]
    if log_format.lower() == "json":
        chain += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        chain.append(structlog.dev.ConsoleRenderer(colors=enable_colors))
    return chain


def round_floats(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Trim float noise from simulation times and positions (0.30000000000000004)."""
    for key, value in event_dict.items():
        if isinstance(value, float):
            event_dict[key] = round(value, FLOAT_PRECISION)
    return event_dict


def _install_root_handlers(level: int, log_file: Optional[str]) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    formatter = logging.Formatter("%(message)s")
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # SDK request logs are noise next to simulation events
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, **context: Any) -> structlog.BoundLogger:
    """structlog logger for ``name`` with ``context`` bound."""
    logger = structlog.get_logger(name)
    return logger.bind(**context) if context else logger
