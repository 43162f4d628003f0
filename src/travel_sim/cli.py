"""Command line interface for the travel problem simulator.

Runs a headless simulation and prints the meeting table, or asks the math
teacher a single question about a configured scenario.
"""

import asyncio
from dataclasses import replace
import json
import sys
from typing import Optional

import click
import structlog

from travel_sim.config import (
    DEFAULT_BLUE_SPEED,
    DEFAULT_INITIAL_DISTANCE,
    DEFAULT_RED_SPEED,
    DEFAULT_TRACK_LENGTH,
    get_config,
)
from travel_sim.llm.chat_session import ChatSession
from travel_sim.llm.exceptions import ProviderUnavailableError
from travel_sim.llm.factory import PROVIDER_CONFIGS, create_provider
from travel_sim.llm.teacher import MathTeacher, SimulationContext
from travel_sim.logging_config import configure_from_settings
from travel_sim.simulation.core.config import SimulationConfig
from travel_sim.simulation.core.events import DetectionSettings, MeetingEvent
from travel_sim.simulation.core.scenario import ScenarioType
from travel_sim.simulation.engine.driver import SimulationDriver

logger = structlog.get_logger(__name__)

SCENARIO_CHOICES = [s.value for s in ScenarioType]


def scenario_options(func):
    """Shared options describing a scenario and its parameters."""
    options = [
        click.option(
            "--scenario",
            "-s",
            type=click.Choice(SCENARIO_CHOICES, case_sensitive=False),
            default=ScenarioType.LINEAR_MEET.value,
            show_default=True,
            help="Travel problem to simulate",
        ),
        click.option(
            "--track-length", type=float, default=DEFAULT_TRACK_LENGTH, show_default=True
        ),
        click.option("--red-speed", type=float, default=DEFAULT_RED_SPEED, show_default=True),
        click.option("--blue-speed", type=float, default=DEFAULT_BLUE_SPEED, show_default=True),
        click.option(
            "--initial-distance",
            type=float,
            default=DEFAULT_INITIAL_DISTANCE,
            show_default=True,
            help="Blue runner head start (chase scenario only)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_config(
    track_length: float, red_speed: float, blue_speed: float, initial_distance: float
) -> SimulationConfig:
    """Create a config, turning validation errors into usage errors."""
    try:
        return SimulationConfig(
            track_length=track_length,
            red_speed=red_speed,
            blue_speed=blue_speed,
            initial_distance=initial_distance,
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def format_event_table(events: list[MeetingEvent]) -> str:
    """Render events as a fixed-width text table."""
    if not events:
        return "No meetings yet."

    lines = [f"{'#':>3}  {'time':>8}  {'position':>9}  {'red dist':>9}  {'blue dist':>9}  type"]
    for index, event in enumerate(events, 1):
        lines.append(
            f"{index:>3}  {event.t:>7.1f}s  {event.pos:>8.0f}m  "
            f"{event.red_total_distance:>8.0f}m  {event.blue_total_distance:>8.0f}m  "
            f"{event.event_type.value}"
        )
    return "\n".join(lines)


@click.command()
@scenario_options
@click.option(
    "--duration", "-d", type=float, default=60.0, show_default=True, help="Simulated seconds"
)
@click.option(
    "--dt", type=float, default=1 / 60, show_default=True, help="Tick size in seconds"
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    show_default=True,
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def run(
    scenario: str,
    track_length: float,
    red_speed: float,
    blue_speed: float,
    initial_distance: float,
    duration: float,
    dt: float,
    output_format: str,
    verbose: bool,
):
    """Run a headless simulation and print the meeting table.

    Example:
        travel-sim run --scenario CIRCULAR --duration 120
    """
    settings = get_config()
    configure_from_settings(settings.logging, level="DEBUG" if verbose else "WARNING")

    if duration < 0:
        raise click.BadParameter("duration must be >= 0", param_hint="--duration")
    if dt <= 0:
        raise click.BadParameter("dt must be > 0", param_hint="--dt")

    config = build_config(track_length, red_speed, blue_speed, initial_distance)
    driver = SimulationDriver(
        config=config,
        scenario=ScenarioType(scenario.upper()),
        detection=DetectionSettings(
            proximity_fraction=settings.clock.proximity_fraction,
            debounce_seconds=settings.clock.debounce_seconds,
        ),
        max_frame_ms=settings.clock.max_frame_ms,
    )
    events = driver.run_for(duration, dt)
    logger.info("headless_run_finished", elapsed=driver.elapsed, events=len(events))

    if output_format == "json":
        payload = {
            "scenario": driver.scenario.value,
            "config": config.to_dict(),
            "elapsed": driver.elapsed,
            "red": driver.red.to_dict(),
            "blue": driver.blue.to_dict(),
            "events": [event.to_dict() for event in events],
        }
        click.echo(json.dumps(payload, indent=2))
        return

    click.echo(f"Scenario: {driver.scenario.value}  elapsed: {driver.elapsed:.1f}s")
    click.echo(format_event_table(events))
    click.echo(
        f"Red: {driver.red.total_distance:.0f}m ({driver.red.laps} laps)  "
        f"Blue: {driver.blue.total_distance:.0f}m ({driver.blue.laps} laps)"
    )


@click.command()
@click.argument("question")
@scenario_options
@click.option(
    "--elapsed", type=float, default=0.0, show_default=True, help="Simulated seconds so far"
)
@click.option(
    "--provider",
    "-p",
    type=click.Choice(list(PROVIDER_CONFIGS)),
    default=None,
    help="LLM provider to use (defaults to TRAVEL_SIM_LLM_PROVIDER)",
)
@click.option("--model", "-m", type=str, default=None, help="Model override")
def ask(
    question: str,
    scenario: str,
    track_length: float,
    red_speed: float,
    blue_speed: float,
    initial_distance: float,
    elapsed: float,
    provider: Optional[str],
    model: Optional[str],
):
    """Ask the math teacher a single question about a scenario.

    Example:
        travel-sim ask "Why do they meet at 250 m?" --scenario LINEAR_MEET
    """
    if not question.strip():
        raise click.BadParameter("question must not be blank", param_hint="QUESTION")

    settings = get_config()
    configure_from_settings(settings.logging, level="WARNING")

    llm_settings = replace(
        settings.llm,
        provider=provider or settings.llm.provider,
        model=model or settings.llm.model,
    )

    try:
        llm_provider = create_provider(llm_settings)
    except ProviderUnavailableError as e:
        click.echo(f"Failed to initialize provider: {e}", err=True)
        sys.exit(1)

    context = SimulationContext(
        scenario=ScenarioType(scenario.upper()),
        config=build_config(track_length, red_speed, blue_speed, initial_distance),
        elapsed=elapsed,
    )
    teacher = MathTeacher(llm_provider, timeout=llm_settings.timeout)

    click.echo(click.style("Thinking...", fg="yellow"))
    answer = asyncio.run(teacher.ask(question, ChatSession(), context))
    click.echo(click.style("\nTeacher: ", fg="green", bold=True))
    click.echo(answer)


@click.group()
def cli():
    """Travel problem simulator."""
    pass


cli.add_command(run)
cli.add_command(ask)


if __name__ == "__main__":
    cli()
