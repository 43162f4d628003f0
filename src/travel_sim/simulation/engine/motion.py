"""Per-tick motion of a single runner under a scenario's boundary rule."""

from dataclasses import replace

from travel_sim.simulation.core.runner_state import RunnerState
from travel_sim.simulation.core.scenario import BoundaryRule, ScenarioPolicy


def advance(
    state: RunnerState,
    speed: float,
    dt: float,
    track_length: float,
    policy: ScenarioPolicy,
) -> RunnerState:
    """Move a runner forward in time by ``dt`` seconds.

    Inputs are assumed validated: ``speed`` and ``dt`` non-negative,
    ``track_length`` positive. The caller bounds ``dt`` so that one tick never
    covers more than one lap on the closed track.

    Args:
        state: Runner state before the tick
        speed: Runner speed in m/s
        dt: Elapsed time in seconds
        track_length: Track length in meters
        policy: Active scenario policy

    Returns:
        New RunnerState after the tick
    """
    displacement = speed * dt
    position = state.position
    direction = state.direction
    laps = state.laps

    if policy.boundary is BoundaryRule.WRAP:
        position += displacement
        if position >= track_length:
            position -= track_length
            laps += 1
    elif policy.boundary is BoundaryRule.REFLECT:
        position += displacement * direction
        if position < 0:
            position = -position
            direction = 1
        if position > track_length:
            position = track_length - (position - track_length)
            direction = -1
    else:
        position += displacement * direction
        position = min(max(position, 0.0), track_length)

    return replace(
        state,
        position=position,
        direction=direction,
        speed=speed,
        laps=laps,
        total_distance=state.total_distance + displacement,
    )
