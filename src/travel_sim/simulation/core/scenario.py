"""Scenario policies: initial placement and boundary behavior per problem type."""

from dataclasses import dataclass
from enum import Enum

from travel_sim.simulation.core.config import SimulationConfig
from travel_sim.simulation.core.runner_state import RunnerId, RunnerState


class ScenarioType(str, Enum):
    """Classic travel problem types."""

    LINEAR_MEET = "LINEAR_MEET"
    LINEAR_CHASE = "LINEAR_CHASE"
    ROUND_TRIP = "ROUND_TRIP"
    CIRCULAR = "CIRCULAR"


class BoundaryRule(str, Enum):
    """What happens when a runner reaches the end of the track."""

    CLAMP = "clamp"
    REFLECT = "reflect"
    WRAP = "wrap"


class StartAnchor(str, Enum):
    """Where the blue runner starts."""

    ORIGIN = "origin"
    FAR_END = "far_end"
    INITIAL_GAP = "initial_gap"


@dataclass(frozen=True)
class ScenarioPolicy:
    """Rule set for one scenario.

    The red runner always starts at the origin moving forward; the policy
    decides where the blue runner starts, which way it heads, and the
    boundary rule both runners obey.

    Attributes:
        scenario: Scenario this policy belongs to
        boundary: Boundary rule applied by the motion model
        blue_start: Start anchor of the blue runner
        blue_direction: Initial direction of the blue runner
        description: Short human readable description
    """

    scenario: ScenarioType
    boundary: BoundaryRule
    blue_start: StartAnchor
    blue_direction: int
    description: str

    @property
    def is_closed_track(self) -> bool:
        """Whether the track wraps around."""
        return self.boundary is BoundaryRule.WRAP

    def blue_start_position(self, config: SimulationConfig) -> float:
        """Starting coordinate of the blue runner for a config."""
        if self.blue_start is StartAnchor.FAR_END:
            return config.track_length
        if self.blue_start is StartAnchor.INITIAL_GAP:
            return config.initial_distance
        return 0.0

    def initial_states(self, config: SimulationConfig) -> tuple[RunnerState, RunnerState]:
        """Create the starting (red, blue) states for a run.

        Args:
            config: Simulation parameters

        Returns:
            Tuple of red and blue RunnerState at t=0
        """
        red = RunnerState(
            runner_id=RunnerId.RED,
            position=0.0,
            direction=1,
            speed=config.red_speed,
        )
        blue = RunnerState(
            runner_id=RunnerId.BLUE,
            position=self.blue_start_position(config),
            direction=self.blue_direction,
            speed=config.blue_speed,
        )
        return red, blue


POLICIES: dict[ScenarioType, ScenarioPolicy] = {
    ScenarioType.LINEAR_MEET: ScenarioPolicy(
        scenario=ScenarioType.LINEAR_MEET,
        boundary=BoundaryRule.CLAMP,
        blue_start=StartAnchor.FAR_END,
        blue_direction=-1,
        description="Straight track, runners start at opposite ends and head toward each other",
    ),
    ScenarioType.LINEAR_CHASE: ScenarioPolicy(
        scenario=ScenarioType.LINEAR_CHASE,
        boundary=BoundaryRule.CLAMP,
        blue_start=StartAnchor.INITIAL_GAP,
        blue_direction=1,
        description="Straight track, both run the same way and red chases blue",
    ),
    ScenarioType.ROUND_TRIP: ScenarioPolicy(
        scenario=ScenarioType.ROUND_TRIP,
        boundary=BoundaryRule.REFLECT,
        blue_start=StartAnchor.FAR_END,
        blue_direction=-1,
        description="Runners bounce back and forth between both ends and meet repeatedly",
    ),
    ScenarioType.CIRCULAR: ScenarioPolicy(
        scenario=ScenarioType.CIRCULAR,
        boundary=BoundaryRule.WRAP,
        blue_start=StartAnchor.ORIGIN,
        blue_direction=1,
        description="Closed loop, both start together and the faster runner laps the slower",
    ),
}


def get_policy(scenario: ScenarioType) -> ScenarioPolicy:
    """Look up the policy for a scenario.

    Args:
        scenario: Scenario type (enum member or its string value)

    Returns:
        The matching ScenarioPolicy
    """
    return POLICIES[ScenarioType(scenario)]
