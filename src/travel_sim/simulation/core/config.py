"""Simulation parameters for a single run."""

from dataclasses import dataclass

from travel_sim.config import (
    DEFAULT_BLUE_SPEED,
    DEFAULT_INITIAL_DISTANCE,
    DEFAULT_RED_SPEED,
    DEFAULT_TRACK_LENGTH,
)
from travel_sim.simulation.core.runner_state import RunnerId

# Ranges offered by the configuration controls
TRACK_LENGTH_RANGE = (100.0, 1000.0)
SPEED_RANGE = (1.0, 20.0)
MIN_CHASE_CLEARANCE = 50.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class SimulationConfig:
    """Track and runner parameters, fixed for the duration of a run.

    Attributes:
        track_length: Track length in meters (positive)
        red_speed: Red runner speed in m/s
        blue_speed: Blue runner speed in m/s
        initial_distance: Head start of the blue runner in the chase scenario
    """

    track_length: float = DEFAULT_TRACK_LENGTH
    red_speed: float = DEFAULT_RED_SPEED
    blue_speed: float = DEFAULT_BLUE_SPEED
    initial_distance: float = DEFAULT_INITIAL_DISTANCE

    def __post_init__(self) -> None:
        """Reject configurations the simulation core cannot handle."""
        if self.track_length <= 0:
            raise ValueError(f"Track length must be > 0, got {self.track_length}")
        if self.red_speed < 0 or self.blue_speed < 0:
            raise ValueError(
                f"Speeds must be >= 0, got red={self.red_speed} blue={self.blue_speed}"
            )
        if self.initial_distance < 0:
            raise ValueError(
                f"Initial distance must be >= 0, got {self.initial_distance}"
            )

    @classmethod
    def from_user_input(
        cls,
        track_length: float,
        red_speed: float,
        blue_speed: float,
        initial_distance: float = DEFAULT_INITIAL_DISTANCE,
    ) -> "SimulationConfig":
        """Build a config from raw control values, clamping into control ranges.

        Args:
            track_length: Requested track length in meters
            red_speed: Requested red speed in m/s
            blue_speed: Requested blue speed in m/s
            initial_distance: Requested chase head start in meters

        Returns:
            A valid SimulationConfig
        """
        track = _clamp(float(track_length), *TRACK_LENGTH_RANGE)
        return cls(
            track_length=track,
            red_speed=_clamp(float(red_speed), *SPEED_RANGE),
            blue_speed=_clamp(float(blue_speed), *SPEED_RANGE),
            initial_distance=_clamp(
                float(initial_distance), 0.0, track - MIN_CHASE_CLEARANCE
            ),
        )

    def speed_of(self, runner_id: RunnerId) -> float:
        """Speed configured for a runner."""
        return self.red_speed if runner_id == RunnerId.RED else self.blue_speed

    def to_dict(self) -> dict[str, float]:
        """Convert config to dictionary."""
        return {
            "track_length": self.track_length,
            "red_speed": self.red_speed,
            "blue_speed": self.blue_speed,
            "initial_distance": self.initial_distance,
        }
