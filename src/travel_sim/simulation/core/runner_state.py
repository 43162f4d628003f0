"""Runner state tracking during a travel problem simulation."""

from dataclasses import dataclass
from enum import Enum


class RunnerId(str, Enum):
    """The two runners on the track."""

    RED = "red"
    BLUE = "blue"


@dataclass(frozen=True)
class RunnerState:
    """State of one runner at a simulation instant.

    Attributes:
        runner_id: Which runner this is
        position: Coordinate along the track in meters
        direction: +1 (toward the far end) or -1 (toward the origin)
        speed: Speed used for the most recent step in m/s
        laps: Completed laps, only meaningful on the circular track
        total_distance: Distance covered since reset, never decreases
    """

    runner_id: RunnerId
    position: float = 0.0
    direction: int = 1
    speed: float = 0.0
    laps: int = 0
    total_distance: float = 0.0

    def __post_init__(self) -> None:
        """Validate initial state."""
        if self.direction not in (1, -1):
            raise ValueError(f"Direction must be +1 or -1, got {self.direction}")
        if self.speed < 0:
            raise ValueError(f"Speed must be >= 0, got {self.speed}")

    def to_dict(self) -> dict:
        """Convert state to a plain dictionary."""
        return {
            "runner_id": self.runner_id.value,
            "position": self.position,
            "direction": self.direction,
            "speed": self.speed,
            "laps": self.laps,
            "total_distance": self.total_distance,
        }
