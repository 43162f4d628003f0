"""Meeting and overtake detection between two sampled trajectories.

Detection works on the sign of the relative position ``red - blue`` before and
after a tick. Sampling at display frame rate makes this approximate, so three
heuristics keep the event log clean:

- on the closed track a runner jumping more than half a lap in one tick is a
  wrap-around, not a crossing of the other runner;
- a sign flip only counts while the runners are close (proximity gate);
- a new event within the debounce window of the previous one is dropped.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from travel_sim.simulation.core.runner_state import RunnerState
from travel_sim.simulation.core.scenario import ScenarioPolicy


class EventType(str, Enum):
    """Classification of a crossing."""

    MEET = "meet"  # head on
    CHASE = "chase"  # overtake


@dataclass(frozen=True)
class MeetingEvent:
    """A detected meeting or overtake.

    Attributes:
        t: Elapsed simulation time at detection
        pos: Midpoint of both runner positions at detection
        event_type: Meet (head on) or chase (overtake)
        red_total_distance: Red runner distance covered so far
        blue_total_distance: Blue runner distance covered so far
    """

    t: float
    pos: float
    event_type: EventType
    red_total_distance: float
    blue_total_distance: float

    def to_dict(self) -> dict:
        """Convert event to dictionary."""
        return {
            "t": self.t,
            "pos": self.pos,
            "type": self.event_type.value,
            "red_total_distance": self.red_total_distance,
            "blue_total_distance": self.blue_total_distance,
        }


@dataclass(frozen=True)
class DetectionSettings:
    """Tuning constants for crossing detection.

    Attributes:
        proximity_fraction: Accept a crossing only if the runners are closer
            than this fraction of the track length
        debounce_seconds: Minimum simulated time between two recorded events
        wrap_guard_fraction: On the closed track, a per-tick jump larger than
            this fraction of the track length is treated as a wrap-around
    """

    proximity_fraction: float = 0.2
    debounce_seconds: float = 1.0
    wrap_guard_fraction: float = 0.5


def crossed(prev_diff: float, next_diff: float) -> bool:
    """Whether the relative position crossed zero during the tick.

    Starting from exact coincidence is not a crossing; landing on it is.
    """
    if prev_diff > 0:
        return next_diff <= 0
    if prev_diff < 0:
        return next_diff >= 0
    return False


class EventDetector:
    """Classify and debounce crossings tick by tick.

    The detector holds no run state: the caller passes the last recorded
    event so debounce decisions stay tied to the caller's event log.
    """

    def __init__(self, settings: Optional[DetectionSettings] = None) -> None:
        self.settings = settings or DetectionSettings()

    def classify(
        self,
        prev_red_pos: float,
        prev_blue_pos: float,
        next_red: RunnerState,
        next_blue: RunnerState,
        track_length: float,
        policy: ScenarioPolicy,
    ) -> Optional[EventType]:
        """Decide whether a crossing happened this tick, ignoring debounce.

        Args:
            prev_red_pos: Red position before the tick
            prev_blue_pos: Blue position before the tick
            next_red: Red state after the tick
            next_blue: Blue state after the tick
            track_length: Track length in meters
            policy: Active scenario policy

        Returns:
            Event classification, or None when no accepted crossing occurred
        """
        prev_diff = prev_red_pos - prev_blue_pos
        next_diff = next_red.position - next_blue.position

        if policy.is_closed_track:
            guard = track_length * self.settings.wrap_guard_fraction
            if (
                abs(next_red.position - prev_red_pos) > guard
                or abs(next_blue.position - prev_blue_pos) > guard
            ):
                return None
            event_type = EventType.CHASE
        elif next_red.direction == next_blue.direction:
            event_type = EventType.CHASE
        else:
            event_type = EventType.MEET

        if not crossed(prev_diff, next_diff):
            return None

        if abs(next_diff) >= track_length * self.settings.proximity_fraction:
            return None

        return event_type

    def detect(
        self,
        t: float,
        prev_red_pos: float,
        prev_blue_pos: float,
        next_red: RunnerState,
        next_blue: RunnerState,
        track_length: float,
        policy: ScenarioPolicy,
        last_event: Optional[MeetingEvent] = None,
    ) -> Optional[MeetingEvent]:
        """Produce at most one event for the tick ending at time ``t``.

        Returns:
            New MeetingEvent, or None if nothing was detected or it was
            suppressed by the debounce window
        """
        event_type = self.classify(
            prev_red_pos, prev_blue_pos, next_red, next_blue, track_length, policy
        )
        if event_type is None:
            return None

        if last_event is not None and t - last_event.t < self.settings.debounce_seconds:
            return None

        return MeetingEvent(
            t=t,
            pos=(next_red.position + next_blue.position) / 2,
            event_type=event_type,
            red_total_distance=next_red.total_distance,
            blue_total_distance=next_blue.total_distance,
        )
