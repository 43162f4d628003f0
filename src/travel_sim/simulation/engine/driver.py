"""Simulation driver: owns the clock and commits one tick at a time."""

from dataclasses import dataclass
from typing import Optional

import structlog

from travel_sim.simulation.core.config import SimulationConfig
from travel_sim.simulation.core.events import (
    DetectionSettings,
    EventDetector,
    MeetingEvent,
)
from travel_sim.simulation.core.history import (
    DEFAULT_HISTORY_CAPACITY,
    HistoryPoint,
    HistoryRecorder,
)
from travel_sim.simulation.core.runner_state import RunnerId, RunnerState
from travel_sim.simulation.core.scenario import ScenarioPolicy, ScenarioType, get_policy
from travel_sim.simulation.engine.motion import advance

logger = structlog.get_logger(__name__)

DEFAULT_MAX_FRAME_MS = 100.0


@dataclass(frozen=True)
class SimulationSnapshot:
    """Committed simulation state as seen by renderers.

    Attributes:
        elapsed: Simulated seconds since reset
        scenario: Active scenario
        config: Active simulation parameters
        red: Red runner state
        blue: Blue runner state
        history: Position samples, oldest first
        events: Recorded meetings and overtakes, oldest first
        is_playing: Whether frames currently advance the clock
    """

    elapsed: float
    scenario: ScenarioType
    config: SimulationConfig
    red: RunnerState
    blue: RunnerState
    history: tuple[HistoryPoint, ...]
    events: tuple[MeetingEvent, ...]
    is_playing: bool

    @property
    def track_length(self) -> float:
        """Track length of the active config."""
        return self.config.track_length


class SimulationDriver:
    """Advance two runners, detect crossings and keep history.

    ``step`` is the single entry point that moves time forward; ``on_frame``
    adapts a display refresh callback (millisecond timestamps) onto it.
    All values for a tick are computed first and committed together, so a
    snapshot never reflects a partially applied tick.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        scenario: ScenarioType = ScenarioType.LINEAR_MEET,
        detection: Optional[DetectionSettings] = None,
        max_frame_ms: float = DEFAULT_MAX_FRAME_MS,
        history_capacity: int = DEFAULT_HISTORY_CAPACITY,
    ) -> None:
        """Initialize driver and reset it for the given scenario.

        Args:
            config: Simulation parameters (defaults to the standard problem)
            scenario: Initial scenario
            detection: Crossing detection tuning
            max_frame_ms: Upper bound on a single tick in milliseconds
            history_capacity: Number of history samples kept
        """
        if max_frame_ms <= 0:
            raise ValueError(f"max_frame_ms must be > 0, got {max_frame_ms}")

        self.config = config or SimulationConfig()
        self.policy: ScenarioPolicy = get_policy(scenario)
        self.detector = EventDetector(detection)
        self.max_frame_ms = max_frame_ms
        self.history = HistoryRecorder(history_capacity)

        self._events: list[MeetingEvent] = []
        self._elapsed = 0.0
        self._is_playing = False
        self._previous_timestamp: Optional[float] = None
        self._red, self._blue = self.policy.initial_states(self.config)

        self.reset()

    @property
    def scenario(self) -> ScenarioType:
        """Active scenario."""
        return self.policy.scenario

    @property
    def elapsed(self) -> float:
        """Simulated seconds since reset."""
        return self._elapsed

    @property
    def red(self) -> RunnerState:
        """Current red runner state."""
        return self._red

    @property
    def blue(self) -> RunnerState:
        """Current blue runner state."""
        return self._blue

    @property
    def events(self) -> tuple[MeetingEvent, ...]:
        """Recorded events, oldest first."""
        return tuple(self._events)

    @property
    def is_playing(self) -> bool:
        """Whether frames currently advance the clock."""
        return self._is_playing

    @property
    def max_step(self) -> float:
        """Largest tick in seconds."""
        return self.max_frame_ms / 1000.0

    def runner(self, runner_id: RunnerId) -> RunnerState:
        """Current state of one runner."""
        return self._red if runner_id == RunnerId.RED else self._blue

    def reset(self) -> None:
        """Put both runners back on their start marks and clear the run."""
        red, blue = self.policy.initial_states(self.config)

        self._is_playing = False
        self._previous_timestamp = None
        self._elapsed = 0.0
        self._red, self._blue = red, blue
        self._events = []
        self.history.clear()
        self.history.record(HistoryPoint(t=0.0, red_pos=red.position, blue_pos=blue.position))

        logger.info(
            "simulation_reset",
            scenario=self.scenario.value,
            **self.config.to_dict(),
        )

    def configure(self, config: SimulationConfig) -> None:
        """Replace simulation parameters; implies a reset."""
        self.config = config
        self.reset()

    def select_scenario(self, scenario: ScenarioType) -> None:
        """Switch to another scenario; implies a reset."""
        self.policy = get_policy(scenario)
        self.reset()

    def step(self, dt: float) -> Optional[MeetingEvent]:
        """Advance the simulation by ``dt`` seconds.

        ``dt`` is clamped to ``[0, max_step]`` before use.

        Args:
            dt: Requested time increment in seconds

        Returns:
            The event recorded during this tick, if any
        """
        dt = min(max(dt, 0.0), self.max_step)
        track_length = self.config.track_length

        prev_red, prev_blue = self._red, self._blue
        next_red = advance(prev_red, self.config.red_speed, dt, track_length, self.policy)
        next_blue = advance(prev_blue, self.config.blue_speed, dt, track_length, self.policy)
        new_time = self._elapsed + dt

        event = self.detector.detect(
            new_time,
            prev_red.position,
            prev_blue.position,
            next_red,
            next_blue,
            track_length,
            self.policy,
            last_event=self._events[-1] if self._events else None,
        )

        self._red, self._blue = next_red, next_blue
        self._elapsed = new_time
        if event is not None:
            self._events.append(event)
            logger.info(
                "meeting_event_recorded",
                t=round(event.t, 3),
                pos=round(event.pos, 2),
                event_type=event.event_type.value,
                count=len(self._events),
            )
        self.history.record(
            HistoryPoint(t=new_time, red_pos=next_red.position, blue_pos=next_blue.position)
        )

        return event

    def play(self) -> None:
        """Start advancing on frames."""
        self._is_playing = True
        logger.debug("simulation_playing", elapsed=self._elapsed)

    def pause(self) -> None:
        """Stop advancing and forget the last frame timestamp."""
        self._is_playing = False
        self._previous_timestamp = None
        logger.debug("simulation_paused", elapsed=self._elapsed)

    def toggle(self) -> bool:
        """Flip between playing and paused.

        Returns:
            New playing state
        """
        if self._is_playing:
            self.pause()
        else:
            self.play()
        return self._is_playing

    def on_frame(self, timestamp_ms: float) -> Optional[MeetingEvent]:
        """Display refresh callback.

        The first frame after play only records its timestamp; later frames
        step by the wall-clock delta clamped to ``max_frame_ms``.

        Args:
            timestamp_ms: Monotonic frame timestamp in milliseconds

        Returns:
            Event recorded during this frame, if any
        """
        if not self._is_playing:
            return None

        previous = self._previous_timestamp
        self._previous_timestamp = timestamp_ms
        if previous is None:
            return None

        delta_ms = min(timestamp_ms - previous, self.max_frame_ms)
        return self.step(delta_ms / 1000.0)

    def run_for(self, duration: float, dt: float = 1 / 60) -> list[MeetingEvent]:
        """Step with a fixed ``dt`` until ``duration`` more seconds have elapsed.

        Args:
            duration: Simulated seconds to run
            dt: Tick size in seconds

        Returns:
            Events recorded during this run, oldest first
        """
        if dt <= 0:
            raise ValueError(f"dt must be > 0, got {dt}")

        target = self._elapsed + duration
        recorded = []
        while target - self._elapsed > 1e-9:
            event = self.step(min(dt, target - self._elapsed))
            if event is not None:
                recorded.append(event)
        return recorded

    def snapshot(self) -> SimulationSnapshot:
        """Immutable view of the committed state."""
        return SimulationSnapshot(
            elapsed=self._elapsed,
            scenario=self.scenario,
            config=self.config,
            red=self._red,
            blue=self._blue,
            history=self.history.points(),
            events=tuple(self._events),
            is_playing=self._is_playing,
        )
