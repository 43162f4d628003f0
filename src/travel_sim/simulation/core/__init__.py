"""Core simulation state models and crossing detection."""

from travel_sim.simulation.core.config import SimulationConfig
from travel_sim.simulation.core.events import (
    DetectionSettings,
    EventDetector,
    EventType,
    MeetingEvent,
)
from travel_sim.simulation.core.history import HistoryPoint, HistoryRecorder
from travel_sim.simulation.core.runner_state import RunnerId, RunnerState
from travel_sim.simulation.core.scenario import (
    POLICIES,
    BoundaryRule,
    ScenarioPolicy,
    ScenarioType,
    get_policy,
)

__all__ = [
    "SimulationConfig",
    "RunnerId",
    "RunnerState",
    "ScenarioType",
    "ScenarioPolicy",
    "BoundaryRule",
    "POLICIES",
    "get_policy",
    "HistoryPoint",
    "HistoryRecorder",
    "EventType",
    "MeetingEvent",
    "DetectionSettings",
    "EventDetector",
]
