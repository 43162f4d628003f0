"""Travel problem simulation engine.

Main Components:
- Core: runner state, scenario policies, history and crossing detection
- Engine: per-runner motion model and the tick-driven simulation driver
"""

from travel_sim.simulation.core import (
    DetectionSettings,
    EventType,
    HistoryPoint,
    MeetingEvent,
    RunnerId,
    RunnerState,
    ScenarioType,
    SimulationConfig,
)
from travel_sim.simulation.engine import SimulationDriver, SimulationSnapshot, advance

__all__ = [
    # Core models
    "SimulationConfig",
    "RunnerId",
    "RunnerState",
    "ScenarioType",
    "HistoryPoint",
    "MeetingEvent",
    "EventType",
    "DetectionSettings",
    # Engine
    "advance",
    "SimulationDriver",
    "SimulationSnapshot",
]
