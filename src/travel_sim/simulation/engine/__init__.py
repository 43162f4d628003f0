"""Motion model and simulation driver."""

from travel_sim.simulation.engine.driver import SimulationDriver, SimulationSnapshot
from travel_sim.simulation.engine.motion import advance

__all__ = ["advance", "SimulationDriver", "SimulationSnapshot"]
