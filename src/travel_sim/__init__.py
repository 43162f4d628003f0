"""Travel problem simulator.

Visual simulation of meeting, chase, round-trip and circular-track problems
with crossing detection and an LLM-backed math teacher.
"""

__version__ = "0.1.0"
