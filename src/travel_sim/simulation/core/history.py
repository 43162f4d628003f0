"""Bounded position history for the position-vs-time chart."""

from collections import deque
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

DEFAULT_HISTORY_CAPACITY = 1000


@dataclass(frozen=True)
class HistoryPoint:
    """Positions of both runners at one instant.

    Attributes:
        t: Elapsed simulation time in seconds
        red_pos: Red runner position
        blue_pos: Blue runner position
    """

    t: float
    red_pos: float
    blue_pos: float


class HistoryRecorder:
    """Fixed-capacity FIFO buffer of history points.

    Appending beyond capacity evicts the oldest samples so exactly the most
    recent ``capacity`` points remain.
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"Capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._points: deque[HistoryPoint] = deque(maxlen=capacity)

    def record(self, point: HistoryPoint) -> None:
        """Append a sample, evicting the oldest one when full."""
        self._points.append(point)

    def clear(self) -> None:
        """Drop all samples."""
        self._points.clear()

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[HistoryPoint]:
        return iter(self._points)

    @property
    def latest(self) -> Optional[HistoryPoint]:
        """Most recent sample, or None when empty."""
        return self._points[-1] if self._points else None

    def points(self) -> tuple[HistoryPoint, ...]:
        """Immutable copy of all samples, oldest first."""
        return tuple(self._points)

    def window(self, start_time: float) -> list[HistoryPoint]:
        """Samples at or after ``start_time``."""
        return [p for p in self._points if p.t >= start_time]

    def as_arrays(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return (t, red_pos, blue_pos) as numpy arrays."""
        if not self._points:
            empty = np.empty(0)
            return empty, empty.copy(), empty.copy()
        data = np.array([(p.t, p.red_pos, p.blue_pos) for p in self._points])
        return data[:, 0], data[:, 1], data[:, 2]
