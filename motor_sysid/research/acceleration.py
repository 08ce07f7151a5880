# motor_sysid/research/acceleration.py
"""
On-line acceleration estimate from a short velocity history.

Used while sampling when the drive only reports velocity.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, Sequence

MIN_DT_S = 1e-6


def finite_difference(velocities: Sequence[float], times: Sequence[float]) -> float:
    """Backward difference of the last two samples; 0.0 if undefined."""
    if len(velocities) < 2 or len(times) < 2:
        return 0.0

    dt = times[-1] - times[-2]
    if dt < MIN_DT_S:
        return 0.0

    return (velocities[-1] - velocities[-2]) / dt


class AccelerationEstimator:
    """Rolling velocity history (last `history_size` samples)."""

    def __init__(self, history_size: int = 10):
        if history_size < 2:
            raise ValueError("history_size must be at least 2")
        self.history_size = int(history_size)
        self._velocities: Deque[float] = deque(maxlen=self.history_size)
        self._times: Deque[float] = deque(maxlen=self.history_size)

    @property
    def ready(self) -> bool:
        """True once two samples are available."""
        return len(self._velocities) >= 2

    def update(self, velocity: float, timestamp: float) -> float:
        """Push a sample and return the current acceleration estimate."""
        self._velocities.append(float(velocity))
        self._times.append(float(timestamp))
        return finite_difference(self._velocities, self._times)

    def reset(self) -> None:
        self._velocities.clear()
        self._times.clear()

    def __len__(self) -> int:
        return len(self._velocities)
