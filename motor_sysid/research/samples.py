# motor_sysid/research/samples.py
"""
Measurement buffer for feedforward characterization.

Samples are appended in acquisition order and never modified afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

import numpy as np
import pandas as pd


COLUMNS = ("timestamp", "voltage", "velocity", "acceleration")


@dataclass(frozen=True)
class Sample:
    """One (voltage, velocity, acceleration) measurement."""
    voltage: float        # Applied voltage
    velocity: float       # Measured velocity
    acceleration: float   # Measured (or estimated) acceleration
    timestamp: float      # Seconds since start of the pass

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "voltage": self.voltage,
            "velocity": self.velocity,
            "acceleration": self.acceleration,
        }


class SampleStore:
    """Append-only, ordered collection of samples."""

    def __init__(self, samples: Iterable[Sample] = ()):
        self._samples: List[Sample] = list(samples)

    def append(
        self,
        voltage: float,
        velocity: float,
        acceleration: float,
        timestamp: float,
    ) -> Sample:
        # No plausibility checks: NaN and out-of-range values go straight in.
        sample = Sample(
            voltage=float(voltage),
            velocity=float(velocity),
            acceleration=float(acceleration),
            timestamp=float(timestamp),
        )
        self._samples.append(sample)
        return sample

    def add_sample(self, sample: Sample) -> None:
        self._samples.append(sample)

    def clear(self) -> None:
        self._samples.clear()

    def count(self) -> int:
        return len(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self):
        return iter(self._samples)

    def samples(self) -> Tuple[Sample, ...]:
        """Read-only snapshot in insertion order."""
        return tuple(self._samples)

    def arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Return (voltage, velocity, acceleration, timestamp) as float arrays."""
        n = len(self._samples)
        out = np.empty((4, n), dtype=float)
        for i, s in enumerate(self._samples):
            out[0, i] = s.voltage
            out[1, i] = s.velocity
            out[2, i] = s.acceleration
            out[3, i] = s.timestamp
        return out[0], out[1], out[2], out[3]

    def to_dataframe(self) -> pd.DataFrame:
        voltage, velocity, acceleration, timestamp = self.arrays()
        return pd.DataFrame({
            "timestamp": timestamp,
            "voltage": voltage,
            "velocity": velocity,
            "acceleration": acceleration,
        }, columns=list(COLUMNS))
