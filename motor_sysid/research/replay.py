# motor_sysid/research/replay.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterator, Union

import pandas as pd

from motor_sysid.logger.logger import JsonlLogger
from .acceleration import AccelerationEstimator
from .samples import Sample, SampleStore


log = logging.getLogger(__name__)

SAMPLE_EVENT = "sysid.sample"


class SampleRecorder:
    """
    Records samples as "sysid.sample" events in a JSONL session log.

    When a sample arrives without an acceleration, one is estimated from the
    recent velocity history.
    """
    def __init__(self, events: JsonlLogger, history_size: int = 10):
        self._events = events
        self._accel = AccelerationEstimator(history_size)

    def record(self, voltage: float, velocity: float, timestamp: float, acceleration: float | None = None) -> Sample:
        estimate = self._accel.update(velocity, timestamp)
        if acceleration is None:
            acceleration = estimate
        sample = Sample(float(voltage), float(velocity), float(acceleration), float(timestamp))
        self._events.write(SAMPLE_EVENT, **sample.to_dict())
        return sample

    def reset(self) -> None:
        self._accel.reset()


def _rows(path: Union[str, Path]) -> Iterator[dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                yield json.loads(line)


def load_samples_jsonl(path: Union[str, Path], history_size: int = 10) -> SampleStore:
    """
    Load every sysid.sample event of a session into a new SampleStore.

    Events recorded without an "acceleration" field get a finite-difference
    estimate over the last `history_size` velocities. A null acceleration
    (non-finite when recorded) stays NaN.
    """
    store = SampleStore()
    accel = AccelerationEstimator(history_size)
    for row in _rows(path):
        if row.get("event") != SAMPLE_EVENT:
            continue
        velocity = _num(row.get("velocity"))
        timestamp = _num(row.get("timestamp"))
        estimate = accel.update(velocity, timestamp)
        acceleration = _num(row["acceleration"]) if "acceleration" in row else estimate
        store.append(_num(row.get("voltage")), velocity, acceleration, timestamp)
    log.info("Loaded %d samples from %s", store.count(), path)
    return store


def _num(value: Any) -> float:
    # JsonlLogger writes non-finite floats as null
    return float("nan") if value is None else float(value)


def session_dataframe(path: Union[str, Path]) -> pd.DataFrame:
    return pd.DataFrame(list(_rows(path)))
