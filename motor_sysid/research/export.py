# motor_sysid/research/export.py
"""Flat CSV hand-off of recorded samples for external analysis."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Union

import pandas as pd

from .samples import Sample


log = logging.getLogger(__name__)

CSV_HEADER = ("Timestamp", "Voltage", "Velocity", "Acceleration")


def samples_to_frame(samples: Iterable[Sample]) -> pd.DataFrame:
    rows = [(s.timestamp, s.voltage, s.velocity, s.acceleration) for s in samples]
    return pd.DataFrame(rows, columns=list(CSV_HEADER))


def export_csv(
    samples: Iterable[Sample],
    path: Union[str, Path],
    precision: int = 6,
) -> bool:
    """
    Write samples as Timestamp,Voltage,Velocity,Acceleration rows.

    Args:
        samples: Samples in insertion order
        path: Output file
        precision: Digits after the decimal point

    Returns:
        True on success, False if the file could not be written
    """
    df = samples_to_frame(samples)
    try:
        df.to_csv(
            path,
            index=False,
            float_format=f"%.{int(precision)}f",
            na_rep="nan",
            lineterminator="\n",
        )
    except OSError as e:
        log.error("CSV export to %s failed: %s", path, e)
        return False

    log.info("Exported %d samples to %s", len(df), path)
    return True
