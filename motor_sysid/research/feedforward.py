# motor_sysid/research/feedforward.py
"""
Feedforward identification for a rotary actuator.

Collects (voltage, velocity, acceleration) samples, fits

    V = kS*sign(v) + kV*v + kA*a

by least squares and serves voltage predictions from the fitted constants.

Example:
    sysid = SystemIdentification()
    for v, w, a, t in measurements:
        sysid.append(v, w, a, t)
    if sysid.identify(include_static_friction=True, include_acceleration=True):
        volts = sysid.predict(50.0, 0.0)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import numpy as np

from .errors import IdentificationError, InsufficientDataError
from .export import export_csv
from .regression import (
    ModelSpec,
    build_design_matrix,
    build_response_vector,
    r_squared,
    solve_least_squares,
    velocity_sign,
)
from .samples import Sample, SampleStore


log = logging.getLogger(__name__)


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class FeedforwardConstants:
    """Identified feedforward gains."""
    kS: float = 0.0   # Static friction (V)
    kV: float = 0.0   # Velocity gain (V per velocity unit)
    kA: float = 0.0   # Acceleration gain (V per acceleration unit)

    def calculate(self, velocity: float, acceleration: float) -> float:
        """Feedforward voltage for a target velocity and acceleration."""
        return self.kS * velocity_sign(velocity) + self.kV * velocity + self.kA * acceleration

    def to_dict(self) -> Dict[str, float]:
        return {"kS": self.kS, "kV": self.kV, "kA": self.kA}


@dataclass(frozen=True)
class FitResult:
    """Outcome of the most recent identification."""
    constants: FeedforwardConstants = field(default_factory=FeedforwardConstants)
    r_squared: float = 0.0
    sample_count: int = 0
    identified: bool = False
    spec: Optional[ModelSpec] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            **self.constants.to_dict(),
            "r_squared": self.r_squared,
            "sample_count": self.sample_count,
            "identified": self.identified,
            "spec": self.spec.to_dict() if self.spec else None,
        }


# =============================================================================
# Identification
# =============================================================================

class SystemIdentification:
    """
    Sample buffer plus fitted feedforward model for one characterization pass.

    Starts Unidentified. A successful identify() moves it to Identified;
    any append or clear makes the fit stale and moves it back.
    Not safe to share between concurrent passes: use one instance per run.
    """

    def __init__(self, events=None, logger: Optional[logging.Logger] = None):
        """
        Args:
            events: Optional JsonlLogger receiving sysid.* records
            logger: Logger for diagnostics (defaults to this module's logger)
        """
        self._store = SampleStore()
        self._result = FitResult()
        self._events = events
        self._log = logger or log

    # ------------------------------------------------------------------
    # Sample buffer
    # ------------------------------------------------------------------

    def append(self, voltage: float, velocity: float, acceleration: float, timestamp: float) -> None:
        self._store.append(voltage, velocity, acceleration, timestamp)
        self._invalidate()

    def add_sample(self, sample: Sample) -> None:
        self._store.add_sample(sample)
        self._invalidate()

    def clear(self) -> None:
        self._store.clear()
        self._invalidate()
        if self._events is not None:
            self._events.write("sysid.clear")

    def count(self) -> int:
        return self._store.count()

    def samples(self) -> Tuple[Sample, ...]:
        return self._store.samples()

    @property
    def store(self) -> SampleStore:
        return self._store

    def _invalidate(self) -> None:
        if self._result.identified:
            self._result = FitResult(
                constants=self._result.constants,
                r_squared=self._result.r_squared,
                sample_count=self._result.sample_count,
                identified=False,
                spec=self._result.spec,
            )

    # ------------------------------------------------------------------
    # Fitting
    # ------------------------------------------------------------------

    def identify(self, include_static_friction: bool = True, include_acceleration: bool = True) -> bool:
        """
        Fit the feedforward constants to the current samples.

        Returns:
            True on success. False if there are fewer than 3 samples or the
            solver could not produce finite coefficients; the model is then
            Unidentified.
        """
        return self.identify_spec(ModelSpec(include_static_friction, include_acceleration))

    def identify_spec(self, spec: ModelSpec) -> bool:
        n = self._store.count()
        try:
            X, y = build_design_matrix(self._store.samples(), spec)
            beta = solve_least_squares(X, y)
        except InsufficientDataError as e:
            self._fail(spec, n, "insufficient_data", e)
            return False
        except IdentificationError as e:
            self._fail(spec, n, "degenerate_system", e)
            return False

        coeffs = dict(zip(spec.terms, (float(b) for b in beta)))
        constants = FeedforwardConstants(
            kS=coeffs.get("kS", 0.0),
            kV=coeffs["kV"],
            kA=coeffs.get("kA", 0.0),
        )

        predicted = X @ beta
        r2 = r_squared(predicted, y)

        self._result = FitResult(
            constants=constants,
            r_squared=r2,
            sample_count=n,
            identified=True,
            spec=spec,
        )

        self._log.info(
            "Identified %s from %d samples: kS=%.4f kV=%.4f kA=%.4f R²=%.4f",
            "/".join(spec.terms), n, constants.kS, constants.kV, constants.kA, r2,
        )
        if self._events is not None:
            self._events.write("sysid.identify", ok=True, spec=spec, result=self._result)
        return True

    def _fail(self, spec: ModelSpec, n: int, reason: str, err: Exception) -> None:
        self._result = FitResult(sample_count=n, identified=False, spec=spec)
        self._log.warning("Identification failed (%s): %s", reason, err)
        if self._events is not None:
            self._events.write("sysid.identify", ok=False, reason=reason, detail=str(err), sample_count=n)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_identified(self) -> bool:
        return self._result.identified

    def get_coefficients(self) -> FeedforwardConstants:
        return self._result.constants

    def get_r_squared(self) -> float:
        return self._result.r_squared

    def fit_result(self) -> FitResult:
        return self._result

    def predict(self, velocity: float, acceleration: float) -> float:
        """Predicted voltage, or 0.0 while Unidentified."""
        if not self._result.identified:
            return 0.0
        return self._result.constants.calculate(velocity, acceleration)

    def error(self, actual_voltage: float, velocity: float, acceleration: float) -> float:
        return actual_voltage - self.predict(velocity, acceleration)

    def design_matrix(self, include_static_friction: bool = True, include_acceleration: bool = True) -> np.ndarray:
        """Regression matrix for the current samples (raises InsufficientDataError below 3)."""
        X, _ = build_design_matrix(self._store.samples(), ModelSpec(include_static_friction, include_acceleration))
        return X

    def response_vector(self) -> np.ndarray:
        return build_response_vector(self._store.samples())

    # ------------------------------------------------------------------
    # Reporting / export
    # ------------------------------------------------------------------

    def format_results(self) -> str:
        if not self._result.identified:
            return "System has not been identified yet."

        c = self._result.constants
        lines = [
            "=== System Identification Results ===",
            f"Data points: {self._store.count()}",
            f"R-squared: {self._result.r_squared:.4f}",
            "",
            "Feedforward Constants:",
            f"kS (Static Friction): {c.kS:.4f}",
            f"kV (Velocity): {c.kV:.4f}",
            f"kA (Acceleration): {c.kA:.4f}",
            "",
            "Model: V = kS*sign(v) + kV*v + kA*a",
            "=====================================",
        ]
        return "\n".join(lines)

    def log_results(self) -> None:
        for line in self.format_results().splitlines():
            self._log.info(line)

    def export_csv(self, path: Union[str, Path], precision: int = 6) -> bool:
        return export_csv(self._store.samples(), path, precision=precision)


__all__ = [
    "FeedforwardConstants",
    "FitResult",
    "SystemIdentification",
]
