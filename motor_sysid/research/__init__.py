# motor_sysid/research/__init__.py
"""
Feedforward identification core.

Modules:
- samples: Append-only measurement buffer
- regression: Model terms, design matrix, pivoted-QR solver, R²
- feedforward: SystemIdentification (fit + predict) and FeedforwardConstants
- acceleration: Finite-difference acceleration estimate
- export: Flat CSV export of recorded samples
- replay: JSONL sample recording and loading
- errors: Identification failure types

Example usage:
    from motor_sysid.research import SystemIdentification

    sysid = SystemIdentification()
    sysid.append(voltage, velocity, acceleration, timestamp)
    ok = sysid.identify(include_static_friction=True, include_acceleration=True)
"""

from .samples import Sample, SampleStore
from .regression import (
    ModelSpec,
    velocity_sign,
    build_design_matrix,
    build_response_vector,
    solve_least_squares,
    r_squared,
)
from .feedforward import FeedforwardConstants, FitResult, SystemIdentification
from .acceleration import AccelerationEstimator, finite_difference
from .export import export_csv
from .replay import SampleRecorder, load_samples_jsonl, session_dataframe
from .errors import IdentificationError, InsufficientDataError, DegenerateSystemError

__all__ = [
    # Samples
    "Sample",
    "SampleStore",
    # Regression
    "ModelSpec",
    "velocity_sign",
    "build_design_matrix",
    "build_response_vector",
    "solve_least_squares",
    "r_squared",
    # Model
    "FeedforwardConstants",
    "FitResult",
    "SystemIdentification",
    # Acceleration
    "AccelerationEstimator",
    "finite_difference",
    # Export / replay
    "export_csv",
    "SampleRecorder",
    "load_samples_jsonl",
    "session_dataframe",
    # Errors
    "IdentificationError",
    "InsufficientDataError",
    "DegenerateSystemError",
]
