# motor_sysid/research/regression.py
"""
Linear regression core for feedforward identification.

Includes:
- Model term selection (kS, kV, kA)
- Design matrix / response vector assembly
- Column-pivoted QR least-squares solve
- Coefficient of determination (R²)

Model: V = kS*sign(v) + kV*v + kA*a
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

import numpy as np
from scipy import linalg

from .errors import DegenerateSystemError, InsufficientDataError
from .samples import Sample


MIN_SAMPLES = 3
TSS_EPSILON = 1e-10


# =============================================================================
# Model Terms
# =============================================================================

@dataclass(frozen=True)
class ModelSpec:
    """Which regression terms are active. The velocity term is always present."""
    include_static_friction: bool = True
    include_acceleration: bool = True

    @property
    def terms(self) -> Tuple[str, ...]:
        """Active term names in column order."""
        names = []
        if self.include_static_friction:
            names.append("kS")
        names.append("kV")
        if self.include_acceleration:
            names.append("kA")
        return tuple(names)

    @property
    def num_terms(self) -> int:
        return len(self.terms)

    def to_dict(self) -> dict:
        return {
            "include_static_friction": self.include_static_friction,
            "include_acceleration": self.include_acceleration,
        }


def velocity_sign(velocity: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Direction term used by both fitting and prediction.

    +1 for strictly positive velocity, -1 otherwise. Zero (and NaN) therefore
    fall on the negative branch, unlike np.sign.
    """
    if np.ndim(velocity) == 0:
        return 1.0 if velocity > 0 else -1.0
    v = np.asarray(velocity, dtype=float)
    return np.where(v > 0, 1.0, -1.0)


# =============================================================================
# Design Matrix
# =============================================================================

def _as_sequence(samples: Iterable[Sample]) -> Sequence[Sample]:
    if isinstance(samples, (list, tuple)):
        return samples
    return tuple(samples)


def build_response_vector(samples: Iterable[Sample]) -> np.ndarray:
    """Recorded voltages, one per sample, in insertion order."""
    rows = _as_sequence(samples)
    return np.array([s.voltage for s in rows], dtype=float)


def build_design_matrix(
    samples: Iterable[Sample],
    spec: ModelSpec = ModelSpec(),
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Assemble the regression inputs.

    Args:
        samples: Sample sequence (or SampleStore)
        spec: Active model terms

    Returns:
        (X, y) with X of shape (n_samples, spec.num_terms)

    Raises:
        InsufficientDataError: fewer than MIN_SAMPLES samples
    """
    rows = _as_sequence(samples)
    n = len(rows)
    if n < MIN_SAMPLES:
        raise InsufficientDataError(n, MIN_SAMPLES)

    velocity = np.array([s.velocity for s in rows], dtype=float)

    columns = []
    if spec.include_static_friction:
        columns.append(velocity_sign(velocity))
    columns.append(velocity)
    if spec.include_acceleration:
        columns.append(np.array([s.acceleration for s in rows], dtype=float))

    X = np.column_stack(columns)
    y = build_response_vector(rows)
    return X, y


# =============================================================================
# Least Squares
# =============================================================================

def numerical_rank(R: np.ndarray, shape: Tuple[int, int]) -> int:
    """Rank of a pivoted-QR factor from the magnitude of its diagonal."""
    diag = np.abs(np.diag(R))
    if diag.size == 0 or diag[0] == 0.0:
        return 0
    tol = diag[0] * max(shape) * np.finfo(float).eps
    return int(np.count_nonzero(diag > tol))


def solve_least_squares(X: np.ndarray, y: np.ndarray) -> np.ndarray:
    """
    Minimize ||X·beta - y||² with a column-pivoted Householder QR.

    Directions beyond the numerical rank are set to zero, so a rank-deficient
    matrix (e.g. acceleration collinear with velocity) still returns finite
    coefficients.

    Raises:
        DegenerateSystemError: under-determined system, non-finite input cells,
            mismatched shapes, or non-finite solution
    """
    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float).ravel()

    if X.ndim != 2 or X.shape[1] == 0:
        raise DegenerateSystemError(f"design matrix must be 2-D with columns, got shape {X.shape}")

    m, n = X.shape
    if m < n:
        raise DegenerateSystemError(f"under-determined system: {m} rows < {n} columns")
    if y.shape[0] != m:
        raise DegenerateSystemError(f"response length {y.shape[0]} != {m} rows")
    if not np.all(np.isfinite(X)):
        raise DegenerateSystemError("design matrix contains non-finite values")

    Q, R, perm = linalg.qr(X, mode="economic", pivoting=True, check_finite=False)
    rank = numerical_rank(R, (m, n))

    qty = Q.T @ y
    z = np.zeros(n)
    if rank > 0:
        z[:rank] = linalg.solve_triangular(R[:rank, :rank], qty[:rank], check_finite=False)

    # X[:, perm] = Q @ R
    beta = np.empty(n)
    beta[perm] = z

    if not np.all(np.isfinite(beta)):
        raise DegenerateSystemError("solution contains non-finite coefficients")

    return beta


# =============================================================================
# Fit Quality
# =============================================================================

def r_squared(predicted: np.ndarray, actual: np.ndarray) -> float:
    """
    Coefficient of determination, 1 - RSS/TSS.

    Returns 0.0 for empty or mismatched input and for a near-constant
    response (TSS < 1e-10).
    """
    predicted = np.asarray(predicted, dtype=float).ravel()
    actual = np.asarray(actual, dtype=float).ravel()

    if predicted.shape != actual.shape or actual.size == 0:
        return 0.0

    ss_tot = float(np.sum((actual - actual.mean()) ** 2))
    if ss_tot < TSS_EPSILON:
        return 0.0

    ss_res = float(np.sum((actual - predicted) ** 2))
    return 1.0 - ss_res / ss_tot
