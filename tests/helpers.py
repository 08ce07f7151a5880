from typing import Iterable, Sequence, Tuple

from motor_sysid.research.regression import velocity_sign


TRUE_KS = 2.0
TRUE_KV = 0.1
TRUE_KA = 0.001

# (velocity, acceleration) pairs spanning both directions
SWEEP: Tuple[Tuple[float, float], ...] = (
    (-100.0, 3.0),
    (-60.0, -10.0),
    (-20.0, 40.0),
    (-5.0, -2.0),
    (5.0, 7.0),
    (20.0, -30.0),
    (60.0, 12.0),
    (100.0, 0.5),
)


def feedforward_voltage(ks: float, kv: float, ka: float, velocity: float, acceleration: float) -> float:
    return ks * velocity_sign(velocity) + kv * velocity + ka * acceleration


def make_rows(
    ks: float,
    kv: float,
    ka: float,
    pairs: Iterable[Sequence[float]] = SWEEP,
    dt: float = 0.01,
):
    """Noiseless (voltage, velocity, acceleration, timestamp) rows."""
    rows = []
    for i, (v, a) in enumerate(pairs):
        rows.append((feedforward_voltage(ks, kv, ka, v, a), v, a, i * dt))
    return rows


def fill(target, rows) -> None:
    """Append rows to anything with append(voltage, velocity, acceleration, timestamp)."""
    for voltage, velocity, acceleration, timestamp in rows:
        target.append(voltage, velocity, acceleration, timestamp)
