import dataclasses
import math

import numpy as np
import pytest

from helpers import make_rows
from motor_sysid.research.samples import Sample, SampleStore


def test_append_preserves_order(store, noiseless_rows):
    assert store.count() == len(noiseless_rows)
    assert len(store) == len(noiseless_rows)
    assert [s.timestamp for s in store.samples()] == [r[3] for r in noiseless_rows]


def test_append_returns_sample():
    s = SampleStore()
    sample = s.append(1, 2, 3, 4)
    assert sample == Sample(1.0, 2.0, 3.0, 4.0)
    assert isinstance(sample.voltage, float)


def test_samples_are_immutable(store):
    with pytest.raises(dataclasses.FrozenInstanceError):
        store.samples()[0].voltage = 99.0


def test_samples_view_is_a_snapshot(store):
    view = store.samples()
    store.append(0.0, 0.0, 0.0, 9.0)
    assert len(view) == store.count() - 1


def test_clear():
    s = SampleStore()
    s.append(1.0, 2.0, 3.0, 4.0)
    s.clear()
    assert s.count() == 0
    assert s.samples() == ()


def test_accepts_non_finite_values():
    s = SampleStore()
    s.append(float("nan"), float("inf"), -float("inf"), 0.0)
    assert s.count() == 1
    assert math.isnan(s.samples()[0].voltage)


def test_arrays_and_dataframe(store, noiseless_rows):
    voltage, velocity, acceleration, timestamp = store.arrays()
    assert np.array_equal(voltage, [r[0] for r in noiseless_rows])
    assert np.array_equal(velocity, [r[1] for r in noiseless_rows])
    assert np.array_equal(acceleration, [r[2] for r in noiseless_rows])
    assert np.array_equal(timestamp, [r[3] for r in noiseless_rows])

    df = store.to_dataframe()
    assert list(df.columns) == ["timestamp", "voltage", "velocity", "acceleration"]
    assert len(df) == len(noiseless_rows)


def test_empty_dataframe():
    df = SampleStore().to_dataframe()
    assert len(df) == 0
    assert list(df.columns) == ["timestamp", "voltage", "velocity", "acceleration"]


def test_construct_from_samples():
    rows = make_rows(1.0, 0.1, 0.0)[:3]
    s = SampleStore(Sample(*r) for r in rows)
    assert s.count() == 3
    assert s.samples()[2].timestamp == rows[2][3]
