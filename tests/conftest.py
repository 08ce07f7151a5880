# tests/conftest.py

import pytest

from helpers import TRUE_KA, TRUE_KS, TRUE_KV, fill, make_rows
from motor_sysid.research.feedforward import SystemIdentification
from motor_sysid.research.samples import SampleStore



@pytest.fixture
def noiseless_rows():
    return make_rows(TRUE_KS, TRUE_KV, TRUE_KA)

@pytest.fixture
def store(noiseless_rows):
    s = SampleStore()
    fill(s, noiseless_rows)
    return s

@pytest.fixture
def sysid(noiseless_rows):
    """Unidentified model loaded with noiseless samples."""
    s = SystemIdentification()
    fill(s, noiseless_rows)
    return s
