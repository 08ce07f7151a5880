# motor_sysid/research/errors.py
"""Failures raised inside the identification core."""


class IdentificationError(Exception):
    """Base class for anything that stops a fit from producing coefficients."""


class InsufficientDataError(IdentificationError):
    """Fewer samples than the regression needs."""

    def __init__(self, count: int, required: int):
        super().__init__(f"need at least {required} samples, have {count}")
        self.count = count
        self.required = required


class DegenerateSystemError(IdentificationError):
    """The least-squares system cannot yield finite coefficients."""
