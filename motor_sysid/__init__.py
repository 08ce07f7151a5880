"""Feedforward system identification for rotary actuators."""

__version__ = "0.1.0"
