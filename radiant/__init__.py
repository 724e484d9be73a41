"""Radiant: meteor shower forecasts and observation log."""

__version__ = "0.1.0"
