"""Workout session engine: active workout lifecycle, rest timer, set ledger and PR detection."""

__version__ = "0.1.0"
