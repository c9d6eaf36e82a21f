"""Workout calorie estimation with validated profiles and resilient storage."""

__version__ = "0.1.0"
