"""Workout history records and their persistence."""

from fitcal.tracking.records import CalorieData, Exercise, WorkoutRecord, new_record_id
from fitcal.tracking.store import WorkoutStore

__all__ = [
    "CalorieData",
    "Exercise",
    "WorkoutRecord",
    "WorkoutStore",
    "new_record_id",
]
