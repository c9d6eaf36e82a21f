"""MET-based workout calorie estimation."""

from fitcal.calories.calculator import (
    calculate_workout_calories,
    estimate_workout_calories,
    get_calorie_rate_per_minute,
    validate_exercise,
    validate_workout_data,
)
from fitcal.calories.met import Intensity, MetResolution, lookup_met, resolve_category
from fitcal.calories.models import (
    CalculationMethod,
    CalorieCalculationResult,
    ExerciseBreakdown,
    ExerciseEntry,
    WorkoutData,
)

__all__ = [
    "calculate_workout_calories",
    "estimate_workout_calories",
    "get_calorie_rate_per_minute",
    "validate_exercise",
    "validate_workout_data",
    "Intensity",
    "MetResolution",
    "lookup_met",
    "resolve_category",
    "CalculationMethod",
    "CalorieCalculationResult",
    "ExerciseBreakdown",
    "ExerciseEntry",
    "WorkoutData",
]
