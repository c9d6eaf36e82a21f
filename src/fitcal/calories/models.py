"""Input and output models for the calorie engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class CalculationMethod(Enum):
    """Whether an estimate used the stored profile or the default one."""
    COMPLETE_PROFILE = "complete_profile"
    DEFAULT_VALUES = "default_values"


@dataclass
class ExerciseEntry:
    """One logged exercise as seen by the engine.

    Values are kept as given; the engine validates them per exercise.
    ``weight`` is the lifted load in pounds.
    """

    name: Any
    sets: Any = 0
    reps: Any = 0
    weight: Any = 0
    pace: Optional[float] = None
    pace_unit: Optional[str] = None  # 'mph' or 'kmh'
    elevation_angle: Optional[float] = None  # degrees, negative downhill
    interval_time: Optional[float] = None  # seconds

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExerciseEntry":
        return cls(
            name=data.get("name"),
            sets=data.get("sets"),
            reps=data.get("reps"),
            weight=data.get("weight"),
            pace=data.get("pace"),
            pace_unit=data.get("paceUnit"),
            elevation_angle=data.get("elevationAngle"),
            interval_time=data.get("intervalTime"),
        )


@dataclass
class WorkoutData:
    """Transient calculation input: exercises plus total minutes.

    ``exercises`` is None when the caller supplied no list at all, which is
    a different failure from an empty list.
    """

    exercises: Optional[list[Any]]
    duration: Any

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkoutData":
        exercises = data.get("exercises")
        if isinstance(exercises, list):
            exercises = [
                ExerciseEntry.from_dict(item) if isinstance(item, dict) else item
                for item in exercises
            ]
        return cls(exercises=exercises, duration=data.get("duration"))


@dataclass
class ExerciseBreakdown:
    """Per-exercise share of a calorie estimate."""

    name: str
    calories: int
    intensity: str
    met_value: float
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "calories": self.calories,
            "intensity": self.intensity,
            "metValue": self.met_value,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class CalorieCalculationResult:
    """Outcome of a workout calorie estimate.

    ``success`` is False only for structurally invalid requests, in which
    case ``total_calories`` is 0 and ``errors`` says why. Problems with
    single exercises leave ``success`` True and are listed in ``errors``.
    """

    success: bool
    total_calories: int = 0
    exercise_breakdown: list[ExerciseBreakdown] = field(default_factory=list)
    average_met: float = 0.0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    fallbacks_used: list[str] = field(default_factory=list)
    calculation_method: CalculationMethod = CalculationMethod.COMPLETE_PROFILE
    profile_completeness: int = 0
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (camelCase keys)."""
        return {
            "success": self.success,
            "totalCalories": self.total_calories,
            "exerciseBreakdown": [entry.to_dict() for entry in self.exercise_breakdown],
            "averageMET": self.average_met,
            "errors": self.errors,
            "warnings": self.warnings,
            "fallbacksUsed": self.fallbacks_used,
            "calculationMethod": self.calculation_method.value,
            "profileCompleteness": self.profile_completeness,
            "recommendations": self.recommendations,
        }
