"""Persisted workout records stored as a JSON list under ``workouts``."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from fitcal.calories.models import CalorieCalculationResult, ExerciseEntry, WorkoutData
from fitcal.profiles.models import UserProfile


def new_record_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Exercise:
    """An exercise as saved inside a workout record."""

    name: str
    sets: int = 0
    reps: int = 0
    weight: float = 0.0  # lbs
    id: str = field(default_factory=new_record_id)
    pace: Optional[float] = None
    pace_unit: Optional[str] = None
    elevation_angle: Optional[float] = None
    interval_time: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "sets": self.sets,
            "reps": self.reps,
            "weight": self.weight,
        }
        # Cardio fields are only written when set
        for key, value in (
            ("pace", self.pace),
            ("paceUnit", self.pace_unit),
            ("elevationAngle", self.elevation_angle),
            ("intervalTime", self.interval_time),
        ):
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Exercise":
        return cls(
            id=str(data.get("id") or new_record_id()),
            name=data["name"],
            sets=data.get("sets", 0),
            reps=data.get("reps", 0),
            weight=data.get("weight", 0.0),
            pace=data.get("pace"),
            pace_unit=data.get("paceUnit"),
            elevation_angle=data.get("elevationAngle"),
            interval_time=data.get("intervalTime"),
        )

    def to_entry(self) -> ExerciseEntry:
        return ExerciseEntry(
            name=self.name,
            sets=self.sets,
            reps=self.reps,
            weight=self.weight,
            pace=self.pace,
            pace_unit=self.pace_unit,
            elevation_angle=self.elevation_angle,
            interval_time=self.interval_time,
        )


@dataclass
class CalorieData:
    """Calorie estimate saved with a workout."""

    total_calories: int
    calculation_method: str
    profile_snapshot: dict[str, Any]
    exercise_breakdown: list[dict[str, Any]]
    average_met: float
    profile_completeness: int

    @classmethod
    def from_result(
        cls,
        result: CalorieCalculationResult,
        profile: Optional[UserProfile],
    ) -> "CalorieData":
        return cls(
            total_calories=result.total_calories,
            calculation_method=result.calculation_method.value,
            profile_snapshot=profile.snapshot() if profile is not None else {},
            exercise_breakdown=[entry.to_dict() for entry in result.exercise_breakdown],
            average_met=result.average_met,
            profile_completeness=result.profile_completeness,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCalories": self.total_calories,
            "calculationMethod": self.calculation_method,
            "profileSnapshot": self.profile_snapshot,
            "exerciseBreakdown": self.exercise_breakdown,
            "averageMET": self.average_met,
            "profileCompleteness": self.profile_completeness,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CalorieData":
        return cls(
            total_calories=data.get("totalCalories", 0),
            calculation_method=data.get("calculationMethod", "complete_profile"),
            profile_snapshot=data.get("profileSnapshot") or {},
            exercise_breakdown=data.get("exerciseBreakdown") or [],
            average_met=data.get("averageMET", 0.0),
            profile_completeness=data.get("profileCompleteness", 0),
        )


@dataclass
class WorkoutRecord:
    """A completed workout."""

    exercises: list[Exercise]
    duration: float  # minutes
    date: str = field(default_factory=lambda: datetime.now().isoformat())
    id: str = field(default_factory=new_record_id)
    calorie_data: Optional[CalorieData] = None
    notes: Optional[str] = None

    @property
    def performed_at(self) -> datetime:
        """Workout time as a naive local datetime."""
        performed = datetime.fromisoformat(self.date)
        if performed.tzinfo is not None:
            performed = performed.astimezone().replace(tzinfo=None)
        return performed

    def to_workout_data(self) -> WorkoutData:
        return WorkoutData(
            exercises=[exercise.to_entry() for exercise in self.exercises],
            duration=self.duration,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "date": self.date,
            "exercises": [exercise.to_dict() for exercise in self.exercises],
            "duration": self.duration,
        }
        if self.calorie_data is not None:
            data["calorieData"] = self.calorie_data.to_dict()
        if self.notes is not None:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkoutRecord":
        """Build a record from its JSON form.

        Raises:
            KeyError, TypeError, ValueError: when required fields are missing or malformed
        """
        date = str(data["date"])
        datetime.fromisoformat(date)

        calorie_data = data.get("calorieData")
        return cls(
            id=str(data["id"]),
            date=date,
            exercises=[Exercise.from_dict(item) for item in data.get("exercises") or []],
            duration=float(data["duration"]),
            calorie_data=CalorieData.from_dict(calorie_data) if calorie_data else None,
            notes=data.get("notes"),
        )
