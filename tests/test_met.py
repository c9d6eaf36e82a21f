"""Tests for MET lookup and intensity classification."""

from __future__ import annotations

import pytest

from fitcal.calories.met import (
    DEFAULT_CATEGORY,
    DEFAULT_MET,
    Intensity,
    apply_intensity_multiplier,
    determine_intensity,
    lookup_met,
    resolve_category,
)
from fitcal.calories.models import ExerciseEntry


class TestResolveCategory:
    """Tests for exercise category resolution."""

    def test_exact_match(self) -> None:
        assert resolve_category("Squat", {"Squat": "legs"}) == ("legs", False)

    def test_case_insensitive_match(self) -> None:
        assert resolve_category("bench press", {"Bench Press": "Chest"}) == ("chest", False)

    def test_unmapped_name(self) -> None:
        assert resolve_category("Juggling", {"Squat": "legs"}) == (DEFAULT_CATEGORY, True)

    def test_unknown_category_value(self) -> None:
        assert resolve_category("Yoga", {"Yoga": "mindfulness"}) == (DEFAULT_CATEGORY, True)

    def test_no_map(self) -> None:
        assert resolve_category("Squat") == (DEFAULT_CATEGORY, True)


class TestStrengthIntensity:
    """Load relative to body weight decides strength intensity."""

    def test_bodyweight_is_moderate(self) -> None:
        exercise = ExerciseEntry(name="Push-ups", sets=3, reps=15, weight=0)
        assert determine_intensity(exercise, 70, "chest") is Intensity.MODERATE

    def test_light_load(self) -> None:
        # 20 lbs is ~9 kg, 13% of 70 kg
        exercise = ExerciseEntry(name="Curl", weight=20)
        assert determine_intensity(exercise, 70, "arms") is Intensity.LIGHT

    def test_moderate_load(self) -> None:
        # 60 lbs is ~27 kg, 39% of 70 kg
        exercise = ExerciseEntry(name="Bench Press", weight=60)
        assert determine_intensity(exercise, 70, "chest") is Intensity.MODERATE

    def test_vigorous_load(self) -> None:
        # 200 lbs is ~91 kg, 130% of 70 kg
        exercise = ExerciseEntry(name="Deadlift", weight=200)
        assert determine_intensity(exercise, 70, "back") is Intensity.VIGOROUS


class TestCardioIntensity:
    """Pace and incline decide cardio intensity."""

    def test_no_pace_is_moderate(self) -> None:
        assert determine_intensity(ExerciseEntry(name="Run"), 70, "cardio") is Intensity.MODERATE

    def test_walking_pace(self) -> None:
        exercise = ExerciseEntry(name="Walk", pace=5, pace_unit="kmh")
        assert determine_intensity(exercise, 70, "cardio") is Intensity.LIGHT

    def test_running_pace_in_mph(self) -> None:
        # 7 mph is ~11.3 km/h
        exercise = ExerciseEntry(name="Run", pace=7, pace_unit="mph")
        assert determine_intensity(exercise, 70, "cardio") is Intensity.VIGOROUS

    def test_incline_raises_tier(self) -> None:
        exercise = ExerciseEntry(name="Hike", pace=5, pace_unit="kmh", elevation_angle=8)
        assert determine_intensity(exercise, 70, "cardio") is Intensity.MODERATE

    def test_incline_caps_at_vigorous(self) -> None:
        exercise = ExerciseEntry(name="Hill sprint", pace=12, elevation_angle=10)
        assert determine_intensity(exercise, 70, "cardio") is Intensity.VIGOROUS


class TestLookupMet:
    """Tests for the combined MET lookup."""

    def test_multipliers(self) -> None:
        assert apply_intensity_multiplier(4.0, Intensity.LIGHT) == pytest.approx(3.4)
        assert apply_intensity_multiplier(4.0, Intensity.MODERATE) == pytest.approx(4.0)
        assert apply_intensity_multiplier(4.0, Intensity.VIGOROUS) == pytest.approx(5.4)

    def test_default_category(self) -> None:
        resolution = lookup_met(ExerciseEntry(name="Push-ups", weight=0), 70)
        assert resolution.used_default_category
        assert resolution.met_value == pytest.approx(DEFAULT_MET)

    def test_strength_category(self) -> None:
        resolution = lookup_met(ExerciseEntry(name="Squat", weight=200), 70, {"Squat": "legs"})
        assert resolution.category == "legs"
        assert resolution.intensity is Intensity.VIGOROUS
        assert resolution.met_value == pytest.approx(5.5 * 1.35)

    def test_cardio_category(self) -> None:
        resolution = lookup_met(
            ExerciseEntry(name="Walk", pace=5), 70, {"Walk": "cardio"}
        )
        assert resolution.base_met == 4.0
        assert resolution.met_value == pytest.approx(3.4)
