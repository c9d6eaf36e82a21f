"""Workout calorie estimation.

Calories for one exercise are ``MET x weight (kg) x time (hours)``. The
workout duration is split evenly across the logged exercises, then the
result is scaled for sex and BMI:

    female            x0.925  (middle of the 5-10% band)
    BMI < 18.5        x1.10
    18.5 <= BMI < 25  x1.00
    25 <= BMI < 30    x0.95
    BMI >= 30         x0.90

Failures come in two tiers. A malformed request (no workout, no exercise
list, bad duration, unusable profile) fails the whole estimate. A malformed
exercise is reported in ``errors`` and contributes zero calories while the
rest of the workout is still counted.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Optional, Union

from fitcal.calories.met import lookup_met
from fitcal.calories.models import (
    CalculationMethod,
    CalorieCalculationResult,
    ExerciseBreakdown,
    ExerciseEntry,
    WorkoutData,
)
from fitcal.config.settings import CalculationConfig
from fitcal.errors.degradation import with_graceful_degradation
from fitcal.errors.logger import ErrorLogger
from fitcal.errors.taxonomy import create_calculation_error, create_error_from_exception
from fitcal.profiles.body_calc import calculate_bmi, get_fitness_recommendations
from fitcal.profiles.models import (
    HeightUnit,
    Sex,
    UserProfile,
    calculate_profile_completeness,
    get_default_profile,
    is_profile_sufficient_for_calculations,
)
from fitcal.profiles.validation import (
    ValidationResult,
    is_finite_number,
    validate_age,
    validate_height,
    validate_sex,
    validate_weight,
)

logger = logging.getLogger(__name__)

MAX_DURATION_MINUTES = 1440
MAX_EXERCISE_WEIGHT_LBS = 2000

FEMALE_ADJUSTMENT = 0.925

NO_EXERCISES_WARNING = "No exercises provided"
DEFAULT_PROFILE_NOTICE = "Used default profile values"

WorkoutInput = Union[WorkoutData, dict[str, Any], None]
ProfileInput = Union[UserProfile, dict[str, Any], None]


def sex_adjustment(sex: Optional[str]) -> float:
    return FEMALE_ADJUSTMENT if sex == Sex.FEMALE.value else 1.0


def bmi_adjustment(bmi: float) -> float:
    if bmi < 18.5:
        return 1.1
    if bmi < 25:
        return 1.0
    if bmi < 30:
        return 0.95
    return 0.9


def _coerce_workout(workout_data: WorkoutInput) -> Optional[WorkoutData]:
    if isinstance(workout_data, dict):
        return WorkoutData.from_dict(workout_data)
    return workout_data


def _coerce_profile(user_profile: ProfileInput) -> Optional[UserProfile]:
    if isinstance(user_profile, dict):
        return UserProfile.from_dict(user_profile)
    return user_profile


def _coerce_exercise(exercise: Any) -> Any:
    if isinstance(exercise, dict):
        return ExerciseEntry.from_dict(exercise)
    return exercise


def validate_workout_data(workout_data: WorkoutInput) -> ValidationResult:
    """Check the workout as a whole: exercise list present, duration in range."""
    workout = _coerce_workout(workout_data)
    if workout is None:
        return ValidationResult.from_errors(["Workout data is required"])
    if not isinstance(workout, WorkoutData):
        return ValidationResult.from_errors(["Workout data must be a mapping"])

    errors: list[str] = []
    if workout.exercises is None:
        errors.append("Exercises list is required")
    elif not isinstance(workout.exercises, list):
        errors.append("Exercises must be a list")

    duration = workout.duration
    if not is_finite_number(duration):
        errors.append("Duration must be a number")
    elif duration <= 0:
        errors.append("Duration must be greater than 0 minutes")
    elif duration > MAX_DURATION_MINUTES:
        errors.append(f"Duration cannot exceed {MAX_DURATION_MINUTES} minutes (24 hours)")

    return ValidationResult.from_errors(errors)


def exercise_label(exercise: Any, index: int) -> str:
    name = getattr(exercise, "name", None)
    if isinstance(name, str) and name.strip():
        return name.strip()
    return f"Exercise {index + 1}"


def validate_exercise(exercise: Any, index: int = 0) -> ValidationResult:
    """Check one exercise. Every violated rule gets its own message."""
    exercise = _coerce_exercise(exercise)
    label = exercise_label(exercise, index)
    if not isinstance(exercise, ExerciseEntry):
        return ValidationResult.from_errors([f"{label}: invalid exercise entry"])

    errors: list[str] = []
    if not isinstance(exercise.name, str) or not exercise.name.strip():
        errors.append(f"{label}: name is required")

    for field_name in ("sets", "reps", "weight"):
        value = getattr(exercise, field_name)
        if not is_finite_number(value) or value < 0:
            errors.append(f"{label}: {field_name} must be a non-negative number")

    if is_finite_number(exercise.weight) and exercise.weight > MAX_EXERCISE_WEIGHT_LBS:
        errors.append(f"{label}: weight cannot exceed {MAX_EXERCISE_WEIGHT_LBS} lbs")

    return ValidationResult.from_errors(errors)


def validate_profile_for_calculation(user_profile: ProfileInput) -> ValidationResult:
    """Check the profile fields the engine depends on."""
    profile = _coerce_profile(user_profile)
    if profile is None:
        return ValidationResult.from_errors(["User profile is required"])
    if not isinstance(profile, UserProfile):
        return ValidationResult.from_errors(["User profile must be a mapping"])

    errors: list[str] = []
    if profile.age is None:
        errors.append("Age is required")
    else:
        errors.extend(validate_age(profile.age).errors)
    if profile.sex is None:
        errors.append("Sex is required")
    else:
        errors.extend(validate_sex(profile.sex).errors)
    if profile.weight is None:
        errors.append("Weight is required")
    else:
        errors.extend(validate_weight(profile.weight, profile.weight_unit).errors)
    if profile.height is None:
        errors.append("Height is required")
    else:
        errors.extend(validate_height(profile.height, HeightUnit.CM.value).errors)
    return ValidationResult.from_errors(errors)


def _failure(errors: list[str]) -> CalorieCalculationResult:
    return CalorieCalculationResult(success=False, total_calories=0, errors=errors)


def calculate_workout_calories(
    workout_data: WorkoutInput,
    user_profile: ProfileInput,
    exercise_categories: Optional[Mapping[str, str]] = None,
    config: Optional[CalculationConfig] = None,
    error_logger: Optional[ErrorLogger] = None,
) -> CalorieCalculationResult:
    """Estimate calories burned during a workout.

    Never raises: every failure is reported through the returned result.

    Args:
        workout_data: WorkoutData or its dict form
        user_profile: UserProfile or its dict form
        exercise_categories: Map of exercise name to category
        config: Warning thresholds (defaults used when None)
        error_logger: Receives per-exercise calculation errors

    Returns:
        CalorieCalculationResult
    """
    try:
        return _calculate(
            workout_data,
            user_profile,
            exercise_categories or {},
            config or CalculationConfig(),
            error_logger,
        )
    except Exception as exc:
        error = create_error_from_exception(exc, "calculate_workout_calories")
        if error_logger is not None:
            error_logger.log(error)
        logger.exception("Calorie calculation failed")
        return _failure([f"Calorie calculation failed: {error.message}"])


def _calculate(
    workout_data: WorkoutInput,
    user_profile: ProfileInput,
    exercise_categories: Mapping[str, str],
    config: CalculationConfig,
    error_logger: Optional[ErrorLogger],
) -> CalorieCalculationResult:
    workout_check = validate_workout_data(workout_data)
    if not workout_check.is_valid:
        return _failure(workout_check.errors)
    workout = _coerce_workout(workout_data)

    profile_check = validate_profile_for_calculation(user_profile)
    if not profile_check.is_valid:
        return _failure(profile_check.errors)
    profile = _coerce_profile(user_profile)

    completeness = calculate_profile_completeness(profile)
    exercises = workout.exercises

    if not exercises:
        return CalorieCalculationResult(
            success=True,
            total_calories=0,
            warnings=[NO_EXERCISES_WARNING],
            profile_completeness=completeness,
        )

    weight_kg = profile.weight_kg
    adjustment = sex_adjustment(profile.sex) * bmi_adjustment(
        calculate_bmi(weight_kg, profile.height_cm)
    )
    hours_per_exercise = workout.duration / len(exercises) / 60

    errors: list[str] = []
    warnings: list[str] = []
    fallbacks: list[str] = []
    breakdown: list[ExerciseBreakdown] = []
    met_values: list[float] = []
    total = 0.0

    for index, raw_exercise in enumerate(exercises):
        exercise = _coerce_exercise(raw_exercise)
        label = exercise_label(exercise, index)

        check = validate_exercise(exercise, index)
        if not check.is_valid:
            errors.extend(check.errors)
            breakdown.append(_skipped(label, "; ".join(check.errors)))
            continue

        resolution = lookup_met(exercise, weight_kg, exercise_categories)
        if resolution.used_default_category:
            fallbacks.append(f"Used default category for {label}")

        calories = resolution.met_value * weight_kg * hours_per_exercise * adjustment
        if not math.isfinite(calories) or calories < 0:
            error = create_calculation_error(
                "calculate_workout_calories",
                f"non-finite result for {label}",
                {"met_value": resolution.met_value, "weight_kg": weight_kg},
            )
            if error_logger is not None:
                error_logger.log(error)
            message = f"{label}: calculation produced an invalid value"
            errors.append(message)
            breakdown.append(_skipped(label, message))
            continue

        total += calories
        met_values.append(resolution.met_value)
        breakdown.append(
            ExerciseBreakdown(
                name=label,
                calories=round(calories),
                intensity=resolution.intensity.value,
                met_value=round(resolution.met_value, 1),
            )
        )

    total_calories = round(total)
    if workout.duration > config.long_duration_minutes:
        warnings.append(f"Unusually long workout duration: {workout.duration:g} minutes")
    if total_calories > config.high_calorie_threshold:
        warnings.append(f"Unusually high calorie total: {total_calories} kcal")

    average_met = sum(met_values) / len(met_values) if met_values else 0.0

    return CalorieCalculationResult(
        success=True,
        total_calories=total_calories,
        exercise_breakdown=breakdown,
        average_met=round(average_met, 1),
        errors=errors,
        warnings=warnings,
        fallbacks_used=fallbacks,
        calculation_method=CalculationMethod.COMPLETE_PROFILE,
        profile_completeness=completeness,
    )


def _skipped(label: str, reason: str) -> ExerciseBreakdown:
    return ExerciseBreakdown(
        name=label, calories=0, intensity="unknown", met_value=0.0, error=reason
    )


def estimate_workout_calories(
    workout_data: WorkoutInput,
    user_profile: ProfileInput,
    exercise_categories: Optional[Mapping[str, str]] = None,
    config: Optional[CalculationConfig] = None,
    error_logger: Optional[ErrorLogger] = None,
) -> CalorieCalculationResult:
    """Estimate calories for display, substituting the default profile if needed.

    A missing, incomplete or invalid profile is replaced by
    ``get_default_profile()`` and the result is flagged ``default_values``.
    """
    profile = _coerce_profile(user_profile)
    completeness = calculate_profile_completeness(
        profile if isinstance(profile, UserProfile) else None
    )

    method = CalculationMethod.COMPLETE_PROFILE
    notices: list[str] = []
    if not (
        isinstance(profile, UserProfile)
        and is_profile_sufficient_for_calculations(profile)
        and validate_profile_for_calculation(profile).is_valid
    ):
        if isinstance(profile, UserProfile) and is_profile_sufficient_for_calculations(profile):
            logger.warning("Stored profile failed validation, using default values")
        profile = get_default_profile()
        method = CalculationMethod.DEFAULT_VALUES
        notices.append(DEFAULT_PROFILE_NOTICE)

    result = with_graceful_degradation(
        lambda: calculate_workout_calories(
            workout_data, profile, exercise_categories, config, error_logger
        ),
        _failure(["Calorie calculation is temporarily unavailable"]),
        "calorie calculation",
        error_logger,
    )

    result.calculation_method = method
    result.profile_completeness = completeness
    result.fallbacks_used[:0] = notices

    if method is CalculationMethod.DEFAULT_VALUES:
        result.recommendations.append(
            "Complete your profile (age, sex, weight and height) for a more accurate estimate"
        )
    elif result.success:
        targets = get_fitness_recommendations(profile)
        result.recommendations.append(
            f"Aim for about {targets.recommended_workout_calories} kcal of exercise per day "
            f"and {targets.weekly_workout_minutes} active minutes per week"
        )
    return result


def get_calorie_rate_per_minute(
    exercises: list[Any],
    user_profile: ProfileInput,
    exercise_categories: Optional[Mapping[str, str]] = None,
) -> float:
    """Calories per minute for the exercises logged so far.

    Invalid exercises are ignored; returns 0.0 when nothing can be counted.
    """
    profile = _coerce_profile(user_profile)
    if not exercises or not validate_profile_for_calculation(profile).is_valid:
        return 0.0

    weight_kg = profile.weight_kg
    met_values = []
    for index, raw_exercise in enumerate(exercises):
        exercise = _coerce_exercise(raw_exercise)
        if validate_exercise(exercise, index).is_valid:
            met_values.append(lookup_met(exercise, weight_kg, exercise_categories).met_value)
    if not met_values:
        return 0.0

    average_met = sum(met_values) / len(met_values)
    adjustment = sex_adjustment(profile.sex) * bmi_adjustment(
        calculate_bmi(weight_kg, profile.height_cm)
    )
    return round(average_met * weight_kg / 60 * adjustment, 1)
