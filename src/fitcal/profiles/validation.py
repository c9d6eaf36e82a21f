"""Profile field validators.

Validators never raise: each returns a ValidationResult listing one message
per violated rule so the caller can show every problem at once.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from fitcal.profiles.models import (
    VALID_ACTIVITY_LEVELS,
    VALID_HEIGHT_UNITS,
    VALID_SEXES,
    VALID_WEIGHT_UNITS,
    HeightUnit,
    UserProfile,
    WeightUnit,
)

MIN_AGE = 13
MAX_AGE = 120

# Weight bounds per unit; 66-661 lbs is the rounded 30-300 kg range
WEIGHT_BOUNDS = {
    WeightUnit.KG.value: (30.0, 300.0),
    WeightUnit.LBS.value: (66.0, 661.0),
}

MIN_HEIGHT_CM = 100.0
MAX_HEIGHT_CM = 250.0
MIN_HEIGHT_INCHES = 39  # 3 ft 3 in
MAX_HEIGHT_INCHES = 98  # 8 ft 2 in


@dataclass
class ValidationResult:
    """Outcome of a validation: valid when no errors were collected."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[str]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=errors)


def is_number(value: Any) -> bool:
    """True for int/float values (bool excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_finite_number(value: Any) -> bool:
    return is_number(value) and math.isfinite(value)


def is_whole_number(value: Any) -> bool:
    return is_finite_number(value) and float(value).is_integer()


def validate_age(age: Any) -> ValidationResult:
    """Validate age (13-120 years, whole number)."""
    errors: list[str] = []

    if not is_whole_number(age):
        errors.append("Age must be a whole number")

    if is_number(age):
        if age < MIN_AGE:
            errors.append(f"Age must be at least {MIN_AGE} years")
        if age > MAX_AGE:
            errors.append(f"Age must be {MAX_AGE} years or less")

    return ValidationResult.from_errors(errors)


def validate_weight(weight: Any, unit: str = WeightUnit.KG.value) -> ValidationResult:
    """Validate body weight against the bounds of its unit.

    Args:
        weight: Weight value
        unit: "kg" or "lbs"

    Returns:
        ValidationResult
    """
    errors: list[str] = []

    if unit not in WEIGHT_BOUNDS:
        return ValidationResult.from_errors(["Weight unit must be kg or lbs"])

    if not is_finite_number(weight) or weight <= 0:
        errors.append("Weight must be a positive number")

    if is_number(weight):
        low, high = WEIGHT_BOUNDS[unit]
        if weight < low:
            errors.append(f"Weight must be at least {low:g} {unit}")
        if weight > high:
            errors.append(f"Weight must be {high:g} {unit} or less")

    return ValidationResult.from_errors(errors)


def validate_height(
    height: Any,
    unit: str = HeightUnit.CM.value,
    inches: Optional[Any] = None,
) -> ValidationResult:
    """Validate height.

    In "cm" mode ``height`` is centimetres. In "ft_in" mode ``height`` is the
    feet part and ``inches`` the inches part; range errors are phrased in
    feet and inches.
    """
    errors: list[str] = []

    if unit == HeightUnit.FT_IN.value:
        feet_ok = is_whole_number(height) and height >= 0
        if not feet_ok:
            errors.append("Feet must be a non-negative whole number")

        inches_ok = inches is None or (
            is_whole_number(inches) and 0 <= inches <= 11
        )
        if not inches_ok:
            errors.append("Inches must be a whole number between 0 and 11")

        if is_finite_number(height) and (inches is None or is_finite_number(inches)):
            total_inches = height * 12 + (inches or 0)
            if total_inches < MIN_HEIGHT_INCHES:
                errors.append("Height must be at least 3 feet 3 inches")
            if total_inches > MAX_HEIGHT_INCHES:
                errors.append("Height must be 8 feet 2 inches or less")
    elif unit == HeightUnit.CM.value:
        if not is_finite_number(height) or height <= 0:
            errors.append("Height must be a positive number")

        if is_number(height):
            if height < MIN_HEIGHT_CM:
                errors.append(f"Height must be at least {MIN_HEIGHT_CM:g} cm")
            if height > MAX_HEIGHT_CM:
                errors.append(f"Height must be {MAX_HEIGHT_CM:g} cm or less")
    else:
        errors.append("Height unit must be cm or ft_in")

    return ValidationResult.from_errors(errors)


def validate_sex(sex: Any) -> ValidationResult:
    """Validate sex selection."""
    if sex not in VALID_SEXES:
        return ValidationResult.from_errors(["Sex must be male, female, or other"])
    return ValidationResult.from_errors([])


def validate_user_profile(
    profile: Union[UserProfile, dict[str, Any], None],
) -> ValidationResult:
    """Validate a complete profile.

    Accepts a UserProfile or its persisted dict form. The result is valid
    only when every field validator passes.
    """
    if profile is None:
        return ValidationResult.from_errors(["User profile is required"])
    if isinstance(profile, dict):
        profile = UserProfile.from_dict(profile)

    errors: list[str] = []

    if profile.age is not None:
        errors.extend(validate_age(profile.age).errors)
    else:
        errors.append("Age is required")

    if profile.sex is not None:
        errors.extend(validate_sex(profile.sex).errors)
    else:
        errors.append("Sex is required")

    weight_unit_ok = profile.weight_unit in VALID_WEIGHT_UNITS
    if profile.weight is not None:
        if weight_unit_ok:
            errors.extend(validate_weight(profile.weight, profile.weight_unit).errors)
    else:
        errors.append("Weight is required")

    # Stored height is centimetres whatever the display unit
    if profile.height is not None:
        errors.extend(validate_height(profile.height, HeightUnit.CM.value).errors)
    else:
        errors.append("Height is required")

    if not weight_unit_ok:
        errors.append("Weight unit must be kg or lbs")

    if profile.height_unit not in VALID_HEIGHT_UNITS:
        errors.append("Height unit must be cm or ft_in")

    if profile.activity_level and profile.activity_level not in VALID_ACTIVITY_LEVELS:
        errors.append("Invalid activity level")

    return ValidationResult.from_errors(errors)
