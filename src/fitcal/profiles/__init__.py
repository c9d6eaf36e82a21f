"""User profile model, validation, unit conversion and persistence."""

from fitcal.profiles.body_calc import (
    FitnessRecommendations,
    calculate_bmi,
    calculate_bmr,
    calculate_tdee,
    get_fitness_recommendations,
)
from fitcal.profiles.models import (
    ActivityLevel,
    HeightUnit,
    Sex,
    UserProfile,
    WeightUnit,
    calculate_profile_completeness,
    get_default_profile,
    is_profile_sufficient_for_calculations,
)
from fitcal.profiles.store import ProfileResult, ProfileStore
from fitcal.profiles.units import (
    FeetInches,
    cm_to_feet_inches,
    feet_inches_to_cm,
    kg_to_lbs,
    lbs_to_kg,
)
from fitcal.profiles.validation import (
    ValidationResult,
    validate_age,
    validate_height,
    validate_sex,
    validate_user_profile,
    validate_weight,
)

__all__ = [
    "ActivityLevel",
    "HeightUnit",
    "Sex",
    "UserProfile",
    "WeightUnit",
    "calculate_profile_completeness",
    "get_default_profile",
    "is_profile_sufficient_for_calculations",
    "FitnessRecommendations",
    "calculate_bmi",
    "calculate_bmr",
    "calculate_tdee",
    "get_fitness_recommendations",
    "ProfileResult",
    "ProfileStore",
    "FeetInches",
    "cm_to_feet_inches",
    "feet_inches_to_cm",
    "kg_to_lbs",
    "lbs_to_kg",
    "ValidationResult",
    "validate_age",
    "validate_height",
    "validate_sex",
    "validate_user_profile",
    "validate_weight",
]
