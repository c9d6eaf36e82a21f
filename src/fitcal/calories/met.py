"""MET lookup and intensity classification.

MET values follow the 2011 Compendium of Physical Activities. Strength
categories carry a moderate-effort base MET; cardio has one base MET per
intensity tier. The tier's multiplier is then applied on top:

    light     x0.85  (middle of the 0.8-0.9 band)
    moderate  x1.00
    vigorous  x1.35  (middle of the 1.2-1.5 band)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from fitcal.calories.models import ExerciseEntry
from fitcal.profiles.units import lbs_to_kg


class Intensity(Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    VIGOROUS = "vigorous"


CARDIO_CATEGORY = "cardio"
DEFAULT_CATEGORY = "default"

STRENGTH_CATEGORY_MET = {
    "arms": 4.5,
    "legs": 5.5,
    "chest": 5.0,
    "back": 5.0,
    "shoulders": 4.5,
    "core": 4.0,
    "strength": 5.0,
}

CARDIO_MET = {
    Intensity.LIGHT: 4.0,      # walking, easy cycling
    Intensity.MODERATE: 6.5,   # jogging, moderate cycling
    Intensity.VIGOROUS: 8.5,   # running, hard cycling
}

DEFAULT_MET = 4.5

INTENSITY_MULTIPLIERS = {
    Intensity.LIGHT: 0.85,
    Intensity.MODERATE: 1.0,
    Intensity.VIGOROUS: 1.35,
}

# Lifted load as a fraction of body weight
LIGHT_LOAD_RATIO = 0.25
MODERATE_LOAD_RATIO = 0.6

# Cardio pace thresholds in km/h
LIGHT_PACE_KMH = 6.5
MODERATE_PACE_KMH = 10.0
KMH_PER_MPH = 1.609344
STEEP_INCLINE_DEGREES = 5.0

_TIER_ORDER = [Intensity.LIGHT, Intensity.MODERATE, Intensity.VIGOROUS]


@dataclass
class MetResolution:
    """Resolved category, tier and MET for one exercise."""

    category: str
    intensity: Intensity
    base_met: float
    met_value: float
    used_default_category: bool


def is_known_category(category: str) -> bool:
    return category == CARDIO_CATEGORY or category in STRENGTH_CATEGORY_MET


def resolve_category(
    name: str,
    exercise_categories: Optional[Mapping[str, str]] = None,
) -> tuple[str, bool]:
    """Find the category of an exercise.

    The name is looked up exactly, then case-insensitively. Unmapped names
    and unrecognized categories resolve to the default category.

    Returns:
        (category, used_default_category)
    """
    categories = exercise_categories or {}
    category = categories.get(name)
    if category is None:
        folded = name.strip().casefold()
        for candidate, value in categories.items():
            if str(candidate).strip().casefold() == folded:
                category = value
                break

    if isinstance(category, str):
        category = category.strip().lower()
        if is_known_category(category):
            return category, False
    return DEFAULT_CATEGORY, True


def _pace_kmh(exercise: ExerciseEntry) -> Optional[float]:
    pace = exercise.pace
    if not isinstance(pace, (int, float)) or isinstance(pace, bool) or pace <= 0:
        return None
    if (exercise.pace_unit or "").lower() == "mph":
        return pace * KMH_PER_MPH
    return float(pace)


def _cardio_intensity(exercise: ExerciseEntry) -> Intensity:
    pace = _pace_kmh(exercise)
    if pace is None:
        tier = Intensity.MODERATE
    elif pace < LIGHT_PACE_KMH:
        tier = Intensity.LIGHT
    elif pace < MODERATE_PACE_KMH:
        tier = Intensity.MODERATE
    else:
        tier = Intensity.VIGOROUS

    angle = exercise.elevation_angle
    if isinstance(angle, (int, float)) and angle >= STEEP_INCLINE_DEGREES:
        tier = _TIER_ORDER[min(_TIER_ORDER.index(tier) + 1, len(_TIER_ORDER) - 1)]
    return tier


def _strength_intensity(exercise: ExerciseEntry, body_weight_kg: float) -> Intensity:
    # Bodyweight exercises
    if not exercise.weight:
        return Intensity.MODERATE

    ratio = lbs_to_kg(exercise.weight) / body_weight_kg
    if ratio < LIGHT_LOAD_RATIO:
        return Intensity.LIGHT
    if ratio < MODERATE_LOAD_RATIO:
        return Intensity.MODERATE
    return Intensity.VIGOROUS


def determine_intensity(
    exercise: ExerciseEntry,
    body_weight_kg: float,
    category: str = DEFAULT_CATEGORY,
) -> Intensity:
    """Classify effort: pace and incline for cardio, relative load otherwise."""
    if category == CARDIO_CATEGORY:
        return _cardio_intensity(exercise)
    return _strength_intensity(exercise, body_weight_kg)


def apply_intensity_multiplier(base_met: float, intensity: Intensity) -> float:
    return base_met * INTENSITY_MULTIPLIERS[intensity]


def base_met_for(category: str, intensity: Intensity) -> float:
    if category == CARDIO_CATEGORY:
        return CARDIO_MET[intensity]
    return STRENGTH_CATEGORY_MET.get(category, DEFAULT_MET)


def lookup_met(
    exercise: ExerciseEntry,
    body_weight_kg: float,
    exercise_categories: Optional[Mapping[str, Any]] = None,
) -> MetResolution:
    """Resolve category, intensity and adjusted MET for one exercise."""
    category, used_default = resolve_category(exercise.name, exercise_categories)
    intensity = determine_intensity(exercise, body_weight_kg, category)
    base_met = base_met_for(category, intensity)
    return MetResolution(
        category=category,
        intensity=intensity,
        base_met=base_met,
        met_value=apply_intensity_multiplier(base_met, intensity),
        used_default_category=used_default,
    )
