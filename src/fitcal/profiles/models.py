"""User profile model and default-profile helpers."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from fitcal.profiles.units import lbs_to_kg


class Sex(Enum):
    """Sex used for metabolic adjustments."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class WeightUnit(Enum):
    """Unit the user's weight is stored and displayed in."""
    KG = "kg"
    LBS = "lbs"


class HeightUnit(Enum):
    """Display unit for height. Height is always stored in centimetres."""
    CM = "cm"
    FT_IN = "ft_in"


class ActivityLevel(Enum):
    """Activity level multipliers for TDEE calculation."""
    SEDENTARY = "sedentary"                  # Little or no exercise
    LIGHTLY_ACTIVE = "lightly_active"        # Light exercise 1-3 days/week
    MODERATELY_ACTIVE = "moderately_active"  # Moderate exercise 3-5 days/week
    VERY_ACTIVE = "very_active"              # Hard exercise 6-7 days/week
    EXTREMELY_ACTIVE = "extremely_active"    # Very hard exercise, physical job


VALID_SEXES = tuple(s.value for s in Sex)
VALID_WEIGHT_UNITS = tuple(u.value for u in WeightUnit)
VALID_HEIGHT_UNITS = tuple(u.value for u in HeightUnit)
VALID_ACTIVITY_LEVELS = tuple(a.value for a in ActivityLevel)

REQUIRED_FIELDS = ("age", "sex", "weight", "height")


def _now_iso() -> str:
    return datetime.now().isoformat()


@dataclass
class UserProfile:
    """Profile of the device owner.

    Fields are optional because a stored profile may be partially filled in.
    ``weight`` is in ``weight_unit``; ``height`` is always centimetres.
    """

    age: Optional[int] = None
    sex: Optional[str] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    activity_level: str = ActivityLevel.MODERATELY_ACTIVE.value
    weight_unit: str = WeightUnit.KG.value
    height_unit: str = HeightUnit.CM.value
    created_at: str = field(default_factory=_now_iso)
    updated_at: str = field(default_factory=_now_iso)

    @property
    def weight_kg(self) -> Optional[float]:
        """Weight normalized to kilograms."""
        if self.weight is None:
            return None
        if self.weight_unit == WeightUnit.LBS.value:
            return lbs_to_kg(self.weight)
        return float(self.weight)

    @property
    def height_cm(self) -> Optional[float]:
        """Height in centimetres."""
        return None if self.height is None else float(self.height)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted JSON shape (camelCase keys)."""
        return {
            "age": self.age,
            "sex": self.sex,
            "weight": self.weight,
            "height": self.height,
            "activityLevel": self.activity_level,
            "weightUnit": self.weight_unit,
            "heightUnit": self.height_unit,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserProfile":
        """Build a profile from its persisted JSON shape.

        Missing keys fall back to the dataclass defaults; values are not
        validated here (see ``validate_user_profile``).
        """
        defaults = cls()
        return cls(
            age=data.get("age"),
            sex=data.get("sex"),
            weight=data.get("weight"),
            height=data.get("height"),
            activity_level=data.get("activityLevel", defaults.activity_level),
            weight_unit=data.get("weightUnit", defaults.weight_unit),
            height_unit=data.get("heightUnit", defaults.height_unit),
            created_at=data.get("createdAt", defaults.created_at),
            updated_at=data.get("updatedAt", defaults.updated_at),
        )

    def snapshot(self) -> dict[str, Any]:
        """Subset of fields recorded alongside a calorie estimate."""
        data = asdict(self)
        return {
            "age": data["age"],
            "sex": data["sex"],
            "weight": data["weight"],
            "height": data["height"],
            "weightUnit": data["weight_unit"],
            "heightUnit": data["height_unit"],
        }


def get_default_profile() -> UserProfile:
    """Build a fresh default profile used when the stored one is unusable.

    A new instance is returned on every call; it is never persisted.
    """
    return UserProfile(
        age=30,
        sex=Sex.MALE.value,
        weight=70.0,
        height=175.0,
        activity_level=ActivityLevel.MODERATELY_ACTIVE.value,
        weight_unit=WeightUnit.KG.value,
        height_unit=HeightUnit.CM.value,
    )


def _is_filled(value: Any) -> bool:
    return value is not None and value != 0 and value != ""


def calculate_profile_completeness(profile: Optional[UserProfile]) -> int:
    """Percentage (0-100) of required fields holding meaningful values."""
    if profile is None:
        return 0
    filled = [name for name in REQUIRED_FIELDS if _is_filled(getattr(profile, name))]
    return round(len(filled) / len(REQUIRED_FIELDS) * 100)


def is_profile_sufficient_for_calculations(profile: Optional[UserProfile]) -> bool:
    """Whether the profile can drive a calorie estimate without defaults."""
    if profile is None:
        return False
    try:
        return (
            profile.age is not None
            and profile.age > 0
            and profile.weight is not None
            and profile.weight > 0
            and profile.height is not None
            and profile.height > 0
            and profile.sex is not None
        )
    except TypeError:
        # Non-numeric values loaded from storage
        return False
