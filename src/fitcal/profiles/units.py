"""Weight and height unit conversions.

All functions are pure. The calorie engine uses them to normalize profile
values to kilograms and centimetres; display code uses them the other way.
"""

from __future__ import annotations

import math
from typing import NamedTuple

LBS_PER_KG = 2.20462
CM_PER_FOOT = 30.48
CM_PER_INCH = 2.54


class FeetInches(NamedTuple):
    """Height split into whole feet and whole inches."""

    feet: int
    inches: int


def kg_to_lbs(kg: float) -> float:
    """Convert kilograms to pounds."""
    return kg * LBS_PER_KG


def lbs_to_kg(lbs: float) -> float:
    """Convert pounds to kilograms."""
    return lbs / LBS_PER_KG


def cm_to_feet_inches(cm: float) -> FeetInches:
    """Convert centimetres to whole feet and rounded inches.

    Inches that round up to 12 carry into the next foot, so 182.88 cm is
    6 ft 0 in rather than 5 ft 12 in.

    Args:
        cm: Height in centimetres

    Returns:
        FeetInches(feet, inches)
    """
    total_feet = cm / CM_PER_FOOT
    feet = math.floor(total_feet)
    inches = round((total_feet - feet) * 12)
    if inches == 12:
        feet += 1
        inches = 0
    return FeetInches(feet=int(feet), inches=int(inches))


def feet_inches_to_cm(feet: float, inches: float) -> float:
    """Convert feet and inches to centimetres."""
    return feet * CM_PER_FOOT + inches * CM_PER_INCH
