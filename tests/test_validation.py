"""Tests for profile validators."""

from __future__ import annotations

import math

import pytest

from fitcal.profiles import UserProfile
from fitcal.profiles.validation import (
    validate_age,
    validate_height,
    validate_sex,
    validate_user_profile,
    validate_weight,
)


class TestValidateAge:
    """Tests for age validation."""

    def test_below_minimum(self) -> None:
        result = validate_age(12)
        assert not result.is_valid
        assert any("13" in message for message in result.errors)

    def test_above_maximum(self) -> None:
        result = validate_age(121)
        assert not result.is_valid
        assert any("120" in message for message in result.errors)

    @pytest.mark.parametrize("age", [13, 30, 120])
    def test_boundaries_inclusive(self, age: int) -> None:
        assert validate_age(age).is_valid

    def test_fractional_age(self) -> None:
        result = validate_age(30.5)
        assert result.errors == ["Age must be a whole number"]

    @pytest.mark.parametrize("age", [None, "thirty", True, math.nan])
    def test_non_numeric(self, age) -> None:
        result = validate_age(age)
        assert not result.is_valid
        assert "Age must be a whole number" in result.errors

    def test_reports_every_violation(self) -> None:
        """12.5 is both fractional and below the minimum."""
        result = validate_age(12.5)
        assert len(result.errors) == 2


class TestValidateWeight:
    """Tests for weight validation."""

    def test_below_kg_floor(self) -> None:
        result = validate_weight(25, "kg")
        assert not result.is_valid
        assert result.errors == ["Weight must be at least 30 kg"]

    def test_above_kg_ceiling(self) -> None:
        result = validate_weight(350, "kg")
        assert not result.is_valid
        assert result.errors == ["Weight must be 300 kg or less"]

    @pytest.mark.parametrize("weight", [30, 70.5, 300])
    def test_valid_kg(self, weight: float) -> None:
        assert validate_weight(weight, "kg").is_valid

    def test_lbs_bounds(self) -> None:
        assert validate_weight(154, "lbs").is_valid
        assert validate_weight(66, "lbs").is_valid
        assert validate_weight(661, "lbs").is_valid
        assert not validate_weight(60, "lbs").is_valid
        assert not validate_weight(700, "lbs").is_valid

    def test_lbs_value_above_kg_ceiling_is_fine(self) -> None:
        """350 lbs is only ~159 kg."""
        assert validate_weight(350, "lbs").is_valid

    def test_non_positive(self) -> None:
        result = validate_weight(0, "kg")
        assert "Weight must be a positive number" in result.errors

    def test_unknown_unit(self) -> None:
        assert validate_weight(70, "stone").errors == ["Weight unit must be kg or lbs"]

    def test_defaults_to_kg(self) -> None:
        assert not validate_weight(25).is_valid


class TestValidateHeight:
    """Tests for height validation."""

    @pytest.mark.parametrize("height", [100, 175, 250])
    def test_valid_cm(self, height: float) -> None:
        assert validate_height(height, "cm").is_valid

    def test_cm_out_of_range(self) -> None:
        assert validate_height(99, "cm").errors == ["Height must be at least 100 cm"]
        assert validate_height(251, "cm").errors == ["Height must be 250 cm or less"]

    def test_cm_not_a_number(self) -> None:
        assert "Height must be a positive number" in validate_height("tall", "cm").errors

    def test_feet_and_inches(self) -> None:
        assert validate_height(5, "ft_in", 9).is_valid

    def test_feet_and_inches_boundaries(self) -> None:
        assert validate_height(3, "ft_in", 3).is_valid
        assert validate_height(8, "ft_in", 2).is_valid
        assert validate_height(3, "ft_in", 2).errors == ["Height must be at least 3 feet 3 inches"]
        assert validate_height(8, "ft_in", 3).errors == ["Height must be 8 feet 2 inches or less"]

    def test_inches_out_of_range(self) -> None:
        result = validate_height(5, "ft_in", 12)
        assert "Inches must be a whole number between 0 and 11" in result.errors

    def test_fractional_feet(self) -> None:
        result = validate_height(5.5, "ft_in", 0)
        assert "Feet must be a non-negative whole number" in result.errors

    def test_unknown_unit(self) -> None:
        assert validate_height(175, "m").errors == ["Height unit must be cm or ft_in"]


class TestValidateSex:
    """Tests for sex validation."""

    @pytest.mark.parametrize("sex", ["male", "female", "other"])
    def test_valid(self, sex: str) -> None:
        assert validate_sex(sex).is_valid

    def test_invalid(self) -> None:
        assert validate_sex("unknown").errors == ["Sex must be male, female, or other"]


class TestValidateUserProfile:
    """Tests for whole-profile validation."""

    def test_valid_profile(self, male_profile) -> None:
        assert validate_user_profile(male_profile).is_valid

    def test_accepts_dict(self) -> None:
        data = {"age": 40, "sex": "female", "weight": 150, "height": 165, "weightUnit": "lbs"}
        assert validate_user_profile(data).is_valid

    def test_none(self) -> None:
        assert validate_user_profile(None).errors == ["User profile is required"]

    def test_empty_profile_lists_required_fields(self) -> None:
        result = validate_user_profile(UserProfile())
        assert result.errors == [
            "Age is required",
            "Sex is required",
            "Weight is required",
            "Height is required",
        ]

    def test_collects_errors_from_every_field(self) -> None:
        profile = UserProfile(age=10, sex="x", weight=20, height=90)
        result = validate_user_profile(profile)
        assert not result.is_valid
        assert len(result.errors) == 4

    def test_invalid_units_and_activity(self, male_profile) -> None:
        male_profile.weight_unit = "stone"
        male_profile.height_unit = "m"
        male_profile.activity_level = "couch"
        result = validate_user_profile(male_profile)
        assert result.errors == [
            "Weight unit must be kg or lbs",
            "Height unit must be cm or ft_in",
            "Invalid activity level",
        ]

    def test_height_unit_does_not_change_stored_height(self, male_profile) -> None:
        """Height is stored in cm even when displayed in feet and inches."""
        male_profile.height_unit = "ft_in"
        assert validate_user_profile(male_profile).is_valid
