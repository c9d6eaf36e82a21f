"""Body metrics derived from a user profile.

BMI feeds the calorie engine's metabolic adjustment. BMR and TDEE use the
Mifflin-St Jeor equation, which is more accurate than Harris-Benedict for
modern populations, and back the daily fitness recommendations.
"""

from __future__ import annotations

from dataclasses import dataclass

from fitcal.profiles.models import ActivityLevel, Sex, UserProfile

# Activity level multipliers (Harris-Benedict activity factors)
ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE: 1.375,
    ActivityLevel.MODERATELY_ACTIVE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.EXTREMELY_ACTIVE: 1.9,
}

# Share of TDEE we suggest burning through exercise
WORKOUT_CALORIE_SHARE = 0.15
# WHO recommendation for moderate activity
WEEKLY_WORKOUT_MINUTES = 150


@dataclass
class FitnessRecommendations:
    """Daily calorie goals derived from TDEE."""

    daily_calorie_goal: int
    recommended_workout_calories: int
    weekly_workout_minutes: int

    def to_dict(self) -> dict:
        return {
            "dailyCalorieGoal": self.daily_calorie_goal,
            "recommendedWorkoutCalories": self.recommended_workout_calories,
            "weeklyWorkoutMinutes": self.weekly_workout_minutes,
        }


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    """Body Mass Index: weight (kg) / height (m)^2."""
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)


def calculate_bmr(profile: UserProfile) -> float:
    """Calculate Basal Metabolic Rate using Mifflin-St Jeor equation.

    Args:
        profile: Profile with age, sex, weight and height filled in

    Returns:
        BMR in calories per day
    """
    base = (10 * profile.weight_kg) + (6.25 * profile.height_cm) - (5 * profile.age)
    if profile.sex == Sex.MALE.value:
        return base + 5
    return base - 161


def calculate_tdee(profile: UserProfile) -> float:
    """Calculate Total Daily Energy Expenditure.

    Unknown activity levels use the moderately active multiplier.
    """
    try:
        level = ActivityLevel(profile.activity_level)
    except ValueError:
        level = ActivityLevel.MODERATELY_ACTIVE
    return calculate_bmr(profile) * ACTIVITY_MULTIPLIERS[level]


def get_fitness_recommendations(profile: UserProfile) -> FitnessRecommendations:
    """Daily calorie goal and workout targets for a profile."""
    tdee = calculate_tdee(profile)
    return FitnessRecommendations(
        daily_calorie_goal=round(tdee),
        recommended_workout_calories=round(tdee * WORKOUT_CALORIE_SHARE),
        weekly_workout_minutes=WEEKLY_WORKOUT_MINUTES,
    )
