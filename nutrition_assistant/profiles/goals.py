# -*- coding: utf-8 -*-
"""
Daily goal suggestion

Mifflin-St Jeor BMR, activity-scaled TDEE, and a 30/40/30 macro split.
"""

from __future__ import annotations

import math

from .models import ActivityLevel, BodyMetrics, Gender, GoalSuggestion, UnitSystem, WeightGoal

LB_TO_KG = 0.453592
IN_TO_CM = 2.54
MIN_CALORIES = 1200


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _mifflin_st_jeor(weight_kg: float, height_cm: float, age: int, gender: Gender) -> float:
    """Mifflin-St Jeor BMR. Anything but male uses the female constant."""
    s = 5 if gender == Gender.male else -161
    return 10 * weight_kg + 6.25 * height_cm - 5 * age + s


def _activity_factor(activity_level: ActivityLevel) -> float:
    mapping = {
        ActivityLevel.sedentary: 1.2,
        ActivityLevel.lightly_active: 1.375,
        ActivityLevel.moderately_active: 1.55,
        ActivityLevel.very_active: 1.725,
        ActivityLevel.extremely_active: 1.9,
    }
    return mapping.get(activity_level, mapping[ActivityLevel.moderately_active])


def _goal_adjustment(goal: WeightGoal) -> float:
    if goal == WeightGoal.lose_weight:
        return -500.0
    if goal == WeightGoal.gain_weight:
        return 500.0
    return 0.0


def to_metric(metrics: BodyMetrics) -> tuple[float, float]:
    weight_kg = metrics.weight
    height_cm = metrics.height
    if metrics.weight_unit == UnitSystem.imperial:
        weight_kg = metrics.weight * LB_TO_KG
    if metrics.height_unit == UnitSystem.imperial:
        height_cm = metrics.height * IN_TO_CM
    return weight_kg, height_cm


def suggest_goals(metrics: BodyMetrics) -> GoalSuggestion:
    weight_kg, height_cm = to_metric(metrics)
    bmr = _mifflin_st_jeor(weight_kg, height_cm, metrics.age, metrics.gender)
    tdee = bmr * _activity_factor(metrics.activity_level)
    calories = max(MIN_CALORIES, tdee + _goal_adjustment(metrics.goal))

    # Macros come from the unrounded calorie target.
    protein = _round_half_up(calories * 0.3 / 4)
    carbs = _round_half_up(calories * 0.4 / 4)
    fat = _round_half_up(calories * 0.3 / 9)

    return GoalSuggestion(
        bmr=round(bmr, 1),
        tdee=round(tdee, 1),
        calorie_goal=_round_half_up(calories / 50) * 50,
        protein_goal=protein,
        carbs_goal=carbs,
        fat_goal=fat,
    )
