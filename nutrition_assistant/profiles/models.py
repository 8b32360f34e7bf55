# -*- coding: utf-8 -*-
"""Profiles — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Gender(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class ActivityLevel(str, Enum):
    sedentary = "sedentary"
    lightly_active = "lightly_active"
    moderately_active = "moderately_active"
    very_active = "very_active"
    extremely_active = "extremely_active"


class WeightGoal(str, Enum):
    lose_weight = "lose_weight"
    maintain_weight = "maintain_weight"
    gain_weight = "gain_weight"


class UnitSystem(str, Enum):
    metric = "metric"
    imperial = "imperial"


DEFAULT_GOALS = {
    "calorie_goal": 2000.0,
    "protein_goal": 150.0,
    "carbs_goal": 200.0,
    "fat_goal": 65.0,
}


class BodyMetrics(BaseModel):
    age: int = Field(..., ge=1, le=120)
    gender: Gender
    weight: float = Field(..., ge=20, le=500, description="kg (metric) or lb (imperial)")
    height: float = Field(..., ge=50, le=250, description="cm (metric) or in (imperial)")
    weight_unit: UnitSystem = UnitSystem.metric
    height_unit: UnitSystem = UnitSystem.metric
    activity_level: ActivityLevel = ActivityLevel.moderately_active
    goal: WeightGoal = WeightGoal.maintain_weight


class ProfileUpsertRequest(BodyMetrics):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    calorie_goal: float = Field(DEFAULT_GOALS["calorie_goal"], ge=500, le=10000)
    protein_goal: float = Field(DEFAULT_GOALS["protein_goal"], ge=0)
    carbs_goal: float = Field(DEFAULT_GOALS["carbs_goal"], ge=0)
    fat_goal: float = Field(DEFAULT_GOALS["fat_goal"], ge=0)


class Profile(ProfileUpsertRequest):
    id: str
    created_at: str
    updated_at: str


class GoalSuggestion(BaseModel):
    bmr: float
    tdee: float
    calorie_goal: int
    protein_goal: int
    carbs_goal: int
    fat_goal: int
