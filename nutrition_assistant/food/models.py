# -*- coding: utf-8 -*-
"""Food logs — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MealType(str, Enum):
    breakfast = "Breakfast"
    lunch = "Lunch"
    dinner = "Dinner"
    snack = "Snack"
    morning_snack = "Morning Snack"
    afternoon_snack = "Afternoon Snack"
    evening_snack = "Evening Snack"

    @classmethod
    def coerce(cls, value: object) -> Optional["MealType"]:
        """Case/spacing-insensitive lookup ("afternoon_snack" -> Afternoon Snack)."""
        if isinstance(value, MealType):
            return value
        if not isinstance(value, str):
            return None
        key = " ".join(value.replace("_", " ").replace("-", " ").split()).lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        return None


def _non_blank(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class NutritionTotals(BaseModel):
    calories: float = Field(0.0, ge=0)
    protein: float = Field(0.0, ge=0)
    carbs: float = Field(0.0, ge=0)
    fat: float = Field(0.0, ge=0)


class FoodLogCreateRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    food_name: str = Field(..., min_length=1, max_length=200)
    brand: Optional[str] = Field(None, max_length=200)
    calories: float = Field(..., ge=0)
    protein: float = Field(..., ge=0)
    carbs: float = Field(..., ge=0)
    fat: float = Field(..., ge=0)
    meal_type: MealType
    serving_qty: float = Field(1.0, gt=0)
    serving_size: str = Field("serving", min_length=1, max_length=100)
    log_date: Optional[str] = Field(None, description="YYYY-MM-DD; defaults to today")

    @field_validator("meal_type", mode="before")
    @classmethod
    def _coerce_meal_type(cls, value: object) -> object:
        return MealType.coerce(value) or value

    @field_validator("food_name", "serving_size", mode="after")
    @classmethod
    def _strip_text(cls, value: str) -> str:
        return _non_blank(value)


class FoodLogUpdateRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    food_name: Optional[str] = Field(None, min_length=1, max_length=200)
    brand: Optional[str] = Field(None, max_length=200)
    calories: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fat: Optional[float] = Field(None, ge=0)
    meal_type: Optional[MealType] = None
    serving_qty: Optional[float] = Field(None, gt=0)
    serving_size: Optional[str] = Field(None, min_length=1, max_length=100)

    @field_validator("meal_type", mode="before")
    @classmethod
    def _coerce_meal_type(cls, value: object) -> object:
        if value is None:
            return None
        return MealType.coerce(value) or value

    @field_validator("food_name", "serving_size", mode="after")
    @classmethod
    def _strip_text(cls, value: Optional[str]) -> Optional[str]:
        # None means "unchanged" and is dropped by the endpoint.
        return None if value is None else _non_blank(value)


class FoodLogEntry(BaseModel):
    id: str
    user_id: str
    food_name: str
    brand: Optional[str] = None
    calories: float
    protein: float
    carbs: float
    fat: float
    meal_type: str
    serving_qty: float
    serving_size: str
    log_date: str
    created_at: str


class FoodLogDayResponse(BaseModel):
    date: str
    count: int
    meals: Dict[str, List[FoodLogEntry]]
    totals: NutritionTotals


class FoodLogListResponse(BaseModel):
    count: int
    entries: List[FoodLogEntry]


class FoodDailySummary(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    totals: NutritionTotals
    entry_count: int = Field(0, ge=0)


class FoodSummaryResponse(BaseModel):
    start: str
    end: str
    totals: NutritionTotals
    days: List[FoodDailySummary]


class GoalProgress(BaseModel):
    consumed: float
    goal: float
    remaining: float


class TodayResponse(BaseModel):
    date: str
    calories: GoalProgress
    protein: GoalProgress
    carbs: GoalProgress
    fat: GoalProgress
