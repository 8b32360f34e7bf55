# -*- coding: utf-8 -*-
"""Classification relay — Pydantic models (request, model-reply schema, response)."""

from __future__ import annotations

import re
from typing import Any, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from ..food.models import MealType

_NUM_RE = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")


def _coerce_number(value: Any) -> Any:
    """'27g' -> 27.0, '1,200 kcal' -> 1200.0, '.5' -> 0.5; booleans are not numbers."""
    if isinstance(value, bool):
        raise ValueError("expected a number, got a boolean")
    if isinstance(value, str):
        m = _NUM_RE.search(value.replace(",", ""))
        if m:
            return float(m.group(0))
    return value


class RelayRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = None
    user_id: Optional[str] = Field(None, alias="userId")
    timestamp: Optional[str] = Field(None, description="User's local submission time, ISO-8601")


class FoodData(BaseModel):
    """Validated `food_data` object of a `food_entry` reply."""

    model_config = ConfigDict(allow_inf_nan=False)

    food_name: str = Field(..., min_length=1, max_length=200)
    brand: Optional[str] = None
    serving_qty: float = Field(1.0, gt=0)
    serving_size: str = Field("serving", min_length=1)
    calories: float = Field(..., ge=0)
    protein: float = Field(..., ge=0)
    carbs: float = Field(..., ge=0)
    fat: float = Field(..., ge=0)
    meal_type: MealType
    response_text: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any, info: ValidationInfo) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("serving_qty") in (None, ""):
            data["serving_qty"] = 1.0
        if not isinstance(data.get("serving_size"), str) or not data["serving_size"].strip():
            data["serving_size"] = "serving"
        # Unknown or missing meal types fall back to the time-of-day default.
        default_meal = (info.context or {}).get("default_meal_type")
        data["meal_type"] = MealType.coerce(data.get("meal_type")) or default_meal
        return data

    @field_validator("serving_qty", "calories", "protein", "carbs", "fat", mode="before")
    @classmethod
    def _numbers(cls, value: Any) -> Any:
        return _coerce_number(value)

    @field_validator("food_name", "serving_size", mode="after")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("brand", mode="before")
    @classmethod
    def _blank_brand(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ModelReply(BaseModel):
    type: Literal["food_entry", "conversation"]
    response: Optional[str] = None
    food_data: Optional[FoodData] = Field(None, validation_alias=AliasChoices("food_data", "foodData"))

    @model_validator(mode="after")
    def _shape(self) -> "ModelReply":
        if self.type == "food_entry" and self.food_data is None:
            raise ValueError("food_entry requires food_data")
        if self.type == "conversation" and not (self.response or "").strip():
            raise ValueError("conversation requires a response")
        return self


class LoggedFood(BaseModel):
    id: str
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


class RelayResponse(BaseModel):
    response: str
    food_data: Optional[LoggedFood] = Field(None, serialization_alias="foodData")

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
