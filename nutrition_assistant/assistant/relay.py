# -*- coding: utf-8 -*-
"""Classification relay — one message in, one reply (and at most one food-log row) out."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date
from typing import List, Optional, Protocol, Tuple

from pydantic import ValidationError as SchemaError

from ..errors import PersistenceError, ValidationError
from ..food.models import MealType
from ..food.storage import insert_food_log, list_recent
from .meal_type import meal_type_for_timestamp
from .models import FoodData, LoggedFood, ModelReply, RelayResponse
from .parsing import parse_model_json

logger = logging.getLogger(__name__)

RECENT_FOODS_LIMIT = 5


class CompletionClient(Protocol):
    def complete(self, *, system: str, user: str) -> str: ...


def build_system_prompt(default_meal_type: MealType, recent_foods: List[str]) -> str:
    meal_options = ", ".join(m.value for m in MealType)
    recent = f"Recently logged: {', '.join(recent_foods)}." if recent_foods else "Recently logged: nothing yet."
    return (
        "You are a nutrition-logging assistant. Classify the user's message and return STRICT JSON only. "
        "Do NOT wrap in markdown or code fences. Use double quotes and no trailing commas.\n"
        "\n"
        "If the user describes food they ate or want to log, return:\n"
        "{\n"
        '  "type": "food_entry",\n'
        '  "food_data": {\n'
        '    "food_name": "string",\n'
        '    "brand": "string|null",\n'
        '    "serving_qty": number,\n'
        '    "serving_size": "string, e.g. medium (118g)",\n'
        '    "calories": number,\n'
        '    "protein": number,\n'
        '    "carbs": number,\n'
        '    "fat": number,\n'
        f'    "meal_type": "one of: {meal_options}"\n'
        "  },\n"
        '  "response": "short confirmation for the user, including the nutrition numbers"\n'
        "}\n"
        "Nutrition values are grams (calories in kcal) for the whole portion, non-negative estimates.\n"
        "\n"
        "Otherwise (questions, greetings, anything that is not a food to log), return:\n"
        '{"type": "conversation", "response": "string"}\n'
        "\n"
        f"If the user does not say which meal it was, use meal_type \"{default_meal_type.value}\".\n"
        f"{recent}"
    )


def _fmt(value: float) -> str:
    return f"{value:g}"


def _confirmation(food: FoodData) -> str:
    return (
        f"I've logged {_fmt(food.serving_qty)} {food.serving_size} {food.food_name}: "
        f"{_fmt(food.calories)} calories, {_fmt(food.fat)}g fat, "
        f"{_fmt(food.protein)}g protein, {_fmt(food.carbs)}g carbs"
    )


def interpret_reply(raw: str, *, default_meal_type: MealType) -> Tuple[str, Optional[FoodData]]:
    """Validate the model's reply. Never raises.

    Returns (reply text, food data). Anything that does not satisfy the reply
    schema degrades to (raw text, None) so nothing partial reaches storage.
    """
    try:
        parsed = parse_model_json(raw)
        reply = ModelReply.model_validate(parsed, context={"default_meal_type": default_meal_type})
    except (ValueError, SchemaError) as exc:
        logger.warning("classification reply rejected, passing raw text through: %s", exc)
        return raw, None

    food = reply.food_data
    if reply.type == "conversation" or food is None:
        return (reply.response or "").strip(), None

    text = (reply.response or "").strip() or (food.response_text or "").strip() or _confirmation(food)
    return text, food


def recent_food_names(conn: sqlite3.Connection, user_id: str, limit: int = RECENT_FOODS_LIMIT) -> List[str]:
    """Short-term context for the prompt; an unreadable history just means no context."""
    try:
        rows = list_recent(conn, user_id=user_id, limit=limit)
    except sqlite3.Error as exc:
        logger.warning("could not load recent foods for user %s: %s", user_id, exc)
        return []
    return [row["food_name"] for row in rows]


def run_relay(
    *,
    conn: sqlite3.Connection,
    llm: CompletionClient,
    user_id: str,
    message: Optional[str],
    timestamp: Optional[str] = None,
    today: Optional[date] = None,
) -> RelayResponse:
    """Classify `message` and log it when it is a well-formed food entry.

    Raises ValidationError for an empty message (before any upstream call),
    ConfigurationError/UpstreamError from the client, and PersistenceError when
    the insert fails.
    """
    text = (message or "").strip()
    if not text:
        raise ValidationError("Message is required")

    default_meal_type = meal_type_for_timestamp(timestamp)
    logger.debug("default meal type %s for timestamp %r", default_meal_type.value, timestamp)

    system_prompt = build_system_prompt(default_meal_type, recent_food_names(conn, user_id))
    raw = llm.complete(system=system_prompt, user=text)

    reply_text, food = interpret_reply(raw, default_meal_type=default_meal_type)
    if food is None:
        return RelayResponse(response=reply_text, food_data=None)

    log_date = (today or date.today()).isoformat()
    try:
        row = insert_food_log(
            conn,
            user_id=user_id,
            food_name=food.food_name,
            brand=food.brand,
            calories=food.calories,
            protein=food.protein,
            carbs=food.carbs,
            fat=food.fat,
            meal_type=food.meal_type.value,
            serving_qty=food.serving_qty,
            serving_size=food.serving_size,
            log_date=log_date,
        )
    except sqlite3.Error as exc:
        logger.error("failed to log food for user %s: %s", user_id, exc)
        raise PersistenceError(f"Failed to log food: {exc}") from exc

    logger.info("logged %s (%s) for user %s on %s", food.food_name, food.meal_type.value, user_id, log_date)
    return RelayResponse(response=reply_text, food_data=LoggedFood.model_validate(row))
