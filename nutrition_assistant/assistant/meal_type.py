# -*- coding: utf-8 -*-
"""Default meal type from the user's local submission time."""

from __future__ import annotations

import logging
from typing import Optional

from ..food.models import MealType
from ..timeutil import parse_iso

logger = logging.getLogger(__name__)

FALLBACK_MEAL_TYPE = MealType.snack

# (start hour inclusive, end hour exclusive, meal type); hours outside every window are snacks.
_WINDOWS = (
    (5, 10, MealType.breakfast),
    (10, 15, MealType.lunch),
    (15, 19, MealType.snack),
    (19, 23, MealType.dinner),
)


def infer_meal_type(hour: int) -> MealType:
    if not 0 <= hour <= 23:
        raise ValueError(f"hour out of range: {hour}")
    for start, end, meal in _WINDOWS:
        if start <= hour < end:
            return meal
    return FALLBACK_MEAL_TYPE


def meal_type_for_timestamp(timestamp: Optional[str]) -> MealType:
    """Use the wall-clock hour exactly as written in the ISO-8601 string.

    The timestamp carries the user's own offset, so no conversion to server time
    happens here. Missing or unparseable timestamps fall back to a snack.
    """
    if not timestamp:
        return FALLBACK_MEAL_TYPE
    parsed = parse_iso(timestamp)
    if parsed is None:
        logger.warning("unparseable timestamp %r, defaulting meal type to %s", timestamp, FALLBACK_MEAL_TYPE.value)
        return FALLBACK_MEAL_TYPE
    return infer_meal_type(parsed.hour)
