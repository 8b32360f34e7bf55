# -*- coding: utf-8 -*-
"""Profiles — DB storage helpers."""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, Optional, cast

from ..timeutil import utc_now_iso
from .models import DEFAULT_GOALS, ProfileUpsertRequest

_COLUMNS = (
    "first_name",
    "last_name",
    "age",
    "gender",
    "weight",
    "height",
    "weight_unit",
    "height_unit",
    "activity_level",
    "goal",
    "calorie_goal",
    "protein_goal",
    "carbs_goal",
    "fat_goal",
)


def get_profile(conn: sqlite3.Connection, user_id: str) -> Optional[Dict[str, Any]]:
    row = conn.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
    return dict(row) if row else None


def upsert_profile(conn: sqlite3.Connection, user_id: str, request: ProfileUpsertRequest) -> Dict[str, Any]:
    data = request.model_dump(mode="json")
    values = [data[c] for c in _COLUMNS]
    now = utc_now_iso()
    assignments = ", ".join(f"{c} = excluded.{c}" for c in _COLUMNS)
    conn.execute(
        f"""
        INSERT INTO profiles (id, {", ".join(_COLUMNS)}, created_at, updated_at)
        VALUES (?, {", ".join("?" for _ in _COLUMNS)}, ?, ?)
        ON CONFLICT(id) DO UPDATE SET {assignments}, updated_at = excluded.updated_at
        """,
        (user_id, *values, now, now),
    )
    return cast(Dict[str, Any], get_profile(conn, user_id))


def get_goals(conn: sqlite3.Connection, user_id: str) -> Dict[str, float]:
    """Daily goals for the dashboard; falls back to defaults when no profile exists."""
    profile = get_profile(conn, user_id)
    goals = dict(DEFAULT_GOALS)
    if not profile:
        return goals
    for key in goals:
        value = profile.get(key)
        if value:
            goals[key] = float(value)
    return goals
