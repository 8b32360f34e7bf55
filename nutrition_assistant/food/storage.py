# -*- coding: utf-8 -*-
"""Food logs — DB storage helpers and daily aggregation."""

from __future__ import annotations

import sqlite3
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

from ..timeutil import utc_now_iso
from .models import FoodDailySummary, NutritionTotals

_UPDATABLE = (
    "food_name",
    "brand",
    "calories",
    "protein",
    "carbs",
    "fat",
    "meal_type",
    "serving_qty",
    "serving_size",
)


def insert_food_log(
    conn: sqlite3.Connection,
    *,
    user_id: str,
    food_name: str,
    calories: float,
    protein: float,
    carbs: float,
    fat: float,
    meal_type: str,
    serving_qty: float = 1.0,
    serving_size: str = "serving",
    log_date: str,
    brand: Optional[str] = None,
) -> Dict[str, Any]:
    row = {
        "id": str(uuid4()),
        "user_id": user_id,
        "food_name": food_name,
        "brand": brand,
        "calories": float(calories),
        "protein": float(protein),
        "carbs": float(carbs),
        "fat": float(fat),
        "meal_type": meal_type,
        "serving_qty": float(serving_qty),
        "serving_size": serving_size,
        "log_date": log_date,
        "created_at": utc_now_iso(),
    }
    conn.execute(
        """
        INSERT INTO food_logs (id, user_id, food_name, brand, calories, protein, carbs, fat,
                               meal_type, serving_qty, serving_size, log_date, created_at)
        VALUES (:id, :user_id, :food_name, :brand, :calories, :protein, :carbs, :fat,
                :meal_type, :serving_qty, :serving_size, :log_date, :created_at)
        """,
        row,
    )
    return row


def get_food_log(conn: sqlite3.Connection, *, user_id: str, entry_id: str) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        "SELECT * FROM food_logs WHERE id = ? AND user_id = ?",
        (entry_id, user_id),
    ).fetchone()
    return dict(row) if row else None


def update_food_log(
    conn: sqlite3.Connection,
    *,
    user_id: str,
    entry_id: str,
    changes: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    fields = {k: v for k, v in changes.items() if k in _UPDATABLE}
    if fields:
        assignments = ", ".join(f"{k} = ?" for k in fields)
        cur = conn.execute(
            f"UPDATE food_logs SET {assignments} WHERE id = ? AND user_id = ?",
            (*fields.values(), entry_id, user_id),
        )
        if cur.rowcount == 0:
            return None
    return get_food_log(conn, user_id=user_id, entry_id=entry_id)


def delete_food_log(conn: sqlite3.Connection, *, user_id: str, entry_id: str) -> bool:
    cur = conn.execute("DELETE FROM food_logs WHERE id = ? AND user_id = ?", (entry_id, user_id))
    return cur.rowcount > 0


def list_day(conn: sqlite3.Connection, *, user_id: str, log_date: str) -> List[Dict[str, Any]]:
    rows = conn.execute(
        "SELECT * FROM food_logs WHERE user_id = ? AND log_date = ? ORDER BY created_at ASC, rowid ASC",
        (user_id, log_date),
    ).fetchall()
    return [dict(r) for r in rows]


def list_recent(conn: sqlite3.Connection, *, user_id: str, limit: int = 5) -> List[Dict[str, Any]]:
    rows = conn.execute(
        "SELECT * FROM food_logs WHERE user_id = ? ORDER BY created_at DESC, rowid DESC LIMIT ?",
        (user_id, int(limit)),
    ).fetchall()
    return [dict(r) for r in rows]


def list_range(conn: sqlite3.Connection, *, user_id: str, start: str, end: str) -> List[Dict[str, Any]]:
    rows = conn.execute(
        """
        SELECT * FROM food_logs
        WHERE user_id = ? AND log_date >= ? AND log_date <= ?
        ORDER BY log_date ASC, created_at ASC, rowid ASC
        """,
        (user_id, start, end),
    ).fetchall()
    return [dict(r) for r in rows]


def compute_totals(entries: Iterable[Dict[str, Any]]) -> NutritionTotals:
    calories = 0.0
    protein = 0.0
    carbs = 0.0
    fat = 0.0
    for entry in entries:
        calories += float(entry.get("calories") or 0.0)
        protein += float(entry.get("protein") or 0.0)
        carbs += float(entry.get("carbs") or 0.0)
        fat += float(entry.get("fat") or 0.0)
    return NutritionTotals(
        calories=round(calories, 1),
        protein=round(protein, 1),
        carbs=round(carbs, 1),
        fat=round(fat, 1),
    )


def group_by_meal(entries: Iterable[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for entry in entries:
        grouped.setdefault(entry["meal_type"], []).append(entry)
    return grouped


def get_summary(conn: sqlite3.Connection, *, user_id: str, start: date, end: date) -> Dict[str, Any]:
    """Per-day totals for [start, end]; days without entries are included with zeros."""
    entries = list_range(conn, user_id=user_id, start=start.isoformat(), end=end.isoformat())

    per_day: Dict[str, List[Dict[str, Any]]] = {}
    for entry in entries:
        per_day.setdefault(entry["log_date"], []).append(entry)

    days: List[FoodDailySummary] = []
    cursor = start
    while cursor <= end:
        key = cursor.isoformat()
        day_entries = per_day.get(key, [])
        days.append(FoodDailySummary(date=key, totals=compute_totals(day_entries), entry_count=len(day_entries)))
        cursor += timedelta(days=1)

    return {
        "start": start.isoformat(),
        "end": end.isoformat(),
        "totals": compute_totals(entries),
        "days": days,
    }
