# -*- coding: utf-8 -*-
"""Food logs — API endpoints."""

from __future__ import annotations

import sqlite3
from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query

from ..app_db import get_db
from ..auth.security import get_current_user
from ..profiles.storage import get_goals
from ..timeutil import parse_day
from .models import (
    FoodLogCreateRequest,
    FoodLogDayResponse,
    FoodLogEntry,
    FoodLogListResponse,
    FoodLogUpdateRequest,
    FoodSummaryResponse,
    GoalProgress,
    TodayResponse,
)
from .storage import (
    compute_totals,
    delete_food_log,
    get_summary,
    group_by_meal,
    insert_food_log,
    list_day,
    list_recent,
    update_food_log,
)

router = APIRouter(prefix="/api/food-logs", tags=["Food logs"])

MAX_SUMMARY_DAYS = 366


def _day_or_400(value: str | None, *, default: date, name: str) -> date:
    if value is None:
        return default
    parsed = parse_day(value)
    if parsed is None:
        raise HTTPException(status_code=400, detail=f"Invalid {name}: expected YYYY-MM-DD")
    return parsed


@router.get("", response_model=FoodLogDayResponse, summary="Entries of a day, grouped by meal type")
def list_entries_for_day(
    day: str | None = Query(default=None, alias="date", description="YYYY-MM-DD (default: today)"),
    user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
):
    log_date = _day_or_400(day, default=date.today(), name="date").isoformat()
    rows = list_day(conn, user_id=user["id"], log_date=log_date)
    meals = {meal: [FoodLogEntry.model_validate(r) for r in items] for meal, items in group_by_meal(rows).items()}
    return FoodLogDayResponse(date=log_date, count=len(rows), meals=meals, totals=compute_totals(rows))


@router.get("/recent", response_model=FoodLogListResponse, summary="Most recently logged foods")
def recent_entries(
    limit: int = Query(default=5, ge=1, le=50),
    user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
):
    rows = list_recent(conn, user_id=user["id"], limit=limit)
    return FoodLogListResponse(count=len(rows), entries=[FoodLogEntry.model_validate(r) for r in rows])


@router.get("/summary", response_model=FoodSummaryResponse, summary="Daily totals over a date range")
def summary(
    start: str | None = Query(default=None, description="YYYY-MM-DD (default: 6 days before end)"),
    end: str | None = Query(default=None, description="YYYY-MM-DD (default: today)"),
    user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
):
    end_day = _day_or_400(end, default=date.today(), name="end")
    start_day = _day_or_400(start, default=end_day - timedelta(days=6), name="start")
    if start_day > end_day:
        raise HTTPException(status_code=400, detail="start must not be after end")
    if (end_day - start_day).days >= MAX_SUMMARY_DAYS:
        raise HTTPException(status_code=400, detail=f"Range too large (max {MAX_SUMMARY_DAYS} days)")
    data = get_summary(conn, user_id=user["id"], start=start_day, end=end_day)
    return FoodSummaryResponse(**data)


@router.get("/today", response_model=TodayResponse, summary="Today's intake against daily goals")
def today(user: dict = Depends(get_current_user), conn: sqlite3.Connection = Depends(get_db)):
    log_date = date.today().isoformat()
    totals = compute_totals(list_day(conn, user_id=user["id"], log_date=log_date))
    goals = get_goals(conn, user["id"])

    def progress(consumed: float, goal: float) -> GoalProgress:
        return GoalProgress(consumed=consumed, goal=goal, remaining=round(max(0.0, goal - consumed), 1))

    return TodayResponse(
        date=log_date,
        calories=progress(totals.calories, goals["calorie_goal"]),
        protein=progress(totals.protein, goals["protein_goal"]),
        carbs=progress(totals.carbs, goals["carbs_goal"]),
        fat=progress(totals.fat, goals["fat_goal"]),
    )


@router.post("", response_model=FoodLogEntry, summary="Log a food entry manually")
def create_entry(
    request: FoodLogCreateRequest,
    user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
):
    log_date = _day_or_400(request.log_date, default=date.today(), name="log_date").isoformat()
    row = insert_food_log(
        conn,
        user_id=user["id"],
        food_name=request.food_name,
        brand=request.brand,
        calories=request.calories,
        protein=request.protein,
        carbs=request.carbs,
        fat=request.fat,
        meal_type=request.meal_type.value,
        serving_qty=request.serving_qty,
        serving_size=request.serving_size,
        log_date=log_date,
    )
    return FoodLogEntry.model_validate(row)


@router.patch("/{entry_id}", response_model=FoodLogEntry, summary="Edit a food entry")
def edit_entry(
    entry_id: str,
    request: FoodLogUpdateRequest,
    user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
):
    # Only brand is nullable; an explicit null elsewhere means "leave unchanged".
    changes = {
        k: v
        for k, v in request.model_dump(mode="json", exclude_unset=True).items()
        if v is not None or k == "brand"
    }
    row = update_food_log(conn, user_id=user["id"], entry_id=entry_id, changes=changes)
    if not row:
        raise HTTPException(status_code=404, detail="Food log not found")
    return FoodLogEntry.model_validate(row)


@router.delete("/{entry_id}", summary="Delete a food entry")
def remove_entry(entry_id: str, user: dict = Depends(get_current_user), conn: sqlite3.Connection = Depends(get_db)):
    if not delete_food_log(conn, user_id=user["id"], entry_id=entry_id):
        raise HTTPException(status_code=404, detail="Food log not found")
    return {"status": "ok"}
