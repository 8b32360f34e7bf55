# -*- coding: utf-8 -*-
"""Profiles — API endpoints."""

from __future__ import annotations

import sqlite3

from fastapi import APIRouter, Depends, HTTPException

from ..app_db import get_db
from ..auth.security import get_current_user
from .goals import suggest_goals
from .models import BodyMetrics, GoalSuggestion, Profile, ProfileUpsertRequest
from .storage import get_profile, upsert_profile

router = APIRouter(prefix="/api/profile", tags=["Profile"])


@router.get("", response_model=Profile, summary="Get my profile")
def read_profile(user: dict = Depends(get_current_user), conn: sqlite3.Connection = Depends(get_db)):
    row = get_profile(conn, user["id"])
    if not row:
        raise HTTPException(status_code=404, detail="Profile not found")
    return Profile.model_validate(row)


@router.put("", response_model=Profile, summary="Create or update my profile")
def save_profile(
    request: ProfileUpsertRequest,
    user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
):
    row = upsert_profile(conn, user["id"], request)
    return Profile.model_validate(row)


@router.post("/goals", response_model=GoalSuggestion, summary="Suggest daily goals (Mifflin-St Jeor)")
def suggest_profile_goals(request: BodyMetrics, user: dict = Depends(get_current_user)):  # noqa: ARG001
    return suggest_goals(request)
