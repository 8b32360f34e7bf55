# -*- coding: utf-8 -*-
"""Auth — DB storage helpers.

Emails arrive already normalized (stripped, lowercased) by the request models.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, Optional
from uuid import uuid4

from ..timeutil import utc_now_iso


def _one(conn: sqlite3.Connection, column: str, value: str) -> Optional[Dict[str, Any]]:
    row = conn.execute(f"SELECT id, email, password_hash, created_at FROM users WHERE {column} = ?", (value,)).fetchone()
    return dict(row) if row else None


def get_user_by_email(conn: sqlite3.Connection, email: str) -> Optional[Dict[str, Any]]:
    return _one(conn, "email", email)


def get_user_by_id(conn: sqlite3.Connection, user_id: str) -> Optional[Dict[str, Any]]:
    return _one(conn, "id", user_id)


def create_user(conn: sqlite3.Connection, *, email: str, password_hash: str) -> Dict[str, Any]:
    user = {"id": str(uuid4()), "email": email, "password_hash": password_hash, "created_at": utc_now_iso()}
    conn.execute(
        "INSERT INTO users (id, email, password_hash, created_at) VALUES (:id, :email, :password_hash, :created_at)",
        user,
    )
    return user
