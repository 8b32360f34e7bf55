# -*- coding: utf-8 -*-
"""App database (users/profiles/food logs/chat) — SQLite helpers."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import settings


def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def create_schema(conn: sqlite3.Connection) -> None:
    cur = conn.cursor()
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT NOT NULL UNIQUE,
            password_hash TEXT NOT NULL,
            created_at TEXT NOT NULL
        );
        """
    )
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS profiles (
            id TEXT PRIMARY KEY,
            first_name TEXT,
            last_name TEXT,
            age INTEGER,
            gender TEXT,
            weight REAL,
            height REAL,
            weight_unit TEXT NOT NULL DEFAULT 'metric',
            height_unit TEXT NOT NULL DEFAULT 'metric',
            activity_level TEXT NOT NULL DEFAULT 'moderately_active',
            goal TEXT NOT NULL DEFAULT 'maintain_weight',
            calorie_goal REAL NOT NULL DEFAULT 2000,
            protein_goal REAL NOT NULL DEFAULT 150,
            carbs_goal REAL NOT NULL DEFAULT 200,
            fat_goal REAL NOT NULL DEFAULT 65,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        """
    )
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS food_logs (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            food_name TEXT NOT NULL,
            brand TEXT,
            calories REAL NOT NULL CHECK (calories >= 0),
            protein REAL NOT NULL CHECK (protein >= 0),
            carbs REAL NOT NULL CHECK (carbs >= 0),
            fat REAL NOT NULL CHECK (fat >= 0),
            meal_type TEXT NOT NULL,
            serving_qty REAL NOT NULL DEFAULT 1,
            serving_size TEXT NOT NULL DEFAULT 'serving',
            log_date TEXT NOT NULL,
            created_at TEXT NOT NULL
        );
        """
    )
    cur.execute(
        "CREATE INDEX IF NOT EXISTS idx_food_logs_user_date ON food_logs(user_id, log_date, created_at ASC);"
    )
    cur.execute(
        "CREATE INDEX IF NOT EXISTS idx_food_logs_user_created ON food_logs(user_id, created_at DESC);"
    )
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS chat_messages (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            message TEXT NOT NULL,
            response TEXT,
            is_user INTEGER NOT NULL,
            created_at TEXT NOT NULL
        );
        """
    )
    cur.execute(
        "CREATE INDEX IF NOT EXISTS idx_chat_messages_user_created ON chat_messages(user_id, created_at ASC);"
    )
    conn.commit()


def init_app_db(db_path: Path) -> None:
    conn = connect(db_path)
    try:
        create_schema(conn)
    finally:
        conn.close()


@contextmanager
def db_conn(db_path: Path) -> Iterator[sqlite3.Connection]:
    conn = connect(db_path)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def get_db() -> Iterator[sqlite3.Connection]:
    """FastAPI dependency: one connection per request."""
    with db_conn(settings.app_db_path) as conn:
        yield conn
