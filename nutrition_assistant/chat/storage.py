# -*- coding: utf-8 -*-
"""Chat — DB storage helpers."""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, List
from uuid import uuid4

from ..timeutil import utc_now_iso


def _row(raw: sqlite3.Row) -> Dict[str, Any]:
    row = dict(raw)
    row["is_user"] = bool(row["is_user"])
    return row


def append_message(conn: sqlite3.Connection, *, user_id: str, message: str, is_user: bool) -> Dict[str, Any]:
    msg_id = str(uuid4())
    now = utc_now_iso()
    conn.execute(
        "INSERT INTO chat_messages (id, user_id, message, response, is_user, created_at) VALUES (?, ?, ?, NULL, ?, ?)",
        (msg_id, user_id, message, int(is_user), now),
    )
    return {"id": msg_id, "user_id": user_id, "message": message, "response": None, "is_user": is_user, "created_at": now}


def set_response(conn: sqlite3.Connection, *, user_id: str, message_id: str, response: str) -> None:
    conn.execute(
        "UPDATE chat_messages SET response = ? WHERE id = ? AND user_id = ?",
        (response, message_id, user_id),
    )


def list_messages(conn: sqlite3.Connection, *, user_id: str, limit: int = 50) -> List[Dict[str, Any]]:
    """The most recent `limit` messages, returned oldest first."""
    rows = conn.execute(
        """
        SELECT * FROM (
            SELECT rowid AS seq, * FROM chat_messages WHERE user_id = ?
            ORDER BY created_at DESC, seq DESC LIMIT ?
        ) ORDER BY created_at ASC, seq ASC
        """,
        (user_id, int(limit)),
    ).fetchall()
    out = []
    for r in rows:
        row = _row(r)
        row.pop("seq", None)
        out.append(row)
    return out
