# -*- coding: utf-8 -*-
"""Chat — API endpoints (history, send message through the classification relay)."""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query

from ..app_db import get_db
from ..assistant.llm import ChatCompletionClient, get_llm_client
from ..assistant.relay import run_relay
from ..auth.security import get_current_user
from ..errors import RelayError
from ..timeutil import utc_now_iso
from .models import FOOD_LOG_UPDATED, ChatHistoryResponse, ChatMessage, ChatSendRequest, ChatSendResponse
from .storage import append_message, list_messages, set_response

router = APIRouter(prefix="/api/chat", tags=["Chat"])
logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I'm having trouble processing your request right now. Please try again later."


def _message(row: Dict[str, Any], *, persisted: bool = True) -> ChatMessage:
    return ChatMessage(
        id=row.get("id"),
        message=row["message"],
        response=row.get("response"),
        is_user=bool(row["is_user"]),
        created_at=row["created_at"],
        persisted=persisted,
    )


@router.get("/messages", response_model=ChatHistoryResponse, summary="My chat history (oldest first)")
def chat_history(
    limit: int = Query(default=50, ge=1, le=500),
    user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
):
    rows = list_messages(conn, user_id=user["id"], limit=limit)
    return ChatHistoryResponse(count=len(rows), messages=[_message(r) for r in rows])


@router.post("/messages", response_model=ChatSendResponse, summary="Send a message to the nutrition assistant")
def send_chat_message(
    request: ChatSendRequest,
    user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
    llm: ChatCompletionClient = Depends(get_llm_client),
):
    content = request.message.strip()
    if not content:
        raise HTTPException(status_code=400, detail="Message is required")

    # Persist user message first.
    try:
        user_row = append_message(conn, user_id=user["id"], message=content, is_user=True)
        conn.commit()
    except sqlite3.Error as exc:
        logger.error("failed to store chat message: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to send message") from exc

    status = "ok"
    food_data = None
    try:
        result = run_relay(
            conn=conn,
            llm=llm,
            user_id=user["id"],
            message=content,
            timestamp=request.timestamp,
        )
        conn.commit()
        reply = result.response
        food_data = result.food_data
    except RelayError as exc:
        conn.rollback()
        logger.warning("nutrition assistant failed, using fallback reply: %s", exc)
        reply = FALLBACK_REPLY
        status = "error"

    user_row["response"] = reply
    try:
        set_response(conn, user_id=user["id"], message_id=user_row["id"], response=reply)
        assistant = _message(append_message(conn, user_id=user["id"], message=reply, is_user=False))
        conn.commit()
    except sqlite3.Error as exc:
        # The reply is still returned so the conversation view stays consistent.
        conn.rollback()
        logger.error("failed to store assistant reply: %s", exc)
        assistant = ChatMessage(message=reply, is_user=False, created_at=utc_now_iso(), persisted=False)
        status = "error"

    return ChatSendResponse(
        status=status,
        messages=[_message(user_row), assistant],
        food_data=food_data,
        events=[FOOD_LOG_UPDATED] if food_data else [],
    )
