# -*- coding: utf-8 -*-
"""Chat — Pydantic models."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..assistant.models import LoggedFood

FOOD_LOG_UPDATED = "food-log-updated"


class ChatMessage(BaseModel):
    id: Optional[str] = None
    message: str
    response: Optional[str] = None
    is_user: bool
    created_at: str
    # False when the row could not be written; the caller still shows it locally.
    persisted: bool = True


class ChatHistoryResponse(BaseModel):
    count: int
    messages: List[ChatMessage]


class ChatSendRequest(BaseModel):
    message: str = Field(..., max_length=10_000)
    timestamp: Optional[str] = Field(None, description="User's local submission time, ISO-8601")


class ChatSendResponse(BaseModel):
    status: Literal["ok", "error"]
    messages: List[ChatMessage]
    food_data: Optional[LoggedFood] = None
    events: List[str] = Field(default_factory=list)
