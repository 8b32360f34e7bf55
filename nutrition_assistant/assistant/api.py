# -*- coding: utf-8 -*-
"""Classification relay — API endpoint.

Contract: `POST {message, userId, timestamp?}` -> `200 {response, foodData}`;
failures -> `400`/`403`/`500` with `{error}`.
"""

from __future__ import annotations

import json
import sqlite3

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SchemaError
from starlette.concurrency import run_in_threadpool

from ..app_db import get_db
from ..auth.security import get_current_user
from ..errors import RelayError
from .llm import ChatCompletionClient, get_llm_client
from .models import RelayRequest
from .relay import run_relay

router = APIRouter(prefix="/api", tags=["Assistant"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/nutrition-assistant", summary="Classify a chat message and log food when recognized")
async def nutrition_assistant(
    request: Request,
    user: dict = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
    llm: ChatCompletionClient = Depends(get_llm_client),
):
    try:
        body = await request.json()
        payload = RelayRequest.model_validate(body)
    except (json.JSONDecodeError, SchemaError) as exc:
        return _error(400, f"Invalid request body: {exc}")

    if payload.user_id and payload.user_id != user["id"]:
        return _error(403, "userId does not match the authenticated user")

    try:
        result = await run_in_threadpool(
            run_relay,
            conn=conn,
            llm=llm,
            user_id=user["id"],
            message=payload.message,
            timestamp=payload.timestamp,
        )
    except RelayError as exc:
        return _error(exc.status_code, exc.message)
    return JSONResponse(content=result.to_payload())
