# -*- coding: utf-8 -*-
"""Auth — API endpoints."""

from __future__ import annotations

import sqlite3

from fastapi import APIRouter, Depends, HTTPException, Response

from ..app_db import get_db
from ..config import settings
from .models import AuthResponse, LoginRequest, RegisterRequest, UserPublic
from .security import TOKEN_COOKIE_NAME, get_current_user, hash_password, issue_token, verify_password
from .storage import create_user, get_user_by_email

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _user_public(row: dict) -> UserPublic:
    return UserPublic(id=row["id"], email=row["email"], created_at=row["created_at"])


def _start_session(response: Response, user: dict) -> AuthResponse:
    """Issue a token, mirror it into the HTTP-only cookie, and describe it."""
    token, expires_at = issue_token(user["id"])
    response.set_cookie(
        TOKEN_COOKIE_NAME,
        token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=int(settings.token_ttl_days) * 86400,
        path="/",
    )
    return AuthResponse(user=_user_public(user), token=token, expires_at=expires_at)


@router.post("/register", response_model=AuthResponse, summary="Create an account and start a session")
def register(request: RegisterRequest, response: Response, conn: sqlite3.Connection = Depends(get_db)):
    if get_user_by_email(conn, request.email):
        raise HTTPException(status_code=400, detail="Email already registered")
    user = create_user(conn, email=request.email, password_hash=hash_password(request.password))
    return _start_session(response, user)


@router.post("/login", response_model=AuthResponse, summary="Start a session")
def login(request: LoginRequest, response: Response, conn: sqlite3.Connection = Depends(get_db)):
    user = get_user_by_email(conn, request.email)
    if not user or not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return _start_session(response, user)


@router.post("/logout", summary="End the cookie session")
def logout(response: Response):
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
    return {"status": "ok"}


@router.get("/me", response_model=UserPublic, summary="The signed-in user")
def me(user: dict = Depends(get_current_user)):
    return _user_public(user)
