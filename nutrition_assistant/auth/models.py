# -*- coding: utf-8 -*-
"""Auth — Pydantic models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class _Credentials(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email", mode="after")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        # Accounts are keyed by the lowercased address.
        value = value.strip().lower()
        local, _, domain = value.partition("@")
        if not local or not domain:
            raise ValueError("email must look like name@domain")
        return value


class RegisterRequest(_Credentials):
    password: str = Field(..., min_length=8, max_length=128)


class LoginRequest(_Credentials):
    pass


class TokenClaims(BaseModel):
    """Payload carried by a session token."""

    sub: str = Field(..., min_length=1)
    exp: int


class UserPublic(BaseModel):
    id: str
    email: str
    created_at: str


class AuthResponse(BaseModel):
    user: UserPublic
    token: str
    token_type: Literal["bearer"] = "bearer"
    expires_at: str
