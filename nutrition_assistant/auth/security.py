# -*- coding: utf-8 -*-
"""Auth — password hashing, session tokens and the current-user dependency.

Tokens are compact HS256 JWTs signed with `NUTRITION_JWT_SECRET`; they carry
only the user id and the expiry. The user row is re-read on every request, so
a deleted account stops authenticating immediately.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import os
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

from fastapi import Depends, HTTPException, Request
from pydantic import ValidationError as SchemaError

from ..app_db import db_conn
from ..config import settings
from ..timeutil import utc_now
from .models import TokenClaims
from .storage import get_user_by_id

TOKEN_COOKIE_NAME = "nutrition_token"

_HASH_SCHEME = "pbkdf2_sha256"
_HASH_ITERATIONS = 200_000


def _b64e(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64d(data: str) -> bytes:
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def _pbkdf2(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


def hash_password(password: str) -> str:
    """`pbkdf2_sha256$<iterations>$<salt>$<digest>`, base64url without padding."""
    salt = os.urandom(16)
    digest = _pbkdf2(password, salt, _HASH_ITERATIONS)
    return "$".join((_HASH_SCHEME, str(_HASH_ITERATIONS), _b64e(salt), _b64e(digest)))


def verify_password(password: str, password_hash: str) -> bool:
    parts = password_hash.split("$")
    if len(parts) != 4 or parts[0] != _HASH_SCHEME:
        return False
    try:
        iterations = int(parts[1])
        salt, expected = _b64d(parts[2]), _b64d(parts[3])
    except ValueError:
        return False
    return hmac.compare_digest(_pbkdf2(password, salt, iterations), expected)


# Only one algorithm is ever issued, so the header segment is a constant.
_TOKEN_HEADER = _b64e(b'{"alg":"HS256"}')


def _sign(signing_input: str) -> str:
    mac = hmac.new(settings.jwt_secret.encode("utf-8"), signing_input.encode("utf-8"), hashlib.sha256)
    return _b64e(mac.digest())


def issue_token(user_id: str) -> Tuple[str, str]:
    """Return (token, expiry as ISO-8601)."""
    expires = utc_now() + timedelta(days=int(settings.token_ttl_days))
    claims = TokenClaims(sub=user_id, exp=int(expires.timestamp()))
    body = _b64e(json.dumps(claims.model_dump(), separators=(",", ":")).encode("utf-8"))
    signing_input = f"{_TOKEN_HEADER}.{body}"
    return f"{signing_input}.{_sign(signing_input)}", expires.isoformat().replace("+00:00", "Z")


def read_token(token: str) -> TokenClaims:
    """Verify signature and expiry; anything wrong is a 401."""
    header, _, rest = token.partition(".")
    body, _, signature = rest.partition(".")
    expected = _sign(f"{header}.{body}").encode("ascii")
    if header != _TOKEN_HEADER or not body or not hmac.compare_digest(expected, signature.encode("utf-8")):
        raise HTTPException(status_code=401, detail="Invalid token")
    try:
        claims = TokenClaims.model_validate_json(_b64d(body))
    except (ValueError, SchemaError) as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc
    if claims.exp < int(utc_now().timestamp()):
        raise HTTPException(status_code=401, detail="Token expired")
    return claims


def token_from_request(request: Request) -> Optional[str]:
    """Bearer header first, then the session cookie."""
    scheme, _, value = (request.headers.get("authorization") or "").partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return request.cookies.get(TOKEN_COOKIE_NAME) or None


def authenticate_request(request: Request) -> Dict[str, Any]:
    cached = getattr(request.state, "user", None)
    if cached:
        return cached

    token = token_from_request(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    claims = read_token(token)

    with db_conn(settings.app_db_path) as conn:
        user = get_user_by_id(conn, claims.sub)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")

    request.state.user = user
    return user


def get_current_user(user: Dict[str, Any] = Depends(authenticate_request)) -> Dict[str, Any]:
    return user
