# -*- coding: utf-8 -*-
"""Best-effort extraction of a JSON object from model output."""

from __future__ import annotations

import json
import re
from typing import Any, Dict


def _remove_trailing_commas(text: str) -> str:
    """Remove trailing commas before } or ] while preserving string literals."""
    out: list[str] = []
    in_str = False
    escaped = False
    i = 0
    while i < len(text):
        ch = text[i]
        if in_str:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == "\"":
                in_str = False
            i += 1
            continue

        if ch == "\"":
            in_str = True
            out.append(ch)
            i += 1
            continue

        if ch == ",":
            j = i + 1
            while j < len(text) and text[j] in " \t\r\n":
                j += 1
            if j < len(text) and text[j] in "}]":
                i += 1
                continue

        out.append(ch)
        i += 1
    return "".join(out)


def _strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    cleaned = re.sub(r"^```(?:json)?\s*", "", cleaned, flags=re.IGNORECASE)
    return re.sub(r"\s*```$", "", cleaned)


def iter_json_object_candidates(text: str) -> list[str]:
    """Balanced top-level {...} spans, in order of appearance.

    Models sometimes wrap JSON with prose or a code fence even in JSON mode.
    """
    cleaned = _strip_code_fence(text)

    candidates: list[str] = []
    in_str = False
    escaped = False
    depth = 0
    start_idx: int | None = None

    for i, ch in enumerate(cleaned):
        if in_str:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == "\"":
                in_str = False
            continue

        if ch == "\"":
            in_str = True
            continue

        if ch == "{":
            if depth == 0:
                start_idx = i
            depth += 1
            continue

        if ch == "}" and depth > 0:
            depth -= 1
            if depth == 0 and start_idx is not None:
                candidates.append(cleaned[start_idx : i + 1])
                start_idx = None

    return candidates


def _sanitize_json_like(text: str) -> str:
    # Curly quotes, trailing commas and non-finite floats are the usual offenders.
    cleaned = text.replace("“", "\"").replace("”", "\"")
    cleaned = _remove_trailing_commas(cleaned)
    cleaned = re.sub(r"\bNaN\b", "null", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"-?\bInfinity\b", "null", cleaned, flags=re.IGNORECASE)
    return cleaned


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} in model JSON")


def parse_model_json(content: str) -> Dict[str, Any]:
    """Return the first JSON object found in `content`; raise ValueError when there is none.

    NaN/Infinity literals fail the strict pass so the sanitized retry turns
    them into nulls, which the reply schema then rejects.
    """
    last_error: Exception | None = None
    for candidate in iter_json_object_candidates(content or ""):
        for attempt in (candidate, _sanitize_json_like(candidate)):
            try:
                parsed = json.loads(attempt, parse_constant=_reject_constant)
            except ValueError as exc:
                last_error = exc
                continue
            if isinstance(parsed, dict):
                return parsed
    if last_error is None:
        raise ValueError("Model output does not contain a JSON object")
    raise ValueError(f"Failed to parse model JSON: {last_error}") from last_error
