# -*- coding: utf-8 -*-
"""OpenAI-compatible chat-completions client used by the relay."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..config import Settings, settings
from ..errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


def _completions_url(base_url: str) -> str:
    base = base_url.rstrip("/")
    if base.endswith("/chat/completions"):
        return base
    return f"{base}/chat/completions"


def _concat_text_parts(parts: object) -> str:
    if not isinstance(parts, list):
        return ""
    out: list[str] = []
    for part in parts:
        if not isinstance(part, dict):
            continue
        ptype = part.get("type")
        if ptype and ptype not in {"text", "output_text"}:
            continue
        val = part.get("text")
        if isinstance(val, str) and val:
            out.append(val)
    return "".join(out)


def extract_completion_text(data: object) -> str:
    """First choice's message content; list-of-parts content is concatenated."""
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    choice = choices[0]
    if not isinstance(choice, dict):
        return ""
    message = choice.get("message")
    if isinstance(message, dict):
        content = message.get("content")
        if isinstance(content, str):
            return content
        return _concat_text_parts(content)
    text = choice.get("text")
    return text if isinstance(text, str) else ""


def extract_error_message(resp: httpx.Response) -> str:
    """Human-readable upstream error: `{"error": {"message": ...}}` first, then body text."""
    message: Optional[str] = None
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        err = payload.get("error")
        if isinstance(err, dict) and isinstance(err.get("message"), str):
            message = err["message"]
        elif isinstance(err, str):
            message = err
        else:
            for key in ("message", "detail"):
                if isinstance(payload.get(key), str):
                    message = payload[key]
                    break
    if not message:
        message = (resp.text or "").replace("\n", " ").strip()[:200] or resp.reason_phrase
    return f"Text generation API error ({resp.status_code}): {message}"


class ChatCompletionClient:
    """One request per call; no retries. Construct per request and pass it in."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str],
        model: str,
        timeout: float = 30.0,
        temperature: float = 0.2,
        max_tokens: int = 800,
        json_mode: bool = True,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.json_mode = json_mode
        self.transport = transport

    @classmethod
    def from_settings(cls, cfg: Settings = settings) -> "ChatCompletionClient":
        return cls(
            base_url=cfg.llm_base_url,
            api_key=cfg.llm_api_key,
            model=cfg.llm_model,
            timeout=cfg.llm_timeout,
            temperature=cfg.llm_temperature,
            max_tokens=cfg.llm_max_tokens,
            json_mode=cfg.llm_json_mode,
        )

    def complete(self, *, system: str, user: str) -> str:
        if not self.api_key:
            raise ConfigurationError("LLM_API_KEY not set")

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if self.json_mode:
            payload["response_format"] = {"type": "json_object"}

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        url = _completions_url(self.base_url)
        try:
            with httpx.Client(timeout=self.timeout, follow_redirects=True, transport=self.transport) as client:
                resp = client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            logger.error("text generation API unreachable: %s", exc)
            raise UpstreamError(f"Text generation API unreachable: {exc}") from exc

        if resp.status_code >= 400:
            message = extract_error_message(resp)
            logger.error("%s", message)
            raise UpstreamError(message)

        try:
            data = resp.json()
        except ValueError as exc:
            snippet = (resp.text or "").replace("\n", " ").strip()[:200]
            raise UpstreamError(f"Text generation API returned non-JSON response: {snippet}") from exc

        content = extract_completion_text(data)
        if not content.strip():
            raise UpstreamError("Text generation API returned an empty response")
        return content


def get_llm_client() -> ChatCompletionClient:
    """FastAPI dependency; tests override it with a fake."""
    return ChatCompletionClient.from_settings()
