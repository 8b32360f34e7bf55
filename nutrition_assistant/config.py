from __future__ import annotations

import os
from pathlib import Path
from typing import List


def _env_flag(name: str, default: bool) -> bool:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    return raw in {"1", "true", "True", "yes", "on"}


class Settings:
    """Centralized configuration for the nutrition assistant backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("NUTRITION_DATA_ROOT") or data_root_default
        ).expanduser()
        self.app_db_path: Path = Path(
            os.environ.get("NUTRITION_DB_PATH") or (self.data_root / "nutrition.db")
        ).expanduser()
        # In production you MUST set NUTRITION_JWT_SECRET.
        self.jwt_secret: str = os.environ.get("NUTRITION_JWT_SECRET") or "dev-secret-change-me"
        self.token_ttl_days: int = int(os.environ.get("NUTRITION_TOKEN_TTL_DAYS") or "7")
        self.cookie_secure: bool = _env_flag("NUTRITION_COOKIE_SECURE", False)
        self.log_level: str = (os.environ.get("NUTRITION_LOG_LEVEL") or "INFO").upper()

        # ---- Text-generation provider (OpenAI-compatible) ----
        self.llm_api_key: str | None = os.environ.get("LLM_API_KEY") or None
        self.llm_base_url: str = os.environ.get("LLM_BASE_URL", "https://api.openai.com/v1")
        self.llm_model: str = os.environ.get("LLM_MODEL", "gpt-4o-mini")
        self.llm_timeout: float = float(os.environ.get("LLM_TIMEOUT", "30"))
        self.llm_max_tokens: int = int(os.environ.get("LLM_MAX_TOKENS", "800"))
        self.llm_temperature: float = float(os.environ.get("LLM_TEMPERATURE", "0.2"))
        self.llm_json_mode: bool = _env_flag("LLM_JSON_MODE", True)

        cors = os.environ.get("NUTRITION_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
