from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    backend_url: str
    autocomplete_url: str

    http_timeout_seconds: int

    # Local history store
    db_path: str
    history_max_entries: int

    log_level: str
    run_env: str

    # Logging/tracing
    api_trace: bool = False
    api_log_path: str = "logs/api_calls.jsonl"

    def function_url(self, name: str) -> str:
        return f"{self.backend_url.rstrip('/')}/{name}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    api_key = (os.getenv("EMAIL_FINDER_API_KEY") or "").strip() or None
    return Settings(
        api_key=api_key,
        backend_url=os.getenv("EMAIL_FINDER_BACKEND_URL", "http://localhost:54321/functions/v1"),
        autocomplete_url=os.getenv("COMPANY_AUTOCOMPLETE_URL", "https://api.clearout.io/public/companies/autocomplete"),
        http_timeout_seconds=int(os.getenv("HTTP_TIMEOUT_SECONDS", "20")),
        db_path=os.getenv("DB_PATH", "email_finder.db"),
        history_max_entries=int(os.getenv("HISTORY_MAX_ENTRIES", "100")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        run_env=os.getenv("RUN_ENV", "local"),
        api_trace=_as_bool(os.getenv("API_TRACE", "false")),
        api_log_path=os.getenv("API_LOG_PATH", "logs/api_calls.jsonl"),
    )
