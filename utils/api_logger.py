from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


def _ensure_parent_dir(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass


def log_call(
    *,
    caller: str,
    endpoint: str,
    operation: str,
    duration_ms: Optional[int] = None,
    status: str = "ok",
    http_status: Optional[int] = None,
    error: Optional[str] = None,
    balance: Optional[int] = None,
    extras: Optional[Dict[str, Any]] = None,
) -> None:
    """Append a single JSON line describing a backend call if tracing is enabled.

    Controlled by API_TRACE / API_LOG_PATH in config/settings.py. Credentials are
    never part of the payload.
    """
    from config.settings import get_settings
    # Pick up env changes made after first use (tests monkeypatch env between calls)
    get_settings.cache_clear()
    settings = get_settings()
    if not settings.api_trace:
        return

    log_path = Path(settings.api_log_path)
    _ensure_parent_dir(log_path)

    payload: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "caller": caller,
        "endpoint": endpoint,
        "operation": operation,
        "duration_ms": duration_ms,
        "status": status,
        "http_status": http_status,
        "error": error,
        "balance": balance,
    }
    run_id = os.getenv("RUN_ID")
    if run_id:
        payload["run_id"] = run_id

    if extras:
        payload["extras"] = extras

    try:
        with log_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")
    except OSError:
        # Never break a lookup on trace failures
        return
