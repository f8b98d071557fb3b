from __future__ import annotations

import logging
import os
import sys
from typing import Any

from config.settings import get_settings


_INITIALIZED: bool = False

LOG_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s %(message)s "
    "operation=%(operation)s status=%(status)s duration_ms=%(duration_ms)s "
    "domain=%(domain)s error=%(error)s run_id=%(run_id)s"
)


class RunIdFilter(logging.Filter):
    """Stamp records with the RUN_ID exported by the CLI unless a caller passed one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "run_id"):
            run_id = os.getenv("RUN_ID")
            if run_id:
                record.run_id = run_id
        return True


class SafeExtraFormatter(logging.Formatter):
    """Lookup log lines always carry the backend-call fields, "-" when a call site omits them."""

    DEFAULTS: dict[str, Any] = {
        "operation": "-",
        "status": "-",
        "duration_ms": "-",
        "domain": "-",
        "error": "-",
        "run_id": "-",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        for key, value in self.DEFAULTS.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return super().format(record)


def build_handler(level: int) -> logging.Handler:
    # stderr keeps command output on stdout clean for piping
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(RunIdFilter())
    handler.setFormatter(SafeExtraFormatter(fmt=LOG_FORMAT))
    return handler


def init_logging(level: str | None = None) -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return

    settings = get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    if not root_logger.handlers:
        root_logger.addHandler(build_handler(log_level))

    _INITIALIZED = True
