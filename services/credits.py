from __future__ import annotations

import logging
from typing import Any, Optional

from ports.backend import LookupBackendPort
from services.errors import BackendError, EmailFinderError

logger = logging.getLogger(__name__)


def fetch_credits(client: LookupBackendPort) -> int:
    """Return the current balance; raises ConfigurationError or BackendError."""
    response = client.get_credits()
    if response.balance is None:
        raise BackendError("Failed to fetch credits")
    return response.balance


def refresh_credits(client: LookupBackendPort) -> Optional[int]:
    """Best-effort balance fetch: None means "unknown", never an error."""
    try:
        return fetch_credits(client)
    except EmailFinderError as e:
        logger.debug(f"Credit refresh failed: {e}", extra={"operation": "get-credits", "status": "error"})
        return None


def balance_from_response(response: Any, fallback: Optional[int]) -> Optional[int]:
    """A balance carried by a lookup response wins over the last known one."""
    balance = getattr(response, "balance", None)
    if isinstance(balance, int) and not isinstance(balance, bool):
        return balance
    return fallback


def format_credits(balance: Optional[int]) -> str:
    if balance is None:
        return "Unknown"
    return f"{balance} credit{'' if balance == 1 else 's'}"
