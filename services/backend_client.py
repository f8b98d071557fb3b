"""
HTTP client for the email finder backend and the free company autocomplete.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from config.settings import Settings, get_settings
from models.backend_responses import (
    CompanySearchResult,
    CreditsResponse,
    EnrichPersonResponse,
    SearchPersonResponse,
)
from services.errors import BackendError, ConfigurationError, InsufficientCreditsError
from utils.api_logger import log_call

logger = logging.getLogger(__name__)

INSUFFICIENT_CREDITS = "INSUFFICIENT_CREDITS"
MIN_AUTOCOMPLETE_QUERY = 2


def _is_insufficient_credits(data: Any) -> bool:
    return isinstance(data, dict) and data.get("error_code") == INSUFFICIENT_CREDITS


class BackendClient:
    """Issues credit-billed lookups and normalizes their error shapes.

    The server owns the balance: no local pre-check is made before a paid
    call, the client only reacts to its 402 answer.
    """

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()

    def _api_key(self) -> str:
        key = (self.settings.api_key or "").strip()
        if not key:
            raise ConfigurationError("API key not configured")
        return key

    def _post(self, function: str, body: Dict[str, Any], fallback_message: str) -> Dict[str, Any]:
        api_key = self._api_key()
        url = self.settings.function_url(function)
        t0 = time.time()
        try:
            response = self.session.post(
                url,
                json=body,
                headers={"X-API-Key": api_key, "Content-Type": "application/json"},
                timeout=self.settings.http_timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {function} failed: {e}",
                extra={"operation": function, "status": "error", "error": type(e).__name__},
            )
            log_call(caller="backend_client", endpoint=function, operation="POST", status="error", error=str(e))
            raise BackendError(fallback_message) from e
        duration_ms = int((time.time() - t0) * 1000)

        try:
            data = response.json()
        except ValueError:
            data = None

        balance = data.get("balance") if isinstance(data, dict) else None
        if response.status_code == 402 and _is_insufficient_credits(data):
            logger.warning(
                "Insufficient credits",
                extra={"operation": function, "status": "402", "duration_ms": duration_ms},
            )
            log_call(caller="backend_client", endpoint=function, operation="POST", duration_ms=duration_ms,
                     status="error", http_status=402, error=INSUFFICIENT_CREDITS, balance=balance)
            raise InsufficientCreditsError(balance)

        if not response.ok or not isinstance(data, dict) or data.get("error"):
            message = (data.get("message") if isinstance(data, dict) else None) or fallback_message
            logger.error(
                f"{function} returned an error: {message}",
                extra={"operation": function, "status": response.status_code, "duration_ms": duration_ms},
            )
            log_call(caller="backend_client", endpoint=function, operation="POST", duration_ms=duration_ms,
                     status="error", http_status=response.status_code, error=message, balance=balance)
            raise BackendError(message, status_code=response.status_code)

        logger.debug(
            f"{function} ok",
            extra={"operation": function, "status": response.status_code, "duration_ms": duration_ms},
        )
        log_call(caller="backend_client", endpoint=function, operation="POST", duration_ms=duration_ms,
                 status="ok", http_status=response.status_code, balance=balance)
        return data

    def get_credits(self) -> CreditsResponse:
        data = self._post("get-credits", {}, "Failed to fetch credits")
        return CreditsResponse.model_validate(data)

    def search_person(self, domain: str, page: int = 1) -> SearchPersonResponse:
        """Fetch one page of people working at ``domain`` (costs credits)."""
        body = {
            "page": page,
            "filters": {"company": {"websites": {"include": [domain]}}},
        }
        data = self._post("spend-and-search-person", body, "Failed to search people")
        try:
            return SearchPersonResponse.model_validate(data)
        except ValidationError as e:
            raise BackendError("Failed to search people") from e

    def enrich_person(self, first_name: str, last_name: str, domain: str) -> EnrichPersonResponse:
        """Reveal the email and profile of one person (costs credits)."""
        body = {
            "first_name": first_name,
            "last_name": last_name,
            "company_website": domain,
        }
        data = self._post("spend-and-enrich-person", body, "Failed to enrich person")
        try:
            return EnrichPersonResponse.model_validate(data)
        except ValidationError as e:
            raise BackendError("Failed to enrich person") from e

    def search_company_by_name(self, query: str) -> List[CompanySearchResult]:
        """Free autocomplete; any failure degrades to an empty list."""
        text = (query or "").strip()
        if len(text) < MIN_AUTOCOMPLETE_QUERY:
            return []
        try:
            response = self.session.get(
                self.settings.autocomplete_url,
                params={"query": text},
                timeout=self.settings.http_timeout_seconds,
            )
            if response.status_code != 200:
                logger.warning(f"Company autocomplete returned status {response.status_code}")
                return []
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f"Company autocomplete failed: {e}")
            return []

        if not isinstance(data, dict) or data.get("status") != "success" or not isinstance(data.get("data"), list):
            return []

        results: List[CompanySearchResult] = []
        for item in data["data"]:
            try:
                results.append(CompanySearchResult.model_validate(item))
            except ValidationError:
                logger.debug(f"Skipping malformed autocomplete item: {item!r}")
        return results
