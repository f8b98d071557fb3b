from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional

from models.enriched_data import EnrichedData
from models.history_entry import SearchHistoryEntry
from pipelines.guards import CancellationFlag, OneShotToken
from ports.backend import LookupBackendPort
from ports.presenter import PresenterPort
from services.credits import balance_from_response, refresh_credits
from services.enrichment_mapping import map_enrich_response_to_data
from services.errors import ConfigurationError, EmailFinderError, NoEmailFoundError
from services.history_storage import EmailSearchHistory

logger = logging.getLogger(__name__)


@dataclass
class LookupOutcome:
    status: Literal["success", "error"]
    data: Optional[EnrichedData] = None
    error: Optional[str] = None
    credits: Optional[int] = None
    history_entry: Optional[SearchHistoryEntry] = None


class EmailLookup:
    """Reveal one person's email, reconcile credits and record the attempt."""

    def __init__(
        self,
        backend: LookupBackendPort,
        history: EmailSearchHistory,
        presenter: PresenterPort,
        credits: Optional[int] = None,
    ):
        self.backend = backend
        self.history = history
        self.presenter = presenter
        self.credits = credits

    def run(
        self,
        first_name: str,
        last_name: str,
        domain: str,
        token: OneShotToken,
        cancel: Optional[CancellationFlag] = None,
    ) -> Optional[LookupOutcome]:
        """Returns None when the token was already used or the view went away.

        ConfigurationError propagates: nothing was attempted, so nothing is
        recorded and the caller has to ask for credentials.
        """
        if not token.claim():
            return None
        cancel = cancel or CancellationFlag()

        self.presenter.show_status("animated", "Searching...", f"Looking for {first_name} {last_name}")
        try:
            response = self.backend.enrich_person(first_name, last_name, domain)
            if cancel.cancelled:
                return None
            self.credits = balance_from_response(response, self.credits)
            data = map_enrich_response_to_data(response, domain)
            if data is None:
                raise NoEmailFoundError()
        except ConfigurationError:
            raise
        except EmailFinderError as e:
            if cancel.cancelled:
                return None
            return self._record_failure(first_name, last_name, domain, str(e), cancel)

        entry = self.history.add(
            first_name=first_name,
            last_name=last_name,
            domain=domain,
            status="success",
            email=data.person.email.email,
            enriched_data=data,
        )
        logger.info(
            "Email found",
            extra={"operation": "enrich-person", "status": "ok", "domain": domain},
        )
        self.presenter.show_status("success", "Found", data.person.email.email)
        return LookupOutcome(status="success", data=data, credits=self.credits, history_entry=entry)

    def _record_failure(
        self, first_name: str, last_name: str, domain: str, message: str, cancel: CancellationFlag
    ) -> LookupOutcome:
        logger.warning(
            f"Email lookup failed: {message}",
            extra={"operation": "enrich-person", "status": "error", "domain": domain},
        )
        entry = self.history.add(
            first_name=first_name,
            last_name=last_name,
            domain=domain,
            status="error",
            error=message,
        )
        self.presenter.show_status("failure", "Failed", message)
        balance = refresh_credits(self.backend)
        if balance is not None and not cancel.cancelled:
            self.credits = balance
        return LookupOutcome(status="error", error=message, credits=self.credits, history_entry=entry)
