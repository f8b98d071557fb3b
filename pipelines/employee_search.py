"""
Company roster search: page accumulation, dedup and department grouping.

One session backs one employee list view. It owns the accumulated employees
and the pagination counters, never has more than one request in flight, and
records the search in company history.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from models.backend_responses import CompanySearchResult, SearchPersonResponse
from models.employee import DepartmentGroup, Employee
from models.history_entry import CompanySearchHistoryEntry
from pipelines.guards import CancellationFlag, OneShotToken
from ports.backend import LookupBackendPort
from ports.presenter import PresenterPort
from services.credits import balance_from_response, refresh_credits
from services.employee_mapping import (
    group_by_department,
    map_search_response_to_employees,
    merge_employees,
    to_cached_employees,
)
from services.errors import ConfigurationError, EmailFinderError
from services.history_storage import CompanySearchHistory

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 100


class EmployeeSearchSession:
    def __init__(
        self,
        backend: LookupBackendPort,
        history: CompanySearchHistory,
        presenter: PresenterPort,
        domain: str = "",
        company: Optional[CompanySearchResult] = None,
        credits: Optional[int] = None,
        cancel: Optional[CancellationFlag] = None,
    ):
        self.backend = backend
        self.history = history
        self.presenter = presenter
        self.domain = domain
        self.company = company
        self.credits = credits
        self.cancel = cancel or CancellationFlag()

        self.employees: List[Employee] = []
        self.current_page = 0
        self.total_pages = 0
        self.is_loading = False
        self.has_searched = False
        self.error: Optional[str] = None
        self.history_entry_id: Optional[str] = None

    @classmethod
    def from_history(
        cls,
        entry: CompanySearchHistoryEntry,
        backend: LookupBackendPort,
        history: CompanySearchHistory,
        presenter: PresenterPort,
        credits: Optional[int] = None,
    ) -> "EmployeeSearchSession":
        """Rebuild a view from a cached company search without spending credits."""
        company = CompanySearchResult(
            name=entry.company_name,
            domain=entry.domain,
            confidence_score=entry.confidence_score,
            logo_url=entry.logo_url,
        )
        session = cls(backend, history, presenter, domain=entry.domain, company=company, credits=credits)
        session.employees = [Employee.model_validate(e.model_dump()) for e in entry.employees or []]
        session.current_page = entry.current_page or (1 if session.employees else 0)
        session.total_pages = entry.total_pages or (1 if session.employees else 0)
        session.has_searched = True
        session.history_entry_id = entry.id
        return session

    @property
    def groups(self) -> List[DepartmentGroup]:
        return group_by_department(self.employees)

    @property
    def can_load_more(self) -> bool:
        return self.current_page < self.total_pages and not self.is_loading

    def load_credits(self) -> Optional[int]:
        balance = refresh_credits(self.backend)
        if not self.cancel.cancelled:
            self.credits = balance
        return balance

    def _apply_pagination(self, response: SearchPersonResponse, requested_page: int) -> None:
        # Missing pagination means the response was the only page
        pagination = response.pagination
        self.current_page = (pagination.page if pagination and pagination.page else requested_page)
        self.total_pages = (pagination.total_pages if pagination and pagination.total_pages is not None else 1)

    def _fail(self, error: EmailFinderError) -> None:
        self.error = str(error)
        logger.warning(
            f"Employee search failed: {error}",
            extra={"operation": "search-person", "status": "error", "domain": self.domain},
        )
        self.presenter.show_status("failure", "Failed", self.error)
        balance = refresh_credits(self.backend)
        if balance is not None and not self.cancel.cancelled:
            self.credits = balance

    def search(
        self,
        domain: Optional[str] = None,
        company: Optional[CompanySearchResult] = None,
        token: Optional[OneShotToken] = None,
    ) -> bool:
        """Start a fresh search (page 1). Returns True when a page was applied."""
        target = (domain if domain is not None else self.domain or "").strip()
        if not target:
            self.presenter.show_status("failure", "Error", "Please enter a domain")
            return False
        if self.is_loading or (token is not None and not token.claim()):
            return False

        self.domain = target
        if company is not None:
            self.company = company
        self.is_loading = True
        self.employees = []
        self.has_searched = True
        self.current_page = 0
        self.total_pages = 0
        self.error = None
        self.history_entry_id = None

        self.presenter.show_status("animated", "Searching...", f"Finding employees at {target}")
        try:
            response = self.backend.search_person(target, 1)
        except ConfigurationError:
            raise
        except EmailFinderError as e:
            if not self.cancel.cancelled:
                self._fail(e)
            return False
        finally:
            self.is_loading = False

        if self.cancel.cancelled:
            return False

        self.credits = balance_from_response(response, self.credits)
        employees = map_search_response_to_employees(response)
        self.employees = employees
        self._apply_pagination(response, 1)

        if not employees:
            self.presenter.show_status("failure", "No Results", "No employees found for this domain")
            return True

        entry = self.history.add(
            company_name=(self.company.name if self.company else None) or target,
            domain=target,
            confidence_score=self.company.confidence_score if self.company else DEFAULT_CONFIDENCE,
            logo_url=self.company.logo_url if self.company else None,
            employees=to_cached_employees(employees),
            total_pages=self.total_pages,
            current_page=self.current_page,
        )
        self.history_entry_id = entry.id
        logger.info(
            f"Found {len(employees)} employees",
            extra={"operation": "search-person", "status": "ok", "domain": target},
        )
        self.presenter.show_status(
            "success", "Found", f"{len(employees)} employees (page {self.current_page}/{self.total_pages})"
        )
        return True

    def load_more(self) -> bool:
        """Fetch the next page and append the employees not seen yet."""
        if not self.can_load_more:
            return False

        next_page = self.current_page + 1
        self.is_loading = True
        self.presenter.show_status("animated", "Loading more...", f"Page {next_page}")
        try:
            response = self.backend.search_person(self.domain, next_page)
        except ConfigurationError:
            raise
        except EmailFinderError as e:
            if not self.cancel.cancelled:
                self._fail(e)
            return False
        finally:
            self.is_loading = False

        if self.cancel.cancelled:
            return False

        self.credits = balance_from_response(response, self.credits)
        self.employees, added = merge_employees(self.employees, map_search_response_to_employees(response))
        self._apply_pagination(response, next_page)

        if self.history_entry_id:
            self.history.update(
                self.history_entry_id,
                employees=to_cached_employees(self.employees),
                total_pages=self.total_pages,
                current_page=self.current_page,
            )
        self.presenter.show_status("success", "Loaded", f"{len(added)} more employees")
        return True
