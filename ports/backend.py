from __future__ import annotations

from typing import List, Protocol

from models.backend_responses import (
    CompanySearchResult,
    CreditsResponse,
    EnrichPersonResponse,
    SearchPersonResponse,
)


class LookupBackendPort(Protocol):
    def get_credits(self) -> CreditsResponse:
        ...

    def search_person(self, domain: str, page: int = 1) -> SearchPersonResponse:
        ...

    def enrich_person(self, first_name: str, last_name: str, domain: str) -> EnrichPersonResponse:
        ...

    def search_company_by_name(self, query: str) -> List[CompanySearchResult]:
        ...
