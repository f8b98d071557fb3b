from .backend_responses import (
    CompanySearchResult,
    CreditsResponse,
    EnrichPersonResponse,
    SearchPersonResponse,
)
from .employee import CachedEmployee, DepartmentGroup, Employee, OTHER_DEPARTMENT
from .enriched_data import CompanyData, EnrichedData, Funding, FundingEvent, PersonData
from .history_entry import CompanySearchHistoryEntry, HistoryEntry, SearchHistoryEntry

__all__ = [
    "CompanySearchResult",
    "CreditsResponse",
    "EnrichPersonResponse",
    "SearchPersonResponse",
    "CachedEmployee",
    "DepartmentGroup",
    "Employee",
    "OTHER_DEPARTMENT",
    "CompanyData",
    "EnrichedData",
    "Funding",
    "FundingEvent",
    "PersonData",
    "CompanySearchHistoryEntry",
    "HistoryEntry",
    "SearchHistoryEntry",
]
