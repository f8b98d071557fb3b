from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from models.employee import CachedEmployee
from models.enriched_data import EnrichedData


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are read as UTC so both logs stay comparable
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class SearchHistoryEntry(BaseModel):
    """One past email lookup, successful or not.

    Entries written before the kind tag existed carry no ``type``; the default
    tags them as email lookups.
    """

    id: str
    type: Literal["email"] = "email"
    first_name: str
    last_name: str
    domain: str
    created_at: datetime
    status: Literal["success", "error"]
    email: Optional[str] = None
    error: Optional[str] = None
    enriched_data: Optional[EnrichedData] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class CompanySearchHistoryEntry(BaseModel):
    """One past company search, with the employee snapshot fetched so far."""

    id: str
    type: Literal["company"] = "company"
    company_name: str
    domain: str
    confidence_score: float = 100
    logo_url: Optional[str] = None
    created_at: datetime
    employees: Optional[List[CachedEmployee]] = None
    total_pages: Optional[int] = None
    current_page: Optional[int] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


HistoryEntry = Union[SearchHistoryEntry, CompanySearchHistoryEntry]
