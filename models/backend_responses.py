from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class _Upstream(BaseModel):
    """Raw backend shape: every field optional, unknown keys ignored."""

    model_config = ConfigDict(extra="ignore")


class RawJob(_Upstream):
    title: Optional[str] = None
    company_name: Optional[str] = None
    current: Optional[bool] = None
    start_year: Optional[int] = None
    start_month: Optional[int] = None
    end_year: Optional[int] = None
    end_month: Optional[int] = None
    seniority: Optional[str] = None
    logo_url: Optional[str] = None
    duration_in_months: Optional[int] = None
    departments: Optional[List[Optional[str]]] = None


class RawPersonLocation(_Upstream):
    country: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country_code: Optional[str] = None


class RawEmail(_Upstream):
    status: Optional[str] = None
    email: Optional[str] = None
    email_mx_provider: Optional[str] = None


class RawMobile(_Upstream):
    status: Optional[str] = None
    mobile_international: Optional[str] = None
    mobile_country: Optional[str] = None


class RawPerson(_Upstream):
    person_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    headline: Optional[str] = None
    linkedin_url: Optional[str] = None
    current_job_title: Optional[str] = None
    job_history: Optional[List[Optional[RawJob]]] = None
    mobile: Optional[RawMobile] = None
    email: Optional[RawEmail] = None
    location: Optional[RawPersonLocation] = None


class RawFundingEvent(_Upstream):
    amount: Optional[float] = None
    amount_printed: Optional[str] = None
    raised_at: Optional[str] = None
    stage: Optional[str] = None
    link: Optional[str] = None


class RawFunding(_Upstream):
    total_funding_printed: Optional[str] = None
    latest_funding_stage: Optional[str] = None
    latest_funding_date: Optional[str] = None
    funding_events: Optional[List[Optional[RawFundingEvent]]] = None


class RawCompanyLocation(_Upstream):
    country: Optional[str] = None
    city: Optional[str] = None
    raw_address: Optional[str] = None


class RawCompany(_Upstream):
    name: Optional[str] = None
    website: Optional[str] = None
    domain: Optional[str] = None
    type: Optional[str] = None
    industry: Optional[str] = None
    description_ai: Optional[str] = None
    employee_range: Optional[str] = None
    employee_count: Optional[int] = None
    founded: Optional[int] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    logo_url: Optional[str] = None
    location: Optional[RawCompanyLocation] = None
    revenue_range_printed: Optional[str] = None
    funding: Optional[RawFunding] = None
    keywords: Optional[List[Optional[str]]] = None


class SearchResultItem(_Upstream):
    person: Optional[RawPerson] = None


class Pagination(_Upstream):
    page: Optional[int] = None
    total_pages: Optional[int] = None
    total_results: Optional[int] = None


class SearchPersonResponse(_Upstream):
    """Body of spend-and-search-person."""

    balance: Optional[int] = None
    results: Optional[List[Optional[SearchResultItem]]] = None
    pagination: Optional[Pagination] = None


class EnrichPersonResponse(_Upstream):
    """Body of spend-and-enrich-person."""

    balance: Optional[int] = None
    person: Optional[RawPerson] = None
    company: Optional[RawCompany] = None


class CreditsResponse(_Upstream):
    balance: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class CompanySearchResult(BaseModel):
    """One company autocomplete suggestion."""

    name: str
    domain: str
    confidence_score: float = 0
    logo_url: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("confidence_score", mode="before")
    @classmethod
    def null_score_is_zero(cls, value):
        return 0 if value is None else value
