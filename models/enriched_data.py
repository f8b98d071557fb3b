from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class JobHistoryEntry(BaseModel):
    title: str = ""
    company_name: str = ""
    current: bool = False
    start_year: Optional[int] = None
    start_month: Optional[int] = None
    end_year: Optional[int] = None
    end_month: Optional[int] = None
    seniority: Optional[str] = None
    logo_url: Optional[str] = None
    duration_in_months: Optional[int] = None
    departments: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class PersonLocation(BaseModel):
    country: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country_code: Optional[str] = None


class EmailInfo(BaseModel):
    status: str = ""
    email: str
    email_mx_provider: Optional[str] = None


class MobileInfo(BaseModel):
    status: str = ""
    mobile_international: Optional[str] = None
    mobile_country: Optional[str] = None


class PersonData(BaseModel):
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    headline: Optional[str] = None
    linkedin_url: Optional[str] = None
    current_job_title: Optional[str] = None
    job_history: List[JobHistoryEntry] = Field(default_factory=list)
    mobile: Optional[MobileInfo] = None
    email: EmailInfo
    location: Optional[PersonLocation] = None

    model_config = ConfigDict(extra="ignore")


class FundingEvent(BaseModel):
    amount: Optional[float] = None
    amount_printed: Optional[str] = None
    raised_at: str = ""
    stage: Optional[str] = None
    link: Optional[str] = None


class Funding(BaseModel):
    total_funding_printed: Optional[str] = None
    latest_funding_stage: Optional[str] = None
    latest_funding_date: Optional[str] = None
    # Upstream order; see services.enrichment_mapping.latest_funding_rounds
    funding_events: Optional[List[FundingEvent]] = None


class CompanyLocation(BaseModel):
    country: Optional[str] = None
    city: Optional[str] = None
    raw_address: Optional[str] = None


class CompanyData(BaseModel):
    name: str
    website: str
    domain: str
    type: Optional[str] = None
    industry: str = ""
    description_ai: Optional[str] = None
    employee_range: str = ""
    employee_count: Optional[int] = None
    founded: int = 0
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    logo_url: Optional[str] = None
    location: Optional[CompanyLocation] = None
    revenue_range_printed: Optional[str] = None
    funding: Optional[Funding] = None
    keywords: Optional[List[str]] = None

    model_config = ConfigDict(extra="ignore")


class EnrichedData(BaseModel):
    """Normalized enrichment result. Only exists when an email was found."""

    person: PersonData
    company: CompanyData
