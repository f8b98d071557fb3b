from __future__ import annotations

from typing import List, Optional

from models.backend_responses import EnrichPersonResponse, RawCompany, RawJob, RawPerson
from models.enriched_data import (
    CompanyData,
    CompanyLocation,
    EmailInfo,
    EnrichedData,
    Funding,
    FundingEvent,
    JobHistoryEntry,
    MobileInfo,
    PersonData,
    PersonLocation,
)


def _map_job(job: RawJob) -> JobHistoryEntry:
    fields = job.model_dump(exclude_none=True)
    fields["departments"] = [d for d in job.departments or [] if d]
    return JobHistoryEntry.model_validate(fields)


def _map_person(person: RawPerson, email: str) -> PersonData:
    return PersonData(
        first_name=person.first_name or "",
        last_name=person.last_name or "",
        full_name=person.full_name or "",
        headline=person.headline or None,
        linkedin_url=person.linkedin_url or None,
        current_job_title=person.current_job_title or None,
        job_history=[_map_job(job) for job in person.job_history or [] if job is not None],
        mobile=MobileInfo(
            status=person.mobile.status or "",
            mobile_international=person.mobile.mobile_international or None,
            mobile_country=person.mobile.mobile_country,
        ) if person.mobile else None,
        email=EmailInfo(
            status=person.email.status or "",
            email=email,
            email_mx_provider=person.email.email_mx_provider,
        ),
        location=PersonLocation(**person.location.model_dump()) if person.location else None,
    )


def _map_company(company: Optional[RawCompany], domain: str) -> CompanyData:
    c = company or RawCompany()
    funding = None
    if c.funding:
        funding = Funding(
            total_funding_printed=c.funding.total_funding_printed,
            latest_funding_stage=c.funding.latest_funding_stage,
            latest_funding_date=c.funding.latest_funding_date,
            funding_events=[
                FundingEvent(
                    amount=ev.amount,
                    amount_printed=ev.amount_printed,
                    raised_at=ev.raised_at or "",
                    stage=ev.stage,
                    link=ev.link,
                )
                for ev in c.funding.funding_events
                if ev is not None
            ] if c.funding.funding_events is not None else None,
        )
    return CompanyData(
        name=c.name or domain,
        website=c.website or f"https://{domain}",
        domain=c.domain or domain,
        type=c.type or None,
        industry=c.industry or "",
        description_ai=c.description_ai or None,
        employee_range=c.employee_range or "",
        employee_count=c.employee_count,
        founded=c.founded or 0,
        linkedin_url=c.linkedin_url or None,
        twitter_url=c.twitter_url or None,
        logo_url=c.logo_url or None,
        location=CompanyLocation(**c.location.model_dump()) if c.location else None,
        revenue_range_printed=c.revenue_range_printed or None,
        funding=funding,
        keywords=[k for k in c.keywords if k] if c.keywords is not None else None,
    )


def map_enrich_response_to_data(response: EnrichPersonResponse, domain: str) -> Optional[EnrichedData]:
    """Normalize an enrichment response, or return None when it holds no email.

    None is the "no email found" signal: the call went through but the lookup
    failed. Funding events keep the upstream order.
    """
    person = response.person
    email = person.email.email if person and person.email else None
    if not email:
        return None
    return EnrichedData(
        person=_map_person(person, email),
        company=_map_company(response.company, domain),
    )


def latest_funding_rounds(funding: Optional[Funding], limit: Optional[int] = 3) -> List[FundingEvent]:
    """Funding events, most recent first. Every reader orders through here."""
    if funding is None or not funding.funding_events:
        return []
    # ISO dates sort chronologically as text
    rounds = sorted(funding.funding_events, key=lambda ev: ev.raised_at or "", reverse=True)
    return rounds if limit is None else rounds[:limit]
