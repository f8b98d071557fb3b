from __future__ import annotations

import sys
from datetime import datetime
from typing import List, Optional, TextIO

from models.backend_responses import CompanySearchResult
from models.employee import CachedEmployee, DepartmentGroup
from models.enriched_data import EnrichedData, JobHistoryEntry
from models.history_entry import CompanySearchHistoryEntry, HistoryEntry, SearchHistoryEntry
from ports.presenter import StatusStyle
from services.credits import format_credits
from services.enrichment_mapping import latest_funding_rounds
from services.history_storage import format_relative_time

_STATUS_ICONS = {"animated": "...", "success": "OK", "failure": "!!"}
_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


class ConsolePresenter:
    """Status lines on stderr; results go to stdout through the print_* helpers."""

    def __init__(self, stream: Optional[TextIO] = None, quiet: bool = False):
        self.stream = stream or sys.stderr
        self.quiet = quiet

    def show_status(self, style: StatusStyle, title: str, message: Optional[str] = None) -> None:
        if self.quiet and style == "animated":
            return
        line = f"[{_STATUS_ICONS.get(style, '-')}] {title}"
        if message:
            line += f": {message}"
        print(line, file=self.stream)


def _month_year(year: Optional[int], month: Optional[int]) -> str:
    if not year:
        return ""
    if month and 1 <= month <= 12:
        return f"{_MONTHS[month - 1]} {year}"
    return str(year)


def format_job_period(job: JobHistoryEntry) -> str:
    start = _month_year(job.start_year, job.start_month)
    if job.current:
        return f"{start} - Present"
    end = _month_year(job.end_year, job.end_month)
    return f"{start} - {end}" if end else start


def print_company_results(results: List[CompanySearchResult]) -> None:
    if not results:
        print("No companies found")
        return
    for company in results:
        print(f"{company.name:40s} {company.domain:30s} {company.confidence_score:>5.0f}%")


def _employee_line(employee: CachedEmployee) -> str:
    line = f"  - {employee.full_name or (employee.first_name + ' ' + employee.last_name).strip()}"
    if employee.job_title:
        line += f" | {employee.job_title}"
    if employee.seniority:
        line += f" [{employee.seniority}]"
    if employee.location:
        line += f" ({employee.location})"
    return line


def print_employee_groups(
    groups: List[DepartmentGroup],
    domain: str,
    current_page: int,
    total_pages: int,
    credits: Optional[int] = None,
) -> None:
    print("\n" + "=" * 60)
    print(f"EMPLOYEES AT {domain}")
    print("=" * 60)
    print(f"Credits Remaining: {format_credits(credits)}")
    if not groups:
        print("No employees found for this domain")
    for group in groups:
        print(f"\n{group.name} ({len(group.employees)} employees)")
        for employee in group.employees:
            print(_employee_line(employee))
    if current_page < total_pages:
        print(f"\nMore results available (page {current_page} of {total_pages})")
    print("=" * 60)


def print_enriched_data(data: EnrichedData, credits: Optional[int] = None) -> None:
    person, company = data.person, data.company
    print("\n" + "=" * 60)
    print(person.full_name or f"{person.first_name} {person.last_name}")
    print("=" * 60)
    print(f"Email: {person.email.email} ({person.email.status or 'unknown'})")
    if person.mobile and person.mobile.mobile_international:
        print(f"Mobile: {person.mobile.mobile_international}")
    title = person.current_job_title or next((j.title for j in person.job_history if j.current), "")
    if title:
        print(f"Title: {title}")
    if person.headline:
        print(f"Headline: {person.headline}")
    if person.location:
        print(f"Location: {', '.join(p for p in (person.location.city, person.location.country) if p)}")
    if person.linkedin_url:
        print(f"LinkedIn: {person.linkedin_url}")
    if person.job_history:
        print("\nExperience:")
        for job in person.job_history:
            print(f"  - {job.title} at {job.company_name} ({format_job_period(job)})")

    print(f"\nCompany: {company.name} <{company.website}>")
    if company.industry:
        print(f"Industry: {company.industry}")
    if company.employee_range:
        print(f"Employees: {company.employee_range}")
    if company.founded:
        print(f"Founded: {company.founded}")
    if company.revenue_range_printed:
        print(f"Revenue: {company.revenue_range_printed}")
    if company.funding:
        print(f"Total funding: {company.funding.total_funding_printed or '-'}")
        for event in latest_funding_rounds(company.funding):
            print(f"  - {event.stage or '?'} {event.amount_printed or ''} ({event.raised_at.split('T')[0]})")
    if company.description_ai:
        print(f"\n{company.description_ai}")
    if credits is not None:
        print(f"\nCredits Remaining: {format_credits(credits)}")
    print("=" * 60)


def history_line(entry: HistoryEntry, now: Optional[datetime] = None) -> str:
    when = format_relative_time(entry.created_at, now)
    if isinstance(entry, CompanySearchHistoryEntry):
        count = len(entry.employees or [])
        return f"{entry.id}  company  {entry.company_name} ({entry.domain}) - {count} employees - {when}"
    target = f"{entry.first_name} {entry.last_name} @ {entry.domain}"
    outcome = entry.email if entry.status == "success" else f"error: {entry.error or 'Unknown error'}"
    return f"{entry.id}  email    {target} - {outcome} - {when}"


def print_history(entries: List[HistoryEntry], now: Optional[datetime] = None) -> None:
    if not entries:
        print("No search history")
        return
    for entry in entries:
        print(history_line(entry, now))


def print_cached_email_entry(entry: SearchHistoryEntry) -> None:
    if entry.status == "error":
        print(f"Lookup for {entry.first_name} {entry.last_name} at {entry.domain} failed: {entry.error or 'Unknown error'}")
        return
    if entry.enriched_data:
        print_enriched_data(entry.enriched_data)
        return
    # Older entries were stored without the enrichment payload
    print("Cached result not available for this search.")
    print(f"{entry.first_name} {entry.last_name} at {entry.domain}")
    print(f"Email: {entry.email or 'N/A'}")
