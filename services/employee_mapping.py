from __future__ import annotations

import unicodedata
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from models.backend_responses import RawJob, RawPersonLocation, SearchPersonResponse
from models.employee import CachedEmployee, DepartmentGroup, Employee, OTHER_DEPARTMENT


def _current_job(jobs: Optional[List[Optional[RawJob]]]) -> Optional[RawJob]:
    for job in jobs or []:
        if job is not None and job.current:
            return job
    return None


def _format_location(location: Optional[RawPersonLocation]) -> Optional[str]:
    if location is None:
        return None
    parts = [p for p in (location.city, location.country) if p]
    return ", ".join(parts) or None


def map_search_response_to_employees(response: SearchPersonResponse) -> List[Employee]:
    """Map one search page to employees, keeping only the current position."""
    employees: List[Employee] = []
    for item in response.results or []:
        person = item.person if item else None
        if person is None:
            continue
        current = _current_job(person.job_history)
        # Ordered set: first occurrence wins
        departments = list(dict.fromkeys(d for d in (current.departments if current else None) or [] if d))
        employees.append(Employee(
            id=person.person_id or "",
            first_name=person.first_name or "",
            last_name=person.last_name or "",
            full_name=person.full_name or "",
            job_title=person.current_job_title or (current.title if current else None) or "",
            departments=departments or [OTHER_DEPARTMENT],
            linkedin_url=person.linkedin_url or None,
            location=_format_location(person.location),
            seniority=current.seniority if current else None,
        ))
    return employees


def _fold_accents(name: str) -> str:
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def _department_sort_key(name: str) -> Tuple[bool, str, str, str]:
    # Ignore accents and case first; ties put plain before accented and lowercase first. "Other" always last
    return (name == OTHER_DEPARTMENT, _fold_accents(name), name.casefold(), name.swapcase())


def group_by_department(employees: Iterable[CachedEmployee]) -> List[DepartmentGroup]:
    """Bucket employees by department; an employee joins every group it lists."""
    index: Dict[str, List[CachedEmployee]] = {}
    for employee in employees:
        for department in employee.departments:
            index.setdefault(department, []).append(employee)
    return [
        DepartmentGroup(name=name, employees=index[name])
        for name in sorted(index, key=_department_sort_key)
    ]


def merge_employees(existing: Sequence[Employee], incoming: Iterable[Employee]) -> Tuple[List[Employee], List[Employee]]:
    """Append incoming employees not seen yet, by id.

    Returns (merged, added). Existing order is kept; new ones go at the end.
    """
    seen = {e.id for e in existing}
    added: List[Employee] = []
    for employee in incoming:
        if employee.id in seen:
            continue
        seen.add(employee.id)
        added.append(employee)
    return [*existing, *added], added


def to_cached_employees(employees: Iterable[Employee]) -> List[CachedEmployee]:
    return [e.to_cached() for e in employees]
