from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


OTHER_DEPARTMENT = "Other"


class CachedEmployee(BaseModel):
    """Employee projection stored with a company search history entry."""

    id: str
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    job_title: str = ""
    departments: List[str] = Field(default_factory=lambda: [OTHER_DEPARTMENT])
    linkedin_url: Optional[str] = None
    location: Optional[str] = None
    seniority: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class Employee(CachedEmployee):
    """Normalized person from a company-domain search (current position only)."""

    def to_cached(self) -> CachedEmployee:
        return CachedEmployee.model_validate(self.model_dump())


class DepartmentGroup(BaseModel):
    name: str
    employees: List[CachedEmployee] = Field(default_factory=list)
