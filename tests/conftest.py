from __future__ import annotations

import os
import sqlite3
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'services.history_storage'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    os.environ.setdefault("RUN_ENV", "test")


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    from config.settings import get_settings
    monkeypatch.setenv("EMAIL_FINDER_API_KEY", "test-key")
    monkeypatch.setenv("EMAIL_FINDER_BACKEND_URL", "https://backend.test/functions/v1")
    monkeypatch.setenv("API_TRACE", "false")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def kv_store(tmp_path):
    from db import schema
    from db.repos.kv_repo import KeyValueRepo
    conn = sqlite3.connect(str(tmp_path / "history.db"))
    schema.bootstrap(conn)
    try:
        yield KeyValueRepo(conn)
    finally:
        conn.close()


class RecordingPresenter:
    def __init__(self) -> None:
        self.messages: List[tuple] = []

    def show_status(self, style: str, title: str, message: Optional[str] = None) -> None:
        self.messages.append((style, title, message))

    def styles(self) -> List[str]:
        return [m[0] for m in self.messages]


@pytest.fixture
def presenter():
    return RecordingPresenter()


def person(person_id: str, departments: Optional[List[str]] = None, **extra: Any) -> Dict[str, Any]:
    """Raw search result item as returned by spend-and-search-person."""
    job: Dict[str, Any] = {"title": "Engineer", "company_name": "Acme", "current": True, "seniority": "Senior"}
    if departments is not None:
        job["departments"] = departments
    raw = {
        "person_id": person_id,
        "first_name": person_id.upper(),
        "last_name": "Example",
        "full_name": f"{person_id.upper()} Example",
        "job_history": [job],
        "location": {"city": "Berlin", "country": "Germany"},
    }
    raw.update(extra)
    return {"person": raw}


class StubBackend:
    """In-memory LookupBackendPort: queue responses or exceptions per operation."""

    def __init__(self, balance: Optional[int] = 10) -> None:
        self.balance = balance
        self.search_pages: Dict[int, Any] = {}
        self.enrich_result: Any = None
        self.credits_error: Optional[Exception] = None
        self.calls: List[tuple] = []

    def get_credits(self):
        from models.backend_responses import CreditsResponse
        self.calls.append(("get_credits",))
        if self.credits_error:
            raise self.credits_error
        return CreditsResponse(balance=self.balance)

    def search_person(self, domain: str, page: int = 1):
        from models.backend_responses import SearchPersonResponse
        self.calls.append(("search_person", domain, page))
        result = self.search_pages[page]
        if isinstance(result, Exception):
            raise result
        return SearchPersonResponse.model_validate(result)

    def enrich_person(self, first_name: str, last_name: str, domain: str):
        from models.backend_responses import EnrichPersonResponse
        self.calls.append(("enrich_person", first_name, last_name, domain))
        if isinstance(self.enrich_result, Exception):
            raise self.enrich_result
        return EnrichPersonResponse.model_validate(self.enrich_result)

    def search_company_by_name(self, query: str):
        self.calls.append(("search_company_by_name", query))
        return []


@pytest.fixture
def stub_backend():
    return StubBackend()


@pytest.fixture
def make_person():
    return person
