from __future__ import annotations

from typing import Any, List, Optional

import pytest
import requests

from config.settings import get_settings
from services.backend_client import BackendClient
from services.errors import BackendError, ConfigurationError, InsufficientCreditsError


class _FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None):
        self.status_code = status_code
        self._body = body

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("no json body")
        return self._body


class _FakeSession:
    def __init__(self, response: Optional[_FakeResponse] = None, error: Optional[Exception] = None):
        self.response = response or _FakeResponse(200, {})
        self.error = error
        self.posts: List[dict] = []
        self.gets: List[dict] = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.posts.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response

    def get(self, url, params=None, timeout=None):
        self.gets.append({"url": url, "params": params, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


def _client(session: _FakeSession) -> BackendClient:
    return BackendClient(settings=get_settings(), session=session)


def test_missing_api_key_raises_before_any_request(monkeypatch):
    monkeypatch.setenv("EMAIL_FINDER_API_KEY", "  ")
    get_settings.cache_clear()
    session = _FakeSession()
    with pytest.raises(ConfigurationError, match="API key not configured"):
        _client(session).get_credits()
    assert session.posts == []


def test_search_person_request_shape():
    body = {"balance": 9, "results": [], "pagination": {"page": 2, "total_pages": 4}}
    session = _FakeSession(_FakeResponse(200, body))
    response = _client(session).search_person("acme.com", page=2)
    assert response.balance == 9
    assert response.pagination.total_pages == 4
    [call] = session.posts
    assert call["url"] == "https://backend.test/functions/v1/spend-and-search-person"
    assert call["json"] == {"page": 2, "filters": {"company": {"websites": {"include": ["acme.com"]}}}}
    assert call["headers"]["X-API-Key"] == "test-key"
    assert call["timeout"] == 20


def test_enrich_person_request_shape():
    session = _FakeSession(_FakeResponse(200, {"balance": 5, "person": {"email": {"email": "a@acme.com"}}}))
    response = _client(session).enrich_person("Ada", "Lovelace", "acme.com")
    assert response.person.email.email == "a@acme.com"
    assert session.posts[0]["json"] == {"first_name": "Ada", "last_name": "Lovelace", "company_website": "acme.com"}


def test_get_credits():
    session = _FakeSession(_FakeResponse(200, {"balance": 17}))
    assert _client(session).get_credits().balance == 17
    assert session.posts[0]["url"].endswith("/get-credits")


def test_insufficient_credits_carries_balance():
    body = {"error": True, "error_code": "INSUFFICIENT_CREDITS", "balance": 3}
    session = _FakeSession(_FakeResponse(402, body))
    with pytest.raises(InsufficientCreditsError) as exc:
        _client(session).enrich_person("Ada", "Lovelace", "acme.com")
    assert exc.value.balance == 3
    assert exc.value.status_code == 402
    assert "3" in str(exc.value)


def test_402_without_code_is_generic_error():
    session = _FakeSession(_FakeResponse(402, {"message": "Payment required"}))
    with pytest.raises(BackendError) as exc:
        _client(session).search_person("acme.com")
    assert not isinstance(exc.value, InsufficientCreditsError)
    assert str(exc.value) == "Payment required"


def test_server_message_is_surfaced():
    session = _FakeSession(_FakeResponse(500, {"error": True, "message": "Upstream timeout"}))
    with pytest.raises(BackendError, match="Upstream timeout") as exc:
        _client(session).search_person("acme.com")
    assert exc.value.status_code == 500


def test_error_flag_on_200_is_failure():
    session = _FakeSession(_FakeResponse(200, {"error": True}))
    with pytest.raises(BackendError, match="Failed to enrich person"):
        _client(session).enrich_person("Ada", "Lovelace", "acme.com")


def test_unparseable_body_uses_fallback_message():
    session = _FakeSession(_FakeResponse(502, None))
    with pytest.raises(BackendError, match="Failed to search people"):
        _client(session).search_person("acme.com")


def test_transport_failure_uses_fallback_message():
    session = _FakeSession(error=requests.exceptions.ConnectionError("refused"))
    with pytest.raises(BackendError, match="Failed to fetch credits"):
        _client(session).get_credits()


def test_autocomplete_short_query_makes_no_request():
    session = _FakeSession()
    client = _client(session)
    assert client.search_company_by_name("") == []
    assert client.search_company_by_name(" a ") == []
    assert session.gets == []


def test_autocomplete_parses_and_skips_bad_items():
    body = {
        "status": "success",
        "data": [
            {"name": "Acme", "domain": "acme.com", "confidence_score": 92, "logo_url": "https://logo/acme.png"},
            {"name": "No domain"},
            {"name": "Acme Labs", "domain": "acmelabs.io", "confidence_score": 40},
        ],
    }
    session = _FakeSession(_FakeResponse(200, body))
    results = _client(session).search_company_by_name("  acme ")
    assert [r.domain for r in results] == ["acme.com", "acmelabs.io"]
    assert session.gets[0]["params"] == {"query": "acme"}
    assert "X-API-Key" not in str(session.gets[0])


@pytest.mark.parametrize(
    "response,error",
    [
        (_FakeResponse(500, {"status": "success", "data": []}), None),
        (_FakeResponse(200, {"status": "failed"}), None),
        (_FakeResponse(200, {"status": "success", "data": "nope"}), None),
        (_FakeResponse(200, None), None),
        (None, requests.exceptions.Timeout("slow")),
    ],
)
def test_autocomplete_failures_degrade_to_empty(response, error):
    session = _FakeSession(response, error=error)
    assert _client(session).search_company_by_name("acme") == []


def test_api_key_not_required_for_autocomplete(monkeypatch):
    monkeypatch.delenv("EMAIL_FINDER_API_KEY", raising=False)
    get_settings.cache_clear()
    body = {"status": "success", "data": [{"name": "Acme", "domain": "acme.com"}]}
    session = _FakeSession(_FakeResponse(200, body))
    assert len(_client(session).search_company_by_name("acme")) == 1


def test_autocomplete_keeps_items_with_null_score_or_logo():
    body = {
        "status": "success",
        "data": [
            {"name": "Acme", "domain": "acme.com", "confidence_score": None, "logo_url": None},
            {"name": "Acme Labs", "domain": "acmelabs.io", "confidence_score": 40, "logo_url": None},
        ],
    }
    session = _FakeSession(_FakeResponse(200, body))
    results = _client(session).search_company_by_name("acme")
    assert [(r.domain, r.confidence_score, r.logo_url) for r in results] == [
        ("acme.com", 0, None),
        ("acmelabs.io", 40, None),
    ]
