# tests/test_sheets_append_endpoint.py
from __future__ import annotations

from typing import Any, Dict, List, Sequence

import pytest
from fastapi.testclient import TestClient

import api
from functions.sheet_append.row_appender import SheetRowAppender

FIXED_TS = "2025-01-31T12:00:00.000Z"


class _FakeBackend:
    spreadsheet_id = "sheet-123"

    def __init__(self) -> None:
        self.headers: Dict[str, List[str]] = {}
        self.rows: Dict[str, List[List[Any]]] = {}

    def read_header(self, tab: str) -> List[str]:
        return list(self.headers.get(tab, []))

    def write_header(self, tab: str, headers: Sequence[str]) -> None:
        self.headers[tab] = list(headers)

    def append_row(self, tab: str, row: Sequence[Any]) -> None:
        self.rows.setdefault(tab, []).append(list(row))


class _BrokenBackend(_FakeBackend):
    def read_header(self, tab: str) -> List[str]:
        raise RuntimeError("quota exceeded for spreadsheet sheet-123")


@pytest.fixture()
def backend(monkeypatch: pytest.MonkeyPatch) -> _FakeBackend:
    fake = _FakeBackend()
    monkeypatch.setattr(api, "appender", SheetRowAppender(fake, default_tab="Sheet1", now=lambda: FIXED_TS))
    monkeypatch.setattr(
        api,
        "settings",
        api.settings.model_copy(
            update={"allow_origin": "https://forms.example.org", "sheet_name": "Sheet1", "honor_sheet_routing_key": True}
        ),
    )
    return fake


@pytest.fixture()
def client() -> TestClient:
    return TestClient(api.app)


def _assert_cors(headers: Any) -> None:
    assert headers.get("Access-Control-Allow-Origin") == "https://forms.example.org"
    assert headers.get("Access-Control-Allow-Methods") == "POST, OPTIONS"
    assert headers.get("Access-Control-Allow-Headers") == "Content-Type"
    assert headers.get("Vary") == "Origin"


def test_post_appends_flattened_row_and_returns_ok(client: TestClient, backend: _FakeBackend) -> None:
    payload = {"name": "Kai", "score": 9, "approved": True, "form": {"summary": {"concise_score": 4}}, "tags": ["a", "b"]}

    r = client.post("/api/sheets-append", json=payload)

    assert r.status_code == 200
    assert r.json() == {"ok": True}
    _assert_cors(r.headers)
    assert "X-Correlation-Id" in r.headers

    assert backend.headers["Sheet1"] == ["Timestamp", "name", "score", "approved", "form.summary.concise_score", "tags"]
    assert backend.rows["Sheet1"] == [[FIXED_TS, "Kai", 9, True, 4, '["a","b"]']]


def test_post_with_routing_key_writes_to_requested_tab(client: TestClient, backend: _FakeBackend) -> None:
    r = client.post("/api/sheets-append", json={"_sheet": "Leads", "name": "Kai"})

    assert r.status_code == 200
    assert backend.headers == {"Leads": ["Timestamp", "name"]}
    assert backend.rows == {"Leads": [[FIXED_TS, "Kai"]]}


def test_post_routing_key_accepted_but_unused_when_disabled(
    client: TestClient, backend: _FakeBackend, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(api, "settings", api.settings.model_copy(update={"honor_sheet_routing_key": False}))

    r = client.post("/api/sheets-append", json={"_sheet": "Leads", "name": "Kai"})

    assert r.status_code == 200
    assert backend.headers == {"Sheet1": ["Timestamp", "name"]}
    assert "_sheet" not in backend.headers["Sheet1"]


def test_post_empty_body_appends_timestamp_only_row(client: TestClient, backend: _FakeBackend) -> None:
    r = client.post("/api/sheets-append", content=b"", headers={"Content-Type": "application/json"})

    assert r.status_code == 200
    assert backend.rows["Sheet1"] == [[FIXED_TS]]


def test_post_invalid_json_returns_bad_request(client: TestClient, backend: _FakeBackend) -> None:
    r = client.post("/api/sheets-append", content=b"{not json", headers={"Content-Type": "application/json"})

    assert r.status_code == 400
    assert r.json() == {"ok": False, "error": "Bad Request"}
    _assert_cors(r.headers)
    assert backend.rows == {}


def test_backend_failure_returns_bad_request_without_details(
    client: TestClient, backend: _FakeBackend, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(api, "appender", SheetRowAppender(_BrokenBackend(), default_tab="Sheet1"))

    r = client.post("/api/sheets-append", json={"name": "Kai"})

    assert r.status_code == 400
    assert r.json() == {"ok": False, "error": "Bad Request"}
    assert "quota" not in r.text


def test_options_preflight_returns_empty_200_with_cors(client: TestClient, backend: _FakeBackend) -> None:
    r = client.options("/api/sheets-append")

    assert r.status_code == 200
    assert r.content == b""
    _assert_cors(r.headers)


def test_other_methods_return_405(client: TestClient, backend: _FakeBackend) -> None:
    for method in ("GET", "PUT", "DELETE"):
        r = client.request(method, "/api/sheets-append")
        assert r.status_code == 405
        assert r.json() == {"ok": False, "error": "Method not allowed"}
        _assert_cors(r.headers)
