from __future__ import annotations

from pathlib import Path
from typing import Any

import requests  # type: ignore[import-untyped]

from adoption_dashboard.ingest.source import (
    FellBackToFile,
    Fetched,
    Unavailable,
    load_records,
    read_fallback_csv,
)
from adoption_dashboard.models import Species
from conftest import make_settings


class _FakeResponse:
    def __init__(self, body: Any, status_code: int = 200) -> None:
        self._body = body
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> Any:
        return self._body


class _FakeSession:
    def __init__(self, response: _FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.urls: list[str] = []

    def get(self, url: str, timeout: float) -> _FakeResponse:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response


def _write_csv(path: Path) -> None:
    path.write_text(
        "Date,Species,Name\n"
        "2024-01-05,Dog,Biscuit\n"
        "2024-01-20, Cat ,Marble\n"
        "garbage,Dog,Nope\n",
        encoding="utf-8",
    )


def test_load_records_from_proxy(tmp_path: Path) -> None:
    body = {
        "data": [
            {"Date": "2024-01-05", "Species": "Dog"},
            {"Date": "not-a-date", "Species": "Cat"},
        ],
        "headers": ["Date", "Species"],
    }
    session = _FakeSession(_FakeResponse(body))

    result = load_records(make_settings(tmp_path), session=session)  # type: ignore[arg-type]

    assert isinstance(result, Fetched)
    assert [r.species for r in result.records] == [Species.DOG]
    assert result.dropped == 1
    assert session.urls == ["http://proxy.test/api/sheets"]


def test_load_records_falls_back_on_http_error(tmp_path: Path) -> None:
    s = make_settings(tmp_path)
    _write_csv(s.fallback_csv_path)
    session = _FakeSession(_FakeResponse({"error": "boom"}, status_code=500))

    result = load_records(s, session=session)  # type: ignore[arg-type]

    assert isinstance(result, FellBackToFile)
    assert [r.species for r in result.records] == [Species.DOG, Species.CAT]
    assert result.dropped == 1
    assert "HTTPError" in result.error


def test_load_records_falls_back_on_connection_error(tmp_path: Path) -> None:
    s = make_settings(tmp_path)
    _write_csv(s.fallback_csv_path)
    session = _FakeSession(error=requests.ConnectionError("refused"))

    result = load_records(s, session=session)  # type: ignore[arg-type]

    assert isinstance(result, FellBackToFile)
    assert len(result.records) == 2


def test_load_records_falls_back_on_unexpected_body(tmp_path: Path) -> None:
    s = make_settings(tmp_path)
    _write_csv(s.fallback_csv_path)
    session = _FakeSession(_FakeResponse({"rows": []}))

    result = load_records(s, session=session)  # type: ignore[arg-type]

    assert isinstance(result, FellBackToFile)


def test_load_records_unavailable_when_fallback_missing(tmp_path: Path) -> None:
    s = make_settings(tmp_path, fallback_csv_path=tmp_path / "missing.csv")
    session = _FakeSession(error=requests.ConnectionError("refused"))

    result = load_records(s, session=session)  # type: ignore[arg-type]

    assert isinstance(result, Unavailable)
    assert "missing.csv" in result.error


def test_read_fallback_csv_keeps_empty_cells_as_strings(tmp_path: Path) -> None:
    path = tmp_path / "a.csv"
    path.write_text("Date,Species\n2024-01-05,\n", encoding="utf-8")
    assert read_fallback_csv(path) == [{"Date": "2024-01-05", "Species": ""}]
