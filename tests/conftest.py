from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from adoption_dashboard.config import Settings
from adoption_dashboard.models import AdoptionRecord, Species


def make_settings(tmp_path: Path, **overrides: object) -> Settings:
    values: dict[str, object] = {
        "sheet_id": "sheet-123",
        "sheet_range": "Dashboard!A:C",
        "service_account_key": "",
        "service_account_email": "",
        "private_key": "",
        "sheets_api_url": "http://proxy.test/api/sheets",
        "fallback_csv_path": tmp_path / "adoptions.csv",
        "date_field": "Date",
        "category_field": "Species",
        "start_year": 2024,
        "refresh_interval_seconds": 300,
        "api_port": 3001,
    }
    values.update(overrides)
    return Settings(**values)  # type: ignore[arg-type]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


def rec(day: str, species: Species) -> AdoptionRecord:
    return AdoptionRecord(date=date.fromisoformat(day), species=species)
