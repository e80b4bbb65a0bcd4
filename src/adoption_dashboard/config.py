"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads the Google Sheets, record source and refresh options from the
environment. A missing spreadsheet id is not an error here; the proxy
reports it per request.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]


@dataclass(frozen=True)
class Settings:
    """Container for dashboard configuration read from the environment.

    Attributes:
        sheet_id: Google spreadsheet id (empty when not configured).
        sheet_range: A1 range requested from the spreadsheet.
        service_account_key: Full service-account JSON key, if provided.
        service_account_email: Service-account email (split-key form).
        private_key: Service-account private key (split-key form).
        sheets_api_url: URL of the `/api/sheets` proxy used by the record source.
        fallback_csv_path: Local CSV read when the proxy is unavailable.
        date_field: Header name of the adoption date column.
        category_field: Header name of the species column.
        start_year: Earliest year shown in year-over-year series.
        refresh_interval_seconds: Polling interval for the record source.
        api_port: Port used by `serve`.
        request_timeout: Timeout in seconds for proxy requests.
    """
    sheet_id: str
    sheet_range: str
    service_account_key: str
    service_account_email: str
    private_key: str
    sheets_api_url: str
    fallback_csv_path: Path
    date_field: str
    category_field: str
    start_year: int
    refresh_interval_seconds: int
    api_port: int
    request_timeout: float = 15.0


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from e


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if a numeric variable is set to a non-integer value.
    """
    return Settings(
        sheet_id=os.getenv("GOOGLE_SHEET_ID", "").strip(),
        sheet_range=os.getenv("GOOGLE_SHEET_RANGE", "Dashboard!A:C"),
        service_account_key=os.getenv("GOOGLE_SERVICE_ACCOUNT_KEY", ""),
        service_account_email=os.getenv("GOOGLE_SERVICE_ACCOUNT_EMAIL", ""),
        private_key=os.getenv("GOOGLE_PRIVATE_KEY", ""),
        sheets_api_url=os.getenv("SHEETS_API_URL", "http://localhost:3001/api/sheets"),
        fallback_csv_path=Path(os.getenv("FALLBACK_CSV_PATH", "data/adoptions.csv")),
        date_field=os.getenv("DATE_FIELD", "Date"),
        category_field=os.getenv("CATEGORY_FIELD", "Species"),
        start_year=_int_env("START_YEAR", 2023),
        refresh_interval_seconds=_int_env("REFRESH_INTERVAL_SECONDS", 300),
        api_port=_int_env("API_PORT", 3001),
    )
