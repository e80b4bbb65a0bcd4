"""Record source: the sheets proxy first, a local CSV second.

`load_records` reports which stage produced the data so the dashboard can
tell fresh data from a fallback read:

- `Fetched`: the proxy answered and its rows were parsed.
- `FellBackToFile`: the proxy failed; rows came from the fallback CSV.
- `Unavailable`: both stages failed; callers keep whatever they had.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

import pandas as pd
import requests  # type: ignore[import-untyped]
from pydantic import ValidationError

from adoption_dashboard.config import Settings
from adoption_dashboard.ingest.parse import parse_records
from adoption_dashboard.models import AdoptionRecord, SheetPayload

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fetched:
    """Records parsed from the live sheets proxy."""
    records: tuple[AdoptionRecord, ...]
    dropped: int = 0


@dataclass(frozen=True)
class FellBackToFile:
    """Records parsed from the fallback CSV after the proxy failed.

    Attributes:
        records: Parsed records.
        dropped: Malformed rows skipped.
        error: Description of the proxy failure that triggered the fallback.
    """
    records: tuple[AdoptionRecord, ...]
    dropped: int
    error: str


@dataclass(frozen=True)
class Unavailable:
    """Both the proxy and the fallback file failed."""
    error: str


SourceResult = Union[Fetched, FellBackToFile, Unavailable]


def fetch_payload(
    url: str,
    timeout: float = 15.0,
    session: requests.Session | None = None,
) -> SheetPayload:
    """GET the sheets proxy and validate its JSON body.

    Raises:
        requests.RequestException: on network errors or a non-2xx status.
        pydantic.ValidationError: if the body does not match `SheetPayload`.
    """
    http: Any = session if session is not None else requests
    log.info("Requesting %s", url)
    r = http.get(url, timeout=timeout)
    r.raise_for_status()
    return SheetPayload.model_validate(r.json())


def read_fallback_csv(path: Path) -> list[dict[str, str]]:
    """Read the fallback CSV (header row inferred) as string-valued rows."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    log.info("Read %d rows from fallback file %s", len(df), path)
    return df.to_dict(orient="records")


def load_records(settings: Settings, session: requests.Session | None = None) -> SourceResult:
    """Load adoption records, falling back to the local CSV on proxy failure.

    Args:
        settings: Settings with the proxy URL, fallback path and field names.
        session: Optional requests session (used by tests).

    Returns:
        A `Fetched`, `FellBackToFile` or `Unavailable` result. I/O failures
        are reported in the result, never raised.
    """
    try:
        payload = fetch_payload(settings.sheets_api_url, settings.request_timeout, session)
        parsed = parse_records(payload.data, settings.date_field, settings.category_field)
        log.info("Loaded %d records from sheets proxy", len(parsed.records))
        return Fetched(records=parsed.records, dropped=parsed.dropped)
    except (requests.RequestException, ValueError, ValidationError) as e:
        proxy_error = f"{type(e).__name__}: {e}"
        log.warning("Sheets proxy failed (%s); falling back to %s", proxy_error, settings.fallback_csv_path)

    try:
        rows = read_fallback_csv(settings.fallback_csv_path)
    except (OSError, ValueError) as e:
        error = f"{proxy_error}; fallback {settings.fallback_csv_path}: {type(e).__name__}: {e}"
        log.error("No record source available: %s", error)
        return Unavailable(error=error)

    parsed = parse_records(rows, settings.date_field, settings.category_field)
    log.info("Loaded %d records from fallback file", len(parsed.records))
    return FellBackToFile(records=parsed.records, dropped=parsed.dropped, error=proxy_error)
