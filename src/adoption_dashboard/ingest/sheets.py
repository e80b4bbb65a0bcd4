"""Google Sheets access for the `/api/sheets` proxy.

Credentials are built from service-account values in the environment, either
as a full JSON key or as a split email + private key pair.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build

from adoption_dashboard.config import SHEETS_SCOPES, Settings
from adoption_dashboard.errors import ConfigurationError

log = logging.getLogger(__name__)


def build_credentials(settings: Settings) -> Credentials:
    """Return read-only service-account credentials for the Sheets API.

    Args:
        settings: Settings carrying either `service_account_key` (JSON) or
            `service_account_email` + `private_key`.

    Raises:
        ConfigurationError: if no usable credentials are configured.
    """
    if settings.service_account_key.strip():
        try:
            info = json.loads(settings.service_account_key)
        except json.JSONDecodeError as e:
            raise ConfigurationError("GOOGLE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    elif settings.service_account_email and settings.private_key:
        info = {
            "type": "service_account",
            "client_email": settings.service_account_email,
            # keys pasted into .env usually carry literal "\n" sequences
            "private_key": settings.private_key.replace("\\n", "\n"),
            "token_uri": "https://oauth2.googleapis.com/token",
        }
    else:
        raise ConfigurationError(
            "No service account configured. Set GOOGLE_SERVICE_ACCOUNT_KEY or "
            "GOOGLE_SERVICE_ACCOUNT_EMAIL and GOOGLE_PRIVATE_KEY."
        )

    return Credentials.from_service_account_info(info, scopes=SHEETS_SCOPES)


def fetch_sheet_values(settings: Settings, service: Any | None = None) -> list[list[str]]:
    """Fetch the configured cell range from the spreadsheet.

    Args:
        settings: Settings with `sheet_id` and `sheet_range`.
        service: Optional pre-built Sheets service (used by tests).

    Returns:
        Raw cell values, one list per sheet row (may be empty).

    Raises:
        ConfigurationError: if `GOOGLE_SHEET_ID` is not configured.
    """
    if not settings.sheet_id:
        raise ConfigurationError("GOOGLE_SHEET_ID not configured")

    if service is None:
        service = build(
            "sheets",
            "v4",
            credentials=build_credentials(settings),
            cache_discovery=False,
        )

    log.info("Fetching range %s from spreadsheet", settings.sheet_range)
    response = (
        service.spreadsheets()
        .values()
        .get(spreadsheetId=settings.sheet_id, range=settings.sheet_range)
        .execute()
    )
    values = response.get("values", [])
    log.info("Fetched %d sheet rows", len(values))
    return values


def rows_to_payload(values: list[list[Any]]) -> dict[str, Any]:
    """Reshape raw sheet values into `{"data": [...], "headers": [...]}`.

    The first row becomes the header list; every later row becomes a mapping
    keyed by header, with missing or empty cells returned as "".
    """
    if not values:
        return {"data": [], "headers": []}

    headers = [str(h) for h in values[0]]
    data = []
    for row in values[1:]:
        data.append(
            {
                header: str(row[i]) if i < len(row) and row[i] not in (None, "") else ""
                for i, header in enumerate(headers)
            }
        )
    return {"data": data, "headers": headers}
