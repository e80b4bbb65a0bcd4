"""FastAPI application serving the adoption spreadsheet at `/api/sheets`.

Responses:
- 200 `{"data": [...], "headers": [...]}` with one mapping per sheet row.
- 404 `{"error": "No data found"}` when the sheet has no data rows.
- 500 `{"error": ..., "details": ...}` on any failure, including a missing
  `GOOGLE_SHEET_ID`; the process keeps serving.

Every response, including the OPTIONS preflight, carries permissive CORS
headers.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from adoption_dashboard import __version__
from adoption_dashboard.config import Settings, get_settings
from adoption_dashboard.ingest.sheets import fetch_sheet_values, rows_to_payload

log = logging.getLogger(__name__)

SHEETS_PATH = "/api/sheets"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

ValuesFetcher = Callable[[Settings], list[list[Any]]]


def create_app(
    settings: Settings | None = None,
    fetch_values: ValuesFetcher | None = None,
) -> FastAPI:
    """Create and configure the proxy application.

    Args:
        settings: Optional settings; read from the environment per request
            when omitted so configuration changes are picked up.
        fetch_values: Optional replacement for `fetch_sheet_values`
            (used by tests).

    Returns:
        Configured FastAPI application instance.
    """
    fetcher = fetch_values or fetch_sheet_values

    app = FastAPI(
        title="Adoption Dashboard API",
        summary="Google Sheets proxy for the shelter adoption dashboard.",
        version=__version__,
    )

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next: Any) -> Response:
        response = await call_next(request)
        for key, value in CORS_HEADERS.items():
            response.headers[key] = value
        return response

    @app.options(SHEETS_PATH)
    def sheets_preflight() -> Response:
        return Response(status_code=200)

    @app.get(SHEETS_PATH)
    def sheets() -> JSONResponse:
        try:
            s = settings or get_settings()
            values = fetcher(s)
            if len(values) < 2:
                return JSONResponse({"error": "No data found"}, status_code=404)
            return JSONResponse(rows_to_payload(values), status_code=200)
        except Exception as e:
            log.exception("Error fetching Google Sheets data")
            return JSONResponse(
                {
                    "error": "Failed to fetch data from Google Sheets",
                    "details": str(e),
                },
                status_code=500,
            )

    return app
